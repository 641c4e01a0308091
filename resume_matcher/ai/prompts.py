"""Prompt builders for job analysis and resume tailoring."""

from __future__ import annotations

import json

from resume_matcher.documents.models import JobRequirements, Resume

JOB_ANALYSIS_SYSTEM_PROMPT = """You are a job description analyzer. Extract the key requirements from a job posting.

Return ONLY valid JSON (no markdown, no commentary) with this structure:
{
  "title": "Job title if mentioned",
  "company": "Company name if mentioned",
  "requiredSkills": ["skill1", "skill2"],
  "preferredSkills": ["nice-to-have skill"],
  "qualifications": ["Bachelor's degree", "5+ years experience"],
  "experienceYears": {"min": 3, "max": 5},
  "responsibilities": ["responsibility1"],
  "benefits": ["benefit1"],
  "keywords": ["terms", "useful", "for", "matching"]
}

Rules:
- Extract only what the posting states explicitly.
- experienceYears holds numbers, e.g. "3-5 years" gives min 3 and max 5.
- keywords are technologies, methodologies and domain terms worth matching on.
- Use an empty array (or omit the field) when there is no data.
"""

TAILORING_SYSTEM_PROMPT = """You are a resume tailoring expert. Help the candidate present their existing experience for a specific job, honestly.

You must follow these rules:
- NEVER invent experience, skills or accomplishments that are not in the resume.
- Only reword and emphasize what the resume already contains.
- originalContent must be copied exactly from the resume field being changed.
- Address fields by the entity "id" from the resume and a field path: "description", "title", or "highlights.<index>" for one highlight.
- Summary suggestions use sectionType "summary" and field "summary" with no itemId.

Return ONLY valid JSON with this structure:
{
  "matchScore": 75,
  "matchedSkills": [
    {"skill": "React", "matchType": "exact", "fromResume": "React", "isRequired": true},
    {"skill": "Node.js", "matchType": "related", "fromResume": "Express.js", "isRequired": false}
  ],
  "missingSkills": ["GraphQL"],
  "suggestions": [
    {
      "sectionType": "experience",
      "itemId": "<experience id>",
      "field": "highlights.0",
      "originalContent": "Built web applications",
      "suggestedContent": "Built responsive React web applications serving 10,000+ users",
      "reason": "Highlights the React experience the posting asks for"
    }
  ],
  "strengths": ["Strong match on required frontend skills"],
  "improvementAreas": ["Mention any cloud experience (AWS preferred)"]
}

Guidance:
- matchScore is an integer 0-100 from skill overlap, experience relevance and qualifications.
- matchType: "exact" for the same skill, "partial" for a close variant, "related" for a transferable skill.
- sectionType is one of: summary, experience, education, skills, projects, openSource.
- Prefer a few high-impact suggestions: summary, recent experience highlights, skills.
"""


def build_job_analysis_prompt(description: str) -> str:
    """Build the user prompt for job description analysis."""
    return f"Analyze this job description and extract the requirements:\n\n{description}"


def build_tailoring_prompt(resume: Resume, requirements: JobRequirements) -> str:
    """Build the user prompt for tailoring a resume to job requirements."""
    return "\n".join(
        [
            "Analyze this resume and tailor it for the job requirements.",
            "",
            "RESUME (JSON):",
            json.dumps(resume.to_dict(), indent=2, ensure_ascii=False),
            "",
            "JOB REQUIREMENTS (JSON):",
            json.dumps(requirements.to_dict(), indent=2, ensure_ascii=False),
            "",
            "Suggest changes that highlight relevant experience without fabricating anything.",
        ]
    )
