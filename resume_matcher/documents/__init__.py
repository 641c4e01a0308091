"""Resume document model.

Public API:
- Resume and its entities (Experience, Education, Skill, ...)
- JobDescription, JobRequirements, Suggestion, TailoringResult, JobHistoryEntry
- validate_resume and the other boundary validators
- load_resume_file: read a resume from JSON or YAML
"""

from resume_matcher.documents.address import (
    ArrayIndexField,
    FieldAddress,
    ScalarField,
    parse_field_address,
)
from resume_matcher.documents.io import load_resume_file
from resume_matcher.documents.models import (
    MAX_DESCRIPTION_LENGTH,
    MAX_JOB_HISTORY_ENTRIES,
    Certification,
    Education,
    Experience,
    ExperienceYears,
    JobDescription,
    JobHistoryEntry,
    JobRequirements,
    Language,
    LanguageProficiency,
    MatchType,
    OpenSourceContribution,
    OpenSourceRole,
    PersonalInfo,
    Project,
    Resume,
    SectionType,
    Skill,
    SkillMatch,
    SkillProficiency,
    Suggestion,
    SuggestionStatus,
    TailoringResult,
    empty_resume,
    generate_id,
)
from resume_matcher.documents.validation import (
    DocumentValidationError,
    load_or_default,
    validate_job_description,
    validate_job_history,
    validate_job_requirements,
    validate_resume,
    validate_tailoring_result,
)

__all__ = [
    # Models
    "Resume",
    "PersonalInfo",
    "Experience",
    "Education",
    "Skill",
    "SkillProficiency",
    "Language",
    "LanguageProficiency",
    "Certification",
    "Project",
    "OpenSourceContribution",
    "OpenSourceRole",
    "JobDescription",
    "JobRequirements",
    "ExperienceYears",
    "SectionType",
    "Suggestion",
    "SuggestionStatus",
    "SkillMatch",
    "MatchType",
    "TailoringResult",
    "JobHistoryEntry",
    "MAX_DESCRIPTION_LENGTH",
    "MAX_JOB_HISTORY_ENTRIES",
    "empty_resume",
    "generate_id",
    # Addresses
    "FieldAddress",
    "ScalarField",
    "ArrayIndexField",
    "parse_field_address",
    # Validation
    "DocumentValidationError",
    "validate_resume",
    "validate_job_description",
    "validate_job_requirements",
    "validate_tailoring_result",
    "validate_job_history",
    "load_or_default",
    "load_resume_file",
]
