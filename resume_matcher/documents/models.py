"""Data models for resume documents.

Contains Pydantic models for:
- Resume: personal info plus the entity collections (experience, skills, ...)
- JobDescription / JobRequirements: the job being targeted
- Suggestion / TailoringResult: the AI tailoring output
- JobHistoryEntry: a remembered job analysis

Field names are camelCase on the wire (JSON, local cache, remote store,
LLM responses) and snake_case in Python. Both spellings are accepted when
validating.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, ClassVar

from pydantic import (
    AfterValidator,
    AnyUrl,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    EmailStr,
    Field,
    PrivateAttr,
    StringConstraints,
    TypeAdapter,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from resume_matcher.documents.address import FieldAddress, parse_field_address

MAX_JOB_HISTORY_ENTRIES = 10
MAX_DESCRIPTION_LENGTH = 10_000

_URL_ADAPTER = TypeAdapter(AnyUrl)


def _none_to_empty(value: Any) -> Any:
    return "" if value is None else value


def _check_url(value: str) -> str:
    if value == "":
        return value
    try:
        _URL_ADAPTER.validate_python(value)
    except ValidationError:
        raise ValueError("Invalid URL") from None
    return value


NonEmptyStr = Annotated[str, StringConstraints(min_length=1)]
# Absent optional text reads as "", so an edit and its undo round-trip exactly
OptionalText = Annotated[str, BeforeValidator(_none_to_empty)]
UrlOrEmpty = Annotated[str, AfterValidator(_check_url)]


def generate_id() -> str:
    """Generate a fresh entity id."""
    return str(uuid.uuid4())


class DocumentModel(BaseModel):
    """Base model: camelCase aliases on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a wire-format dictionary."""
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_dict(cls, data: dict[str, Any]):
        """Deserialize from a dictionary."""
        return cls.model_validate(data)


class ResumeEntity(DocumentModel):
    """An entity in one of the resume collections.

    ``text_fields`` and ``list_fields`` name the attributes a suggestion or
    an inline edit may address: plain text and lists of text respectively.
    """

    text_fields: ClassVar[frozenset[str]] = frozenset()
    list_fields: ClassVar[frozenset[str]] = frozenset()

    id: str = Field(..., description="Opaque id, stable for the entity's lifetime")


class PersonalInfo(DocumentModel):
    """Contact details and summary."""

    text_fields: ClassVar[frozenset[str]] = frozenset(
        {"name", "phone", "location", "summary"}
    )
    list_fields: ClassVar[frozenset[str]] = frozenset()

    name: NonEmptyStr
    email: EmailStr
    phone: OptionalText = ""
    location: OptionalText = ""
    linkedin: UrlOrEmpty | None = None
    website: UrlOrEmpty | None = None
    summary: OptionalText = ""


class Experience(ResumeEntity):
    text_fields: ClassVar[frozenset[str]] = frozenset(
        {"title", "company", "location", "start_date", "end_date", "description"}
    )
    list_fields: ClassVar[frozenset[str]] = frozenset({"highlights"})

    title: NonEmptyStr
    company: NonEmptyStr
    location: OptionalText = ""
    start_date: NonEmptyStr
    end_date: OptionalText = ""
    current: bool = False
    description: OptionalText = ""
    highlights: list[str] = Field(default_factory=list)


class Education(ResumeEntity):
    text_fields: ClassVar[frozenset[str]] = frozenset(
        {"degree", "institution", "location", "graduation_date", "gpa"}
    )

    degree: NonEmptyStr
    institution: NonEmptyStr
    location: OptionalText = ""
    graduation_date: OptionalText = ""
    gpa: OptionalText = ""


class SkillProficiency(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"


class Skill(ResumeEntity):
    text_fields: ClassVar[frozenset[str]] = frozenset({"name"})

    name: NonEmptyStr
    proficiency: SkillProficiency = SkillProficiency.INTERMEDIATE


class LanguageProficiency(str, Enum):
    BASIC = "basic"
    CONVERSATIONAL = "conversational"
    PROFESSIONAL = "professional"
    NATIVE = "native"


class Language(ResumeEntity):
    text_fields: ClassVar[frozenset[str]] = frozenset({"name"})

    name: NonEmptyStr
    proficiency: LanguageProficiency = LanguageProficiency.PROFESSIONAL


class Certification(ResumeEntity):
    text_fields: ClassVar[frozenset[str]] = frozenset({"name", "issuer", "date"})

    name: NonEmptyStr
    issuer: NonEmptyStr
    date: OptionalText = ""
    url: UrlOrEmpty | None = None


class Project(ResumeEntity):
    text_fields: ClassVar[frozenset[str]] = frozenset({"name", "description"})
    list_fields: ClassVar[frozenset[str]] = frozenset({"technologies", "highlights"})

    name: NonEmptyStr
    description: OptionalText = ""
    url: UrlOrEmpty | None = None
    technologies: list[str] = Field(default_factory=list)
    highlights: list[str] = Field(default_factory=list)


class OpenSourceRole(str, Enum):
    CONTRIBUTOR = "contributor"
    MAINTAINER = "maintainer"
    CREATOR = "creator"


class OpenSourceContribution(ResumeEntity):
    text_fields: ClassVar[frozenset[str]] = frozenset({"project", "description"})
    list_fields: ClassVar[frozenset[str]] = frozenset({"contributions"})

    project: NonEmptyStr
    role: OpenSourceRole = OpenSourceRole.CONTRIBUTOR
    url: UrlOrEmpty | None = None
    description: OptionalText = ""
    contributions: list[str] = Field(default_factory=list)


class Resume(DocumentModel):
    """The root user document."""

    personal_info: PersonalInfo
    experience: list[Experience] = Field(default_factory=list)
    education: list[Education] = Field(default_factory=list)
    skills: list[Skill] = Field(default_factory=list)
    languages: list[Language] = Field(default_factory=list)
    certifications: list[Certification] = Field(default_factory=list)
    projects: list[Project] = Field(default_factory=list)
    open_source: list[OpenSourceContribution] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_unique_ids(self) -> Resume:
        """Entity ids must be unique within each collection."""
        for attribute, info in type(self).model_fields.items():
            entities = getattr(self, attribute)
            if not isinstance(entities, list):
                continue
            seen: set[str] = set()
            for entity in entities:
                if entity.id in seen:
                    raise ValueError(f"Duplicate id in {info.alias}: {entity.id}")
                seen.add(entity.id)
        return self

    def is_blank(self) -> bool:
        """True when the resume carries no content at all."""
        return self == empty_resume()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Resume:
        """Deserialize from a dictionary."""
        return cls.model_validate(data)


def empty_resume() -> Resume:
    """Return the blank resume.

    The blank resume deliberately skips validation: its name and email are
    empty, which a user-entered resume may not be.
    """
    return Resume.model_construct(
        personal_info=PersonalInfo.model_construct(
            name="",
            email="",
            phone="",
            location="",
            linkedin="",
            website="",
            summary="",
        ),
        experience=[],
        education=[],
        skills=[],
        languages=[],
        certifications=[],
        projects=[],
        open_source=[],
    )


class JobDescription(DocumentModel):
    """A pasted job posting."""

    description: Annotated[
        str, StringConstraints(min_length=1, max_length=MAX_DESCRIPTION_LENGTH)
    ]
    linkedin_url: UrlOrEmpty | None = None

    def url_warning(self) -> str | None:
        """Return a warning when the URL does not point at LinkedIn."""
        if self.linkedin_url and "linkedin.com" not in self.linkedin_url:
            return "URL should be a LinkedIn job posting"
        return None


class ExperienceYears(DocumentModel):
    """Requested years of experience. ``min`` may exceed ``max``."""

    min: float | None = None
    max: float | None = None


class JobRequirements(DocumentModel):
    """Structured requirements extracted from a job description."""

    title: str | None = None
    company: str | None = None
    required_skills: list[str] = Field(default_factory=list)
    preferred_skills: list[str] = Field(default_factory=list)
    qualifications: list[str] = Field(default_factory=list)
    experience_years: ExperienceYears | None = None
    responsibilities: list[str] = Field(default_factory=list)
    benefits: list[str] = Field(default_factory=list)
    keywords: list[str] = Field(default_factory=list)

    def is_empty(self) -> bool:
        """True when there is nothing to tailor against."""
        return not self.required_skills and not self.responsibilities

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> JobRequirements:
        """Deserialize from a dictionary."""
        return cls.model_validate(data)


class SectionType(str, Enum):
    """Resume section a suggestion targets."""

    SUMMARY = "summary"
    EXPERIENCE = "experience"
    EDUCATION = "education"
    SKILLS = "skills"
    PROJECTS = "projects"
    OPEN_SOURCE = "openSource"


class SuggestionStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class Suggestion(DocumentModel):
    """An AI-proposed edit to one field of the resume."""

    id: str
    section_type: SectionType
    item_id: str | None = None
    field: str = Field(
        ..., min_length=1, description="Dotted path such as 'description' or 'highlights.2'"
    )
    original_content: str
    suggested_content: str
    reason: str
    status: SuggestionStatus = SuggestionStatus.PENDING

    _address: FieldAddress = PrivateAttr()

    def model_post_init(self, context: Any, /) -> None:
        self._address = parse_field_address(self.field)

    @property
    def address(self) -> FieldAddress:
        """The parsed field path."""
        return self._address


class MatchType(str, Enum):
    EXACT = "exact"
    PARTIAL = "partial"
    RELATED = "related"


class SkillMatch(DocumentModel):
    skill: str
    match_type: MatchType
    from_resume: str | None = None
    is_required: bool


class TailoringResult(DocumentModel):
    """Full output of one tailoring run."""

    match_score: int = Field(..., ge=0, le=100)
    matched_skills: list[SkillMatch] = Field(default_factory=list)
    missing_skills: list[str] = Field(default_factory=list)
    suggestions: list[Suggestion] = Field(default_factory=list)
    strengths: list[str] = Field(default_factory=list)
    improvement_areas: list[str] = Field(default_factory=list)

    @field_validator("match_score", mode="before")
    @classmethod
    def round_match_score(cls, v: Any) -> Any:
        """Models sometimes answer 72.5; round instead of failing."""
        if isinstance(v, float):
            return round(v)
        return v

    @model_validator(mode="after")
    def check_unique_suggestion_ids(self) -> TailoringResult:
        seen: set[str] = set()
        for suggestion in self.suggestions:
            if suggestion.id in seen:
                raise ValueError(f"Duplicate suggestion id: {suggestion.id}")
            seen.add(suggestion.id)
        return self

    def get_suggestion(self, suggestion_id: str) -> Suggestion | None:
        """Look up a suggestion by id."""
        for suggestion in self.suggestions:
            if suggestion.id == suggestion_id:
                return suggestion
        return None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TailoringResult:
        """Deserialize from a dictionary."""
        return cls.model_validate(data)


class JobHistoryEntry(DocumentModel):
    """A job description the user analyzed, with its requirements."""

    id: str = Field(default_factory=generate_id)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    job_description: JobDescription
    requirements: JobRequirements | None = None
