"""Patch engine: install suggestion content into a resume.

``apply_suggestion`` and ``revert_suggestion`` are mirror images built on
one resolution routine (``_patch``). Neither mutates its input; both return
the input object itself when nothing changes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from pydantic import BaseModel

from resume_matcher.config.settings import DriftPolicy
from resume_matcher.documents.address import (
    FieldAddress,
    ScalarField,
    parse_field_address,
)
from resume_matcher.documents.models import Resume, SectionType, Suggestion

logger = logging.getLogger(__name__)

# Resume attribute holding the entities of each itemized section
SECTION_COLLECTIONS: dict[SectionType, str] = {
    SectionType.EXPERIENCE: "experience",
    SectionType.EDUCATION: "education",
    SectionType.SKILLS: "skills",
    SectionType.PROJECTS: "projects",
    SectionType.OPEN_SOURCE: "open_source",
}

PERSONAL_INFO = "personal_info"

# Sections accepted by edit_field, in either spelling
_EDITABLE_SECTIONS: dict[str, str] = {
    "personalInfo": PERSONAL_INFO,
    "personal_info": PERSONAL_INFO,
    "experience": "experience",
    "education": "education",
    "skills": "skills",
    "languages": "languages",
    "certifications": "certifications",
    "projects": "projects",
    "openSource": "open_source",
    "open_source": "open_source",
}


class SuggestionDriftError(Exception):
    """The addressed field no longer holds the content a suggestion expects.

    Attributes:
        suggestion_id: Id of the suggestion being applied or reverted.
        expected: Content the suggestion expected to replace.
        actual: Content currently in the resume.
    """

    def __init__(self, suggestion_id: str, expected: str, actual: str):
        super().__init__(
            f"Suggestion {suggestion_id} is stale: expected {expected!r}, found {actual!r}"
        )
        self.suggestion_id = suggestion_id
        self.expected = expected
        self.actual = actual


@dataclass(frozen=True)
class _Target:
    """A resolved location: the owning model and how to reach it."""

    collection: str  # resume attribute
    position: int | None  # entity index, None for personal_info
    entity: BaseModel
    attribute: str
    index: int | None  # list slot, None for scalars

    def read(self) -> str:
        value = getattr(self.entity, self.attribute)
        if self.index is not None:
            return value[self.index]
        return value

    def install(self, resume: Resume, content: str) -> Resume:
        if self.index is not None:
            items = list(getattr(self.entity, self.attribute))
            items[self.index] = content
            new_entity = self.entity.model_copy(update={self.attribute: items})
        else:
            new_entity = self.entity.model_copy(update={self.attribute: content})

        if self.position is None:
            return resume.model_copy(update={self.collection: new_entity})
        entities = list(getattr(resume, self.collection))
        entities[self.position] = new_entity
        return resume.model_copy(update={self.collection: entities})


def _attribute_name(model: type[BaseModel], name: str) -> str | None:
    """Map a wire (camelCase) or Python (snake_case) field name to the attribute."""
    if name in model.model_fields:
        return name
    for attr, info in model.model_fields.items():
        if info.alias == name:
            return attr
    return None


def _resolve(
    resume: Resume, collection: str, item_id: str | None, address: FieldAddress
) -> _Target | None:
    if collection == PERSONAL_INFO:
        entity: BaseModel = resume.personal_info
        position = None
    else:
        if item_id is None:
            return None
        entities = getattr(resume, collection)
        for position, entity in enumerate(entities):
            if entity.id == item_id:
                break
        else:
            return None

    model = type(entity)
    attribute = _attribute_name(model, address.name)
    if attribute is None:
        return None

    if isinstance(address, ScalarField):
        if attribute not in model.text_fields:
            return None
        return _Target(collection, position, entity, attribute, None)

    if attribute not in model.list_fields:
        return None
    if not 0 <= address.index < len(getattr(entity, attribute)):
        return None
    return _Target(collection, position, entity, attribute, address.index)


def _suggestion_location(suggestion: Suggestion) -> tuple[str, FieldAddress]:
    if suggestion.section_type == SectionType.SUMMARY:
        return PERSONAL_INFO, ScalarField("summary")
    return SECTION_COLLECTIONS[suggestion.section_type], suggestion.address


def _patch(
    resume: Resume,
    suggestion: Suggestion,
    expected: str,
    content: str,
    policy: DriftPolicy,
) -> Resume:
    collection, address = _suggestion_location(suggestion)
    target = _resolve(resume, collection, suggestion.item_id, address)
    if target is None:
        logger.debug(
            "Suggestion %s does not resolve (%s/%s/%s); leaving resume unchanged",
            suggestion.id,
            suggestion.section_type.value,
            suggestion.item_id,
            address,
        )
        return resume

    current = target.read()
    if current == content:
        return resume
    if current != expected:
        if policy == DriftPolicy.REJECT:
            raise SuggestionDriftError(suggestion.id, expected, current)
        logger.info("Overwriting edited content for suggestion %s", suggestion.id)

    return target.install(resume, content)


def apply_suggestion(
    resume: Resume,
    suggestion: Suggestion,
    policy: DriftPolicy = DriftPolicy.REJECT,
) -> Resume:
    """Install ``suggestion.suggested_content`` at the suggestion's address.

    Returns the input unchanged when the address does not resolve or the
    field already holds the suggested content.

    Raises:
        SuggestionDriftError: Under ``DriftPolicy.REJECT``, when the field
            holds neither the original nor the suggested content.
    """
    return _patch(
        resume,
        suggestion,
        expected=suggestion.original_content,
        content=suggestion.suggested_content,
        policy=policy,
    )


def revert_suggestion(
    resume: Resume,
    suggestion: Suggestion,
    policy: DriftPolicy = DriftPolicy.REJECT,
) -> Resume:
    """Install ``suggestion.original_content`` at the suggestion's address."""
    return _patch(
        resume,
        suggestion,
        expected=suggestion.suggested_content,
        content=suggestion.original_content,
        policy=policy,
    )


def edit_field(
    resume: Resume,
    section: str,
    field: str,
    value: str,
    item_id: str | None = None,
) -> Resume:
    """Directly set one text field, as an inline edit in the editor would.

    Args:
        resume: The resume to edit.
        section: ``personalInfo`` or a collection name (either spelling).
        field: Field path, e.g. ``"title"`` or ``"highlights.0"``.
        value: New content.
        item_id: Entity id; required for every section but personal info.

    Raises:
        ValueError: If ``section`` is not a resume section.
    """
    collection = _EDITABLE_SECTIONS.get(section)
    if collection is None:
        raise ValueError(f"Unknown resume section: {section}")

    target = _resolve(resume, collection, item_id, parse_field_address(field))
    if target is None:
        logger.debug("Edit of %s/%s/%s does not resolve", section, item_id, field)
        return resume
    if target.read() == value:
        return resume
    return target.install(resume, value)


