"""Validators for audit event rules. Pure functions, no infrastructure or DB access."""

import json
from typing import Any, Dict, Optional

from auditlog.domain.exceptions import (
    DomainValidationError,
    InvalidMetadataError,
    InvalidSubjectReferenceError,
)

VERB_MAX_LENGTH = 50


def validate_verb(verb: Optional[str]) -> None:
    """Verb is required, non-blank and short. Raises DomainValidationError if invalid."""
    if verb is None or not verb.strip():
        raise DomainValidationError("verb must not be empty")
    if len(verb.strip()) > VERB_MAX_LENGTH:
        raise DomainValidationError(f"verb must be at most {VERB_MAX_LENGTH} characters")


def validate_description(description: Optional[str]) -> None:
    if description is None or not description.strip():
        raise DomainValidationError("description must not be empty")


def validate_subject_reference(subject_type: Optional[str], subject_id: Optional[str]) -> None:
    """subject_type and subject_id are either both present or both absent."""
    if (subject_type is None) != (subject_id is None):
        raise InvalidSubjectReferenceError(
            "subject_type and subject_id must be provided together"
        )


def validate_metadata_json_serializable(metadata: Optional[Dict[str, Any]]) -> None:
    """Metadata, if present, must be a JSON-serializable dict."""
    if metadata is None:
        return
    if not isinstance(metadata, dict):
        raise InvalidMetadataError("metadata must be a mapping")
    try:
        json.dumps(metadata)
    except (TypeError, ValueError) as e:
        raise InvalidMetadataError("metadata must be JSON-serializable") from e


def validate_record_arguments(
    verb: Optional[str],
    description: Optional[str],
    subject_type: Optional[str],
    subject_id: Optional[str],
    metadata: Optional[Dict[str, Any]],
) -> None:
    """Run every recorder precondition. First violation wins."""
    validate_verb(verb)
    validate_description(description)
    validate_subject_reference(subject_type, subject_id)
    validate_metadata_json_serializable(metadata)


def validate_pagination(page: int, per_page: int, max_per_page: int) -> None:
    if page < 1:
        raise DomainValidationError(f"page must be >= 1, got {page}")
    if not (1 <= per_page <= max_per_page):
        raise DomainValidationError(
            f"per_page must be between 1 and {max_per_page}, got {per_page}"
        )


def validate_retention_days(days: int) -> None:
    if days < 1:
        raise DomainValidationError(f"days must be >= 1, got {days}")
