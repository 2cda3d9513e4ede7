"""Domain validators. Pure validation functions."""

from auditlog.domain.validators.audit_validator import (
    validate_description,
    validate_metadata_json_serializable,
    validate_pagination,
    validate_record_arguments,
    validate_retention_days,
    validate_subject_reference,
    validate_verb,
)

__all__ = [
    "validate_description",
    "validate_metadata_json_serializable",
    "validate_pagination",
    "validate_record_arguments",
    "validate_retention_days",
    "validate_subject_reference",
    "validate_verb",
]
