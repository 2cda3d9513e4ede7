"""Domain-specific exceptions. Pure domain layer — no infrastructure."""


class DomainError(Exception):
    """Base for all domain-layer errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class DomainValidationError(DomainError):
    """Raised when domain validation rules are violated."""


class InvalidSubjectReferenceError(DomainValidationError):
    """Raised when only one half of a (subject_type, subject_id) pair is supplied."""


class InvalidSortError(DomainValidationError):
    """Raised when a sort column or direction is not allowed."""


class InvalidMetadataError(DomainValidationError):
    """Raised when metadata is not JSON-serializable or otherwise invalid."""
