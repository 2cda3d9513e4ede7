"""Application-layer exceptions. Do not reuse domain exceptions."""


class ApplicationError(Exception):
    """Base for all application-layer errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class QueryFailureError(ApplicationError):
    """Raised when the store cannot execute a list, show, verb lookup or export query."""


class PurgeFailureError(ApplicationError):
    """Raised when the retention purge could not complete. Nothing was deleted; safe to retry."""
