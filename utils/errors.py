class FinanceTrackerError(Exception):
    """Base class for every error raised by the stores, services and API layer."""


class ValidationError(FinanceTrackerError, ValueError):
    """Input has the wrong shape or value. Shown inline next to the form."""


class NotFoundError(FinanceTrackerError, LookupError):
    """A mutation referenced an id that is not in the collection."""

    def __init__(self, entity: str, entity_id):
        super().__init__(f"{entity} '{entity_id}' not found.")
        self.entity = entity
        self.entity_id = entity_id


class ConflictError(FinanceTrackerError, ValueError):
    """The server rejected a write as a duplicate (e.g. category name)."""


class ApiError(FinanceTrackerError):
    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class AuthError(ApiError):
    """Missing, expired or rejected credentials."""
