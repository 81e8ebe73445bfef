"""Service layer exceptions.

Centralized exception hierarchy for the service layer. Store transport
failures are raised as ``StoreUnavailableError`` from the store package.
"""


class ServiceError(Exception):
    """Base exception for service errors."""

    pass


class HadithNotFoundError(ServiceError):
    """Raised when no scheduled and no active hadith exists at all."""

    pass


class ImportDataError(ServiceError):
    """Raised when an import file cannot be read or validated."""

    pass
