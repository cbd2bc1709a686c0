"""
Failure taxonomy for the archive pipeline.

Every failure raised by the fetch, decode and sync stages derives from
``SyncFailure`` so callers can branch on a single exception type.
"""


class SyncFailure(Exception):
    """Base exception for archive synchronization failures."""

    def __init__(self, message: str, cause: BaseException | None = None):
        self.message = message
        self.cause = cause
        super().__init__(self.message)


class FetchFailure(SyncFailure):
    """Raised when no location produced archive bytes."""

    def __init__(
        self,
        primary_location: str,
        primary_error: BaseException,
        fallback_location: str | None = None,
        fallback_error: BaseException | None = None,
    ):
        self.primary_location = primary_location
        self.primary_error = primary_error
        self.fallback_location = fallback_location
        self.fallback_error = fallback_error

        if fallback_location is None:
            message = f"Failed to fetch archive from {primary_location}: {primary_error}"
        else:
            message = (
                f"Failed to fetch archive from both primary ({primary_location}) "
                f"and fallback ({fallback_location}): "
                f"{primary_error}; {fallback_error}"
            )
        super().__init__(message, cause=fallback_error or primary_error)

    @property
    def fallback_attempted(self) -> bool:
        return self.fallback_location is not None


class DecodeFailure(SyncFailure):
    """Raised when archive bytes or an entry's content cannot be decoded."""

    def __init__(self, message: str, entry: str | None = None, cause: BaseException | None = None):
        self.entry = entry
        super().__init__(message, cause=cause)


class FilesystemFailure(SyncFailure):
    """Raised when a filesystem operation fails during synchronization."""

    def __init__(self, operation: str, path: str, cause: BaseException | None = None):
        self.operation = operation
        self.path = path
        super().__init__(f"{operation} failed for {path}: {cause}", cause=cause)
