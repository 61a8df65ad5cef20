"""Error taxonomy shared by repositories, services and views."""


class AppError(Exception):
    """Base error with a short, user-safe message."""

    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    """Malformed or out-of-range request parameters."""

    default_message = "Validation error"


class NotFoundError(AppError):
    """Requested player, beatmap or score does not exist."""

    default_message = "Resource not found"


class StorageError(AppError):
    """Storage collaborator unreachable or failed."""

    default_message = "Storage query failed"


class CacheError(AppError):
    """Cache backend or serialization fault. Never surfaced to callers."""

    default_message = "Cache operation failed"
