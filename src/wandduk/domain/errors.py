"""Error taxonomy for the meal journal."""

from uuid import UUID


class WanddukError(Exception):
    """Base error for failures scoped to a single user action."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class StorageUnavailableError(WanddukError):
    """Raised when the private storage root cannot be resolved or written."""

    def __init__(self, message: str = "Private storage is unavailable.") -> None:
        super().__init__(message)


class CompressionFailedError(WanddukError):
    """Raised when an image payload cannot be encoded as JPEG."""

    def __init__(self, message: str = "Image compression failed.") -> None:
        super().__init__(message)


class RecordNotFoundError(WanddukError):
    """Raised when a record operation references an unknown id."""

    def __init__(self, record_id: UUID) -> None:
        super().__init__(f"Meal record {record_id} not found.")
        self.record_id = record_id


class InvalidTransitionError(WanddukError):
    """Raised when a workflow action is not allowed in the current state."""
