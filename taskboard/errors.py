"""Exceptions raised by the board store and storage accessor."""


class TaskboardError(Exception):
    """Base exception class for the task board."""

    def __init__(self, message: str, field: str = None):
        """Initialize exception.

        Args:
            message: Human-readable message, safe to show to the user
            field: Optional name of the input field that caused the error
        """
        super().__init__(message)
        self.message = message
        self.field = field


class ValidationError(TaskboardError):
    """Raised for empty or invalid user input. No state is changed."""
    pass


class StorageError(TaskboardError):
    """Raised when the board collection cannot be persisted."""
    pass


class NotFoundError(TaskboardError):
    """Raised when a board or task id does not exist."""
    pass
