"""Exceptions raised across the core boundary"""


class ClipMasterError(Exception):
    """Base exception class for ClipMaster."""

    def __init__(self, message: str, original_error: Exception = None):
        super().__init__(message)
        self.original_error = original_error

    def __str__(self):
        base_msg = super().__str__()
        if self.original_error:
            return f"{base_msg} (Caused by: {type(self.original_error).__name__}: {self.original_error})"
        return base_msg


class StorageError(ClipMasterError):
    """Persistent state could not be read or written.

    In-memory state has already been updated when this is raised from a
    mutating operation; only durability is lost.
    """
    pass
