"""Errors raised by the index and document stores."""


class StoreError(Exception):
    """Base exception for prompt store operations."""


class NotFoundError(StoreError):
    """Raised when a document id or folder name is absent."""


class ConflictError(StoreError):
    """Raised when a folder name is already in use."""


class StoreIOError(StoreError):
    """Raised when a read, write, rename, or directory operation fails."""


class ValidationError(StoreError):
    """Raised for requests that are structurally invalid (e.g. empty folder names)."""
