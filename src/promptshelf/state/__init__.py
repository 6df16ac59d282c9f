"""Index data models and store errors."""

from .errors import ConflictError, NotFoundError, StoreError, StoreIOError, ValidationError
from .models import (
    Document,
    DocumentMetadata,
    FolderRecord,
    PromptIndex,
    format_timestamp,
    utc_timestamp,
)

__all__ = [
    "ConflictError",
    "Document",
    "DocumentMetadata",
    "FolderRecord",
    "NotFoundError",
    "PromptIndex",
    "StoreError",
    "StoreIOError",
    "ValidationError",
    "format_timestamp",
    "utc_timestamp",
]
