"""Index data models persisted to ``index.json``."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"


def format_timestamp(value: datetime) -> str:
    """Return a fixed-width UTC timestamp string.

    Args:
        value: Datetime to format; naive values are treated as UTC.

    Returns:
        str: Timestamp whose lexicographic order matches chronological order.
    """

    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime(_TIMESTAMP_FORMAT)


def utc_timestamp() -> str:
    """Return the current time as a fixed-width UTC timestamp string."""
    return format_timestamp(datetime.now(timezone.utc))


class IndexBaseModel(BaseModel):
    """Shared configuration for models serialized with camelCase field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DocumentMetadata(IndexBaseModel):
    """Index entry describing one prompt file.

    Attributes:
        id: Stable identifier that survives renames and folder moves.
        name: Display name.
        folder: Slash-separated folder path; empty string means the root.
        description: Free-text description.
        filename: On-disk filename, unique within its folder.
        use_count: Number of times the prompt has been used.
        last_used: Timestamp of the most recent use, if any.
        created: Creation timestamp.
        updated: Last content update timestamp.
        icon: Optional icon tag.
        color: Optional color tag.
    """

    id: str = ""
    name: str = ""
    folder: str = ""
    description: str = ""
    filename: str = ""
    use_count: int = 0
    last_used: Optional[str] = None
    created: str = ""
    updated: str = ""
    icon: Optional[str] = None
    color: Optional[str] = None


class Document(DocumentMetadata):
    """Prompt metadata together with the full file content."""

    content: str = ""

    def metadata(self) -> DocumentMetadata:
        """Return the metadata portion of the document."""
        return DocumentMetadata.model_validate(self.model_dump(exclude={"content"}))


class FolderRecord(IndexBaseModel):
    """Decorative record (icon/color) attached to a folder name."""

    name: str
    icon: Optional[str] = None
    color: Optional[str] = None


class PromptIndex(IndexBaseModel):
    """Aggregate cached index of prompts, folders, and decorations."""

    prompts: List[DocumentMetadata] = Field(default_factory=list)
    folders: List[str] = Field(default_factory=list)
    folder_meta: Optional[Dict[str, FolderRecord]] = None
    seeded: bool = False

    def find(self, doc_id: str) -> DocumentMetadata | None:
        """Return the entry with ``doc_id`` or ``None``."""
        for entry in self.prompts:
            if entry.id == doc_id:
                return entry
        return None


__all__ = [
    "DocumentMetadata",
    "Document",
    "FolderRecord",
    "PromptIndex",
    "format_timestamp",
    "utc_timestamp",
]
