"""Document CRUD over the prompt index and its backing files."""

from .store import MAX_SUFFIX_ATTEMPTS, DocumentStore

__all__ = ["DocumentStore", "MAX_SUFFIX_ATTEMPTS"]
