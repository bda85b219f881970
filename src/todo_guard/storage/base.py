"""Document store interface shared by persistence backends."""

from __future__ import annotations

from enum import Enum
from typing import Protocol


class DocumentKey(str, Enum):
    """Logical documents persisted between submissions."""

    CURRENT_TODOS = "todos"
    PREVIOUS_TODOS = "previous_todos"
    ATTEMPTS = "attempts"
    CONFIG = "config"


TRANSIENT_KEYS: tuple[DocumentKey, ...] = (
    DocumentKey.CURRENT_TODOS,
    DocumentKey.PREVIOUS_TODOS,
    DocumentKey.ATTEMPTS,
)


class StoreError(RuntimeError):
    """Persistence backend failed to read or write a document."""


class DocumentStore(Protocol):
    """Key-value store of raw text documents.

    `get` returns `None` for a missing key, which is distinct from an empty
    string stored under that key.
    """

    def get(self, key: DocumentKey) -> str | None:
        """Return stored content or `None` when the key is absent."""

    def set(self, key: DocumentKey, content: str) -> None:
        """Create or replace the document under `key`."""

    def delete(self, key: DocumentKey) -> None:
        """Remove the document; deleting an absent key is a no-op."""


def clear_transient_documents(store: DocumentStore) -> None:
    """Delete every per-session document, keeping stored configuration."""

    for key in TRANSIENT_KEYS:
        store.delete(key)
