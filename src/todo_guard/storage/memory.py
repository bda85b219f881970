"""In-process document store."""

from __future__ import annotations

from todo_guard.storage.base import DocumentKey


class MemoryDocumentStore:
    """Dict-backed store for tests and ephemeral runs."""

    def __init__(self, documents: dict[DocumentKey, str] | None = None) -> None:
        self._documents: dict[DocumentKey, str] = dict(documents or {})

    def get(self, key: DocumentKey) -> str | None:
        return self._documents.get(key)

    def set(self, key: DocumentKey, content: str) -> None:
        self._documents[key] = content

    def delete(self, key: DocumentKey) -> None:
        self._documents.pop(key, None)

    def keys(self) -> set[DocumentKey]:
        return set(self._documents)
