"""Persistence backends for guard documents."""

from todo_guard.storage.base import (
    TRANSIENT_KEYS,
    DocumentKey,
    DocumentStore,
    StoreError,
    clear_transient_documents,
)
from todo_guard.storage.memory import MemoryDocumentStore
from todo_guard.storage.sqlite import SQLiteDocumentStore

__all__ = [
    "TRANSIENT_KEYS",
    "DocumentKey",
    "DocumentStore",
    "MemoryDocumentStore",
    "SQLiteDocumentStore",
    "StoreError",
    "clear_transient_documents",
]
