"""Shared test fixtures."""

from __future__ import annotations

import pytest

from todo_guard.storage import MemoryDocumentStore


@pytest.fixture()
def store() -> MemoryDocumentStore:
    return MemoryDocumentStore()
