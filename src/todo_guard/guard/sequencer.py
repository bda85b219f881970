"""Ordering of current/previous snapshot writes."""

from __future__ import annotations

import logging

from todo_guard.guard.models import Snapshot
from todo_guard.guard.snapshot import parse_snapshot_document, snapshot_to_document
from todo_guard.storage.base import DocumentKey, DocumentStore, StoreError

logger = logging.getLogger(__name__)


class SnapshotSequencer:
    """Keeps the `previous` slot one submission behind the `current` slot."""

    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    def latest(self) -> Snapshot:
        """Most recently committed snapshot; empty when none is readable."""

        raw = self.store.get(DocumentKey.CURRENT_TODOS)
        return parse_snapshot_document(raw, document="current todos").value

    def previous(self) -> Snapshot:
        raw = self.store.get(DocumentKey.PREVIOUS_TODOS)
        return parse_snapshot_document(raw, document="previous todos").value

    def commit(self, snapshot: Snapshot) -> None:
        """Roll the stored current snapshot into history, then store `snapshot`.

        The raw current document is copied as is. When nothing was stored yet
        the previous slot is left untouched rather than written empty. If the
        current slot cannot be written, the previous slot is put back before
        the `StoreError` propagates.
        """

        displaced = self.store.get(DocumentKey.CURRENT_TODOS)
        if displaced is None:
            self.store.set(DocumentKey.CURRENT_TODOS, snapshot_to_document(snapshot))
            logger.debug("Committed first snapshot with %d todos", len(snapshot))
            return

        replaced = self.store.get(DocumentKey.PREVIOUS_TODOS)
        self.store.set(DocumentKey.PREVIOUS_TODOS, displaced)
        try:
            self.store.set(DocumentKey.CURRENT_TODOS, snapshot_to_document(snapshot))
        except StoreError:
            logger.warning("Current snapshot write failed, restoring previous snapshot")
            self._restore_previous(replaced)
            raise
        logger.debug("Committed snapshot with %d todos", len(snapshot))

    def _restore_previous(self, raw: str | None) -> None:
        if raw is None:
            self.store.delete(DocumentKey.PREVIOUS_TODOS)
        else:
            self.store.set(DocumentKey.PREVIOUS_TODOS, raw)
