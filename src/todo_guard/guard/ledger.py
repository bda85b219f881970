"""Durable per-todo completion attempt counters."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable

from todo_guard.parsing import DocumentFormatError, parse_or_default
from todo_guard.storage.base import DocumentKey, DocumentStore

logger = logging.getLogger(__name__)


class AttemptLedger:
    """Attempt counts keyed by todo content.

    The ledger is advisory: an unreadable document is treated as empty, and an
    absent identity always counts as zero attempts.
    """

    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    def count(self, identity: str) -> int:
        return self._load().get(identity, 0)

    def counts(self) -> dict[str, int]:
        return self._load()

    def increment(self, identity: str) -> None:
        self.increment_many([identity])

    def increment_many(self, identities: Iterable[str]) -> None:
        pending = list(identities)
        if not pending:
            return
        data = self._load()
        for identity in pending:
            data[identity] = data.get(identity, 0) + 1
            logger.debug("Attempt count for %r is now %d", identity, data[identity])
        self._save(data)

    def reset(self, identity: str) -> None:
        self.reset_many([identity])

    def reset_many(self, identities: Iterable[str]) -> None:
        """Drop counters, e.g. for todos that went back to a non-completed status."""

        removed = self._remove(identities)
        if removed:
            logger.debug("Reset attempt counters for %s", removed)

    def resolve_many(self, identities: Iterable[str]) -> None:
        """Drop counters of completions an external judgment accepted."""

        removed = self._remove(identities)
        if removed:
            logger.info("Resolved accepted completions %s", removed)

    def clear_all(self) -> None:
        self.store.delete(DocumentKey.ATTEMPTS)
        logger.debug("Cleared all attempt counters")

    def _remove(self, identities: Iterable[str]) -> list[str]:
        data = self._load()
        removed = [identity for identity in dict.fromkeys(identities) if identity in data]
        if not removed:
            return []
        for identity in removed:
            del data[identity]
        self._save(data)
        return removed

    def _load(self) -> dict[str, int]:
        outcome = parse_or_default(
            self.store.get(DocumentKey.ATTEMPTS),
            _counts_from_payload,
            dict,
            document="attempts",
        )
        return outcome.value

    def _save(self, data: dict[str, int]) -> None:
        self.store.set(DocumentKey.ATTEMPTS, json.dumps(data, indent=2, ensure_ascii=False))


def _counts_from_payload(payload: object) -> dict[str, int]:
    if not isinstance(payload, dict):
        raise DocumentFormatError(f"expected a JSON object, got {type(payload).__name__}")

    counts: dict[str, int] = {}
    for identity, value in payload.items():
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            logger.warning("Dropping invalid attempt count %r for %r", value, identity)
            continue
        counts[identity] = value
    return counts
