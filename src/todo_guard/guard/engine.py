"""Completion-attempt state engine: diff, evaluate, commit."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from todo_guard.config import DEFAULT_MAX_RETRY_ATTEMPTS
from todo_guard.guard.diff import newly_completed
from todo_guard.guard.ledger import AttemptLedger
from todo_guard.guard.models import Decision, Snapshot, TodoItem
from todo_guard.guard.policy import AttemptPolicy
from todo_guard.guard.sequencer import SnapshotSequencer
from todo_guard.storage.base import DocumentStore, clear_transient_documents

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SubmissionResult:
    """Decision for one submission plus the state it was computed from."""

    decision: Decision
    snapshot: Snapshot
    baseline: Snapshot
    newly_completed: list[TodoItem] = field(default_factory=list)
    committed: bool = False


class CompletionGuard:
    """Processes todo submissions one at a time against a document store.

    Not safe for overlapping submissions on the same store: callers that can
    receive concurrent submissions must serialize `submit` per workspace.
    """

    def __init__(
        self,
        store: DocumentStore,
        *,
        max_retry_attempts: int = DEFAULT_MAX_RETRY_ATTEMPTS,
    ) -> None:
        self.store = store
        self.max_retry_attempts = max_retry_attempts
        self.ledger = AttemptLedger(store)
        self.policy = AttemptPolicy(self.ledger)
        self.snapshots = SnapshotSequencer(store)

    def submit(
        self,
        snapshot: Snapshot,
        *,
        max_retry_attempts: int | None = None,
        commit_snapshot: bool = True,
    ) -> SubmissionResult:
        """Evaluate one submission and, unless told otherwise, commit it.

        With `commit_snapshot=False` the snapshot slots are left untouched while
        the ledger still follows the policy. Store write failures propagate.
        """

        baseline = self.snapshots.latest()
        fresh = newly_completed(snapshot, baseline)
        limit = self.max_retry_attempts if max_retry_attempts is None else max_retry_attempts

        decision = self.policy.evaluate(snapshot.items, fresh, limit)

        if commit_snapshot:
            self.snapshots.commit(snapshot)
        logger.debug(
            "Submission evaluated: decision=%s newly_completed=%d committed=%s",
            decision.kind.value,
            len(fresh),
            commit_snapshot,
        )
        return SubmissionResult(
            decision=decision,
            snapshot=snapshot,
            baseline=baseline,
            newly_completed=fresh,
            committed=commit_snapshot,
        )

    def accept(self, identities: Iterable[str]) -> None:
        """Forget attempt history of completions an external judgment approved."""

        self.ledger.resolve_many(identities)

    def reset_session(self) -> None:
        """Drop snapshots and attempt counters at a session boundary."""

        clear_transient_documents(self.store)
        self.ledger.clear_all()
        logger.info("Session reset: snapshots and attempt counters cleared")
