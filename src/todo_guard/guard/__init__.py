"""Completion-attempt state engine."""

from todo_guard.guard.diff import newly_completed
from todo_guard.guard.engine import CompletionGuard, SubmissionResult
from todo_guard.guard.ledger import AttemptLedger
from todo_guard.guard.models import Decision, DecisionKind, Snapshot, TodoItem, TodoStatus
from todo_guard.guard.policy import CONFIRMATION_PREFIX, RETRY_LIMIT_PREFIX, AttemptPolicy
from todo_guard.guard.sequencer import SnapshotSequencer
from todo_guard.guard.snapshot import parse_snapshot_document, snapshot_to_document

__all__ = [
    "CONFIRMATION_PREFIX",
    "RETRY_LIMIT_PREFIX",
    "AttemptLedger",
    "AttemptPolicy",
    "CompletionGuard",
    "Decision",
    "DecisionKind",
    "Snapshot",
    "SnapshotSequencer",
    "SubmissionResult",
    "TodoItem",
    "TodoStatus",
    "newly_completed",
    "parse_snapshot_document",
    "snapshot_to_document",
]
