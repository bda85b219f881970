"""Attempt policy: first-attempt confirmation and retry ceiling."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from todo_guard.guard.ledger import AttemptLedger
from todo_guard.guard.models import Decision, DecisionKind, TodoItem

logger = logging.getLogger(__name__)

CONFIRMATION_PREFIX = "Todo Guard: Verify that"
RETRY_LIMIT_PREFIX = "Todo Guard: Maximum retry attempts"


class AttemptPolicy:
    """Classifies a submitted batch against the attempt ledger.

    One decision covers the whole batch. A ceiling breach by any completed
    item blocks the batch before first/subsequent classification happens, so
    other items in the same submission get no independent pass-through.
    """

    def __init__(self, ledger: AttemptLedger) -> None:
        self.ledger = ledger

    def evaluate(
        self,
        current_items: Sequence[TodoItem],
        newly_completed: Sequence[TodoItem],
        max_retry_attempts: int,
    ) -> Decision:
        """Apply the policy to one submission and mutate the ledger accordingly.

        `current_items` is the full submitted batch; its completed items are the
        ones counted against the ceiling, while `newly_completed` decides whether
        a confirmation is requested.
        """

        authoritative = _first_occurrences(current_items)
        completed = [item.content for item in authoritative if item.is_completed]
        regressed = [item.content for item in authoritative if not item.is_completed]

        if regressed:
            self.ledger.reset_many(regressed)

        counts = self.ledger.counts()
        exceeded = [
            identity for identity in completed if counts.get(identity, 0) >= max_retry_attempts
        ]
        if exceeded:
            logger.info(
                "Retry ceiling %d reached for %s, blocking batch",
                max_retry_attempts,
                exceeded,
            )
            return Decision(
                kind=DecisionKind.RETRY_LIMIT_EXCEEDED,
                reason=retry_limit_reason(exceeded, max_retry_attempts),
                items=tuple(exceeded),
            )

        first_attempt: list[str] = []
        subsequent: list[str] = []
        for identity in dict.fromkeys(item.content for item in newly_completed):
            attempts = counts.get(identity, 0)
            logger.debug("Todo %r attempt count %d", identity, attempts)
            if attempts == 0:
                first_attempt.append(identity)
            else:
                subsequent.append(identity)

        self.ledger.increment_many(completed)

        if first_attempt:
            logger.info("Requesting completion confirmation for %s", first_attempt)
            return Decision(
                kind=DecisionKind.CONFIRMATION_REQUIRED,
                reason=confirmation_reason(first_attempt),
                items=tuple(first_attempt),
            )
        if subsequent:
            logger.debug("Repeated completion claims %s go to judgment", subsequent)
        return Decision.pass_through()


def confirmation_reason(identities: Sequence[str]) -> str:
    if len(identities) == 1:
        return (
            f"{CONFIRMATION_PREFIX} you actually completed {_quote(identities[0])}. "
            "Briefly describe the work you did, then mark it as completed again."
        )
    return (
        f"{CONFIRMATION_PREFIX} you actually completed {_quote_all(identities)}. "
        f"You marked {len(identities)} todos as completed at once; confirm the work done "
        "for each of them, then mark them as completed again."
    )


def retry_limit_reason(identities: Sequence[str], max_retry_attempts: int) -> str:
    target = "it" if len(identities) == 1 else "them"
    return (
        f"{RETRY_LIMIT_PREFIX} ({max_retry_attempts}) exceeded for {_quote_all(identities)}. "
        f"Move {target} back to pending or in_progress and finish the remaining work "
        f"before marking {target} as completed."
    )


def _quote(identity: str) -> str:
    return f"'{identity}'"


def _quote_all(identities: Sequence[str]) -> str:
    return ", ".join(_quote(identity) for identity in identities)


def _first_occurrences(items: Sequence[TodoItem]) -> list[TodoItem]:
    seen: dict[str, TodoItem] = {}
    for item in items:
        seen.setdefault(item.content, item)
    return list(seen.values())
