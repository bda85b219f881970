from __future__ import annotations

import allure
import pytest

from todo_guard.guard import (
    CONFIRMATION_PREFIX,
    RETRY_LIMIT_PREFIX,
    AttemptLedger,
    AttemptPolicy,
    DecisionKind,
    TodoItem,
    TodoStatus,
)
from todo_guard.storage import MemoryDocumentStore

pytestmark = [
    allure.epic("Completion Guard"),
    allure.feature("Attempt Policy"),
]


def _done(content: str) -> TodoItem:
    return TodoItem(content=content, status=TodoStatus.COMPLETED)


def _open(content: str) -> TodoItem:
    return TodoItem(content=content, status=TodoStatus.PENDING)


def _policy(store: MemoryDocumentStore) -> tuple[AttemptPolicy, AttemptLedger]:
    ledger = AttemptLedger(store)
    return AttemptPolicy(ledger), ledger


def test_first_attempt_requires_confirmation_and_counts(store: MemoryDocumentStore) -> None:
    policy, ledger = _policy(store)
    item = _done("Write tests")

    decision = policy.evaluate([item], [item], 5)

    assert decision.kind is DecisionKind.CONFIRMATION_REQUIRED
    assert decision.blocked
    assert decision.items == ("Write tests",)
    assert decision.reason.startswith(CONFIRMATION_PREFIX)
    assert "'Write tests'" in decision.reason
    assert ledger.count("Write tests") == 1


def test_subsequent_attempt_passes_through(store: MemoryDocumentStore) -> None:
    policy, ledger = _policy(store)
    ledger.increment("Write tests")
    item = _done("Write tests")

    decision = policy.evaluate([item], [item], 5)

    assert decision.kind is DecisionKind.PASS_THROUGH
    assert not decision.blocked
    assert decision.reason == ""
    assert ledger.count("Write tests") == 2


def test_several_first_attempts_share_one_plural_decision(store: MemoryDocumentStore) -> None:
    policy, ledger = _policy(store)
    items = [_done("A"), _done("B")]

    decision = policy.evaluate(items, items, 5)

    assert decision.kind is DecisionKind.CONFIRMATION_REQUIRED
    assert decision.items == ("A", "B")
    assert "'A', 'B'" in decision.reason
    assert "2 todos" in decision.reason
    assert ledger.counts() == {"A": 1, "B": 1}


def test_mixed_batch_is_blocked_by_its_first_attempt(store: MemoryDocumentStore) -> None:
    policy, ledger = _policy(store)
    ledger.increment("Old")
    items = [_done("Old"), _done("New")]

    decision = policy.evaluate(items, items, 5)

    assert decision.kind is DecisionKind.CONFIRMATION_REQUIRED
    assert decision.items == ("New",)
    assert ledger.counts() == {"Old": 2, "New": 1}


@pytest.mark.parametrize(
    ("prior", "expected"),
    [(4, DecisionKind.PASS_THROUGH), (5, DecisionKind.RETRY_LIMIT_EXCEEDED)],
)
def test_ceiling_compares_pre_increment_count(
    store: MemoryDocumentStore,
    prior: int,
    expected: DecisionKind,
) -> None:
    policy, ledger = _policy(store)
    for _ in range(prior):
        ledger.increment("Write tests")
    item = _done("Write tests")

    decision = policy.evaluate([item], [], 5)

    assert decision.kind is expected


def test_ceiling_blocks_whole_batch_without_incrementing(store: MemoryDocumentStore) -> None:
    policy, ledger = _policy(store)
    for _ in range(3):
        ledger.increment("Stuck")
    items = [_done("Stuck"), _done("Fresh")]

    decision = policy.evaluate(items, [items[1]], 3)

    assert decision.kind is DecisionKind.RETRY_LIMIT_EXCEEDED
    assert decision.items == ("Stuck",)
    assert decision.reason.startswith(RETRY_LIMIT_PREFIX)
    assert "(3)" in decision.reason
    assert "Move it back" in decision.reason
    assert ledger.counts() == {"Stuck": 3}


def test_non_positive_ceiling_blocks_every_completion(store: MemoryDocumentStore) -> None:
    policy, _ = _policy(store)
    item = _done("Anything")

    decision = policy.evaluate([item], [item], 0)

    assert decision.kind is DecisionKind.RETRY_LIMIT_EXCEEDED


def test_regressed_item_is_reset_before_ceiling_check(store: MemoryDocumentStore) -> None:
    policy, ledger = _policy(store)
    for _ in range(5):
        ledger.increment("Reopened")

    decision = policy.evaluate([_open("Reopened")], [], 5)

    assert decision.kind is DecisionKind.PASS_THROUGH
    assert ledger.count("Reopened") == 0


def test_batch_without_completions_passes_and_leaves_ledger_alone(
    store: MemoryDocumentStore,
) -> None:
    policy, _ = _policy(store)

    decision = policy.evaluate([_open("A"), _open("B")], [], 5)

    assert decision.kind is DecisionKind.PASS_THROUGH
    assert store.keys() == set()


def test_duplicate_identity_counts_once_and_first_status_wins(
    store: MemoryDocumentStore,
) -> None:
    policy, ledger = _policy(store)
    items = [_done("Dup"), _done("Dup"), _done("Other"), _open("Other")]

    decision = policy.evaluate(items, [items[0], items[1]], 5)

    assert decision.items == ("Dup",)
    assert "'Dup'." in decision.reason
    assert ledger.counts() == {"Dup": 1, "Other": 1}
