from __future__ import annotations

import allure

from todo_guard.guard import Snapshot, TodoItem, TodoStatus, newly_completed

pytestmark = [
    allure.epic("Completion Guard"),
    allure.feature("Completion Diff"),
]


def _snapshot(*pairs: tuple[str, str]) -> Snapshot:
    return Snapshot.of(
        TodoItem(content=content, status=TodoStatus(status)) for content, status in pairs
    )


def test_rediff_of_same_snapshot_is_empty() -> None:
    snapshot = _snapshot(("A", "completed"), ("B", "pending"), ("C", "completed"))

    assert newly_completed(snapshot, snapshot) == []


def test_missing_or_empty_previous_makes_every_completion_new() -> None:
    snapshot = _snapshot(("A", "completed"), ("B", "in_progress"), ("C", "completed"))

    from_none = newly_completed(snapshot, None)
    from_empty = newly_completed(snapshot, Snapshot())

    assert [item.content for item in from_none] == ["A", "C"]
    assert from_none == from_empty == snapshot.completed()


def test_detects_status_transitions_and_new_items_in_current_order() -> None:
    previous = _snapshot(("A", "pending"), ("B", "completed"), ("C", "in_progress"))
    current = _snapshot(
        ("D", "completed"),
        ("C", "completed"),
        ("B", "completed"),
        ("A", "completed"),
    )

    result = newly_completed(current, previous)

    assert [item.content for item in result] == ["D", "C", "A"]


def test_uncompleted_items_are_never_reported() -> None:
    previous = _snapshot(("A", "completed"))
    current = _snapshot(("A", "pending"), ("B", "in_progress"))

    assert newly_completed(current, previous) == []


def test_duplicate_identity_in_previous_uses_first_match() -> None:
    previous = _snapshot(("A", "pending"), ("A", "completed"))
    current = _snapshot(("A", "completed"))

    assert [item.content for item in newly_completed(current, previous)] == ["A"]
