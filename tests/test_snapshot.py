from __future__ import annotations

import json

import allure

from todo_guard.guard import Snapshot, TodoItem, TodoStatus
from todo_guard.guard.snapshot import parse_snapshot_document, snapshot_to_document

pytestmark = [
    allure.epic("Completion Guard"),
    allure.feature("Todo Snapshots"),
]


def test_parses_plain_todos_document_in_order() -> None:
    raw = json.dumps(
        {
            "todos": [
                {"content": "Write tests", "status": "completed", "id": "1", "priority": "high"},
                {"content": "Ship release", "status": "pending", "id": "2"},
            ],
        },
    )

    outcome = parse_snapshot_document(raw)

    assert not outcome.recovered
    assert [item.content for item in outcome.value] == ["Write tests", "Ship release"]
    assert outcome.value.items[0].status is TodoStatus.COMPLETED
    assert outcome.value.items[0].extra == {"id": "1", "priority": "high"}


def test_parses_todo_write_tool_input_and_bare_list() -> None:
    todos = [{"content": "Refactor parser", "status": "in_progress"}]

    from_tool_input = parse_snapshot_document(json.dumps({"tool_input": {"todos": todos}}))
    from_list = parse_snapshot_document(json.dumps(todos))

    assert from_tool_input.value == from_list.value
    assert from_list.value.items[0].status is TodoStatus.IN_PROGRESS


def test_missing_document_is_empty_without_recovery() -> None:
    outcome = parse_snapshot_document(None)

    assert outcome.value == Snapshot()
    assert outcome.recovered is False
    assert outcome.error is None


def test_malformed_document_recovers_to_empty_snapshot() -> None:
    not_json = parse_snapshot_document("{not json")
    wrong_shape = parse_snapshot_document(json.dumps({"items": []}))
    scalar = parse_snapshot_document("42")

    for outcome in (not_json, wrong_shape, scalar):
        assert outcome.value == Snapshot()
        assert outcome.recovered is True
        assert outcome.error


def test_invalid_entries_are_skipped() -> None:
    raw = json.dumps(
        {
            "todos": [
                {"content": "Valid", "status": "pending"},
                {"content": "Unknown status", "status": "blocked"},
                {"status": "completed"},
                "not a todo",
            ],
        },
    )

    outcome = parse_snapshot_document(raw)

    assert [item.content for item in outcome.value] == ["Valid"]
    assert not outcome.recovered


def test_document_keeps_ignored_fields() -> None:
    snapshot = Snapshot.of(
        [TodoItem(content="Write tests", status=TodoStatus.COMPLETED, extra={"id": "7"})],
    )

    payload = json.loads(snapshot_to_document(snapshot))

    assert payload == {"todos": [{"id": "7", "content": "Write tests", "status": "completed"}]}
    assert parse_snapshot_document(snapshot_to_document(snapshot)).value == snapshot


def test_first_occurrence_of_duplicate_identity_is_authoritative() -> None:
    snapshot = Snapshot.of(
        [
            TodoItem(content="Same", status=TodoStatus.PENDING),
            TodoItem(content="Same", status=TodoStatus.COMPLETED),
            TodoItem(content="Other", status=TodoStatus.COMPLETED),
        ],
    )

    assert [item.content for item in snapshot.unique_items()] == ["Same", "Other"]
    assert [item.content for item in snapshot.completed()] == ["Other"]
    assert snapshot.find("Same").status is TodoStatus.PENDING
