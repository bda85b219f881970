"""Snapshot document codec."""

from __future__ import annotations

import json
import logging
from typing import Any

from todo_guard.guard.models import Snapshot, TodoItem, TodoStatus
from todo_guard.parsing import DocumentFormatError, ParseOutcome, parse_or_default

logger = logging.getLogger(__name__)


def parse_snapshot_document(
    raw: str | None,
    *,
    document: str = "snapshot",
) -> ParseOutcome[Snapshot]:
    """Decode a stored or submitted snapshot document.

    Accepted shapes are `{"todos": [...]}`, a TodoWrite-style
    `{"tool_input": {"todos": [...]}}` and a bare list of todos. Missing or
    malformed documents decode to an empty snapshot.
    """

    return parse_or_default(raw, snapshot_from_payload, Snapshot, document=document)


def snapshot_from_payload(payload: object) -> Snapshot:
    """Build a snapshot from decoded JSON, skipping entries that are not todos."""

    raw_todos = _extract_todos(payload)
    items: list[TodoItem] = []
    for index, raw_item in enumerate(raw_todos):
        item = _todo_from_payload(raw_item)
        if item is None:
            logger.warning("Skipping malformed todo entry #%d: %r", index, raw_item)
            continue
        items.append(item)
    return Snapshot.of(items)


def snapshot_to_document(snapshot: Snapshot) -> str:
    return json.dumps(
        {
            "todos": [
                {**item.extra, "content": item.content, "status": item.status.value}
                for item in snapshot
            ],
        },
        indent=2,
        ensure_ascii=False,
    )


def _extract_todos(payload: object) -> list[Any]:
    if isinstance(payload, list):
        return payload
    if not isinstance(payload, dict):
        raise DocumentFormatError(f"expected an object or a list, got {type(payload).__name__}")

    container: object = payload
    if "todos" not in payload and isinstance(payload.get("tool_input"), dict):
        container = payload["tool_input"]
    todos = container.get("todos") if isinstance(container, dict) else None
    if not isinstance(todos, list):
        raise DocumentFormatError("document has no 'todos' list")
    return todos


def _todo_from_payload(raw_item: object) -> TodoItem | None:
    if not isinstance(raw_item, dict):
        return None
    content = raw_item.get("content")
    if not isinstance(content, str):
        return None
    try:
        status = TodoStatus(raw_item.get("status"))
    except ValueError:
        return None
    extra = {key: value for key, value in raw_item.items() if key not in {"content", "status"}}
    return TodoItem(content=content, status=status, extra=extra)
