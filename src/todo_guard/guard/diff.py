"""Detection of todos that moved into the completed state."""

from __future__ import annotations

from todo_guard.guard.models import Snapshot, TodoItem


def newly_completed(current: Snapshot, previous: Snapshot | None) -> list[TodoItem]:
    """Completed items of `current` that were absent or not completed in `previous`.

    Order follows `current`. A missing `previous` behaves like an empty one, so
    on the first submission every completed item is newly completed.
    """

    baseline = previous or Snapshot()
    result: list[TodoItem] = []
    for item in current.completed():
        before = baseline.find(item.content)
        if before is None or not before.is_completed:
            result.append(item)
    return result
