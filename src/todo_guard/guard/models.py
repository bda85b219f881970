"""Domain models for todo snapshots and guard decisions."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class TodoStatus(str, Enum):
    """Todo lifecycle states reported by the agent."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


@dataclass(frozen=True, slots=True)
class TodoItem:
    """One todo entry; `content` is its identity across snapshots."""

    content: str
    status: TodoStatus
    extra: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @property
    def is_completed(self) -> bool:
        return self.status is TodoStatus.COMPLETED


@dataclass(frozen=True, slots=True)
class Snapshot:
    """Full todo list as submitted once, in submission order."""

    items: tuple[TodoItem, ...] = ()

    @classmethod
    def of(cls, items: Iterable[TodoItem]) -> Snapshot:
        return cls(items=tuple(items))

    def __iter__(self) -> Iterator[TodoItem]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def unique_items(self) -> list[TodoItem]:
        """Items with duplicate identities removed; the first occurrence wins."""

        seen: set[str] = set()
        unique: list[TodoItem] = []
        for item in self.items:
            if item.content in seen:
                continue
            seen.add(item.content)
            unique.append(item)
        return unique

    def find(self, content: str) -> TodoItem | None:
        for item in self.items:
            if item.content == content:
                return item
        return None

    def completed(self) -> list[TodoItem]:
        return [item for item in self.unique_items() if item.is_completed]

    def not_completed(self) -> list[TodoItem]:
        return [item for item in self.unique_items() if not item.is_completed]


class DecisionKind(str, Enum):
    """Outcome classes a caller can branch on."""

    PASS_THROUGH = "pass_through"
    CONFIRMATION_REQUIRED = "confirmation_required"
    RETRY_LIMIT_EXCEEDED = "retry_limit_exceeded"
    JUDGMENT_BLOCKED = "judgment_blocked"
    STOPPED = "stopped"


@dataclass(frozen=True, slots=True)
class Decision:
    """Single verdict covering a whole submitted batch."""

    kind: DecisionKind
    reason: str = ""
    items: tuple[str, ...] = ()

    @classmethod
    def pass_through(cls) -> Decision:
        return cls(kind=DecisionKind.PASS_THROUGH)

    @classmethod
    def stop(cls, reason: str) -> Decision:
        """Consume the input: the host must not forward it to the agent."""

        return cls(kind=DecisionKind.STOPPED, reason=reason)

    @property
    def blocked(self) -> bool:
        return self.kind is not DecisionKind.PASS_THROUGH
