"""Use-case service wiring the guard engine to configuration and judgment."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Protocol

from todo_guard.config import GuardConfig, GuardSettings, Settings, parse_guard_config
from todo_guard.guard.engine import CompletionGuard, SubmissionResult
from todo_guard.guard.models import Decision, DecisionKind, Snapshot, TodoItem
from todo_guard.logs import configure_debug_log
from todo_guard.storage.base import DocumentKey, DocumentStore
from todo_guard.storage.sqlite import SQLiteDocumentStore

logger = logging.getLogger(__name__)

_COMMANDS = {"todo-guard on": True, "todo-guard off": False}


class JudgeError(RuntimeError):
    """External judgment could not produce a verdict; the submission is let through."""


@dataclass(frozen=True, slots=True)
class CompletedTodo:
    """Completion claim handed to the judge."""

    content: str
    previous_status: str
    attempt_number: int


@dataclass(frozen=True, slots=True)
class JudgeContext:
    """Everything the judge sees about one submission."""

    current: Snapshot
    previous: Snapshot
    completed_todos: tuple[CompletedTodo, ...] = ()
    transcript: str = ""


@dataclass(frozen=True, slots=True)
class JudgeVerdict:
    approved: bool
    reason: str = ""


class CompletionJudge(Protocol):
    """Semantic check of whether claimed work was actually done."""

    def judge(self, context: JudgeContext) -> JudgeVerdict:
        """Return a verdict for the completed todos in `context`."""


@dataclass(slots=True)
class GuardService:
    """Runs submissions through the guard and, when allowed, the judge."""

    store: DocumentStore
    defaults: GuardSettings = field(default_factory=GuardSettings)
    judge: CompletionJudge | None = None
    guard: CompletionGuard = field(init=False)

    def __post_init__(self) -> None:
        self.guard = CompletionGuard(
            self.store,
            max_retry_attempts=self.defaults.max_retry_attempts,
        )

    def load_config(self) -> GuardConfig:
        raw = self.store.get(DocumentKey.CONFIG)
        return parse_guard_config(raw, defaults=self.defaults).value

    def set_enabled(self, enabled: bool) -> GuardConfig:
        """Persist the on/off switch, keeping the other stored settings."""

        config = GuardConfig(
            guard_enabled=enabled,
            max_retry_attempts=self.load_config().max_retry_attempts,
        )
        self.store.set(DocumentKey.CONFIG, config.to_document())
        logger.info("Todo Guard %s", "enabled" if enabled else "disabled")
        return config

    def start_session(self) -> None:
        self.guard.reset_session()

    def attempt_counts(self) -> dict[str, int]:
        return self.guard.ledger.counts()

    def process_command(self, prompt: str) -> Decision | None:
        """Handle `todo-guard on` / `todo-guard off` user prompts.

        A recognized command is persisted and consumed with a stop decision.
        Any other prompt returns `None` and goes on to the agent.
        """

        command = " ".join(prompt.split()).lower()
        if command not in _COMMANDS:
            return None
        config = self.set_enabled(_COMMANDS[command])
        state = "enabled" if config.guard_enabled else "disabled"
        return Decision.stop(f"Todo Guard {state}")

    def process_submission(
        self,
        snapshot: Snapshot,
        *,
        commit_snapshot: bool = True,
        transcript: str = "",
    ) -> Decision:
        """Decide on one todo list submission.

        A disabled guard passes everything through without touching stored
        state. A pass-through that still carries completed todos goes to the
        judge when one is configured; approval clears their attempt history.
        A failing judge is logged and does not block the agent.
        """

        config = self.load_config()
        if not config.guard_enabled:
            logger.debug("Todo Guard disabled, skipping submission")
            return Decision.pass_through()

        result = self.guard.submit(
            snapshot,
            max_retry_attempts=config.max_retry_attempts,
            commit_snapshot=commit_snapshot,
        )
        if result.decision.blocked or self.judge is None or not snapshot.completed():
            return result.decision
        return self._run_judgment(self.judge, result, transcript)

    def _run_judgment(
        self,
        judge: CompletionJudge,
        result: SubmissionResult,
        transcript: str,
    ) -> Decision:
        context = self._build_context(result, transcript)
        identities = tuple(todo.content for todo in context.completed_todos)
        try:
            verdict = judge.judge(context)
        except Exception:  # noqa: BLE001
            logger.exception("Judgment failed for %s, letting the submission through", identities)
            return Decision.pass_through()

        if verdict.approved:
            self.guard.accept(identities)
            return Decision.pass_through()

        logger.info("Judgment rejected completion of %s", identities)
        return Decision(
            kind=DecisionKind.JUDGMENT_BLOCKED,
            reason=verdict.reason
            or (
                "Todo Guard: Completion of "
                f"{_quote_all(identities)} is not supported by the recorded work."
            ),
            items=identities,
        )

    def _build_context(self, result: SubmissionResult, transcript: str) -> JudgeContext:
        counts = self.guard.ledger.counts()
        return JudgeContext(
            current=result.snapshot,
            previous=result.baseline,
            completed_todos=tuple(
                CompletedTodo(
                    content=item.content,
                    previous_status=_previous_status(result.baseline, item),
                    attempt_number=counts.get(item.content, 0),
                )
                for item in result.snapshot.completed()
            ),
            transcript=transcript,
        )


def build_guard_service(
    settings: Settings,
    *,
    judge: CompletionJudge | None = None,
) -> tuple[GuardService, SQLiteDocumentStore]:
    """Validate settings, open the SQLite store and build a service on top of it.

    The caller owns the returned store and must `close()` it.
    """

    settings.validate()
    if settings.debug_log_path is not None:
        configure_debug_log(settings.debug_log_path)
    store = SQLiteDocumentStore(
        settings.storage.resolved_db_path,
        busy_timeout_ms=settings.storage.busy_timeout_ms,
    )
    store.init_schema()
    return GuardService(store=store, defaults=settings.guard, judge=judge), store


def _previous_status(baseline: Snapshot, item: TodoItem) -> str:
    before = baseline.find(item.content)
    return "new" if before is None else before.status.value


def _quote_all(identities: tuple[str, ...]) -> str:
    return ", ".join(f"'{identity}'" for identity in identities)
