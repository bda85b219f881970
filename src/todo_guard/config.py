"""Runtime configuration for the completion guard."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from todo_guard.parsing import DocumentFormatError, ParseOutcome, parse_or_default

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = Path(".claude") / "todo-guard" / "data"
DB_FILE_NAME = "todo-guard.db"
DEFAULT_MAX_RETRY_ATTEMPTS = 5
MIN_RETRY_ATTEMPTS = 1
MAX_RETRY_ATTEMPTS = 10


@dataclass(slots=True)
class StorageSettings:
    """Where guard documents live."""

    data_dir: Path = DEFAULT_DATA_DIR
    db_path: Path | None = None
    busy_timeout_ms: int = 5_000

    @property
    def resolved_db_path(self) -> Path:
        return self.db_path or self.data_dir / DB_FILE_NAME


@dataclass(slots=True)
class GuardSettings:
    """Policy defaults used when the stored config document is silent."""

    enabled: bool = True
    max_retry_attempts: int = DEFAULT_MAX_RETRY_ATTEMPTS


@dataclass(slots=True)
class Settings:
    """Application settings grouped by concern."""

    storage: StorageSettings = field(default_factory=StorageSettings)
    guard: GuardSettings = field(default_factory=GuardSettings)
    debug_log_path: Path | None = None

    @classmethod
    def from_env(cls, cwd: Path | None = None) -> Settings:
        """Load settings from environment with defaults for a local project."""

        data_dir = _resolve_data_dir(cwd=cwd or Path.cwd())
        db_path_raw = os.getenv("TODO_GUARD_DB_PATH", "").strip()
        debug_log_raw = os.getenv("TODO_GUARD_DEBUG_LOG", "").strip()
        return cls(
            storage=StorageSettings(
                data_dir=data_dir,
                db_path=Path(db_path_raw) if db_path_raw else None,
                busy_timeout_ms=_env_int("TODO_GUARD_BUSY_TIMEOUT_MS", default=5_000),
            ),
            guard=GuardSettings(
                enabled=_env_bool("TODO_GUARD_ENABLED", default=True),
                max_retry_attempts=_env_int(
                    "TODO_GUARD_MAX_RETRY_ATTEMPTS",
                    default=DEFAULT_MAX_RETRY_ATTEMPTS,
                ),
            ),
            debug_log_path=Path(debug_log_raw) if debug_log_raw else None,
        )

    def validate(self) -> None:
        """Raise configuration error for values the guard cannot run with."""

        if not MIN_RETRY_ATTEMPTS <= self.guard.max_retry_attempts <= MAX_RETRY_ATTEMPTS:
            raise ValueError(
                "TODO_GUARD_MAX_RETRY_ATTEMPTS must be between "
                f"{MIN_RETRY_ATTEMPTS} and {MAX_RETRY_ATTEMPTS}, "
                f"got {self.guard.max_retry_attempts}.",
            )
        if self.storage.busy_timeout_ms <= 0:
            raise ValueError("TODO_GUARD_BUSY_TIMEOUT_MS must be > 0.")


@dataclass(frozen=True, slots=True)
class GuardConfig:
    """Effective per-project switches, stored as the `config` document."""

    guard_enabled: bool = True
    max_retry_attempts: int = DEFAULT_MAX_RETRY_ATTEMPTS

    def to_document(self) -> str:
        return json.dumps(
            {
                "guardEnabled": self.guard_enabled,
                "maxRetryAttempts": self.max_retry_attempts,
            },
            indent=2,
        )


def parse_guard_config(raw: str | None, *, defaults: GuardSettings) -> ParseOutcome[GuardConfig]:
    """Merge a stored config document over env defaults, field by field.

    Fields with a wrong type or an out-of-range retry limit keep the default.
    """

    fallback = GuardConfig(
        guard_enabled=defaults.enabled,
        max_retry_attempts=defaults.max_retry_attempts,
    )

    def _parse(payload: object) -> GuardConfig:
        if not isinstance(payload, dict):
            raise DocumentFormatError(f"expected a JSON object, got {type(payload).__name__}")

        enabled = payload.get("guardEnabled", fallback.guard_enabled)
        if not isinstance(enabled, bool):
            logger.warning("Ignoring non-boolean guardEnabled=%r", enabled)
            enabled = fallback.guard_enabled

        max_attempts = payload.get("maxRetryAttempts", fallback.max_retry_attempts)
        if (
            isinstance(max_attempts, bool)
            or not isinstance(max_attempts, int)
            or not MIN_RETRY_ATTEMPTS <= max_attempts <= MAX_RETRY_ATTEMPTS
        ):
            logger.warning(
                "Ignoring maxRetryAttempts=%r (allowed %d..%d)",
                max_attempts,
                MIN_RETRY_ATTEMPTS,
                MAX_RETRY_ATTEMPTS,
            )
            max_attempts = fallback.max_retry_attempts

        return GuardConfig(guard_enabled=enabled, max_retry_attempts=max_attempts)

    return parse_or_default(raw, _parse, lambda: fallback, document="config")


def _resolve_data_dir(*, cwd: Path) -> Path:
    explicit = os.getenv("TODO_GUARD_DATA_DIR", "").strip()
    if explicit:
        return Path(explicit)

    project_dir = os.getenv("CLAUDE_PROJECT_DIR", "").strip()
    if not project_dir:
        return DEFAULT_DATA_DIR

    project_root = Path(project_dir)
    if not project_root.is_absolute():
        raise ValueError("CLAUDE_PROJECT_DIR must be an absolute path.")
    if ".." in project_root.parts:
        raise ValueError("CLAUDE_PROJECT_DIR must not contain path traversal.")
    if not cwd.is_relative_to(project_root):
        raise ValueError("CLAUDE_PROJECT_DIR must contain the current working directory.")
    return project_root / DEFAULT_DATA_DIR


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value.strip())
    except ValueError as error:
        raise ValueError(f"Invalid integer value for {name}: {value!r}") from error


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    raise ValueError(f"Invalid boolean value for {name}: {value!r}")
