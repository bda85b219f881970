from __future__ import annotations

import logging
from pathlib import Path

import allure

from todo_guard.logs import configure_debug_log

pytestmark = [
    allure.epic("Completion Guard"),
    allure.feature("Debug Log"),
]


def test_debug_log_is_attached_once_and_receives_package_records(tmp_path: Path) -> None:
    path = tmp_path / "logs" / "debug.log"
    package_logger = logging.getLogger("todo_guard")
    previous_level = package_logger.level

    handler = configure_debug_log(path)
    try:
        assert configure_debug_log(path) is handler
        assert package_logger.handlers.count(handler) == 1

        logging.getLogger("todo_guard.guard.ledger").debug("attempt recorded")
        handler.flush()

        assert "attempt recorded" in path.read_text(encoding="utf-8")
    finally:
        package_logger.removeHandler(handler)
        handler.close()
        package_logger.setLevel(previous_level)
