"""Optional debug log file for hook runs."""

from __future__ import annotations

import logging
from pathlib import Path

_LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"


def configure_debug_log(path: Path) -> logging.Handler:
    """Attach a DEBUG file handler for `path` to the package logger once."""

    package_logger = logging.getLogger("todo_guard")
    resolved = path.resolve()
    for handler in package_logger.handlers:
        if isinstance(handler, logging.FileHandler) and Path(handler.baseFilename) == resolved:
            return handler

    resolved.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(resolved, encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG)
    return handler
