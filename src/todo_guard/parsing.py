"""Parse-or-default helper for advisory documents kept in the store."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DocumentFormatError(ValueError):
    """Stored document decoded as JSON but does not have the expected shape."""


@dataclass(frozen=True, slots=True)
class ParseOutcome(Generic[T]):
    """Parsed value plus a marker telling whether the default was substituted."""

    value: T
    recovered: bool = False
    error: str | None = None


def parse_or_default(
    raw: str | None,
    parser: Callable[[object], T],
    default: Callable[[], T],
    *,
    document: str,
) -> ParseOutcome[T]:
    """Decode `raw` JSON with `parser`, falling back to `default()` when unusable.

    A missing document (`raw is None`) is not a failure: the default comes back
    with `recovered=False`. Invalid JSON or a `DocumentFormatError` raised by the
    parser yields the default with `recovered=True` and the error message.
    """

    if raw is None:
        return ParseOutcome(value=default())

    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as error:
        return _recover(document=document, default=default, error=f"invalid JSON: {error}")

    try:
        return ParseOutcome(value=parser(payload))
    except DocumentFormatError as error:
        return _recover(document=document, default=default, error=str(error))


def _recover(*, document: str, default: Callable[[], T], error: str) -> ParseOutcome[T]:
    logger.warning("Stored %s document is malformed, using default: %s", document, error)
    return ParseOutcome(value=default(), recovered=True, error=error)
