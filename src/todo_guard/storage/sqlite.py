"""SQLModel-backed document store."""

from __future__ import annotations

import logging
from pathlib import Path

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from todo_guard.storage.alembic_runner import upgrade_head
from todo_guard.storage.base import DocumentKey, StoreError
from todo_guard.storage.common import build_sqlite_engine, utc_now
from todo_guard.storage.sqlmodel_models import GuardDocument

logger = logging.getLogger(__name__)


class SQLiteDocumentStore:
    """Document persistence facade backed by SQLModel + SQLite."""

    def __init__(self, db_path: Path, *, busy_timeout_ms: int = 5000) -> None:
        self.db_path = db_path
        self.engine = build_sqlite_engine(db_path=db_path, busy_timeout_ms=busy_timeout_ms)

    def close(self) -> None:
        """Close underlying DB resources."""

        self.engine.dispose()

    def init_schema(self) -> None:
        """Create the database directory and run schema migrations."""

        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        upgrade_head(self.db_path)

    def get(self, key: DocumentKey) -> str | None:
        try:
            with Session(self.engine) as session:
                row = session.exec(
                    select(GuardDocument).where(GuardDocument.doc_key == key.value),
                ).one_or_none()
                return None if row is None else row.content
        except SQLAlchemyError as error:
            raise StoreError(f"Failed to read {key.value!r} document: {error}") from error

    def set(self, key: DocumentKey, content: str) -> None:
        try:
            with Session(self.engine) as session:
                row = session.get(GuardDocument, key.value)
                if row is None:
                    row = GuardDocument(doc_key=key.value, content=content, updated_at=utc_now())
                else:
                    row.content = content
                    row.updated_at = utc_now()
                session.add(row)
                session.commit()
        except SQLAlchemyError as error:
            raise StoreError(f"Failed to write {key.value!r} document: {error}") from error
        logger.debug("Stored %s document (%d chars)", key.value, len(content))

    def delete(self, key: DocumentKey) -> None:
        try:
            with Session(self.engine) as session:
                row = session.get(GuardDocument, key.value)
                if row is None:
                    return
                session.delete(row)
                session.commit()
        except SQLAlchemyError as error:
            raise StoreError(f"Failed to delete {key.value!r} document: {error}") from error
        logger.debug("Deleted %s document", key.value)
