"""SQLModel ORM tables for the document store."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Column, DateTime, Text
from sqlmodel import Field, SQLModel


class GuardDocument(SQLModel, table=True):
    __tablename__ = "guard_documents"  # type: ignore[bad-override]

    doc_key: str = Field(primary_key=True)
    content: str = Field(sa_column=Column(Text, nullable=False))
    updated_at: datetime = Field(sa_column=Column(DateTime(timezone=True), nullable=False))
