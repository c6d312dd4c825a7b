"""
Happy Thoughts Backend — Thought SQLAlchemy Model
==================================================

What:  ORM model representing the `thoughts` table.
Why:   Maps Python objects to database rows for type-safe database operations.
Who:   Used by ThoughtService for CRUD operations and by Alembic for schema management.

Table Design Rationale:
    - UUID primary key: opaque to clients, assigned at insert time
    - message: unique, so posting the same text twice is a duplicate-key error
    - hearts: counter only ever moved by `hearts = hearts + 1` or an explicit PATCH/PUT
    - created_at: UTC with timezone

    Index on created_at DESC:
        The list endpoint always reads "newest 20 first".

Generic SQLAlchemy types (Uuid, DateTime) are used so the same model runs
on PostgreSQL in production and SQLite in the test suite.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    Index,
    Integer,
    String,
    UniqueConstraint,
    Uuid,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from happy_thoughts.database import Base


MESSAGE_MIN_LENGTH = 5
MESSAGE_MAX_LENGTH = 140


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Thought(Base):
    """
    A short text post with a like counter.

    Lifecycle:
        1. Created by POST /thoughts (hearts = 0, created_at = now)
        2. Liked, patched or replaced in place
        3. Deleted permanently by DELETE /thoughts/{id}
    """

    __tablename__ = "thoughts"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    message: Mapped[str] = mapped_column(
        String(MESSAGE_MAX_LENGTH),
        nullable=False,
    )

    hearts: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default=text("0"),
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        UniqueConstraint("message", name="uq_thoughts_message"),
        CheckConstraint("hearts >= 0", name="ck_thoughts_hearts_non_negative"),
        Index("idx_thoughts_created_at", created_at.desc()),
    )

    def __repr__(self) -> str:
        return (
            f"<Thought(id={self.id}, hearts={self.hearts}, "
            f"created_at='{self.created_at}')>"
        )
