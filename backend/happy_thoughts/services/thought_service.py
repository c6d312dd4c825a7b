"""
Happy Thoughts Backend — Thought Service (Collection Access)
=============================================================

What:  Create/read/update/delete operations on the `thoughts` table.
Why:   Keeps SQLAlchemy out of the route handlers and translates storage
       failures into the application's exception hierarchy.
How:   Every method receives the request's AsyncSession, runs one statement
       (or a load + change), commits before returning, and hands back ORM
       objects that routes serialize. A write is durable by the time its
       response is sent.
Who:   Called by route handlers in routes/thoughts.py.

Error translation:
    identifier is not a UUID   → MalformedRequestError (400)
    no row matched             → NotFoundError (404)
    unique message violated    → DuplicateKeyError (400)
    any other SQLAlchemyError  → MalformedRequestError (400)

The service is stateless; the session is the only storage handle and is
owned by the request.
"""

import logging
from typing import List, Union
from uuid import UUID

from sqlalchemy import desc, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from happy_thoughts.exceptions import (
    DuplicateKeyError,
    HappyThoughtsError,
    MalformedRequestError,
    NotFoundError,
)
from happy_thoughts.models.thought import Thought
from happy_thoughts.schemas.thought import ThoughtCreate, ThoughtPatch, ThoughtReplace

logger = logging.getLogger(__name__)

LIST_LIMIT = 20
UNIQUE_VIOLATION = "23505"


def parse_thought_id(thought_id: Union[str, UUID]) -> UUID:
    """Turns a path segment into a UUID, or raises MalformedRequestError."""
    if isinstance(thought_id, UUID):
        return thought_id
    try:
        return UUID(thought_id)
    except (TypeError, ValueError):
        raise MalformedRequestError(
            context={"id": thought_id, "reason": "Identifier is not a valid UUID"},
        )


def _is_unique_violation(exc: IntegrityError) -> bool:
    # asyncpg exposes the SQLSTATE; 23505 is unique_violation
    sqlstate = getattr(exc.orig, "sqlstate", None) or getattr(exc.orig, "pgcode", None)
    if sqlstate is not None:
        return sqlstate == UNIQUE_VIOLATION
    # SQLite carries no code, only "UNIQUE constraint failed: thoughts.message"
    return str(exc.orig).startswith("UNIQUE constraint failed")


class ThoughtService:
    """
    Business logic layer for thought operations.

    Responsibilities:
        - list_thoughts(): newest thoughts first, fixed limit
        - create_thought(): insert with duplicate detection
        - like_thought(): atomic hearts increment
        - update_thought(): merge of the fields the client sent (PATCH)
        - replace_thought(): overwrite of all client-controlled fields (PUT)
        - delete_thought(): permanent removal
    """

    async def list_thoughts(self, db: AsyncSession, limit: int = LIST_LIMIT) -> List[Thought]:
        """
        Return up to `limit` thoughts ordered by created_at descending.

        Query plan:
            SELECT * FROM thoughts ORDER BY created_at DESC LIMIT 20
            → idx_thoughts_created_at
        """
        limit = min(limit, LIST_LIMIT)
        try:
            result = await db.execute(
                select(Thought).order_by(desc(Thought.created_at)).limit(limit)
            )
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise self._storage_error("list", e)

    async def create_thought(self, db: AsyncSession, payload: ThoughtCreate) -> Thought:
        """
        Insert a new thought with hearts=0 and created_at=now.

        The message has already passed the schema rules (length, no digits);
        the only failure left is the unique constraint on message.

        Raises:
            DuplicateKeyError: the same message already exists
            MalformedRequestError: any other storage failure
        """
        thought = Thought(message=payload.message)
        db.add(thought)
        await self._commit(db, "create", fields={"message": payload.message})
        logger.info("Thought created: %s", thought.id)
        return thought

    async def like_thought(self, db: AsyncSession, thought_id: Union[str, UUID]) -> Thought:
        """
        Increment hearts by exactly one and return the updated thought.

        A single UPDATE ... SET hearts = hearts + 1 ... RETURNING statement,
        so concurrent likes on the same row never lose an increment.
        """
        tid = parse_thought_id(thought_id)
        try:
            result = await db.execute(
                update(Thought)
                .where(Thought.id == tid)
                .values(hearts=Thought.hearts + 1)
                .returning(Thought)
            )
            thought = result.scalar_one_or_none()
            await db.commit()
        except SQLAlchemyError as e:
            raise self._storage_error("like", e)

        if thought is None:
            raise NotFoundError(resource_id=str(tid))

        logger.info("Thought %s liked (hearts=%d)", thought.id, thought.hearts)
        return thought

    async def update_thought(
        self,
        db: AsyncSession,
        thought_id: Union[str, UUID],
        patch: ThoughtPatch,
    ) -> Thought:
        """
        Merge the fields present in the PATCH body into the stored thought.

        Fields the client did not send are left untouched; last write wins.
        """
        thought = await self._get_or_404(db, thought_id)
        changes = patch.model_dump(exclude_unset=True)
        for field, value in changes.items():
            setattr(thought, field, value)
        await self._commit(db, "update", fields=self._message_field(changes))
        logger.info("Thought %s patched: %s", thought.id, sorted(changes))
        return thought

    async def replace_thought(
        self,
        db: AsyncSession,
        thought_id: Union[str, UUID],
        replacement: ThoughtReplace,
    ) -> Thought:
        """
        Overwrite message and hearts with the given representation.

        createdAt is overwritten only when the body carries one.
        """
        thought = await self._get_or_404(db, thought_id)
        thought.message = replacement.message
        thought.hearts = replacement.hearts
        if replacement.created_at is not None:
            thought.created_at = replacement.created_at
        await self._commit(db, "replace", fields={"message": replacement.message})
        logger.info("Thought %s replaced", thought.id)
        return thought

    async def delete_thought(self, db: AsyncSession, thought_id: Union[str, UUID]) -> Thought:
        """Remove the thought permanently and return its last representation."""
        thought = await self._get_or_404(db, thought_id)
        try:
            await db.delete(thought)
            await db.commit()
        except SQLAlchemyError as e:
            raise self._storage_error("delete", e)
        logger.info("Thought %s deleted", thought.id)
        return thought

    # ── Helpers ───────────────────────────────────────────────────────────

    async def _get_or_404(self, db: AsyncSession, thought_id: Union[str, UUID]) -> Thought:
        tid = parse_thought_id(thought_id)
        try:
            thought = await db.get(Thought, tid)
        except SQLAlchemyError as e:
            raise self._storage_error("get", e)
        if thought is None:
            raise NotFoundError(resource_id=str(tid))
        return thought

    async def _commit(self, db: AsyncSession, operation: str, fields: dict) -> None:
        """
        Commit pending changes, mapping a unique violation to DuplicateKeyError.

        The commit happens while the route handler is still on the stack, so
        a failed write becomes an error response instead of a 200 that was
        never persisted. On failure the session is rolled back and stays usable.
        """
        try:
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            if _is_unique_violation(e):
                logger.warning("Duplicate thought on %s: %s", operation, fields)
                raise DuplicateKeyError(fields=fields)
            raise self._storage_error(operation, e)
        except SQLAlchemyError as e:
            await db.rollback()
            raise self._storage_error(operation, e)

    @staticmethod
    def _message_field(changes: dict) -> dict:
        if "message" in changes:
            return {"message": changes["message"]}
        return {}

    @staticmethod
    def _storage_error(operation: str, exc: Exception) -> HappyThoughtsError:
        # Driver message may contain SQL; log it, return only the type
        logger.error("Storage error during %s: %s", operation, str(exc))
        return MalformedRequestError(
            context={"operation": operation, "error_type": type(exc).__name__},
        )


# ── Singleton Instance ────────────────────────────────────────────────────
# ThoughtService is stateless; one instance serves every request
thought_service = ThoughtService()
