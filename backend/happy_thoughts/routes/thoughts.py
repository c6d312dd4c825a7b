"""
Happy Thoughts Backend — Thought Route Handlers
================================================

What:  The /thoughts resource: list, create, like, patch, replace, delete.
How:   Each handler takes the request's session via Depends(get_db_session),
       delegates to ThoughtService, and returns the ORM object for FastAPI
       to serialize through ThoughtResponse.

Errors are not handled here: the service raises application exceptions and
the global handlers in main.py turn them into 400/404 responses.
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from happy_thoughts.database import get_db_session
from happy_thoughts.schemas.thought import (
    DuplicateErrorResponse,
    ErrorResponse,
    ThoughtCreate,
    ThoughtPatch,
    ThoughtReplace,
    ThoughtResponse,
)
from happy_thoughts.services.thought_service import thought_service

router = APIRouter(prefix="/thoughts", tags=["Thoughts"])

_NOT_FOUND_OR_INVALID = {
    400: {"description": "Malformed identifier or invalid body", "model": ErrorResponse},
    404: {"description": "Thought not found", "model": ErrorResponse},
}


@router.get(
    "",
    response_model=List[ThoughtResponse],
    summary="List the 20 most recent thoughts",
)
async def list_thoughts(db: AsyncSession = Depends(get_db_session)):
    return await thought_service.list_thoughts(db)


@router.post(
    "",
    response_model=ThoughtResponse,
    responses={
        400: {"description": "Duplicate or invalid message", "model": DuplicateErrorResponse},
    },
    summary="Create a thought",
)
async def create_thought(
    payload: ThoughtCreate,
    db: AsyncSession = Depends(get_db_session),
):
    """
    Create a thought from `{"message": "..."}`.

    The message must be 5-140 characters without digits and must not
    already exist.
    """
    return await thought_service.create_thought(db, payload)


@router.post(
    "/{thought_id}/likes",
    response_model=ThoughtResponse,
    responses=_NOT_FOUND_OR_INVALID,
    summary="Like a thought",
)
async def like_thought(thought_id: str, db: AsyncSession = Depends(get_db_session)):
    """Increments hearts by one and returns the updated thought."""
    return await thought_service.like_thought(db, thought_id)


@router.patch(
    "/{thought_id}",
    response_model=ThoughtResponse,
    responses=_NOT_FOUND_OR_INVALID,
    summary="Partially update a thought",
)
async def update_thought(
    thought_id: str,
    patch: ThoughtPatch,
    db: AsyncSession = Depends(get_db_session),
):
    return await thought_service.update_thought(db, thought_id, patch)


@router.put(
    "/{thought_id}",
    response_model=ThoughtResponse,
    responses=_NOT_FOUND_OR_INVALID,
    summary="Replace a thought",
)
async def replace_thought(
    thought_id: str,
    replacement: ThoughtReplace,
    db: AsyncSession = Depends(get_db_session),
):
    return await thought_service.replace_thought(db, thought_id, replacement)


@router.delete(
    "/{thought_id}",
    response_model=ThoughtResponse,
    responses=_NOT_FOUND_OR_INVALID,
    summary="Delete a thought",
)
async def delete_thought(thought_id: str, db: AsyncSession = Depends(get_db_session)):
    """Deletes permanently and returns the removed thought."""
    return await thought_service.delete_thought(db, thought_id)
