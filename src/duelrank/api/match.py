# src/duelrank/api/match.py

"""API endpoints for recording and reading matches."""

from typing import AsyncGenerator

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from duelrank.db.models import MAX_ROW_ID, MIN_ROW_ID, Match
from duelrank.db.session import get_db
from duelrank.db.unit_of_work import MatchUnitOfWork
from duelrank.exceptions import MatchNotFoundError
from duelrank.schemas import match as match_schema
from duelrank.schemas.pagination import PaginatedResponse
from duelrank.services import match_service

# Create an APIRouter instance for matches
router = APIRouter(prefix="/matches", tags=["Matches"])


async def get_unit_of_work(
    db: AsyncSession = Depends(get_db),
) -> AsyncGenerator[MatchUnitOfWork, None]:
    """FastAPI dependency wrapping the request session in a unit of work."""
    yield MatchUnitOfWork(db)


def with_players(query: Select) -> Select:
    """Eager load the three player relations a MatchRead needs."""
    return query.options(
        selectinload(Match.player1),
        selectinload(Match.player2),
        selectinload(Match.winner),
    )


@router.get("/", response_model=PaginatedResponse[match_schema.MatchRead])
async def read_matches(
    skip: int = Query(0, ge=0, description="Records to skip"),
    limit: int = Query(50, ge=1, le=100, description="Max records to return"),
    db: AsyncSession = Depends(get_db),
) -> PaginatedResponse[match_schema.MatchRead]:
    """
    Retrieve the match history, newest first.

    - **skip**: Number of records to skip (for pagination)
    - **limit**: Maximum number of records to return (1-100)
    """
    total = (await db.execute(select(func.count(Match.id)))).scalar_one()

    # Ids grow with creation time, so they break created_at ties
    query = with_players(
        select(Match)
        .order_by(Match.created_at.desc(), Match.id.desc())
        .offset(skip)
        .limit(limit)
    )
    result = await db.execute(query)
    items = list(result.scalars().all())

    return PaginatedResponse(
        items=items,  # type: ignore[arg-type]
        total=total,
        skip=skip,
        limit=limit,
        has_more=(skip + len(items)) < total,
    )


@router.post(
    "/", response_model=match_schema.MatchRead, status_code=status.HTTP_201_CREATED
)
async def create_match(
    match_in: match_schema.MatchCreate,
    uow: MatchUnitOfWork = Depends(get_unit_of_work),
) -> Match:
    """
    Record a match, update both players' ratings, and return the match.

    Service errors are mapped by the application's exception handlers:

    - 400 if an id is missing, the players are the same, or the winner is
      not one of them
    - 404 if either player doesn't exist
    - 500 if the store failed; nothing was recorded and the request can be
      retried
    """
    return await match_service.record_match(
        uow,
        match_in.player1_id,
        match_in.player2_id,
        match_in.winner_id,
    )


@router.get("/{match_id}", response_model=match_schema.MatchRead)
async def read_match(
    match_id: int = Path(..., ge=MIN_ROW_ID, le=MAX_ROW_ID),
    db: AsyncSession = Depends(get_db),
) -> Match:
    """
    Retrieve a single match by its ID, including the players' usernames.
    """
    result = await db.execute(with_players(select(Match).where(Match.id == match_id)))
    match = result.scalar_one_or_none()

    if not match:
        raise MatchNotFoundError(match_id)

    return match
