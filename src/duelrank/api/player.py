# src/duelrank/api/player.py

"""API endpoints for players, rankings and per-player match history."""

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from duelrank.api.match import with_players
from duelrank.db.models import MAX_ROW_ID, MIN_ROW_ID, Match, Player
from duelrank.db.session import get_db
from duelrank.exceptions import PlayerAlreadyExistsError, PlayerNotFoundError
from duelrank.schemas import match as match_schema
from duelrank.schemas import player as player_schema
from duelrank.schemas.leaderboard import RankingEntry
from duelrank.schemas.pagination import PaginatedResponse, PlayerSortField, SortOrder

# Create an APIRouter instance for players
# - prefix="/players": All routes here will be prefixed with /players
# - tags=["Players"]: Groups these endpoints under "Players" in the API docs
router = APIRouter(prefix="/players", tags=["Players"])


@router.post(
    "/",
    response_model=player_schema.PlayerRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_player(
    player_in: player_schema.PlayerCreate, db: AsyncSession = Depends(get_db)
) -> Player:
    """
    Create a new player with the default rating.

    - **username**: The unique name for the player.

    Raises:
        409 Conflict: If a player with the same username already exists.
    """
    if await Player.find_by_username(db, player_in.username) is not None:
        raise PlayerAlreadyExistsError(player_in.username)

    # A concurrent registration of the same name still fails on the unique
    # index; the IntegrityError handler reports that as a conflict too.
    new_player = Player(**player_in.model_dump())
    db.add(new_player)
    await db.commit()
    await db.refresh(new_player)

    return new_player


@router.get("/", response_model=PaginatedResponse[player_schema.PlayerRead])
async def read_players(
    skip: int = Query(0, ge=0, description="Records to skip"),
    limit: int = Query(50, ge=1, le=100, description="Max records to return"),
    sort_by: PlayerSortField = Query(PlayerSortField.RATING, description="Sort field"),
    sort_order: SortOrder = Query(SortOrder.DESC, description="Sort direction"),
    db: AsyncSession = Depends(get_db),
) -> PaginatedResponse[player_schema.PlayerRead]:
    """
    Retrieve a paginated list of players, highest rated first by default.

    - **skip**: Number of records to skip (for pagination)
    - **limit**: Maximum number of records to return (1-100)
    - **sort_by**: Field to sort by (id, username, rating, matches_played, created_at)
    - **sort_order**: Sort direction (asc, desc)
    """
    total = (await db.execute(select(func.count(Player.id)))).scalar_one()

    # Apply sorting, with id as a stable tie-breaker
    sort_column = getattr(Player, sort_by.value)
    if sort_order == SortOrder.DESC:
        sort_column = sort_column.desc()

    query = select(Player).order_by(sort_column, Player.id).offset(skip).limit(limit)
    result = await db.execute(query)
    items = list(result.scalars().all())

    return PaginatedResponse(
        items=items,  # type: ignore[arg-type]
        total=total,
        skip=skip,
        limit=limit,
        has_more=(skip + len(items)) < total,
    )


@router.get("/ranking", response_model=list[RankingEntry])
async def read_ranking(
    limit: int = Query(100, ge=1, le=100, description="Max entries to return"),
    db: AsyncSession = Depends(get_db),
) -> list[RankingEntry]:
    """
    Rank every player who has played at least one match by rating.
    """
    query = (
        select(Player)
        .where(Player.matches_played > 0)
        .order_by(Player.rating.desc(), Player.id)
        .limit(limit)
    )
    result = await db.execute(query)
    players = list(result.scalars().all())

    return [
        RankingEntry(
            rank=position,
            player=player_schema.PlayerRead.model_validate(player),
            win_rate=player.wins / player.matches_played,
        )
        for position, player in enumerate(players, start=1)
    ]


@router.get("/{player_id}", response_model=player_schema.PlayerRead)
async def read_player(
    player_id: int = Path(..., ge=MIN_ROW_ID, le=MAX_ROW_ID),
    db: AsyncSession = Depends(get_db),
) -> Player:
    """
    Retrieve a single player by their ID.
    """
    player = await db.get(Player, player_id)
    if not player:
        raise PlayerNotFoundError(player_id)

    return player


@router.get(
    "/{player_id}/matches",
    response_model=PaginatedResponse[match_schema.MatchRead],
)
async def get_player_matches(
    player_id: int = Path(..., ge=MIN_ROW_ID, le=MAX_ROW_ID),
    skip: int = Query(0, ge=0, description="Records to skip"),
    limit: int = Query(50, ge=1, le=100, description="Max records to return"),
    db: AsyncSession = Depends(get_db),
) -> PaginatedResponse[match_schema.MatchRead]:
    """
    Get match history for a specific player, newest first.

    - **player_id**: The ID of the player
    - **skip**: Number of records to skip (for pagination)
    - **limit**: Maximum number of records to return (1-100)
    """
    player = await db.get(Player, player_id)
    if not player:
        raise PlayerNotFoundError(player_id)

    involves_player = or_(Match.player1_id == player_id, Match.player2_id == player_id)

    count_query = select(func.count(Match.id)).where(involves_player)
    total = (await db.execute(count_query)).scalar_one()

    query = with_players(
        select(Match)
        .where(involves_player)
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
