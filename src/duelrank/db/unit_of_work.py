# src/duelrank/db/unit_of_work.py

"""Transactional unit of work for recording a match.

One unit covers the match insert and both player updates. Leaving the
``async with`` block without calling ``commit()`` rolls everything back,
whether the block exited through an exception, a cancellation or a plain
return.
"""

from __future__ import annotations

import logging
from datetime import datetime
from types import TracebackType

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from duelrank.db import models

logger = logging.getLogger(__name__)


class MatchUnitOfWork:
    """Wraps an AsyncSession as a single all-or-nothing unit of work."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.committed = False

    async def __aenter__(self) -> "MatchUnitOfWork":
        await self.begin()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if not self.committed:
            await self.rollback()

    async def begin(self) -> None:
        """Start the atomic unit, joining one the session already opened."""
        self.committed = False
        if not self.session.in_transaction():
            await self.session.begin()

    async def commit(self) -> None:
        await self.session.commit()
        self.committed = True

    async def rollback(self) -> None:
        if self.session.in_transaction():
            await self.session.rollback()
            logger.debug("Unit of work rolled back")

    async def get_player(
        self, player_id: int, *, for_update: bool = False
    ) -> models.Player | None:
        """Fetch a player row, optionally locking it until the unit ends.

        ``populate_existing`` makes sure a row cached in the session
        identity map is reloaded with its latest committed rating. Ids the
        store cannot represent are reported as absent.
        """
        if not models.MIN_ROW_ID <= player_id <= models.MAX_ROW_ID:
            return None

        query = (
            select(models.Player)
            .where(models.Player.id == player_id)
            .execution_options(populate_existing=True)
        )
        if for_update:
            query = query.with_for_update()
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def insert_match(
        self,
        *,
        player1_id: int,
        player2_id: int,
        winner_id: int,
        player1_rating_before: int,
        player1_rating_after: int,
        player2_rating_before: int,
        player2_rating_after: int,
        created_at: datetime,
    ) -> models.Match:
        """Add a match row and flush it so it receives its id."""
        match = models.Match(
            player1_id=player1_id,
            player2_id=player2_id,
            winner_id=winner_id,
            player1_rating_before=player1_rating_before,
            player1_rating_after=player1_rating_after,
            player2_rating_before=player2_rating_before,
            player2_rating_after=player2_rating_after,
            created_at=created_at,
        )
        self.session.add(match)
        await self.session.flush()
        return match

    async def update_player_after_match(
        self,
        player: models.Player,
        new_rating: int,
        is_winner: bool,
        committed_at: datetime,
    ) -> None:
        """Apply one match result to a player's aggregates."""
        player.rating = new_rating
        player.matches_played += 1
        if is_winner:
            player.wins += 1
        player.last_match_at = committed_at
        self.session.add(player)
        await self.session.flush()

    async def load_match(self, match_id: int) -> models.Match:
        """Load a match with the three player relations for serialization."""
        result = await self.session.execute(
            select(models.Match)
            .where(models.Match.id == match_id)
            .execution_options(populate_existing=True)
            .options(
                selectinload(models.Match.player1),
                selectinload(models.Match.player2),
                selectinload(models.Match.winner),
            )
        )
        return result.scalar_one()
