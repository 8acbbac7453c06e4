# src/duelrank/db/models.py

"""Database models for the DuelRank application."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import (
    CheckConstraint,
    ForeignKey,
    String,
    select,
)
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import (
    Mapped,
    declarative_base,
    mapped_column,
    relationship,
)

from duelrank.rating.elo_engine import DEFAULT_RATING

Base = declarative_base()

# Row ids are signed 64-bit integers in SQLite and in BIGINT columns
MIN_ROW_ID = -(2**63)
MAX_ROW_ID = 2**63 - 1


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ===============================================
# Core Table: Player
# ===============================================


class Player(Base):
    """A registered competitor and their running aggregates.

    After creation, only the match service mutates ``rating``,
    ``matches_played``, ``wins`` and ``last_match_at``.
    """

    __tablename__ = "players"
    id: Mapped[int] = mapped_column(primary_key=True)
    username: Mapped[str] = mapped_column(String, unique=True, nullable=False)
    rating: Mapped[int] = mapped_column(
        default=DEFAULT_RATING, nullable=False, index=True
    )
    matches_played: Mapped[int] = mapped_column(default=0, nullable=False)
    wins: Mapped[int] = mapped_column(default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    last_match_at: Mapped[datetime | None] = mapped_column(default=None, nullable=True)

    __table_args__ = (
        CheckConstraint("length(username) > 0", name="ck_players_username_not_empty"),
        CheckConstraint("matches_played >= 0", name="ck_players_matches_played"),
        CheckConstraint("wins >= 0 AND wins <= matches_played", name="ck_players_wins"),
    )

    def __init__(self, username: str, **kw: Any):
        super().__init__(**kw)
        self.username = username

    @classmethod
    async def find_by_username(
        cls, db: AsyncSession, username: str
    ) -> "Player | None":
        """Find a player by their unique username."""
        result = await db.execute(select(cls).where(cls.username == username))
        return result.scalar_one_or_none()


# ===============================================
# Match Table
# ===============================================


class Match(Base):
    """One decided game between two distinct players.

    Rating snapshots are captured when the match is applied; rows are
    never updated or deleted afterwards.
    """

    __tablename__ = "matches"
    id: Mapped[int] = mapped_column(primary_key=True)
    player1_id: Mapped[int] = mapped_column(
        ForeignKey("players.id"), nullable=False, index=True
    )
    player2_id: Mapped[int] = mapped_column(
        ForeignKey("players.id"), nullable=False, index=True
    )
    winner_id: Mapped[int] = mapped_column(ForeignKey("players.id"), nullable=False)

    player1_rating_before: Mapped[int] = mapped_column(nullable=False)
    player1_rating_after: Mapped[int] = mapped_column(nullable=False)
    player2_rating_before: Mapped[int] = mapped_column(nullable=False)
    player2_rating_after: Mapped[int] = mapped_column(nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        default=utcnow, nullable=False, index=True
    )

    player1: Mapped["Player"] = relationship(foreign_keys=[player1_id])
    player2: Mapped["Player"] = relationship(foreign_keys=[player2_id])
    winner: Mapped["Player"] = relationship(foreign_keys=[winner_id])

    # AUTOINCREMENT keeps SQLite from reusing ids of rolled back inserts
    __table_args__ = (
        CheckConstraint("player1_id <> player2_id", name="ck_matches_distinct_players"),
        CheckConstraint(
            "winner_id = player1_id OR winner_id = player2_id",
            name="ck_matches_winner_is_participant",
        ),
        {"sqlite_autoincrement": True},
    )
