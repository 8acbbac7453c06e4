# src/duelrank/schemas/leaderboard.py

"""Ranking schemas."""

from pydantic import BaseModel, ConfigDict, Field

from .player import PlayerRead


class RankingEntry(BaseModel):
    """Single entry in the player ranking.

    Attributes:
        rank: Position in the ranking (1-indexed)
        player: The player with their rating and aggregates
        win_rate: wins / matches_played
    """

    rank: int = Field(..., ge=1, description="Position in ranking (1-indexed)")
    player: PlayerRead
    win_rate: float = Field(0.0, ge=0.0, le=1.0)

    model_config = ConfigDict(from_attributes=True)
