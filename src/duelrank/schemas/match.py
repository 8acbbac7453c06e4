# src/duelrank/schemas/match.py

"""Pydantic schemas for the Match resource."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from duelrank.db.models import MAX_ROW_ID, MIN_ROW_ID

from .player import PlayerSummary


class MatchCreate(BaseModel):
    """
    Properties to receive via API on create.

    Every id is optional at this layer so that a missing one reaches the
    match service and is reported as a missing-parameter error.
    """

    player1_id: int | None = Field(
        default=None, ge=MIN_ROW_ID, le=MAX_ROW_ID, description="First player"
    )
    player2_id: int | None = Field(
        default=None, ge=MIN_ROW_ID, le=MAX_ROW_ID, description="Second player"
    )
    winner_id: int | None = Field(
        default=None,
        ge=MIN_ROW_ID,
        le=MAX_ROW_ID,
        description="Must equal player1_id or player2_id",
    )


class MatchRead(BaseModel):
    """Properties to return to the client for a match."""

    id: int
    player1_id: int
    player2_id: int
    winner_id: int

    # Rating snapshots taken when the match was applied
    player1_rating_before: int
    player1_rating_after: int
    player2_rating_before: int
    player2_rating_after: int

    created_at: datetime

    # Usernames come from the players table, not from the match row
    player1: PlayerSummary
    player2: PlayerSummary
    winner: PlayerSummary

    model_config = ConfigDict(from_attributes=True)
