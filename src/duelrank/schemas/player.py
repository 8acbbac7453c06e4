# src/duelrank/schemas/player.py

"""Pydantic schemas for the Player resource."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


# ===============================================
# Base Schema: Defines shared attributes for creation
# ===============================================
class PlayerBase(BaseModel):
    """Shared properties for a player."""

    username: str = Field(..., min_length=1, description="Unique, immutable name")


# ===============================================
# Create Schema: Inherits the base properties
# ===============================================
class PlayerCreate(PlayerBase):
    """Properties to receive via API on create."""

    pass


# ===============================================
# Read Schemas: Define attributes for returning data
# ===============================================
class PlayerSummary(PlayerBase):
    """Minimal player reference embedded in match responses."""

    id: int

    model_config = ConfigDict(from_attributes=True)


class PlayerRead(PlayerSummary):
    """Properties to return to the client."""

    rating: int
    matches_played: int = Field(..., ge=0)
    wins: int = Field(..., ge=0)
    created_at: datetime
    last_match_at: datetime | None = None

    # Enable ORM mode for this schema
    model_config = ConfigDict(from_attributes=True)
