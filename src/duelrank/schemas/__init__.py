# src/duelrank/schemas/__init__.py

"""Pydantic schemas for API validation and serialization."""

from .leaderboard import RankingEntry
from .match import MatchCreate, MatchRead
from .pagination import PaginatedResponse, PlayerSortField, SortOrder
from .player import PlayerBase, PlayerCreate, PlayerRead, PlayerSummary

__all__ = [
    # Ranking
    "RankingEntry",
    # Match
    "MatchCreate",
    "MatchRead",
    # Pagination
    "PaginatedResponse",
    "PlayerSortField",
    "SortOrder",
    # Player
    "PlayerBase",
    "PlayerCreate",
    "PlayerRead",
    "PlayerSummary",
]
