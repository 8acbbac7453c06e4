# src/duelrank/exceptions.py

"""Custom exception hierarchy for DuelRank.

This module provides a structured exception hierarchy that enables:
1. Proper HTTP status code mapping in API endpoints
2. Detailed error context for logging and debugging
3. Clear distinction between input, lookup and storage failures
"""

from __future__ import annotations


class DuelRankError(Exception):
    """Base exception for all DuelRank errors.

    Attributes:
        message: Human-readable error description
        details: Optional dict with additional context for logging/debugging
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)


# =============================================================================
# Validation Errors (HTTP 400)
# =============================================================================


class ValidationError(DuelRankError):
    """Base class for malformed or self-contradictory match submissions.

    Raised before any lookup; always safe to retry after correcting input.
    """

    pass


class MissingParametersError(ValidationError):
    """Raised when player1_id, player2_id or winner_id is absent."""

    def __init__(self, missing: list[str]) -> None:
        super().__init__(
            message="missing parameters: " + ", ".join(missing),
            details={"missing": missing},
        )


class SelfMatchError(ValidationError):
    """Raised when a player is reported as playing against themselves."""

    def __init__(self, player_id: int) -> None:
        super().__init__(
            message=f"self-match: player {player_id} cannot play against themselves",
            details={"player_id": player_id},
        )


class WinnerNotParticipantError(ValidationError):
    """Raised when the winner is neither player1 nor player2."""

    def __init__(self, winner_id: int, player1_id: int, player2_id: int) -> None:
        super().__init__(
            message=f"winner not a participant: {winner_id} is not "
            f"{player1_id} or {player2_id}",
            details={
                "winner_id": winner_id,
                "player1_id": player1_id,
                "player2_id": player2_id,
            },
        )


# =============================================================================
# Conflict Errors (HTTP 409)
# =============================================================================


class ConflictError(DuelRankError):
    """Base class for writes that clash with existing data."""

    pass


class PlayerAlreadyExistsError(ConflictError):
    """Raised when a username is already registered."""

    def __init__(self, username: str) -> None:
        super().__init__(
            message=f"Player with username '{username}' already exists",
            details={"username": username},
        )


# =============================================================================
# Resource Not Found Errors (HTTP 404)
# =============================================================================


class ResourceNotFoundError(DuelRankError):
    """Base class for resource not found errors."""

    pass


class PlayerNotFoundError(ResourceNotFoundError):
    """Raised when a player ID does not exist.

    ``position`` tells which side of a match submission referenced the
    missing player (1 or 2); it is None for plain lookups.
    """

    def __init__(self, player_id: int, position: int | None = None) -> None:
        if position is None:
            message = f"Player with ID {player_id} not found"
        else:
            message = f"Player {position} with ID {player_id} not found"
        super().__init__(
            message=message,
            details={"player_id": player_id, "position": position},
        )
        self.player_id = player_id
        self.position = position


class MatchNotFoundError(ResourceNotFoundError):
    """Raised when a match ID does not exist."""

    def __init__(self, match_id: int) -> None:
        super().__init__(
            message=f"Match with ID {match_id} not found",
            details={"match_id": match_id},
        )


# =============================================================================
# Persistence Errors (HTTP 500)
# =============================================================================


class PersistenceError(DuelRankError):
    """Raised when the store fails after validation passed.

    The unit of work has been rolled back when this is raised, so the whole
    submission can be retried.
    """

    pass
