# src/duelrank/services/match_service.py

"""Business logic for recording matches."""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError

from duelrank.db import models
from duelrank.db.unit_of_work import MatchUnitOfWork
from duelrank.exceptions import (
    MissingParametersError,
    PersistenceError,
    PlayerNotFoundError,
    SelfMatchError,
    WinnerNotParticipantError,
)
from duelrank.rating import elo_engine
from duelrank.services.player_locks import PlayerLockRegistry, player_locks

logger = logging.getLogger(__name__)


def _validate_submission(
    player1_id: int | None, player2_id: int | None, winner_id: int | None
) -> None:
    """
    Checks the shape of a submission without touching the store.

    Raises:
        MissingParametersError: If any id is absent (None or 0)
        SelfMatchError: If both sides are the same player
        WinnerNotParticipantError: If the winner is not one of the two players
    """
    provided = {
        "player1_id": player1_id,
        "player2_id": player2_id,
        "winner_id": winner_id,
    }
    missing = [name for name, value in provided.items() if not value]
    if missing:
        raise MissingParametersError(missing)

    assert player1_id is not None and player2_id is not None
    if player1_id == player2_id:
        raise SelfMatchError(player1_id)

    if winner_id not in (player1_id, player2_id):
        assert winner_id is not None
        raise WinnerNotParticipantError(winner_id, player1_id, player2_id)


async def _lookup_players(
    uow: MatchUnitOfWork, player1_id: int, player2_id: int
) -> tuple[models.Player, models.Player]:
    """
    Loads and row-locks both players, lower id first.

    Raises:
        PlayerNotFoundError: For player 1 first if both are missing
    """
    found: dict[int, models.Player | None] = {}
    for player_id in sorted((player1_id, player2_id)):
        found[player_id] = await uow.get_player(player_id, for_update=True)

    player1 = found[player1_id]
    if player1 is None:
        raise PlayerNotFoundError(player1_id, position=1)
    player2 = found[player2_id]
    if player2 is None:
        raise PlayerNotFoundError(player2_id, position=2)
    return player1, player2


async def record_match(
    uow: MatchUnitOfWork,
    player1_id: int | None,
    player2_id: int | None,
    winner_id: int | None,
    *,
    locks: PlayerLockRegistry = player_locks,
) -> models.Match:
    """
    Records a decided match and applies its rating change to both players.

    This service is responsible for:
    1. Validating the submission (ids present, distinct, winner participates)
    2. Serializing against other submissions that share a player
    3. Reading both players' current ratings
    4. Computing the new ratings with the Elo engine
    5. Inserting the match and updating both players as one unit of work

    If any step after validation fails, the unit of work is rolled back and
    no partial state is visible. The call is not idempotent: retrying after
    a successful commit records the match a second time.

    Raises:
        ValidationError: If the submission is malformed (nothing is read)
        PlayerNotFoundError: If either player does not exist
        PersistenceError: If the store fails; the whole call may be retried
    """
    logger.info(
        "Recording match",
        extra={
            "player1_id": player1_id,
            "player2_id": player2_id,
            "winner_id": winner_id,
        },
    )

    _validate_submission(player1_id, player2_id, winner_id)
    assert player1_id is not None and player2_id is not None

    async with locks.hold(player1_id, player2_id):
        try:
            async with uow:
                logger.debug("Looking up players")
                player1, player2 = await _lookup_players(uow, player1_id, player2_id)

                logger.debug(
                    "Computing ratings",
                    extra={
                        "player1_rating": player1.rating,
                        "player2_rating": player2.rating,
                    },
                )
                player1_won = winner_id == player1.id
                new_rating1, new_rating2 = elo_engine.compute_new_ratings(
                    player1.rating, player2.rating, player1_won
                )

                logger.debug("Committing match")
                committed_at = models.utcnow()
                new_match = await uow.insert_match(
                    player1_id=player1.id,
                    player2_id=player2.id,
                    winner_id=player1.id if player1_won else player2.id,
                    player1_rating_before=player1.rating,
                    player1_rating_after=new_rating1,
                    player2_rating_before=player2.rating,
                    player2_rating_after=new_rating2,
                    created_at=committed_at,
                )
                await uow.update_player_after_match(
                    player1, new_rating1, player1_won, committed_at
                )
                await uow.update_player_after_match(
                    player2, new_rating2, not player1_won, committed_at
                )

                # Hydrate before commit so no read can fail after it
                recorded = await uow.load_match(new_match.id)
                await uow.commit()

        except PlayerNotFoundError as e:
            logger.warning("Match rejected: %s", e.message, extra=e.details)
            raise

        except SQLAlchemyError as e:
            logger.error(
                "Failed to record match, rolled back",
                extra={
                    "player1_id": player1_id,
                    "player2_id": player2_id,
                    "error": str(e),
                },
                exc_info=True,
            )
            raise PersistenceError(
                "Failed to record match",
                details={"player1_id": player1_id, "player2_id": player2_id},
            ) from e

    logger.info(
        "Match recorded",
        extra={
            "match_id": recorded.id,
            "player1_rating_after": recorded.player1_rating_after,
            "player2_rating_after": recorded.player2_rating_after,
        },
    )
    return recorded
