"""Create players and matches tables

Revision ID: 20261017_initial
Revises:
Create Date: 2026-10-17

Creates the two tables the match service writes to. Store-level CHECK
constraints mirror the invariants the service maintains:
- a match is between two distinct players
- the winner is one of them
- wins never exceed matches played
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "20261017_initial"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create players and matches with their indexes."""
    # === PLAYERS ===
    op.create_table(
        "players",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("username", sa.String(), nullable=False, unique=True),
        sa.Column("rating", sa.Integer(), nullable=False, server_default="1500"),
        sa.Column("matches_played", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("wins", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("last_match_at", sa.DateTime(), nullable=True),
        sa.CheckConstraint(
            "length(username) > 0", name="ck_players_username_not_empty"
        ),
        sa.CheckConstraint("matches_played >= 0", name="ck_players_matches_played"),
        sa.CheckConstraint(
            "wins >= 0 AND wins <= matches_played", name="ck_players_wins"
        ),
    )
    op.create_index("ix_players_rating", "players", ["rating"])

    # === MATCHES ===
    op.create_table(
        "matches",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "player1_id", sa.Integer(), sa.ForeignKey("players.id"), nullable=False
        ),
        sa.Column(
            "player2_id", sa.Integer(), sa.ForeignKey("players.id"), nullable=False
        ),
        sa.Column(
            "winner_id", sa.Integer(), sa.ForeignKey("players.id"), nullable=False
        ),
        sa.Column("player1_rating_before", sa.Integer(), nullable=False),
        sa.Column("player1_rating_after", sa.Integer(), nullable=False),
        sa.Column("player2_rating_before", sa.Integer(), nullable=False),
        sa.Column("player2_rating_after", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint(
            "player1_id <> player2_id", name="ck_matches_distinct_players"
        ),
        sa.CheckConstraint(
            "winner_id = player1_id OR winner_id = player2_id",
            name="ck_matches_winner_is_participant",
        ),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_matches_player1_id", "matches", ["player1_id"])
    op.create_index("ix_matches_player2_id", "matches", ["player2_id"])
    op.create_index("ix_matches_created_at", "matches", ["created_at"])


def downgrade() -> None:
    """Drop matches, then players."""
    op.drop_index("ix_matches_created_at", "matches")
    op.drop_index("ix_matches_player2_id", "matches")
    op.drop_index("ix_matches_player1_id", "matches")
    op.drop_table("matches")

    op.drop_index("ix_players_rating", "players")
    op.drop_table("players")
