"""Initial schema: players, play dates, courts, partnerships, matches, score changes

Revision ID: 001_initial
Revises:
Create Date: 2026-05-01 00:00:00.000000

"""

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision = "001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Create player table
    op.create_table(
        "player",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("is_project_owner", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_player_name", "player", ["name"], unique=True)
    op.create_index("ix_player_email", "player", ["email"], unique=True)

    # Create playdate table
    op.create_table(
        "playdate",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("event_date", sa.Date(), nullable=False),
        sa.Column("organizer_id", sa.Integer(), nullable=False),
        sa.Column("num_courts", sa.Integer(), nullable=False),
        sa.Column("win_condition", sa.String(), nullable=False),
        sa.Column("target_score", sa.Integer(), nullable=False, server_default="11"),
        sa.Column("status", sa.String(), nullable=False, server_default="scheduled"),
        sa.Column("schedule_locked", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["organizer_id"], ["player.id"]),
    )

    # Create court table
    op.create_table(
        "court",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("play_date_id", sa.Integer(), nullable=False),
        sa.Column("court_number", sa.Integer(), nullable=False),
        sa.Column("court_name", sa.String(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["play_date_id"], ["playdate.id"]),
        sa.UniqueConstraint("play_date_id", "court_number", name="uq_court_play_date_number"),
    )
    op.create_index("ix_court_play_date_id", "court", ["play_date_id"])

    # Create partnership table
    op.create_table(
        "partnership",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("play_date_id", sa.Integer(), nullable=False),
        sa.Column("player1_id", sa.Integer(), nullable=False),
        sa.Column("player2_id", sa.Integer(), nullable=False),
        sa.Column("partnership_name", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["play_date_id"], ["playdate.id"]),
        sa.ForeignKeyConstraint(["player1_id"], ["player.id"]),
        sa.ForeignKeyConstraint(["player2_id"], ["player.id"]),
        sa.UniqueConstraint("play_date_id", "player1_id", "player2_id", name="uq_partnership_pair"),
        sa.CheckConstraint("player1_id != player2_id", name="ck_partnership_distinct_players"),
    )
    op.create_index("ix_partnership_play_date_id", "partnership", ["play_date_id"])

    # Create match table
    op.create_table(
        "match",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("play_date_id", sa.Integer(), nullable=False),
        sa.Column("court_id", sa.Integer(), nullable=False),
        sa.Column("round_number", sa.Integer(), nullable=False),
        sa.Column("partnership1_id", sa.Integer(), nullable=False),
        sa.Column("partnership2_id", sa.Integer(), nullable=False),
        sa.Column("team1_score", sa.Integer(), nullable=True),
        sa.Column("team2_score", sa.Integer(), nullable=True),
        sa.Column("winning_partnership_id", sa.Integer(), nullable=True),
        sa.Column("status", sa.String(), nullable=False, server_default="waiting"),
        sa.Column("version", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("recorded_by", sa.Integer(), nullable=True),
        sa.Column("recorded_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["play_date_id"], ["playdate.id"]),
        sa.ForeignKeyConstraint(["court_id"], ["court.id"]),
        sa.ForeignKeyConstraint(["partnership1_id"], ["partnership.id"]),
        sa.ForeignKeyConstraint(["partnership2_id"], ["partnership.id"]),
        sa.ForeignKeyConstraint(["winning_partnership_id"], ["partnership.id"]),
        sa.ForeignKeyConstraint(["recorded_by"], ["player.id"]),
        sa.UniqueConstraint("play_date_id", "round_number", "court_id", name="uq_match_round_court"),
        sa.CheckConstraint("partnership1_id != partnership2_id", name="ck_match_distinct_partnerships"),
        sa.CheckConstraint(
            "(team1_score IS NULL AND team2_score IS NULL) OR (team1_score >= 0 AND team2_score >= 0)",
            name="ck_match_score_pair",
        ),
        sa.CheckConstraint("version >= 0", name="ck_match_version"),
    )
    op.create_index("ix_match_play_date_id", "match", ["play_date_id"])

    # Create scorechange table (append-only)
    op.create_table(
        "scorechange",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("match_id", sa.Integer(), nullable=False),
        sa.Column("play_date_id", sa.Integer(), nullable=False),
        sa.Column("old_team1_score", sa.Integer(), nullable=True),
        sa.Column("old_team2_score", sa.Integer(), nullable=True),
        sa.Column("old_version", sa.Integer(), nullable=False),
        sa.Column("new_team1_score", sa.Integer(), nullable=False),
        sa.Column("new_team2_score", sa.Integer(), nullable=False),
        sa.Column("new_version", sa.Integer(), nullable=False),
        sa.Column("changed_by", sa.Integer(), nullable=False),
        sa.Column("changed_at", sa.DateTime(), nullable=False),
        sa.Column("reason", sa.String(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["match_id"], ["match.id"]),
        sa.ForeignKeyConstraint(["play_date_id"], ["playdate.id"]),
        sa.ForeignKeyConstraint(["changed_by"], ["player.id"]),
    )
    op.create_index("ix_scorechange_match_id", "scorechange", ["match_id"])
    op.create_index("ix_scorechange_play_date_id", "scorechange", ["play_date_id"])


def downgrade() -> None:
    op.drop_index("ix_scorechange_play_date_id", table_name="scorechange")
    op.drop_index("ix_scorechange_match_id", table_name="scorechange")
    op.drop_table("scorechange")
    op.drop_index("ix_match_play_date_id", table_name="match")
    op.drop_table("match")
    op.drop_index("ix_partnership_play_date_id", table_name="partnership")
    op.drop_table("partnership")
    op.drop_index("ix_court_play_date_id", table_name="court")
    op.drop_table("court")
    op.drop_table("playdate")
    op.drop_index("ix_player_email", table_name="player")
    op.drop_index("ix_player_name", table_name="player")
    op.drop_table("player")
