from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, Optional

from sqlalchemy import CheckConstraint, String
from sqlalchemy import UniqueConstraint as SAUniqueConstraint
from sqlmodel import Column, Field, Relationship, SQLModel

if TYPE_CHECKING:
    from pickleball.models.court import Court
    from pickleball.models.partnership import Partnership
    from pickleball.models.play_date import PlayDate


class MatchStatus(str, Enum):
    waiting = "waiting"
    in_progress = "in_progress"
    completed = "completed"
    disputed = "disputed"  # set out-of-band; never by score entry


class Match(SQLModel, table=True):
    __table_args__ = (
        SAUniqueConstraint("play_date_id", "round_number", "court_id", name="uq_match_round_court"),
        CheckConstraint("partnership1_id != partnership2_id", name="ck_match_distinct_partnerships"),
        CheckConstraint(
            "(team1_score IS NULL AND team2_score IS NULL) OR (team1_score >= 0 AND team2_score >= 0)",
            name="ck_match_score_pair",
        ),
        CheckConstraint("version >= 0", name="ck_match_version"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    play_date_id: int = Field(foreign_key="playdate.id", index=True)
    court_id: int = Field(foreign_key="court.id")
    round_number: int  # 1-based
    partnership1_id: int = Field(foreign_key="partnership.id")
    partnership2_id: int = Field(foreign_key="partnership.id")

    # Score pair: both null until recorded
    team1_score: Optional[int] = Field(default=None)
    team2_score: Optional[int] = Field(default=None)
    winning_partnership_id: Optional[int] = Field(default=None, foreign_key="partnership.id")
    status: MatchStatus = Field(default=MatchStatus.waiting, sa_column=Column(String, nullable=False))

    # Optimistic concurrency: bumped by exactly one on every accepted score write
    version: int = Field(default=0)
    recorded_by: Optional[int] = Field(default=None, foreign_key="player.id")
    recorded_at: Optional[datetime] = Field(default=None)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Relationships
    play_date: "PlayDate" = Relationship(back_populates="matches")
    court: Optional["Court"] = Relationship()
    partnership1: Optional["Partnership"] = Relationship(
        sa_relationship_kwargs={"foreign_keys": "Match.partnership1_id"}
    )
    partnership2: Optional["Partnership"] = Relationship(
        sa_relationship_kwargs={"foreign_keys": "Match.partnership2_id"}
    )
