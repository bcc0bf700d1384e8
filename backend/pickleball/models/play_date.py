from datetime import date, datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, List, Optional, Union

from sqlalchemy import String
from sqlmodel import Column, Field, Relationship, SQLModel

if TYPE_CHECKING:
    from pickleball.models.court import Court
    from pickleball.models.match import Match
    from pickleball.models.partnership import Partnership


class WinCondition(str, Enum):
    first_to_target = "first_to_target"
    win_by_2 = "win_by_2"

    @classmethod
    def parse(cls, value: Union[str, "WinCondition"]) -> "WinCondition":
        """Normalize raw input ("win-by-2", "WIN_BY_2", ...) to a member."""
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower().replace("-", "_").replace(" ", "_")
        try:
            return cls(key)
        except ValueError:
            raise ValueError(f"Unknown win condition: {value!r}") from None


class PlayDateStatus(str, Enum):
    scheduled = "scheduled"
    active = "active"
    completed = "completed"
    cancelled = "cancelled"


class PlayDate(SQLModel, table=True):
    __tablename__ = "playdate"

    id: Optional[int] = Field(default=None, primary_key=True)
    event_date: date
    organizer_id: int = Field(foreign_key="player.id")
    num_courts: int
    win_condition: WinCondition = Field(sa_column=Column(String, nullable=False))
    target_score: int = Field(default=11)
    status: PlayDateStatus = Field(default=PlayDateStatus.scheduled, sa_column=Column(String, nullable=False))
    schedule_locked: bool = Field(default=False)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Relationships
    courts: List["Court"] = Relationship(back_populates="play_date")
    partnerships: List["Partnership"] = Relationship(back_populates="play_date")
    matches: List["Match"] = Relationship(back_populates="play_date")
