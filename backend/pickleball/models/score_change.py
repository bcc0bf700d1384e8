from datetime import datetime, timezone
from typing import Optional

from sqlmodel import Field, SQLModel


class ScoreChange(SQLModel, table=True):
    """Append-only audit row: one per accepted score write. Never updated or deleted."""

    __tablename__ = "scorechange"

    id: Optional[int] = Field(default=None, primary_key=True)
    match_id: int = Field(foreign_key="match.id", index=True)
    play_date_id: int = Field(foreign_key="playdate.id", index=True)
    old_team1_score: Optional[int] = Field(default=None)
    old_team2_score: Optional[int] = Field(default=None)
    old_version: int
    new_team1_score: int
    new_team2_score: int
    new_version: int
    changed_by: int = Field(foreign_key="player.id")
    changed_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    reason: Optional[str] = Field(default=None)
