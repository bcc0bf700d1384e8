from typing import TYPE_CHECKING, Optional

from sqlalchemy import UniqueConstraint as SAUniqueConstraint
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from pickleball.models.play_date import PlayDate


class Court(SQLModel, table=True):
    __table_args__ = (SAUniqueConstraint("play_date_id", "court_number", name="uq_court_play_date_number"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    play_date_id: int = Field(foreign_key="playdate.id", index=True)
    court_number: int  # 1-based
    court_name: str

    play_date: "PlayDate" = Relationship(back_populates="courts")
