from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional, Tuple

from sqlalchemy import CheckConstraint
from sqlalchemy import UniqueConstraint as SAUniqueConstraint
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from pickleball.models.play_date import PlayDate
    from pickleball.models.player import Player


class Partnership(SQLModel, table=True):
    __table_args__ = (
        SAUniqueConstraint("play_date_id", "player1_id", "player2_id", name="uq_partnership_pair"),
        CheckConstraint("player1_id != player2_id", name="ck_partnership_distinct_players"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    play_date_id: int = Field(foreign_key="playdate.id", index=True)
    player1_id: int = Field(foreign_key="player.id")
    player2_id: int = Field(foreign_key="player.id")
    partnership_name: str  # display label, e.g. "Alice & Bob"
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Relationships
    play_date: "PlayDate" = Relationship(back_populates="partnerships")
    player1: Optional["Player"] = Relationship(sa_relationship_kwargs={"foreign_keys": "Partnership.player1_id"})
    player2: Optional["Player"] = Relationship(sa_relationship_kwargs={"foreign_keys": "Partnership.player2_id"})

    @property
    def player_ids(self) -> Tuple[int, int]:
        return (self.player1_id, self.player2_id)
