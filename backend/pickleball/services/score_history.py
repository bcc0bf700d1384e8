"""Read-only view over the score change audit log."""
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from sqlmodel import Session, select

from pickleball.errors import NotFoundError
from pickleball.models.match import Match
from pickleball.models.player import Player
from pickleball.models.score_change import ScoreChange


@dataclass
class ScoreHistoryEntry:
    id: int
    match_id: int
    old_team1_score: Optional[int]
    old_team2_score: Optional[int]
    old_version: int
    new_team1_score: int
    new_team2_score: int
    new_version: int
    changed_by: int
    changed_by_name: Optional[str]
    changed_at: datetime
    reason: Optional[str]


def get_score_history(session: Session, match_id: int) -> List[ScoreHistoryEntry]:
    """Score changes for a match, newest first, with the actor's player name."""
    if not session.get(Match, match_id):
        raise NotFoundError(f"Match {match_id} not found")

    rows = session.exec(
        select(ScoreChange, Player)
        .where(ScoreChange.match_id == match_id, ScoreChange.changed_by == Player.id)
        .order_by(ScoreChange.new_version.desc(), ScoreChange.id.desc())
    ).all()

    return [
        ScoreHistoryEntry(
            id=change.id,
            match_id=change.match_id,
            old_team1_score=change.old_team1_score,
            old_team2_score=change.old_team2_score,
            old_version=change.old_version,
            new_team1_score=change.new_team1_score,
            new_team2_score=change.new_team2_score,
            new_version=change.new_version,
            changed_by=change.changed_by,
            changed_by_name=player.name,
            changed_at=change.changed_at,
            reason=change.reason,
        )
        for change, player in rows
    ]
