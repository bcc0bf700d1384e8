"""
Persistence seams for score recording.

The coordinator only talks to these interfaces:
- MatchStore: read a match and conditionally update it (compare-and-swap on version)
- AuditSink: append-only score change history

SqlMatchStore / SqlAuditSink implement them over a SQLModel session. The
CAS is a single UPDATE ... WHERE id = :id AND version = :expected; the
affected row count decides the winner when writers race.
"""
from dataclasses import dataclass, replace
from datetime import datetime
from typing import List, Optional, Protocol

from sqlalchemy import update
from sqlmodel import Session, select

from pickleball.errors import NotFoundError
from pickleball.models.match import Match, MatchStatus
from pickleball.models.play_date import PlayDate
from pickleball.models.score_change import ScoreChange
from pickleball.services.score_validation import ScoreConfig


@dataclass(frozen=True)
class MatchSnapshot:
    id: int
    play_date_id: int
    partnership1_id: int
    partnership2_id: int
    team1_score: Optional[int]
    team2_score: Optional[int]
    winning_partnership_id: Optional[int]
    status: MatchStatus
    version: int
    recorded_by: Optional[int] = None
    recorded_at: Optional[datetime] = None

    @classmethod
    def from_match(cls, match: Match) -> "MatchSnapshot":
        return cls(
            id=match.id,
            play_date_id=match.play_date_id,
            partnership1_id=match.partnership1_id,
            partnership2_id=match.partnership2_id,
            team1_score=match.team1_score,
            team2_score=match.team2_score,
            winning_partnership_id=match.winning_partnership_id,
            status=MatchStatus(match.status),
            version=match.version,
            recorded_by=match.recorded_by,
            recorded_at=match.recorded_at,
        )


@dataclass(frozen=True)
class ScoreWrite:
    """Column values applied by a successful compare-and-swap (version is bumped by the store)."""

    team1_score: int
    team2_score: int
    winning_partnership_id: Optional[int]
    status: MatchStatus
    recorded_by: int
    recorded_at: datetime


@dataclass(frozen=True)
class ScoreChangeRecord:
    match_id: int
    play_date_id: int
    old_team1_score: Optional[int]
    old_team2_score: Optional[int]
    old_version: int
    new_team1_score: int
    new_team2_score: int
    new_version: int
    changed_by: int
    changed_at: datetime
    reason: Optional[str] = None
    id: Optional[int] = None


class MatchStore(Protocol):
    def get_match(self, match_id: int) -> Optional[MatchSnapshot]:
        ...

    def get_score_config(self, play_date_id: int) -> ScoreConfig:
        ...

    def compare_and_swap_score(self, match_id: int, expected_version: int, write: ScoreWrite) -> bool:
        """Apply write and set version to expected_version + 1 only if the stored version equals expected_version.

        Returns False when the version no longer matches. The row is not read back:
        another writer may already have moved it on by the time this returns.
        """
        ...


class AuditSink(Protocol):
    def append(self, record: ScoreChangeRecord) -> ScoreChangeRecord:
        ...

    def list_for_match(self, match_id: int) -> List[ScoreChangeRecord]:
        ...


class SqlMatchStore:
    def __init__(self, session: Session):
        self.session = session

    def get_match(self, match_id: int) -> Optional[MatchSnapshot]:
        # populate_existing: another session may have bumped the version since this one cached the row
        match = self.session.get(Match, match_id, populate_existing=True)
        return MatchSnapshot.from_match(match) if match else None

    def get_score_config(self, play_date_id: int) -> ScoreConfig:
        play_date = self.session.get(PlayDate, play_date_id)
        if not play_date:
            raise NotFoundError(f"Play date {play_date_id} not found")
        return ScoreConfig.for_play_date(play_date)

    def compare_and_swap_score(self, match_id: int, expected_version: int, write: ScoreWrite) -> bool:
        stmt = (
            update(Match)
            .where(Match.id == match_id, Match.version == expected_version)
            .values(
                team1_score=write.team1_score,
                team2_score=write.team2_score,
                winning_partnership_id=write.winning_partnership_id,
                status=MatchStatus(write.status).value,
                recorded_by=write.recorded_by,
                recorded_at=write.recorded_at,
                updated_at=write.recorded_at,
                version=expected_version + 1,
            )
            .execution_options(synchronize_session=False)
        )
        try:
            result = self.session.execute(stmt)
            if result.rowcount != 1:
                self.session.rollback()
                return False
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        return True


class SqlAuditSink:
    def __init__(self, session: Session):
        self.session = session

    def append(self, record: ScoreChangeRecord) -> ScoreChangeRecord:
        row = ScoreChange(
            match_id=record.match_id,
            play_date_id=record.play_date_id,
            old_team1_score=record.old_team1_score,
            old_team2_score=record.old_team2_score,
            old_version=record.old_version,
            new_team1_score=record.new_team1_score,
            new_team2_score=record.new_team2_score,
            new_version=record.new_version,
            changed_by=record.changed_by,
            changed_at=record.changed_at,
            reason=record.reason,
        )
        try:
            self.session.add(row)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        self.session.refresh(row)
        return replace(record, id=row.id)

    def list_for_match(self, match_id: int) -> List[ScoreChangeRecord]:
        rows = self.session.exec(
            select(ScoreChange).where(ScoreChange.match_id == match_id).order_by(ScoreChange.id)
        ).all()
        return [
            ScoreChangeRecord(
                id=row.id,
                match_id=row.match_id,
                play_date_id=row.play_date_id,
                old_team1_score=row.old_team1_score,
                old_team2_score=row.old_team2_score,
                old_version=row.old_version,
                new_team1_score=row.new_team1_score,
                new_team2_score=row.new_team2_score,
                new_version=row.new_version,
                changed_by=row.changed_by,
                changed_at=row.changed_at,
                reason=row.reason,
            )
            for row in rows
        ]
