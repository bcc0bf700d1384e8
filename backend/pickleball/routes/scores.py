"""
Score entry and history.

The actor id arrives already authenticated in the X-Actor-Id header.
Writers must send the match version they last read; a stale version
answers 409 and the client re-reads before resubmitting.
"""
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Header
from pydantic import BaseModel
from sqlmodel import Session

from pickleball.database import get_session
from pickleball.services.score_coordinator import ScoreSubmission, coordinator_for_session
from pickleball.services.score_history import get_score_history
from pickleball.services.score_validation import common_scores
from pickleball.services.schedule_service import get_play_date_or_raise
from pickleball.utils.http_errors import domain_errors

router = APIRouter()


class ScoreUpdate(BaseModel):
    team1_score: int
    team2_score: int
    version: int
    reason: Optional[str] = None


class MatchScoreState(BaseModel):
    id: int
    play_date_id: int
    team1_score: Optional[int] = None
    team2_score: Optional[int] = None
    winning_partnership_id: Optional[int] = None
    status: str
    version: int
    recorded_by: Optional[int] = None
    recorded_at: Optional[datetime] = None


class ScoreUpdateResponse(BaseModel):
    match: MatchScoreState
    warnings: List[str] = []
    audit_recorded: bool


class ScoreHistoryResponse(BaseModel):
    id: int
    match_id: int
    old_team1_score: Optional[int] = None
    old_team2_score: Optional[int] = None
    old_version: int
    new_team1_score: int
    new_team2_score: int
    new_version: int
    changed_by: int
    changed_by_name: Optional[str] = None
    changed_at: datetime
    reason: Optional[str] = None


class CommonScoreResponse(BaseModel):
    team1: int
    team2: int
    label: str


@router.patch("/matches/{match_id}/score", response_model=ScoreUpdateResponse)
def update_match_score(
    match_id: int,
    payload: ScoreUpdate,
    x_actor_id: int = Header(...),
    session: Session = Depends(get_session),
) -> ScoreUpdateResponse:
    """Record a score with win-condition validation and optimistic locking."""
    coordinator = coordinator_for_session(session)
    with domain_errors():
        result = coordinator.submit_score(
            ScoreSubmission(
                match_id=match_id,
                team1_score=payload.team1_score,
                team2_score=payload.team2_score,
                expected_version=payload.version,
                actor_id=x_actor_id,
                reason=payload.reason,
            )
        )

    m = result.match
    return ScoreUpdateResponse(
        match=MatchScoreState(
            id=m.id,
            play_date_id=m.play_date_id,
            team1_score=m.team1_score,
            team2_score=m.team2_score,
            winning_partnership_id=m.winning_partnership_id,
            status=m.status.value,
            version=m.version,
            recorded_by=m.recorded_by,
            recorded_at=m.recorded_at,
        ),
        warnings=result.warnings,
        audit_recorded=result.audit_recorded,
    )


@router.get("/matches/{match_id}/history", response_model=List[ScoreHistoryResponse])
def read_score_history(match_id: int, session: Session = Depends(get_session)):
    """Score change history, newest first"""
    with domain_errors():
        entries = get_score_history(session, match_id)
    return [ScoreHistoryResponse(**vars(entry)) for entry in entries]


@router.get("/play-dates/{play_date_id}/common-scores", response_model=List[CommonScoreResponse])
def read_common_scores(play_date_id: int, session: Session = Depends(get_session)):
    """Quick-entry score suggestions for the play date's target"""
    with domain_errors():
        play_date = get_play_date_or_raise(session, play_date_id)
    return [CommonScoreResponse(**vars(s)) for s in common_scores(play_date.target_score)]
