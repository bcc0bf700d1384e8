"""
Play date setup, schedule generation and rankings.
"""
from datetime import date, datetime
from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, field_validator
from sqlmodel import Session, select

from pickleball.config import DEFAULT_TARGET_SCORE
from pickleball.database import get_session
from pickleball.models.partnership import Partnership
from pickleball.models.play_date import WinCondition
from pickleball.services.rankings import play_date_rankings
from pickleball.services.schedule_service import (
    create_play_date,
    generate_play_date_schedule,
    get_play_date_or_raise,
    get_schedule,
)
from pickleball.services.scheduler import SchedulingStrategy
from pickleball.utils.http_errors import domain_errors

router = APIRouter()


class PlayDateCreate(BaseModel):
    event_date: date
    organizer_id: int
    num_courts: int
    win_condition: str = WinCondition.first_to_target.value
    target_score: int = DEFAULT_TARGET_SCORE


class PlayDateResponse(BaseModel):
    id: int
    event_date: date
    organizer_id: int
    num_courts: int
    win_condition: WinCondition
    target_score: int
    status: str
    schedule_locked: bool
    created_at: datetime

    class Config:
        from_attributes = True


class ScheduleRequest(BaseModel):
    player_ids: List[int]
    strategy: SchedulingStrategy = SchedulingStrategy.sequential

    @field_validator("strategy", mode="before")
    @classmethod
    def normalize_strategy(cls, v):
        if isinstance(v, str):
            return v.strip().lower().replace("-", "_")
        return v


class PartnershipResponse(BaseModel):
    id: int
    player1_id: int
    player2_id: int
    partnership_name: str

    class Config:
        from_attributes = True


class MatchResponse(BaseModel):
    id: int
    round_number: int
    court_id: int
    court_number: Optional[int] = None
    partnership1_id: int
    partnership2_id: int
    team1_score: Optional[int] = None
    team2_score: Optional[int] = None
    winning_partnership_id: Optional[int] = None
    status: str
    version: int


class RoundResponse(BaseModel):
    round_number: int
    matches: List[MatchResponse]


class ScheduleResponse(BaseModel):
    play_date_id: int
    strategy: Optional[SchedulingStrategy] = None
    partnerships: List[PartnershipResponse]
    rounds: List[RoundResponse]
    match_count: int
    round_count: int


class PlayerRankingResponse(BaseModel):
    rank: int
    player_id: int
    player_name: str
    games_played: int
    games_won: int
    games_lost: int
    win_percentage: float
    points_for: int
    points_against: int
    point_differential: int


class SummaryResponse(BaseModel):
    total_matches: int
    completed_matches: int
    completion_percentage: float
    total_points_scored: int
    average_match_score: float
    highest_score: Optional[int] = None
    lowest_score: Optional[int] = None
    total_players: int
    total_partnerships: int


class RankingsResponse(BaseModel):
    play_date_id: int
    rankings: List[PlayerRankingResponse]
    summary: SummaryResponse


def _match_response(m) -> MatchResponse:
    return MatchResponse(
        id=m.id,
        round_number=m.round_number,
        court_id=m.court_id,
        court_number=m.court.court_number if m.court else None,
        partnership1_id=m.partnership1_id,
        partnership2_id=m.partnership2_id,
        team1_score=m.team1_score,
        team2_score=m.team2_score,
        winning_partnership_id=m.winning_partnership_id,
        status=m.status,
        version=m.version,
    )


def _schedule_response(session: Session, play_date_id: int, strategy=None) -> ScheduleResponse:
    rounds = get_schedule(session, play_date_id)
    partnerships = session.exec(
        select(Partnership).where(Partnership.play_date_id == play_date_id).order_by(Partnership.id)
    ).all()
    return ScheduleResponse(
        play_date_id=play_date_id,
        strategy=strategy,
        partnerships=[PartnershipResponse.model_validate(p) for p in partnerships],
        rounds=[
            RoundResponse(round_number=r.round_number, matches=[_match_response(m) for m in r.matches])
            for r in rounds
        ],
        match_count=sum(len(r.matches) for r in rounds),
        round_count=len(rounds),
    )


@router.post("/play-dates", response_model=PlayDateResponse, status_code=201)
def create_play_date_route(payload: PlayDateCreate, session: Session = Depends(get_session)):
    """Create a play date (courts 1-4, target 5-21)"""
    with domain_errors():
        return create_play_date(
            session,
            organizer_id=payload.organizer_id,
            event_date=payload.event_date,
            num_courts=payload.num_courts,
            win_condition=payload.win_condition,
            target_score=payload.target_score,
        )


@router.get("/play-dates/{play_date_id}", response_model=PlayDateResponse)
def get_play_date(play_date_id: int, session: Session = Depends(get_session)):
    """Get a play date by ID"""
    with domain_errors():
        return get_play_date_or_raise(session, play_date_id)


@router.post("/play-dates/{play_date_id}/schedule", response_model=ScheduleResponse, status_code=201)
def generate_schedule(play_date_id: int, payload: ScheduleRequest, session: Session = Depends(get_session)):
    """
    Generate partnerships and the round-robin schedule for a play date.

    All-or-nothing: on any error no partnership, court or match is left behind.
    """
    with domain_errors():
        generated = generate_play_date_schedule(session, play_date_id, payload.player_ids, payload.strategy)
        return _schedule_response(session, play_date_id, generated.schedule.strategy)


@router.get("/play-dates/{play_date_id}/schedule", response_model=ScheduleResponse)
def read_schedule(play_date_id: int, session: Session = Depends(get_session)):
    """Schedule grouped by round, court order within each round"""
    with domain_errors():
        return _schedule_response(session, play_date_id)


@router.get("/play-dates/{play_date_id}/rankings", response_model=RankingsResponse)
def read_rankings(play_date_id: int, session: Session = Depends(get_session)):
    """Player rankings over completed matches"""
    with domain_errors():
        rankings, summary = play_date_rankings(session, play_date_id)
    return RankingsResponse(
        play_date_id=play_date_id,
        rankings=[
            PlayerRankingResponse(
                rank=r.rank,
                player_id=r.player_id,
                player_name=r.player_name,
                games_played=r.games_played,
                games_won=r.games_won,
                games_lost=r.games_lost,
                win_percentage=round(r.win_percentage, 1),
                points_for=r.points_for,
                points_against=r.points_against,
                point_differential=r.point_differential,
            )
            for r in rankings
        ],
        summary=SummaryResponse(**vars(summary)),
    )
