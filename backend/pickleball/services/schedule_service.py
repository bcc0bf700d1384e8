"""
Play date setup and schedule generation (persistence side).

Generation is all-or-nothing: courts, partnerships and matches are added in
one session transaction; any failure rolls the whole thing back so no
partial schedule is ever visible.
"""
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Sequence

from sqlmodel import Session, func, select

from pickleball.config import validate_play_date_config
from pickleball.errors import ConfigurationError, NotFoundError, ScheduleExistsError
from pickleball.models.court import Court
from pickleball.models.match import Match, MatchStatus
from pickleball.models.partnership import Partnership
from pickleball.models.play_date import PlayDate, WinCondition
from pickleball.models.player import Player
from pickleball.services.partnerships import check_roster_size, generate_partnerships
from pickleball.services.scheduler import Schedule, SchedulingStrategy, build_schedule

logger = logging.getLogger(__name__)


@dataclass
class GeneratedSchedule:
    play_date: PlayDate
    courts: List[Court]
    partnerships: List[Partnership]
    matches: List[Match]
    schedule: Schedule


@dataclass
class RoundView:
    round_number: int
    matches: List[Match] = field(default_factory=list)


def get_play_date_or_raise(session: Session, play_date_id: int) -> PlayDate:
    play_date = session.get(PlayDate, play_date_id)
    if not play_date:
        raise NotFoundError(f"Play date {play_date_id} not found")
    return play_date


def create_play_date(
    session: Session,
    organizer_id: int,
    event_date: date,
    num_courts: int,
    win_condition: str,
    target_score: int,
) -> PlayDate:
    """
    Create a play date after validating its configuration.

    Raises:
        ConfigurationError: court count, target score or win condition invalid
        NotFoundError: organizer does not exist
    """
    validate_play_date_config(num_courts, target_score)
    try:
        condition = WinCondition.parse(win_condition)
    except ValueError as e:
        raise ConfigurationError(str(e)) from e

    if not session.get(Player, organizer_id):
        raise NotFoundError(f"Player {organizer_id} not found")

    play_date = PlayDate(
        event_date=event_date,
        organizer_id=organizer_id,
        num_courts=num_courts,
        win_condition=condition,
        target_score=target_score,
    )
    session.add(play_date)
    session.commit()
    session.refresh(play_date)
    return play_date


def load_roster(session: Session, player_ids: Sequence[int]) -> List[Player]:
    """Resolve roster ids to players, keeping the given order."""
    players = session.exec(select(Player).where(Player.id.in_(list(player_ids)))).all()
    by_id: Dict[int, Player] = {p.id: p for p in players}
    missing = [pid for pid in player_ids if pid not in by_id]
    if missing:
        raise NotFoundError(f"Players not found: {missing}")
    return [by_id[pid] for pid in player_ids]


def generate_play_date_schedule(
    session: Session,
    play_date_id: int,
    player_ids: Sequence[int],
    strategy: SchedulingStrategy = SchedulingStrategy.sequential,
) -> GeneratedSchedule:
    """
    Generate partnerships, courts and matches for a play date.

    Steps:
    1. Validate roster size, play date existence and configuration
    2. Create courts 1..num_courts
    3. Persist C(n, 2) partnerships (flush for ids)
    4. Build the schedule in memory
    5. Persist matches (waiting, null scores, version 0) and commit once

    Raises:
        CapacityError: roster outside 4..16 (before anything is created)
        NotFoundError: play date or a roster player does not exist
        ScheduleExistsError: play date already has a schedule or is locked
        ConfigurationError: invalid play date configuration or duplicate roster entries
    """
    check_roster_size(len(player_ids))
    play_date = get_play_date_or_raise(session, play_date_id)
    validate_play_date_config(play_date.num_courts, play_date.target_score)

    if play_date.schedule_locked:
        raise ScheduleExistsError(f"Schedule for play date {play_date_id} is locked")
    existing = session.exec(
        select(func.count(Partnership.id)).where(Partnership.play_date_id == play_date_id)
    ).one()
    if existing:
        raise ScheduleExistsError(f"Play date {play_date_id} already has a schedule")

    roster = load_roster(session, player_ids)
    drafts = generate_partnerships(roster)

    try:
        courts = [
            Court(play_date_id=play_date_id, court_number=n, court_name=f"Court {n}")
            for n in range(1, play_date.num_courts + 1)
        ]
        session.add_all(courts)

        partnerships = [
            Partnership(
                play_date_id=play_date_id,
                player1_id=draft.player1_id,
                player2_id=draft.player2_id,
                partnership_name=draft.partnership_name,
            )
            for draft in drafts
        ]
        session.add_all(partnerships)
        session.flush()

        schedule = build_schedule(partnerships, [c.court_number for c in courts], strategy)
        court_ids = {c.court_number: c.id for c in courts}
        matches = [
            Match(
                play_date_id=play_date_id,
                court_id=court_ids[scheduled.court_number],
                round_number=scheduled.round_number,
                partnership1_id=scheduled.partnership1_id,
                partnership2_id=scheduled.partnership2_id,
                status=MatchStatus.waiting,
                version=0,
            )
            for scheduled in schedule.matches
        ]
        session.add_all(matches)
        session.commit()
    except Exception:
        session.rollback()
        logger.exception("Schedule generation failed for play date %s, transaction rolled back", play_date_id)
        raise

    conflicts = schedule.player_conflicts()
    if conflicts:
        logger.warning(
            "Play date %s schedule books %d player(s) on two courts in the same round",
            play_date_id,
            len(conflicts),
        )
    logger.info(
        "Generated schedule for play date %s: %d players, %d partnerships, %d matches, %d rounds (%s)",
        play_date_id,
        len(roster),
        len(partnerships),
        len(matches),
        schedule.round_count,
        schedule.strategy.value,
    )
    return GeneratedSchedule(
        play_date=play_date,
        courts=courts,
        partnerships=partnerships,
        matches=matches,
        schedule=schedule,
    )


def get_schedule(session: Session, play_date_id: int) -> List[RoundView]:
    """Matches grouped by round, court order within each round."""
    get_play_date_or_raise(session, play_date_id)
    rows = session.exec(
        select(Match, Court)
        .where(Match.play_date_id == play_date_id, Match.court_id == Court.id)
        .order_by(Match.round_number, Court.court_number, Match.id)
    ).all()

    rounds: List[RoundView] = []
    for match, _court in rows:
        if not rounds or rounds[-1].round_number != match.round_number:
            rounds.append(RoundView(round_number=match.round_number))
        rounds[-1].matches.append(match)
    return rounds
