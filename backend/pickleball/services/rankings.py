"""
Player rankings for a play date.

Ordering:
1. win percentage (games won / games played)
2. point differential
3. head-to-head wins between the two players
4. total points scored
5. name

Players equal on win percentage, point differential and total points share a rank.
"""
from dataclasses import dataclass, field
from functools import cmp_to_key
from typing import Dict, Iterable, List, Optional

from sqlmodel import Session, select

from pickleball.models.match import Match
from pickleball.models.partnership import Partnership
from pickleball.models.player import Player
from pickleball.services.schedule_service import get_play_date_or_raise
from pickleball.services.score_validation import is_match_complete


@dataclass
class PlayerRanking:
    player_id: int
    player_name: str
    rank: int = 0
    games_played: int = 0
    games_won: int = 0
    games_lost: int = 0
    points_for: int = 0
    points_against: int = 0
    # opponent player id -> wins against them
    head_to_head_wins: Dict[int, int] = field(default_factory=dict)

    @property
    def win_percentage(self) -> float:
        if not self.games_played:
            return 0.0
        return self.games_won / self.games_played * 100

    @property
    def point_differential(self) -> int:
        return self.points_for - self.points_against


@dataclass
class TournamentSummary:
    total_matches: int
    completed_matches: int
    completion_percentage: float
    total_points_scored: int
    average_match_score: float
    highest_score: Optional[int]
    lowest_score: Optional[int]
    total_players: int
    total_partnerships: int


def _compare(a: PlayerRanking, b: PlayerRanking) -> int:
    if a.win_percentage != b.win_percentage:
        return -1 if a.win_percentage > b.win_percentage else 1
    if a.point_differential != b.point_differential:
        return b.point_differential - a.point_differential
    a_h2h = a.head_to_head_wins.get(b.player_id, 0)
    b_h2h = b.head_to_head_wins.get(a.player_id, 0)
    if a_h2h != b_h2h:
        return b_h2h - a_h2h
    if a.points_for != b.points_for:
        return b.points_for - a.points_for
    return (a.player_name > b.player_name) - (a.player_name < b.player_name)


def _tied(a: PlayerRanking, b: PlayerRanking) -> bool:
    return (
        a.win_percentage == b.win_percentage
        and a.point_differential == b.point_differential
        and a.points_for == b.points_for
    )


def calculate_player_rankings(
    matches: Iterable[Match],
    partnerships: Iterable[Partnership],
    players: Iterable[Player],
) -> List[PlayerRanking]:
    """Rank every player that appears in a partnership; only completed matches count."""
    partnership_by_id = {p.id: p for p in partnerships}
    names = {p.id: p.name for p in players}

    rankings: Dict[int, PlayerRanking] = {}
    for partnership in partnership_by_id.values():
        for pid in partnership.player_ids:
            if pid not in rankings:
                rankings[pid] = PlayerRanking(player_id=pid, player_name=names.get(pid, str(pid)))

    for match in matches:
        if not is_match_complete(match.team1_score, match.team2_score):
            continue
        team1 = partnership_by_id.get(match.partnership1_id)
        team2 = partnership_by_id.get(match.partnership2_id)
        if not team1 or not team2:
            continue

        sides = (
            (team1.player_ids, team2.player_ids, match.team1_score, match.team2_score),
            (team2.player_ids, team1.player_ids, match.team2_score, match.team1_score),
        )
        for own, opponents, scored, conceded in sides:
            won = scored > conceded
            for pid in own:
                ranking = rankings[pid]
                ranking.games_played += 1
                ranking.points_for += scored
                ranking.points_against += conceded
                if won:
                    ranking.games_won += 1
                    for opponent in opponents:
                        ranking.head_to_head_wins[opponent] = ranking.head_to_head_wins.get(opponent, 0) + 1
                else:
                    ranking.games_lost += 1

    ordered = sorted(rankings.values(), key=cmp_to_key(_compare))
    for index, ranking in enumerate(ordered):
        if index > 0 and _tied(ranking, ordered[index - 1]):
            ranking.rank = ordered[index - 1].rank
        else:
            ranking.rank = index + 1
    return ordered


def tournament_summary(matches: List[Match], partnerships: List[Partnership]) -> TournamentSummary:
    completed = [m for m in matches if is_match_complete(m.team1_score, m.team2_score)]
    scores = [s for m in completed for s in (m.team1_score, m.team2_score)]
    total_points = sum(scores)
    players = {pid for p in partnerships for pid in p.player_ids}
    return TournamentSummary(
        total_matches=len(matches),
        completed_matches=len(completed),
        completion_percentage=(len(completed) / len(matches) * 100) if matches else 0.0,
        total_points_scored=total_points,
        average_match_score=(total_points / len(completed)) if completed else 0.0,
        highest_score=max(scores) if scores else None,
        lowest_score=min(scores) if scores else None,
        total_players=len(players),
        total_partnerships=len(partnerships),
    )


def play_date_rankings(session: Session, play_date_id: int):
    """Load a play date's matches and partnerships and rank its players.

    Returns:
        (rankings, summary)
    """
    get_play_date_or_raise(session, play_date_id)
    matches = session.exec(select(Match).where(Match.play_date_id == play_date_id)).all()
    partnerships = session.exec(
        select(Partnership).where(Partnership.play_date_id == play_date_id).order_by(Partnership.id)
    ).all()
    player_ids = {pid for p in partnerships for pid in p.player_ids}
    players = session.exec(select(Player).where(Player.id.in_(list(player_ids)))).all() if player_ids else []
    return calculate_player_rankings(matches, partnerships, players), tournament_summary(matches, partnerships)
