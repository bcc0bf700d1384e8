from pickleball.models.court import Court
from pickleball.models.match import Match, MatchStatus
from pickleball.models.partnership import Partnership
from pickleball.models.play_date import PlayDate, PlayDateStatus, WinCondition
from pickleball.models.player import Player
from pickleball.models.score_change import ScoreChange

__all__ = [
    "Player",
    "PlayDate",
    "PlayDateStatus",
    "WinCondition",
    "Court",
    "Partnership",
    "Match",
    "MatchStatus",
    "ScoreChange",
]
