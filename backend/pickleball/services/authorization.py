"""
Default edit policy for match scores.

Identity is already established upstream; the actor id is a player id.
A player may edit a match they play in; a project owner may edit any match.
"""
from typing import Callable

from sqlmodel import Session

from pickleball.models.match import Match
from pickleball.models.partnership import Partnership
from pickleball.models.player import Player

CanEditMatch = Callable[[int, int], bool]


def match_player_ids(session: Session, match: Match) -> set:
    player_ids = set()
    for partnership_id in (match.partnership1_id, match.partnership2_id):
        partnership = session.get(Partnership, partnership_id)
        if partnership:
            player_ids.update(partnership.player_ids)
    return player_ids


class PlayerMatchAuthorizer:
    def __init__(self, session: Session):
        self.session = session

    def __call__(self, actor_id: int, match_id: int) -> bool:
        actor = self.session.get(Player, actor_id)
        if not actor:
            return False
        if actor.is_project_owner:
            return True
        match = self.session.get(Match, match_id)
        if not match:
            return False
        return actor_id in match_player_ids(self.session, match)
