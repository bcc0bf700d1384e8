"""
Partnership generation for doubles play dates.

Every unordered pair of roster players becomes one partnership: C(n, 2)
pairs, produced in a stable order (roster order, i < j) so repeated runs
over the same roster yield identical output.
"""
from dataclasses import dataclass
from typing import Iterable, List, Optional, Protocol, Sequence, Set, Tuple

from pickleball.config import MAX_PLAYERS, MIN_PLAYERS
from pickleball.errors import CapacityError, ConfigurationError


class RosterPlayer(Protocol):
    id: Optional[int]
    name: str


class PairedPlayers(Protocol):
    player1_id: int
    player2_id: int


@dataclass(frozen=True)
class PartnershipDraft:
    player1_id: int
    player2_id: int
    partnership_name: str


def partnership_label(name1: str, name2: str) -> str:
    return f"{name1} & {name2}"


def check_roster_size(player_count: int) -> None:
    """
    Raises:
        CapacityError: fewer than MIN_PLAYERS or more than MAX_PLAYERS
    """
    if player_count < MIN_PLAYERS:
        raise CapacityError(f"Minimum {MIN_PLAYERS} players required for a play date, got {player_count}")
    if player_count > MAX_PLAYERS:
        raise CapacityError(f"Maximum {MAX_PLAYERS} players allowed per play date, got {player_count}")


def generate_partnerships(players: Sequence[RosterPlayer]) -> List[PartnershipDraft]:
    """
    Generate all possible partnerships for a roster.

    Args:
        players: Roster in the order it should be enumerated (4-16 players)

    Returns:
        C(n, 2) drafts ordered by (i, j) roster index with i < j

    Raises:
        CapacityError: roster size outside 4..16
        ConfigurationError: the same player appears twice in the roster
    """
    check_roster_size(len(players))

    seen = set()
    for player in players:
        if player.id in seen:
            raise ConfigurationError(f"Player {player.id} appears more than once in the roster")
        seen.add(player.id)

    drafts: List[PartnershipDraft] = []
    for i in range(len(players)):
        for j in range(i + 1, len(players)):
            drafts.append(
                PartnershipDraft(
                    player1_id=players[i].id,
                    player2_id=players[j].id,
                    partnership_name=partnership_label(players[i].name, players[j].name),
                )
            )
    return drafts


def find_partnership(partnerships: Iterable[PairedPlayers], player_a: int, player_b: int):
    """Find the partnership for two players regardless of order, or None."""
    wanted = {player_a, player_b}
    for partnership in partnerships:
        if {partnership.player1_id, partnership.player2_id} == wanted:
            return partnership
    return None


def partnerships_for_player(partnerships: Iterable[PairedPlayers], player_id: int) -> list:
    return [p for p in partnerships if player_id in (p.player1_id, p.player2_id)]


def validate_partnerships(player_ids: Sequence[int], partnerships: Sequence[PairedPlayers]) -> bool:
    """
    Check that partnerships cover the roster exactly.

    Each player must appear in exactly n-1 partnerships and the total must be C(n, 2).
    """
    n = len(player_ids)
    counts = {pid: 0 for pid in player_ids}
    pairs: Set[Tuple[int, int]] = set()
    for p in partnerships:
        if p.player1_id == p.player2_id:
            return False
        if p.player1_id not in counts or p.player2_id not in counts:
            return False
        pair = (min(p.player1_id, p.player2_id), max(p.player1_id, p.player2_id))
        if pair in pairs:
            return False
        pairs.add(pair)
        counts[p.player1_id] += 1
        counts[p.player2_id] += 1

    if any(count != n - 1 for count in counts.values()):
        return False
    return len(partnerships) == n * (n - 1) // 2
