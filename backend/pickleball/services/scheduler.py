"""
Round-robin match scheduling for doubles play dates.

Pure and deterministic: consumes persisted partnerships (only their ids and
player ids are read) and returns a complete schedule description before
anything is written. Persistence lives in schedule_service.

Two strategies:
- sequential: every player-disjoint partnership pair, in enumeration order,
  fills courts[court_index % C]; the round advances each time court_index
  reaches a multiple of C. Rounds = ceil(matches / C). A player may be
  booked on two courts in the same round.
- player_safe: each round is filled greedily from the remaining pairs in
  enumeration order, skipping pairs that would double-book a player, up to
  C matches per round.

Odd rosters rotate a bye partnership through the rounds, fewest byes first.
"""
import math
from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional, Protocol, Sequence, Set, Tuple, Union

from pickleball.errors import ConfigurationError


class SchedulablePartnership(Protocol):
    id: Optional[int]
    player1_id: int
    player2_id: int


class SchedulingStrategy(str, Enum):
    sequential = "sequential"
    player_safe = "player_safe"


@dataclass(frozen=True)
class ScheduledMatch:
    round_number: int
    court_number: int
    partnership1_id: int
    partnership2_id: int


@dataclass
class ScheduledRound:
    round_number: int
    matches: List[ScheduledMatch]
    resting_player_ids: List[int]
    # partnerships whose two players both sit this round out
    resting_partnership_ids: List[int] = field(default_factory=list)
    bye_partnership_id: Optional[int] = None


@dataclass
class Schedule:
    court_numbers: List[int]
    strategy: SchedulingStrategy
    matches: List[ScheduledMatch] = field(default_factory=list)
    # partnership id -> (player1_id, player2_id)
    partnership_players: Dict[int, Tuple[int, int]] = field(default_factory=dict)

    @property
    def match_count(self) -> int:
        return len(self.matches)

    @property
    def round_count(self) -> int:
        return max((m.round_number for m in self.matches), default=0)

    def players_in(self, match: ScheduledMatch) -> Tuple[int, int, int, int]:
        return self.partnership_players[match.partnership1_id] + self.partnership_players[match.partnership2_id]

    def rounds(self) -> List[ScheduledRound]:
        """Group matches by round number (court order within a round).

        Odd rosters also get a bye partnership per round, see _pick_bye.
        """
        roster = sorted({pid for pair in self.partnership_players.values() for pid in pair})
        by_round: Dict[int, List[ScheduledMatch]] = defaultdict(list)
        for match in self.matches:
            by_round[match.round_number].append(match)

        odd_roster = len(roster) % 2 == 1
        byes_so_far = {pid: 0 for pid in self.partnership_players}
        result: List[ScheduledRound] = []
        for round_number in sorted(by_round):
            round_matches = by_round[round_number]
            playing: Set[int] = set()
            playing_partnerships: Set[int] = set()
            for match in round_matches:
                playing.update(self.players_in(match))
                playing_partnerships.update((match.partnership1_id, match.partnership2_id))
            result.append(
                ScheduledRound(
                    round_number=round_number,
                    matches=round_matches,
                    resting_player_ids=[pid for pid in roster if pid not in playing],
                    resting_partnership_ids=[
                        pid for pid, players in self.partnership_players.items() if not set(players) & playing
                    ],
                    bye_partnership_id=_pick_bye(byes_so_far, playing_partnerships) if odd_roster else None,
                )
            )
        return result

    def player_conflicts(self) -> List[Tuple[int, int]]:
        """(round_number, player_id) for every player booked on two courts in one round."""
        conflicts: List[Tuple[int, int]] = []
        for scheduled_round in self.rounds():
            seen: Set[int] = set()
            for match in scheduled_round.matches:
                for pid in self.players_in(match):
                    if pid in seen:
                        conflicts.append((scheduled_round.round_number, pid))
                    seen.add(pid)
        return conflicts


def _pick_bye(byes_so_far: Dict[int, int], playing_partnerships: Set[int]) -> Optional[int]:
    """
    Choose the round's bye partnership among those not playing it.

    Fewest byes so far wins, enumeration order breaks ties. No bye is given
    when every least-rested partnership is playing, so bye counts never
    spread by more than one. Updates byes_so_far.
    """
    candidates = [pid for pid in byes_so_far if pid not in playing_partnerships]
    if not candidates:
        return None
    chosen = min(candidates, key=lambda pid: byes_so_far[pid])
    if byes_so_far[chosen] > min(byes_so_far.values()):
        return None
    byes_so_far[chosen] += 1
    return chosen


def shares_player(a: SchedulablePartnership, b: SchedulablePartnership) -> bool:
    return bool({a.player1_id, a.player2_id} & {b.player1_id, b.player2_id})


def normalize_courts(courts: Union[int, Sequence[int]]) -> List[int]:
    """
    Accept a court count or an explicit list of court numbers.

    Raises:
        ConfigurationError: no courts
    """
    if isinstance(courts, bool):
        raise ConfigurationError(f"Invalid court configuration: {courts!r}")
    if isinstance(courts, int):
        if courts <= 0:
            raise ConfigurationError(f"At least one court is required, got {courts}")
        return list(range(1, courts + 1))
    court_numbers = list(courts)
    if not court_numbers:
        raise ConfigurationError("At least one court is required")
    if len(set(court_numbers)) != len(court_numbers):
        raise ConfigurationError(f"Duplicate court numbers: {court_numbers}")
    return court_numbers


def disjoint_pairs(
    partnerships: Sequence[SchedulablePartnership],
) -> List[Tuple[SchedulablePartnership, SchedulablePartnership]]:
    """All partnership pairs (i < j) that share no player, in enumeration order."""
    pairs = []
    for i in range(len(partnerships)):
        for j in range(i + 1, len(partnerships)):
            if shares_player(partnerships[i], partnerships[j]):
                continue
            pairs.append((partnerships[i], partnerships[j]))
    return pairs


def build_schedule(
    partnerships: Sequence[SchedulablePartnership],
    courts: Union[int, Sequence[int]],
    strategy: SchedulingStrategy = SchedulingStrategy.sequential,
) -> Schedule:
    """
    Build a round-robin schedule.

    Args:
        partnerships: Persisted partnerships in generator order (ids required)
        courts: Court count C, or the court numbers to cycle through
        strategy: sequential (default) or player_safe

    Returns:
        Schedule with one match per player-disjoint partnership pair. Empty
        (not an error) when no disjoint pair exists.

    Raises:
        ConfigurationError: C <= 0, or a partnership without an id
    """
    court_numbers = normalize_courts(courts)
    strategy = SchedulingStrategy(strategy)

    for partnership in partnerships:
        if partnership.id is None:
            raise ConfigurationError("Partnerships must be persisted before scheduling")

    schedule = Schedule(
        court_numbers=court_numbers,
        strategy=strategy,
        partnership_players={p.id: (p.player1_id, p.player2_id) for p in partnerships},
    )
    pairs = disjoint_pairs(partnerships)
    if not pairs:
        return schedule

    if strategy == SchedulingStrategy.sequential:
        schedule.matches = _assign_sequential(pairs, court_numbers)
    else:
        schedule.matches = _assign_player_safe(pairs, court_numbers)
    return schedule


def _assign_sequential(pairs, court_numbers: List[int]) -> List[ScheduledMatch]:
    court_count = len(court_numbers)
    matches: List[ScheduledMatch] = []
    round_number = 1
    court_index = 0
    for p1, p2 in pairs:
        matches.append(
            ScheduledMatch(
                round_number=round_number,
                court_number=court_numbers[court_index % court_count],
                partnership1_id=p1.id,
                partnership2_id=p2.id,
            )
        )
        court_index += 1
        if court_index % court_count == 0:
            round_number += 1
    return matches


def _assign_player_safe(pairs, court_numbers: List[int]) -> List[ScheduledMatch]:
    court_count = len(court_numbers)
    matches: List[ScheduledMatch] = []
    remaining = list(pairs)
    round_number = 1
    while remaining:
        busy: Set[int] = set()
        placed = []
        deferred = []
        for pair in remaining:
            p1, p2 = pair
            players = {p1.player1_id, p1.player2_id, p2.player1_id, p2.player2_id}
            if len(placed) < court_count and not players & busy:
                placed.append(pair)
                busy |= players
            else:
                deferred.append(pair)

        # The first remaining pair always fits an empty round, so placed is never empty
        for court_index, (p1, p2) in enumerate(placed):
            matches.append(
                ScheduledMatch(
                    round_number=round_number,
                    court_number=court_numbers[court_index],
                    partnership1_id=p1.id,
                    partnership2_id=p2.id,
                )
            )
        remaining = deferred
        round_number += 1
    return matches


def expected_round_count(match_count: int, court_count: int) -> int:
    """Round count of a sequential schedule: ceil(matches / courts)."""
    if court_count <= 0:
        raise ConfigurationError(f"At least one court is required, got {court_count}")
    return math.ceil(match_count / court_count)


def validate_schedule(partnerships: Sequence[SchedulablePartnership], schedule: Schedule) -> bool:
    """
    Check schedule completeness and capacity.

    - every player-disjoint pair plays exactly once
    - no match pits partnerships sharing a player
    - no round holds more matches than there are courts, and no court is used twice in a round
    """
    by_id = {p.id: p for p in partnerships}
    expected = {frozenset((a.id, b.id)) for a, b in disjoint_pairs(partnerships)}

    played: Set[frozenset] = set()
    for match in schedule.matches:
        a = by_id.get(match.partnership1_id)
        b = by_id.get(match.partnership2_id)
        if a is None or b is None or shares_player(a, b):
            return False
        key = frozenset((a.id, b.id))
        if key in played:
            return False
        played.add(key)
    if played != expected:
        return False

    court_count = len(schedule.court_numbers)
    for scheduled_round in schedule.rounds():
        courts_used = [m.court_number for m in scheduled_round.matches]
        if len(courts_used) > court_count or len(set(courts_used)) != len(courts_used):
            return False
    return True


def matches_for_partnership(schedule: Schedule, partnership_id: int) -> List[ScheduledMatch]:
    return [
        m for m in schedule.matches if partnership_id in (m.partnership1_id, m.partnership2_id)
    ]


def bye_counts(partnership_ids: Iterable[int], rounds: Iterable[ScheduledRound]) -> Dict[int, int]:
    counts = {pid: 0 for pid in partnership_ids}
    for scheduled_round in rounds:
        if scheduled_round.bye_partnership_id is not None:
            counts[scheduled_round.bye_partnership_id] = counts.get(scheduled_round.bye_partnership_id, 0) + 1
    return counts


def validate_bye_distribution(partnership_ids: Iterable[int], rounds: Iterable[ScheduledRound]) -> bool:
    """True when no partnership has more than one bye more than any other."""
    counts = bye_counts(partnership_ids, rounds)
    if not counts:
        return True
    return max(counts.values()) - min(counts.values()) <= 1
