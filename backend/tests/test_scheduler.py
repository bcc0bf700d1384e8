"""
Round-robin scheduling: player-disjoint pairs only, court/round packing,
and the player-safe alternative.
"""
from math import ceil, comb
from types import SimpleNamespace

import pytest

from pickleball.errors import ConfigurationError
from pickleball.models.partnership import Partnership
from pickleball.services.partnerships import generate_partnerships
from pickleball.services.scheduler import (
    ScheduledRound,
    SchedulingStrategy,
    build_schedule,
    bye_counts,
    expected_round_count,
    matches_for_partnership,
    shares_player,
    validate_bye_distribution,
    validate_schedule,
)


def roster(n: int):
    return [SimpleNamespace(id=i, name=f"P{i}") for i in range(1, n + 1)]


def persisted_partnerships(n: int):
    """Partnership rows with ids 1..C(n, 2) in generator order."""
    return [
        Partnership(
            id=index,
            play_date_id=1,
            player1_id=draft.player1_id,
            player2_id=draft.player2_id,
            partnership_name=draft.partnership_name,
        )
        for index, draft in enumerate(generate_partnerships(roster(n)), start=1)
    ]


def disjoint_pair_count(n: int) -> int:
    return comb(n, 2) * comb(n - 2, 2) // 2


def test_four_players_one_court():
    schedule = build_schedule(persisted_partnerships(4), 1)

    assert schedule.match_count == 3
    assert schedule.round_count == 3
    assert [(m.round_number, m.court_number) for m in schedule.matches] == [(1, 1), (2, 1), (3, 1)]
    # (P1,P2) v (P3,P4), (P1,P3) v (P2,P4), (P1,P4) v (P2,P3)
    assert [(m.partnership1_id, m.partnership2_id) for m in schedule.matches] == [(1, 6), (2, 5), (3, 4)]


def test_four_players_two_courts():
    schedule = build_schedule(persisted_partnerships(4), 2)

    rounds = schedule.rounds()
    assert schedule.round_count == 2
    assert [len(r.matches) for r in rounds] == [2, 1]
    assert [m.court_number for m in rounds[0].matches] == [1, 2]
    assert [m.court_number for m in rounds[1].matches] == [1]


@pytest.mark.parametrize("n", range(4, 17))
@pytest.mark.parametrize("courts", [1, 2, 3, 4])
def test_sequential_schedule_properties(n, courts):
    partnerships = persisted_partnerships(n)
    schedule = build_schedule(partnerships, courts)

    assert schedule.match_count == disjoint_pair_count(n)
    assert schedule.round_count == ceil(schedule.match_count / courts)
    assert schedule.round_count == expected_round_count(schedule.match_count, courts)
    assert all(len(r.matches) <= courts for r in schedule.rounds())
    assert validate_schedule(partnerships, schedule)


def test_no_match_pits_partnerships_sharing_a_player():
    partnerships = persisted_partnerships(7)
    by_id = {p.id: p for p in partnerships}
    schedule = build_schedule(partnerships, 3)

    for match in schedule.matches:
        assert not shares_player(by_id[match.partnership1_id], by_id[match.partnership2_id])


def test_explicit_court_numbers_are_cycled():
    schedule = build_schedule(persisted_partnerships(5), [3, 7])
    assert [m.court_number for m in schedule.matches[:4]] == [3, 7, 3, 7]


@pytest.mark.parametrize("courts", [0, -1, []])
def test_invalid_court_count_rejected(courts):
    with pytest.raises(ConfigurationError):
        build_schedule(persisted_partnerships(4), courts)


def test_unpersisted_partnerships_rejected():
    partnerships = persisted_partnerships(4)
    partnerships[0].id = None
    with pytest.raises(ConfigurationError):
        build_schedule(partnerships, 1)


def test_no_disjoint_pairs_gives_empty_schedule():
    # Three partnerships over three players: every pair shares someone
    partnerships = [
        Partnership(id=1, play_date_id=1, player1_id=1, player2_id=2, partnership_name="a"),
        Partnership(id=2, play_date_id=1, player1_id=1, player2_id=3, partnership_name="b"),
        Partnership(id=3, play_date_id=1, player1_id=2, player2_id=3, partnership_name="c"),
    ]
    schedule = build_schedule(partnerships, 2)
    assert schedule.match_count == 0
    assert schedule.round_count == 0
    assert schedule.rounds() == []


def test_schedule_is_deterministic():
    partnerships = persisted_partnerships(8)
    assert build_schedule(partnerships, 3).matches == build_schedule(partnerships, 3).matches


def test_sequential_can_double_book_players_within_a_round():
    schedule = build_schedule(persisted_partnerships(4), 2)
    # Both round-1 matches involve all four players
    assert {pid for _, pid in schedule.player_conflicts()} == {1, 2, 3, 4}


def test_player_safe_never_double_books():
    partnerships = persisted_partnerships(8)
    schedule = build_schedule(partnerships, 2, SchedulingStrategy.player_safe)

    assert schedule.player_conflicts() == []
    assert schedule.match_count == disjoint_pair_count(8)
    assert all(len(r.matches) <= 2 for r in schedule.rounds())
    assert validate_schedule(partnerships, schedule)


def test_player_safe_four_players_two_courts_uses_one_court_per_round():
    schedule = build_schedule(persisted_partnerships(4), 2, SchedulingStrategy.player_safe)
    assert [len(r.matches) for r in schedule.rounds()] == [1, 1, 1]


def test_resting_players_reported_per_round():
    schedule = build_schedule(persisted_partnerships(5), 1, SchedulingStrategy.player_safe)
    for scheduled_round in schedule.rounds():
        assert len(scheduled_round.resting_player_ids) == 1


def test_matches_for_partnership():
    partnerships = persisted_partnerships(6)
    schedule = build_schedule(partnerships, 2)
    mine = matches_for_partnership(schedule, 1)
    # (P1,P2) meets every pair drawn from the other four players
    assert len(mine) == comb(4, 2)


def test_validate_schedule_rejects_missing_match():
    partnerships = persisted_partnerships(5)
    schedule = build_schedule(partnerships, 2)
    schedule.matches = schedule.matches[:-1]
    assert not validate_schedule(partnerships, schedule)


def playing_partnerships(scheduled_round):
    return {pid for m in scheduled_round.matches for pid in (m.partnership1_id, m.partnership2_id)}


def test_five_players_rotate_byes_fairly():
    partnerships = persisted_partnerships(5)
    rounds = build_schedule(partnerships, 1, SchedulingStrategy.player_safe).rounds()

    assert len(rounds) == 15
    for scheduled_round in rounds:
        assert scheduled_round.bye_partnership_id is not None
        assert scheduled_round.bye_partnership_id not in playing_partnerships(scheduled_round)
        # One player rests, so no partnership sits out entirely
        assert scheduled_round.resting_partnership_ids == []

    counts = bye_counts([p.id for p in partnerships], rounds)
    assert sorted(set(counts.values())) == [1, 2]
    assert sum(counts.values()) == 15
    assert validate_bye_distribution([p.id for p in partnerships], rounds)


def test_seven_players_bye_and_resting_partnerships():
    partnerships = persisted_partnerships(7)
    schedule = build_schedule(partnerships, 2, SchedulingStrategy.player_safe)
    rounds = schedule.rounds()
    by_id = {p.id: p for p in partnerships}

    assert schedule.player_conflicts() == []
    for scheduled_round in rounds:
        # Seven players fill one court; the other three rest
        assert len(scheduled_round.matches) == 1
        assert len(scheduled_round.resting_player_ids) == 3
        assert len(scheduled_round.resting_partnership_ids) == 3
        for pid in scheduled_round.resting_partnership_ids:
            assert set(by_id[pid].player_ids) <= set(scheduled_round.resting_player_ids)
        if scheduled_round.bye_partnership_id is not None:
            assert scheduled_round.bye_partnership_id not in playing_partnerships(scheduled_round)

    assert any(r.bye_partnership_id is not None for r in rounds)
    assert validate_bye_distribution([p.id for p in partnerships], rounds)


def test_even_roster_has_no_byes():
    rounds = build_schedule(persisted_partnerships(6), 1, SchedulingStrategy.player_safe).rounds()
    assert all(r.bye_partnership_id is None for r in rounds)


def test_validate_bye_distribution_rejects_uneven_byes():
    rounds = [
        ScheduledRound(round_number=n, matches=[], resting_player_ids=[], bye_partnership_id=1)
        for n in (1, 2)
    ]
    assert not validate_bye_distribution([1, 2], rounds)
    assert validate_bye_distribution([1, 2], rounds[:1])
    assert validate_bye_distribution([], [])
