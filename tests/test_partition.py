"""Unit tests for the branch-and-bound team partitioner."""

from __future__ import annotations

import itertools
import random
import time

import pytest

from domain.common import Participant, Team, spread_of
from domain.errors import EmptyRosterError, InsufficientParticipantsError, InvalidTeamCountError
from domain.partition import PartitionParameters, derive_seed, partition
from domain.partition.seed import hash_participant_ids


def _participants(ratings: list[float]) -> list[Participant]:
    return [
        Participant(
            participant_id=index + 1,
            name=f"p{index + 1}",
            rating=float(rating),
            baseline_rating=float(rating),
        )
        for index, rating in enumerate(ratings)
    ]


def _spread(teams: list[Team]) -> float:
    return spread_of([team.total_rating for team in teams])


def _brute_force_spread(ratings: list[float], team_count: int) -> float:
    best = float("inf")
    for assignment in itertools.product(range(team_count), repeat=len(ratings)):
        if len(set(assignment)) != team_count:
            continue
        totals = [0.0] * team_count
        for rating, team in zip(ratings, assignment):
            totals[team] += rating
        best = min(best, max(totals) - min(totals))
    return best


def test_zero_team_count_is_rejected() -> None:
    with pytest.raises(InvalidTeamCountError):
        partition(_participants([100.0, 200.0]), 0)


def test_empty_roster_is_rejected() -> None:
    with pytest.raises(EmptyRosterError):
        partition([], 2)


def test_fewer_participants_than_teams_is_rejected() -> None:
    with pytest.raises(InsufficientParticipantsError) as excinfo:
        partition(_participants([100.0, 200.0, 300.0]), 4)
    assert excinfo.value.participant_count == 3
    assert excinfo.value.team_count == 4


def test_equal_ratings_split_into_even_pairs() -> None:
    teams = partition(_participants([100.0, 100.0, 100.0, 100.0]), 2, seed=11)
    assert len(teams) == 2
    assert sorted(team.size for team in teams) == [2, 2]
    assert _spread(teams) == pytest.approx(0.0)


def test_uneven_team_sizes_are_allowed_when_they_balance_totals() -> None:
    teams = partition(_participants([300.0, 100.0, 100.0, 100.0]), 2, seed=3)
    assert sorted(team.size for team in teams) == [1, 3]
    assert _spread(teams) == pytest.approx(0.0)


def test_single_team_takes_everyone() -> None:
    participants = _participants([10.0, 20.0, 30.0])
    teams = partition(participants, 1, seed=5)
    assert len(teams) == 1
    assert sorted(teams[0].member_ids) == [1, 2, 3]
    assert _spread(teams) == pytest.approx(0.0)


def test_one_participant_per_team_when_counts_match() -> None:
    teams = partition(_participants([500.0, 10.0, 250.0]), 3, seed=9)
    assert [team.size for team in teams] == [1, 1, 1]


def test_zero_rated_participants_still_fill_every_team() -> None:
    teams = partition(_participants([0.0, 0.0, 0.0, 0.0, 0.0]), 4, seed=21)
    assert len(teams) == 4
    assert all(team.size >= 1 for team in teams)
    assert sorted(member_id for team in teams for member_id in team.member_ids) == [1, 2, 3, 4, 5]


@pytest.mark.parametrize(
    ("participant_count", "team_count", "seed"),
    [(2, 2, 1), (5, 2, 2), (7, 3, 3), (9, 4, 4), (12, 3, 5), (12, 6, 6), (15, 2, 7)],
)
def test_every_participant_lands_in_exactly_one_non_empty_team(
    participant_count: int, team_count: int, seed: int
) -> None:
    source = random.Random(seed)
    participants = _participants([source.randint(0, 3000) for _ in range(participant_count)])

    teams = partition(participants, team_count, seed=seed)

    assert len(teams) == team_count
    assert all(team.size >= 1 for team in teams)
    assigned = [member_id for team in teams for member_id in team.member_ids]
    assert sorted(assigned) == sorted(participant.participant_id for participant in participants)
    assert len(assigned) == len(set(assigned))


@pytest.mark.parametrize(
    ("participant_count", "team_count", "seed"),
    [
        (3, 2, 10),
        (4, 3, 11),
        (5, 2, 12),
        (6, 2, 13),
        (6, 3, 14),
        (7, 2, 15),
        (7, 4, 16),
        (8, 2, 17),
        (8, 3, 18),
        (8, 5, 19),
    ],
)
def test_spread_matches_brute_force_optimum(participant_count: int, team_count: int, seed: int) -> None:
    source = random.Random(seed)
    ratings = [float(source.randint(0, 2000)) for _ in range(participant_count)]

    teams = partition(_participants(ratings), team_count, seed=seed)

    assert _spread(teams) == pytest.approx(_brute_force_spread(ratings, team_count), abs=1e-9)


def test_fractional_ratings_match_brute_force_optimum() -> None:
    ratings = [1012.5, 987.25, 1333.0, 640.75, 812.125, 1200.0, 955.5]
    teams = partition(_participants(ratings), 3, seed=42)
    assert _spread(teams) == pytest.approx(_brute_force_spread(ratings, 3), abs=1e-9)


def test_explicit_seed_is_reproducible() -> None:
    participants = _participants([100.0, 100.0, 100.0, 100.0, 200.0, 200.0, 50.0, 50.0])
    first = partition(participants, 2, seed=1234)
    second = partition(participants, 2, seed=1234)
    assert [team.member_ids for team in first] == [team.member_ids for team in second]


def test_injected_rng_is_reproducible() -> None:
    participants = _participants([100.0, 100.0, 100.0, 100.0, 100.0, 100.0])
    first = partition(participants, 3, rng=random.Random(77))
    second = partition(participants, 3, rng=random.Random(77))
    assert [team.member_ids for team in first] == [team.member_ids for team in second]


def test_returned_members_are_snapshots() -> None:
    participants = _participants([100.0, 200.0])
    teams = partition(participants, 2, seed=1)
    teams[0].members[0].rating = 9999.0
    assert sorted(participant.rating for participant in participants) == [100.0, 200.0]


def test_partition_parameters_defaults() -> None:
    params = PartitionParameters()
    assert params.epsilon == pytest.approx(1e-12)
    assert params.max_participants == 25
    assert params.max_nodes == 250_000


def test_participant_hash_ignores_order() -> None:
    assert hash_participant_ids([3, 1, 2]) == hash_participant_ids([1, 2, 3])
    assert hash_participant_ids([1, 2, 3]) != hash_participant_ids([1, 2, 4])


def test_derived_seed_depends_on_clock() -> None:
    ids = [10, 20, 30]
    assert derive_seed(ids, now_ns=1_000) == derive_seed(ids, now_ns=1_000)
    assert derive_seed(ids, now_ns=1_000) != derive_seed(ids, now_ns=2_000)
    assert 0 <= derive_seed(ids) < 2**64


def _assert_valid_split(teams: list[Team], participants: list[Participant], team_count: int) -> None:
    assert len(teams) == team_count
    assert all(team.size >= 1 for team in teams)
    assigned = sorted(member_id for team in teams for member_id in team.member_ids)
    assert assigned == sorted(participant.participant_id for participant in participants)


@pytest.mark.parametrize(
    ("participant_count", "team_count", "seed"),
    [(16, 6, 1), (20, 4, 2), (25, 5, 3), (25, 2, 4)],
)
def test_large_integer_rosters_finish_quickly(participant_count: int, team_count: int, seed: int) -> None:
    source = random.Random(seed)
    participants = _participants([float(source.randint(500, 3000)) for _ in range(participant_count)])

    started = time.perf_counter()
    teams = partition(participants, team_count, seed=seed)
    elapsed = time.perf_counter() - started

    assert elapsed < 30.0
    _assert_valid_split(teams, participants, team_count)


@pytest.mark.parametrize(("participant_count", "team_count", "seed"), [(20, 4, 5), (25, 5, 6)])
def test_large_fractional_rosters_finish_quickly(participant_count: int, team_count: int, seed: int) -> None:
    source = random.Random(seed)
    participants = _participants([source.uniform(500.0, 3000.0) for _ in range(participant_count)])

    started = time.perf_counter()
    teams = partition(participants, team_count, seed=seed)
    elapsed = time.perf_counter() - started

    assert elapsed < 30.0
    _assert_valid_split(teams, participants, team_count)


def test_large_roster_with_perfect_split_is_found() -> None:
    ratings = [1000.0, 1250.0, 1500.0, 1750.0, 2000.0] * 4
    participants = _participants(ratings)

    teams = partition(participants, 4, seed=8)

    assert _spread(teams) == pytest.approx(0.0)
    _assert_valid_split(teams, participants, 4)


def test_node_budget_still_returns_a_valid_split() -> None:
    source = random.Random(12)
    participants = _participants([float(source.randint(500, 3000)) for _ in range(18)])

    teams = partition(participants, 3, seed=12, parameters=PartitionParameters(max_nodes=1))

    _assert_valid_split(teams, participants, 3)


def test_search_never_returns_worse_than_a_tight_budget() -> None:
    source = random.Random(31)
    participants = _participants([float(source.randint(500, 3000)) for _ in range(12)])

    truncated = partition(participants, 3, seed=31, parameters=PartitionParameters(max_nodes=1))
    full = partition(participants, 3, seed=31)

    assert _spread(full) <= _spread(truncated) + 1e-9
