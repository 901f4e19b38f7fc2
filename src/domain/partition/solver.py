"""Exact branch-and-bound team partitioner.

Splits N rated participants into T non-empty teams so that the spread between
the strongest and weakest team total is as small as possible. Equally optimal
splits are chosen between at random, reproducibly for a fixed seed.
"""

from __future__ import annotations

import random
from collections.abc import Sequence
from dataclasses import dataclass
from math import ceil, inf

from domain.common import Participant, Team, spread_of
from domain.errors import EmptyRosterError, InsufficientParticipantsError, InvalidTeamCountError
from domain.partition.seed import derive_seed
from logging_config import get_logger

log = get_logger(__name__)

# Slack when rounding a relaxed bound up to the next whole rating point
_INTEGRAL_SLACK = 1e-6


@dataclass(frozen=True)
class PartitionParameters:
    epsilon: float = 1e-12
    max_participants: int = 25
    max_nodes: int = 250_000


def partition(
    participants: Sequence[Participant],
    team_count: int,
    seed: int | None = None,
    *,
    rng: random.Random | None = None,
    parameters: PartitionParameters | None = None,
) -> list[Team]:
    """Return ``team_count`` teams with minimal rating spread.

    ``rng`` wins over ``seed`` when both are given. Without either, the seed is
    derived from the participant ids and the wall clock. ``max_participants``
    is advisory for callers. The search visits at most ``max_nodes`` nodes;
    past that the best split found so far is returned.
    """
    if team_count < 1:
        raise InvalidTeamCountError(team_count)
    if not participants:
        raise EmptyRosterError()
    if len(participants) < team_count:
        raise InsufficientParticipantsError(len(participants), team_count)

    params = parameters or PartitionParameters()
    if rng is None:
        if seed is None:
            seed = derive_seed(participant.participant_id for participant in participants)
        rng = random.Random(seed)

    players = list(participants)
    rng.shuffle(players)
    # Stable sort keeps the shuffled order among equal ratings
    players.sort(key=lambda participant: participant.rating, reverse=True)

    search = _BranchAndBound(
        ratings=[player.rating for player in players],
        team_count=team_count,
        rng=rng,
        epsilon=params.epsilon,
        max_nodes=params.max_nodes,
    )
    assignment = search.solve()

    members: list[list[Participant]] = [[] for _ in range(team_count)]
    for player, team_index in zip(players, assignment):
        members[team_index].append(player.snapshot())
    teams = [Team(members=tuple(team_members)) for team_members in members]

    if search.truncated:
        log.warning(
            "Partition search stopped after %s nodes; returning best spread found=%.6f "
            "(participants=%s teams=%s)",
            search.nodes,
            search.best_spread,
            len(players),
            team_count,
        )
    log.debug(
        "partitioned participants=%s teams=%s seed=%s greedy_spread=%.6f spread=%.6f nodes=%s",
        len(players),
        team_count,
        seed,
        search.greedy_spread,
        search.best_spread,
        search.nodes,
    )
    return teams


class _BranchAndBound:
    """Depth-first search over participant placements, largest ratings first."""

    def __init__(
        self,
        *,
        ratings: list[float],
        team_count: int,
        rng: random.Random,
        epsilon: float,
        max_nodes: int,
    ) -> None:
        self.ratings = ratings
        self.participant_count = len(ratings)
        self.team_count = team_count
        self.rng = rng
        self.epsilon = epsilon
        self.max_nodes = max_nodes

        self.suffix_sums = [0.0] * (self.participant_count + 1)
        for index in range(self.participant_count - 1, -1, -1):
            self.suffix_sums[index] = self.suffix_sums[index + 1] + ratings[index]

        # Whole-number ratings give whole-number spreads
        self.integral = all(float(rating).is_integer() for rating in ratings)
        if self.integral and round(self.suffix_sums[0]) % team_count != 0:
            self.floor_spread = 1.0
        else:
            self.floor_spread = 0.0

        self.totals = [0.0] * team_count
        self.counts = [0] * team_count
        self.current = [-1] * self.participant_count
        self.nodes = 0
        self.stopped = False
        self.truncated = False

        self.best_assignment, self.best_spread = self._greedy()
        self.greedy_spread = self.best_spread

    def solve(self) -> list[int]:
        if not self._is_proven_optimal():
            self._search(0)
        return list(self.best_assignment)

    def _is_proven_optimal(self) -> bool:
        return self.best_spread <= self.floor_spread + self.epsilon

    def _empty_teams_to_fill(self, placed: int, counts: list[int]) -> list[int] | None:
        """Empty teams, when every remaining participant is needed to fill them."""
        empty = [team for team in range(self.team_count) if counts[team] == 0]
        if empty and self.participant_count - placed == len(empty):
            return empty
        return None

    def _greedy(self) -> tuple[list[int], float]:
        totals = [0.0] * self.team_count
        counts = [0] * self.team_count
        assignment: list[int] = []

        for index, rating in enumerate(self.ratings):
            candidates = self._empty_teams_to_fill(index, counts) or range(self.team_count)
            best_team = -1
            best_cost = inf
            for team in candidates:
                trial = list(totals)
                trial[team] += rating
                cost = spread_of(trial)
                if cost < best_cost:
                    best_cost = cost
                    best_team = team
                elif cost == best_cost and self.rng.random() < 0.5:
                    best_team = team
            totals[best_team] += rating
            counts[best_team] += 1
            assignment.append(best_team)

        return assignment, spread_of(totals)

    def _lower_bound(self, placed: int) -> float:
        """Smallest spread any completion of the current placement can reach.

        Pouring the remaining rating mass into the lightest teams gives the
        highest level the lightest final team can sit at. The heaviest final
        team is at least the current maximum, and at least whichever team
        receives the next (largest remaining) participant.
        """
        ordered = sorted(self.totals)
        budget = self.suffix_sums[placed]
        level = ordered[0]
        for count in range(1, self.team_count):
            gap = (ordered[count] - level) * count
            if gap > budget:
                break
            budget -= gap
            level = ordered[count]
        else:
            count = self.team_count
        level += budget / count

        heaviest = max(ordered[-1], ordered[0] + self.ratings[placed])
        bound = max(heaviest - level, 0.0)
        if self.integral:
            bound = float(ceil(bound - _INTEGRAL_SLACK))
        return bound

    def _search(self, placed: int) -> None:
        self.nodes += 1
        if self.nodes > self.max_nodes:
            self.stopped = True
            self.truncated = True
            return
        if placed == self.participant_count:
            self._record_leaf()
            return

        if self._lower_bound(placed) >= self.best_spread - self.epsilon:
            return

        empty = self._empty_teams_to_fill(placed, self.counts)
        if empty is not None:
            order = empty
            self.rng.shuffle(order)
        else:
            order = sorted(range(self.team_count), key=lambda team: (self.totals[team], self.counts[team]))

        rating = self.ratings[placed]
        tried: set[tuple[float, bool]] = set()
        for team in order:
            # Teams with the same total and emptiness lead to mirror subtrees
            key = (self.totals[team], self.counts[team] == 0)
            if key in tried:
                continue
            tried.add(key)

            previous_total = self.totals[team]
            self.totals[team] = previous_total + rating
            self.counts[team] += 1
            self.current[placed] = team

            self._search(placed + 1)

            self.current[placed] = -1
            self.counts[team] -= 1
            self.totals[team] = previous_total
            if self.stopped:
                return

    def _record_leaf(self) -> None:
        if 0 in self.counts:
            return
        spread = spread_of(self.totals)
        if spread < self.best_spread - self.epsilon:
            self.best_spread = spread
            self.best_assignment = list(self.current)
            if self._is_proven_optimal():
                self.stopped = True
        elif abs(spread - self.best_spread) <= self.epsilon and self.rng.random() < 0.5:
            self.best_assignment = list(self.current)


__all__ = ["PartitionParameters", "partition"]
