"""Pairwise team Elo with rating-weighted distribution to team members."""

from __future__ import annotations

from collections.abc import Callable, Collection, Iterable, Sequence
from dataclasses import dataclass
from math import isfinite

from domain.common import MatchRecord, Participant, Team, chronological, team_member_ids
from domain.errors import EmptyTeamsError, InvalidWinnerIndexError, NumericInstabilityError
from domain.ratings.protocol import MatchHistory, RosterStore
from logging_config import get_logger

log = get_logger(__name__)

BaselineLookup = Callable[[Participant], float]


@dataclass(frozen=True)
class EloParameters:
    k_factor: float = 4.0
    scale_factor: float = 400.0
    distribution_alpha: float = 0.6
    weight_floor: float = 1e-6
    min_rating: float = 0.0


@dataclass(frozen=True)
class ParticipantRatingEvent:
    participant_id: int
    team_index: int
    won: bool
    team_rating: float
    team_delta: float
    pre_rating: float
    rating_delta: float
    post_rating: float


@dataclass(frozen=True)
class RecomputeSummary:
    """Outcome of one full replay."""

    processed_matches: int
    decided_matches: int
    tracked_participants: int
    rating_events: int


def calculate_expected_score(rating: float, opponent_rating: float, scale_factor: float) -> float:
    """Compute the Elo expected score for one side."""
    try:
        return 1.0 / (1.0 + 10.0 ** ((opponent_rating - rating) / scale_factor))
    except OverflowError:
        # Opponent is so much stronger that the curve has flattened out
        return 0.0


def pairwise_actual_scores(i_won: bool, j_won: bool) -> tuple[float, float]:
    """1/0 when exactly one side won, otherwise a draw."""
    if i_won == j_won:
        return 0.5, 0.5
    return (1.0, 0.0) if i_won else (0.0, 1.0)


def team_deltas(
    team_ratings: Sequence[float],
    winners: Collection[int],
    params: EloParameters,
) -> list[float]:
    """Sum ``K * (actual - expected)`` over every pair of teams.

    Each pair contributes equal and opposite amounts, so the deltas of one
    match sum to zero.
    """
    deltas = [0.0] * len(team_ratings)
    for i in range(len(team_ratings)):
        for j in range(i + 1, len(team_ratings)):
            expected_i = calculate_expected_score(team_ratings[i], team_ratings[j], params.scale_factor)
            expected_j = 1.0 - expected_i
            actual_i, actual_j = pairwise_actual_scores(i in winners, j in winners)
            deltas[i] += params.k_factor * (actual_i - expected_i)
            deltas[j] += params.k_factor * (actual_j - expected_j)
    return deltas


def distribution_weights(
    member_ratings: Sequence[float],
    team_delta: float,
    params: EloParameters,
) -> list[float]:
    """Share of a team delta each member receives; shares sum to 1.

    Gains favour lower-rated members (``rating ** -alpha``), losses fall
    harder on higher-rated ones (``rating ** alpha``).
    """
    if not member_ratings:
        return []
    if sum(member_ratings) <= params.weight_floor:
        return [1.0 / len(member_ratings)] * len(member_ratings)

    exponent = -params.distribution_alpha if team_delta > 0.0 else params.distribution_alpha
    weights: list[float] = []
    for rating in member_ratings:
        weight = max(rating, params.weight_floor) ** exponent
        if not isfinite(weight):
            raise NumericInstabilityError(f"Non-finite distribution weight for rating {rating!r}")
        weights.append(weight)

    normalizer = sum(weights)
    if not (normalizer > 0.0) or not isfinite(normalizer):
        raise NumericInstabilityError(f"Distribution weight sum is abnormal: {normalizer!r}")
    return [weight / normalizer for weight in weights]


class RatingEngine:
    """Applies match outcomes to participants held in a roster store."""

    def __init__(self, roster: RosterStore, params: EloParameters | None = None) -> None:
        self.roster = roster
        self.params = params or EloParameters()

    def apply_match_effect(
        self,
        teams: Sequence[Team | Sequence[int]],
        winners: Iterable[int],
    ) -> list[ParticipantRatingEvent]:
        """Update ratings, games and wins for one match.

        Nothing is written to the roster unless every update is valid.
        """
        updated, events = self._compute_match(self.roster.find, teams, winners)
        for participant in updated.values():
            self.roster.upsert(participant)
        return events

    def recompute_all_from_history(
        self,
        history: MatchHistory | Sequence[MatchRecord],
        baseline_lookup: BaselineLookup | None = None,
    ) -> RecomputeSummary:
        """Reset everyone to baseline and replay ``history`` oldest first.

        The replay runs against copies; the roster only changes when every
        match replays cleanly.
        """
        if isinstance(history, MatchHistory):
            records = list(history.iterate_chronological())
        else:
            records = chronological(history)

        scratch: dict[int, Participant] = {}
        for participant in self.roster.iterate():
            baseline = (
                participant.baseline_rating if baseline_lookup is None else baseline_lookup(participant)
            )
            scratch[participant.participant_id] = Participant(
                participant_id=participant.participant_id,
                name=participant.name,
                rating=baseline,
                baseline_rating=participant.baseline_rating,
            )

        rating_events = 0
        for position, record in enumerate(records):
            try:
                updated, events = self._compute_match(scratch.get, record.teams, record.winning_teams)
            except NumericInstabilityError:
                log.warning("Replay aborted at chronological position=%s time=%s", position, record.event_time)
                raise
            scratch.update(updated)
            rating_events += len(events)

        for participant in scratch.values():
            self.roster.upsert(participant)

        summary = RecomputeSummary(
            processed_matches=len(records),
            decided_matches=sum(1 for record in records if record.is_decided),
            tracked_participants=len(scratch),
            rating_events=rating_events,
        )
        log.debug(
            "recomputed processed_matches=%s decided_matches=%s tracked_participants=%s rating_events=%s",
            summary.processed_matches,
            summary.decided_matches,
            summary.tracked_participants,
            summary.rating_events,
        )
        return summary

    def _compute_match(
        self,
        lookup: Callable[[int], Participant | None],
        teams: Sequence[Team | Sequence[int]],
        winners: Iterable[int],
    ) -> tuple[dict[int, Participant], list[ParticipantRatingEvent]]:
        if not teams:
            raise EmptyTeamsError()
        winner_set = frozenset(winners)
        for index in sorted(winner_set):
            if index < 0 or index >= len(teams):
                raise InvalidWinnerIndexError(index, len(teams))

        # Members no longer on the roster carry no rating and are skipped
        rosters: list[list[int]] = []
        states: dict[int, Participant] = {}
        for team in teams:
            present: list[int] = []
            for member_id in team_member_ids(team):
                if member_id not in states:
                    participant = lookup(member_id)
                    if participant is None:
                        continue
                    states[member_id] = participant.snapshot()
                present.append(member_id)
            rosters.append(present)

        pre_ratings = {member_id: state.rating for member_id, state in states.items()}
        team_ratings = [sum(pre_ratings[member_id] for member_id in present) for present in rosters]
        deltas = team_deltas(team_ratings, winner_set, self.params)

        for team_index, present in enumerate(rosters):
            delta = deltas[team_index]
            if not present or delta == 0.0:
                continue
            shares = distribution_weights([pre_ratings[member_id] for member_id in present], delta, self.params)
            for member_id, share in zip(present, shares):
                state = states[member_id]
                proposed = state.rating + delta * share
                if not isfinite(proposed):
                    raise NumericInstabilityError(
                        f"Non-finite rating for participant {member_id}: {proposed!r}"
                    )
                state.rating = max(self.params.min_rating, proposed)

        events: list[ParticipantRatingEvent] = []
        for team_index, present in enumerate(rosters):
            won = team_index in winner_set
            for member_id in present:
                state = states[member_id]
                state.games += 1
                if won:
                    state.wins += 1
                events.append(
                    ParticipantRatingEvent(
                        participant_id=member_id,
                        team_index=team_index,
                        won=won,
                        team_rating=team_ratings[team_index],
                        team_delta=deltas[team_index],
                        pre_rating=pre_ratings[member_id],
                        rating_delta=state.rating - pre_ratings[member_id],
                        post_rating=state.rating,
                    )
                )

        log.debug(
            "match effect teams=%s winners=%s team_ratings=%s team_deltas=%s",
            len(teams),
            sorted(winner_set),
            team_ratings,
            deltas,
        )
        return states, events


__all__ = [
    "BaselineLookup",
    "EloParameters",
    "ParticipantRatingEvent",
    "RatingEngine",
    "RecomputeSummary",
    "calculate_expected_score",
    "distribution_weights",
    "pairwise_actual_scores",
    "team_deltas",
]
