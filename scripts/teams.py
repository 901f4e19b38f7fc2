#!/usr/bin/env python3
"""Roster, team formation and match history commands."""

from __future__ import annotations

import sys
from enum import Enum
from pathlib import Path
from typing import Annotated

import typer

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from domain.common import spread_of
from domain.config import DEFAULT_CONFIG_PATH, AppConfig, default_app_config, load_app_config
from domain.errors import TeamBalanceError
from domain.pipeline import MatchService, MatchView
from domain.ratings.elo.calculator import RecomputeSummary
from logging_config import setup_logging
from repositories.persistence import SqlPersistence

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Balanced team formation and match rating commands.",
)

ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", help="TOML config file. Defaults to config/default.toml when present."),
]
DbUrlOption = Annotated[
    str | None,
    typer.Option("--db-url", help="Database URL. Overrides [storage].db_url from the config."),
]


class SortBy(str, Enum):
    RATING = "rating"
    NAME = "name"


def _load_config(config_path: Path | None) -> AppConfig:
    if config_path is not None:
        return load_app_config(config_path)
    if DEFAULT_CONFIG_PATH.exists():
        return load_app_config(DEFAULT_CONFIG_PATH)
    return default_app_config()


def _open_service(config_path: Path | None, db_url: str | None) -> tuple[AppConfig, MatchService]:
    config = _load_config(config_path)
    persistence = SqlPersistence.from_url(db_url or config.db_url)
    roster, history = persistence.load()
    service = MatchService(
        roster,
        history,
        elo_params=config.elo,
        partition_params=config.partition,
        persistence=persistence,
    )
    return config, service


def _fail(error: Exception) -> typer.Exit:
    typer.echo(f"error: {error}", err=True)
    return typer.Exit(code=1)


def _echo_summary(summary: RecomputeSummary) -> None:
    typer.echo(
        f"recomputed processed_matches={summary.processed_matches} "
        f"decided_matches={summary.decided_matches} "
        f"tracked_participants={summary.tracked_participants}"
    )


def _echo_match(view: MatchView) -> None:
    winners = ",".join(str(index) for index in sorted(view.record.winning_teams)) or "undecided"
    typer.echo(f"#{view.index} {view.record.event_time:%Y-%m-%d %H:%M:%S} winners={winners}")
    for team_index, team in enumerate(view.teams):
        names = ", ".join(member.name for member in team.members) or "-"
        marker = "*" if view.record.is_winner(team_index) else " "
        typer.echo(f"  {marker}team {team_index} total={team.total_rating:.2f}: {names}")


@app.command()
def register(
    participant_id: Annotated[int, typer.Argument(help="Participant id.")],
    name: Annotated[str, typer.Argument(help="Display name.")],
    rating: Annotated[float, typer.Argument(help="Rating; also becomes the replay baseline.")],
    config_path: ConfigOption = None,
    db_url: DbUrlOption = None,
) -> None:
    """Add a participant or reset an existing participant's rating and baseline."""
    _, service = _open_service(config_path, db_url)
    try:
        participant = service.register_participant(participant_id, name, rating)
    except TeamBalanceError as error:
        raise _fail(error) from error
    service.save()
    typer.echo(f"registered id={participant.participant_id} name={participant.name} rating={participant.rating:.2f}")


@app.command()
def remove(
    participant_id: Annotated[int, typer.Argument(help="Participant id.")],
    config_path: ConfigOption = None,
    db_url: DbUrlOption = None,
) -> None:
    """Remove a participant; past matches keep their id."""
    _, service = _open_service(config_path, db_url)
    try:
        participant = service.remove_participant(participant_id)
    except TeamBalanceError as error:
        raise _fail(error) from error
    service.save()
    typer.echo(f"removed id={participant.participant_id} name={participant.name}")


@app.command("list")
def list_participants(
    sort_by: Annotated[SortBy, typer.Option("--sort", help="Sort by rating or name.")] = SortBy.RATING,
    config_path: ConfigOption = None,
    db_url: DbUrlOption = None,
) -> None:
    """Print the roster."""
    _, service = _open_service(config_path, db_url)
    participants = service.list_participants(sort_by.value)
    if not participants:
        typer.echo("no participants")
        return

    for rank, participant in enumerate(participants, start=1):
        typer.echo(
            f"{rank}. {participant.name} id={participant.participant_id} "
            f"rating={participant.rating:.2f} wins={participant.wins} games={participant.games} "
            f"win_rate={participant.win_rate:.1%}"
        )


@app.command()
def form(
    participant_ids: Annotated[list[int], typer.Argument(help="Ids of the selected participants.")],
    team_count: Annotated[
        int | None,
        typer.Option("--teams", help="Number of teams. Defaults to [partition].default_team_count."),
    ] = None,
    seed: Annotated[
        int | None,
        typer.Option("--seed", help="Fixed seed for reproducible tie-breaking."),
    ] = None,
    commit: Annotated[
        bool,
        typer.Option("--commit", help="Record the teams as an undecided match."),
    ] = False,
    config_path: ConfigOption = None,
    db_url: DbUrlOption = None,
) -> None:
    """Split the selected participants into balanced teams."""
    config, service = _open_service(config_path, db_url)
    if len(set(participant_ids)) > config.partition.max_participants:
        raise typer.BadParameter(
            f"at most {config.partition.max_participants} participants can be selected",
            param_hint="PARTICIPANT_IDS",
        )

    try:
        teams = service.form_teams(participant_ids, team_count or config.default_team_count, seed)
    except TeamBalanceError as error:
        raise _fail(error) from error

    for team_index, team in enumerate(teams):
        names = ", ".join(member.name for member in team.members)
        typer.echo(f"team {team_index} total={team.total_rating:.2f} size={team.size}: {names}")
    typer.echo(f"spread={spread_of([team.total_rating for team in teams]):.2f}")

    if commit:
        index = service.add_match(teams)
        service.save()
        typer.echo(f"recorded match index={index}")


@app.command()
def winner(
    index: Annotated[int, typer.Argument(help="Match index (see `history`).")],
    winning_teams: Annotated[list[int], typer.Argument(help="Winning team indices.")],
    config_path: ConfigOption = None,
    db_url: DbUrlOption = None,
) -> None:
    """Decide a match and recompute every rating from history."""
    _, service = _open_service(config_path, db_url)
    try:
        summary = service.set_match_winner(index, winning_teams)
    except TeamBalanceError as error:
        raise _fail(error) from error
    service.save()
    _echo_summary(summary)
    _echo_match(service.match_by_index(index))


@app.command()
def delete(
    index: Annotated[int, typer.Argument(help="Match index (see `history`).")],
    config_path: ConfigOption = None,
    db_url: DbUrlOption = None,
) -> None:
    """Delete a match and recompute every rating from history."""
    _, service = _open_service(config_path, db_url)
    try:
        summary = service.delete_match(index)
    except TeamBalanceError as error:
        raise _fail(error) from error
    service.save()
    typer.echo(f"deleted match index={index}")
    _echo_summary(summary)


@app.command()
def history(
    count: Annotated[
        int | None,
        typer.Option("--count", help="Number of recent matches. Defaults to [history].default_count."),
    ] = None,
    config_path: ConfigOption = None,
    db_url: DbUrlOption = None,
) -> None:
    """Print the most recent matches, newest first."""
    config, service = _open_service(config_path, db_url)
    if count is not None and count <= 0:
        raise typer.BadParameter("--count must be greater than 0")

    views = service.recent_matches(count or config.history_count)
    if not views:
        typer.echo("no matches")
        return
    for view in views:
        _echo_match(view)


@app.command()
def recompute(
    config_path: ConfigOption = None,
    db_url: DbUrlOption = None,
) -> None:
    """Reset ratings to baseline and replay the full history."""
    _, service = _open_service(config_path, db_url)
    try:
        summary = service.recompute_ratings()
    except TeamBalanceError as error:
        raise _fail(error) from error
    service.save()
    _echo_summary(summary)


if __name__ == "__main__":
    setup_logging()
    app()
