"""End-to-end tests for the team CLI against a temporary SQLite file."""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from teams import app

runner = CliRunner()


@pytest.fixture
def db_args(tmp_path: Path) -> list[str]:
    return ["--db-url", f"sqlite:///{tmp_path / 'league.sqlite'}"]


def _register_four(db_args: list[str]) -> None:
    for participant_id, name, rating in [
        ("1", "ana", "1000"),
        ("2", "bo", "1000"),
        ("3", "cid", "1200"),
        ("4", "dee", "800"),
    ]:
        result = runner.invoke(app, ["register", participant_id, name, rating, *db_args])
        assert result.exit_code == 0, result.output


def test_register_form_decide_and_list(db_args: list[str]) -> None:
    _register_four(db_args)

    formed = runner.invoke(app, ["form", "1", "2", "3", "4", "--seed", "1", "--commit", *db_args])
    assert formed.exit_code == 0, formed.output
    assert "spread=0.00" in formed.stdout
    assert "recorded match index=0" in formed.stdout

    decided = runner.invoke(app, ["winner", "0", "0", *db_args])
    assert decided.exit_code == 0, decided.output
    assert "processed_matches=1" in decided.stdout

    listed = runner.invoke(app, ["list", *db_args])
    assert listed.exit_code == 0, listed.output
    assert listed.stdout.count("games=1") == 4

    history = runner.invoke(app, ["history", *db_args])
    assert history.exit_code == 0, history.output
    assert "#0" in history.stdout
    assert "winners=0" in history.stdout


def test_delete_resets_ratings(db_args: list[str]) -> None:
    _register_four(db_args)
    assert runner.invoke(app, ["form", "1", "2", "3", "4", "--seed", "2", "--commit", *db_args]).exit_code == 0
    assert runner.invoke(app, ["winner", "0", "1", *db_args]).exit_code == 0

    deleted = runner.invoke(app, ["delete", "0", *db_args])
    assert deleted.exit_code == 0, deleted.output
    assert "processed_matches=0" in deleted.stdout

    listed = runner.invoke(app, ["list", "--sort", "name", *db_args])
    assert "ana id=1 rating=1000.00 wins=0 games=0" in listed.stdout
    assert runner.invoke(app, ["history", *db_args]).stdout.strip() == "no matches"


def test_form_with_unknown_participant_fails(db_args: list[str]) -> None:
    _register_four(db_args)

    result = runner.invoke(app, ["form", "1", "99", *db_args])

    assert result.exit_code == 1


def test_winner_for_missing_match_fails(db_args: list[str]) -> None:
    _register_four(db_args)

    result = runner.invoke(app, ["winner", "3", "0", *db_args])

    assert result.exit_code == 1


def test_list_on_empty_database(db_args: list[str]) -> None:
    result = runner.invoke(app, ["list", *db_args])
    assert result.exit_code == 0
    assert result.stdout.strip() == "no participants"


def test_register_rejects_non_finite_rating(db_args: list[str]) -> None:
    result = runner.invoke(app, ["register", "2", "bo", "inf", *db_args])

    assert result.exit_code == 1
    assert runner.invoke(app, ["list", *db_args]).stdout.strip() == "no participants"
