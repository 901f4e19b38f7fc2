"""Tests for TOML-based app config loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from domain.config import DEFAULT_CONFIG_PATH, DEFAULT_DB_URL, default_app_config, load_app_config
from domain.ratings.elo.calculator import EloParameters


def test_load_app_config_from_file(tmp_path: Path) -> None:
    config_path = tmp_path / "league.toml"
    config_path.write_text(
        """
[system]
name = "league"
description = "Thursday league"

[elo]
k_factor = 8.0
scale_factor = 500.0
distribution_alpha = 0.5
weight_floor = 1e-3
min_rating = 100.0

[partition]
default_team_count = 3
max_participants = 18
max_nodes = 5000
epsilon = 1e-9

[storage]
db_url = "sqlite:///league.sqlite"

[history]
default_count = 10
""".strip()
    )

    config = load_app_config(config_path)

    assert config.name == "league"
    assert config.description == "Thursday league"
    assert config.file_path == config_path
    assert config.elo.k_factor == pytest.approx(8.0)
    assert config.elo.scale_factor == pytest.approx(500.0)
    assert config.elo.distribution_alpha == pytest.approx(0.5)
    assert config.elo.weight_floor == pytest.approx(1e-3)
    assert config.elo.min_rating == pytest.approx(100.0)
    assert config.default_team_count == 3
    assert config.partition.max_participants == 18
    assert config.partition.max_nodes == 5000
    assert config.partition.epsilon == pytest.approx(1e-9)
    assert config.db_url == "sqlite:///league.sqlite"
    assert config.history_count == 10
    assert config.as_config_json()["partition"]["default_team_count"] == 3


def test_missing_sections_fall_back_to_defaults(tmp_path: Path) -> None:
    config_path = tmp_path / "minimal.toml"
    config_path.write_text('[system]\nname = "minimal"\n')

    config = load_app_config(config_path)

    assert config.elo == EloParameters()
    assert config.default_team_count == 2
    assert config.partition.max_participants == 25
    assert config.db_url == DEFAULT_DB_URL
    assert config.history_count == 5


def test_bundled_default_config_matches_builtin_defaults() -> None:
    config = load_app_config(DEFAULT_CONFIG_PATH)
    assert config.as_config_json() == default_app_config().as_config_json()


def test_missing_system_name_raises(tmp_path: Path) -> None:
    config_path = tmp_path / "nameless.toml"
    config_path.write_text("[elo]\nk_factor = 4.0\n")

    with pytest.raises(ValueError, match=r"\[system\]\.name is required"):
        load_app_config(config_path)


@pytest.mark.parametrize(
    ("section", "body", "message"),
    [
        ("elo", "k_factor = 0.0", r"\[elo\]\.k_factor must be > 0"),
        ("elo", "scale_factor = -1.0", r"\[elo\]\.scale_factor must be > 0"),
        ("elo", "distribution_alpha = -0.1", r"\[elo\]\.distribution_alpha must be >= 0"),
        ("elo", "weight_floor = 0.0", r"\[elo\]\.weight_floor must be > 0"),
        ("elo", "min_rating = -5.0", r"\[elo\]\.min_rating must be >= 0"),
        ("partition", "default_team_count = 0", r"\[partition\]\.default_team_count must be >= 1"),
        ("partition", "max_participants = 1", r"\[partition\]\.max_participants must be >="),
        ("partition", "epsilon = -1.0", r"\[partition\]\.epsilon must be >= 0"),
        ("partition", "max_nodes = 0", r"\[partition\]\.max_nodes must be > 0"),
        ("storage", 'db_url = "  "', r"\[storage\]\.db_url must not be empty"),
        ("history", "default_count = 0", r"\[history\]\.default_count must be > 0"),
    ],
)
def test_invalid_values_raise_with_file_path(tmp_path: Path, section: str, body: str, message: str) -> None:
    config_path = tmp_path / "bad.toml"
    config_path.write_text(f'[system]\nname = "bad"\n\n[{section}]\n{body}\n')

    with pytest.raises(ValueError, match=message) as excinfo:
        load_app_config(config_path)

    assert str(config_path) in str(excinfo.value)


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_app_config(tmp_path / "absent.toml")
