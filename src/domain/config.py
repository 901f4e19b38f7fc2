"""Load the deployment config (rating constants, partition limits, storage)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from domain.config_base import BaseSystemConfig, load_system_config, parse_system_section
from domain.partition import PartitionParameters
from domain.ratings.elo.calculator import EloParameters
from domain.ratings.elo.config import elo_parameters_json, parse_elo_parameters

ROOT_DIR = Path(__file__).resolve().parents[2]
DEFAULT_CONFIG_PATH = ROOT_DIR / "config" / "default.toml"
DEFAULT_DB_URL = "sqlite:///teambalance.sqlite"


@dataclass(frozen=True)
class AppConfig(BaseSystemConfig):
    """Configuration for one roster/history deployment."""

    elo: EloParameters = field(default_factory=EloParameters)
    partition: PartitionParameters = field(default_factory=PartitionParameters)
    default_team_count: int = 2
    db_url: str = DEFAULT_DB_URL
    history_count: int = 5

    def as_config_json(self) -> dict[str, Any]:
        return {
            "elo": elo_parameters_json(self.elo),
            "partition": {
                "default_team_count": self.default_team_count,
                "max_participants": self.partition.max_participants,
                "epsilon": self.partition.epsilon,
                "max_nodes": self.partition.max_nodes,
            },
            "storage": {"db_url": self.db_url},
            "history": {"default_count": self.history_count},
        }


def default_app_config() -> AppConfig:
    return AppConfig(name="default", description=None, file_path=DEFAULT_CONFIG_PATH)


def load_app_config(file_path: Path | None = None) -> AppConfig:
    """Load and validate one TOML config file (``config/default.toml`` by default)."""
    return load_system_config(file_path or DEFAULT_CONFIG_PATH, _parse_app_config)


def _parse_app_config(raw: dict[str, Any], file_path: Path) -> AppConfig:
    name, description = parse_system_section(raw, file_path)
    partition_raw = raw.get("partition", {})
    storage_raw = raw.get("storage", {})
    history_raw = raw.get("history", {})

    default_team_count = int(partition_raw.get("default_team_count", 2))
    if default_team_count < 1:
        raise ValueError(f"{file_path}: [partition].default_team_count must be >= 1")

    partition = PartitionParameters(
        epsilon=float(partition_raw.get("epsilon", 1e-12)),
        max_participants=int(partition_raw.get("max_participants", 25)),
        max_nodes=int(partition_raw.get("max_nodes", 250_000)),
    )
    if partition.epsilon < 0.0:
        raise ValueError(f"{file_path}: [partition].epsilon must be >= 0")
    if partition.max_nodes <= 0:
        raise ValueError(f"{file_path}: [partition].max_nodes must be > 0")
    if partition.max_participants < default_team_count:
        raise ValueError(
            f"{file_path}: [partition].max_participants must be >= [partition].default_team_count"
        )

    db_url = str(storage_raw.get("db_url", DEFAULT_DB_URL)).strip()
    if not db_url:
        raise ValueError(f"{file_path}: [storage].db_url must not be empty")

    history_count = int(history_raw.get("default_count", 5))
    if history_count <= 0:
        raise ValueError(f"{file_path}: [history].default_count must be > 0")

    return AppConfig(
        name=name,
        description=description,
        file_path=file_path,
        elo=parse_elo_parameters(raw.get("elo", {}), file_path),
        partition=partition,
        default_team_count=default_team_count,
        db_url=db_url,
        history_count=history_count,
    )


__all__ = ["AppConfig", "DEFAULT_CONFIG_PATH", "DEFAULT_DB_URL", "default_app_config", "load_app_config"]
