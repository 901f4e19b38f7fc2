"""Shared config-loading utilities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, TypeVar
import tomllib


@dataclass(frozen=True)
class BaseSystemConfig:
    """Minimal metadata shared by every deployment config."""

    name: str
    description: str | None
    file_path: Path

    def as_config_json(self) -> dict[str, Any]:
        raise NotImplementedError


T = TypeVar("T", bound=BaseSystemConfig)


def read_toml(file_path: Path) -> dict[str, Any]:
    if not file_path.exists():
        raise FileNotFoundError(f"Config file not found: {file_path}")
    if file_path.is_dir():
        raise IsADirectoryError(f"Config path is a directory: {file_path}")
    with file_path.open("rb") as file:
        return tomllib.load(file)


def load_system_config(file_path: Path, parser: Callable[[dict[str, Any], Path], T]) -> T:
    """Load one TOML file and hand it to ``parser``."""
    return parser(read_toml(file_path), file_path)


def parse_system_section(raw: dict[str, Any], file_path: Path) -> tuple[str, str | None]:
    system_raw = raw.get("system", {})

    name = str(system_raw.get("name", "")).strip()
    if not name:
        raise ValueError(f"{file_path}: [system].name is required")

    description_value = system_raw.get("description")
    description = None if description_value is None else str(description_value)
    return name, description


__all__ = ["BaseSystemConfig", "load_system_config", "parse_system_section", "read_toml"]
