"""Parse and validate the ``[elo]`` section of the app config."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from domain.ratings.elo.calculator import EloParameters


def parse_elo_parameters(elo_raw: dict[str, Any], file_path: Path) -> EloParameters:
    defaults = EloParameters()
    parameters = EloParameters(
        k_factor=float(elo_raw.get("k_factor", defaults.k_factor)),
        scale_factor=float(elo_raw.get("scale_factor", defaults.scale_factor)),
        distribution_alpha=float(elo_raw.get("distribution_alpha", defaults.distribution_alpha)),
        weight_floor=float(elo_raw.get("weight_floor", defaults.weight_floor)),
        min_rating=float(elo_raw.get("min_rating", defaults.min_rating)),
    )
    _validate_parameters(file_path=file_path, parameters=parameters)
    return parameters


def elo_parameters_json(parameters: EloParameters) -> dict[str, Any]:
    return {
        "k_factor": parameters.k_factor,
        "scale_factor": parameters.scale_factor,
        "distribution_alpha": parameters.distribution_alpha,
        "weight_floor": parameters.weight_floor,
        "min_rating": parameters.min_rating,
    }


def _validate_parameters(*, file_path: Path, parameters: EloParameters) -> None:
    if parameters.k_factor <= 0.0:
        raise ValueError(f"{file_path}: [elo].k_factor must be > 0")
    if parameters.scale_factor <= 0.0:
        raise ValueError(f"{file_path}: [elo].scale_factor must be > 0")
    if parameters.distribution_alpha < 0.0:
        raise ValueError(f"{file_path}: [elo].distribution_alpha must be >= 0")
    if parameters.weight_floor <= 0.0:
        raise ValueError(f"{file_path}: [elo].weight_floor must be > 0")
    if parameters.min_rating < 0.0:
        raise ValueError(f"{file_path}: [elo].min_rating must be >= 0")


__all__ = ["elo_parameters_json", "parse_elo_parameters"]
