"""Skill-balanced team formation."""

from domain.partition.seed import derive_seed
from domain.partition.solver import PartitionParameters, partition

__all__ = ["PartitionParameters", "derive_seed", "partition"]
