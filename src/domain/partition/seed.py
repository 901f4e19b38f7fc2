"""Seed derivation for randomized tie-breaking during team formation."""

from __future__ import annotations

import time
from collections.abc import Iterable

_MASK64 = (1 << 64) - 1
_FNV_OFFSET = 0xCBF29CE484222325
_FNV_PRIME = 0x100000001B3


def _mix64(value: int) -> int:
    value &= _MASK64
    value ^= value >> 33
    value = (value * 0xFF51AFD7ED558CCD) & _MASK64
    value ^= value >> 33
    value = (value * 0xC4CEB9FE1A85EC53) & _MASK64
    value ^= value >> 33
    return value


def hash_participant_ids(participant_ids: Iterable[int]) -> int:
    """Order-independent 64-bit FNV hash of a participant id set."""
    digest = _FNV_OFFSET
    for participant_id in sorted(int(value) & _MASK64 for value in participant_ids):
        digest ^= participant_id
        digest = (digest * _FNV_PRIME) & _MASK64
    return digest


def derive_seed(participant_ids: Iterable[int], *, now_ns: int | None = None) -> int:
    """Mix the participant set with wall-clock time so repeated calls vary."""
    clock = time.time_ns() if now_ns is None else now_ns
    return hash_participant_ids(participant_ids) ^ _mix64(clock)


__all__ = ["derive_seed", "hash_participant_ids"]
