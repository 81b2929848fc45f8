"""Funding masks: bit i set means project i is funded.

Project i is identified by the bit it occupies, so the first project's id is
``1``, the second ``0b10``, the third ``0b100`` and so on. A catalogue can
therefore hold at most as many projects as the widest unsigned machine word
has bits; anything larger needs a variable-length bit set instead.
"""
from __future__ import annotations

from typing import Iterable, Tuple

import numpy as np

from capital_budget_search.errors import ConfigurationError

_MASK_DTYPES = (np.uint8, np.uint16, np.uint32, np.uint64)
MAX_PROJECTS = np.iinfo(_MASK_DTYPES[-1]).bits


def mask_dtype(n: int) -> np.dtype:
    """Narrowest unsigned integer dtype with at least ``n`` bits."""
    if n < 1:
        raise ConfigurationError("A catalogue needs at least one project.")
    for dt in _MASK_DTYPES:
        if n <= np.iinfo(dt).bits:
            return np.dtype(dt)
    raise ConfigurationError(
        f"{n} projects do not fit a {MAX_PROJECTS}-bit funding mask; "
        "larger catalogues need a variable-length bit set."
    )


def project_id(index: int) -> int:
    return 1 << index


def encode(indices: Iterable[int]) -> int:
    mask = 0
    for i in indices:
        mask |= project_id(i)
    return mask


def in_range(mask: int, n: int) -> bool:
    return 0 <= mask < (1 << n)


def decode(mask: int, n: int) -> Tuple[bool, ...]:
    if not in_range(mask, n):
        raise ValueError(f"Mask {mask:#b} does not fit a catalogue of {n} projects")
    return tuple((mask >> i) & 1 == 1 for i in range(n))


def indices(mask: int, n: int) -> Tuple[int, ...]:
    return tuple(i for i in range(n) if (mask >> i) & 1)


def format_bits(mask: int, n: int) -> str:
    """Render as ``"1, 0, 0, 1"`` with project 0 first."""
    return ", ".join("1" if bit else "0" for bit in decode(mask, n))


__all__ = [
    "MAX_PROJECTS",
    "decode",
    "encode",
    "format_bits",
    "in_range",
    "indices",
    "mask_dtype",
    "project_id",
]
