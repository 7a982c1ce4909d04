"""Work-group geometry selection.

For a transform length, picks how many lanes cooperate in a work-group
(work_group_size) and how many transforms one group processes
(transforms_per_group). Every geometry must satisfy:

    transforms_per_group * length >= work_group_size
    (transforms_per_group * length) % work_group_size == 0

Known-good geometries come from a curated table; everything else goes
through a deterministic fallback heuristic that groups lengths by prime
factor mix.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import numpy as np

from fft_generator.errors import GeometryError
from fft_generator.scheme import ComputeScheme
from fft_generator.target_config import DEFAULT_TARGET, TargetConfig

logger = logging.getLogger(__name__)

SUPPORTED_PRIMES = (13, 11, 7, 5, 3, 2)


@dataclass(frozen=True)
class GeometryParams:
    work_group_size: int
    transforms_per_group: int
    radices: tuple[int, ...] = ()
    source: str = "heuristic"


# length -> (work_group_size, transforms_per_group, radices)
_GEOMETRY_TABLE: dict[int, tuple[int, int, tuple[int, ...]]] = {
    4096: (256, 1, (16, 16, 16)),
    2048: (256, 1, (8, 8, 8, 4)),
    1024: (128, 1, (8, 8, 4, 4)),
    729: (243, 1, (3, 3, 3, 3, 3, 3)),
    625: (125, 1, (5, 5, 5, 5)),
    512: (64, 1, (8, 8, 8)),
    256: (64, 1, (4, 4, 4, 4)),
    243: (81, 1, (3, 3, 3, 3, 3)),
    128: (64, 4, (8, 4, 4)),
    125: (25, 5, (5, 5, 5)),
    81: (27, 3, (3, 3, 3, 3)),
    64: (64, 4, (4, 4, 4)),
    32: (64, 16, (8, 4)),
    16: (64, 16, (4, 4)),
    8: (64, 32, (4, 2)),
    4: (64, 32, (2, 2)),
    2: (64, 64, (2,)),
}

# Largest work-group size tried for pure power-of-p lengths.
_PURE_FAMILY_CAP = {3: 243, 5: 125, 7: 49, 11: 121, 13: 169}

# Candidate divisors tested per numpy batch.
_DIVISOR_CHUNK = 1 << 16


def table_lengths() -> list[int]:
    return sorted(_GEOMETRY_TABLE)


def select_geometry(
    length: int,
    scheme: ComputeScheme = ComputeScheme.STOCKHAM,
    config: TargetConfig = DEFAULT_TARGET,
) -> GeometryParams:
    """Pick a work-group geometry for one transform length.

    Raises GeometryError when the length is not positive or the resulting
    geometry breaks an invariant.
    """
    if length <= 0:
        raise GeometryError(f"Transform length must be positive, got {length}", length=length)

    entry = _GEOMETRY_TABLE.get(length)
    if (entry is not None
            and config.max_work_group_size >= config.table_min_work_group_size
            and entry[0] <= config.max_work_group_size):
        wgs, nt, radices = entry
        geometry = GeometryParams(wgs, nt, radices, source="table")
    else:
        wgs, nt = _determine_sizes(length, config.max_work_group_size)
        logger.debug("No table geometry for %s length %d, heuristic chose wgs=%d nt=%d",
                     scheme.value, length, wgs, nt)
        geometry = GeometryParams(wgs, nt, source="heuristic")

    check_geometry(length, geometry)
    return geometry


def check_geometry(length: int, geometry: GeometryParams):
    """Raise GeometryError unless the geometry satisfies both invariants."""
    wgs = geometry.work_group_size
    nt = geometry.transforms_per_group
    if wgs <= 0 or nt <= 0:
        raise GeometryError(f"Non-positive geometry for length {length}: wgs={wgs}, nt={nt}",
                            length=length)
    if nt * length < wgs:
        raise GeometryError(f"Work-group of {wgs} lanes exceeds {nt} transforms of length {length}",
                            length=length)
    if (nt * length) % wgs != 0:
        raise GeometryError(f"{nt} transforms of length {length} do not split evenly over "
                            f"{wgs} lanes", length=length)


def select_geometry_2d(
    length1: int,
    length2: int,
    config: TargetConfig = DEFAULT_TARGET,
) -> GeometryParams:
    """Geometry of a fused 2D kernel covering length1 x length2 elements.

    The work-group is sized for the wider of the two 1D geometries; enough
    2D transforms share a group that every lane has work.
    """
    geometry1 = select_geometry(length1, ComputeScheme.STOCKHAM, config)
    geometry2 = select_geometry(length2, ComputeScheme.STOCKHAM, config)
    wgs = max(geometry1.work_group_size, geometry2.work_group_size)
    elements = length1 * length2
    geometry = GeometryParams(wgs, wgs // math.gcd(elements, wgs), source="fused_2d")
    check_geometry(elements, geometry)
    return geometry


# ---------------------------------------------------------------------------
# Fallback heuristic
# ---------------------------------------------------------------------------

def _expand_factors(length: int) -> tuple[dict[int, int], int]:
    """Return {prime: prime**exponent} over SUPPORTED_PRIMES and the unfactored rest."""
    rest = length
    expanded = {}
    for p in SUPPORTED_PRIMES:
        e = 1
        while rest % p == 0:
            rest //= p
            e *= p
        expanded[p] = e
    return expanded, rest


def _largest_power_at_most(base: int, limit: int) -> int:
    value = 1
    while value * base <= limit:
        value *= base
    return value


def _determine_sizes(length: int, max_wgs: int) -> tuple[int, int]:
    if length == 1:
        if max_wgs >= 64:
            return 64, 64
        return max_wgs, max_wgs

    expanded, rest = _expand_factors(length)
    if rest == 1:
        pure = _pure_family_sizes(length, expanded, max_wgs)
        if pure is not None:
            return pure
        least, desired = _mixed_rule(length, expanded)
        if length % least != 0:
            least = 1
    else:
        least, desired = 1, max_wgs
    return _search_sizes(length, least, min(desired, max_wgs), max_wgs)


def _pure_family_sizes(length: int, expanded: dict[int, int], max_wgs: int) -> tuple[int, int] | None:
    if expanded[2] == length:
        if length >= 1024:
            wgs, nt = _largest_power_at_most(2, min(256, max_wgs)), 1
        elif length == 512:
            wgs, nt = 64, 1
        elif length >= 16:
            wgs, nt = 64, 256 // length
        else:
            wgs, nt = 64, 128 // length
        return (wgs, nt) if wgs <= max_wgs else None

    for p, cap in _PURE_FAMILY_CAP.items():
        if expanded[p] == length:
            wgs = _largest_power_at_most(p, min(cap, max_wgs))
            if wgs == 1:
                return None
            nt = 1 if length >= p * wgs else (p * wgs) // length
            return wgs, nt
    return None


def _mixed_rule(length: int, expanded: dict[int, int]) -> tuple[int, int]:
    """(least elements per work item, desired work-group size) for a prime mix."""
    f2, f3, f5, f7 = expanded[2], expanded[3], expanded[5], expanded[7]
    if f2 * f3 == length:
        return (12, 128) if length % 12 == 0 else (6, 256)
    if f2 * f5 == length:
        return (20, 64) if length % 20 == 0 else (10, 128)
    if f2 * f7 == length:
        return 14, 64
    if f3 * f5 == length:
        return 15, 128
    if f3 * f7 == length:
        return 21, 128
    if f5 * f7 == length:
        return 35, 64
    if f2 * f3 * f5 == length:
        return 30, 64
    if f2 * f3 * f7 == length:
        return 42, 60
    if f2 * f5 * f7 == length:
        return 70, 36
    if f3 * f5 * f7 == length:
        return 105, 24
    if f2 * expanded[11] == length:
        return 22, 128
    if f2 * expanded[13] == length:
        return 26, 128
    if length % 210 == 0:
        return 210, 12
    return 1, 256


def _divisors(length: int) -> list[int]:
    """Divisors of length in ascending order, scanning candidates up to sqrt(length) in chunks."""
    if length > np.iinfo(np.int64).max:
        raise GeometryError(f"Transform length {length} is too large", length=length)
    root = math.isqrt(length)
    low: list[int] = []
    for start in range(1, root + 1, _DIVISOR_CHUNK):
        candidates = np.arange(start, min(start + _DIVISOR_CHUNK, root + 1), dtype=np.int64)
        low.extend(candidates[length % candidates == 0].tolist())
    high = [length // d for d in reversed(low) if d * d != length]
    return low + high


def _search_sizes(length: int, least: int, desired: int, max_wgs: int) -> tuple[int, int]:
    """Smallest per-item element count (multiple of least) whose lane count fits max_wgs."""
    for per_item in _divisors(length):
        if per_item % least == 0 and length // per_item <= max_wgs:
            threads = length // per_item
            nt = max(1, desired // threads)
            return nt * threads, nt
    raise GeometryError(f"No work-item split of length {length} fits {max_wgs} lanes",
                        length=length)
