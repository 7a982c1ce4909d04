"""Specialization classification for generated kernels.

Two independent decisions:

- Transpose fusion: BLOCK_RC kernels can fuse the transpose of a 3D
  transform. Tile-aligned fusion always applies; diagonal fusion needs a
  power-of-two cube, and only the 1D block length is tested.
- Radix family: fused 2D kernels are sharded into launcher units by the
  radix family of their length pair. Buckets only route code, they do not
  change kernel semantics.
"""

from __future__ import annotations

from functools import lru_cache

from fft_generator.errors import UnsupportedConfigurationError
from fft_generator.scheme import RadixFamily, TransposeMode


def is_pow(n: int, base: int) -> bool:
    """True when n == base**k for some k >= 0."""
    if n < 1:
        return False
    while n % base == 0:
        n //= base
    return n == 1


def is_pow2(n: int) -> bool:
    return n > 0 and (n & (n - 1)) == 0


@lru_cache(maxsize=None)
def is_diagonal_eligible(length: int) -> bool:
    """Whether a BLOCK_RC length can use diagonal transpose fusion."""
    return is_pow2(length)


def transpose_modes(length: int) -> tuple[TransposeMode, ...]:
    """Fused transpose modes generated for a BLOCK_RC length, in emission order."""
    if is_diagonal_eligible(length):
        return (TransposeMode.TILE_ALIGNED, TransposeMode.DIAGONAL)
    return (TransposeMode.TILE_ALIGNED,)


# (base of length1, base of length2) -> bucket, checked in this order
_RADIX_FAMILY_TABLE: tuple[tuple[int, int, RadixFamily], ...] = (
    (2, 2, RadixFamily.POW2),
    (3, 3, RadixFamily.POW3),
    (5, 5, RadixFamily.POW5),
    (2, 3, RadixFamily.MIX_POW2_3),
    (3, 2, RadixFamily.MIX_POW3_2),
    (3, 5, RadixFamily.MIX_POW3_5),
    (5, 3, RadixFamily.MIX_POW5_3),
    (2, 5, RadixFamily.MIX_POW2_5),
    (5, 2, RadixFamily.MIX_POW5_2),
)


def classify_2d(length1: int, length2: int) -> RadixFamily:
    """Radix family bucket of an ordered 2D length pair.

    Raises UnsupportedConfigurationError for pairs outside the nine
    pure/mixed pow2/pow3/pow5 combinations.
    """
    for base1, base2, family in _RADIX_FAMILY_TABLE:
        if is_pow(length1, base1) and is_pow(length2, base2):
            return family
    raise UnsupportedConfigurationError(
        f"No radix family for 2D lengths ({length1}, {length2})",
        key=(length1, length2),
    )
