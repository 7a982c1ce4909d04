"""Specialization vocabulary: schemes, precisions, transpose modes, keys.

A kernel variant is identified by a SpecializationKey. Keys are frozen
dataclasses so equality and hashing cover every field independently;
two keys compare equal only when all of length, scheme, precision,
transpose mode and secondary length match.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from fft_generator.errors import UnsupportedConfigurationError


class ComputeScheme(Enum):
    STOCKHAM = "stockham"  # whole transform in one kernel, small sizes
    BLOCK_CC = "block_cc"  # column-column blocked, large 1D
    BLOCK_RC = "block_rc"  # row-column blocked, large 1D, supports transpose fusion
    FUSED_2D = "fused_2d"  # one kernel covering both dimensions of a 2D transform
    # Orientation variants of BLOCK_RC with a fused 3D transpose. Derived, never in a catalog.
    TRANSPOSE_XY_Z = "transpose_xy_z"
    TRANSPOSE_Z_XY = "transpose_z_xy"

    @classmethod
    def from_name(cls, name: str) -> ComputeScheme:
        try:
            return cls(name.lower())
        except ValueError:
            raise UnsupportedConfigurationError(f"Unknown compute scheme: {name!r}", key=name) from None


CATALOG_SCHEMES = frozenset({
    ComputeScheme.STOCKHAM,
    ComputeScheme.BLOCK_CC,
    ComputeScheme.BLOCK_RC,
    ComputeScheme.FUSED_2D,
})

TRANSPOSE_SCHEMES = (ComputeScheme.TRANSPOSE_XY_Z, ComputeScheme.TRANSPOSE_Z_XY)


class Precision(Enum):
    SINGLE = "single"
    DOUBLE = "double"

    @property
    def short_name(self) -> str:
        return "sp" if self is Precision.SINGLE else "dp"

    @property
    def complex_type(self) -> str:
        return "float2" if self is Precision.SINGLE else "double2"

    @classmethod
    def from_short_name(cls, short: str) -> Precision:
        for p in cls:
            if p.short_name == short:
                return p
        raise ValueError(f"Unknown precision short name: {short!r}")


class TransposeMode(Enum):
    NONE = "none"
    TILE_ALIGNED = "tile_aligned"  # transposes an even multiple of tiled rows
    TILE_UNALIGNED = "tile_unaligned"
    DIAGONAL = "diagonal"  # fastest, needs pow2 cube sizes


class RadixFamily(Enum):
    POW2 = "pow2"
    POW3 = "pow3"
    POW5 = "pow5"
    MIX_POW2_3 = "mix_pow2_3"
    MIX_POW3_2 = "mix_pow3_2"
    MIX_POW3_5 = "mix_pow3_5"
    MIX_POW5_3 = "mix_pow5_3"
    MIX_POW2_5 = "mix_pow2_5"
    MIX_POW5_2 = "mix_pow5_2"


@dataclass(frozen=True)
class SpecializationKey:
    length: int
    scheme: ComputeScheme
    precision: Precision
    transpose: TransposeMode = TransposeMode.NONE
    length2: int | None = None  # secondary length, FUSED_2D only

    @property
    def is_2d(self) -> bool:
        return self.length2 is not None

    def describe(self) -> str:
        lengths = str(self.length) if self.length2 is None else f"{self.length}x{self.length2}"
        text = f"{self.precision.value} {self.scheme.value} {lengths}"
        if self.transpose is not TransposeMode.NONE:
            text += f" ({self.transpose.value})"
        return text


@dataclass(frozen=True)
class KernelSymbol:
    """A generated launcher entry point and the key it implements."""

    name: str
    key: SpecializationKey


def subtable_name(key: SpecializationKey) -> str:
    """Name of the dispatch sub-table a key belongs to, e.g. 'double_transpose_diagonal'."""
    name = key.precision.value
    if key.is_2d:
        return name + "_2D"
    if key.transpose is not TransposeMode.NONE:
        return f"{name}_transpose_{key.transpose.value}"
    return name


def subtable_names() -> list[str]:
    """Every sub-table, in a stable order."""
    names = []
    for precision in Precision:
        names.append(precision.value)
        names.append(precision.value + "_2D")
        for mode in (TransposeMode.DIAGONAL, TransposeMode.TILE_ALIGNED, TransposeMode.TILE_UNALIGNED):
            names.append(f"{precision.value}_transpose_{mode.value}")
    return names
