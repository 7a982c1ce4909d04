"""Load the kernel catalog (which lengths and schemes to generate).

The catalog is produced by an external planner. It holds three ordered
sequences: small Stockham lengths, large 1D (length, scheme) pairs and
fused 2D (length1, length2, scheme) triples.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

from fft_generator.scheme import ComputeScheme


@dataclass(frozen=True)
class Large1DSpec:
    length: int
    scheme: ComputeScheme


@dataclass(frozen=True)
class Fused2DSpec:
    length1: int
    length2: int
    scheme: ComputeScheme = ComputeScheme.FUSED_2D


@dataclass
class KernelCatalog:
    small: list[int] = field(default_factory=list)
    large1d: list[Large1DSpec] = field(default_factory=list)
    fused2d: list[Fused2DSpec] = field(default_factory=list)

    def __post_init__(self):
        _check_unique("small", self.small)
        _check_unique("large1d", self.large1d)
        _check_unique("fused2d", self.fused2d)
        for length in self.small:
            _check_length(length)
        for spec in self.large1d:
            _check_length(spec.length)
        for spec in self.fused2d:
            _check_length(spec.length1)
            _check_length(spec.length2)

    def to_dict(self) -> dict:
        return {
            "small": list(self.small),
            "large1d": [{"length": s.length, "scheme": s.scheme.value} for s in self.large1d],
            "fused2d": [
                {"length1": s.length1, "length2": s.length2, "scheme": s.scheme.value}
                for s in self.fused2d
            ],
        }

    def save(self, path: str):
        Path(path).write_text(json.dumps(self.to_dict(), indent=2))


def _check_length(length: int):
    if not isinstance(length, int) or isinstance(length, bool) or length <= 0:
        raise ValueError(f"Transform length must be a positive integer, got {length!r}")


def _check_unique(section: str, items: list):
    seen = set()
    for item in items:
        if item in seen:
            raise ValueError(f"Duplicate entry in catalog section '{section}': {item}")
        seen.add(item)


def _parse_large1d(d: dict) -> Large1DSpec:
    return Large1DSpec(length=d["length"], scheme=ComputeScheme.from_name(d["scheme"]))


def _parse_fused2d(d: dict) -> Fused2DSpec:
    return Fused2DSpec(
        length1=d["length1"],
        length2=d["length2"],
        scheme=ComputeScheme.from_name(d.get("scheme", ComputeScheme.FUSED_2D.value)),
    )


def load_catalog_from_dict(data: dict) -> KernelCatalog:
    """Load a catalog from a dict (for testing and in-process planners)."""
    return KernelCatalog(
        small=list(data.get("small", [])),
        large1d=[_parse_large1d(d) for d in data.get("large1d", [])],
        fused2d=[_parse_fused2d(d) for d in data.get("fused2d", [])],
    )


def load_catalog(path: str) -> KernelCatalog:
    """Load a catalog JSON file."""
    with open(path) as f:
        data = json.load(f)
    return load_catalog_from_dict(data)
