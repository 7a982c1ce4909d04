"""Kernel manifest: JSON record of the launcher symbols of one build.

Lets a separate process rebuild the dispatch registry from exactly the
symbols that were generated.
"""

from __future__ import annotations

import json
from pathlib import Path

from fft_generator.naming import DEFAULT_PREFIX, kernel_symbol
from fft_generator.scheme import (
    ComputeScheme,
    KernelSymbol,
    Precision,
    SpecializationKey,
    TransposeMode,
)

MANIFEST_FORMAT = "fft_kernel_manifest"
MANIFEST_VERSION = 1


def manifest_to_dict(symbols: list[KernelSymbol], prefix: str = DEFAULT_PREFIX) -> dict:
    return {
        "format": MANIFEST_FORMAT,
        "version": MANIFEST_VERSION,
        "prefix": prefix,
        "symbols": [_symbol_to_dict(s) for s in symbols],
    }


def manifest_text(symbols: list[KernelSymbol], prefix: str = DEFAULT_PREFIX) -> str:
    return json.dumps(manifest_to_dict(symbols, prefix), indent=2) + "\n"


def _symbol_to_dict(s: KernelSymbol) -> dict:
    key = s.key
    d = {
        "name": s.name,
        "length": key.length,
        "scheme": key.scheme.value,
        "precision": key.precision.value,
        "transpose": key.transpose.value,
    }
    if key.length2 is not None:
        d["length2"] = key.length2
    return d


def _dict_to_symbol(d: dict, prefix: str) -> KernelSymbol:
    key = SpecializationKey(
        length=d["length"],
        scheme=ComputeScheme(d["scheme"]),
        precision=Precision(d["precision"]),
        transpose=TransposeMode(d.get("transpose", TransposeMode.NONE.value)),
        length2=d.get("length2"),
    )
    expected = kernel_symbol(key, prefix)
    if d["name"] != expected:
        raise ValueError(f"Manifest symbol {d['name']!r} does not match its key (expected {expected!r})")
    return KernelSymbol(name=d["name"], key=key)


def load_manifest_from_dict(data: dict) -> list[KernelSymbol]:
    if data.get("format") != MANIFEST_FORMAT:
        raise ValueError(f"Not a kernel manifest: format={data.get('format')!r}")
    if data.get("version") != MANIFEST_VERSION:
        raise ValueError(f"Unsupported kernel manifest version: {data.get('version')!r}")
    prefix = data.get("prefix", DEFAULT_PREFIX)
    return [_dict_to_symbol(d, prefix) for d in data["symbols"]]


def load_manifest(path: str) -> list[KernelSymbol]:
    """Load the symbol list written next to the generated sources."""
    return load_manifest_from_dict(json.loads(Path(path).read_text()))
