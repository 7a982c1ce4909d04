"""Dispatch registry: specialization key -> launcher entry point.

The registry is built once from the generator's symbol list and is
read-only afterwards. Entries are partitioned into sub-tables by precision
and kind (plain, fused 2D, and one per fused-transpose mode), mirroring the
tables the host library registers. Lookups take no lock.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import replace
from types import MappingProxyType
from typing import Any, Callable, Iterable, Mapping

from fft_dispatch.errors import KernelNotFoundError, NullKernelEntryError
from fft_generator.artifacts import GenerationResult
from fft_generator.errors import DuplicateSpecializationError
from fft_generator.manifest import load_manifest
from fft_generator.scheme import (
    TRANSPOSE_SCHEMES,
    ComputeScheme,
    KernelSymbol,
    Precision,
    SpecializationKey,
    TransposeMode,
    subtable_name,
    subtable_names,
)

logger = logging.getLogger(__name__)

KernelEntry = Callable[..., Any]
Resolver = Callable[[str], "KernelEntry | None"]


class DispatchRegistry:
    """Immutable map from SpecializationKey to KernelEntry."""

    def __init__(self, tables: Mapping[str, Mapping[SpecializationKey, KernelEntry | None]]):
        unknown = set(tables) - set(subtable_names())
        if unknown:
            raise ValueError(f"Unknown dispatch sub-tables: {sorted(unknown)}")
        for name, table in tables.items():
            for key in table:
                if subtable_name(key) != name:
                    raise ValueError(f"Key {key.describe()} does not belong in sub-table {name}")
        self._tables: dict[str, Mapping[SpecializationKey, KernelEntry | None]] = {
            name: MappingProxyType(dict(tables.get(name, {}))) for name in subtable_names()
        }

    # -----------------------------------------------------------------------
    # Construction
    # -----------------------------------------------------------------------

    @classmethod
    def build(cls, symbols: Iterable[KernelSymbol], resolver: Resolver) -> DispatchRegistry:
        """Register every symbol, resolving each name to its entry point."""
        tables: dict[str, dict[SpecializationKey, KernelEntry | None]] = {
            name: {} for name in subtable_names()
        }
        for symbol in symbols:
            table = tables[subtable_name(symbol.key)]
            if symbol.key in table:
                raise DuplicateSpecializationError(
                    f"Specialization registered twice: {symbol.key.describe()}", key=symbol.key)
            table[symbol.key] = resolver(symbol.name)
        registry = cls(tables)
        logger.info("Built dispatch registry with %d entries", len(registry))
        return registry

    @classmethod
    def from_generation(cls, result: GenerationResult, resolver: Resolver) -> DispatchRegistry:
        return cls.build(result.symbols, resolver)

    @classmethod
    def from_manifest(cls, path: str, resolver: Resolver) -> DispatchRegistry:
        return cls.build(load_manifest(path), resolver)

    # -----------------------------------------------------------------------
    # Queries
    # -----------------------------------------------------------------------

    def lookup(self, key: SpecializationKey) -> KernelEntry:
        """Return the entry for key or raise KernelNotFoundError."""
        table_name = subtable_name(key)
        try:
            return self._tables[table_name][key]
        except KeyError:
            raise KernelNotFoundError(key, table=f"function_map_{table_name}") from None

    def find(self, key: SpecializationKey) -> KernelEntry | None:
        """Return the entry for key, or None when it was never generated."""
        return self._tables[subtable_name(key)].get(key)

    def exists(self, key: SpecializationKey, precision: Precision | None = None) -> bool:
        """Whether key was registered, optionally under another precision. Never raises."""
        if precision is not None:
            key = replace(key, precision=precision)
        return key in self._tables[subtable_name(key)]

    def lookup_transpose(
        self,
        key: SpecializationKey,
        mode: TransposeMode,
        orientation: ComputeScheme = ComputeScheme.TRANSPOSE_XY_Z,
    ) -> KernelEntry:
        """Return the fused-transpose entry of key for one transpose mode.

        key may name the orientation variant directly (TRANSPOSE_XY_Z or
        TRANSPOSE_Z_XY) or the BLOCK_RC kernel it derives from, in which case
        orientation picks the variant.
        """
        if mode is TransposeMode.NONE:
            raise ValueError("lookup_transpose needs a transpose mode, got TransposeMode.NONE")
        if orientation not in TRANSPOSE_SCHEMES:
            raise ValueError(f"Not a transpose orientation: {orientation.value}")
        if key.scheme is ComputeScheme.BLOCK_RC:
            key = replace(key, scheme=orientation)
        elif key.scheme not in TRANSPOSE_SCHEMES:
            raise ValueError(f"{key.scheme.value} kernels have no fused-transpose variants")
        return self.lookup(replace(key, transpose=mode))

    def validate_complete(self):
        """Raise NullKernelEntryError if any registered entry is None."""
        for name, table in self._tables.items():
            for key, entry in table.items():
                if entry is None:
                    logger.error("null ptr registered in function_map_%s for %s", name, key.describe())
                    raise NullKernelEntryError(name, key)

    # -----------------------------------------------------------------------
    # Introspection
    # -----------------------------------------------------------------------

    def table(self, name: str) -> Mapping[SpecializationKey, KernelEntry | None]:
        return self._tables[name]

    def table_sizes(self) -> dict[str, int]:
        return {name: len(table) for name, table in self._tables.items()}

    def keys(self) -> list[SpecializationKey]:
        return [key for table in self._tables.values() for key in table]

    def __len__(self) -> int:
        return sum(len(table) for table in self._tables.values())

    def __contains__(self, key: object) -> bool:
        return isinstance(key, SpecializationKey) and self.exists(key)


class LazyRegistry:
    """Builds a DispatchRegistry on first use, exactly once.

    Concurrent first callers block on the build and all receive the same,
    fully populated registry. After that get() takes no lock.
    """

    def __init__(self, factory: Callable[[], DispatchRegistry]):
        self._factory = factory
        self._lock = threading.Lock()
        self._registry: DispatchRegistry | None = None

    @property
    def built(self) -> bool:
        return self._registry is not None

    def get(self) -> DispatchRegistry:
        registry = self._registry
        if registry is None:
            with self._lock:
                if self._registry is None:
                    self._registry = self._factory()
                registry = self._registry
        return registry
