"""Launcher and declaration emission.

Turns a kernel catalog into in-memory artifacts:

- kernel bodies (one per 1D length/scheme and per 2D pair) from the
  KernelSourceEngine,
- launcher units: small Stockham kernels split over N groups, all large 1D
  kernels in one unit, fused 2D kernels in one unit per radix family; each
  unit is a .cpp.h body plus a one-line .cpp that includes it,
- the extern "C" declarations header for every launcher,
- the registration source that fills the dispatch sub-tables,
- a JSON manifest of the launcher symbols.

Every launcher goes through a single _SymbolLedger, so the declarations,
the registration source, the manifest and GenerationResult.symbols all list
the same entry points. Nothing here touches the filesystem.
"""

from __future__ import annotations

import logging

from fft_generator.artifacts import Artifact, GenerationResult
from fft_generator.catalog import Fused2DSpec, KernelCatalog, Large1DSpec
from fft_generator.classify import transpose_modes
from fft_generator.errors import DuplicateSpecializationError, UnsupportedConfigurationError
from fft_generator.geometry import select_geometry, select_geometry_2d
from fft_generator.kernel_engine import KernelSourceEngine, PlaceholderKernelEngine
from fft_generator.manifest import manifest_text
from fft_generator.naming import (
    DECLARATIONS_HEADER,
    FUNCTION_POOL_UNIT,
    LAUNCH_MACROS_HEADER,
    MANIFEST_FILE,
    device_function_suffix,
    device_function_suffix_2d,
    fused_2d_unit_name,
    kernel_body_2d_name,
    kernel_body_name,
    kernel_symbol,
    large_unit_name,
    small_unit_name,
)
from fft_generator.partitioner import plan_partitions
from fft_generator.scheme import (
    TRANSPOSE_SCHEMES,
    ComputeScheme,
    KernelSymbol,
    Precision,
    RadixFamily,
    SpecializationKey,
    subtable_name,
)
from fft_generator.target_config import DEFAULT_TARGET, TargetConfig

logger = logging.getLogger(__name__)

# Scheme enumerator names in the host library.
_SCHEME_CPP_NAME: dict[ComputeScheme, str] = {
    ComputeScheme.STOCKHAM: "CS_KERNEL_STOCKHAM",
    ComputeScheme.BLOCK_CC: "CS_KERNEL_STOCKHAM_BLOCK_CC",
    ComputeScheme.BLOCK_RC: "CS_KERNEL_STOCKHAM_BLOCK_RC",
    ComputeScheme.TRANSPOSE_XY_Z: "CS_KERNEL_STOCKHAM_TRANSPOSE_XY_Z",
    ComputeScheme.TRANSPOSE_Z_XY: "CS_KERNEL_STOCKHAM_TRANSPOSE_Z_XY",
    ComputeScheme.FUSED_2D: "CS_KERNEL_2D_SINGLE",
}

_SBRC_3D_VARIANT: dict[ComputeScheme, str] = {
    ComputeScheme.TRANSPOSE_XY_Z: "SBRC_3D_FFT_TRANS_XY_Z",
    ComputeScheme.TRANSPOSE_Z_XY: "SBRC_3D_FFT_TRANS_Z_XY",
}

_LARGE_SCHEMES = (ComputeScheme.BLOCK_CC, ComputeScheme.BLOCK_RC)


class _SymbolLedger:
    """Issues launcher symbols, refusing duplicate keys or names."""

    def __init__(self, prefix: str):
        self.prefix = prefix
        self.symbols: list[KernelSymbol] = []
        self._names: dict[str, SpecializationKey] = {}
        self._keys: set[SpecializationKey] = set()

    def add(self, key: SpecializationKey) -> KernelSymbol:
        if key in self._keys:
            raise DuplicateSpecializationError(f"Specialization generated twice: {key.describe()}",
                                               key=key)
        name = kernel_symbol(key, self.prefix)
        if name in self._names:
            raise DuplicateSpecializationError(
                f"Launcher name {name} shared by {self._names[name].describe()} and {key.describe()}",
                key=key,
            )
        self._keys.add(key)
        self._names[name] = key
        symbol = KernelSymbol(name=name, key=key)
        self.symbols.append(symbol)
        return symbol


def _unit_artifacts(unit_name: str, text: str) -> list[Artifact]:
    header = f"{unit_name}.cpp.h"
    return [
        Artifact(header, text),
        Artifact(f"{unit_name}.cpp", f'#include "{header}"\n'),
    ]


def _launch_args(suffix: str, placements: tuple[str, ...] = ("ip", "op")) -> str:
    names = []
    for placement in placements:
        names.append(f"fft_fwd_{placement}{suffix}")
        names.append(f"fft_back_{placement}{suffix}")
    return ", ".join(names)


# ---------------------------------------------------------------------------
# Launcher units
# ---------------------------------------------------------------------------

def emit_small_unit(precision: Precision, lengths: list[int], ledger: _SymbolLedger) -> str:
    """Launcher unit for one group of small Stockham kernels. May be empty."""
    lines = ["", f'#include "{LAUNCH_MACROS_HEADER}"', ""]
    for length in lengths:
        lines.append(f'#include "{kernel_body_name(length)}"')
    lines.append("")
    lines.append(f"// {precision.value} precision")
    for length in lengths:
        symbol = ledger.add(SpecializationKey(length, ComputeScheme.STOCKHAM, precision))
        args = _launch_args(device_function_suffix(length))
        lines.append(f"POWX_SMALL_GENERATOR({symbol.name}, {args}, {precision.complex_type})")
    return "\n".join(lines) + "\n"


def emit_large_unit(precision: Precision, specs: list[Large1DSpec], ledger: _SymbolLedger) -> str:
    """Launcher unit for all large 1D kernels of one precision."""
    ctype = precision.complex_type
    lines = ["", f'#include "{LAUNCH_MACROS_HEADER}"', "", f"// {precision.value} precision", ""]
    for spec in specs:
        length = spec.length
        suffix = device_function_suffix(length, spec.scheme)
        lines.append(f'#include "{kernel_body_name(length, spec.scheme)}"')

        if spec.scheme is ComputeScheme.BLOCK_CC:
            symbol = ledger.add(SpecializationKey(length, ComputeScheme.BLOCK_CC, precision))
            lines.append(f"POWX_LARGE_SBCC_GENERATOR({symbol.name}, {_launch_args(suffix)}, {ctype})")
            continue

        # BLOCK_RC: the plain row-column kernel, then every fused-transpose variant.
        op_args = _launch_args(suffix, ("op",))
        symbol = ledger.add(SpecializationKey(length, ComputeScheme.BLOCK_RC, precision))
        lines.append(f"POWX_LARGE_SBRC_GENERATOR({symbol.name}, {op_args}, {ctype}, SBRC_2D, TILE_ALIGNED)")
        for mode in transpose_modes(length):
            for orientation in TRANSPOSE_SCHEMES:
                symbol = ledger.add(SpecializationKey(length, orientation, precision, mode))
                lines.append(
                    f"POWX_LARGE_SBRC_GENERATOR({symbol.name}, {op_args}, {ctype}, "
                    f"{_SBRC_3D_VARIANT[orientation]}, {mode.name})"
                )
    return "\n".join(lines) + "\n"


def emit_fused_2d_unit(precision: Precision, specs: list[Fused2DSpec], ledger: _SymbolLedger) -> str:
    """Launcher unit for the fused 2D kernels of one radix family bucket."""
    lines = [f'#include "{LAUNCH_MACROS_HEADER}"']
    for spec in specs:
        lines.append(f'#include "{kernel_body_2d_name(spec.length1, spec.length2)}"')
        key = SpecializationKey(spec.length1, ComputeScheme.FUSED_2D, precision, length2=spec.length2)
        symbol = ledger.add(key)
        # 2D kernels are launched the same way as small 1D kernels.
        args = _launch_args(device_function_suffix_2d(spec.length1, spec.length2))
        lines.append(f"POWX_SMALL_GENERATOR({symbol.name}, {args}, {precision.complex_type})")
    return "\n".join(lines) + "\n"


# ---------------------------------------------------------------------------
# Declarations and registration
# ---------------------------------------------------------------------------

def emit_declarations(sections: list[list[KernelSymbol]]) -> str:
    """extern "C" header declaring every launcher, one blank line between sections."""
    lines = [
        "",
        "#pragma once",
        "#if !defined( kernel_launch_generator_H )",
        "#define kernel_launch_generator_H",
        "",
        "// generated host functions which launch GPU kernels",
        "",
        'extern "C"',
        "{",
    ]
    for section in sections:
        lines.append("")
        for symbol in section:
            lines.append(f"void {symbol.name}(const void *data_p, void *back_p);")
    lines += ["", "}", "", "#endif", ""]
    return "\n".join(lines)


def _registration_key(key: SpecializationKey) -> str:
    scheme = _SCHEME_CPP_NAME[key.scheme]
    if key.is_2d:
        return f"std::make_tuple({key.length}, {key.length2}, {scheme})"
    return f"std::make_pair({key.length}, {scheme})"


def emit_function_pool(symbols: list[KernelSymbol]) -> str:
    """Host source that registers every launcher in its dispatch sub-table."""
    lines = [
        "",
        "#include <iostream>",
        '#include "../include/function_pool.h"',
        f'#include "{DECLARATIONS_HEADER}"',
        "",
        "// build hash maps of the launcher entry points",
        "function_pool::function_pool()",
        "{",
    ]
    for symbol in symbols:
        table = subtable_name(symbol.key)
        lines.append(f"    function_map_{table}[{_registration_key(symbol.key)}] = &{symbol.name};")
    lines += ["}", ""]
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Kernel bodies
# ---------------------------------------------------------------------------

def emit_kernel_bodies(
    bodies_1d: list[tuple[int, ComputeScheme]],
    bodies_2d: list[Fused2DSpec],
    engine: KernelSourceEngine,
    config: TargetConfig,
) -> list[Artifact]:
    artifacts = []
    for length, scheme in bodies_1d:
        text = engine.kernel_1d(length, scheme, select_geometry(length, scheme, config))
        artifacts.append(Artifact(kernel_body_name(length, scheme), "#pragma once\n" + text))

    for spec in bodies_2d:
        text = "#pragma once\n"
        text += f'#include "{kernel_body_name(spec.length1)}"\n'
        if spec.length1 != spec.length2:
            text += f'#include "{kernel_body_name(spec.length2)}"\n'
        geometry = select_geometry_2d(spec.length1, spec.length2, config)
        text += engine.kernel_2d(spec.length1, spec.length2, geometry)
        artifacts.append(Artifact(kernel_body_2d_name(spec.length1, spec.length2), text))
    return artifacts


def _check_large_schemes(specs: list[Large1DSpec]):
    for spec in specs:
        if spec.scheme not in _LARGE_SCHEMES:
            raise UnsupportedConfigurationError(
                f"Large 1D length {spec.length} has unsupported scheme {spec.scheme.value}",
                key=(spec.length, spec.scheme),
            )


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def generate(
    catalog: KernelCatalog,
    config: TargetConfig = DEFAULT_TARGET,
    engine: KernelSourceEngine | None = None,
    group_count: int | None = None,
) -> GenerationResult:
    """Generate every artifact for a catalog.

    Args:
        catalog: lengths and schemes to specialize.
        config: device limits and naming constants.
        engine: kernel body generator (PlaceholderKernelEngine by default).
        group_count: number of small-kernel launcher units
            (config.small_group_count by default).

    Raises:
        UnsupportedConfigurationError: a catalog entry has no generation rule.
        GeometryError: no valid work-group geometry for a length.
        DuplicateSpecializationError: two launchers collide.
    """
    engine = engine or PlaceholderKernelEngine()
    group_count = config.small_group_count if group_count is None else group_count

    _check_large_schemes(catalog.large1d)
    plan = plan_partitions(catalog, group_count)
    ledger = _SymbolLedger(config.symbol_prefix)
    artifacts: list[Artifact] = []
    sections: list[list[KernelSymbol]] = []

    small_groups = plan.small_groups or []
    for precision in config.precisions:
        start = len(ledger.symbols)
        for j, lengths in enumerate(small_groups):
            text = emit_small_unit(precision, lengths, ledger)
            artifacts.extend(_unit_artifacts(small_unit_name(precision, j), text))
        sections.append(ledger.symbols[start:])

    if catalog.large1d:
        for precision in config.precisions:
            start = len(ledger.symbols)
            text = emit_large_unit(precision, catalog.large1d, ledger)
            artifacts.extend(_unit_artifacts(large_unit_name(precision), text))
            sections.append(ledger.symbols[start:])

    for precision in config.precisions:
        start = len(ledger.symbols)
        for bucket, specs in plan.fused_buckets.items():
            text = emit_fused_2d_unit(precision, specs, ledger)
            artifacts.extend(_unit_artifacts(fused_2d_unit_name(precision, bucket.value), text))
        sections.append(ledger.symbols[start:])

    bodies_1d: list[tuple[int, ComputeScheme]] = []
    for lengths in small_groups:
        bodies_1d.extend((length, ComputeScheme.STOCKHAM) for length in lengths)
    bodies_1d.extend((spec.length, spec.scheme) for spec in catalog.large1d)
    fused_specs = [spec for specs in plan.fused_buckets.values() for spec in specs]
    for spec in fused_specs:
        # 2D bodies include the 1D bodies of both of their lengths.
        for length in (spec.length1, spec.length2):
            if (length, ComputeScheme.STOCKHAM) not in bodies_1d:
                bodies_1d.append((length, ComputeScheme.STOCKHAM))
    artifacts.extend(emit_kernel_bodies(bodies_1d, fused_specs, engine, config))

    artifacts.append(Artifact(DECLARATIONS_HEADER, emit_declarations([s for s in sections if s])))
    artifacts.extend(_unit_artifacts(FUNCTION_POOL_UNIT, emit_function_pool(ledger.symbols)))
    artifacts.append(Artifact(MANIFEST_FILE, manifest_text(ledger.symbols, config.symbol_prefix)))

    logger.info("Generated %d launchers in %d artifacts (%d small groups, %d 2D buckets)",
                len(ledger.symbols), len(artifacts), len(small_groups), len(plan.fused_buckets))
    return GenerationResult(artifacts=artifacts, symbols=list(ledger.symbols))


def bucket_units(result: GenerationResult, precision: Precision) -> dict[RadixFamily, str]:
    """Map each radix family present in a result to its launcher unit header name."""
    units = {}
    for family in RadixFamily:
        name = fused_2d_unit_name(precision, family.value) + ".cpp.h"
        if result.has_artifact(name):
            units[family] = name
    return units

