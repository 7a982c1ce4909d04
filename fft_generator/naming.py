"""Deterministic names for launchers and generated files.

Launcher symbols are built from precision, data layout, scheme, lengths and
transpose mode. Distinct SpecializationKeys always map to distinct names, so
the generator's symbol list can populate the dispatch registry directly.
parse_kernel_symbol() inverts kernel_symbol().
"""

from __future__ import annotations

import re

from fft_generator.errors import UnsupportedConfigurationError
from fft_generator.scheme import (
    TRANSPOSE_SCHEMES,
    ComputeScheme,
    Precision,
    SpecializationKey,
    TransposeMode,
)

DEFAULT_PREFIX = "fft_internal_dfn"

_ORIENTATION = {
    ComputeScheme.TRANSPOSE_XY_Z: "xy_z",
    ComputeScheme.TRANSPOSE_Z_XY: "z_xy",
}

# Suffix of the kernel body header and device function names per large scheme.
SCHEME_FILE_SUFFIX = {
    ComputeScheme.STOCKHAM: "",
    ComputeScheme.BLOCK_CC: "_sbcc",
    ComputeScheme.BLOCK_RC: "_sbrc",
}


def kernel_symbol(key: SpecializationKey, prefix: str = DEFAULT_PREFIX) -> str:
    """Launcher symbol for a specialization key."""
    _check_key_shape(key)
    head = f"{prefix}_{key.precision.short_name}"
    scheme = key.scheme
    if scheme is ComputeScheme.STOCKHAM:
        return f"{head}_ci_ci_stoc_{key.length}"
    if scheme is ComputeScheme.BLOCK_CC:
        return f"{head}_ci_ci_sbcc_{key.length}"
    if scheme is ComputeScheme.BLOCK_RC:
        return f"{head}_op_ci_ci_sbrc_{key.length}"
    if scheme in TRANSPOSE_SCHEMES:
        return (f"{head}_op_ci_ci_sbrc3d_fft_trans_{_ORIENTATION[scheme]}_"
                f"{key.transpose.value}_{key.length}")
    return f"{head}_ci_ci_2D_{key.length}_{key.length2}"


def _check_key_shape(key: SpecializationKey):
    scheme = key.scheme
    if scheme is ComputeScheme.FUSED_2D:
        ok = key.length2 is not None and key.transpose is TransposeMode.NONE
    elif scheme in TRANSPOSE_SCHEMES:
        ok = key.length2 is None and key.transpose is not TransposeMode.NONE
    else:
        ok = key.length2 is None and key.transpose is TransposeMode.NONE
    if not ok:
        raise UnsupportedConfigurationError(f"No launcher naming rule for {key}", key=key)


_SYMBOL_PATTERNS: tuple[tuple[re.Pattern, str], ...] = (
    (re.compile(r"ci_ci_stoc_(\d+)"), "stoc"),
    (re.compile(r"ci_ci_sbcc_(\d+)"), "sbcc"),
    (re.compile(r"op_ci_ci_sbrc_(\d+)"), "sbrc"),
    (re.compile(r"op_ci_ci_sbrc3d_fft_trans_(xy_z|z_xy)_(tile_aligned|tile_unaligned|diagonal)_(\d+)"),
     "sbrc3d"),
    (re.compile(r"ci_ci_2D_(\d+)_(\d+)"), "2d"),
)


def parse_kernel_symbol(name: str, prefix: str = DEFAULT_PREFIX) -> SpecializationKey:
    """Recover the SpecializationKey a launcher symbol was built from."""
    head = prefix + "_"
    if not name.startswith(head):
        raise ValueError(f"Symbol {name!r} does not start with prefix {prefix!r}")
    short, _, body = name[len(head):].partition("_")
    precision = Precision.from_short_name(short)

    for pattern, kind in _SYMBOL_PATTERNS:
        m = pattern.fullmatch(body)
        if m is None:
            continue
        if kind == "stoc":
            return SpecializationKey(int(m.group(1)), ComputeScheme.STOCKHAM, precision)
        if kind == "sbcc":
            return SpecializationKey(int(m.group(1)), ComputeScheme.BLOCK_CC, precision)
        if kind == "sbrc":
            return SpecializationKey(int(m.group(1)), ComputeScheme.BLOCK_RC, precision)
        if kind == "sbrc3d":
            scheme = (ComputeScheme.TRANSPOSE_XY_Z if m.group(1) == "xy_z"
                      else ComputeScheme.TRANSPOSE_Z_XY)
            return SpecializationKey(int(m.group(3)), scheme, precision, TransposeMode(m.group(2)))
        return SpecializationKey(int(m.group(1)), ComputeScheme.FUSED_2D, precision,
                                 length2=int(m.group(2)))
    raise ValueError(f"Unrecognised launcher symbol: {name!r}")


# ---------------------------------------------------------------------------
# Generated file names
# ---------------------------------------------------------------------------

DECLARATIONS_HEADER = "kernel_launch_generator.h"
LAUNCH_MACROS_HEADER = "kernel_launch.h"
FUNCTION_POOL_UNIT = "function_pool"
MANIFEST_FILE = "kernel_manifest.json"


def small_unit_name(precision: Precision, group: int) -> str:
    return f"kernel_launch_{precision.value}_{group}"


def large_unit_name(precision: Precision) -> str:
    return f"kernel_launch_{precision.value}_large"


def fused_2d_unit_name(precision: Precision, bucket: str) -> str:
    return f"kernel_launch_{precision.value}_2D_{bucket}"


def kernel_body_name(length: int, scheme: ComputeScheme = ComputeScheme.STOCKHAM) -> str:
    return f"fft_kernel_{length}{SCHEME_FILE_SUFFIX[scheme]}.h"


def kernel_body_2d_name(length1: int, length2: int) -> str:
    return f"fft_kernel_2D_{length1}_{length2}.h"


def device_function_suffix(length: int, scheme: ComputeScheme = ComputeScheme.STOCKHAM) -> str:
    """Suffix shared by the fwd/back device functions of a 1D kernel body."""
    return f"_len{length}{SCHEME_FILE_SUFFIX[scheme]}"


def device_function_suffix_2d(length1: int, length2: int) -> str:
    return f"_2D_{length1}_{length2}"
