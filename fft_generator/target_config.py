"""Platform and generation constants for the kernel generator."""

from __future__ import annotations

from dataclasses import dataclass

from fft_generator.scheme import Precision


@dataclass(frozen=True)
class TargetConfig:
    """Device limits and naming constants for one generation run."""
    name: str = "amdgpu"
    max_work_group_size: int = 256
    # The curated geometry table was tuned for devices with at least this many lanes per group.
    table_min_work_group_size: int = 256
    small_group_count: int = 8
    symbol_prefix: str = "fft_internal_dfn"
    precisions: tuple[Precision, ...] = (Precision.SINGLE, Precision.DOUBLE)


DEFAULT_TARGET = TargetConfig()
