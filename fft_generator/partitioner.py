"""Split the catalog into compilable launcher units.

Small Stockham kernels are spread over a fixed number of groups so that no
single translation unit takes too long to compile. Fused 2D kernels are
routed to one unit per radix family bucket. Large 1D kernels all land in a
single unit per precision and need no partitioning.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence, TypeVar

import numpy as np

from fft_generator.catalog import Fused2DSpec, KernelCatalog
from fft_generator.classify import classify_2d
from fft_generator.errors import UnsupportedConfigurationError
from fft_generator.scheme import ComputeScheme, RadixFamily

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class PartitionPlan:
    """Catalog entries assigned to launcher units.

    small_groups is None when the small catalog was too short for the
    requested group count; no small units are generated in that case.
    fused_buckets keeps buckets in first-use order.
    """

    small_groups: list[list[int]] | None
    fused_buckets: dict[RadixFamily, list[Fused2DSpec]] = field(default_factory=dict)


def split_groups(items: Sequence[T], group_count: int) -> list[list[T]] | None:
    """Split items into group_count contiguous groups in catalog order.

    Group sizes differ by at most one and never exceed
    ceil(len(items) / group_count). Returns None (and logs) when there are
    fewer items than groups.
    """
    if group_count <= 0:
        raise ValueError(f"group_count must be positive, got {group_count}")
    if len(items) < group_count:
        logger.error("Not enough kernels (%d) to generate with %d groups", len(items), group_count)
        return None
    index_groups = np.array_split(np.arange(len(items)), group_count)
    return [[items[i] for i in idx.tolist()] for idx in index_groups]


def route_fused_2d(specs: Sequence[Fused2DSpec]) -> dict[RadixFamily, list[Fused2DSpec]]:
    """Bucket 2D specs by radix family, preserving catalog order within a bucket."""
    buckets: dict[RadixFamily, list[Fused2DSpec]] = {}
    for spec in specs:
        if spec.scheme is not ComputeScheme.FUSED_2D:
            raise UnsupportedConfigurationError(
                f"2D catalog entry ({spec.length1}, {spec.length2}) has unsupported scheme "
                f"{spec.scheme.value}",
                key=(spec.length1, spec.length2, spec.scheme),
            )
        buckets.setdefault(classify_2d(spec.length1, spec.length2), []).append(spec)
    return buckets


def plan_partitions(catalog: KernelCatalog, group_count: int) -> PartitionPlan:
    return PartitionPlan(
        small_groups=split_groups(catalog.small, group_count) if catalog.small else [],
        fused_buckets=route_fused_2d(catalog.fused2d),
    )
