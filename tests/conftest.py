"""Shared fixtures and helpers for generator and dispatch tests."""

import pytest

from fft_generator.catalog import Fused2DSpec, KernelCatalog, Large1DSpec
from fft_generator.scheme import ComputeScheme


class StubLauncher:
    """Stands in for a compiled launcher entry point."""

    def __init__(self, name):
        self.name = name
        self.calls = 0

    def __call__(self, data_p, back_p):
        self.calls += 1

    def __repr__(self):
        return f"StubLauncher({self.name!r})"


def stub_resolver(name):
    return StubLauncher(name)


def make_catalog(small=(), large=(), fused=()):
    """Build a KernelCatalog from plain tuples: large=(length, scheme), fused=(l1, l2)."""
    return KernelCatalog(
        small=list(small),
        large1d=[Large1DSpec(length, scheme) for length, scheme in large],
        fused2d=[Fused2DSpec(l1, l2) for l1, l2 in fused],
    )


@pytest.fixture
def resolver():
    return stub_resolver


@pytest.fixture
def mixed_catalog():
    """A catalog touching every section and every radix family seen in practice."""
    return make_catalog(
        small=[2, 4, 8, 16, 32, 64, 81, 125, 128, 243, 256, 4096],
        large=[(8192, ComputeScheme.BLOCK_CC), (16384, ComputeScheme.BLOCK_RC),
               (81, ComputeScheme.BLOCK_RC)],
        fused=[(64, 64), (64, 128), (64, 243), (81, 25), (125, 32)],
    )
