"""End-to-end runs: catalog -> artifacts -> registry -> dispatch."""

import pytest

from fft_dispatch import DispatchRegistry, KernelNotFoundError
from fft_generator.emitter import generate
from fft_generator.scheme import (
    ComputeScheme,
    Precision,
    RadixFamily,
    SpecializationKey,
    TransposeMode,
)
from fft_generator.classify import classify_2d

from conftest import make_catalog

SP = Precision.SINGLE
DP = Precision.DOUBLE


def _build(catalog, resolver, group_count=None):
    result = generate(catalog, group_count=group_count)
    registry = DispatchRegistry.from_generation(result, resolver)
    registry.validate_complete()
    return result, registry


class TestSmallCatalogTooShort:
    def test_more_groups_than_kernels_produces_nothing(self, resolver):
        result, registry = _build(make_catalog(small=[4096]), resolver, group_count=2)
        assert not any(name.startswith("kernel_launch_single_") for name in result.artifact_names)
        assert result.symbols == []
        assert len(registry) == 0
        assert not registry.exists(SpecializationKey(4096, ComputeScheme.STOCKHAM, SP))

    def test_one_group_holds_the_kernel(self, resolver):
        result, registry = _build(make_catalog(small=[4096]), resolver, group_count=1)
        unit = result.artifact("kernel_launch_single_0.cpp.h").text
        assert "fft_internal_dfn_sp_ci_ci_stoc_4096" in unit
        assert "kernel_launch_single_1.cpp.h" not in result.artifact_names
        assert registry.exists(SpecializationKey(4096, ComputeScheme.STOCKHAM, DP))


class TestLargeBlockCC:
    def test_both_precisions_no_transpose(self, resolver):
        _, registry = _build(make_catalog(large=[(8192, ComputeScheme.BLOCK_CC)]), resolver)
        for precision in (SP, DP):
            assert registry.exists(SpecializationKey(8192, ComputeScheme.BLOCK_CC, precision))
        sizes = registry.table_sizes()
        assert sizes["single"] == 1
        assert sizes["double"] == 1
        assert all(count == 0 for name, count in sizes.items() if "transpose" in name)


class TestLargeBlockRCPow2:
    def test_aligned_and_diagonal(self, resolver):
        _, registry = _build(make_catalog(large=[(16384, ComputeScheme.BLOCK_RC)]), resolver)
        for precision in (SP, DP):
            for orientation in (ComputeScheme.TRANSPOSE_XY_Z, ComputeScheme.TRANSPOSE_Z_XY):
                key = SpecializationKey(16384, orientation, precision)
                registry.lookup_transpose(key, TransposeMode.TILE_ALIGNED)
                registry.lookup_transpose(key, TransposeMode.DIAGONAL)
                with pytest.raises(KernelNotFoundError):
                    registry.lookup_transpose(key, TransposeMode.TILE_UNALIGNED)
        assert registry.table_sizes()["single_transpose_tile_unaligned"] == 0
        assert registry.table_sizes()["double_transpose_tile_unaligned"] == 0

    def test_query_by_block_rc_key(self, resolver):
        _, registry = _build(make_catalog(large=[(16384, ComputeScheme.BLOCK_RC)]), resolver)
        for precision in (SP, DP):
            key = SpecializationKey(16384, ComputeScheme.BLOCK_RC, precision)
            assert registry.exists(key)
            for orientation in (ComputeScheme.TRANSPOSE_XY_Z, ComputeScheme.TRANSPOSE_Z_XY):
                aligned = registry.lookup_transpose(key, TransposeMode.TILE_ALIGNED, orientation)
                diagonal = registry.lookup_transpose(key, TransposeMode.DIAGONAL, orientation)
                assert aligned is not diagonal
                with pytest.raises(KernelNotFoundError):
                    registry.lookup_transpose(key, TransposeMode.TILE_UNALIGNED, orientation)


class TestFused2DRouting:
    def test_pairs_land_in_different_units(self, resolver):
        assert classify_2d(64, 128) is RadixFamily.POW2
        assert classify_2d(64, 243) is RadixFamily.MIX_POW2_3

        result, registry = _build(make_catalog(fused=[(64, 128), (64, 243)]), resolver)
        pow2 = result.artifact("kernel_launch_single_2D_pow2.cpp.h").text
        mixed = result.artifact("kernel_launch_single_2D_mix_pow2_3.cpp.h").text
        assert "ci_ci_2D_64_128" in pow2 and "ci_ci_2D_64_243" not in pow2
        assert "ci_ci_2D_64_243" in mixed and "ci_ci_2D_64_128" not in mixed
        assert registry.exists(SpecializationKey(64, ComputeScheme.FUSED_2D, DP, length2=243))


class TestExistence:
    def test_present_and_absent_keys(self, mixed_catalog, resolver):
        result, registry = _build(mixed_catalog, resolver, group_count=4)
        for symbol in result.symbols:
            assert registry.exists(symbol.key) is True
            # every key is generated in both precisions
            assert registry.exists(symbol.key, SP) is True

        absent = [
            SpecializationKey(4095, ComputeScheme.STOCKHAM, SP),
            SpecializationKey(8192, ComputeScheme.BLOCK_RC, SP),
            SpecializationKey(81, ComputeScheme.TRANSPOSE_XY_Z, SP, TransposeMode.DIAGONAL),
            SpecializationKey(128, ComputeScheme.FUSED_2D, SP, length2=64),
            SpecializationKey(1 << 40, ComputeScheme.BLOCK_CC, SP),
        ]
        for key in absent:
            assert registry.exists(key) is False
            assert registry.find(key) is None
