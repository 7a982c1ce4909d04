"""Tests for transpose-fusion eligibility and 2D radix family bucketing."""

import pytest

from fft_generator.classify import (
    classify_2d,
    is_diagonal_eligible,
    is_pow,
    is_pow2,
    transpose_modes,
)
from fft_generator.errors import UnsupportedConfigurationError
from fft_generator.scheme import RadixFamily, TransposeMode


class TestPowerPredicates:
    def test_is_pow(self):
        assert is_pow(1, 3)
        assert is_pow(243, 3)
        assert is_pow(3125, 5)
        assert not is_pow(0, 2)
        assert not is_pow(12, 2)
        assert not is_pow(486, 3)

    def test_is_pow2_matches_is_pow(self):
        for n in range(0, 5000):
            assert is_pow2(n) == is_pow(n, 2)


class TestDiagonalEligibility:
    def test_powers_of_two(self):
        for k in range(0, 25):
            assert is_diagonal_eligible(1 << k)

    def test_near_powers_of_two(self):
        for k in range(2, 25):
            p = 1 << k
            assert not is_diagonal_eligible(p - 1)
            assert not is_diagonal_eligible(p + 1)
            assert not is_diagonal_eligible(p + (p >> 1))

    def test_iff_power_of_two(self):
        for n in range(1, 20000):
            assert is_diagonal_eligible(n) == ((n & (n - 1)) == 0)

    def test_other_radix_families_not_eligible(self):
        for n in (3, 9, 81, 243, 5, 25, 625, 6, 10, 100):
            assert not is_diagonal_eligible(n)

    def test_transpose_modes(self):
        assert transpose_modes(16384) == (TransposeMode.TILE_ALIGNED, TransposeMode.DIAGONAL)
        assert transpose_modes(81) == (TransposeMode.TILE_ALIGNED,)

    def test_tile_unaligned_never_generated(self):
        for n in (64, 81, 100, 4096):
            assert TransposeMode.TILE_UNALIGNED not in transpose_modes(n)


class TestClassify2D:
    @pytest.mark.parametrize("length1,length2,expected", [
        (64, 128, RadixFamily.POW2),
        (81, 27, RadixFamily.POW3),
        (125, 25, RadixFamily.POW5),
        (64, 243, RadixFamily.MIX_POW2_3),
        (243, 64, RadixFamily.MIX_POW3_2),
        (81, 25, RadixFamily.MIX_POW3_5),
        (25, 81, RadixFamily.MIX_POW5_3),
        (32, 125, RadixFamily.MIX_POW2_5),
        (125, 32, RadixFamily.MIX_POW5_2),
    ])
    def test_nine_families(self, length1, length2, expected):
        assert classify_2d(length1, length2) == expected

    def test_order_preserving(self):
        assert classify_2d(64, 243) != classify_2d(243, 64)
        assert classify_2d(81, 25) != classify_2d(25, 81)
        assert classify_2d(32, 125) != classify_2d(125, 32)

    def test_deterministic(self):
        first = classify_2d(64, 243)
        for _ in range(100):
            assert classify_2d(64, 243) == first

    def test_pow2_and_mixed_pairs_differ(self):
        assert classify_2d(64, 128) == RadixFamily.POW2
        assert classify_2d(64, 243) == RadixFamily.MIX_POW2_3

    @pytest.mark.parametrize("length1,length2", [
        (6, 64), (64, 6), (49, 49), (64, 7), (100, 100), (12, 18), (11, 121),
    ])
    def test_unimplemented_pairs_abort(self, length1, length2):
        with pytest.raises(UnsupportedConfigurationError) as excinfo:
            classify_2d(length1, length2)
        assert excinfo.value.key == (length1, length2)
