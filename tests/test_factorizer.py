"""Tests for trial-division factoring."""

import pytest

from subgroup_cracker.core.factorizer import odd_small_factors, small_factors
from subgroup_cracker.errors import InvalidInput
from subgroup_cracker.utils.constants import X128_ORDER, P128_P

TWIST_ORDER = 2 * P128_P + 2 - X128_ORDER


class TestSmallFactors:
    def test_distinct_ascending(self):
        assert small_factors(2**3 * 3**2 * 7 * 101, 1000) == [2, 3, 7, 101]

    def test_bound_is_exclusive(self):
        assert small_factors(2 * 3 * 101, 101) == [2, 3]
        assert small_factors(2 * 3 * 101, 102) == [2, 3, 101]

    def test_prime_above_bound(self):
        assert small_factors(1000003, 1000) == []

    def test_one(self):
        assert small_factors(1, 100) == []

    def test_idempotent(self):
        n = 2**4 * 3 * 5**3 * 97 * 65537
        assert small_factors(n, 2**16) == small_factors(n, 2**16)

    def test_twist_order(self):
        assert small_factors(TWIST_ORDER, 2**11) == [2, 11, 107, 197, 1621]

    def test_rejects_bad_input(self):
        with pytest.raises(InvalidInput):
            small_factors(0, 100)
        with pytest.raises(InvalidInput):
            small_factors(10, 1)


class TestOddSmallFactors:
    def test_drops_two(self):
        assert odd_small_factors(TWIST_ORDER, 2**11) == [11, 107, 197, 1621]

    def test_odd_input_unchanged(self):
        assert odd_small_factors(3 * 5 * 7, 100) == [3, 5, 7]
