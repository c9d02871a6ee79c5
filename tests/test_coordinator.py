"""Tests for the process-pool search coordinator."""

import numpy as np
import pytest

from subgroup_cracker.core.confinement import confined_element
from subgroup_cracker.core.coordinator import (
    parallel_brute_force,
    race_kangaroos,
    resolve_workers,
    split_range,
)
from subgroup_cracker.core.twist import find_twist_point
from subgroup_cracker.errors import InvalidInput
from subgroup_cracker.harness.params import dh58_group, generate_weak_dh_group, p128, x128
from subgroup_cracker.oracle import mac


class TestSplitRange:
    def test_covers_disjoint(self):
        ranges = split_range(1, 100, 7)
        assert ranges[0][0] == 1
        assert ranges[-1][1] == 100
        for (_, hi), (lo, _) in zip(ranges, ranges[1:]):
            assert lo == hi + 1
        assert sum(hi - lo + 1 for lo, hi in ranges) == 100

    def test_more_parts_than_items(self):
        assert split_range(1, 3, 8) == [(1, 1), (2, 2), (3, 3)]

    def test_empty(self):
        assert split_range(5, 4, 3) == []


class TestResolveWorkers:
    def test_default(self):
        assert resolve_workers() >= 1

    def test_explicit(self):
        assert resolve_workers(3) == 3

    def test_rejects_zero(self):
        with pytest.raises(InvalidInput):
            resolve_workers(0)


class TestParallelBruteForce:
    def setup_method(self):
        self.group = generate_weak_dh_group(rng=np.random.default_rng(42))

    def _tagged(self, r, k):
        h = confined_element(self.group, r, np.random.default_rng(r))
        return h, mac(self.group.encode(pow(h, k, self.group.p)))

    def test_inline(self):
        h, tag = self._tagged(47, 33)
        assert parallel_brute_force(self.group, h, 47, tag, workers=1) == 33

    def test_pool(self):
        h, tag = self._tagged(43, 29)
        assert parallel_brute_force(self.group, h, 43, tag, workers=3, threshold=0, poll_interval=2) == 29

    def test_pool_no_match(self):
        h, _ = self._tagged(43, 29)
        assert parallel_brute_force(self.group, h, 43, mac(b"nothing"), workers=2, threshold=0) is None

    def test_twist_point_in_pool(self):
        curve = x128()
        tp = find_twist_point(curve, 197, np.random.default_rng(11))
        tag = mac(curve.encode(curve.ladder(tp.u, 150)))
        k = parallel_brute_force(curve, tp.u, 197, tag, workers=2, threshold=0)
        assert k in (150, 197 - 150)


class TestRaceKangaroos:
    def test_first_match_wins(self):
        g = dh58_group()
        x = 54321
        targets = [
            ("wrong-a", pow(g.g, g.q // 5, g.p)),
            ("right", pow(g.g, x, g.p)),
            ("wrong-b", pow(g.g, g.q // 7, g.p)),
        ]
        winner = race_kangaroos(g, g.g, 0, 2**16, targets, herd_factor=16, workers=2)
        assert winner == ("right", x)

    def test_inline(self):
        g = dh58_group()
        targets = [("a", pow(g.g, 1000, g.p))]
        assert race_kangaroos(g, g.g, 0, 2**12, targets, herd_factor=16, workers=1) == ("a", 1000)

    def test_no_targets(self):
        g = dh58_group()
        assert race_kangaroos(g, g.g, 0, 100, []) is None

    def test_all_escape(self):
        g = dh58_group()
        targets = [(i, pow(g.g, g.q // (i + 2), g.p)) for i in range(2)]
        assert race_kangaroos(g, g.g, 0, 2**10, targets, workers=2) is None

    def test_curve_points_cross_processes(self):
        curve = p128()
        G = curve.generator
        targets = [(n, curve.multiply(G, n)) for n in (777, 2**40)]
        winner = race_kangaroos(curve, G, 0, 5000, targets, herd_factor=16, workers=2)
        assert winner == (777, 777)
