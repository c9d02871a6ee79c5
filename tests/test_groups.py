"""Tests for the three group families."""

import numpy as np
import pytest
from ecdsa.ellipticcurve import INFINITY

from subgroup_cracker.groups import ModPGroup, MontgomeryCurve, WeierstrassCurve
from subgroup_cracker.harness.params import dh58_group, p128, p128_invalid_curves, x128
from subgroup_cracker.utils.constants import (
    P128_A,
    P128_B,
    P128_GX,
    P128_GY,
    P128_P,
    P128_Q,
    X128_SHIFT,
)


class TestModPGroup:
    def setup_method(self):
        self.group = ModPGroup(p=23, g=2, q=11)

    def test_orders(self):
        assert self.group.group_order == 22
        assert self.group.cofactor == 2

    def test_group_law(self):
        g = self.group
        assert g.add(5, 7) == 35 % 23
        assert g.add(5, g.neg(5)) == g.identity
        assert g.multiply(2, 11) == 1

    def test_multiples(self):
        got = list(self.group.multiples(3, 2, 5))
        assert got == [(k, pow(3, k, 23)) for k in range(2, 6)]

    def test_keypair(self):
        g = dh58_group()
        x, y = g.generate_keypair(np.random.default_rng(42))
        assert 1 <= x < g.q
        assert y == pow(g.g, x, g.p)

    def test_generator_order(self):
        g = dh58_group()
        assert pow(g.g, g.q, g.p) == 1

    def test_encode(self):
        assert self.group.encode(1) == b"\x01"


class TestWeierstrassCurve:
    def setup_method(self):
        self.curve = p128()

    def test_generator_on_curve(self):
        assert self.curve.contains(P128_GX, P128_GY)

    def test_generator_order(self):
        G = self.curve.generator
        assert self.curve.multiply(G, P128_Q) == INFINITY
        assert self.curve.multiply(G, P128_Q - 1) == self.curve.neg(G)

    def test_multiply_negative(self):
        G = self.curve.generator
        assert self.curve.multiply(G, -3) == self.curve.neg(self.curve.multiply(G, 3))

    def test_multiples_match_multiply(self):
        G = self.curve.generator
        for k, P in self.curve.multiples(G, 5, 12):
            assert P == self.curve.multiply(G, k)

    def test_encode_width(self):
        G = self.curve.generator
        enc = self.curve.encode(G)
        assert len(enc) == 1 + 2 * 16
        assert enc[0] == 4
        assert self.curve.encode(INFINITY) == b"\x04" + bytes(32)

    def test_pack_roundtrip(self):
        G = self.curve.generator
        assert self.curve.unpack(self.curve.pack(G)) == G
        assert self.curve.unpack(self.curve.pack(INFINITY)) == INFINITY

    def test_random_element_on_curve(self):
        rng = np.random.default_rng(42)
        for _ in range(5):
            P = self.curve.random_element(rng)
            assert self.curve.contains(P.x(), P.y())

    def test_invalid_curves_share_field(self):
        for weak in p128_invalid_curves():
            assert weak.p == P128_P
            assert weak.a == P128_A
            assert weak.b != P128_B

    def test_no_base_point(self):
        weak = p128_invalid_curves()[0]
        with pytest.raises(ValueError):
            weak.generator


class TestMontgomeryLadder:
    def setup_method(self):
        self.curve = x128()

    def test_base_point_on_curve(self):
        assert self.curve.is_on_curve(self.curve.u, self.curve.v)

    def test_base_point_order(self):
        assert self.curve.ladder(self.curve.u, P128_Q) == 0
        assert self.curve.ladder(self.curve.u, P128_Q + 1) == self.curve.u

    def test_ladder_zero_and_one(self):
        assert self.curve.ladder(self.curve.u, 0) == 0
        assert self.curve.ladder(self.curve.u, 1) == self.curve.u

    def test_sign_invariant(self):
        u = self.curve.u
        assert self.curve.ladder(u, 12345) == self.curve.ladder(u, P128_Q - 12345)

    def test_multiples_match_ladder(self):
        u = self.curve.u
        for k, w in self.curve.multiples(u, 1, 40):
            assert w == self.curve.ladder(u, k)

    def test_multiples_from_offset(self):
        u = self.curve.u
        got = list(self.curve.multiples(u, 100, 105))
        assert got == [(k, self.curve.ladder(u, k)) for k in range(100, 106)]

    def test_multiples_start_validated(self):
        with pytest.raises(ValueError):
            next(self.curve.multiples(self.curve.u, 0))

    def test_twist_order(self):
        assert self.curve.twist_order == 2 * P128_P + 2 - self.curve.order

    def test_random_element_on_curve(self):
        u = self.curve.random_element(np.random.default_rng(3))
        assert not self.curve.on_twist(u)
        assert self.curve.recover_v(u) is not None

    def test_twist_element(self):
        rng = np.random.default_rng(42)
        u = self.curve.random_twist_element(rng)
        assert self.curve.on_twist(u)
        assert self.curve.recover_v(u) is None


class TestBirationalMap:
    def setup_method(self):
        self.curve = x128()
        self.weier = self.curve.to_weierstrass()

    def test_coefficients_match_p128(self):
        assert self.weier.a == P128_A % P128_P
        assert self.weier.b == P128_B

    def test_shift(self):
        assert self.curve.weierstrass_shift() == X128_SHIFT

    def test_generator_maps_to_p128_base(self):
        assert (self.weier.gx, self.weier.gy) == (P128_GX, P128_GY)

    def test_ladder_matches_weierstrass(self):
        k = 987654321
        u = self.curve.ladder(self.curve.u, k)
        P = self.weier.multiply(self.weier.generator, k)
        assert (u + X128_SHIFT) % P128_P == P.x()

    def test_lift_u_gives_both_signs(self):
        u = self.curve.ladder(self.curve.u, 31337)
        lifts = self.curve.lift_u(u)
        assert len(lifts) == 2
        (x1, y1), (x2, y2) = lifts
        assert x1 == x2
        assert (y1 + y2) % P128_P == 0
        for x, y in lifts:
            assert self.weier.contains(x, y)

    def test_lift_u_on_twist(self):
        u = self.curve.random_twist_element(np.random.default_rng(1))
        assert self.curve.lift_u(u) == []

    def test_frozen(self):
        with pytest.raises(AttributeError):
            self.curve.p = 5

    def test_weierstrass_is_plain_dataclass(self):
        assert isinstance(self.weier, WeierstrassCurve)
        assert isinstance(self.curve, MontgomeryCurve)
