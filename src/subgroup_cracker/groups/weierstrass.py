"""Short Weierstrass curves y^2 = x^3 + ax + b over F_p.

Point arithmetic is delegated to ``ecdsa.ellipticcurve``. The curve
object itself only holds integers so it can cross process boundaries;
the matching ``CurveFp`` is rebuilt (and cached) on demand.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from functools import lru_cache

import numpy as np
from ecdsa.ellipticcurve import INFINITY, CurveFp, Point

from subgroup_cracker.utils.math_helpers import random_below, sqrt_mod

Coords = tuple[int, int] | None


@lru_cache(maxsize=None)
def _curve_fp(p: int, a: int, b: int) -> CurveFp:
    return CurveFp(p, a % p, b % p)


@dataclass(frozen=True)
class WeierstrassCurve:
    """Elliptic curve y^2 = x^3 + ax + b over F_p.

    `order` is the number of points on the curve. `gx, gy, q` describe a
    base point of prime order q; substituted (invalid) curves leave them
    unset since the attack only needs their group order.
    """

    p: int
    a: int
    b: int
    order: int
    gx: int | None = None
    gy: int | None = None
    q: int | None = None
    name: str = ""

    @property
    def curve(self) -> CurveFp:
        return _curve_fp(self.p, self.a, self.b)

    @property
    def group_order(self) -> int:
        return self.order

    @property
    def identity(self) -> Point:
        return INFINITY

    @property
    def generator(self) -> Point:
        if self.gx is None or self.gy is None:
            raise ValueError(f"curve {self.name or self.b} has no base point")
        return self.point(self.gx, self.gy)

    @property
    def byte_len(self) -> int:
        return (self.p.bit_length() + 7) // 8

    def point(self, x: int, y: int) -> Point:
        """Build a point, asserting it satisfies this curve's equation."""
        return Point(self.curve, x % self.p, y % self.p)

    def from_coords(self, coords: Coords) -> Point:
        if coords is None:
            return INFINITY
        return self.point(*coords)

    @staticmethod
    def coords(P: Point) -> Coords:
        if P == INFINITY:
            return None
        return (int(P.x()), int(P.y()))

    def pack(self, P: Point) -> Coords:
        """Plain-int form of a point for shipping to worker processes."""
        return self.coords(P)

    def unpack(self, data: Coords) -> Point:
        return self.from_coords(data)

    def contains(self, x: int, y: int) -> bool:
        return self.curve.contains_point(x % self.p, y % self.p)

    def rhs(self, x: int) -> int:
        return (x * x * x + self.a * x + self.b) % self.p

    def add(self, P: Point, Q: Point) -> Point:
        return P + Q

    def neg(self, P: Point) -> Point:
        if P == INFINITY:
            return INFINITY
        return self.point(P.x(), -P.y())

    def multiply(self, P: Point, k: int) -> Point:
        if k == 0 or P == INFINITY:
            return INFINITY
        if k < 0:
            return self.neg(P) * (-k)
        return P * k

    def multiples(self, P: Point, start: int = 1, stop: int | None = None) -> Iterator[tuple[int, Point]]:
        """Yield (k, k*P) for k = start, start+1, ... up to stop inclusive."""
        k = start
        current = self.multiply(P, start)
        while stop is None or k <= stop:
            yield k, current
            current = current + P
            k += 1

    def random_element(self, rng: np.random.Generator | None = None) -> Point:
        """Random affine point: pick x until x^3 + ax + b is a square."""
        while True:
            x = random_below(self.p, rng)
            y = sqrt_mod(self.rhs(x), self.p)
            if y is None:
                continue
            if random_below(2, rng):
                y = -y
            return self.point(x, y)

    def encode(self, P: Point) -> bytes:
        """Uncompressed SEC1 form 04 || x || y; infinity is all-zero coordinates."""
        n = self.byte_len
        if P == INFINITY:
            return b"\x04" + bytes(2 * n)
        return b"\x04" + int(P.x()).to_bytes(n, "big") + int(P.y()).to_bytes(n, "big")

    def hop_key(self, P: Point) -> int:
        if P == INFINITY:
            return 0
        return int(P.x())

    def dh(self, private: int, public: Point) -> Point:
        return self.multiply(public, private)

    def generate_keypair(self, rng: np.random.Generator | None = None) -> tuple[int, Point]:
        """Random private key in [1, q) and its public point."""
        if self.q is None:
            raise ValueError(f"curve {self.name or self.b} has no base point order")
        k = 1 + random_below(self.q - 1, rng)
        return k, self.multiply(self.generator, k)
