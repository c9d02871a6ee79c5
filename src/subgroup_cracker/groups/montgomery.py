"""Montgomery curves v^2 = u^3 + A*u^2 + u over F_p, u-coordinate only.

Scalar multiplication is the Montgomery ladder on projective (U:W)
pairs. An x-only implementation never looks at v, so it happily
multiplies u-coordinates that belong to the quadratic twist instead of
the curve. That is the property the twist attack exploits.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

import numpy as np

from subgroup_cracker.groups.weierstrass import WeierstrassCurve
from subgroup_cracker.utils.math_helpers import (
    int_to_bytes,
    is_quadratic_residue,
    random_below,
    sqrt_mod,
)

Projective = tuple[int, int]


@dataclass(frozen=True)
class MontgomeryCurve:
    """Montgomery curve with B = 1.

    `order` counts the points on the curve itself. `u, v` is a base
    point of prime order `q`.
    """

    p: int
    a: int
    order: int
    u: int
    q: int
    v: int | None = None
    name: str = ""

    @property
    def group_order(self) -> int:
        return self.order

    @property
    def twist_order(self) -> int:
        """|E| + |E'| = 2p + 2."""
        return 2 * self.p + 2 - self.order

    @property
    def identity(self) -> int:
        return 0

    @property
    def generator(self) -> int:
        return self.u

    def rhs(self, u: int) -> int:
        p = self.p
        return (u * u * u + self.a * u * u + u) % p

    def is_on_curve(self, u: int, v: int) -> bool:
        return (v * v - self.rhs(u)) % self.p == 0

    def on_twist(self, u: int) -> bool:
        """True if u is the u-coordinate of a twist point, not a curve point."""
        rhs = self.rhs(u)
        return rhs != 0 and not is_quadratic_residue(rhs, self.p)

    def recover_v(self, u: int) -> int | None:
        """One square root v for u, or None when u lies on the twist."""
        return sqrt_mod(self.rhs(u), self.p)

    # -- ladder --

    def _double(self, P: Projective) -> Projective:
        p = self.p
        x, z = P
        xx = x * x % p
        zz = z * z % p
        xz = x * z % p
        return (xx - zz) ** 2 % p, 4 * xz * (xx + self.a * xz + zz) % p

    def _diff_add(self, P: Projective, Q: Projective, D: Projective) -> Projective:
        """x(P + Q) given x(P), x(Q) and x(P - Q)."""
        p = self.p
        xp, zp = P
        xq, zq = Q
        xd, zd = D
        s = (xp * xq - zp * zq) % p
        t = (xp * zq - zp * xq) % p
        return zd * s * s % p, xd * t * t % p

    def _ladder(self, u: int, k: int) -> Projective:
        R0: Projective = (1, 0)
        R1: Projective = (u % self.p, 1)
        base: Projective = R1
        for i in reversed(range(k.bit_length())):
            if (k >> i) & 1:
                R0, R1 = self._diff_add(R0, R1, base), self._double(R1)
            else:
                R0, R1 = self._double(R0), self._diff_add(R0, R1, base)
        return R0

    def _affine(self, P: Projective) -> int:
        x, z = P
        if z % self.p == 0:
            return 0
        return x * pow(z, -1, self.p) % self.p

    def ladder(self, u: int, k: int) -> int:
        """u-coordinate of k*(u, v); the identity maps to 0."""
        return self._affine(self._ladder(u, abs(k)))

    def multiply(self, u: int, k: int) -> int:
        return self.ladder(u, k)

    def multiples(self, u: int, start: int = 1, stop: int | None = None) -> Iterator[tuple[int, int]]:
        """Yield (k, u(k*P)) for k = start, start+1, ... up to stop inclusive.

        Steps by one differential addition each, using (k-1)*P as the
        difference, instead of a full ladder per k.
        """
        if start < 1:
            raise ValueError(f"start must be >= 1, got {start}")
        base: Projective = (u % self.p, 1)
        prev = self._ladder(u, start - 1)
        current = self._ladder(u, start)
        k = start
        while stop is None or k <= stop:
            yield k, self._affine(current)
            if k == 1:
                nxt = self._double(current)
            else:
                nxt = self._diff_add(current, base, prev)
            prev, current = current, nxt
            k += 1

    # -- sampling --

    def random_element(self, rng: np.random.Generator | None = None) -> int:
        """Random u-coordinate of a curve point."""
        while True:
            u = random_below(self.p, rng)
            if self.recover_v(u) is not None:
                return u

    def random_twist_element(self, rng: np.random.Generator | None = None) -> int:
        """Random u-coordinate that only exists on the quadratic twist."""
        while True:
            u = random_below(self.p, rng)
            if self.on_twist(u):
                return u

    def pack(self, u: int) -> int:
        return u

    def unpack(self, data: int) -> int:
        return data

    def encode(self, u: int) -> bytes:
        return int_to_bytes(u)

    def dh(self, private: int, public: int) -> int:
        return self.ladder(public, private)

    def generate_keypair(self, rng: np.random.Generator | None = None) -> tuple[int, int]:
        k = 1 + random_below(self.q - 1, rng)
        return k, self.ladder(self.u, k)

    # -- Weierstrass model --

    def weierstrass_shift(self) -> int:
        """x = u + A/3."""
        return self.a * pow(3, -1, self.p) % self.p

    def to_weierstrass(self) -> WeierstrassCurve:
        """The birationally equivalent short Weierstrass curve.

        With B = 1: a = (3 - A^2) / 3, b = (2A^3 - 9A) / 27.
        """
        p, A = self.p, self.a
        wa = (3 - A * A) * pow(3, -1, p) % p
        wb = (2 * A**3 - 9 * A) * pow(27, -1, p) % p
        gx = gy = None
        if self.v is not None:
            gx, gy = self.lift(self.u, self.v)
        return WeierstrassCurve(
            p=p, a=wa, b=wb, order=self.order, gx=gx, gy=gy, q=self.q,
            name=f"{self.name}-weierstrass" if self.name else "",
        )

    def lift(self, u: int, v: int) -> tuple[int, int]:
        """Map (u, v) to the Weierstrass model."""
        return (u + self.weierstrass_shift()) % self.p, v % self.p

    def lift_u(self, u: int) -> list[tuple[int, int]]:
        """Both Weierstrass points whose u-coordinate is u.

        Returns an empty list if u is on the twist.
        """
        v = self.recover_v(u)
        if v is None:
            return []
        points = [self.lift(u, v)]
        if v % self.p != 0:
            points.append(self.lift(u, -v))
        return points
