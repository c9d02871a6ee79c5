"""Points of small order off the legitimate curve.

Two flavours, matching the two curve attacks:

- invalid curves: a substituted Weierstrass curve y^2 = x^3 + ax + b'
  with smooth order. Points carry both coordinates, so a tag match
  pins the residue exactly.
- quadratic twist of a Montgomery curve: u-coordinates whose
  u^3 + Au^2 + u is a non-square. Only u is known, so the residue k
  found by matching is indistinguishable from r - k.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

import numpy as np
from ecdsa.ellipticcurve import INFINITY, Point

from subgroup_cracker.core.factorizer import odd_small_factors
from subgroup_cracker.groups.montgomery import MontgomeryCurve
from subgroup_cracker.groups.weierstrass import WeierstrassCurve
from subgroup_cracker.utils.types import TwistPoint

logger = logging.getLogger(__name__)


def find_invalid_curve_point(
    curve: WeierstrassCurve, r: int, rng: np.random.Generator | None = None
) -> Point:
    """A point of order r on `curve`, scaled down from a random point."""
    cofactor = curve.order // r
    while True:
        P = curve.multiply(curve.random_element(rng), cofactor)
        if P != INFINITY:
            return P


def find_twist_point(
    curve: MontgomeryCurve,
    r: int,
    rng: np.random.Generator | None = None,
    prime_factors: Sequence[int] | None = None,
) -> TwistPoint:
    """A twist u-coordinate of order r (r must divide the twist order).

    Samples u until it falls on the twist, then ladders by
    twist_order / r. A result of 0 is the identity and is resampled.
    For composite r, pass its prime factors to insist on exact order r
    rather than some proper divisor of it.
    """
    cofactor = curve.twist_order // r
    while True:
        u = curve.random_twist_element(rng)
        point = curve.ladder(u, cofactor)
        if point == 0:
            continue
        if prime_factors and any(curve.ladder(point, r // f) == 0 for f in prime_factors):
            continue
        return TwistPoint(order=r, u=point)


def find_all_twist_points(
    curve: MontgomeryCurve, bound: int, rng: np.random.Generator | None = None
) -> list[TwistPoint]:
    """One twist point per odd prime factor of the twist order below `bound`."""
    factors = odd_small_factors(curve.twist_order, bound)
    logger.info("twist order factors below %d: %s", bound, factors)
    return [find_twist_point(curve, r, rng) for r in factors]
