"""Ready-made groups: the published weak parameters and small generated ones."""

from __future__ import annotations

import numpy as np

from subgroup_cracker.groups.montgomery import MontgomeryCurve
from subgroup_cracker.groups.multiplicative import ModPGroup
from subgroup_cracker.groups.weierstrass import WeierstrassCurve
from subgroup_cracker.utils.constants import (
    DH57_G,
    DH57_P,
    DH57_Q,
    DH58_G,
    DH58_P,
    DH58_Q,
    P128_A,
    P128_B,
    P128_GX,
    P128_GY,
    P128_INVALID_CURVES,
    P128_ORDER,
    P128_P,
    P128_Q,
    X128_A,
    X128_ORDER,
    X128_U,
    X128_V,
)
from subgroup_cracker.utils.math_helpers import is_probable_prime, product, random_below


def dh57_group() -> ModPGroup:
    return ModPGroup(p=DH57_P, g=DH57_G, q=DH57_Q)


def dh58_group() -> ModPGroup:
    return ModPGroup(p=DH58_P, g=DH58_G, q=DH58_Q)


def p128() -> WeierstrassCurve:
    return WeierstrassCurve(
        p=P128_P,
        a=P128_A,
        b=P128_B,
        order=P128_ORDER,
        gx=P128_GX,
        gy=P128_GY,
        q=P128_Q,
        name="P-128",
    )


def p128_invalid_curves() -> list[WeierstrassCurve]:
    """P-128's siblings y^2 = x^3 - 95051x + b' with smooth orders."""
    return [
        WeierstrassCurve(p=P128_P, a=P128_A, b=b, order=order, name=f"P-128/b={b}")
        for b, order in P128_INVALID_CURVES
    ]


def x128() -> MontgomeryCurve:
    return MontgomeryCurve(
        p=P128_P, a=X128_A, order=X128_ORDER, u=X128_U, q=P128_Q, v=X128_V, name="x128"
    )


def primes_below(bound: int) -> list[int]:
    return [n for n in range(2, bound) if is_probable_prime(n)]


def next_prime(n: int) -> int:
    while not is_probable_prime(n):
        n += 1
    return n


def generate_weak_dh_group(
    q_bits: int = 48,
    smooth_bound: int = 50,
    padding_bits: int = 16,
    rng: np.random.Generator | None = None,
) -> ModPGroup:
    """A toy Z_p^* whose cofactor (p - 1) / q is rich in small primes.

    p = q * s * t + 1 where s is the product of all primes below
    `smooth_bound` and t is a random padding factor, retried until p
    is prime. g = h^((p - 1) / q) for a random h, so g has order q.
    """
    if q_bits < 2:
        raise ValueError(f"q_bits must be at least 2, got {q_bits}")
    smooth = product(primes_below(smooth_bound))
    if smooth % 2:
        raise ValueError("smooth_bound must be above 2 so that p - 1 is even")
    q = next_prime((1 << (q_bits - 1)) + random_below(1 << (q_bits - 1), rng))

    while True:
        t = 1 + random_below(1 << padding_bits, rng)
        p = q * smooth * t + 1
        if is_probable_prime(p):
            break

    while True:
        h = 2 + random_below(p - 3, rng)
        g = pow(h, (p - 1) // q, p)
        if g != 1:
            return ModPGroup(p=p, g=g, q=q)
