"""Small-factor search by trial division."""

from __future__ import annotations

import logging

from subgroup_cracker.errors import InvalidInput

logger = logging.getLogger(__name__)


def small_factors(n: int, bound: int) -> list[int]:
    """Distinct prime factors of n below `bound`, in ascending order.

    Trial division from 2 upwards. Each factor is divided out completely
    before moving on, so every divisor that hits is prime. Stops as soon
    as the cofactor drops to 1 or the divisor reaches `bound`.

    This is deliberately naive: the attacks only need the handful of
    factors under a moderate bound (2^16 to 2^24).

    Returns an empty list when nothing under the bound divides n.
    """
    if n < 1:
        raise InvalidInput(f"n must be positive, got {n}")
    if bound < 2:
        raise InvalidInput(f"bound must be at least 2, got {bound}")

    factors: list[int] = []
    remaining = n
    d = 2
    while remaining > 1 and d < bound:
        if remaining % d == 0:
            factors.append(d)
            while remaining % d == 0:
                remaining //= d
        d += 1

    logger.debug("factors of %d-bit n below %d: %s", n.bit_length(), bound, factors)
    return factors


def odd_small_factors(n: int, bound: int) -> list[int]:
    """small_factors without 2.

    Order-2 points carry a single bit and, on curves, collapse to the
    identity under x-only arithmetic, so the curve attacks skip them.
    """
    return [f for f in small_factors(n, bound) if f != 2]
