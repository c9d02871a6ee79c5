"""Pollard's kangaroo (lambda) method for bounded discrete logarithms.

Find x in [a, b] with x * base = target. A tame kangaroo starts at
b * base and makes N pseudo-random hops, leaving a trap where it lands.
A wild kangaroo starts at the target and hops with the same jump
function. Once it lands on any footprint of the tame one it follows the
same path into the trap, and the distances give x = b + tame - wild.

Hop sizes are f(y) = 2^(hop_key(y) mod k). Jump points base * 2^i are
precomputed, so every hop costs a single group operation: point
addition on curves, modular multiplication in Z_p^*.

Expected work is O(sqrt(b - a)) group operations.
"""

from __future__ import annotations

import logging
import math
from typing import Any

from subgroup_cracker.errors import InvalidInput
from subgroup_cracker.utils.constants import CANCEL_POLL_INTERVAL, DEFAULT_HERD_FACTOR
from subgroup_cracker.utils.types import KangarooTrap

logger = logging.getLogger(__name__)


def hop_parameter(a: int, b: int) -> int:
    """k = log2(sqrt(b - a)) + log2(log2(sqrt(b - a))) - 2, at least 1.

    Balances the expected number of hops against the chance of a
    collision (Montenegro and Tetali, arXiv:0812.0789).
    """
    width = b - a
    if width < 16:
        return 1
    log_sqrt = math.log2(width) / 2
    return max(1, int(log_sqrt + math.log2(log_sqrt) - 2))


def herd_size(k: int, herd_factor: int = DEFAULT_HERD_FACTOR) -> int:
    """Number of tame hops: herd_factor times the mean of f over k keys."""
    mean = sum(1 << i for i in range(k)) // k
    return herd_factor * max(mean, 1)


class KangarooSolver:
    """Bounded discrete log in any group with add / multiply / hop_key.

    One solver serves many targets against the same base and interval:
    the tame walk is done once and reused.
    """

    def __init__(
        self,
        group,
        base: Any,
        a: int,
        b: int,
        herd_factor: int = DEFAULT_HERD_FACTOR,
        k: int | None = None,
    ) -> None:
        if a < 0 or b < a:
            raise InvalidInput(f"invalid search interval [{a}, {b}]")
        self.group = group
        self.base = base
        self.a = a
        self.b = b
        self.k = k if k is not None else hop_parameter(a, b)
        self.herd_size = herd_size(self.k, herd_factor)
        self.jumps = [group.multiply(base, 1 << i) for i in range(self.k)]
        self._trap: KangarooTrap | None = None

    def _hop(self, y: Any) -> int:
        return self.group.hop_key(y) % self.k

    def tame(self) -> KangarooTrap:
        """Release the tame kangaroo from b * base; cached after the first call."""
        if self._trap is not None:
            return self._trap
        add = self.group.add
        distance = 0
        y = self.group.multiply(self.base, self.b)
        for _ in range(self.herd_size):
            i = self._hop(y)
            distance += 1 << i
            y = add(y, self.jumps[i])
        self._trap = KangarooTrap(
            k=self.k, herd_size=self.herd_size, landing=y, distance=distance
        )
        logger.debug(
            "tame kangaroo: k=%d N=%d distance=%d", self.k, self.herd_size, distance
        )
        return self._trap

    def catch(
        self,
        target: Any,
        trap: KangarooTrap | None = None,
        cancel=None,
        poll_interval: int = CANCEL_POLL_INTERVAL,
    ) -> int | None:
        """Run the wild kangaroo from `target`.

        Returns x in [a, b] with x * base = target, or None if the wild
        kangaroo travels past b - a + tame distance without falling into
        the trap, or if `cancel` is set.
        """
        if trap is None:
            trap = self.tame()
        add = self.group.add
        bound = self.b - self.a + trap.distance
        landing = trap.landing
        distance = 0
        y = target
        hops = 0
        while distance < bound:
            i = self._hop(y)
            distance += 1 << i
            y = add(y, self.jumps[i])
            hops += 1
            if y == landing:
                x = self.b + trap.distance - distance
                logger.debug("wild kangaroo trapped after %d hops: x=%d", hops, x)
                if self.a <= x <= self.b:
                    return x
                return None
            if cancel is not None and hops % poll_interval == 0 and cancel.is_set():
                return None
        logger.debug("wild kangaroo escaped after %d hops", hops)
        return None


def catch_kangaroo(
    group,
    base: Any,
    target: Any,
    a: int,
    b: int,
    herd_factor: int = DEFAULT_HERD_FACTOR,
) -> int | None:
    """One-shot kangaroo search: x in [a, b] with x * base = target, or None."""
    return KangarooSolver(group, base, a, b, herd_factor=herd_factor).catch(target)
