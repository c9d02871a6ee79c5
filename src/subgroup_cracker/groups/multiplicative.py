"""The multiplicative group of a prime field, Z_p^*."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

import numpy as np

from subgroup_cracker.utils.math_helpers import int_to_bytes, random_below


@dataclass(frozen=True)
class ModPGroup:
    """Z_p^* with a generator g of prime order q.

    The group law is modular multiplication. It is exposed under the same
    names the curve classes use (add / neg / multiply) so the kangaroo and
    the confinement probe can walk any of the three families.
    """

    p: int
    g: int
    q: int

    @property
    def group_order(self) -> int:
        """Order of the whole group Z_p^*."""
        return self.p - 1

    @property
    def cofactor(self) -> int:
        """j = (p - 1) / q."""
        return (self.p - 1) // self.q

    @property
    def identity(self) -> int:
        return 1

    @property
    def generator(self) -> int:
        return self.g

    def contains(self, element: int) -> bool:
        return 0 < element < self.p

    def add(self, x: int, y: int) -> int:
        return x * y % self.p

    def neg(self, x: int) -> int:
        return pow(x, -1, self.p)

    def multiply(self, x: int, k: int) -> int:
        return pow(x, k, self.p)

    def multiples(self, x: int, start: int = 1, stop: int | None = None) -> Iterator[tuple[int, int]]:
        """Yield (k, x^k) for k = start, start+1, ... up to stop inclusive."""
        k = start
        current = pow(x, start, self.p)
        while stop is None or k <= stop:
            yield k, current
            current = current * x % self.p
            k += 1

    def random_element(self, rng: np.random.Generator | None = None) -> int:
        """Uniform element of Z_p^*."""
        return 1 + random_below(self.p - 1, rng)

    def pack(self, element: int) -> int:
        return element

    def unpack(self, data: int) -> int:
        return data

    def encode(self, element: int) -> bytes:
        return int_to_bytes(element)

    def hop_key(self, element: int) -> int:
        return element

    def dh(self, private: int, public: int) -> int:
        return pow(public, private, self.p)

    def generate_keypair(self, rng: np.random.Generator | None = None) -> tuple[int, int]:
        """Random private exponent in [1, q) and its public key g^x."""
        x = 1 + random_below(self.q - 1, rng)
        return x, pow(self.g, x, self.p)
