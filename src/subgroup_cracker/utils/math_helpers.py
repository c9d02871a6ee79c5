"""Number-theory utilities shared by the group implementations and attacks."""

from __future__ import annotations

import secrets

import numpy as np
from ecdsa import numbertheory

_SMALL_WITNESSES = (2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37)


def is_probable_prime(n: int) -> bool:
    """Miller-Rabin primality test with fixed small witnesses."""
    if n < 2:
        return False
    if n < 4:
        return True
    if n % 2 == 0:
        return False

    # Write n-1 as 2^r * d
    d = n - 1
    r = 0
    while d % 2 == 0:
        d //= 2
        r += 1

    for a in _SMALL_WITNESSES:
        if a >= n:
            continue
        if n % a == 0:
            return False
        x = pow(a, d, n)
        if x == 1 or x == n - 1:
            continue
        for _ in range(r - 1):
            x = pow(x, 2, n)
            if x == n - 1:
                break
        else:
            return False
    return True


def random_below(n: int, rng: np.random.Generator | None = None) -> int:
    """Uniform integer in [0, n).

    Uses the OS CSPRNG unless a seeded generator is supplied. Values wider
    than 63 bits are drawn from the generator's byte stream.
    """
    if n < 1:
        raise ValueError(f"upper bound must be positive, got {n}")
    if rng is None:
        return secrets.randbelow(n)
    if n < 2**63:
        return int(rng.integers(0, n))
    # Extra 64 bits keep the modulo bias negligible.
    width = (n.bit_length() + 7) // 8 + 8
    return int.from_bytes(rng.bytes(width), "big") % n


def is_quadratic_residue(a: int, p: int) -> bool:
    """True if a is a non-zero square modulo the odd prime p."""
    return numbertheory.jacobi(a % p, p) == 1


def sqrt_mod(a: int, p: int) -> int | None:
    """Square root of a modulo the odd prime p, or None if a is a non-residue."""
    a %= p
    if a == 0:
        return 0
    if not is_quadratic_residue(a, p):
        return None
    return numbertheory.square_root_mod_prime(a, p)


def int_to_bytes(n: int) -> bytes:
    """Minimal big-endian encoding; zero encodes as the empty string."""
    return n.to_bytes((n.bit_length() + 7) // 8, "big")


def product(values) -> int:
    result = 1
    for v in values:
        result *= v
    return result
