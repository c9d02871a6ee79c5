"""Chinese Remainder Theorem reassembly of partial residues."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Sequence
from itertools import product as cartesian

from subgroup_cracker.errors import InvalidInput, StructuralFailure
from subgroup_cracker.utils.constants import MAX_SIGN_FACTORS
from subgroup_cracker.utils.math_helpers import product
from subgroup_cracker.utils.types import Residue

logger = logging.getLogger(__name__)


def crt(remainders: Sequence[int], moduli: Sequence[int]) -> tuple[int, int]:
    """Solve x = remainders[i] (mod moduli[i]) for pairwise-coprime moduli.

    Returns (x, M) with M the product of the moduli and 0 <= x < M.
    Each term is scaled by the inverse of the partial product M / m_i
    modulo m_i; if that inverse does not exist the system is not coprime
    and StructuralFailure is raised.
    """
    if len(remainders) != len(moduli):
        raise InvalidInput(
            f"{len(remainders)} remainders for {len(moduli)} moduli"
        )
    if not moduli:
        raise InvalidInput("empty system of congruences")

    M = product(moduli)
    x = 0
    for a, m in zip(remainders, moduli):
        partial = M // m
        try:
            inverse = pow(partial, -1, m)
        except ValueError:
            raise StructuralFailure(f"{m} not coprime") from None
        x += a * inverse * partial
    return x % M, M


def combine(residues: Sequence[Residue]) -> tuple[int, int]:
    """crt() over Residue records."""
    return crt([r.remainder for r in residues], [r.modulus for r in residues])


def sign_assignments(n: int) -> Iterator[tuple[bool, ...]]:
    """All 2^n ways to flip a subset of n residues, no flips first."""
    return cartesian((False, True), repeat=n)


def apply_signs(residues: Sequence[Residue], signs: Sequence[bool]) -> list[Residue]:
    return [r.negated() if flip else r for r, flip in zip(residues, signs)]


def sign_candidates(
    residues: Sequence[Residue],
    max_factors: int = MAX_SIGN_FACTORS,
) -> Iterator[int]:
    """Combined residue for every sign assignment of x-only residues.

    Each residue k (mod r) could equally be r - k, so n residues give 2^n
    candidate systems. The enumeration is exponential, hence the cap.
    Moduli of 2 make both signs coincide; their duplicates are harmless.
    """
    if len(residues) > max_factors:
        raise InvalidInput(
            f"{len(residues)} sign-ambiguous residues exceed the limit of {max_factors}"
        )
    for signs in sign_assignments(len(residues)):
        x, _ = combine(apply_signs(residues, signs))
        yield x


def resolve_sign_candidates(
    residues: Sequence[Residue],
    verify: Callable[[int], bool],
    max_factors: int = MAX_SIGN_FACTORS,
) -> list[int]:
    """Candidates that pass `verify`, de-duplicated, in enumeration order.

    Rejected candidates are dropped silently; an empty list means every
    assignment failed and is for the caller to escalate.
    """
    survivors: list[int] = []
    tried = 0
    for x in sign_candidates(residues, max_factors):
        tried += 1
        if x in survivors:
            continue
        if verify(x):
            survivors.append(x)
    logger.info("%d of %d sign candidates survived verification", len(survivors), tried)
    return survivors
