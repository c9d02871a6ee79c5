"""Dataclass definitions for Subgroup Cracker."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from subgroup_cracker.errors import InvalidInput
from subgroup_cracker.utils.constants import (
    DEFAULT_FACTOR_BOUND,
    DEFAULT_HERD_FACTOR,
    DEFAULT_TWIST_FACTOR_BOUND,
    MAX_SIGN_FACTORS,
    PARALLEL_THRESHOLD,
)


@dataclass
class AttackConfig:
    """Configuration for an attack run."""

    factor_bound: int = DEFAULT_FACTOR_BOUND
    twist_factor_bound: int = DEFAULT_TWIST_FACTOR_BOUND
    herd_factor: int = DEFAULT_HERD_FACTOR
    workers: int | None = None  # None -> os.cpu_count()
    secret_bound: int | None = None  # known upper bound on the private key
    max_sign_factors: int = MAX_SIGN_FACTORS
    parallel_threshold: int = PARALLEL_THRESHOLD


@dataclass(frozen=True)
class Residue:
    """secret = remainder (mod modulus)."""

    remainder: int
    modulus: int

    def __post_init__(self) -> None:
        if self.modulus < 1:
            raise InvalidInput(f"modulus must be positive, got {self.modulus}")
        if not 0 <= self.remainder < self.modulus:
            raise InvalidInput(
                f"remainder {self.remainder} outside [0, {self.modulus})"
            )

    def negated(self) -> Residue:
        """The other residue an x-only match cannot rule out."""
        return Residue((self.modulus - self.remainder) % self.modulus, self.modulus)


@dataclass(frozen=True)
class TwistPoint:
    """An x-coordinate of exact order `order` on a curve's quadratic twist."""

    order: int
    u: int


@dataclass(frozen=True)
class KangarooTrap:
    """Where the tame kangaroo came to rest."""

    k: int
    herd_size: int
    landing: Any
    distance: int


@dataclass
class AttackResult:
    """Outcome of a successful attack."""

    private_key: int
    residue: int
    modulus: int
    residues: list[Residue] = field(default_factory=list)
    candidates: list[int] = field(default_factory=list)
    used_kangaroo: bool = False
    oracle_queries: int = 0
