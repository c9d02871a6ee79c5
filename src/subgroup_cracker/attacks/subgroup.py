"""Small-subgroup confinement against finite-field Diffie-Hellman.

The victim works in Z_p^* with a generator of prime order q, but
accepts any peer element. Every small prime r dividing j = (p - 1) / q
leaks x mod r through one tag. If those primes multiply past q the key
falls out of the CRT directly; otherwise the known residue n (mod r)
turns the remaining search into a bounded discrete log:

    y = g^x,  x = n + m*r
    y * g^-n = (g^r)^m,  0 <= m <= (q - 1) / r

which Pollard's kangaroo solves in about sqrt(q / r) steps.
"""

from __future__ import annotations

import logging

import numpy as np

from subgroup_cracker.core.confinement import probe_all
from subgroup_cracker.core.crt import combine
from subgroup_cracker.core.factorizer import small_factors
from subgroup_cracker.core.kangaroo import KangarooSolver
from subgroup_cracker.errors import InvalidInput, SearchExhausted, StructuralFailure
from subgroup_cracker.groups.multiplicative import ModPGroup
from subgroup_cracker.oracle import CountingOracle, SharedSecretOracle
from subgroup_cracker.utils.types import AttackConfig, AttackResult, Residue

logger = logging.getLogger(__name__)


class SubgroupConfinementAttack:
    """Recover a DH private key from a tag oracle in a weak Z_p^*.

    `public_key` (g^x) is only needed when the small factors of j do not
    cover q; it defaults to what the oracle publishes.
    """

    def __init__(
        self,
        group: ModPGroup,
        oracle: SharedSecretOracle,
        config: AttackConfig | None = None,
        public_key: int | None = None,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.group = group
        self.oracle = CountingOracle(oracle)
        self.config = config or AttackConfig()
        self.public_key = public_key
        self.rng = rng

    def collect_residues(self) -> list[Residue]:
        """x mod r for every prime r < factor_bound dividing (p - 1) / q."""
        factors = small_factors(self.group.cofactor, self.config.factor_bound)
        if not factors:
            raise StructuralFailure("factors not found")
        logger.info("confining to %d small subgroups: %s", len(factors), factors)
        residues = probe_all(self.group, self.oracle, factors, self.rng)
        if not residues:
            raise StructuralFailure("no residues recovered")
        return residues

    def close_gap(self, n: int, r: int) -> int:
        """Find x = n + m*r with the kangaroo over m."""
        group = self.group
        y = self.public_key
        if y is None:
            y = self.oracle.public_key()
        if not group.contains(y):
            raise InvalidInput("public key is not an element of Z_p^*")

        upper = self.config.secret_bound or group.q
        b = (upper - 1) // r
        base = group.multiply(group.g, r)
        target = group.add(y, group.neg(group.multiply(group.g, n)))
        logger.info("kangaroo over [0, %d] (%d bits)", b, b.bit_length())

        solver = KangarooSolver(group, base, 0, b, herd_factor=self.config.herd_factor)
        m = solver.catch(target)
        if m is None:
            raise SearchExhausted(f"kangaroo found no exponent in [0, {b}]")
        return n + m * r

    def run(self) -> AttackResult:
        residues = self.collect_residues()
        n, r = combine(residues)
        logger.info("x = %d mod %d (%d bits)", n, r, r.bit_length())

        used_kangaroo = r < self.group.q
        if used_kangaroo:
            x = self.close_gap(n, r)
        else:
            x = n % self.group.q

        return AttackResult(
            private_key=x,
            residue=n,
            modulus=r,
            residues=residues,
            candidates=[n],
            used_kangaroo=used_kangaroo,
            oracle_queries=self.oracle.queries,
        )
