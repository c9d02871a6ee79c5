"""Invalid-curve attack on ECDH.

Weierstrass addition never touches b, so a victim that skips the
on-curve check computes just as happily on y^2 = x^3 + ax + b' for any
b'. Picking b' so the substituted curve has smooth order turns every
small factor of that order into a confinement probe. Residues from
several such curves are pooled until their moduli cover the base point
order, and the CRT then gives the key outright.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

import numpy as np

from subgroup_cracker.core.confinement import probe
from subgroup_cracker.core.crt import combine
from subgroup_cracker.core.factorizer import odd_small_factors
from subgroup_cracker.core.twist import find_invalid_curve_point
from subgroup_cracker.errors import InvalidInput, StructuralFailure
from subgroup_cracker.groups.weierstrass import WeierstrassCurve
from subgroup_cracker.oracle import CountingOracle, SharedSecretOracle
from subgroup_cracker.utils.types import AttackConfig, AttackResult, Residue

logger = logging.getLogger(__name__)


class InvalidCurveAttack:
    def __init__(
        self,
        curve: WeierstrassCurve,
        invalid_curves: Sequence[WeierstrassCurve],
        oracle: SharedSecretOracle,
        config: AttackConfig | None = None,
        rng: np.random.Generator | None = None,
    ) -> None:
        if curve.q is None:
            raise InvalidInput("the target curve needs a base point order")
        for other in invalid_curves:
            if other.p != curve.p or (other.a - curve.a) % curve.p:
                raise InvalidInput(
                    f"invalid curve b={other.b} does not share the target's field and a"
                )
        self.curve = curve
        self.invalid_curves = list(invalid_curves)
        self.oracle = CountingOracle(oracle)
        self.config = config or AttackConfig()
        self.rng = rng

    def collect_residues(self) -> list[Residue]:
        """Probe each substituted curve's odd small factors once.

        A factor shared by two curves is only probed on the first.
        """
        residues: list[Residue] = []
        seen: set[int] = set()
        for weak in self.invalid_curves:
            factors = odd_small_factors(weak.order, self.config.factor_bound)
            if not factors:
                raise StructuralFailure("factors not found")
            logger.info("curve b=%d: factors %s", weak.b, factors)
            for r in factors:
                if r in seen:
                    continue
                P = find_invalid_curve_point(weak, r, self.rng)
                res = probe(weak, self.oracle, r, element=P)
                if res is None:
                    continue
                seen.add(r)
                residues.append(res)
        return residues

    def run(self) -> AttackResult:
        residues = self.collect_residues()
        if not residues:
            raise StructuralFailure("no residues recovered")
        n, r = combine(residues)
        q = self.curve.q
        if r <= q:
            raise StructuralFailure(
                f"residues cover only {r.bit_length()} bits of a {q.bit_length()}-bit order"
            )
        logger.info("x = %d mod %d", n, r)
        return AttackResult(
            private_key=n,
            residue=n,
            modulus=r,
            residues=residues,
            candidates=[n],
            oracle_queries=self.oracle.queries,
        )
