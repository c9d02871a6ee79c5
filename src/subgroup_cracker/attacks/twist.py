"""Insecure-twist attack on x-only Montgomery ECDH.

A ladder-based victim accepts any u and never notices when u sits on the
quadratic twist, whose order can be far smoother than the curve's. Each
small twist factor r gives x mod r up to sign, because u(kP) = u(-kP).

The pipeline:

1. brute-force every twist residue, fanned out over a process pool;
2. query once more with a twist point whose order is the product of all
   moduli and keep only the sign assignments that reproduce that tag;
3. move the victim's public u-coordinate onto the equivalent Weierstrass
   curve (both square roots of v are tried) and race one kangaroo per
   surviving candidate and lift for the remaining x = n + m*r;
4. accept the exponent whose ladder gives back the published u.
"""

from __future__ import annotations

import logging

import numpy as np

from subgroup_cracker.core.coordinator import parallel_brute_force, race_kangaroos
from subgroup_cracker.core.crt import resolve_sign_candidates
from subgroup_cracker.core.twist import find_all_twist_points, find_twist_point
from subgroup_cracker.errors import (
    CandidatesRejected,
    InvalidInput,
    SearchExhausted,
    StructuralFailure,
)
from subgroup_cracker.groups.montgomery import MontgomeryCurve
from subgroup_cracker.oracle import CountingOracle, SharedSecretOracle, mac, tags_equal
from subgroup_cracker.utils.math_helpers import product
from subgroup_cracker.utils.types import AttackConfig, AttackResult, Residue

logger = logging.getLogger(__name__)


class InsecureTwistAttack:
    """Recover an x-only ECDH private key through the curve's twist.

    `public_u` is the victim's published u-coordinate; it defaults to
    what the oracle publishes.
    """

    def __init__(
        self,
        curve: MontgomeryCurve,
        oracle: SharedSecretOracle,
        public_u: int | None = None,
        config: AttackConfig | None = None,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.curve = curve
        self.oracle = CountingOracle(oracle)
        self.public_u = public_u
        self.config = config or AttackConfig()
        self.rng = rng

    def collect_residues(self) -> list[Residue]:
        """x mod r, up to sign, for every odd twist factor below the bound."""
        points = find_all_twist_points(self.curve, self.config.twist_factor_bound, self.rng)
        if not points:
            raise StructuralFailure("factors not found")
        residues: list[Residue] = []
        for tp in points:
            tag = self.oracle.shared_secret_tag(tp.u)
            k = parallel_brute_force(
                self.curve,
                tp.u,
                tp.order,
                tag,
                workers=self.config.workers,
                threshold=self.config.parallel_threshold,
            )
            if k is None:
                logger.warning("no residue matched the tag for twist factor %d", tp.order)
                continue
            logger.debug("x = +-%d mod %d", k % tp.order, tp.order)
            residues.append(Residue(k % tp.order, tp.order))
        if not residues:
            raise StructuralFailure("no residues recovered")
        return residues

    def filter_candidates(self, residues: list[Residue]) -> tuple[list[int], int]:
        """Sign assignments consistent with one query at the combined order.

        Returns the surviving candidates n (x = +-n mod r) and r.
        """
        moduli = [res.modulus for res in residues]
        r = product(moduli)
        point = find_twist_point(self.curve, r, self.rng, prime_factors=moduli)
        tag = self.oracle.shared_secret_tag(point.u)

        def verify(n: int) -> bool:
            return tags_equal(mac(self.curve.encode(self.curve.ladder(point.u, n))), tag)

        candidates = resolve_sign_candidates(residues, verify, self.config.max_sign_factors)
        if not candidates:
            raise CandidatesRejected(
                f"none of the {2 ** len(residues)} sign assignments matched"
            )
        return candidates, r

    def _matches_public(self, x: int, public_u: int) -> bool:
        return self.curve.ladder(self.curve.u, x) == public_u

    def close_gap(self, candidates: list[int], r: int, public_u: int) -> int:
        curve = self.curve
        upper = self.config.secret_bound or curve.q
        if r >= upper:
            for n in candidates:
                if self._matches_public(n, public_u):
                    return n
            raise SearchExhausted("no candidate reproduces the public key")

        weier = curve.to_weierstrass()
        lifts = [weier.point(x, y) for x, y in curve.lift_u(public_u)]
        if not lifts:
            raise InvalidInput(f"public key u={public_u} is not on {curve.name or 'the curve'}")

        G = weier.generator
        base = weier.multiply(G, r)
        targets = [
            ((n, sign), weier.add(Y, weier.neg(weier.multiply(G, n))))
            for n in candidates
            for sign, Y in enumerate(lifts)
        ]
        b = (upper - 1) // r
        logger.info(
            "racing %d kangaroos over [0, %d] (%d bits)", len(targets), b, b.bit_length()
        )
        winner = race_kangaroos(
            weier,
            base,
            0,
            b,
            targets,
            herd_factor=self.config.herd_factor,
            workers=self.config.workers,
        )
        if winner is None:
            raise SearchExhausted(f"kangaroos found no exponent in [0, {b}]")
        (n, _), m = winner
        x = n + m * r
        if not self._matches_public(x, public_u):
            raise SearchExhausted(f"recovered exponent {x} does not reproduce the public key")
        return x

    def run(self) -> AttackResult:
        public_u = self.public_u
        if public_u is None:
            public_u = self.oracle.public_key()

        residues = self.collect_residues()
        candidates, r = self.filter_candidates(residues)
        logger.info("%d candidates mod %d", len(candidates), r)
        x = self.close_gap(candidates, r, public_u)
        n = x % r
        return AttackResult(
            private_key=x,
            residue=n,
            modulus=r,
            residues=residues,
            candidates=candidates,
            used_kangaroo=r < (self.config.secret_bound or self.curve.q),
            oracle_queries=self.oracle.queries,
        )
