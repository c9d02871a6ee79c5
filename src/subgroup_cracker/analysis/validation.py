"""Checking recovered keys against the victim and the residues behind them."""

from __future__ import annotations

from scipy.stats import binom

from subgroup_cracker.oracle import SharedSecretOracle
from subgroup_cracker.utils.types import AttackResult

TAG_BITS = 256


def false_match_bound(r: int, tag_bits: int = TAG_BITS) -> float:
    """Union bound on some wrong k in [1, r] reproducing a tag.

    Distinct shared secrets collide under HMAC-SHA256 with probability
    2^-tag_bits each; r - 1 wrong guesses are tried per probe.
    """
    return min(1.0, (r - 1) * 2.0**-tag_bits)


def success_interval(successes: int, trials: int, alpha: float = 0.95) -> tuple[float, float]:
    """Binomial confidence interval on a recovery rate over repeated runs.

    Returns (lower, upper) as fractions in [0, 1].
    """
    if trials == 0:
        return (0.0, 0.0)
    lo, hi = binom.interval(alpha, trials, successes / trials)
    return (float(lo) / trials, float(hi) / trials)


class Validator:
    """Compare an AttackResult with what the victim actually holds.

    Only meaningful against a test victim: `is_private_key_equal` is not
    something a real peer would answer.
    """

    def __init__(self, oracle: SharedSecretOracle, result: AttackResult) -> None:
        self.oracle = oracle
        self.result = result

    def key_matches(self) -> bool:
        return self.oracle.is_private_key_equal(self.result.private_key)

    def residues_consistent(self) -> bool:
        """Every recorded residue agrees with the recovered key.

        x-only residues are accepted with either sign.
        """
        x = self.result.private_key
        for res in self.result.residues:
            k = x % res.modulus
            if k != res.remainder and k != res.negated().remainder:
                return False
        return True

    def combined_consistent(self) -> bool:
        return self.result.private_key % self.result.modulus == self.result.residue

    def worst_false_match(self) -> float:
        if not self.result.residues:
            return 0.0
        return max(false_match_bound(res.modulus) for res in self.result.residues)

    def summary(self) -> dict:
        return {
            "key_matches": self.key_matches(),
            "residues_consistent": self.residues_consistent(),
            "combined_consistent": self.combined_consistent(),
            "false_match_bound": self.worst_false_match(),
        }
