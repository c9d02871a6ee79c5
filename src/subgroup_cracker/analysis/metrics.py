"""Statistics over a finished attack."""

from __future__ import annotations

import math

import numpy as np

from subgroup_cracker.utils.types import AttackResult


class AttackMetrics:
    """Summarise where the bits of a recovered key came from.

    Residues contribute log2(r) bits each; whatever the CRT modulus does
    not cover against `key_bound` was left to the kangaroo.
    """

    def __init__(self, result: AttackResult, key_bound: int, elapsed: float | None = None) -> None:
        self.result = result
        self.key_bound = key_bound
        self.elapsed = elapsed

    def residue_stats(self) -> dict:
        """Size distribution of the residue moduli."""
        if not self.result.residues:
            return {
                "count": 0,
                "modulus_bits_mean": 0.0,
                "modulus_bits_std": 0.0,
                "modulus_bits_max": 0.0,
                "modulus_bits_min": 0.0,
                "largest_modulus": 0,
            }

        moduli = [res.modulus for res in self.result.residues]
        bits = np.log2(np.array(moduli, dtype=np.float64))
        return {
            "count": len(moduli),
            "modulus_bits_mean": float(np.mean(bits)),
            "modulus_bits_std": float(np.std(bits)),
            "modulus_bits_max": float(np.max(bits)),
            "modulus_bits_min": float(np.min(bits)),
            "largest_modulus": max(moduli),
        }

    def coverage(self) -> dict:
        """Bits of the key pinned by the CRT versus left to the kangaroo."""
        key_bits = math.log2(self.key_bound) if self.key_bound > 1 else 0.0
        crt_bits = math.log2(self.result.modulus) if self.result.modulus > 1 else 0.0
        gap = (self.key_bound - 1) // self.result.modulus
        return {
            "key_bits": key_bits,
            "crt_bits": crt_bits,
            "kangaroo_bits": math.log2(gap + 1),
            "fully_covered": gap == 0,
            "used_kangaroo": self.result.used_kangaroo,
        }

    def full_report(self) -> dict:
        report = {
            "residue_stats": self.residue_stats(),
            "coverage": self.coverage(),
            "oracle_queries": self.result.oracle_queries,
            "candidates": len(self.result.candidates),
        }
        if self.elapsed is not None:
            report["elapsed_seconds"] = self.elapsed
        return report
