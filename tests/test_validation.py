"""Tests for result validation."""

from subgroup_cracker.analysis.validation import (
    Validator,
    false_match_bound,
    success_interval,
)
from subgroup_cracker.harness.params import dh58_group
from subgroup_cracker.harness.victims import DHVictim
from subgroup_cracker.utils.types import AttackResult, Residue


def make_result(x: int, moduli=(3, 5, 7), flip=()) -> AttackResult:
    residues = []
    for m in moduli:
        res = Residue(x % m, m)
        residues.append(res.negated() if m in flip else res)
    modulus = 1
    for m in moduli:
        modulus *= m
    return AttackResult(
        private_key=x,
        residue=x % modulus,
        modulus=modulus,
        residues=residues,
        candidates=[x % modulus],
    )


class TestKeyMatches:
    def test_correct_key(self):
        victim = DHVictim(dh58_group(), private_key=12345)
        assert Validator(victim, make_result(12345)).key_matches()

    def test_wrong_key(self):
        victim = DHVictim(dh58_group(), private_key=12345)
        assert not Validator(victim, make_result(12346)).key_matches()


class TestResidues:
    def test_consistent(self):
        victim = DHVictim(dh58_group(), private_key=100)
        assert Validator(victim, make_result(100)).residues_consistent()

    def test_negated_residues_accepted(self):
        victim = DHVictim(dh58_group(), private_key=100)
        assert Validator(victim, make_result(100, flip=(7,))).residues_consistent()

    def test_inconsistent(self):
        victim = DHVictim(dh58_group(), private_key=100)
        result = make_result(100)
        result.residues.append(Residue(1, 11))  # 100 = 1 mod 11, fine
        result.residues.append(Residue(5, 13))  # 100 = 9 mod 13
        assert not Validator(victim, result).residues_consistent()

    def test_combined(self):
        victim = DHVictim(dh58_group(), private_key=100)
        result = make_result(100)
        assert Validator(victim, result).combined_consistent()
        result.residue += 1
        assert not Validator(victim, result).combined_consistent()


class TestFalseMatchBound:
    def test_tiny(self):
        assert 0.0 < false_match_bound(2**24) < 1e-60

    def test_short_tag(self):
        assert false_match_bound(2**10, tag_bits=8) == 1.0

    def test_single_candidate(self):
        assert false_match_bound(1) == 0.0


class TestSuccessInterval:
    def test_all_successes(self):
        lo, hi = success_interval(20, 20)
        assert lo >= 0.8
        assert hi <= 1.0

    def test_bounds(self):
        lo, hi = success_interval(7, 10)
        assert 0.0 <= lo <= 0.7 <= hi <= 1.0

    def test_no_trials(self):
        assert success_interval(0, 0) == (0.0, 0.0)


class TestSummary:
    def test_keys(self):
        victim = DHVictim(dh58_group(), private_key=100)
        summary = Validator(victim, make_result(100)).summary()
        assert summary["key_matches"] is True
        assert summary["residues_consistent"] is True
        assert summary["combined_consistent"] is True
        assert summary["false_match_bound"] < 1e-70
