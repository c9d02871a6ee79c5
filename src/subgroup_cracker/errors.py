"""Failure taxonomy for the attack pipelines."""

from __future__ import annotations


class AttackError(Exception):
    """Base class for every failure an attack can surface."""


class StructuralFailure(AttackError):
    """The group or the collected equations cannot support the attack.

    Raised when no factor lies under the bound, when CRT moduli are not
    pairwise coprime, or when the combined modulus is too small on a path
    that has no kangaroo fallback.
    """


class SearchExhausted(AttackError):
    """Every kangaroo search ran past its bound without a collision."""


class CandidatesRejected(AttackError):
    """No CRT sign candidate survived tag verification."""


class InvalidInput(AttackError, ValueError):
    """A precondition on the inputs of an operation does not hold."""
