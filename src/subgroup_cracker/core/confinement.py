"""Small-subgroup confinement probing.

For a small prime r dividing the order of the group the victim will
happily compute in, hand the victim an element h of order r. The
shared secret h^x then only depends on x mod r, and the returned tag
can be matched against all r possibilities offline.
"""

from __future__ import annotations

import logging
from typing import Any

import numpy as np

from subgroup_cracker.oracle import SharedSecretOracle, mac, tags_equal
from subgroup_cracker.utils.constants import CANCEL_POLL_INTERVAL
from subgroup_cracker.utils.types import Residue

logger = logging.getLogger(__name__)


def confined_element(group, r: int, rng: np.random.Generator | None = None) -> Any:
    """A non-identity element of exact order r.

    Raises a random element to group_order / r, retrying whenever the
    result is the identity. r must be a prime dividing group.group_order.
    """
    cofactor = group.group_order // r
    while True:
        h = group.multiply(group.random_element(rng), cofactor)
        if h != group.identity:
            return h


def brute_force_residue(
    group,
    element: Any,
    tag: bytes,
    start: int,
    stop: int,
    cancel=None,
    poll_interval: int = CANCEL_POLL_INTERVAL,
) -> int | None:
    """First k in [start, stop] with mac(encode(k * element)) == tag.

    Walks the multiples incrementally. If `cancel` (anything with
    ``is_set()``) fires, gives up and returns None.
    """
    for k, shared in group.multiples(element, start, stop):
        if tags_equal(mac(group.encode(shared)), tag):
            return k
        if cancel is not None and k % poll_interval == 0 and cancel.is_set():
            return None
    return None


def probe(
    group,
    oracle: SharedSecretOracle,
    r: int,
    rng: np.random.Generator | None = None,
    element: Any = None,
) -> Residue | None:
    """Recover the victim's exponent mod r with a single oracle query.

    Returns None when no k in [1, r] reproduces the tag. That only happens
    if the oracle is not computing what we think it is; callers treat it
    as a missing equation rather than an error.
    """
    h = element if element is not None else confined_element(group, r, rng)
    tag = oracle.shared_secret_tag(h)
    k = brute_force_residue(group, h, tag, 1, r)
    if k is None:
        logger.warning("no residue matched the tag for factor %d", r)
        return None
    logger.debug("x = %d mod %d", k % r, r)
    return Residue(k % r, r)


def probe_all(
    group,
    oracle: SharedSecretOracle,
    factors: list[int],
    rng: np.random.Generator | None = None,
    known: list[Residue] | None = None,
) -> list[Residue]:
    """probe() every factor, skipping moduli already covered by `known`."""
    seen = {res.modulus for res in known or []}
    found: list[Residue] = []
    for r in factors:
        if r in seen:
            continue
        res = probe(group, oracle, r, rng)
        if res is None:
            continue
        seen.add(r)
        found.append(res)
    return found
