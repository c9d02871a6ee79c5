"""Process-pool fan-out for the two expensive searches.

Both searches are races: several workers look at disjoint pieces of
work, the first hit wins and the others are told to stop through a
shared event. Workers only receive int-only dataclasses and packed
elements, never live curve objects.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Hashable, Sequence
from concurrent.futures import ProcessPoolExecutor, as_completed
from multiprocessing import Manager
from typing import Any

from subgroup_cracker.core.confinement import brute_force_residue
from subgroup_cracker.core.kangaroo import KangarooSolver
from subgroup_cracker.errors import InvalidInput
from subgroup_cracker.utils.constants import (
    CANCEL_POLL_INTERVAL,
    DEFAULT_HERD_FACTOR,
    PARALLEL_THRESHOLD,
)
from subgroup_cracker.utils.types import KangarooTrap

logger = logging.getLogger(__name__)


def resolve_workers(workers: int | None = None) -> int:
    if workers is None:
        return os.cpu_count() or 1
    if workers < 1:
        raise InvalidInput(f"workers must be at least 1, got {workers}")
    return workers


def split_range(start: int, stop: int, parts: int) -> list[tuple[int, int]]:
    """Cut [start, stop] into at most `parts` disjoint inclusive ranges."""
    if stop < start:
        return []
    total = stop - start + 1
    parts = max(1, min(parts, total))
    step, extra = divmod(total, parts)
    ranges = []
    lo = start
    for i in range(parts):
        hi = lo + step - 1 + (1 if i < extra else 0)
        ranges.append((lo, hi))
        lo = hi + 1
    return ranges


# -- brute force --


def _brute_force_worker(group, packed, tag: bytes, start: int, stop: int, cancel, poll_interval: int):
    return brute_force_residue(
        group, group.unpack(packed), tag, start, stop, cancel, poll_interval
    )


def parallel_brute_force(
    group,
    element: Any,
    r: int,
    tag: bytes,
    workers: int | None = None,
    threshold: int = PARALLEL_THRESHOLD,
    poll_interval: int = CANCEL_POLL_INTERVAL,
) -> int | None:
    """First k in [1, r] whose tag matches, searched by a pool of workers.

    Small ranges (r below `threshold`) or a single worker run inline.
    """
    workers = resolve_workers(workers)
    if workers == 1 or r < threshold:
        return brute_force_residue(group, element, tag, 1, r)

    ranges = split_range(1, r, workers)
    packed = group.pack(element)
    found: int | None = None
    with Manager() as manager:
        cancel = manager.Event()
        with ProcessPoolExecutor(max_workers=len(ranges)) as pool:
            futures = [
                pool.submit(
                    _brute_force_worker, group, packed, tag, lo, hi, cancel, poll_interval
                )
                for lo, hi in ranges
            ]
            for future in as_completed(futures):
                k = future.result()
                if k is not None and found is None:
                    found = k
                    cancel.set()
    logger.debug("parallel brute force over [1, %d] with %d workers: %s", r, len(ranges), found)
    return found


# -- kangaroo races --


def _kangaroo_worker(
    group,
    packed_base,
    a: int,
    b: int,
    herd_factor: int,
    trap: KangarooTrap,
    packed_target,
    cancel,
    poll_interval: int,
) -> int | None:
    solver = KangarooSolver(group, group.unpack(packed_base), a, b, herd_factor, k=trap.k)
    live_trap = KangarooTrap(
        k=trap.k,
        herd_size=trap.herd_size,
        landing=group.unpack(trap.landing),
        distance=trap.distance,
    )
    return solver.catch(group.unpack(packed_target), live_trap, cancel, poll_interval)


def race_kangaroos(
    group,
    base: Any,
    a: int,
    b: int,
    targets: Sequence[tuple[Hashable, Any]],
    herd_factor: int = DEFAULT_HERD_FACTOR,
    workers: int | None = None,
    poll_interval: int = CANCEL_POLL_INTERVAL,
) -> tuple[Hashable, int] | None:
    """Run one wild kangaroo per (label, target) against a shared trap.

    Returns (label, x) for the first target caught in [a, b], or None
    if every wild kangaroo escapes.
    """
    if not targets:
        return None
    solver = KangarooSolver(group, base, a, b, herd_factor)
    trap = solver.tame()
    workers = resolve_workers(workers)

    if workers == 1 or len(targets) == 1:
        for label, target in targets:
            x = solver.catch(target, trap)
            if x is not None:
                return label, x
        return None

    packed_base = group.pack(base)
    packed_trap = KangarooTrap(
        k=trap.k, herd_size=trap.herd_size, landing=group.pack(trap.landing), distance=trap.distance
    )
    winner: tuple[Hashable, int] | None = None
    with Manager() as manager:
        cancel = manager.Event()
        with ProcessPoolExecutor(max_workers=min(workers, len(targets))) as pool:
            futures = {
                pool.submit(
                    _kangaroo_worker,
                    group,
                    packed_base,
                    a,
                    b,
                    herd_factor,
                    packed_trap,
                    group.pack(target),
                    cancel,
                    poll_interval,
                ): label
                for label, target in targets
            }
            for future in as_completed(futures):
                if future.cancelled():
                    continue
                x = future.result()
                if x is not None and winner is None:
                    winner = (futures[future], x)
                    cancel.set()
                    for other in futures:
                        other.cancel()
    logger.info("kangaroo race over %d targets: %s", len(targets), winner)
    return winner
