"""Main entry point: python -m subgroup_cracker"""

from __future__ import annotations

import argparse
import csv
import logging
import sys
import time

import numpy as np

from subgroup_cracker import __version__
from subgroup_cracker.analysis.metrics import AttackMetrics
from subgroup_cracker.analysis.validation import Validator, success_interval
from subgroup_cracker.attacks.invalid_curve import InvalidCurveAttack
from subgroup_cracker.attacks.subgroup import SubgroupConfinementAttack
from subgroup_cracker.attacks.twist import InsecureTwistAttack
from subgroup_cracker.core.kangaroo import KangarooSolver
from subgroup_cracker.errors import AttackError
from subgroup_cracker.harness.params import (
    dh57_group,
    dh58_group,
    generate_weak_dh_group,
    p128,
    p128_invalid_curves,
    x128,
)
from subgroup_cracker.harness.victims import DHVictim, ECDHVictim, MontgomeryVictim
from subgroup_cracker.utils.constants import (
    DEFAULT_FACTOR_BOUND,
    DEFAULT_HERD_FACTOR,
    DEFAULT_TWIST_FACTOR_BOUND,
)
from subgroup_cracker.utils.math_helpers import random_below
from subgroup_cracker.utils.types import AttackConfig


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="subgroup-cracker",
        description="Recover Diffie-Hellman private keys via small-subgroup confinement, CRT and kangaroos",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--seed", type=int, help="Seed for the attacker's and victim's randomness")
    common.add_argument("--workers", type=int, help="Worker processes (default: CPU count)")
    common.add_argument("--herd-factor", type=int, default=DEFAULT_HERD_FACTOR, help="Tame kangaroo hops per mean jump")
    common.add_argument("--secret-bound", type=int, help="Known upper bound on the victim's private key")
    common.add_argument("--trials", type=int, default=1, help="Repeat against fresh victims")
    common.add_argument("--csv", type=str, metavar="PATH", help="Export results CSV to PATH")
    common.add_argument("--verbose", action="store_true", help="Log attack progress")

    sub = parser.add_subparsers(dest="command")

    # subgroup
    sg = sub.add_parser("subgroup", parents=[common], help="Small-subgroup confinement on Z_p^*")
    sg.add_argument("--group", choices=["weak", "dh57"], default="weak", help="Target group")
    sg.add_argument("--q-bits", type=int, default=48, help="Subgroup order size for --group weak")
    sg.add_argument("--smooth-bound", type=int, default=50, help="Primes below this divide p - 1 (--group weak)")
    sg.add_argument("--factor-bound", type=int, default=DEFAULT_FACTOR_BOUND, help="Largest small factor to probe")

    # kangaroo
    kg = sub.add_parser("kangaroo", parents=[common], help="Bounded discrete log in the challenge-58 group")
    kg.add_argument("--bits", type=int, default=20, help="Secret exponent drawn from [0, 2^bits]")

    # invalid-curve
    ic = sub.add_parser("invalid-curve", parents=[common], help="Invalid-curve attack on P-128 ECDH")
    ic.add_argument("--factor-bound", type=int, default=DEFAULT_FACTOR_BOUND, help="Largest small factor to probe")

    # twist
    tw = sub.add_parser("twist", parents=[common], help="Insecure-twist attack on x128 ECDH")
    tw.add_argument(
        "--twist-factor-bound",
        type=int,
        default=DEFAULT_TWIST_FACTOR_BOUND,
        help="Largest twist factor to brute-force",
    )

    return parser


def make_config(args: argparse.Namespace) -> AttackConfig:
    config = AttackConfig(
        herd_factor=args.herd_factor,
        workers=args.workers,
        secret_bound=args.secret_bound,
    )
    if getattr(args, "factor_bound", None) is not None:
        config.factor_bound = args.factor_bound
    if getattr(args, "twist_factor_bound", None) is not None:
        config.twist_factor_bound = args.twist_factor_bound
    return config


def victim_key(q: int, config: AttackConfig, rng: np.random.Generator) -> int:
    upper = min(q, config.secret_bound or q)
    return 1 + random_below(upper - 1, rng)


def run_subgroup(args: argparse.Namespace, config: AttackConfig, rng: np.random.Generator) -> dict:
    if args.group == "dh57":
        group = dh57_group()
    else:
        group = generate_weak_dh_group(q_bits=args.q_bits, smooth_bound=args.smooth_bound, rng=rng)
    print(f"Group: p={group.p.bit_length()} bits, q={group.q.bit_length()} bits")
    victim = DHVictim(group, victim_key(group.q, config, rng))
    result = SubgroupConfinementAttack(group, victim, config, rng=rng).run()
    return {"victim": victim, "result": result, "key_bound": config.secret_bound or group.q}


def run_invalid_curve(args: argparse.Namespace, config: AttackConfig, rng: np.random.Generator) -> dict:
    curve = p128()
    victim = ECDHVictim(curve, victim_key(curve.q, config, rng))
    result = InvalidCurveAttack(curve, p128_invalid_curves(), victim, config, rng).run()
    return {"victim": victim, "result": result, "key_bound": config.secret_bound or curve.q}


def run_twist(args: argparse.Namespace, config: AttackConfig, rng: np.random.Generator) -> dict:
    curve = x128()
    victim = MontgomeryVictim(curve, victim_key(curve.q, config, rng))
    result = InsecureTwistAttack(curve, victim, config=config, rng=rng).run()
    return {"victim": victim, "result": result, "key_bound": config.secret_bound or curve.q}


def run_kangaroo(args: argparse.Namespace, config: AttackConfig, rng: np.random.Generator) -> bool:
    """Plain interval discrete log, no oracle involved."""
    group = dh58_group()
    b = 1 << args.bits
    x = random_below(b + 1, rng)
    y = group.multiply(group.g, x)
    print(f"Searching [0, 2^{args.bits}] for x with g^x = y")
    solver = KangarooSolver(group, group.g, 0, b, herd_factor=config.herd_factor)
    trap = solver.tame()
    found = solver.catch(y, trap)
    print(f"  k = {trap.k}, N = {trap.herd_size}, tame distance = {trap.distance}")
    print(f"  Expected x: {x}")
    print(f"  Found x:    {found}")
    return found == x


ATTACKS = {
    "subgroup": run_subgroup,
    "invalid-curve": run_invalid_curve,
    "twist": run_twist,
}


def print_results(outcome: dict, elapsed: float) -> tuple[dict, dict]:
    result = outcome["result"]
    validation = Validator(outcome["victim"], result).summary()
    report = AttackMetrics(result, outcome["key_bound"], elapsed).full_report()
    coverage = report["coverage"]

    print()
    print("=" * 50)
    print(" RESULTS")
    print("=" * 50)
    print(f"  Private key:         {result.private_key}")
    print(f"  Key matches victim:  {validation['key_matches']}")
    print(f"  Residues:            {len(result.residues)}")
    print(f"  CRT modulus:         {result.modulus} ({coverage['crt_bits']:.1f} bits)")
    print(f"  Kangaroo bits:       {coverage['kangaroo_bits']:.1f}")
    print(f"  Sign candidates:     {len(result.candidates)}")
    print(f"  Oracle queries:      {result.oracle_queries}")
    print(f"  False match bound:   {validation['false_match_bound']:.3e}")
    print(f"  Elapsed:             {elapsed:.2f} s")
    print("=" * 50)
    return report, validation


def export_csv(path: str, command: str, rows: list[tuple[dict, dict]]) -> None:
    """Write one metric/value block per trial to `path`."""
    with open(path, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(["trial", "metric", "value"])
        for trial, (report, validation) in enumerate(rows, start=1):
            writer.writerow([trial, "attack", command])
            for k, v in validation.items():
                writer.writerow([trial, k, v])
            for k, v in report["residue_stats"].items():
                writer.writerow([trial, f"residue_{k}", v])
            for k, v in report["coverage"].items():
                writer.writerow([trial, f"coverage_{k}", v])
            writer.writerow([trial, "oracle_queries", report["oracle_queries"]])
            writer.writerow([trial, "elapsed_seconds", report.get("elapsed_seconds")])

    print(f"Results exported to {path}")


def run_attack(args: argparse.Namespace) -> int:
    config = make_config(args)
    rng = np.random.default_rng(args.seed)
    successes = 0
    rows = []

    for trial in range(1, args.trials + 1):
        if args.trials > 1:
            print(f"\n--- Trial {trial}/{args.trials} ---")
        start = time.perf_counter()
        if args.command == "kangaroo":
            ok = run_kangaroo(args, config, rng)
            successes += ok
            continue
        try:
            outcome = ATTACKS[args.command](args, config, rng)
        except AttackError as exc:
            print(f"Attack failed: {type(exc).__name__}: {exc}")
            continue
        report, validation = print_results(outcome, time.perf_counter() - start)
        successes += validation["key_matches"]
        rows.append((report, validation))

    if args.trials > 1:
        lo, hi = success_interval(successes, args.trials)
        print(f"\nRecovered {successes}/{args.trials} keys (95% CI {lo:.3f} to {hi:.3f})")

    if args.csv and rows:
        export_csv(args.csv, args.command, rows)

    return 0 if successes == args.trials else 1


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    return run_attack(args)


if __name__ == "__main__":
    sys.exit(main())
