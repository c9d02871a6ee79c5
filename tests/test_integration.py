"""Integration tests: oracle plumbing and the command-line front end."""

import csv
import os
import tempfile

import numpy as np

from subgroup_cracker.__main__ import build_parser, main, make_config
from subgroup_cracker.harness.params import dh57_group, generate_weak_dh_group, p128, x128
from subgroup_cracker.harness.victims import DHVictim, ECDHVictim, MontgomeryVictim
from subgroup_cracker.oracle import CountingOracle, SharedSecretOracle, mac, tags_equal
from subgroup_cracker.utils.math_helpers import int_to_bytes


class TestOracle:
    def test_mac_is_hmac_sha256(self):
        tag = mac(b"key")
        assert len(tag) == 32
        assert tags_equal(tag, mac(b"key"))
        assert not tags_equal(tag, mac(b"other"))

    def test_victims_satisfy_protocol(self):
        rng = np.random.default_rng(42)
        for victim in (
            DHVictim(dh57_group(), rng=rng),
            ECDHVictim(p128(), rng=rng),
            MontgomeryVictim(x128(), rng=rng),
        ):
            assert isinstance(victim, SharedSecretOracle)

    def test_dh_tag(self):
        group = dh57_group()
        victim = DHVictim(group, private_key=99)
        peer = pow(group.g, 5, group.p)
        assert victim.shared_secret_tag(peer) == mac(int_to_bytes(pow(peer, 99, group.p)))

    def test_ecdh_tag_is_symmetric(self):
        curve = p128()
        alice = ECDHVictim(curve, private_key=1111)
        bob = ECDHVictim(curve, private_key=2222)
        assert alice.shared_secret_tag(bob.public_key()) == bob.shared_secret_tag(alice.public_key())

    def test_montgomery_tag_is_symmetric(self):
        curve = x128()
        alice = MontgomeryVictim(curve, private_key=3333)
        bob = MontgomeryVictim(curve, private_key=4444)
        assert alice.shared_secret_tag(bob.public_key()) == bob.shared_secret_tag(alice.public_key())

    def test_counting(self):
        oracle = CountingOracle(DHVictim(dh57_group(), private_key=7))
        oracle.shared_secret_tag(2)
        oracle.shared_secret_tag(3)
        assert oracle.queries == 2
        assert oracle.is_private_key_equal(7)


class TestWeakGroup:
    def test_structure(self):
        group = generate_weak_dh_group(q_bits=40, smooth_bound=30, rng=np.random.default_rng(5))
        assert group.q.bit_length() == 40
        assert (group.p - 1) % group.q == 0
        assert pow(group.g, group.q, group.p) == 1
        assert group.g != 1
        for r in (2, 3, 5, 7, 11, 13, 17, 19, 23, 29):
            assert group.cofactor % r == 0

    def test_reproducible(self):
        a = generate_weak_dh_group(rng=np.random.default_rng(9))
        b = generate_weak_dh_group(rng=np.random.default_rng(9))
        assert a == b


class TestParser:
    def test_subcommands(self):
        parser = build_parser()
        args = parser.parse_args(["twist", "--twist-factor-bound", "2048", "--secret-bound", "1024"])
        assert args.command == "twist"
        config = make_config(args)
        assert config.twist_factor_bound == 2048
        assert config.secret_bound == 1024

    def test_defaults(self):
        args = build_parser().parse_args(["subgroup"])
        assert args.group == "weak"
        assert args.trials == 1
        assert args.csv is None

    def test_no_command(self, capsys):
        assert main([]) == 0
        assert "subgroup" in capsys.readouterr().out


class TestCommandLine:
    def test_subgroup_with_csv(self, capsys):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "out.csv")
            code = main(["subgroup", "--seed", "1", "--workers", "1", "--factor-bound", "50", "--csv", path])
            assert code == 0
            with open(path, newline="") as f:
                rows = list(csv.reader(f))
        assert rows[0] == ["trial", "metric", "value"]
        assert ["1", "key_matches", "True"] in rows
        assert "RESULTS" in capsys.readouterr().out

    def test_kangaroo_trials(self, capsys):
        code = main(["kangaroo", "--bits", "14", "--seed", "3", "--herd-factor", "16", "--trials", "2"])
        assert code == 0
        assert "Recovered 2/2" in capsys.readouterr().out

    def test_failure_reported(self, capsys):
        code = main(["subgroup", "--seed", "4", "--factor-bound", "2"])
        assert code == 1
        assert "StructuralFailure" in capsys.readouterr().out
