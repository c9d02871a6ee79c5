"""Victims for exercising the attacks.

Each victim holds a private key, publishes the matching public key and
answers `shared_secret_tag` for any peer element without validating
it. That missing validation is the whole vulnerability.
"""

from __future__ import annotations

from typing import Any

import numpy as np

from subgroup_cracker.groups.montgomery import MontgomeryCurve
from subgroup_cracker.groups.multiplicative import ModPGroup
from subgroup_cracker.groups.weierstrass import WeierstrassCurve
from subgroup_cracker.oracle import mac


class _Victim:
    def __init__(self, group, private_key: int | None, rng: np.random.Generator | None) -> None:
        self.group = group
        if private_key is None:
            self._private, self._public = group.generate_keypair(rng)
        else:
            self._private = private_key
            self._public = group.multiply(group.generator, private_key)

    def shared_secret_tag(self, peer: Any) -> bytes:
        return mac(self.group.encode(self.group.dh(self._private, peer)))

    def is_private_key_equal(self, candidate: int) -> bool:
        return candidate == self._private

    def public_key(self) -> Any:
        return self._public


class DHVictim(_Victim):
    """Finite-field DH; tags the minimal big-endian bytes of peer^x mod p."""

    def __init__(
        self,
        group: ModPGroup,
        private_key: int | None = None,
        rng: np.random.Generator | None = None,
    ) -> None:
        super().__init__(group, private_key, rng)


class ECDHVictim(_Victim):
    """Weierstrass ECDH without an on-curve check.

    The peer point keeps whatever curve it was built on, so x * peer is
    computed there. The shared point is encoded with the victim's own
    fixed width.
    """

    def __init__(
        self,
        curve: WeierstrassCurve,
        private_key: int | None = None,
        rng: np.random.Generator | None = None,
    ) -> None:
        super().__init__(curve, private_key, rng)


class MontgomeryVictim(_Victim):
    """x-only ECDH via the Montgomery ladder, twist points included."""

    def __init__(
        self,
        curve: MontgomeryCurve,
        private_key: int | None = None,
        rng: np.random.Generator | None = None,
    ) -> None:
        super().__init__(curve, private_key, rng)
