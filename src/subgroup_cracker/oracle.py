"""The oracle contract between the attacks and their victim.

A victim computes a Diffie-Hellman shared secret from whatever peer
element it is handed and answers with a keyed tag over a fixed message.
The attacks only ever see that tag; `mac` lets them recompute it for a
guessed shared secret.
"""

from __future__ import annotations

import hashlib
import hmac
from typing import Any, Protocol, runtime_checkable

from subgroup_cracker.utils.constants import MAC_MESSAGE


def mac(secret: bytes) -> bytes:
    """HMAC-SHA256 keyed by the encoded shared secret over MAC_MESSAGE."""
    return hmac.new(secret, MAC_MESSAGE, hashlib.sha256).digest()


def tags_equal(a: bytes, b: bytes) -> bool:
    return hmac.compare_digest(a, b)


@runtime_checkable
class SharedSecretOracle(Protocol):
    """What a victim exposes.

    Only `shared_secret_tag` is available to a real attacker. The other
    two methods exist so tests and demos can check the recovered key.
    """

    def shared_secret_tag(self, peer: Any) -> bytes: ...

    def is_private_key_equal(self, candidate: int) -> bool: ...

    def public_key(self) -> Any: ...


class CountingOracle:
    """Wraps an oracle and counts tag queries."""

    def __init__(self, inner: SharedSecretOracle) -> None:
        self.inner = inner
        self.queries = 0

    def shared_secret_tag(self, peer: Any) -> bytes:
        self.queries += 1
        return self.inner.shared_secret_tag(peer)

    def is_private_key_equal(self, candidate: int) -> bool:
        return self.inner.is_private_key_equal(candidate)

    def public_key(self) -> Any:
        return self.inner.public_key()
