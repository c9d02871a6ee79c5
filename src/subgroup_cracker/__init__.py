"""Subgroup Cracker -- recover Diffie-Hellman private keys from keyed-tag oracles."""

__version__ = "0.1.0"
