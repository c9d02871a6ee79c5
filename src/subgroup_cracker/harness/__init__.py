"""Victim oracles and parameter generation for tests and demos."""
