"""Witness construction for range checks (prover side only)."""

from .range_check import RangeCheckWitness, honest_tag

__all__ = [
    "RangeCheckWitness",
    "honest_tag",
]
