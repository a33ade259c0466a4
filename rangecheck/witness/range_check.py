"""Honest-prover witness data for range checks.

The gadget never derives a tag itself: the prover supplies it and the lookup
table accepts or rejects the pair. RangeCheckWitness builds the pair the
honest prover would supply, or an arbitrary one for negative tests.
"""

from dataclasses import dataclass

from rangecheck.constraints.range_check import RangeCheckConfig, Strategy
from rangecheck.constraints.tagged_table import log2_floor
from rangecheck.primitives.value import Value
from rangecheck.protocol.layouter import SimpleFloorPlanner


def honest_tag(value: int) -> int:
    """Tag under which value appears in the tagged table."""
    return log2_floor(value)


@dataclass(frozen=True)
class RangeCheckWitness:
    """One value to range-check, with its tag and the required range."""
    value: Value
    num_bits: Value
    range: int

    @classmethod
    def for_value(cls, value: int, range_: int) -> "RangeCheckWitness":
        return cls(Value.known(value), Value.known(honest_tag(value)), range_)

    @classmethod
    def with_tag(cls, value: int, num_bits: int, range_: int) -> "RangeCheckWitness":
        return cls(Value.known(value), Value.known(num_bits), range_)

    def without_witness(self) -> "RangeCheckWitness":
        return RangeCheckWitness(Value.unknown(), Value.unknown(), self.range)

    def assign(self, config: RangeCheckConfig, layouter: SimpleFloorPlanner) -> Strategy:
        return config.assign(layouter, self.value, self.num_bits, self.range)
