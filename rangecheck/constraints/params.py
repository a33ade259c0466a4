"""Setup-time constants of the range-check gadget."""

from dataclasses import dataclass

from rangecheck.primitives.field import GOLDILOCKS_PRIME


@dataclass(frozen=True)
class RangeCheckParams:
    """Bounds fixed when the circuit is configured.

    Attributes:
        range_bound: Exclusive bound of the direct gate (values in [0, range_bound))
        lookup_num_bits: Bit width covered by the lookup table
        lookup_range: Largest value in the lookup table, 2^lookup_num_bits
    """
    range_bound: int
    lookup_num_bits: int
    lookup_range: int

    def __post_init__(self):
        if self.range_bound < 1:
            raise ValueError(f"range_bound must be positive, got {self.range_bound}")
        if self.lookup_num_bits < 0:
            raise ValueError(f"lookup_num_bits must be non-negative, got {self.lookup_num_bits}")
        if 1 << self.lookup_num_bits != self.lookup_range:
            raise ValueError(
                f"lookup_range must equal 2^lookup_num_bits: "
                f"2^{self.lookup_num_bits} != {self.lookup_range}"
            )
        # Direct-gate roots and table values must be distinct field elements
        if max(self.range_bound, self.lookup_range) >= GOLDILOCKS_PRIME:
            raise ValueError("bounds must be smaller than the field modulus")

    @classmethod
    def from_num_bits(cls, range_bound: int, lookup_num_bits: int) -> "RangeCheckParams":
        return cls(range_bound, lookup_num_bits, 1 << lookup_num_bits)
