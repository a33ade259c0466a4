"""Range check that picks the direct gate or the tagged lookup per value.

Small ranges are cheapest to check with the direct polynomial gate; anything
from range_bound up to lookup_range goes through the shared tagged table.
Both gates read the same value column, and every check is placed in its own
region, so the two selectors are never active on the same row.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from rangecheck.primitives.value import Value
from rangecheck.protocol.constraint_system import Column, ConstraintSystem
from rangecheck.protocol.layouter import SimpleFloorPlanner
from .direct_bound import DirectBoundConfig
from .params import RangeCheckParams
from .tagged_lookup import TaggedLookupConfig
from .tagged_table import TaggedLookupTable

logger = logging.getLogger(__name__)


class Strategy(Enum):
    DIRECT = "direct"
    LOOKUP = "lookup"


@dataclass(frozen=True)
class RangeCheckConfig:
    """Composed direct gate, tagged table and tagged lookup."""
    params: RangeCheckParams
    direct: DirectBoundConfig
    lookup: TaggedLookupConfig

    @classmethod
    def configure(
        cls,
        cs: ConstraintSystem,
        value: Column,
        num_bits: Column,
        params: RangeCheckParams,
    ) -> "RangeCheckConfig":
        direct = DirectBoundConfig.configure(cs, value, params.range_bound)
        table = TaggedLookupTable.configure(cs, params.lookup_num_bits, params.lookup_range)
        lookup = TaggedLookupConfig.configure(cs, value, num_bits, table)
        return cls(params, direct, lookup)

    @property
    def table(self) -> TaggedLookupTable:
        return self.lookup.table

    def load_table(self, layouter: SimpleFloorPlanner) -> None:
        self.table.load(layouter)

    def strategy_for(self, range_: int) -> Strategy:
        """Choose how a value required to lie within range_ is checked.

        Raises:
            ValueError: If range_ is negative or exceeds lookup_range
        """
        if range_ < 0:
            raise ValueError(f"range must be non-negative, got {range_}")
        if range_ > self.params.lookup_range:
            raise ValueError(
                f"range {range_} exceeds the lookup range {self.params.lookup_range}"
            )
        if range_ < self.params.range_bound:
            return Strategy.DIRECT
        return Strategy.LOOKUP

    def assign(
        self,
        layouter: SimpleFloorPlanner,
        value: Value,
        num_bits: Value,
        range_: int,
    ) -> Strategy:
        """Check value on a fresh row with the strategy chosen for range_.

        On the lookup path num_bits is written as given; the table decides
        whether it is the right tag for value. It is ignored on the direct path.

        Returns:
            The strategy that was applied
        """
        strategy = self.strategy_for(range_)
        logger.debug(f"Range check for range {range_} uses {strategy.value} strategy")
        if strategy is Strategy.DIRECT:
            self.direct.assign(layouter, value)
        else:
            self.lookup.assign(layouter, value, num_bits)
        return strategy
