"""Lookup gate binding a witnessed (num_bits, value) pair to the tagged table."""

import logging
from dataclasses import dataclass

from rangecheck.primitives.value import Value
from rangecheck.protocol.constraint_system import Column, ConstraintSystem, Selector
from rangecheck.protocol.layouter import AssignedCell, Region, SimpleFloorPlanner
from .tagged_table import TaggedLookupTable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TaggedLookupConfig:
    """Lookup of (value, num_bits) into a shared TaggedLookupTable.

    Both columns are matched against the same table row. On rows where
    q_lookup is off the inputs collapse to (0, 0), which the table contains.
    """
    value: Column
    num_bits: Column
    q_lookup: Selector
    table: TaggedLookupTable

    @classmethod
    def configure(
        cls,
        cs: ConstraintSystem,
        value: Column,
        num_bits: Column,
        table: TaggedLookupTable,
    ) -> "TaggedLookupConfig":
        q_lookup = cs.complex_selector()

        def lookup(meta):
            q = meta.query_selector(q_lookup)
            v = meta.query_advice(value)
            tag = meta.query_advice(num_bits)
            return [(q * v, table.value), (q * tag, table.num_bits)]

        cs.lookup("tagged range check", lookup)
        logger.debug(f"Tagged lookup on ({num_bits}, {value}) into {table.lookup_range + 2}-row table")
        return cls(value, num_bits, q_lookup, table)

    def assign_at(
        self, region: Region, offset: int, value: Value, num_bits: Value
    ) -> tuple[AssignedCell, AssignedCell]:
        self.q_lookup.enable(region, offset)
        tag_cell = region.assign_advice("num_bits", self.num_bits, offset, num_bits)
        value_cell = region.assign_advice("value", self.value, offset, value)
        return value_cell, tag_cell

    def assign(
        self, layouter: SimpleFloorPlanner, value: Value, num_bits: Value
    ) -> tuple[AssignedCell, AssignedCell]:
        """Assign value and its caller-supplied tag on a fresh row.

        Returns:
            (value cell, num_bits cell)
        """
        return layouter.assign_region(
            "assign value for lookup range check",
            lambda region: self.assign_at(region, 0, value, num_bits),
        )
