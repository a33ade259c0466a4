"""Tagged lookup table of (num_bits, value) pairs.

The table enumerates every value in [0, lookup_range], each tagged with
floor(log2(value)). A lookup on the pair (tag, value) therefore proves that
value lies in [2^tag, 2^(tag + 1)), which lets one table serve range checks
of many different widths.

Layout for lookup_range = 8:

    row | num_bits | value
    ----+----------+------
     0  |    1     |   0
     1  |    0     |   0
     2  |    0     |   1
     3  |    1     |   2
     4  |    1     |   3
     5  |    2     |   4
    ... |   ...    |  ...
     8  |    2     |   7
     9  |    3     |   8

Row 0 tags zero with 1 and is kept as-is. Zero also appears with tag 0, which
is the pair every row with a disabled lookup selector evaluates to. The table
is lookup_range + 2 rows long and covers the closed interval [0, lookup_range].
"""

import logging
from dataclasses import dataclass
from functools import lru_cache

from rangecheck.primitives.value import Value
from rangecheck.protocol.constraint_system import ConstraintSystem, TableColumn
from rangecheck.protocol.layouter import SimpleFloorPlanner, TableAssigner

logger = logging.getLogger(__name__)

ZERO_ROW_TAG = 1
"""Tag assigned to value 0 in the first table row."""


def log2_floor(value: int) -> int:
    """floor(log2(value)) for value >= 1; log2_floor(0) is 0."""
    if value < 0:
        raise ValueError(f"log2_floor is undefined for negative value {value}")
    return max(value.bit_length() - 1, 0)


@dataclass(frozen=True)
class TableRow:
    tag: int
    value: int


@lru_cache(maxsize=None)
def tagged_rows(lookup_range: int) -> tuple[TableRow, ...]:
    """Rows of the table for lookup_range, in load order. Computed once per range."""
    rows = [TableRow(ZERO_ROW_TAG, 0)]
    rows.extend(TableRow(log2_floor(v), v) for v in range(lookup_range + 1))
    return tuple(rows)


@dataclass(frozen=True)
class TaggedLookupTable:
    """Pair of table columns holding the tagged enumeration."""
    num_bits: TableColumn
    value: TableColumn
    lookup_num_bits: int
    lookup_range: int

    @classmethod
    def configure(cls, cs: ConstraintSystem, lookup_num_bits: int, lookup_range: int) -> "TaggedLookupTable":
        """Allocate the table columns.

        Raises:
            ValueError: If lookup_range != 2^lookup_num_bits
        """
        if lookup_num_bits < 0 or 1 << lookup_num_bits != lookup_range:
            raise ValueError(
                f"lookup table needs lookup_range == 2^lookup_num_bits, "
                f"got lookup_num_bits={lookup_num_bits}, lookup_range={lookup_range}"
            )
        num_bits = cs.lookup_table_column()
        value = cs.lookup_table_column()
        return cls(num_bits, value, lookup_num_bits, lookup_range)

    @property
    def rows(self) -> tuple[TableRow, ...]:
        return tagged_rows(self.lookup_range)

    def load(self, layouter: SimpleFloorPlanner) -> None:
        """Assign every row into the table columns. Must be called once per circuit."""

        def fill(table: TableAssigner):
            for offset, row in enumerate(self.rows):
                table.assign_cell("num_bits", self.num_bits, offset, Value.known(row.tag))
                table.assign_cell("value", self.value, offset, Value.known(row.value))

        layouter.assign_table("load range-check table", fill)
        logger.debug(f"Loaded tagged range-check table with {len(self.rows)} rows")
