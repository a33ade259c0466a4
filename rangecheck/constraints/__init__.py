"""Range-check gadget constraints.

DirectBoundConfig handles small ranges with a single polynomial gate,
TaggedLookupTable and TaggedLookupConfig handle large ranges through a shared
table, and RangeCheckConfig routes each checked value to one of the two.
"""

from .direct_bound import DirectBoundConfig, range_check_expression
from .params import RangeCheckParams
from .range_check import RangeCheckConfig, Strategy
from .tagged_lookup import TaggedLookupConfig
from .tagged_table import TableRow, TaggedLookupTable, log2_floor, tagged_rows

__all__ = [
    "DirectBoundConfig",
    "RangeCheckConfig",
    "RangeCheckParams",
    "Strategy",
    "TableRow",
    "TaggedLookupConfig",
    "TaggedLookupTable",
    "log2_floor",
    "range_check_expression",
    "tagged_rows",
]
