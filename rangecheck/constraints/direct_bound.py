"""Direct range-check gate.

A value v lies in [0, R) iff

    (0 - v) * (1 - v) * ... * (R - 1 - v) == 0

since the product vanishes exactly on the R field elements 0..R-1. The gate
has degree R (R + 1 with its selector), so it is only usable for small R.
"""

import logging
from dataclasses import dataclass

from rangecheck.primitives.value import Value
from rangecheck.protocol.constraint_system import Column, ConstraintSystem, Selector, with_selector
from rangecheck.protocol.expressions import Constant, Expression
from rangecheck.protocol.layouter import AssignedCell, Region, SimpleFloorPlanner

logger = logging.getLogger(__name__)


def range_check_expression(value: Expression, bound: int) -> Expression:
    """Product of (i - value) for i in 0..bound."""
    expr = Constant(0) - value
    for i in range(1, bound):
        expr = expr * (Constant(i) - value)
    return expr


@dataclass(frozen=True)
class DirectBoundConfig:
    """Gate enforcing value in [0, bound) on rows where q_range_check is set."""
    value: Column
    q_range_check: Selector
    bound: int

    @classmethod
    def configure(cls, cs: ConstraintSystem, value: Column, bound: int) -> "DirectBoundConfig":
        if bound < 1:
            raise ValueError(f"bound must be positive, got {bound}")
        q_range_check = cs.selector()

        def gate(meta):
            q = meta.query_selector(q_range_check)
            v = meta.query_advice(value)
            return with_selector(q, [("range check", range_check_expression(v, bound))])

        cs.create_gate("range check", gate)
        logger.debug(f"Direct range check over [0, {bound}) on {value}")
        return cls(value, q_range_check, bound)

    def assign_at(self, region: Region, offset: int, value: Value) -> AssignedCell:
        self.q_range_check.enable(region, offset)
        return region.assign_advice("value", self.value, offset, value)

    def assign(self, layouter: SimpleFloorPlanner, value: Value) -> AssignedCell:
        """Assign value on a fresh row with the range-check selector enabled."""
        return layouter.assign_region("assign value", lambda region: self.assign_at(region, 0, value))
