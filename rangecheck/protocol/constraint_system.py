"""Constraint system: columns, selectors, gates and lookup arguments.

A gadget describes its constraints once, at setup, against a ConstraintSystem:

    value = cs.advice_column()
    q = cs.selector()
    cs.create_gate("bool", lambda meta: with_selector(
        meta.query_selector(q),
        [("bool", meta.query_advice(value) * (1 - meta.query_advice(value)))],
    ))

The constraint system only records structure. Cell values live in whatever
backend later synthesizes the circuit (see protocol/mock_prover.py).
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, Union

from .expressions import AdviceQuery, Expression, SelectorQuery

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Column:
    """Advice (witness) column, filled per proof instance."""
    index: int

    def __str__(self) -> str:
        return f"advice[{self.index}]"


@dataclass(frozen=True)
class TableColumn:
    """Lookup table column, filled once at setup and shared."""
    index: int

    def __str__(self) -> str:
        return f"table[{self.index}]"


@dataclass(frozen=True)
class Selector:
    """Per-row flag gating a gate or lookup.

    Simple selectors may only multiply a whole gate. Complex selectors may
    also appear inside lookup input expressions.
    """
    index: int
    simple: bool = True

    def enable(self, region, offset: int) -> None:
        region.enable_selector(self, offset)

    def __str__(self) -> str:
        return f"selector[{self.index}]"


@dataclass
class Gate:
    """Named set of polynomial constraints that must vanish on every row."""
    name: str
    constraint_names: list[str]
    polys: list[Expression]

    def degree(self) -> int:
        return max(p.degree() for p in self.polys)

    def advice_queries(self) -> list[AdviceQuery]:
        seen = []
        for poly in self.polys:
            for query in poly.advice_queries():
                if query not in seen:
                    seen.append(query)
        return seen

    def selectors(self) -> list[Selector]:
        seen = []
        for poly in self.polys:
            for query in poly.selectors():
                if query.selector not in seen:
                    seen.append(query.selector)
        return seen


@dataclass
class Lookup:
    """Lookup argument: the tuple of inputs must equal some row of the table columns."""
    name: str
    inputs: list[Expression]
    table_columns: list[TableColumn]

    def degree(self) -> int:
        input_degree = max([1] + [e.degree() for e in self.inputs])
        table_degree = 1
        return max(4, 2 + input_degree + table_degree)


ConstraintLike = Union[Expression, tuple[str, Expression]]


def with_selector(selector: Expression, constraints: Iterable[ConstraintLike]) -> list[tuple[str, Expression]]:
    """Gate every constraint by a selector expression."""
    gated = []
    for constraint in constraints:
        name, poly = constraint if isinstance(constraint, tuple) else ("", constraint)
        gated.append((name, selector * poly))
    return gated


class VirtualCells:
    """Query interface handed to gate and lookup builders."""

    def __init__(self, cs: "ConstraintSystem"):
        self._cs = cs
        self.queried_selectors: list[Selector] = []

    def query_advice(self, column: Column, rotation: int = 0) -> AdviceQuery:
        self._cs._record_advice_query(column, rotation)
        return AdviceQuery(column, rotation)

    def query_selector(self, selector: Selector) -> SelectorQuery:
        self.queried_selectors.append(selector)
        return SelectorQuery(selector)


@dataclass
class ConstraintSystem:
    """Registry of everything a circuit constrains."""
    num_advice_columns: int = 0
    num_table_columns: int = 0
    num_selectors: int = 0
    gates: list[Gate] = field(default_factory=list)
    lookups: list[Lookup] = field(default_factory=list)
    advice_queries: dict[Column, set[int]] = field(default_factory=dict)

    def advice_column(self) -> Column:
        column = Column(self.num_advice_columns)
        self.num_advice_columns += 1
        return column

    def lookup_table_column(self) -> TableColumn:
        column = TableColumn(self.num_table_columns)
        self.num_table_columns += 1
        return column

    def selector(self) -> Selector:
        selector = Selector(self.num_selectors, simple=True)
        self.num_selectors += 1
        return selector

    def complex_selector(self) -> Selector:
        selector = Selector(self.num_selectors, simple=False)
        self.num_selectors += 1
        return selector

    def _record_advice_query(self, column: Column, rotation: int) -> None:
        self.advice_queries.setdefault(column, set()).add(rotation)

    def create_gate(self, name: str, build: Callable[[VirtualCells], Iterable[ConstraintLike]]) -> Gate:
        """Register a gate.

        Args:
            name: Gate name, used in failure reports
            build: Called once with a VirtualCells; returns constraints, each
                either an Expression or a (name, Expression) pair

        Returns:
            The registered Gate

        Raises:
            ValueError: If the gate has no constraints
        """
        meta = VirtualCells(self)
        constraints = list(build(meta))
        if not constraints:
            raise ValueError(f"gate '{name}' must contain at least one constraint")

        names, polys = [], []
        for constraint in constraints:
            c_name, poly = constraint if isinstance(constraint, tuple) else ("", constraint)
            names.append(c_name)
            polys.append(poly)

        gate = Gate(name, names, polys)
        self.gates.append(gate)
        logger.debug(f"Registered gate '{name}' of degree {gate.degree()}")
        return gate

    def lookup(self, name: str, build: Callable[[VirtualCells], Iterable[tuple[Expression, TableColumn]]]) -> Lookup:
        """Register a lookup argument.

        Args:
            name: Lookup name, used in failure reports
            build: Called once with a VirtualCells; returns (input, table
                column) pairs. The input tuple must match a single table row.

        Returns:
            The registered Lookup

        Raises:
            ValueError: If a simple selector is queried or no pairs are given
        """
        meta = VirtualCells(self)
        pairs = list(build(meta))
        if not pairs:
            raise ValueError(f"lookup '{name}' must contain at least one input")
        for selector in meta.queried_selectors:
            if selector.simple:
                raise ValueError(
                    f"lookup '{name}' queries simple {selector}; use complex_selector()"
                )

        lookup = Lookup(name, [p[0] for p in pairs], [p[1] for p in pairs])
        self.lookups.append(lookup)
        logger.debug(f"Registered lookup '{name}' over {len(pairs)} table columns")
        return lookup

    def degree(self) -> int:
        """Maximum degree over all gates and lookups."""
        degrees = [1]
        degrees += [g.degree() for g in self.gates]
        degrees += [lk.degree() for lk in self.lookups]
        return max(degrees)

    def blinding_factors(self) -> int:
        max_queries = max([len(r) for r in self.advice_queries.values()] + [1])
        return max(3, max_queries) + 2

    def minimum_rows(self) -> int:
        # blinding rows, last row, first row, and one usable row
        return self.blinding_factors() + 3
