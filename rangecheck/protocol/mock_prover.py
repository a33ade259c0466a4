"""Mock prover: stores an assigned witness and checks it against the constraints.

No commitments or proofs are produced. MockProver.run() synthesizes a circuit
into in-memory columns (one field array per column, 2^k rows) and verify()
evaluates every gate and lookup on every usable row, returning a list of
failures that point at the region and offset of the offending assignment.

Usage:
    prover = MockProver.run(k=9, circuit=circuit)
    assert prover.verify() == []
    # or
    prover.assert_satisfied()
"""

import logging
from dataclasses import dataclass
from typing import Optional, Union

import numpy as np

from rangecheck.primitives.field import FF, canonical, ff, format_value
from rangecheck.primitives.value import Value
from .circuit import Circuit
from .constraint_system import Column, ConstraintSystem, Selector, TableColumn
from .errors import CellAlreadyAssigned, NotEnoughRowsAvailable, TableNotLoaded
from .expressions import EvaluationContext, Expression
from .layouter import Assignment, SimpleFloorPlanner

logger = logging.getLogger(__name__)


# --- Failure records ---


@dataclass(frozen=True)
class RegionRef:
    index: int
    name: str

    def __str__(self) -> str:
        return f"region {self.index} ('{self.name}')"


@dataclass(frozen=True)
class InRegion:
    region: RegionRef
    offset: int

    def __str__(self) -> str:
        return f"in {self.region} at offset {self.offset}"


@dataclass(frozen=True)
class OutsideRegion:
    row: int

    def __str__(self) -> str:
        return f"outside any region at row {self.row}"


FailureLocation = Union[InRegion, OutsideRegion]


@dataclass(frozen=True)
class VirtualCell:
    column: Column
    rotation: int = 0

    def __str__(self) -> str:
        return f"{self.column}@{self.rotation}"


@dataclass(frozen=True)
class ConstraintNotSatisfied:
    gate_index: int
    gate_name: str
    constraint_index: int
    constraint_name: str
    location: FailureLocation
    cell_values: tuple[tuple[VirtualCell, str], ...]

    def __str__(self) -> str:
        cells = ", ".join(f"{cell} = {val}" for cell, val in self.cell_values)
        return (
            f"Constraint {self.constraint_index} ('{self.constraint_name}') in gate "
            f"{self.gate_index} ('{self.gate_name}') is not satisfied {self.location}: {cells}"
        )


@dataclass(frozen=True)
class LookupNotSatisfied:
    lookup_index: int
    lookup_name: str
    location: FailureLocation
    inputs: tuple[str, ...]

    def __str__(self) -> str:
        return (
            f"Lookup {self.lookup_index} ('{self.lookup_name}') is not satisfied "
            f"{self.location}: input ({', '.join(self.inputs)}) is not in the table"
        )


@dataclass(frozen=True)
class CellNotAssigned:
    gate_index: int
    gate_name: str
    location: FailureLocation
    cell: VirtualCell

    def __str__(self) -> str:
        return (
            f"Gate {self.gate_index} ('{self.gate_name}') queries {self.cell} "
            f"{self.location}, which was not assigned"
        )


VerifyFailure = Union[ConstraintNotSatisfied, LookupNotSatisfied, CellNotAssigned]


@dataclass
class _RegionRecord:
    index: int
    name: str
    start_row: int


class _WitnessContext(EvaluationContext):
    """Evaluates expressions over the full assigned columns."""

    def __init__(self, prover: "MockProver"):
        self._prover = prover

    def col(self, column: Column, rotation: int = 0):
        return np.roll(self._prover.advice[column.index], -rotation)

    def selector(self, selector: Selector):
        return FF(self._prover.selectors[selector.index].astype(np.uint64))


class MockProver(Assignment):
    """In-memory backend that checks constraint satisfaction."""

    def __init__(self, k: int, cs: ConstraintSystem):
        self.k = k
        self.n = 1 << k
        self.cs = cs
        if self.n < cs.minimum_rows():
            raise NotEnoughRowsAvailable(k)
        self.usable_rows = self.n - (cs.blinding_factors() + 1)

        self.advice = [FF.Zeros(self.n) for _ in range(cs.num_advice_columns)]
        self.advice_assigned = [np.zeros(self.n, dtype=bool) for _ in range(cs.num_advice_columns)]
        self.advice_written = [np.zeros(self.n, dtype=bool) for _ in range(cs.num_advice_columns)]
        self.table = [FF.Zeros(self.n) for _ in range(cs.num_table_columns)]
        self.table_assigned = [np.zeros(self.n, dtype=bool) for _ in range(cs.num_table_columns)]
        self.selectors = [np.zeros(self.n, dtype=bool) for _ in range(cs.num_selectors)]

        self.regions: list[_RegionRecord] = []
        self._row_region = np.full(self.n, -1, dtype=np.int64)
        self._current_region: Optional[_RegionRecord] = None

    @classmethod
    def run(cls, k: int, circuit: Circuit) -> "MockProver":
        """Configure and synthesize circuit into a fresh 2^k-row witness.

        Raises:
            NotEnoughRowsAvailable: If 2^k rows cannot hold the circuit
            SynthesisError: Any other backend failure during synthesis
        """
        cs = ConstraintSystem()
        config = type(circuit).configure(cs)
        prover = cls(k, cs)
        circuit.synthesize(config, SimpleFloorPlanner(prover))
        prover._finalize_tables()
        return prover

    # --- Assignment ---

    def _check_row(self, row: int) -> None:
        if not 0 <= row < self.usable_rows:
            raise NotEnoughRowsAvailable(self.k, row)

    def _mark_region(self, row: int) -> None:
        if self._current_region is not None:
            self._row_region[row] = self._current_region.index

    def enter_region(self, name: str, start_row: int) -> None:
        record = _RegionRecord(len(self.regions), name, start_row)
        self.regions.append(record)
        self._current_region = record

    def exit_region(self) -> None:
        self._current_region = None

    def enable_selector(self, selector: Selector, row: int) -> None:
        self._check_row(row)
        self.selectors[selector.index][row] = True
        self._mark_region(row)

    def assign_advice(self, column: Column, row: int, value: Value) -> None:
        self._check_row(row)
        if self.advice_written[column.index][row]:
            raise CellAlreadyAssigned(column, row)
        self.advice_written[column.index][row] = True
        self._mark_region(row)
        if not value.is_known():
            return
        self.advice[column.index][row] = _to_field(value.inner())
        self.advice_assigned[column.index][row] = True

    def assign_table_cell(self, column: TableColumn, row: int, value: Value) -> None:
        self._check_row(row)
        if self.table_assigned[column.index][row]:
            raise CellAlreadyAssigned(column, row)
        self.table[column.index][row] = _to_field(value.inner())
        self.table_assigned[column.index][row] = True

    def _finalize_tables(self) -> None:
        """Pad every used table column with its first row."""
        for lookup in self.cs.lookups:
            for column in lookup.table_columns:
                if not self.table_assigned[column.index].any():
                    raise TableNotLoaded(column)
        for i, assigned in enumerate(self.table_assigned):
            if not assigned.any():
                continue
            first = self.table[i][int(np.argmax(assigned))]
            padding = ~assigned
            padding[self.usable_rows:] = False
            self.table[i][padding] = first

    # --- Inspection ---

    def enabled_rows(self, selector: Selector) -> list[int]:
        return [int(r) for r in np.nonzero(self.selectors[selector.index])[0]]

    def cell_value(self, column: Column, row: int) -> Optional[int]:
        """Canonical value of an advice cell, or None if unassigned."""
        if not self.advice_assigned[column.index][row]:
            return None
        return canonical(self.advice[column.index][row])

    def table_rows(self, columns: list[TableColumn]) -> list[tuple[int, ...]]:
        """Assigned rows of the given table columns, in row order."""
        mask = np.logical_and.reduce([self.table_assigned[c.index] for c in columns])
        rows = []
        for row in np.nonzero(mask)[0]:
            rows.append(tuple(canonical(self.table[c.index][row]) for c in columns))
        return rows

    def _location(self, row: int) -> FailureLocation:
        index = int(self._row_region[row])
        if index < 0:
            return OutsideRegion(row)
        record = self.regions[index]
        return InRegion(RegionRef(record.index, record.name), row - record.start_row)

    # --- Verification ---

    def _evaluate(self, expr: Expression, ctx: EvaluationContext) -> list[int]:
        evaluated = expr.evaluate(ctx)
        if np.ndim(evaluated) == 0:
            evaluated = FF.Zeros(self.n) + evaluated
        return evaluated.view(np.ndarray).tolist()

    def _verify_gates(self, ctx: EvaluationContext) -> list[VerifyFailure]:
        failures: list[VerifyFailure] = []
        for gi, gate in enumerate(self.cs.gates):
            enabled = np.zeros(self.n, dtype=bool)
            for selector in gate.selectors():
                enabled |= self.selectors[selector.index]

            for row in np.nonzero(enabled[:self.usable_rows])[0]:
                for query in gate.advice_queries():
                    at = (int(row) + query.rotation) % self.n
                    if not self.advice_assigned[query.column.index][at]:
                        failures.append(CellNotAssigned(
                            gi, gate.name, self._location(int(row)),
                            VirtualCell(query.column, query.rotation),
                        ))

            for ci, poly in enumerate(gate.polys):
                values = self._evaluate(poly, ctx)
                for row in range(self.usable_rows):
                    if values[row] == 0:
                        continue
                    cells = tuple(
                        (
                            VirtualCell(q.column, q.rotation),
                            format_value(self.advice[q.column.index][(row + q.rotation) % self.n]),
                        )
                        for q in poly.advice_queries()
                    )
                    failures.append(ConstraintNotSatisfied(
                        gi, gate.name, ci, gate.constraint_names[ci], self._location(row), cells,
                    ))
        return failures

    def _verify_lookups(self, ctx: EvaluationContext) -> list[VerifyFailure]:
        failures: list[VerifyFailure] = []
        for li, lookup in enumerate(self.cs.lookups):
            table = set(zip(*[
                self.table[c.index].view(np.ndarray)[:self.usable_rows].tolist()
                for c in lookup.table_columns
            ]))
            inputs = [self._evaluate(expr, ctx) for expr in lookup.inputs]
            for row in range(self.usable_rows):
                needle = tuple(column[row] for column in inputs)
                if needle not in table:
                    failures.append(LookupNotSatisfied(
                        li, lookup.name, self._location(row),
                        tuple(format_value(FF(v)) for v in needle),
                    ))
        return failures

    def verify(self) -> list[VerifyFailure]:
        """Check every gate and lookup on every usable row.

        Returns:
            Failures ordered by gate, then lookup, then row. Empty if satisfied.
        """
        ctx = _WitnessContext(self)
        failures = self._verify_gates(ctx) + self._verify_lookups(ctx)
        logger.info(
            f"Verified {len(self.cs.gates)} gates and {len(self.cs.lookups)} lookups "
            f"over {self.usable_rows} rows: {len(failures)} failures"
        )
        for failure in failures:
            logger.warning(str(failure))
        return failures

    def assert_satisfied(self) -> None:
        failures = self.verify()
        if failures:
            raise AssertionError(
                "circuit was not satisfied:\n" + "\n".join(f"  {f}" for f in failures)
            )


def _to_field(value) -> FF:
    if isinstance(value, FF):
        return value
    return ff(int(value))
