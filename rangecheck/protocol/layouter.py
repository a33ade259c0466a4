"""Witness layout: regions of rows and table assignment blocks.

Gadgets never write to absolute rows. They open a region, assign cells at
offsets relative to the region's first row, and let the floor planner decide
where the region lands. SimpleFloorPlanner places every region on fresh rows
directly after the previous one, so two regions never share a row.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, TypeVar

from rangecheck.primitives.value import Value
from .constraint_system import Column, Selector, TableColumn
from .errors import TableAlreadyLoaded

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Assignment(ABC):
    """Backend that stores the assigned witness (e.g. the mock prover)."""

    @abstractmethod
    def enter_region(self, name: str, start_row: int) -> None:
        pass

    @abstractmethod
    def exit_region(self) -> None:
        pass

    @abstractmethod
    def enable_selector(self, selector: Selector, row: int) -> None:
        pass

    @abstractmethod
    def assign_advice(self, column: Column, row: int, value: Value) -> None:
        pass

    @abstractmethod
    def assign_table_cell(self, column: TableColumn, row: int, value: Value) -> None:
        pass


@dataclass(frozen=True)
class AssignedCell:
    """Handle to a cell written during synthesis."""
    value: Value
    column: Column
    row: int


class Region:
    """Rows owned by one region; cells are addressed by offset."""

    def __init__(self, backend: Assignment, name: str, start_row: int):
        self._backend = backend
        self.name = name
        self.start_row = start_row
        self.height = 0

    def _row(self, offset: int) -> int:
        if offset < 0:
            raise ValueError(f"negative offset {offset} in region '{self.name}'")
        self.height = max(self.height, offset + 1)
        return self.start_row + offset

    def enable_selector(self, selector: Selector, offset: int) -> None:
        self._backend.enable_selector(selector, self._row(offset))

    def assign_advice(self, annotation: str, column: Column, offset: int, value: Value) -> AssignedCell:
        """Assign a witness value to column at offset within this region."""
        row = self._row(offset)
        self._backend.assign_advice(column, row, value)
        logger.debug(f"{self.name}: {annotation} -> {column} row {row}")
        return AssignedCell(value, column, row)


class TableAssigner:
    """Assigns cells of lookup table columns inside one table block."""

    def __init__(self, backend: Assignment, loaded: set[TableColumn]):
        self._backend = backend
        self._loaded = loaded
        self.columns: set[TableColumn] = set()

    def assign_cell(self, annotation: str, column: TableColumn, offset: int, value: Value) -> None:
        if column in self._loaded:
            raise TableAlreadyLoaded(column)
        self.columns.add(column)
        self._backend.assign_table_cell(column, offset, value)


class SimpleFloorPlanner:
    """Layouter that stacks regions one after another."""

    def __init__(self, backend: Assignment):
        self._backend = backend
        self._loaded_tables: set[TableColumn] = set()
        self.next_row = 0
        self.regions: list[Region] = []

    def assign_region(self, name: str, assignment: Callable[[Region], T]) -> T:
        """Run assignment inside a fresh region and return its result."""
        region = Region(self._backend, name, self.next_row)
        self._backend.enter_region(name, region.start_row)
        try:
            result = assignment(region)
        finally:
            self._backend.exit_region()
        self.next_row += region.height
        self.regions.append(region)
        return result

    def assign_table(self, name: str, assignment: Callable[[TableAssigner], None]) -> None:
        """Fill table columns; each table column may be filled by one block only."""
        table = TableAssigner(self._backend, self._loaded_tables)
        assignment(table)
        self._loaded_tables |= table.columns
        logger.debug(f"Loaded table '{name}' into {len(table.columns)} columns")
