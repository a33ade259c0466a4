"""In-memory proving backend: constraint system, layouter and mock prover."""

from .circuit import Circuit
from .constraint_system import Column, ConstraintSystem, Selector, TableColumn, with_selector
from .errors import (
    CellAlreadyAssigned,
    NotEnoughRowsAvailable,
    SynthesisError,
    TableAlreadyLoaded,
    TableNotLoaded,
)
from .layouter import SimpleFloorPlanner
from .mock_prover import (
    CellNotAssigned,
    ConstraintNotSatisfied,
    InRegion,
    LookupNotSatisfied,
    MockProver,
    OutsideRegion,
    RegionRef,
    VirtualCell,
)
