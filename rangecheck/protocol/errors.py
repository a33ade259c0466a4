"""Errors raised by the backend while a circuit is synthesized.

Constraint violations are not errors here: they are found later by the mock
prover and returned as failure records. These exceptions cover misuse of the
backend itself (bad layout, double assignment, missing table data).
"""


class SynthesisError(Exception):
    """Base class for failures during circuit synthesis."""


class NotEnoughRowsAvailable(SynthesisError):
    """The circuit needs more rows than 2^k provides."""

    def __init__(self, k: int, row: int = None):
        self.k = k
        self.row = row
        if row is None:
            msg = f"k = {k} is too small for the constraint system"
        else:
            msg = f"row {row} is outside the usable rows for k = {k}"
        super().__init__(msg)


class CellAlreadyAssigned(SynthesisError):
    """A cell was assigned more than once."""

    def __init__(self, column, row: int):
        self.column = column
        self.row = row
        super().__init__(f"{column} at row {row} is already assigned")


class TableAlreadyLoaded(SynthesisError):
    """A table column was assigned in more than one table block."""

    def __init__(self, column):
        self.column = column
        super().__init__(f"{column} has already been loaded")


class TableNotLoaded(SynthesisError):
    """A lookup refers to a table column that was never assigned."""

    def __init__(self, column):
        self.column = column
        super().__init__(f"{column} is used by a lookup but was never loaded")
