"""Circuit interface implemented by anything the backend can synthesize."""

from abc import ABC, abstractmethod
from typing import Any

from .constraint_system import ConstraintSystem
from .layouter import SimpleFloorPlanner


class Circuit(ABC):
    """A circuit describes its constraints once and its witness per instance.

    configure() runs against a fresh ConstraintSystem and returns a config
    object (columns, selectors, sub-gadget configs). synthesize() receives
    that config and assigns the witness through a layouter.
    """

    @abstractmethod
    def without_witnesses(self) -> "Circuit":
        """Same circuit with every witness value unknown."""
        pass

    @classmethod
    @abstractmethod
    def configure(cls, cs: ConstraintSystem) -> Any:
        pass

    @abstractmethod
    def synthesize(self, config: Any, layouter: SimpleFloorPlanner) -> None:
        pass
