"""Witness values that may be unknown.

Circuits are synthesized twice: once with real witness data and once without
(e.g. when only the shape of the circuit matters). Value wraps a witness that
is either known or unknown, so the same synthesis code works for both passes.
"""

from typing import Any


class Value:
    """A witness value that is either known or unknown."""

    __slots__ = ("_inner", "_known")

    def __init__(self, inner: Any, known: bool):
        self._inner = inner
        self._known = known

    @classmethod
    def known(cls, inner: Any) -> "Value":
        return cls(inner, True)

    @classmethod
    def unknown(cls) -> "Value":
        return cls(None, False)

    def is_known(self) -> bool:
        return self._known

    def inner(self) -> Any:
        """Return the wrapped value.

        Raises:
            ValueError: If the value is unknown
        """
        if not self._known:
            raise ValueError("value is unknown")
        return self._inner

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        if self._known != other._known:
            return False
        return not self._known or bool(self._inner == other._inner)

    def __repr__(self) -> str:
        if not self._known:
            return "Value(unknown)"
        return f"Value({self._inner!r})"
