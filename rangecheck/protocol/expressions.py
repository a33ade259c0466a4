"""Polynomial expressions over queried circuit cells.

Gates and lookup inputs are built as small expression trees. An expression is
evaluated over whole columns at once: the evaluation context hands back one
field array per queried cell, so the result is an array holding the value of
the expression on every row.

Example:
    value = meta.query_advice(config.value)
    q = meta.query_selector(config.q_range_check)
    constraint = q * value * (1 - value)

    # Array of per-row evaluations
    evaluated = constraint.evaluate(ctx)
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterator, Union

from rangecheck.primitives.field import FF, ff


class Expression(ABC):
    """Node of a polynomial expression tree."""

    @abstractmethod
    def degree(self) -> int:
        """Total degree of the expression in the queried cells."""
        pass

    @abstractmethod
    def evaluate(self, ctx: "EvaluationContext"):
        """Evaluate on every row.

        Args:
            ctx: Context providing column arrays for queried cells

        Returns:
            Field array (or scalar, for constant expressions)
        """
        pass

    @abstractmethod
    def children(self) -> tuple["Expression", ...]:
        pass

    def walk(self) -> Iterator["Expression"]:
        """Yield this node and every descendant, depth first."""
        yield self
        for child in self.children():
            yield from child.walk()

    def advice_queries(self) -> list["AdviceQuery"]:
        """Distinct advice queries in order of first appearance."""
        seen = []
        for node in self.walk():
            if isinstance(node, AdviceQuery) and node not in seen:
                seen.append(node)
        return seen

    def selectors(self) -> list["SelectorQuery"]:
        seen = []
        for node in self.walk():
            if isinstance(node, SelectorQuery) and node not in seen:
                seen.append(node)
        return seen

    def __add__(self, other: "ExpressionLike") -> "Expression":
        return Sum(self, _coerce(other))

    def __radd__(self, other: "ExpressionLike") -> "Expression":
        return Sum(_coerce(other), self)

    def __sub__(self, other: "ExpressionLike") -> "Expression":
        return Sum(self, Negated(_coerce(other)))

    def __rsub__(self, other: "ExpressionLike") -> "Expression":
        return Sum(_coerce(other), Negated(self))

    def __mul__(self, other: "ExpressionLike") -> "Expression":
        return Product(self, _coerce(other))

    def __rmul__(self, other: "ExpressionLike") -> "Expression":
        return Product(_coerce(other), self)

    def __neg__(self) -> "Expression":
        return Negated(self)


ExpressionLike = Union[Expression, int]


def _coerce(value: ExpressionLike) -> Expression:
    if isinstance(value, Expression):
        return value
    if isinstance(value, int):
        return Constant(value)
    raise TypeError(f"cannot use {type(value).__name__} in an expression")


class EvaluationContext(ABC):
    """Source of column data for expression evaluation."""

    @abstractmethod
    def col(self, column, rotation: int = 0):
        """Advice column shifted so that row i holds the cell at i + rotation."""
        pass

    @abstractmethod
    def selector(self, selector):
        """Selector column as a 0/1 field array."""
        pass


# Leaves compare by value, operator nodes by identity.


@dataclass(frozen=True)
class Constant(Expression):
    value: int

    def degree(self) -> int:
        return 0

    def evaluate(self, ctx: EvaluationContext):
        return ff(self.value)

    def children(self) -> tuple[Expression, ...]:
        return ()


@dataclass(frozen=True)
class AdviceQuery(Expression):
    column: object
    rotation: int = 0

    def degree(self) -> int:
        return 1

    def evaluate(self, ctx: EvaluationContext):
        return ctx.col(self.column, self.rotation)

    def children(self) -> tuple[Expression, ...]:
        return ()


@dataclass(frozen=True)
class SelectorQuery(Expression):
    selector: object

    def degree(self) -> int:
        return 1

    def evaluate(self, ctx: EvaluationContext):
        return ctx.selector(self.selector)

    def children(self) -> tuple[Expression, ...]:
        return ()


@dataclass(frozen=True, eq=False)
class Sum(Expression):
    left: Expression
    right: Expression

    def degree(self) -> int:
        return max(self.left.degree(), self.right.degree())

    def evaluate(self, ctx: EvaluationContext):
        return self.left.evaluate(ctx) + self.right.evaluate(ctx)

    def children(self) -> tuple[Expression, ...]:
        return (self.left, self.right)


@dataclass(frozen=True, eq=False)
class Product(Expression):
    left: Expression
    right: Expression

    def degree(self) -> int:
        return self.left.degree() + self.right.degree()

    def evaluate(self, ctx: EvaluationContext):
        return self.left.evaluate(ctx) * self.right.evaluate(ctx)

    def children(self) -> tuple[Expression, ...]:
        return (self.left, self.right)


@dataclass(frozen=True, eq=False)
class Negated(Expression):
    inner: Expression

    def degree(self) -> int:
        return self.inner.degree()

    def evaluate(self, ctx: EvaluationContext):
        return FF(0) - self.inner.evaluate(ctx)

    def children(self) -> tuple[Expression, ...]:
        return (self.inner,)
