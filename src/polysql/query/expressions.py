"""
Expression tree primitives for filter construction.

A filter is either a :class:`Condition` (one column compared against a value)
or a :class:`Junction` joining two filters with AND/OR. Both are frozen, and
their shape is checked on construction so a malformed tree never reaches the
compiler.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from ..errors import ExpressionError


class Operator(str, Enum):
    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    GREATER_THAN = "greater_than"
    GREATER_THAN_OR_EQUAL = "greater_than_or_equal"
    LESS_THAN = "less_than"
    LESS_THAN_OR_EQUAL = "less_than_or_equal"
    IS_NULL = "is_null"
    IS_NOT_NULL = "is_not_null"
    IN = "in"
    NOT_IN = "not_in"
    CONTAINS = "contains"
    CONTAINS_NOT = "contains_not"
    STARTS_WITH = "starts_with"
    ENDS_WITH = "ends_with"
    BETWEEN = "between"
    AND = "and"
    OR = "or"


CONNECTORS = frozenset({Operator.AND, Operator.OR})
NULLARY = frozenset({Operator.IS_NULL, Operator.IS_NOT_NULL})
LIST_OPERATORS = frozenset({Operator.IN, Operator.NOT_IN})
PATTERN_OPERATORS = frozenset(
    {Operator.CONTAINS, Operator.CONTAINS_NOT, Operator.STARTS_WITH, Operator.ENDS_WITH}
)


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


@dataclass(frozen=True)
class Condition:
    """
    Leaf node comparing ``column`` against ``value`` with ``operator``.
    """

    column: str
    operator: Operator
    value: Any = None

    def __post_init__(self) -> None:
        if not isinstance(self.column, str) or not self.column:
            raise ExpressionError("Condition requires a column name.")
        try:
            operator = Operator(self.operator)
        except ValueError:
            raise ExpressionError(f"Unknown operator {self.operator!r}.") from None
        object.__setattr__(self, "operator", operator)

        if operator in CONNECTORS:
            raise ExpressionError(f"{operator.name} joins expressions; use Junction.")
        if operator in NULLARY:
            if self.value is not None:
                raise ExpressionError(f"{operator.name} takes no value.")
            return
        if operator in LIST_OPERATORS:
            if not _is_sequence(self.value) or not self.value:
                raise ExpressionError(f"{operator.name} requires a non-empty list of values.")
            object.__setattr__(self, "value", tuple(self.value))
            return
        if operator is Operator.BETWEEN:
            if not _is_sequence(self.value) or len(self.value) != 2:
                raise ExpressionError("BETWEEN requires exactly two values.")
            object.__setattr__(self, "value", tuple(self.value))
            return
        if _is_sequence(self.value):
            raise ExpressionError(f"{operator.name} requires a single value.")
        if operator in PATTERN_OPERATORS and self.value is None:
            raise ExpressionError(f"{operator.name} requires a value.")

    def __and__(self, other: "Expression") -> "Junction":
        return Junction(self, Operator.AND, other)

    def __or__(self, other: "Expression") -> "Junction":
        return Junction(self, Operator.OR, other)


@dataclass(frozen=True)
class Junction:
    """
    Combinator node joining two expressions with AND or OR.
    """

    left: "Expression"
    connector: Operator
    right: "Expression"

    def __post_init__(self) -> None:
        try:
            connector = Operator(self.connector)
        except ValueError:
            raise ExpressionError(f"Unknown connector {self.connector!r}.") from None
        if connector not in CONNECTORS:
            raise ExpressionError(f"Junction connector must be AND or OR, not {connector.name}.")
        object.__setattr__(self, "connector", connector)
        for side, operand in (("left", self.left), ("right", self.right)):
            if not isinstance(operand, (Condition, Junction)):
                raise ExpressionError(f"Junction {side} operand must be an expression.")

    def __and__(self, other: "Expression") -> "Junction":
        return Junction(self, Operator.AND, other)

    def __or__(self, other: "Expression") -> "Junction":
        return Junction(self, Operator.OR, other)


Expression = Union[Condition, Junction]


def _fold(connector: Operator, expressions: tuple[Expression, ...]) -> Expression:
    if not expressions:
        raise ExpressionError(f"{connector.name} requires at least one expression.")
    result = expressions[0]
    for expression in expressions[1:]:
        result = Junction(result, connector, expression)
    if not isinstance(result, (Condition, Junction)):
        raise ExpressionError(f"{connector.name} operands must be expressions.")
    return result


def all_of(*expressions: Expression) -> Expression:
    """
    AND together one or more expressions, left to right.
    """
    return _fold(Operator.AND, expressions)


def any_of(*expressions: Expression) -> Expression:
    """
    OR together one or more expressions, left to right.
    """
    return _fold(Operator.OR, expressions)


def always_true(column: str) -> Expression:
    """
    A filter matching every row: ``column IS NULL OR column IS NOT NULL``.

    Used to express an intentional unconditional DELETE.
    """
    return Junction(
        Condition(column, Operator.IS_NULL),
        Operator.OR,
        Condition(column, Operator.IS_NOT_NULL),
    )
