"""
SQL compilation utilities translating filter expressions into WHERE fragments.
"""

from __future__ import annotations

import math
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Final

from ..dialects.base import Dialect
from ..errors import ExpressionError
from .expressions import Condition, Expression, Junction, Operator

COMPARISON_OPERATORS: Final[dict[Operator, str]] = {
    Operator.EQUALS: "=",
    Operator.NOT_EQUALS: "<>",
    Operator.GREATER_THAN: ">",
    Operator.GREATER_THAN_OR_EQUAL: ">=",
    Operator.LESS_THAN: "<",
    Operator.LESS_THAN_OR_EQUAL: "<=",
}

# (keyword, prefix wildcard, suffix wildcard)
PATTERN_OPERATORS: Final[dict[Operator, tuple[str, str, str]]] = {
    Operator.CONTAINS: ("LIKE", "%", "%"),
    Operator.CONTAINS_NOT: ("NOT LIKE", "%", "%"),
    Operator.STARTS_WITH: ("LIKE", "", "%"),
    Operator.ENDS_WITH: ("LIKE", "%", ""),
}


def render_value(value: Any, dialect: Dialect) -> str:
    """
    Render a Python value as an inline SQL literal for ``dialect``.

    ``None`` becomes the ``null`` keyword, numbers stay unquoted, timestamps go
    through the dialect's timestamp format, and strings through its literal
    escaping (including the wide-string form for non-ASCII text). NaN and
    infinities have no literal form and raise ``ExpressionError``.
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, (datetime, date)):
        return f"'{dialect.format_timestamp(value)}'"
    if isinstance(value, float) and not math.isfinite(value):
        raise ExpressionError(f"Cannot render non-finite number {value!r} as SQL.")
    if isinstance(value, Decimal) and not value.is_finite():
        raise ExpressionError(f"Cannot render non-finite number {value!r} as SQL.")
    if isinstance(value, (int, float, Decimal)):
        return str(value)
    if isinstance(value, str):
        return dialect.quote_string_literal(value)
    raise ExpressionError(f"Cannot render value of type {type(value).__name__} as SQL.")


class ExpressionCompiler:
    """
    Compile expression trees into dialect-specific WHERE-clause fragments.

    The output never includes the ``WHERE`` keyword itself.
    """

    def __init__(self, dialect: Dialect) -> None:
        self.dialect = dialect

    def compile(self, expression: Expression) -> str:
        if isinstance(expression, Junction):
            return self._compile_junction(expression)
        if isinstance(expression, Condition):
            return self._compile_condition(expression)
        raise ExpressionError(f"Cannot compile {type(expression).__name__} as a filter.")

    def render_value(self, value: Any) -> str:
        return render_value(value, self.dialect)

    # Compilation helpers -----------------------------------------------
    def _compile_junction(self, junction: Junction) -> str:
        left = self.compile(junction.left)
        right = self.compile(junction.right)
        keyword = "AND" if junction.connector is Operator.AND else "OR"
        return f"({left}) {keyword} ({right})"

    def _compile_condition(self, condition: Condition) -> str:
        column = self.dialect.quote_identifier(condition.column)
        operator = condition.operator
        value = condition.value

        if operator is Operator.IS_NULL:
            return f"{column} IS NULL"
        if operator is Operator.IS_NOT_NULL:
            return f"{column} IS NOT NULL"

        if operator in COMPARISON_OPERATORS:
            if value is None:
                if operator is Operator.EQUALS:
                    return f"{column} IS NULL"
                if operator is Operator.NOT_EQUALS:
                    return f"{column} IS NOT NULL"
                raise ExpressionError(f"{operator.name} cannot compare against NULL.")
            return f"{column} {COMPARISON_OPERATORS[operator]} {self._scalar(value, operator)}"

        if operator in (Operator.IN, Operator.NOT_IN):
            if not value:
                raise ExpressionError(f"{operator.name} requires a non-empty list of values.")
            rendered = ", ".join(self._scalar(item, operator) for item in value)
            keyword = "IN" if operator is Operator.IN else "NOT IN"
            return f"{column} {keyword} ({rendered})"

        if operator is Operator.BETWEEN:
            if len(value) != 2:
                raise ExpressionError("BETWEEN requires exactly two values.")
            lower, upper = value
            if lower is None or upper is None:
                raise ExpressionError("BETWEEN bounds cannot be NULL.")
            return (
                f"{column} BETWEEN {self._scalar(lower, operator)} "
                f"AND {self._scalar(upper, operator)}"
            )

        if operator in PATTERN_OPERATORS:
            keyword, prefix, suffix = PATTERN_OPERATORS[operator]
            return f"{column} {keyword} {self._pattern(value, prefix, suffix, operator)}"

        raise ExpressionError(f"Operator {operator.name} is not valid in a condition.")

    def _scalar(self, value: Any, operator: Operator) -> str:
        if isinstance(value, (list, tuple, dict, set)):
            raise ExpressionError(f"{operator.name} values must be scalars.")
        return self.render_value(value)

    def _pattern(self, value: Any, prefix: str, suffix: str, operator: Operator) -> str:
        if isinstance(value, bool) or not isinstance(value, (str, int, float, Decimal)):
            raise ExpressionError(f"{operator.name} requires a string or numeric value.")
        return self.dialect.quote_string_literal(f"{prefix}{value}{suffix}")


def compile_expression(expression: Expression, dialect: Dialect) -> str:
    """
    Shorthand for ``ExpressionCompiler(dialect).compile(expression)``.
    """
    return ExpressionCompiler(dialect).compile(expression)
