"""
Filter expressions, the WHERE-clause compiler, and DML statement building.
"""

from .compiler import ExpressionCompiler, compile_expression, render_value
from .expressions import (
    Condition,
    Expression,
    Junction,
    Operator,
    all_of,
    always_true,
    any_of,
)
from .statements import (
    InsertComplete,
    InsertFollowUp,
    InsertStatement,
    NeedsLookup,
    StatementBuilder,
)

__all__ = [
    "Condition",
    "Expression",
    "ExpressionCompiler",
    "InsertComplete",
    "InsertFollowUp",
    "InsertStatement",
    "Junction",
    "NeedsLookup",
    "Operator",
    "StatementBuilder",
    "all_of",
    "always_true",
    "any_of",
    "compile_expression",
    "render_value",
]
