"""
Выражения шаблонов: модель, парсер, семантика значений и вычислитель.
"""

from __future__ import annotations

from .evaluator import ExpressionEvaluator, evaluate_expression_string
from .model import (
    Expression,
    ExpressionType,
    ValueNode,
    VariableNode,
    FilterNode,
    ConditionalNode,
    LogicalNode,
    UnaryNode,
    BinaryNode,
)
from .parser import parse_expression, parse_value
from .values import UNDEFINED, Undefined, is_truthy, to_output

__all__ = [
    "ExpressionEvaluator",
    "evaluate_expression_string",
    "Expression",
    "ExpressionType",
    "ValueNode",
    "VariableNode",
    "FilterNode",
    "ConditionalNode",
    "LogicalNode",
    "UnaryNode",
    "BinaryNode",
    "parse_expression",
    "parse_value",
    "UNDEFINED",
    "Undefined",
    "is_truthy",
    "to_output",
]
