"""
Вычислитель выражений.

Проходит по дереву выражения и вычисляет его значение относительно
контекста данных и таблицы фильтров.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping, cast

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
from .values import compare, is_truthy, lookup
from ..errors import TemplateRuntimeError

Filters = Mapping[str, Callable[[Any], Any]]


class ExpressionEvaluator:
    """
    Вычислитель выражений.

    Таблица фильтров и данные контекста только читаются;
    вычисление не изменяет переданных значений.
    """

    def __init__(self, filters: Filters):
        """
        Args:
            filters: Таблица фильтров: имя -> функция одного аргумента
        """
        self.filters = filters

    def evaluate(self, expression: Expression, data: Any) -> Any:
        """
        Вычисляет значение выражения.

        Args:
            expression: Корневой узел выражения
            data: Контекст рендеринга

        Returns:
            Значение выражения (UNDEFINED для отсутствующих данных)

        Raises:
            TemplateRuntimeError: Неизвестный фильтр или ошибка внутри фильтра
        """
        expression_type = expression.get_type()

        if expression_type == ExpressionType.VALUE:
            return cast(ValueNode, expression).value
        elif expression_type == ExpressionType.VARIABLE:
            return lookup(data, cast(VariableNode, expression).path)
        elif expression_type == ExpressionType.FILTER:
            return self._evaluate_filter(cast(FilterNode, expression), data)
        elif expression_type == ExpressionType.CONDITIONAL:
            return self._evaluate_conditional(cast(ConditionalNode, expression), data)
        elif expression_type == ExpressionType.LOGICAL:
            return self._evaluate_logical(cast(LogicalNode, expression), data)
        elif expression_type == ExpressionType.UNARY:
            return not is_truthy(self.evaluate(cast(UnaryNode, expression).operand, data))
        elif expression_type == ExpressionType.BINARY:
            return self._evaluate_binary(cast(BinaryNode, expression), data)
        else:
            raise TemplateRuntimeError(f"Unknown expression type: {expression_type}")

    def test(self, expression: Expression, data: Any) -> bool:
        """Вычисляет выражение и возвращает его истинность."""
        return is_truthy(self.evaluate(expression, data))

    def _evaluate_filter(self, expression: FilterNode, data: Any) -> Any:
        """
        Применяет фильтры слева направо к значению базового выражения.
        """
        value = self.evaluate(expression.base, data)

        for name in expression.filters:
            func = self.filters.get(name)
            if func is None:
                raise TemplateRuntimeError(f"Unknown filter: '{name}'")
            try:
                value = func(value)
            except Exception as e:
                raise TemplateRuntimeError(f"Filter '{name}' failed: {e}") from e

        return value

    def _evaluate_conditional(self, expression: ConditionalNode, data: Any) -> Any:
        if self.test(expression.test, data):
            return self.evaluate(expression.consequent, data)
        return self.evaluate(expression.alternate, data)

    def _evaluate_logical(self, expression: LogicalNode, data: Any) -> bool:
        """
        Логическое И/ИЛИ.

        Оба операнда вычисляются всегда, результат всегда булев.
        """
        left = self.test(expression.left, data)
        right = self.test(expression.right, data)

        if expression.operator == "&&":
            return left and right
        elif expression.operator == "||":
            return left or right
        else:
            raise TemplateRuntimeError(f"Unknown logical operator: '{expression.operator}'")

    def _evaluate_binary(self, expression: BinaryNode, data: Any) -> bool:
        left = self.evaluate(expression.left, data)
        right = self.evaluate(expression.right, data)
        try:
            return compare(expression.operator, left, right)
        except ValueError as e:
            raise TemplateRuntimeError(str(e)) from e


def evaluate_expression_string(text: str, data: Any, filters: Filters | None = None) -> Any:
    """
    Удобная функция для вычисления выражения из строки.

    Args:
        text: Строка выражения
        data: Контекст рендеринга
        filters: Таблица фильтров

    Returns:
        Значение выражения

    Raises:
        TemplateSyntaxError: При ошибке разбора
        TemplateRuntimeError: При ошибке вычисления
    """
    from .parser import parse_expression

    evaluator = ExpressionEvaluator(filters or {})
    return evaluator.evaluate(parse_expression(text), data)


__all__ = ["ExpressionEvaluator", "Filters", "evaluate_expression_string"]
