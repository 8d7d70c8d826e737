"""
Модели данных для выражений шаблонов.

Содержит классы узлов, из которых строится дерево выражения
внутри тегов {{ ... }} и условий блоков {% if ... %} / {% for ... %}.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Tuple, Union

from .values import UNDEFINED


class ExpressionType(Enum):
    """Типы узлов выражений."""
    VALUE = "value"
    VARIABLE = "variable"
    FILTER = "filter"
    CONDITIONAL = "conditional"
    LOGICAL = "logical"
    UNARY = "unary"
    BINARY = "binary"


@dataclass(frozen=True)
class Expression(ABC):
    """Базовый абстрактный класс для всех узлов выражений."""

    @abstractmethod
    def get_type(self) -> ExpressionType:
        """Возвращает тип узла."""
        pass

    def __str__(self) -> str:
        """Строковое представление выражения."""
        return self._to_string()

    @abstractmethod
    def _to_string(self) -> str:
        """Внутренний метод для создания строкового представления."""
        pass


@dataclass(frozen=True)
class ValueNode(Expression):
    """
    Литерал: строка в кавычках, число, true/false/null/undefined.
    """
    value: Any

    def get_type(self) -> ExpressionType:
        return ExpressionType.VALUE

    def _to_string(self) -> str:
        if self.value is UNDEFINED:
            return "undefined"
        if self.value is None:
            return "null"
        if isinstance(self.value, bool):
            return "true" if self.value else "false"
        if isinstance(self.value, str):
            return f'"{self.value}"'
        return str(self.value)


@dataclass(frozen=True)
class VariableNode(Expression):
    """
    Обращение к данным контекста: name.a.b или name["a"]["b"].

    Первый элемент это корневой идентификатор, остальные являются вложенными ключами.
    """
    name: str
    keys: Tuple[str, ...] = ()
    bracketed: bool = False

    @property
    def path(self) -> Tuple[str, ...]:
        """Полный путь поиска, начиная с корня."""
        return (self.name, *self.keys)

    def get_type(self) -> ExpressionType:
        return ExpressionType.VARIABLE

    def _to_string(self) -> str:
        if self.bracketed:
            return self.name + "".join(f'["{key}"]' for key in self.keys)
        return ".".join(self.path)


@dataclass(frozen=True)
class FilterNode(Expression):
    """
    Конвейер фильтров: value | filter1 | filter2

    Фильтры применяются слева направо.
    """
    base: Expression
    filters: Tuple[str, ...]

    def get_type(self) -> ExpressionType:
        return ExpressionType.FILTER

    def _to_string(self) -> str:
        return " | ".join([str(self.base), *self.filters])


@dataclass(frozen=True)
class ConditionalNode(Expression):
    """
    Тернарное выражение: test ? consequent : alternate
    """
    test: Expression
    consequent: Expression
    alternate: Expression

    def get_type(self) -> ExpressionType:
        return ExpressionType.CONDITIONAL

    def _to_string(self) -> str:
        return f"{self.test} ? {self.consequent} : {self.alternate}"


@dataclass(frozen=True)
class LogicalNode(Expression):
    """
    Логическая операция: left && right, left || right
    """
    operator: str
    left: Expression
    right: Expression

    def get_type(self) -> ExpressionType:
        return ExpressionType.LOGICAL

    def _to_string(self) -> str:
        return f"({self.left} {self.operator} {self.right})"


@dataclass(frozen=True)
class UnaryNode(Expression):
    """
    Отрицание: !operand
    """
    operand: Expression
    operator: str = "!"

    def get_type(self) -> ExpressionType:
        return ExpressionType.UNARY

    def _to_string(self) -> str:
        return f"{self.operator}{self.operand}"


@dataclass(frozen=True)
class BinaryNode(Expression):
    """
    Сравнение: left == right, !=, >, <, >=, <=
    """
    operator: str
    left: Expression
    right: Expression

    def get_type(self) -> ExpressionType:
        return ExpressionType.BINARY

    def _to_string(self) -> str:
        return f"{self.left} {self.operator} {self.right}"


# Объединенный тип для всех выражений
AnyExpression = Union[
    ValueNode,
    VariableNode,
    FilterNode,
    ConditionalNode,
    LogicalNode,
    UnaryNode,
    BinaryNode,
]

__all__ = [
    "Expression",
    "ExpressionType",
    "ValueNode",
    "VariableNode",
    "FilterNode",
    "ConditionalNode",
    "LogicalNode",
    "UnaryNode",
    "BinaryNode",
    "AnyExpression",
]
