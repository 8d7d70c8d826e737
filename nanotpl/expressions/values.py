"""
Семантика значений времени выполнения.

Содержит маркер отсутствующего значения и правила, по которым движок
работает с данными контекста:
- поиск по пути свойств (lookup)
- истинность значений (is_truthy)
- строгое равенство и упорядочивание (strict_equals, compare)
- приведение к строке при выводе (to_output)
"""

from __future__ import annotations

import json
import math
from typing import Any, Iterable, Mapping, Sequence


class Undefined:
    """
    Маркер отсутствующего значения.

    Возвращается при обращении к несуществующему свойству контекста.
    Ложен в булевом контексте и выводится как пустая строка.
    Существует единственный экземпляр: UNDEFINED.
    """

    _instance: Undefined | None = None

    def __new__(cls) -> Undefined:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __str__(self) -> str:
        return ""


UNDEFINED = Undefined()


def is_undefined(value: Any) -> bool:
    """Проверяет, является ли значение маркером отсутствия."""
    return value is UNDEFINED


def _is_number(value: Any) -> bool:
    # bool является подклассом int, но числом в шаблонах не считается
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def lookup(root: Any, keys: Iterable[str]) -> Any:
    """
    Проходит по цепочке ключей начиная с корневого значения.

    Args:
        root: Начальное значение (обычно контекст рендеринга)
        keys: Последовательность ключей (сегменты пути или ключи в скобках)

    Returns:
        Найденное значение или UNDEFINED, если любой шаг отсутствует
    """
    current = root
    for key in keys:
        current = _step(current, key)
        if current is UNDEFINED:
            return UNDEFINED
    return current


def _step(current: Any, key: str) -> Any:
    """Один шаг поиска: словарь, индекс последовательности или публичный атрибут."""
    if current is None or current is UNDEFINED:
        return UNDEFINED

    if isinstance(current, Mapping):
        return current.get(key, UNDEFINED)

    if _is_sequence(current):
        if key.isascii() and key.isdigit():
            index = int(key)
            if index < len(current):
                return current[index]
        return UNDEFINED

    if isinstance(current, (str, int, float, bool)):
        return UNDEFINED

    if not key or key.startswith("_"):
        return UNDEFINED

    return getattr(current, key, UNDEFINED)


def is_truthy(value: Any) -> bool:
    """
    Истинность значения по правилам языка шаблонов.

    Ложны: пустая строка, 0, False, None, UNDEFINED, NaN.
    Всё остальное истинно, в том числе пустые списки и словари.
    """
    if value is None or value is UNDEFINED:
        return False
    if isinstance(value, bool):
        return value
    if _is_number(value):
        return value != 0 and not math.isnan(value)
    if isinstance(value, str):
        return value != ""
    return True


def strict_equals(left: Any, right: Any) -> bool:
    """
    Строгое равенство (без неявных приведений типов).

    Числа сравниваются по значению независимо от int/float,
    контейнеры по идентичности, остальное по типу и значению.
    """
    if _is_number(left) and _is_number(right):
        return left == right
    if isinstance(left, (list, tuple, dict)) or isinstance(right, (list, tuple, dict)):
        return left is right
    if type(left) is not type(right):
        return False
    return left == right


def _to_number(value: Any) -> float:
    """Числовое приведение операнда для сравнения разнотипных значений."""
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if _is_number(value):
        return float(value)
    if value is None:
        return 0.0
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        try:
            return float(text)
        except ValueError:
            return math.nan
    return math.nan


def compare(operator: str, left: Any, right: Any) -> bool:
    """
    Применяет оператор сравнения к двум значениям.

    Args:
        operator: Один из ==, !=, >, <, >=, <=
        left: Левый операнд
        right: Правый операнд

    Returns:
        Результат сравнения
    """
    if operator == "==":
        return strict_equals(left, right)
    if operator == "!=":
        return not strict_equals(left, right)

    if not (
        (_is_number(left) and _is_number(right))
        or (isinstance(left, str) and isinstance(right, str))
    ):
        left, right = _to_number(left), _to_number(right)
        # NaN делает любое сравнение ложным
        if math.isnan(left) or math.isnan(right):
            return False

    if operator == ">":
        return left > right
    if operator == "<":
        return left < right
    if operator == ">=":
        return left >= right
    if operator == "<=":
        return left <= right

    raise ValueError(f"Unknown comparison operator: {operator}")


def to_output(value: Any) -> str:
    """
    Приводит значение к строке для вставки в результат.

    UNDEFINED и None дают пустую строку, булевы значения дают true/false,
    последовательности дают элементы через запятую, словари дают JSON,
    NaN и бесконечности выводятся как NaN, Infinity и -Infinity.
    """
    if value is None or value is UNDEFINED:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if _is_sequence(value):
        return ",".join(to_output(item) for item in value)
    if isinstance(value, Mapping):
        return json.dumps(value, ensure_ascii=False, default=str)
    if isinstance(value, float) and not math.isfinite(value):
        if math.isnan(value):
            return "NaN"
        return "Infinity" if value > 0 else "-Infinity"
    return str(value)


def type_name(value: Any) -> str:
    """Имя типа значения в терминах языка шаблонов (string, number, boolean, ...)."""
    if value is UNDEFINED:
        return "undefined"
    if isinstance(value, bool):
        return "boolean"
    if _is_number(value):
        return "number"
    if isinstance(value, str):
        return "string"
    if callable(value):
        return "function"
    return "object"


def is_iterable_sequence(value: Any) -> bool:
    """Упорядоченная последовательность для цикла for (строки не считаются)."""
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


__all__ = [
    "Undefined",
    "UNDEFINED",
    "is_undefined",
    "lookup",
    "is_truthy",
    "strict_equals",
    "compare",
    "to_output",
    "type_name",
    "is_iterable_sequence",
]
