"""
Парсер выражений шаблонов.

Выражение разбирается по классу присутствующего оператора
в фиксированном порядке:

1. тернарный оператор      test ? consequent : alternate
2. логические операторы    ||  (слабее всех), &&, унарный !
3. сравнения               ==, !=, >=, <=, >, <
4. конвейер фильтров       value | filter1 | filter2
5. простое значение        литерал или путь к данным

Все разделители ищутся только вне строковых литералов.
"""

from __future__ import annotations

import re
from typing import List, Optional, Tuple

from .model import (
    Expression,
    ValueNode,
    VariableNode,
    FilterNode,
    ConditionalNode,
    LogicalNode,
    UnaryNode,
    BinaryNode,
)
from .values import UNDEFINED
from ..errors import TemplateSyntaxError

QUOTES = "\"'"

IDENTIFIER = re.compile(r"[0-9a-zA-Z_$]+")
NUMBER = re.compile(r"-?(?:\d+(?:\.\d*)?|\.\d+)")
QUOTED = re.compile(r'"((?:[^"\\]|\\.)*)"|\'((?:[^\'\\]|\\.)*)\'', re.DOTALL)

# Ключ в квадратных скобках: строковый литерал или неотрицательный индекс
_BRACKET_KEY = r'\[\s*(?:"(?:[^"\\]|\\.)*"|\'(?:[^\'\\]|\\.)*\'|[0-9]+)\s*\]'
BRACKET_KEY = re.compile(_BRACKET_KEY)
BRACKETED = re.compile(r"([0-9a-zA-Z_$]+)((?:" + _BRACKET_KEY + r")+)")

KEYWORDS = {
    "null": None,
    "undefined": UNDEFINED,
    "true": True,
    "false": False,
}

COMPARISON_OPERATORS = ("==", "!=", ">=", "<=", ">", "<")

_ARITHMETIC_CHARS = set("+-*/%")
_COMPOSITE_CHARS = set("[]{},")
_CALL_CHARS = set("()")


# --------------------------------------------------------------------------- #
# Разбиение с учётом кавычек
# --------------------------------------------------------------------------- #

def _iter_unquoted(text: str):
    """
    Перебирает позиции символов, находящихся вне строковых литералов.

    Кавычка переключает состояние, только если она не экранирована
    и совпадает с открывающей.
    """
    quote: Optional[str] = None
    escaped = False
    for index, char in enumerate(text):
        if quote:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == quote:
                quote = None
            continue
        if char in QUOTES:
            quote = char
            continue
        yield index


def split_unquoted(text: str, separator: str) -> List[str]:
    """
    Разбивает строку по разделителю, игнорируя вхождения внутри кавычек.

    Args:
        text: Исходная строка
        separator: Разделитель (один или несколько символов)

    Returns:
        Список сегментов (без обрезки пробелов)
    """
    parts: List[str] = []
    start = 0
    skip_until = 0
    for index in _iter_unquoted(text):
        if index < skip_until:
            continue
        if text.startswith(separator, index):
            parts.append(text[start:index])
            start = index + len(separator)
            skip_until = start
    parts.append(text[start:])
    return parts


def split_ternary(text: str) -> Tuple[List[str], List[str]]:
    """
    Разбивает тернарное выражение по символам ? и : вне кавычек.

    Returns:
        Пара (сегменты, найденные разделители в порядке появления)
    """
    segments: List[str] = []
    separators: List[str] = []
    start = 0
    for index in _iter_unquoted(text):
        char = text[index]
        if char in "?:":
            segments.append(text[start:index])
            separators.append(char)
            start = index + 1
    segments.append(text[start:])
    return segments, separators


def find_comparison(text: str) -> Optional[Tuple[int, str]]:
    """
    Находит первый оператор сравнения вне кавычек.

    Returns:
        Пара (позиция, оператор) или None
    """
    for index in _iter_unquoted(text):
        pair = text[index:index + 2]
        if pair in ("==", "!=", ">=", "<="):
            return index, pair
        if text[index] in "<>":
            return index, text[index]
    return None


def has_unquoted(text: str, needle: str) -> bool:
    """Проверяет наличие подстроки вне строковых литералов."""
    return any(text.startswith(needle, index) for index in _iter_unquoted(text))


def is_identifier(name: str) -> bool:
    """Проверяет имя переменной или фильтра."""
    return bool(IDENTIFIER.fullmatch(name))


def unquote(text: str) -> Optional[str]:
    """
    Возвращает содержимое строкового литерала или None, если это не литерал.
    """
    match = QUOTED.fullmatch(text)
    if not match:
        return None
    inner = match.group(1) if match.group(1) is not None else match.group(2)
    return re.sub(r"\\(.)", r"\1", inner)


# --------------------------------------------------------------------------- #
# Значения
# --------------------------------------------------------------------------- #

def parse_value(text: str) -> Expression:
    """
    Разбирает простое значение.

    Порядок проверки: строковый литерал, ключевые слова, число,
    обращение через квадратные скобки, путь через точки.

    Raises:
        TemplateSyntaxError: Для недопустимых имён и неподдерживаемых конструкций
    """
    text = text.strip()

    if text == "":
        return ValueNode("")

    literal = unquote(text)
    if literal is not None:
        return ValueNode(literal)

    if text in KEYWORDS:
        return ValueNode(KEYWORDS[text])

    if NUMBER.fullmatch(text):
        return ValueNode(float(text) if "." in text else int(text))

    if text[0] in "[{":
        raise TemplateSyntaxError(f"Composite literals are not supported: '{text}'")

    if "[" in text:
        return _parse_bracketed(text)

    _reject_unsupported(text)

    segments = text.split(".")
    for segment in segments:
        if not is_identifier(segment):
            raise TemplateSyntaxError(f"Invalid variable name: '{text}'")

    return VariableNode(name=segments[0], keys=tuple(segments[1:]))


def _parse_bracketed(text: str) -> VariableNode:
    """Разбирает обращение вида root["key"]["key2"]."""
    remainder = BRACKET_KEY.sub("", text)
    if "." in remainder:
        raise TemplateSyntaxError(
            f"Mixing dot and bracket notation is not supported: '{text}'"
        )

    match = BRACKETED.fullmatch(text)
    if not match:
        raise TemplateSyntaxError(f"Invalid bracket notation: '{text}'")

    keys = []
    for raw_key in BRACKET_KEY.findall(match.group(2)):
        inner = raw_key.strip()[1:-1].strip()
        literal = unquote(inner)
        keys.append(literal if literal is not None else inner)

    return VariableNode(name=match.group(1), keys=tuple(keys), bracketed=True)


def _reject_unsupported(text: str) -> None:
    """Отдельные сообщения для арифметики, составных литералов и вызовов."""
    chars = set(text)
    if chars & _ARITHMETIC_CHARS:
        raise TemplateSyntaxError(f"Arithmetic expressions are not supported: '{text}'")
    if chars & _COMPOSITE_CHARS:
        raise TemplateSyntaxError(f"Composite literals are not supported: '{text}'")
    if chars & _CALL_CHARS:
        raise TemplateSyntaxError(f"Function calls are not supported: '{text}'")


# --------------------------------------------------------------------------- #
# Выражения
# --------------------------------------------------------------------------- #

def parse_expression(text: str) -> Expression:
    """
    Разбирает полное выражение в дерево узлов.

    Args:
        text: Содержимое тега без ограничителей

    Returns:
        Корневой узел выражения

    Raises:
        TemplateSyntaxError: При синтаксической ошибке
    """
    text = text.strip()

    if has_unquoted(text, "?"):
        return _parse_conditional(text)

    logical = _parse_logical(text)
    if logical is not None:
        return logical

    if find_comparison(text) is not None:
        return _parse_binary(text)

    if has_unquoted(text, "|"):
        return _parse_filter(text)

    return parse_value(text)


def _parse_conditional(text: str) -> ConditionalNode:
    segments, separators = split_ternary(text)
    if len(segments) != 3 or separators != ["?", ":"]:
        raise TemplateSyntaxError(f"Invalid conditional expression: '{text}'")

    parts = [segment.strip() for segment in segments]
    if not all(parts):
        raise TemplateSyntaxError(f"Invalid conditional expression: '{text}'")

    test, consequent, alternate = (parse_expression(part) for part in parts)
    return ConditionalNode(test=test, consequent=consequent, alternate=alternate)


def _parse_logical(text: str) -> Optional[Expression]:
    """
    Логические операторы: || слабее &&, ! сильнее обоих.

    Внутри одного уровня операции левоассоциативны.
    """
    for operator in ("||", "&&"):
        segments = split_unquoted(text, operator)
        if len(segments) < 2:
            continue
        if not all(segment.strip() for segment in segments):
            raise TemplateSyntaxError(f"Invalid logical expression: '{text}'")

        result = parse_expression(segments[0])
        for segment in segments[1:]:
            result = LogicalNode(operator=operator, left=result, right=parse_expression(segment))
        return result

    if text.startswith("!") and not text.startswith("!="):
        operand = text[1:].strip()
        if not operand:
            raise TemplateSyntaxError(f"Invalid logical expression: '{text}'")
        return UnaryNode(operand=parse_expression(operand))

    return None


def _parse_binary(text: str) -> BinaryNode:
    index, operator = find_comparison(text)
    left = text[:index].strip()
    right = text[index + len(operator):].strip()
    if not left or not right:
        raise TemplateSyntaxError(f"Invalid binary expression: '{text}'")
    return BinaryNode(operator=operator, left=parse_expression(left), right=parse_expression(right))


def _parse_filter(text: str) -> FilterNode:
    segments = [segment.strip() for segment in split_unquoted(text, "|")]
    base, filters = segments[0], segments[1:]

    if not base or not filters or not all(filters):
        raise TemplateSyntaxError(f"Invalid filter syntax: '{text}'")

    for name in filters:
        if not is_identifier(name):
            raise TemplateSyntaxError(f"Invalid filter name: '{name}'")

    return FilterNode(base=parse_value(base), filters=tuple(filters))


__all__ = [
    "parse_value",
    "parse_expression",
    "split_unquoted",
    "split_ternary",
    "find_comparison",
    "has_unquoted",
    "is_identifier",
    "unquote",
    "COMPARISON_OPERATORS",
]
