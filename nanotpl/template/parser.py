"""
Парсер шаблонов.

Преобразует дерево меток сканера в дерево типизированных узлов:
текст, вывод выражений, комментарии, блоки if/for и импорты.
Выражения разбираются парсером из nanotpl.expressions.
"""

from __future__ import annotations

import re
from typing import Dict, List, Optional, Sequence, Tuple

from .nodes import (
    TemplateNode,
    TemplateAST,
    TextNode,
    OutputNode,
    CommentNode,
    IfBlockNode,
    ForBlockNode,
    ImportNode,
)
from .scanner import Mark, MarkKind, statement_keyword
from ..errors import TemplateSyntaxError
from ..expressions.model import Expression
from ..expressions.parser import (
    parse_expression,
    split_unquoted,
    is_identifier,
    unquote,
)

FOR_STATEMENT = re.compile(r"for\s+(.+?)\s+in\s+(.+)", re.DOTALL)

IMPORT_STATEMENT = re.compile(
    r"""import\s+("(?:[^"\\]|\\.)*"|'(?:[^'\\]|\\.)*')(?:\s+with\b(.*))?""",
    re.DOTALL,
)
IMPORT_OBJECT = re.compile(r"\s*\{(.*)\}\s*", re.DOTALL)


class TemplateParser:
    """
    Рекурсивный парсер дерева меток.

    Тела блоков разбираются тем же парсером, поэтому вложенность
    блоков не ограничена.
    """

    def parse(self, marks: Sequence[Mark]) -> TemplateAST:
        """
        Парсит последовательность меток в последовательность узлов.

        Raises:
            TemplateSyntaxError: При некорректных выражениях или блоках
        """
        return tuple(self._parse_mark(mark) for mark in marks)

    def _parse_mark(self, mark: Mark) -> TemplateNode:
        if mark.kind == MarkKind.TEXT:
            return TextNode(text=mark.raw_value)
        elif mark.kind == MarkKind.COMMENT:
            return CommentNode(text=mark.raw_value)
        elif mark.kind == MarkKind.TAG:
            return self._parse_tag(mark.raw_value)
        elif mark.kind == MarkKind.BLOCK:
            return self._parse_block(mark)
        else:
            raise TemplateSyntaxError(f"Unknown mark kind: {mark.kind}")

    # Теги

    def _parse_tag(self, content: str) -> TemplateNode:
        if statement_keyword(content) == "import":
            return self._parse_import(content)
        return OutputNode(expression=parse_expression(content))

    def _parse_import(self, statement: str) -> ImportNode:
        """
        Парсит import 'path' [with { key: expr, ... }].
        """
        match = IMPORT_STATEMENT.fullmatch(statement.strip())
        if not match:
            raise TemplateSyntaxError(f"Invalid import statement: '{statement}'")

        path = unquote(match.group(1))
        if not path or not path.strip():
            raise TemplateSyntaxError(f"Invalid import path: '{statement}'")

        bindings = None
        if match.group(2) is not None:
            bindings = self._parse_import_object(match.group(2))

        return ImportNode(path=path.strip(), bindings=bindings)

    def _parse_import_object(self, text: str) -> Tuple[Tuple[str, Expression], ...]:
        """
        Разбирает объект переменных импорта: { key: expr, key: expr }.

        Значения являются полноценными выражениями, вычисляемые в импортирующем контексте.
        """
        match = IMPORT_OBJECT.fullmatch(text)
        if not match:
            raise TemplateSyntaxError(f"Invalid import variable object: '{text.strip()}'")

        content = match.group(1).strip()
        if not content:
            return ()

        entries = split_unquoted(content, ",")
        # Допускаем завершающую запятую
        if len(entries) > 1 and not entries[-1].strip():
            entries = entries[:-1]

        bindings: Dict[str, Expression] = {}
        for entry in entries:
            parts = split_unquoted(entry, ":")
            if len(parts) < 2:
                raise TemplateSyntaxError(f"Invalid import variable object: '{{{content}}}'")

            raw_key = parts[0].strip()
            value = ":".join(parts[1:]).strip()
            key = unquote(raw_key)
            if key is None:
                key = raw_key

            if not is_identifier(key) or not value:
                raise TemplateSyntaxError(f"Invalid import variable object: '{{{content}}}'")

            bindings[key] = parse_expression(value)

        return tuple(bindings.items())

    # Блоки

    def _parse_block(self, mark: Mark) -> TemplateNode:
        keyword = statement_keyword(mark.raw_value)

        if keyword == "if":
            return self._parse_if(mark)
        elif keyword == "for":
            return self._parse_for(mark)
        else:
            raise TemplateSyntaxError(f"Unexpected block statement: '{mark.raw_value}'")

    def _parse_if(self, mark: Mark) -> IfBlockNode:
        test_text = mark.raw_value[len("if"):].strip()
        if not test_text:
            raise TemplateSyntaxError("Missing condition in if tag")

        children: List[Mark] = list(mark.children)
        alternate_marks: List[Mark] = []

        # Альтернатива (если есть) лежит в последнем дочернем блоке else
        if children and self._is_else(children[-1]):
            alternate_marks = children.pop().children

        return IfBlockNode(
            test=parse_expression(test_text),
            consequent=self._parse_branch(children),
            alternate=self._parse_branch(alternate_marks),
        )

    def _parse_branch(self, marks: Sequence[Mark]) -> Optional[TemplateAST]:
        nodes = self.parse(marks)
        return nodes or None

    @staticmethod
    def _is_else(mark: Mark) -> bool:
        return mark.kind == MarkKind.BLOCK and mark.raw_value == "else"

    def _parse_for(self, mark: Mark) -> ForBlockNode:
        match = FOR_STATEMENT.fullmatch(mark.raw_value)
        if not match:
            raise TemplateSyntaxError(f"Invalid for statement: '{mark.raw_value}'")

        variables = tuple(name.strip() for name in match.group(1).split(","))
        if not 1 <= len(variables) <= 2:
            raise TemplateSyntaxError(f"Invalid for statement: '{mark.raw_value}'")
        for name in variables:
            if not is_identifier(name):
                raise TemplateSyntaxError(f"Invalid variable name in for statement: '{name}'")

        source = match.group(2).strip()
        return ForBlockNode(
            variables=variables,
            iterator=parse_expression(source),
            body=self.parse(mark.children),
            source=source,
        )


def parse(marks: Sequence[Mark]) -> TemplateAST:
    """
    Удобная функция для парсинга дерева меток.

    Args:
        marks: Результат scan()

    Returns:
        Последовательность узлов шаблона

    Raises:
        TemplateSyntaxError: При синтаксической ошибке
    """
    return TemplateParser().parse(marks)


__all__ = ["TemplateParser", "parse"]
