"""
Сканер шаблонов.

Разбивает исходный текст на плоский поток меток (текст, теги, комментарии,
блоки) и собирает блоки {% if %} / {% for %} в дерево с помощью явного стека,
проверяя баланс открывающих и закрывающих тегов.

Цепочки elseif/else нормализуются: if/elseif/else превращается во вложенные
блоки if-внутри-else, неотличимые от записанных вручную.
"""

from __future__ import annotations

import enum
import logging
import re
from dataclasses import dataclass, field
from typing import List, Sequence

from ..errors import TemplateSyntaxError

logger = logging.getLogger(__name__)


class MarkKind(enum.Enum):
    """Типы меток сканера."""
    BLOCK = "BLOCK"      # {% if/elseif/else/for %}
    TAG = "TAG"          # {{ expression }}
    COMMENT = "COMMENT"  # {# comment #}
    TEXT = "TEXT"        # всё остальное


@dataclass
class Mark:
    """
    Промежуточная лексическая единица.

    raw_value: содержимое тега без ограничителей (обрезанное) или текст как есть.
    children заполняется только у блоков.
    """
    kind: MarkKind
    raw_value: str
    children: List[Mark] = field(default_factory=list)

    def __repr__(self) -> str:
        if self.kind == MarkKind.BLOCK:
            return f"Mark({self.kind.name}, {self.raw_value!r}, children={self.children!r})"
        return f"Mark({self.kind.name}, {self.raw_value!r})"


# Области, в которых переводы строк и табуляция сохраняются как есть
PROTECTED = re.compile(
    r"(<pre\b.*?</pre>|<textarea\b.*?</textarea>|\{#.*?#\})",
    re.DOTALL | re.IGNORECASE,
)
WHITESPACE = re.compile(r"[\r\n\t]")

TAGS = re.compile(r"(\{%.*?%\}|\{\{.*?\}\}|\{#.*?#\})", re.DOTALL)

BLOCK_KEYWORDS = ("if", "for", "elseif", "else")
OPENING_KEYWORDS = ("if", "for")


def normalize_whitespace(text: str) -> str:
    """
    Удаляет переводы строк и табуляцию вне защищённых областей.

    Защищённые области (<pre>, <textarea>, комментарии шаблона)
    захватываются до очистки и возвращаются на место байт в байт.
    """
    parts = PROTECTED.split(text)
    # Нечётные элементы: захваченные защищённые области
    return "".join(
        part if index % 2 else WHITESPACE.sub("", part)
        for index, part in enumerate(parts)
    )


def statement_keyword(statement: str) -> str:
    """Первое слово оператора блока: 'if a' -> 'if'."""
    parts = statement.split(None, 1)
    return parts[0] if parts else ""


def unwind_chain(chain: Sequence[Mark]) -> Mark:
    """
    Нормализует цепочку if/elseif/else в один блок if.

    Args:
        chain: Открывающий блок и следующие за ним ветки elseif/else
               в порядке появления в шаблоне

    Returns:
        Новый блок, в котором альтернатива представлена последним дочерним
        блоком else; каждый elseif становится блоком if внутри else

    Raises:
        TemplateSyntaxError: При ветках в блоке for, else не в конце цепочки
                             или некорректных ветках
    """
    head, branches = chain[0], list(chain[1:])
    if not branches:
        return head

    if statement_keyword(head.raw_value) != "if":
        raise TemplateSyntaxError(
            f"Unexpected '{branches[0].raw_value}' inside '{head.raw_value}' block"
        )

    branch = branches[0]
    keyword = statement_keyword(branch.raw_value)

    if keyword == "else":
        if branch.raw_value != "else":
            raise TemplateSyntaxError(f"Invalid else tag: '{branch.raw_value}'")
        if len(branches) > 1:
            raise TemplateSyntaxError("Else must be the last branch of an if block")
        alternate = Mark(MarkKind.BLOCK, "else", list(branch.children))
    else:
        condition = branch.raw_value[len("elseif"):].strip()
        if not condition:
            raise TemplateSyntaxError("Missing condition in elseif tag")
        nested = Mark(MarkKind.BLOCK, f"if {condition}", list(branch.children))
        alternate = Mark(MarkKind.BLOCK, "else", [unwind_chain([nested, *branches[1:]])])

    return Mark(MarkKind.BLOCK, head.raw_value, [*head.children, alternate])


class TemplateScanner:
    """
    Сканер шаблонов.

    Поддерживает стек открытых блоков и параллельный стек открывающих
    операторов (только if/for). Метки, созданные при непустом стеке блоков,
    становятся дочерними для верхнего блока.
    """

    def __init__(self, text: str):
        self.text = text
        self.marks: List[Mark] = []
        self.blocks: List[Mark] = []
        self.openings: List[str] = []

    def scan(self) -> List[Mark]:
        """
        Сканирует весь текст и возвращает дерево меток верхнего уровня.

        Raises:
            TemplateSyntaxError: При несбалансированных или некорректных тегах
        """
        self.marks, self.blocks, self.openings = [], [], []

        normalized = normalize_whitespace(self.text)
        for lexeme in TAGS.split(normalized):
            if lexeme:
                self._process_lexeme(lexeme)

        if self.blocks:
            raise TemplateSyntaxError(f"Missing end tag for '{self.blocks[-1].raw_value}'")

        logger.debug(f"Scanned {len(self.marks)} top-level marks")
        return self.marks

    def _process_lexeme(self, lexeme: str) -> None:
        kind = self._classify(lexeme)

        if kind == MarkKind.TEXT:
            self._output(Mark(MarkKind.TEXT, lexeme))
            return

        content = lexeme[2:-2].strip()

        if kind == MarkKind.BLOCK:
            self._process_block(content)
        else:
            self._output(Mark(kind, content))

    def _process_block(self, statement: str) -> None:
        keyword = statement_keyword(statement)

        if keyword.startswith("end"):
            self._close_block(statement, keyword[3:])
            return

        if keyword not in BLOCK_KEYWORDS:
            raise TemplateSyntaxError(f"Invalid block statement: '{statement}'")

        self.blocks.append(Mark(MarkKind.BLOCK, statement))
        if keyword in OPENING_KEYWORDS:
            self.openings.append(statement)

    def _close_block(self, statement: str, kind: str) -> None:
        if not self.openings:
            raise TemplateSyntaxError(f"Redundant end tag: '{statement}'")

        opening = self.openings.pop()
        if statement != f"end{kind}" or statement_keyword(opening) != kind:
            raise TemplateSyntaxError(
                f"Invalid end tag: '{statement}' does not close '{opening}'"
            )

        # Снимаем ветки elseif/else вплоть до открывающего блока
        chain: List[Mark] = []
        while True:
            mark = self.blocks.pop()
            chain.append(mark)
            if statement_keyword(mark.raw_value) in OPENING_KEYWORDS:
                break
        chain.reverse()

        self._output(unwind_chain(chain))

    def _output(self, mark: Mark) -> None:
        if self.blocks:
            self.blocks[-1].children.append(mark)
        else:
            self.marks.append(mark)

    @staticmethod
    def _classify(lexeme: str) -> MarkKind:
        if lexeme.startswith("{%") and lexeme.endswith("%}"):
            return MarkKind.BLOCK
        if lexeme.startswith("{{") and lexeme.endswith("}}"):
            return MarkKind.TAG
        if lexeme.startswith("{#") and lexeme.endswith("#}"):
            return MarkKind.COMMENT
        return MarkKind.TEXT


def scan(text: str) -> List[Mark]:
    """
    Удобная функция для сканирования шаблона.

    Args:
        text: Исходный текст шаблона

    Returns:
        Список меток верхнего уровня

    Raises:
        TemplateSyntaxError: При ошибке структуры блоков
    """
    return TemplateScanner(text).scan()


__all__ = [
    "Mark",
    "MarkKind",
    "TemplateScanner",
    "scan",
    "normalize_whitespace",
    "unwind_chain",
    "statement_keyword",
]
