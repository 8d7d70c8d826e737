"""
Узлы дерева шаблона.

Определяет неизменяемые классы узлов верхнего уровня: текст, вывод выражения,
комментарии, блоки if/for и импорт. Выражения внутри узлов представлены
классами из nanotpl.expressions.model.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from ..expressions.model import Expression


@dataclass(frozen=True)
class TemplateNode:
    """Базовый класс для всех узлов шаблона."""
    pass


# Алиас для последовательности узлов (тело шаблона или блока)
TemplateAST = Tuple[TemplateNode, ...]


@dataclass(frozen=True)
class TextNode(TemplateNode):
    """
    Обычный текстовый контент в шаблоне.

    Выводится в результат как есть.
    """
    text: str


@dataclass(frozen=True)
class OutputNode(TemplateNode):
    """Тег {{ expression }}: результат выражения выводится строкой."""
    expression: Expression


@dataclass(frozen=True)
class CommentNode(TemplateNode):
    """
    Комментарий {# text #}.

    По умолчанию ничего не выводит; при display_comments
    выводится как HTML-комментарий.
    """
    text: str


@dataclass(frozen=True)
class IfBlockNode(TemplateNode):
    """
    Условный блок {% if test %}...{% else %}...{% endif %}.

    Ветки либо отсутствуют (None), либо непусты. Цепочки elseif приходят
    сюда уже в виде вложенного IfBlockNode внутри alternate.
    """
    test: Expression
    consequent: Optional[TemplateAST] = None
    alternate: Optional[TemplateAST] = None


@dataclass(frozen=True)
class ForBlockNode(TemplateNode):
    """
    Цикл {% for item[, second] in iterator %}...{% endfor %}.

    Для последовательностей: элемент и индекс.
    Для словарей: ключ и значение.
    """
    variables: Tuple[str, ...]
    iterator: Expression
    body: TemplateAST
    source: str = ""  # Исходный текст итерируемого выражения для диагностики


@dataclass(frozen=True)
class ImportNode(TemplateNode):
    """
    Импорт шаблона {{ import 'path' [with { key: expr, ... }] }}.

    bindings is None: импортируемый шаблон видит весь текущий контекст.
    Иначе он видит только перечисленные ключи, вычисленные в текущем контексте.
    """
    path: str
    bindings: Optional[Tuple[Tuple[str, Expression], ...]] = None


__all__ = [
    "TemplateNode",
    "TemplateAST",
    "TextNode",
    "OutputNode",
    "CommentNode",
    "IfBlockNode",
    "ForBlockNode",
    "ImportNode",
]
