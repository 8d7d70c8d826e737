"""
Шаблоны: сканер, узлы, парсер и вычислитель.
"""

from __future__ import annotations

from .evaluator import TemplateEvaluator, evaluate
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
from .parser import TemplateParser, parse
from .scanner import Mark, MarkKind, TemplateScanner, scan

__all__ = [
    "TemplateEvaluator",
    "evaluate",
    "TemplateNode",
    "TemplateAST",
    "TextNode",
    "OutputNode",
    "CommentNode",
    "IfBlockNode",
    "ForBlockNode",
    "ImportNode",
    "TemplateParser",
    "parse",
    "Mark",
    "MarkKind",
    "TemplateScanner",
    "scan",
]
