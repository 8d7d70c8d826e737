"""
Вычислитель шаблонов.

Обходит дерево узлов в глубину слева направо и собирает итоговую строку.
Единственная точка ожидания: чтение импортируемого файла.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .nodes import (
    TemplateNode,
    TextNode,
    OutputNode,
    CommentNode,
    IfBlockNode,
    ForBlockNode,
    ImportNode,
)
from .parser import parse
from .scanner import scan
from ..config import RenderOptions
from ..errors import TemplateRuntimeError
from ..expressions.evaluator import ExpressionEvaluator, Filters
from ..expressions.values import is_iterable_sequence, to_output
from ..io import FileSystemReader, TextReader

logger = logging.getLogger(__name__)


class TemplateEvaluator:
    """
    Вычислитель дерева шаблона.

    Контекст данных и таблица фильтров только читаются. Каждая итерация
    цикла получает собственную копию контекста с привязками переменных цикла.
    """

    def __init__(
        self,
        filters: Filters,
        options: Optional[RenderOptions] = None,
        reader: Optional[TextReader] = None,
    ):
        """
        Args:
            filters: Таблица фильтров
            options: Опции рендеринга
            reader: Источник текста для импортов
        """
        self.filters = filters
        self.options = options or RenderOptions()
        self.reader = reader or FileSystemReader()
        self.expressions = ExpressionEvaluator(filters)

    async def evaluate(self, nodes: Sequence[TemplateNode], data: Mapping[str, Any]) -> str:
        """
        Вычисляет последовательность узлов и склеивает результаты.

        Raises:
            TemplateRuntimeError: При ошибке вычисления
        """
        parts: List[str] = []
        for node in nodes:
            parts.append(await self._evaluate_node(node, data))
        return "".join(parts)

    async def _evaluate_node(self, node: TemplateNode, data: Mapping[str, Any]) -> str:
        if isinstance(node, TextNode):
            return node.text
        elif isinstance(node, OutputNode):
            return to_output(self.expressions.evaluate(node.expression, data))
        elif isinstance(node, CommentNode):
            return f"<!-- {node.text} -->" if self.options.display_comments else ""
        elif isinstance(node, IfBlockNode):
            return await self._evaluate_if(node, data)
        elif isinstance(node, ForBlockNode):
            return await self._evaluate_for(node, data)
        elif isinstance(node, ImportNode):
            return await self._evaluate_import(node, data)
        else:
            raise TemplateRuntimeError(f"Unknown node type: {type(node).__name__}")

    async def _evaluate_if(self, node: IfBlockNode, data: Mapping[str, Any]) -> str:
        """Выбранная ветка вычисляется в том же контексте."""
        if self.expressions.test(node.test, data):
            branch = node.consequent
        else:
            branch = node.alternate
        return await self.evaluate(branch or (), data)

    async def _evaluate_for(self, node: ForBlockNode, data: Mapping[str, Any]) -> str:
        """
        Цикл по последовательности или словарю.

        Последовательность: первая переменная получает элемент, вторая индекс.
        Словарь: первая переменная получает ключ, вторая значение.
        """
        iterable = self.expressions.evaluate(node.iterator, data)

        if isinstance(iterable, Mapping):
            pairs = list(iterable.items())
        elif is_iterable_sequence(iterable):
            pairs = [(item, index) for index, item in enumerate(iterable)]
        else:
            raise TemplateRuntimeError(f"'{node.source or node.iterator}' is not iterable")

        first = node.variables[0]
        second = node.variables[1] if len(node.variables) > 1 else None

        parts: List[str] = []
        for primary, secondary in pairs:
            scope: Dict[str, Any] = dict(data)
            scope[first] = primary
            if second is not None:
                scope[second] = secondary
            parts.append(await self.evaluate(node.body, scope))
        return "".join(parts)

    async def _evaluate_import(self, node: ImportNode, data: Mapping[str, Any]) -> str:
        """
        Читает, разбирает и вычисляет импортируемый шаблон.

        Без with импортируемый шаблон получает весь текущий контекст,
        с with видит только перечисленные ключи.
        """
        path = self.resolve_import_path(node.path)
        logger.debug(f"Importing template: {path}")

        try:
            text = await self.reader.read_text(path)
        except OSError as e:
            raise TemplateRuntimeError(f"imported file does not exist: {path}") from e

        nodes = parse(scan(text))

        if node.bindings is None:
            scope: Mapping[str, Any] = data
        else:
            scope = {key: self.expressions.evaluate(expression, data) for key, expression in node.bindings}

        return await self.evaluate(nodes, scope)

    def resolve_import_path(self, path: str) -> str:
        """Склеивает путь импорта с import_directory без канонизации."""
        if not self.options.import_directory:
            return path
        return os.path.join(self.options.import_directory, path)


async def evaluate(
    nodes: Sequence[TemplateNode],
    data: Mapping[str, Any],
    filters: Filters,
    options: Optional[RenderOptions] = None,
    reader: Optional[TextReader] = None,
) -> str:
    """
    Удобная функция для вычисления разобранного шаблона.

    Args:
        nodes: Результат parse()
        data: Контекст рендеринга
        filters: Таблица фильтров
        options: Опции рендеринга
        reader: Источник текста для импортов (по умолчанию файловая система)

    Returns:
        Итоговая строка
    """
    return await TemplateEvaluator(filters, options, reader).evaluate(nodes, data)


__all__ = ["TemplateEvaluator", "evaluate"]
