"""
Публичный API движка шаблонов.

Объединяет сканер, парсер и вычислитель в одну точку входа:
render(template_text, data, filters, options) -> str.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from .config import RenderOptions
from .errors import TemplateRuntimeError
from .expressions.evaluator import Filters
from .io import FileSystemReader, TextReader
from .template.evaluator import evaluate
from .template.parser import parse
from .template.scanner import scan

logger = logging.getLogger(__name__)

Options = Union[RenderOptions, Mapping[str, Any], None]


async def render(
    template: str,
    data: Optional[Mapping[str, Any]] = None,
    filters: Optional[Filters] = None,
    options: Options = None,
    *,
    reader: Optional[TextReader] = None,
) -> str:
    """
    Рендерит текст шаблона.

    Args:
        template: Текст шаблона
        data: Контекст рендеринга
        filters: Таблица фильтров (имя -> функция одного аргумента)
        options: RenderOptions или словарь с ключами display_comments / import_directory
        reader: Источник текста для импортов (по умолчанию файловая система)

    Returns:
        Итоговая строка

    Raises:
        TemplateSyntaxError: При ошибке сканирования или разбора
        TemplateRuntimeError: При ошибке вычисления
    """
    render_options = RenderOptions.coerce(options)
    nodes = parse(scan(template))
    result = await evaluate(nodes, data or {}, filters or {}, render_options, reader)
    logger.debug(f"Rendered template: {len(template)} -> {len(result)} chars")
    return result


def render_sync(
    template: str,
    data: Optional[Mapping[str, Any]] = None,
    filters: Optional[Filters] = None,
    options: Options = None,
    *,
    reader: Optional[TextReader] = None,
) -> str:
    """Синхронная обёртка над render() для кода без цикла событий."""
    return asyncio.run(render(template, data, filters, options, reader=reader))


async def render_file(
    path: Union[str, Path],
    data: Optional[Mapping[str, Any]] = None,
    filters: Optional[Filters] = None,
    options: Options = None,
    *,
    reader: Optional[TextReader] = None,
) -> str:
    """
    Читает шаблон через reader и рендерит его.

    Raises:
        TemplateRuntimeError: Если файл шаблона не читается
    """
    reader = reader or FileSystemReader()
    try:
        template = await reader.read_text(str(path))
    except OSError as e:
        raise TemplateRuntimeError(f"template file does not exist: {path}") from e
    return await render(template, data, filters, options, reader=reader)


__all__ = ["render", "render_sync", "render_file"]
