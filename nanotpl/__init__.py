"""
Nano template engine.

Превращает текст шаблона с тегами {{ }}, {% %} и {# #} в строку
по контексту данных и таблице фильтров.
"""

from __future__ import annotations

from .config import RenderOptions, load_config, load_data
from .engine import render, render_file, render_sync
from .errors import NanoUserError, TemplateRuntimeError, TemplateSyntaxError
from .expressions.values import UNDEFINED, Undefined
from .filters import DEFAULT_FILTERS
from .io import FileSystemReader, MemoryReader, TextReader
from .template import evaluate, parse, scan

__all__ = [
    "render",
    "render_sync",
    "render_file",
    "scan",
    "parse",
    "evaluate",
    "RenderOptions",
    "load_config",
    "load_data",
    "NanoUserError",
    "TemplateSyntaxError",
    "TemplateRuntimeError",
    "UNDEFINED",
    "Undefined",
    "DEFAULT_FILTERS",
    "TextReader",
    "FileSystemReader",
    "MemoryReader",
]
