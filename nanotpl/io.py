"""
Источники текста для импортируемых шаблонов.

Ядро рендеринга не обращается к файловой системе напрямую: чтение
импортов идёт через объект с асинхронным методом read_text(path).
Ошибка чтения сигнализируется исключением OSError.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Mapping, Protocol

logger = logging.getLogger(__name__)


class TextReader(Protocol):
    """Асинхронный источник текста шаблонов."""

    async def read_text(self, path: str) -> str:
        """
        Возвращает содержимое по пути.

        Raises:
            OSError: Если путь не указывает на читаемый файл
        """
        ...


class FileSystemReader:
    """Чтение шаблонов с диска в отдельном потоке."""

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding

    async def read_text(self, path: str) -> str:
        logger.debug(f"Reading template file: {path}")
        try:
            return await asyncio.to_thread(Path(path).read_text, encoding=self.encoding)
        except UnicodeDecodeError as e:
            raise OSError(f"{path} is not valid {self.encoding}: {e.reason}") from e


class MemoryReader:
    """
    Шаблоны из словаря в памяти: путь -> текст.

    Подходит для тестов и шаблонов, встроенных в приложение.
    """

    def __init__(self, files: Mapping[str, str]):
        self.files = dict(files)

    async def read_text(self, path: str) -> str:
        try:
            return self.files[path]
        except KeyError:
            raise FileNotFoundError(path) from None


__all__ = ["TextReader", "FileSystemReader", "MemoryReader"]
