from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

DEFAULT_CFG_FILE = "nanotpl.yaml"

# --------------------------------------------------------------------------- #
# ДЕФОЛТЫ ОПЦИЙ РЕНДЕРИНГА
# --------------------------------------------------------------------------- #
_DEFAULT_CFG: Dict[str, Any] = {
    "display_comments": False,
    "import_directory": "",
}

# --------------------------------------------------------------------------- #
# YAML loader (JSON читается им же)
# --------------------------------------------------------------------------- #
_yaml = YAML(typ="safe")


@dataclass(frozen=True)
class RenderOptions:
    """
    Опции рендеринга.

    display_comments: выводить {# ... #} как <!-- ... -->
    import_directory: базовая директория для путей в import
    """
    display_comments: bool = False
    import_directory: str = ""

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> RenderOptions:
        """Создаёт опции из словаря, отклоняя неизвестные ключи."""
        unknown = set(raw) - set(_DEFAULT_CFG)
        if unknown:
            raise ValueError(f"Unknown render options: {', '.join(sorted(unknown))}")

        display_comments = raw.get("display_comments", False)
        if not isinstance(display_comments, bool):
            raise ValueError(
                f"Option 'display_comments' must be a boolean, got {type(display_comments).__name__}"
            )

        import_directory = raw.get("import_directory") or ""
        if isinstance(import_directory, os.PathLike):
            import_directory = os.fspath(import_directory)
        if not isinstance(import_directory, str):
            raise ValueError(
                f"Option 'import_directory' must be a string, got {type(import_directory).__name__}"
            )

        return cls(display_comments=display_comments, import_directory=import_directory)

    @classmethod
    def coerce(cls, options: Union[RenderOptions, Mapping[str, Any], None]) -> RenderOptions:
        """Приводит опции из любого поддерживаемого вида к RenderOptions."""
        if options is None:
            return cls()
        if isinstance(options, RenderOptions):
            return options
        if isinstance(options, Mapping):
            return cls.from_mapping(options)
        raise TypeError(f"Unsupported options type: {type(options).__name__}")


# --------------------------------------------------------------------------- #
# HELPERS
# --------------------------------------------------------------------------- #
def _merge_defaults(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Накладываем значения пользователя поверх дефолтов."""
    cfg = _DEFAULT_CFG.copy()
    cfg.update(raw)                      # пользовательские ключи перекрывают
    return cfg


def _load_yaml(path: Path) -> Any:
    with path.open(encoding="utf-8") as f:
        try:
            return _yaml.load(f)
        except YAMLError as e:
            raise ValueError(f"Failed to parse {path}: {e}") from e


# --------------------------------------------------------------------------- #
# PUBLIC API
# --------------------------------------------------------------------------- #
def load_config(path: Optional[Path] = None) -> RenderOptions:
    """
    Загрузить nanotpl.yaml.

    • Если файла нет, вернуть дефолты.
    • Документ должен быть словарём опций рендеринга.
    """
    path = path or Path(DEFAULT_CFG_FILE)
    if not path.exists():
        return RenderOptions()

    raw = _load_yaml(path) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"Config file {path} must contain a mapping")

    return RenderOptions.from_mapping(_merge_defaults(raw))


def load_data(path: Path) -> Dict[str, Any]:
    """
    Загрузить контекст рендеринга из YAML или JSON файла.

    Пустой файл даёт пустой контекст; верхний уровень обязан быть словарём.
    """
    raw = _load_yaml(path)
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ValueError(f"Data file {path} must contain a mapping at the top level")
    return raw


__all__ = ["RenderOptions", "load_config", "load_data", "DEFAULT_CFG_FILE"]
