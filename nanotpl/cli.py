from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Any, Dict

from .config import RenderOptions, load_config, load_data
from .engine import render_file
from .errors import NanoUserError
from .filters import DEFAULT_FILTERS
from .version import tool_version


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="nanotpl",
        description="Nano template engine",
        add_help=True,
    )
    p.add_argument("-v", "--version", action="version", version=f"%(prog)s {tool_version()}")
    sub = p.add_subparsers(dest="cmd", required=True)

    sp = sub.add_parser("render", help="отрендерить шаблон")
    sp.add_argument("template", help="путь к файлу шаблона")
    sp.add_argument(
        "--data",
        metavar="FILE",
        help="YAML/JSON файл с контекстом рендеринга",
    )
    sp.add_argument(
        "--config",
        metavar="FILE",
        help="файл опций (по умолчанию ./nanotpl.yaml, если есть)",
    )
    sp.add_argument(
        "--import-dir",
        dest="import_dir",
        default=None,
        help="базовая директория для {{ import '...' }}",
    )
    sp.add_argument(
        "--display-comments",
        action="store_true",
        help="выводить {# ... #} как HTML-комментарии",
    )
    sp.add_argument("-o", "--output", metavar="FILE", help="записать результат в файл")
    sp.add_argument("--verbose", action="store_true", help="отладочный лог в stderr")

    return p


def _setup_logging(verbose: bool) -> None:
    root = logging.getLogger("nanotpl")
    if root.handlers:
        return
    h = logging.StreamHandler()
    h.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    root.addHandler(h)
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)


def _options(ns: argparse.Namespace) -> RenderOptions:
    # Флаги командной строки перекрывают файл опций
    base = load_config(Path(ns.config) if ns.config else None)
    return RenderOptions(
        display_comments=ns.display_comments or base.display_comments,
        import_directory=ns.import_dir if ns.import_dir is not None else base.import_directory,
    )


def _data(ns: argparse.Namespace) -> Dict[str, Any]:
    if not ns.data:
        return {}
    return load_data(Path(ns.data))


def main(argv: list[str] | None = None) -> int:
    ns = _build_parser().parse_args(argv)
    _setup_logging(bool(getattr(ns, "verbose", False)))

    try:
        if ns.cmd == "render":
            text = asyncio.run(render_file(ns.template, _data(ns), DEFAULT_FILTERS, _options(ns)))
            if ns.output:
                Path(ns.output).write_text(text, encoding="utf-8")
            else:
                sys.stdout.write(text)
            return 0

    except NanoUserError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2
    except (ValueError, OSError) as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2

    return 2


if __name__ == "__main__":
    raise SystemExit(main())
