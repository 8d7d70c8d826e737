from __future__ import annotations

from pathlib import Path

import pytest

from nanotpl.cli import main
from tests.infrastructure.file_utils import write


def test_render_to_stdout(tmpproj: Path, monkeypatch, capsys):
    monkeypatch.chdir(tmpproj)

    rc = main(["render", "page.html", "--data", "data.yaml"])

    assert rc == 0
    out = capsys.readouterr().out
    assert out == "<h1>HELLO</h1><li>a</li><li>b</li><footer>2024</footer>"


def test_render_to_file(tmpproj: Path, monkeypatch):
    monkeypatch.chdir(tmpproj)

    rc = main(["render", "page.html", "--data", "data.yaml", "-o", "out.html"])

    assert rc == 0
    assert (tmpproj / "out.html").read_text(encoding="utf-8").startswith("<h1>HELLO</h1>")


def test_display_comments_flag(tmpproj: Path, monkeypatch, capsys):
    monkeypatch.chdir(tmpproj)

    main(["render", "page.html", "--data", "data.yaml", "--display-comments"])

    assert "<!-- header -->" in capsys.readouterr().out


def test_import_dir_flag_overrides_config(tmp_path: Path, monkeypatch, capsys):
    write(tmp_path / "page.html", "{{ import 'part.html' }}")
    write(tmp_path / "a" / "part.html", "from a")
    write(tmp_path / "b" / "part.html", "from b")
    write(tmp_path / "nanotpl.yaml", "import_directory: a\n")
    monkeypatch.chdir(tmp_path)

    main(["render", "page.html"])
    assert capsys.readouterr().out == "from a"

    main(["render", "page.html", "--import-dir", "b"])
    assert capsys.readouterr().out == "from b"


def test_explicit_config(tmp_path: Path, monkeypatch, capsys):
    write(tmp_path / "page.html", "a{# c #}b")
    write(tmp_path / "opts.yaml", "display_comments: true\n")
    monkeypatch.chdir(tmp_path)

    rc = main(["render", "page.html", "--config", "opts.yaml"])

    assert rc == 0
    assert capsys.readouterr().out == "a<!-- c -->b"


def test_missing_template(tmp_path: Path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)

    rc = main(["render", "nope.html"])

    assert rc == 2
    assert "template file does not exist: nope.html" in capsys.readouterr().err


def test_syntax_error(tmp_path: Path, monkeypatch, capsys):
    write(tmp_path / "page.html", "{% if a %}")
    monkeypatch.chdir(tmp_path)

    rc = main(["render", "page.html"])

    assert rc == 2
    assert "Missing end tag" in capsys.readouterr().err


def test_bad_data_file(tmp_path: Path, monkeypatch, capsys):
    write(tmp_path / "page.html", "x")
    write(tmp_path / "data.yaml", "- 1\n")
    monkeypatch.chdir(tmp_path)

    rc = main(["render", "page.html", "--data", "data.yaml"])

    assert rc == 2
    assert "must contain a mapping" in capsys.readouterr().err


def test_version(capsys):
    with pytest.raises(SystemExit) as exc:
        main(["--version"])

    assert exc.value.code == 0
    assert capsys.readouterr().out.startswith("nanotpl ")
