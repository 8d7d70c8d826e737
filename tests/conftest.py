import textwrap
from pathlib import Path

import pytest

# Импорт из унифицированной инфраструктуры
from tests.infrastructure.file_utils import write


@pytest.fixture
def tmpproj(tmp_path: Path):
    """Минимальный проект: шаблон с импортом, частичный шаблон, данные и nanotpl.yaml."""
    root = tmp_path
    write(
        root / "page.html",
        textwrap.dedent("""\
        <h1>{{ title | upper }}</h1>{# header #}
        {% for item in items %}<li>{{ item }}</li>{% endfor %}
        {{ import 'footer.html' with { year: year } }}
        """),
    )
    write(root / "partials" / "footer.html", "<footer>{{ year }}</footer>")
    write(
        root / "data.yaml",
        textwrap.dedent("""\
        title: Hello
        items: [a, b]
        year: 2024
        """),
    )
    write(root / "nanotpl.yaml", "import_directory: partials\n")
    return root
