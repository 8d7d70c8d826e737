"""
Тесты для сканера шаблонов.

Проверяет:
- классификацию меток (текст, теги, комментарии, блоки)
- нормализацию переводов строк и табуляции
- сборку вложенных блоков и проверку баланса тегов
- нормализацию цепочек elseif/else
"""

import pytest

from nanotpl.errors import TemplateSyntaxError
from nanotpl.template.scanner import (
    Mark,
    MarkKind,
    TemplateScanner,
    normalize_whitespace,
    scan,
    unwind_chain,
)


class TestMarkClassification:
    """Тесты классификации меток."""

    def test_empty_template(self):
        """Пустой шаблон не даёт ни одной метки."""
        assert scan("") == []

    def test_plain_text(self):
        """Текст без тегов становится одной текстовой меткой."""
        assert scan("Hello, world!") == [Mark(MarkKind.TEXT, "Hello, world!")]

    def test_tag_content_is_trimmed(self):
        """Содержимое тега обрезается от пробелов."""
        marks = scan("<b>{{  name  }}</b>")

        assert marks == [
            Mark(MarkKind.TEXT, "<b>"),
            Mark(MarkKind.TAG, "name"),
            Mark(MarkKind.TEXT, "</b>"),
        ]

    def test_comment(self):
        """Комментарий распознаётся как отдельная метка."""
        marks = scan("a{# note #}b")

        assert marks[1] == Mark(MarkKind.COMMENT, "note")

    def test_block_collects_children(self):
        """Метки внутри блока становятся его дочерними элементами."""
        marks = scan("{% for x in items %}<i>{{ x }}</i>{% endfor %}")

        assert len(marks) == 1
        block = marks[0]
        assert block.kind == MarkKind.BLOCK
        assert block.raw_value == "for x in items"
        assert block.children == [
            Mark(MarkKind.TEXT, "<i>"),
            Mark(MarkKind.TAG, "x"),
            Mark(MarkKind.TEXT, "</i>"),
        ]

    def test_nested_blocks(self):
        """Вложенные блоки сохраняют структуру."""
        marks = scan("{% for a in aa %}{% for b in bb %}{{ b }}{% endfor %}{% endfor %}")

        outer = marks[0]
        assert outer.raw_value == "for a in aa"
        inner = outer.children[0]
        assert inner.raw_value == "for b in bb"
        assert inner.children == [Mark(MarkKind.TAG, "b")]

    def test_scanner_can_be_reused(self):
        """Повторный вызов scan() возвращает тот же результат."""
        scanner = TemplateScanner("{% if a %}x{% endif %}")

        assert scanner.scan() == scanner.scan()


class TestWhitespaceNormalization:
    """Тесты удаления переводов строк и табуляции."""

    def test_strips_newlines_and_tabs(self):
        assert normalize_whitespace("<div>\n\t<b>x</b>\r\n</div>") == "<div><b>x</b></div>"

    def test_keeps_spaces(self):
        assert normalize_whitespace("a  b") == "a  b"

    def test_pre_is_preserved(self):
        text = "<div>\n<pre>\n  line 1\n\tline 2\n</pre>\n</div>"

        assert normalize_whitespace(text) == "<div><pre>\n  line 1\n\tline 2\n</pre></div>"

    def test_textarea_is_preserved(self):
        text = "<textarea>\na\n</textarea>\n"

        assert normalize_whitespace(text) == "<textarea>\na\n</textarea>"

    def test_comment_is_preserved(self):
        marks = scan("a\n{#\n  multi\n  line\n#}\nb")

        assert marks == [
            Mark(MarkKind.TEXT, "a"),
            Mark(MarkKind.COMMENT, "multi\n  line"),
            Mark(MarkKind.TEXT, "b"),
        ]

    def test_tags_inside_pre_are_scanned(self):
        marks = scan("<pre>\n{{ x }}\n</pre>")

        assert Mark(MarkKind.TAG, "x") in marks
        assert marks[0] == Mark(MarkKind.TEXT, "<pre>\n")


class TestBlockBalance:
    """Тесты проверки баланса блоков."""

    def test_missing_end_tag(self):
        with pytest.raises(TemplateSyntaxError, match="Missing end tag"):
            scan("{% if a %}")

    def test_redundant_end_tag(self):
        with pytest.raises(TemplateSyntaxError, match="Redundant end tag"):
            scan("{% endif %}")

    def test_mismatched_end_tag(self):
        with pytest.raises(TemplateSyntaxError, match="Invalid end tag"):
            scan("{% for x in y %}{% endif %}")

    def test_mismatched_nested_end_tags(self):
        with pytest.raises(TemplateSyntaxError, match="Invalid end tag"):
            scan("{% if a %}{% for x in y %}{% endif %}{% endfor %}")

    def test_unknown_end_tag(self):
        with pytest.raises(TemplateSyntaxError, match="Invalid end tag"):
            scan("{% if a %}{% endwhile %}")

    def test_invalid_block_keyword(self):
        with pytest.raises(TemplateSyntaxError, match="Invalid block statement"):
            scan("{% while a %}{% endwhile %}")

    def test_else_inside_for(self):
        with pytest.raises(TemplateSyntaxError, match="Unexpected"):
            scan("{% for x in y %}a{% else %}b{% endfor %}")

    def test_else_must_be_last(self):
        with pytest.raises(TemplateSyntaxError, match="Else must be the last"):
            scan("{% if a %}1{% else %}2{% elseif b %}3{% endif %}")

    def test_elseif_without_condition(self):
        with pytest.raises(TemplateSyntaxError, match="Missing condition in elseif"):
            scan("{% if a %}1{% elseif %}2{% endif %}")

    def test_stray_else(self):
        with pytest.raises(TemplateSyntaxError, match="Missing end tag"):
            scan("{% else %}")


class TestElseNormalization:
    """Тесты нормализации цепочек elseif/else."""

    def test_if_else_shape(self):
        """Ветка else становится последним дочерним блоком if."""
        marks = scan("{% if a %}A{% else %}B{% endif %}")

        assert marks == [
            Mark(MarkKind.BLOCK, "if a", [
                Mark(MarkKind.TEXT, "A"),
                Mark(MarkKind.BLOCK, "else", [Mark(MarkKind.TEXT, "B")]),
            ])
        ]

    def test_elseif_becomes_nested_if(self):
        marks = scan("{% if a %}A{% elseif b %}B{% endif %}")

        assert marks == [
            Mark(MarkKind.BLOCK, "if a", [
                Mark(MarkKind.TEXT, "A"),
                Mark(MarkKind.BLOCK, "else", [
                    Mark(MarkKind.BLOCK, "if b", [Mark(MarkKind.TEXT, "B")]),
                ]),
            ])
        ]

    def test_chain_equals_hand_written_nesting(self):
        """Цепочка elseif неотличима от вложенных if/else, записанных вручную."""
        chain = "{% if a %}A{% elseif b %}B{% elseif c %}C{% else %}D{% endif %}"
        nested = (
            "{% if a %}A{% else %}"
            "{% if b %}B{% else %}"
            "{% if c %}C{% else %}D{% endif %}"
            "{% endif %}"
            "{% endif %}"
        )

        assert scan(chain) == scan(nested)

    def test_chain_inside_loop(self):
        marks = scan("{% for x in xs %}{% if x %}1{% elseif y %}2{% endif %}{% endfor %}")

        loop = marks[0]
        assert loop.raw_value == "for x in xs"
        assert [child.raw_value for child in loop.children] == ["if x"]

    def test_unwind_chain_is_pure(self):
        """unwind_chain не изменяет переданные метки."""
        head = Mark(MarkKind.BLOCK, "if a", [Mark(MarkKind.TEXT, "A")])
        branch = Mark(MarkKind.BLOCK, "else", [Mark(MarkKind.TEXT, "B")])

        result = unwind_chain([head, branch])

        assert head.children == [Mark(MarkKind.TEXT, "A")]
        assert result is not head
        assert result.children[-1] == Mark(MarkKind.BLOCK, "else", [Mark(MarkKind.TEXT, "B")])

    def test_unwind_single_block(self):
        head = Mark(MarkKind.BLOCK, "for x in y")

        assert unwind_chain([head]) is head
