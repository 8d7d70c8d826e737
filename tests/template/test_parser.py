"""
Тесты для парсера шаблонов.

Проверяет построение узлов из дерева меток:
- текст, вывод выражений, комментарии
- блоки if/else/elseif и for
- теги import с объектом переменных
"""

import pytest

from nanotpl.errors import TemplateSyntaxError
from nanotpl.expressions.model import BinaryNode, FilterNode, ValueNode, VariableNode
from nanotpl.template.nodes import (
    CommentNode,
    ForBlockNode,
    IfBlockNode,
    ImportNode,
    OutputNode,
    TextNode,
)
from tests.infrastructure import scan_parse


class TestBasicNodes:
    """Тесты простых узлов."""

    def test_text_and_output(self):
        nodes = scan_parse("Hello, {{ name }}!")

        assert nodes == (
            TextNode("Hello, "),
            OutputNode(VariableNode("name")),
            TextNode("!"),
        )

    def test_output_with_filters(self):
        nodes = scan_parse("{{ name | upper | lower }}")

        assert nodes == (OutputNode(FilterNode(VariableNode("name"), ("upper", "lower"))),)

    def test_comment(self):
        assert scan_parse("{# note #}") == (CommentNode("note"),)

    def test_nodes_are_immutable(self):
        node = scan_parse("text")[0]

        with pytest.raises(Exception):
            node.text = "other"


class TestIfBlocks:
    """Тесты условных блоков."""

    def test_if_without_else(self):
        nodes = scan_parse("{% if a %}yes{% endif %}")

        assert nodes == (IfBlockNode(VariableNode("a"), (TextNode("yes"),), None),)

    def test_if_else(self):
        node = scan_parse("{% if a %}yes{% else %}no{% endif %}")[0]

        assert node.consequent == (TextNode("yes"),)
        assert node.alternate == (TextNode("no"),)

    def test_empty_branches_are_absent(self):
        """Пустые ветки представлены как None, а не как пустые кортежи."""
        node = scan_parse("{% if a %}{% else %}{% endif %}")[0]

        assert node.consequent is None
        assert node.alternate is None

    def test_comparison_condition(self):
        node = scan_parse("{% if number > 10 %}big{% endif %}")[0]

        assert node.test == BinaryNode(">", VariableNode("number"), ValueNode(10))

    def test_elseif_nesting(self):
        node = scan_parse("{% if a %}A{% elseif b %}B{% else %}C{% endif %}")[0]

        nested = node.alternate[0]
        assert isinstance(nested, IfBlockNode)
        assert nested.test == VariableNode("b")
        assert nested.consequent == (TextNode("B"),)
        assert nested.alternate == (TextNode("C"),)

    def test_chain_and_nested_forms_are_identical(self):
        chain = scan_parse("{% if a %}A{% elseif b %}B{% endif %}")
        nested = scan_parse("{% if a %}A{% else %}{% if b %}B{% endif %}{% endif %}")

        assert chain == nested


class TestForBlocks:
    """Тесты циклов."""

    def test_single_variable(self):
        node = scan_parse("{% for item in items %}{{ item }}{% endfor %}")[0]

        assert isinstance(node, ForBlockNode)
        assert node.variables == ("item",)
        assert node.iterator == VariableNode("items")
        assert node.body == (OutputNode(VariableNode("item")),)
        assert node.source == "items"

    def test_two_variables(self):
        node = scan_parse("{% for key, value in object_like %}{% endfor %}")[0]

        assert node.variables == ("key", "value")
        assert node.body == ()

    def test_nested_path_iterator(self):
        node = scan_parse("{% for x in data.items %}{% endfor %}")[0]

        assert node.iterator == VariableNode("data", ("items",))

    def test_missing_in(self):
        with pytest.raises(TemplateSyntaxError, match="Invalid for statement"):
            scan_parse("{% for item items %}{% endfor %}")

    def test_too_many_variables(self):
        with pytest.raises(TemplateSyntaxError, match="Invalid for statement"):
            scan_parse("{% for a, b, c in items %}{% endfor %}")

    def test_invalid_variable_name(self):
        with pytest.raises(TemplateSyntaxError, match="Invalid variable name in for statement"):
            scan_parse("{% for a.b in items %}{% endfor %}")


class TestImports:
    """Тесты тега import."""

    def test_plain_import(self):
        assert scan_parse("{{ import 'footer.html' }}") == (ImportNode("footer.html"),)

    def test_double_quoted_path(self):
        assert scan_parse('{{ import "a/b.html" }}') == (ImportNode("a/b.html"),)

    def test_import_with_object(self):
        node = scan_parse("{{ import 'item.html' with { name: user.name, \"count\": 3 } }}")[0]

        assert node.path == "item.html"
        assert node.bindings == (
            ("name", VariableNode("user", ("name",))),
            ("count", ValueNode(3)),
        )

    def test_import_with_empty_object(self):
        node = scan_parse("{{ import 'item.html' with {} }}")[0]

        assert node.bindings == ()

    def test_import_with_trailing_comma(self):
        node = scan_parse("{{ import 'item.html' with { a: 1, } }}")[0]

        assert node.bindings == (("a", ValueNode(1)),)

    def test_import_value_with_colon_in_string(self):
        node = scan_parse("{{ import 'item.html' with { label: 'a:b' } }}")[0]

        assert node.bindings == (("label", ValueNode("a:b")),)

    def test_missing_path(self):
        with pytest.raises(TemplateSyntaxError, match="Invalid import"):
            scan_parse("{{ import }}")

    def test_unquoted_path(self):
        with pytest.raises(TemplateSyntaxError, match="Invalid import statement"):
            scan_parse("{{ import footer.html }}")

    def test_invalid_object(self):
        with pytest.raises(TemplateSyntaxError, match="Invalid import variable object"):
            scan_parse("{{ import 'a.html' with name }}")

    def test_invalid_object_entry(self):
        with pytest.raises(TemplateSyntaxError, match="Invalid import variable object"):
            scan_parse("{{ import 'a.html' with { name } }}")

    def test_variable_named_importer_is_not_import(self):
        """Тег начинается с 'import' только как с отдельного слова."""
        assert scan_parse("{{ importer }}") == (OutputNode(VariableNode("importer")),)
