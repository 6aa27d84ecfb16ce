"""
Parser tests

Tests element-to-node conversion, section numbering and fail-fast
behaviour.
"""

import io
from pathlib import Path

import pytest

from litdown.lib.classifier import NodeRegistry
from litdown.lib.errors import InvalidInputError
from litdown.lib.nodes import Text, InlineCode, SourceCode, FencedCode
from litdown.lib.parser import Parser
from litdown.lib.renderer import render
from litdown.models.document import SectionMark


class TestEmptyAndSimple:
    """Test empty source and simplest documents"""

    def test_empty_source(self):
        doc = Parser().parse("")

        assert doc.nodes == []
        assert doc.section == 1
        assert doc.marks == []

    def test_prose_only(self):
        doc = Parser().parse("Hello, world.\n")

        assert len(doc.nodes) == 1
        assert isinstance(doc.nodes[0], Text)
        assert doc.nodes[0].content == "Hello, world.\n"

    def test_nodes_in_order(self):
        source = (
            'Intro <code>x</code>\n'
            '<code src="a.go"></code>\n'
            '<code language="python" exec>print(1)</code>'
        )
        doc = Parser().parse(source)

        kinds = [type(node) for node in doc.nodes]
        assert kinds == [Text, InlineCode, Text, SourceCode, Text, FencedCode]

    def test_stream_input(self):
        doc = Parser().parse(io.StringIO("a <code>b</code>"))
        assert len(doc.nodes) == 2

    def test_root_and_filename(self, tmp_path):
        parser = Parser(root=tmp_path, filename="module.md")
        doc = parser.parse('<code src="x.go"/>')

        assert doc.root == tmp_path
        assert doc.filename == "module.md"
        assert doc.nodes[0].root == tmp_path
        assert doc.nodes[0].filename == "module.md"

    def test_workdir_defaults_to_root(self, tmp_path):
        doc = Parser(root=tmp_path).parse('<code language="sh" exec>ls</code>')
        assert doc.nodes[0].workdir == tmp_path

    def test_explicit_workdir(self, tmp_path):
        other = tmp_path / "elsewhere"
        doc = Parser(root=tmp_path, workdir=other).parse('<code language="sh" exec>ls</code>')
        assert doc.nodes[0].workdir == other

    def test_parser_reusable(self):
        parser = Parser()
        first = parser.parse("<code>a</code>")
        second = parser.parse("<code>b</code>")

        assert first is not second
        assert render(first) == "<code>a</code>"
        assert render(second) == "<code>b</code>"


class TestRoundTrip:
    """Text and inline code render back to the source"""

    def test_verbatim(self):
        source = (
            "# Chapter\n\n"
            "Call <code>fmt.Println</code> and <CODE>os.Exit</CODE>.\n"
            "<!-- a <code language=\"go\">comment</code> -->\n"
        )
        doc = Parser().parse(source)

        assert all(isinstance(node, (Text, InlineCode)) for node in doc.nodes)
        assert render(doc) == source


class TestSections:
    """Test section numbering"""

    def test_default_section(self):
        assert Parser().parse("a").section == 1

    def test_markers_record_boundaries(self):
        doc = Parser().parse("a<section>b<section>c")

        assert doc.section == 1
        assert doc.marks == [SectionMark(index=1, number=2), SectionMark(index=2, number=3)]
        assert doc.sections_count() == 3

    def test_numbered_marker(self):
        doc = Parser().parse('a<section number="5">b<section>c')
        assert doc.marks == [SectionMark(index=1, number=5), SectionMark(index=2, number=6)]

    def test_leading_marker_labels_first_section(self):
        doc = Parser().parse('<section number="4">a<section>b')

        assert doc.section == 4
        assert doc.marks == [SectionMark(index=1, number=5)]

    def test_override_wins_over_markers(self):
        doc = Parser(section=3).parse('<section number="9">a<section number="20">b')

        assert doc.section == 3
        assert doc.marks == [SectionMark(index=1, number=4)]

    def test_override_without_markers(self):
        doc = Parser(section=2).parse("a")
        assert doc.section == 2

    def test_invalid_override(self):
        with pytest.raises(InvalidInputError):
            Parser(section=0)

    @pytest.mark.parametrize(
        "source",
        [
            '<section number="2"><section number="3">a',
            "a<section><section>b",
            "a<section>",
            "<section>",
        ],
    )
    def test_empty_section(self, source):
        with pytest.raises(InvalidInputError, match="empty section"):
            Parser().parse(source)

    def test_whitespace_counts_as_content(self):
        doc = Parser().parse("a<section>\n")

        assert doc.marks == [SectionMark(index=1, number=2)]
        assert doc.nodes[-1].render() == "\n"

    @pytest.mark.parametrize("value", ["0", "-1", "two", ""])
    def test_malformed_number(self, value):
        with pytest.raises(InvalidInputError, match="section number"):
            Parser().parse(f'a<section number="{value}">b')


class TestFailFast:
    """The first bad element aborts the parse"""

    def test_duplicate_attribute(self):
        with pytest.raises(InvalidInputError):
            Parser().parse('ok <code a="1" a="2">x</code> more')

    def test_unterminated(self):
        with pytest.raises(InvalidInputError):
            Parser().parse("<code>x")

    def test_unregistered_tag(self):
        registry = NodeRegistry()
        del registry.specs["section"]

        with pytest.raises(InvalidInputError, match="cannot classify"):
            Parser(registry=registry).parse("a<section>b")
