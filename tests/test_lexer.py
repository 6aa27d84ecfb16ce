"""
Lexer tests

Tests that markup is split into prose and Elements, that attributes are
read correctly, and that the exact source text survives.
"""

import pytest

from litdown.lib.lexer import elements_lex, LitdownLexer
from litdown.lib.errors import InvalidInputError
from litdown.models.element import Element


def items(source):
    return list(elements_lex(source))


def reassemble(stream):
    return ''.join(item if isinstance(item, str) else item.raw for item in stream)


class TestProse:
    """Test plain text handling"""

    def test_empty_source(self):
        """Empty source yields nothing"""
        assert items("") == []

    def test_plain_text(self):
        """Text without elements is one string"""
        assert items("Just prose, with < and > signs.") == ["Just prose, with < and > signs."]

    def test_comment_passes_through(self):
        """Elements inside HTML comments are not lexed"""
        source = "a <!-- <code>x</code> --> b"
        assert items(source) == [source]

    def test_similar_tag_is_text(self):
        """<codex> is not a code element"""
        assert items("<codex>x</codex>") == ["<codex>x</codex>"]


class TestCodeElements:
    """Test <code> elements"""

    def test_inline_code(self):
        """Code element between prose"""
        result = items("Run <code>go test</code>.")

        assert len(result) == 3
        assert result[0] == "Run "
        assert isinstance(result[1], Element)
        assert result[1].tag == "code"
        assert dict(result[1].attrs) == {}
        assert result[1].text() == "go test"
        assert result[1].raw == "<code>go test</code>"
        assert result[2] == "."

    def test_quoted_and_bare_attributes(self):
        """Quoted, single-quoted and bare attributes"""
        result = items("<code language=\"sh\" exit='1' exec>ls</code>")

        el = result[0]
        assert dict(el.attrs) == {"language": "sh", "exit": "1", "exec": ""}
        assert list(el.attrs) == ["language", "exit", "exec"]

    def test_unquoted_attribute(self):
        """Unquoted attribute values"""
        el = items("<code language=python>x</code>")[0]
        assert el.attrs["language"] == "python"

    def test_self_closing(self):
        """Self-closing code element has no children"""
        el = items('<code src="main.go"/>')[0]

        assert el.attrs["src"] == "main.go"
        assert el.children == ()
        assert el.raw == '<code src="main.go"/>'

    def test_body_keeps_markup(self):
        """Angle brackets inside code bodies are kept as text"""
        el = items("<code>if a < b { <x> }</code>")[0]
        assert el.text() == "if a < b { <x> }"

    def test_multiline_body_and_line_numbers(self):
        """Line number of each element is recorded"""
        result = items("one\ntwo\n<code language=\"py\">\nprint(1)\n</code>\n<code>x</code>")

        elements = [item for item in result if isinstance(item, Element)]
        assert elements[0].line == 3
        assert elements[0].text() == "\nprint(1)\n"
        assert elements[1].line == 6

    def test_uppercase_tag(self):
        """Tag names are case-insensitive and normalized"""
        el = items("<CODE>x</CODE>")[0]
        assert el.tag == "code"


class TestSections:
    """Test <section> markers"""

    def test_bare_section(self):
        result = items("a<section>b")

        assert result[0] == "a"
        assert result[1].tag == "section"
        assert result[2] == "b"

    def test_numbered_section(self):
        el = items('<section number="3"/>')[0]
        assert el.attrs["number"] == "3"


class TestRoundTrip:
    """Concatenating the stream reproduces the source"""

    def test_reassemble(self):
        source = (
            "# Title\n\nSome <code>inline</code> text.\n"
            "<section number=\"2\">\n"
            "<code language='go' exec=\"go run .\">package main</code>\n"
            "<!-- note -->\n<code src=x.go/>"
        )
        assert reassemble(elements_lex(source)) == source


class TestErrors:
    """Test malformed markup"""

    def test_unterminated_code(self):
        with pytest.raises(InvalidInputError, match="unterminated"):
            items("text <code>never closed")

    def test_unterminated_start_tag(self):
        with pytest.raises(InvalidInputError):
            items('<code language="go"')

    def test_duplicate_attribute(self):
        with pytest.raises(InvalidInputError, match="duplicate"):
            items('<code a="1" a="2">x</code>')

    def test_stray_quote(self):
        with pytest.raises(InvalidInputError):
            items('<code language="go" ">x</code>')


class TestPygments:
    """The lexer is also a regular Pygments lexer"""

    def test_lexer_metadata(self):
        lexer = LitdownLexer()
        assert lexer.name == "Litdown"
        assert "litdown" in lexer.aliases
