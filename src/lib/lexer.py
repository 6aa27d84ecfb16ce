"""
Pygments lexer for litdown markup and the element builder on top of it

The markup is prose with a small set of tagged elements:

    <code>x := 1</code>                          inline code
    <code src="main.go#setup"></code>            code loaded from a file
    <code language="sh" exec>ls</code>           fenced code, executed
    <section number="2">                         section boundary

Everything else (including HTML comments and unknown tags) is passed through
as text. LitdownLexer tokenizes; elements_lex() folds the token stream into
Elements and text strings, keeping the exact source text of each element.

Token types:
- Name.Tag: '<code', '<section', '</code>'
- Name.Attribute / Operator / String: attribute name, '=', value
- Punctuation: '>' closing a start tag
- Punctuation.Marker: '/>' closing a self-closing tag
- String.Other: body of a <code> element
- Text / Comment: prose
"""

import re
from typing import Iterator, List, Optional, Tuple, Union

from pygments.lexer import RegexLexer, bygroups, include
from pygments.token import (
    Text,
    Punctuation,
    Name,
    String,
    Operator,
    Comment,
    Whitespace,
    Error,
)

from ..models.element import Element
from .errors import InvalidInputError
from .log import LOG


class LitdownLexer(RegexLexer):
    """
    Lexer for litdown markup

    Also usable directly with Pygments to highlight litdown sources.
    """

    name = 'Litdown'
    aliases = ['litdown']
    filenames = ['*.lit.md']

    flags = re.DOTALL | re.IGNORECASE

    tokens = {
        'root': [
            # HTML comments pass through untouched
            (r'<!--.*?-->', Comment),

            # <code ...> pushes the body state under the attribute state
            (r'<code\b', Name.Tag, ('codebody', 'codeattrs')),

            # <section ...> is a void marker
            (r'<section\b', Name.Tag, 'voidattrs'),

            (r'[^<]+', Text),
            (r'<', Text),
        ],

        'attr': [
            (r'\s+', Whitespace),
            (r'([A-Za-z_:][\w:.-]*)(\s*)(=)(\s*)("[^"]*"|\'[^\']*\'|[^\s"\'=<>`/]+)',
             bygroups(Name.Attribute, Whitespace, Operator, Whitespace, String)),
            (r'[A-Za-z_:][\w:.-]*', Name.Attribute),
        ],

        'codeattrs': [
            include('attr'),
            # self-closing <code/> has no body
            (r'/>', Punctuation.Marker, '#pop:2'),
            (r'>', Punctuation, '#pop'),
        ],

        'voidattrs': [
            include('attr'),
            (r'/>', Punctuation.Marker, '#pop'),
            (r'>', Punctuation, '#pop'),
        ],

        'codebody': [
            (r'</code\s*>', Name.Tag, '#pop'),
            (r'[^<]+', String.Other),
            (r'<', String.Other),
        ],
    }


def get_lexer() -> LitdownLexer:
    """
    Get the LitdownLexer instance

    Returns:
        LitdownLexer instance ready for use with Pygments
    """
    return LitdownLexer()


def value_unquote(value: str) -> str:
    """Strip matching quotes and decode the two entities attributes_render emits"""
    if len(value) >= 2 and value[0] == value[-1] and value[0] in '"\'':
        value = value[1:-1]
    return value.replace('&quot;', '"').replace('&amp;', '&')


class _ElementBuilder:
    """Accumulates the tokens of one element"""

    def __init__(self, start: str, line: int) -> None:
        self.tag = start[1:].lower()
        self.line = line
        self.raw: List[str] = [start]
        self.attrs: List[Tuple[str, str]] = []
        self.pending: Optional[str] = None
        self.body: List[str] = []

    def attribute_start(self, name: str) -> None:
        self.attribute_flush()
        self.pending = name

    def attribute_value(self, value: str) -> None:
        if self.pending is None:
            raise InvalidInputError(
                f"line {self.line}: attribute value {value!r} without a name in <{self.tag}>"
            )
        self.attrs.append((self.pending, value_unquote(value)))
        self.pending = None

    def attribute_flush(self) -> None:
        # bare attribute, e.g. <code exec>
        if self.pending is not None:
            self.attrs.append((self.pending, ""))
            self.pending = None

    def element_build(self) -> Element:
        self.attribute_flush()
        children = (''.join(self.body),) if self.body else ()
        return Element.element_make(
            self.tag, self.attrs, children, raw=''.join(self.raw), line=self.line
        )


def elements_lex(source: str) -> Iterator[Union[Element, str]]:
    """
    Lex markup into a stream of Elements and text strings

    Adjacent prose is merged into a single string. Elements carry their
    exact source text in ``raw`` so that concatenating the stream's text
    and ``raw`` values reproduces ``source``.

    Args:
        source: Markup text

    Yields:
        Element for each <code> and <section>, str for the prose between them

    Raises:
        InvalidInputError: On malformed attributes or an unterminated <code>
    """
    lexer = get_lexer()
    text: List[str] = []
    current: Optional[_ElementBuilder] = None
    in_body = False
    line = 1

    for index, token, value in lexer.get_tokens_unprocessed(source):
        if token is Error:
            where = current.tag if current else 'text'
            raise InvalidInputError(f"line {line}: unexpected {value!r} in <{where}>")

        if current is None:
            if token is Name.Tag:
                if text:
                    yield ''.join(text)
                    text = []
                current = _ElementBuilder(value, line)
                in_body = False
                LOG(f"Lexer: <{current.tag}> at line {line}", level=3)
            else:
                text.append(value)
        elif in_body:
            current.raw.append(value)
            if token is Name.Tag:
                yield current.element_build()
                current = None
            else:
                current.body.append(value)
        else:
            current.raw.append(value)
            if token is Name.Attribute:
                current.attribute_start(value)
            elif token is String:
                current.attribute_value(value)
            elif token is Punctuation.Marker:
                yield current.element_build()
                current = None
            elif token is Punctuation:
                if current.tag == 'code':
                    current.attribute_flush()
                    in_body = True
                else:
                    yield current.element_build()
                    current = None

        line += value.count('\n')

    if current is not None:
        raise InvalidInputError(f"line {current.line}: unterminated <{current.tag}> element")
    if text:
        yield ''.join(text)
