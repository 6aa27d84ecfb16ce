"""
Element model

A generic parsed unit handed over by the lexer: tag name, uniquely keyed
attributes and children, plus the exact source text it was lexed from so
static nodes can re-serialize it verbatim.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, List, Mapping, Tuple, Union


def attributes_make(pairs: Iterable[Tuple[str, str]]) -> Mapping[str, str]:
    """
    Build a read-only attribute set from (name, value) pairs

    Keeps insertion order for re-serialization.

    Raises:
        InvalidInputError: If a name is empty or appears twice
    """
    from ..lib.errors import InvalidInputError

    attrs = {}
    for name, value in pairs:
        if not name:
            raise InvalidInputError("attribute name is empty")
        if name in attrs:
            raise InvalidInputError(f"duplicate attribute {name!r}")
        attrs[name] = value
    return MappingProxyType(attrs)


@dataclass(frozen=True)
class Element:
    """
    Generic tagged element produced by the lexer

    Attributes:
        tag: Lower-case tag name (e.g., "code", "section")
        attrs: Read-only mapping of attribute name to value
        children: Ordered text (and, for future tags, nested elements)
        raw: Exact source text of the element, start tag to end tag
        line: 1-based source line of the start tag (0 when unknown)

    Example:
        For source '<code language="sh">ls</code>':
        Element(tag="code", attrs={"language": "sh"}, children=["ls"],
                raw='<code language="sh">ls</code>', line=1)
    """
    tag: str
    attrs: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    children: Tuple[Union['Element', str], ...] = ()
    raw: str = ""
    line: int = 0

    @classmethod
    def element_make(
        cls,
        tag: str,
        attrs: Union[Mapping[str, str], Iterable[Tuple[str, str]], None] = None,
        children: Iterable[Union['Element', str]] = (),
        raw: str = "",
        line: int = 0,
    ) -> 'Element':
        """
        Convenience constructor that validates attributes and derives ``raw``
        when it is not given.
        """
        if attrs is None:
            pairs: Iterable[Tuple[str, str]] = ()
        elif isinstance(attrs, Mapping):
            pairs = attrs.items()
        else:
            pairs = attrs
        attr_set = attributes_make(pairs)
        kids = tuple(children)
        if not raw:
            body = ''.join(c if isinstance(c, str) else c.raw for c in kids)
            raw = f"{startTag_render(tag, attr_set)}{body}</{tag}>"
        return cls(tag=tag.lower(), attrs=attr_set, children=kids, raw=raw, line=line)

    def text(self) -> str:
        """Concatenated text of the element's children"""
        parts: List[str] = []
        for child in self.children:
            if isinstance(child, str):
                parts.append(child)
            else:
                parts.append(child.text())
        return ''.join(parts)


def attributes_render(attrs: Mapping[str, str]) -> str:
    """Serialize attributes as ` name="value"` pairs in insertion order"""
    parts = []
    for name, value in attrs.items():
        escaped = value.replace('&', '&amp;').replace('"', '&quot;')
        parts.append(f' {name}="{escaped}"')
    return ''.join(parts)


def startTag_render(tag: str, attrs: Mapping[str, str]) -> str:
    """Serialize a start tag, e.g. '<code src="main.go">'"""
    return f"<{tag}{attributes_render(attrs)}>"
