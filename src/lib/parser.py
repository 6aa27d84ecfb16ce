"""
Parser for litdown markup

Turns markup into a Document: an ordered list of nodes plus the section
boundaries found along the way.

The parser operates in two phases:
1. Lexing: elements_lex() splits the source into prose and Elements
2. Classification: each Element's tag is looked up in the NodeRegistry;
   code elements go through their factory, <section> markers start a new
   section, prose becomes Text nodes

Key features:
- Root directory and filename fixed at construction, so relative ``src``
  references resolve the same way regardless of the process working directory
- Caller-supplied section number overrides the document's own numbering
- Fail fast: the first malformed element aborts the parse, and every
  <section> marker must be followed by at least one node
- Reusable: parse() serializes on an instance lock

Example:
    >>> parser = Parser(root=Path("book/ch01"), filename="module.md")
    >>> doc = parser.parse("Run <code>go test</code>.")
    >>> [node.kind.value for node in doc.nodes]
    ['text', 'inline_code', 'text']
"""

import threading
from pathlib import Path
from typing import IO, List, Optional, Union

from ..models.document import Document, SectionMark
from ..models.element import Element
from ..models.nodes import NodeCategory
from .classifier import NodeRegistry
from .errors import InvalidInputError
from .lexer import elements_lex
from .log import LOG
from .nodes import Node, Text


class Parser:
    """
    Parser for litdown markup

    Attributes:
        root: Directory relative ``src`` references resolve against
        filename: Base filename of the document
        workdir: Working directory for executed code (defaults to root)
        section: Explicit first-section number, or None to use the
                 document's own markers (default 1)
        registry: NodeRegistry used to classify elements
    """

    def __init__(
        self,
        root: Union[str, Path, None] = None,
        filename: str = "",
        section: Optional[int] = None,
        workdir: Union[str, Path, None] = None,
        registry: Optional[NodeRegistry] = None,
    ) -> None:
        if section is not None and section < 1:
            raise InvalidInputError(f"section must be >= 1, got {section}")

        self.root = Path(root) if root is not None else Path.cwd()
        self.filename = filename
        self.workdir = Path(workdir) if workdir is not None else self.root
        self.section = section
        self.registry = registry or NodeRegistry()
        self._lock = threading.Lock()

    def parse(self, source: Union[str, IO[str]]) -> Document:
        """
        Parse markup into a Document

        Args:
            source: Markup text or a readable text stream

        Returns:
            Document with nodes in source order

        Raises:
            InvalidInputError: Malformed markup, attribute or section number,
                an empty section, or an element the registry cannot classify
        """
        if not isinstance(source, str):
            source = source.read()

        with self._lock:
            document = Document(
                section=self.section or 1,
                root=self.root,
                filename=self.filename,
            )
            current = document.section
            # marker whose section has no nodes yet
            opened: Optional[Element] = None

            for item in elements_lex(source):
                if isinstance(item, str):
                    document.nodes.append(Text(item))
                    opened = None
                    continue

                spec = self.registry.spec_get(item.tag)
                if spec is None:
                    raise InvalidInputError(f"line {item.line}: cannot classify <{item.tag}>")

                if spec.category == NodeCategory.STRUCTURAL:
                    if opened is not None:
                        raise InvalidInputError(
                            f"line {opened.line}: empty section, next <section> follows on line {item.line}"
                        )
                    current = self.section_start(document, item, current)
                    opened = item
                    continue

                nodes: List[Node] = spec.factory(self, item)
                document.nodes.extend(nodes)
                if nodes:
                    opened = None

            if opened is not None:
                raise InvalidInputError(f"line {opened.line}: empty section at end of input")

        LOG(
            f"Parsed {len(document.nodes)} nodes in {document.sections_count()} sections",
            level=1,
        )
        return document

    def section_start(self, document: Document, element: Element, current: int) -> int:
        """
        Handle a <section> marker

        Before any node, the marker labels the first section; afterwards it
        records a boundary. Returns the number of the section now open.
        """
        number = self.number_get(element)

        if not document.nodes and not document.marks:
            if number is not None and self.section is None:
                document.section = number
                return number
            return current

        if number is None or self.section is not None:
            number = current + 1

        document.marks.append(SectionMark(index=len(document.nodes), number=number))
        LOG(f"Section {number} starts at node {len(document.nodes)}", level=3)
        return number

    def number_get(self, element: Element) -> Optional[int]:
        """
        The marker's ``number`` attribute as a positive int, or None

        Raises:
            InvalidInputError: Attribute present but not a positive integer
        """
        value = element.attrs.get('number')
        if value is None:
            return None
        try:
            number = int(value)
        except ValueError:
            number = 0
        if number < 1:
            raise InvalidInputError(
                f"line {element.line}: section number must be a positive integer, got {value!r}"
            )
        return number
