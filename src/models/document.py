"""
Document and page models

A Document is the ordered node sequence produced by the parser, plus the
section boundaries recorded while parsing. Pages are derived from it by the
paginator and never outlive it.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, TYPE_CHECKING

if TYPE_CHECKING:
    from ..lib.nodes import Node


@dataclass(frozen=True)
class SectionMark:
    """
    Start of a new section

    Attributes:
        index: Position in Document.nodes before which the section starts
        number: Section number (ascending, >= 1)
    """
    index: int
    number: int


@dataclass
class Document:
    """
    Parsed document

    Attributes:
        nodes: Nodes in document order; execution mutates them in place but
               never reorders them
        section: Number of the first section (>= 1)
        marks: Boundaries of the second and later sections, in order
        root: Directory relative source references resolve against
        filename: Base filename of the document
    """
    nodes: List['Node'] = field(default_factory=list)
    section: int = 1
    marks: List[SectionMark] = field(default_factory=list)
    root: Path = field(default_factory=Path)
    filename: str = ""

    def sections_count(self) -> int:
        return 1 + len(self.marks)


@dataclass
class Page:
    """
    Contiguous slice of a Document's nodes for one section

    ``nodes`` is a fresh list; the node objects themselves are shared with the
    Document and must not be mutated through the page.
    """
    number: int
    nodes: List['Node'] = field(default_factory=list)
