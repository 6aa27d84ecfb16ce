"""
Paginator

Splits a Document into one Page per section and appends the break marker
to every page but the last.
"""

from typing import List, Optional

from ..config import appsettings
from ..models.document import Document, Page
from .errors import StructuralError
from .nodes import Text


def marks_validate(document: Document) -> None:
    """
    Check the document's section boundaries

    Raises:
        StructuralError: A boundary outside the node list, boundaries out of
            order, or section numbers that do not ascend
    """
    previous_index = 0
    previous_number = document.section
    if previous_number < 1:
        raise StructuralError(f"first section must be >= 1, got {previous_number}")

    for mark in document.marks:
        if not previous_index < mark.index <= len(document.nodes):
            raise StructuralError(
                f"section {mark.number} starts at node {mark.index}, "
                f"outside ({previous_index}, {len(document.nodes)}]"
            )
        if mark.number <= previous_number:
            raise StructuralError(
                f"section {mark.number} follows section {previous_number}"
            )
        previous_index = mark.index
        previous_number = mark.number


def pages_slice(document: Document) -> List[Page]:
    """One Page per section, without break markers"""
    marks_validate(document)

    starts = [(0, document.section)] + [(m.index, m.number) for m in document.marks]
    pages: List[Page] = []
    for i, (start, number) in enumerate(starts):
        end = starts[i + 1][0] if i + 1 < len(starts) else len(document.nodes)
        pages.append(Page(number=number, nodes=list(document.nodes[start:end])))
    return pages


def pages_build(document: Document, marker: Optional[str] = None) -> List[Page]:
    """
    Partition ``document`` into pages

    Args:
        document: Parsed (and usually executed) document
        marker: Break marker literal; defaults to the configured one

    Returns:
        One Page per section in ascending order; all but the last end with
        a Text node holding ``marker``

    Raises:
        StructuralError: Inconsistent section boundaries
    """
    if marker is None:
        marker = appsettings.break_marker

    pages = pages_slice(document)
    for page in pages[:-1]:
        page.nodes.append(Text(marker))
    return pages


def page_get(document: Document, number: int) -> Page:
    """
    The page for section ``number``, without a break marker

    Raises:
        StructuralError: No such section, or inconsistent boundaries
    """
    for page in pages_slice(document):
        if page.number == number:
            return page
    raise StructuralError(f"section {number} not found in {document.filename or 'document'}")
