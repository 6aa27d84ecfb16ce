"""
Renderer

Serializes documents and pages by concatenating each node's rendered form.
Pure: rendering the same unchanged nodes always gives the same text.
"""

from typing import Iterable, Union

from ..models.document import Document, Page


def render(target: Union[Document, Page]) -> str:
    """Concatenate the rendered nodes of a Document or Page"""
    return ''.join(node.render() for node in target.nodes)


def pages_render(pages: Iterable[Page]) -> str:
    """Concatenate rendered pages (break markers are already part of them)"""
    return ''.join(render(page) for page in pages)
