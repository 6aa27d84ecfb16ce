"""
Models package for litdown

Contains data structures and type definitions for the rendering pipeline.
"""

from .state import ProgramState, pipeline
from .nodes import NodeSpec, NodeCategory, NodeKind
from .element import Element, attributes_make
from .document import Document, Page, SectionMark
from .execution import CommandResult
from .options import RunOptions

__all__ = [
    "ProgramState",
    "pipeline",
    "NodeSpec",
    "NodeCategory",
    "NodeKind",
    "Element",
    "attributes_make",
    "Document",
    "Page",
    "SectionMark",
    "CommandResult",
    "RunOptions",
]
