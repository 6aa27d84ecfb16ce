"""
Node specification and metadata models

Defines node kinds, semantic categories and the spec records the
NodeRegistry uses to dispatch elements to node factories.
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import Callable, List


class NodeKind(Enum):
    """
    Closed set of node variants

    Every Node carries exactly one of these.
    """
    TEXT = "text"
    INLINE_CODE = "inline_code"
    SOURCE_CODE = "source_code"
    FENCED_CODE = "fenced_code"


class NodeCategory(Enum):
    """
    Semantic category of an element tag

    Decides which classifier the parser hands an element to.
    """
    CODE = "code"                # <code>, classified three ways
    STRUCTURAL = "structural"    # <section>, consumed by the parser


@dataclass
class NodeSpec:
    """
    Specification for an element tag

    Attributes:
        name: Tag name (lower case)
        category: Semantic category
        description: Human-readable description
        factory: Classifier (parser, element) -> List[Node]; None for
                 structural tags the parser consumes itself
        examples: Example markup
        aliases: Alternative tag names
    """
    name: str
    category: NodeCategory
    description: str
    factory: Callable | None = None
    examples: List[str] = field(default_factory=list)
    aliases: List[str] = field(default_factory=list)
