"""
Element classification

The NodeRegistry maps tag names to NodeSpecs; the parser looks up each
element's spec and hands CODE elements to the spec's factory. The code
factory is a strict three-way partition on attributes:

    no attributes     -> InlineCode
    ``src`` present   -> SourceCode
    anything else     -> FencedCode

Unrecognized attributes never fail classification; they are left for the
node to interpret (or reject) when it runs.
"""

from typing import Any, Dict, List, Optional

from ..models.element import Element
from ..models.nodes import NodeSpec, NodeCategory
from .errors import InvalidInputError
from .log import LOG
from .nodes import Node, InlineCode, SourceCode, FencedCode


def code_classify(parser: Any, element: Optional[Element]) -> List[Node]:
    """
    Classify a code element into a node

    Args:
        parser: Parser supplying ``root``, ``filename`` and ``workdir``
        element: Element in the code category; never mutated

    Returns:
        One-element list holding the InlineCode, SourceCode or FencedCode

    Raises:
        InvalidInputError: If ``element`` is None
    """
    if element is None:
        raise InvalidInputError("element is None")

    attrs = element.attrs

    if len(attrs) == 0:
        node: Node = InlineCode(element=element)
    elif 'src' in attrs:
        node = SourceCode(
            element=element,
            path=attrs['src'],
            root=parser.root,
            filename=parser.filename,
        )
    else:
        node = FencedCode(
            element=element,
            language=attrs.get('language') or attrs.get('lang') or '',
            command=attrs.get('exec'),
            workdir=parser.workdir,
        )

    LOG(f"Classified <{element.tag}> at line {element.line} as {node.kind.value}", level=3)
    return [node]


class NodeRegistry:
    """
    Registry of element tags

    Maps tag names to NodeSpec objects holding the semantic category and
    the factory that turns an element into nodes.
    """

    def __init__(self) -> None:
        """Initialize the registry and register the built-in tags"""
        self.specs: Dict[str, NodeSpec] = {}
        self.codeNodes_register()
        self.structuralNodes_register()

    def register(self, spec: NodeSpec) -> None:
        """Register a tag specification (and its aliases)"""
        self.specs[spec.name] = spec
        for alias in spec.aliases:
            self.specs[alias] = spec

    def spec_get(self, tag: str) -> Optional[NodeSpec]:
        """Full specification for ``tag``, or None if unknown"""
        return self.specs.get(tag.lower())

    def specs_listByCategory(self, category: NodeCategory) -> list[NodeSpec]:
        """All distinct specs in a category"""
        seen = []
        for spec in self.specs.values():
            if spec.category == category and spec not in seen:
                seen.append(spec)
        return seen

    def codeNodes_register(self) -> None:
        """Register code elements"""
        self.register(NodeSpec(
            name='code',
            category=NodeCategory.CODE,
            description='Inline, file-sourced or fenced (optionally executed) code',
            factory=code_classify,
            examples=[
                '<code>x := 1</code>',
                '<code src="main.go#setup"></code>',
                '<code language="python" exec>print("hi")</code>',
            ],
        ))

    def structuralNodes_register(self) -> None:
        """Register elements the parser consumes itself"""
        self.register(NodeSpec(
            name='section',
            category=NodeCategory.STRUCTURAL,
            description='Starts a new section (page); optional number attribute',
            examples=['<section>', '<section number="3">'],
        ))
