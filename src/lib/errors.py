"""
Error kinds raised by the litdown pipeline

Every failure in lexing, classification, execution or pagination is one of
these and reaches the caller unmodified.
"""

from typing import Any, Optional


class LitdownError(Exception):
    """Base class for all litdown pipeline errors"""


class InvalidInputError(LitdownError, ValueError):
    """A missing element, malformed attribute or unclassifiable tag"""


class UnresolvableReferenceError(LitdownError):
    """A source-file reference that cannot be opened or read"""

    def __init__(self, node: Any, path: str, cause: Optional[BaseException] = None) -> None:
        self.node = node
        self.path = path
        self.cause = cause
        message = f"{node_describe(node)}: cannot resolve {path!r}"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)


class ExecutionError(LitdownError):
    """
    An executable node whose run step failed

    Attributes:
        node: The node that failed
        cause: Human-readable reason or the underlying exception
        output: Whatever the command printed before failing (stdout + stderr)
    """

    def __init__(self, node: Any, cause: Any, output: str = "") -> None:
        self.node = node
        self.cause = cause
        self.output = output
        message = f"{node_describe(node)}: {cause}"
        if output:
            message += f"\n--- output ---\n{output.rstrip()}"
        super().__init__(message)


class CancellationError(LitdownError):
    """The governing context was cancelled before or during execution"""


class DeadlineExceeded(CancellationError, TimeoutError):
    """The governing context's deadline elapsed"""


class StructuralError(LitdownError):
    """Missing section or inconsistent section numbering"""


def node_describe(node: Any) -> str:
    """Short label for a node in error messages (kind plus source location)"""
    if node is None:
        return "<no node>"
    kind = getattr(node, 'kind', None)
    label = kind.value if kind is not None else type(node).__name__
    element = getattr(node, 'element', None)
    if element is not None and element.line:
        return f"{label} at line {element.line}"
    return label
