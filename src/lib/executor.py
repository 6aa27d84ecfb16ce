"""
Execution driver

Runs a Document's executable nodes once, in document order, under a single
Context. Later blocks may depend on files or state left behind by earlier
ones, so nodes are never reordered or run concurrently, and the first
failure stops the walk.
"""

from ..models.document import Document
from .context import Context
from .log import LOG
from .nodes import node_isExecutable


def document_execute(document: Document, ctx: Context) -> None:
    """
    Execute every executable node of ``document``

    Args:
        document: Parsed document; nodes are updated in place
        ctx: Governing context

    Raises:
        CancellationError / DeadlineExceeded: ``ctx`` was done before a node
            started (including before the first one) or while it ran
        UnresolvableReferenceError, ExecutionError: First failing node
    """
    ctx.check()

    executable = [node for node in document.nodes if node_isExecutable(node)]
    LOG(f"Executing {len(executable)} of {len(document.nodes)} nodes", level=1)

    for position, node in enumerate(executable, start=1):
        ctx.check()
        LOG(f"[{position}/{len(executable)}] {node.kind.value}", level=2)
        node.run(ctx)
