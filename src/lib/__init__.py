"""
litdown - literate document engine

Parses prose interleaved with code elements, runs the executable ones and
renders the result as numbered pages.
"""

__version__ = "0.1.0"

from .parser import Parser
from .engine import Engine
from .classifier import NodeRegistry, code_classify
from .context import Context, timeout_run
from .executor import document_execute
from .paginator import pages_build, page_get
from .renderer import render, pages_render
from .log import LOG, state_connectToLogger

__all__ = [
    "Parser",
    "Engine",
    "NodeRegistry",
    "code_classify",
    "Context",
    "timeout_run",
    "document_execute",
    "pages_build",
    "page_get",
    "render",
    "pages_render",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
