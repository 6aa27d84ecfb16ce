"""
Engine: parse, execute, paginate and render one document

The engine is the reusable entry point for library callers. It holds the
resolved RunOptions and, optionally, a caller-supplied Parser; both can be
swapped between runs, so they sit behind a single lock and are copied out
under it at the start of each run.

Example:
    >>> engine = Engine(RunOptions(root=Path("book/ch01"), filename="module.md"))
    >>> output = engine.run(Path("book/ch01/module.md").read_text())
"""

import threading
from typing import IO, Optional, Union

from ..models.document import Document
from ..models.options import RunOptions
from .context import Context, timeout_run
from .executor import document_execute
from .log import LOG
from .paginator import pages_build, page_get
from .parser import Parser
from .renderer import render, pages_render


class Engine:
    """
    Full rendering pipeline with a deadline

    Attributes:
        options: Resolved RunOptions
        parser: Parser to reuse, or None to build one per run from options
    """

    def __init__(self, options: RunOptions, parser: Optional[Parser] = None) -> None:
        self._lock = threading.Lock()
        self._options = options
        self._parser = parser
        self._document: Optional[Document] = None

    def options_set(self, options: RunOptions) -> None:
        with self._lock:
            self._options = options

    def parser_set(self, parser: Optional[Parser]) -> None:
        with self._lock:
            self._parser = parser

    def document_get(self) -> Optional[Document]:
        """Document produced by the last run that completed"""
        with self._lock:
            return self._document

    def snapshot(self) -> tuple[RunOptions, Parser]:
        """Copy options and parser out under the lock"""
        with self._lock:
            options = self._options
            parser = self._parser
        if parser is None:
            parser = Parser(
                root=options.root,
                filename=options.filename,
                section=options.section,
                workdir=options.workdir,
            )
        elif options.section is not None and parser.section != options.section:
            parser = Parser(
                root=parser.root,
                filename=parser.filename,
                section=options.section,
                workdir=parser.workdir,
                registry=parser.registry,
            )
        return options, parser

    def run(self, source: Union[str, IO[str]], ctx: Optional[Context] = None) -> str:
        """
        Run the whole pipeline under the configured timeout

        Returns as soon as the pipeline finishes, fails, or the timeout
        elapses, whichever comes first.

        Args:
            source: Markup text or readable stream
            ctx: Parent context (cancelling it aborts the run)

        Returns:
            Rendered output

        Raises:
            InvalidInputError, UnresolvableReferenceError, ExecutionError,
            StructuralError: From the failing stage
            CancellationError / DeadlineExceeded: Cancelled or timed out
        """
        options, parser = self.snapshot()
        if not isinstance(source, str):
            source = source.read()

        document, output = timeout_run(
            ctx, options.timeout, lambda child: self.process(source, child, options, parser)
        )
        with self._lock:
            self._document = document
        return output

    def process(
        self, source: str, ctx: Context, options: RunOptions, parser: Parser
    ) -> tuple[Document, str]:
        """Pipeline body; runs on the timeout worker and touches no engine state"""
        LOG(f"Processing {options.filename or '<stdin>'} from {options.root}", level=1)

        document = parser.parse(source)

        if options.parse_only:
            LOG("Parse only: skipping execution", level=1)
        else:
            document_execute(document, ctx)

        if options.page is not None:
            return document, render(page_get(document, options.page))

        pages = pages_build(document, marker=options.break_marker)
        LOG(f"Rendering {len(pages)} pages", level=1)
        return document, pages_render(pages)
