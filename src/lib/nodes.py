"""
Document node variants

The set of variants is closed: Text, InlineCode, SourceCode, FencedCode.
Each declares its NodeKind and whether it is executable. Executable nodes
implement ``run(ctx)``, which replaces their rendered form with content
loaded from disk or captured from a command; inert nodes inherit the no-op.

Rendering contract:
    Text         content as-is
    InlineCode   the element's source text, verbatim
    SourceCode   source text until run; afterwards a <code> element holding
                 the (HTML-escaped) file content
    FencedCode   source text, followed after a successful exec by
                 <pre class="output"><code>...</code></pre>
"""

import html
import shlex
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import ClassVar, List, Optional

from ..models.element import Element, startTag_render
from ..models.nodes import NodeKind
from .context import Context
from .errors import CancellationError, ExecutionError, UnresolvableReferenceError
from .log import LOG
from .process import command_run


# Interpreters for `exec` without an explicit command, keyed by language
INTERPRETERS = {
    'python': [sys.executable, '-'],
    'py': [sys.executable, '-'],
    'python3': [sys.executable, '-'],
    'sh': ['sh', '-s'],
    'shell': ['sh', '-s'],
    'bash': ['bash', '-s'],
}


@dataclass
class Node:
    """Base of all node variants"""

    kind: ClassVar[NodeKind]
    executable: ClassVar[bool] = False

    def render(self) -> str:
        raise NotImplementedError

    def run(self, ctx: Context) -> None:
        """Inert nodes have nothing to run"""
        return None


def node_isExecutable(node: Node) -> bool:
    """True if ``node`` is a variant with a run step"""
    return node.executable


@dataclass
class Text(Node):
    """Literal content, never executed"""

    kind: ClassVar[NodeKind] = NodeKind.TEXT

    content: str = ""

    def render(self) -> str:
        return self.content


@dataclass
class InlineCode(Node):
    """Code element without attributes; rendered verbatim"""

    kind: ClassVar[NodeKind] = NodeKind.INLINE_CODE

    element: Element = field(default_factory=lambda: Element(tag="code"))

    def render(self) -> str:
        return self.element.raw


@dataclass
class SourceCode(Node):
    """
    Code loaded from a file named by the element's ``src`` attribute

    ``src`` is relative to ``root`` and may end in ``#name`` to select the
    lines between two ``snippet: name`` marker lines.

    Attributes:
        element: Originating element
        path: Value of ``src``
        root: Directory ``path`` is resolved against
        filename: Base filename of the document that referenced the file
        content: Loaded (and snippet-trimmed) file content; None until run
    """

    kind: ClassVar[NodeKind] = NodeKind.SOURCE_CODE
    executable: ClassVar[bool] = True

    element: Element = field(default_factory=lambda: Element(tag="code"))
    path: str = ""
    root: Path = field(default_factory=Path)
    filename: str = ""
    content: Optional[str] = None

    def path_split(self) -> tuple[str, Optional[str]]:
        """Split ``src`` into file path and optional snippet name"""
        file_part, _, snippet = self.path.partition('#')
        return file_part, snippet or None

    def language_get(self) -> str:
        """Explicit ``language`` attribute, else the file extension"""
        language = self.element.attrs.get('language') or self.element.attrs.get('lang')
        if language:
            return language
        file_part, _ = self.path_split()
        return Path(file_part).suffix.lstrip('.')

    def run(self, ctx: Context) -> None:
        ctx.check()

        file_part, snippet = self.path_split()
        target = self.root / file_part
        LOG(f"Loading {target}", level=2)
        try:
            text = target.read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as e:
            raise UnresolvableReferenceError(self, self.path, e) from e

        if snippet is not None:
            text = snippet_extract(self, text, snippet)

        self.content = text

    def render(self) -> str:
        if self.content is None:
            return self.element.raw

        attrs = dict(self.element.attrs)
        language = self.language_get()
        if language and 'language' not in attrs and 'lang' not in attrs:
            attrs['language'] = language
        return f"{startTag_render(self.element.tag, attrs)}{html.escape(self.content)}</{self.element.tag}>"


def snippet_extract(node: SourceCode, text: str, name: str) -> str:
    """
    Return the lines between the two ``snippet: name`` markers in ``text``

    Raises:
        UnresolvableReferenceError: Fewer than two markers found
    """
    marker = f"snippet: {name}"
    lines = text.splitlines(keepends=True)
    hits = [i for i, line in enumerate(lines) if line.rstrip().endswith(marker)]
    if len(hits) < 2:
        raise UnresolvableReferenceError(node, node.path, LookupError(f"snippet {name!r} not found"))
    return ''.join(lines[hits[0] + 1:hits[1]])


@dataclass
class FencedCode(Node):
    """
    Code block with attributes but no ``src``

    Display-only unless the element carries ``exec``. ``exec`` with no value
    (or ``exec="true"``) picks an interpreter from ``language``; any other
    value is the command line to run. The block's text is the command's
    stdin. ``exit`` sets the expected exit status (default 0) and
    ``timeout`` a per-block limit in seconds.

    Attributes:
        element: Originating element
        language: Value of ``language`` (or ``lang``), may be empty
        command: Value of ``exec``, or None when not executable
        workdir: Working directory for the command
        output: Captured stdout after a successful run
    """

    kind: ClassVar[NodeKind] = NodeKind.FENCED_CODE
    executable: ClassVar[bool] = True

    element: Element = field(default_factory=lambda: Element(tag="code"))
    language: str = ""
    command: Optional[str] = None
    workdir: Optional[Path] = None
    output: Optional[str] = None

    def argv_resolve(self) -> List[str]:
        """
        Command line for this block

        Raises:
            ExecutionError: No interpreter known for the language, or an
                unparseable command line
        """
        command = (self.command or '').strip()
        if command and command.lower() != 'true':
            try:
                argv = shlex.split(command)
            except ValueError as e:
                raise ExecutionError(self, f"bad exec command {command!r}: {e}") from e
            if not argv:
                raise ExecutionError(self, "empty exec command")
            return argv

        interpreter = INTERPRETERS.get(self.language.lower())
        if interpreter is None:
            raise ExecutionError(self, f"don't know how to execute language {self.language!r}")
        return list(interpreter)

    def exit_expected(self) -> int:
        value = self.element.attrs.get('exit', '0')
        try:
            return int(value)
        except ValueError as e:
            raise ExecutionError(self, f"exit must be an integer, got {value!r}") from e

    def limit_get(self) -> Optional[float]:
        """``timeout`` in seconds; accepts ``1.5``, ``1.5s`` or ``500ms``"""
        value = self.element.attrs.get('timeout')
        if not value:
            return None

        number, scale = value.strip().lower(), 1.0
        if number.endswith('ms'):
            number, scale = number[:-2], 0.001
        elif number.endswith('s'):
            number = number[:-1]
        try:
            limit = float(number) * scale
        except ValueError as e:
            raise ExecutionError(
                self, f"timeout must be a number of seconds, e.g. 2, 2s or 500ms; got {value!r}"
            ) from e
        if limit <= 0:
            raise ExecutionError(self, f"timeout must be positive, got {value!r}")
        return limit

    def run(self, ctx: Context) -> None:
        if self.command is None:
            return

        ctx.check()
        argv = self.argv_resolve()
        expected = self.exit_expected()
        limit = self.limit_get()

        try:
            result = command_run(ctx, argv, stdin=self.element.text(), cwd=self.workdir, limit=limit)
        except CancellationError:
            # DeadlineExceeded is also an OSError
            raise
        except OSError as e:
            raise ExecutionError(self, f"cannot start {argv[0]!r}: {e}") from e

        if result.timed_out:
            raise ExecutionError(self, f"timed out after {limit:g}s", result.output_combined())
        if result.returncode != expected:
            raise ExecutionError(
                self,
                f"{' '.join(argv)} exited {result.returncode}, expected {expected}",
                result.output_combined(),
            )

        self.output = result.stdout

    def render(self) -> str:
        if self.output is None:
            return self.element.raw
        return f'{self.element.raw}\n<pre class="output"><code>{html.escape(self.output)}</code></pre>'
