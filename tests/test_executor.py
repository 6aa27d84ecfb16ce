"""
Execution driver tests

Tests document-ordered execution, stop-at-first-failure and cancellation.
"""

import threading
import time

import pytest

from litdown.lib.context import Context
from litdown.lib.errors import (
    CancellationError,
    DeadlineExceeded,
    ExecutionError,
    UnresolvableReferenceError,
)
from litdown.lib.executor import document_execute
from litdown.lib.parser import Parser
from litdown.lib.renderer import render


def python_block(code):
    return f'<code language="python" exec>{code}</code>'


class TestInertDocuments:
    """Documents without executable nodes"""

    def test_inline_code_noop(self):
        """Scenario: inline code survives execution unchanged"""
        source = "Use <code>go vet</code> first."
        doc = Parser().parse(source)

        document_execute(doc, Context.background())

        assert render(doc) == source


class TestOrdering:
    """Nodes run sequentially in document order"""

    def test_later_node_sees_earlier_side_effect(self, tmp_path):
        source = (
            python_block("open('state.txt', 'w').write('from first')")
            + "\n"
            + python_block("print(open('state.txt').read())")
        )
        doc = Parser(root=tmp_path).parse(source)

        document_execute(doc, Context.background())

        assert doc.nodes[2].output == "from first\n"

    def test_stops_at_first_failure(self, tmp_path):
        source = (
            python_block("open('a.txt', 'w').write('a')")
            + python_block("import sys; sys.exit(1)")
            + python_block("open('c.txt', 'w').write('c')")
        )
        doc = Parser(root=tmp_path).parse(source)

        with pytest.raises(ExecutionError) as info:
            document_execute(doc, Context.background())

        assert info.value.node is doc.nodes[1]
        assert (tmp_path / "a.txt").exists()
        assert not (tmp_path / "c.txt").exists()
        assert doc.nodes[2].output is None

    def test_missing_source_aborts(self, tmp_path):
        source = '<code src="missing.go"></code>' + python_block("open('after.txt', 'w')")
        doc = Parser(root=tmp_path).parse(source)

        with pytest.raises(UnresolvableReferenceError):
            document_execute(doc, Context.background())

        assert not (tmp_path / "after.txt").exists()

    def test_source_and_fenced_together(self, tmp_path):
        (tmp_path / "snippet.go").write_text("package main\n")
        source = 'See <code src="snippet.go"></code> then ' + python_block("print('ok')")
        doc = Parser(root=tmp_path).parse(source)

        document_execute(doc, Context.background())
        output = render(doc)

        assert '<code src="snippet.go" language="go">package main\n</code>' in output
        assert '<pre class="output"><code>ok\n</code></pre>' in output


class TestCancellation:
    """The context bounds execution"""

    def test_expired_context_runs_nothing(self, tmp_path):
        doc = Parser(root=tmp_path).parse(python_block("open('ran.txt', 'w')"))
        ctx = Context.context_withTimeout(0.001)
        time.sleep(0.01)

        with pytest.raises(DeadlineExceeded):
            document_execute(doc, ctx)

        assert not (tmp_path / "ran.txt").exists()

    def test_cancelled_context_runs_nothing(self, tmp_path):
        doc = Parser(root=tmp_path).parse(python_block("open('ran.txt', 'w')"))
        ctx = Context.background()
        ctx.cancel()

        with pytest.raises(CancellationError):
            document_execute(doc, ctx)

        assert not (tmp_path / "ran.txt").exists()

    def test_deadline_shorter_than_node(self, tmp_path):
        """Scenario: 1ms deadline, 100ms node -> cancellation, not failure"""
        doc = Parser(root=tmp_path).parse(python_block("import time; time.sleep(0.1)"))
        ctx = Context.context_withTimeout(0.001)

        with pytest.raises(CancellationError) as info:
            document_execute(doc, ctx)

        assert not isinstance(info.value, ExecutionError)

    def test_cancel_while_running(self, tmp_path):
        doc = Parser(root=tmp_path).parse(
            python_block("import time; time.sleep(10)")
            + python_block("open('second.txt', 'w')")
        )
        ctx = Context.background()
        timer = threading.Timer(0.2, ctx.cancel)
        timer.start()

        started = time.monotonic()
        try:
            with pytest.raises(CancellationError):
                document_execute(doc, ctx)
        finally:
            timer.cancel()

        assert time.monotonic() - started < 5
        assert not (tmp_path / "second.txt").exists()

    def test_deadline_kills_grandchildren(self, tmp_path):
        """A shell waiting on its own child is stopped at the deadline"""
        doc = Parser(root=tmp_path).parse('<code language="sh" exec>sleep 4; echo hi</code>')

        started = time.monotonic()
        with pytest.raises(CancellationError):
            document_execute(doc, Context.context_withTimeout(0.2))

        assert time.monotonic() - started < 2
        assert doc.nodes[0].output is None

    def test_node_limit_kills_grandchildren(self, tmp_path):
        doc = Parser(root=tmp_path).parse(
            '<code language="sh" exec timeout="0.2">echo started; sleep 4; echo hi</code>'
        )

        started = time.monotonic()
        with pytest.raises(ExecutionError, match="timed out") as info:
            document_execute(doc, Context.background())

        assert time.monotonic() - started < 2
        assert "started" in info.value.output
        assert "hi" not in info.value.output

    def test_child_context_inherits_parent_cancel(self):
        parent = Context.background()
        child = Context.context_withTimeout(60, parent=parent)

        assert not child.done()
        parent.cancel()

        assert child.done()
        with pytest.raises(CancellationError):
            child.check()
