"""
External command runner

Runs one command to completion under a Context, feeding it stdin and
capturing stdout/stderr. The command runs in its own session so that it and
anything it starts can be killed together as soon as the context is done;
a per-command time limit can be layered on top.
"""

import os
import signal
import subprocess
import time
from pathlib import Path
from typing import Optional, Sequence, Tuple

from ..config import appsettings
from ..models.execution import CommandResult
from .context import Context
from .log import LOG


def command_run(
    ctx: Context,
    argv: Sequence[str],
    stdin: Optional[str] = None,
    cwd: Optional[Path] = None,
    limit: Optional[float] = None,
) -> CommandResult:
    """
    Run ``argv`` and capture its output

    Args:
        ctx: Governing context; checked before starting and between waits
        argv: Command and arguments (no shell)
        stdin: Text fed to the command's standard input
        cwd: Working directory
        limit: Seconds after which the command is killed and reported as
               timed out (independent of the context deadline)

    Returns:
        CommandResult with exit status and captured output

    Raises:
        CancellationError / DeadlineExceeded: Context done before or while
            the command ran (its whole process group is killed first)
        OSError: The command could not be started
    """
    ctx.check()

    LOG(f"Running {' '.join(argv)} in {cwd}", level=2)
    started = time.monotonic()
    proc = subprocess.Popen(
        list(argv),
        stdin=subprocess.PIPE if stdin is not None else subprocess.DEVNULL,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        cwd=str(cwd) if cwd is not None else None,
        text=True,
        start_new_session=True,
    )

    pending = stdin
    timed_out = False
    while True:
        slice_ = appsettings.poll_interval
        remaining = ctx.remaining()
        if remaining is not None:
            slice_ = min(slice_, remaining)
        try:
            # input may only be passed on the first call
            stdout, stderr = proc.communicate(pending, timeout=slice_)
            break
        except subprocess.TimeoutExpired:
            pending = None

        if ctx.done():
            process_kill(proc)
            LOG(f"Killed {argv[0]}: context done", level=2)
            ctx.check()

        if limit is not None and time.monotonic() - started >= limit:
            stdout, stderr = process_kill(proc)
            LOG(f"Killed {argv[0]}: over its {limit:g}s limit", level=2)
            timed_out = True
            break

    result = CommandResult(
        argv=tuple(argv),
        returncode=proc.returncode,
        stdout=stdout or "",
        stderr=stderr or "",
        duration=time.monotonic() - started,
        timed_out=timed_out,
    )
    LOG(f"{argv[0]} exited {result.returncode} after {result.duration:.3f}s", level=2)
    return result


def process_kill(proc: subprocess.Popen, drain: float = 1.0) -> Tuple[str, str]:
    """
    Kill ``proc`` and every process in its session, then collect its output

    The pipes are drained for at most ``drain`` seconds; whatever has not
    arrived by then is dropped.

    Returns:
        (stdout, stderr) captured so far
    """
    try:
        os.killpg(proc.pid, signal.SIGKILL)
    except ProcessLookupError:
        # group already gone
        pass

    try:
        stdout, stderr = proc.communicate(timeout=drain)
    except subprocess.TimeoutExpired:
        LOG(f"Output of pid {proc.pid} not drained after {drain:g}s", level=2)
        for pipe in (proc.stdin, proc.stdout, proc.stderr):
            if pipe is not None:
                pipe.close()
        proc.wait()
        return "", ""
    return stdout or "", stderr or ""
