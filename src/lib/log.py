"""
Centralized logging using Loguru with context-aware verbosity.

LOG() respects the verbosity of the ProgramState connected to the current
context, so parser, executor and engine code can log without carrying the
state around.

Verbosity levels used across litdown:
    1 = pipeline milestones (parsed, executed, rendered)
    2 = per-node execution and command exit status
    3 = lexer and classifier trace

Usage:
    from litdown.lib.log import LOG, state_connectToLogger

    state_connectToLogger(state)
    LOG("Executing 3 nodes", level=2)
"""

from loguru import logger
from typing import Any, Optional
from contextvars import ContextVar, copy_context
import sys

# Context variable to hold current ProgramState
_program_state: ContextVar[Optional[Any]] = ContextVar('program_state', default=None)

logger_format = (
    "<green>{time:HH:mm:ss}</green> │ "
    "<level>{level: <5}</level> │ "
    "<cyan>{function: <20}</cyan> @ "
    "<cyan>{line: <4}</cyan> ║ "
    "<level>{message}</level>"
)

logger.remove()  # Remove default handler
logger.add(sys.stderr, format=logger_format, level="DEBUG")


def state_connectToLogger(state: Any) -> None:
    """
    Connect a ProgramState (or anything with a ``verbosity`` attribute) to
    the logging context of the calling thread.

    Args:
        state: Object with an integer ``verbosity`` attribute
    """
    _program_state.set(state)


def context_capture():
    """
    Snapshot the current logging context.

    Worker threads start with an empty context; run work through the returned
    ``Context.run`` to keep LOG() verbosity on the other side.
    """
    return copy_context()


def LOG(message: str, level: int = 1, **kwargs: Any) -> None:
    """
    Log message if current state's verbosity allows.

    Args:
        message: Log message to display
        level: Minimum verbosity level required (1=normal, 2=verbose, 3=debug)
        **kwargs: Additional loguru metadata
    """
    state = _program_state.get()

    if state and hasattr(state, 'verbosity') and state.verbosity >= level:
        logger.opt(depth=1).debug(message, **kwargs)
