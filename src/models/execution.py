"""
Execution result models
"""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class CommandResult:
    """
    Outcome of running one external command

    Attributes:
        argv: Command and arguments as executed
        returncode: Exit status (negative for signals on POSIX)
        stdout: Captured standard output
        stderr: Captured standard error
        duration: Wall-clock seconds the command ran
        timed_out: True if the command was killed for exceeding its own limit
    """
    argv: Tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str
    duration: float
    timed_out: bool = False

    def output_combined(self) -> str:
        """stdout followed by stderr, for diagnostics"""
        if self.stdout and self.stderr:
            return f"{self.stdout.rstrip()}\n{self.stderr}"
        return self.stdout or self.stderr
