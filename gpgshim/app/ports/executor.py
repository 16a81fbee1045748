"""Executor port interface for running the external signing tool."""

from pathlib import Path
from typing import Protocol

from pydantic import BaseModel, Field


class ExecutionError(RuntimeError):
    """Raised when the external process cannot be started or dies abnormally."""


class ExecutionResult(BaseModel):
    """Captured outcome of one process invocation."""

    output: list[str] = Field(default_factory=list, description="Standard output, one entry per line")
    exit_code: int = Field(default=0, description="Process exit status")


class ExecutorPort(Protocol):
    """Port interface for process execution.

    Adapters receive the executable and one pre-assembled, already-quoted
    argument line (which may include a stderr redirection).

    Side effects: Spawns a subprocess (offline).
    """

    def execute(self, executable: Path, arguments: str) -> ExecutionResult:
        """Run ``executable`` with ``arguments`` and capture standard output.

        Args:
            executable: Path to the binary
            arguments: Quoted argument line appended after the executable

        Returns:
            ExecutionResult with captured lines and exit status

        Raises:
            ExecutionError: If the process could not run to completion
        """
        ...
