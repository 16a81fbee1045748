"""Subprocess-backed executor that runs the tool through the platform shell."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from gpgshim.app.ports import ExecutionError, ExecutionResult, ExecutorPort
from gpgshim.utils.shell import is_windows, quote_argument

logger = logging.getLogger(__name__)

# Exit statuses the shell itself uses for "cannot execute" / "not found".
_POSIX_NOT_EXECUTABLE = 126
_POSIX_NOT_FOUND = 127
_WINDOWS_NOT_FOUND = 9009
_POSIX_SIGNAL_BASE = 128


class ShellExecutor(ExecutorPort):
    """Run ``<quoted executable> <arguments>`` via the shell and capture stdout.

    The argument line is interpreted by the shell (it may carry a ``2>``
    redirection), so every dynamic value in it must already be quoted.
    Standard input is closed so the tool can never wait on a prompt.
    """

    def __init__(self, *, platform: str | None = None, encoding: str = "utf-8") -> None:
        self.platform = platform
        self.encoding = encoding

    def execute(self, executable: Path, arguments: str) -> ExecutionResult:
        command = f"{quote_argument(executable, platform=self.platform)} {arguments}"
        logger.debug("Executing: %s", command)

        try:
            completed = subprocess.run(
                command,
                shell=True,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                check=False,
            )
        except OSError as exc:
            raise ExecutionError(f"Failed to start {executable}: {exc}") from exc

        exit_code = completed.returncode
        self._check_exit_code(executable, exit_code)

        output = self._split_lines(completed.stdout.decode(self.encoding, errors="replace"))
        logger.debug("%s exited with %d (%d output lines)", executable, exit_code, len(output))
        return ExecutionResult(output=output, exit_code=exit_code)

    @staticmethod
    def _split_lines(text: str) -> list[str]:
        # Only "\n" terminates a status line; user IDs may carry U+2028, \x0c, etc.
        lines = text.split("\n")
        if lines and lines[-1] == "":
            lines.pop()
        return lines

    def _check_exit_code(self, executable: Path, exit_code: int) -> None:
        if exit_code < 0:
            raise ExecutionError(f"{executable} terminated by signal {-exit_code}")

        if is_windows(self.platform):
            if exit_code == _WINDOWS_NOT_FOUND:
                raise ExecutionError(f"{executable} not found")
            return

        if exit_code == _POSIX_NOT_FOUND:
            raise ExecutionError(f"{executable} not found")
        if exit_code == _POSIX_NOT_EXECUTABLE:
            raise ExecutionError(f"{executable} is not executable")
        if exit_code > _POSIX_SIGNAL_BASE:
            raise ExecutionError(
                f"{executable} terminated by signal {exit_code - _POSIX_SIGNAL_BASE}"
            )
