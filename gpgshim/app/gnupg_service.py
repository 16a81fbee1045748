"""Gateway driving the gpg binary for key import and signature verification.

A thin wrapper around gpg that mimics the pecl/gnupg API. Only the two
operations needed to check detached signatures (import and verify) are
provided.

Each call:
1. Stages its input as uniquely named files in the scratch directory
2. Runs gpg with a fixed, non-interactive baseline argument set
3. Removes the staged files, whether or not gpg succeeded
4. Interprets the ``--status-fd`` output (stdout) via the status parser
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import ExitStack, contextmanager
from pathlib import Path
from typing import Any, Literal

from gpgshim.app.ports import ExecutionError, ExecutorPort, KeyringPort, StagingPort
from gpgshim.protocol.status import (
    ImportResult,
    VerifyResult,
    parse_import_output,
    parse_verify_output,
)
from gpgshim.utils.paths import unique_name
from gpgshim.utils.shell import null_device, quote_argument

logger = logging.getLogger(__name__)

TEMP_FILE_PREFIX = "gpgshim_gpg_"


class GnuPGError(RuntimeError):
    """Base class for gateway failures."""


class InvocationError(GnuPGError):
    """gpg could not be started or terminated abnormally."""


class StagingError(GnuPGError):
    """A temporary input file could not be created or removed."""


class GnuPGService(KeyringPort):
    """Import keys and verify detached signatures with an external gpg binary."""

    def __init__(
        self,
        executor: ExecutorPort,
        staging: StagingPort,
        *,
        gpg_binary: Path,
        home_dir: Path,
        strict_invocation: bool = True,
        platform: str | None = None,
    ) -> None:
        """Initialize the gateway.

        Args:
            executor: Process execution port
            staging: Temporary file staging port
            gpg_binary: Path to the gpg executable
            home_dir: Isolated gpg home directory (``--homedir``)
            strict_invocation: Raise InvocationError when gpg cannot run.
                When False, such failures are logged and reported as
                "nothing imported" / "no verdict".
            platform: Override for the host platform string (quoting and null sink)
        """
        self.executor = executor
        self.staging = staging
        self.gpg_binary = gpg_binary
        self.home_dir = home_dir
        self.strict_invocation = strict_invocation
        self.platform = platform

    def import_key(self, key: bytes | str) -> ImportResult:
        with self._staged(key) as key_file:
            output = self._execute(["--import", self._quote(key_file)])

        if output is None:
            return ImportResult(imported=0)

        result = parse_import_output(output)
        logger.debug("Import finished: imported=%d fingerprint=%s", result.imported, result.fingerprint)
        return result

    def verify(self, message: bytes | str, signature: bytes | str) -> VerifyResult | None:
        with ExitStack() as stack:
            message_file = stack.enter_context(self._staged(message))
            signature_file = stack.enter_context(self._staged(signature))
            # gpg expects the detached signature before the signed data.
            output = self._execute(
                [
                    "--verify",
                    self._quote(signature_file),
                    self._quote(message_file),
                ]
            )

        if output is None:
            return None

        result = parse_verify_output(output)
        if result is None:
            logger.debug("No verdict found in %d status lines", len(output))
        else:
            logger.debug(
                "Verify finished: summary=%s fingerprint=%s", result.summary.name, result.fingerprint
            )
        return result

    def import_legacy(self, key: bytes | str) -> dict[str, Any]:
        """pecl/gnupg-compatible ``import``: ``{"imported": n[, "fingerprint": f]}``."""
        return self.import_key(key).to_legacy()

    def verify_legacy(
        self, message: bytes | str, signature: bytes | str
    ) -> list[dict[str, Any]] | Literal[False]:
        """pecl/gnupg-compatible ``verify``: a one-element list of signature dicts, or False."""
        result = self.verify(message, signature)
        if result is None:
            return False
        return [result.to_legacy()]

    def baseline_arguments(self) -> list[str]:
        """Arguments applied to every invocation, before operation-specific ones."""
        return [
            f"--homedir {self._quote(self.home_dir)}",
            "--quiet",
            "--status-fd 1",
            "--lock-multiple",
            "--no-permission-warning",
            "--no-greeting",
            "--exit-on-status-write-error",
            "--batch",
            "--no-tty",
        ]

    def build_argument_line(self, params: list[str]) -> str:
        """Assemble baseline + ``params`` and discard stderr to the null sink."""
        return "{} {} 2>{}".format(
            " ".join(self.baseline_arguments()),
            " ".join(params),
            null_device(self.platform),
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _quote(self, value: Path) -> str:
        return quote_argument(value, platform=self.platform)

    def _execute(self, params: list[str]) -> list[str] | None:
        """Run gpg; returns None only when a failure is folded (non-strict mode)."""
        try:
            result = self.executor.execute(self.gpg_binary, self.build_argument_line(params))
        except ExecutionError as exc:
            if self.strict_invocation:
                raise InvocationError(str(exc)) from exc
            logger.warning("gpg invocation failed, treating as empty result: %s", exc)
            return None

        if result.exit_code != 0:
            logger.debug("gpg exited with status %d", result.exit_code)
        return result.output

    @contextmanager
    def _staged(self, content: bytes | str) -> Iterator[Path]:
        """Stage ``content`` as a uniquely named file and remove it on exit."""
        data = content.encode("utf-8") if isinstance(content, str) else content
        name = unique_name(TEMP_FILE_PREFIX)

        try:
            path = self.staging.write(name, data)
        except OSError as exc:
            raise StagingError(f"Failed to stage temporary file {name}: {exc}") from exc

        try:
            yield path
        finally:
            try:
                self.staging.delete(path)
            except OSError as exc:
                raise StagingError(f"Failed to remove temporary file {path}: {exc}") from exc
