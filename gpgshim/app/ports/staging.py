"""Staging port interface for short-lived input files."""

from pathlib import Path
from typing import Protocol


class StagingPort(Protocol):
    """Port interface for temporary file staging.

    Abstracts the scratch directory so the gateway can be tested without
    touching the real filesystem. Name uniqueness is the caller's job.

    Side effects: Creates and removes files (offline).
    """

    def write(self, name: str, content: bytes) -> Path:
        """Create file ``name`` holding ``content``.

        Args:
            name: File name (no directory component)
            content: Full file content

        Returns:
            Absolute path of the created file

        Raises:
            OSError: If the file exists already or cannot be written
        """
        ...

    def delete(self, path: Path) -> None:
        """Remove a previously staged file.

        Args:
            path: Path returned by :meth:`write`
        """
        ...
