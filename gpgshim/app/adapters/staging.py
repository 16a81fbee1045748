"""Filesystem-backed staging port implementation."""

from __future__ import annotations

import os
from pathlib import Path

from gpgshim.app.ports import StagingPort

_CREATE_FLAGS = os.O_WRONLY | os.O_CREAT | os.O_EXCL | getattr(os, "O_BINARY", 0)


class TemporaryDirectoryStaging(StagingPort):
    """Adapter that stages owner-only files inside one scratch directory.

    The directory is created (owner-only) when missing; an existing directory
    is used as-is.
    """

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory).expanduser().resolve()
        self.directory.mkdir(mode=0o700, parents=True, exist_ok=True)

    def write(self, name: str, content: bytes) -> Path:
        if not name or Path(name).name != name or name in {".", ".."}:
            raise ValueError(f"Invalid staged file name: {name!r}")

        path = self.directory / name

        fd = os.open(path, _CREATE_FLAGS, 0o600)
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(content)
        except BaseException:
            path.unlink(missing_ok=True)
            raise
        return path

    def delete(self, path: Path) -> None:
        Path(path).unlink(missing_ok=True)
