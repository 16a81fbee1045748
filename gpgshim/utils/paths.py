"""Path utilities for directory and staged-file operations."""

from __future__ import annotations

import logging
import os
import stat
import uuid
from pathlib import Path

logger = logging.getLogger(__name__)


def ensure_dir(path: Path, mode: int | None = None) -> Path:
    """Ensure directory exists, creating if necessary.

    ``mode`` is applied only to a directory created here. An existing
    directory keeps its permissions; a warning is logged when they are wider
    than ``mode``.
    """
    if path.is_dir():
        if mode is not None and os.name == "posix":
            current = stat.S_IMODE(path.stat().st_mode)
            if current & ~mode:
                logger.warning(
                    "Directory %s allows more access (%o) than expected (%o)",
                    path,
                    current,
                    mode,
                )
        return path

    path.mkdir(parents=True, exist_ok=True)
    if mode is not None:
        try:
            os.chmod(path, mode)
        except PermissionError as exc:
            logger.warning("Could not restrict permissions of %s to %o: %s", path, mode, exc)
    return path


def unique_name(prefix: str) -> str:
    """Return a file name starting with ``prefix`` that is unique across calls.

    The suffix is drawn from :func:`uuid.uuid4`, so concurrent threads and
    processes staging into the same directory never collide.

    Args:
        prefix: Leading part of the name (e.g. ``"gpgshim_gpg_"``)

    Returns:
        File name without directory component
    """
    return f"{prefix}{uuid.uuid4().hex}"
