"""Shell quoting helpers for command lines handed to the platform shell."""

from __future__ import annotations

import re
import shlex
import sys
from os import PathLike

_WINDOWS_UNSAFE = re.compile(r'["%!]')


def is_windows(platform: str | None = None) -> bool:
    """Return True when ``platform`` (default: the host) belongs to the Windows family."""

    return (platform or sys.platform).lower().startswith("win")


def null_device(platform: str | None = None) -> str:
    """Return the discard target used for stderr redirection on ``platform``."""

    return "nul" if is_windows(platform) else "/dev/null"


def quote_argument(value: str | PathLike[str], *, platform: str | None = None) -> str:
    """Quote ``value`` so the shell passes it through as exactly one argument.

    POSIX shells get :func:`shlex.quote`. ``cmd.exe`` has no reliable escape
    for double quotes or variable expansion, so those characters are replaced
    with spaces and the result is wrapped in double quotes. A trailing run of
    backslashes is doubled so it cannot escape the closing quote.

    Args:
        value: Raw argument (typically a filesystem path)
        platform: Override for the host platform string (``sys.platform``)

    Returns:
        Quoted argument safe for interpolation into a command line
    """
    text = str(value)
    if is_windows(platform):
        text = _WINDOWS_UNSAFE.sub(" ", text)
        trailing = len(text) - len(text.rstrip("\\"))
        return '"' + text + "\\" * trailing + '"'
    return shlex.quote(text)
