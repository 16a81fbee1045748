"""Concrete adapters wiring application ports to built-in implementations."""

from __future__ import annotations

from .shell_executor import ShellExecutor
from .staging import TemporaryDirectoryStaging

__all__ = [
    "ShellExecutor",
    "TemporaryDirectoryStaging",
]
