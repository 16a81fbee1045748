"""Utility modules for common operations."""

from gpgshim.utils.paths import ensure_dir, unique_name
from gpgshim.utils.shell import is_windows, null_device, quote_argument

__all__ = [
    "ensure_dir",
    "is_windows",
    "null_device",
    "quote_argument",
    "unique_name",
]
