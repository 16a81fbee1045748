"""Application layer for gpgshim.

This layer orchestrates gpg invocations without direct filesystem or process I/O.
All side effects are delegated to adapters via port interfaces.
"""

__all__ = [
    "GnuPGError",
    "GnuPGService",
    "InvocationError",
    "StagingError",
]

from gpgshim.app.gnupg_service import GnuPGError, GnuPGService, InvocationError, StagingError
