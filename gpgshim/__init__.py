"""gpgshim - Thin wrapper around the gpg binary for key import and signature verification.

Mimics the pecl/gnupg API for the two operations needed to check detached
OpenPGP signatures.
"""

__version__ = "0.1.0"
__author__ = "gpgshim Contributors"

from gpgshim.config import Settings, get_settings

__all__ = ["Settings", "get_settings", "__version__"]
