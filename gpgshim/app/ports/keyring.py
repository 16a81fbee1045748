"""Keyring port interface for OpenPGP key import and signature verification."""

from typing import Protocol

from gpgshim.protocol.status import ImportResult, VerifyResult


class KeyringPort(Protocol):
    """Port interface for OpenPGP keyring operations.

    Only the two operations needed to check detached signatures are exposed.

    Side effects: Mutates the keyring on import.
    """

    def import_key(self, key: bytes | str) -> ImportResult:
        """Import public key material.

        Args:
            key: ASCII-armored or binary key data

        Returns:
            ImportResult (imported == 0 when nothing was imported)
        """
        ...

    def verify(self, message: bytes | str, signature: bytes | str) -> VerifyResult | None:
        """Verify a detached signature.

        Args:
            message: Signed data
            signature: Detached signature over ``message``

        Returns:
            VerifyResult, or None when no verdict could be determined
        """
        ...
