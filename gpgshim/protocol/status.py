"""Parser for the gpg machine-readable status protocol (``--status-fd``).

gpg reports outcomes as lines of the form::

    [GNUPG:] VALIDSIG D8406D0D82947747...2C20A 2014-07-19 1405769272 0 4 0 1 10 00 D840...C20A
    [GNUPG:] BADSIG 4AA394086372C20A Sebastian Bergmann <sb@sebastian-bergmann.de>
    [GNUPG:] ERRSIG 4AA394086372C20A 1 10 00 1405769272 9
    [GNUPG:] IMPORT_OK 1 D8406D0D82947747...2C20A

Only these lines are interpreted. Human-readable output is never consulted.
All functions here are pure: no I/O, no state.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from enum import IntEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

VALIDSIG = "VALIDSIG"
BADSIG = "BADSIG"
ERRSIG = "ERRSIG"

# Field positions once a line is split on single spaces. Position 0 is the
# status prefix and position 1 the marker itself.
_KEY_FIELD = 2
_VALIDSIG_TIMESTAMP_FIELD = 4
_ERRSIG_TIMESTAMP_FIELD = 6
_MIN_FIELDS = 3

_IMPORT_OK = re.compile(r"IMPORT_OK\s(\d+)\s(\S+)")


class SummaryCode(IntEnum):
    """Verification outcome codes, numerically compatible with pecl/gnupg."""

    VALID = 0
    BAD = 4
    ERROR = 128


class ImportResult(BaseModel):
    """Outcome of a single ``--import`` invocation."""

    model_config = ConfigDict(frozen=True)

    imported: int = Field(default=0, ge=0, description="Count reported by IMPORT_OK")
    fingerprint: str = Field(default="", description="Fingerprint of the imported key")

    def to_legacy(self) -> dict[str, Any]:
        """Return the pecl/gnupg-style mapping (no fingerprint key when nothing was imported)."""
        if not self.fingerprint:
            return {"imported": self.imported}
        return {"imported": self.imported, "fingerprint": self.fingerprint}


class VerifyResult(BaseModel):
    """Verdict extracted from a ``--verify`` invocation."""

    model_config = ConfigDict(frozen=True)

    fingerprint: str = Field(..., description="Key id or fingerprint from the verdict line")
    validity: int = Field(default=0, description="Reserved; always 0")
    timestamp: int = Field(default=0, description="Signature creation time (Unix seconds), 0 if unknown")
    status: tuple[str, ...] = Field(default=(), description="All status lines in emission order")
    summary: SummaryCode = Field(..., description="Outcome category of the verdict line")

    @property
    def is_valid(self) -> bool:
        return self.summary is SummaryCode.VALID

    def to_legacy(self) -> dict[str, Any]:
        """Return the pecl/gnupg-style mapping for one signature."""
        return {
            "fingerprint": self.fingerprint,
            "validity": self.validity,
            "timestamp": self.timestamp,
            "status": list(self.status),
            "summary": int(self.summary),
        }


def split_status_line(line: str) -> list[str]:
    """Split ``line`` on single spaces, preserving empty fields between doubled spaces."""
    return line.split(" ")


def _field_as_int(fields: list[str], index: int) -> int:
    try:
        return int(fields[index])
    except (IndexError, ValueError):
        return 0


def _normalize(lines: Iterable[str]) -> tuple[str, ...]:
    return tuple(line.rstrip("\r\n") for line in lines)


def parse_verify_output(lines: Iterable[str]) -> VerifyResult | None:
    """Interpret the status lines of one ``--verify`` run.

    The first line carrying ``VALIDSIG``, ``BADSIG`` or ``ERRSIG`` decides the
    verdict and the scan stops there; later verdict lines are ignored even if
    they contradict it. Markers are matched as substrings so any status prefix
    is tolerated. Lines with fewer than three fields are skipped but kept in
    :attr:`VerifyResult.status`.

    Args:
        lines: Captured standard output, one entry per line

    Returns:
        The verdict, or None when no verdict marker was emitted at all
    """
    status = _normalize(lines)

    for line in status:
        fields = split_status_line(line)
        if len(fields) < _MIN_FIELDS:
            continue

        fingerprint = fields[_KEY_FIELD]

        if VALIDSIG in line:
            return VerifyResult(
                fingerprint=fingerprint,
                timestamp=_field_as_int(fields, _VALIDSIG_TIMESTAMP_FIELD),
                status=status,
                summary=SummaryCode.VALID,
            )

        if BADSIG in line:
            return VerifyResult(
                fingerprint=fingerprint,
                timestamp=0,
                status=status,
                summary=SummaryCode.BAD,
            )

        if ERRSIG in line:
            return VerifyResult(
                fingerprint=fingerprint,
                timestamp=_field_as_int(fields, _ERRSIG_TIMESTAMP_FIELD),
                status=status,
                summary=SummaryCode.ERROR,
            )

    return None


def parse_import_output(lines: Iterable[str]) -> ImportResult:
    """Interpret the status lines of one ``--import`` run.

    When gpg reports several ``IMPORT_OK`` lines the last one wins. Absence of
    the marker means nothing was imported; it is not an error.
    """
    matches = _IMPORT_OK.findall("\n".join(_normalize(lines)))
    if not matches:
        return ImportResult(imported=0)

    count, fingerprint = matches[-1]
    return ImportResult(imported=int(count), fingerprint=fingerprint)
