"""gpg status protocol parsing."""

from gpgshim.protocol.status import (
    BADSIG,
    ERRSIG,
    VALIDSIG,
    ImportResult,
    SummaryCode,
    VerifyResult,
    parse_import_output,
    parse_verify_output,
    split_status_line,
)

__all__ = [
    "BADSIG",
    "ERRSIG",
    "VALIDSIG",
    "ImportResult",
    "SummaryCode",
    "VerifyResult",
    "parse_import_output",
    "parse_verify_output",
    "split_status_line",
]
