"""ndefrec error codes and exception class.

Codes mirror the status values the encoder reports: out of space, invalid
parameter, and (decoder only) malformed input.  Anything a payload
constructor raises on its own is passed through untouched, so callers may see
exceptions that are not NdefError at all.
"""

from __future__ import annotations

# ── Error codes ──────────────────────────────────────────────

ERR_NO_MEM: str = "ERR_NO_MEM"                # record does not fit the buffer
ERR_INVALID_PARAM: str = "ERR_INVALID_PARAM"  # bad location, descriptor field, length
ERR_DECODE: str = "ERR_DECODE"                # malformed record bytes


class NdefError(Exception):
    """Exception for NDEF record encode/decode errors.

    The `.code` attribute is one of the ERR_* strings above and is what
    tests and the CLI compare against.
    """

    def __init__(self, code: str, msg: str = "") -> None:
        super().__init__(msg or code)
        self.code = code


def out_of_space(needed: int, available: int, what: str = "record") -> NdefError:
    """Build the ERR_NO_MEM error with the sizes that did not fit."""
    return NdefError(
        ERR_NO_MEM,
        "{} needs {} bytes, only {} available".format(what, needed, available),
    )
