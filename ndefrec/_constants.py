"""NDEF record constants — TNF values, record locations, flag bits, limits.

Field layout reference: NFC Forum NDEF 1.0, §3.2 (record layout).
"""

from __future__ import annotations

import enum


class TNF(enum.IntEnum):
    """Type Name Format: how the TYPE field of a record is to be read."""

    EMPTY = 0x00
    WELL_KNOWN = 0x01
    MEDIA_TYPE = 0x02
    ABSOLUTE_URI = 0x03
    EXTERNAL_TYPE = 0x04
    UNKNOWN_TYPE = 0x05
    UNCHANGED = 0x06
    RESERVED = 0x07


class RecordLocation(enum.IntEnum):
    """Position of a record inside its message.

    The values are the MB/ME bits already shifted into place, so a location
    can be OR-ed straight into the flags byte.
    """

    FIRST = 0x80
    MIDDLE = 0x00
    LAST = 0x40
    LONE = 0xC0


# ── Flags byte (byte 0) ──────────────────────────────────────
#   bit 7   6    5    4    3    2..0
#      MB  ME   CF   SR   IL   TNF
FLAG_MB: int = 0x80
FLAG_ME: int = 0x40
FLAG_CF: int = 0x20  # never emitted, chunking is not supported
FLAG_SR: int = 0x10
FLAG_IL: int = 0x08
TNF_MASK: int = 0x07
LOCATION_MASK: int = FLAG_MB | FLAG_ME

# ── Field sizes ──────────────────────────────────────────────
FLAGS_SIZE: int = 1
TYPE_LENGTH_SIZE: int = 1
ID_LENGTH_SIZE: int = 1
SHORT_PAYLOAD_LENGTH_SIZE: int = 1
LONG_PAYLOAD_LENGTH_SIZE: int = 4

# Extra bytes a long-form header needs compared with its short-form twin.
LONG_LENGTH_EXTRA: int = LONG_PAYLOAD_LENGTH_SIZE - SHORT_PAYLOAD_LENGTH_SIZE

# ── Limits ───────────────────────────────────────────────────
MAX_TYPE_LENGTH: int = 0xFF
MAX_ID_LENGTH: int = 0xFF
SHORT_RECORD_MAX: int = 0xFF          # largest payload that still sets SR
MAX_PAYLOAD_LENGTH: int = 0xFFFFFFFF  # PAYLOAD_LENGTH is a uint32

# Scratch size used by encode_to_bytes() when the caller gives none.
DEFAULT_MAX_RECORD_SIZE: int = 64 * 1024
