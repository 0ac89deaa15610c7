"""ndefrec — NFC NDEF record encoder.

Encode one NDEF record into a caller-owned buffer.  The payload is produced
at encode time by a pluggable payload constructor, so the record framing
never needs to know the payload length up front.

Quick start:
    >>> from ndefrec import TNF, RecordLocation, bin_record_descriptor, encode
    >>> desc = bin_record_descriptor(TNF.WELL_KNOWN, "T", b"\\x02en")
    >>> buf = bytearray(16)
    >>> n = encode(desc, RecordLocation.LONE, buf)
    >>> buf[:n].hex()
    'd101035402656e'

Payloads longer than 255 bytes switch the record to the long form with a
4-byte PAYLOAD_LENGTH; that choice is made after the payload is written.
"""

from __future__ import annotations

from typing import Optional

from ._constants import (
    DEFAULT_MAX_RECORD_SIZE,
    MAX_ID_LENGTH,
    MAX_PAYLOAD_LENGTH,
    MAX_TYPE_LENGTH,
    SHORT_RECORD_MAX,
    TNF,
    RecordLocation,
)
from ._core import (
    DecodedRecord,
    decode,
    decode_from,
    encode,
    header_size,
    record_flags,
    write_header,
)
from ._descriptor import (
    RecordDescriptor,
    bin_record_descriptor,
    generic_record_descriptor,
)
from ._errors import (
    ERR_DECODE,
    ERR_INVALID_PARAM,
    ERR_NO_MEM,
    NdefError,
)
from ._nested import NestedRecordConstructor, nested_record
from ._payload import (
    BinaryCopyConstructor,
    BinaryPayload,
    PayloadConstructor,
    bin_payload_memcopy,
)

__version__ = "1.0.0"

__all__ = [
    # Encoding
    "encode",
    "encode_to_bytes",
    "record_flags",
    "header_size",
    "write_header",
    # Decoding
    "decode",
    "decode_from",
    "DecodedRecord",
    # Descriptors
    "RecordDescriptor",
    "generic_record_descriptor",
    "bin_record_descriptor",
    # Payload constructors
    "PayloadConstructor",
    "BinaryPayload",
    "BinaryCopyConstructor",
    "bin_payload_memcopy",
    "NestedRecordConstructor",
    "nested_record",
    # Enums and limits
    "TNF",
    "RecordLocation",
    "MAX_TYPE_LENGTH",
    "MAX_ID_LENGTH",
    "MAX_PAYLOAD_LENGTH",
    "SHORT_RECORD_MAX",
    # Exception
    "NdefError",
    # Error codes
    "ERR_NO_MEM",
    "ERR_INVALID_PARAM",
    "ERR_DECODE",
]


# ── Convenience ───────────────────────────────────────────────

def encode_to_bytes(descriptor: RecordDescriptor,
                    location: int = RecordLocation.LONE,
                    max_size: Optional[int] = None) -> bytes:
    """Encode into a scratch buffer of max_size bytes and return the record.

    For callers that do not manage their own buffer.  ERR_NO_MEM means the
    record is larger than max_size.
    """
    scratch = bytearray(DEFAULT_MAX_RECORD_SIZE if max_size is None else max_size)
    n = encode(descriptor, location, scratch)
    return bytes(scratch[:n])
