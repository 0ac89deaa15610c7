"""NDEF record core — header bit-packing, record encode, record decode.

Wire layout of one record (NFC Forum NDEF 1.0, §3.2):

    flags           1 byte   MB ME CF SR IL TNF(3)
    TYPE_LENGTH     1 byte
    PAYLOAD_LENGTH  1 byte if SR else 4 bytes (uint32be)
    ID_LENGTH       1 byte   only if IL
    TYPE            TYPE_LENGTH bytes
    ID              ID_LENGTH bytes, only if IL
    PAYLOAD         PAYLOAD_LENGTH bytes

Encoding is two-phase because the width of PAYLOAD_LENGTH depends on a
payload the constructor has not produced yet.  We reserve the short-form
header, let the constructor write behind it, and only if the payload turns
out longer than 255 bytes move it three bytes forward to make room for the
long length field.  The header itself is written last.
"""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass
from typing import Any, Optional, Tuple

from ._constants import (
    FLAG_CF,
    FLAG_IL,
    FLAG_ME,
    FLAG_MB,
    FLAG_SR,
    FLAGS_SIZE,
    ID_LENGTH_SIZE,
    LOCATION_MASK,
    LONG_LENGTH_EXTRA,
    LONG_PAYLOAD_LENGTH_SIZE,
    MAX_PAYLOAD_LENGTH,
    SHORT_PAYLOAD_LENGTH_SIZE,
    SHORT_RECORD_MAX,
    TNF,
    TNF_MASK,
    TYPE_LENGTH_SIZE,
    RecordLocation,
)
from ._descriptor import RecordDescriptor
from ._errors import ERR_DECODE, ERR_INVALID_PARAM, NdefError, out_of_space

logger = logging.getLogger(__name__)


# ── Parameter checks ──────────────────────────────────────────

def _check_location(location: Any) -> RecordLocation:
    # bool is an int subclass; True would otherwise pass as 0x01 and fail
    # with a less helpful message.
    if isinstance(location, bool) or not isinstance(location, int):
        raise NdefError(ERR_INVALID_PARAM,
                        "record location must be a RecordLocation, got {!r}".format(location))
    try:
        return RecordLocation(location)
    except ValueError:
        raise NdefError(ERR_INVALID_PARAM,
                        "invalid record location 0x{:02x}".format(location))


def _writable_view(buffer: Any) -> memoryview:
    view = memoryview(buffer)
    if view.readonly:
        raise TypeError("output buffer must be writable, got read-only {}".format(
            type(buffer).__name__))
    return view.cast("B") if view.format != "B" or view.ndim != 1 else view


def _byte_view(value: Any) -> memoryview:
    view = memoryview(value)
    return view.cast("B") if view.format != "B" or view.ndim != 1 else view


# ── Header / flags ────────────────────────────────────────────

def record_flags(tnf: int, location: int, short_record: bool, id_present: bool) -> int:
    """Pack the leading flags byte.  CF is always 0."""
    if isinstance(tnf, bool) or not isinstance(tnf, int) or tnf & ~TNF_MASK:
        raise NdefError(ERR_INVALID_PARAM, "TNF must be 0..7, got {!r}".format(tnf))
    flags = int(_check_location(location)) | int(tnf)
    if short_record:
        flags |= FLAG_SR
    if id_present:
        flags |= FLAG_IL
    return flags


def header_size(type_length: int, id_length: int, short_record: bool) -> int:
    """Size of everything before PAYLOAD for the given field lengths."""
    size = FLAGS_SIZE + TYPE_LENGTH_SIZE
    size += SHORT_PAYLOAD_LENGTH_SIZE if short_record else LONG_PAYLOAD_LENGTH_SIZE
    if id_length > 0:
        size += ID_LENGTH_SIZE
    return size + type_length + id_length


def write_header(buffer: Any, descriptor: RecordDescriptor, location: int,
                 payload_length: int) -> int:
    """Write the full record header at buffer[0:] and return its size.

    SR is derived from payload_length, IL from the descriptor's ID.
    """
    if not 0 <= payload_length <= MAX_PAYLOAD_LENGTH:
        raise NdefError(ERR_INVALID_PARAM,
                        "payload length {} outside uint32 range".format(payload_length))
    view = _writable_view(buffer)
    type_len = descriptor.type_length
    id_len = descriptor.id_length
    short = payload_length <= SHORT_RECORD_MAX
    size = header_size(type_len, id_len, short)
    if size > len(view):
        raise out_of_space(size, len(view), "record header")

    view[0] = record_flags(descriptor.tnf, location, short, id_len > 0)
    view[1] = type_len
    off = FLAGS_SIZE + TYPE_LENGTH_SIZE
    if short:
        view[off] = payload_length
        off += SHORT_PAYLOAD_LENGTH_SIZE
    else:
        struct.pack_into(">I", view, off, payload_length)
        off += LONG_PAYLOAD_LENGTH_SIZE
    if id_len:
        view[off] = id_len
        off += ID_LENGTH_SIZE
    view[off:off + type_len] = _byte_view(descriptor.type)
    off += type_len
    if id_len:
        view[off:off + id_len] = _byte_view(descriptor.id)
        off += id_len
    return off


# ── Encode ────────────────────────────────────────────────────

def encode(descriptor: RecordDescriptor, location: int, buffer: Any,
           capacity: Optional[int] = None) -> int:
    """Encode one record into buffer[0:capacity] and return its length.

    buffer must be writable (bytearray, writable memoryview, array …);
    capacity defaults to the whole buffer and may not exceed it.

    Raises NdefError(ERR_INVALID_PARAM) for a bad location or capacity,
    NdefError(ERR_NO_MEM) when the record does not fit, and re-raises
    whatever the payload constructor raises.  After any failure the bytes in
    buffer[0:capacity] are unspecified and must not be read as a record.
    Nothing is ever written at or beyond capacity.
    """
    location = _check_location(location)
    view = _writable_view(buffer)
    if capacity is None:
        capacity = len(view)
    elif isinstance(capacity, bool) or not 0 <= capacity <= len(view):
        raise NdefError(ERR_INVALID_PARAM,
                        "capacity {!r} outside 0..{}".format(capacity, len(view)))

    type_len = descriptor.type_length
    id_len = descriptor.id_length

    # Phase 1: reserve the short-form header and let the constructor write
    # the payload right behind it.
    offset = header_size(type_len, id_len, short_record=True)
    if offset > capacity:
        raise out_of_space(offset, capacity, "record header")
    available = capacity - offset
    written = descriptor.payload_constructor(
        descriptor.payload_descriptor, view[offset:capacity])
    if isinstance(written, bool) or not isinstance(written, int) \
            or not 0 <= written <= available:
        raise NdefError(ERR_INVALID_PARAM,
                        "payload constructor reported {!r} bytes, {} available".format(
                            written, available))
    if written > MAX_PAYLOAD_LENGTH:
        raise NdefError(ERR_INVALID_PARAM, "payload exceeds uint32 length")

    # Phase 2: a long payload needs three more header bytes.
    hdr = offset
    if written > SHORT_RECORD_MAX:
        hdr = offset + LONG_LENGTH_EXTRA
        total = hdr + written
        if total > capacity:
            raise out_of_space(total, capacity)
        # Source and destination overlap; go through a copy.
        view[hdr:total] = bytes(view[offset:offset + written])
        logger.debug("relocated %d payload bytes from %d to %d", written, offset, hdr)

    write_header(view, descriptor, location, written)
    logger.debug("encoded record tnf=%s location=%s header=%d payload=%d",
                 descriptor.tnf.name, location.name, hdr, written)
    return hdr + written


# ── Decode ────────────────────────────────────────────────────

@dataclass(frozen=True)
class DecodedRecord:
    """One record as read back from the wire."""

    tnf: TNF
    type: bytes
    id: bytes
    payload: bytes
    message_begin: bool
    message_end: bool
    short_record: bool

    @property
    def location(self) -> RecordLocation:
        flags = (FLAG_MB if self.message_begin else 0) | (FLAG_ME if self.message_end else 0)
        return RecordLocation(flags & LOCATION_MASK)

    @property
    def id_present(self) -> bool:
        return len(self.id) > 0


def _take(buf: memoryview, off: int, n: int, what: str) -> Tuple[bytes, int]:
    if off + n > len(buf):
        raise NdefError(ERR_DECODE, "truncated {}".format(what))
    return bytes(buf[off:off + n]), off + n


def decode_from(data: Any, offset: int = 0) -> Tuple[DecodedRecord, int]:
    """Decode one record starting at offset; return it and the end offset."""
    buf = _byte_view(data)
    off = offset
    if off >= len(buf):
        raise NdefError(ERR_DECODE, "truncated flags byte")
    flags = buf[off]
    off += FLAGS_SIZE
    if flags & FLAG_CF:
        raise NdefError(ERR_DECODE, "chunked records are not supported")
    short = bool(flags & FLAG_SR)
    il = bool(flags & FLAG_IL)

    raw, off = _take(buf, off, TYPE_LENGTH_SIZE, "TYPE_LENGTH")
    type_len = raw[0]
    if short:
        raw, off = _take(buf, off, SHORT_PAYLOAD_LENGTH_SIZE, "PAYLOAD_LENGTH")
        payload_len = raw[0]
    else:
        raw, off = _take(buf, off, LONG_PAYLOAD_LENGTH_SIZE, "PAYLOAD_LENGTH")
        payload_len = struct.unpack(">I", raw)[0]
    id_len = 0
    if il:
        raw, off = _take(buf, off, ID_LENGTH_SIZE, "ID_LENGTH")
        id_len = raw[0]

    rtype, off = _take(buf, off, type_len, "TYPE")
    rid, off = _take(buf, off, id_len, "ID")
    payload, off = _take(buf, off, payload_len, "PAYLOAD")

    record = DecodedRecord(
        tnf=TNF(flags & TNF_MASK),
        type=rtype,
        id=rid,
        payload=payload,
        message_begin=bool(flags & FLAG_MB),
        message_end=bool(flags & FLAG_ME),
        short_record=short,
    )
    logger.debug("decoded record tnf=%s type_len=%d id_len=%d payload=%d",
                 record.tnf.name, type_len, id_len, payload_len)
    return record, off


def decode(data: Any) -> DecodedRecord:
    """Decode exactly one record; trailing bytes are an error."""
    record, end = decode_from(data)
    if end != len(_byte_view(data)):
        raise NdefError(ERR_DECODE, "trailing bytes after record")
    return record
