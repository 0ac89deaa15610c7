"""Record descriptors — the immutable description of one NDEF record.

A descriptor names the record's TNF, TYPE and optional ID and points at the
payload constructor (plus that constructor's own descriptor) that will
produce the payload at encode time.  Descriptors are plain values; build them
directly or with the two helpers at the bottom of this module.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from ._constants import MAX_ID_LENGTH, MAX_TYPE_LENGTH, TNF, TNF_MASK
from ._errors import ERR_INVALID_PARAM, NdefError
from ._payload import BinaryPayload, BytesLike, PayloadConstructor, bin_payload_memcopy


def _field_length(value: Any, name: str, limit: int) -> int:
    try:
        n = memoryview(value).nbytes
    except TypeError:
        raise NdefError(ERR_INVALID_PARAM,
                        "{} must be bytes-like, not {}".format(name, type(value).__name__))
    if n > limit:
        raise NdefError(ERR_INVALID_PARAM,
                        "{} length {} exceeds {}".format(name, n, limit))
    return n


@dataclass(frozen=True)
class RecordDescriptor:
    """Everything the encoder needs to frame one record.

    The byte fields are referenced, not copied: they must stay unchanged
    until encode() returns.
    """

    tnf: TNF
    type: BytesLike = b""
    id: BytesLike = b""
    payload_constructor: PayloadConstructor = bin_payload_memcopy
    payload_descriptor: Any = None

    def __post_init__(self) -> None:
        tnf = self.tnf
        if isinstance(tnf, bool) or not isinstance(tnf, int) or tnf & ~TNF_MASK:
            raise NdefError(ERR_INVALID_PARAM, "TNF must be 0..7, got {!r}".format(tnf))
        object.__setattr__(self, "tnf", TNF(tnf))
        _field_length(self.type, "type", MAX_TYPE_LENGTH)
        _field_length(self.id, "id", MAX_ID_LENGTH)
        if not callable(self.payload_constructor):
            raise NdefError(ERR_INVALID_PARAM, "payload constructor must be callable")

    @property
    def type_length(self) -> int:
        return memoryview(self.type).nbytes

    @property
    def id_length(self) -> int:
        return memoryview(self.id).nbytes

    @property
    def has_id(self) -> bool:
        return self.id_length > 0


# ── Builders ──────────────────────────────────────────────────

def _as_bytes(value: Union[str, BytesLike], name: str) -> BytesLike:
    # TYPE and ID are US-ASCII on the wire.
    if isinstance(value, str):
        try:
            return value.encode("ascii")
        except UnicodeEncodeError:
            raise NdefError(ERR_INVALID_PARAM, "{} must be ascii text".format(name))
    return value


def generic_record_descriptor(tnf: int,
                              type: Union[str, BytesLike],
                              payload_constructor: PayloadConstructor,
                              payload_descriptor: Any,
                              id: Union[str, BytesLike] = b"") -> RecordDescriptor:
    """Descriptor for a record whose payload comes from any constructor."""
    return RecordDescriptor(
        tnf=tnf,
        type=_as_bytes(type, "type"),
        id=_as_bytes(id, "id"),
        payload_constructor=payload_constructor,
        payload_descriptor=payload_descriptor,
    )


def bin_record_descriptor(tnf: int,
                          type: Union[str, BytesLike],
                          payload: BytesLike,
                          id: Union[str, BytesLike] = b"") -> RecordDescriptor:
    """Descriptor for a record whose payload is a fixed byte blob.

    >>> d = bin_record_descriptor(TNF.WELL_KNOWN, "T", b"\\x02en")
    >>> d.payload_descriptor.length
    3
    """
    return generic_record_descriptor(tnf, type, bin_payload_memcopy,
                                     BinaryPayload(payload), id=id)
