"""Payload constructors — the pluggable half of record encoding.

The encoder frames a record; it does not know where the payload comes from.
A payload constructor is handed its own descriptor plus a writable view over
the space left in the output buffer, writes the payload at the start of that
view and returns how many bytes it wrote.

Contract for every constructor:

  - never write past ``len(buffer)``; the view length *is* the available
    length,
  - if the payload does not fit, raise ``NdefError(ERR_NO_MEM)``; bytes may
    already have been written, the call still counts as failed,
  - any other failure is the constructor's own business and the encoder
    re-raises it unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Protocol, Union

from ._constants import MAX_PAYLOAD_LENGTH
from ._errors import ERR_INVALID_PARAM, NdefError, out_of_space

BytesLike = Union[bytes, bytearray, memoryview]


class PayloadConstructor(Protocol):
    """Anything callable as ``constructor(payload_descriptor, buffer) -> int``."""

    def __call__(self, payload_descriptor: Any, buffer: memoryview) -> int:
        ...


# ── Binary payload ────────────────────────────────────────────

@dataclass(frozen=True)
class BinaryPayload:
    """A fixed blob copied verbatim into the payload field.

    ``length`` defaults to ``len(data)``; a shorter length copies a prefix.
    """

    data: BytesLike
    length: Optional[int] = None

    def __post_init__(self) -> None:
        try:
            size = memoryview(self.data).nbytes
        except TypeError:
            raise NdefError(ERR_INVALID_PARAM,
                            "binary payload must be bytes-like, not {}".format(
                                type(self.data).__name__))
        if self.length is None:
            object.__setattr__(self, "length", size)
        elif not 0 <= self.length <= size:
            raise NdefError(ERR_INVALID_PARAM,
                            "binary payload length {} outside 0..{}".format(
                                self.length, size))
        if self.length > MAX_PAYLOAD_LENGTH:
            raise NdefError(ERR_INVALID_PARAM, "binary payload exceeds uint32 length")


class BinaryCopyConstructor:
    """Copy a BinaryPayload into the destination view."""

    def __call__(self, payload_descriptor: BinaryPayload, buffer: memoryview) -> int:
        n = payload_descriptor.length
        if n > len(buffer):
            raise out_of_space(n, len(buffer), "binary payload")
        buffer[:n] = memoryview(payload_descriptor.data).cast("B")[:n]
        return n

    def __repr__(self) -> str:
        return "BinaryCopyConstructor()"


# Shared instance; the constructor holds no state.
bin_payload_memcopy = BinaryCopyConstructor()
