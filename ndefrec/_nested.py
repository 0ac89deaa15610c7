"""Payload constructor that embeds a whole record as the payload."""

from __future__ import annotations

from ._constants import RecordLocation
from ._core import encode
from ._descriptor import RecordDescriptor


class NestedRecordConstructor:
    """Encode the payload descriptor (a RecordDescriptor) as a lone record.

    Out-of-space inside the nested record surfaces as the outer record's
    ERR_NO_MEM, since the nested encode only ever sees the outer payload span.
    """

    def __init__(self, location: int = RecordLocation.LONE) -> None:
        self.location = location

    def __call__(self, payload_descriptor: RecordDescriptor, buffer: memoryview) -> int:
        return encode(payload_descriptor, self.location, buffer)

    def __repr__(self) -> str:
        return "NestedRecordConstructor(location={!r})".format(self.location)


nested_record = NestedRecordConstructor()
