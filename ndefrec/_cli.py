"""ndefrec command-line interface.

Usage:
    ndefrec encode --tnf well-known --type T --payload-hex 02656e
    echo -n 'hello' | ndefrec encode --tnf media --type text/plain --location first
    ndefrec decode d101035402656e
    ndefrec version
"""

from __future__ import annotations

import argparse
import base64
import json
import logging
import sys
from typing import List, Optional

from . import (
    TNF,
    DecodedRecord,
    ERR_INVALID_PARAM,
    NdefError,
    RecordLocation,
    __version__,
    bin_record_descriptor,
    decode,
    encode,
)
from ._constants import DEFAULT_MAX_RECORD_SIZE

logger = logging.getLogger(__name__)

_TNF_NAMES = {
    "empty": TNF.EMPTY,
    "well-known": TNF.WELL_KNOWN,
    "media": TNF.MEDIA_TYPE,
    "absolute-uri": TNF.ABSOLUTE_URI,
    "external": TNF.EXTERNAL_TYPE,
    "unknown": TNF.UNKNOWN_TYPE,
    "unchanged": TNF.UNCHANGED,
    "reserved": TNF.RESERVED,
}

_LOCATIONS = {
    "first": RecordLocation.FIRST,
    "middle": RecordLocation.MIDDLE,
    "last": RecordLocation.LAST,
    "lone": RecordLocation.LONE,
}


def _tnf_arg(value: str) -> TNF:
    if value in _TNF_NAMES:
        return _TNF_NAMES[value]
    try:
        return TNF(int(value, 0))
    except ValueError:
        raise argparse.ArgumentTypeError(
            "TNF must be one of {} or 0..7".format(", ".join(_TNF_NAMES)))


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ndefrec",
        description="ndefrec — encode and inspect single NFC NDEF records",
    )
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Log encoder/decoder details to stderr")
    sub = parser.add_subparsers(dest="command")

    # ── encode ──
    enc_p = sub.add_parser("encode", help="Encode one record with a binary payload")
    enc_p.add_argument("--tnf", type=_tnf_arg, default=TNF.WELL_KNOWN,
                       help="Type Name Format (name or 0..7, default well-known)")
    enc_p.add_argument("--type", default="", help="TYPE field (ascii)")
    enc_p.add_argument("--id", default="", help="ID field (ascii, omitted if empty)")
    enc_p.add_argument("--location", choices=sorted(_LOCATIONS), default="lone",
                       help="Record location in its message (default lone)")
    enc_p.add_argument("--capacity", type=int, default=DEFAULT_MAX_RECORD_SIZE,
                       help="Output buffer size in bytes")
    src = enc_p.add_mutually_exclusive_group()
    src.add_argument("--payload-hex", metavar="HEX", help="Payload as hex")
    src.add_argument("--payload-text", metavar="TEXT", help="Payload as UTF-8 text")
    src.add_argument("--input", "-i", metavar="FILE",
                     help="Read the payload from FILE instead of stdin")
    enc_p.add_argument("--base64", action="store_true",
                       help="Print base64 instead of hex")

    # ── decode ──
    dec_p = sub.add_parser("decode", help="Decode one record and print it as JSON")
    dec_p.add_argument("record", nargs="?", metavar="HEX",
                       help="Record bytes as hex (default: raw bytes from --input/stdin)")
    dec_p.add_argument("--input", "-i", metavar="FILE",
                       help="Read raw record bytes from FILE instead of stdin")

    # ── version ──
    sub.add_parser("version", help="Print version and exit")

    return parser


def _read_input(filepath: Optional[str]) -> bytes:
    """Read raw bytes from a file or stdin."""
    if filepath:
        with open(filepath, "rb") as f:
            return f.read()
    if sys.stdin.isatty():
        print("ndefrec: reading from stdin (Ctrl-D to end)...", file=sys.stderr)
    return sys.stdin.buffer.read()


def _from_hex(text: str) -> bytes:
    try:
        return bytes.fromhex(text)
    except ValueError as e:
        raise NdefError(ERR_INVALID_PARAM, "bad hex input: {}".format(e))


def _text_or_none(raw: bytes) -> Optional[str]:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        return None


def _record_to_json(rec: DecodedRecord) -> dict:
    return {
        "tnf": rec.tnf.name,
        "location": rec.location.name,
        "short_record": rec.short_record,
        "type": _text_or_none(rec.type),
        "id": _text_or_none(rec.id) if rec.id_present else None,
        "payload_hex": rec.payload.hex(),
        "payload_length": len(rec.payload),
    }


def _cmd_encode(args: argparse.Namespace) -> None:
    if args.payload_hex is not None:
        payload = _from_hex(args.payload_hex)
    elif args.payload_text is not None:
        payload = args.payload_text.encode("utf-8")
    else:
        payload = _read_input(args.input)

    desc = bin_record_descriptor(args.tnf, args.type, payload, id=args.id)
    buf = bytearray(args.capacity)
    n = encode(desc, _LOCATIONS[args.location], buf)
    record = bytes(buf[:n])
    if args.base64:
        print(base64.b64encode(record).decode("ascii"))
    else:
        print(record.hex())


def _cmd_decode(args: argparse.Namespace) -> None:
    if args.record is not None:
        raw = _from_hex(args.record)
    else:
        raw = _read_input(args.input)
    print(json.dumps(_record_to_json(decode(raw)), indent=2))


def main(argv: Optional[List[str]] = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        format="%(asctime)s - %(levelname)s - %(message)s",
        level=logging.DEBUG if args.verbose else logging.WARNING,
    )

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    if args.command == "version":
        print(f"ndefrec {__version__}")
        return

    try:
        if args.command == "encode":
            _cmd_encode(args)
        elif args.command == "decode":
            _cmd_decode(args)
    except NdefError as e:
        logger.debug("command %s failed", args.command, exc_info=True)
        print(f"ndefrec: error [{e.code}]: {e}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
