#!/usr/bin/env python3
# tools/invariants_runner.py
#
# Encoder invariants (property tests) over randomly generated record descriptors.
#
# For every trial this runner:
# - encodes a random descriptor at a random location into a large buffer
# - checks header geometry, SR/IL/CF bits and MB/ME against the location
# - decodes the record back and compares TNF, TYPE, ID and PAYLOAD
# - re-encodes with capacity == exact length (must succeed, same bytes)
#   and capacity == exact length - 1 (must fail with ERR_NO_MEM)
#
# Exit code:
#   0 -> all checks passed
#   1 -> invariant violation

import os, sys, random
from typing import Any, Dict

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, ROOT)

import ndefrec
from ndefrec import TNF, RecordLocation, NdefError, ERR_NO_MEM

SEED = int(os.environ.get("NDEF_SEED", "1337"))
TRIALS = int(os.environ.get("NDEF_TRIALS", "2000"))
MAX_PAYLOAD = int(os.environ.get("NDEF_GEN_MAX_PAYLOAD", "600"))

random.seed(SEED)

def rand_bytes(nmax: int) -> bytes:
    return bytes(random.getrandbits(8) for _ in range(random.randint(0, nmax)))

def rand_payload() -> bytes:
    # Bias toward the short/long boundary, that is where the encoder branches.
    r = random.random()
    if r < 0.30:
        n = random.randint(250, 260)
    elif r < 0.50:
        n = random.randint(0, 8)
    else:
        n = random.randint(0, MAX_PAYLOAD)
    return bytes(random.getrandbits(8) for _ in range(n))

def fail(label: str, ctx: Dict[str, Any]) -> None:
    print("INVARIANT FAIL:", label)
    print("CTX:", ctx)
    raise SystemExit(1)

def main() -> int:
    for t in range(TRIALS):
        tnf = random.choice(list(TNF))
        rtype = rand_bytes(12 if random.random() < 0.95 else 255)
        rid = rand_bytes(6) if random.random() < 0.5 else b""
        payload = rand_payload()
        location = random.choice(list(RecordLocation))
        desc = ndefrec.bin_record_descriptor(tnf, rtype, payload, id=rid)
        ctx = {"trial": t, "tnf": int(tnf), "type_len": len(rtype), "id_len": len(rid),
               "payload_len": len(payload), "location": int(location)}

        buf = bytearray(len(payload) + 600)
        n = ndefrec.encode(desc, location, buf)
        rec = bytes(buf[:n])

        # (1) length = header + payload
        short = len(payload) <= 255
        if n != ndefrec.header_size(len(rtype), len(rid), short) + len(payload):
            fail("reported length", ctx)

        # (2) flags byte
        flags = rec[0]
        if flags & 0x20:
            fail("CF set", ctx)
        if bool(flags & 0x10) != short:
            fail("SR mismatch", ctx)
        if bool(flags & 0x08) != bool(rid):
            fail("IL mismatch", ctx)
        if flags & 0xC0 != int(location):
            fail("MB/ME mismatch", ctx)

        # (3) round trip
        back = ndefrec.decode(rec)
        if (back.tnf, back.type, back.id, back.payload) != (tnf, rtype, rid, payload):
            fail("round trip", ctx)

        # (4) exact capacity succeeds with identical bytes, one less fails
        exact = bytearray(n)
        if ndefrec.encode(desc, location, exact) != n or bytes(exact) != rec:
            fail("exact capacity", ctx)
        try:
            ndefrec.encode(desc, location, bytearray(n - 1))
        except NdefError as e:
            if e.code != ERR_NO_MEM:
                fail("capacity-1 wrong code " + e.code, ctx)
        else:
            fail("capacity-1 succeeded", ctx)

    print(f"OK: invariants passed for TRIALS={TRIALS} seed={SEED}")
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
