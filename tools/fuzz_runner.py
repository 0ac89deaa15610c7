#!/usr/bin/env python3
# tools/fuzz_runner.py
#
# Decoder robustness fuzzing.
#
# Generates two fuzz categories:
#   A) random byte strings
#   B) valid encoded records with random byte flips, truncation or extension
#
# Every input must either decode to a record or raise NdefError(ERR_DECODE).
# A decoded record must re-encode to the identical bytes.  Anything else
# prints a repro and exits non-zero.

import os, sys, random
from typing import Any, Dict

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, ROOT)

import ndefrec
from ndefrec import NdefError, ERR_DECODE, TNF, RecordLocation

SEED = int(os.environ.get("NDEF_SEED", "4242"))
ROUNDS = int(os.environ.get("NDEF_FUZZ_ROUNDS", "5000"))

random.seed(SEED)

def mismatch(label: str, data: bytes, ctx: Dict[str, Any]) -> None:
    print("MISMATCH:", label)
    print("INPUT:", data.hex())
    print("CTX:", ctx)
    raise SystemExit(1)

# --- generators ---

def rand_record() -> bytes:
    payload = bytes(random.getrandbits(8) for _ in range(random.choice([0, 3, 255, 256, 400])))
    rid = b"id" if random.random() < 0.5 else b""
    desc = ndefrec.bin_record_descriptor(random.choice(list(TNF)), b"t/x", payload, id=rid)
    return ndefrec.encode_to_bytes(desc, random.choice(list(RecordLocation)))

def mutate(data: bytes) -> bytes:
    b = bytearray(data)
    r = random.random()
    if r < 0.4 and b:
        for _ in range(random.randint(1, 3)):
            b[random.randrange(len(b))] = random.getrandbits(8)
    elif r < 0.7:
        del b[random.randint(0, len(b)):]
    else:
        b += bytes(random.getrandbits(8) for _ in range(random.randint(1, 4)))
    return bytes(b)

def check(data: bytes, ctx: Dict[str, Any]) -> None:
    try:
        rec = ndefrec.decode(data)
    except NdefError as e:
        if e.code != ERR_DECODE:
            mismatch("unexpected code " + e.code, data, ctx)
        return
    except Exception as e:  # anything but NdefError is a decoder bug
        mismatch("crash {!r}".format(e), data, ctx)
        return
    desc = ndefrec.bin_record_descriptor(rec.tnf, rec.type, rec.payload, id=rec.id)
    again = ndefrec.encode_to_bytes(desc, rec.location, max_size=len(data) + 8)
    # The decoder accepts long-form headers for short payloads and IL with a
    # zero ID_LENGTH; those do not re-encode byte for byte.
    canonical = (rec.short_record == (len(rec.payload) <= 255)
                 and bool(data[0] & 0x08) == rec.id_present)
    if canonical and again != data:
        mismatch("re-encode differs", data, ctx)
    back = ndefrec.decode(again)
    if (back.tnf, back.type, back.id, back.payload, back.location) != \
            (rec.tnf, rec.type, rec.id, rec.payload, rec.location):
        mismatch("re-encode does not round trip", data, ctx)

def main() -> int:
    for i in range(ROUNDS):
        if random.random() < 0.3:
            data = bytes(random.getrandbits(8) for _ in range(random.randint(0, 16)))
            check(data, {"round": i, "kind": "A"})
        else:
            data = mutate(rand_record())
            check(data, {"round": i, "kind": "B"})

    print(f"OK: fuzz rounds={ROUNDS} seed={SEED} (no mismatches)")
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
