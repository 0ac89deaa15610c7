"""Tests for the ndefrec command-line interface."""

from __future__ import annotations

import contextlib
import io
import json
import os
import sys
import tempfile
import unittest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from ndefrec import __version__
from ndefrec._cli import main


def _run(argv):
    out, err = io.StringIO(), io.StringIO()
    code = 0
    with contextlib.redirect_stdout(out), contextlib.redirect_stderr(err):
        try:
            main(argv)
        except SystemExit as e:
            code = e.code
    return code, out.getvalue(), err.getvalue()


class TestEncodeCommand(unittest.TestCase):
    def test_text_record_hex(self):
        code, out, _ = _run(["encode", "--tnf", "well-known", "--type", "T",
                             "--payload-hex", "02656e"])
        self.assertEqual(code, 0)
        self.assertEqual(out.strip(), "d101035402656e")

    def test_numeric_tnf_and_location(self):
        code, out, _ = _run(["encode", "--tnf", "2", "--type", "a/b", "--id", "42",
                             "--payload-text", "xy", "--location", "first"])
        self.assertEqual(code, 0)
        self.assertEqual(out.strip(), "9a030202612f6234327879")

    def test_base64(self):
        code, out, _ = _run(["encode", "--type", "T", "--payload-hex", "02656e",
                             "--base64"])
        self.assertEqual(code, 0)
        self.assertEqual(out.strip(), "0QEDVAJlbg==")

    def test_payload_from_file(self):
        with tempfile.NamedTemporaryFile(delete=False) as f:
            f.write(b"A" * 256)
            path = f.name
        try:
            code, out, _ = _run(["encode", "--type", "X", "--input", path])
        finally:
            os.unlink(path)
        self.assertEqual(code, 0)
        self.assertTrue(out.strip().startswith("c1010000010058"))

    def test_capacity_too_small(self):
        code, _, err = _run(["encode", "--type", "T", "--payload-hex", "02656e",
                             "--capacity", "6"])
        self.assertEqual(code, 2)
        self.assertIn("ERR_NO_MEM", err)

    def test_bad_hex(self):
        code, _, err = _run(["encode", "--type", "T", "--payload-hex", "zz"])
        self.assertEqual(code, 2)
        self.assertIn("ERR_INVALID_PARAM", err)

    def test_bad_tnf_name(self):
        code, _, _ = _run(["encode", "--tnf", "bogus", "--payload-hex", ""])
        self.assertEqual(code, 2)


class TestDecodeCommand(unittest.TestCase):
    def test_decode_hex(self):
        code, out, _ = _run(["decode", "d101035402656e"])
        self.assertEqual(code, 0)
        fields = json.loads(out)
        self.assertEqual(fields["tnf"], "WELL_KNOWN")
        self.assertEqual(fields["location"], "LONE")
        self.assertEqual(fields["type"], "T")
        self.assertIsNone(fields["id"])
        self.assertEqual(fields["payload_hex"], "02656e")
        self.assertTrue(fields["short_record"])

    def test_decode_truncated(self):
        code, _, err = _run(["decode", "d1010354"])
        self.assertEqual(code, 2)
        self.assertIn("ERR_DECODE", err)


class TestMisc(unittest.TestCase):
    def test_version(self):
        code, out, _ = _run(["version"])
        self.assertEqual(code, 0)
        self.assertEqual(out.strip(), "ndefrec {}".format(__version__))

    def test_no_command(self):
        code, _, _ = _run([])
        self.assertEqual(code, 1)


if __name__ == "__main__":
    unittest.main()
