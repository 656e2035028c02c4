from __future__ import annotations

import os
import unittest
import zlib

from gitpdf.codec import Codec, compress, decompress
from gitpdf.constants import CODEC_NONE
from gitpdf.errors import MalformedInputError


class CodecTests(unittest.TestCase):
    def test_roundtrip(self):
        for data in (b"", b"a", b"hello world\n" * 200, os.urandom(70_000)):
            self.assertEqual(decompress(compress(data)), data)

    def test_stream_is_plain_zlib(self):
        data = b"interoperable " * 50
        self.assertEqual(zlib.decompress(compress(data)), data)
        self.assertEqual(decompress(zlib.compress(data, 9)), data)

    def test_truncated_stream_rejected(self):
        blob = compress(os.urandom(4096))
        for cut in (0, 1, 2, len(blob) // 2, len(blob) - 1):
            with self.assertRaises(MalformedInputError):
                decompress(blob[:cut])

    def test_corrupt_header_rejected(self):
        blob = bytearray(compress(b"payload" * 100))
        blob[0] ^= 0xFF
        with self.assertRaises(MalformedInputError):
            decompress(bytes(blob))

    def test_corrupt_checksum_rejected(self):
        blob = bytearray(compress(b"payload" * 100))
        blob[-1] ^= 0xFF
        with self.assertRaises(MalformedInputError):
            decompress(bytes(blob))

    def test_level_and_passthrough(self):
        data = b"abc" * 1000
        self.assertEqual(Codec(level=1).decompress(Codec(level=1).compress(data)), data)
        self.assertEqual(Codec(CODEC_NONE).compress(data), data)
        with self.assertRaises(ValueError):
            Codec(99)


if __name__ == "__main__":
    unittest.main()
