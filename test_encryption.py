from __future__ import annotations

import os
import unittest
from unittest import mock

from gitpdf.constants import IV_SIZE, TAG_SIZE, SCHEME_CFB, SCHEME_GCM
from gitpdf.encryption import EncryptionContext, encrypt, decrypt
from gitpdf.errors import MalformedInputError, IntegrityError


KEY = bytes(range(32))


class CFBTests(unittest.TestCase):
    def test_roundtrip_various_sizes(self):
        for size in (0, 1, 15, 16, 17, 4096, 100_003):
            data = os.urandom(size)
            blob = encrypt(data, KEY)
            self.assertEqual(len(blob), IV_SIZE + size)
            self.assertEqual(decrypt(blob, KEY), data)

    def test_iv_is_fresh_per_call(self):
        data = b"same plaintext" * 10
        a = encrypt(data, KEY)
        b = encrypt(data, KEY)
        self.assertNotEqual(a[:IV_SIZE], b[:IV_SIZE])
        self.assertNotEqual(a, b)

    def test_full_block_feedback_matches_reference_vector(self):
        # NIST SP 800-38A F.3.17, CFB128-AES256, block #1
        key = bytes.fromhex("603deb1015ca71be2b73aef0857d77811f352c073b6108d72d9810a30914dff4")
        iv = bytes.fromhex("000102030405060708090a0b0c0d0e0f")
        pt = bytes.fromhex("6bc1bee22e409f96e93d7e117393172a")
        with mock.patch("gitpdf.encryption.get_random_bytes", return_value=iv):
            blob = encrypt(pt, key)
        self.assertEqual(blob[:IV_SIZE], iv)
        self.assertEqual(blob[IV_SIZE:].hex(), "dc7e84bfda79164b7ecd8486985d3860")

    def test_short_blob_rejected(self):
        for n in (0, 1, IV_SIZE - 1):
            with self.assertRaises(MalformedInputError):
                decrypt(b"\x00" * n, KEY)

    def test_iv_only_blob_decrypts_to_empty(self):
        self.assertEqual(decrypt(b"\x00" * IV_SIZE, KEY), b"")

    def test_wrong_key_yields_garbage_not_error(self):
        data = b"payload bytes " * 8
        blob = encrypt(data, KEY)
        other = bytes(reversed(KEY))
        out = decrypt(blob, other)
        self.assertEqual(len(out), len(data))
        self.assertNotEqual(out, data)

    def test_bad_key_length(self):
        with self.assertRaises(ValueError):
            EncryptionContext(b"short")
        with self.assertRaises(ValueError):
            EncryptionContext(KEY, "rot13")


class ModuleTests(unittest.TestCase):
    def test_module_docstring_present(self):
        from gitpdf import encryption

        self.assertIsNotNone(encryption.__doc__)
        self.assertIn("aes-256-cfb", encryption.__doc__)


class GCMTests(unittest.TestCase):
    def setUp(self):
        self.ctx = EncryptionContext(KEY, SCHEME_GCM)

    def test_roundtrip_and_layout(self):
        for size in (0, 1, 64, 5000):
            data = os.urandom(size)
            blob = self.ctx.encrypt(data)
            self.assertEqual(len(blob), IV_SIZE + size + TAG_SIZE)
            self.assertEqual(self.ctx.decrypt(blob), data)
        self.assertEqual(self.ctx.overhead(), IV_SIZE + TAG_SIZE)

    def test_tamper_detected(self):
        blob = bytearray(self.ctx.encrypt(b"important history"))
        blob[IV_SIZE + 2] ^= 0x01
        with self.assertRaises(IntegrityError):
            self.ctx.decrypt(bytes(blob))

    def test_wrong_key_detected(self):
        blob = self.ctx.encrypt(b"important history")
        with self.assertRaises(IntegrityError):
            EncryptionContext(bytes(32), SCHEME_GCM).decrypt(blob)

    def test_short_blob_rejected(self):
        with self.assertRaises(MalformedInputError):
            self.ctx.decrypt(b"\x00" * (IV_SIZE + TAG_SIZE - 1))

    def test_schemes_are_not_interchangeable(self):
        blob = EncryptionContext(KEY, SCHEME_CFB).encrypt(b"x" * 40)
        with self.assertRaises(IntegrityError):
            self.ctx.decrypt(blob)


if __name__ == "__main__":
    unittest.main()
