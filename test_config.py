from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from gitpdf.config import resolve_key, resolve_scheme, load_key_file, derive_key
from gitpdf.constants import (
    ENV_KEY,
    ENV_KEY_FILE,
    ENV_PASSPHRASE,
    ENV_SCHEME,
    SCHEME_CFB,
    SCHEME_GCM,
)
from gitpdf.errors import ConfigError


HEX_A = "aa" * 32
HEX_B = "bb" * 32


class KeyResolutionTests(unittest.TestCase):
    def setUp(self):
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.root = Path(tmp.name)

    def test_missing_key_is_an_error(self):
        with self.assertRaises(ConfigError):
            resolve_key(env={})

    def test_env_hex_key(self):
        cfg = resolve_key(env={ENV_KEY: HEX_A})
        self.assertEqual(cfg.key, b"\xaa" * 32)
        self.assertEqual(cfg.scheme, SCHEME_CFB)
        self.assertEqual(cfg.source, ENV_KEY)

    def test_env_key_rejects_bad_length_and_hex(self):
        with self.assertRaises(ConfigError):
            resolve_key(env={ENV_KEY: "ab" * 16})
        with self.assertRaises(ConfigError):
            resolve_key(env={ENV_KEY: "zz" * 32})

    def test_key_file_raw_and_hex(self):
        raw = self.root / "raw.key"
        raw.write_bytes(bytes(range(32)))
        self.assertEqual(load_key_file(str(raw)), bytes(range(32)))
        hexed = self.root / "hex.key"
        hexed.write_text(HEX_B + "\n")
        self.assertEqual(load_key_file(str(hexed)), b"\xbb" * 32)

    def test_key_file_bad_contents(self):
        bad = self.root / "bad.key"
        bad.write_bytes(b"too short")
        with self.assertRaises(ConfigError):
            load_key_file(str(bad))
        with self.assertRaises(ConfigError):
            load_key_file(str(self.root / "missing.key"))

    def test_precedence(self):
        kf = self.root / "explicit.key"
        kf.write_text(HEX_B)
        env_kf = self.root / "env.key"
        env_kf.write_bytes(b"\x01" * 32)
        env = {ENV_KEY: HEX_A, ENV_KEY_FILE: str(env_kf), ENV_PASSPHRASE: "ignored"}
        self.assertEqual(resolve_key(key_file=str(kf), env=env).key, b"\xbb" * 32)
        self.assertEqual(resolve_key(env=env).key, b"\xaa" * 32)
        del env[ENV_KEY]
        self.assertEqual(resolve_key(env=env).key, b"\x01" * 32)

    def test_passphrase_derivation_is_stable(self):
        a = resolve_key(env={ENV_PASSPHRASE: "correct horse"})
        self.assertEqual(len(a.key), 32)
        self.assertEqual(a.key, derive_key("correct horse"))
        self.assertNotEqual(a.key, derive_key("battery staple"))
        with self.assertRaises(ConfigError):
            derive_key("")


class SchemeTests(unittest.TestCase):
    def test_default_env_and_explicit(self):
        self.assertEqual(resolve_scheme(env={}), SCHEME_CFB)
        self.assertEqual(resolve_scheme(env={ENV_SCHEME: SCHEME_GCM}), SCHEME_GCM)
        self.assertEqual(resolve_scheme(SCHEME_CFB, env={ENV_SCHEME: SCHEME_GCM}), SCHEME_CFB)
        with self.assertRaises(ConfigError):
            resolve_scheme("des", env={})
        cfg = resolve_key(scheme=SCHEME_GCM, env={ENV_KEY: HEX_A})
        self.assertEqual(cfg.scheme, SCHEME_GCM)


if __name__ == "__main__":
    unittest.main()
