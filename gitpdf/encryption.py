"""AES-256 payload encryption backed by PyCryptodomex.

Two schemes share the same leading layout, a 16-byte IV followed by the
ciphertext:

- ``aes-256-cfb``: full-block (128-bit segment) CFB. Ciphertext length equals
  plaintext length. There is no integrity check, so a wrong key or a flipped
  bit decrypts to garbage instead of failing.
- ``aes-256-gcm``: the IV is used as the GCM nonce and a 16-byte tag is
  appended. Decryption fails closed on tampering.
"""
from __future__ import annotations

from Cryptodome.Cipher import AES
from Cryptodome.Random import get_random_bytes

from .constants import IV_SIZE, KEY_SIZE, TAG_SIZE, SCHEME_CFB, SCHEME_GCM, SCHEMES, DEFAULT_SCHEME
from .errors import MalformedInputError, IntegrityError


def _check_key(key: bytes) -> None:
    if len(key) != KEY_SIZE:
        raise ValueError(f"Key must be {KEY_SIZE} bytes for AES-256")


def _check_scheme(scheme: str) -> None:
    if scheme not in SCHEMES:
        raise ValueError(f"unsupported encryption scheme: {scheme}")


def _cfb(key: bytes, iv: bytes):
    return AES.new(key, AES.MODE_CFB, iv=iv, segment_size=128)


class EncryptionContext:
    def __init__(self, key: bytes, scheme: str = DEFAULT_SCHEME):
        _check_key(key)
        _check_scheme(scheme)
        self.key = key
        self.scheme = scheme

    def encrypt(self, plaintext: bytes) -> bytes:
        """Encrypt ``plaintext`` under a fresh random IV and return ``iv || ciphertext[|| tag]``."""
        iv = get_random_bytes(IV_SIZE)
        if self.scheme == SCHEME_GCM:
            cipher = AES.new(self.key, AES.MODE_GCM, nonce=iv)
            ciphertext, tag = cipher.encrypt_and_digest(plaintext)
            return iv + ciphertext + tag
        return iv + _cfb(self.key, iv).encrypt(plaintext)

    def decrypt(self, blob: bytes) -> bytes:
        if len(blob) < IV_SIZE + self._tag_size():
            raise MalformedInputError(
                f"Encrypted payload too short ({len(blob)} bytes, need at least {self.overhead()})"
            )
        iv = blob[:IV_SIZE]
        if self.scheme == SCHEME_GCM:
            tag = blob[-TAG_SIZE:]
            ciphertext = blob[IV_SIZE:-TAG_SIZE]
            cipher = AES.new(self.key, AES.MODE_GCM, nonce=iv)
            try:
                return cipher.decrypt_and_verify(ciphertext, tag)
            except ValueError as exc:
                raise IntegrityError("Authentication tag mismatch (wrong key or tampered payload)") from exc
        return _cfb(self.key, iv).decrypt(blob[IV_SIZE:])

    def _tag_size(self) -> int:
        return TAG_SIZE if self.scheme == SCHEME_GCM else 0

    def overhead(self) -> int:
        return IV_SIZE + self._tag_size()


def encrypt(plaintext: bytes, key: bytes, *, scheme: str = DEFAULT_SCHEME) -> bytes:
    return EncryptionContext(key, scheme).encrypt(plaintext)


def decrypt(blob: bytes, key: bytes, *, scheme: str = DEFAULT_SCHEME) -> bytes:
    return EncryptionContext(key, scheme).decrypt(blob)


__all__ = [
    "EncryptionContext",
    "encrypt",
    "decrypt",
    "SCHEME_CFB",
    "SCHEME_GCM",
]
