from __future__ import annotations

import binascii
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from argon2.low_level import Type as ArgonType, hash_secret_raw

from .constants import (
    KEY_SIZE,
    SCHEMES,
    DEFAULT_SCHEME,
    ENV_KEY,
    ENV_KEY_FILE,
    ENV_PASSPHRASE,
    ENV_SCHEME,
    ARGON_TIME_COST,
    ARGON_MEMORY_COST_KIB,
    ARGON_PARALLELISM,
    ARGON_SALT,
)
from .errors import ConfigError


@dataclass
class KeyConfig:
    key: bytes
    scheme: str
    source: str  # human-readable origin, never the key itself


def _parse_key_material(raw: bytes, origin: str) -> bytes:
    if len(raw) == KEY_SIZE:
        return raw
    text = raw.strip()
    if len(text) == KEY_SIZE * 2:
        try:
            return binascii.unhexlify(text)
        except (binascii.Error, ValueError) as exc:
            raise ConfigError(f"{origin}: key is not valid hex") from exc
    raise ConfigError(f"{origin}: expected {KEY_SIZE} raw bytes or {KEY_SIZE * 2} hex characters")


def load_key_file(path: str) -> bytes:
    try:
        raw = Path(path).read_bytes()
    except OSError as exc:
        raise ConfigError(f"cannot read key file {path}: {exc}") from exc
    return _parse_key_material(raw, f"key file {path}")


def derive_key(passphrase: str) -> bytes:
    """Derive a 32-byte key from a passphrase with Argon2id.

    The salt is a fixed application constant: the container carries no KDF
    parameters, so both sides must derive the same key from the passphrase alone.
    """
    if not passphrase:
        raise ConfigError("passphrase is empty")
    return hash_secret_raw(
        passphrase.encode("utf-8"),
        ARGON_SALT,
        time_cost=ARGON_TIME_COST,
        memory_cost=ARGON_MEMORY_COST_KIB,
        parallelism=ARGON_PARALLELISM,
        hash_len=KEY_SIZE,
        type=ArgonType.ID,
    )


def resolve_scheme(scheme: Optional[str] = None, env: Optional[Mapping[str, str]] = None) -> str:
    env = os.environ if env is None else env
    value = scheme or env.get(ENV_SCHEME) or DEFAULT_SCHEME
    if value not in SCHEMES:
        raise ConfigError(f"unknown encryption scheme {value!r} (choose from {', '.join(SCHEMES)})")
    return value


def resolve_key(
    *,
    key_file: Optional[str] = None,
    scheme: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
) -> KeyConfig:
    """Resolve the symmetric key.

    Order: explicit key file, GITPDF_KEY (hex), GITPDF_KEY_FILE, GITPDF_PASSPHRASE.

    Raises:
        ConfigError: If no source is configured or the material is invalid.
    """
    env = os.environ if env is None else env
    chosen_scheme = resolve_scheme(scheme, env)
    if key_file:
        return KeyConfig(load_key_file(key_file), chosen_scheme, f"key file {key_file}")
    if env.get(ENV_KEY):
        text = env[ENV_KEY].strip()
        # env values are text, so only the hex form is accepted here
        if len(text) != KEY_SIZE * 2:
            raise ConfigError(f"{ENV_KEY}: expected {KEY_SIZE * 2} hex characters")
        key = _parse_key_material(text.encode("ascii", "replace"), ENV_KEY)
        return KeyConfig(key, chosen_scheme, ENV_KEY)
    if env.get(ENV_KEY_FILE):
        path = env[ENV_KEY_FILE]
        return KeyConfig(load_key_file(path), chosen_scheme, f"key file {path}")
    if env.get(ENV_PASSPHRASE):
        return KeyConfig(derive_key(env[ENV_PASSPHRASE]), chosen_scheme, ENV_PASSPHRASE)
    raise ConfigError(
        f"no encryption key configured: pass --key-file or set {ENV_KEY}, {ENV_KEY_FILE} or {ENV_PASSPHRASE}"
    )
