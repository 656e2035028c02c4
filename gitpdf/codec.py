from __future__ import annotations

from typing import Optional

import zlib

from .constants import CODEC_NONE, CODEC_DEFLATE, DEFAULT_CODEC_ID, DEFAULT_COMPRESS_LEVEL
from .errors import MalformedInputError


class Codec:
    def __init__(self, codec_id: int = DEFAULT_CODEC_ID, level: Optional[int] = None):
        if codec_id not in (CODEC_NONE, CODEC_DEFLATE):
            raise ValueError(f"unsupported codec id: {codec_id}")
        self.codec_id = codec_id
        self.level = level

    def compress(self, data: bytes) -> bytes:
        if self.codec_id == CODEC_NONE:
            return data
        # Payloads reaching here are ciphertext, so expect little to no gain
        return zlib.compress(data, self.level if self.level is not None else DEFAULT_COMPRESS_LEVEL)

    def decompress(self, data: bytes) -> bytes:
        if self.codec_id == CODEC_NONE:
            return data
        d = zlib.decompressobj()
        try:
            out = d.decompress(data)
            out += d.flush()
        except zlib.error as e:
            raise MalformedInputError(f"zlib decompression failed: {e}") from e
        if not d.eof:
            raise MalformedInputError("zlib stream is truncated")
        return out


def compress(data: bytes, level: Optional[int] = None) -> bytes:
    return Codec(CODEC_DEFLATE, level).compress(data)


def decompress(data: bytes) -> bytes:
    return Codec(CODEC_DEFLATE).decompress(data)
