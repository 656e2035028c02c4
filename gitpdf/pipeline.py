from __future__ import annotations

import os
import shutil
import tempfile
import zlib
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional

from .backend import GitBackend, VersionControlBackend
from .codec import Codec
from .constants import (
    DEFAULT_SCHEME,
    DEFAULT_ATTACHMENT_NAME,
    DEFAULT_ATTACHMENT_DESCRIPTION,
    TEMP_PREFIX,
    STAGE_CREATE_ARCHIVE,
    STAGE_ENCRYPT,
    STAGE_COMPRESS,
    STAGE_WRITE_CONTAINER,
    STAGE_READ_CONTAINER,
    STAGE_DECOMPRESS,
    STAGE_DECRYPT,
    STAGE_RESTORE_ARCHIVE,
    STAGE_VERIFY_ARCHIVE,
)
from .container import AttachmentPayload, ContainerStore, PdfContainer
from .encryption import EncryptionContext
from .errors import GitPdfError, StageError, StorageError


@dataclass
class EmbedReport:
    output: Path
    archive_len: int
    encrypted_len: int
    payload_len: int


@dataclass
class ExtractReport:
    source: Path
    payload_len: int
    encrypted_len: int
    archive_len: int
    destination: Optional[Path] = None


@contextmanager
def _stage(name: str) -> Iterator[None]:
    """Wrap any failure inside the block as a StageError naming ``name``."""
    try:
        yield
    except StageError:
        raise
    except (GitPdfError, OSError, ValueError, RuntimeError, zlib.error) as exc:
        raise StageError(name, exc) from exc


def _output_mode(out: Path) -> int:
    """Mode for the final PDF: keep an existing file's mode, else 0666 minus umask."""
    try:
        return out.stat().st_mode & 0o7777
    except FileNotFoundError:
        pass
    # mkstemp always creates 0600; the umask can only be read by setting it
    mask = os.umask(0)
    os.umask(mask)
    return 0o666 & ~mask


def _clear_directory(path: Path) -> None:
    for child in path.iterdir():
        if child.is_dir() and not child.is_symlink():
            shutil.rmtree(child, ignore_errors=True)
        else:
            child.unlink(missing_ok=True)


class Pipeline:
    """Embed/extract a repository archive through cipher, codec and container layers.

    embed:   create-archive -> encrypt -> compress -> write-container
    extract: read-container -> decompress -> decrypt -> restore-archive

    Every temporary file or directory lives inside one scratch directory per
    invocation and is removed on all exit paths. The first failing stage aborts
    the invocation with a StageError; nothing is retried.
    """

    def __init__(
        self,
        key: bytes,
        *,
        backend: Optional[VersionControlBackend] = None,
        store: Optional[ContainerStore] = None,
        codec: Optional[Codec] = None,
        scheme: str = DEFAULT_SCHEME,
        attachment_name: str = DEFAULT_ATTACHMENT_NAME,
        attachment_description: str = DEFAULT_ATTACHMENT_DESCRIPTION,
        tmp_root: Optional[str] = None,
    ):
        self.crypto = EncryptionContext(key, scheme)
        self.backend = backend if backend is not None else GitBackend()
        self.store = store if store is not None else PdfContainer()
        self.codec = codec if codec is not None else Codec()
        self.attachment_name = attachment_name
        self.attachment_description = attachment_description
        self.tmp_root = tmp_root

    @contextmanager
    def _scratch(self) -> Iterator[Path]:
        with tempfile.TemporaryDirectory(prefix=TEMP_PREFIX, dir=self.tmp_root) as tmp:
            yield Path(tmp)

    # ---- embed ---- #
    def embed(self, source: str, output: str | os.PathLike) -> EmbedReport:
        out = Path(output)
        with self._scratch() as scratch:
            with _stage(STAGE_CREATE_ARCHIVE):
                archive = self.backend.create_archive(source, scratch)
            with _stage(STAGE_ENCRYPT):
                encrypted = self.crypto.encrypt(archive)
            with _stage(STAGE_COMPRESS):
                payload = self.codec.compress(encrypted)
            with _stage(STAGE_WRITE_CONTAINER):
                self._write_atomic(
                    AttachmentPayload(payload, self.attachment_name, self.attachment_description),
                    out,
                )
        return EmbedReport(
            output=out,
            archive_len=len(archive),
            encrypted_len=len(encrypted),
            payload_len=len(payload),
        )

    def _write_atomic(self, payload: AttachmentPayload, out: Path) -> None:
        parent = out.parent
        if not parent.is_dir():
            raise StorageError(f"Output directory does not exist: {parent}")
        # Stage next to the target so the final os.replace stays on one filesystem
        fd, staged = tempfile.mkstemp(prefix="." + TEMP_PREFIX, suffix=".pdf.part", dir=str(parent))
        os.close(fd)
        staged_path = Path(staged)
        try:
            self.store.write_attachment(payload, staged_path)
            os.chmod(staged_path, _output_mode(out))
            os.replace(str(staged_path), str(out))
        finally:
            staged_path.unlink(missing_ok=True)

    # ---- extract ---- #
    def _recover_archive(self, input_path: Path) -> tuple[bytes, int, int]:
        with _stage(STAGE_READ_CONTAINER):
            payload = self.store.read_first_attachment(input_path)
        with _stage(STAGE_DECOMPRESS):
            encrypted = self.codec.decompress(payload.data)
        with _stage(STAGE_DECRYPT):
            archive = self.crypto.decrypt(encrypted)
        return archive, len(payload.data), len(encrypted)

    def extract(self, input_path: str | os.PathLike, destination: str | os.PathLike) -> ExtractReport:
        src = Path(input_path)
        dest = Path(destination)
        with _stage(STAGE_RESTORE_ARCHIVE):
            existed = dest.exists()
            if existed and not (dest.is_dir() and not any(dest.iterdir())):
                raise StorageError(f"Destination exists and is not an empty directory: {dest}")
        try:
            with self._scratch() as scratch:
                archive, payload_len, encrypted_len = self._recover_archive(src)
                with _stage(STAGE_RESTORE_ARCHIVE):
                    self.backend.restore_archive(archive, dest, scratch)
        except BaseException:
            if existed:
                if dest.is_dir():
                    _clear_directory(dest)
            elif dest.exists():
                shutil.rmtree(dest, ignore_errors=True)
            raise
        return ExtractReport(
            source=src,
            payload_len=payload_len,
            encrypted_len=encrypted_len,
            archive_len=len(archive),
            destination=dest,
        )

    def verify(self, input_path: str | os.PathLike) -> ExtractReport:
        """Run the extract stages but only verify the recovered archive."""
        src = Path(input_path)
        with self._scratch() as scratch:
            archive, payload_len, encrypted_len = self._recover_archive(src)
            with _stage(STAGE_VERIFY_ARCHIVE):
                self.backend.verify_archive(archive, scratch)
        return ExtractReport(
            source=src,
            payload_len=payload_len,
            encrypted_len=encrypted_len,
            archive_len=len(archive),
        )


__all__ = [
    "Pipeline",
    "EmbedReport",
    "ExtractReport",
]
