from __future__ import annotations

import os
import re
import subprocess
from pathlib import Path
from typing import List

from .errors import BackendUnavailableError, InvalidArchiveError, StorageError


_SSH_REMOTE = re.compile(r"^[^@/\s:]+@[^@/\s:]+:")


def is_remote(source: str) -> bool:
    """Return True when ``source`` names a remote repository.

    Remote forms: ``http://...``, ``https://...`` and scp-like ``user@host:path``.
    Everything else is a local path.
    """
    if source.startswith("http://") or source.startswith("https://"):
        return True
    return bool(_SSH_REMOTE.match(source))


class VersionControlBackend:
    """Produces and consumes opaque repository archives.

    ``workdir`` is a scratch directory owned by the caller; implementations may
    create anything they need inside it and must not clean it up themselves.
    """

    def create_archive(self, source: str, workdir: Path) -> bytes:
        raise NotImplementedError

    def verify_archive(self, archive: bytes, workdir: Path) -> None:
        raise NotImplementedError

    def restore_archive(self, archive: bytes, destination: Path, workdir: Path) -> None:
        raise NotImplementedError


class GitBackend(VersionControlBackend):
    """Git bundles via the ``git`` executable."""

    def __init__(self, git: str = "git"):
        self.git = git

    def _run(self, args: List[str], *, what: str) -> subprocess.CompletedProcess:
        cmd = [self.git] + list(args)
        try:
            proc = subprocess.run(
                cmd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
            )
        except FileNotFoundError as exc:
            raise BackendUnavailableError(f"git executable not found: {self.git}") from exc
        except OSError as exc:
            raise BackendUnavailableError(f"failed to run git: {exc}") from exc
        if proc.returncode != 0:
            detail = (proc.stderr or proc.stdout or "").strip().splitlines()
            tail = detail[-1] if detail else f"exit status {proc.returncode}"
            raise BackendUnavailableError(f"{what} failed: {tail}")
        return proc

    def create_archive(self, source: str, workdir: Path) -> bytes:
        if is_remote(source):
            repo = workdir / "clone"
            self._run(["clone", "--quiet", "--bare", source, str(repo)], what="git clone")
        else:
            repo = Path(source)
            if not repo.is_dir():
                raise StorageError(f"Repository path does not exist or is not a directory: {source}")
        bundle = workdir / "repo.bundle"
        self._run(["-C", str(repo), "bundle", "create", str(bundle), "--all"], what="git bundle create")
        try:
            data = bundle.read_bytes()
        except OSError as exc:
            raise StorageError(f"failed to read git bundle: {exc}") from exc
        finally:
            bundle.unlink(missing_ok=True)
        if not data:
            raise InvalidArchiveError("git produced an empty bundle")
        return data

    def _stage_bundle(self, archive: bytes, workdir: Path) -> Path:
        if not archive:
            raise InvalidArchiveError("archive is empty")
        bundle = workdir / "restore.bundle"
        try:
            bundle.write_bytes(archive)
        except OSError as exc:
            raise StorageError(f"failed to write git bundle: {exc}") from exc
        return bundle

    def _verify_bundle(self, bundle: Path, workdir: Path) -> None:
        # Older git refuses 'bundle verify' outside a repository
        scratch = workdir / "verify-repo"
        if not scratch.exists():
            self._run(["init", "--quiet", str(scratch)], what="git init")
        try:
            self._run(["-C", str(scratch), "bundle", "verify", str(bundle)], what="git bundle verify")
        except BackendUnavailableError as exc:
            if isinstance(exc.__cause__, OSError):
                raise
            raise InvalidArchiveError(f"invalid git bundle: {exc}") from exc

    def verify_archive(self, archive: bytes, workdir: Path) -> None:
        bundle = self._stage_bundle(archive, workdir)
        try:
            self._verify_bundle(bundle, workdir)
        finally:
            bundle.unlink(missing_ok=True)

    def restore_archive(self, archive: bytes, destination: Path, workdir: Path) -> None:
        bundle = self._stage_bundle(archive, workdir)
        try:
            self._verify_bundle(bundle, workdir)
            self._run(["clone", "--quiet", str(bundle), os.fspath(destination)], what="git clone")
        finally:
            bundle.unlink(missing_ok=True)


__all__ = [
    "is_remote",
    "VersionControlBackend",
    "GitBackend",
]
