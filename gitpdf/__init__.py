"""
gitpdf — carry a git repository inside a PDF attachment.

Features:

- Repository snapshot via ``git bundle create --all`` (local path or remote URL).
- AES-256 encryption of the bundle: CFB with a fresh random IV per call, or
  authenticated AES-256-GCM when both sides opt in.
- zlib compression of the encrypted payload.
- Single embedded file in an otherwise ordinary one-page PDF.
- Extraction runs the exact inverse and verifies the bundle before cloning.

Attachment layout (default scheme): zlib(iv[16] || aes256cfb(bundle)).
"""

__version__ = "0.1"

__all__ = [
    "constants",
    "errors",
    "encryption",
    "codec",
    "backend",
    "container",
    "config",
    "pipeline",
]

# Programmatic API lives in gitpdf.pipeline.Pipeline; the CLI functions in
# gitpdf.cli (cmd_embed/cmd_extract) take normal parameters.
