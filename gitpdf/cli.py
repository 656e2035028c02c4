from __future__ import annotations

import sys
import time
import argparse

from typing import List, Optional

from gitpdf.backend import is_remote
from gitpdf.config import resolve_key
from gitpdf.constants import SCHEMES, DEFAULT_TITLE, DEFAULT_BODY, DEFAULT_ATTACHMENT_NAME
from gitpdf.container import PdfContainer
from gitpdf.errors import GitPdfError
from gitpdf.pipeline import Pipeline


def _mib(n: int) -> float:
    return n / (1024.0 * 1024.0)


def cmd_embed(
    repo: str,
    output: str,
    *,
    key_file: Optional[str] = None,
    scheme: Optional[str] = None,
    title: str = DEFAULT_TITLE,
    body: str = DEFAULT_BODY,
    attachment_name: str = DEFAULT_ATTACHMENT_NAME,
    quiet: bool = False,
) -> bool:
    """Embed a git repository into a new PDF.

    Args:
        repo: Local repository path or remote URL (http(s):// or user@host:path).
        output: Path of the PDF to write. Only a complete file is ever moved here.
        key_file: Key file (32 raw bytes or 64 hex chars); falls back to the environment.
        scheme: "aes-256-cfb" (default) or "aes-256-gcm".
        title: Heading drawn on the cover page.
        body: Body line drawn under the heading.
        attachment_name: File name recorded for the embedded attachment.
        quiet: Suppress progress lines; the final summary is still printed.
    """
    cfg = resolve_key(key_file=key_file, scheme=scheme)
    pipeline = Pipeline(
        cfg.key,
        scheme=cfg.scheme,
        store=PdfContainer(title=title, body=body),
        attachment_name=attachment_name,
    )
    if not quiet:
        where = "remote" if is_remote(repo) else "local"
        print(f" Bundling {where} repository: {repo}", flush=True)
    t0 = time.time()
    report = pipeline.embed(repo, output)
    dt = max(0.000001, time.time() - t0)
    print(
        f"Done: {report.output}; bundle {_mib(report.archive_len):.2f} MiB, "
        f"attachment {_mib(report.payload_len):.2f} MiB ({cfg.scheme}) in {dt:.1f}s"
    )
    return True


def cmd_extract(
    input_path: str,
    output: str,
    *,
    key_file: Optional[str] = None,
    scheme: Optional[str] = None,
    quiet: bool = False,
) -> bool:
    """Extract the embedded repository from a PDF and clone it.

    Args:
        input_path: PDF produced by ``embed``.
        output: Directory to clone into; must not exist or be empty.
        key_file: Key file; falls back to the environment.
        scheme: Scheme used when the PDF was written.
        quiet: Suppress progress lines.
    """
    cfg = resolve_key(key_file=key_file, scheme=scheme)
    pipeline = Pipeline(cfg.key, scheme=cfg.scheme)
    if not quiet:
        print(f" Extracting attachment from {input_path}", flush=True)
    report = pipeline.extract(input_path, output)
    print(f"Done: cloned {_mib(report.archive_len):.2f} MiB bundle into {report.destination}")
    return True


def cmd_verify(input_path: str, *, key_file: Optional[str] = None, scheme: Optional[str] = None) -> bool:
    """Decode the attachment and verify the bundle without cloning.

    Prints:
        "OK" when the bundle verifies.
    """
    cfg = resolve_key(key_file=key_file, scheme=scheme)
    pipeline = Pipeline(cfg.key, scheme=cfg.scheme)
    pipeline.verify(input_path)
    print("OK")
    return True


def cmd_info(input_path: str) -> bool:
    """List the attachments of a PDF; no key required."""
    entries = PdfContainer().list_attachments(input_path)
    print(f"PDF: {input_path}")
    print(f"  Attachments: {len(entries)}")
    for name, size in entries:
        print(f"    {size}\t{name}")
    return True


def _add_key_args(ap: argparse.ArgumentParser) -> None:
    ap.add_argument("--key-file", help="Key file (32 raw bytes or 64 hex chars); default: environment")
    ap.add_argument("--scheme", choices=list(SCHEMES), help="Encryption scheme (default: aes-256-cfb or $GITPDF_SCHEME)")


def main(argv: List[str] | None = None):
    ap = argparse.ArgumentParser(
        prog="gitpdf",
        description="Embed and extract git repositories from PDFs using attachments",
        epilog=(
            "The key is read from --key-file, $GITPDF_KEY (hex), $GITPDF_KEY_FILE or $GITPDF_PASSPHRASE."
        ),
    )
    sub = ap.add_subparsers(dest="cmd", required=True)

    # embed
    ap_embed = sub.add_parser("embed", help="Embed a git repository into a PDF")
    ap_embed.add_argument("--repo", required=True, help="Path to the git repository (local or remote)")
    ap_embed.add_argument("--output", required=True, help="Path to the output PDF file")
    _add_key_args(ap_embed)
    ap_embed.add_argument("--title", default=DEFAULT_TITLE, help="Cover page heading")
    ap_embed.add_argument("--body", default=DEFAULT_BODY, help="Cover page body line")
    ap_embed.add_argument("--attachment-name", default=DEFAULT_ATTACHMENT_NAME, help="Attachment file name")
    ap_embed.add_argument("--quiet", help="limit outputs to summaries only", action="store_true")

    # extract
    ap_extract = sub.add_parser("extract", help="Extract and clone a git repository from a PDF")
    ap_extract.add_argument("--input", required=True, help="Path to the input PDF file")
    ap_extract.add_argument("--output", required=True, help="Directory to clone the repository into")
    _add_key_args(ap_extract)
    ap_extract.add_argument("--quiet", help="limit outputs to summaries only", action="store_true")

    ap_verify = sub.add_parser("verify", help="Decode and verify the embedded bundle without cloning")
    ap_verify.add_argument("--input", required=True, help="Path to the input PDF file")
    _add_key_args(ap_verify)

    ap_info = sub.add_parser("info", help="List PDF attachments")
    ap_info.add_argument("--input", required=True, help="Path to the input PDF file")

    args = ap.parse_args(argv)
    try:
        if args.cmd == "embed":
            cmd_embed(
                args.repo,
                args.output,
                key_file=args.key_file,
                scheme=args.scheme,
                title=args.title,
                body=args.body,
                attachment_name=args.attachment_name,
                quiet=args.quiet,
            )
        elif args.cmd == "extract":
            cmd_extract(args.input, args.output, key_file=args.key_file, scheme=args.scheme, quiet=args.quiet)
        elif args.cmd == "verify":
            cmd_verify(args.input, key_file=args.key_file, scheme=args.scheme)
        elif args.cmd == "info":
            cmd_info(args.input)
        else:
            raise RuntimeError("Unknown command")
    except (GitPdfError, OSError, RuntimeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
