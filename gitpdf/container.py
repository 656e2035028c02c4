"""
===============================================================================
PdfContainer – one-page PDF carrying a single embedded file
-------------------------------------------------------------------------------
Implementation
    - Uses reportlab to render the visible cover page.
    - Uses pypdf to copy the page into a writer and attach the payload as an
      embedded file, and to enumerate/extract attachments on the way back.
===============================================================================
"""
from __future__ import annotations
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import List, Tuple

from pypdf import PdfReader, PdfWriter
from pypdf.errors import PyPdfError
from reportlab.pdfgen import canvas
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm

from .constants import (
    DEFAULT_ATTACHMENT_NAME,
    DEFAULT_ATTACHMENT_DESCRIPTION,
    DEFAULT_TITLE,
    DEFAULT_BODY,
)
from .errors import MalformedInputError, NoAttachmentError, StorageError


@dataclass
class AttachmentPayload:
    data: bytes
    filename: str = DEFAULT_ATTACHMENT_NAME
    description: str = DEFAULT_ATTACHMENT_DESCRIPTION


class ContainerStore:
    """Stores N bytes under a name in a document and reads them back."""

    def write_attachment(self, payload: AttachmentPayload, output_path: Path) -> None:
        raise NotImplementedError

    def read_first_attachment(self, input_path: Path) -> AttachmentPayload:
        raise NotImplementedError

    def list_attachments(self, input_path: Path) -> List[Tuple[str, int]]:
        raise NotImplementedError


class PdfContainer(ContainerStore):
    def __init__(self, title: str = DEFAULT_TITLE, body: str = DEFAULT_BODY) -> None:
        self.title = title
        self.body = body

    # ---- writing ---- #
    def _render_cover(self) -> bytes:
        buf = BytesIO()
        c = canvas.Canvas(buf, pagesize=A4)
        c.setTitle(self.title)
        _, page_h = A4

        # heading, then the body line below it (10 mm margins like the page grid)
        c.setFont("Helvetica-Bold", 16)
        c.drawString(10 * mm, page_h - 20 * mm, self.title)
        c.setFont("Helvetica", 12)
        c.drawString(10 * mm, page_h - 30 * mm, self.body)

        c.showPage()
        c.save()
        return buf.getvalue()

    def write_attachment(self, payload: AttachmentPayload, output_path: Path) -> None:
        cover = PdfReader(BytesIO(self._render_cover()))
        writer = PdfWriter()
        for page in cover.pages:
            writer.add_page(page)
        writer.add_metadata({"/Title": self.title, "/Subject": payload.description})
        writer.add_attachment(payload.filename, payload.data)
        try:
            with open(output_path, "wb") as fh:
                writer.write(fh)
        except OSError as exc:
            raise StorageError(f"failed to save PDF {output_path}: {exc}") from exc

    # ---- reading ---- #
    def _open(self, input_path: Path) -> PdfReader:
        path = Path(input_path)
        if not path.is_file():
            raise StorageError(f"PDF file not found: {path}")
        try:
            return PdfReader(str(path))
        except OSError as exc:
            raise StorageError(f"failed to open PDF file {path}: {exc}") from exc
        except (PyPdfError, ValueError, TypeError, AttributeError, IndexError) as exc:
            raise MalformedInputError(f"not a readable PDF: {path}: {exc}") from exc

    def _attachments(self, input_path: Path) -> List[Tuple[str, List[bytes]]]:
        reader = self._open(input_path)
        try:
            return [(name, list(contents)) for name, contents in reader.attachments.items()]
        except (PyPdfError, ValueError, KeyError, TypeError, AttributeError, IndexError) as exc:
            raise MalformedInputError(f"failed to list attachments in {input_path}: {exc}") from exc

    def read_first_attachment(self, input_path: Path) -> AttachmentPayload:
        attachments = self._attachments(input_path)
        if not attachments:
            raise NoAttachmentError(f"no attachments found in PDF: {input_path}")
        name, contents = attachments[0]
        if not contents:
            raise NoAttachmentError(f"no content found for attachment: {name}")
        return AttachmentPayload(data=contents[0], filename=name, description="")

    def list_attachments(self, input_path: Path) -> List[Tuple[str, int]]:
        out: List[Tuple[str, int]] = []
        for name, contents in self._attachments(input_path):
            for data in contents:
                out.append((name, len(data)))
        return out


__all__ = [
    "AttachmentPayload",
    "ContainerStore",
    "PdfContainer",
]
