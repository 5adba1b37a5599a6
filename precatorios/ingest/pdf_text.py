"""
PDF → per-page text, via PyMuPDF.

Pages are decoded one at a time so callers can report progress between them;
each page comes back as its text tokens joined by single spaces, in the order
the content stream draws them (columns stay whole).
"""

from __future__ import annotations

import logging
from typing import Iterator, List, Tuple

import fitz  # PyMuPDF

from precatorios.errors import PdfDecodeError
from precatorios.extract.textnorm import collapse_whitespace

logger = logging.getLogger(__name__)

PDF_MAGIC = b"%PDF"


def looks_like_pdf(data: bytes) -> bool:
    return data[:1024].lstrip().startswith(PDF_MAGIC)


class PDFLoader:
    """Light wrapper around PyMuPDF for in-memory documents."""

    def __init__(self, data: bytes):
        try:
            self.doc = fitz.open(stream=data, filetype="pdf")
        except Exception as exc:
            raise PdfDecodeError(f"Não foi possível abrir o PDF: {exc}") from exc

    def page_count(self) -> int:
        return self.doc.page_count

    def page_text(self, i: int) -> str:
        """Text of page i (0-based) in content-stream order, whitespace collapsed."""
        try:
            text = self.doc.load_page(i).get_text("text")
        except Exception as exc:
            raise PdfDecodeError(
                f"Falha ao ler a página {i + 1}: {exc}"
            ) from exc
        return collapse_whitespace(text)

    def close(self) -> None:
        self.doc.close()

    def __enter__(self) -> "PDFLoader":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


def iter_page_texts(data: bytes) -> Iterator[Tuple[int, str, int]]:
    """
    Yield (page_no, text, page_count) for every page, 1-based, in order.
    Raises PdfDecodeError on a corrupt document or unreadable page.
    """
    with PDFLoader(data) as loader:
        total = loader.page_count()
        logger.debug("decoding %d pages", total)
        for i in range(total):
            yield i + 1, loader.page_text(i), total


def extract_page_texts(data: bytes) -> List[str]:
    return [text for _, text, _ in iter_page_texts(data)]
