"""
Pipeline driver.

An ExtractionSession owns one loaded gazette: its page-tagged text, the active
filter and the last result. Loading a PDF decodes it page by page and runs the
assembly; switching the filter re-runs only segmentation, assembly and
aggregation over the retained text.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

from precatorios.config import Settings, get_settings
from precatorios.errors import NoDocumentLoadedError, ProcessingInProgressError
from precatorios.extract.assemble import ProgressSink, assemble_records
from precatorios.extract.classify import FilterCounts, FilterKind, count_filter_matches
from precatorios.extract.schema import ExtractionStats, Precatorio
from precatorios.extract.stats import compute_stats
from precatorios.ingest.pdf_text import iter_page_texts
from precatorios.ingest.segment import split_blocks, tag_pages

logger = logging.getLogger(__name__)

DECODE_SHARE = 50  # page decoding covers 0..50%, assembly 50..100%


class ProgressReporter:
    """
    Progress sink that clamps to 0..100 and never goes backwards within a run.
    Forwards (percent, message) to an optional callback.
    """

    def __init__(self, callback: Optional[ProgressSink] = None):
        self._callback = callback
        self.percent = 0
        self.message = ""

    def reset(self, message: str = "") -> None:
        self.percent = 0
        self.message = message
        if self._callback is not None:
            self._callback(0, message)

    def __call__(self, percent: int, message: str) -> None:
        self.percent = max(self.percent, min(100, max(0, int(percent))))
        self.message = message
        if self._callback is not None:
            self._callback(self.percent, message)


@dataclass(frozen=True)
class ExtractionResult:
    records: Tuple[Precatorio, ...]
    stats: ExtractionStats
    filter: FilterKind
    counts: FilterCounts
    block_count: int


@dataclass
class ExtractionSession:
    active_filter: FilterKind = FilterKind.EXPEDICAO
    settings: Settings = field(default_factory=get_settings)
    progress: ProgressReporter = field(default_factory=ProgressReporter)

    document_name: Optional[str] = None
    text: Optional[str] = None
    result: Optional[ExtractionResult] = None
    in_flight: bool = False

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        on_progress: Optional[Callable[[int, str], None]] = None,
    ) -> "ExtractionSession":
        cfg = settings or get_settings()
        return cls(
            active_filter=FilterKind.parse(cfg.default_filter),
            settings=cfg,
            progress=ProgressReporter(on_progress),
        )

    # ---------- public API ----------

    def load(self, pdf_bytes: bytes, name: Optional[str] = None) -> ExtractionResult:
        """Decode a PDF, keep its page-tagged text and assemble with the active filter."""
        with self._run("Iniciando extração..."):
            pages: List[str] = []
            for page_no, page_text, total in iter_page_texts(pdf_bytes):
                pages.append(page_text)
                self.progress(
                    round(page_no / total * DECODE_SHARE),
                    f"Extraindo texto: página {page_no} de {total}",
                )
            text = tag_pages(pages)
            logger.info("texto extraído: %d páginas, %d caracteres", len(pages), len(text))

            self.progress(DECODE_SHARE, "Processando processos...")
            result = self._assemble(text)
            # replace only once the whole run succeeded
            self.document_name = name
            self.text = text
            self.result = result
            return result

    def load_text(self, text: str, name: Optional[str] = None) -> ExtractionResult:
        """Same as load() for text that is already page-tagged."""
        with self._run("Processando processos..."):
            result = self._assemble(text)
            self.document_name = name
            self.text = text
            self.result = result
            return result

    def reprocess(self) -> ExtractionResult:
        if self.text is None:
            raise NoDocumentLoadedError(
                "Nenhum texto extraído. Processe o PDF primeiro."
            )
        with self._run("Reprocessando com novo filtro..."):
            self.result = self._assemble(self.text)
            return self.result

    def set_filter(self, kind: "FilterKind | str") -> Optional[ExtractionResult]:
        """Switch the active filter; re-runs the assembly when text is loaded."""
        self._guard()
        self.active_filter = FilterKind.parse(kind)
        if self.text is None:
            return None
        return self.reprocess()

    def can_run(self, has_upload: bool) -> bool:
        """A run needs a new upload or retained text, and no run in flight."""
        return (has_upload or self.text is not None) and not self.in_flight

    # ---------- internals ----------

    def _guard(self) -> None:
        if self.in_flight:
            raise ProcessingInProgressError("Já existe um processamento em andamento.")

    def _run(self, message: str) -> "_InFlight":
        self._guard()
        return _InFlight(self, message)

    def _assemble(self, text: str) -> ExtractionResult:
        cfg = self.settings
        kind = self.active_filter
        blocks = split_blocks(text)
        counts = count_filter_matches(blocks)
        logger.info(
            "%d blocos; filtro 1 (Expedição): %d processos únicos; "
            "filtro 2 (Inclusão): %d processos únicos; filtro ativo: %s",
            len(blocks),
            counts.expedicao,
            counts.inclusao,
            kind.short_label,
        )
        records = assemble_records(
            blocks,
            kind,
            progress=self.progress,
            interval=cfg.progress_interval,
            attorneys_max_chars=cfg.attorneys_max_chars,
            excerpt_max_chars=cfg.excerpt_max_chars,
        )
        self.progress(100, "Processamento concluído!")
        return ExtractionResult(
            records=tuple(records),
            stats=compute_stats(records),
            filter=kind,
            counts=counts,
            block_count=len(blocks),
        )


class _InFlight:
    """Sets the session's in-flight flag for the duration of one run."""

    def __init__(self, session: ExtractionSession, message: str):
        self.session = session
        self.message = message

    def __enter__(self) -> None:
        self.session.in_flight = True
        self.session.progress.reset(self.message)

    def __exit__(self, *exc) -> None:
        self.session.in_flight = False
