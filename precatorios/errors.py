from __future__ import annotations


class PrecatoriosError(Exception):
    """Base class for every error raised by the extraction pipeline."""


class PdfDecodeError(PrecatoriosError):
    """The PDF could not be opened or one of its pages could not be read."""


class NoDocumentLoadedError(PrecatoriosError):
    """A re-run was requested before any document text was loaded."""


class ProcessingInProgressError(PrecatoriosError):
    """A run was triggered while another run on the same session is in flight."""


class EmptyExportError(PrecatoriosError):
    """There are no records to export."""
