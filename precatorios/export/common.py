from __future__ import annotations

from datetime import date
from typing import Literal, Optional, Sequence

from precatorios.errors import EmptyExportError
from precatorios.extract.classify import FilterKind
from precatorios.extract.schema import Precatorio

ExportFormat = Literal["json", "csv", "xlsx"]

MEDIA_TYPES = {
    "json": "application/json",
    "csv": "text/csv;charset=utf-8",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
}


def require_records(records: Sequence[Precatorio]) -> None:
    if not records:
        raise EmptyExportError("Nenhum processo para exportar.")


def format_brl(value: float) -> str:
    """1234567.8 → "R$ 1.234.567,80" (pt-BR grouping and decimal comma)."""
    s = f"{value:,.2f}"  # 1,234,567.80
    s = s.replace(",", "\x00").replace(".", ",").replace("\x00", ".")
    return f"R$ {s}"


def export_filename(
    kind: FilterKind, fmt: ExportFormat, today: Optional[date] = None
) -> str:
    day = (today or date.today()).isoformat()
    if fmt == "xlsx":
        return f"Precatorios_{kind.slug.capitalize()}_{day}.xlsx"
    return f"precatorios_{kind.slug}_{day}.{fmt}"
