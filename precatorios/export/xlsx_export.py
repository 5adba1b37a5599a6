"""
Three-sheet workbook: summary, full record table and top-N by value.
"""

from __future__ import annotations

import io
from datetime import datetime
from typing import Any, List, Optional, Sequence

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from precatorios.export.common import format_brl, require_records
from precatorios.extract.classify import FilterKind
from precatorios.extract.schema import ExtractionStats, Precatorio
from precatorios.extract.stats import compute_stats, nature_breakdown

TITLE = "EXTRAÇÃO DE PRECATÓRIOS - ESTADO DE ALAGOAS"
SUBTITLE = "Diário Oficial - Caderno Jurisdicional - Segundo Grau"

SHEET_RESUMO = "Resumo"
SHEET_PROCESSOS = "Processos"
SHEET_TOP = "Top 50 por Valor"

RESUMO_WIDTHS = [30, 20, 25, 15]

PROCESSOS_COLUMNS = [
    ("Página", 8),
    ("Tipo Extração", 12),
    ("Nº Processo", 28),
    ("Credor", 35),
    ("Devedor", 18),
    ("Valor", 18),
    ("Natureza", 12),
    ("Regime", 15),
    ("Orçamento", 12),
    ("Data Atualização", 15),
    ("Tipo Decisão", 12),
    ("Destaque Hon.", 12),
    ("Advogados", 50),
]

TOP_COLUMNS = [
    ("Rank", 8),
    ("Página", 8),
    ("Tipo Extração", 12),
    ("Nº Processo", 28),
    ("Credor", 35),
    ("Valor", 20),
    ("Natureza", 12),
    ("Orçamento", 12),
    ("Data Atualização", 15),
]


def _set_widths(ws: Worksheet, widths: Sequence[int]) -> None:
    for i, w in enumerate(widths, start=1):
        ws.column_dimensions[get_column_letter(i)].width = w


def _bold_row(ws: Worksheet, row: int) -> None:
    for cell in ws[row]:
        cell.font = Font(bold=True)


def _resumo_rows(
    records: Sequence[Precatorio],
    stats: ExtractionStats,
    kind: FilterKind,
    generated_at: datetime,
) -> List[List[Any]]:
    rows: List[List[Any]] = [
        [TITLE],
        [SUBTITLE],
        [f"Filtro: {kind.label}"],
        [f"Gerado em: {generated_at.strftime('%d/%m/%Y %H:%M:%S')}"],
        [],
        ["ESTATÍSTICAS GERAIS"],
        ["Total de Processos", stats.total],
        ["Processos com Valor", stats.com_valor],
        ["Natureza Alimentar", stats.alimentar],
        ["Natureza Comum", stats.comum],
        ["Valor Total", format_brl(stats.valor_total)],
        [],
        ["DISTRIBUIÇÃO POR NATUREZA"],
        ["Natureza", "Quantidade", "Valor Total", "% do Total"],
    ]
    for b in nature_breakdown(records, stats):
        rows.append([b.natureza, b.quantidade, format_brl(b.valor_total), b.percentual])
    return rows


def _processo_row(p: Precatorio) -> List[Any]:
    return [
        p.pagina or "-",
        p.tipo_extracao or "-",
        p.numero,
        p.credor,
        p.devedor,
        p.valor,
        p.natureza,
        p.regime,
        p.orcamento_referencia,
        p.data_atualizacao,
        p.tipo_decisao,
        p.destaque_honorarios,
        p.advogados,
    ]


def _top_row(rank: int, p: Precatorio) -> List[Any]:
    return [
        rank,
        p.pagina or "-",
        p.tipo_extracao or "-",
        p.numero,
        p.credor,
        p.valor,
        p.natureza,
        p.orcamento_referencia,
        p.data_atualizacao,
    ]


def build_workbook(
    records: Sequence[Precatorio],
    kind: FilterKind,
    stats: Optional[ExtractionStats] = None,
    *,
    top_n: int = 50,
    generated_at: Optional[datetime] = None,
) -> Workbook:
    require_records(records)
    stats = stats or compute_stats(records)
    generated_at = generated_at or datetime.now()

    wb = Workbook()
    ws = wb.active
    ws.title = SHEET_RESUMO
    for row in _resumo_rows(records, stats, kind, generated_at):
        ws.append(row)
    ws["A1"].font = Font(bold=True, size=14)
    _set_widths(ws, RESUMO_WIDTHS)

    ws = wb.create_sheet(SHEET_PROCESSOS)
    ws.append([h for h, _ in PROCESSOS_COLUMNS])
    _bold_row(ws, 1)
    for p in records:
        ws.append(_processo_row(p))
    _set_widths(ws, [w for _, w in PROCESSOS_COLUMNS])
    ws.freeze_panes = "A2"

    ws = wb.create_sheet(SHEET_TOP)
    ws.append([h for h, _ in TOP_COLUMNS])
    _bold_row(ws, 1)
    # records arrive sorted by value, highest first
    for rank, p in enumerate(records[:top_n], start=1):
        ws.append(_top_row(rank, p))
    _set_widths(ws, [w for _, w in TOP_COLUMNS])
    ws.freeze_panes = "A2"

    return wb


def records_to_xlsx(
    records: Sequence[Precatorio],
    kind: FilterKind,
    stats: Optional[ExtractionStats] = None,
    *,
    top_n: int = 50,
    generated_at: Optional[datetime] = None,
) -> bytes:
    wb = build_workbook(records, kind, stats, top_n=top_n, generated_at=generated_at)
    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()
