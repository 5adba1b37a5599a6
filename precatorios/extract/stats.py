from __future__ import annotations

from typing import List, Sequence

from precatorios.extract.schema import ExtractionStats, NatureBreakdown, Precatorio

NATUREZAS = ("Alimentar", "Comum")


def compute_stats(records: Sequence[Precatorio]) -> ExtractionStats:
    """Count/sum summary over a record set; all zeros for an empty input."""
    return ExtractionStats(
        total=len(records),
        com_valor=sum(1 for r in records if r.valor != ""),
        alimentar=sum(1 for r in records if r.natureza == "Alimentar"),
        comum=sum(1 for r in records if r.natureza == "Comum"),
        valor_total=sum((r.valor_numerico for r in records), 0.0),
    )


def nature_breakdown(
    records: Sequence[Precatorio], stats: ExtractionStats
) -> List[NatureBreakdown]:
    rows: List[NatureBreakdown] = []
    for natureza in NATUREZAS:
        subset = [r for r in records if r.natureza == natureza]
        valor = sum((r.valor_numerico for r in subset), 0.0)
        if stats.valor_total:
            pct = f"{valor / stats.valor_total * 100:.1f}%"
        else:
            pct = "0%"
        rows.append(
            NatureBreakdown(
                natureza=natureza, quantidade=len(subset), valor_total=valor, percentual=pct
            )
        )
    return rows
