"""
Semicolon-delimited CSV export, UTF-8 with BOM so spreadsheet apps pick the
encoding up. Free-text fields have literal ";" replaced by ",".
"""

from __future__ import annotations

import csv
import io
from typing import List, Sequence

from precatorios.export.common import require_records
from precatorios.extract.schema import Precatorio

BOM = "\ufeff"
DELIMITER = ";"

CSV_HEADERS = [
    "Número",
    "Credor",
    "Devedor",
    "Valor",
    "Natureza",
    "Regime",
    "Orçamento",
    "Data Atualização",
    "Tipo Decisão",
    "Destaque Honorários",
    "Advogados",
]


def _clean(value: str) -> str:
    return value.replace(DELIMITER, ",")


def _row(p: Precatorio) -> List[str]:
    return [
        p.numero,
        _clean(p.credor),
        p.devedor,
        p.valor,
        p.natureza,
        p.regime,
        p.orcamento_referencia,
        p.data_atualizacao,
        p.tipo_decisao,
        p.destaque_honorarios,
        _clean(p.advogados),
    ]


def records_to_csv(records: Sequence[Precatorio]) -> bytes:
    require_records(records)
    buf = io.StringIO()
    w = csv.writer(buf, delimiter=DELIMITER, lineterminator="\n")
    w.writerow(CSV_HEADERS)
    for p in records:
        w.writerow(_row(p))
    return (BOM + buf.getvalue()).encode("utf-8")
