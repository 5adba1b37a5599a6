import pytest
from pydantic import ValidationError

from precatorios.extract.schema import ExtractionStats, Precatorio
from precatorios.extract.stats import compute_stats, nature_breakdown


def _rec(numero: str, valor_numerico: float, natureza: str = "", valor: str = "x") -> Precatorio:
    return Precatorio(
        numero=numero,
        valor=valor,
        valor_numerico=valor_numerico,
        natureza=natureza,
        tipo_extracao="Expedição",
    )


def test_empty_stats_are_zero():
    s = compute_stats([])
    assert s.model_dump(by_alias=True) == {
        "total": 0,
        "comValor": 0,
        "alimentar": 0,
        "comum": 0,
        "valorTotal": 0,
    }


def test_counts_and_sum():
    recs = [
        _rec("1000000-00.2024.8.02.0001", 100.0, "Alimentar"),
        _rec("2000000-00.2024.8.02.0001", 50.5, "Comum"),
        _rec("3000000-00.2024.8.02.0001", 0.0, "", valor=""),
    ]
    s = compute_stats(recs)
    assert s == ExtractionStats(total=3, com_valor=2, alimentar=1, comum=1, valor_total=150.5)


def test_nature_breakdown_percentages():
    recs = [
        _rec("1000000-00.2024.8.02.0001", 75.0, "Alimentar"),
        _rec("2000000-00.2024.8.02.0001", 25.0, "Comum"),
    ]
    rows = nature_breakdown(recs, compute_stats(recs))
    assert [(r.natureza, r.quantidade, r.percentual) for r in rows] == [
        ("Alimentar", 1, "75.0%"),
        ("Comum", 1, "25.0%"),
    ]


def test_nature_breakdown_zero_total():
    recs = [_rec("1000000-00.2024.8.02.0001", 0.0, "Alimentar")]
    rows = nature_breakdown(recs, compute_stats(recs))
    assert [r.percentual for r in rows] == ["0%", "0%"]


def test_non_finite_value_rejected():
    with pytest.raises(ValidationError):
        _rec("1000000-00.2024.8.02.0001", float("inf"))
