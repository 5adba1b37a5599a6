import pytest

from precatorios.extract.classify import (
    FilterKind,
    FilterMatch,
    classify,
    count_filter_matches,
)
from precatorios.ingest.segment import split_blocks

EXPEDICAO = (
    "Nº 1234567-89.2024.8.02.0001 Precatório - requisição EXPEDIDA. "
    "Devedor: Estado de Alagoas. R$ 12.345,67"
)
INCLUSAO = (
    "Nº 7654321-00.2023.8.02.0001 ação contra o Estado de Alagoas. "
    "Determino a INCLUSÃO DESTE PRECATÓRIO no orçamento de 2025."
)


def test_filter1_only():
    m = classify(EXPEDICAO)
    assert m == FilterMatch(expedicao=True, inclusao=False)
    assert m.tipo_extracao == "Expedição"


def test_filter2_only():
    m = classify(INCLUSAO)
    assert m == FilterMatch(expedicao=False, inclusao=True)
    assert m.tipo_extracao == "Inclusão"


def test_both_filters():
    m = classify(EXPEDICAO + " contra o Estado de Alagoas, inclusao deste precatorio")
    assert m.expedicao and m.inclusao
    assert m.tipo_extracao == "Ambos"
    assert m.matches(FilterKind.EXPEDICAO)
    assert m.matches(FilterKind.INCLUSAO)


def test_no_match():
    m = classify("Nº 1234567-89.2024.8.02.0001 precatório expedido, devedor: município")
    assert not m.any
    assert m.tipo_extracao is None


def test_devedor_spacing_variant():
    text = "precatorio expedicao DEVEDOR : ESTADO DE ALAGOAS"
    assert classify(text).expedicao


@pytest.mark.parametrize(
    "phrase",
    [
        "inclusão deste precatório",
        "inclusao deste precatorio",
        "inclusão deste precatorio",
        "inclusao deste precatório",
    ],
)
def test_inclusao_accent_variants(phrase):
    assert classify(f"contra o estado de alagoas {phrase}").inclusao


def test_each_filter1_predicate_is_required():
    assert not classify("expedida Devedor: Estado de Alagoas").expedicao
    assert not classify("precatório Devedor: Estado de Alagoas").expedicao
    assert not classify("precatório expedida").expedicao


def test_filter_kind_parse():
    assert FilterKind.parse("filter1") is FilterKind.EXPEDICAO
    assert FilterKind.parse("Inclusao") is FilterKind.INCLUSAO
    assert FilterKind.parse(FilterKind.INCLUSAO) is FilterKind.INCLUSAO
    with pytest.raises(ValueError):
        FilterKind.parse("filter3")


def test_count_filter_matches_counts_unique_case_numbers():
    text = "cabeçalho precatório expedida Devedor: Estado de Alagoas " + EXPEDICAO + EXPEDICAO + INCLUSAO
    counts = count_filter_matches(split_blocks(text))
    # the header block has no case number and the duplicate counts once
    assert counts.expedicao == 1
    assert counts.inclusao == 1
    assert counts.for_kind(FilterKind.INCLUSAO) == 1
