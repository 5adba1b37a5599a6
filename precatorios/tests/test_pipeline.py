import pytest

from precatorios import pipeline
from precatorios.config import Settings
from precatorios.errors import (
    NoDocumentLoadedError,
    PdfDecodeError,
    ProcessingInProgressError,
)
from precatorios.extract.classify import FilterKind
from precatorios.pipeline import ExtractionSession, ProgressReporter

EXPEDICAO = (
    "Nº 1000000-00.2024.8.02.0001 Precatório expedido em favor de Maria da Silva "
    "contra o Município. Devedor: Estado de Alagoas. R$ 1.000,00 , natureza comum. "
)
INCLUSAO = (
    "Nº 2000000-00.2024.8.02.0001 ação contra o Estado de Alagoas. Determino a "
    "inclusão deste precatório. R$ 2.000,00 , natureza alimentar. "
)
AMBOS = (
    "Nº 3000000-00.2024.8.02.0001 Precatório expedido. Devedor: Estado de Alagoas, "
    "contra o Estado de Alagoas, inclusao deste precatorio. R$ 500,00 . "
)

PAGES = ["DIÁRIO OFICIAL " + EXPEDICAO, INCLUSAO + AMBOS]


# --- Fakes ----------------------------------------------------------------------


def _fake_decoder(pages):
    def _iter(data):
        for i, text in enumerate(pages, start=1):
            yield i, text, len(pages)

    return _iter


def _failing_decoder(data):
    yield 1, PAGES[0], 2
    raise PdfDecodeError("Falha ao ler a página 2: broken xref")


@pytest.fixture
def fake_pdf(monkeypatch):
    monkeypatch.setattr(pipeline, "iter_page_texts", _fake_decoder(PAGES))


def _session(**kw) -> ExtractionSession:
    return ExtractionSession(settings=Settings(), **kw)


# --- Tests ----------------------------------------------------------------------


def test_load_runs_active_filter(fake_pdf):
    s = _session()
    result = s.load(b"%PDF", name="diario.pdf")
    assert s.document_name == "diario.pdf"
    assert "[[[PAGINA_2]]]" in s.text
    assert [r.numero[:7] for r in result.records] == ["1000000", "3000000"]
    assert [r.tipo_extracao for r in result.records] == ["Expedição", "Ambos"]
    assert [r.pagina for r in result.records] == [1, 2]
    assert result.stats.total == 2
    assert result.stats.valor_total == 1500.0
    assert result.counts.expedicao == 2
    assert result.counts.inclusao == 2


def test_set_filter_matches_fresh_run(fake_pdf):
    s = _session()
    s.load(b"%PDF")
    switched = s.set_filter("filter2")

    fresh = _session(active_filter=FilterKind.INCLUSAO)
    expected = fresh.load(b"%PDF")

    assert switched == expected
    assert [r.numero[:7] for r in switched.records] == ["2000000", "3000000"]


def test_set_filter_does_not_redecode(monkeypatch):
    calls = []

    def _counting(data):
        calls.append(data)
        yield from _fake_decoder(PAGES)(data)

    monkeypatch.setattr(pipeline, "iter_page_texts", _counting)
    s = _session()
    s.load(b"%PDF")
    s.set_filter(FilterKind.INCLUSAO)
    s.set_filter(FilterKind.EXPEDICAO)
    assert len(calls) == 1


def test_set_filter_without_document_only_switches():
    s = _session()
    assert s.set_filter("inclusao") is None
    assert s.active_filter is FilterKind.INCLUSAO


def test_reprocess_without_document():
    with pytest.raises(NoDocumentLoadedError):
        _session().reprocess()


def test_decode_failure_keeps_previous_state(fake_pdf, monkeypatch):
    s = _session()
    first = s.load(b"%PDF", name="a.pdf")
    monkeypatch.setattr(pipeline, "iter_page_texts", _failing_decoder)
    with pytest.raises(PdfDecodeError, match="broken xref"):
        s.load(b"%PDF", name="b.pdf")
    assert s.document_name == "a.pdf"
    assert s.result == first
    assert not s.in_flight


def test_no_matches_is_empty_result(monkeypatch):
    monkeypatch.setattr(pipeline, "iter_page_texts", _fake_decoder(["nada", "aqui"]))
    result = _session().load(b"%PDF")
    assert result.records == ()
    assert result.stats.total == 0
    assert result.stats.valor_total == 0


def test_reentrant_run_rejected(fake_pdf):
    s = _session()
    s.load(b"%PDF")
    s.in_flight = True
    with pytest.raises(ProcessingInProgressError):
        s.reprocess()
    with pytest.raises(ProcessingInProgressError):
        s.load(b"%PDF")


def test_progress_monotonic_and_completes(fake_pdf):
    seen = []
    s = _session(progress=ProgressReporter(lambda p, m: seen.append((p, m))))
    s.load(b"%PDF")
    pcts = [p for p, _ in seen]
    assert pcts[0] == 0
    assert pcts == sorted(pcts)
    assert pcts[-1] == 100
    assert ("Extraindo texto: página 1 de 2") in [m for _, m in seen]
    assert seen[-1][1] == "Processamento concluído!"


def test_progress_reporter_never_goes_backwards():
    r = ProgressReporter()
    r(60, "a")
    r(40, "b")
    r(150, "c")
    assert r.percent == 100
    assert r.message == "c"


def test_load_text_skips_decoding():
    s = _session(active_filter=FilterKind.INCLUSAO)
    result = s.load_text(INCLUSAO)
    assert [r.numero for r in result.records] == ["2000000-00.2024.8.02.0001"]
    assert [r.tipo_extracao for r in result.records] == ["Inclusão"]


def test_filter_change_during_run_is_rejected_and_ignored(fake_pdf):
    s = _session()
    s.load(b"%PDF")
    errors = []

    def switch_mid_run(percent, message):
        if message.startswith("Processando blocos"):
            try:
                s.set_filter("filter2")
            except ProcessingInProgressError as exc:
                errors.append(exc)

    s.progress = ProgressReporter(switch_mid_run)
    result = s.reprocess()

    assert errors
    assert s.active_filter is FilterKind.EXPEDICAO
    assert result.filter is FilterKind.EXPEDICAO
    assert {r.tipo_extracao for r in result.records} == {"Expedição", "Ambos"}


def test_can_run_with_retained_text_after_upload_removed(fake_pdf):
    s = _session()
    assert not s.can_run(has_upload=False)
    assert s.can_run(has_upload=True)

    s.load(b"%PDF")
    assert s.can_run(has_upload=False)

    s.in_flight = True
    assert not s.can_run(has_upload=True)
