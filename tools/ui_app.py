from __future__ import annotations

import logging

import streamlit as st

from precatorios.config import get_settings
from precatorios.errors import EmptyExportError, PdfDecodeError, ProcessingInProgressError
from precatorios.export.common import MEDIA_TYPES, export_filename, format_brl
from precatorios.export.csv_export import records_to_csv
from precatorios.export.json_export import records_to_json
from precatorios.export.xlsx_export import records_to_xlsx
from precatorios.extract.classify import FilterKind
from precatorios.ingest.pdf_text import looks_like_pdf
from precatorios.log import configure_logging
from precatorios.pipeline import ExtractionSession, ProgressReporter

logger = logging.getLogger("precatorios.ui")

FILTER_HELP = {
    FilterKind.EXPEDICAO: "Precatório + Expedição + Devedor: Estado de Alagoas",
    FilterKind.INCLUSAO: "Contra o Estado de Alagoas + INCLUSÃO deste precatório",
}


def _session() -> ExtractionSession:
    if "session" not in st.session_state:
        st.session_state["session"] = ExtractionSession.from_settings()
    return st.session_state["session"]


def _export_buttons(session: ExtractionSession) -> None:
    result = session.result
    cfg = get_settings()
    st.sidebar.header("Exportar Dados")
    try:
        payloads = {
            "xlsx": records_to_xlsx(result.records, result.filter, result.stats, top_n=cfg.top_n),
            "csv": records_to_csv(result.records),
            "json": records_to_json(result.records),
        }
    except EmptyExportError as exc:
        st.sidebar.warning(str(exc))
        return
    labels = {"xlsx": "Exportar Excel (.xlsx)", "csv": "Exportar CSV", "json": "Exportar JSON"}
    for fmt, data in payloads.items():
        st.sidebar.download_button(
            labels[fmt],
            data=data,
            file_name=export_filename(result.filter, fmt),
            mime=MEDIA_TYPES[fmt],
        )


def main():
    st.set_page_config(page_title="Extrator de Precatórios", layout="wide")
    st.title("Extrator de Precatórios")
    st.caption("Diário Oficial - Tribunal de Justiça")

    cfg = get_settings()
    configure_logging(cfg.log_level)
    session = _session()

    # Upload
    st.sidebar.header("Upload do PDF")
    upload = st.sidebar.file_uploader("PDF do Diário Oficial", type=["pdf"])

    # Filter
    st.sidebar.header("Tipo de Extração")
    kinds = list(FilterKind)
    kind = st.sidebar.radio(
        "Critério de filtragem",
        kinds,
        index=kinds.index(session.active_filter),
        format_func=lambda k: k.label,
        captions=[FILTER_HELP[k] for k in kinds],
    )

    new_document = upload is not None and upload.name != session.document_name
    label = "Processar PDF" if new_document or session.text is None else "Aplicar Filtro"
    if st.sidebar.button(label, disabled=not session.can_run(upload is not None)):
        bar = st.progress(0, text="Iniciando extração...")
        session.progress = ProgressReporter(lambda pct, msg: bar.progress(pct, text=msg))
        try:
            if new_document or session.text is None:
                data = upload.getvalue()
                if not looks_like_pdf(data):
                    st.error("Por favor, selecione um arquivo PDF válido.")
                    st.stop()
                session.active_filter = kind
                result = session.load(data, name=upload.name)
            else:
                result = session.set_filter(kind)
            st.success(f"{result.stats.total} processos encontrados com o filtro {kind.short_label}!")
        except PdfDecodeError as exc:
            logger.exception("falha ao processar %s", upload.name)
            st.error(f"Erro ao processar PDF: {exc}")
        except ProcessingInProgressError as exc:
            st.warning(str(exc))

    result = session.result
    if result is None:
        st.info("Envie o PDF e clique em 'Processar PDF'.")
        st.stop()

    # Summary chips
    s = result.stats
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Total de Processos", s.total)
    c2.metric("Com Valor", s.com_valor)
    c3.metric("Alimentar / Comum", f"{s.alimentar} / {s.comum}")
    c4.metric("Valor Total", format_brl(s.valor_total))
    st.caption(
        f"Filtro 1 (Expedição): {result.counts.expedicao} únicos · "
        f"Filtro 2 (Inclusão): {result.counts.inclusao} únicos"
    )

    if not result.records:
        st.warning("Nenhum processo encontrado com o filtro selecionado.")
        st.stop()

    _export_buttons(session)

    show_text = st.checkbox("Mostrar texto da decisão")
    for p in result.records:
        header = f"**{p.numero}** — {p.valor or '—'} · {p.natureza or '—'} · p.{p.pagina or '—'} · {p.tipo_extracao}"
        with st.expander(header, expanded=False):
            st.write(f"Credor: {p.credor or '—'}")
            st.write(f"Regime: {p.regime or '—'} · Orçamento: {p.orcamento_referencia or '—'}")
            st.write(f"Atualizado em: {p.data_atualizacao or '—'} · {p.tipo_decisao or '—'}")
            if p.destaque_honorarios:
                st.write(f"Destaque de honorários: {p.destaque_honorarios}")
            if p.advogados:
                st.write(f"Advogados: {p.advogados}")
            if show_text:
                st.code(p.texto_decisao)


if __name__ == "__main__":
    main()
