from __future__ import annotations

import logging
from pathlib import Path
from typing import List

import typer
from rich import print
from rich.progress import BarColumn, Progress, TextColumn, TimeElapsedColumn
from rich.table import Table

from precatorios.config import get_settings
from precatorios.errors import EmptyExportError, PdfDecodeError
from precatorios.export.common import export_filename, format_brl
from precatorios.export.csv_export import records_to_csv
from precatorios.export.json_export import records_to_json
from precatorios.export.xlsx_export import records_to_xlsx
from precatorios.extract.classify import FilterKind
from precatorios.ingest.pdf_text import extract_page_texts, looks_like_pdf
from precatorios.ingest.segment import tag_pages
from precatorios.log import configure_logging
from precatorios.pipeline import ExtractionResult, ExtractionSession

app = typer.Typer(add_completion=False, help="Extrator de precatórios (Diário Oficial - TJAL)")

logger = logging.getLogger("precatorios.cli")

FORMATS = ("json", "csv", "xlsx")


def _run_session(src: Path, kind: FilterKind) -> ExtractionSession:
    cfg = get_settings()
    data = src.read_bytes()

    with Progress(
        TextColumn("[bold]{task.description}[/bold]"),
        BarColumn(),
        TextColumn("{task.percentage:>3.0f}%"),
        TimeElapsedColumn(),
        transient=False,
    ) as progress:
        task = progress.add_task("Iniciando extração...", total=100)

        def on_progress(percent: int, message: str) -> None:
            progress.update(task, completed=percent, description=message)

        session = ExtractionSession.from_settings(cfg, on_progress=on_progress)
        session.active_filter = kind
        if src.suffix.lower() == ".txt":
            # page-tagged text saved earlier with `dump-text`
            session.load_text(data.decode("utf-8"), name=src.name)
        elif looks_like_pdf(data):
            session.load(data, name=src.name)
        else:
            typer.secho(f"Not a PDF: {src}", fg="red")
            raise typer.Exit(1)
    return session


def _print_summary(result: ExtractionResult) -> None:
    s = result.stats
    table = Table(title=f"Filtro: {result.filter.label}")
    table.add_column("Métrica")
    table.add_column("Valor", justify="right")
    table.add_row("Blocos", str(result.block_count))
    table.add_row("Total de Processos", str(s.total))
    table.add_row("Processos com Valor", str(s.com_valor))
    table.add_row("Natureza Alimentar", str(s.alimentar))
    table.add_row("Natureza Comum", str(s.comum))
    table.add_row("Valor Total", format_brl(s.valor_total))
    print(table)
    print(
        f"Filtro 1 (Expedição): [bold]{result.counts.expedicao}[/bold] únicos · "
        f"Filtro 2 (Inclusão): [bold]{result.counts.inclusao}[/bold] únicos"
    )


def _write_exports(
    result: ExtractionResult, formats: List[str], outdir: Path
) -> None:
    cfg = get_settings()
    outdir.mkdir(parents=True, exist_ok=True)
    for fmt in formats:
        if fmt == "json":
            data = records_to_json(result.records)
        elif fmt == "csv":
            data = records_to_csv(result.records)
        else:
            data = records_to_xlsx(
                result.records, result.filter, result.stats, top_n=cfg.top_n
            )
        out_path = outdir / export_filename(result.filter, fmt)
        out_path.write_bytes(data)
        print(f"[green]✓[/green] wrote {out_path}")


@app.command()
def extract(
    src: Path = typer.Argument(..., help="Gazette PDF (or page-tagged .txt from dump-text)"),
    filter_: str = typer.Option(
        None, "--filter", "-f", help="filter1/expedicao or filter2/inclusao"
    ),
    fmt: List[str] = typer.Option(
        [], "--format", help="Export format(s): json, csv, xlsx (repeatable)"
    ),
    outdir: Path = typer.Option(
        None, "--outdir", help="Output dir; defaults to PRECATORIOS_OUTPUT_DIR or repo default"
    ),
):
    """
    Extract precatórios from a gazette and optionally export them.
    """
    cfg = get_settings()
    configure_logging(cfg.log_level)

    try:
        kind = FilterKind.parse(filter_ or cfg.default_filter)
    except ValueError as exc:
        typer.secho(str(exc), fg="red")
        raise typer.Exit(2)

    bad = [f for f in fmt if f not in FORMATS]
    if bad:
        typer.secho(f"Unknown format(s): {', '.join(bad)}", fg="red")
        raise typer.Exit(2)

    try:
        session = _run_session(src, kind)
    except PdfDecodeError as exc:
        logger.exception("falha ao processar %s", src)
        typer.secho(f"Erro ao processar PDF: {exc}", fg="red")
        raise typer.Exit(1)

    result = session.result
    _print_summary(result)

    if fmt:
        try:
            _write_exports(result, fmt, outdir or cfg.ensure_output_dir())
        except EmptyExportError as exc:
            typer.secho(str(exc), fg="yellow")
            raise typer.Exit(1)


@app.command("dump-text")
def dump_text(
    pdf: Path = typer.Argument(..., help="Gazette PDF"),
    out: Path = typer.Argument(..., help="Where to write the page-tagged text"),
):
    """
    Decode a PDF once and save its page-tagged text, so later `extract` runs
    with other filters skip the decoding.
    """
    cfg = get_settings()
    configure_logging(cfg.log_level)
    try:
        text = tag_pages(extract_page_texts(pdf.read_bytes()))
    except PdfDecodeError as exc:
        typer.secho(f"Erro ao processar PDF: {exc}", fg="red")
        raise typer.Exit(1)
    out.write_text(text, encoding="utf-8")
    print(f"[green]✓[/green] {pdf.name} → {out}")


if __name__ == "__main__":
    app()
