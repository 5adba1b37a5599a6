"""
Record assembly: classify → dedupe by case number → extract → sort.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Sequence, Set

from precatorios.extract import fields as F
from precatorios.extract.classify import FilterKind, FilterMatch, classify
from precatorios.extract.schema import DEVEDOR_PADRAO, Precatorio
from precatorios.ingest.segment import Block

logger = logging.getLogger(__name__)

ProgressSink = Callable[[int, str], None]

DEFAULT_PROGRESS_INTERVAL = 100


def build_record(
    block: Block,
    numero: str,
    match: FilterMatch,
    *,
    attorneys_max_chars: int = 200,
    excerpt_max_chars: int = 1000,
) -> Precatorio:
    bloco = block.text
    return Precatorio(
        numero=numero,
        credor=F.extract_credor(bloco),
        devedor=DEVEDOR_PADRAO,
        valor=F.extract_valor(bloco),
        valor_numerico=F.extract_valor_numerico(bloco),
        natureza=F.extract_natureza(bloco),
        regime=F.extract_regime(bloco),
        orcamento_referencia=F.extract_orcamento(bloco),
        data_atualizacao=F.extract_data_atualizacao(bloco),
        tipo_decisao=F.extract_tipo_decisao(bloco),
        destaque_honorarios=F.extract_destaque_honorarios(bloco),
        advogados=F.extract_advogados(bloco, attorneys_max_chars),
        texto_decisao=F.extract_texto_decisao(bloco, excerpt_max_chars),
        pagina=block.page,
        tipo_extracao=match.tipo_extracao,
    )


def assemble_records(
    blocks: Sequence[Block],
    active: FilterKind,
    *,
    progress: Optional[ProgressSink] = None,
    interval: int = DEFAULT_PROGRESS_INTERVAL,
    attorneys_max_chars: int = 200,
    excerpt_max_chars: int = 1000,
) -> List[Precatorio]:
    """
    Build one record per unique case number among the blocks that satisfy the
    active filter, sorted by numeric value (highest first, ties keep document
    order).
    """
    records: List[Precatorio] = []
    seen: Set[str] = set()
    n = len(blocks)

    for index, block in enumerate(blocks):
        match = classify(block.text)
        if match.matches(active):
            numero = F.extract_numero(block.text)
            if numero is None:
                logger.debug("block %d matched %s without a case number", index, active.value)
            elif numero not in seen:
                seen.add(numero)
                records.append(
                    build_record(
                        block,
                        numero,
                        match,
                        attorneys_max_chars=attorneys_max_chars,
                        excerpt_max_chars=excerpt_max_chars,
                    )
                )

        if progress is not None and index % interval == 0:
            progress(50 + round(index / n * 50), f"Processando blocos: {index + 1} de {n}")

    # list.sort is stable: equal values keep encounter order
    records.sort(key=lambda r: r.valor_numerico, reverse=True)
    logger.info("%d processos retornados (filtro %s)", len(records), active.short_label)
    return records
