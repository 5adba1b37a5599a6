from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Natureza = Literal["", "Alimentar", "Comum"]
Regime = Literal["", "Regime Geral", "Regime Especial"]
TipoDecisao = Literal["", "DECISÃO", "DESPACHO"]
TipoExtracao = Literal["Expedição", "Inclusão", "Ambos"]

DEVEDOR_PADRAO = "Estado de Alagoas"


class Precatorio(BaseModel):
    """
    One assembled record, identified by its case number.
    Field aliases are the camelCase names used by the exports.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    numero: str = Field(..., pattern=r"^\d{7}-\d{2}\.\d{4}\.\d\.\d{2}\.\d{4}$")
    credor: str = ""
    devedor: str = DEVEDOR_PADRAO
    valor: str = ""
    valor_numerico: float = Field(0.0, ge=0.0, allow_inf_nan=False)
    natureza: Natureza = ""
    regime: Regime = ""
    orcamento_referencia: str = ""
    data_atualizacao: str = ""
    tipo_decisao: TipoDecisao = ""
    destaque_honorarios: str = ""
    advogados: str = ""
    texto_decisao: str = ""
    pagina: int = Field(0, ge=0)
    tipo_extracao: TipoExtracao


class ExtractionStats(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    total: int = Field(0, ge=0)
    com_valor: int = Field(0, ge=0)
    alimentar: int = Field(0, ge=0)
    comum: int = Field(0, ge=0)
    valor_total: float = Field(0.0, allow_inf_nan=False)


class NatureBreakdown(BaseModel):
    """One row of the per-nature distribution on the summary sheet."""

    model_config = ConfigDict(frozen=True)

    natureza: Literal["Alimentar", "Comum"]
    quantidade: int
    valor_total: float
    percentual: str  # "37.5%" (one decimal) or "0%"
