"""
Dual-filter classification of gazette blocks.

Both filters are always evaluated: the active one decides which blocks become
records, and both feed the extraction-type tag and the diagnostic counts.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Iterable, Optional, Set

from precatorios.extract.fields import extract_numero
from precatorios.ingest.segment import Block

# ---------- filter vocabulary (matched against the lower-cased block) ----------

PRECATORIO_TERMS = ("precatório", "precatorio")
EXPEDICAO_TERMS = ("expedida", "expedição", "expedicao", "expedido")
DEVEDOR_ALAGOAS_TERMS = ("devedor: estado de alagoas", "devedor : estado de alagoas")

CONTRA_ESTADO_TERMS = ("contra o estado de alagoas",)
INCLUSAO_TERMS = (
    "inclusão deste precatório",
    "inclusao deste precatorio",
    "inclusão deste precatorio",
    "inclusao deste precatório",
)


class FilterKind(str, enum.Enum):
    EXPEDICAO = "filter1"
    INCLUSAO = "filter2"

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def short_label(self) -> str:
        return _SHORT_LABELS[self]

    @property
    def slug(self) -> str:
        return _SLUGS[self]

    @classmethod
    def parse(cls, value: "str | FilterKind") -> "FilterKind":
        """Accept "filter1"/"filter2", "expedicao"/"inclusao" or a member."""
        if isinstance(value, FilterKind):
            return value
        v = value.strip().lower()
        for kind in cls:
            if v in (kind.value, kind.slug, kind.name.lower()):
                return kind
        raise ValueError(f"unknown filter: {value!r}")


_LABELS = {
    FilterKind.EXPEDICAO: "Expedição de Precatórios",
    FilterKind.INCLUSAO: "Inclusão de Precatórios",
}
_SHORT_LABELS = {FilterKind.EXPEDICAO: "Expedição", FilterKind.INCLUSAO: "Inclusão"}
_SLUGS = {FilterKind.EXPEDICAO: "expedicao", FilterKind.INCLUSAO: "inclusao"}


def _has_any(text: str, terms: Iterable[str]) -> bool:
    return any(t in text for t in terms)


def matches_expedicao(bloco_lower: str) -> bool:
    return (
        _has_any(bloco_lower, PRECATORIO_TERMS)
        and _has_any(bloco_lower, EXPEDICAO_TERMS)
        and _has_any(bloco_lower, DEVEDOR_ALAGOAS_TERMS)
    )


def matches_inclusao(bloco_lower: str) -> bool:
    return _has_any(bloco_lower, CONTRA_ESTADO_TERMS) and _has_any(
        bloco_lower, INCLUSAO_TERMS
    )


@dataclass(frozen=True)
class FilterMatch:
    expedicao: bool
    inclusao: bool

    @property
    def tipo_extracao(self) -> Optional[str]:
        """Ambos, Expedição or Inclusão; None when neither filter holds."""
        if self.expedicao and self.inclusao:
            return "Ambos"
        if self.expedicao:
            return "Expedição"
        if self.inclusao:
            return "Inclusão"
        return None

    @property
    def any(self) -> bool:
        return self.expedicao or self.inclusao

    def matches(self, kind: FilterKind) -> bool:
        if kind is FilterKind.EXPEDICAO:
            return self.expedicao
        return self.inclusao


def classify(bloco: str) -> FilterMatch:
    lower = bloco.lower()
    return FilterMatch(
        expedicao=matches_expedicao(lower), inclusao=matches_inclusao(lower)
    )


@dataclass(frozen=True)
class FilterCounts:
    """Unique case numbers satisfying each filter, whatever filter is active."""

    expedicao: int
    inclusao: int

    def for_kind(self, kind: FilterKind) -> int:
        return self.expedicao if kind is FilterKind.EXPEDICAO else self.inclusao


def count_filter_matches(blocks: Iterable[Block]) -> FilterCounts:
    exp: Set[str] = set()
    inc: Set[str] = set()
    for b in blocks:
        numero = extract_numero(b.text)
        if numero is None:
            continue
        match = classify(b.text)
        if match.expedicao:
            exp.add(numero)
        if match.inclusao:
            inc.add(numero)
    return FilterCounts(expedicao=len(exp), inclusao=len(inc))
