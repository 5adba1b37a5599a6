"""
Field extractors for one gazette block.

Every extractor is a pure function over the raw block text. Fields with more
than one candidate pattern keep them in an ordered list of (pattern, rule)
pairs; the first candidate whose rule accepts the match wins, and every field
has an empty/zero default when nothing matches.
"""

from __future__ import annotations

import math
import re
from typing import Callable, List, Optional, Tuple

from precatorios.extract.textnorm import collapse_whitespace, truncate

Rule = Callable[[re.Match], Optional[str]]

CASE_NUMBER = r"\d{7}-\d{2}\.\d{4}\.\d\.\d{2}\.\d{4}"

RE_NUMERO = re.compile(rf"Nº\s+({CASE_NUMBER})")

RE_VALOR = re.compile(r"R\$\s*[\d.,]+")
# exactly two decimals; integer part may carry "." thousands separators
RE_VALOR_NUMERICO = re.compile(r"R\$\s*([\d.]+),(\d{2})")

# capitalized name with optional connector words (de/da/do/dos/das/e)
_NOME = r"([A-ZÀ-Ú][a-zà-ú]+(?:\s+(?:de|da|do|dos|das|e)?\s*[A-ZÀ-Ú]?[a-zà-ú]+)*)"
_RE_TRAILING_CONNECTOR = re.compile(r"\s+(contra|em|no|na|do|da|de)$", re.I)
MIN_NOME_LEN = 3

RE_ORCAMENTO = re.compile(r"orçamento\s+(?:de\s+)?(\d{4})", re.I)
RE_DATA_ATUALIZACAO = re.compile(r"atualizado\s+em\s+(\d{2}/\d{2}/\d{4})", re.I)
RE_DESTAQUE = re.compile(r"destaque\s+de\s+(\d+)\s*%?\s*\(", re.I)
RE_ADVOGADOS = re.compile(r"Advs?:\s*([^0-9]+?)(?:\s*-\s*\d|\s*$)")


def _credor_rule(m: re.Match) -> Optional[str]:
    nome = _RE_TRAILING_CONNECTOR.sub("", m.group(1).strip())
    return nome if len(nome) > MIN_NOME_LEN else None


CREDOR_CANDIDATES: List[Tuple[re.Pattern, Rule]] = [
    (re.compile(rf"favor\s+de\s+{_NOME}\s+contra", re.I), _credor_rule),
    (re.compile(rf"Credor:\s*{_NOME}", re.I), _credor_rule),
    (re.compile(rf"Credora:\s*{_NOME}", re.I), _credor_rule),
]

# (needles, label) checked in order against the lower-cased block
NATUREZA_CANDIDATES: List[Tuple[Tuple[str, ...], str]] = [
    (("natureza alimentar",), "Alimentar"),
    (("natureza comum",), "Comum"),
    (("crédito alimentar", "credito alimentar"), "Alimentar"),
    (("crédito de natureza comum", "credito de natureza comum"), "Comum"),
]

REGIME_CANDIDATES: List[Tuple[Tuple[str, ...], str]] = [
    (("regime geral",), "Regime Geral"),
    (("regime especial",), "Regime Especial"),
]

# Case-sensitive. The bare literal subsumes the quoted and numbered variants;
# the lists are kept as they are so classification outcomes stay stable.
TIPO_DECISAO_CANDIDATES: List[Tuple[Tuple[str, ...], str]] = [
    (("'DECISÃO", "DECISÃO 01", "DECISÃO"), "DECISÃO"),
    (("'DESPACHO", "DESPACHO 01", "DESPACHO"), "DESPACHO"),
]


def _first_literal(
    text: str, candidates: List[Tuple[Tuple[str, ...], str]]
) -> str:
    for needles, label in candidates:
        if any(n in text for n in needles):
            return label
    return ""


def _first_group(pattern: re.Pattern, text: str) -> str:
    m = pattern.search(text)
    return m.group(1) if m else ""


# ---------- extractors ----------


def extract_numero(bloco: str) -> Optional[str]:
    m = RE_NUMERO.search(bloco)
    return m.group(1) if m else None


def extract_valor(bloco: str) -> str:
    m = RE_VALOR.search(bloco)
    return m.group(0) if m else ""


def extract_valor_numerico(bloco: str) -> float:
    """
    Parse "R$ 1.234.567,89" → 1234567.89. Anything without exactly two
    decimal digits after the comma yields 0.0, even when a display value exists.
    """
    m = RE_VALOR_NUMERICO.search(bloco)
    if not m:
        return 0.0
    inteiro = m.group(1).replace(".", "")
    try:
        valor = float(f"{inteiro}.{m.group(2)}")
    except ValueError:
        return 0.0
    # absurdly long digit runs overflow to inf
    return valor if math.isfinite(valor) else 0.0


def extract_credor(bloco: str) -> str:
    for pattern, rule in CREDOR_CANDIDATES:
        m = pattern.search(bloco)
        if not m:
            continue
        nome = rule(m)
        if nome:
            return nome
    return ""


def extract_natureza(bloco: str) -> str:
    return _first_literal(bloco.lower(), NATUREZA_CANDIDATES)


def extract_regime(bloco: str) -> str:
    return _first_literal(bloco.lower(), REGIME_CANDIDATES)


def extract_orcamento(bloco: str) -> str:
    return _first_group(RE_ORCAMENTO, bloco)


def extract_data_atualizacao(bloco: str) -> str:
    return _first_group(RE_DATA_ATUALIZACAO, bloco)


def extract_tipo_decisao(bloco: str) -> str:
    return _first_literal(bloco, TIPO_DECISAO_CANDIDATES)


def extract_destaque_honorarios(bloco: str) -> str:
    digits = _first_group(RE_DESTAQUE, bloco)
    return f"{digits}%" if digits else ""


def extract_advogados(bloco: str, max_chars: int = 200) -> str:
    m = RE_ADVOGADOS.search(bloco)
    if not m:
        return ""
    return truncate(collapse_whitespace(m.group(1)), max_chars)


def extract_texto_decisao(bloco: str, max_chars: int = 1000) -> str:
    return truncate(collapse_whitespace(bloco), max_chars)
