"""
Page tagging and block segmentation.

The document is one string with a page marker inserted before every page's
text. Blocks start at each case-number prefix ("Nº 0000000-00.0000.0.00.0000")
and run to the next one; the split is a lookahead so no text is consumed and
joining the blocks gives back the document unchanged.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, List

from precatorios.extract.fields import CASE_NUMBER

PAGE_MARKER_PREFIX = "[[[PAGINA_"
PAGE_MARKER_SUFFIX = "]]]"

PAGE_MARKER_RE = re.compile(r"\[\[\[PAGINA_(\d+)\]\]\]")
BLOCK_BOUNDARY_RE = re.compile(rf"(?=Nº\s+{CASE_NUMBER})")


@dataclass(frozen=True)
class Block:
    index: int
    text: str
    page: int  # nearest page marker before the block start; 0 if none


def page_marker(page_no: int) -> str:
    return f"\n{PAGE_MARKER_PREFIX}{page_no}{PAGE_MARKER_SUFFIX}\n"


def tag_pages(page_texts: Iterable[str]) -> str:
    """Concatenate 1-based pages, each preceded by its page marker."""
    return "".join(
        page_marker(i) + text for i, text in enumerate(page_texts, start=1)
    )


def last_page_marker(text: str, default: int = 0) -> int:
    last = default
    for m in PAGE_MARKER_RE.finditer(text):
        last = int(m.group(1))
    return last


def split_blocks(text: str) -> List[Block]:
    """
    Split the page-tagged text into blocks. A text without any case number
    yields exactly one block; an empty leading segment is not emitted.
    """
    pieces = BLOCK_BOUNDARY_RE.split(text)
    if len(pieces) > 1 and pieces[0] == "":
        pieces = pieces[1:]

    blocks: List[Block] = []
    page = 0
    for piece in pieces:
        blocks.append(Block(index=len(blocks), text=piece, page=page))
        # markers inside this block set the page for the blocks after it
        page = last_page_marker(piece, default=page)
    return blocks
