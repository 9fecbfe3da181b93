from __future__ import annotations

from typing import Iterable, List, Set

from .models import SourceCitation


def dedupe_citations(citations: Iterable[SourceCitation]) -> List[SourceCitation]:
    """
    Remove duplicate citations by URI (falling back to title when the URI is empty).
    Keeps the first occurrence and preserves original order.
    """
    seen: Set[str] = set()
    out: List[SourceCitation] = []

    def make_key(c: SourceCitation) -> str:
        if c.uri:
            return f"uri::{c.uri.strip()}"
        return f"title::{c.title.strip().lower()}"

    for c in citations:
        key = make_key(c)
        if key in seen:
            continue
        seen.add(key)
        out.append(c)
    return out
