from __future__ import annotations

from typing import Any, List, Optional

from .dedup import dedupe_citations
from .models import SourceCitation


def _get(obj: Any, *names: str) -> Any:
    """Attribute or key lookup; SDK objects and plain REST dicts are both accepted."""
    for name in names:
        if obj is None:
            return None
        if isinstance(obj, dict):
            value = obj.get(name)
        else:
            value = getattr(obj, name, None)
        if value is not None:
            return value
    return None


def response_text(response: Any) -> str:
    """
    Text of the first candidate.

    Prefers the SDK's `.text` shortcut; falls back to joining the candidate's parts.
    """
    text = _get(response, "text")
    if isinstance(text, str) and text:
        return text
    candidates = _get(response, "candidates") or []
    if not candidates:
        return ""
    content = _get(candidates[0], "content")
    parts = _get(content, "parts") or []
    chunks = []
    for p in parts:
        t = _get(p, "text")
        if isinstance(t, str):
            chunks.append(t)
    return "".join(chunks)


def extract_citations(response: Any, *, default_title: Optional[str] = None) -> List[SourceCitation]:
    """
    Map grounding metadata (`candidates[0].grounding_metadata.grounding_chunks[*].web`)
    to SourceCitation, in order, de-duplicated by URI.

    Chunks without a web source or without a URI are skipped.
    """
    candidates = _get(response, "candidates") or []
    if not candidates:
        return []
    metadata = _get(candidates[0], "grounding_metadata", "groundingMetadata")
    chunks = _get(metadata, "grounding_chunks", "groundingChunks") or []

    out: List[SourceCitation] = []
    for chunk in chunks:
        web = _get(chunk, "web")
        if web is None:
            continue
        uri = _get(web, "uri")
        if not isinstance(uri, str) or not uri.strip():
            continue
        title = _get(web, "title")
        if not isinstance(title, str) or not title.strip():
            title = default_title or ""
        out.append(SourceCitation(title=title.strip(), uri=uri.strip()))
    return dedupe_citations(out)
