from __future__ import annotations

from datetime import datetime
from typing import Iterable, List, Optional

from .messages import message
from .models import NewsItem

MAX_MESSAGE_CHARS = 2000
SOURCE_TITLE_CHARS = 18


def clamp_importance(importance: int) -> int:
    return max(1, min(5, int(importance)))


def stars(importance: int) -> str:
    filled = clamp_importance(importance)
    return "★" * filled + "☆" * (5 - filled)


def _truncate(s: str, limit: int) -> str:
    if len(s) <= limit:
        return s
    return s[: limit - 3] + "..."


def render_card(item: NewsItem, language: str = "ja") -> str:
    """One news card as Discord markdown."""
    lines = [
        f"**{item.index}. [{item.topic}]** {stars(item.importance)}",
        f"**{item.title}**",
        "",
        f"🎓 *{message('technical', language)}*",
        item.technical_summary,
        "",
        f"📘 *{message('simple', language)}*",
        item.simple_summary,
        "",
        f"⚡ **{message('why_watch', language)}**: {item.why_watch}",
        f"⚠️ **{message('risks', language)}**: {item.risks}",
    ]
    if item.affected_entities:
        groups = "; ".join(f"{e.region}: {', '.join(e.entities)}" for e in item.affected_entities)
        lines.append(f"🌐 **{message('entities', language)}**: {groups}")
    if item.source_urls:
        links = []
        for src in item.source_urls:
            title = src.title[:SOURCE_TITLE_CHARS] if src.title else message("show_source", language)
            links.append(f"[{title}...](<{src.uri}>)")
        lines.append(" ".join(links))
    return "\n".join(lines)


def render_batch(
    items: Iterable[NewsItem],
    *,
    updated_at: Optional[datetime] = None,
    language: str = "ja",
    limit: int = MAX_MESSAGE_CHARS,
) -> List[str]:
    """
    Cards grouped into messages no longer than `limit` characters.
    A single card longer than `limit` is truncated.
    """
    header = f"📰 **{message('header', language)}**"
    if updated_at is not None:
        header += f"  ({updated_at.strftime('%H:%M')} {message('updated', language)})"

    chunks: List[str] = []
    current = header
    for item in items:
        card = _truncate(render_card(item, language), limit)
        candidate = f"{current}\n\n{card}" if current else card
        if len(candidate) <= limit:
            current = candidate
        else:
            if current:
                chunks.append(current)
            current = card
    if current:
        chunks.append(current)
    return chunks
