from __future__ import annotations

import json
import logging
import time
from typing import Any, Dict, List, Optional, Sequence, Set

from .classifier import category_label
from .exceptions import ParseError
from .models import NewsItem, SourceCitation, to_int

logger = logging.getLogger(__name__)

CITATION_POLICIES = ("window", "shared")


def extract_json(text: str) -> Any:
    """
    Decode the JSON object carried by model output.

    Pure JSON is decoded as is. Otherwise (prose, ```json fences) the span from the
    first `{` to the last `}` is decoded. Raises ParseError when neither works.
    """
    if not isinstance(text, str) or not text.strip():
        raise ParseError("Upstream returned empty text.", raw_text=text if isinstance(text, str) else None)

    stripped = text.strip()
    try:
        return json.loads(stripped)
    except json.JSONDecodeError:
        pass

    start = stripped.find("{")
    end = stripped.rfind("}")
    if start == -1 or end <= start:
        raise ParseError("No JSON object found in upstream text.", raw_text=text)
    try:
        return json.loads(stripped[start:end + 1])
    except json.JSONDecodeError as e:
        raise ParseError(f"Upstream JSON is malformed: {e}", raw_text=text) from e


def assign_citations(
    count: int,
    citations: Sequence[SourceCitation],
    *,
    policy: str = "window",
    per_item: int = 2,
) -> List[List[SourceCitation]]:
    """
    Split citations across `count` items.

    - window: item i gets citations[i*per_item:(i+1)*per_item]; later items may get none
    - shared: every item gets the full list
    """
    if policy not in CITATION_POLICIES:
        raise ValueError(f"Unknown citation policy: {policy!r}")
    if policy == "shared":
        return [list(citations) for _ in range(count)]
    per_item = max(1, per_item)
    return [list(citations[i * per_item:(i + 1) * per_item]) for i in range(count)]


def _batch_stamp() -> int:
    return int(time.time() * 1000)


def normalize_payload(
    data: Any,
    citations: Optional[Sequence[SourceCitation]] = None,
    *,
    policy: str = "window",
    per_item: int = 2,
    id_prefix: str = "news",
    stamp: Optional[int] = None,
) -> List[NewsItem]:
    """
    Turn a decoded `{"news": [...]}` payload into NewsItem, preserving upstream order.

    Items keep an `id` they already carry when it is unique in the batch (proxy
    envelopes round-trip unchanged); others get `<prefix>-<epoch ms>-<position>`.
    When `citations` is not None it replaces whatever sources the items carried, even
    when empty: only grounding metadata may produce citations. None keeps them, for
    proxy envelopes that were already normalized.
    """
    if not isinstance(data, dict):
        raise ParseError(f"Expected a JSON object, got {type(data).__name__}.")

    raw_items = data.get("news")
    if raw_items is None:
        raw_items = []
    if not isinstance(raw_items, list):
        raise ParseError(f"'news' must be a list, got {type(raw_items).__name__}.")

    entries: List[Dict[str, Any]] = []
    for pos, entry in enumerate(raw_items):
        if not isinstance(entry, dict):
            logger.warning("Skipping non-object news entry at position %d: %r", pos, entry)
            continue
        entries.append(entry)

    stamp = _batch_stamp() if stamp is None else stamp
    windows = None
    if citations is not None:
        windows = assign_citations(len(entries), citations, policy=policy, per_item=per_item)

    items: List[NewsItem] = []
    seen_ids: Set[str] = set()
    for pos, entry in enumerate(entries):
        repaired = dict(entry)

        item_id = str(repaired.get("id") or "").strip()
        if not item_id or item_id in seen_ids:
            item_id = f"{id_prefix}-{stamp}-{pos}"
            suffix = 1
            while item_id in seen_ids:
                item_id = f"{id_prefix}-{stamp}-{pos}-{suffix}"
                suffix += 1
        seen_ids.add(item_id)
        repaired["id"] = item_id

        repaired["index"] = to_int(repaired.get("index"), pos + 1)
        repaired["category"] = category_label(repaired)
        if not isinstance(repaired.get("affectedEntities"), list):
            repaired["affectedEntities"] = []
        if windows is not None:
            repaired["sourceUrls"] = [c.to_dict() for c in windows[pos]]
        elif not isinstance(repaired.get("sourceUrls"), list):
            repaired["sourceUrls"] = []

        items.append(NewsItem.from_dict(repaired))
    return items


def normalize(
    text: str,
    citations: Sequence[SourceCitation] = (),
    *,
    policy: str = "window",
    per_item: int = 2,
    id_prefix: str = "news",
) -> List[NewsItem]:
    """
    Raw model text (+ grounding citations) -> ordered NewsItem list.

    Any `sourceUrls` the model wrote into its own text are discarded.
    """
    try:
        data = extract_json(text)
    except ParseError:
        logger.warning("Could not extract JSON from upstream text: %.500r", text)
        raise
    return normalize_payload(data, list(citations), policy=policy, per_item=per_item, id_prefix=id_prefix)


def normalize_envelope(data: Any) -> List[NewsItem]:
    """Proxy response body `{"news": [...], "timestamp": ...}` -> NewsItem list."""
    return normalize_payload(data)
