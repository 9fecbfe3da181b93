from __future__ import annotations

from typing import Dict, Iterable, Optional, Tuple

from .models import TechCategory


# Checked in order; the first category whose hints appear in the topic wins.
_CATEGORY_HINTS: Tuple[Tuple[TechCategory, Tuple[str, ...]], ...] = (
    (TechCategory.SEMICONDUCTOR, ("半導体", "semiconductor", "chip", "gpu", "hardware", "ハードウェア", "tsmc", "nvidia")),
    (TechCategory.QUANTUM, ("量子", "quantum", "先端")),
    (TechCategory.ROBOTICS, ("ロボ", "robot", "automation", "オートメーション", "humanoid")),
    (TechCategory.EV, ("ev", "電気自動車", "battery", "電池", "clean energy", "クリーンエネルギー", "solar")),
    (TechCategory.WEB3, ("web3", "crypto", "暗号", "bitcoin", "blockchain", "ブロックチェーン")),
    (TechCategory.CLOUD, ("cloud", "クラウド", "インフラ", "infrastructure", "data center", "データセンター")),
    (TechCategory.AI, ("ai", "人工知能", "llm", "生成", "software", "ソフトウェア", "machine learning")),
)


def _contains_any(text: str, keywords: Iterable[str]) -> bool:
    t = text.lower()
    for k in keywords:
        k = k.lower()
        # Short ASCII hints ("ai", "ev") must match a whole word
        if k.isascii() and len(k) <= 3:
            if k in t.replace("/", " ").replace("-", " ").split():
                return True
        elif k in t:
            return True
    return False


def classify_topic(topic: str) -> Optional[TechCategory]:
    """Map a free-form topic label such as "AI" or "半導体" to a TechCategory."""
    topic = (topic or "").strip()
    if not topic:
        return None
    for category, hints in _CATEGORY_HINTS:
        if _contains_any(topic, hints):
            return category
    return None


def category_label(entry: Dict[str, object]) -> str:
    """
    Category for a raw news dict: the model's own label when present, otherwise the
    TechCategory inferred from the topic, otherwise the topic itself.
    """
    category = str(entry.get("category") or "").strip()
    if category:
        return category
    topic = str(entry.get("topic") or "").strip()
    guessed = classify_topic(topic)
    if guessed is not None:
        return guessed.value
    return topic
