from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Tuple


class TechCategory(str, Enum):
    AI = "AI / ソフトウェア"
    SEMICONDUCTOR = "半導体 / ハードウェア"
    CLOUD = "クラウド / インフラ"
    EV = "EV / クリーンエネルギー"
    QUANTUM = "量子 / 先端技術"
    WEB3 = "Web3 / 暗号資産"
    ROBOTICS = "ロボティクス / オートメーション"


@dataclass(frozen=True)
class SourceCitation:
    """A web page the model's search grounding reported as a source."""
    title: str
    uri: str

    def to_dict(self) -> Dict[str, str]:
        return {"title": self.title, "uri": self.uri}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SourceCitation":
        return cls(title=str(data.get("title") or ""), uri=str(data.get("uri") or ""))


@dataclass(frozen=True)
class AffectedEntity:
    region: str
    entities: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {"region": self.region, "entities": list(self.entities)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AffectedEntity":
        names = data.get("entities") or []
        if isinstance(names, str):
            names = [names]
        elif not isinstance(names, (list, tuple)):
            names = []
        return cls(region=str(data.get("region") or ""), entities=tuple(str(n) for n in names))


@dataclass(frozen=True)
class NewsItem:
    """
    Stable public model of one curated news card.

    WARNING: `to_dict` keys are the proxy's wire format. Do not rename them lightly.
    """
    id: str
    index: int
    topic: str
    title: str
    importance: int
    technical_summary: str
    simple_summary: str
    why_watch: str
    risks: str
    category: str
    affected_entities: Tuple[AffectedEntity, ...] = ()
    source_urls: Tuple[SourceCitation, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "index": self.index,
            "topic": self.topic,
            "title": self.title,
            "importance": self.importance,
            "technicalSummary": self.technical_summary,
            "simpleSummary": self.simple_summary,
            "affectedEntities": [e.to_dict() for e in self.affected_entities],
            "whyWatch": self.why_watch,
            "risks": self.risks,
            "category": self.category,
            "sourceUrls": [s.to_dict() for s in self.source_urls],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NewsItem":
        """Build from a wire-format dict. Missing fields fall back to empty values."""
        entities = data.get("affectedEntities") or []
        sources = data.get("sourceUrls") or []
        return cls(
            id=str(data.get("id") or ""),
            index=to_int(data.get("index"), 0),
            topic=str(data.get("topic") or ""),
            title=str(data.get("title") or ""),
            importance=to_int(data.get("importance"), 0),
            technical_summary=str(data.get("technicalSummary") or ""),
            simple_summary=str(data.get("simpleSummary") or ""),
            why_watch=str(data.get("whyWatch") or ""),
            risks=str(data.get("risks") or ""),
            category=str(data.get("category") or ""),
            affected_entities=tuple(AffectedEntity.from_dict(e) for e in entities if isinstance(e, dict)),
            source_urls=tuple(SourceCitation.from_dict(s) for s in sources if isinstance(s, dict)),
        )


@dataclass
class NewsBatch:
    """The proxy's response envelope: `{"news": [...], "timestamp": "..."}`."""
    items: List[NewsItem] = field(default_factory=list)
    timestamp: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"news": [it.to_dict() for it in self.items], "timestamp": self.timestamp}


def to_int(value: Any, default: int) -> int:
    # Models sometimes answer numbers as "4" or 4.0
    if isinstance(value, bool):
        return default
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return default
