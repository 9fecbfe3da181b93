"""
tech_news

Curated technology-investment news from a search-grounded AI model, each story
explained twice: once for professionals and once for beginners.

Core ideas:
- Input: nothing but a credential (API_KEY) or a reachable proxy
- Process: proxy → (on failure) direct model call → extract JSON → repair → attach ids and citations
- Output: List[NewsItem], in the order the model ranked them

Example
-------
from tech_news import NewsFetcher, NewsFetchError

fetcher = NewsFetcher()
try:
    news = fetcher.fetch()
except NewsFetchError as e:
    print(e.message)
else:
    for item in news:
        print(item.importance, item.topic, item.title)
"""
from .models import NewsItem, SourceCitation, AffectedEntity, TechCategory
from .config import Settings, load_settings
from .core import NewsFetcher, first_success
from .board import NewsBoard
from .exceptions import (
    TechNewsError,
    ConfigurationError,
    ParseError,
    TransportError,
    UpstreamRateLimit,
    EmptyResult,
    NewsFetchError,
)

__all__ = [
    "NewsItem",
    "SourceCitation",
    "AffectedEntity",
    "TechCategory",
    "Settings",
    "load_settings",
    "NewsFetcher",
    "first_success",
    "NewsBoard",
    "TechNewsError",
    "ConfigurationError",
    "ParseError",
    "TransportError",
    "UpstreamRateLimit",
    "EmptyResult",
    "NewsFetchError",
]
