from __future__ import annotations

import logging
from typing import Callable, List, Optional, Sequence, Tuple, Type, TypeVar

import requests

from .client import NewsClient, build_client
from .config import Settings, load_settings
from .exceptions import (
    ConfigurationError,
    EmptyResult,
    NewsFetchError,
    ParseError,
    TechNewsError,
    UpstreamRateLimit,
)
from .fetcher import fetch_from_proxy
from .messages import message
from .models import NewsItem
from .normalizer import normalize

logger = logging.getLogger(__name__)

T = TypeVar("T")
Strategy = Tuple[str, Callable[[], Optional[T]]]


class StrategiesExhausted(TechNewsError):
    """Every strategy failed. `errors` keeps (name, exception) pairs in the order tried."""

    def __init__(self, errors: List[Tuple[str, TechNewsError]]) -> None:
        names = ", ".join(f"{n}: {type(e).__name__}" for n, e in errors)
        super().__init__(f"All strategies failed ({names})")
        self.errors = errors

    @property
    def last(self) -> Optional[TechNewsError]:
        return self.errors[-1][1] if self.errors else None


def first_success(
    strategies: Sequence[Strategy],
    *,
    fatal: Tuple[Type[TechNewsError], ...] = (),
) -> T:
    """
    Run strategies in order and return the first result.

    A strategy returning None is a gate: it passed and defers to the next one.
    TechNewsError moves on to the next strategy, except instances of `fatal`, which
    end the run at once. Anything else is a bug and propagates. Raises
    StrategiesExhausted when none succeeds.
    """
    errors: List[Tuple[str, TechNewsError]] = []
    for name, attempt in strategies:
        try:
            result = attempt()
        except TechNewsError as e:
            logger.info("Strategy %s failed: %s", name, e)
            errors.append((name, e))
            if isinstance(e, fatal):
                break
            continue
        if result is not None:
            return result
    raise StrategiesExhausted(errors)


def describe_error(exc: BaseException, language: str = "ja") -> str:
    """Localized, user-presentable text for a fetch failure. Never echoes upstream payloads."""
    if isinstance(exc, StrategiesExhausted):
        exc = exc.last or exc
    if isinstance(exc, ConfigurationError):
        return message("config", language)
    if isinstance(exc, UpstreamRateLimit):
        return message("rate_limit", language)
    if isinstance(exc, ParseError):
        return message("no_data", language)
    if isinstance(exc, EmptyResult):
        return message("empty", language)
    return message("network", language)


def fetch_direct(
    settings: Settings,
    *,
    client: Optional[NewsClient] = None,
    strategy: str = "schema",
) -> List[NewsItem]:
    """Ask the model directly from this process and normalize the answer."""
    if client is None:
        client = build_client(settings)
    upstream = client.generate(strategy)
    return normalize(
        upstream.text,
        list(upstream.citations or []),
        policy=settings.citation_policy,
        per_item=settings.citations_per_item,
    )


class NewsFetcher:
    """
    High-level API: return the current batch of curated news.

    Order: credential precheck → proxy → direct call. The first path that answers
    wins; an empty answer ends the fetch with EmptyResult.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        require_credential: bool = True,
        use_proxy: bool = True,
        session: Optional[requests.Session] = None,
        client_factory: Optional[Callable[[Settings], NewsClient]] = None,
    ) -> None:
        self.settings = settings or load_settings()
        self.require_credential = require_credential
        self.use_proxy = use_proxy
        self._session = session
        self._client_factory = client_factory or build_client

    def _precheck(self) -> None:
        # Gate only: raises ConfigurationError, which is fatal, before any network call
        if self.require_credential:
            self.settings.require_credential()
        return None

    def _proxy(self) -> List[NewsItem]:
        return fetch_from_proxy(self.settings.proxy_url, session=self._session, timeout=self.settings.timeout_sec)

    def _direct(self) -> List[NewsItem]:
        # Client construction raises ConfigurationError before any network call
        client = self._client_factory(self.settings)
        return fetch_direct(self.settings, client=client)

    def strategies(self) -> List[Strategy]:
        out: List[Strategy] = [("credential", self._precheck)]
        if self.use_proxy:
            out.append(("proxy", self._proxy))
        out.append(("direct", self._direct))
        return out

    def fetch(self) -> List[NewsItem]:
        """
        Raises NewsFetchError whose `message` is localized and safe to display.
        """
        language = self.settings.language
        try:
            items = first_success(self.strategies(), fatal=(ConfigurationError,))
        except StrategiesExhausted as e:
            for name, err in e.errors:
                logger.error("%s path failed: %s", name, err)
            raise NewsFetchError(describe_error(e, language), cause=e) from e

        if not items:
            err = EmptyResult("Upstream returned zero news items.")
            raise NewsFetchError(describe_error(err, language), cause=err)
        return items
