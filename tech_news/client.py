from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, List, Optional, Protocol

from google import genai
from google.genai import types

from .config import Settings, clean_credential
from .exceptions import ConfigurationError, ParseError, TransportError, UpstreamRateLimit
from .messages import message
from .models import SourceCitation
from .parser import extract_citations, response_text
from .prompts import PERSONA, format_prompt, response_schema, search_instruction

logger = logging.getLogger(__name__)

STRATEGIES = ("schema", "prompt")

_RATE_LIMIT_MARKERS = ("resource_exhausted", "resource exhausted", "quota", "rate limit", "rate_limit", "too many requests")
_STATUS_429 = re.compile(r"\b429\b")


@dataclass
class UpstreamResponse:
    text: str
    citations: List[SourceCitation] = field(default_factory=list)


class NewsClient(Protocol):
    def generate(self, strategy: str = "schema") -> UpstreamResponse:  # pragma: no cover - interface
        ...


def _status_of(exc: BaseException) -> Optional[int]:
    for name in ("code", "status_code"):
        value = getattr(exc, name, None)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    return None


def is_rate_limit(exc: BaseException) -> bool:
    status = _status_of(exc)
    if status == 429:
        return True
    text = str(exc).lower()
    if any(m in text for m in _RATE_LIMIT_MARKERS):
        return True
    # A bare number only counts when the error carries no status of its own
    return status is None and bool(_STATUS_429.search(text))


def _wrap_upstream_error(provider: str, exc: Exception) -> Exception:
    if is_rate_limit(exc):
        return UpstreamRateLimit(f"{provider} rate limit: {exc}")
    return TransportError(f"{provider} request failed: {exc}", status=_status_of(exc))


class GeminiNewsClient:
    """Gemini with Google Search grounding; citations come from the grounding metadata."""

    def __init__(
        self,
        *,
        api_key: Optional[str],
        model: str,
        language: str = "ja",
        temperature: float = 0.7,
        timeout_sec: float = 30.0,
        search: bool = True,
        persona: Optional[str] = PERSONA,
        sdk_client: Any = None,
    ) -> None:
        key = clean_credential(api_key)
        if not key:
            raise ConfigurationError("API_KEY (or GEMINI_API_KEY / GOOGLE_API_KEY) not set.")
        self._client = sdk_client or genai.Client(
            api_key=key,
            http_options=types.HttpOptions(timeout=int(timeout_sec * 1000)),
        )
        self._model = model
        self._language = language
        self._temperature = temperature
        self._search = search
        self._persona = persona

    def _config(self, strategy: str) -> types.GenerateContentConfig:
        tools = [types.Tool(google_search=types.GoogleSearch())] if self._search else None
        if strategy == "schema":
            return types.GenerateContentConfig(
                tools=tools,
                temperature=self._temperature,
                system_instruction=self._persona or None,
                response_mime_type="application/json",
                response_schema=response_schema(),
            )
        return types.GenerateContentConfig(
            tools=tools,
            temperature=self._temperature,
            system_instruction=self._persona or None,
        )

    def generate(self, strategy: str = "schema") -> UpstreamResponse:
        if strategy not in STRATEGIES:
            raise ValueError(f"Unknown request strategy: {strategy!r}")
        contents = search_instruction(self._language) if strategy == "schema" else format_prompt(self._language)
        try:
            resp = self._client.models.generate_content(
                model=self._model,
                contents=contents,
                config=self._config(strategy),
            )
        except Exception as e:
            raise _wrap_upstream_error("Gemini", e) from e

        text = response_text(resp)
        if not text:
            raise ParseError("Gemini returned no text.", raw_text=text)
        citations = extract_citations(resp, default_title=message("source_placeholder", self._language))
        logger.debug("Gemini answered %d chars with %d citations", len(text), len(citations))
        return UpstreamResponse(text=text, citations=citations)


class OpenAINewsClient:
    """OpenAI chat completions. No search grounding, so no citations."""

    def __init__(
        self,
        *,
        api_key: Optional[str],
        model: str,
        language: str = "ja",
        temperature: float = 0.7,
        timeout_sec: float = 30.0,
        persona: Optional[str] = PERSONA,
        sdk_client: Any = None,
    ) -> None:
        key = clean_credential(api_key)
        if not key:
            raise ConfigurationError("OPENAI_API_KEY not set.")
        if sdk_client is None:
            try:
                from openai import OpenAI  # type: ignore
            except Exception as e:  # pragma: no cover - optional dep
                raise RuntimeError("openai package is required for the OpenAI provider. Install with `pip install openai`.") from e
            sdk_client = OpenAI(api_key=key)
        self._client = sdk_client
        self._model = model
        self._language = language
        self._temperature = temperature
        self._timeout = timeout_sec
        self._persona = persona

    def generate(self, strategy: str = "prompt") -> UpstreamResponse:
        # Chat completions has no schema strategy here; the format always rides in the prompt
        messages = []
        if self._persona:
            messages.append({"role": "system", "content": self._persona})
        messages.append({"role": "user", "content": format_prompt(self._language)})
        try:
            resp = self._client.chat.completions.create(
                model=self._model,
                messages=messages,
                temperature=self._temperature,
                response_format={"type": "json_object"},
                timeout=self._timeout,
            )
        except Exception as e:
            raise _wrap_upstream_error("OpenAI", e) from e

        content = resp.choices[0].message.content if resp and resp.choices else None
        if not content:
            raise ParseError("OpenAI returned no text.", raw_text=content)
        return UpstreamResponse(text=content, citations=[])


def build_client(settings: Settings, *, sdk_client: Any = None) -> NewsClient:
    """Select the upstream client for `settings.provider`. Raises ConfigurationError without a credential."""
    provider = (settings.provider or "").lower()
    if provider == "openai":
        return OpenAINewsClient(
            api_key=settings.openai_api_key,
            model=settings.openai_model,
            language=settings.language,
            temperature=settings.temperature,
            timeout_sec=settings.timeout_sec,
            sdk_client=sdk_client,
        )
    if provider in {"gemini", "google", "googleai"}:
        return GeminiNewsClient(
            api_key=settings.api_key,
            model=settings.gemini_model,
            language=settings.language,
            temperature=settings.temperature,
            timeout_sec=settings.timeout_sec,
            search=settings.search_grounding,
            sdk_client=sdk_client,
        )
    raise ConfigurationError(f"Unknown provider: {settings.provider!r}")
