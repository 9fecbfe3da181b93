"""
Runtime configuration read from the process environment.

`.env` files are honoured through python-dotenv, so a local checkout can keep
`API_KEY="..."` next to the code instead of exporting it.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

from .exceptions import ConfigurationError


# Build tools substitute an unset variable with this literal string.
PLACEHOLDER_VALUES = {"", "undefined", "null", "none"}

DEFAULT_GEMINI_MODEL = "gemini-3-flash-preview"
DEFAULT_OPENAI_MODEL = "gpt-4o-mini"
DEFAULT_PROXY_URL = "http://localhost:8000/api"
DEFAULT_PROXY_PATH = "/api"


def clean_credential(value: Optional[str]) -> Optional[str]:
    """Return the credential, or None when it is absent or a placeholder."""
    if value is None:
        return None
    value = value.strip()
    if value.lower() in PLACEHOLDER_VALUES:
        return None
    return value


@dataclass(frozen=True)
class Settings:
    api_key: Optional[str] = None
    openai_api_key: Optional[str] = None
    provider: str = "gemini"  # "gemini" | "openai"
    gemini_model: str = DEFAULT_GEMINI_MODEL
    openai_model: str = DEFAULT_OPENAI_MODEL
    proxy_url: str = DEFAULT_PROXY_URL
    proxy_path: str = DEFAULT_PROXY_PATH
    language: str = "ja"
    citations_per_item: int = 2
    citation_policy: str = "window"  # "window" | "shared"
    timeout_sec: float = 30.0
    temperature: float = 0.7
    search_grounding: bool = True
    discord_token: Optional[str] = None

    @property
    def credential(self) -> Optional[str]:
        """The credential the selected provider needs."""
        if self.provider == "openai":
            return clean_credential(self.openai_api_key)
        return clean_credential(self.api_key)

    def require_credential(self) -> str:
        key = self.credential
        if not key:
            raise ConfigurationError(f"No API credential configured for provider '{self.provider}'.")
        return key


def _first(env: Mapping[str, str], *names: str) -> Optional[str]:
    for name in names:
        value = clean_credential(env.get(name))
        if value:
            return value
    return None


def _float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from None


def load_settings(env: Optional[Mapping[str, str]] = None, *, dotenv: bool = True) -> Settings:
    """
    Build Settings from environment variables.

    Pass `env` to read from a plain mapping instead of `os.environ` (tests do this);
    `.env` loading is skipped in that case.
    """
    if env is None:
        if dotenv:
            load_dotenv()
        env = os.environ

    provider = (env.get("TECH_NEWS_PROVIDER") or "gemini").strip().lower()
    if provider in {"google", "googleai"}:
        provider = "gemini"
    if provider not in {"gemini", "openai"}:
        raise ConfigurationError(f"Unknown TECH_NEWS_PROVIDER: {provider!r}")

    policy = (env.get("TECH_NEWS_CITATION_POLICY") or "window").strip().lower()
    if policy not in {"window", "shared"}:
        raise ConfigurationError(f"Unknown TECH_NEWS_CITATION_POLICY: {policy!r}")

    return Settings(
        api_key=_first(env, "API_KEY", "GEMINI_API_KEY", "GOOGLE_API_KEY"),
        openai_api_key=_first(env, "OPENAI_API_KEY"),
        provider=provider,
        gemini_model=env.get("GEMINI_MODEL") or DEFAULT_GEMINI_MODEL,
        openai_model=env.get("OPENAI_MODEL") or DEFAULT_OPENAI_MODEL,
        proxy_url=env.get("TECH_NEWS_PROXY_URL") or DEFAULT_PROXY_URL,
        proxy_path=env.get("TECH_NEWS_PROXY_PATH") or DEFAULT_PROXY_PATH,
        language=(env.get("TECH_NEWS_LANGUAGE") or "ja").strip().lower(),
        citations_per_item=max(1, int(_float(env, "TECH_NEWS_CITATIONS_PER_ITEM", 2))),
        citation_policy=policy,
        timeout_sec=_float(env, "TECH_NEWS_TIMEOUT", 30.0),
        temperature=_float(env, "TECH_NEWS_TEMPERATURE", 0.7),
        search_grounding=(env.get("TECH_NEWS_SEARCH", "1").strip().lower() not in {"0", "false", "no", "off"}),
        discord_token=_first(env, "DISCORD_BOT_TOKEN"),
    )
