"""User-facing text. Every error shown to a reader comes from here, never from upstream payloads."""
from __future__ import annotations

from typing import Dict


MESSAGES: Dict[str, Dict[str, str]] = {
    "ja": {
        "config": "APIキーが設定されていません。環境変数 API_KEY を確認してください。",
        "rate_limit": "AIの利用上限に達しました。しばらく待ってから再試行してください。",
        "no_data": "AIから有効なデータが返されませんでした。",
        "empty": "ニュースが見つかりませんでした。",
        "network": "通信エラーが発生しました。",
        "retry": "再試行",
        "source_placeholder": "参考ソース",
        "show_source": "ソースを表示",
        "loading": "最新ニュースを分析中です... しばらくお待ちください。",
        "updated": "更新",
        "technical": "Tech Briefing",
        "simple": "やさしい解説",
        "why_watch": "注目",
        "risks": "リスク",
        "entities": "影響",
        "header": "TechInvest AI",
    },
    "en": {
        "config": "No API key is configured. Check the API_KEY environment variable.",
        "rate_limit": "The AI usage limit was reached. Please wait a moment and retry.",
        "no_data": "The AI did not return usable data.",
        "empty": "No news was found.",
        "network": "A communication error occurred.",
        "retry": "Retry",
        "source_placeholder": "Source",
        "show_source": "Show source",
        "loading": "Analyzing the latest news... please wait.",
        "updated": "updated",
        "technical": "Tech Briefing",
        "simple": "Plain explanation",
        "why_watch": "Why watch",
        "risks": "Risks",
        "entities": "Affected",
        "header": "TechInvest AI",
    },
}

DEFAULT_LANGUAGE = "ja"


def message(key: str, language: str = DEFAULT_LANGUAGE) -> str:
    table = MESSAGES.get((language or "").lower(), MESSAGES[DEFAULT_LANGUAGE])
    return table.get(key) or MESSAGES[DEFAULT_LANGUAGE][key]


def language_name(language: str) -> str:
    """Human name of a language code, for prompts."""
    return {"ja": "Japanese", "en": "English", "ko": "Korean"}.get((language or "").lower(), language)
