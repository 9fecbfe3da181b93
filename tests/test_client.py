import json
from types import SimpleNamespace

import pytest

from tech_news.client import GeminiNewsClient, OpenAINewsClient, build_client, is_rate_limit
from tech_news.config import Settings
from tech_news.core import fetch_direct
from tech_news.exceptions import ConfigurationError, ParseError, TransportError, UpstreamRateLimit

from conftest import SAMPLE_PAYLOAD, grounded_response


class FakeModels:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def generate_content(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.response


def _gemini(response=None, error=None, **kwargs):
    models = FakeModels(response, error)
    client = GeminiNewsClient(api_key="k", model="gemini-test", sdk_client=SimpleNamespace(models=models), **kwargs)
    return client, models


def test_schema_strategy_requests_json_with_search_tool():
    client, models = _gemini(grounded_response(json.dumps(SAMPLE_PAYLOAD), [("A", "https://a")]))
    result = client.generate("schema")

    config = models.calls[0]["config"]
    assert models.calls[0]["model"] == "gemini-test"
    assert config.response_mime_type == "application/json"
    assert config.response_schema is not None
    assert config.tools and config.tools[0].google_search is not None
    assert [c.uri for c in result.citations] == ["https://a"]


def test_prompt_strategy_embeds_format_instead_of_schema():
    client, models = _gemini(grounded_response("{}", []))
    client.generate("prompt")

    call = models.calls[0]
    assert call["config"].response_schema is None
    assert '"technicalSummary"' in call["contents"]


def test_search_can_be_disabled():
    client, models = _gemini(grounded_response("{}", []), search=False)
    client.generate()
    assert not models.calls[0]["config"].tools


def test_unknown_strategy_is_rejected():
    client, _ = _gemini(grounded_response("{}", []))
    with pytest.raises(ValueError):
        client.generate("freestyle")


def test_missing_key_fails_without_building_sdk_client():
    with pytest.raises(ConfigurationError):
        GeminiNewsClient(api_key="undefined", model="m")


def test_quota_errors_become_rate_limit():
    client, _ = _gemini(error=RuntimeError("429 RESOURCE_EXHAUSTED: quota exceeded"))
    with pytest.raises(UpstreamRateLimit):
        client.generate()


def test_other_sdk_errors_become_transport_errors():
    client, _ = _gemini(error=ConnectionError("reset by peer"))
    with pytest.raises(TransportError):
        client.generate()


def test_empty_text_is_parse_error():
    client, _ = _gemini(SimpleNamespace(text="", candidates=[]))
    with pytest.raises(ParseError):
        client.generate()


def test_is_rate_limit_checks_status_code():
    err = Exception("too bad")
    err.code = 429
    assert is_rate_limit(err)
    assert not is_rate_limit(Exception("500 internal"))


def test_fetch_direct_windows_grounding_citations():
    sources = [(f"S{i}", f"https://s/{i}") for i in range(4)]
    client, _ = _gemini(grounded_response(json.dumps(SAMPLE_PAYLOAD), sources))
    items = fetch_direct(Settings(api_key="k"), client=client)
    assert [[c.uri for c in it.source_urls] for it in items] == [
        ["https://s/0", "https://s/1"],
        ["https://s/2", "https://s/3"],
    ]


def test_openai_client_uses_prompt_format_and_json_mode():
    calls = []

    def create(**kwargs):
        calls.append(kwargs)
        msg = SimpleNamespace(content=json.dumps(SAMPLE_PAYLOAD))
        return SimpleNamespace(choices=[SimpleNamespace(message=msg)])

    sdk = SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))
    client = OpenAINewsClient(api_key="o", model="gpt-test", sdk_client=sdk)
    result = client.generate()

    assert calls[0]["response_format"] == {"type": "json_object"}
    assert calls[0]["messages"][-1]["role"] == "user"
    assert result.citations == []


def test_build_client_picks_provider():
    sdk = SimpleNamespace(models=FakeModels())
    assert isinstance(build_client(Settings(api_key="k"), sdk_client=sdk), GeminiNewsClient)
    assert isinstance(build_client(Settings(provider="openai", openai_api_key="o"), sdk_client=sdk), OpenAINewsClient)
    with pytest.raises(ConfigurationError):
        build_client(Settings(provider="openai"))


@pytest.mark.parametrize("text", [
    "connect to proxy.internal:14290 failed",
    "read 4291 bytes then connection reset",
])
def test_numbers_containing_429_are_not_rate_limits(text):
    assert not is_rate_limit(ConnectionError(text))


def test_status_attribute_wins_over_text():
    err = Exception("GET https://api.example/v1/429/items failed")
    err.code = 503
    assert not is_rate_limit(err)
    assert is_rate_limit(Exception("HTTP 429 Too Many Requests"))


def test_transport_error_keeps_status():
    err = RuntimeError("service unavailable")
    err.code = 503
    client, _ = _gemini(error=err)
    with pytest.raises(TransportError) as info:
        client.generate()
    assert info.value.status == 503
