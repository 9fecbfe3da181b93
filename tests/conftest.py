import json
from types import SimpleNamespace

import pytest

from tech_news.client import UpstreamResponse
from tech_news.config import Settings
from tech_news.models import SourceCitation


SAMPLE_PAYLOAD = {
    "news": [
        {
            "index": 1,
            "topic": "AI",
            "title": "New accelerator roadmap",
            "importance": 5,
            "technicalSummary": "Vendor guides capex up.",
            "simpleSummary": "Faster brains for computers.",
            "whyWatch": "Supply chain orders.",
            "risks": "Export controls.",
            "category": "AI / ソフトウェア",
        },
        {
            "index": 2,
            "topic": "半導体",
            "title": "Foundry expands 2nm capacity",
            "importance": 4,
            "technicalSummary": "Capacity doubles by next year.",
            "simpleSummary": "More chip factories.",
            "affectedEntities": [{"region": "Taiwan", "entities": ["TSMC"]}],
            "whyWatch": "Margins.",
            "risks": "Yield.",
        },
    ]
}


class FakeResponse:
    def __init__(self, status_code=200, body=None, text=None):
        self.status_code = status_code
        self._body = body
        self.text = text if text is not None else (json.dumps(body) if body is not None else "")

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        if self._body is None:
            return json.loads(self.text)
        return self._body


class FakeSession:
    """Stands in for requests.Session; records every GET."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def get(self, url, **kwargs):
        self.calls.append(url)
        if self.error is not None:
            raise self.error
        return self.response


class FakeClient:
    """NewsClient returning a canned answer (or raising) and counting calls."""

    def __init__(self, text=None, citations=None, error=None):
        self.text = text if text is not None else json.dumps(SAMPLE_PAYLOAD)
        self.citations = citations or []
        self.error = error
        self.calls = []

    def generate(self, strategy="schema"):
        self.calls.append(strategy)
        if self.error is not None:
            raise self.error
        return UpstreamResponse(text=self.text, citations=list(self.citations))


def grounded_response(text, sources):
    chunks = [SimpleNamespace(web=SimpleNamespace(title=t, uri=u)) for t, u in sources]
    candidate = SimpleNamespace(grounding_metadata=SimpleNamespace(grounding_chunks=chunks))
    return SimpleNamespace(text=text, candidates=[candidate])


@pytest.fixture
def settings():
    return Settings(api_key="test-key", proxy_url="http://proxy.test/api", language="en")


@pytest.fixture
def citations():
    return [SourceCitation(title=f"Source {i}", uri=f"https://example.com/{i}") for i in range(5)]
