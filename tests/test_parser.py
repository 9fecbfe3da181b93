from types import SimpleNamespace

from tech_news.models import SourceCitation
from tech_news.parser import extract_citations, response_text

from conftest import grounded_response


def test_citations_follow_grounding_chunk_order():
    resp = grounded_response("{}", [("A", "https://a"), ("B", "https://b")])
    assert extract_citations(resp) == [
        SourceCitation(title="A", uri="https://a"),
        SourceCitation(title="B", uri="https://b"),
    ]


def test_duplicate_uris_are_dropped():
    resp = grounded_response("{}", [("A", "https://a"), ("A again", "https://a"), ("B", "https://b")])
    assert [c.uri for c in extract_citations(resp)] == ["https://a", "https://b"]


def test_chunks_without_web_are_ignored_and_titles_defaulted():
    chunks = [
        SimpleNamespace(web=None),
        SimpleNamespace(web=SimpleNamespace(title=None, uri="https://x")),
    ]
    resp = SimpleNamespace(candidates=[SimpleNamespace(grounding_metadata=SimpleNamespace(grounding_chunks=chunks))])
    assert extract_citations(resp, default_title="Source") == [SourceCitation(title="Source", uri="https://x")]


def test_rest_shaped_dict_is_accepted():
    resp = {
        "candidates": [
            {"groundingMetadata": {"groundingChunks": [{"web": {"title": "R", "uri": "https://r"}}]}}
        ]
    }
    assert extract_citations(resp) == [SourceCitation(title="R", uri="https://r")]


def test_missing_metadata_means_no_citations():
    assert extract_citations(SimpleNamespace(candidates=None)) == []
    assert extract_citations(SimpleNamespace(candidates=[SimpleNamespace(grounding_metadata=None)])) == []


def test_text_falls_back_to_candidate_parts():
    parts = [SimpleNamespace(text='{"news":'), SimpleNamespace(text="[]}")]
    resp = SimpleNamespace(text=None, candidates=[SimpleNamespace(content=SimpleNamespace(parts=parts))])
    assert response_text(resp) == '{"news":[]}'
