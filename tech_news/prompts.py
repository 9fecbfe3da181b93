from __future__ import annotations

from typing import Any, Dict

from .messages import language_name


PERSONA = (
    "You are a world-class technology investor. You read primary sources, separate "
    "hype from substance, and explain consequences for investors."
)

_FORMAT_EXAMPLE = """{
  "news": [
    {
      "index": 1,
      "topic": "field (AI, semiconductors, ...)",
      "title": "headline an investor should notice",
      "importance": 5,
      "technicalSummary": "about three sentences on the technical and economic impact, written for professionals in a formal register",
      "simpleSummary": "a gentle explanation a child could follow, using an everyday analogy",
      "affectedEntities": [{"region": "US", "entities": ["company or institution"]}],
      "whyWatch": "the single most important point for future investment decisions",
      "risks": "risks or technical obstacles to keep in mind",
      "category": "category"
    }
  ]
}"""


def search_instruction(language: str) -> str:
    """The request itself, shared by both strategies."""
    return (
        "Use Google Search to pick 3 to 5 of the most important investment-relevant news "
        "stories from the past 72 hours about semiconductors, AI, robotics, quantum "
        "computing and EVs. Analyze each one and explain it twice: once for experts and "
        f"once for beginners. Write every value in {language_name(language)}."
    )


def format_prompt(language: str) -> str:
    """Instruction with the JSON format embedded, for calls without a response schema."""
    return (
        f"{search_instruction(language)}\n\n"
        "Answer with this JSON format:\n"
        f"{_FORMAT_EXAMPLE}\n"
        "`importance` is an integer from 1 (minor) to 5 (critical). Return JSON only."
    )


def response_schema() -> Dict[str, Any]:
    """Strict output schema, for calls made with a JSON response MIME type."""
    string = {"type": "STRING"}
    return {
        "type": "OBJECT",
        "properties": {
            "news": {
                "type": "ARRAY",
                "items": {
                    "type": "OBJECT",
                    "properties": {
                        "index": {"type": "INTEGER"},
                        "topic": string,
                        "title": string,
                        "importance": {"type": "INTEGER"},
                        "technicalSummary": string,
                        "simpleSummary": string,
                        "affectedEntities": {
                            "type": "ARRAY",
                            "items": {
                                "type": "OBJECT",
                                "properties": {
                                    "region": string,
                                    "entities": {"type": "ARRAY", "items": string},
                                },
                            },
                        },
                        "whyWatch": string,
                        "risks": string,
                        "category": string,
                    },
                    "required": [
                        "index", "topic", "title", "importance",
                        "technicalSummary", "simpleSummary", "whyWatch", "risks",
                    ],
                },
            },
        },
    }
