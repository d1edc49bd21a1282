"""Optional follow-up question suggestions."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import List

from citation_chat.domain.errors import TransportFailure
from citation_chat.gateway.answering_client import post_question
from citation_chat.gateway.normalizer import strip_trailing_artifact
from citation_chat.logging import get_logger

logger = get_logger(__name__)

MAX_SUGGESTIONS = 3
_LIST_MARKER = re.compile(r"^\s*(?:[-*•]|\d+[.)])\s*")

PROMPT_TEMPLATE = (
    "Based on this answer, suggest three short follow-up questions a reader might ask. "
    "Return one question per line without numbering.\n\nAnswer:\n{message}"
)


def fallback_suggestions(message_text: str) -> List[str]:
    return [
        "Can you explain that in more detail?",
        f'What are the key points about "{message_text[:30]}"?',
        "Which sources support this answer?",
    ]


def parse_suggestions(raw: str) -> List[str]:
    body = strip_trailing_artifact(raw)
    try:
        data = json.loads(body)
    except ValueError:
        data = None
    if isinstance(data, dict) and isinstance(data.get("text"), str):
        body = data["text"]
    elif isinstance(data, str):
        body = data
    lines = [_LIST_MARKER.sub("", line).strip() for line in body.splitlines()]
    return [line for line in lines if line][:MAX_SUGGESTIONS]


@dataclass
class SuggestionsClient:
    url: str
    api_key: str = ""
    timeout_s: int = 30

    @classmethod
    def from_config(cls, cfg) -> "SuggestionsClient | None":
        if not cfg.suggestions.enabled or not cfg.suggestions.url:
            return None
        return cls(url=cfg.suggestions.url, api_key=cfg.suggestions.api_key, timeout_s=cfg.suggestions.timeout_s)

    def suggest(self, message_text: str) -> List[str]:
        prompt = PROMPT_TEMPLATE.format(message=message_text)
        try:
            raw = post_question(self.url, prompt, api_key=self.api_key, timeout_s=self.timeout_s)
        except TransportFailure as exc:
            logger.warning("Suggestion request failed", extra={"url": self.url, "error": str(exc)})
            return fallback_suggestions(message_text)
        suggestions = parse_suggestions(raw)
        if not suggestions:
            return fallback_suggestions(message_text)
        return suggestions


__all__ = ["SuggestionsClient", "fallback_suggestions", "parse_suggestions", "MAX_SUGGESTIONS"]
