"""Derives what the citation panel shows for an answer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, List, Optional

from citation_chat.domain.models import AnswerPayload, Citation


@dataclass(frozen=True)
class CitationView:
    citation: Citation
    highlighted: bool

    @property
    def text(self) -> str:
        return self.citation.text

    @property
    def caption(self) -> str:
        return self.citation.caption()


class CitationPresenter:
    """Citations of ``payload``, highlighted against the previous turn's passages."""

    def __init__(self, payload: Optional[AnswerPayload], previous: Optional[AnswerPayload] = None):
        self.payload = payload
        self.highlight_set: FrozenSet[str] = frozenset(c.text for c in previous.citations) if previous else frozenset()

    @classmethod
    def from_store(cls, store, chat_id: Optional[str] = None, *, follow_chat: bool = False) -> "CitationPresenter":
        payload = store.document_for(chat_id, follow_chat=follow_chat)
        previous = store.previous_document if payload is store.current_document else None
        return cls(payload, previous)

    def is_highlighted(self, citation_text: str) -> bool:
        return any(citation_text in member for member in self.highlight_set)

    def citations(self) -> List[CitationView]:
        if self.payload is None:
            return []
        return [CitationView(citation=c, highlighted=self.is_highlighted(c.text)) for c in self.payload.citations]


__all__ = ["CitationPresenter", "CitationView"]
