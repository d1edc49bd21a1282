"""Normalize raw answering-service bodies into ``AnswerPayload``.

The prediction endpoint has shipped two citation layouts over time:

* flat: ``{"text": ..., "sourceDocuments": [doc, ...]}``
* nested: ``{"text": ..., "agentReasoning": [{"sourceDocuments": [doc, ...]}, ...]}``

Some deployments also append one stray byte (typically ``%``) after the
JSON document, and a few return the whole document JSON-encoded a second
time. Everything downstream only ever sees ``AnswerPayload``.
"""

from __future__ import annotations

import json
import string
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional

from citation_chat.domain.errors import MalformedResponse
from citation_chat.domain.models import AnswerPayload, Citation, LineRange
from citation_chat.logging import get_logger

logger = get_logger(__name__)

UNKNOWN_SOURCE = "unknown"

# Characters a JSON document can legitimately end with (object, array,
# string, number, true/false, null).
_JSON_ENDINGS = set('}]"') | set(string.digits) | {"e", "l"}


class PayloadShape(str, Enum):
    FLAT = "flat"
    NESTED = "nested"
    TEXT_ONLY = "text_only"


def strip_trailing_artifact(raw: str) -> str:
    """Drop a single trailing byte that cannot belong to the JSON document."""
    cleaned = raw.rstrip()
    if cleaned and cleaned[-1] not in _JSON_ENDINGS:
        return cleaned[:-1]
    return cleaned


def _loads_tolerant(text: str) -> Any:
    """Decode ``text``; on failure retry once without its final character."""
    cleaned = text.rstrip()
    try:
        return json.loads(cleaned)
    except ValueError:
        if not cleaned:
            raise
        return json.loads(cleaned[:-1])


def parse_body(raw: str | bytes) -> Dict[str, Any]:
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8", errors="replace")
    try:
        data = _loads_tolerant(raw)
        if isinstance(data, str):
            # double-encoded document
            data = _loads_tolerant(data)
    except ValueError as exc:
        raise MalformedResponse(f"Response body is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise MalformedResponse(f"Expected a JSON object, got {type(data).__name__}")
    return data


def classify_shape(data: Dict[str, Any]) -> PayloadShape:
    flat = data.get("sourceDocuments")
    if isinstance(flat, list) and flat:
        return PayloadShape.FLAT
    steps = data.get("agentReasoning")
    if isinstance(steps, list) and steps:
        return PayloadShape.NESTED
    return PayloadShape.TEXT_ONLY


def _line_range(metadata: Dict[str, Any]) -> Optional[LineRange]:
    loc = metadata.get("loc")
    if not isinstance(loc, dict):
        return None
    lines = loc.get("lines")
    if not isinstance(lines, dict):
        return None
    start, end = lines.get("from"), lines.get("to")
    if isinstance(start, bool) or isinstance(end, bool):
        return None
    if isinstance(start, int) and isinstance(end, int):
        return LineRange(start=start, end=end)
    return None


def document_to_citation(doc: Any) -> Optional[Citation]:
    if not isinstance(doc, dict):
        return None
    content = doc.get("pageContent")
    if not isinstance(content, str) or not content.strip():
        return None
    metadata = doc.get("metadata")
    if not isinstance(metadata, dict):
        metadata = {}
    source = metadata.get("source")
    label = str(source) if source not in (None, "") else UNKNOWN_SOURCE
    return Citation(text=content, source_label=label, line_range=_line_range(metadata))


def _citations_from(docs: Iterable[Any]) -> List[Citation]:
    citations = []
    for doc in docs:
        citation = document_to_citation(doc)
        if citation is not None:
            citations.append(citation)
    return citations


def _flat_citations(data: Dict[str, Any]) -> List[Citation]:
    return _citations_from(data.get("sourceDocuments") or [])


def _nested_citations(data: Dict[str, Any]) -> List[Citation]:
    citations: List[Citation] = []
    for step in data.get("agentReasoning") or []:
        if not isinstance(step, dict):
            continue
        docs = step.get("sourceDocuments")
        if isinstance(docs, list):
            citations.extend(_citations_from(docs))
    return citations


_EXTRACTORS: Dict[PayloadShape, Callable[[Dict[str, Any]], List[Citation]]] = {
    PayloadShape.FLAT: _flat_citations,
    PayloadShape.NESTED: _nested_citations,
    PayloadShape.TEXT_ONLY: lambda data: [],
}


def _answer_text(data: Dict[str, Any]) -> str:
    text = data.get("text")
    if text is None:
        return ""
    return text if isinstance(text, str) else str(text)


def normalize_data(data: Dict[str, Any]) -> AnswerPayload:
    shape = classify_shape(data)
    citations = _EXTRACTORS[shape](data)
    if shape is PayloadShape.FLAT and not citations and isinstance(data.get("agentReasoning"), list):
        # flat list held only null/empty documents
        shape = PayloadShape.NESTED
        citations = _EXTRACTORS[shape](data)
    logger.debug("Normalized response", extra={"shape": shape.value, "citation_count": len(citations)})
    return AnswerPayload(text=_answer_text(data), citations=tuple(citations))


def normalize_response(raw: str | bytes) -> AnswerPayload:
    """Parse a raw response body. Raises ``MalformedResponse`` on unparseable input.

    A missing ``text`` field yields an empty ``text``; the gateway decides what
    to show instead.
    """
    return normalize_data(parse_body(raw))


__all__ = [
    "PayloadShape",
    "strip_trailing_artifact",
    "parse_body",
    "classify_shape",
    "document_to_citation",
    "normalize_data",
    "normalize_response",
]
