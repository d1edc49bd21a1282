"""Client for the remote question-answering (prediction) endpoint."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import requests

from citation_chat.domain.errors import MalformedResponse, TransportFailure
from citation_chat.domain.models import AnswerPayload
from citation_chat.gateway.normalizer import normalize_response
from citation_chat.logging import get_logger

logger = get_logger(__name__)


def trouble_connecting(status_code: Optional[int]) -> AnswerPayload:
    status = f" (HTTP {status_code})" if status_code is not None else ""
    return AnswerPayload(
        text=(
            f"I'm currently having trouble connecting to the answering service{status}. "
            "Please try again in a moment."
        ),
        is_fallback=True,
    )


def connection_error(cause: object) -> AnswerPayload:
    return AnswerPayload(
        text=f"Connection error: {cause}. Could you check if the answering service is reachable?",
        is_fallback=True,
    )


def unreadable_response() -> AnswerPayload:
    return AnswerPayload(
        text="I'm sorry, I couldn't read the answering service's response. Could you please try again?",
        is_fallback=True,
    )


def unexpected_error() -> AnswerPayload:
    return AnswerPayload(text="I'm sorry, I encountered an error. Could you please try again?", is_fallback=True)


def acknowledgment(question: str) -> str:
    return f"I received your message: {question}"


def post_question(url: str, question: str, *, api_key: str = "", timeout_s: int = 60) -> str:
    """POST ``{"question": ...}`` and return the raw body. Raises ``TransportFailure``."""
    headers = {"Content-Type": "application/json"}
    if api_key:
        headers["Authorization"] = f"Bearer {api_key}"
    try:
        resp = requests.post(url, json={"question": question}, headers=headers, timeout=timeout_s)
    except requests.RequestException as exc:
        raise TransportFailure(str(exc)) from exc
    if not 200 <= resp.status_code < 300:
        raise TransportFailure(f"{url} returned {resp.status_code}: {resp.text}", status_code=resp.status_code)
    return resp.text


@dataclass
class AnsweringClient:
    url: str
    api_key: str = ""
    timeout_s: int = 60

    @classmethod
    def from_config(cls, cfg) -> "AnsweringClient":
        return cls(url=cfg.answering.url, api_key=cfg.answering.api_key, timeout_s=cfg.answering.timeout_s)

    def ask(self, question: str) -> AnswerPayload:
        """Ask one question. Never raises: failures become diagnostic payloads."""
        try:
            body = post_question(self.url, question, api_key=self.api_key, timeout_s=self.timeout_s)
            payload = normalize_response(body)
        except TransportFailure as exc:
            logger.warning(
                "Answering service request failed",
                extra={"url": self.url, "status_code": exc.status_code, "error": str(exc)},
            )
            if exc.status_code is not None:
                return trouble_connecting(exc.status_code)
            return connection_error(exc)
        except MalformedResponse as exc:
            logger.warning("Answering service returned a malformed body", extra={"url": self.url, "error": str(exc)})
            return unreadable_response()
        except Exception:
            logger.exception("Unexpected error while asking question", extra={"url": self.url})
            return unexpected_error()

        if not payload.text.strip():
            return AnswerPayload(text=acknowledgment(question), citations=payload.citations)
        logger.info("Answer received", extra={"citation_count": len(payload.citations)})
        return payload


__all__ = [
    "AnsweringClient",
    "post_question",
    "acknowledgment",
    "trouble_connecting",
    "connection_error",
    "unreadable_response",
    "unexpected_error",
]
