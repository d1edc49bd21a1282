"""Domain models for chats, messages and citations."""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

DEFAULT_CHAT_TITLE = "New conversation"


def new_token() -> str:
    return uuid.uuid4().hex


class Author(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class ChatState(str, Enum):
    IDLE = "idle"
    AWAITING_RESPONSE = "awaiting_response"


@dataclass(frozen=True)
class LineRange:
    start: int
    end: int

    def label(self) -> str:
        return f"Lines {self.start}-{self.end}"


@dataclass(frozen=True)
class Citation:
    text: str
    source_label: str
    line_range: Optional[LineRange] = None

    def caption(self) -> str:
        if self.line_range is None:
            return self.source_label
        return f"{self.source_label} ({self.line_range.label()})"

    def to_dict(self) -> dict:
        data = {"text": self.text, "source_label": self.source_label}
        if self.line_range is not None:
            data["line_range"] = {"from": self.line_range.start, "to": self.line_range.end}
        return data


@dataclass(frozen=True)
class AnswerPayload:
    """Normalized answer text plus the passages it cites.

    ``is_fallback`` marks diagnostics produced by the gateway instead of the
    remote service; it never changes how the store treats the payload.
    """

    text: str
    citations: Tuple[Citation, ...] = ()
    is_fallback: bool = False

    def to_dict(self) -> dict:
        return {
            "text": self.text,
            "citations": [c.to_dict() for c in self.citations],
            "is_fallback": self.is_fallback,
        }


@dataclass(frozen=True)
class Message:
    id: str
    content: str
    author: Author
    created_at: float
    citations: Tuple[Citation, ...] = ()

    @property
    def is_user(self) -> bool:
        return self.author is Author.USER

    @classmethod
    def from_user(cls, content: str) -> "Message":
        return cls(id=new_token(), content=content, author=Author.USER, created_at=time.time())

    @classmethod
    def from_answer(cls, payload: AnswerPayload) -> "Message":
        return cls(
            id=new_token(),
            content=payload.text,
            author=Author.ASSISTANT,
            created_at=time.time(),
            citations=tuple(payload.citations),
        )


@dataclass
class Chat:
    id: str = field(default_factory=new_token)
    title: str = DEFAULT_CHAT_TITLE
    messages: List[Message] = field(default_factory=list)

    @property
    def last_message(self) -> Optional[Message]:
        return self.messages[-1] if self.messages else None

    def preview(self) -> str:
        last = self.last_message
        return last.content if last else DEFAULT_CHAT_TITLE


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class Selection:
    text: str
    anchor: Point


def derive_title(message: str, max_chars: int = 30) -> str:
    if len(message) > max_chars:
        return f"{message[:max_chars]}..."
    return message


__all__ = [
    "DEFAULT_CHAT_TITLE",
    "Author",
    "ChatState",
    "LineRange",
    "Citation",
    "AnswerPayload",
    "Message",
    "Chat",
    "Point",
    "Selection",
    "derive_title",
    "new_token",
]
