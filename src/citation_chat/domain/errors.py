"""Custom exceptions."""

from __future__ import annotations

from typing import Optional


class CitationChatError(Exception):
    """Base class for all citation chat errors."""


class ConfigError(CitationChatError):
    """Raised when configuration loading fails."""


class InvalidInput(CitationChatError):
    """Raised when a question is empty or otherwise unusable."""


class Busy(CitationChatError):
    """Raised when a chat already has an outstanding request."""

    def __init__(self, chat_id: str):
        super().__init__(f"Chat {chat_id} is still waiting for a response")
        self.chat_id = chat_id


class NotFound(CitationChatError):
    """Raised when an operation references an unknown chat id."""

    def __init__(self, chat_id: str):
        super().__init__(f"Chat not found: {chat_id}")
        self.chat_id = chat_id


class NoSuchChat(NotFound):
    """Raised by send operations addressed to an unknown chat."""


class TransportFailure(CitationChatError):
    """Raised when the answering service is unreachable or returns non-2xx."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class MalformedResponse(CitationChatError):
    """Raised when a response body cannot be parsed even after cleanup."""


__all__ = [
    "CitationChatError",
    "ConfigError",
    "InvalidInput",
    "Busy",
    "NotFound",
    "NoSuchChat",
    "TransportFailure",
    "MalformedResponse",
]
