"""Turns a highlighted citation fragment into a follow-up question."""

from __future__ import annotations

from typing import Callable, Optional

from citation_chat.domain.errors import InvalidInput
from citation_chat.domain.models import Message, Point, Selection
from citation_chat.logging import get_logger
from citation_chat.services.conversation_store import ConversationStore

logger = get_logger(__name__)

SendFn = Callable[[str, str], Message]


def compose_question(selected_text: str, free_text: Optional[str] = None) -> str:
    if free_text is not None and free_text.strip():
        return f'{free_text.strip()} (Regarding: "{selected_text}")'
    return selected_text


class SelectionBridge:
    """Holds at most one live selection.

    ``send`` defaults to ``store.begin_send``; pass ``ChatService.send`` to also
    start the round trip.
    """

    def __init__(self, store: ConversationStore, send: Optional[SendFn] = None):
        self.store = store
        self._send = send or store.begin_send
        self._selection: Optional[Selection] = None

    @property
    def selection(self) -> Optional[Selection]:
        return self._selection

    @property
    def has_selection(self) -> bool:
        return self._selection is not None

    def on_select(self, text: str, anchor: Point) -> None:
        text = (text or "").strip()
        if not text:
            self.dismiss()
            return
        self._selection = Selection(text=text, anchor=anchor)

    def dismiss(self) -> None:
        self._selection = None

    cancel = dismiss

    def compose_question(self, free_text: Optional[str] = None) -> str:
        if self._selection is None:
            raise InvalidInput("No text is selected")
        return compose_question(self._selection.text, free_text)

    def submit(self, free_text: Optional[str] = None) -> Optional[Message]:
        """Send the composed question to the active chat; no-op without a selection or chat."""
        if self._selection is None:
            return None
        question = self.compose_question(free_text)
        self._selection = None
        chat = self.store.active_chat
        if chat is None:
            logger.info("Selection submitted without an active chat")
            return None
        return self._send(chat.id, question)


__all__ = ["SelectionBridge", "compose_question"]
