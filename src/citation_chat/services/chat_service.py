"""Drives question round trips for the conversation store.

Store mutations happen only on the thread that calls ``send``/``poll``/``wait``;
the worker pool only runs the gateway and suggestion calls.
"""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from typing import Dict, List, Optional, Protocol

from citation_chat.domain.errors import CitationChatError
from citation_chat.domain.models import AnswerPayload, Message
from citation_chat.gateway.answering_client import AnsweringClient, unexpected_error
from citation_chat.gateway.suggestions_client import fallback_suggestions
from citation_chat.logging import get_logger
from citation_chat.services.conversation_store import ConversationStore

logger = get_logger(__name__)


class Gateway(Protocol):
    def ask(self, question: str) -> AnswerPayload:
        ...


class Suggester(Protocol):
    def suggest(self, message_text: str) -> List[str]:
        ...


class ChatService:
    def __init__(self, store: ConversationStore, gateway: Gateway, *, max_workers: int = 4):
        self.store = store
        self.gateway = gateway
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="answering")
        self._pending: Dict[str, Future] = {}
        self._suggestion_futures: Dict[str, Future] = {}
        self._suggestion_texts: Dict[str, str] = {}
        self._suggestions: Dict[str, List[str]] = {}

    @classmethod
    def from_config(cls, cfg, store: Optional[ConversationStore] = None) -> "ChatService":
        store = store or ConversationStore.bootstrap(title_max_chars=cfg.chat.title_max_chars)
        return cls(store, AnsweringClient.from_config(cfg), max_workers=cfg.chat.max_workers)

    def send(self, chat_id: str, text: str) -> Message:
        """Append the user message and start the round trip in the background."""
        message = self.store.begin_send(chat_id, text)
        try:
            self._pending[chat_id] = self._executor.submit(self.gateway.ask, text)
        except RuntimeError:
            logger.exception("Could not start request", extra={"chat_id": chat_id})
            self.store.complete_send(chat_id, unexpected_error())
        return message

    def send_to_active(self, text: str) -> Optional[Message]:
        chat = self.store.active_chat
        if chat is None:
            return None
        return self.send(chat.id, text)

    def pending_chat_ids(self) -> List[str]:
        return list(self._pending)

    def has_pending(self) -> bool:
        return bool(self._pending) or bool(self._suggestion_futures)

    def _complete(self, chat_id: str, future: Future) -> Optional[Message]:
        try:
            payload = future.result()
        except Exception:
            # gateway.ask never raises; this guards injected gateways
            logger.exception("Gateway raised instead of returning a payload", extra={"chat_id": chat_id})
            payload = unexpected_error()
        return self.store.complete_send(chat_id, payload)

    def _collect_suggestions(self) -> None:
        for message_id, future in list(self._suggestion_futures.items()):
            if not future.done():
                continue
            del self._suggestion_futures[message_id]
            text = self._suggestion_texts.pop(message_id, "")
            try:
                self._suggestions[message_id] = future.result()
            except Exception:
                logger.exception("Suggestion request raised", extra={"message_id": message_id})
                self._suggestions[message_id] = fallback_suggestions(text)

    def poll(self) -> List[Message]:
        """Apply every finished round trip. Returns the assistant messages appended."""
        completed = []
        for chat_id, future in list(self._pending.items()):
            if not future.done():
                continue
            del self._pending[chat_id]
            message = self._complete(chat_id, future)
            if message is not None:
                completed.append(message)
        self._collect_suggestions()
        return completed

    def wait(self, chat_id: str, timeout: Optional[float] = None) -> Optional[Message]:
        """Block until the chat's outstanding request resolves and apply it."""
        future = self._pending.get(chat_id)
        if future is None:
            return None
        future.exception(timeout=timeout)
        del self._pending[chat_id]
        return self._complete(chat_id, future)

    def ask(self, chat_id: str, text: str, timeout: Optional[float] = None) -> Message:
        """Send and wait; returns the assistant message."""
        self.send(chat_id, text)
        message = self.wait(chat_id, timeout=timeout)
        if message is None:
            # the request could not be started; send() already stored the diagnostic
            last = self.store.get_chat(chat_id).last_message
            if last is None or last.is_user:
                raise CitationChatError(f"No answer was stored for chat {chat_id}")
            return last
        return message

    def request_suggestions(self, message: Message, client: Suggester) -> None:
        """Start fetching follow-up questions for ``message`` unless already known or running."""
        if message.id in self._suggestions or message.id in self._suggestion_futures:
            return
        try:
            self._suggestion_futures[message.id] = self._executor.submit(client.suggest, message.content)
        except RuntimeError:
            logger.exception("Could not start suggestion request", extra={"message_id": message.id})
            self._suggestions[message.id] = fallback_suggestions(message.content)
            return
        self._suggestion_texts[message.id] = message.content

    def suggestions_for(self, message_id: str) -> Optional[List[str]]:
        """Follow-up questions once fetched; ``None`` while pending or never requested."""
        return self._suggestions.get(message_id)

    def shutdown(self) -> None:
        self._executor.shutdown(wait=False)


__all__ = ["ChatService", "Gateway", "Suggester"]
