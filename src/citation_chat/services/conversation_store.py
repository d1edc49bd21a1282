"""In-memory owner of chats, the active chat and the current document."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from citation_chat.domain.errors import Busy, InvalidInput, NoSuchChat, NotFound
from citation_chat.domain.models import AnswerPayload, Chat, ChatState, Message, derive_title
from citation_chat.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class StoreEvent:
    """What changed after one store mutation."""

    chat: Optional[Chat]
    active_chat_id: Optional[str]
    current_document: Optional[AnswerPayload]
    active_changed: bool = False
    document_changed: bool = False


Subscriber = Callable[[StoreEvent], None]


class ConversationStore:
    """Chats in creation order, one active chat, one current document.

    Each chat is either idle or awaiting exactly one response. Messages are
    only ever appended, and a chat's title is set once, from its first user
    message.
    """

    def __init__(self, title_max_chars: int = 30):
        self.title_max_chars = title_max_chars
        self._chats: Dict[str, Chat] = {}
        self._states: Dict[str, ChatState] = {}
        self._last_payloads: Dict[str, AnswerPayload] = {}
        self._active_chat_id: Optional[str] = None
        self._current_document: Optional[AnswerPayload] = None
        self._previous_document: Optional[AnswerPayload] = None
        self._subscribers: List[Subscriber] = []

    @classmethod
    def bootstrap(cls, title_max_chars: int = 30) -> "ConversationStore":
        store = cls(title_max_chars=title_max_chars)
        store.create_chat()
        return store

    # -- reads -------------------------------------------------------------

    @property
    def chats(self) -> List[Chat]:
        return list(self._chats.values())

    @property
    def active_chat_id(self) -> Optional[str]:
        return self._active_chat_id

    @property
    def active_chat(self) -> Optional[Chat]:
        if self._active_chat_id is None:
            return None
        return self._chats.get(self._active_chat_id)

    @property
    def current_document(self) -> Optional[AnswerPayload]:
        return self._current_document

    @property
    def previous_document(self) -> Optional[AnswerPayload]:
        return self._previous_document

    def get_chat(self, chat_id: str) -> Chat:
        try:
            return self._chats[chat_id]
        except KeyError:
            raise NotFound(chat_id) from None

    def state_of(self, chat_id: str) -> ChatState:
        self.get_chat(chat_id)
        return self._states[chat_id]

    def is_busy(self, chat_id: str) -> bool:
        return self.state_of(chat_id) is ChatState.AWAITING_RESPONSE

    def last_payload(self, chat_id: str) -> Optional[AnswerPayload]:
        self.get_chat(chat_id)
        return self._last_payloads.get(chat_id)

    def document_for(self, chat_id: Optional[str], *, follow_chat: bool = False) -> Optional[AnswerPayload]:
        """Document the citation panel should show while ``chat_id`` is active."""
        if follow_chat and chat_id is not None:
            return self.last_payload(chat_id)
        return self._current_document

    # -- subscriptions -----------------------------------------------------

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self, chat: Optional[Chat], *, active_changed: bool = False, document_changed: bool = False) -> None:
        event = StoreEvent(
            chat=chat,
            active_chat_id=self._active_chat_id,
            current_document=self._current_document,
            active_changed=active_changed,
            document_changed=document_changed,
        )
        for callback in list(self._subscribers):
            try:
                callback(event)
            except Exception:
                logger.exception("Store subscriber failed", extra={"chat_id": chat.id if chat else None})

    # -- mutations ---------------------------------------------------------

    def create_chat(self) -> Chat:
        chat = Chat()
        self._chats[chat.id] = chat
        self._states[chat.id] = ChatState.IDLE
        self._active_chat_id = chat.id
        logger.info("Chat created", extra={"chat_id": chat.id, "chat_count": len(self._chats)})
        self._notify(chat, active_changed=True)
        return chat

    def select_chat(self, chat_id: str) -> None:
        chat = self.get_chat(chat_id)
        if self._active_chat_id == chat_id:
            return
        self._active_chat_id = chat_id
        self._notify(chat, active_changed=True)

    def begin_send(self, chat_id: str, text: str) -> Message:
        if text is None or not text.strip():
            raise InvalidInput("Question must not be empty")
        chat = self._chats.get(chat_id)
        if chat is None:
            raise NoSuchChat(chat_id)
        if self._states[chat_id] is ChatState.AWAITING_RESPONSE:
            raise Busy(chat_id)

        message = Message.from_user(text)
        if not chat.messages:
            chat.title = derive_title(text, self.title_max_chars)
        chat.messages.append(message)
        self._states[chat_id] = ChatState.AWAITING_RESPONSE
        logger.info("Question sent", extra={"chat_id": chat_id, "message_id": message.id})
        self._notify(chat)
        return message

    def complete_send(self, chat_id: str, payload: AnswerPayload) -> Optional[Message]:
        """Store the answer for the chat's outstanding question.

        Returns ``None`` and changes nothing when the chat is not awaiting a response.
        """
        chat = self._chats.get(chat_id)
        if chat is None:
            raise NoSuchChat(chat_id)
        if self._states[chat_id] is not ChatState.AWAITING_RESPONSE:
            logger.warning("Ignoring answer for a chat with no outstanding question", extra={"chat_id": chat_id})
            return None
        message = Message.from_answer(payload)
        chat.messages.append(message)
        self._states[chat_id] = ChatState.IDLE
        self._last_payloads[chat_id] = payload
        self._previous_document = self._current_document
        self._current_document = payload
        logger.info(
            "Answer stored",
            extra={"chat_id": chat_id, "message_id": message.id, "citation_count": len(payload.citations)},
        )
        self._notify(chat, document_changed=True)
        return message


__all__ = ["ConversationStore", "StoreEvent", "Subscriber"]
