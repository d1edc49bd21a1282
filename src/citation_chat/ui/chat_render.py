"""Transcript and input rendering."""

from __future__ import annotations

import streamlit as st

from citation_chat.domain.errors import Busy, InvalidInput, NotFound
from citation_chat.domain.models import Author, Chat
from citation_chat.gateway.suggestions_client import SuggestionsClient
from citation_chat.services.chat_service import ChatService


def send_question(service: ChatService, chat_id: str, text: str) -> bool:
    """Send ``text`` and report rejections inline. Returns True when sent."""
    try:
        service.send(chat_id, text)
    except InvalidInput:
        st.warning("Please type a question first.")
        return False
    except Busy:
        st.warning("This chat is still waiting for an answer.")
        return False
    except NotFound:
        st.error("That chat no longer exists.")
        return False
    return True


def render_messages(chat: Chat, busy: bool) -> None:
    for message in chat.messages:
        with st.chat_message(message.author.value):
            st.markdown(message.content)
    if busy:
        with st.chat_message(Author.ASSISTANT.value):
            st.markdown("…")


def render_suggestions(service: ChatService, chat: Chat, client: SuggestionsClient | None) -> None:
    last = chat.last_message
    if client is None or last is None or last.is_user:
        return
    suggestions = service.suggestions_for(last.id)
    if suggestions is None:
        service.request_suggestions(last, client)
        st.caption("Loading follow-up questions...")
        return
    st.caption("Follow-up questions")
    for index, suggestion in enumerate(suggestions):
        if st.button(suggestion, key=f"suggest_{last.id}_{index}"):
            if send_question(service, chat.id, suggestion):
                st.rerun()


def render_chat(service: ChatService, suggestions_client: SuggestionsClient | None = None) -> None:
    chat = service.store.active_chat
    if chat is None:
        st.info("Create a chat to get started.")
        return
    busy = service.store.is_busy(chat.id)
    st.subheader(chat.title)
    render_messages(chat, busy)
    if not busy:
        render_suggestions(service, chat, suggestions_client)

    question = st.chat_input("Ask a question...", disabled=busy)
    if question is not None and send_question(service, chat.id, question):
        st.rerun()
