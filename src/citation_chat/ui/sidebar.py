"""Sidebar layout: chat list and navigation."""

from __future__ import annotations

import streamlit as st

from citation_chat.services.chat_service import ChatService
from citation_chat.ui import session_state

# Navigation targets relative to the Streamlit entrypoint
NAV_LINKS = [
    ("Chat", "pages/1_Chat.py"),
    ("System Health", "pages/0_System_Health.py"),
]


def _is_valid_page_path(path: str) -> bool:
    return path.startswith("pages/") and path.endswith(".py")


def _safe_page_link(path: str, label: str) -> None:
    if not _is_valid_page_path(path):
        st.sidebar.warning(f"Invalid page path for '{label}': {path}")
        return
    st.sidebar.page_link(path, label=label)


def render_sidebar() -> None:
    st.sidebar.title("Citation Chat")
    user = session_state.get_current_user()
    if user:
        st.sidebar.caption(f"Signed in as {user}")
    for label, path in NAV_LINKS:
        _safe_page_link(path, label=label)


def render_chat_list(service: ChatService) -> None:
    store = service.store
    header, action = st.columns([3, 1])
    header.subheader("Chats")
    if action.button("➕", help="New Chat", key="new_chat"):
        store.create_chat()
    active_id = store.active_chat_id
    for chat in store.chats:
        label = chat.title
        if service.store.is_busy(chat.id):
            label = f"⏳ {label}"
        if st.button(label, key=f"chat_{chat.id}", type="primary" if chat.id == active_id else "secondary", use_container_width=True):
            store.select_chat(chat.id)
            st.rerun()
        st.caption(chat.preview()[:80])
