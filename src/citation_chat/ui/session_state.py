"""Helpers for Streamlit session state."""

from __future__ import annotations

import streamlit as st

from citation_chat.services.chat_service import ChatService
from citation_chat.services.selection_bridge import SelectionBridge

CHAT_SERVICE_KEY = "chat_service"
SELECTION_BRIDGE_KEY = "selection_bridge"
CURRENT_USER_KEY = "current_user"


def get_chat_service(cfg) -> ChatService:
    """One service (and store) per browser session, created with its first chat."""
    if CHAT_SERVICE_KEY not in st.session_state:
        st.session_state[CHAT_SERVICE_KEY] = ChatService.from_config(cfg)
    return st.session_state[CHAT_SERVICE_KEY]


def get_selection_bridge(service: ChatService) -> SelectionBridge:
    bridge = st.session_state.get(SELECTION_BRIDGE_KEY)
    if bridge is None or bridge.store is not service.store:
        bridge = SelectionBridge(service.store, send=service.send)
        st.session_state[SELECTION_BRIDGE_KEY] = bridge
    return bridge


def get_current_user() -> str | None:
    return st.session_state.get(CURRENT_USER_KEY)


def set_current_user(name: str | None) -> None:
    if name:
        st.session_state[CURRENT_USER_KEY] = name.strip()
    else:
        st.session_state.pop(CURRENT_USER_KEY, None)


def is_signed_in(cfg) -> bool:
    return not cfg.auth.required or bool(get_current_user())
