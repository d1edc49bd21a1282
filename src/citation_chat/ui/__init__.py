"""Streamlit UI helpers for Citation Chat."""

from citation_chat.ui.sidebar import render_sidebar, render_chat_list
from citation_chat.ui.chat_render import render_chat
from citation_chat.ui.citations_render import render_citations
from citation_chat.ui import session_state

__all__ = ["render_sidebar", "render_chat_list", "render_chat", "render_citations", "session_state"]
