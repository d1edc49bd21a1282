import time

import streamlit as st

from citation_chat.config import load_config
from citation_chat.gateway.suggestions_client import SuggestionsClient
from citation_chat.logging import configure_logging
from citation_chat.services.citation_presenter import CitationPresenter
from citation_chat.ui import render_chat, render_chat_list, render_citations, render_sidebar, session_state

st.set_page_config(page_title="Chat", layout="wide")
cfg = load_config()
configure_logging(cfg.logging.level)

render_sidebar()

if not session_state.is_signed_in(cfg):
    st.warning("Please sign in on Home first.")
    st.stop()

service = session_state.get_chat_service(cfg)
service.poll()
bridge = session_state.get_selection_bridge(service)
store = service.store

chats_col, chat_col, docs_col = st.columns([1, 2, 2])
with chats_col:
    render_chat_list(service)
with chat_col:
    render_chat(service, SuggestionsClient.from_config(cfg))
with docs_col:
    presenter = CitationPresenter.from_store(
        store, store.active_chat_id, follow_chat=cfg.chat.panel_follows_active_chat
    )
    render_citations(presenter, bridge)

if service.has_pending():
    time.sleep(0.5)
    st.rerun()
