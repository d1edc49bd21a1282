"""Citation panel with the "ask about this" form."""

from __future__ import annotations

import streamlit as st

from citation_chat.domain.errors import Busy
from citation_chat.domain.models import Point
from citation_chat.services.citation_presenter import CitationPresenter
from citation_chat.services.selection_bridge import SelectionBridge


def render_citations(presenter: CitationPresenter, bridge: SelectionBridge) -> None:
    st.subheader("Referenced Document")
    views = presenter.citations()
    if not views:
        st.markdown("**No document referenced yet**")
        st.caption("References will appear here when relevant")
        return

    for index, view in enumerate(views):
        marker = "🟨 " if view.highlighted else ""
        st.markdown(f"{marker}{view.text}")
        st.caption(f"📄 {view.caption}")
        with st.expander("Ask about this"):
            with st.form(key=f"ask_about_{index}", clear_on_submit=True):
                fragment = st.text_area("Selected text", value=view.text, key=f"fragment_{index}")
                free_text = st.text_input("Type your question...", key=f"question_{index}")
                col_ask, col_cancel = st.columns(2)
                ask = col_ask.form_submit_button("Ask")
                cancel = col_cancel.form_submit_button("Cancel")
            if cancel:
                bridge.cancel()
            elif ask:
                bridge.on_select(fragment, Point(0, index))
                try:
                    message = bridge.submit(free_text or None)
                except Busy:
                    st.warning("This chat is still waiting for an answer.")
                    message = None
                if message is not None:
                    st.rerun()
