import streamlit as st

from citation_chat.config import load_config
from citation_chat.logging import configure_logging
from citation_chat.ui import render_sidebar, session_state

st.set_page_config(page_title="Citation Chat", layout="wide")
config = load_config()
configure_logging(config.logging.level)

st.title("Citation Chat")
st.write("Hold several conversations with the answering service and inspect the passages each answer cites.")

render_sidebar()

if config.auth.required:
    user = session_state.get_current_user()
    if user:
        st.success(f"Signed in as {user}")
        if st.button("Sign out"):
            session_state.set_current_user(None)
            st.rerun()
    else:
        st.subheader("Sign in")
        with st.form(key="sign_in_form"):
            name = st.text_input("Display name", placeholder="Enter your name")
            submitted = st.form_submit_button("Continue")
            if submitted:
                if name and name.strip():
                    session_state.set_current_user(name)
                    st.rerun()
                else:
                    st.error("Display name is required")

st.markdown(
    """
### Pages
- Chat: ask questions, switch between chats, and ask about cited passages
- System Health: check that the answering service responds
"""
)
