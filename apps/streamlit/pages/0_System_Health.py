import streamlit as st

from citation_chat.config import load_config
from citation_chat.services import health_service


st.set_page_config(page_title="System Health", layout="wide")

try:
    cfg = load_config()
except Exception as exc:  # pragma: no cover - UI guard
    st.error(f"Failed to load config: {exc}")
    st.stop()


def render_check(name: str, result: dict) -> None:
    ok = result.get("ok", False)
    status_fn = st.success if ok else st.error
    status_fn(f"{name}: {'OK' if ok else 'Issue detected'}")
    with st.expander(f"Details: {name}", expanded=not ok):
        st.json(result)


st.title("System Health")

st.subheader("App config summary")
st.json(
    {
        "environment": cfg.app.environment,
        "answering": {"url": cfg.answering.url, "timeout_s": cfg.answering.timeout_s, "api_key_set": bool(cfg.answering.api_key)},
        "suggestions": {"enabled": cfg.suggestions.enabled, "url": cfg.suggestions.url},
        "chat": cfg.chat.model_dump(),
        "auth_required": cfg.auth.required,
    }
)

if st.button("Refresh checks") or "health_checks" not in st.session_state:
    st.session_state["health_checks"] = health_service.run_all_checks(cfg)

checks = st.session_state["health_checks"]

st.subheader("Checks")
render_check("Answering service", checks.get("answering", {}))
render_check("Suggestion service", checks.get("suggestions", {}))
