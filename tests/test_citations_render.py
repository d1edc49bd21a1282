from citation_chat.domain.models import AnswerPayload, Citation
from citation_chat.services.citation_presenter import CitationPresenter
from citation_chat.services.conversation_store import ConversationStore
from citation_chat.services.selection_bridge import SelectionBridge
from citation_chat.ui import citations_render


class DummyBlock:
    def __init__(self, st):
        self.st = st

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def form_submit_button(self, label):
        return self.st.buttons.get(label, False)


class DummySt:
    def __init__(self, buttons=None, fragment=None, question=""):
        self.markdowns = []
        self.captions = []
        self.warnings = []
        self.buttons = buttons or {}
        self.fragment = fragment
        self.question = question
        self.reruns = 0

    def subheader(self, text):
        self.markdowns.append(text)

    def markdown(self, text):
        self.markdowns.append(text)

    def caption(self, text):
        self.captions.append(text)

    def warning(self, text):
        self.warnings.append(text)

    def expander(self, *args, **kwargs):
        return DummyBlock(self)

    def form(self, *args, **kwargs):
        return DummyBlock(self)

    def columns(self, n):
        return [DummyBlock(self) for _ in range(n)]

    def text_area(self, label, value="", key=None):
        return self.fragment if self.fragment is not None else value

    def text_input(self, label, key=None):
        return self.question

    def rerun(self):
        self.reruns += 1


def _presenter():
    payload = AnswerPayload(text="a", citations=(Citation(text="Passage one", source_label="doc1"),))
    return CitationPresenter(payload)


def test_render_empty_panel(monkeypatch):
    dummy = DummySt()
    monkeypatch.setattr(citations_render, "st", dummy)
    citations_render.render_citations(CitationPresenter(None), SelectionBridge(ConversationStore.bootstrap()))
    assert any("No document referenced yet" in m for m in dummy.markdowns)


def test_render_lists_passages(monkeypatch):
    dummy = DummySt()
    monkeypatch.setattr(citations_render, "st", dummy)
    citations_render.render_citations(_presenter(), SelectionBridge(ConversationStore.bootstrap()))
    assert "Passage one" in dummy.markdowns
    assert any("doc1" in c for c in dummy.captions)


def test_ask_about_fragment_sends_question(monkeypatch):
    dummy = DummySt(buttons={"Ask": True}, fragment="one", question="meaning?")
    monkeypatch.setattr(citations_render, "st", dummy)
    store = ConversationStore.bootstrap()
    bridge = SelectionBridge(store)
    citations_render.render_citations(_presenter(), bridge)
    assert store.active_chat.messages[-1].content == 'meaning? (Regarding: "one")'
    assert bridge.selection is None
    assert dummy.reruns == 1


def test_ask_about_on_busy_chat_warns(monkeypatch):
    dummy = DummySt(buttons={"Ask": True}, fragment="one")
    monkeypatch.setattr(citations_render, "st", dummy)
    store = ConversationStore.bootstrap()
    store.begin_send(store.active_chat_id, "pending")
    citations_render.render_citations(_presenter(), SelectionBridge(store))
    assert dummy.warnings
    assert len(store.active_chat.messages) == 1


def test_cancel_clears_selection(monkeypatch):
    dummy = DummySt(buttons={"Cancel": True})
    monkeypatch.setattr(citations_render, "st", dummy)
    store = ConversationStore.bootstrap()
    bridge = SelectionBridge(store)
    citations_render.render_citations(_presenter(), bridge)
    assert bridge.selection is None
    assert store.active_chat.messages == []
