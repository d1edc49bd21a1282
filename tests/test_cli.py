import json

import pytest

from citation_chat import cli
from citation_chat.domain.models import AnswerPayload, Citation
from citation_chat.services.chat_service import ChatService
from citation_chat.services.conversation_store import ConversationStore


class ScriptedGateway:
    def ask(self, question):
        return AnswerPayload(
            text=f"answer to {question}",
            citations=(Citation(text="Cited passage about cells", source_label="bio.md"),),
        )


def _run(lines):
    service = ChatService(ConversationStore.bootstrap(), ScriptedGateway(), max_workers=1)
    out = []
    try:
        cli.run_repl(service, lines, out=out.append)
    finally:
        service.shutdown()
    return service, out


def test_parser_has_commands():
    parser = cli.build_parser()
    args = parser.parse_args(["ask", "what?"])
    assert args.command == "ask"
    assert args.question == "what?"
    assert parser.parse_args(["doctor"]).command == "doctor"
    with pytest.raises(SystemExit):
        parser.parse_args(["--version"])


def test_repl_question_and_sources():
    service, out = _run(["what are cells?", "/sources", "/quit"])
    assert "Assistant: answer to what are cells?" in out
    assert any("bio.md" in line for line in out)
    assert service.store.active_chat.title == "what are cells?"


def test_repl_about_fragment():
    service, out = _run(["first", '/about "about cells" why is this cited?'])
    assert 'You: why is this cited? (Regarding: "about cells")' in out
    assert len(service.store.active_chat.messages) == 4


def test_repl_new_switch_and_list():
    service, out = _run(["/new", "hello", "/switch 1", "/list", "/switch 9"])
    chats = service.store.chats
    assert len(chats) == 2
    assert service.store.active_chat_id == chats[0].id
    assert any(line.startswith(">1.") for line in out)
    assert "Usage: /switch N (see /list)" in out


def test_repl_reports_blank_about():
    _, out = _run(['/about ""'])
    assert not any(line.startswith("You:") for line in out)


def test_ask_handler_prints_payload(monkeypatch, capsys):
    class DummyClient:
        def ask(self, question):
            return AnswerPayload(text="hi", citations=(Citation(text="A", source_label="doc1"),))

    monkeypatch.setattr(cli.AnsweringClient, "from_config", classmethod(lambda klass, cfg: DummyClient()))
    cli._ask_handler(cli.build_parser().parse_args(["ask", "q"]), cfg=None)
    out = json.loads(capsys.readouterr().out)
    assert out["text"] == "hi"
    assert out["citations"] == [{"text": "A", "source_label": "doc1"}]
