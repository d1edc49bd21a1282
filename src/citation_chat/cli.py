"""Command line interface for Citation Chat."""

from __future__ import annotations

import argparse
import json
import shlex
import sys
from pathlib import Path
from typing import Callable, Iterable, Optional

from citation_chat import __version__
from citation_chat.config import load_config
from citation_chat.domain.errors import CitationChatError
from citation_chat.domain.models import Point
from citation_chat.gateway.answering_client import AnsweringClient
from citation_chat.logging import configure_logging, get_logger, get_run_id
from citation_chat.services import health_service
from citation_chat.services.chat_service import ChatService
from citation_chat.services.citation_presenter import CitationPresenter
from citation_chat.services.selection_bridge import SelectionBridge

logger = get_logger(__name__)

REPL_HELP = """Commands:
  /new                     start a new chat
  /list                    list chats
  /switch N                make chat N active
  /sources                 show passages cited by the latest answer
  /about "fragment" [q]    ask about a fragment of a cited passage
  /quit                    exit
Anything else is sent as a question to the active chat."""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Citation Chat CLI")
    parser.add_argument("--version", action="version", version=f"citation-chat {__version__}")
    parser.add_argument("--config", help="Path to a YAML config file")
    subparsers = parser.add_subparsers(dest="command")

    ask_parser = subparsers.add_parser("ask", help="Ask one question and print the normalized answer")
    ask_parser.add_argument("question", help="Question to ask")
    ask_parser.set_defaults(func=_ask_handler)

    chat_parser = subparsers.add_parser("chat", help="Interactive multi-chat session")
    chat_parser.set_defaults(func=_chat_handler)

    doctor_parser = subparsers.add_parser("doctor", help="Check that the remote services respond")
    doctor_parser.set_defaults(func=_doctor_handler)

    return parser


def main(argv: Optional[list[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not hasattr(args, "func"):
        parser.print_help()
        return

    config = load_config(Path(args.config) if args.config else None)
    configure_logging(config.logging.level)
    logger.info("Starting CLI", extra={"run_id": get_run_id(), "command": args.command, "env": config.app.environment})
    args.func(args, config)


def _ask_handler(args: argparse.Namespace, cfg) -> None:
    payload = AnsweringClient.from_config(cfg).ask(args.question)
    print(json.dumps(payload.to_dict(), indent=2))


def _doctor_handler(args: argparse.Namespace, cfg) -> None:
    results = health_service.run_all_checks(cfg)
    print(json.dumps(results, indent=2))
    if not all(r.get("ok") for r in results.values()):
        sys.exit(1)


def _chat_handler(args: argparse.Namespace, cfg) -> None:
    service = ChatService.from_config(cfg)
    try:
        run_repl(service, _stdin_lines())
    finally:
        service.shutdown()


def _stdin_lines() -> Iterable[str]:
    while True:
        try:
            yield input("> ")
        except EOFError:
            return


def _print_sources(service: ChatService, out: Callable[[str], None]) -> None:
    views = CitationPresenter.from_store(service.store).citations()
    if not views:
        out("No document referenced yet")
        return
    for index, view in enumerate(views, start=1):
        marker = "*" if view.highlighted else " "
        out(f"{marker}[{index}] {view.caption}")
        out(f"    {view.text}")


def _print_chats(service: ChatService, out: Callable[[str], None]) -> None:
    active = service.store.active_chat_id
    for index, chat in enumerate(service.store.chats, start=1):
        marker = ">" if chat.id == active else " "
        out(f"{marker}{index}. {chat.title} ({len(chat.messages)} messages)")


def run_repl(service: ChatService, lines: Iterable[str], out: Callable[[str], None] = print) -> None:
    """Run the interactive loop over ``lines``; each question waits for its answer."""
    store = service.store
    bridge = SelectionBridge(store, send=service.send)
    out(REPL_HELP)
    for line in lines:
        line = line.strip()
        if not line:
            continue
        try:
            if line == "/quit":
                return
            if line == "/new":
                chat = store.create_chat()
                out(f"Started chat {len(store.chats)}: {chat.title}")
            elif line == "/list":
                _print_chats(service, out)
            elif line.startswith("/switch"):
                parts = line.split()
                chats = store.chats
                if len(parts) != 2 or not parts[1].isdigit() or not 1 <= int(parts[1]) <= len(chats):
                    out("Usage: /switch N (see /list)")
                    continue
                store.select_chat(chats[int(parts[1]) - 1].id)
                out(f"Active chat: {store.active_chat.title}")
            elif line == "/sources":
                _print_sources(service, out)
            elif line.startswith("/about"):
                parts = shlex.split(line)[1:]
                if not parts:
                    out('Usage: /about "fragment" [question]')
                    continue
                bridge.on_select(parts[0], Point(0, 0))
                message = bridge.submit(" ".join(parts[1:]) or None)
                if message is not None:
                    out(f"You: {message.content}")
                    answer = service.wait(store.active_chat_id)
                    out(f"Assistant: {answer.content}")
            elif line.startswith("/"):
                out(REPL_HELP)
            else:
                chat = store.active_chat
                answer = service.ask(chat.id, line)
                out(f"Assistant: {answer.content}")
        except (CitationChatError, ValueError) as exc:
            out(json.dumps({"error": str(exc)}))


if __name__ == "__main__":
    main()
