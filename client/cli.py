from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from client.api import DEFAULT_BASE_URL, ProxyClient
from client.view import QueryContext, QueryView
from tracing.logger import get_logger

_dotenv_path = Path(__file__).parent.parent / ".env"
if _dotenv_path.exists():
    load_dotenv(dotenv_path=_dotenv_path, override=True)
else:
    load_dotenv(override=True)

logger = get_logger()

HELP = """Commands:
  owner <name>      switch repository owner (reloads topics)
  repo <name>       switch repository (reloads topics)
  refresh           reload topics
  topics            list loaded topics
  open <n|topic>    show the docs for a topic (by number or title)
  ask <question>    ask a question about the repository
  show              print the current state
  help              this text
  exit | quit       leave"""


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Terminal view for the DeepWiki MCP proxy.")
    p.add_argument(
        "--base-url",
        default=os.getenv("DEEPWIKI_PROXY_URL", DEFAULT_BASE_URL),
        help="Proxy base URL.",
    )
    p.add_argument("--owner", default="facebook", help="Initial repository owner.")
    p.add_argument("--repo", default="react", help="Initial repository name.")
    return p.parse_args(argv)


def _safe_input(prompt: str) -> str | None:
    try:
        return input(prompt)
    except EOFError:
        return None


def render_status(view: QueryView) -> str:
    lines = []
    if view.error:
        lines.append(f"[error] {view.error}")
    if view.loading:
        lines.append("Loading…")
    return "\n".join(lines)


def render_topics(view: QueryView) -> str:
    if not view.structure:
        return "(no topics loaded)"
    lines = []
    for i, topic in enumerate(view.structure, start=1):
        marker = "*" if topic == view.context.topic else " "
        lines.append(f"{marker}{i:>3}. {topic}")
    return "\n".join(lines)


def render(view: QueryView) -> str:
    ctx = view.context
    parts = [
        f"{ctx.owner}/{ctx.repo}",
        render_status(view),
        "--- Topics ---",
        render_topics(view),
        "--- Doc ---",
        view.doc or "Select a topic to view docs…",
        f"--- Q: {ctx.question} ---",
        view.answer or "The answer will appear here with context.",
    ]
    return "\n".join(p for p in parts if p)


def resolve_topic(view: QueryView, ref: str) -> str:
    if ref.isdigit():
        idx = int(ref) - 1
        if 0 <= idx < len(view.structure):
            return view.structure[idx]
        return ""
    return ref


def handle(view: QueryView, line: str) -> bool:
    """Apply one command line to *view*. Returns False when the user quits."""
    command, _, rest = line.strip().partition(" ")
    command = command.lower()
    rest = rest.strip()

    if command in {"exit", "quit"}:
        return False
    if command == "owner":
        view.set_owner(rest)
        print(render_status(view) or render_topics(view))
    elif command == "repo":
        view.set_repo(rest)
        print(render_status(view) or render_topics(view))
    elif command == "refresh":
        view.refresh()
        print(render_status(view) or render_topics(view))
    elif command == "topics":
        print(render_topics(view))
    elif command == "open":
        topic = resolve_topic(view, rest)
        if not topic:
            print(f"No such topic: {rest or '(empty)'}")
            return True
        view.select_topic(topic)
        print(render_status(view) or view.doc)
    elif command == "ask":
        view.ask(rest or None)
        print(render_status(view) or view.answer)
    elif command == "show":
        print(render(view))
    else:
        print(HELP)
    return True


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    view = QueryView(ProxyClient(base_url=args.base_url), QueryContext(owner=args.owner, repo=args.repo))
    logger.info("Using proxy at %s", args.base_url)

    view.refresh()
    print(render(view))
    print("\nType 'help' for commands.")
    while True:
        raw = _safe_input("> ")
        if raw is None:
            return 0
        if not raw.strip():
            continue
        if not handle(view, raw):
            return 0


if __name__ == "__main__":
    try:
        raise SystemExit(main())
    except KeyboardInterrupt:
        sys.exit("\nInterrupted.")
