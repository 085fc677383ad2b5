"""State behind the DeepWiki view: query context, loaded results, loading/error.

Every request is tagged with a per-action sequence number and the context
epoch at the time it was sent. A response is applied only while it is still
the newest request for its action and owner/repo have not changed since.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from typing import Any, Protocol

from client.api import ProxyError
from deepwiki.content import join_text, text_blocks


class ProxyApi(Protocol):
    def structure(self, owner: str, repo: str) -> list[dict[str, Any]]: ...

    def contents(self, owner: str, repo: str, topic: str) -> list[dict[str, Any]]: ...

    def ask(self, owner: str, repo: str, question: str) -> list[dict[str, Any]]: ...


@dataclass
class QueryContext:
    owner: str = "facebook"
    repo: str = "react"
    topic: str = ""
    question: str = "How does concurrent rendering work?"

    def can_query(self) -> bool:
        return bool(self.owner.strip() and self.repo.strip())


@dataclass(frozen=True)
class _Ticket:
    action: str
    seq: int
    epoch: int


class QueryView:
    def __init__(self, api: ProxyApi, context: QueryContext | None = None) -> None:
        self.api = api
        self.context = context or QueryContext()
        self.structure: list[str] = []
        self.doc = ""
        self.answer = ""
        self.error = ""
        self._pending = 0
        self._epoch = 0
        self._seq = itertools.count(1)
        self._latest: dict[str, int] = {}

    @property
    def loading(self) -> bool:
        return self._pending > 0

    def set_owner(self, owner: str) -> None:
        self.context.owner = owner
        self._context_changed()

    def set_repo(self, repo: str) -> None:
        self.context.repo = repo
        self._context_changed()

    def refresh(self) -> None:
        if self.context.can_query():
            self.load_structure()

    def load_structure(self) -> None:
        owner, repo = self.context.owner, self.context.repo
        ticket = self._begin("structure")
        try:
            blocks = self.api.structure(owner, repo)
        except ProxyError as e:
            self._fail(ticket, str(e))
        else:
            if self._is_current(ticket):
                self.structure = text_blocks(blocks)
        finally:
            self._pending -= 1

    def select_topic(self, topic: str) -> None:
        if not topic:
            return
        self.context.topic = topic
        self.doc = ""
        owner, repo = self.context.owner, self.context.repo
        ticket = self._begin("contents")
        try:
            blocks = self.api.contents(owner, repo, topic)
        except ProxyError as e:
            self._fail(ticket, str(e))
        else:
            if self._is_current(ticket):
                self.doc = join_text(blocks)
        finally:
            self._pending -= 1

    def ask(self, question: str | None = None) -> None:
        if question is not None:
            self.context.question = question
        if not self.context.can_query() or not self.context.question.strip():
            return
        self.answer = ""
        owner, repo, question = self.context.owner, self.context.repo, self.context.question
        ticket = self._begin("ask")
        try:
            blocks = self.api.ask(owner, repo, question)
        except ProxyError as e:
            self._fail(ticket, str(e))
        else:
            if self._is_current(ticket):
                self.answer = join_text(blocks)
        finally:
            self._pending -= 1

    def _context_changed(self) -> None:
        self._epoch += 1
        self.structure = []
        self.context.topic = ""
        self.doc = ""
        if self.context.can_query():
            self.load_structure()

    def _begin(self, action: str) -> _Ticket:
        seq = next(self._seq)
        self._latest[action] = seq
        self._pending += 1
        self.error = ""
        return _Ticket(action=action, seq=seq, epoch=self._epoch)

    def _is_current(self, ticket: _Ticket) -> bool:
        return self._latest.get(ticket.action) == ticket.seq and ticket.epoch == self._epoch

    def _fail(self, ticket: _Ticket, message: str) -> None:
        if self._is_current(ticket):
            self.error = message
