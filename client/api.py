from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import requests


DEFAULT_BASE_URL = "http://127.0.0.1:5174"


class ProxyError(RuntimeError):
    """A proxy call failed; the message is meant to be shown as-is."""


@dataclass(frozen=True)
class ProxyClient:
    base_url: str = DEFAULT_BASE_URL
    timeout_s: float | None = None

    def _url(self, path: str) -> str:
        return self.base_url.rstrip("/") + path

    def structure(self, owner: str, repo: str) -> list[dict[str, Any]]:
        return self._get("/api/structure", {"owner": owner, "repo": repo}, "Failed to load structure")

    def contents(self, owner: str, repo: str, topic: str) -> list[dict[str, Any]]:
        return self._get(
            "/api/contents", {"owner": owner, "repo": repo, "topic": topic}, "Failed to load contents"
        )

    def ask(self, owner: str, repo: str, question: str) -> list[dict[str, Any]]:
        payload = {"owner": owner, "repo": repo, "question": question}
        try:
            resp = requests.post(self._url("/api/ask"), json=payload, timeout=self.timeout_s)
        except requests.RequestException as e:
            raise ProxyError(str(e)) from e
        return _unwrap(resp, "ask_question failed")

    def _get(self, path: str, params: dict[str, str], fallback: str) -> list[dict[str, Any]]:
        try:
            resp = requests.get(self._url(path), params=params, timeout=self.timeout_s)
        except requests.RequestException as e:
            raise ProxyError(str(e)) from e
        return _unwrap(resp, fallback)


def _unwrap(resp: requests.Response, fallback: str) -> list[dict[str, Any]]:
    try:
        body = resp.json()
    except ValueError as e:
        raise ProxyError(f"{fallback} (HTTP {resp.status_code})") from e
    if not isinstance(body, dict) or not body.get("ok"):
        error = body.get("error") if isinstance(body, dict) else None
        raise ProxyError(str(error or fallback))
    data = body.get("data") or []
    return [b for b in data if isinstance(b, dict)]
