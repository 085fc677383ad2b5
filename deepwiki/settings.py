from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_MCP_URL = "https://mcp.deepwiki.com/sse"
CLIENT_VERSION = "0.1.0"
TRANSPORTS = ("sse", "streamable-http")


@dataclass(frozen=True)
class Settings:
    mcp_url: str = DEFAULT_MCP_URL
    transport: str = "sse"
    client_name: str = "deepwiki-proxy"
    tool_timeout_s: float | None = None
    host: str = "127.0.0.1"
    port: int = 5174
    cors_origins: tuple[str, ...] = ("*",)
    log_level: str = "INFO"


def _optional_float(raw: str) -> float | None:
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError:
        return None
    return value if value > 0 else None


def load_settings() -> Settings:
    transport = os.getenv("DEEPWIKI_MCP_TRANSPORT", "sse").strip().lower() or "sse"
    if transport not in TRANSPORTS:
        raise ValueError(f"DEEPWIKI_MCP_TRANSPORT must be one of {', '.join(TRANSPORTS)}, got {transport!r}")

    origins_raw = os.getenv("PROXY_CORS_ORIGINS", "*").strip() or "*"
    origins = tuple(o.strip() for o in origins_raw.split(",") if o.strip())

    return Settings(
        mcp_url=os.getenv("DEEPWIKI_MCP_URL", DEFAULT_MCP_URL).strip() or DEFAULT_MCP_URL,
        transport=transport,
        client_name=os.getenv("DEEPWIKI_CLIENT_NAME", "deepwiki-proxy").strip() or "deepwiki-proxy",
        tool_timeout_s=_optional_float(os.getenv("DEEPWIKI_TOOL_TIMEOUT_S", "").strip()),
        host=os.getenv("PROXY_HOST", "127.0.0.1").strip() or "127.0.0.1",
        port=int(os.getenv("PROXY_PORT", "5174")),
        cors_origins=origins or ("*",),
        log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO",
    )
