"""Tests for environment-driven settings."""

import pytest

from deepwiki.settings import DEFAULT_MCP_URL, Settings, load_settings


ENV_VARS = [
    "DEEPWIKI_MCP_URL",
    "DEEPWIKI_MCP_TRANSPORT",
    "DEEPWIKI_CLIENT_NAME",
    "DEEPWIKI_TOOL_TIMEOUT_S",
    "PROXY_HOST",
    "PROXY_PORT",
    "PROXY_CORS_ORIGINS",
    "LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    s = load_settings()
    assert s == Settings()
    assert s.mcp_url == DEFAULT_MCP_URL
    assert s.transport == "sse"
    assert s.port == 5174
    assert s.tool_timeout_s is None
    assert s.cors_origins == ("*",)


def test_overrides(monkeypatch):
    monkeypatch.setenv("DEEPWIKI_MCP_URL", "https://mcp.example.com/mcp")
    monkeypatch.setenv("DEEPWIKI_MCP_TRANSPORT", "Streamable-HTTP")
    monkeypatch.setenv("PROXY_PORT", "8080")
    monkeypatch.setenv("PROXY_CORS_ORIGINS", "http://localhost:5173, http://example.com")
    monkeypatch.setenv("DEEPWIKI_TOOL_TIMEOUT_S", "45")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    s = load_settings()
    assert s.mcp_url == "https://mcp.example.com/mcp"
    assert s.transport == "streamable-http"
    assert s.port == 8080
    assert s.cors_origins == ("http://localhost:5173", "http://example.com")
    assert s.tool_timeout_s == 45.0
    assert s.log_level == "DEBUG"


def test_unknown_transport_rejected(monkeypatch):
    monkeypatch.setenv("DEEPWIKI_MCP_TRANSPORT", "websocket")
    with pytest.raises(ValueError, match="DEEPWIKI_MCP_TRANSPORT"):
        load_settings()


@pytest.mark.parametrize("raw", ["abc", "0", "-5"])
def test_unusable_timeout_means_none(monkeypatch, raw):
    monkeypatch.setenv("DEEPWIKI_TOOL_TIMEOUT_S", raw)
    assert load_settings().tool_timeout_s is None
