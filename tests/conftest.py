"""Shared test fixtures."""

from collections.abc import Callable
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import httpx
import pytest

from respin.config import OpenRouterConfig, RespinConfig

_CREDENTIAL_VARS = (
    "SUPADATA_API_KEY",
    "OPENROUTER_API_KEY",
    "OPENAI_API_KEY",
    "USE_PROXY",
    "HTTP_PROXY",
    "RESPIN_CONFIG",
    "RESPIN_OUTPUT_DIR",
    "RESPIN_LANGUAGE",
    "RESPIN_WHISPER_BACKEND",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep the developer's credentials and config out of every test."""
    for var in _CREDENTIAL_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("RESPIN_CONFIG", str(tmp_path / "no-config.toml"))
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def tmp_config_path(tmp_path: Path) -> Path:
    """Return a temporary config file path."""
    return tmp_path / "config.toml"


@pytest.fixture
def default_config() -> RespinConfig:
    """Return a default config instance."""
    return RespinConfig()


@pytest.fixture
def openrouter_config() -> OpenRouterConfig:
    return OpenRouterConfig(api_key="or-key")


@pytest.fixture
def make_response() -> Callable[..., httpx.Response]:
    """Return a factory for real httpx responses bound to a request."""

    def _make(
        status: int,
        json_data: Any = None,
        method: str = "POST",
        url: str = "https://example.test/api",
    ) -> httpx.Response:
        return httpx.Response(
            status, json=json_data, request=httpx.Request(method, url)
        )

    return _make


@pytest.fixture
def mock_httpx_client() -> Callable[..., MagicMock]:
    """Return a helper that wires a patched ``httpx.Client`` class.

    The client answers both ``get`` and ``post`` with ``responses`` in order.
    """

    def _wire(
        mock_client_cls: MagicMock, *responses: httpx.Response
    ) -> MagicMock:
        mock_client = MagicMock()
        mock_client.__enter__ = MagicMock(return_value=mock_client)
        mock_client.__exit__ = MagicMock(return_value=False)
        mock_client.post.side_effect = list(responses)
        mock_client.get.side_effect = list(responses)
        mock_client_cls.return_value = mock_client
        return mock_client

    return _wire


@pytest.fixture
def chat_reply() -> Callable[[str], dict[str, Any]]:
    """Return a builder for chat completion payloads."""

    def _reply(text: str) -> dict[str, Any]:
        return {"choices": [{"message": {"role": "assistant", "content": text}}]}

    return _reply
