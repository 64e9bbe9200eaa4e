"""Tests for the chat completion client and error classification."""

from collections.abc import Callable
from typing import Any
from unittest.mock import MagicMock, patch

import httpx
import pytest

from respin.errors import SummarizationError
from respin.llm import ChatClient, as_stage_error, classify_error

ResponseFactory = Callable[..., httpx.Response]
ClientWiring = Callable[..., MagicMock]
ReplyBuilder = Callable[[str], dict[str, Any]]


def _status_error(status: int, body: object = None) -> httpx.HTTPStatusError:
    request = httpx.Request("POST", "https://example.test/api")
    response = httpx.Response(status, json=body, request=request)
    return httpx.HTTPStatusError("error", request=request, response=response)


class TestChatClient:
    def test_requires_api_key(self) -> None:
        with pytest.raises(ValueError, match="OPENROUTER_API_KEY"):
            ChatClient(api_key="").complete("m", "hi", 10)

    @patch("respin.llm.httpx.Client")
    def test_complete_returns_text(
        self,
        mock_client_cls: MagicMock,
        make_response: ResponseFactory,
        mock_httpx_client: ClientWiring,
        chat_reply: ReplyBuilder,
    ) -> None:
        client = mock_httpx_client(
            mock_client_cls, make_response(200, chat_reply("Hello"))
        )
        reply = ChatClient(api_key="key").complete("openai/gpt-4o", "Hi", 50)

        assert reply == "Hello"
        _, kwargs = client.post.call_args
        assert kwargs["headers"]["Authorization"] == "Bearer key"
        assert kwargs["json"]["model"] == "openai/gpt-4o"
        assert kwargs["json"]["max_tokens"] == 50
        assert kwargs["json"]["messages"] == [{"role": "user", "content": "Hi"}]

    @patch("respin.llm.httpx.Client")
    def test_attribution_headers(
        self,
        mock_client_cls: MagicMock,
        make_response: ResponseFactory,
        mock_httpx_client: ClientWiring,
        chat_reply: ReplyBuilder,
    ) -> None:
        client = mock_httpx_client(
            mock_client_cls, make_response(200, chat_reply("ok"))
        )
        ChatClient(
            api_key="key", app_title="respin", app_url="https://example.com"
        ).complete("m", "hi", 10)

        headers = client.post.call_args[1]["headers"]
        assert headers["X-Title"] == "respin"
        assert headers["HTTP-Referer"] == "https://example.com"

    @patch("respin.llm.httpx.Client")
    def test_proxy_and_timeout_passed(
        self,
        mock_client_cls: MagicMock,
        make_response: ResponseFactory,
        mock_httpx_client: ClientWiring,
        chat_reply: ReplyBuilder,
    ) -> None:
        mock_httpx_client(mock_client_cls, make_response(200, chat_reply("ok")))
        ChatClient(
            api_key="key", timeout=12.0, proxy="http://127.0.0.1:7890"
        ).complete("m", "hi", 10)

        _, kwargs = mock_client_cls.call_args
        assert kwargs["timeout"] == 12.0
        assert kwargs["proxy"] == "http://127.0.0.1:7890"

    @patch("respin.llm.httpx.Client")
    def test_http_error_raised(
        self,
        mock_client_cls: MagicMock,
        make_response: ResponseFactory,
        mock_httpx_client: ClientWiring,
    ) -> None:
        mock_httpx_client(mock_client_cls, make_response(429, {}))
        with pytest.raises(httpx.HTTPStatusError):
            ChatClient(api_key="key").complete("m", "hi", 10)

    @patch("respin.llm.httpx.Client")
    def test_error_body_with_200(
        self,
        mock_client_cls: MagicMock,
        make_response: ResponseFactory,
        mock_httpx_client: ClientWiring,
    ) -> None:
        mock_httpx_client(
            mock_client_cls,
            make_response(200, {"error": {"message": "model overloaded"}}),
        )
        with pytest.raises(ValueError, match="model overloaded"):
            ChatClient(api_key="key").complete("m", "hi", 10)

    @patch("respin.llm.httpx.Client")
    def test_empty_reply(
        self,
        mock_client_cls: MagicMock,
        make_response: ResponseFactory,
        mock_httpx_client: ClientWiring,
        chat_reply: ReplyBuilder,
    ) -> None:
        mock_httpx_client(mock_client_cls, make_response(200, chat_reply("")))
        with pytest.raises(ValueError, match="Empty reply"):
            ChatClient(api_key="key").complete("m", "hi", 10)


class TestClassifyError:
    def test_rate_limited(self) -> None:
        assert classify_error(_status_error(429)) == "rate_limited"

    def test_payment_required(self) -> None:
        assert classify_error(_status_error(402)) == "quota_exceeded"

    def test_quota_error_code(self) -> None:
        body = {"error": {"code": "insufficient_quota", "message": "no funds"}}
        assert classify_error(_status_error(400, body)) == "quota_exceeded"

    def test_unauthorized(self) -> None:
        assert classify_error(_status_error(401)) == "unauthorized"

    def test_message_fallback(self) -> None:
        assert (
            classify_error(ValueError("insufficient_quota for key"))
            == "quota_exceeded"
        )

    def test_other(self) -> None:
        assert classify_error(httpx.ConnectError("boom")) == "other"
        assert classify_error(_status_error(500)) == "other"


class TestAsStageError:
    def test_wraps_upstream_message(self) -> None:
        body = {"error": {"message": "Rate limit exceeded"}}
        error = as_stage_error(_status_error(429, body), SummarizationError)
        assert isinstance(error, SummarizationError)
        assert error.reason == "rate_limited"
        assert "HTTP 429: Rate limit exceeded" in str(error)
        assert "rate limit" in str(error).lower()

    def test_transport_error(self) -> None:
        error = as_stage_error(httpx.ConnectError("refused"), SummarizationError)
        assert error.reason == "other"
        assert "refused" in str(error)
