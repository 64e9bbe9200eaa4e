"""OpenRouter chat completion client and upstream error classification."""

import contextlib
import logging
from typing import Any, TypeVar

import httpx

from respin.config import RespinConfig
from respin.errors import Reason, StageError

logger = logging.getLogger(__name__)

_E = TypeVar("_E", bound=StageError)

_QUOTA_CODES = {"insufficient_quota", "quota_exceeded"}


class ChatClient:
    """Stateless wrapper around the OpenRouter chat completions endpoint."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://openrouter.ai/api/v1",
        timeout: float = 60.0,
        proxy: str | None = None,
        app_title: str = "respin",
        app_url: str | None = None,
    ) -> None:
        self.api_key = api_key
        self._url = f"{base_url.rstrip('/')}/chat/completions"
        self._timeout = timeout
        self._proxy = proxy
        self._app_title = app_title
        self._app_url = app_url

    @classmethod
    def from_config(cls, config: RespinConfig) -> "ChatClient":
        return cls(
            api_key=config.openrouter.api_key,
            base_url=config.openrouter.base_url,
            timeout=config.general.request_timeout,
            proxy=config.proxy.url,
            app_title=config.openrouter.app_title,
            app_url=config.openrouter.app_url,
        )

    def complete(
        self,
        model: str,
        content: str | list[dict[str, Any]],
        max_tokens: int,
    ) -> str:
        """Send a single user message and return the reply text.

        Raises:
            ValueError: If no API key is configured or the reply is empty.
            httpx.HTTPStatusError: On a non-2xx response.
            httpx.TransportError: On network failure or timeout.
        """
        if not self.api_key:
            msg = "OPENROUTER_API_KEY is not configured"
            raise ValueError(msg)

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "X-Title": self._app_title,
            "Content-Type": "application/json",
        }
        if self._app_url:
            headers["HTTP-Referer"] = self._app_url
        payload = {
            "model": model,
            "messages": [{"role": "user", "content": content}],
            "max_tokens": max_tokens,
        }
        if self._proxy:
            logger.debug("Using proxy %s for %s", self._proxy, model)

        with httpx.Client(
            timeout=self._timeout, proxy=self._proxy, trust_env=False
        ) as client:
            response = client.post(self._url, headers=headers, json=payload)
            response.raise_for_status()

        data = response.json()
        if "error" in data and not data.get("choices"):
            msg = _error_message(data) or "upstream returned an error"
            raise ValueError(msg)
        try:
            text = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            msg = f"Unexpected chat completion payload from {model}"
            raise ValueError(msg) from e
        if not text:
            msg = f"Empty reply from {model}"
            raise ValueError(msg)

        logger.debug("%s replied with %d characters", model, len(text))
        return str(text)


def _error_message(data: object) -> str | None:
    if not isinstance(data, dict):
        return None
    error = data.get("error")
    if isinstance(error, dict):
        message = error.get("message")
        return str(message) if message else None
    if isinstance(error, str):
        message = data.get("message")
        return str(message) if message else error
    return None


def _error_code(response: httpx.Response) -> str | None:
    try:
        data = response.json()
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None
    error = data.get("error")
    if not isinstance(error, dict):
        return None
    for key in ("code", "type"):
        value = error.get(key)
        if isinstance(value, str):
            return value
    return None


def classify_error(exc: BaseException) -> Reason:
    """Classify an upstream failure by status and error code.

    The message is only inspected when the response carries nothing
    structured.
    """
    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code
        if status == 429:
            return "rate_limited"
        if status == 402 or _error_code(exc.response) in _QUOTA_CODES:
            return "quota_exceeded"
        if status in (401, 403):
            return "unauthorized"
    if "insufficient_quota" in str(exc):
        return "quota_exceeded"
    return "other"


def describe_error(exc: BaseException) -> str:
    if isinstance(exc, httpx.HTTPStatusError):
        detail = None
        with contextlib.suppress(ValueError):
            detail = _error_message(exc.response.json())
        status = exc.response.status_code
        return f"HTTP {status}: {detail}" if detail else f"HTTP {status}"
    if isinstance(exc, httpx.TimeoutException):
        return f"request timed out ({exc})"
    return str(exc) or exc.__class__.__name__


def as_stage_error(exc: BaseException, error_cls: type[_E]) -> _E:
    """Wrap an upstream failure in the stage's error type."""
    return error_cls(describe_error(exc), classify_error(exc))
