"""Exception types raised by the respin pipeline."""

from typing import Literal

Reason = Literal["rate_limited", "quota_exceeded", "unauthorized", "other"]

_REASON_HINTS: dict[str, str] = {
    "rate_limited": "API rate limit reached, try again later",
    "quota_exceeded": "API quota exhausted, check your account balance",
    "unauthorized": "API credentials were rejected",
}


class RespinError(Exception):
    """Base class for all respin errors."""


class ConfigurationError(RespinError):
    """Missing or invalid credentials, source, or settings."""


class StageError(RespinError):
    """A pipeline stage failed.

    ``reason`` classifies the upstream failure for user-facing messaging
    only; no stage is retried.
    """

    stage = "pipeline"

    def __init__(self, message: str, reason: Reason = "other") -> None:
        super().__init__(message)
        self.reason: Reason = reason

    @property
    def hint(self) -> str | None:
        return _REASON_HINTS.get(self.reason)

    def __str__(self) -> str:
        base = f"{self.stage} failed: {super().__str__()}"
        if self.hint:
            return f"{base} ({self.hint})"
        return base


class AcquisitionError(StageError):
    stage = "Transcription"


class VisionError(StageError):
    stage = "Visual description"


class SummarizationError(StageError):
    stage = "Topic summary"


class SuggestionError(StageError):
    stage = "Topic suggestion"


class RewriteError(StageError):
    stage = "Content rewrite"
