"""Topic differentiation and content rewrite stages."""

import json
import logging
import re

import httpx

from respin.config import OpenRouterConfig
from respin.errors import RewriteError, SuggestionError, SummarizationError
from respin.llm import ChatClient, as_stage_error
from respin.models import (
    CAPTION_PLACEHOLDER,
    OVERLAY_PLACEHOLDER,
    SCRIPT_PLACEHOLDER,
    RewrittenContent,
)
from respin.rewrite.prompts import (
    build_rewrite_prompt,
    build_suggestion_prompt,
    build_summary_prompt,
)

logger = logging.getLogger(__name__)

_THINK_SPAN = re.compile(r"<think>.*?</think>", re.DOTALL)
_UPSTREAM_ERRORS = (httpx.HTTPError, ValueError)


def sanitize_response(text: str) -> str:
    """Drop every ``<think>...</think>`` span and trim the result."""
    return _THINK_SPAN.sub("", text).strip()


def summarize_topic(
    transcript: str, client: ChatClient, config: OpenRouterConfig
) -> str:
    """Condense a transcript into topic, specifics, format and audience."""
    logger.info("Summarizing topic with %s", config.summary_model)
    try:
        return client.complete(
            config.summary_model,
            build_summary_prompt(transcript),
            config.summary_max_tokens,
        ).strip()
    except _UPSTREAM_ERRORS as e:
        raise as_stage_error(e, SummarizationError) from e


def suggest_topic(
    summary: str, client: ChatClient, config: OpenRouterConfig
) -> str:
    """Ask the reasoning model for a same-niche, different-angle idea.

    The raw reply may still contain reasoning spans.
    """
    logger.info("Requesting topic suggestion from %s", config.suggestion_model)
    try:
        return client.complete(
            config.suggestion_model,
            build_suggestion_prompt(summary),
            config.suggestion_max_tokens,
        )
    except _UPSTREAM_ERRORS as e:
        raise as_stage_error(e, SuggestionError) from e


def differentiate_topic(
    transcript: str, client: ChatClient, config: OpenRouterConfig
) -> str:
    """Summarize the transcript, then suggest a differentiated topic."""
    summary = summarize_topic(transcript, client, config)
    logger.debug("Topic summary: %s", summary)
    return sanitize_response(suggest_topic(summary, client, config))


def _strip_code_fence(text: str) -> str:
    text = text.strip()
    if text.startswith("```"):
        lines = text.split("\n")[1:]
        if lines and lines[-1].strip() == "```":
            lines = lines[:-1]
        text = "\n".join(lines)
    return text


def _field(data: dict[str, object], key: str, placeholder: str) -> str:
    value = data.get(key)
    if isinstance(value, list):
        text = "\n".join(str(item).strip() for item in value if item)
    elif isinstance(value, str):
        text = value
    else:
        text = str(value) if value else ""
    return text.strip() or placeholder


def parse_rewrite(raw: str) -> RewrittenContent:
    """Parse a rewrite reply into its three fields.

    A reply that is not a JSON object becomes the script, with fixed
    placeholders for caption and overlay. List values are joined line by
    line, and a JSON object without a script keeps the raw reply as script.
    """
    try:
        data = json.loads(_strip_code_fence(raw))
    except json.JSONDecodeError:
        data = None

    if not isinstance(data, dict):
        logger.warning("Rewrite reply is not a JSON object, keeping raw text")
        return RewrittenContent(
            script=raw.strip() or SCRIPT_PLACEHOLDER,
            caption=CAPTION_PLACEHOLDER,
            overlay=OVERLAY_PLACEHOLDER,
        )

    return RewrittenContent(
        script=_field(data, "script", raw.strip() or SCRIPT_PLACEHOLDER),
        caption=_field(data, "caption", CAPTION_PLACEHOLDER),
        overlay=_field(data, "overlay", OVERLAY_PLACEHOLDER),
    )


def rewrite_content(
    transcript: str,
    topic_suggestion: str,
    client: ChatClient,
    config: OpenRouterConfig,
) -> RewrittenContent:
    """Rewrite the transcript around the suggested topic for spoken delivery."""
    logger.info("Rewriting content with %s", config.rewrite_model)
    try:
        raw = client.complete(
            config.rewrite_model,
            build_rewrite_prompt(transcript, topic_suggestion),
            config.rewrite_max_tokens,
        )
    except _UPSTREAM_ERRORS as e:
        raise as_stage_error(e, RewriteError) from e
    return parse_rewrite(raw)
