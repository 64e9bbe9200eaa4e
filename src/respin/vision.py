"""Visual description of a video from one representative frame."""

import base64
import logging
from pathlib import Path

import httpx

from respin.config import OpenRouterConfig
from respin.errors import VisionError
from respin.llm import ChatClient, as_stage_error
from respin.media import MediaError, temporary_frame
from respin.rewrite.prompts import VISION_PROMPT

logger = logging.getLogger(__name__)


def encode_image(path: Path) -> str:
    """Return a ``data:`` URL carrying the JPEG at ``path``."""
    data = base64.standard_b64encode(path.read_bytes()).decode("ascii")
    return f"data:image/jpeg;base64,{data}"


def describe_frame(
    frame_path: Path, client: ChatClient, config: OpenRouterConfig
) -> str:
    """Turn a single frame into a recreation prompt."""
    content = [
        {"type": "text", "text": VISION_PROMPT},
        {"type": "image_url", "image_url": {"url": encode_image(frame_path)}},
    ]
    logger.info("Describing frame with %s", config.vision_model)
    try:
        reply = client.complete(
            config.vision_model, content, config.vision_max_tokens
        )
    except (httpx.HTTPError, ValueError) as e:
        raise as_stage_error(e, VisionError) from e
    return reply.strip()


def describe_video(
    video_path: Path, client: ChatClient, config: OpenRouterConfig
) -> str:
    """Extract one frame from ``video_path`` and describe it.

    The extracted frame is deleted whether or not the description succeeds.
    """
    try:
        with temporary_frame(video_path) as frame:
            return describe_frame(frame, client, config)
    except (MediaError, OSError) as e:
        raise VisionError(str(e)) from e
