"""Data models for respin."""

from datetime import datetime
from pathlib import Path
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

SCRIPT_PLACEHOLDER = "Script content"
CAPTION_PLACEHOLDER = "Generated content - see script for details"
OVERLAY_PLACEHOLDER = "Key points from rewritten content"


class UrlSource(BaseModel):
    """A video hosted on a platform the transcription service can fetch."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["url"] = "url"
    url: str

    def describe(self) -> str:
        return self.url


class FileSource(BaseModel):
    """A local video and/or audio file."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["file"] = "file"
    audio_path: Path | None = None
    video_path: Path | None = None

    @model_validator(mode="after")
    def _require_a_path(self) -> "FileSource":
        if self.audio_path is None and self.video_path is None:
            msg = "FileSource needs an audio_path or a video_path"
            raise ValueError(msg)
        return self

    @property
    def needs_audio_extraction(self) -> bool:
        return self.audio_path is None

    def describe(self) -> str:
        if self.video_path and self.audio_path:
            return f"{self.video_path} (audio: {self.audio_path})"
        return str(self.video_path or self.audio_path)


TranscriptSource = Annotated[UrlSource | FileSource, Field(discriminator="kind")]


class RewrittenContent(BaseModel):
    """A rewritten script package. All three fields are always populated."""

    model_config = ConfigDict(frozen=True)

    script: str = Field(min_length=1)
    caption: str = Field(min_length=1)
    overlay: str = Field(min_length=1)


class AnalysisResult(BaseModel):
    """Everything one pipeline run produced."""

    model_config = ConfigDict(frozen=True)

    transcript: str
    source: TranscriptSource
    timestamp: datetime
    visual_description: str | None = None
    topic_suggestion: str | None = None
    rewritten_content: RewrittenContent | None = None

    def to_json(self) -> str:
        return self.model_dump_json(indent=2, exclude_none=True)
