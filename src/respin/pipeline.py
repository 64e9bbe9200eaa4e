"""End-to-end orchestration: transcript, visual description, rewrite."""

import logging
from collections.abc import Callable
from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from respin.config import RespinConfig
from respin.errors import AcquisitionError
from respin.llm import ChatClient
from respin.media import MediaError, temporary_audio
from respin.models import AnalysisResult, FileSource, UrlSource
from respin.rewrite.generator import differentiate_topic, rewrite_content
from respin.transcription.base import Transcriber
from respin.transcription.supadata import SupadataTranscriber
from respin.vision import describe_video

logger = logging.getLogger(__name__)


def make_file_transcriber(config: RespinConfig) -> Transcriber:
    """Build the speech-to-text backend selected in the config."""
    if config.whisper.backend == "local":
        from respin.transcription.whisper_local import WhisperLocalTranscriber

        return WhisperLocalTranscriber(model_name=config.whisper.model)

    from respin.transcription.whisper_api import WhisperAPITranscriber

    return WhisperAPITranscriber.from_config(config)


@dataclass(frozen=True)
class Services:
    """The external clients one pipeline run talks to."""

    chat: ChatClient
    url_transcriber: SupadataTranscriber
    file_transcriber: Transcriber | None = None

    @classmethod
    def from_config(cls, config: RespinConfig) -> "Services":
        return cls(
            chat=ChatClient.from_config(config),
            url_transcriber=SupadataTranscriber.from_config(config),
        )

    def transcriber_for_files(self, config: RespinConfig) -> Transcriber:
        if self.file_transcriber is not None:
            return self.file_transcriber
        return make_file_transcriber(config)


def _require_file(path: Path) -> None:
    if not path.is_file():
        msg = f"File not found: {path}"
        raise AcquisitionError(msg)


def acquire_transcript(
    source: UrlSource | FileSource,
    config: RespinConfig,
    services: Services,
) -> str:
    """Get a transcript for a URL or a local file.

    A video without a separate audio file has its audio extracted first;
    the extracted file is removed afterwards on every path.
    """
    language = config.general.language
    if isinstance(source, UrlSource):
        return services.url_transcriber.transcribe_url(
            source.url,
            language=language,
            text_only=config.supadata.text_only,
            mode=config.supadata.mode,
        )

    transcriber = services.transcriber_for_files(config)
    if source.audio_path is not None:
        _require_file(source.audio_path)
        return transcriber.transcribe(source.audio_path, language=language)

    if source.video_path is None:
        msg = "No audio or video file to transcribe"
        raise AcquisitionError(msg)
    _require_file(source.video_path)
    try:
        with temporary_audio(source.video_path) as audio_path:
            return transcriber.transcribe(audio_path, language=language)
    except MediaError as e:
        raise AcquisitionError(str(e)) from e


def _transcribe_and_describe(
    source: FileSource,
    video_path: Path,
    config: RespinConfig,
    services: Services,
) -> tuple[str, str]:
    """Run transcription and frame description side by side.

    The first failure is raised as soon as it happens; a task that has not
    started yet is cancelled.
    """
    executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="respin")
    try:
        transcript_future: Future[str] = executor.submit(
            acquire_transcript, source, config, services
        )
        vision_future: Future[str] = executor.submit(
            describe_video, video_path, services.chat, config.openrouter
        )
        futures = [transcript_future, vision_future]
        done, pending = wait(futures, return_when=FIRST_EXCEPTION)
        for future in futures:
            error = future.exception() if future in done else None
            if error is not None:
                for other in pending:
                    other.cancel()
                raise error
        return transcript_future.result(), vision_future.result()
    finally:
        executor.shutdown(wait=False, cancel_futures=True)


def run_pipeline(
    source: UrlSource | FileSource,
    config: RespinConfig,
    *,
    rewrite: bool = False,
    describe: bool = True,
    services: Services | None = None,
    on_transcript: Callable[[str], None] | None = None,
) -> AnalysisResult:
    """Run every stage that applies to ``source`` and assemble the result.

    Args:
        source: URL or local file to analyse.
        config: Resolved configuration.
        rewrite: Also run topic differentiation and the content rewrite.
        describe: Describe a frame of the video (video files only).
        services: Clients to use; built from ``config`` when omitted.
        on_transcript: Called with the transcript as soon as it exists, so
            callers can report it even if a later stage fails.

    Raises:
        StageError: The first stage that failed; nothing after it runs.
    """
    if services is None:
        services = Services.from_config(config)

    visual_description: str | None = None
    if (
        describe
        and isinstance(source, FileSource)
        and source.video_path is not None
    ):
        transcript, visual_description = _transcribe_and_describe(
            source, source.video_path, config, services
        )
    else:
        transcript = acquire_transcript(source, config, services)

    if on_transcript is not None:
        on_transcript(transcript)

    topic_suggestion: str | None = None
    rewritten = None
    if rewrite:
        topic_suggestion = differentiate_topic(
            transcript, services.chat, config.openrouter
        )
        rewritten = rewrite_content(
            transcript, topic_suggestion, services.chat, config.openrouter
        )

    return AnalysisResult(
        transcript=transcript,
        source=source,
        timestamp=datetime.now(timezone.utc),
        visual_description=visual_description,
        topic_suggestion=topic_suggestion,
        rewritten_content=rewritten,
    )
