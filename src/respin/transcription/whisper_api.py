"""OpenAI Whisper API transcription backend."""

import logging
import tempfile
from pathlib import Path

import httpx

from respin.config import RespinConfig
from respin.errors import AcquisitionError
from respin.llm import as_stage_error
from respin.media import MediaError, split_audio
from respin.transcription.base import Transcriber

logger = logging.getLogger(__name__)

_API_URL = "https://api.openai.com/v1/audio/transcriptions"
_MAX_FILE_SIZE = 25 * 1024 * 1024  # 25MB API limit


class WhisperAPITranscriber(Transcriber):
    """Transcription using the OpenAI Whisper API."""

    def __init__(
        self,
        api_key: str,
        timeout: float = 60.0,
        proxy: str | None = None,
    ) -> None:
        if not api_key:
            msg = "OPENAI_API_KEY is required for the Whisper API backend"
            raise AcquisitionError(msg, reason="unauthorized")
        self._api_key = api_key
        self._timeout = timeout
        self._proxy = proxy

    @classmethod
    def from_config(cls, config: RespinConfig) -> "WhisperAPITranscriber":
        return cls(
            api_key=config.whisper.api_key,
            timeout=config.general.request_timeout,
            proxy=config.proxy.url,
        )

    def transcribe(self, audio_path: Path, language: str = "en") -> str:
        """Transcribe audio using the OpenAI Whisper API.

        Handles files >25MB by chunking.
        """
        try:
            file_size = audio_path.stat().st_size
        except OSError as e:
            msg = f"Cannot read audio file {audio_path}: {e}"
            raise AcquisitionError(msg) from e

        if file_size > _MAX_FILE_SIZE:
            text = self._transcribe_chunked(audio_path, language)
        else:
            text = self._transcribe_single(audio_path, language)
        if not text:
            msg = f"No speech recognized in {audio_path.name}"
            raise AcquisitionError(msg)
        return text

    def _transcribe_single(self, audio_path: Path, language: str) -> str:
        """Transcribe a single audio file via the API."""
        headers = {"Authorization": f"Bearer {self._api_key}"}

        data: dict[str, str] = {
            "model": "whisper-1",
            "response_format": "json",
        }
        if language != "auto":
            data["language"] = language

        try:
            with open(audio_path, "rb") as f:
                files = {"file": (audio_path.name, f, "audio/mpeg")}
                with httpx.Client(
                    timeout=self._timeout, proxy=self._proxy, trust_env=False
                ) as client:
                    response = client.post(
                        _API_URL,
                        headers=headers,
                        data=data,
                        files=files,
                    )
                    response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise as_stage_error(e, AcquisitionError) from e

        if not isinstance(payload, dict):
            msg = f"Unexpected transcription payload for {audio_path.name}"
            raise AcquisitionError(msg)
        text = str(payload.get("text") or "").strip()

        logger.info(
            "Transcribed %s: %d characters", audio_path.name, len(text)
        )
        return text

    def _transcribe_chunked(self, audio_path: Path, language: str) -> str:
        """Transcribe a large file by splitting it into 10-minute chunks."""
        with tempfile.TemporaryDirectory(prefix="respin_chunks_") as tmp:
            try:
                chunks = split_audio(audio_path, Path(tmp))
            except MediaError as e:
                raise AcquisitionError(str(e)) from e

            logger.info(
                "Transcribing %s in %d chunks", audio_path.name, len(chunks)
            )
            parts = [
                self._transcribe_single(chunk, language) for chunk in chunks
            ]
        return " ".join(part for part in parts if part)
