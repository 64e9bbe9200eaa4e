"""Local Whisper model transcription backend."""

import logging
from pathlib import Path

from respin.errors import AcquisitionError
from respin.transcription.base import Transcriber

logger = logging.getLogger(__name__)


class WhisperLocalTranscriber(Transcriber):
    """Transcription using a locally-loaded Whisper model."""

    def __init__(self, model_name: str = "base") -> None:
        self._model_name = model_name
        self._model: object | None = None

    def _load_model(self) -> object:
        """Lazy-load the Whisper model."""
        if self._model is None:
            try:
                import whisper
            except ImportError as e:
                msg = (
                    "openai-whisper is not installed. "
                    "Install it with: pip install 'respin[whisper]'"
                )
                raise AcquisitionError(msg) from e

            logger.info("Loading Whisper model: %s", self._model_name)
            self._model = whisper.load_model(self._model_name)
        return self._model

    def transcribe(self, audio_path: Path, language: str = "en") -> str:
        """Transcribe audio using the local Whisper model."""
        model = self._load_model()

        options: dict[str, object] = {}
        if language != "auto":
            options["language"] = language

        try:
            result: dict[str, object] = model.transcribe(  # type: ignore[attr-defined]
                str(audio_path), **options
            )
        except (OSError, RuntimeError) as e:
            msg = f"Local transcription of {audio_path.name} failed: {e}"
            raise AcquisitionError(msg) from e

        text = str(result.get("text", "")).strip()
        if not text:
            msg = f"No speech recognized in {audio_path.name}"
            raise AcquisitionError(msg)
        logger.info("Transcribed %s: %d characters", audio_path.name, len(text))
        return text
