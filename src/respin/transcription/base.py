"""Abstract base class for speech-to-text backends."""

from abc import ABC, abstractmethod
from pathlib import Path


class Transcriber(ABC):
    """Base class for audio-file-to-text backends."""

    @abstractmethod
    def transcribe(self, audio_path: Path, language: str = "en") -> str:
        """Transcribe an audio file.

        Args:
            audio_path: Path to the audio file.
            language: Language code or "auto" for auto-detection.

        Returns:
            The transcript text.

        Raises:
            AcquisitionError: If the backend cannot produce a transcript.
        """
        ...
