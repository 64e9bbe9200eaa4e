"""Turn command-line arguments into a transcript source."""

from pathlib import Path
from urllib.parse import urlparse

from respin.errors import ConfigurationError
from respin.models import FileSource, UrlSource

AUDIO_SUFFIXES = {".mp3", ".wav", ".m4a", ".aac", ".flac", ".ogg", ".opus"}


def is_url(value: str) -> bool:
    return "://" in value


def resolve_source(value: str, audio: str | None = None) -> UrlSource | FileSource:
    """Build a source from a URL or a local path.

    Raises:
        ConfigurationError: For a non-http(s) URL, a missing file, or an
            audio argument that does not fit the source.
    """
    if is_url(value):
        parsed = urlparse(value)
        if parsed.scheme.lower() not in ("http", "https") or not parsed.netloc:
            msg = "Invalid URL format. URL must start with http:// or https://"
            raise ConfigurationError(msg)
        if audio is not None:
            msg = "An audio file can only be given together with a video file"
            raise ConfigurationError(msg)
        return UrlSource(url=value)

    path = Path(value).expanduser()
    if not path.is_file():
        msg = f"Not a URL or an existing file: {value}"
        raise ConfigurationError(msg)

    if path.suffix.lower() in AUDIO_SUFFIXES:
        if audio is not None:
            msg = f"{value} is already an audio file"
            raise ConfigurationError(msg)
        return FileSource(audio_path=path)

    audio_path = None
    if audio is not None:
        audio_path = Path(audio).expanduser()
        if not audio_path.is_file():
            msg = f"Audio file not found: {audio}"
            raise ConfigurationError(msg)
    return FileSource(video_path=path, audio_path=audio_path)
