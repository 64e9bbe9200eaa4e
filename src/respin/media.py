"""Audio and frame extraction with ffmpeg."""

import logging
import os
import subprocess
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

logger = logging.getLogger(__name__)

FRAME_WIDTH = 1280
FRAME_HEIGHT = 720
_FRAME_TIMESTAMP = "00:00:01"


class MediaError(RuntimeError):
    """ffmpeg could not produce the requested file."""


def _run_ffmpeg(command: list[str], what: str) -> None:
    try:
        subprocess.run(  # noqa: S603
            command,
            check=True,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.PIPE,
        )
    except FileNotFoundError as exc:
        msg = "ffmpeg is not installed or not on PATH"
        raise MediaError(msg) from exc
    except subprocess.CalledProcessError as exc:
        msg = f"Failed to {what} with ffmpeg"
        raise MediaError(msg) from exc


def extract_audio(video_path: Path, output_path: Path) -> Path:
    """Demux the audio track of ``video_path`` into a 16 kHz mono MP3."""
    _run_ffmpeg(
        [
            "ffmpeg",
            "-y",
            "-i",
            str(video_path),
            "-vn",
            "-ac",
            "1",
            "-ar",
            "16000",
            "-acodec",
            "libmp3lame",
            "-b:a",
            "64k",
            str(output_path),
        ],
        "extract audio",
    )
    return output_path


def extract_frame(
    video_path: Path,
    output_path: Path,
    *,
    width: int = FRAME_WIDTH,
    height: int = FRAME_HEIGHT,
) -> Path:
    """Grab one representative frame, letterboxed to ``width``x``height``."""
    scale = (
        f"scale={width}:{height}:force_original_aspect_ratio=decrease,"
        f"pad={width}:{height}:(ow-iw)/2:(oh-ih)/2"
    )
    _run_ffmpeg(
        [
            "ffmpeg",
            "-y",
            "-ss",
            _FRAME_TIMESTAMP,
            "-i",
            str(video_path),
            "-frames:v",
            "1",
            "-vf",
            scale,
            "-q:v",
            "2",
            str(output_path),
        ],
        "extract a frame",
    )
    return output_path


def split_audio(
    audio_path: Path, output_dir: Path, segment_seconds: int = 600
) -> list[Path]:
    """Split audio into fixed-length segments without re-encoding."""
    _run_ffmpeg(
        [
            "ffmpeg",
            "-i",
            str(audio_path),
            "-f",
            "segment",
            "-segment_time",
            str(segment_seconds),
            "-c",
            "copy",
            str(output_dir / f"chunk_%03d{audio_path.suffix}"),
        ],
        "split audio",
    )
    return sorted(output_dir.glob(f"chunk_*{audio_path.suffix}"))


@contextmanager
def _temporary_file(suffix: str) -> Iterator[Path]:
    fd, name = tempfile.mkstemp(prefix="respin_", suffix=suffix)
    os.close(fd)
    path = Path(name)
    try:
        yield path
    finally:
        path.unlink(missing_ok=True)
        logger.debug("Removed temporary file %s", path)


@contextmanager
def temporary_audio(video_path: Path) -> Iterator[Path]:
    """Extract audio from a video; the file is deleted on exit."""
    with _temporary_file(".mp3") as path:
        logger.info("Extracting audio from %s", video_path.name)
        extract_audio(video_path, path)
        yield path


@contextmanager
def temporary_frame(video_path: Path) -> Iterator[Path]:
    """Extract one frame from a video; the file is deleted on exit."""
    with _temporary_file(".jpg") as path:
        logger.info("Extracting frame from %s", video_path.name)
        extract_frame(video_path, path)
        yield path
