"""Tests for ffmpeg-based media extraction."""

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from respin.media import (
    MediaError,
    extract_audio,
    extract_frame,
    temporary_audio,
    temporary_frame,
)


@pytest.fixture
def sample_video(tmp_path: Path) -> Path:
    video = tmp_path / "sample.mp4"
    video.write_bytes(b"fake-video-bytes")
    return video


def _ok(*args: object, **kwargs: object) -> subprocess.CompletedProcess[bytes]:
    return subprocess.CompletedProcess(args=[], returncode=0)


class TestExtractAudio:
    def test_invokes_ffmpeg(self, sample_video: Path, tmp_path: Path) -> None:
        with patch("respin.media.subprocess.run", side_effect=_ok) as mock_run:
            output = extract_audio(sample_video, tmp_path / "out.mp3")

        assert output == tmp_path / "out.mp3"
        mock_run.assert_called_once()
        args = mock_run.call_args[0][0]
        assert args[0] == "ffmpeg"
        assert "-vn" in args
        assert "libmp3lame" in args

    def test_failure_raises(self, sample_video: Path, tmp_path: Path) -> None:
        with patch(
            "respin.media.subprocess.run",
            side_effect=subprocess.CalledProcessError(1, "ffmpeg"),
        ):
            with pytest.raises(MediaError, match="extract audio"):
                extract_audio(sample_video, tmp_path / "out.mp3")

    def test_missing_ffmpeg(self, sample_video: Path, tmp_path: Path) -> None:
        with patch("respin.media.subprocess.run", side_effect=FileNotFoundError):
            with pytest.raises(MediaError, match="not installed"):
                extract_audio(sample_video, tmp_path / "out.mp3")


class TestExtractFrame:
    def test_single_frame_at_target_size(
        self, sample_video: Path, tmp_path: Path
    ) -> None:
        with patch("respin.media.subprocess.run", side_effect=_ok) as mock_run:
            extract_frame(sample_video, tmp_path / "frame.jpg")

        args = mock_run.call_args[0][0]
        assert args[args.index("-frames:v") + 1] == "1"
        scale = args[args.index("-vf") + 1]
        assert "1280:720" in scale


class TestTemporaryFiles:
    def test_audio_removed_after_use(self, sample_video: Path) -> None:
        with patch("respin.media.subprocess.run", side_effect=_ok):
            with temporary_audio(sample_video) as audio:
                assert audio.suffix == ".mp3"
                kept = audio
        assert not kept.exists()

    def test_frame_removed_on_error(self, sample_video: Path) -> None:
        with patch("respin.media.subprocess.run", side_effect=_ok):
            with pytest.raises(RuntimeError):
                with temporary_frame(sample_video) as frame:
                    kept = frame
                    raise RuntimeError("describe failed")
        assert not kept.exists()

    def test_audio_removed_when_ffmpeg_fails(self, sample_video: Path) -> None:
        created: list[Path] = []

        def _fail(command: list[str], **kwargs: object) -> None:
            created.append(Path(command[-1]))
            raise subprocess.CalledProcessError(1, "ffmpeg")

        with patch("respin.media.subprocess.run", side_effect=_fail):
            with pytest.raises(MediaError):
                with temporary_audio(sample_video):
                    pass
        assert created
        assert not created[0].exists()
