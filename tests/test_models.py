"""Tests for Pydantic data models."""

import json
from datetime import datetime, timezone
from pathlib import Path

import pytest
from pydantic import TypeAdapter, ValidationError

from respin.models import (
    AnalysisResult,
    FileSource,
    RewrittenContent,
    TranscriptSource,
    UrlSource,
)


class TestSources:
    def test_url_source(self) -> None:
        source = UrlSource(url="https://example.com/watch?v=abc")
        assert source.kind == "url"
        assert source.describe() == "https://example.com/watch?v=abc"

    def test_file_source_needs_a_path(self) -> None:
        with pytest.raises(ValidationError):
            FileSource()

    def test_video_only_needs_extraction(self) -> None:
        source = FileSource(video_path=Path("clip.mp4"))
        assert source.needs_audio_extraction is True

    def test_audio_given_skips_extraction(self) -> None:
        source = FileSource(
            video_path=Path("clip.mp4"), audio_path=Path("clip.wav")
        )
        assert source.needs_audio_extraction is False
        assert "clip.wav" in source.describe()

    def test_sources_are_immutable(self) -> None:
        source = UrlSource(url="https://example.com")
        with pytest.raises(ValidationError):
            source.url = "https://other.example.com"  # type: ignore[misc]

    def test_discriminated_union(self) -> None:
        adapter = TypeAdapter(TranscriptSource)
        source = adapter.validate_python(
            {"kind": "file", "audio_path": "talk.mp3"}
        )
        assert isinstance(source, FileSource)
        assert source.audio_path == Path("talk.mp3")


class TestRewrittenContent:
    def test_fields_must_be_populated(self) -> None:
        with pytest.raises(ValidationError):
            RewrittenContent(script="", caption="c", overlay="o")


class TestAnalysisResult:
    def _result(self, **kwargs: object) -> AnalysisResult:
        return AnalysisResult(
            transcript="Hello world",
            source=UrlSource(url="https://example.com/watch?v=abc"),
            timestamp=datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc),
            **kwargs,  # type: ignore[arg-type]
        )

    def test_json_omits_stages_that_did_not_run(self) -> None:
        data = json.loads(self._result().to_json())
        assert set(data) == {"transcript", "source", "timestamp"}
        assert data["source"] == {
            "kind": "url",
            "url": "https://example.com/watch?v=abc",
        }

    def test_json_round_trip_with_rewrite(self) -> None:
        result = self._result(
            topic_suggestion="Five other tools",
            rewritten_content=RewrittenContent(
                script="Hi [PAUSE] there", caption="Cap", overlay="Over"
            ),
        )
        restored = AnalysisResult.model_validate_json(result.to_json())
        assert restored == result
