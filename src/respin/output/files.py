"""Persist an analysis result to disk."""

import logging
from dataclasses import dataclass
from pathlib import Path

from respin.models import AnalysisResult
from respin.output import markdown as md_out

logger = logging.getLogger(__name__)


@dataclass
class SavedFiles:
    """Paths written for one result."""

    result_json: Path
    transcript_text: Path
    script: Path | None = None
    caption: Path | None = None
    overlay: Path | None = None
    oral_script: Path | None = None


def save_result(result: AnalysisResult, output_dir: Path) -> SavedFiles:
    """Write the JSON record, plain transcript and any rewrite files.

    File names share the millisecond timestamp of the result so one run's
    files sort together.
    """
    stamp = int(result.timestamp.timestamp() * 1000)
    output_dir.mkdir(parents=True, exist_ok=True)

    saved = SavedFiles(
        result_json=output_dir / f"transcript_{stamp}.json",
        transcript_text=output_dir / f"transcript_{stamp}.txt",
    )
    saved.result_json.write_text(result.to_json(), encoding="utf-8")
    saved.transcript_text.write_text(result.transcript, encoding="utf-8")

    content = result.rewritten_content
    if content is not None:
        rewrite_dir = output_dir / "rewrites"
        rewrite_dir.mkdir(parents=True, exist_ok=True)
        saved.script = rewrite_dir / f"script_{stamp}.txt"
        saved.caption = rewrite_dir / f"caption_{stamp}.txt"
        saved.overlay = rewrite_dir / f"overlay_{stamp}.txt"
        saved.oral_script = rewrite_dir / f"oral_script_{stamp}.md"

        saved.script.write_text(content.script, encoding="utf-8")
        saved.caption.write_text(content.caption, encoding="utf-8")
        saved.overlay.write_text(content.overlay, encoding="utf-8")
        saved.oral_script.write_text(md_out.render(result), encoding="utf-8")

    logger.info(
        "Saved result for %s to %s", result.source.describe(), output_dir
    )
    return saved
