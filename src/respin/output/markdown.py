"""Markdown rendering of a rewritten oral script."""

from datetime import datetime

from respin.models import AnalysisResult
from respin.rewrite.prompts import DELIVERY_CUES


def render(result: AnalysisResult, generated_at: datetime | None = None) -> str:
    """Render the rewrite of ``result`` as a Markdown document."""
    content = result.rewritten_content
    if content is None:
        msg = "Result has no rewritten content to render"
        raise ValueError(msg)

    generated_at = generated_at or result.timestamp.astimezone()
    lines: list[str] = []

    lines.append("# Oral Presentation Script")
    lines.append("\n## Details")
    lines.append(f"- **Source**: {result.source.describe()}")
    stamp = generated_at.strftime("%Y-%m-%d %H:%M:%S")
    lines.append(f"- **Generated**: {stamp}")
    if result.topic_suggestion:
        lines.append(f"- **Topic suggestion**: {result.topic_suggestion}")

    lines.append("\n## Caption")
    lines.append(f"\n{content.caption}")
    lines.append("\n## Full Script")
    lines.append(f"\n{content.script}")
    lines.append("\n## Overlay Text")
    lines.append(f"\n{content.overlay}")

    lines.append("\n---")
    lines.append("\n## Usage Notes")
    lines.append("")
    for i, (cue, meaning) in enumerate(DELIVERY_CUES.items(), start=1):
        lines.append(f"{i}. `{cue}` means {meaning}")
    n = len(DELIVERY_CUES)
    lines.append(f"{n + 1}. Rehearse aloud to settle pace and pauses")
    lines.append(f"{n + 2}. Adjust wording to your own voice and style")
    lines.append("")

    return "\n".join(lines)
