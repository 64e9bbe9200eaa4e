"""Prompt templates for topic differentiation, rewriting and frame description."""

DELIVERY_CUES: dict[str, str] = {
    "[PAUSE]": "pause briefly",
    "[EMPHASIS]": "stress this word or phrase",
    "[SLOW DOWN]": "slow your delivery",
}

_SUMMARY_PROMPT = """Extract the core topic, theme, and key points from this \
video transcript. Provide a concise summary that captures:
1. The main topic/subject
2. Key specific details (tools, strategies, names, numbers, etc.)
3. The content format/structure (list, tutorial, review, etc.)
4. Target audience and purpose

Transcript: "{transcript}"

Please provide a focused summary in 2-3 sentences that preserves all the \
specific details and context needed to understand what this content is about."""

_SUGGESTION_PROMPT = """Suggest a content idea different from this video \
transcript summary: "{summary}".

It must be in the same niche and on the exact same topic, but offer fresh \
value. Pick one idea from your research that matches the topic of the \
original exactly while being distinct enough to stand out on social media.

Keep the nature of the original: if it is a list of tools, your idea must be \
a list of different tools on that topic; if it is a plan or a set of \
strategies, your idea must be one too. Be exactly as specific as the \
original. Do not fall back to generic tools or strategies when the original \
names specific ones. Make sure the idea appeals to a broad audience."""

_REWRITE_PROMPT = """Based on the original transcript and the topic \
suggestion, create a completely rewritten version that is optimized for oral \
presentation and follows the exact same structure but with different content.

Original Transcript: "{transcript}"
Topic Suggestion: "{topic}"

Create content designed to be spoken aloud:

1. **ORAL SCRIPT**: A rewritten script that is perfect for speaking aloud, with:
   - Natural conversational tone and rhythm
   - Easy-to-pronounce words and phrases
   - Clear transitions between ideas
   - Delivery cues marked inline: {cues}
   - A hook opening that grabs attention immediately
   - A strong conclusion with a clear call-to-action
   - Timing suggestions for each section

2. **ENGAGING CAPTION**: A social media caption/title that promises value

3. **OVERLAY TEXT**: Key on-screen text that complements the spoken delivery

{output_format}

IMPORTANT: The script must read naturally when spoken aloud. Follow the \
structure of the original while covering the suggested topic."""

_OUTPUT_FORMAT = """Respond with a JSON object with these exact keys:
{
  "script": "The complete oral presentation script with delivery cues...",
  "caption": "Engaging social media caption...",
  "overlay": "Key overlay text suggestions..."
}"""

VISION_PROMPT = """Reverse-engineer this image into a recreation prompt. \
Describe the subject, setting, composition, camera angle, lighting, color \
palette, on-screen text and overall style in enough detail that an image \
generation model could recreate a very similar frame."""


def build_summary_prompt(transcript: str) -> str:
    """Build the prompt that condenses a transcript into 2-3 sentences."""
    return _SUMMARY_PROMPT.format(transcript=transcript)


def build_suggestion_prompt(summary: str) -> str:
    """Build the same-niche, different-angle prompt from a topic summary."""
    return _SUGGESTION_PROMPT.format(summary=summary)


def build_rewrite_prompt(transcript: str, topic: str) -> str:
    """Build the structured rewrite prompt.

    The reply is expected as JSON with ``script``, ``caption`` and
    ``overlay`` keys.
    """
    cues = ", ".join(DELIVERY_CUES)
    return _REWRITE_PROMPT.format(
        transcript=transcript,
        topic=topic,
        cues=cues,
        output_format=_OUTPUT_FORMAT,
    )
