"""Turn videos into transcripts and rewritten short-form scripts."""

__version__ = "0.1.0"
