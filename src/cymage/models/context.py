"""Context window model for source file excerpts."""

from pydantic import BaseModel, Field


class ContextWindow(BaseModel):
    """Gap-annotated excerpt of the interesting lines of one source file.

    Attributes:
        path: File path as shown to the generator (root-relative).
        ranges: 1-based inclusive line ranges included in ``text``.
        text: Extracted text with omission and truncation markers.
        filtered: False when no marker matched and ``text`` is a plain head excerpt.
        truncated: True when ``text`` was cut to the line cap.
        total_lines: Line count of the whole source file.
    """

    path: str = Field(description="Root-relative file path")
    ranges: list[tuple[int, int]] = Field(default_factory=list, description="1-based line ranges")
    text: str = Field(description="Extracted excerpt text")
    filtered: bool = Field(default=True, description="Whether marker filtering applied")
    truncated: bool = Field(default=False, description="Whether the excerpt hit the line cap")
    total_lines: int = Field(default=0, description="Line count of the source file")
