"""Extract the interesting parts of source files for the generator.

Templates and scripts are long; only the lines around markup a Cypress
test can target (ids, classes, form controls, names, data attributes)
are sent, with omitted stretches marked.
"""

import logging
import re
from collections.abc import Sequence
from pathlib import Path

from ..constants import (
    CONTEXT_LINES_AFTER,
    CONTEXT_LINES_BEFORE,
    FALLBACK_CONTEXT_LINES,
    MAX_CONTEXT_LINES,
)
from ..models import ContextWindow, FileReference

logger = logging.getLogger(__name__)

# Tried in order; the first match marks the line
MARKER_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"""id\s*=\s*["']([^"']+)["']""", re.IGNORECASE),
    re.compile(r"""class\s*=\s*["']([^"']+)["']""", re.IGNORECASE),
    re.compile(r"<form[^>]*>", re.IGNORECASE),
    re.compile(r"<button[^>]*>", re.IGNORECASE),
    re.compile(r"<input[^>]*>", re.IGNORECASE),
    re.compile(r"<select[^>]*>", re.IGNORECASE),
    re.compile(r"<textarea[^>]*>", re.IGNORECASE),
    re.compile(r"""name\s*=\s*["']([^"']+)["']""", re.IGNORECASE),
    re.compile(r"""data-\w+\s*=\s*["']([^"']+)["']""", re.IGNORECASE),
]

GAP_MARKER = "... (lines omitted) ..."
TRUNCATION_MARKER = "... (truncated)"
CONTEXT_HEADER = "RELEVANT SCRIPT FILES FROM KOHA REPOSITORY:"


def match_marker(line: str) -> re.Pattern[str] | None:
    """Return the first marker pattern matching line, if any."""
    for pattern in MARKER_PATTERNS:
        if pattern.search(line):
            return pattern
    return None


def find_interesting_lines(lines: Sequence[str]) -> list[int]:
    """Indices of marked lines and their surrounding context, ascending."""
    last_index = len(lines) - 1
    interesting: set[int] = set()
    for i, line in enumerate(lines):
        if match_marker(line) is None:
            continue
        start = max(0, i - CONTEXT_LINES_BEFORE)
        end = min(last_index, i + CONTEXT_LINES_AFTER)
        interesting.update(range(start, end + 1))
    return sorted(interesting)


def _to_ranges(indices: Sequence[int]) -> list[tuple[int, int]]:
    """Collapse sorted 0-based indices into 1-based inclusive ranges."""
    ranges: list[tuple[int, int]] = []
    for index in indices:
        if ranges and index == ranges[-1][1]:
            ranges[-1] = (ranges[-1][0], index + 1)
        else:
            ranges.append((index + 1, index + 1))
    return ranges


def _cap_lines(text: str, cap: int) -> tuple[str, bool]:
    lines = text.split("\n")
    if text.endswith("\n"):
        lines.pop()
    if len(lines) <= cap:
        return text, False
    return "\n".join(lines[:cap]) + f"\n{TRUNCATION_MARKER}", True


def extract_context(content: str, path: str = "") -> ContextWindow | None:
    """Extract a context window from one file's content.

    Lines matching a marker are kept with 3 lines before and 5 after;
    gaps between kept stretches are marked. The result is capped at 300
    lines. Without any marker the first 150 lines are used unfiltered.

    Args:
        content: Full file content
        path: Path recorded on the window

    Returns:
        The context window, or None when the file has no lines at all
    """
    lines = content.split("\n")
    while lines and not lines[-1]:
        lines.pop()
    if not lines:
        return None

    indices = find_interesting_lines(lines)
    if not indices:
        excerpt = "\n".join(lines[:FALLBACK_CONTEXT_LINES])
        truncated = len(lines) > FALLBACK_CONTEXT_LINES
        if truncated:
            excerpt += f"\n{TRUNCATION_MARKER}"
        shown = min(len(lines), FALLBACK_CONTEXT_LINES)
        return ContextWindow(
            path=path,
            ranges=[(1, shown)],
            text=excerpt,
            filtered=False,
            truncated=truncated,
            total_lines=len(lines),
        )

    parts: list[str] = []
    previous = -1
    for index in indices:
        if previous >= 0 and index - previous > 1:
            parts.extend(["", GAP_MARKER, ""])
        parts.append(lines[index])
        previous = index
    text, truncated = _cap_lines("\n".join(parts) + "\n", MAX_CONTEXT_LINES)

    return ContextWindow(
        path=path,
        ranges=_to_ranges(indices),
        text=text,
        filtered=True,
        truncated=truncated,
        total_lines=len(lines),
    )


def format_context_block(windows: Sequence[ContextWindow]) -> str:
    """Render windows as the advisory block appended to a prompt."""
    if not windows:
        return ""
    sections = [f"\n\n{CONTEXT_HEADER}\n\n"]
    for window in windows:
        body = window.text.rstrip("\n")
        sections.append(f"File: {window.path}\n```\n{body}\n```\n\n")
    return "".join(sections)


def collect_context(
    references: Sequence[FileReference], project_root: Path | None
) -> list[ContextWindow]:
    """Read each referenced file under project_root and extract its window.

    Missing files and a missing project root are logged and skipped.
    """
    if not references:
        return []
    if project_root is None or not project_root.is_dir():
        logger.warning("Koha directory not found at %s", project_root)
        return []

    windows: list[ContextWindow] = []
    for reference in references:
        full_path = project_root / reference.path.lstrip("/")
        logger.info("Looking for: %s", reference.path)
        if not full_path.is_file():
            logger.warning("Could not find %s at %s", reference.path, full_path)
            continue

        content = full_path.read_text(errors="replace")
        window = extract_context(content, reference.path)
        if window is None:
            logger.info("%s is empty; no context extracted", reference.path)
            continue
        if window.filtered:
            logger.info(
                "Found %s (extracted relevant sections from %d lines)",
                reference.path,
                window.total_lines,
            )
        else:
            logger.info(
                "Found %s (%d lines, using first %d)",
                reference.path,
                window.total_lines,
                FALLBACK_CONTEXT_LINES,
            )
        windows.append(window)
    return windows


def fetch_context(references: Sequence[FileReference], project_root: Path | None) -> str:
    """Build the advisory context block for a batch's references."""
    return format_context_block(collect_context(references, project_root))
