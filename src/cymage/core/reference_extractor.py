"""Harvest source file references from plan text and resolve them.

Koha test plans name scripts and templates (``members/memberentry.pl``,
``basket.tt``). Candidates are resolved against a project checkout so
their source can be sent to the generator as context.
"""

import logging
import os
import re
from collections.abc import Sequence
from pathlib import Path

from ..constants import REFERENCE_SEARCH_DEPTH
from ..models import FileReference

logger = logging.getLogger(__name__)

SOURCE_EXTENSIONS = ("pl", "tt", "inc", "pm")

# Path characters, a source extension, then whitespace, punctuation or end of text
CANDIDATE_PATTERN = re.compile(
    r"([a-z0-9_/-]+\.(?:" + "|".join(SOURCE_EXTENSIONS) + r"))(?=[\s,.)?;:]|$)",
    re.IGNORECASE,
)


def harvest_candidates(plan_text: str) -> list[str]:
    """Find path-like tokens ending in a source extension, in order.

    Duplicates are kept; deduplication happens after resolution.
    """
    return [match.group(1) for match in CANDIDATE_PATTERN.finditer(plan_text)]


def find_by_basename(search_root: Path, basename: str, max_depth: int) -> Path | None:
    """Return the first file named basename below search_root.

    Directories are walked top-down in sorted order so the result is
    deterministic; the walk stops descending at max_depth.

    Args:
        search_root: Directory to search
        basename: File name to look for
        max_depth: Maximum directory depth below search_root

    Returns:
        Path of the first match, or None
    """
    base_depth = len(search_root.parts)
    for dirpath, dirnames, filenames in os.walk(search_root):
        dirnames.sort()
        if basename in filenames:
            candidate = Path(dirpath) / basename
            if candidate.is_file():
                return candidate
        if len(Path(dirpath).parts) - base_depth >= max_depth:
            dirnames[:] = []
    return None


def resolve_candidate(
    candidate: str,
    project_root: Path,
    search_dirs: Sequence[str],
    max_depth: int = REFERENCE_SEARCH_DEPTH,
) -> str | None:
    """Resolve one candidate to a root-relative path.

    Tries the candidate verbatim under project_root, then searches the
    configured subdirectories for its basename, in order.

    Returns:
        Root-relative POSIX path, or None if no file was found
    """
    relative = candidate.lstrip("/")
    if relative and (project_root / relative).is_file():
        return relative

    basename = Path(candidate).name
    for subdir in search_dirs:
        search_path = project_root / subdir
        if not search_path.is_dir():
            continue
        found = find_by_basename(search_path, basename, max_depth)
        if found is not None:
            return found.relative_to(project_root).as_posix()
    return None


def extract_references(
    plan_text: str,
    project_root: Path | None,
    search_dirs: Sequence[str] = (),
    max_depth: int = REFERENCE_SEARCH_DEPTH,
) -> list[FileReference]:
    """Extract and resolve source references from a test plan.

    Args:
        plan_text: Raw test plan
        project_root: Project checkout; resolution is skipped if missing
        search_dirs: Subdirectories of project_root searched by basename
        max_depth: Walk depth limit for the basename search

    Returns:
        References deduplicated by path, in first-seen order. Unresolved
        candidates are kept with their raw value.
    """
    candidates = harvest_candidates(plan_text)
    can_resolve = project_root is not None and project_root.is_dir()
    if candidates and not can_resolve:
        logger.warning("Project root not found (%s); keeping references unresolved", project_root)

    references: list[FileReference] = []
    seen: set[str] = set()
    for candidate in candidates:
        resolved = None
        if can_resolve:
            assert project_root is not None
            resolved = resolve_candidate(candidate, project_root, search_dirs, max_depth)
            if resolved is None:
                logger.debug("Could not resolve %s under %s", candidate, project_root)
            else:
                logger.debug("Resolved %s -> %s", candidate, resolved)

        reference = FileReference(candidate=candidate, resolved=resolved)
        if reference.path in seen:
            continue
        seen.add(reference.path)
        references.append(reference)

    return references
