"""Incremental assembly of the generated spec file.

The first batch yields a complete ``describe()`` suite. Every later batch
yields one ``it()`` block, which is spliced in before the suite's closing
``});``. A provenance comment is appended once at the end.

Appending is not idempotent: each call adds a case, so a batch's fragment
must be committed at most once.
"""

import logging
import re
from enum import Enum
from pathlib import Path

logger = logging.getLogger(__name__)

SUITE_TERMINATOR = "});"
_TRAILING_TERMINATOR = re.compile(r"\}\);?\s*\Z")
_LEADING_FENCES = (
    re.compile(r"\A```typescript\s*?\n"),
    re.compile(r"\A```ts\s*?\n"),
)
_TRAILING_FENCE = re.compile(r"\n```\s*\Z")


class AssemblyError(Exception):
    """Assembler used out of order."""

    pass


class AssemblyState(str, Enum):
    """Lifecycle of the output document within a run."""

    EMPTY = "empty"
    INITIALIZED = "initialized"
    APPENDED = "appended"
    FINALIZED = "finalized"


def strip_code_fences(text: str) -> str:
    """Remove leading typescript and ts fence lines and a trailing fence line.

    The typescript fence is stripped before the ts fence, so a reply fenced
    with both loses both. Text without fences is returned unchanged.
    """
    for fence in _LEADING_FENCES:
        text = fence.sub("", text, count=1)
    return _TRAILING_FENCE.sub("", text, count=1)


def initialize_document(generated_text: str) -> str:
    """The first artifact is the whole document."""
    return generated_text


def append_case(document: str, fragment: str) -> str:
    """Splice one test case into the suite before its closing terminator.

    Args:
        document: Current document, ending with the suite terminator
        fragment: Generated ``it()`` block, possibly fenced

    Returns:
        Updated document with exactly one suite terminator at the end
    """
    body = _TRAILING_TERMINATOR.sub("", document, count=1)
    case = strip_code_fences(fragment)
    return f"{body}\n\n  {case}\n{SUITE_TERMINATOR}\n"


def provenance_trailer(provider: str, model: str) -> str:
    return f"\n// Created-by: AI-generated test using {provider} API with model {model}\n"


def finalize_document(document: str, provider: str, model: str) -> str:
    """Append the provenance comment line."""
    return document + provenance_trailer(provider, model)


class DocumentAssembler:
    """Writes the spec file as batches complete.

    The file is rewritten wholesale after every step; there is no atomic
    rename, so a crash mid-write can leave the suite unterminated.

    Transitions: EMPTY -> INITIALIZED -> APPENDED* -> FINALIZED.
    """

    def __init__(self, output_path: Path) -> None:
        self.output_path = output_path
        self.state = AssemblyState.EMPTY
        self.cases_appended = 0

    def _require(self, *allowed: AssemblyState) -> None:
        if self.state not in allowed:
            expected = " or ".join(state.value for state in allowed)
            raise AssemblyError(f"Document is {self.state.value}, expected {expected}")

    def _read(self) -> str:
        return self.output_path.read_text()

    def _write(self, document: str) -> None:
        self.output_path.write_text(document)

    def initialize(self, generated_text: str) -> str:
        self._require(AssemblyState.EMPTY)
        document = initialize_document(generated_text)
        self._write(document)
        self.state = AssemblyState.INITIALIZED
        logger.debug("Wrote initial suite to %s", self.output_path)
        return document

    def append(self, fragment: str) -> str:
        self._require(AssemblyState.INITIALIZED, AssemblyState.APPENDED)
        document = append_case(self._read(), fragment)
        self._write(document)
        self.state = AssemblyState.APPENDED
        self.cases_appended += 1
        logger.debug("Appended case %d to %s", self.cases_appended, self.output_path)
        return document

    def finalize(self, provider: str, model: str) -> str:
        self._require(AssemblyState.INITIALIZED, AssemblyState.APPENDED)
        document = finalize_document(self._read(), provider, model)
        self._write(document)
        self.state = AssemblyState.FINALIZED
        return document
