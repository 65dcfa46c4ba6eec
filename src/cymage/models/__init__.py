"""Pydantic data models for cymage runs.

This package defines the derived, read-only structures of one run:
- Segmented plan steps (Step, StepGroup)
- Harvested source references (FileReference)
- Extracted source excerpts (ContextWindow)
- Generation work units and their output (Batch, BatchKind, GeneratedArtifact)

Example:
    >>> from cymage.models import FileReference
    >>> FileReference(candidate="basket.pl").path
    'basket.pl'
"""

from .batch import Batch, BatchKind, GeneratedArtifact
from .context import ContextWindow
from .reference import FileReference
from .step import Step, StepGroup

__all__ = [
    "Batch",
    "BatchKind",
    "ContextWindow",
    "FileReference",
    "GeneratedArtifact",
    "Step",
    "StepGroup",
]
