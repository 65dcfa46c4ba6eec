"""Batch and generated artifact models.

A batch pairs zero or more file references with one content unit: a
step group, or the whole plan when there are more batches than groups.
Batch 1 produces the full spec file; every later batch produces a single
``it()`` block appended to it.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from .reference import FileReference
from .step import StepGroup


class BatchKind(str, Enum):
    """How a batch's output is merged into the document."""

    INITIAL = "initial"
    APPEND = "append"


class Batch(BaseModel):
    """Unit of generation work.

    Attributes:
        index: 1-based, contiguous position in the run.
        kind: ``initial`` for batch 1, ``append`` otherwise.
        references: Files whose context is sent with this batch.
        step_group: Step group used as content, or None for whole-plan fallback.
        content: The plan text actually sent (group text or whole plan).
    """

    model_config = ConfigDict(frozen=True)

    index: int = Field(ge=1, description="1-based batch index")
    kind: BatchKind = Field(description="initial or append")
    references: list[FileReference] = Field(default_factory=list)
    step_group: StepGroup | None = Field(default=None, description="Group used, if any")
    content: str = Field(description="Plan text for this batch")

    @property
    def is_initial(self) -> bool:
        return self.kind is BatchKind.INITIAL

    @property
    def uses_whole_plan(self) -> bool:
        return self.step_group is None


class GeneratedArtifact(BaseModel):
    """Text returned by the generator for one batch."""

    batch_index: int = Field(ge=1)
    kind: BatchKind
    text: str
