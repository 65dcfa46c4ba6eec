"""Pair file reference chunks with step groups to form generation batches."""

import logging
from collections.abc import Sequence

from ..models import Batch, BatchKind, FileReference, StepGroup

logger = logging.getLogger(__name__)


def chunk_references(
    references: Sequence[FileReference], max_files_per_batch: int = 1
) -> list[list[FileReference]]:
    """Split references into order-preserving chunks.

    Args:
        references: Resolved (or raw) references
        max_files_per_batch: Chunk size, at least 1

    Returns:
        Chunks of references; a single empty chunk when there are none
    """
    if max_files_per_batch < 1:
        raise ValueError(f"max_files_per_batch must be >= 1, got {max_files_per_batch}")
    if not references:
        return [[]]
    return [
        list(references[i : i + max_files_per_batch])
        for i in range(0, len(references), max_files_per_batch)
    ]


def align_batches(
    references: Sequence[FileReference],
    step_groups: Sequence[StepGroup],
    plan_text: str,
    max_files_per_batch: int = 1,
) -> list[Batch]:
    """Build the ordered batch list for a run.

    Batch k uses step group k when one exists; otherwise it falls back to
    the whole plan. Batch 1 is the initial batch, the rest append.

    Args:
        references: File references from the plan
        step_groups: Segmented step groups (empty for whole-plan mode)
        plan_text: The full plan, used as fallback content
        max_files_per_batch: Files sent with each batch

    Returns:
        Batches with contiguous 1-based indices
    """
    batches: list[Batch] = []
    for index, chunk in enumerate(chunk_references(references, max_files_per_batch), start=1):
        group = step_groups[index - 1] if index <= len(step_groups) else None
        batches.append(
            Batch(
                index=index,
                kind=BatchKind.INITIAL if index == 1 else BatchKind.APPEND,
                references=chunk,
                step_group=group,
                content=group.text if group is not None else plan_text,
            )
        )

    logger.debug(
        "Aligned %d batch(es) with %d step group(s)", len(batches), len(step_groups)
    )
    return batches
