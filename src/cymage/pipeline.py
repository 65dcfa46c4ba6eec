"""Batch generation pipeline.

Runs segmentation and reference extraction over the plan, aligns batches,
then processes them strictly in order: each batch's prompt goes to the
generator and the result is committed to the output document before the
next batch starts. A generator failure aborts the run and leaves the
document as the last successful batch wrote it.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from .config import CymageConfig
from .core import (
    DocumentAssembler,
    align_batches,
    build_prompt,
    extract_references,
    fetch_context,
    segment_plan,
)
from .models import Batch, BatchKind, FileReference, GeneratedArtifact, StepGroup
from .services import Generator

logger = logging.getLogger(__name__)


class InvalidInputError(Exception):
    """Plan input is missing or unreadable."""

    pass


@dataclass
class RunPlan:
    """Everything derived from the plan before any generation call."""

    plan_text: str
    step_groups: list[StepGroup]
    references: list[FileReference]
    batches: list[Batch]


@dataclass
class GenerationResult:
    """Outcome of a completed run."""

    output_path: Path
    batches: int
    step_groups: int
    references: list[FileReference] = field(default_factory=list)
    artifacts: list[GeneratedArtifact] = field(default_factory=list)


def read_plan(test_plan: Path | None = None, text: str | None = None) -> str:
    """Get plan text from a file or inline text.

    Inline text may carry literal ``\\n`` sequences from the shell; they
    are turned into newlines.

    Raises:
        InvalidInputError: If neither input is given, the file is missing,
            or the plan is empty
    """
    if test_plan is None and not text:
        raise InvalidInputError("Must provide either --test-plan or --text")
    if test_plan is not None:
        if not test_plan.is_file():
            raise InvalidInputError(f"Test plan file not found: {test_plan}")
        plan_text = test_plan.read_text()
    else:
        assert text is not None
        plan_text = text.replace("\\n", "\n")
    if not plan_text.strip():
        raise InvalidInputError("Test plan is empty")
    return plan_text


def prepare_run(plan_text: str, config: CymageConfig) -> RunPlan:
    """Segment the plan, resolve references and align batches."""
    step_groups = segment_plan(plan_text)
    references = extract_references(
        plan_text,
        config.koha.path,
        config.koha.search_dirs,
        config.koha.search_depth,
    )
    batches = align_batches(
        references,
        step_groups,
        plan_text,
        config.generation.max_files_per_batch,
    )
    if len(step_groups) > 1:
        logger.info("Parsed test plan into %d test group(s)", len(step_groups))
    if references:
        logger.info(
            "Found %d script reference(s): %s",
            len(references),
            ", ".join(ref.path for ref in references),
        )
    return RunPlan(
        plan_text=plan_text,
        step_groups=step_groups,
        references=references,
        batches=batches,
    )


def batch_prompt(batch: Batch, bug_number: str, config: CymageConfig) -> str:
    """Build the prompt for one batch, including its source context."""
    context = fetch_context(batch.references, config.koha.path) if batch.references else ""
    return build_prompt(
        batch.content,
        bug_number,
        context,
        is_append=batch.kind is BatchKind.APPEND,
    )


def run_generation(
    plan_text: str,
    bug_number: str,
    output_path: Path,
    config: CymageConfig,
    generate: Generator,
) -> GenerationResult:
    """Generate the spec file for a plan, batch by batch.

    Args:
        plan_text: Raw test plan
        bug_number: Bug number used in prompts
        output_path: Spec file to create; parent directories are created
        config: Run configuration
        generate: Prompt -> generated text callable

    Returns:
        Summary of the completed run

    Raises:
        GenerationError: Propagated unchanged from the generator
    """
    run_plan = prepare_run(plan_text, config)

    if not output_path.parent.exists():
        output_path.parent.mkdir(parents=True, exist_ok=True)
        logger.info("Created directory: %s", output_path.parent)

    assembler = DocumentAssembler(output_path)
    artifacts: list[GeneratedArtifact] = []
    total = len(run_plan.batches)

    for batch in run_plan.batches:
        if batch.references:
            logger.info(
                "Processing batch %d/%d (%d file(s))", batch.index, total, len(batch.references)
            )
        else:
            logger.info("Generating Cypress test for Bug %s...", bug_number)

        prompt = batch_prompt(batch, bug_number, config)
        text = generate(prompt)
        artifacts.append(GeneratedArtifact(batch_index=batch.index, kind=batch.kind, text=text))

        if batch.is_initial:
            assembler.initialize(text)
            logger.info("Created initial test file")
        else:
            assembler.append(text)
            logger.info("Appended test case from batch %d", batch.index)

    assembler.finalize(config.backend.provider, config.backend.model)

    return GenerationResult(
        output_path=output_path,
        batches=total,
        step_groups=len(run_plan.step_groups),
        references=run_plan.references,
        artifacts=artifacts,
    )
