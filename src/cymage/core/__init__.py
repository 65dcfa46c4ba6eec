"""Core business logic for cymage.

This package contains pure text processing with no network I/O:
- plan_segmenter: Split numbered plans into step groups
- reference_extractor: Harvest and resolve source file references
- context_extractor: Excerpt interesting lines of referenced files
- batch_aligner: Pair reference chunks with step groups
- assembler: Build the output spec file incrementally
- prompt_builder: Generation prompts for initial and appended batches
"""

from .assembler import (
    AssemblyError,
    AssemblyState,
    DocumentAssembler,
    append_case,
    finalize_document,
    initialize_document,
    provenance_trailer,
    strip_code_fences,
)
from .batch_aligner import align_batches, chunk_references
from .context_extractor import (
    collect_context,
    extract_context,
    fetch_context,
    find_interesting_lines,
    format_context_block,
)
from .plan_segmenter import parse_step, segment_plan
from .prompt_builder import SYSTEM_PROMPT, build_prompt
from .reference_extractor import (
    extract_references,
    find_by_basename,
    harvest_candidates,
    resolve_candidate,
)

__all__ = [
    "SYSTEM_PROMPT",
    "AssemblyError",
    "AssemblyState",
    "DocumentAssembler",
    "align_batches",
    "append_case",
    "build_prompt",
    "chunk_references",
    "collect_context",
    "extract_context",
    "extract_references",
    "fetch_context",
    "finalize_document",
    "find_by_basename",
    "find_interesting_lines",
    "format_context_block",
    "harvest_candidates",
    "initialize_document",
    "parse_step",
    "provenance_trailer",
    "resolve_candidate",
    "segment_plan",
    "strip_code_fences",
]
