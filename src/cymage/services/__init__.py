"""External service integrations for cymage.

This package provides interfaces to network collaborators:
- generation: Chat-completions backend (GitHub Models, OpenAI)
- preflight: Koha staff interface reachability check
"""

from .generation import (
    GenerationError,
    Generator,
    make_generator,
    resolve_api_key,
    run_completion,
)
from .preflight import PreflightError, check_host

__all__ = [
    "GenerationError",
    "Generator",
    "PreflightError",
    "check_host",
    "make_generator",
    "resolve_api_key",
    "run_completion",
]
