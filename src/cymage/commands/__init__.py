"""CLI command implementations for cymage.

This package contains the implementation of each CLI command,
separated from the CLI framework setup in cli.py.
"""

from .generate import generate
from .init import init

__all__ = [
    "generate",
    "init",
]
