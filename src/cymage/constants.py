"""Constants for cymage."""

# Network timeouts (seconds)
GENERATION_TIMEOUT = 120  # single attempt, no retry
HOST_CHECK_TIMEOUT = 30

# Context extraction limits (lines)
CONTEXT_LINES_BEFORE = 3
CONTEXT_LINES_AFTER = 5
MAX_CONTEXT_LINES = 300
FALLBACK_CONTEXT_LINES = 150

# Default directory walk depth when resolving references by basename
REFERENCE_SEARCH_DEPTH = 12

CONFIG_DIR_NAME = ".cymage"
