"""Centralized configuration for qqbar.

This module defines:
- Construction-time invariant checking
- Output precision for decimal rendering
- Seed radius for the complex root box search
- Input validation limits and parser cache size
- Default logging level
- Regex patterns and SymPy transformations for parsing

Configuration can be overridden via environment variables (prefixed with QQBAR_).
"""

import os
import re

from sympy.parsing.sympy_parser import (
    convert_xor,
    implicit_multiplication_application,
    standard_transformations,
)

# Version is defined in pyproject.toml [project] section
try:
    import importlib.metadata

    VERSION = importlib.metadata.version("qqbar")
except Exception:
    # Fallback if package not installed
    VERSION = "0.1.0"

# Invariant checks run whenever a root set or algebraic root is constructed.
# They factor polynomials, so large workloads may want them off.
CHECK_INVARIANTS = os.getenv("QQBAR_CHECK_INVARIANTS", "true").lower() == "true"

OUTPUT_DIGITS = int(os.getenv("QQBAR_OUTPUT_DIGITS", "10"))  # decimal places

# Half-width of the first box tried when searching the upper half plane
COMPLEX_SEARCH_INITIAL_RADIUS = int(
    os.getenv("QQBAR_COMPLEX_SEARCH_INITIAL_RADIUS", "2")
)

# Input validation limits
MAX_INPUT_LENGTH = int(os.getenv("QQBAR_MAX_INPUT_LENGTH", "10000"))  # characters
MAX_DEGREE = int(os.getenv("QQBAR_MAX_DEGREE", "64"))

CACHE_SIZE_PARSE = int(os.getenv("QQBAR_CACHE_SIZE_PARSE", "256"))

LOG_LEVEL = os.getenv("QQBAR_LOG_LEVEL", "WARNING")

TRANSFORMATIONS = standard_transformations + (
    implicit_multiplication_application,
    convert_xor,
)

DIGIT_LETTERS_REGEX = re.compile(r"(\d)\s*([A-Za-z(])")
