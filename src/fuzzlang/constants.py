"""Shared constants for fuzzlang.

Centralized configuration constants used by both the program-language and
generator-language front ends. Placing them here avoids circular imports
and provides a single source of truth.

Constants are grouped by domain:
- Depth limits: Recursion protection for parsing/serialization/traversal
- Input limits: DoS prevention via size constraints
- Integer limits: 64-bit bounds for literal folding

Python 3.13+. Zero external dependencies.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Depth limits
    "MAX_DEPTH",
    # Input limits
    "MAX_SOURCE_SIZE",
    # Integer limits
    "INT64_MIN",
    "INT64_MAX",
    "UINT64_MAX",
    "UINT64_MODULUS",
]

# ============================================================================
# DEPTH LIMITS
# ============================================================================
#
# One limit is shared by every recursive subsystem:
#
# 1. PARSERS (syntax/parser, generators/parser):
#    - Nested if/while bodies, function-call arguments, random() bounds
# 2. SERIALIZERS (syntax/serializer.py, generators/serializer.py):
#    - AST traversal depth while printing
# 3. VISITORS (syntax/visitor.py):
#    - Generic traversal of programmatically built trees
#
# 100 levels is far beyond hand-written fuzz programs (typically < 5) and
# stays well inside Python's default recursion limit of 1000.

MAX_DEPTH: int = 100

# ============================================================================
# INPUT LIMITS
# ============================================================================

# Default maximum source size in characters (10 MB).
MAX_SOURCE_SIZE: int = 10 * 1024 * 1024

# ============================================================================
# INTEGER LIMITS
# ============================================================================

# Generator integer literals are folded as signed 64-bit values.
INT64_MIN: int = -(2**63)
INT64_MAX: int = 2**63 - 1

# Unsigned constants are the two's-complement reinterpretation of the i64.
UINT64_MAX: int = 2**64 - 1
UINT64_MODULUS: int = 2**64
