"""Hypothesis strategies for fuzzlang property-based testing.

Strategies are organized by domain:

- program: program-language identifiers, expressions, statements, Programs
- generators: generator-language terms, expressions, UserGen values
- diagnostics: SourceSpan, Diagnostic, DiagnosticFormatter

Usage:
    from tests.strategies import programs, generator_files
    from tests.strategies.program import expressions_at_level
    from tests.strategies.diagnostics import diagnostics

Event-Emitting Strategies (HypoFuzz-Optimized):
    These strategies emit hypothesis.event() calls for coverage-guided fuzzing:
    - leaf_expressions, expressions_at_level, statements, type_declarations
    - terms, generator_expressions
    - source_spans, diagnostics, diagnostic_formatters
"""

from .diagnostics import diagnostic_formatters, diagnostics, source_spans
from .generators import (
    generator_expressions,
    generator_files,
    generator_names,
    terms,
    user_generators,
)
from .program import (
    IDENTIFIER_FIRST_CHARS,
    IDENTIFIER_PARTS,
    IDENTIFIER_REST_CHARS,
    expressions,
    expressions_at_level,
    float_texts,
    identifiers,
    integer_texts,
    leaf_expressions,
    programs,
    statements,
    struct_fields,
    type_declarations,
    type_refs,
)

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Program language
    "IDENTIFIER_FIRST_CHARS",
    "IDENTIFIER_PARTS",
    "IDENTIFIER_REST_CHARS",
    "expressions",
    "expressions_at_level",
    "float_texts",
    "identifiers",
    "integer_texts",
    "leaf_expressions",
    "programs",
    "statements",
    "struct_fields",
    "type_declarations",
    "type_refs",
    # Generator language
    "generator_expressions",
    "generator_files",
    "generator_names",
    "terms",
    "user_generators",
    # Diagnostics
    "diagnostic_formatters",
    "diagnostics",
    "source_spans",
]
