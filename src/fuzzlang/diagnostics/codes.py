"""Diagnostic codes and data structures.

Defines error codes, source spans, and diagnostic messages.
Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Literal

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
    "SourceSpan",
]


class DiagnosticCode(Enum):
    """Error codes with unique identifiers.

    Organized by category:
        3000-3999: Syntax errors (parser failures)
        4000-4999: Typing errors (type names, typed constants)
        5000-5999: Resolution errors (named type lookups)
        6000-6999: Limit errors (recursion depth)
    """

    # Syntax errors (3000-3999)
    UNEXPECTED_EOF = 3001
    UNEXPECTED_TOKEN = 3002
    RESERVED_WORD = 3003
    EMPTY_GENERATOR = 3004
    PARSE_NESTING_DEPTH_EXCEEDED = 3005
    DECLARATION_OUT_OF_ORDER = 3006

    # Typing errors (4000-4999)
    UNKNOWN_TYPE = 4001
    CONSTANT_OUT_OF_RANGE = 4002
    CONSTANT_MALFORMED = 4003
    UNSUPPORTED_CONSTANT_TYPE = 4004

    # Resolution errors (5000-5999)
    UNRESOLVED_STRUCT = 5001
    UNRESOLVED_ENUM = 5002
    DUPLICATE_TYPE = 5003

    # Limit errors (6000-6999)
    MAX_DEPTH_EXCEEDED = 6001


@dataclass(frozen=True, slots=True)
class SourceSpan:
    """Source code location for error reporting.

    Note:
        Python strings measure positions in characters (Unicode code points),
        not bytes.

    Attributes:
        start: Starting character offset (0-indexed)
        end: Ending character offset (exclusive)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """

    start: int
    end: int
    line: int
    column: int

    def __post_init__(self) -> None:
        """Validate SourceSpan invariants.

        Raises:
            ValueError: If start is negative, end precedes start, or
                line/column are not 1-indexed.
        """
        if self.start < 0:
            msg = f"SourceSpan.start must be >= 0, got {self.start}"
            raise ValueError(msg)
        if self.end < self.start:
            msg = f"SourceSpan.end ({self.end}) must be >= start ({self.start})"
            raise ValueError(msg)
        if self.line < 1:
            msg = f"SourceSpan.line must be >= 1 (1-indexed), got {self.line}"
            raise ValueError(msg)
        if self.column < 1:
            msg = f"SourceSpan.column must be >= 1 (1-indexed), got {self.column}"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Structured diagnostic message.

    Inspired by Rust compiler diagnostics. Carries enough context (offending
    text, expected tokens, location) for callers to report a precise error.

    Attributes:
        code: Unique error code
        message: Human-readable error description
        span: Source location (None for errors raised outside a parse)
        hint: Suggestion for fixing the error
        found: Offending source text, if any
        expected: Tokens or constructs the parser would have accepted
        severity: Error severity level
    """

    code: DiagnosticCode
    message: str
    span: SourceSpan | None = None
    hint: str | None = None
    found: str | None = None
    expected: tuple[str, ...] = ()
    severity: Literal["error", "warning"] = "error"

    def __str__(self) -> str:
        """Return human-readable error description."""
        return self.message

    def format_error(self) -> str:
        """Format diagnostic like Rust compiler.

        Delegates to DiagnosticFormatter for consistent output.

        Example output:
            error[UNEXPECTED_TOKEN]: Expected identifier, found '{'
              --> line 1, column 8
              = expected: identifier
              = help: Struct declarations need a name: struct <Name> { ... }

        Returns:
            Formatted error message
        """
        from .formatter import DiagnosticFormatter  # noqa: PLC0415 - circular

        return DiagnosticFormatter().format(self)
