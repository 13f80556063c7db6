"""Diagnostic system for fuzzlang errors.

Provides structured error diagnostics with codes, spans, and hints.
Inspired by Rust compiler diagnostics and Elm error messages.

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode, SourceSpan
from .errors import (
    ConstantValueError,
    DuplicateTypeError,
    FuzzLangError,
    FuzzSyntaxError,
    SerializationValidationError,
    UnknownTypeError,
    UnresolvedTypeError,
    UnsupportedConstantTypeError,
)
from .formatter import DiagnosticFormatter, OutputFormat
from .templates import ErrorTemplate

__all__ = [
    "ConstantValueError",
    "Diagnostic",
    "DiagnosticCode",
    "DiagnosticFormatter",
    "DuplicateTypeError",
    "ErrorTemplate",
    "FuzzLangError",
    "FuzzSyntaxError",
    "OutputFormat",
    "SerializationValidationError",
    "SourceSpan",
    "UnknownTypeError",
    "UnresolvedTypeError",
    "UnsupportedConstantTypeError",
]
