"""fuzzlang exception hierarchy with structured diagnostics.

Every failure is fatal to the current parse: there is no partial AST and
no per-declaration recovery. All exceptions can carry a Diagnostic.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .codes import Diagnostic

if TYPE_CHECKING:
    from fuzzlang.syntax.cursor import ParseError

__all__ = [
    "ConstantValueError",
    "DuplicateTypeError",
    "FuzzLangError",
    "FuzzSyntaxError",
    "SerializationValidationError",
    "UnknownTypeError",
    "UnresolvedTypeError",
    "UnsupportedConstantTypeError",
]


class FuzzLangError(Exception):
    """Base exception for all fuzzlang errors.

    Attributes:
        diagnostic: Structured diagnostic information (optional)
    """

    def __init__(self, message: str | Diagnostic) -> None:
        """Initialize FuzzLangError.

        Args:
            message: Error message string OR Diagnostic object
        """
        if isinstance(message, Diagnostic):
            self.diagnostic: Diagnostic | None = message
            super().__init__(message.format_error())
        else:
            self.diagnostic = None
            super().__init__(message)


class FuzzSyntaxError(FuzzLangError):
    """Malformed token stream in program or generator source.

    Attributes:
        parse_error: Cursor-level error for ``format_with_context()`` output
    """

    def __init__(
        self,
        message: str | Diagnostic,
        *,
        parse_error: ParseError | None = None,
    ) -> None:
        super().__init__(message)
        self.parse_error = parse_error


class UnknownTypeError(FuzzLangError):
    """Type-name token is not in the recognized set.

    Example:
        I99:constant(1)
    """


class ConstantValueError(FuzzLangError, ValueError):
    """Integer literal is malformed or does not fit in a signed 64-bit value."""


class UnsupportedConstantTypeError(FuzzLangError):
    """Constant requested for a type with no signed/unsigned mapping.

    Raised for void, char, pointers, structs and enums.
    """


class UnresolvedTypeError(FuzzLangError):
    """Named struct/enum reference has no definition in the type table."""


class SerializationValidationError(FuzzLangError, ValueError):
    """AST cannot be expressed in surface syntax.

    Common causes:
    - Compound operand nesting that needs grouping parentheses
    - Inline struct/enum definitions where only a type reference is allowed
    - Malformed names or literal text from programmatic construction
    """


class DuplicateTypeError(FuzzLangError):
    """Struct, enum, or typedef name defined twice in one type table."""
