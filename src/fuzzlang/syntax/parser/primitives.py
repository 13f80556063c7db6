"""Primitive parsing utilities shared by both fuzzlang parsers.

This module provides low-level scanners for identifiers, keywords, and
numeric literals, plus the explicit ParseContext used for nesting limits.

Conventions:
    - Every ``parse_*``/``expect_*`` helper skips leading whitespace itself
      and returns a cursor positioned right after the consumed text.
    - ``match_*`` helpers return None instead of raising, for lookahead.
    - Failures raise FuzzSyntaxError built by ``syntax_error()``; the
      parse is aborted on the first error.

Lexing is maximal-munch, like a table-driven lexer: a ``-`` immediately
followed by a digit always begins a numeric literal.
"""

from dataclasses import dataclass

from fuzzlang.constants import MAX_DEPTH
from fuzzlang.diagnostics import ErrorTemplate, FuzzSyntaxError
from fuzzlang.syntax.cursor import Cursor, ParseError, ParseResult
from fuzzlang.typesys import BUILTIN_TYPE_NAMES

__all__ = [
    "RESERVED_WORDS",
    "ParseContext",
    "expect_char",
    "expect_keyword",
    "is_identifier_char",
    "is_identifier_start",
    "is_number_start",
    "match_keyword",
    "parse_identifier",
    "parse_name",
    "parse_number",
    "scan_word",
    "syntax_error",
]

# ASCII digits only: str.isdigit() accepts Unicode digits like ² that int() rejects.
_ASCII_DIGITS: str = "0123456789"

# Multi-character operators reported as a single token in diagnostics.
_OPERATORS: tuple[str, ...] = ("&&", "||", "==", "!=")

# Bare-word keywords of the program language. Keywords containing ':' can
# never collide with identifiers and are matched where they are expected.
_KEYWORDS: frozenset[str] = frozenset(
    {"struct", "enum", "pointer", "typedef", "if", "while"}
)

RESERVED_WORDS: frozenset[str] = _KEYWORDS | frozenset(BUILTIN_TYPE_NAMES)


def is_identifier_start(ch: str) -> bool:
    """Check if character can start an identifier: [A-Za-z]"""
    return ch.isascii() and ch.isalpha()


def is_identifier_char(ch: str) -> bool:
    """Check if character can continue an identifier: [A-Za-z0-9_]"""
    return ch.isascii() and (ch.isalnum() or ch == "_")


def is_number_start(cursor: Cursor) -> bool:
    """Check for a digit, or '-' immediately followed by a digit."""
    if cursor.is_eof:
        return False
    if cursor.current == "-":
        nxt = cursor.peek(1)
        return nxt is not None and nxt in _ASCII_DIGITS
    return cursor.current in _ASCII_DIGITS


def _found_text(cursor: Cursor) -> str:
    """Extract the offending token at cursor for diagnostics."""
    if cursor.is_eof:
        return ""
    word = scan_word(cursor)
    if word:
        return word
    for op in _OPERATORS:
        if cursor.startswith(op):
            return op
    return cursor.current


def syntax_error(
    cursor: Cursor,
    expected: tuple[str, ...],
    hint: str | None = None,
) -> FuzzSyntaxError:
    """Build a FuzzSyntaxError describing what was found at cursor.

    Callers raise the result: ``raise syntax_error(cursor, ("'{'",))``.

    Args:
        cursor: Position of the offending token (whitespace already skipped)
        expected: Tokens or constructs that would have been accepted
        hint: Optional suggestion for fixing the input

    Returns:
        Exception carrying a Diagnostic and a ParseError
    """
    found = _found_text(cursor)
    span = cursor.span_to(cursor.pos + len(found))
    if cursor.is_eof:
        diagnostic = ErrorTemplate.unexpected_eof(expected, span)
    else:
        diagnostic = ErrorTemplate.unexpected_token(found, expected, span, hint)
    return FuzzSyntaxError(
        diagnostic,
        parse_error=ParseError(diagnostic.message, cursor, expected=expected),
    )


def scan_word(cursor: Cursor) -> str:
    """Return the identifier-shaped word at cursor, or "" if none.

    Does not skip whitespace and never raises.
    """
    if cursor.is_eof or not is_identifier_start(cursor.current):
        return ""
    end = cursor.pos + 1
    source = cursor.source
    while end < len(source) and is_identifier_char(source[end]):
        end += 1
    return cursor.slice_to(end)


def match_keyword(cursor: Cursor, keyword: str) -> Cursor | None:
    """Consume keyword at cursor if present, honoring word boundaries.

    Keywords ending in an identifier character must not be followed by one,
    so ``iffy`` never matches ``if``. Keywords ending in ':' (``gen:``) need
    no boundary.

    Args:
        cursor: Position to test (whitespace is skipped first)
        keyword: Exact keyword text

    Returns:
        Cursor after the keyword, or None if it is not present
    """
    cursor = cursor.skip_whitespace()
    if not cursor.startswith(keyword):
        return None
    after = cursor.advance(len(keyword))
    if is_identifier_char(keyword[-1]) and not after.is_eof and is_identifier_char(after.current):
        return None
    return after


def expect_keyword(cursor: Cursor, keyword: str, hint: str | None = None) -> Cursor:
    """Consume a required keyword or raise FuzzSyntaxError."""
    after = match_keyword(cursor, keyword)
    if after is None:
        raise syntax_error(cursor.skip_whitespace(), (f"'{keyword}'",), hint)
    return after


def expect_char(cursor: Cursor, char: str, hint: str | None = None) -> Cursor:
    """Consume a required punctuation character or raise FuzzSyntaxError."""
    cursor = cursor.skip_whitespace()
    after = cursor.expect(char)
    if after is None:
        raise syntax_error(cursor, (f"'{char}'",), hint)
    return after


def parse_identifier(cursor: Cursor) -> ParseResult[str]:
    """Parse identifier: [A-Za-z][A-Za-z0-9_]*

    Reserved words are not rejected here; see parse_name().

    Raises:
        FuzzSyntaxError: If no identifier starts at cursor
    """
    cursor = cursor.skip_whitespace()
    word = scan_word(cursor)
    if not word:
        raise syntax_error(cursor, ("identifier",))
    return ParseResult(word, cursor.advance(len(word)))


def parse_name(cursor: Cursor, reserved: frozenset[str] = RESERVED_WORDS) -> ParseResult[str]:
    """Parse an identifier that must not be a reserved word.

    Raises:
        FuzzSyntaxError: If no identifier starts at cursor, or it is reserved
    """
    result = parse_identifier(cursor)
    if result.value in reserved:
        start = cursor.skip_whitespace()
        diagnostic = ErrorTemplate.reserved_word(
            result.value, start.span_to(result.cursor.pos)
        )
        raise FuzzSyntaxError(
            diagnostic,
            parse_error=ParseError(diagnostic.message, start, expected=("identifier",)),
        )
    return result


def parse_number(cursor: Cursor) -> ParseResult[str]:
    """Parse numeric literal: -?[0-9]+(\\.[0-9]+)?

    Returns the raw text; callers decide the representation. A '.' that is
    not followed by a digit is left unconsumed.

    Examples:
        42 -> "42"
        -3.14 -> "-3.14"

    Raises:
        FuzzSyntaxError: If no literal starts at cursor
    """
    cursor = cursor.skip_whitespace()
    start = cursor
    if not is_number_start(cursor):
        raise syntax_error(cursor, ("number",))

    if cursor.current == "-":
        cursor = cursor.advance()

    while not cursor.is_eof and cursor.current in _ASCII_DIGITS:
        cursor = cursor.advance()

    nxt = cursor.peek(1)
    if not cursor.is_eof and cursor.current == "." and nxt is not None and nxt in _ASCII_DIGITS:
        cursor = cursor.advance()
        while not cursor.is_eof and cursor.current in _ASCII_DIGITS:
            cursor = cursor.advance()

    return ParseResult(start.slice_to(cursor.pos), cursor)


@dataclass(slots=True)
class ParseContext:
    """Explicit context for parsing operations.

    Replaces global state with explicit parameter passing, keeping every
    parse reentrant and thread-safe.

    Attributes:
        max_nesting_depth: Maximum allowed nesting depth
        current_depth: Current nesting depth (0 = top level)
    """

    max_nesting_depth: int = MAX_DEPTH
    current_depth: int = 0

    def is_depth_exceeded(self) -> bool:
        """Check if maximum nesting depth has been reached."""
        return self.current_depth >= self.max_nesting_depth

    def enter(self, cursor: Cursor) -> "ParseContext":
        """Create new context one level deeper.

        Raises:
            FuzzSyntaxError: If the nesting limit would be exceeded
        """
        if self.is_depth_exceeded():
            cursor = cursor.skip_whitespace()
            diagnostic = ErrorTemplate.nesting_depth_exceeded(
                self.max_nesting_depth, cursor.span_to(cursor.pos)
            )
            raise FuzzSyntaxError(
                diagnostic, parse_error=ParseError(diagnostic.message, cursor)
            )
        return ParseContext(
            max_nesting_depth=self.max_nesting_depth,
            current_depth=self.current_depth + 1,
        )
