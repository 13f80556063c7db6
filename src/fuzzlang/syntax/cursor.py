"""Immutable cursor infrastructure for type-safe parsing.

Implements the immutable cursor pattern shared by the program-language and
generator-language parsers.
Python 3.13+. Zero external dependencies.

Design Philosophy:
    - Cursor is immutable (frozen dataclass)
    - EOF is a state (is_eof), not a return value
    - Every advance() returns NEW cursor (prevents infinite loops)
    - Line:column computed on-demand (O(n) only for errors)

Line Ending Support:
    LF and CRLF are supported; ``\\n`` is the line delimiter for positions.
"""

from dataclasses import dataclass, field

from fuzzlang.diagnostics import SourceSpan

__all__ = ["WHITESPACE", "Cursor", "ParseError", "ParseResult"]

# Token separators in both languages.
WHITESPACE: frozenset[str] = frozenset({" ", "\t", "\n", "\r"})


@dataclass(frozen=True, slots=True)
class Cursor:
    """Immutable source position tracker.

    Example:
        >>> cursor = Cursor("struct", 0)
        >>> cursor.current
        's'
        >>> cursor.advance().current
        't'
        >>> cursor.current  # Original unchanged (immutability)
        's'
        >>> Cursor("hi", 2).is_eof
        True
    """

    source: str
    pos: int

    @property
    def is_eof(self) -> bool:
        """Check if at end of input."""
        return self.pos >= len(self.source)

    @property
    def current(self) -> str:
        """Get current character.

        Raises:
            EOFError: If at end of input

        Use ``is_eof`` in loops: ``while not cursor.is_eof:``
        """
        if self.is_eof:
            msg = f"Unexpected EOF at position {self.pos}"
            raise EOFError(msg)
        return self.source[self.pos]

    def peek(self, offset: int = 0) -> str | None:
        """Peek at character with offset without advancing.

        Returns:
            Character at position + offset, or None if beyond EOF
        """
        target_pos = self.pos + offset
        if target_pos >= len(self.source):
            return None
        return self.source[target_pos]

    def advance(self, count: int = 1) -> "Cursor":
        """Return new cursor advanced by count positions (clamped at EOF).

        Example:
            >>> cursor = Cursor("hello", 0)
            >>> cursor.advance(2).pos
            2
            >>> cursor.advance(99).pos
            5
        """
        new_pos = min(self.pos + count, len(self.source))
        return Cursor(self.source, new_pos)

    def slice_to(self, end_pos: int) -> str:
        """Extract source slice from current position to end_pos (exclusive)."""
        return self.source[self.pos : end_pos]

    def slice_ahead(self, n: int) -> str:
        """Get next n characters without advancing cursor."""
        return self.source[self.pos : self.pos + n]

    def startswith(self, text: str) -> bool:
        """Check whether the remaining source starts with text."""
        return self.source.startswith(text, self.pos)

    def skip_whitespace(self) -> "Cursor":
        """Skip spaces, tabs, and line endings.

        Example:
            >>> Cursor("  \\n\\t x", 0).skip_whitespace().pos
            5
        """
        c = self
        while not c.is_eof and c.current in WHITESPACE:
            c = c.advance()
        return c

    def expect(self, char: str) -> "Cursor | None":
        """Consume character if it matches expected, return None otherwise.

        Example:
            >>> Cursor("{", 0).expect("{").pos
            1
            >>> Cursor("}", 0).expect("{") is None
            True
        """
        if not self.is_eof and self.current == char:
            return self.advance()
        return None

    def compute_line_col(self) -> tuple[int, int]:
        """Compute line and column for current position (1-indexed).

        O(n) in the position: only call for error reporting.

        Example:
            >>> Cursor("a\\nbc", 3).compute_line_col()
            (2, 2)
        """
        line = self.source.count("\n", 0, self.pos) + 1
        last_newline = self.source.rfind("\n", 0, self.pos)
        col = self.pos - last_newline if last_newline >= 0 else self.pos + 1
        return (line, col)

    def span_to(self, end_pos: int) -> SourceSpan:
        """Build a SourceSpan from the current position to end_pos."""
        line, col = self.compute_line_col()
        return SourceSpan(start=self.pos, end=max(end_pos, self.pos), line=line, column=col)


@dataclass(frozen=True, slots=True)
class ParseResult[T]:
    """Parser result containing parsed value and new cursor position.

    Every rule has the signature ``parse_foo(cursor, ...) -> ParseResult[Foo]``
    and raises FuzzSyntaxError on failure.

    Example:
        >>> cursor = Cursor("x", 0)
        >>> result = ParseResult("x", cursor.advance())
        >>> result.value, result.cursor.pos
        ('x', 1)
    """

    value: T
    cursor: Cursor


@dataclass(frozen=True, slots=True)
class ParseError:
    """Parse error with location and context.

    Example:
        >>> cursor = Cursor("struct {", 7)
        >>> error = ParseError("Expected identifier", cursor, expected=("identifier", "'{'"))
        >>> error.format_error()
        "1:8: Expected identifier (expected: identifier, '{')"
    """

    message: str
    cursor: Cursor
    expected: tuple[str, ...] = field(default_factory=tuple)

    def format_error(self) -> str:
        """Format error with line:column."""
        line, col = self.cursor.compute_line_col()
        error_msg = f"{line}:{col}: {self.message}"

        if self.expected:
            expected_str = ", ".join(self.expected)
            error_msg += f" (expected: {expected_str})"

        return error_msg

    def format_with_context(self, context_lines: int = 2) -> str:
        """Format error with source context and a caret at the error location.

        Example:
            >>> source = "struct A { }\\nstruct { }"
            >>> error = ParseError("Expected identifier", Cursor(source, 20))
            >>> print(error.format_with_context())
            2:8: Expected identifier
            <BLANKLINE>
               1 | struct A { }
               2 | struct { }
                 |        ^
        """
        line, col = self.cursor.compute_line_col()
        lines = self.cursor.source.split("\n")

        result_lines = [self.format_error(), ""]

        start_line = max(1, line - context_lines)
        end_line = min(len(lines), line + context_lines)

        for i in range(start_line, end_line + 1):
            line_num_str = f"{i:4} | "
            result_lines.append(line_num_str + lines[i - 1])

            if i == line:
                pointer = " " * (len(line_num_str) - 2) + "| " + " " * (col - 1) + "^"
                result_lines.append(pointer)

        return "\n".join(result_lines)
