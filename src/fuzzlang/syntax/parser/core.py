"""Program-language parser orchestration.

This module provides ProgramParser, which drives the declaration,
statement, and expression rules over an immutable cursor and assembles the
resulting :class:`~fuzzlang.syntax.ast.Program`.

Layout:
    A program is a declarations block followed by statements. Declarations
    are read in fixed phases, each a repeated block of one kind:

    1. ``#include`` lines
    2. type declarations (struct, enum, typedef in any order)
    3. variable declarations (var:free, var:constrained)
    4. function declarations (function:decl)

    A declaration written after a later phase has begun raises
    FuzzSyntaxError with DECLARATION_OUT_OF_ORDER, naming both phases.

Error Model:
    The first malformed token aborts the parse with FuzzSyntaxError; no
    partial Program is ever returned.

See Also:
    - :mod:`fuzzlang.syntax.parser.declarations` - Declaration rules
    - :mod:`fuzzlang.syntax.parser.statements` - Statement rules
    - :mod:`fuzzlang.syntax.parser.expressions` - Expression precedence engine
"""

import logging

from fuzzlang.constants import MAX_DEPTH, MAX_SOURCE_SIZE
from fuzzlang.core.depth_guard import depth_clamp
from fuzzlang.diagnostics import ErrorTemplate, FuzzSyntaxError
from fuzzlang.syntax.ast import Declaration, Program, Stmt
from fuzzlang.syntax.cursor import Cursor, ParseError
from fuzzlang.syntax.parser.declarations import (
    parse_function,
    parse_include,
    parse_type_declaration,
    parse_variable,
)
from fuzzlang.syntax.parser.primitives import ParseContext, match_keyword
from fuzzlang.syntax.parser.statements import parse_statement

__all__ = ["ProgramParser"]

logger = logging.getLogger(__name__)

# Python frames one nesting level costs: parse_statement -> _parse_conditional
# -> parse_block for bodies, parse_expression -> parse_primary -> _parse_call
# for calls, plus headroom for the leaf rules below them.
_FRAMES_PER_LEVEL = 4

# (singular, plural) name of each phase, in order.
_PHASES: tuple[tuple[str, str], ...] = (
    ("include", "includes"),
    ("type declaration", "type declarations"),
    ("variable declaration", "variable declarations"),
    ("function declaration", "function declarations"),
    ("statement", "statements"),
)
_STATEMENT_PHASE = 4

_DECLARATION_KEYWORDS: tuple[tuple[str, int], ...] = (
    ("#include", 0),
    ("struct", 1),
    ("enum", 1),
    ("typedef", 1),
    ("var:free", 2),
    ("var:constrained", 2),
    ("function:decl", 3),
)


def _check_phase(cursor: Cursor, reached: int) -> None:
    """Reject a declaration keyword once a later phase has begun.

    Raises:
        FuzzSyntaxError: With DECLARATION_OUT_OF_ORDER
    """
    for keyword, phase in _DECLARATION_KEYWORDS:
        if (after := match_keyword(cursor, keyword)) is None or phase >= reached:
            continue
        start = cursor.skip_whitespace()
        diagnostic = ErrorTemplate.declaration_out_of_order(
            keyword, _PHASES[phase][0], _PHASES[reached][1], start.span_to(after.pos)
        )
        raise FuzzSyntaxError(diagnostic, parse_error=ParseError(diagnostic.message, start))


class ProgramParser:
    """Program-language parser using the immutable cursor pattern.

    Instances hold only their limits and are safe to share across threads.

    Attributes:
        max_source_size: Maximum allowed source size in characters (default: 10 MB)
        max_nesting_depth: Maximum nesting of if/while bodies and call
            arguments (default: 100)
    """

    __slots__ = ("_max_nesting_depth", "_max_source_size")

    def __init__(
        self,
        *,
        max_source_size: int | None = None,
        max_nesting_depth: int | None = None,
    ) -> None:
        """Initialize parser with optional size and nesting depth limits.

        Args:
            max_source_size: Maximum source size (default: 10 MB).
                            Set to 0 to disable the size limit.
            max_nesting_depth: Maximum nesting depth (default: 100).
        """
        self._max_source_size = (
            max_source_size if max_source_size is not None else MAX_SOURCE_SIZE
        )
        self._max_nesting_depth = depth_clamp(
            max_nesting_depth if max_nesting_depth is not None else MAX_DEPTH,
            frames_per_level=_FRAMES_PER_LEVEL,
        )

    @property
    def max_source_size(self) -> int:
        """Maximum allowed source size."""
        return self._max_source_size

    @property
    def max_nesting_depth(self) -> int:
        """Maximum allowed nesting depth."""
        return self._max_nesting_depth

    def parse(self, source: str) -> Program:
        """Parse program source into a Program.

        Args:
            source: Program text

        Returns:
            Program with declarations in phase order and statements in
            source order

        Raises:
            ValueError: If source exceeds max_source_size
            FuzzSyntaxError: On the first malformed token
            ConstantValueError: If an enum value does not fit in i64

        Example:
            >>> program = ProgramParser().parse("var:constrained x i32 x = 1")
            >>> program.declarations[0]
            Constrained(name='x', ty=BasicType(ty=Builtin(native=<Native.I32: 'i32'>)))
        """
        if self._max_source_size > 0 and len(source) > self._max_source_size:
            msg = (
                f"Source size ({len(source):,} characters) exceeds maximum "
                f"({self._max_source_size:,}). "
                "Configure max_source_size in ProgramParser constructor to increase limit."
            )
            raise ValueError(msg)

        logger.debug("Parsing program source (%d characters)", len(source))
        context = ParseContext(max_nesting_depth=self._max_nesting_depth)
        cursor = Cursor(source, 0)
        declarations: list[Declaration] = []
        reached = 0

        while match_keyword(cursor, "#include") is not None:
            include = parse_include(cursor)
            declarations.append(include.value)
            cursor = include.cursor

        while (type_decl := parse_type_declaration(cursor)) is not None:
            declarations.append(type_decl.value)
            cursor = type_decl.cursor
            reached = 1

        while (variable := parse_variable(cursor)) is not None:
            declarations.append(variable.value)
            cursor = variable.cursor
            reached = 2

        while (function := parse_function(cursor)) is not None:
            declarations.append(function.value)
            cursor = function.cursor
            reached = 3

        statements: list[Stmt] = []
        cursor = cursor.skip_whitespace()
        while not cursor.is_eof:
            _check_phase(cursor, reached)
            stmt = parse_statement(cursor, context)
            reached = _STATEMENT_PHASE
            statements.append(stmt.value)
            cursor = stmt.cursor.skip_whitespace()

        logger.debug(
            "Parsed program: %d declarations, %d statements",
            len(declarations),
            len(statements),
        )
        return Program(tuple(declarations), tuple(statements))
