"""Generator-language parser and expression engine.

Grammar:
    file       := generator+
    generator  := "generator" name type ("state" expression)+
    name       := "std:" word+ | alpha word*
    type       := I8 I16 I32 I64 U8 U16 U32 U64 (upper- or lower-case spelling)
    term       := type ":" "constant" "(" int ")"
                | "string" ":" "constant" "(" int ")"
                | type ":" "min" "(" ")"
                | type ":" "max" "(" ")"
                | type ":" "random" "(" expression "," expression ")"
    int        := "-"? digits          (whitespace may follow the sign)

Arithmetic:
    ArithmeticPrecedence.FLAT (default) reads ``+ - * / %`` as one
    left-associative level, so ``a + b * c`` is ``(a + b) * c``.
    ArithmeticPrecedence.CONVENTIONAL binds ``* / %`` tighter.

Constants:
    The literal is folded as a signed 64-bit integer. Signed types keep it;
    unsigned types take its two's-complement u64 reinterpretation, so
    ``U64:constant(-1)`` is Unsigned(18446744073709551615). The ``string``
    type token yields StringConstant("string") whatever the argument.
"""

import logging
from collections.abc import Callable

from fuzzlang.constants import INT64_MAX, INT64_MIN, MAX_DEPTH, MAX_SOURCE_SIZE, UINT64_MAX
from fuzzlang.diagnostics import (
    ConstantValueError,
    ErrorTemplate,
    FuzzSyntaxError,
    SourceSpan,
    UnknownTypeError,
    UnsupportedConstantTypeError,
)
from fuzzlang.enums import ArithmeticPrecedence, BinOp
from fuzzlang.syntax.cursor import Cursor, ParseError, ParseResult
from fuzzlang.syntax.parser.primitives import (
    ParseContext,
    expect_char,
    expect_keyword,
    is_identifier_char,
    is_identifier_start,
    match_keyword,
    scan_word,
    syntax_error,
)
from fuzzlang.typesys import GENERATOR_TYPE_NAMES, Builtin, Type, type_name

from .ast import (
    Constant,
    ConstExpr,
    Expression,
    GenCompound,
    MaxExpr,
    MinExpr,
    RandomExpr,
    Signed,
    StringConstant,
    Unsigned,
    UserGen,
)

__all__ = [
    "RESERVED_NAMES",
    "STRING_TYPE_TOKEN",
    "GeneratorParser",
    "constant_for_type",
    "parse_generators",
]

logger = logging.getLogger(__name__)

_ASCII_DIGITS: str = "0123456789"

# Type token accepted only in front of ":constant(...)".
STRING_TYPE_TOKEN: str = "string"

_ALL_OPERATORS: tuple[BinOp, ...] = (BinOp.ADD, BinOp.SUB, BinOp.MUL, BinOp.DIV, BinOp.MOD)
_ADDITIVE: tuple[BinOp, ...] = (BinOp.ADD, BinOp.SUB)
_MULTIPLICATIVE: tuple[BinOp, ...] = (BinOp.MUL, BinOp.DIV, BinOp.MOD)

# Words that lex as keywords or type tokens and so cannot name a generator.
RESERVED_NAMES: frozenset[str] = frozenset(
    {"generator", "state", "constant", "min", "max", "random", STRING_TYPE_TOKEN}
) | frozenset(GENERATOR_TYPE_NAMES)

type _Operand = Callable[[Cursor, ParseContext], ParseResult[Expression]]


def constant_for_type(ty: Type, value: int, *, span: SourceSpan | None = None) -> Constant:
    """Build the Constant a type token selects for an i64 literal value.

    Signed kinds (including ``int``) give Signed; unsigned kinds (including
    ``usize``) give Unsigned holding the u64 reinterpretation.

    Example:
        >>> from fuzzlang.enums import Native
        >>> constant_for_type(Builtin(Native.U8), 200)
        Unsigned(value=200)
        >>> constant_for_type(Builtin(Native.U64), -1)
        Unsigned(value=18446744073709551615)

    Raises:
        UnsupportedConstantTypeError: For void, char, pointers, structs, enums
    """
    match ty:
        case Builtin(native=native) if native.is_signed:
            return Signed(value)
        case Builtin(native=native) if native.is_unsigned:
            return Unsigned(value & UINT64_MAX)
        case _:
            raise UnsupportedConstantTypeError(
                ErrorTemplate.unsupported_constant_type(type_name(ty), span)
            )


def _parse_type_token(cursor: Cursor) -> ParseResult[Type]:
    """Parse a generator type token: I32, i32, U8, ...

    Raises:
        FuzzSyntaxError: If no word starts at cursor
        UnknownTypeError: If the word is not a generator type token
    """
    cursor = cursor.skip_whitespace()
    word = scan_word(cursor)
    if not word:
        raise syntax_error(cursor, ("type",))
    after = cursor.advance(len(word))
    native = GENERATOR_TYPE_NAMES.get(word)
    if native is None:
        raise UnknownTypeError(ErrorTemplate.unknown_type(word, cursor.span_to(after.pos)))
    return ParseResult(Builtin(native), after)


def _parse_int_literal(cursor: Cursor) -> ParseResult[int]:
    """Parse ``-``? digits as a signed 64-bit value.

    Raises:
        FuzzSyntaxError: If no digits follow
        ConstantValueError: If the digits run into other word characters,
            or the value does not fit in i64
    """
    cursor = cursor.skip_whitespace()
    start = cursor
    negative = False
    if cursor.startswith("-"):
        negative = True
        cursor = cursor.advance().skip_whitespace()

    digits_start = cursor
    while not cursor.is_eof and cursor.current in _ASCII_DIGITS:
        cursor = cursor.advance()
    digits = digits_start.slice_to(cursor.pos)
    if not digits:
        raise syntax_error(cursor, ("digits",))

    if not cursor.is_eof and (is_identifier_char(cursor.current) or cursor.current == "."):
        end = cursor
        while not end.is_eof and (is_identifier_char(end.current) or end.current == "."):
            end = end.advance()
        text = start.slice_to(end.pos)
        raise ConstantValueError(ErrorTemplate.constant_malformed(text, start.span_to(end.pos)))

    value = -int(digits) if negative else int(digits)
    if not INT64_MIN <= value <= INT64_MAX:
        text = start.slice_to(cursor.pos)
        raise ConstantValueError(
            ErrorTemplate.constant_out_of_range(text, start.span_to(cursor.pos))
        )
    return ParseResult(value, cursor)


def _parse_generator_name(cursor: Cursor) -> ParseResult[str]:
    """Parse ``std:`` word+ or alpha word*; the text is kept verbatim."""
    cursor = cursor.skip_whitespace()
    if cursor.startswith("std:"):
        end = cursor.advance(4)
        while not end.is_eof and is_identifier_char(end.current):
            end = end.advance()
        if end.pos == cursor.pos + 4:
            raise syntax_error(end, ("generator name",))
        return ParseResult(cursor.slice_to(end.pos), end)

    if cursor.is_eof or not is_identifier_start(cursor.current):
        raise syntax_error(cursor, ("generator name",))
    word = scan_word(cursor)
    if word in RESERVED_NAMES:
        diagnostic = ErrorTemplate.reserved_word(word, cursor.span_to(cursor.pos + len(word)))
        raise FuzzSyntaxError(
            diagnostic,
            parse_error=ParseError(diagnostic.message, cursor, expected=("generator name",)),
        )
    return ParseResult(word, cursor.advance(len(word)))


class GeneratorParser:
    """Generator-language parser using the immutable cursor pattern.

    Instances hold only their configuration and are safe to share across
    threads.

    Attributes:
        max_source_size: Maximum allowed source size in characters (default: 10 MB)
        max_nesting_depth: Maximum nesting of random() bounds (default: 100)
        precedence: Arithmetic precedence model (default: FLAT)
    """

    __slots__ = ("_max_nesting_depth", "_max_source_size", "_precedence")

    def __init__(
        self,
        *,
        max_source_size: int | None = None,
        max_nesting_depth: int | None = None,
        precedence: ArithmeticPrecedence = ArithmeticPrecedence.FLAT,
    ) -> None:
        """Initialize parser.

        Args:
            max_source_size: Maximum source size (default: 10 MB).
                            Set to 0 to disable the size limit.
            max_nesting_depth: Maximum nesting depth (default: 100).
            precedence: FLAT reproduces the single-level arithmetic of the
                generator grammar; CONVENTIONAL binds * / % tighter.
        """
        self._max_source_size = (
            max_source_size if max_source_size is not None else MAX_SOURCE_SIZE
        )
        self._max_nesting_depth = (
            max_nesting_depth if max_nesting_depth is not None else MAX_DEPTH
        )
        self._precedence = ArithmeticPrecedence(precedence)

    @property
    def max_source_size(self) -> int:
        """Maximum allowed source size."""
        return self._max_source_size

    @property
    def max_nesting_depth(self) -> int:
        """Maximum allowed nesting depth."""
        return self._max_nesting_depth

    @property
    def precedence(self) -> ArithmeticPrecedence:
        """Arithmetic precedence model."""
        return self._precedence

    def parse(self, source: str) -> tuple[UserGen, ...]:
        """Parse generator source into one or more UserGen values.

        Args:
            source: Generator text

        Returns:
            Generators in source order

        Raises:
            ValueError: If source exceeds max_source_size
            FuzzSyntaxError: On malformed input, including no generators at all
            UnknownTypeError: On an unrecognized type token
            ConstantValueError: On a malformed or out-of-range integer literal

        Example:
            >>> GeneratorParser().parse("generator g I32 state I32:constant(5)")
            (UserGen(result_type=Builtin(native=<Native.I32: 'i32'>), name='g', states=(ConstExpr(value=Signed(value=5)),)),)
        """
        if self._max_source_size > 0 and len(source) > self._max_source_size:
            msg = (
                f"Source size ({len(source):,} characters) exceeds maximum "
                f"({self._max_source_size:,}). "
                "Configure max_source_size in GeneratorParser constructor to increase limit."
            )
            raise ValueError(msg)

        logger.debug(
            "Parsing generator source (%d characters, %s precedence)",
            len(source),
            self._precedence,
        )
        context = ParseContext(max_nesting_depth=self._max_nesting_depth)
        cursor = Cursor(source, 0)

        generators: list[UserGen] = []
        while True:
            generator = self._parse_generator(cursor, context)
            generators.append(generator.value)
            cursor = generator.cursor.skip_whitespace()
            if cursor.is_eof:
                break

        logger.debug("Parsed %d generators", len(generators))
        return tuple(generators)

    def _parse_generator(self, cursor: Cursor, context: ParseContext) -> ParseResult[UserGen]:
        """Parse: generator <name> <Type> (state <expression>)+"""
        cursor = expect_keyword(cursor, "generator")
        name = _parse_generator_name(cursor)
        result_type = _parse_type_token(name.cursor)
        cursor = result_type.cursor

        states: list[Expression] = []
        while (after := match_keyword(cursor, "state")) is not None:
            state = self._parse_expression(after, context)
            states.append(state.value)
            cursor = state.cursor

        if not states:
            at = cursor.skip_whitespace()
            diagnostic = ErrorTemplate.empty_generator(name.value, at.span_to(at.pos))
            raise FuzzSyntaxError(
                diagnostic,
                parse_error=ParseError(diagnostic.message, at, expected=("state",)),
            )
        return ParseResult(UserGen(result_type.value, name.value, tuple(states)), cursor)

    def _parse_expression(self, cursor: Cursor, context: ParseContext) -> ParseResult[Expression]:
        """Parse an arithmetic expression under the configured precedence."""
        if self._precedence is ArithmeticPrecedence.FLAT:
            return self._parse_chain(cursor, context, _ALL_OPERATORS, self._parse_term)
        return self._parse_chain(cursor, context, _ADDITIVE, self._parse_multiplicative)

    def _parse_multiplicative(
        self, cursor: Cursor, context: ParseContext
    ) -> ParseResult[Expression]:
        return self._parse_chain(cursor, context, _MULTIPLICATIVE, self._parse_term)

    @staticmethod
    def _parse_chain(
        cursor: Cursor,
        context: ParseContext,
        operators: tuple[BinOp, ...],
        operand: _Operand,
    ) -> ParseResult[Expression]:
        """Parse ``operand (op operand)*`` and fold it to the left."""
        result = operand(cursor, context)
        left, cursor = result.value, result.cursor

        while True:
            at = cursor.skip_whitespace()
            op = next((op for op in operators if at.startswith(op.value)), None)
            if op is None:
                break
            right = operand(at.advance(len(op.value)), context)
            left = GenCompound(left, op, right.value)
            cursor = right.cursor

        return ParseResult(left, cursor)

    def _parse_term(self, cursor: Cursor, context: ParseContext) -> ParseResult[Expression]:
        """Parse one typed term: <Type>:constant|min|max|random(...)"""
        cursor = cursor.skip_whitespace()

        if (after := match_keyword(cursor, STRING_TYPE_TOKEN)) is not None:
            after_colon = expect_char(after, ":")
            constant_keyword = match_keyword(after_colon, "constant")
            if constant_keyword is None:
                raise UnknownTypeError(
                    ErrorTemplate.unknown_type(STRING_TYPE_TOKEN, cursor.span_to(after.pos))
                )
            literal = _parse_int_literal(expect_char(constant_keyword, "("))
            end = expect_char(literal.cursor, ")")
            return ParseResult(ConstExpr(StringConstant(STRING_TYPE_TOKEN)), end)

        token = _parse_type_token(cursor)
        ty = token.value
        type_span = cursor.span_to(token.cursor.pos)
        cursor = expect_char(token.cursor, ":")

        if (after := match_keyword(cursor, "constant")) is not None:
            literal = _parse_int_literal(expect_char(after, "("))
            cursor = expect_char(literal.cursor, ")")
            constant = constant_for_type(ty, literal.value, span=type_span)
            return ParseResult(ConstExpr(constant), cursor)

        if (after := match_keyword(cursor, "min")) is not None:
            cursor = expect_char(expect_char(after, "("), ")")
            return ParseResult(MinExpr(ty), cursor)

        if (after := match_keyword(cursor, "max")) is not None:
            cursor = expect_char(expect_char(after, "("), ")")
            return ParseResult(MaxExpr(ty), cursor)

        if (after := match_keyword(cursor, "random")) is not None:
            nested = context.enter(after)
            low = self._parse_expression(expect_char(after, "("), nested)
            high = self._parse_expression(expect_char(low.cursor, ","), nested)
            cursor = expect_char(high.cursor, ")")
            return ParseResult(RandomExpr(ty, low.value, high.value), cursor)

        raise syntax_error(
            cursor.skip_whitespace(), ("'constant'", "'min'", "'max'", "'random'")
        )


def parse_generators(
    source: str,
    *,
    precedence: ArithmeticPrecedence = ArithmeticPrecedence.FLAT,
) -> tuple[UserGen, ...]:
    """Parse generator source into UserGen values.

    Convenience function for GeneratorParser.parse().

    Example:
        >>> gens = parse_generators("generator g U8 state U8:constant(200)")
        >>> gens[0].states[0]
        ConstExpr(value=Unsigned(value=200))
    """
    return GeneratorParser(precedence=precedence).parse(source)
