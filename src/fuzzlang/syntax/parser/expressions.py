"""Expression precedence engine for the program language.

Five strictly layered levels, loosest first, each left-associative:

    logical         && ||
    relational      > < == !=      (one flattened level)
    additive        + -
    multiplicative  * / %
    primary         x *x &x op:deref x  42 -1.5  function:call f { ... }  obj.field

All four binary levels are folded by one operator-stack loop, so neither
long chains nor precedence levels grow the Python stack. Only call
arguments recurse: parse_expression -> parse_primary -> _parse_call, three
frames per nesting level counted against ParseContext.max_nesting_depth.

Lexing is maximal-munch: ``a -1`` is the identifier ``a`` followed by the
literal ``-1``, while ``a - 1`` is a subtraction.
"""

from fuzzlang.enums import BinOp, UOp
from fuzzlang.syntax.ast import Call, Compound, Expr, FConst, Field, IConst, VarRef
from fuzzlang.syntax.cursor import Cursor, ParseResult
from fuzzlang.syntax.parser.primitives import (
    ParseContext,
    expect_char,
    is_number_start,
    match_keyword,
    parse_name,
    parse_number,
    scan_word,
    syntax_error,
)

__all__ = ["parse_expression", "parse_primary"]

# Binary operator symbols. Longer symbols come first so "==" is never read
# as "=" and "&&" never as "&".
_BINARY_OPERATORS: tuple[BinOp, ...] = (
    BinOp.LAND,
    BinOp.LOR,
    BinOp.EQUAL,
    BinOp.NOT_EQUAL,
    BinOp.GREATER,
    BinOp.LESS,
    BinOp.ADD,
    BinOp.SUB,
    BinOp.MUL,
    BinOp.DIV,
    BinOp.MOD,
)

# Keyword spellings of the unary prefixes, in match order.
_UNARY_KEYWORDS: tuple[tuple[str, UOp], ...] = (
    ("op:deref", UOp.DEREF),
    ("op:addressof", UOp.ADDRESS_OF),
    ("op:null", UOp.NONE),
    ("op:*", UOp.DEREF),
    ("op:&", UOp.ADDRESS_OF),
)

_PRIMARY_EXPECTED: tuple[str, ...] = ("identifier", "number", "'function:call'", "'*'", "'&'")


def _match_operator(cursor: Cursor) -> ParseResult[BinOp] | None:
    """Match a binary operator at cursor (whitespace skipped).

    A '-' directly followed by a digit is a negative literal, not an operator.
    """
    cursor = cursor.skip_whitespace()
    for op in _BINARY_OPERATORS:
        if not cursor.startswith(op.value):
            continue
        if op is BinOp.SUB and is_number_start(cursor):
            return None
        return ParseResult(op, cursor.advance(len(op.value)))
    return None


def _reduce(operands: list[Expr], operators: list[BinOp]) -> None:
    """Fold the top operator and its two operands into one Compound."""
    right = operands.pop()
    left = operands.pop()
    operands.append(Compound(left, operators.pop(), right))


def parse_expression(cursor: Cursor, context: ParseContext | None = None) -> ParseResult[Expr]:
    """Parse a full expression starting at the logical level.

    Examples:
        a + b * c   -> Compound(a, ADD, Compound(b, MUL, c))
        a - b - c   -> Compound(Compound(a, SUB, b), SUB, c)
        x > 1 == y  -> Compound(Compound(x, GREATER, 1), EQUAL, y)

    Args:
        cursor: Position of the expression
        context: Nesting context (default: fresh top-level context)

    Raises:
        FuzzSyntaxError: On malformed input or excessive call nesting
    """
    if context is None:
        context = ParseContext()

    first = parse_primary(cursor, context)
    operands: list[Expr] = [first.value]
    operators: list[BinOp] = []
    cursor = first.cursor

    while (op := _match_operator(cursor)) is not None:
        # Equal levels reduce first: left associativity.
        while operators and operators[-1].level >= op.value.level:
            _reduce(operands, operators)
        operators.append(op.value)
        operand = parse_primary(op.cursor, context)
        operands.append(operand.value)
        cursor = operand.cursor

    while operators:
        _reduce(operands, operators)

    return ParseResult(operands[0], cursor)


def _parse_call(cursor: Cursor, context: ParseContext) -> ParseResult[Call]:
    """Parse call arguments after 'function:call': <name> { <expr>* }

    Arguments are separated by whitespace only.
    """
    nested = context.enter(cursor)
    name = parse_name(cursor)
    cursor = expect_char(name.cursor, "{")

    arguments: list[Expr] = []
    while not cursor.skip_whitespace().startswith("}"):
        argument = parse_expression(cursor, nested)
        arguments.append(argument.value)
        cursor = argument.cursor

    cursor = expect_char(cursor, "}")
    return ParseResult(Call(name.value, tuple(arguments)), cursor)


def _parse_unary(cursor: Cursor) -> ParseResult[UOp] | None:
    """Match a unary prefix: op:deref op:addressof op:null op:* op:& * &"""
    for keyword, op in _UNARY_KEYWORDS:
        if (after := match_keyword(cursor, keyword)) is not None:
            return ParseResult(op, after)
    if cursor.startswith("*"):
        return ParseResult(UOp.DEREF, cursor.advance())
    if cursor.startswith("&") and not cursor.startswith("&&"):
        return ParseResult(UOp.ADDRESS_OF, cursor.advance())
    return None


def parse_primary(cursor: Cursor, context: ParseContext) -> ParseResult[Expr]:
    """Parse a primary expression.

    Forms:
        42 / -7            IConst (text verbatim)
        3.25 / -0.5        FConst (text verbatim)
        x                  VarRef(NONE, x)
        *x / op:deref x    VarRef(DEREF, x)
        &x / op:addressof x VarRef(ADDRESS_OF, x)
        obj.field          Field
        function:call f { a 1 }  Call
    """
    cursor = cursor.skip_whitespace()

    if is_number_start(cursor):
        number = parse_number(cursor)
        text = number.value
        literal: Expr = FConst(text) if "." in text else IConst(text)
        return ParseResult(literal, number.cursor)

    if (after := match_keyword(cursor, "function:call")) is not None:
        call = _parse_call(after, context)
        return ParseResult(call.value, call.cursor)

    if (unary := _parse_unary(cursor)) is not None:
        name = parse_name(unary.cursor)
        return ParseResult(VarRef(unary.value, name.value), name.cursor)

    if scan_word(cursor):
        name = parse_name(cursor)
        after_name = name.cursor.skip_whitespace()
        if after_name.startswith("."):
            field = parse_name(after_name.advance())
            return ParseResult(Field(name.value, field.value), field.cursor)
        return ParseResult(VarRef(UOp.NONE, name.value), name.cursor)

    raise syntax_error(cursor, _PRIMARY_EXPECTED)
