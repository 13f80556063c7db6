"""Statement rules for the program language.

Statements have no terminator; the next statement simply starts where the
previous expression ends. Forms:

    <expr>                           Basic
    <expr> = <expr>                  Assignment (no lvalue check)
    verify:new <expr>                Verify
    constraint:new <expr>            Constraint
    if ( <expr> ) { <stmt>* }        If (no else branch)
    while ( <expr> ) { <stmt>* }     While

Each if/while body counts one level against ParseContext.max_nesting_depth.
"""

from fuzzlang.syntax.ast import Assignment, Basic, Constraint, If, Stmt, Verify, While
from fuzzlang.syntax.cursor import Cursor, ParseResult
from fuzzlang.syntax.parser.expressions import parse_expression
from fuzzlang.syntax.parser.primitives import ParseContext, expect_char, match_keyword

__all__ = ["parse_block", "parse_statement"]


def parse_block(cursor: Cursor, context: ParseContext) -> ParseResult[tuple[Stmt, ...]]:
    """Parse a braced statement list: { <stmt>* }"""
    nested = context.enter(cursor)
    cursor = expect_char(cursor, "{")

    body: list[Stmt] = []
    while not cursor.skip_whitespace().startswith("}"):
        stmt = parse_statement(cursor, nested)
        body.append(stmt.value)
        cursor = stmt.cursor

    return ParseResult(tuple(body), expect_char(cursor, "}"))


def _parse_conditional(cursor: Cursor, context: ParseContext) -> ParseResult[tuple]:
    """Parse the shared tail of if/while: ( <expr> ) { <stmt>* }"""
    cursor = expect_char(cursor, "(")
    condition = parse_expression(cursor, context)
    cursor = expect_char(condition.cursor, ")")
    body = parse_block(cursor, context)
    return ParseResult((condition.value, body.value), body.cursor)


def parse_statement(cursor: Cursor, context: ParseContext | None = None) -> ParseResult[Stmt]:
    """Parse one statement.

    Args:
        cursor: Position of the statement
        context: Nesting context (default: fresh top-level context)

    Raises:
        FuzzSyntaxError: On malformed input or excessive nesting
    """
    if context is None:
        context = ParseContext()
    cursor = cursor.skip_whitespace()

    if (after := match_keyword(cursor, "verify:new")) is not None:
        expr = parse_expression(after, context)
        return ParseResult(Verify(expr.value), expr.cursor)

    if (after := match_keyword(cursor, "constraint:new")) is not None:
        expr = parse_expression(after, context)
        return ParseResult(Constraint(expr.value), expr.cursor)

    if (after := match_keyword(cursor, "if")) is not None:
        parts = _parse_conditional(after, context)
        condition, body = parts.value
        return ParseResult(If(condition, body), parts.cursor)

    if (after := match_keyword(cursor, "while")) is not None:
        parts = _parse_conditional(after, context)
        condition, body = parts.value
        return ParseResult(While(condition, body), parts.cursor)

    lhs = parse_expression(cursor, context)
    after_lhs = lhs.cursor.skip_whitespace()
    if after_lhs.startswith("=") and not after_lhs.startswith("=="):
        rhs = parse_expression(after_lhs.advance(), context)
        return ParseResult(Assignment(lhs.value, rhs.value), rhs.cursor)

    return ParseResult(Basic(lhs.value), lhs.cursor)
