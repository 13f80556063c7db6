"""Program-language syntax package.

Provides parser, AST definitions, visitor pattern, serialization, and the
optional type resolver. Separate from the generator language so tools
that only read programs never import it.

Python 3.13+.
"""

from .ast import (
    UDT,
    ASTNode,
    Assignment,
    Basic,
    BasicType,
    Call,
    Compound,
    Constrained,
    Constraint,
    Declaration,
    DeclType,
    EnumDecl,
    EnumRef,
    Expr,
    FConst,
    Field,
    Free,
    FreeVarDecl,
    FuncDecl,
    Function,
    IConst,
    If,
    Include,
    Program,
    Stmt,
    StructDecl,
    StructRef,
    Typedef,
    UDTDecl,
    VarRef,
    Verify,
    While,
)
from .cursor import Cursor, ParseError, ParseResult
from .parser import ProgramParser
from .resolve import TypeTable
from .serializer import ProgramSerializer, SerializationValidationError, serialize_program
from .visitor import ASTTransformer, ASTVisitor

__all__ = [
    "UDT",
    "ASTNode",
    "ASTTransformer",
    "ASTVisitor",
    "Assignment",
    "Basic",
    "BasicType",
    "Call",
    "Compound",
    "Constrained",
    "Constraint",
    "Cursor",
    "DeclType",
    "Declaration",
    "EnumDecl",
    "EnumRef",
    "Expr",
    "FConst",
    "Field",
    "Free",
    "FreeVarDecl",
    "FuncDecl",
    "Function",
    "IConst",
    "If",
    "Include",
    "ParseError",
    "ParseResult",
    "Program",
    "ProgramParser",
    "ProgramSerializer",
    "SerializationValidationError",
    "Stmt",
    "StructDecl",
    "StructRef",
    "TypeTable",
    "Typedef",
    "UDTDecl",
    "VarRef",
    "Verify",
    "While",
    "parse_program",
    "serialize_program",
]


def parse_program(source: str) -> Program:
    """Parse program source into AST.

    Convenience function for ProgramParser.parse().

    Args:
        source: Program source text

    Returns:
        Program with declarations and statements

    Raises:
        FuzzSyntaxError: On the first malformed token

    Example:
        >>> from fuzzlang.syntax import parse_program
        >>> program = parse_program("var:free x gen:std: myGen i32")
        >>> program.declarations[0].var.genname
        'std:myGen'
    """
    parser = ProgramParser()
    return parser.parse(source)
