"""Program-language AST (Abstract Syntax Tree) node definitions.

Covers declarations (types, variables, functions), statements, and
expressions. Every node is a frozen dataclass; ordered children are tuples
and every compound node exclusively owns its children, so the tree has no
sharing and no cycles.

Variant families (DeclType, Declaration, Expr, Stmt) are ``type`` unions of
tagged dataclasses rather than class hierarchies.

Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass
from typing import TypeIs

from fuzzlang.enums import BinOp, IncludeKind, UOp
from fuzzlang.typesys import EnumValue, Type

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Declaration types
    "BasicType",
    "StructDecl",
    "EnumDecl",
    "StructRef",
    "EnumRef",
    "UDTDecl",
    # Declarations
    "Include",
    "Typedef",
    "UDT",
    "FreeVarDecl",
    "Free",
    "Constrained",
    "FuncDecl",
    "Function",
    # Expressions
    "IConst",
    "FConst",
    "VarRef",
    "Call",
    "Compound",
    "Field",
    # Statements
    "Basic",
    "Assignment",
    "Verify",
    "Constraint",
    "If",
    "While",
    # Root
    "Program",
    # Type aliases
    "DeclType",
    "Declaration",
    "Expr",
    "Stmt",
    "ASTNode",
]

# ============================================================================
# DECLARATION TYPES
# ============================================================================


@dataclass(frozen=True, slots=True)
class BasicType:
    """Fully known type: builtin, or pointer chain ending in one.

    Example:
        pointer char  ->  BasicType(Pointer(Builtin(CHARACTER)))
    """

    ty: Type


@dataclass(frozen=True, slots=True)
class StructDecl:
    """Struct defined inline with its fields.

    Example:
        struct Entry { pointer char key; pointer void value; }
    """

    name: str
    fields: tuple["UDTDecl", ...]

    @staticmethod
    def guard(ty: object) -> TypeIs["StructDecl"]:
        """Type guard for StructDecl."""
        return isinstance(ty, StructDecl)


@dataclass(frozen=True, slots=True)
class EnumDecl:
    """Enum defined inline with its constants.

    Example:
        enum Color { RED = 1, GREEN, }  ->  RED=1, GREEN=0
    """

    name: str
    values: tuple[EnumValue, ...]

    @staticmethod
    def guard(ty: object) -> TypeIs["EnumDecl"]:
        """Type guard for EnumDecl."""
        return isinstance(ty, EnumDecl)


@dataclass(frozen=True, slots=True)
class StructRef:
    """Struct referenced by name only; resolution is the consumer's job."""

    name: str


@dataclass(frozen=True, slots=True)
class EnumRef:
    """Enum referenced by name only; resolution is the consumer's job."""

    name: str


@dataclass(frozen=True, slots=True)
class UDTDecl:
    """One struct field.

    For scalar fields ``name`` is the field name. For ``struct T f;`` and
    ``enum T f;`` fields, ``name`` holds the type name ``T`` and the field
    name ``f`` becomes the reference target:

        struct S { struct Foo bar; }  ->  UDTDecl(name="Foo", ty=StructRef("bar"))
    """

    name: str
    ty: "DeclType"


# ============================================================================
# DECLARATIONS
# ============================================================================


@dataclass(frozen=True, slots=True)
class Include:
    """Header include: #include "local.h" or #include <system.h>"""

    path: str
    kind: IncludeKind


@dataclass(frozen=True, slots=True)
class Typedef:
    """Type alias as a {from, to} pair: typedef pointer char string;"""

    source: "DeclType"
    name: str


@dataclass(frozen=True, slots=True)
class UDT:
    """User-defined type definition (struct or enum)."""

    ty: StructDecl | EnumDecl

    @staticmethod
    def guard(decl: object) -> TypeIs["UDT"]:
        """Type guard for UDT."""
        return isinstance(decl, UDT)


@dataclass(frozen=True, slots=True)
class FreeVarDecl:
    """Free variable fed by a named generator.

    ``genname`` keeps any ``std:`` namespace prefix verbatim.
    """

    name: str
    genname: str
    ty: "DeclType"


@dataclass(frozen=True, slots=True)
class Free:
    """Free variable declaration: var:free x gen:std: g i32"""

    var: FreeVarDecl

    @staticmethod
    def guard(decl: object) -> TypeIs["Free"]:
        """Type guard for Free."""
        return isinstance(decl, Free)


@dataclass(frozen=True, slots=True)
class Constrained:
    """Constrained variable declaration: var:constrained x i32"""

    name: str
    ty: "DeclType"

    @staticmethod
    def guard(decl: object) -> TypeIs["Constrained"]:
        """Type guard for Constrained."""
        return isinstance(decl, Constrained)


@dataclass(frozen=True, slots=True)
class FuncDecl:
    """Function signature; parameters are positional types only."""

    name: str
    retval: "DeclType"
    parameters: tuple["DeclType", ...]


@dataclass(frozen=True, slots=True)
class Function:
    """Function declaration: function:decl f int { usize, pointer char, }"""

    func: FuncDecl

    @staticmethod
    def guard(decl: object) -> TypeIs["Function"]:
        """Type guard for Function."""
        return isinstance(decl, Function)


# ============================================================================
# EXPRESSIONS
# ============================================================================


@dataclass(frozen=True, slots=True)
class IConst:
    """Integer literal, text kept verbatim: -42"""

    text: str


@dataclass(frozen=True, slots=True)
class FConst:
    """Float literal, text kept verbatim: 3.50"""

    text: str


@dataclass(frozen=True, slots=True)
class VarRef:
    """Variable reference with optional unary prefix: x, *x, &x"""

    op: UOp
    name: str


@dataclass(frozen=True, slots=True)
class Call:
    """Function call: function:call f { a b }"""

    name: str
    arguments: tuple["Expr", ...]


@dataclass(frozen=True, slots=True)
class Compound:
    """Binary expression; owns both operands."""

    left: "Expr"
    op: BinOp
    right: "Expr"

    @staticmethod
    def guard(expr: object) -> TypeIs["Compound"]:
        """Type guard for Compound."""
        return isinstance(expr, Compound)


@dataclass(frozen=True, slots=True)
class Field:
    """Field access: object.field"""

    object_name: str
    field_name: str


# ============================================================================
# STATEMENTS
# ============================================================================


@dataclass(frozen=True, slots=True)
class Basic:
    """Bare expression statement."""

    expr: "Expr"


@dataclass(frozen=True, slots=True)
class Assignment:
    """lhs = rhs (no lvalue restriction at parse time)."""

    lhs: "Expr"
    rhs: "Expr"


@dataclass(frozen=True, slots=True)
class Verify:
    """verify:new <expr>"""

    expr: "Expr"


@dataclass(frozen=True, slots=True)
class Constraint:
    """constraint:new <expr>"""

    expr: "Expr"


@dataclass(frozen=True, slots=True)
class If:
    """if ( cond ) { body } - no else branch."""

    condition: "Expr"
    body: tuple["Stmt", ...]


@dataclass(frozen=True, slots=True)
class While:
    """while ( cond ) { body }"""

    condition: "Expr"
    body: tuple["Stmt", ...]


# ============================================================================
# ROOT
# ============================================================================


@dataclass(frozen=True, slots=True)
class Program:
    """Root node: declarations first, then statements."""

    declarations: tuple["Declaration", ...]
    statements: tuple["Stmt", ...]


# ============================================================================
# TYPE ALIASES
# ============================================================================

type DeclType = BasicType | StructDecl | EnumDecl | StructRef | EnumRef
type Declaration = Include | Typedef | UDT | Free | Constrained | Function
type Expr = IConst | FConst | VarRef | Call | Compound | Field
type Stmt = Basic | Assignment | Verify | Constraint | If | While

type ASTNode = (
    Program
    | Include
    | Typedef
    | UDT
    | Free
    | FreeVarDecl
    | Constrained
    | Function
    | FuncDecl
    | BasicType
    | StructDecl
    | EnumDecl
    | StructRef
    | EnumRef
    | UDTDecl
    | EnumValue
    | IConst
    | FConst
    | VarRef
    | Call
    | Compound
    | Field
    | Basic
    | Assignment
    | Verify
    | Constraint
    | If
    | While
)
