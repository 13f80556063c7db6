"""Serialize program AST back to program-language source.

Converts AST nodes to source text. Useful for:
- Formatters
- Code generators feeding the fuzzing engine
- Property-based testing (roundtrip: parse -> serialize -> parse)

The program language has no grouping parentheses, so some trees built by
hand have no spelling: a Compound whose right operand binds no tighter
than its operator, an inline struct in a variable declaration, a pointer
to a defined (non-forward) struct. Those raise SerializationValidationError
instead of producing text that would re-parse differently.

Unary prefixes are always written as keywords (``op:deref x``) so a
statement ending in an identifier can never absorb a following ``*x``.

Python 3.13+.
"""

import re

from fuzzlang.core.depth_guard import DepthGuard
from fuzzlang.diagnostics import SerializationValidationError
from fuzzlang.enums import BinOp, IncludeKind, UOp
from fuzzlang.syntax.parser.primitives import RESERVED_WORDS
from fuzzlang.typesys import Builtin, Enum, Pointer, Struct, Type

from .ast import (
    UDT,
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

__all__ = ["ProgramSerializer", "SerializationValidationError", "serialize_program"]

_IDENTIFIER = re.compile(r"[A-Za-z][A-Za-z0-9_]*")
_INTEGER = re.compile(r"-?[0-9]+")
_FLOAT = re.compile(r"-?[0-9]+\.[0-9]+")

_INDENT: str = "    "

# Unary prefixes are spelled with keywords; NONE has no prefix at all.
_UNARY_PREFIX: dict[UOp, str] = {
    UOp.NONE: "",
    UOp.DEREF: "op:deref ",
    UOp.ADDRESS_OF: "op:addressof ",
}


def _declaration_phase(decl: Declaration) -> int:
    """Phase index of a declaration: includes, types, variables, functions."""
    match decl:
        case Include():
            return 0
        case UDT() | Typedef():
            return 1
        case Free() | Constrained():
            return 2
        case Function():
            return 3


def _check_name(name: str, context: str) -> None:
    """Require a well-formed, non-reserved identifier."""
    if not _IDENTIFIER.fullmatch(name) or name in RESERVED_WORDS:
        msg = f"Invalid identifier {name!r} in {context}"
        raise SerializationValidationError(msg)


def _check_genname(genname: str, context: str) -> None:
    """Require ``name`` or ``std:name``."""
    _check_name(genname.removeprefix("std:"), context)


def _validate_program(program: Program) -> None:
    """Validate names and literal text throughout a Program.

    Structural problems (operand nesting, misplaced type definitions) are
    always rejected during serialization; this pass adds the lexical checks.

    Raises:
        SerializationValidationError: If validation fails
    """
    for decl in program.declarations:
        match decl:
            case Include(path=path):
                if "\n" in path:
                    msg = f"Include path {path!r} spans lines"
                    raise SerializationValidationError(msg)
            case Typedef(source=source, name=name):
                _check_name(name, "typedef")
                _validate_decl_type(source, f"typedef '{name}'")
            case UDT(ty=StructDecl(name=name, fields=fields)):
                _check_name(name, "struct declaration")
                for field in fields:
                    _check_name(field.name, f"struct '{name}'")
                    _validate_decl_type(field.ty, f"struct '{name}'")
            case UDT(ty=EnumDecl(name=name, values=values)):
                _check_name(name, "enum declaration")
                for value in values:
                    _check_name(value.name, f"enum '{name}'")
            case Free(var=var):
                _check_name(var.name, "var:free")
                _check_genname(var.genname, f"var:free '{var.name}'")
                _validate_decl_type(var.ty, f"var:free '{var.name}'")
            case Constrained(name=name, ty=ty):
                _check_name(name, "var:constrained")
                _validate_decl_type(ty, f"var:constrained '{name}'")
            case Function(func=func):
                _check_name(func.name, "function:decl")
                _validate_decl_type(func.retval, f"function '{func.name}'")
                for param in func.parameters:
                    _validate_decl_type(param, f"function '{func.name}'")

    pending: list[Stmt | Expr] = list(program.statements)
    while pending:
        node = pending.pop()
        match node:
            case Basic(expr=expr) | Verify(expr=expr) | Constraint(expr=expr):
                pending.append(expr)
            case Assignment(lhs=lhs, rhs=rhs):
                pending.extend((lhs, rhs))
            case If(condition=condition, body=body) | While(condition=condition, body=body):
                pending.append(condition)
                pending.extend(body)
            case Compound(left=left, right=right):
                pending.extend((left, right))
            case Call(name=name, arguments=arguments):
                _check_name(name, "function:call")
                pending.extend(arguments)
            case VarRef(name=name):
                _check_name(name, "variable reference")
            case Field(object_name=object_name, field_name=field_name):
                _check_name(object_name, "field access")
                _check_name(field_name, "field access")
            case IConst(text=text):
                if not _INTEGER.fullmatch(text):
                    msg = f"Invalid integer literal {text!r}"
                    raise SerializationValidationError(msg)
            case FConst(text=text):
                if not _FLOAT.fullmatch(text):
                    msg = f"Invalid float literal {text!r}"
                    raise SerializationValidationError(msg)


def _validate_decl_type(ty: DeclType, context: str) -> None:
    """Check names inside a type reference."""
    match ty:
        case StructRef(name=name) | EnumRef(name=name):
            _check_name(name, context)
        case BasicType(ty=inner):
            while isinstance(inner, Pointer):
                inner = inner.target
            if isinstance(inner, Struct | Enum):
                _check_name(inner.name, context)
        case _:
            pass  # Inline definitions are rejected during serialization


class ProgramSerializer:
    """Converts a Program AST back to program-language source.

    Thread-safe serializer with no mutable instance state.
    All serialization state is local to the serialize() call.

    Usage:
        >>> from fuzzlang import parse_program
        >>> program = parse_program("var:constrained x i32 x = a + 1")
        >>> print(ProgramSerializer().serialize(program), end="")
        var:constrained x i32
        x = a + 1
    """

    __slots__ = ("_max_depth",)

    def __init__(self, *, max_depth: int | None = None) -> None:
        """Initialize serializer.

        Args:
            max_depth: Maximum nesting of calls, operands and bodies
                (default: MAX_DEPTH)
        """
        self._max_depth = max_depth

    def serialize(self, program: Program, *, validate: bool = False) -> str:
        """Serialize Program to source string.

        Args:
            program: Program AST node
            validate: If True, also check identifiers and literal text
                (default: False)

        Returns:
            Source text, one declaration or statement per line

        Raises:
            SerializationValidationError: If the AST has no surface spelling
            DepthLimitExceededError: If nesting exceeds max_depth
        """
        if validate:
            _validate_program(program)

        guard = DepthGuard() if self._max_depth is None else DepthGuard(max_depth=self._max_depth)
        output: list[str] = []
        self._serialize_declarations(program.declarations, output)
        for stmt in program.statements:
            self._serialize_statement(stmt, output, guard, "")
        return "".join(output)

    def _serialize_declarations(
        self, declarations: tuple[Declaration, ...], output: list[str]
    ) -> None:
        """Serialize declarations, enforcing phase order."""
        phase = 0
        for decl in declarations:
            decl_phase = _declaration_phase(decl)
            if decl_phase < phase:
                msg = (
                    f"{type(decl).__name__} declaration after a later phase; "
                    "order must be includes, types, variables, functions"
                )
                raise SerializationValidationError(msg)
            phase = decl_phase
            self._serialize_declaration(decl, output)
            output.append("\n")

    def _serialize_declaration(self, decl: Declaration, output: list[str]) -> None:
        """Serialize one declaration (without trailing newline)."""
        match decl:
            case Include(path=path, kind=IncludeKind.LOCAL):
                if '"' in path:
                    msg = f"Local include path {path!r} contains '\"'"
                    raise SerializationValidationError(msg)
                output.append(f'#include "{path}"')
            case Include(path=path, kind=IncludeKind.SYSTEM):
                if ">" in path:
                    msg = f"System include path {path!r} contains '>'"
                    raise SerializationValidationError(msg)
                output.append(f"#include <{path}>")
            case Typedef(source=source, name=name):
                output.append(f"typedef {self._type_ref(source)} {name};")
            case UDT(ty=StructDecl() as struct):
                self._serialize_struct(struct, output)
            case UDT(ty=EnumDecl(name=name, values=values)):
                output.append(f"enum {name} {{")
                for value in values:
                    output.append(f" {value.name} = {value.value},")
                output.append(" }")
            case Free(var=var):
                if var.genname.startswith("std:"):
                    gen = f"gen:std: {var.genname.removeprefix('std:')}"
                else:
                    gen = f"gen: {var.genname}"
                output.append(f"var:free {var.name} {gen} {self._type_ref(var.ty)}")
            case Constrained(name=name, ty=ty):
                output.append(f"var:constrained {name} {self._type_ref(ty)}")
            case Function(func=func):
                output.append(f"function:decl {func.name} {self._type_ref(func.retval)} {{")
                for param in func.parameters:
                    output.append(f" {self._type_ref(param)},")
                output.append(" }")

    def _serialize_struct(self, struct: StructDecl, output: list[str]) -> None:
        """Serialize struct declaration, one field per line."""
        if not struct.fields:
            output.append(f"struct {struct.name} {{ }}")
            return
        output.append(f"struct {struct.name} {{\n")
        for field in struct.fields:
            output.append(f"{_INDENT}{self._struct_field(field, struct.name)};\n")
        output.append("}")

    @staticmethod
    def _struct_field(field: UDTDecl, struct_name: str) -> str:
        """Spell one field; only the four field forms exist."""
        match field.ty:
            case BasicType(ty=Builtin(native=native)):
                return f"{native.value} {field.name}"
            case BasicType(ty=Pointer(target=Builtin(native=native))):
                return f"pointer {native.value} {field.name}"
            case StructRef(name=ref):
                return f"struct {field.name} {ref}"
            case EnumRef(name=ref):
                return f"enum {field.name} {ref}"
            case _:
                msg = f"Field '{field.name}' of struct '{struct_name}' has no field spelling"
                raise SerializationValidationError(msg)

    def _type_ref(self, ty: DeclType) -> str:
        """Spell a type reference."""
        match ty:
            case StructRef(name=name):
                return f"struct {name}"
            case EnumRef(name=name):
                return f"enum {name}"
            case BasicType(ty=inner):
                return self._basic_type(inner)
            case StructDecl(name=name) | EnumDecl(name=name):
                msg = f"Inline definition of '{name}' is not allowed in a type reference"
                raise SerializationValidationError(msg)

    @staticmethod
    def _basic_type(ty: Type) -> str:
        """Spell a resolved Type: builtins and pointer chains.

        Named types are only spellable as forward targets of a pointer.
        """
        parts: list[str] = []
        while isinstance(ty, Pointer):
            parts.append("pointer ")
            ty = ty.target
        match ty:
            case Builtin(native=native):
                parts.append(native.value)
            case Struct(name=name, forward=True) if parts:
                parts.append(f"struct {name}")
            case Enum(name=name, forward=True) if parts:
                parts.append(f"enum {name}")
            case _:
                msg = f"Type {ty!r} has no type-reference spelling"
                raise SerializationValidationError(msg)
        return "".join(parts)

    def _serialize_statement(
        self, stmt: Stmt, output: list[str], guard: DepthGuard, indent: str
    ) -> None:
        """Serialize one statement at the given indentation, with newline."""
        output.append(indent)
        match stmt:
            case Basic(expr=expr):
                self._serialize_expression(expr, output, guard)
            case Assignment(lhs=lhs, rhs=rhs):
                self._serialize_expression(lhs, output, guard)
                output.append(" = ")
                self._serialize_expression(rhs, output, guard)
            case Verify(expr=expr):
                output.append("verify:new ")
                self._serialize_expression(expr, output, guard)
            case Constraint(expr=expr):
                output.append("constraint:new ")
                self._serialize_expression(expr, output, guard)
            case If(condition=condition, body=body):
                output.append("if ( ")
                self._serialize_expression(condition, output, guard)
                output.append(" )")
                self._serialize_body(body, output, guard, indent)
            case While(condition=condition, body=body):
                output.append("while ( ")
                self._serialize_expression(condition, output, guard)
                output.append(" )")
                self._serialize_body(body, output, guard, indent)
        output.append("\n")

    def _serialize_body(
        self, body: tuple[Stmt, ...], output: list[str], guard: DepthGuard, indent: str
    ) -> None:
        """Serialize a braced statement body."""
        if not body:
            output.append(" { }")
            return
        output.append(" {\n")
        with guard:
            for stmt in body:
                self._serialize_statement(stmt, output, guard, indent + _INDENT)
        output.append(f"{indent}}}")

    def _serialize_expression(self, expr: Expr, output: list[str], guard: DepthGuard) -> None:
        """Serialize Expr nodes using structural pattern matching."""
        match expr:
            case IConst(text=text) | FConst(text=text):
                output.append(text)
            case VarRef(op=op, name=name):
                output.append(f"{_UNARY_PREFIX[op]}{name}")
            case Field(object_name=object_name, field_name=field_name):
                output.append(f"{object_name}.{field_name}")
            case Call(name=name, arguments=arguments):
                output.append(f"function:call {name} {{")
                with guard:
                    for argument in arguments:
                        output.append(" ")
                        self._serialize_expression(argument, output, guard)
                output.append(" }")
            case Compound():
                self._serialize_compound(expr, output, guard)

    def _serialize_compound(self, expr: Compound, output: list[str], guard: DepthGuard) -> None:
        """Serialize a left-deep operator chain without recursing down the left spine.

        Without parentheses, a left operand must bind at least as tightly as
        its operator and a right operand strictly tighter.
        """
        chain: list[tuple[BinOp, Expr]] = []
        node: Expr = expr
        while isinstance(node, Compound):
            left = node.left
            if isinstance(left, Compound) and left.op.level < node.op.level:
                msg = (
                    f"Left operand '{left.op}' of '{node.op}' needs parentheses, "
                    "which the program language lacks"
                )
                raise SerializationValidationError(msg)
            right = node.right
            if isinstance(right, Compound) and right.op.level <= node.op.level:
                msg = (
                    f"Right operand '{right.op}' of '{node.op}' needs parentheses, "
                    "which the program language lacks"
                )
                raise SerializationValidationError(msg)
            chain.append((node.op, right))
            node = left

        with guard:
            self._serialize_expression(node, output, guard)
            for op, right in reversed(chain):
                output.append(f" {op.value} ")
                self._serialize_expression(right, output, guard)


def serialize_program(program: Program, *, validate: bool = False) -> str:
    """Serialize Program to source string.

    Convenience function for ProgramSerializer.serialize().

    Args:
        program: Program AST node
        validate: If True, also check identifiers and literal text

    Returns:
        Source text

    Raises:
        SerializationValidationError: If the AST has no surface spelling

    Example:
        >>> from fuzzlang import parse_program
        >>> serialize_program(parse_program("enum E { A, B = 5, }"))
        'enum E { A = 0, B = 5, }\\n'
    """
    return ProgramSerializer().serialize(program, validate=validate)
