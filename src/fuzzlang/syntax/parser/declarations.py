"""Declaration rules for the program language.

Covers every construct allowed before the first statement:
- Includes: #include "local.h" / #include <system.h>
- Type declarations: struct, enum, typedef
- Variable declarations: var:free, var:constrained
- Function declarations: function:decl

Type references (``<typeRef>``) are shared by typedefs, variables, and
function signatures:

    typeRef := builtin | "struct" name | "enum" name | "pointer" typeRef

Pointer-to-named-type cannot see the referenced definition, so it wraps a
forward placeholder (``Struct(name, forward=True)``) in a BasicType.
"""

from fuzzlang.constants import INT64_MAX, INT64_MIN
from fuzzlang.diagnostics import ConstantValueError, ErrorTemplate
from fuzzlang.enums import IncludeKind
from fuzzlang.syntax.ast import (
    UDT,
    BasicType,
    Constrained,
    DeclType,
    EnumDecl,
    EnumRef,
    Free,
    FreeVarDecl,
    FuncDecl,
    Function,
    Include,
    StructDecl,
    StructRef,
    Typedef,
    UDTDecl,
)
from fuzzlang.syntax.cursor import Cursor, ParseResult
from fuzzlang.syntax.parser.primitives import (
    expect_char,
    expect_keyword,
    match_keyword,
    parse_name,
    parse_number,
    scan_word,
    syntax_error,
)
from fuzzlang.typesys import BUILTIN_TYPE_NAMES, Builtin, Enum, EnumValue, Pointer, Struct

__all__ = [
    "parse_enum",
    "parse_function",
    "parse_include",
    "parse_struct",
    "parse_type_declaration",
    "parse_type_ref",
    "parse_typedef",
    "parse_variable",
]

_TYPE_REF_EXPECTED: tuple[str, ...] = ("builtin type", "'struct'", "'enum'", "'pointer'")


def _parse_builtin(cursor: Cursor) -> ParseResult[Builtin]:
    """Parse one of: u8 u16 u32 u64 usize i8 i16 i32 i64 int void char"""
    cursor = cursor.skip_whitespace()
    word = scan_word(cursor)
    native = BUILTIN_TYPE_NAMES.get(word)
    if native is None:
        raise syntax_error(cursor, ("builtin type",))
    return ParseResult(Builtin(native), cursor.advance(len(word)))


def parse_type_ref(cursor: Cursor) -> ParseResult[DeclType]:
    """Parse a type reference.

    Examples:
        i32                 -> BasicType(Builtin(I32))
        struct node         -> StructRef("node")
        pointer pointer u8  -> BasicType(Pointer(Pointer(Builtin(U8))))
        pointer enum color  -> BasicType(Pointer(Enum("color", forward=True)))
    """
    cursor = cursor.skip_whitespace()

    if (after := match_keyword(cursor, "struct")) is not None:
        name = parse_name(after)
        return ParseResult(StructRef(name.value), name.cursor)

    if (after := match_keyword(cursor, "enum")) is not None:
        name = parse_name(after)
        return ParseResult(EnumRef(name.value), name.cursor)

    if (after := match_keyword(cursor, "pointer")) is not None:
        inner = parse_type_ref(after)
        match inner.value:
            case BasicType(ty=ty):
                return ParseResult(BasicType(Pointer(ty)), inner.cursor)
            case StructRef(name=name):
                return ParseResult(BasicType(Pointer(Struct(name, forward=True))), inner.cursor)
            case EnumRef(name=name):
                return ParseResult(BasicType(Pointer(Enum(name, forward=True))), inner.cursor)
            case _:  # pragma: no cover - parse_type_ref never yields inline definitions
                raise syntax_error(cursor, _TYPE_REF_EXPECTED)

    if scan_word(cursor) in BUILTIN_TYPE_NAMES:
        builtin = _parse_builtin(cursor)
        return ParseResult(BasicType(builtin.value), builtin.cursor)

    raise syntax_error(cursor, _TYPE_REF_EXPECTED)


def parse_include(cursor: Cursor) -> ParseResult[Include]:
    """Parse #include "path" (LOCAL) or #include <path> (SYSTEM).

    The path runs to the closing delimiter and may not span lines.
    """
    cursor = expect_keyword(cursor, "#include").skip_whitespace()

    if cursor.startswith('"'):
        close, kind = '"', IncludeKind.LOCAL
    elif cursor.startswith("<"):
        close, kind = ">", IncludeKind.SYSTEM
    else:
        raise syntax_error(cursor, ("'\"'", "'<'"))

    start = cursor.advance()
    end = start
    while not end.is_eof and end.current not in (close, "\n"):
        end = end.advance()
    if end.is_eof or end.current != close:
        raise syntax_error(end, (f"'{close}'",), hint="Include paths must close on the same line")

    return ParseResult(Include(start.slice_to(end.pos), kind), end.advance())


def _parse_field(cursor: Cursor) -> ParseResult[UDTDecl]:
    """Parse one struct field, including its terminating ';'.

    Named struct/enum fields keep the type name in ``name`` and the field
    name in the reference: ``struct Foo bar;`` -> UDTDecl("Foo", StructRef("bar")).
    """
    cursor = cursor.skip_whitespace()

    if (after := match_keyword(cursor, "pointer")) is not None:
        builtin = _parse_builtin(after)
        name = parse_name(builtin.cursor)
        field = UDTDecl(name.value, BasicType(Pointer(builtin.value)))
    elif (after := match_keyword(cursor, "struct")) is not None:
        type_name = parse_name(after)
        name = parse_name(type_name.cursor)
        field = UDTDecl(type_name.value, StructRef(name.value))
    elif (after := match_keyword(cursor, "enum")) is not None:
        type_name = parse_name(after)
        name = parse_name(type_name.cursor)
        field = UDTDecl(type_name.value, EnumRef(name.value))
    elif scan_word(cursor) in BUILTIN_TYPE_NAMES:
        builtin = _parse_builtin(cursor)
        name = parse_name(builtin.cursor)
        field = UDTDecl(name.value, BasicType(builtin.value))
    else:
        raise syntax_error(cursor, (*_TYPE_REF_EXPECTED, "'}'"))

    return ParseResult(field, expect_char(name.cursor, ";"))


def parse_struct(cursor: Cursor) -> ParseResult[StructDecl]:
    """Parse struct declaration: struct <Name> { <field>* }

    Example:
        struct Ent { pointer char key; pointer void data; }
    """
    cursor = expect_keyword(cursor, "struct")
    name = parse_name(cursor)
    cursor = expect_char(name.cursor, "{")

    fields: list[UDTDecl] = []
    while not cursor.skip_whitespace().startswith("}"):
        field = _parse_field(cursor)
        fields.append(field.value)
        cursor = field.cursor

    cursor = expect_char(cursor, "}")
    return ParseResult(StructDecl(name.value, tuple(fields)), cursor)


def _parse_enum_value(cursor: Cursor) -> ParseResult[int]:
    """Parse an integer enum value and check it fits in i64."""
    cursor = cursor.skip_whitespace()
    number = parse_number(cursor)
    if "." in number.value:
        raise syntax_error(cursor, ("integer",), hint="Enum values must be integers")
    value = int(number.value)
    if not INT64_MIN <= value <= INT64_MAX:
        raise ConstantValueError(
            ErrorTemplate.constant_out_of_range(number.value, cursor.span_to(number.cursor.pos))
        )
    return ParseResult(value, number.cursor)


def parse_enum(cursor: Cursor) -> ParseResult[EnumDecl]:
    """Parse enum declaration: enum <Name> { (<ident> [= <int>] ,)* }

    Every entry is comma-terminated. A bare entry gets value 0, not the
    previous value plus one:

        enum E { A, B = 5, C, }  ->  A=0, B=5, C=0
    """
    cursor = expect_keyword(cursor, "enum")
    name = parse_name(cursor)
    cursor = expect_char(name.cursor, "{")

    values: list[EnumValue] = []
    while not cursor.skip_whitespace().startswith("}"):
        entry = parse_name(cursor)
        cursor = entry.cursor
        value = 0
        if cursor.skip_whitespace().startswith("="):
            number = _parse_enum_value(expect_char(cursor, "="))
            value, cursor = number.value, number.cursor
        cursor = expect_char(cursor, ",", hint="Every enum entry ends with ','")
        values.append(EnumValue(entry.value, value))

    cursor = expect_char(cursor, "}")
    return ParseResult(EnumDecl(name.value, tuple(values)), cursor)


def parse_typedef(cursor: Cursor) -> ParseResult[Typedef]:
    """Parse typedef: typedef <typeRef> <name> ;"""
    cursor = expect_keyword(cursor, "typedef")
    source = parse_type_ref(cursor)
    name = parse_name(source.cursor)
    cursor = expect_char(name.cursor, ";")
    return ParseResult(Typedef(source.value, name.value), cursor)


def parse_type_declaration(cursor: Cursor) -> ParseResult[UDT | Typedef] | None:
    """Parse one struct, enum, or typedef declaration.

    Returns:
        ParseResult, or None if no type declaration starts at cursor
    """
    cursor = cursor.skip_whitespace()
    if match_keyword(cursor, "struct") is not None:
        struct = parse_struct(cursor)
        return ParseResult(UDT(struct.value), struct.cursor)
    if match_keyword(cursor, "enum") is not None:
        enum = parse_enum(cursor)
        return ParseResult(UDT(enum.value), enum.cursor)
    if match_keyword(cursor, "typedef") is not None:
        return parse_typedef(cursor)
    return None


def parse_variable(cursor: Cursor) -> ParseResult[Free | Constrained] | None:
    """Parse a variable declaration.

    Forms:
        var:free <id> gen:std: <genName> <typeRef>   genname "std:<genName>"
        var:free <id> gen: <genName> <typeRef>       genname verbatim
        var:constrained <id> <typeRef>

    Returns:
        ParseResult, or None if no variable declaration starts at cursor
    """
    if (after := match_keyword(cursor, "var:constrained")) is not None:
        name = parse_name(after)
        ty = parse_type_ref(name.cursor)
        return ParseResult(Constrained(name.value, ty.value), ty.cursor)

    if (after := match_keyword(cursor, "var:free")) is not None:
        name = parse_name(after)
        cursor = name.cursor
        # gen:std: must be tried first since gen: is its prefix
        if (gen := match_keyword(cursor, "gen:std:")) is not None:
            prefix = "std:"
        elif (gen := match_keyword(cursor, "gen:")) is not None:
            prefix = ""
        else:
            raise syntax_error(cursor.skip_whitespace(), ("'gen:std:'", "'gen:'"))
        genname = parse_name(gen)
        ty = parse_type_ref(genname.cursor)
        var = FreeVarDecl(name.value, prefix + genname.value, ty.value)
        return ParseResult(Free(var), ty.cursor)

    return None


def parse_function(cursor: Cursor) -> ParseResult[Function] | None:
    """Parse function declaration: function:decl <name> <typeRef> { (<typeRef> ,)* }

    Parameters are types only, each terminated by ','.

    Example:
        function:decl hcreate_r int { usize, pointer struct hsearch_data, }

    Returns:
        ParseResult, or None if no function declaration starts at cursor
    """
    after = match_keyword(cursor, "function:decl")
    if after is None:
        return None

    name = parse_name(after)
    retval = parse_type_ref(name.cursor)
    cursor = expect_char(retval.cursor, "{")

    parameters: list[DeclType] = []
    while not cursor.skip_whitespace().startswith("}"):
        param = parse_type_ref(cursor)
        parameters.append(param.value)
        cursor = expect_char(param.cursor, ",", hint="Every parameter type ends with ','")

    cursor = expect_char(cursor, "}")
    func = FuncDecl(name.value, retval.value, tuple(parameters))
    return ParseResult(Function(func), cursor)
