"""Tests for program-language declarations.

Covers includes, struct/enum/typedef, variable and function declarations,
and the shape of type references inside them.
"""

from __future__ import annotations

import pytest
from hypothesis import event, given
from hypothesis import strategies as st

from fuzzlang.diagnostics import ConstantValueError, DiagnosticCode, FuzzSyntaxError
from fuzzlang.enums import IncludeKind, Native
from fuzzlang.syntax import (
    UDT,
    BasicType,
    Constrained,
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
    parse_program,
)
from fuzzlang.syntax.cursor import Cursor
from fuzzlang.syntax.parser.declarations import parse_type_ref
from fuzzlang.typesys import Builtin, Enum, EnumValue, Pointer, Struct
from tests.strategies import identifiers

I32 = BasicType(Builtin(Native.I32))

# ============================================================================
# INCLUDES
# ============================================================================


class TestIncludes:
    """Test #include declarations."""

    def test_local_and_system(self) -> None:
        """Quoted paths are LOCAL, angle-bracket paths SYSTEM."""
        program = parse_program('#include "hash.h"\n#include <search.h>')

        assert program.declarations == (
            Include("hash.h", IncludeKind.LOCAL),
            Include("search.h", IncludeKind.SYSTEM),
        )

    def test_path_kept_verbatim(self) -> None:
        """Paths keep directories and inner spaces."""
        program = parse_program("#include <sys/my types.h>")

        assert program.declarations[0] == Include("sys/my types.h", IncludeKind.SYSTEM)

    def test_unterminated_path(self) -> None:
        """A path may not run onto the next line."""
        with pytest.raises(FuzzSyntaxError) as exc_info:
            parse_program('#include "hash.h\nx')

        assert exc_info.value.diagnostic is not None
        assert exc_info.value.diagnostic.hint == "Include paths must close on the same line"

    def test_missing_delimiter(self) -> None:
        """#include needs a quote or '<'."""
        with pytest.raises(FuzzSyntaxError, match="Expected"):
            parse_program("#include hash.h")


# ============================================================================
# TYPE REFERENCES
# ============================================================================


class TestTypeRefs:
    """Test <typeRef> shapes via parse_type_ref."""

    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            ("i32", I32),
            ("char", BasicType(Builtin(Native.CHARACTER))),
            ("pointer char", BasicType(Pointer(Builtin(Native.CHARACTER)))),
            ("pointer pointer u8", BasicType(Pointer(Pointer(Builtin(Native.U8))))),
            ("struct node", StructRef("node")),
            ("enum color", EnumRef("color")),
            ("pointer struct node", BasicType(Pointer(Struct("node", forward=True)))),
            ("pointer enum color", BasicType(Pointer(Enum("color", forward=True)))),
            (
                "pointer pointer struct node",
                BasicType(Pointer(Pointer(Struct("node", forward=True)))),
            ),
        ],
    )
    def test_type_ref_shapes(self, source: str, expected: object) -> None:
        """Builtins and pointer chains are BasicType; named types are refs."""
        result = parse_type_ref(Cursor(source, 0))

        assert result.value == expected
        assert result.cursor.is_eof

    def test_unknown_builtin(self) -> None:
        """A non-type word is a syntax error listing type alternatives."""
        with pytest.raises(FuzzSyntaxError) as exc_info:
            parse_type_ref(Cursor("float", 0))

        assert exc_info.value.diagnostic is not None
        assert "builtin type" in exc_info.value.diagnostic.expected

    def test_builtin_prefix_needs_boundary(self) -> None:
        """i32x is not i32 followed by x."""
        with pytest.raises(FuzzSyntaxError):
            parse_type_ref(Cursor("i32x", 0))


# ============================================================================
# STRUCTS, ENUMS, TYPEDEFS
# ============================================================================


class TestStructs:
    """Test struct declarations and the four field forms."""

    def test_scalar_and_pointer_fields(self) -> None:
        """Builtin and pointer-to-builtin fields keep the field name."""
        program = parse_program("struct entry { pointer char key; pointer void data; u32 hash; }")

        assert program.declarations == (
            UDT(
                StructDecl(
                    "entry",
                    (
                        UDTDecl("key", BasicType(Pointer(Builtin(Native.CHARACTER)))),
                        UDTDecl("data", BasicType(Pointer(Builtin(Native.VOID)))),
                        UDTDecl("hash", BasicType(Builtin(Native.U32))),
                    ),
                )
            ),
        )

    def test_named_fields_swap_slots(self) -> None:
        """struct/enum fields keep the type name in UDTDecl.name."""
        program = parse_program("struct S { struct Foo bar; enum Color c; }")
        struct = program.declarations[0]

        assert isinstance(struct, UDT)
        assert struct.ty == StructDecl(
            "S", (UDTDecl("Foo", StructRef("bar")), UDTDecl("Color", EnumRef("c")))
        )

    def test_empty_struct(self) -> None:
        """A struct may have no fields."""
        program = parse_program("struct empty { }")

        assert program.declarations == (UDT(StructDecl("empty", ())),)

    def test_missing_name(self) -> None:
        """struct { } reports the missing identifier at its column."""
        with pytest.raises(FuzzSyntaxError) as exc_info:
            parse_program("struct { }")

        error = exc_info.value
        assert error.diagnostic is not None
        assert error.diagnostic.code == DiagnosticCode.UNEXPECTED_TOKEN
        assert error.diagnostic.span is not None
        assert error.diagnostic.span.column == 8
        assert error.parse_error is not None
        assert "identifier" in error.parse_error.expected

    def test_missing_semicolon(self) -> None:
        """Every field ends with ';'."""
        with pytest.raises(FuzzSyntaxError, match="';'"):
            parse_program("struct S { i32 x }")

    def test_pointer_field_must_target_builtin(self) -> None:
        """pointer struct fields are not one of the field forms."""
        with pytest.raises(FuzzSyntaxError):
            parse_program("struct S { pointer struct T t; }")

    def test_reserved_field_name(self) -> None:
        """Builtin type names cannot name a field."""
        with pytest.raises(FuzzSyntaxError) as exc_info:
            parse_program("struct S { i32 int; }")

        assert exc_info.value.diagnostic is not None
        assert exc_info.value.diagnostic.code == DiagnosticCode.RESERVED_WORD


class TestEnums:
    """Test enum declarations."""

    def test_bare_entries_default_to_zero(self) -> None:
        """A bare entry is 0, not previous + 1."""
        program = parse_program("enum E { A, B = 5, C, }")

        assert program.declarations == (
            UDT(EnumDecl("E", (EnumValue("A", 0), EnumValue("B", 5), EnumValue("C", 0)))),
        )

    def test_negative_value(self) -> None:
        """Explicit values may be negative."""
        program = parse_program("enum E { LOW = -3, }")
        enum = program.declarations[0]

        assert isinstance(enum, UDT)
        assert enum.ty == EnumDecl("E", (EnumValue("LOW", -3),))

    def test_trailing_comma_required(self) -> None:
        """Every entry ends with ','."""
        with pytest.raises(FuzzSyntaxError, match="','"):
            parse_program("enum E { A }")

    def test_float_value_rejected(self) -> None:
        """Enum values must be integers."""
        with pytest.raises(FuzzSyntaxError) as exc_info:
            parse_program("enum E { A = 1.5, }")

        assert exc_info.value.diagnostic is not None
        assert exc_info.value.diagnostic.hint == "Enum values must be integers"

    def test_out_of_range_value(self) -> None:
        """Values beyond i64 raise ConstantValueError."""
        with pytest.raises(ConstantValueError) as exc_info:
            parse_program("enum E { BIG = 9223372036854775808, }")

        assert exc_info.value.diagnostic is not None
        assert exc_info.value.diagnostic.code == DiagnosticCode.CONSTANT_OUT_OF_RANGE

    @given(st.integers(min_value=-(2**63), max_value=2**63 - 1))
    def test_any_i64_value(self, value: int) -> None:
        """Property: every i64 value is accepted verbatim."""
        event(f"sign={'negative' if value < 0 else 'non-negative'}")
        program = parse_program(f"enum E {{ V = {value}, }}")
        enum = program.declarations[0]

        assert isinstance(enum, UDT)
        assert enum.ty == EnumDecl("E", (EnumValue("V", value),))


class TestTypedefs:
    """Test typedef declarations."""

    def test_typedef_pointer(self) -> None:
        """typedef stores a {from, to} pair."""
        program = parse_program("typedef pointer char string;")

        assert program.declarations == (
            Typedef(BasicType(Pointer(Builtin(Native.CHARACTER))), "string"),
        )

    def test_typedef_struct_ref(self) -> None:
        """typedef of a named struct keeps the reference."""
        program = parse_program("typedef struct node node_t;")

        assert program.declarations == (Typedef(StructRef("node"), "node_t"),)

    def test_types_in_any_order(self) -> None:
        """Structs, enums and typedefs share one phase."""
        program = parse_program("typedef i32 a; enum E { X, } struct S { } typedef u8 b;")

        kinds = [type(decl).__name__ for decl in program.declarations]
        assert kinds == ["Typedef", "UDT", "UDT", "Typedef"]


# ============================================================================
# VARIABLES AND FUNCTIONS
# ============================================================================


class TestVariables:
    """Test var:free and var:constrained."""

    def test_free_with_std_generator(self) -> None:
        """gen:std: prefixes the generator name with std:."""
        program = parse_program("var:free x gen:std: myGen i32")

        assert program.declarations == (Free(FreeVarDecl("x", "std:myGen", I32)),)

    def test_free_with_user_generator(self) -> None:
        """gen: keeps the generator name as written."""
        program = parse_program("var:free n gen: small u8")

        assert program.declarations == (
            Free(FreeVarDecl("n", "small", BasicType(Builtin(Native.U8)))),
        )

    def test_constrained(self) -> None:
        """var:constrained takes a name and a type reference."""
        program = parse_program("var:constrained tab pointer struct hsearch_data")

        assert program.declarations == (
            Constrained("tab", BasicType(Pointer(Struct("hsearch_data", forward=True)))),
        )

    def test_missing_generator_keyword(self) -> None:
        """var:free needs gen: or gen:std:."""
        with pytest.raises(FuzzSyntaxError, match="gen:"):
            parse_program("var:free x i32")

    @given(identifiers(), identifiers())
    def test_free_names(self, name: str, gen: str) -> None:
        """Property: any non-reserved names round through var:free."""
        program = parse_program(f"var:free {name} gen:std: {gen} i64")

        assert program.declarations == (
            Free(FreeVarDecl(name, f"std:{gen}", BasicType(Builtin(Native.I64)))),
        )


class TestFunctions:
    """Test function:decl declarations."""

    def test_library_signature(self) -> None:
        """Parameters are comma-terminated types only."""
        program = parse_program("function:decl hcreate_r int { usize, pointer struct hsearch_data, }")

        assert program.declarations == (
            Function(
                FuncDecl(
                    "hcreate_r",
                    BasicType(Builtin(Native.INTEGER)),
                    (
                        BasicType(Builtin(Native.USIZE)),
                        BasicType(Pointer(Struct("hsearch_data", forward=True))),
                    ),
                )
            ),
        )

    def test_no_parameters(self) -> None:
        """An empty parameter list is allowed."""
        program = parse_program("function:decl get void { }")

        func = program.declarations[0]
        assert isinstance(func, Function)
        assert func.func.parameters == ()

    def test_parameter_terminator_required(self) -> None:
        """A parameter without ',' is an error with a hint."""
        with pytest.raises(FuzzSyntaxError) as exc_info:
            parse_program("function:decl f void { i32 }")

        assert exc_info.value.diagnostic is not None
        assert exc_info.value.diagnostic.hint == "Every parameter type ends with ','"
