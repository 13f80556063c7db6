"""Tests for TypeTable resolution of declared types."""

from __future__ import annotations

import logging

import pytest

from fuzzlang.diagnostics import DiagnosticCode, DuplicateTypeError, UnresolvedTypeError
from fuzzlang.enums import Native
from fuzzlang.syntax import (
    UDT,
    BasicType,
    Constrained,
    EnumDecl,
    EnumRef,
    StructDecl,
    StructRef,
    TypeTable,
    UDTDecl,
    parse_program,
)
from fuzzlang.typesys import Builtin, Enum, EnumValue, Pointer, Struct, StructField

I32 = Builtin(Native.I32)


def _table(source: str) -> TypeTable:
    return TypeTable.from_program(parse_program(source))


class TestTypeTableDefinitions:
    """Test building the table."""

    def test_from_program(self) -> None:
        """Structs, enums and typedefs are recorded in definition order."""
        table = _table("struct A { } enum E { X, } struct B { } typedef i32 t;")

        assert table.struct_names == ("A", "B")
        assert table.enum_names == ("E",)
        assert table.typedef_names == ("t",)

    def test_separate_namespaces(self) -> None:
        """A struct and an enum may share a name."""
        table = _table("struct T { } enum T { A, }")

        assert table.resolve(StructRef("T")) == Struct("T")
        assert table.resolve(EnumRef("T")) == Enum("T", (EnumValue("A", 0),))

    def test_duplicate_struct(self) -> None:
        """Redefining a struct raises DuplicateTypeError."""
        with pytest.raises(DuplicateTypeError) as exc_info:
            _table("struct A { } struct A { i32 x; }")

        assert exc_info.value.diagnostic is not None
        assert exc_info.value.diagnostic.code == DiagnosticCode.DUPLICATE_TYPE

    def test_duplicate_typedef(self) -> None:
        """Redefining a typedef raises DuplicateTypeError."""
        with pytest.raises(DuplicateTypeError):
            _table("typedef i32 t; typedef u8 t;")

    def test_manual_definitions(self) -> None:
        """Entries can be defined without a Program."""
        table = TypeTable()
        table.define(EnumDecl("E", ()))
        table.define_typedef("alias", BasicType(I32))

        assert table.resolve_typedef("alias") == I32

    def test_debug_logging(self, caplog: pytest.LogCaptureFixture) -> None:
        """Building a table logs its size at DEBUG level."""
        with caplog.at_level(logging.DEBUG, logger="fuzzlang.syntax.resolve"):
            _table("struct A { } typedef i32 t;")

        assert "1 structs, 0 enums, 1 typedefs" in caplog.text


class TestTypeTableResolution:
    """Test resolving DeclType values to Types."""

    def test_basic_type_unchanged(self) -> None:
        """BasicType resolves to its Type, forward pointers included."""
        table = TypeTable()
        forward = Pointer(Struct("node", forward=True))

        assert table.resolve(BasicType(forward)) == forward

    def test_struct_fields_resolved(self) -> None:
        """Named fields swap back into their natural slots."""
        table = _table(
            "enum Color { RED = 1, } "
            "struct Inner { u8 b; } "
            "struct Outer { i32 a; struct Inner in; enum Color c; pointer char s; }"
        )

        outer = table.resolve(StructRef("Outer"))

        assert outer == Struct(
            "Outer",
            (
                StructField("a", I32),
                StructField("in", Struct("Inner", (StructField("b", Builtin(Native.U8)),))),
                StructField("c", Enum("Color", (EnumValue("RED", 1),))),
                StructField("s", Pointer(Builtin(Native.CHARACTER))),
            ),
        )

    def test_resolve_field(self) -> None:
        """resolve_field undoes the named-field slot swap."""
        table = _table("struct Foo { }")

        assert table.resolve_field(UDTDecl("Foo", StructRef("bar"))) == StructField(
            "bar", Struct("Foo")
        )

    def test_inline_struct_decl(self) -> None:
        """An inline StructDecl resolves against the table for its fields."""
        table = _table("struct P { i32 x; }")
        decl = StructDecl("Q", (UDTDecl("P", StructRef("p")),))

        assert table.resolve(decl) == Struct(
            "Q", (StructField("p", Struct("P", (StructField("x", I32),))),)
        )

    def test_self_containing_struct(self) -> None:
        """A struct containing itself resolves the inner use to a placeholder."""
        table = _table("struct Loop { struct Loop again; }")

        assert table.resolve(StructRef("Loop")) == Struct(
            "Loop", (StructField("again", Struct("Loop", forward=True)),)
        )

    def test_unresolved_struct(self) -> None:
        """Missing struct names raise UnresolvedTypeError."""
        with pytest.raises(UnresolvedTypeError) as exc_info:
            TypeTable().resolve(StructRef("missing"))

        assert exc_info.value.diagnostic is not None
        assert exc_info.value.diagnostic.code == DiagnosticCode.UNRESOLVED_STRUCT

    def test_unresolved_enum_in_field(self) -> None:
        """Missing enum names inside fields raise UnresolvedTypeError."""
        table = _table("struct S { enum Nope n; }")

        with pytest.raises(UnresolvedTypeError) as exc_info:
            table.resolve(StructRef("S"))

        assert exc_info.value.diagnostic is not None
        assert exc_info.value.diagnostic.code == DiagnosticCode.UNRESOLVED_ENUM

    def test_unknown_typedef(self) -> None:
        """Unknown aliases raise UnresolvedTypeError."""
        with pytest.raises(UnresolvedTypeError, match="Unknown type 'nope'"):
            TypeTable().resolve_typedef("nope")

    def test_variable_types(self) -> None:
        """Typical use: resolve each variable's declared type."""
        program = parse_program(
            "struct P { i32 x; } typedef struct P pt; var:constrained p struct P"
        )
        table = TypeTable.from_program(program)
        variable = program.declarations[-1]

        assert isinstance(variable, Constrained)
        assert table.resolve(variable.ty) == table.resolve_typedef("pt")
        assert isinstance(program.declarations[0], UDT)
