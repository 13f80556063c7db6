"""Resolve declared type references against an explicit symbol table.

The parser never checks that ``struct X`` or ``enum X`` names a defined
type. Consumers that need concrete Types build a TypeTable from a Program
(or define entries by hand) and resolve DeclType values through it:

    >>> program = parse_program("struct P { i32 x; } var:constrained p struct P")
    >>> table = TypeTable.from_program(program)
    >>> table.resolve(program.declarations[1].ty)
    Struct(name='P', fields=(StructField(name='x', ty=Builtin(native=<Native.I32: 'i32'>)),), forward=False)

Rules:
    - Struct and enum names live in separate namespaces, as C tags do.
    - Pointer targets are left as written; a pointer to a forward
      placeholder stays a pointer to a forward placeholder.
    - A struct that contains itself by value resolves the inner occurrence
      to a forward placeholder instead of recursing forever.
    - ``struct T f;`` fields store the type name in UDTDecl.name; the
      resolved StructField puts the names back in their natural slots.

Python 3.13+.
"""

import logging

from fuzzlang.diagnostics import DuplicateTypeError, ErrorTemplate, UnresolvedTypeError
from fuzzlang.typesys import Enum, Struct, StructField, Type

from .ast import (
    UDT,
    BasicType,
    DeclType,
    EnumDecl,
    EnumRef,
    Program,
    StructDecl,
    StructRef,
    Typedef,
    UDTDecl,
)

__all__ = ["TypeTable"]

logger = logging.getLogger(__name__)


class TypeTable:
    """Symbol table of user-defined types and typedef aliases.

    Attributes:
        struct_names: Defined struct names, in definition order
        enum_names: Defined enum names, in definition order
        typedef_names: Defined typedef names, in definition order
    """

    __slots__ = ("_enums", "_structs", "_typedefs")

    def __init__(self) -> None:
        self._structs: dict[str, StructDecl] = {}
        self._enums: dict[str, EnumDecl] = {}
        self._typedefs: dict[str, DeclType] = {}

    @classmethod
    def from_program(cls, program: Program) -> "TypeTable":
        """Build a table from every UDT and Typedef declaration of a Program.

        Raises:
            DuplicateTypeError: If a name is defined twice in one namespace
        """
        table = cls()
        for decl in program.declarations:
            match decl:
                case UDT(ty=ty):
                    table.define(ty)
                case Typedef(source=source, name=name):
                    table.define_typedef(name, source)
                case _:
                    pass
        logger.debug(
            "Built type table: %d structs, %d enums, %d typedefs",
            len(table._structs),
            len(table._enums),
            len(table._typedefs),
        )
        return table

    @property
    def struct_names(self) -> tuple[str, ...]:
        return tuple(self._structs)

    @property
    def enum_names(self) -> tuple[str, ...]:
        return tuple(self._enums)

    @property
    def typedef_names(self) -> tuple[str, ...]:
        return tuple(self._typedefs)

    def define(self, decl: StructDecl | EnumDecl) -> None:
        """Add a struct or enum definition.

        Raises:
            DuplicateTypeError: If the name is already defined in its namespace
        """
        namespace: dict[str, StructDecl] | dict[str, EnumDecl]
        namespace = self._structs if isinstance(decl, StructDecl) else self._enums
        if decl.name in namespace:
            raise DuplicateTypeError(ErrorTemplate.duplicate_type(decl.name))
        namespace[decl.name] = decl  # type: ignore[assignment]  # narrowed by isinstance above

    def define_typedef(self, name: str, source: DeclType) -> None:
        """Add a typedef alias.

        Raises:
            DuplicateTypeError: If the alias is already defined
        """
        if name in self._typedefs:
            raise DuplicateTypeError(ErrorTemplate.duplicate_type(name))
        self._typedefs[name] = source

    def resolve(self, decl: DeclType) -> Type:
        """Resolve a DeclType to a concrete Type.

        Raises:
            UnresolvedTypeError: If a by-name reference has no definition
        """
        return self._resolve(decl, frozenset())

    def resolve_typedef(self, name: str) -> Type:
        """Resolve a typedef alias to the Type it names.

        Raises:
            UnresolvedTypeError: If the alias, or a type it references, is undefined
        """
        source = self._typedefs.get(name)
        if source is None:
            raise UnresolvedTypeError(ErrorTemplate.unknown_type(name))
        return self.resolve(source)

    def resolve_field(self, field: UDTDecl) -> StructField:
        """Resolve one struct field, undoing the named-field slot swap."""
        return self._resolve_field(field, frozenset())

    def _resolve(self, decl: DeclType, in_progress: frozenset[str]) -> Type:
        match decl:
            case BasicType(ty=ty):
                return ty
            case StructDecl():
                return self._build_struct(decl, in_progress)
            case EnumDecl(name=name, values=values):
                return Enum(name, values)
            case StructRef(name=name):
                return self._lookup_struct(name, in_progress)
            case EnumRef(name=name):
                return self._lookup_enum(name)

    def _lookup_struct(self, name: str, in_progress: frozenset[str]) -> Struct:
        if name in in_progress:
            return Struct(name, forward=True)
        struct = self._structs.get(name)
        if struct is None:
            raise UnresolvedTypeError(ErrorTemplate.unresolved_struct(name))
        return self._build_struct(struct, in_progress)

    def _lookup_enum(self, name: str) -> Enum:
        enum = self._enums.get(name)
        if enum is None:
            raise UnresolvedTypeError(ErrorTemplate.unresolved_enum(name))
        return Enum(enum.name, enum.values)

    def _build_struct(self, struct: StructDecl, in_progress: frozenset[str]) -> Struct:
        inner = in_progress | {struct.name}
        fields = tuple(self._resolve_field(field, inner) for field in struct.fields)
        return Struct(struct.name, fields)

    def _resolve_field(self, field: UDTDecl, in_progress: frozenset[str]) -> StructField:
        match field.ty:
            case StructRef(name=field_name):
                return StructField(field_name, self._lookup_struct(field.name, in_progress))
            case EnumRef(name=field_name):
                return StructField(field_name, self._lookup_enum(field.name))
            case _:
                return StructField(field.name, self._resolve(field.ty, in_progress))
