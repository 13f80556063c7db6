"""Type system shared by both languages.

Pure value types with no parsing logic:

- Builtin: a native scalar kind (u8, i32, void, char, ...)
- Pointer: owns exactly one target Type
- Struct: name plus ordered, named field types
- Enum: name plus ordered, named i64 constants

Struct and Enum carry a ``forward`` flag. Pointer-to-named-type in the
program language only knows the name, so the parser synthesizes an
empty-bodied placeholder with ``forward=True``. A forward placeholder
never compares equal to a defined type that happens to be empty.

Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import TypeIs

from fuzzlang.diagnostics import ErrorTemplate, SourceSpan, UnknownTypeError
from fuzzlang.enums import Native

__all__ = [
    "BUILTIN_TYPE_NAMES",
    "GENERATOR_TYPE_NAMES",
    "Builtin",
    "Enum",
    "EnumValue",
    "Pointer",
    "Struct",
    "StructField",
    "Type",
    "native_from_name",
    "type_from_name",
    "type_name",
]


@dataclass(frozen=True, slots=True)
class Builtin:
    """Native scalar type."""

    native: Native

    @staticmethod
    def guard(ty: object) -> TypeIs["Builtin"]:
        """Type guard for Builtin."""
        return isinstance(ty, Builtin)


@dataclass(frozen=True, slots=True)
class Pointer:
    """Pointer to exactly one target type."""

    target: "Type"

    @staticmethod
    def guard(ty: object) -> TypeIs["Pointer"]:
        """Type guard for Pointer."""
        return isinstance(ty, Pointer)


@dataclass(frozen=True, slots=True)
class StructField:
    """Named member of a resolved Struct type."""

    name: str
    ty: "Type"


@dataclass(frozen=True, slots=True)
class EnumValue:
    """Named enumeration constant: NAME = value"""

    name: str
    value: int


@dataclass(frozen=True, slots=True)
class Struct:
    """Struct type.

    Attributes:
        name: Struct tag
        fields: Ordered members (empty for forward placeholders)
        forward: True when only the name is known
    """

    name: str
    fields: tuple[StructField, ...] = ()
    forward: bool = False

    @staticmethod
    def guard(ty: object) -> TypeIs["Struct"]:
        """Type guard for Struct."""
        return isinstance(ty, Struct)


@dataclass(frozen=True, slots=True)
class Enum:
    """Enumeration type.

    Attributes:
        name: Enum tag
        values: Ordered constants (empty for forward placeholders)
        forward: True when only the name is known
    """

    name: str
    values: tuple[EnumValue, ...] = ()
    forward: bool = False

    @staticmethod
    def guard(ty: object) -> TypeIs["Enum"]:
        """Type guard for Enum."""
        return isinstance(ty, Enum)


type Type = Builtin | Pointer | Struct | Enum


# ============================================================================
# TYPE NAME TABLES
# ============================================================================

# Program-language builtin spellings. These are reserved words.
BUILTIN_TYPE_NAMES: MappingProxyType[str, Native] = MappingProxyType(
    {native.value: native for native in Native}
)

# Generator-language type tokens: only the eight sized integers, each in
# an all-uppercase and an all-lowercase spelling (case-sensitive match).
_GENERATOR_NATIVES: tuple[Native, ...] = (
    Native.I8,
    Native.I16,
    Native.I32,
    Native.I64,
    Native.U8,
    Native.U16,
    Native.U32,
    Native.U64,
)
GENERATOR_TYPE_NAMES: MappingProxyType[str, Native] = MappingProxyType(
    {
        **{native.value.upper(): native for native in _GENERATOR_NATIVES},
        **{native.value: native for native in _GENERATOR_NATIVES},
    }
)

_ALL_TYPE_NAMES: MappingProxyType[str, Native] = MappingProxyType(
    {**BUILTIN_TYPE_NAMES, **GENERATOR_TYPE_NAMES}
)


def native_from_name(name: str, *, span: SourceSpan | None = None) -> Native:
    """Map a type-name string to its Native kind.

    Accepts the program-language builtin spellings and the generator
    spellings (``I32`` as well as ``i32``).

    Args:
        name: Type name token
        span: Source location, attached to the diagnostic on failure

    Returns:
        Native kind

    Raises:
        UnknownTypeError: If name is not a recognized type
    """
    native = _ALL_TYPE_NAMES.get(name)
    if native is None:
        raise UnknownTypeError(ErrorTemplate.unknown_type(name, span))
    return native


def type_from_name(name: str, *, span: SourceSpan | None = None) -> Type:
    """Convert a recognized type-name string into a Type.

    Example:
        >>> type_from_name("I32")
        Builtin(native=<Native.I32: 'i32'>)
        >>> type_from_name("char")
        Builtin(native=<Native.CHARACTER: 'char'>)

    Raises:
        UnknownTypeError: If name is not a recognized type (never defaulted)
    """
    return Builtin(native_from_name(name, span=span))


def type_name(ty: Type) -> str:
    """Render a Type with C-like spelling for diagnostics and consumers.

    Example:
        >>> type_name(Pointer(Struct("hsearch_data", forward=True)))
        'struct hsearch_data*'
    """
    match ty:
        case Builtin(native=native):
            return native.value
        case Pointer(target=target):
            return f"{type_name(target)}*"
        case Struct(name=name):
            return f"struct {name}"
        case Enum(name=name):
            return f"enum {name}"
