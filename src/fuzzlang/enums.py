"""Enumerations for fuzzlang type-safe constants.

Uses StrEnum (Python 3.11+) for automatic string conversion.
StrEnum members are strings themselves, eliminating boilerplate __str__ methods.

Python 3.13+.
"""

from enum import StrEnum


class Native(StrEnum):
    """Closed set of scalar kinds.

    The value is the program-language spelling of the builtin type.
    """

    U8 = "u8"
    U16 = "u16"
    U32 = "u32"
    U64 = "u64"
    USIZE = "usize"
    I8 = "i8"
    I16 = "i16"
    I32 = "i32"
    I64 = "i64"
    INTEGER = "int"
    VOID = "void"
    CHARACTER = "char"

    @property
    def is_signed(self) -> bool:
        """True for signed integer kinds (including generic ``int``)."""
        return self in _SIGNED

    @property
    def is_unsigned(self) -> bool:
        """True for unsigned integer kinds (including ``usize``)."""
        return self in _UNSIGNED

    @property
    def bit_width(self) -> int | None:
        """Storage width in bits, or None for void.

        ``int`` and ``usize`` follow the LP64 model used by the fuzz targets.
        """
        return _BIT_WIDTHS.get(self)

    @property
    def bounds(self) -> tuple[int, int] | None:
        """Inclusive (min, max) range for integer kinds, None otherwise.

        Example:
            >>> Native.I8.bounds
            (-128, 127)
            >>> Native.U16.bounds
            (0, 65535)
        """
        width = self.bit_width
        if width is None or not (self.is_signed or self.is_unsigned):
            return None
        if self.is_signed:
            return (-(2 ** (width - 1)), 2 ** (width - 1) - 1)
        return (0, 2**width - 1)


_SIGNED: frozenset[Native] = frozenset(
    {Native.I8, Native.I16, Native.I32, Native.I64, Native.INTEGER}
)
_UNSIGNED: frozenset[Native] = frozenset(
    {Native.U8, Native.U16, Native.U32, Native.U64, Native.USIZE}
)
_BIT_WIDTHS: dict[Native, int] = {
    Native.U8: 8,
    Native.U16: 16,
    Native.U32: 32,
    Native.U64: 64,
    Native.USIZE: 64,
    Native.I8: 8,
    Native.I16: 16,
    Native.I32: 32,
    Native.I64: 64,
    Native.INTEGER: 32,
    Native.CHARACTER: 8,
}


class UOp(StrEnum):
    """Unary prefix applied to a variable reference.

    StrEnum value is the canonical surface keyword.
    """

    NONE = "op:null"
    """No transformation: plain ``x``"""

    DEREF = "op:deref"
    """Dereference once: ``*x`` or ``op:deref x``"""

    ADDRESS_OF = "op:addressof"
    """Take the address: ``&x`` or ``op:addressof x``"""


class BinOp(StrEnum):
    """Binary operator shared by both languages.

    StrEnum value is the surface symbol. ``level`` gives the program-language
    precedence (1 = loosest).
    """

    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    MOD = "%"
    LAND = "&&"
    LOR = "||"
    GREATER = ">"
    LESS = "<"
    EQUAL = "=="
    NOT_EQUAL = "!="

    @property
    def level(self) -> int:
        """Precedence level: 1 logical, 2 relational, 3 additive, 4 multiplicative."""
        return _LEVELS[self]

    @property
    def is_arithmetic(self) -> bool:
        """True for the five operators the generator language accepts."""
        return _LEVELS[self] >= 3


_LEVELS: dict[BinOp, int] = {
    BinOp.LAND: 1,
    BinOp.LOR: 1,
    BinOp.GREATER: 2,
    BinOp.LESS: 2,
    BinOp.EQUAL: 2,
    BinOp.NOT_EQUAL: 2,
    BinOp.ADD: 3,
    BinOp.SUB: 3,
    BinOp.MUL: 4,
    BinOp.DIV: 4,
    BinOp.MOD: 4,
}


class IncludeKind(StrEnum):
    """Delimiter style of an ``#include`` declaration."""

    LOCAL = "local"
    """Quoted include: #include "header.h" """

    SYSTEM = "system"
    """Angle-bracket include: #include <header.h>"""


class ArithmeticPrecedence(StrEnum):
    """Precedence model for generator-language arithmetic chains.

    StrEnum provides automatic string conversion: str(ArithmeticPrecedence.FLAT) == "flat"
    """

    FLAT = "flat"
    """All of + - * / % share one left-associative level (the default)."""

    CONVENTIONAL = "conventional"
    """* / % bind tighter than + -, both levels left-associative."""


__all__ = [
    "ArithmeticPrecedence",
    "BinOp",
    "IncludeKind",
    "Native",
    "UOp",
]
