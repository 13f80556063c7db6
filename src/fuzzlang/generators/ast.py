"""Generator-language AST node definitions.

A generator names a typed value producer and lists one or more "state"
expressions the fuzzing engine draws values from:

    generator std:small I32 state I32:constant(0) state I32:random(I32:min(), 10)

Constants are folded at parse time into Signed or Unsigned according to
the declared type token. Min/max bounds are left symbolic; the consumer
computes them from the Type.

Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass
from typing import TypeIs

from fuzzlang.constants import INT64_MAX, INT64_MIN, UINT64_MAX
from fuzzlang.enums import BinOp
from fuzzlang.typesys import Type

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Constants
    "Signed",
    "Unsigned",
    "StringConstant",
    # Expressions
    "ConstExpr",
    "MinExpr",
    "MaxExpr",
    "RandomExpr",
    "GenCompound",
    # Root
    "UserGen",
    # Type aliases
    "Constant",
    "Expression",
]

# ============================================================================
# CONSTANTS
# ============================================================================


@dataclass(frozen=True, slots=True)
class Signed:
    """Signed 64-bit constant."""

    value: int

    def __post_init__(self) -> None:
        """Validate i64 range."""
        if not INT64_MIN <= self.value <= INT64_MAX:
            msg = f"Signed constant {self.value} is outside the i64 range"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class Unsigned:
    """Unsigned 64-bit constant."""

    value: int

    def __post_init__(self) -> None:
        """Validate u64 range."""
        if not 0 <= self.value <= UINT64_MAX:
            msg = f"Unsigned constant {self.value} is outside the u64 range"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class StringConstant:
    """String constant.

    ``string:constant(...)`` yields the type-name text "string", not its
    argument.
    """

    text: str


type Constant = Signed | Unsigned | StringConstant

# ============================================================================
# EXPRESSIONS
# ============================================================================


@dataclass(frozen=True, slots=True)
class ConstExpr:
    """Fixed value: I32:constant(5)"""

    value: Constant


@dataclass(frozen=True, slots=True)
class MinExpr:
    """Smallest value of a type: U8:min()"""

    ty: Type


@dataclass(frozen=True, slots=True)
class MaxExpr:
    """Largest value of a type: U8:max()"""

    ty: Type


@dataclass(frozen=True, slots=True)
class RandomExpr:
    """Random value between two bounds: I32:random(I32:min(), 10)

    Bounds are arbitrary sub-expressions.
    """

    ty: Type
    low: "Expression"
    high: "Expression"


@dataclass(frozen=True, slots=True)
class GenCompound:
    """Arithmetic over two expressions (+ - * / % only)."""

    left: "Expression"
    op: BinOp
    right: "Expression"

    def __post_init__(self) -> None:
        """Reject logical and relational operators."""
        if not self.op.is_arithmetic:
            msg = f"Operator '{self.op}' is not a generator arithmetic operator"
            raise ValueError(msg)

    @staticmethod
    def guard(expr: object) -> TypeIs["GenCompound"]:
        """Type guard for GenCompound."""
        return isinstance(expr, GenCompound)


type Expression = ConstExpr | MinExpr | MaxExpr | RandomExpr | GenCompound

# ============================================================================
# ROOT
# ============================================================================


@dataclass(frozen=True, slots=True)
class UserGen:
    """Named generator with its result type and one or more states.

    ``name`` is kept verbatim, including any ``std:`` prefix, so it matches
    FreeVarDecl.genname in programs.
    """

    result_type: Type
    name: str
    states: tuple[Expression, ...]

    def __post_init__(self) -> None:
        """Require at least one state."""
        if not self.states:
            msg = f"Generator '{self.name}' must have at least one state"
            raise ValueError(msg)
