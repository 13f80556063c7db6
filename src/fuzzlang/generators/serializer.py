"""Serialize generator ASTs back to generator-language source.

Constants do not remember the type token they were written with, so they
are printed through the widest token of their family:

    Signed(v)            ->  I64:constant(v)
    Unsigned(v)          ->  U64:constant(v), or v - 2**64 when v > i64 max
    StringConstant("string")  ->  string:constant(0)

Re-parsing yields the same Constant, which is all the AST records.

Arithmetic is printed for the precedence model the text will be parsed
with. Neither model has parentheses, so operand shapes that would need
them raise SerializationValidationError.

Python 3.13+.
"""

import re

from fuzzlang.constants import INT64_MAX, UINT64_MODULUS
from fuzzlang.core.depth_guard import DepthGuard
from fuzzlang.diagnostics import SerializationValidationError
from fuzzlang.enums import ArithmeticPrecedence, BinOp
from fuzzlang.typesys import GENERATOR_TYPE_NAMES, Builtin, Type

from .ast import (
    ConstExpr,
    Expression,
    GenCompound,
    MaxExpr,
    MinExpr,
    RandomExpr,
    Signed,
    StringConstant,
    Unsigned,
    UserGen,
)
from .parser import RESERVED_NAMES, STRING_TYPE_TOKEN

__all__ = ["GeneratorSerializer", "serialize_generators"]

_NAME = re.compile(r"std:[A-Za-z0-9_]+|[A-Za-z][A-Za-z0-9_]*")

_INDENT: str = "    "


def _type_token(ty: Type) -> str:
    """Upper-case generator spelling of a type."""
    match ty:
        case Builtin(native=native) if GENERATOR_TYPE_NAMES.get(native.value) is native:
            return native.value.upper()
        case _:
            msg = f"Type {ty!r} has no generator type token"
            raise SerializationValidationError(msg)


class GeneratorSerializer:
    """Converts UserGen values back to generator source.

    Thread-safe serializer with no mutable instance state.

    Usage:
        >>> from fuzzlang import parse_generators
        >>> gens = parse_generators("generator g U8 state U8:max() - U8:constant(1)")
        >>> print(GeneratorSerializer().serialize(gens), end="")
        generator g U8
            state U8:max() - U64:constant(1)
    """

    __slots__ = ("_max_depth", "_precedence")

    def __init__(
        self,
        *,
        precedence: ArithmeticPrecedence = ArithmeticPrecedence.FLAT,
        max_depth: int | None = None,
    ) -> None:
        """Initialize serializer.

        Args:
            precedence: Precedence model the output will be parsed with
            max_depth: Maximum nesting of random() bounds and operands
                (default: MAX_DEPTH)
        """
        self._precedence = ArithmeticPrecedence(precedence)
        self._max_depth = max_depth

    def serialize(self, generators: tuple[UserGen, ...] | list[UserGen]) -> str:
        """Serialize generators to source string.

        Returns:
            Source text, one header line per generator and one line per state

        Raises:
            SerializationValidationError: If a node has no surface spelling
            DepthLimitExceededError: If nesting exceeds max_depth
        """
        guard = DepthGuard() if self._max_depth is None else DepthGuard(max_depth=self._max_depth)
        output: list[str] = []
        for generator in generators:
            self._serialize_generator(generator, output, guard)
        return "".join(output)

    def _serialize_generator(self, generator: UserGen, output: list[str], guard: DepthGuard) -> None:
        if not _NAME.fullmatch(generator.name) or generator.name in RESERVED_NAMES:
            msg = f"Invalid generator name {generator.name!r}"
            raise SerializationValidationError(msg)
        output.append(f"generator {generator.name} {_type_token(generator.result_type)}\n")
        for state in generator.states:
            output.append(f"{_INDENT}state ")
            self._serialize_expression(state, output, guard)
            output.append("\n")

    def _serialize_expression(self, expr: Expression, output: list[str], guard: DepthGuard) -> None:
        """Serialize Expression nodes using structural pattern matching."""
        match expr:
            case ConstExpr(value=Signed(value=value)):
                output.append(f"I64:constant({value})")
            case ConstExpr(value=Unsigned(value=value)):
                literal = value - UINT64_MODULUS if value > INT64_MAX else value
                output.append(f"U64:constant({literal})")
            case ConstExpr(value=StringConstant(text=text)):
                if text != STRING_TYPE_TOKEN:
                    msg = f"String constant {text!r} has no spelling; only {STRING_TYPE_TOKEN!r}"
                    raise SerializationValidationError(msg)
                output.append(f"{STRING_TYPE_TOKEN}:constant(0)")
            case MinExpr(ty=ty):
                output.append(f"{_type_token(ty)}:min()")
            case MaxExpr(ty=ty):
                output.append(f"{_type_token(ty)}:max()")
            case RandomExpr(ty=ty, low=low, high=high):
                output.append(f"{_type_token(ty)}:random(")
                with guard:
                    self._serialize_expression(low, output, guard)
                    output.append(", ")
                    self._serialize_expression(high, output, guard)
                output.append(")")
            case GenCompound():
                self._serialize_compound(expr, output, guard)

    def _level(self, op: BinOp) -> int:
        """Binding strength of op under the configured model."""
        if self._precedence is ArithmeticPrecedence.FLAT:
            return 0
        return op.level

    def _serialize_compound(
        self, expr: GenCompound, output: list[str], guard: DepthGuard
    ) -> None:
        """Serialize a left-deep chain; operands must not need parentheses."""
        chain: list[tuple[BinOp, Expression]] = []
        node: Expression = expr
        while isinstance(node, GenCompound):
            left, right = node.left, node.right
            if isinstance(left, GenCompound) and self._level(left.op) < self._level(node.op):
                msg = (
                    f"Left operand '{left.op}' of '{node.op}' needs parentheses "
                    f"under {self._precedence} precedence"
                )
                raise SerializationValidationError(msg)
            if isinstance(right, GenCompound) and self._level(right.op) <= self._level(node.op):
                msg = (
                    f"Right operand '{right.op}' of '{node.op}' needs parentheses "
                    f"under {self._precedence} precedence"
                )
                raise SerializationValidationError(msg)
            chain.append((node.op, right))
            node = left

        with guard:
            self._serialize_expression(node, output, guard)
            for op, right in reversed(chain):
                output.append(f" {op.value} ")
                self._serialize_expression(right, output, guard)


def serialize_generators(
    generators: tuple[UserGen, ...] | list[UserGen],
    *,
    precedence: ArithmeticPrecedence = ArithmeticPrecedence.FLAT,
) -> str:
    """Serialize generators to source string.

    Convenience function for GeneratorSerializer.serialize().

    Raises:
        SerializationValidationError: If a node has no surface spelling
    """
    return GeneratorSerializer(precedence=precedence).serialize(generators)
