"""Tests for GeneratorSerializer and generator AST validation."""

from __future__ import annotations

import pytest
from hypothesis import event, given

from fuzzlang.core.depth_guard import DepthLimitExceededError
from fuzzlang.diagnostics import SerializationValidationError
from fuzzlang.enums import ArithmeticPrecedence, BinOp, Native
from fuzzlang.generators import (
    ConstExpr,
    GenCompound,
    GeneratorSerializer,
    MaxExpr,
    MinExpr,
    RandomExpr,
    Signed,
    StringConstant,
    Unsigned,
    UserGen,
    parse_generators,
    serialize_generators,
)
from fuzzlang.typesys import Builtin, Pointer
from tests.strategies import generator_files

U8 = Builtin(Native.U8)
I32 = Builtin(Native.I32)
ONE = ConstExpr(Signed(1))

# ============================================================================
# AST VALIDATION
# ============================================================================


class TestGeneratorAST:
    """Test construction-time checks on generator nodes."""

    @pytest.mark.parametrize("value", [2**63, -(2**63) - 1])
    def test_signed_range(self, value: int) -> None:
        """Signed holds i64 values only."""
        with pytest.raises(ValueError, match="i64"):
            Signed(value)

    @pytest.mark.parametrize("value", [-1, 2**64])
    def test_unsigned_range(self, value: int) -> None:
        """Unsigned holds u64 values only."""
        with pytest.raises(ValueError, match="u64"):
            Unsigned(value)

    def test_compound_rejects_relational(self) -> None:
        """Only arithmetic operators build a GenCompound."""
        with pytest.raises(ValueError, match="not a generator arithmetic operator"):
            GenCompound(ONE, BinOp.EQUAL, ONE)

    def test_user_gen_needs_state(self) -> None:
        """A UserGen without states cannot be built."""
        with pytest.raises(ValueError, match="at least one state"):
            UserGen(I32, "g", ())

    def test_guard(self) -> None:
        """GenCompound.guard narrows compound expressions."""
        assert GenCompound.guard(GenCompound(ONE, BinOp.ADD, ONE))
        assert not GenCompound.guard(ONE)


# ============================================================================
# OUTPUT
# ============================================================================


class TestOutput:
    """Test canonical spelling."""

    def test_layout(self) -> None:
        """Header line then one indented line per state."""
        gens = (
            UserGen(
                U8,
                "std:bytes",
                (
                    MinExpr(U8),
                    RandomExpr(U8, ConstExpr(Unsigned(1)), MaxExpr(U8)),
                    ConstExpr(StringConstant("string")),
                ),
            ),
        )

        assert serialize_generators(gens) == (
            "generator std:bytes U8\n"
            "    state U8:min()\n"
            "    state U8:random(U64:constant(1), U8:max())\n"
            "    state string:constant(0)\n"
        )

    def test_constants_use_widest_token(self) -> None:
        """Signed prints through I64, Unsigned through U64 with wrap."""
        gens = (
            UserGen(
                I32,
                "g",
                (
                    ConstExpr(Signed(-5)),
                    ConstExpr(Unsigned(2**64 - 1)),
                    ConstExpr(Unsigned(7)),
                ),
            ),
        )

        assert serialize_generators(gens) == (
            "generator g I32\n"
            "    state I64:constant(-5)\n"
            "    state U64:constant(-1)\n"
            "    state U64:constant(7)\n"
        )

    def test_doc_example(self) -> None:
        """Parsed constants re-serialize through the wide token."""
        gens = parse_generators("generator g U8 state U8:max() - U8:constant(1)")

        assert GeneratorSerializer().serialize(gens) == (
            "generator g U8\n    state U8:max() - U64:constant(1)\n"
        )


class TestValidation:
    """Test shapes without a spelling."""

    def test_flat_right_compound(self) -> None:
        """FLAT has no spelling for a right-nested compound."""
        expr = GenCompound(ONE, BinOp.ADD, GenCompound(ONE, BinOp.MUL, ONE))
        gens = (UserGen(I32, "g", (expr,)),)

        with pytest.raises(SerializationValidationError, match="flat"):
            serialize_generators(gens)

    def test_conventional_right_compound(self) -> None:
        """CONVENTIONAL spells a + (b * c) without parentheses."""
        expr = GenCompound(ONE, BinOp.ADD, GenCompound(ONE, BinOp.MUL, ONE))
        gens = (UserGen(I32, "g", (expr,)),)

        output = serialize_generators(gens, precedence=ArithmeticPrecedence.CONVENTIONAL)

        assert output.endswith("I64:constant(1) + I64:constant(1) * I64:constant(1)\n")

    def test_conventional_left_looser(self) -> None:
        """CONVENTIONAL has no spelling for (a + b) * c."""
        expr = GenCompound(GenCompound(ONE, BinOp.ADD, ONE), BinOp.MUL, ONE)
        gens = (UserGen(I32, "g", (expr,)),)

        with pytest.raises(SerializationValidationError, match="Left operand"):
            serialize_generators(gens, precedence=ArithmeticPrecedence.CONVENTIONAL)

    @pytest.mark.parametrize("name", ["state", "9lives", "std:", "has space", "generator"])
    def test_invalid_name(self, name: str) -> None:
        """Generator names must re-parse as names."""
        with pytest.raises(SerializationValidationError, match="Invalid generator name"):
            serialize_generators((UserGen(I32, name, (ONE,)),))

    @pytest.mark.parametrize("ty", [Builtin(Native.USIZE), Builtin(Native.VOID), Pointer(U8)])
    def test_non_generator_type(self, ty: object) -> None:
        """Only the eight sized integer types have tokens."""
        with pytest.raises(SerializationValidationError, match="no generator type token"):
            serialize_generators((UserGen(ty, "g", (ONE,)),))  # type: ignore[arg-type]

    def test_other_string_text(self) -> None:
        """Only the text 'string' has a spelling."""
        gens = (UserGen(I32, "g", (ConstExpr(StringConstant("hello")),)),)

        with pytest.raises(SerializationValidationError):
            serialize_generators(gens)

    def test_depth_limit(self) -> None:
        """Deeply nested random() bounds raise DepthLimitExceededError."""
        expr: object = ONE
        for _ in range(10):
            expr = RandomExpr(I32, expr, ONE)  # type: ignore[arg-type]
        gens = (UserGen(I32, "g", (expr,)),)  # type: ignore[arg-type]

        with pytest.raises(DepthLimitExceededError):
            GeneratorSerializer(max_depth=5).serialize(gens)


# ============================================================================
# ROUND-TRIP
# ============================================================================


class TestRoundTrip:
    """parse(serialize(gens)) reproduces the generators."""

    @given(generator_files(ArithmeticPrecedence.FLAT))
    def test_flat_round_trip(self, gens: tuple[UserGen, ...]) -> None:
        """Property: FLAT-shaped generators round-trip under FLAT."""
        event(f"generators={len(gens)}")
        source = serialize_generators(gens)

        assert parse_generators(source) == gens

    @given(generator_files(ArithmeticPrecedence.CONVENTIONAL))
    def test_conventional_round_trip(self, gens: tuple[UserGen, ...]) -> None:
        """Property: CONVENTIONAL-shaped generators round-trip under CONVENTIONAL."""
        event(f"generators={len(gens)}")
        precedence = ArithmeticPrecedence.CONVENTIONAL
        source = serialize_generators(gens, precedence=precedence)

        assert parse_generators(source, precedence=precedence) == gens
