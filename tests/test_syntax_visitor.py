"""Tests for ASTVisitor and ASTTransformer over program ASTs."""

from __future__ import annotations

from dataclasses import replace

import pytest

from fuzzlang.core.depth_guard import DepthLimitExceededError
from fuzzlang.enums import BinOp, UOp
from fuzzlang.syntax import (
    ASTNode,
    ASTTransformer,
    ASTVisitor,
    Basic,
    Call,
    Compound,
    FreeVarDecl,
    IConst,
    Program,
    VarRef,
    Verify,
    parse_program,
    serialize_program,
)

SOURCE = """\
var:free n gen:std: old usize
var:constrained r int
r = function:call f { n function:call g { 1 } }
verify:new r != 0
while ( n > 0 ) {
    verify:new n < 10
    n = n - 1
}
"""


class CallCounter(ASTVisitor):
    """Counts Call nodes."""

    def __init__(self) -> None:
        super().__init__()
        self.count = 0

    def visit_Call(self, node: Call) -> ASTNode:
        self.count += 1
        return self.generic_visit(node)


class VariableCollector(ASTVisitor[None]):
    """Collects referenced variable names in visit order."""

    def __init__(self) -> None:
        super().__init__()
        self.names: list[str] = []

    def visit_VarRef(self, node: VarRef) -> None:
        self.names.append(node.name)


class TestASTVisitor:
    """Test read-only traversal."""

    def test_counts_nested_calls(self) -> None:
        """generic_visit reaches call arguments."""
        counter = CallCounter()
        counter.visit(parse_program(SOURCE))

        assert counter.count == 2

    def test_reaches_bodies(self) -> None:
        """Bodies of while statements are traversed in order."""
        collector = VariableCollector()
        collector.visit(parse_program(SOURCE))

        assert collector.names == ["r", "n", "r", "n", "n", "n", "n"]

    def test_generic_visit_returns_node(self) -> None:
        """The default visitor is the identity."""
        program = parse_program(SOURCE)

        assert ASTVisitor().visit(program) is program

    def test_depth_limit(self) -> None:
        """Deep trees raise DepthLimitExceededError."""
        expr: object = IConst("0")
        for _ in range(50):
            expr = Call("f", (expr,))  # type: ignore[arg-type]
        program = Program((), (Basic(expr),))  # type: ignore[arg-type]

        with pytest.raises(DepthLimitExceededError):
            ASTVisitor(max_depth=10).visit(program)


class RenameGenerator(ASTTransformer):
    """Renames std:old to std:new."""

    def visit_FreeVarDecl(self, node: FreeVarDecl) -> FreeVarDecl:
        if node.genname == "std:old":
            return replace(node, genname="std:new")
        return node


class StripVerify(ASTTransformer):
    """Removes every verify statement."""

    def visit_Verify(self, node: Verify) -> None:
        return None


class DuplicateBasic(ASTTransformer):
    """Replaces each Basic statement with two copies."""

    def visit_Basic(self, node: Basic) -> list[ASTNode]:
        return [node, node]


class FoldZeroAdd(ASTTransformer):
    """Rewrites x + 0 to x."""

    def visit_Compound(self, node: Compound) -> ASTNode:
        node = self.generic_visit(node)  # type: ignore[assignment]
        if node.op is BinOp.ADD and node.right == IConst("0"):
            return node.left
        return node


class TestASTTransformer:
    """Test tree rewriting."""

    def test_rename_generator(self) -> None:
        """Leaf rewrites propagate to the root."""
        program = RenameGenerator().transform(parse_program(SOURCE))

        assert isinstance(program, Program)
        assert "gen:std: new usize" in serialize_program(program)

    def test_remove_statements(self) -> None:
        """Returning None removes the node from its parent tuple, bodies included."""
        program = StripVerify().transform(parse_program(SOURCE))

        assert isinstance(program, Program)
        assert "verify:new" not in serialize_program(program)
        assert len(program.statements) == 2

    def test_expand_statements(self) -> None:
        """Returning a list splices nodes into the parent tuple."""
        program = DuplicateBasic().transform(parse_program("a b"))

        assert isinstance(program, Program)
        assert program.statements == (
            Basic(VarRef(UOp.NONE, "a")),
            Basic(VarRef(UOp.NONE, "a")),
            Basic(VarRef(UOp.NONE, "b")),
            Basic(VarRef(UOp.NONE, "b")),
        )

    def test_bottom_up_rewrite(self) -> None:
        """Transformers can rewrite children before their parent."""
        program = FoldZeroAdd().transform(parse_program("y = x + 0 + 0"))

        assert serialize_program(program) == "y = x\n"  # type: ignore[arg-type]

    def test_original_untouched(self) -> None:
        """Transformation never mutates the input tree."""
        original = parse_program(SOURCE)
        before = serialize_program(original)
        StripVerify().transform(original)

        assert serialize_program(original) == before
