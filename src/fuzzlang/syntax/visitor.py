"""Visitor pattern for program AST traversal.

Enables tools to traverse and transform program ASTs without modifying
node classes: analyzers that collect referenced variables, rewriters that
rename generators, mutators used by the fuzzing engine.

NOTE: This module follows Python stdlib ast.NodeVisitor naming convention.
Methods are named visit_NodeName (PascalCase) rather than visit_node_name.

Type Parameters:
- ASTVisitor[T] is generic over return type T
- ASTVisitor (no type param) defaults to T=ASTNode
- ASTTransformer uses extended return type: ASTNode | None | list[ASTNode]

Depth:
    Every node visited through generic_visit counts one level against
    max_depth. Long left-deep operator chains count one level per operator,
    so raise max_depth when visiting machine-generated expressions.

Python 3.13+.
"""

from collections.abc import Callable
from dataclasses import Field, fields, replace
from typing import ClassVar

from fuzzlang.constants import MAX_DEPTH
from fuzzlang.core.depth_guard import DepthGuard

from .ast import (
    UDT,
    Assignment,
    ASTNode,
    Basic,
    Call,
    Compound,
    Constrained,
    Constraint,
    Free,
    FreeVarDecl,
    FuncDecl,
    Function,
    If,
    Program,
    StructDecl,
    Typedef,
    UDTDecl,
    Verify,
    While,
)

__all__ = ["ASTTransformer", "ASTVisitor"]

type TransformerResult = ASTNode | None | list[ASTNode]


class ASTVisitor[T = ASTNode]:
    """Base visitor for traversing program ASTs.

    Follows stdlib ast.NodeVisitor convention: generic_visit() automatically
    traverses all child nodes. Override visit_NodeType methods to add custom
    behavior.

    Dispatch table is built once per class via __init_subclass__, with an
    instance-level cache of bound methods.

    Example:
        >>> class CountCallsVisitor(ASTVisitor):
        ...     def __init__(self):
        ...         super().__init__()
        ...         self.count = 0
        ...
        ...     def visit_Call(self, node: Call) -> ASTNode:
        ...         self.count += 1
        ...         return self.generic_visit(node)  # Traverse arguments
        ...
        >>> visitor = CountCallsVisitor()
        >>> visitor.visit(program)
        >>> print(visitor.count)
    """

    __slots__ = ("_depth_guard", "_instance_dispatch_cache")

    # Method names only, not bound methods
    _class_visit_methods: ClassVar[dict[str, str]] = {}

    # Dataclass fields per node type, shared by all visitors
    _fields_cache: ClassVar[dict[type, tuple[Field[object], ...]]] = {}

    def __init_subclass__(cls, **kwargs: object) -> None:
        """Build class-level dispatch table when subclass is defined."""
        super().__init_subclass__(**kwargs)
        cls._class_visit_methods = {}
        for name in dir(cls):
            if name.startswith("visit_") and name != "visit":
                cls._class_visit_methods[name[6:]] = name

    def __init__(self, *, max_depth: int | None = None) -> None:
        """Initialize visitor with depth guard and dispatch cache.

        Subclasses MUST call super().__init__().

        Args:
            max_depth: Maximum traversal depth (default: MAX_DEPTH from constants).
        """
        effective_max_depth = max_depth if max_depth is not None else MAX_DEPTH
        self._depth_guard = DepthGuard(max_depth=effective_max_depth)
        self._instance_dispatch_cache: dict[type, Callable[[ASTNode], T]] = {}

    def visit(self, node: ASTNode) -> T:
        """Visit a node, dispatching to visit_ClassName or generic_visit.

        Args:
            node: AST node to visit

        Returns:
            Result of visiting the node
        """
        node_type = type(node)

        if node_type in self._instance_dispatch_cache:
            return self._instance_dispatch_cache[node_type](node)

        node_type_name = node_type.__name__
        if node_type_name in self._class_visit_methods:
            method = getattr(self, self._class_visit_methods[node_type_name])
        else:
            method = self.generic_visit

        self._instance_dispatch_cache[node_type] = method
        return method(node)  # type: ignore[no-any-return]  # getattr returns Any

    @staticmethod
    def _get_node_fields(node_type: type) -> tuple[Field[object], ...]:
        """Get cached dataclass fields for a node type."""
        if node_type not in ASTVisitor._fields_cache:
            ASTVisitor._fields_cache[node_type] = fields(node_type)
        return ASTVisitor._fields_cache[node_type]

    def generic_visit(self, node: ASTNode) -> T:
        """Default visitor (traverses children with depth protection).

        Visits every dataclass-valued field and every dataclass inside a
        tuple field, including resolved Type values inside BasicType.

        Returns:
            The node itself (identity)

        Raises:
            DepthLimitExceededError: If traversal depth exceeds max_depth
        """
        with self._depth_guard:
            for field in self._get_node_fields(type(node)):
                value = getattr(node, field.name)

                # str covers StrEnum operators and kinds
                if value is None or isinstance(value, (str, int, bool)):
                    continue

                if isinstance(value, tuple):
                    for item in value:
                        if hasattr(item, "__dataclass_fields__"):
                            self.visit(item)
                elif hasattr(value, "__dataclass_fields__"):
                    self.visit(value)

        return node  # type: ignore[return-value]  # T defaults to ASTNode


class ASTTransformer(ASTVisitor[TransformerResult]):
    """AST transformer producing new immutable trees.

    Each visit method can return:
    - The modified node (replaces original)
    - None (removes node from its parent tuple)
    - A list of nodes (replaces single node with multiple)

    Removal and expansion apply only inside tuple children (declarations,
    statements, bodies, fields, parameters, arguments).

    Example - Rename a generator everywhere:
        >>> class RenameGenerator(ASTTransformer):
        ...     def visit_FreeVarDecl(self, node: FreeVarDecl) -> FreeVarDecl:
        ...         if node.genname == "std:old":
        ...             return replace(node, genname="std:new")
        ...         return node
        ...
        >>> renamed = RenameGenerator().transform(program)

    Example - Drop all verify statements:
        >>> class StripVerify(ASTTransformer):
        ...     def visit_Verify(self, node: Verify) -> None:
        ...         return None
    """

    def transform(self, node: ASTNode) -> TransformerResult:
        """Transform an AST node or tree.

        Args:
            node: AST node to transform

        Returns:
            Transformed node (may be different type, None, or list)
        """
        return self.visit(node)

    def generic_visit(self, node: ASTNode) -> TransformerResult:  # noqa: PLR0911
        """Transform node children using dataclasses.replace().

        Raises:
            DepthLimitExceededError: If traversal depth exceeds max_depth
        """
        with self._depth_guard:
            match node:
                case Program(declarations=declarations, statements=statements):
                    return replace(
                        node,
                        declarations=self._transform_list(declarations),
                        statements=self._transform_list(statements),
                    )
                case UDT(ty=ty):
                    return replace(node, ty=self.visit(ty))
                case StructDecl(fields=struct_fields):
                    return replace(node, fields=self._transform_list(struct_fields))
                case UDTDecl(ty=ty) | Constrained(ty=ty) | FreeVarDecl(ty=ty):
                    return replace(node, ty=self.visit(ty))
                case Typedef(source=source):
                    return replace(node, source=self.visit(source))
                case Free(var=var):
                    return replace(node, var=self.visit(var))
                case Function(func=func):
                    return replace(node, func=self.visit(func))
                case FuncDecl(retval=retval, parameters=parameters):
                    return replace(
                        node,
                        retval=self.visit(retval),
                        parameters=self._transform_list(parameters),
                    )
                case Basic(expr=expr) | Verify(expr=expr) | Constraint(expr=expr):
                    return replace(node, expr=self.visit(expr))
                case Assignment(lhs=lhs, rhs=rhs):
                    return replace(node, lhs=self.visit(lhs), rhs=self.visit(rhs))
                case If(condition=condition, body=body) | While(condition=condition, body=body):
                    return replace(
                        node,
                        condition=self.visit(condition),
                        body=self._transform_list(body),
                    )
                case Call(arguments=arguments):
                    return replace(node, arguments=self._transform_list(arguments))
                case Compound(left=left, right=right):
                    return replace(node, left=self.visit(left), right=self.visit(right))
                case _:
                    # Leaf nodes: Include, BasicType, EnumDecl, StructRef, EnumRef,
                    # IConst, FConst, VarRef, Field. Return as-is (immutable).
                    return node

    def _transform_list(self, nodes: tuple[ASTNode, ...]) -> tuple[ASTNode, ...]:
        """Transform a tuple of nodes, dropping None and flattening lists."""
        result: list[ASTNode] = []
        for node in nodes:
            transformed = self.visit(node)
            match transformed:
                case None:
                    continue
                case list():
                    result.extend(transformed)
                case _:
                    result.append(transformed)
        return tuple(result)
