"""Method scope resolution and block-parameter reassignment detection."""

from dataclasses import dataclass
from typing import Optional

from block_given_linter.domain.syntax import NodeKind, SyntaxNode, SyntaxTree


@dataclass(frozen=True)
class MethodScope:
    """Nearest enclosing def/defs of a node, with its explicit block parameter (if any)."""

    node: SyntaxNode
    name: str
    parameters: tuple[SyntaxNode, ...]
    body: Optional[SyntaxNode]
    block_param_name: Optional[str]

    @classmethod
    def from_definition(cls, node: SyntaxNode) -> "MethodScope":
        """Build from a def `(def name args body)` or defs `(defs recv name args body)` node."""
        offset = 1 if node.kind == NodeKind.DEFS else 0
        name = node.child(offset)
        args = node.child(offset + 1)
        body = node.child(offset + 2)
        parameters = args.child_nodes if isinstance(args, SyntaxNode) else ()
        return cls(
            node=node,
            name=name if isinstance(name, str) else "",
            parameters=parameters,
            body=body if isinstance(body, SyntaxNode) else None,
            block_param_name=cls._explicit_block_param_name(parameters),
        )

    @staticmethod
    def _explicit_block_param_name(parameters: tuple[SyntaxNode, ...]) -> Optional[str]:
        """Name of the `&name` parameter. Anonymous `&` counts as no explicit parameter."""
        for param in parameters:
            if param.kind == NodeKind.BLOCKARG:
                name = param.child(0)
                return name if isinstance(name, str) and name else None
        return None

    @property
    def has_block_param(self) -> bool:
        return self.block_param_name is not None


class MethodScopeResolver:
    """
    Finds the enclosing method of a node and answers reassignment questions.

    Reassignment results are memoized per (method node, name). Keys hold the
    node itself (identity-hashed), so a later tree can never hit an entry left
    by an earlier one. The host driver calls reset() between files.
    """

    def __init__(self) -> None:
        self._reassigned: dict[tuple[SyntaxNode, str], bool] = {}

    def reset(self) -> None:
        self._reassigned.clear()

    def enclosing_method(self, node: SyntaxNode, tree: SyntaxTree) -> Optional[MethodScope]:
        """Innermost def/defs ancestor of node, or None outside any method."""
        for ancestor in tree.ancestors(node):
            if ancestor.kind in NodeKind.METHOD_DEFINITIONS:
                return MethodScope.from_definition(ancestor)
        return None

    def is_reassigned(self, scope: MethodScope, name: str) -> bool:
        """True if `name` is the target of any local assignment in the method body."""
        key = (scope.node, name)
        if key not in self._reassigned:
            self._reassigned[key] = self._scan_for_assignment(scope.body, name)
        return self._reassigned[key]

    def usable_block_param(self, scope: MethodScope) -> Optional[str]:
        """Block-parameter name when its truthiness still means "a block was passed"."""
        name = scope.block_param_name
        if name is None or self.is_reassigned(scope, name):
            return None
        return name

    @staticmethod
    def _scan_for_assignment(body: Optional[SyntaxNode], name: str) -> bool:
        # lvasgn is the target of =, op-assign (||=, &&=, +=) and masgn alike.
        if body is None:
            return False
        for node in (body, *body.descendants()):
            if node.kind == NodeKind.LVASGN and node.child(0) == name:
                return True
        return False
