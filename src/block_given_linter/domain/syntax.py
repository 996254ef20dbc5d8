"""Read-only view of the host's Ruby syntax tree (parser-gem node layout)."""

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Optional, Union


@dataclass(frozen=True)
class SourceRange:
    """Half-open character range [begin, end) plus the position of begin."""

    begin: int
    end: int
    line: int = 1
    """1-based line of begin."""
    column: int = 0
    """0-based column of begin."""

    def __post_init__(self) -> None:
        if self.begin < 0 or self.end < self.begin:
            raise ValueError(f"Invalid source range: {self.begin}..{self.end}")

    @property
    def length(self) -> int:
        return self.end - self.begin


class NodeKind:
    """Node type tags the rule reads. Names follow the parser gem."""

    DEF = "def"
    DEFS = "defs"
    ARGS = "args"
    BLOCKARG = "blockarg"
    SEND = "send"
    DEFINED = "defined?"
    YIELD = "yield"
    LVAR = "lvar"
    LVASGN = "lvasgn"
    BEGIN = "begin"
    IF = "if"
    WHILE = "while"
    UNTIL = "until"
    WHILE_POST = "while_post"
    UNTIL_POST = "until_post"
    AND = "and"
    OR = "or"
    BLOCK = "block"

    METHOD_DEFINITIONS: frozenset[str] = frozenset({DEF, DEFS})
    LOOPS: frozenset[str] = frozenset({WHILE, UNTIL, WHILE_POST, UNTIL_POST})
    BOOLEAN_OPERATORS: frozenset[str] = frozenset({AND, OR})
    # Parameter kinds that bind a local name inside a block's argument list.
    NAMED_PARAMETERS: frozenset[str] = frozenset(
        {"arg", "optarg", "restarg", "kwarg", "kwoptarg", "kwrestarg",
         "blockarg", "shadowarg", "procarg0"}
    )


Child = Union["SyntaxNode", str, None]


@dataclass(frozen=True, eq=False)
class SyntaxNode:
    """
    Immutable node produced by the host parser.

    Children keep the parser gem's positional layout: nested nodes, symbol
    names as plain strings, and None for absent slots (e.g. the receiver of
    a receiverless send). Nodes compare and hash by identity.
    """

    kind: str
    children: tuple[Child, ...] = ()
    location: SourceRange = field(default_factory=lambda: SourceRange(0, 0))

    @property
    def child_nodes(self) -> tuple["SyntaxNode", ...]:
        return tuple(c for c in self.children if isinstance(c, SyntaxNode))

    def child(self, index: int) -> Child:
        """Positional child, or None when the slot does not exist."""
        if 0 <= index < len(self.children):
            return self.children[index]
        return None

    def is_kind(self, *kinds: str) -> bool:
        return self.kind in kinds

    def descendants(self) -> Iterator["SyntaxNode"]:
        """Pre-order walk of every nested node, excluding self."""
        stack = list(reversed(self.child_nodes))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.child_nodes))

    def __repr__(self) -> str:
        return f"SyntaxNode({self.kind!r}, {self.location.begin}..{self.location.end})"


class SyntaxTree:
    """
    A root node plus a parent index built once by a single walk.

    The index lives beside the nodes; nodes are never mutated to cache parents.
    """

    def __init__(self, root: SyntaxNode, path: str = "") -> None:
        self._root = root
        self._path = path
        self._parents: dict[int, SyntaxNode] = {}
        self._nodes: dict[int, SyntaxNode] = {id(root): root}
        for node in [root, *root.descendants()]:
            for child in node.child_nodes:
                self._parents[id(child)] = node
                self._nodes[id(child)] = child

    @property
    def root(self) -> SyntaxNode:
        return self._root

    @property
    def path(self) -> str:
        return self._path

    def __contains__(self, node: object) -> bool:
        return isinstance(node, SyntaxNode) and self._nodes.get(id(node)) is node

    def parent(self, node: SyntaxNode) -> Optional[SyntaxNode]:
        """Direct parent, or None for the root (and for foreign nodes)."""
        if node not in self:
            return None
        return self._parents.get(id(node))

    def ancestors(self, node: SyntaxNode) -> Iterator[SyntaxNode]:
        """Ancestors from the direct parent outward to the root."""
        current = self.parent(node)
        while current is not None:
            yield current
            current = self._parents.get(id(current))

    def location_of(self, node: SyntaxNode) -> str:
        """path:line:column of a node, in the host's usual report format."""
        return f"{self._path}:{node.location.line}:{node.location.column}"
