"""Block presence check (W9501)."""

import logging
from typing import TYPE_CHECKING

from block_given_linter.domain.constants import RULE_CODE
from block_given_linter.domain.rules.fast_block_given import FastBlockGivenRule
from block_given_linter.domain.rules.idioms import BLOCK_GIVEN_METHOD
from block_given_linter.domain.syntax import SyntaxNode, SyntaxTree

if TYPE_CHECKING:
    from block_given_linter.domain.protocols import DiagnosticSinkProtocol

logger = logging.getLogger(__name__)


class FastBlockGivenChecker:
    """W9501: Block presence idiom. Thin: delegates to FastBlockGivenRule.

    The host's traversal driver calls visit_<kind> for every node of that kind
    and open() before each file.
    """

    name: str = "fast-block-given"
    CODES = [RULE_CODE]
    # Sends the host needs to route here; everything else is filtered out early.
    RESTRICT_ON_SEND: frozenset[str] = frozenset({BLOCK_GIVEN_METHOD})

    def __init__(self, sink: "DiagnosticSinkProtocol", rule: FastBlockGivenRule) -> None:
        self.sink = sink
        self._rule = rule

    def open(self) -> None:
        """Start of a file: drop per-file reassignment results."""
        self._rule.resolver.reset()

    def visit_send(self, node: SyntaxNode, tree: SyntaxTree) -> None:
        if node.child(1) not in self.RESTRICT_ON_SEND:
            return
        self._report(node, tree)

    def visit_defined(self, node: SyntaxNode, tree: SyntaxTree) -> None:
        self._report(node, tree)

    def visit_lvar(self, node: SyntaxNode, tree: SyntaxTree) -> None:
        self._report(node, tree)

    def _report(self, node: SyntaxNode, tree: SyntaxTree) -> None:
        """Delegate to the domain rule; report each violation to the sink."""
        for v in self._rule.check(node, tree):
            logger.debug("%s %s: %s", v.code, v.location, v.message)
            self.sink.add_violation(v)

    @staticmethod
    def visitor_name(node: SyntaxNode) -> str:
        """visit_* method name the driver should call for node (defined? -> visit_defined)."""
        return f"visit_{node.kind.rstrip('?')}"
