"""Domain models for rules and violations."""

from dataclasses import dataclass

__all__ = [
    "Checkable",
    "Fixable",
    "Violation",
]

from typing import Optional, Protocol

from block_given_linter.domain.entities import Correction
from block_given_linter.domain.syntax import SyntaxNode, SyntaxTree


@dataclass(frozen=True)
class Violation:
    """A rule violation with code, message, location, and an optional correction."""

    code: str
    message: str
    location: str
    node: SyntaxNode
    correction: Optional[Correction] = None
    """Text edit for the host's correction engine; None when autocorrect is off."""

    @property
    def fixable(self) -> bool:
        return self.correction is not None

    @classmethod
    def from_node(
        cls,
        *,
        code: str,
        message: str,
        node: SyntaxNode,
        tree: SyntaxTree,
        correction: Optional[Correction] = None,
    ) -> "Violation":
        """Build a Violation with location derived from node. Prefer over manual location=."""
        return cls(
            code=code,
            message=message,
            location=tree.location_of(node),
            node=node,
            correction=correction,
        )


# -----------------------------------------------------------------------------
# Rule protocols: Checkable (one node in, violations out) and Fixable
# (a violation in, a text correction out). Rules implement one or both.
# -----------------------------------------------------------------------------


class Checkable(Protocol):
    """One-and-done check: given a node and its tree, return violations."""

    code: str
    description: str

    def check(self, node: SyntaxNode, tree: SyntaxTree) -> list[Violation]:
        """Interrogate a node for a breach of the rule."""
        ...


class Fixable(Protocol):
    """Optional capability: rule can produce a correction or human fix instructions."""

    def fix(self, violation: Violation) -> Optional[Correction]:
        """Return the correction for a violation, or None if none is deterministic."""
        ...

    def get_fix_instructions(self, violation: Violation) -> str:
        """Provide human instructions for a manual fix."""
        ...
