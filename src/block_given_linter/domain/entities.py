from dataclasses import dataclass
from enum import Enum
from typing import Optional

from block_given_linter.domain.syntax import SourceRange, SyntaxNode


class Idiom(Enum):
    """The three ways Ruby code asks "was a block passed to this call"."""
    BLOCK_GIVEN_CALL = "block_given_call"        # block_given?
    DEFINED_YIELD_PROBE = "defined_yield_probe"  # defined?(yield)
    BLOCK_TRUTHY_REF = "block_truthy_ref"        # if block

    def source_text(self, block_param_name: Optional[str] = None) -> str:
        """Canonical Ruby text of this idiom. Truthiness needs the param name."""
        if self is Idiom.BLOCK_GIVEN_CALL:
            return "block_given?"
        if self is Idiom.DEFINED_YIELD_PROBE:
            return "defined?(yield)"
        if not block_param_name:
            raise ValueError("Block truthiness needs a block parameter name.")
        return block_param_name


@dataclass(frozen=True)
class Occurrence:
    """A node matched as one idiom. referenced_name is set for truthiness refs only."""
    node: SyntaxNode
    idiom: Idiom
    referenced_name: Optional[str] = None


@dataclass(frozen=True)
class Correction:
    """
    Pure description of a text replacement.

    The host's correction engine applies it; the range is always exactly the
    matched node's range so the enclosing statement keeps its structure.
    """
    range: SourceRange
    replacement: str

    @classmethod
    def replace_node(cls, node: SyntaxNode, replacement: str) -> "Correction":
        """Create a correction that swaps the node's text for replacement."""
        return cls(range=node.location, replacement=replacement)

    def apply(self, source: str) -> str:
        """Return source with this single edit applied."""
        return source[: self.range.begin] + self.replacement + source[self.range.end:]


@dataclass(frozen=True)
class Resolution:
    """Policy outcome for one occurrence: which idiom to prefer and its text."""
    encountered: Idiom
    preferred: Idiom
    replacement: str
    block_param_name: Optional[str] = None
