"""FastBlockGiven rule (W9501): one idiom for "was a block passed to this method"."""

import logging
from collections.abc import Mapping
from typing import Optional

from block_given_linter.domain.config import ConfigurationLoader, EnforcementStyle
from block_given_linter.domain.constants import RULE_CODE, RULE_NAME
from block_given_linter.domain.entities import Correction, Idiom, Occurrence
from block_given_linter.domain.policy import BlockPresencePolicy
from block_given_linter.domain.rule_msgs import RuleMsgBuilder
from block_given_linter.domain.rules import Checkable, Fixable, Violation
from block_given_linter.domain.rules.idioms import (
    is_shadowed,
    match_block_given_call,
    match_block_truthy_ref,
    match_defined_yield_probe,
)
from block_given_linter.domain.scope import MethodScope, MethodScopeResolver
from block_given_linter.domain.syntax import NodeKind, SyntaxNode, SyntaxTree

logger = logging.getLogger(__name__)


class FastBlockGivenRule(Checkable, Fixable):
    """
    Rule for W9501: flags block_given?, defined?(yield) or `if block` when
    another idiom is the configured EnforcedStyle.

    Only fires inside a method. Truthiness is never suggested or flagged
    unless the method declares `&name` and never reassigns it.
    """

    code: str = RULE_CODE
    symbol: str = RULE_NAME
    description: str = "Check block presence with the configured idiom."

    def __init__(
        self,
        config_loader: ConfigurationLoader,
        message_templates: Mapping[tuple[Idiom, Idiom], str],
        resolver: Optional[MethodScopeResolver] = None,
        manual_instructions: str = "",
        description: Optional[str] = None,
    ) -> None:
        self._config_loader = config_loader
        self._policy = BlockPresencePolicy(config_loader.enforced_style)
        self._templates = dict(message_templates)
        self._resolver = resolver or MethodScopeResolver()
        self._manual_instructions = manual_instructions
        if description:
            self.description = description

    @property
    def resolver(self) -> MethodScopeResolver:
        return self._resolver

    def check(self, node: SyntaxNode, tree: SyntaxTree) -> list[Violation]:
        """Check a send, defined? or lvar node. Returns at most one violation."""
        if node.kind not in (NodeKind.SEND, NodeKind.DEFINED, NodeKind.LVAR):
            return []
        scope = self._resolver.enclosing_method(node, tree)
        if scope is None:
            return []
        usable_block_param = self._usable_block_param(node, scope)
        occurrence = self._match(node, tree, usable_block_param)
        if occurrence is None:
            return []
        resolution = self._policy.resolve(occurrence, scope, usable_block_param)
        if resolution is None:
            return []
        if resolution.preferred is Idiom.BLOCK_TRUTHY_REF and is_shadowed(
            node, tree, resolution.block_param_name or ""
        ):
            # `block` here would name the Ruby block's own parameter.
            logger.debug(
                "%r is shadowed at %s; not suggesting it.",
                resolution.block_param_name, tree.location_of(node))
            return []
        correction = None
        if self._config_loader.autocorrect:
            correction = Correction.replace_node(node, resolution.replacement)
        return [
            Violation.from_node(
                code=self.code,
                message=RuleMsgBuilder.render(self._templates, resolution),
                node=node,
                tree=tree,
                correction=correction,
            )
        ]

    def fix(self, violation: Violation) -> Optional[Correction]:
        """Return the correction computed during check, if autocorrect is enabled."""
        return violation.correction

    def get_fix_instructions(self, violation: Violation) -> str:
        if self._manual_instructions:
            return f"{violation.message} {self._manual_instructions}"
        return violation.message

    def _usable_block_param(self, node: SyntaxNode, scope: MethodScope) -> Optional[str]:
        # Reassignment is only relevant when truthiness is involved on either side.
        truthy_style = self._policy.style is EnforcementStyle.CHECK_IF_BLOCK_TRUTHY
        if not truthy_style and node.kind != NodeKind.LVAR:
            return None
        return self._resolver.usable_block_param(scope)

    @staticmethod
    def _match(
        node: SyntaxNode, tree: SyntaxTree, usable_block_param: Optional[str]
    ) -> Optional[Occurrence]:
        if node.kind == NodeKind.SEND:
            return match_block_given_call(node)
        if node.kind == NodeKind.DEFINED:
            return match_defined_yield_probe(node)
        return match_block_truthy_ref(node, tree, usable_block_param)
