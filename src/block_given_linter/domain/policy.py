"""Decides, per occurrence, whether to flag it and what to rewrite it to."""

import logging
from itertools import permutations
from typing import Optional

from block_given_linter.domain.config import EnforcementStyle
from block_given_linter.domain.entities import Idiom, Occurrence, Resolution
from block_given_linter.domain.scope import MethodScope

logger = logging.getLogger(__name__)

# Every (encountered, preferred) pair the policy can produce.
IDIOM_PAIRS: tuple[tuple[Idiom, Idiom], ...] = tuple(permutations(Idiom, 2))


class BlockPresencePolicy:
    """
    Combines the configured style, a matched occurrence and its scope.

    Truthiness is only trusted when the method declares an explicit block
    parameter that is never reassigned; callers pass that name already
    gated as usable_block_param (None otherwise).
    """

    def __init__(self, style: EnforcementStyle) -> None:
        self._style = style

    @property
    def style(self) -> EnforcementStyle:
        return self._style

    def resolve(
        self,
        occurrence: Occurrence,
        scope: Optional[MethodScope],
        usable_block_param: Optional[str],
    ) -> Optional[Resolution]:
        """Return the rewrite to propose, or None when no diagnostic is due."""
        if scope is None:
            logger.debug("No enclosing method for %r; not actionable.", occurrence.node)
            return None
        encountered = occurrence.idiom
        preferred = self._style.preferred_idiom
        if encountered is preferred:
            return None
        if Idiom.BLOCK_TRUTHY_REF in (encountered, preferred) and usable_block_param is None:
            logger.debug(
                "Method %r has no usable block parameter; skipping %s.",
                scope.name, encountered.value)
            return None
        return Resolution(
            encountered=encountered,
            preferred=preferred,
            replacement=preferred.source_text(usable_block_param),
            block_param_name=usable_block_param,
        )
