"""Pure message-building from a registry dict. No I/O or infrastructure imports."""

from collections.abc import Mapping
from typing import cast

from block_given_linter.domain.config import ConfigurationError
from block_given_linter.domain.constants import REGISTRY_PREFIX
from block_given_linter.domain.entities import Idiom, Resolution
from block_given_linter.domain.policy import IDIOM_PAIRS
from block_given_linter.domain.registry_types import RuleRegistryEntry


class RuleMsgBuilder:
    """Builds and renders the per-pair diagnostic messages of the rule."""

    @staticmethod
    def pair_key(encountered: Idiom, preferred: Idiom) -> str:
        return f"{encountered.value}->{preferred.value}"

    @staticmethod
    def get_entry(
        registry: Mapping[str, RuleRegistryEntry], rule_code: str
    ) -> RuleRegistryEntry | None:
        """Return registry entry for a rule by code or symbol."""
        entry = registry.get(f"{REGISTRY_PREFIX}{rule_code}")
        if isinstance(entry, dict):
            return cast(RuleRegistryEntry, dict(entry))
        for rid, e in registry.items():
            if not rid.startswith(REGISTRY_PREFIX) or rid == f"{REGISTRY_PREFIX}_default":
                continue
            if isinstance(e, dict) and e.get("symbol") == rule_code:
                return cast(RuleRegistryEntry, dict(e))
        return None

    @staticmethod
    def build_pair_templates(
        registry: Mapping[str, RuleRegistryEntry], rule_code: str
    ) -> dict[tuple[Idiom, Idiom], str]:
        """Return {(encountered, preferred): template} for all six idiom pairs.

        Raises ConfigurationError when the entry is missing or lacks a pair,
        so a broken registry fails at setup rather than mid-traversal.
        """
        entry = RuleMsgBuilder.get_entry(registry, rule_code)
        if entry is None:
            raise ConfigurationError(f"Rule registry has no entry for {rule_code}.")
        messages = entry.get("messages") or {}
        templates: dict[tuple[Idiom, Idiom], str] = {}
        missing: list[str] = []
        for encountered, preferred in IDIOM_PAIRS:
            key = RuleMsgBuilder.pair_key(encountered, preferred)
            template = messages.get(key) if isinstance(messages, dict) else None
            if not template:
                missing.append(key)
                continue
            templates[(encountered, preferred)] = str(template)
        if missing:
            raise ConfigurationError(
                f"Rule registry entry {rule_code} lacks messages for: {', '.join(missing)}."
            )
        return templates

    @staticmethod
    def render(
        templates: Mapping[tuple[Idiom, Idiom], str], resolution: Resolution
    ) -> str:
        """Fill the pair's template. {name} is the scope's block parameter."""
        template = templates[(resolution.encountered, resolution.preferred)]
        return template.format(name=resolution.block_param_name or "")
