"""GuidanceService: loads the rule registry and provides messages, defaults and manual_instructions."""

import logging
from pathlib import Path
from typing import cast

import yaml

from block_given_linter.domain.constants import REGISTRY_PREFIX
from block_given_linter.domain.protocols import GuidanceServiceProtocol
from block_given_linter.domain.registry_types import RuleRegistryEntry
from block_given_linter.domain.rule_msgs import RuleMsgBuilder

logger = logging.getLogger(__name__)


class GuidanceService(GuidanceServiceProtocol):
    """Loads rule_registry.yaml and provides get_entry / get_manual_instructions."""

    def __init__(self, registry_path: str | None = None) -> None:
        if registry_path is not None:
            self._path = Path(registry_path)
        else:
            # Default: packaged resource next to this package
            _base = Path(__file__).resolve().parent.parent.parent
            self._path = _base / "resources" / "rule_registry.yaml"
        self._registry: dict[str, RuleRegistryEntry] = {}
        self._load()

    def _load(self) -> None:
        if self._path.exists():
            with open(self._path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
                self._registry = (
                    cast(dict[str, RuleRegistryEntry],
                         data) if isinstance(data, dict) else {}
                )
        else:
            logger.warning("Rule registry not found at %s; using an empty registry.", self._path)
            self._registry = {}

    def get_registry(self) -> dict[str, RuleRegistryEntry]:
        """Return a shallow copy of the loaded registry for use by domain/use_cases."""
        return dict(self._registry)

    def get_entry(self, rule_code: str) -> RuleRegistryEntry | None:
        """Return the full registry entry for a rule by code or symbol."""
        return RuleMsgBuilder.get_entry(self._registry, rule_code)

    def get_default_style(self, rule_code: str) -> str | None:
        entry = self.get_entry(rule_code)
        if not entry:
            return None
        style = entry.get("default_style")
        return str(style) if style else None

    def get_supported_styles(self, rule_code: str) -> list[str] | None:
        entry = self.get_entry(rule_code)
        if not entry or "supported_styles" not in entry:
            return None
        return list(entry["supported_styles"])

    def get_short_description(self, rule_code: str) -> str | None:
        entry = self.get_entry(rule_code)
        if not entry or not entry.get("short_description"):
            return None
        return str(entry["short_description"])

    def get_manual_instructions(self, rule_code: str) -> str:
        """Return manual fix instructions for the rule, falling back to the registry default."""
        entry = self.get_entry(rule_code)
        if entry and "manual_instructions" in entry:
            return str(entry["manual_instructions"])
        default_entry = self._registry.get(f"{REGISTRY_PREFIX}_default")
        if default_entry and "manual_instructions" in default_entry:
            return str(default_entry["manual_instructions"])
        return "Fix the violation at the reported location."
