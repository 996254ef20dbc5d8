from collections.abc import Mapping
from typing import TYPE_CHECKING, Optional, Protocol

from block_given_linter.domain.registry_types import RuleRegistryEntry

if TYPE_CHECKING:
    from block_given_linter.domain.rules import Violation


class GuidanceServiceProtocol(Protocol):
    """Protocol for the rule registry (messages, defaults, manual instructions)."""

    def get_registry(self) -> dict[str, RuleRegistryEntry]:
        ...

    def get_entry(self, rule_code: str) -> Optional[RuleRegistryEntry]:
        ...

    def get_default_style(self, rule_code: str) -> Optional[str]:
        ...

    def get_supported_styles(self, rule_code: str) -> Optional[list[str]]:
        ...

    def get_short_description(self, rule_code: str) -> Optional[str]:
        ...

    def get_manual_instructions(self, rule_code: str) -> str:
        ...


class DiagnosticSinkProtocol(Protocol):
    """Host-side collector of diagnostics (and their corrections)."""

    def add_violation(self, violation: "Violation") -> None:
        ...


class AnalysisHostProtocol(DiagnosticSinkProtocol, Protocol):
    """The analysis engine hosting the rule: config source and checker registry."""

    def config_for(self, rule_name: str) -> Mapping[str, object]:
        """Return the host's config section for a rule (empty when absent)."""
        ...

    def register_checker(self, checker: object) -> None:
        ...
