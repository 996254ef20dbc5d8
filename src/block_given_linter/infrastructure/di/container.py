from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, cast

from block_given_linter.domain.config import ConfigurationLoader, EnforcementStyle
from block_given_linter.domain.constants import RULE_CODE
from block_given_linter.domain.rule_msgs import RuleMsgBuilder
from block_given_linter.domain.rules.fast_block_given import FastBlockGivenRule
from block_given_linter.domain.scope import MethodScopeResolver
from block_given_linter.infrastructure.services.guidance_service import GuidanceService
from block_given_linter.use_cases.checks.block_given import FastBlockGivenChecker

if TYPE_CHECKING:
    from block_given_linter.domain.protocols import (
        DiagnosticSinkProtocol,
        GuidanceServiceProtocol,
    )


class BlockGivenContainer:
    """
    Dependency Injection Container for the FastBlockGiven rule.

    One container per analysis run: the host's config section is validated
    here, once, before any checker exists.
    """

    def __init__(
        self,
        config_dict: Mapping[str, object] | None = None,
        registry_path: str | None = None,
    ) -> None:
        self._singletons: dict[str, Any] = {}
        self._register_defaults(config_dict, registry_path)

    def _register_defaults(
        self, config_dict: Mapping[str, object] | None, registry_path: str | None
    ) -> None:
        """Register default implementations. Raises ConfigurationError on bad config."""
        guidance_service = GuidanceService(registry_path)
        self.register_singleton("GuidanceService", guidance_service)

        supported_styles = guidance_service.get_supported_styles(RULE_CODE)
        if supported_styles is not None:
            EnforcementStyle.check_supported(supported_styles)
        default_style = (
            guidance_service.get_default_style(RULE_CODE)
            or EnforcementStyle.CHECK_IF_BLOCK_TRUTHY.value
        )
        config_loader = ConfigurationLoader(config_dict, default_style=default_style)
        self.register_singleton("ConfigurationLoader", config_loader)

        templates = RuleMsgBuilder.build_pair_templates(
            guidance_service.get_registry(), RULE_CODE)
        self.register_singleton(
            "FastBlockGivenRule",
            FastBlockGivenRule(
                config_loader,
                templates,
                resolver=MethodScopeResolver(),
                manual_instructions=guidance_service.get_manual_instructions(RULE_CODE),
                description=guidance_service.get_short_description(RULE_CODE),
            ),
        )

    # JUSTIFICATION: DI Container must handle any type of service
    def register_singleton(self, key: str, instance: Any) -> None:
        """Register a singleton instance."""
        self._singletons[key] = instance

    # JUSTIFICATION: DI Container must return any type of service
    def get(self, key: str) -> Any:
        """Retrieve a dependency by key. Prefer explicit get_* methods for type safety."""
        if key in self._singletons:
            return self._singletons[key]
        raise ValueError(f"Dependency '{key}' not registered.")

    def get_guidance_service(self) -> "GuidanceServiceProtocol":
        """Return the guidance service (rule registry)."""
        return cast(GuidanceService, self.get("GuidanceService"))

    def get_config_loader(self) -> ConfigurationLoader:
        """Return the configuration loader (created at composition root)."""
        return cast(ConfigurationLoader, self.get("ConfigurationLoader"))

    def get_rule(self) -> FastBlockGivenRule:
        return cast(FastBlockGivenRule, self.get("FastBlockGivenRule"))

    def create_checker(self, sink: "DiagnosticSinkProtocol") -> FastBlockGivenChecker:
        """Return a checker reporting to sink. One per host (or worker)."""
        return FastBlockGivenChecker(sink, self.get_rule())
