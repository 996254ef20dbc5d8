"""Configuration for the FastBlockGiven rule. Immutable value object validated once at construction."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from enum import Enum

from block_given_linter.domain.entities import Idiom

logger = logging.getLogger(__name__)


class ConfigurationError(ValueError):
    """Rule configuration is unusable. Raised at setup, never per node."""


class EnforcementStyle(Enum):
    """Configured preferred idiom. Values are the EnforcedStyle strings."""
    CHECK_IF_BLOCK_GIVEN = "check_if_block_given"
    CHECK_IF_DEFINED_YIELD = "check_if_defined_yield"
    CHECK_IF_BLOCK_TRUTHY = "check_if_block_truthy"

    @property
    def preferred_idiom(self) -> Idiom:
        return _PREFERRED_IDIOMS[self]

    @classmethod
    def parse(cls, value: object) -> EnforcementStyle:
        """Return the style for a config value or raise ConfigurationError."""
        for style in cls:
            if value == style.value:
                return style
        supported = ", ".join(style.value for style in cls)
        raise ConfigurationError(
            f"Unknown EnforcedStyle selected ({value!r})! Supported styles: {supported}."
        )

    @classmethod
    def check_supported(cls, declared: object) -> None:
        """Raise ConfigurationError unless declared lists exactly the known styles."""
        known = {style.value for style in cls}
        if not isinstance(declared, list) or set(declared) != known:
            raise ConfigurationError(
                f"supported_styles {declared!r} does not match the rule's styles: "
                f"{', '.join(sorted(known))}."
            )


_PREFERRED_IDIOMS: dict[EnforcementStyle, Idiom] = {
    EnforcementStyle.CHECK_IF_BLOCK_GIVEN: Idiom.BLOCK_GIVEN_CALL,
    EnforcementStyle.CHECK_IF_DEFINED_YIELD: Idiom.DEFINED_YIELD_PROBE,
    EnforcementStyle.CHECK_IF_BLOCK_TRUTHY: Idiom.BLOCK_TRUTHY_REF,
}


class ConfigurationLoader:
    """
    Immutable configuration for the rule.

    Built by the composition root from the host's config section for the rule
    (e.g. {"EnforcedStyle": "check_if_defined_yield", "AutoCorrect": True}).
    The domain never reads the filesystem; defaults come from the rule registry.
    """

    KNOWN_KEYS: frozenset[str] = frozenset(
        {"Enabled", "EnforcedStyle", "AutoCorrect", "SupportedStyles",
         "Description", "Safe", "SafeAutoCorrect", "VersionAdded", "VersionChanged"}
    )

    def __init__(
        self,
        config_dict: Mapping[str, object] | None = None,
        default_style: str = EnforcementStyle.CHECK_IF_BLOCK_TRUTHY.value,
    ) -> None:
        """Validate config once. Raises ConfigurationError before any node is visited."""
        self._config: dict[str, object] = dict(config_dict or {})
        self.validate_config(self._config)
        self._enabled = self._read_bool("Enabled", True)
        self._autocorrect = self._read_bool("AutoCorrect", True)
        self._style = EnforcementStyle.parse(
            self._config.get("EnforcedStyle", default_style))

    def validate_config(self, config: Mapping[str, object]) -> None:
        """Warn about keys this rule does not understand."""
        for key in sorted(set(config) - self.KNOWN_KEYS):
            logger.warning(
                "Configuration Warning: unknown key %r for Performance/FastBlockGiven is ignored.", key)

    def _read_bool(self, key: str, default: bool) -> bool:
        raw = self._config.get(key, default)
        if not isinstance(raw, bool):
            raise ConfigurationError(f"{key} must be true or false, got {raw!r}.")
        return raw

    @property
    def config(self) -> dict[str, object]:
        """Return a copy of the raw configuration."""
        return dict(self._config)

    @property
    def enforced_style(self) -> EnforcementStyle:
        return self._style

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def autocorrect(self) -> bool:
        """When False, offenses are reported without a correction."""
        return self._autocorrect
