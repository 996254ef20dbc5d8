"""
Host plugin entry point - composition root for the checker plugin.
Lives in infrastructure as it creates the container and wires dependencies.
"""

import logging
from typing import TYPE_CHECKING, Optional

from block_given_linter.domain.constants import RULE_NAME
from block_given_linter.infrastructure.di.container import BlockGivenContainer
from block_given_linter.use_cases.checks.block_given import FastBlockGivenChecker

if TYPE_CHECKING:
    from block_given_linter.domain.protocols import AnalysisHostProtocol

logger = logging.getLogger(__name__)


def register(
    host: "AnalysisHostProtocol", registry_path: Optional[str] = None
) -> Optional[FastBlockGivenChecker]:
    """Validate the host's config for the rule and register its checker.

    Raises ConfigurationError before anything is registered when the config is
    invalid. Returns None (and registers nothing) when the rule is disabled.
    """
    container = BlockGivenContainer(host.config_for(RULE_NAME), registry_path)
    config_loader = container.get_config_loader()
    if not config_loader.enabled:
        logger.info("%s is disabled; checker not registered.", RULE_NAME)
        return None
    checker = container.create_checker(host)
    host.register_checker(checker)
    return checker
