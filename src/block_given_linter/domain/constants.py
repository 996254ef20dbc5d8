"""Identifiers shared by the rule, its registry entry and the host adapter."""

REGISTRY_PREFIX: str = "blockgiven."
RULE_CODE: str = "W9501"
RULE_NAME: str = "Performance/FastBlockGiven"
RULE_ID: str = f"{REGISTRY_PREFIX}{RULE_CODE}"
