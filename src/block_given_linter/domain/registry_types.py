from typing import TypedDict


class RuleRegistryEntry(TypedDict, total=False):
    short_description: str
    symbol: str
    default_style: str
    supported_styles: list[str]
    # "<encountered idiom>-><preferred idiom>" -> message template ({name} = block param)
    messages: dict[str, str]
    manual_instructions: str
