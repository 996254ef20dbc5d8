"""block-given-linter: the Performance/FastBlockGiven rule for Ruby analysis hosts."""

__version__ = "0.1.0"
