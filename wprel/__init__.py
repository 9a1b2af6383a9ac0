"""Directory-based release deployer."""

__version__ = "0.1.0"
