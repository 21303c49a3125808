"""Configuration source implementations."""

from .ini_file import IniFileSource

__all__ = [
    "IniFileSource",
]
