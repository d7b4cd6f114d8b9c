from __future__ import annotations


class EconomyError(Exception):
    """Base class for economy errors."""


class InvalidNumericLiteral(EconomyError, ValueError):
    """A value could not be parsed as a DecimalValue."""

    def __init__(self, value: object) -> None:
        super().__init__(f"Invalid numeric literal: {value!r}")
        self.value = value


class ConfigurationFault(EconomyError):
    """Static game data is inconsistent (bad cost, growth factor, redefinition)."""
