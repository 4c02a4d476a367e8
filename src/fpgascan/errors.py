"""
Exception hierarchy shared by the scanner, the pattern tables and the
toolchain sessions.
"""


class FpgaScanError(Exception):
    """Base class for every error raised by fpgascan."""


class ConfigurationError(FpgaScanError):
    """A pattern table or one of its entries is malformed."""

    def __init__(self, table: str, pattern: str, reason: str):
        self.table = table
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Pattern table '{table}', entry '{pattern}': {reason}")


class UnknownToolchainError(FpgaScanError, KeyError):
    """No pattern table or toolchain config is registered under this name."""

    def __init__(self, toolchain: str):
        self.toolchain = toolchain
        super().__init__(toolchain)

    def __str__(self):
        return f"Unknown toolchain '{self.toolchain}'"


class ToolNotFoundError(FpgaScanError):
    """The vendor binary for a toolchain could not be located."""


class SessionError(FpgaScanError):
    """A session was used in a state that does not allow the operation."""
