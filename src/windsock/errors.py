"""
Error types for windsock configuration, scanning, and class interpretation.

Only ConfigError is ever raised out of a build. Scan and interpretation
problems are recorded as plain data so a single bad file or stray word in
markup never blocks stylesheet generation.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


class WindsockError(Exception):
    """Base exception for all windsock errors."""

    def __init__(self, message: str, path: str | None = None):
        self.message = message
        self.path = path
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Prefix the message with the configuration path if available."""
        if self.path:
            return f"{self.path}: {self.message}"
        return self.message


class ConfigError(WindsockError):
    """
    Raised when the build configuration or theme cannot be used.

    Examples:
    - Unparseable config file
    - Unknown darkMode strategy
    - Theme extension replacing a token group with a scalar
    - Alias pointing at a missing token
    - Plugin that cannot be imported
    """

    pass


@dataclass(frozen=True)
class ScanWarning:
    """A content file that could not be read during scanning."""

    path: Path
    reason: str

    def format(self) -> str:
        return f"{self.path}: {self.reason}"


@dataclass(frozen=True)
class TokenRejection:
    """A scanned token that did not interpret to a utility."""

    token: str
    reason: str
