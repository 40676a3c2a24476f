"""
Class interpreter.

Turns a raw class token such as ``dark:hover:bg-primary-dark`` into a
UtilityDescriptor, or None when the token is not a utility this theme can
produce. Scanning is deliberately over-inclusive, so rejection is silent;
callers that want to know why a token was dropped pass a diagnostics list.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from .config import DarkMode
from .errors import TokenRejection
from .theme import TokenTable
from .utilities import Declaration, UtilityHandler, builtin_handlers
from .variants import VariantRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UtilityDescriptor:
    """
    Parsed form of a class token.

    Attributes:
        token: The original class token, used verbatim for the selector
        variants: Variant tags, outermost first
        utility: Name of the utility that matched
        declarations: Property/value pairs before value resolution
        important: Whether declarations get ``!important``
    """

    token: str
    variants: tuple[str, ...]
    utility: str
    declarations: tuple[Declaration, ...]
    important: bool = False


def split_variants(token: str) -> list[str]:
    """Split on ``:`` outside brackets: ``md:bg-[url(a:b)]`` -> ``['md', 'bg-[url(a:b)]']``."""
    parts: list[str] = []
    depth = 0
    start = 0
    for i, ch in enumerate(token):
        if ch == "[":
            depth += 1
        elif ch == "]":
            depth = max(depth - 1, 0)
        elif ch == ":" and depth == 0:
            parts.append(token[start:i])
            start = i + 1
    parts.append(token[start:])
    return parts


class ClassInterpreter:
    """
    Interprets class tokens against one resolved theme.

    Built-in handlers come first, then any extra (plugin) handlers, in order.
    """

    def __init__(
        self,
        table: TokenTable,
        variants: VariantRegistry,
        handlers: Sequence[UtilityHandler] | None = None,
        prefix: str = "",
    ):
        self.table = table
        self.variants = variants
        self.handlers = list(handlers) if handlers is not None else builtin_handlers()
        self.prefix = prefix

    def _strip_prefix(self, utility: str) -> str | None:
        if not self.prefix:
            return utility
        negative = utility.startswith("-")
        body = utility[1:] if negative else utility
        if not body.startswith(self.prefix):
            return None
        return ("-" if negative else "") + body[len(self.prefix) :]

    def interpret(
        self,
        token: str,
        diagnostics: list[TokenRejection] | None = None,
    ) -> UtilityDescriptor | None:
        """
        Interpret one token.

        Args:
            token: Raw class token from the scanner
            diagnostics: If given, receives a TokenRejection for a None result

        Returns:
            UtilityDescriptor, or None if the token is not a known utility
        """

        def reject(reason: str) -> None:
            logger.debug("Rejected %r: %s", token, reason)
            if diagnostics is not None:
                diagnostics.append(TokenRejection(token=token, reason=reason))

        *tags, utility = split_variants(token)
        for tag in tags:
            if tag not in self.variants:
                reject(f"unknown variant '{tag}'")
                return None

        important = False
        if utility.endswith("!"):
            utility, important = utility[:-1], True
        elif utility.startswith("!"):
            utility, important = utility[1:], True

        stripped = self._strip_prefix(utility)
        if stripped is None:
            reject(f"missing class prefix '{self.prefix}'")
            return None
        if not stripped:
            reject("empty utility")
            return None

        matched_family = False
        for handler in self.handlers:
            if not handler.matches(stripped):
                continue
            matched_family = True
            match = handler.build(stripped, self.table)
            if match is not None:
                return UtilityDescriptor(
                    token=token,
                    variants=tuple(tags),
                    utility=match.utility,
                    declarations=match.declarations,
                    important=important,
                )

        if matched_family:
            reject(f"value of '{stripped}' not found in theme")
        else:
            reject("no utility matches")
        return None


def interpret(
    token: str,
    table: TokenTable,
    dark_mode: DarkMode = DarkMode.CLASS,
) -> UtilityDescriptor | None:
    """Interpret ``token`` with the built-in variants and handlers."""
    return ClassInterpreter(table, VariantRegistry.from_theme(table, dark_mode)).interpret(token)
