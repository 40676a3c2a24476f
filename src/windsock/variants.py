"""
Variant registry.

A variant is the ``dark:`` / ``hover:`` / ``md:`` prefix on a class token.
Each one changes the rule in exactly one of three ways:

- PSEUDO: appends a pseudo-class to the selector (``.x:hover``)
- ANCESTOR: puts an ancestor selector in front (``.dark .x``)
- AT_RULE: wraps the rule in an at-rule (``@media (min-width: 768px)``)
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import StrEnum

from .config import DarkMode
from .theme import TokenTable

# Layer 0 is reserved for rules without variants
STATE_LAYER = 1
RESPONSIVE_LAYER = 2

DARK_MEDIA_QUERY = "@media (prefers-color-scheme: dark)"

PSEUDO_CLASSES: dict[str, str] = {
    "hover": ":hover",
    "focus": ":focus",
    "focus-visible": ":focus-visible",
    "focus-within": ":focus-within",
    "active": ":active",
    "visited": ":visited",
    "disabled": ":disabled",
    "checked": ":checked",
    "first": ":first-child",
    "last": ":last-child",
    "odd": ":nth-child(odd)",
    "even": ":nth-child(even)",
    "placeholder": "::placeholder",
}

ANCESTORS: dict[str, str] = {
    "group-hover": ".group:hover",
    "group-focus": ".group:focus",
}


class VariantKind(StrEnum):
    PSEUDO = "pseudo"
    ANCESTOR = "ancestor"
    AT_RULE = "at-rule"


@dataclass(frozen=True)
class Variant:
    """A named selector modifier."""

    name: str
    kind: VariantKind
    value: str
    layer: int = STATE_LAYER


class VariantRegistry:
    """Known variants, keyed by tag."""

    def __init__(self, variants: Iterable[Variant] = ()):
        self._variants: dict[str, Variant] = {}
        for variant in variants:
            self.register(variant)

    def register(self, variant: Variant) -> None:
        self._variants[variant.name] = variant

    def get(self, name: str) -> Variant | None:
        return self._variants.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._variants

    def __iter__(self) -> Iterator[Variant]:
        return iter(self._variants.values())

    @classmethod
    def from_theme(
        cls,
        table: TokenTable,
        dark_mode: DarkMode = DarkMode.CLASS,
        dark_selector: str = ".dark",
    ) -> VariantRegistry:
        """
        Build the registry for a resolved theme.

        The ``dark`` variant follows the configured strategy; responsive
        variants come from the ``screens`` scope, one layer per breakpoint in
        declaration order so wider screens override narrower ones.
        """
        registry = cls(Variant(name, VariantKind.PSEUDO, suffix) for name, suffix in PSEUDO_CLASSES.items())
        for name, selector in ANCESTORS.items():
            registry.register(Variant(name, VariantKind.ANCESTOR, selector))

        if dark_mode is DarkMode.MEDIA:
            registry.register(Variant("dark", VariantKind.AT_RULE, DARK_MEDIA_QUERY))
        else:
            registry.register(Variant("dark", VariantKind.ANCESTOR, dark_selector))

        for index, (name, width) in enumerate(table.scope("screens").items()):
            registry.register(
                Variant(
                    name,
                    VariantKind.AT_RULE,
                    f"@media (min-width: {width})",
                    layer=RESPONSIVE_LAYER + index,
                )
            )
        return registry
