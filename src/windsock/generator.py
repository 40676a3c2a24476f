"""
Rule generator.

Converts utility descriptors into CSS rules. The selector is the escaped
class token with variant wrapping applied outermost variant first:

    dark:bg-primary-dark (class strategy)
        .dark .dark\\:bg-primary-dark { background-color: #2563eb }

    dark:bg-primary-dark (media strategy)
        @media (prefers-color-scheme: dark) {
          .dark\\:bg-primary-dark { background-color: #2563eb }
        }
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

from .interpreter import UtilityDescriptor
from .theme import TokenTable
from .utilities import Declaration, Literal
from .variants import VariantKind, VariantRegistry

_HEX_RE = re.compile(r"^#([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")
_SIGNED_LENGTH_RE = re.compile(r"^(?:\d+\.?\d*|\.\d+)[a-z%]*$")


@dataclass(frozen=True)
class GeneratedRule:
    """
    One CSS rule. Never mutated after creation.

    Attributes:
        selector: Full selector including ancestor and pseudo-class parts
        declarations: Ordered (property, value) pairs
        wrappers: At-rules wrapping the rule, outermost first
        layer: Ordering layer (0 = no variants)
        order: First-discovery position of the source token
    """

    selector: str
    declarations: tuple[tuple[str, str], ...]
    wrappers: tuple[str, ...] = ()
    layer: int = 0
    order: int = 0

    @property
    def key(self) -> tuple[tuple[str, ...], str]:
        """Deduplication key."""
        return (self.wrappers, self.selector)


def escape_class(name: str) -> str:
    """
    Escape a class name for use in a CSS class selector.

    Letters, digits, ``-``, ``_`` and non-ASCII pass through; every other
    character is backslash-escaped. A leading digit uses a hex escape.
    """
    out: list[str] = []
    for i, ch in enumerate(name):
        if ch.isascii() and (ch.isalnum() or ch in "-_"):
            if ch.isdigit() and (i == 0 or (i == 1 and name[0] == "-")):
                out.append(f"\\{ord(ch):x} ")
            else:
                out.append(ch)
        elif not ch.isascii():
            out.append(ch)
        else:
            out.append("\\" + ch)
    return "".join(out)


def apply_alpha(color: str, percent: str) -> str:
    """Apply an opacity percentage to a color value."""
    alpha = int(percent) / 100
    match = _HEX_RE.match(color)
    if match:
        digits = match.group(1)
        if len(digits) == 3:
            digits = "".join(ch * 2 for ch in digits)
        r, g, b = (int(digits[i : i + 2], 16) for i in (0, 2, 4))
        return f"rgb({r} {g} {b} / {alpha:g})"
    return f"color-mix(in srgb, {color} {percent}%, transparent)"


def negate_value(value: str) -> str:
    if value.startswith("-"):
        return value[1:]
    if value in ("0", "0px"):
        return value
    if _SIGNED_LENGTH_RE.match(value):
        return "-" + value
    return f"calc({value} * -1)"


class RuleGenerator:
    """Builds rules for descriptors against one theme and variant registry."""

    def __init__(self, table: TokenTable, variants: VariantRegistry, important: bool = False):
        self.table = table
        self.variants = variants
        self.important = important

    def _value(self, declaration: Declaration) -> str:
        if isinstance(declaration.value, Literal):
            value = declaration.value.value
        else:
            value = self.table[declaration.value.path]
        if declaration.alpha is not None:
            value = apply_alpha(value, declaration.alpha)
        if declaration.negate:
            value = negate_value(value)
        return value

    def rule_for(self, descriptor: UtilityDescriptor, order: int = 0) -> GeneratedRule:
        """Build the rule for a single descriptor."""
        ancestors: list[str] = []
        pseudo: list[str] = []
        wrappers: list[str] = []
        layer = 0

        for tag in descriptor.variants:
            variant = self.variants.get(tag)
            if variant is None:
                raise KeyError(f"unknown variant '{tag}' in descriptor for {descriptor.token!r}")
            layer = max(layer, variant.layer)
            if variant.kind is VariantKind.PSEUDO:
                pseudo.append(variant.value)
            elif variant.kind is VariantKind.ANCESTOR:
                ancestors.append(variant.value)
            else:
                wrappers.append(variant.value)

        selector = "." + escape_class(descriptor.token) + "".join(pseudo)
        if ancestors:
            selector = " ".join([*ancestors, selector])

        important = descriptor.important or self.important
        declarations = tuple(
            (d.property, self._value(d) + (" !important" if important else ""))
            for d in descriptor.declarations
        )
        return GeneratedRule(
            selector=selector,
            declarations=declarations,
            wrappers=tuple(wrappers),
            layer=layer,
            order=order,
        )

    def generate(self, descriptors: Iterable[UtilityDescriptor]) -> tuple[GeneratedRule, ...]:
        """
        Build deduplicated rules, in descriptor order.

        ``order`` on each rule is the position of its first descriptor, so
        the assembler can keep discovery order within a layer.
        """
        rules: dict[tuple[tuple[str, ...], str], GeneratedRule] = {}
        for descriptor in descriptors:
            rule = self.rule_for(descriptor, order=len(rules))
            rules.setdefault(rule.key, rule)
        return tuple(rules.values())
