"""
Utility handlers.

A handler recognises one family of utility names (``bg-*``, ``px-*``,
``flex``...) and turns a name into declarations whose values are either
token-table references or literal arbitrary values. Built-in handlers are
consulted first, plugin handlers after them, and the first handler that
produces a match wins.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass

from .theme import TokenTable

# =============================================================================
# Values
# =============================================================================


@dataclass(frozen=True)
class TokenRef:
    """Reference to a token-table path, resolved when the rule is generated."""

    path: str


@dataclass(frozen=True)
class Literal:
    """Arbitrary value passed through unresolved."""

    value: str


@dataclass(frozen=True)
class Declaration:
    """
    One CSS declaration before value resolution.

    ``negate`` flips the sign of the value (``-mt-4``); ``alpha`` is an
    opacity percentage applied to a color (``bg-primary/50``).
    """

    property: str
    value: TokenRef | Literal
    negate: bool = False
    alpha: str | None = None


@dataclass(frozen=True)
class UtilityMatch:
    """Result of a handler recognising a utility name."""

    utility: str
    declarations: tuple[Declaration, ...]


class UtilityHandler(ABC):
    """
    Extension point for utility families.

    Plugins return instances of subclasses from their ``register`` function.
    """

    name: str = "utility"

    @abstractmethod
    def matches(self, utility: str) -> bool:
        """Cheap check whether ``utility`` belongs to this family."""

    @abstractmethod
    def build(self, utility: str, table: TokenTable) -> UtilityMatch | None:
        """Build declarations, or return None if the value does not resolve."""


# =============================================================================
# Arbitrary value shapes
# =============================================================================

_COLOR_FUNC_RE = re.compile(r"^(rgba?|hsla?|hwb|lab|lch|oklab|oklch|color|color-mix)\(")
_HEX_RE = re.compile(r"^#(?:[0-9a-fA-F]{3,4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")
_LENGTH_RE = re.compile(r"^-?(?:\d+\.?\d*|\.\d+)(?:px|rem|em|%|vh|vw|svh|dvh|ch|ex|vmin|vmax|pt|cm|mm|in)?$")
_NUMBER_RE = re.compile(r"^-?(?:\d+\.?\d*|\.\d+)$")
_MATH_FUNC_RE = re.compile(r"^(calc|clamp|min|max|var)\(")
_TYPE_HINT_RE = re.compile(r"^(color|length|number|any):(.+)$")


def looks_like_color(value: str) -> bool:
    return bool(_HEX_RE.match(value) or _COLOR_FUNC_RE.match(value) or value.startswith("var("))


def looks_like_length(value: str) -> bool:
    return bool(_LENGTH_RE.match(value) or _MATH_FUNC_RE.match(value))


def looks_like_number(value: str) -> bool:
    return bool(_NUMBER_RE.match(value) or _MATH_FUNC_RE.match(value))


_SHAPE_CHECKS = {
    "color": looks_like_color,
    "length": looks_like_length,
    "number": looks_like_number,
}


def parse_arbitrary(remainder: str, value_type: str) -> Literal | None:
    """
    Parse ``[...]`` into a Literal if its shape fits ``value_type``.

    Underscores become spaces. A ``type:`` hint (``[length:var(--x)]``)
    overrides shape detection.
    """
    if len(remainder) < 3 or not (remainder.startswith("[") and remainder.endswith("]")):
        return None
    raw = remainder[1:-1].replace("_", " ").strip()
    hint = _TYPE_HINT_RE.match(raw)
    if hint:
        if hint.group(1) not in (value_type, "any") and value_type != "any":
            return None
        return Literal(hint.group(2))
    check = _SHAPE_CHECKS.get(value_type)
    if check is not None and not check(raw):
        return None
    return Literal(raw)


# =============================================================================
# Built-in handler types
# =============================================================================


class ScaleUtility(UtilityHandler):
    """
    ``<prefix>-<name>`` utilities whose value comes from token scopes.

    Example:
        ScaleUtility("bg", ("background-color",), ("colors",), value_type="color", alpha=True)
        matches bg-primary, bg-primary-dark, bg-[#123456], bg-primary/50
    """

    def __init__(
        self,
        prefix: str,
        properties: tuple[str, ...],
        scopes: tuple[str, ...],
        *,
        value_type: str = "any",
        negative: bool = False,
        bare: bool = False,
        alpha: bool = False,
    ):
        self.prefix = prefix
        self.properties = properties
        self.scopes = scopes
        self.value_type = value_type
        self.negative = negative
        self.bare = bare
        self.alpha = alpha
        self.name = f"{prefix}:{scopes[0]}"

    def __repr__(self) -> str:
        return f"ScaleUtility({self.prefix!r}, scopes={self.scopes!r})"

    def matches(self, utility: str) -> bool:
        if self.negative and utility.startswith("-"):
            utility = utility[1:]
        return utility.startswith(self.prefix + "-") or (self.bare and utility == self.prefix)

    def _split_alpha(self, remainder: str) -> tuple[str, str | None]:
        head, sep, tail = remainder.rpartition("/")
        if sep and head and tail.isdigit() and int(tail) <= 100:
            return head, tail
        return remainder, None

    def build(self, utility: str, table: TokenTable) -> UtilityMatch | None:
        negate = utility.startswith("-")
        if negate:
            if not self.negative:
                return None
            utility = utility[1:]

        remainder = "" if utility == self.prefix else utility[len(self.prefix) + 1 :]
        alpha = None
        if self.alpha:
            remainder, alpha = self._split_alpha(remainder)

        value: TokenRef | Literal | None
        if remainder.startswith("["):
            value = parse_arbitrary(remainder, self.value_type)
        else:
            value = None
            for scope in self.scopes:
                path = table.lookup(scope, remainder)
                if path is not None:
                    value = TokenRef(path)
                    break
        if value is None:
            return None

        declarations = tuple(Declaration(prop, value, negate=negate, alpha=alpha) for prop in self.properties)
        return UtilityMatch(self.name, declarations)


class StaticUtility(UtilityHandler):
    """Fixed keyword utilities such as ``flex`` or ``italic``."""

    name = "static"

    def __init__(self, rules: dict[str, tuple[tuple[str, str], ...]]):
        self.rules = rules

    def matches(self, utility: str) -> bool:
        return utility in self.rules

    def build(self, utility: str, table: TokenTable) -> UtilityMatch | None:
        declarations = tuple(Declaration(prop, Literal(value)) for prop, value in self.rules[utility])
        return UtilityMatch(utility, declarations)


# =============================================================================
# Built-in catalogue
# =============================================================================

_COLOR_UTILITIES: dict[str, tuple[str, ...]] = {
    "bg": ("background-color",),
    "text": ("color",),
    "border": ("border-color",),
    "outline": ("outline-color",),
    "ring": ("--tw-ring-color",),
    "fill": ("fill",),
    "stroke": ("stroke",),
    "accent": ("accent-color",),
    "caret": ("caret-color",),
    "decoration": ("text-decoration-color",),
}

_SPACING_UTILITIES: dict[str, tuple[str, ...]] = {
    "p": ("padding",),
    "px": ("padding-left", "padding-right"),
    "py": ("padding-top", "padding-bottom"),
    "pt": ("padding-top",),
    "pr": ("padding-right",),
    "pb": ("padding-bottom",),
    "pl": ("padding-left",),
    "gap": ("gap",),
    "gap-x": ("column-gap",),
    "gap-y": ("row-gap",),
}

_NEGATIVE_SPACING_UTILITIES: dict[str, tuple[str, ...]] = {
    "m": ("margin",),
    "mx": ("margin-left", "margin-right"),
    "my": ("margin-top", "margin-bottom"),
    "mt": ("margin-top",),
    "mr": ("margin-right",),
    "mb": ("margin-bottom",),
    "ml": ("margin-left",),
    "inset": ("top", "right", "bottom", "left"),
    "inset-x": ("left", "right"),
    "inset-y": ("top", "bottom"),
    "top": ("top",),
    "right": ("right",),
    "bottom": ("bottom",),
    "left": ("left",),
}

_BORDER_SIDES: dict[str, tuple[str, ...]] = {
    "": ("",),
    "-t": ("-top",),
    "-r": ("-right",),
    "-b": ("-bottom",),
    "-l": ("-left",),
    "-x": ("-left", "-right"),
    "-y": ("-top", "-bottom"),
}

_RADIUS_SIDES: dict[str, tuple[str, ...]] = {
    "": ("border-radius",),
    "-t": ("border-top-left-radius", "border-top-right-radius"),
    "-r": ("border-top-right-radius", "border-bottom-right-radius"),
    "-b": ("border-bottom-right-radius", "border-bottom-left-radius"),
    "-l": ("border-top-left-radius", "border-bottom-left-radius"),
}


def _static(*pairs: str) -> tuple[tuple[str, str], ...]:
    return tuple((pair.split(":", 1)[0], pair.split(":", 1)[1].strip()) for pair in pairs)


STATIC_UTILITIES: dict[str, tuple[tuple[str, str], ...]] = {
    # Display
    "block": _static("display: block"),
    "inline-block": _static("display: inline-block"),
    "inline": _static("display: inline"),
    "flex": _static("display: flex"),
    "inline-flex": _static("display: inline-flex"),
    "grid": _static("display: grid"),
    "contents": _static("display: contents"),
    "hidden": _static("display: none"),
    # Position
    "static": _static("position: static"),
    "fixed": _static("position: fixed"),
    "absolute": _static("position: absolute"),
    "relative": _static("position: relative"),
    "sticky": _static("position: sticky"),
    # Flexbox
    "flex-row": _static("flex-direction: row"),
    "flex-col": _static("flex-direction: column"),
    "flex-wrap": _static("flex-wrap: wrap"),
    "flex-nowrap": _static("flex-wrap: nowrap"),
    "flex-1": _static("flex: 1 1 0%"),
    "flex-auto": _static("flex: 1 1 auto"),
    "flex-none": _static("flex: none"),
    "grow": _static("flex-grow: 1"),
    "shrink-0": _static("flex-shrink: 0"),
    "items-start": _static("align-items: flex-start"),
    "items-center": _static("align-items: center"),
    "items-end": _static("align-items: flex-end"),
    "items-stretch": _static("align-items: stretch"),
    "justify-start": _static("justify-content: flex-start"),
    "justify-center": _static("justify-content: center"),
    "justify-end": _static("justify-content: flex-end"),
    "justify-between": _static("justify-content: space-between"),
    "self-start": _static("align-self: flex-start"),
    "self-center": _static("align-self: center"),
    "self-end": _static("align-self: flex-end"),
    # Typography
    "text-left": _static("text-align: left"),
    "text-center": _static("text-align: center"),
    "text-right": _static("text-align: right"),
    "text-justify": _static("text-align: justify"),
    "italic": _static("font-style: italic"),
    "not-italic": _static("font-style: normal"),
    "underline": _static("text-decoration-line: underline"),
    "line-through": _static("text-decoration-line: line-through"),
    "no-underline": _static("text-decoration-line: none"),
    "uppercase": _static("text-transform: uppercase"),
    "lowercase": _static("text-transform: lowercase"),
    "capitalize": _static("text-transform: capitalize"),
    "truncate": _static("overflow: hidden", "text-overflow: ellipsis", "white-space: nowrap"),
    "whitespace-nowrap": _static("white-space: nowrap"),
    "break-words": _static("overflow-wrap: break-word"),
    # Borders
    "border-solid": _static("border-style: solid"),
    "border-dashed": _static("border-style: dashed"),
    "border-dotted": _static("border-style: dotted"),
    "border-none": _static("border-style: none"),
    "outline-none": _static("outline: 2px solid transparent", "outline-offset: 2px"),
    # Layout and interaction
    "overflow-hidden": _static("overflow: hidden"),
    "overflow-auto": _static("overflow: auto"),
    "overflow-x-auto": _static("overflow-x: auto"),
    "overflow-y-auto": _static("overflow-y: auto"),
    "visible": _static("visibility: visible"),
    "invisible": _static("visibility: hidden"),
    "cursor-pointer": _static("cursor: pointer"),
    "cursor-not-allowed": _static("cursor: not-allowed"),
    "select-none": _static("user-select: none"),
    "pointer-events-none": _static("pointer-events: none"),
    "transition": _static(
        "transition-property: color, background-color, border-color, fill, stroke, opacity, box-shadow, transform",
        "transition-timing-function: cubic-bezier(0.4, 0, 0.2, 1)",
        "transition-duration: 150ms",
    ),
    "sr-only": _static(
        "position: absolute",
        "width: 1px",
        "height: 1px",
        "padding: 0",
        "margin: -1px",
        "overflow: hidden",
        "clip: rect(0, 0, 0, 0)",
        "white-space: nowrap",
        "border-width: 0",
    ),
}


def builtin_handlers() -> list[UtilityHandler]:
    """
    Return the built-in handlers in lookup order.

    Static keywords come first so ``flex-row`` never reaches the scale
    handlers. Color handlers precede size handlers sharing a prefix
    (``text-``, ``border-``); each only matches values it can resolve.
    """
    handlers: list[UtilityHandler] = [StaticUtility(STATIC_UTILITIES)]

    for prefix, props in _COLOR_UTILITIES.items():
        handlers.append(ScaleUtility(prefix, props, ("colors",), value_type="color", alpha=True))

    for prefix, props in _SPACING_UTILITIES.items():
        handlers.append(ScaleUtility(prefix, props, ("spacing",), value_type="length"))
    for prefix, props in _NEGATIVE_SPACING_UTILITIES.items():
        handlers.append(ScaleUtility(prefix, props, ("spacing",), value_type="length", negative=True))

    handlers.extend(
        [
            ScaleUtility("w", ("width",), ("spacing", "width"), value_type="length"),
            ScaleUtility("h", ("height",), ("spacing", "height"), value_type="length"),
            ScaleUtility("min-w", ("min-width",), ("spacing", "width"), value_type="length"),
            ScaleUtility("min-h", ("min-height",), ("spacing", "height"), value_type="length"),
            ScaleUtility("max-w", ("max-width",), ("maxWidth",), value_type="length"),
            ScaleUtility("max-h", ("max-height",), ("spacing", "height"), value_type="length"),
            ScaleUtility("text", ("font-size",), ("fontSize",), value_type="length"),
            ScaleUtility("font", ("font-weight",), ("fontWeight",), value_type="number"),
            ScaleUtility("font", ("font-family",), ("fontFamily",)),
            ScaleUtility("leading", ("line-height",), ("lineHeight",)),
            ScaleUtility("tracking", ("letter-spacing",), ("letterSpacing",), negative=True),
            ScaleUtility("shadow", ("box-shadow",), ("boxShadow",), bare=True),
            ScaleUtility("opacity", ("opacity",), ("opacity",), value_type="number"),
            ScaleUtility("z", ("z-index",), ("zIndex",), value_type="number", negative=True),
            ScaleUtility("grid-cols", ("grid-template-columns",), ("gridTemplateColumns",)),
        ]
    )

    for side, suffixes in _BORDER_SIDES.items():
        props = tuple(f"border{suffix}-width" for suffix in suffixes)
        handlers.append(ScaleUtility(f"border{side}", props, ("borderWidth",), value_type="length", bare=True))
    for side, props in _RADIUS_SIDES.items():
        handlers.append(ScaleUtility(f"rounded{side}", props, ("borderRadius",), value_type="length", bare=True))

    return handlers
