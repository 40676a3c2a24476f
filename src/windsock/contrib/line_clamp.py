"""
Line clamp plugin.

Adds ``line-clamp-<n>`` (1-6 or an arbitrary ``[n]``) and ``line-clamp-none``.

    plugins = ["windsock.contrib.line_clamp"]
"""

from __future__ import annotations

from windsock.theme import TokenTable
from windsock.utilities import Declaration, Literal, UtilityHandler, UtilityMatch

MAX_LINES = 6


class LineClampUtility(UtilityHandler):
    name = "line-clamp"

    def matches(self, utility: str) -> bool:
        return utility.startswith("line-clamp-")

    def build(self, utility: str, table: TokenTable) -> UtilityMatch | None:
        value = utility[len("line-clamp-") :]
        if value == "none":
            pairs = [
                ("overflow", "visible"),
                ("display", "block"),
                ("-webkit-box-orient", "horizontal"),
                ("-webkit-line-clamp", "none"),
            ]
        else:
            arbitrary = value.startswith("[") and value.endswith("]")
            if arbitrary:
                value = value[1:-1]
            if not value.isdigit() or (not arbitrary and not 1 <= int(value) <= MAX_LINES):
                return None
            pairs = [
                ("overflow", "hidden"),
                ("display", "-webkit-box"),
                ("-webkit-box-orient", "vertical"),
                ("-webkit-line-clamp", value),
            ]
        return UtilityMatch(self.name, tuple(Declaration(prop, Literal(val)) for prop, val in pairs))


def register(table: TokenTable) -> list[UtilityHandler]:
    return [LineClampUtility()]
