"""
windsock theme system.

Usage:
    from windsock.theme import DEFAULT_THEME, resolve, resolve_theme

    table = resolve(DEFAULT_THEME, {"colors": {"primary": {"DEFAULT": "#3b82f6"}}})
    table["colors.primary.DEFAULT"]  # "#3b82f6"
"""

from .presets import DEFAULT_THEME, list_scopes
from .resolver import (
    ThemeSpec,
    TokenTable,
    flatten_tokens,
    merge_tokens,
    resolve,
    resolve_theme,
)

__all__ = [
    "DEFAULT_THEME",
    "list_scopes",
    "ThemeSpec",
    "TokenTable",
    "flatten_tokens",
    "merge_tokens",
    "resolve",
    "resolve_theme",
]
