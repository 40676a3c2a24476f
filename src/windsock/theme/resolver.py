"""
Theme resolver for windsock.

Resolves the final token table by merging:
1. Built-in tokens (presets.DEFAULT_THEME)
2. Whole-scope replacements from ``theme.<scope>``
3. Deep extensions from ``theme.extend`` (highest precedence)

Aliases such as ``"{colors.blue.500}"`` are followed after the merge so the
resulting table only holds final values.
"""

from __future__ import annotations

import copy
import logging
import re
from collections.abc import Iterator, Mapping
from typing import TYPE_CHECKING, Any

from windsock.errors import ConfigError

from .presets import DEFAULT_THEME

if TYPE_CHECKING:
    from windsock.config import BuildConfig

logger = logging.getLogger(__name__)

# Raw theme input: nested mappings with scalar leaves
ThemeSpec = Mapping[str, Any]

_ALIAS_RE = re.compile(r"^\{([A-Za-z0-9_.\-/]+)\}$")

DEFAULT_KEY = "DEFAULT"


class TokenTable(Mapping[str, str]):
    """
    Immutable mapping of dotted token path to final value.

    Example:
        table["colors.primary.dark"] == "#2563eb"
        table.lookup("colors", "primary-dark") == "colors.primary.dark"
        table.lookup("colors", "primary") == "colors.primary.DEFAULT"
    """

    def __init__(
        self,
        entries: Mapping[str, str] | None = None,
        *,
        segments: Mapping[str, tuple[str, ...]] | None = None,
    ):
        self._entries: dict[str, str] = dict(entries or {})
        # Keys such as spacing "0.5" contain dots, so keep the real segments
        self._segments: dict[str, tuple[str, ...]] = {
            path: tuple(segments[path]) if segments and path in segments else tuple(path.split("."))
            for path in self._entries
        }
        self._index: dict[str, dict[str, str]] = {}
        for path, parts in self._segments.items():
            scope, *rest = parts
            if not rest:
                continue
            if rest[-1] == DEFAULT_KEY:
                rest = rest[:-1]
            # First path wins when two spell the same utility name
            self._index.setdefault(scope, {}).setdefault("-".join(rest), path)

    def __getitem__(self, path: str) -> str:
        return self._entries[path]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"TokenTable({len(self._entries)} tokens)"

    def lookup(self, scope: str, name: str) -> str | None:
        """Resolve a hyphenated utility name within ``scope`` to a token path."""
        return self._index.get(scope, {}).get(name)

    def scope(self, scope: str) -> dict[str, str]:
        """Return ``{utility name: value}`` for every token in ``scope``."""
        names = self._index.get(scope, {})
        return {name: self._entries[path] for name, path in names.items()}

    def scopes(self) -> list[str]:
        return list(self._index)

    def to_tree(self) -> dict[str, Any]:
        """Rebuild the nested token tree."""
        tree: dict[str, Any] = {}
        for path, value in self._entries.items():
            node = tree
            *parents, leaf = self._segments[path]
            for part in parents:
                node = node.setdefault(part, {})
            node[leaf] = value
        return tree


# =============================================================================
# Merging
# =============================================================================


def _join(path: tuple[str, ...]) -> str:
    return ".".join(path)


def merge_tokens(
    base: ThemeSpec,
    extend: ThemeSpec,
    _path: tuple[str, ...] = (),
) -> dict[str, Any]:
    """
    Deep-merge ``extend`` onto ``base`` without dropping untouched branches.

    Raises:
        ConfigError: If one side has a token group where the other has a value.
    """
    merged: dict[str, Any] = {str(key): value for key, value in base.items()}

    for raw_key, value in extend.items():
        key = str(raw_key)
        path = (*_path, key)
        if key not in merged:
            merged[key] = copy.deepcopy(value)
            continue

        current = merged[key]
        current_is_group = isinstance(current, Mapping)
        value_is_group = isinstance(value, Mapping)

        if current_is_group and value_is_group:
            merged[key] = merge_tokens(current, value, path)
        elif current_is_group:
            raise ConfigError("cannot replace a token group with a single value", path=_join(path))
        elif value_is_group:
            raise ConfigError("cannot replace a single value with a token group", path=_join(path))
        else:
            merged[key] = value

    return merged


def _leaves(tree: ThemeSpec, _path: tuple[str, ...] = ()) -> Iterator[tuple[tuple[str, ...], str]]:
    for raw_key, value in tree.items():
        path = (*_path, str(raw_key))
        if isinstance(value, Mapping):
            yield from _leaves(value, path)
        elif isinstance(value, bool) or not isinstance(value, str | int | float):
            raise ConfigError(
                f"token values must be strings or numbers, got {type(value).__name__}",
                path=_join(path),
            )
        else:
            yield path, str(value)


def flatten_tokens(tree: ThemeSpec) -> dict[str, str]:
    """Flatten a nested token tree to ``{dotted.path: value}`` in tree order."""
    return {_join(path): value for path, value in _leaves(tree)}


def _resolve_aliases(flat: dict[str, str]) -> dict[str, str]:
    resolved: dict[str, str] = {}

    def follow(path: str, seen: tuple[str, ...]) -> str:
        if path in resolved:
            return resolved[path]
        value = flat[path]
        match = _ALIAS_RE.match(value)
        if match is None:
            return value
        target = match.group(1)
        if target in seen:
            cycle = " -> ".join((*seen, target))
            raise ConfigError(f"alias cycle: {cycle}", path=seen[0])
        if target not in flat:
            raise ConfigError(f"alias points at unknown token '{target}'", path=path)
        return follow(target, (*seen, target))

    for path in flat:
        resolved[path] = follow(path, (path,))
    return resolved


def resolve(base: ThemeSpec, extend: ThemeSpec) -> TokenTable:
    """
    Resolve a base token tree and an extension into one TokenTable.

    Pure function of (base, extend): neither input is modified.

    Args:
        base: Built-in or preset token tree
        extend: User extensions, merged leaf by leaf

    Returns:
        TokenTable whose values contain no unresolved aliases

    Raises:
        ConfigError: On type conflicts, invalid leaves, or broken aliases
    """
    leaves = list(_leaves(merge_tokens(base, extend)))
    flat = {_join(path): value for path, value in leaves}
    segments = {_join(path): path for path, _ in leaves}
    return TokenTable(_resolve_aliases(flat), segments=segments)


def resolve_theme(config: BuildConfig, base: ThemeSpec | None = None) -> TokenTable:
    """Resolve the token table for a build configuration."""
    tree: dict[str, Any] = copy.deepcopy(dict(base if base is not None else DEFAULT_THEME))

    for scope, replacement in config.theme.overrides().items():
        if not isinstance(replacement, Mapping):
            raise ConfigError("theme scope must be a table of tokens", path=f"theme.{scope}")
        logger.debug("Replacing built-in theme scope %s", scope)
        tree[scope] = replacement

    try:
        table = resolve(tree, config.theme.extend)
    except ConfigError as e:
        raise ConfigError(e.message, path=f"theme.extend.{e.path}" if e.path else "theme.extend") from e

    logger.debug("Resolved %d theme tokens", len(table))
    return table
