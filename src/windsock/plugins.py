"""
Plugin loading.

A plugin is named in the config by one of:

- ``package.module`` (the module defines ``register``)
- ``package.module:attribute`` (a register function, or an object with one)
- a name registered in the ``windsock.plugins`` entry point group

``register(table)`` is called once, after the theme is resolved and before
scanning starts, and returns the UtilityHandlers the plugin contributes.
"""

from __future__ import annotations

import importlib
import logging
from collections.abc import Callable, Iterable, Sequence
from importlib.metadata import entry_points
from typing import Any

from .errors import ConfigError
from .theme import TokenTable
from .utilities import UtilityHandler

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "windsock.plugins"

RegisterFn = Callable[[TokenTable], Iterable[UtilityHandler]]


def _from_entry_point(name: str) -> Any | None:
    for entry in entry_points(group=ENTRY_POINT_GROUP):
        if entry.name == name:
            return entry.load()
    return None


def resolve_plugin(identifier: str, label: str = "plugins") -> RegisterFn:
    """
    Resolve a plugin identifier to its register function.

    Raises:
        ConfigError: If the plugin cannot be imported or has no register.
    """
    module_name, _, attribute = identifier.partition(":")
    target: Any = None

    if not attribute and "." not in module_name:
        target = _from_entry_point(module_name)

    if target is None:
        try:
            target = importlib.import_module(module_name)
        except ImportError as e:
            raise ConfigError(f"cannot import plugin '{identifier}': {e}", path=label) from e
        if attribute:
            try:
                target = getattr(target, attribute)
            except AttributeError as e:
                raise ConfigError(f"plugin '{module_name}' has no attribute '{attribute}'", path=label) from e

    register = getattr(target, "register", None)
    if callable(register):
        return register
    if attribute and callable(target):
        return target
    raise ConfigError(f"plugin '{identifier}' does not define register(table)", path=label)


def load_plugins(identifiers: Sequence[str], table: TokenTable) -> list[UtilityHandler]:
    """
    Load plugins in config order and collect their handlers.

    Raises:
        ConfigError: If a plugin fails to load, fails in register(), or
            returns something that is not a UtilityHandler.
    """
    handlers: list[UtilityHandler] = []
    for index, identifier in enumerate(identifiers):
        label = f"plugins[{index}]"
        register = resolve_plugin(identifier, label)
        try:
            contributed = list(register(table) or ())
        except Exception as e:
            raise ConfigError(f"plugin '{identifier}' failed in register(): {e}", path=label) from e

        for handler in contributed:
            if not isinstance(handler, UtilityHandler):
                raise ConfigError(
                    f"plugin '{identifier}' returned {type(handler).__name__}, expected UtilityHandler",
                    path=label,
                )
        logger.debug("Plugin %s registered %d handler(s)", identifier, len(contributed))
        handlers.extend(contributed)
    return handlers
