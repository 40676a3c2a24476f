"""
windsock - utility-class CSS generator.

Scans content files for class tokens, interprets them against a resolved
design-token theme, and emits only the rules that are actually used.
"""

from .builder import BuildResult, BuildSession
from .config import BuildConfig, DarkMode, load_config, parse_config
from .errors import ConfigError, ScanWarning, TokenRejection, WindsockError
from .interpreter import ClassInterpreter, UtilityDescriptor, interpret
from .theme import TokenTable, resolve, resolve_theme

__version__ = "0.1.0"

__all__ = [
    "BuildConfig",
    "BuildResult",
    "BuildSession",
    "ClassInterpreter",
    "ConfigError",
    "DarkMode",
    "ScanWarning",
    "TokenRejection",
    "TokenTable",
    "UtilityDescriptor",
    "WindsockError",
    "interpret",
    "load_config",
    "parse_config",
    "resolve",
    "resolve_theme",
    "__version__",
]
