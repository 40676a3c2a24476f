"""
Build configuration for windsock.

A project is described by one small declarative file: which files to scan,
how the theme extends the built-in tokens, which dark-mode strategy to use,
and which plugins to load. TOML, JSON and YAML are accepted; JSON files may
use the camelCase keys of a ``tailwind.config.json``.

Default location: {project_root}/windsock.toml
"""

from __future__ import annotations

import json
import logging
import tomllib
from enum import StrEnum
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILENAMES = (
    "windsock.toml",
    "windsock.json",
    "windsock.yaml",
    "tailwind.config.json",
)


class DarkMode(StrEnum):
    """How the ``dark:`` variant is activated."""

    CLASS = "class"
    MEDIA = "media"


class ThemeConfig(BaseModel):
    """
    Theme section of the configuration.

    ``extend`` is deep-merged onto the built-in tokens. Any other key
    (``colors``, ``spacing``, ...) replaces that built-in scope entirely.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    extend: dict[str, Any] = Field(default_factory=dict, description="Token extensions")

    def overrides(self) -> dict[str, Any]:
        """Return the scopes that replace built-in scopes wholesale."""
        return dict(self.model_extra or {})


class BuildConfig(BaseModel):
    """
    Complete build configuration.

    Example (windsock.toml):

        content = ["./src/**/*.{rs,html,css}", "./index.html"]
        dark_mode = "class"
        plugins = []

        [theme.extend.colors.primary]
        DEFAULT = "#3b82f6"
        dark = "#2563eb"
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    content: list[str] = Field(default_factory=list, description="Glob patterns to scan")
    exclude: list[str] = Field(default_factory=list, description="Glob patterns to skip")
    theme: ThemeConfig = Field(default_factory=ThemeConfig)
    dark_mode: DarkMode = Field(default=DarkMode.CLASS, alias="darkMode")
    dark_selector: str = Field(default=".dark", alias="darkSelector")
    plugins: list[str] = Field(default_factory=list, description="Plugin identifiers")
    safelist: list[str] = Field(default_factory=list, description="Tokens always generated")
    blocklist: list[str] = Field(default_factory=list, description="Tokens never generated")
    important: bool = False
    prefix: str = ""
    output: Path = Path("dist/windsock.css")
    input: Path | None = Field(default=None, description="Stylesheet the utilities are injected into")
    minify: bool = False
    respect_gitignore: bool = Field(default=True, alias="respectGitignore")
    # Set by load_config to the directory holding the file; never read from it
    root: Path = Path(".")

    @model_validator(mode="before")
    @classmethod
    def _split_dark_mode_pair(cls, data: Any) -> Any:
        # tailwind style: darkMode = ["class", ".theme-dark"]
        if not isinstance(data, dict):
            return data
        for key in ("darkMode", "dark_mode"):
            value = data.get(key)
            if isinstance(value, list | tuple) and len(value) == 2:
                data = dict(data)
                data[key] = value[0]
                data.setdefault("darkSelector", value[1])
        return data

    @field_validator("dark_mode", mode="before")
    @classmethod
    def _normalize_dark_mode(cls, value: Any) -> Any:
        if value == "selector":
            return DarkMode.CLASS
        return value

    @field_validator("content", mode="before")
    @classmethod
    def _content_files(cls, value: Any) -> Any:
        # tailwind style: content = {files: [...]}
        if isinstance(value, dict):
            return value.get("files", [])
        return value

    @field_validator("dark_selector")
    @classmethod
    def _selector_not_empty(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("dark selector must not be empty")
        return value.strip()

    @property
    def output_path(self) -> Path:
        """Output path resolved against the project root."""
        if self.output.is_absolute():
            return self.output
        return self.root / self.output

    @property
    def input_path(self) -> Path | None:
        """Input stylesheet resolved against the project root, if configured."""
        if self.input is None or self.input.is_absolute():
            return self.input
        return self.root / self.input


# =============================================================================
# Loading
# =============================================================================


def find_config(directory: Path) -> Path | None:
    """Return the first known config file in ``directory``."""
    for name in CONFIG_FILENAMES:
        candidate = directory / name
        if candidate.is_file():
            return candidate
    return None


def _read_raw(path: Path) -> dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"cannot read config file: {e}", path=str(path)) from e

    suffix = path.suffix.lower()
    try:
        if suffix == ".toml":
            data = tomllib.loads(text)
        elif suffix == ".json":
            data = json.loads(text)
        elif suffix in (".yaml", ".yml"):
            data = yaml.safe_load(text) or {}
        else:
            raise ConfigError(f"unsupported config format '{suffix}'", path=str(path))
    except (tomllib.TOMLDecodeError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigError(f"invalid {suffix.lstrip('.')} syntax: {e}", path=str(path)) from e

    if not isinstance(data, dict):
        raise ConfigError("top level must be a mapping", path=str(path))
    return data


def parse_config(data: dict[str, Any], root: Path | None = None) -> BuildConfig:
    """Validate raw config data, converting pydantic errors to ConfigError."""
    if "root" in data:
        raise ConfigError("not configurable; the project root is the config file's directory", path="root")
    try:
        config = BuildConfig.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        loc = ".".join(str(part) for part in first["loc"]) or None
        raise ConfigError(first["msg"], path=loc) from e

    if root is not None:
        config = config.model_copy(update={"root": root})
    return config


def load_config(path: Path) -> BuildConfig:
    """
    Load a build configuration file.

    Args:
        path: A config file, or a directory searched for CONFIG_FILENAMES.

    Returns:
        Validated BuildConfig with ``root`` set to the file's directory.

    Raises:
        ConfigError: If the file is missing, unparseable, or invalid.
    """
    if path.is_dir():
        found = find_config(path)
        if found is None:
            raise ConfigError(
                f"no config file found (looked for {', '.join(CONFIG_FILENAMES)})",
                path=str(path),
            )
        path = found
    elif not path.exists():
        raise ConfigError("config file does not exist", path=str(path))

    logger.debug("Loading config from %s", path)
    data = _read_raw(path)
    return parse_config(data, root=path.parent.resolve())


def default_config_text() -> str:
    """Starter configuration written by ``windsock init``."""
    return """\
# windsock configuration
content = ["./src/**/*.{rs,html,css}", "./index.html", "./dist/**/*.html"]
dark_mode = "class"
plugins = []
output = "dist/windsock.css"

[theme.extend.colors.primary]
DEFAULT = "#3b82f6"
dark = "#2563eb"
light = "#60a5fa"

[theme.extend.colors.secondary]
DEFAULT = "#10b981"
dark = "#059669"
light = "#34d399"

[theme.extend.colors.background]
light = "#ffffff"
dark = "#1f2937"

[theme.extend.colors.text]
light = "#1f2937"
dark = "#f9fafb"
"""
