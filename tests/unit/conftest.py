"""Shared pytest fixtures for windsock tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from windsock.theme import DEFAULT_THEME, TokenTable, resolve

BRAND_COLORS = {
    "colors": {
        "primary": {"DEFAULT": "#3b82f6", "dark": "#2563eb", "light": "#60a5fa"},
        "secondary": {"DEFAULT": "#10b981", "dark": "#059669", "light": "#34d399"},
    }
}

PROJECT_CONFIG = """
content = ["./src/**/*.html"]
dark_mode = "class"

[theme.extend.colors.primary]
DEFAULT = "#3b82f6"
dark = "#2563eb"
"""


@pytest.fixture
def table() -> TokenTable:
    """Built-in theme extended with the brand palette."""
    return resolve(DEFAULT_THEME, BRAND_COLORS)


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """Create a minimal project with one content file."""
    (tmp_path / "windsock.toml").write_text(PROJECT_CONFIG)
    src = tmp_path / "src"
    src.mkdir()
    (src / "index.html").write_text('<div class="bg-primary dark:bg-primary-dark"></div>\n')
    return tmp_path
