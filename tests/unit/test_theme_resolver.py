"""Tests for theme token resolution."""

from __future__ import annotations

import copy

import pytest

from windsock.config import parse_config
from windsock.errors import ConfigError
from windsock.theme import (
    DEFAULT_THEME,
    TokenTable,
    flatten_tokens,
    list_scopes,
    merge_tokens,
    resolve,
    resolve_theme,
)


class TestResolve:
    def test_empty_extension_is_flatten(self) -> None:
        assert dict(resolve(DEFAULT_THEME, {})) == flatten_tokens(DEFAULT_THEME)

    def test_tree_round_trip(self) -> None:
        base = {"colors": {"ink": {"DEFAULT": "#111", "soft": "#333"}}, "spacing": {"0.5": "0.125rem"}}
        assert resolve(base, {}).to_tree() == base

    def test_extension_merges_leaves(self) -> None:
        base = {"colors": {"primary": {"DEFAULT": "#3b82f6"}, "white": "#fff"}}
        table = resolve(base, {"colors": {"primary": {"dark": "#2563eb"}}})
        assert table["colors.primary.DEFAULT"] == "#3b82f6"
        assert table["colors.primary.dark"] == "#2563eb"
        assert table["colors.white"] == "#fff"

    def test_extension_overrides_value(self) -> None:
        table = resolve({"colors": {"white": "#fff"}}, {"colors": {"white": "#fefefe"}})
        assert table["colors.white"] == "#fefefe"

    def test_inputs_not_mutated(self) -> None:
        base = {"colors": {"primary": {"DEFAULT": "#3b82f6"}}}
        extend = {"colors": {"primary": {"dark": "#2563eb"}}}
        snapshot = copy.deepcopy((base, extend))
        resolve(base, extend)
        assert (base, extend) == snapshot

    def test_numbers_become_strings(self) -> None:
        table = resolve({"zIndex": {"10": 10}, "opacity": {"50": 0.5}}, {})
        assert table["zIndex.10"] == "10"
        assert table["opacity.50"] == "0.5"

    def test_aliases_followed(self) -> None:
        table = resolve(
            {"colors": {"blue": {"500": "#3b82f6"}}},
            {"colors": {"brand": "{colors.blue.500}", "accent": "{colors.brand}"}},
        )
        assert table["colors.brand"] == "#3b82f6"
        assert table["colors.accent"] == "#3b82f6"

    def test_alias_cycle(self) -> None:
        with pytest.raises(ConfigError, match="alias cycle"):
            resolve({}, {"colors": {"a": "{colors.b}", "b": "{colors.a}"}})

    def test_alias_missing_target(self) -> None:
        with pytest.raises(ConfigError) as exc_info:
            resolve({}, {"colors": {"a": "{colors.nope}"}})
        assert exc_info.value.path == "colors.a"

    def test_group_replaced_by_value(self) -> None:
        with pytest.raises(ConfigError) as exc_info:
            resolve({"colors": {"blue": {"500": "#3b82f6"}}}, {"colors": {"blue": "#00f"}})
        assert exc_info.value.path == "colors.blue"

    def test_value_replaced_by_group(self) -> None:
        with pytest.raises(ConfigError) as exc_info:
            resolve({"colors": {"white": "#fff"}}, {"colors": {"white": {"soft": "#fafafa"}}})
        assert exc_info.value.path == "colors.white"

    def test_invalid_leaf(self) -> None:
        with pytest.raises(ConfigError, match="strings or numbers"):
            resolve({}, {"colors": {"flag": True}})


class TestMergeTokens:
    def test_untouched_branches_kept(self) -> None:
        merged = merge_tokens({"a": {"x": "1"}, "b": {"y": "2"}}, {"a": {"z": "3"}})
        assert merged == {"a": {"x": "1", "z": "3"}, "b": {"y": "2"}}


class TestTokenTable:
    def test_lookup_default_and_variant(self, table: TokenTable) -> None:
        assert table.lookup("colors", "primary") == "colors.primary.DEFAULT"
        assert table.lookup("colors", "primary-dark") == "colors.primary.dark"
        assert table.lookup("colors", "blue-500") == "colors.blue.500"

    def test_lookup_dotted_key(self, table: TokenTable) -> None:
        assert table.lookup("spacing", "0.5") == "spacing.0.5"
        assert table["spacing.0.5"] == "0.125rem"

    def test_lookup_missing(self, table: TokenTable) -> None:
        assert table.lookup("colors", "nope") is None
        assert table.lookup("nope", "primary") is None

    def test_scope(self, table: TokenTable) -> None:
        screens = table.scope("screens")
        assert list(screens) == ["sm", "md", "lg", "xl", "2xl"]
        assert screens["md"] == "768px"

    def test_is_mapping(self, table: TokenTable) -> None:
        assert "colors.primary.dark" in table
        assert len(table) == len(list(table))


class TestResolveTheme:
    def test_extend_from_config(self) -> None:
        config = parse_config({"theme": {"extend": {"colors": {"primary": {"DEFAULT": "#3b82f6"}}}}})
        table = resolve_theme(config)
        assert table["colors.primary.DEFAULT"] == "#3b82f6"
        assert table["colors.blue.500"] == "#3b82f6"

    def test_scope_override_replaces(self) -> None:
        config = parse_config({"theme": {"colors": {"ink": "#111"}}})
        table = resolve_theme(config)
        assert table.scope("colors") == {"ink": "#111"}
        assert table["spacing.4"] == "1rem"

    def test_scope_override_must_be_table(self) -> None:
        config = parse_config({"theme": {"colors": "red"}})
        with pytest.raises(ConfigError) as exc_info:
            resolve_theme(config)
        assert exc_info.value.path == "theme.colors"

    def test_extend_error_path(self) -> None:
        config = parse_config({"theme": {"extend": {"colors": {"blue": "#00f"}}}})
        with pytest.raises(ConfigError) as exc_info:
            resolve_theme(config)
        assert exc_info.value.path == "theme.extend.colors.blue"

    def test_default_theme_untouched(self) -> None:
        before = copy.deepcopy(DEFAULT_THEME)
        resolve_theme(parse_config({"theme": {"colors": {"ink": "#111"}}}))
        assert DEFAULT_THEME == before

    def test_list_scopes(self) -> None:
        scopes = list_scopes()
        assert "colors" in scopes
        assert "screens" in scopes
