"""Tests for class token interpretation."""

from __future__ import annotations

import pytest

from windsock.config import DarkMode
from windsock.errors import TokenRejection
from windsock.interpreter import ClassInterpreter, interpret, split_variants
from windsock.theme import TokenTable
from windsock.utilities import Declaration, Literal, TokenRef
from windsock.variants import VariantRegistry


@pytest.fixture
def interpreter(table: TokenTable) -> ClassInterpreter:
    return ClassInterpreter(table, VariantRegistry.from_theme(table))


class TestSplitVariants:
    def test_plain(self) -> None:
        assert split_variants("bg-primary") == ["bg-primary"]

    def test_stacked(self) -> None:
        assert split_variants("md:dark:hover:bg-primary") == ["md", "dark", "hover", "bg-primary"]

    def test_colon_inside_brackets(self) -> None:
        assert split_variants("md:bg-[url(a:b)]") == ["md", "bg-[url(a:b)]"]


class TestInterpret:
    def test_theme_color(self, table: TokenTable) -> None:
        descriptor = interpret("bg-primary-dark", table)
        assert descriptor is not None
        assert descriptor.utility == "bg:colors"
        assert descriptor.declarations == (Declaration("background-color", TokenRef("colors.primary.dark")),)

    def test_default_key(self, table: TokenTable) -> None:
        descriptor = interpret("text-primary", table)
        assert descriptor is not None
        assert descriptor.declarations[0] == Declaration("color", TokenRef("colors.primary.DEFAULT"))

    def test_deterministic(self, table: TokenTable) -> None:
        assert interpret("md:hover:bg-primary/50", table) == interpret("md:hover:bg-primary/50", table)

    def test_ring_color(self, table: TokenTable) -> None:
        descriptor = interpret("ring-primary", table)
        assert descriptor is not None
        assert descriptor.declarations[0].property == "--tw-ring-color"

    def test_not_a_class(self, table: TokenTable) -> None:
        assert interpret("totally-not-a-class", table) is None

    def test_unknown_theme_value(self, table: TokenTable) -> None:
        assert interpret("bg-nope", table) is None

    def test_variants_kept_in_order(self, table: TokenTable) -> None:
        descriptor = interpret("md:hover:bg-primary", table)
        assert descriptor is not None
        assert descriptor.variants == ("md", "hover")
        assert descriptor.token == "md:hover:bg-primary"

    def test_dark_variant_in_both_modes(self, table: TokenTable) -> None:
        assert interpret("dark:bg-primary", table, DarkMode.CLASS) is not None
        assert interpret("dark:bg-primary", table, DarkMode.MEDIA) is not None

    def test_unknown_variant(self, table: TokenTable) -> None:
        assert interpret("wibble:bg-primary", table) is None

    def test_spacing_pair(self, table: TokenTable) -> None:
        descriptor = interpret("px-4", table)
        assert descriptor is not None
        assert [d.property for d in descriptor.declarations] == ["padding-left", "padding-right"]
        assert all(d.value == TokenRef("spacing.4") for d in descriptor.declarations)

    def test_dotted_spacing_key(self, table: TokenTable) -> None:
        descriptor = interpret("p-0.5", table)
        assert descriptor is not None
        assert descriptor.declarations[0].value == TokenRef("spacing.0.5")

    def test_negative(self, table: TokenTable) -> None:
        descriptor = interpret("-mt-4", table)
        assert descriptor is not None
        assert descriptor.declarations[0].negate is True

    def test_negative_not_allowed(self, table: TokenTable) -> None:
        assert interpret("-p-4", table) is None

    def test_alpha_modifier(self, table: TokenTable) -> None:
        descriptor = interpret("bg-primary/50", table)
        assert descriptor is not None
        assert descriptor.declarations[0].alpha == "50"

    def test_arbitrary_value(self, table: TokenTable) -> None:
        descriptor = interpret("w-[37px]", table)
        assert descriptor is not None
        assert descriptor.declarations[0] == Declaration("width", Literal("37px"))

    def test_arbitrary_value_underscores(self, table: TokenTable) -> None:
        descriptor = interpret("w-[calc(100%_-_2rem)]", table)
        assert descriptor is not None
        assert descriptor.declarations[0].value == Literal("calc(100% - 2rem)")

    def test_arbitrary_color_shape_checked(self, table: TokenTable) -> None:
        assert interpret("bg-[#123456]", table) is not None
        descriptor = interpret("text-[14px]", table)
        assert descriptor is not None
        assert descriptor.declarations[0].property == "font-size"

    def test_text_size_vs_color(self, table: TokenTable) -> None:
        size = interpret("text-lg", table)
        assert size is not None
        assert size.declarations[0].property == "font-size"
        align = interpret("text-center", table)
        assert align is not None
        assert align.declarations[0] == Declaration("text-align", Literal("center"))

    def test_bare_utilities(self, table: TokenTable) -> None:
        border = interpret("border", table)
        assert border is not None
        assert border.declarations[0] == Declaration("border-width", TokenRef("borderWidth.DEFAULT"))
        rounded = interpret("rounded", table)
        assert rounded is not None
        assert rounded.declarations[0].value == TokenRef("borderRadius.DEFAULT")

    def test_static(self, table: TokenTable) -> None:
        descriptor = interpret("flex", table)
        assert descriptor is not None
        assert descriptor.declarations == (Declaration("display", Literal("flex")),)

    @pytest.mark.parametrize("token", ["bg-primary!", "!bg-primary"])
    def test_important(self, table: TokenTable, token: str) -> None:
        descriptor = interpret(token, table)
        assert descriptor is not None
        assert descriptor.important is True
        assert descriptor.token == token


class TestClassInterpreter:
    def test_prefix(self, table: TokenTable) -> None:
        interpreter = ClassInterpreter(table, VariantRegistry.from_theme(table), prefix="tw-")
        assert interpreter.interpret("tw-flex") is not None
        assert interpreter.interpret("hover:tw-bg-primary") is not None
        assert interpreter.interpret("-tw-mt-4") is not None
        assert interpreter.interpret("flex") is None

    def test_rejection_reasons(self, interpreter: ClassInterpreter) -> None:
        diagnostics: list[TokenRejection] = []
        assert interpreter.interpret("bg-nope", diagnostics) is None
        assert interpreter.interpret("wibble:flex", diagnostics) is None
        assert interpreter.interpret("div", diagnostics) is None
        reasons = [r.reason for r in diagnostics]
        assert reasons == [
            "value of 'bg-nope' not found in theme",
            "unknown variant 'wibble'",
            "no utility matches",
        ]

    def test_no_diagnostics_on_success(self, interpreter: ClassInterpreter) -> None:
        diagnostics: list[TokenRejection] = []
        assert interpreter.interpret("flex", diagnostics) is not None
        assert diagnostics == []
