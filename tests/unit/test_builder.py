"""Tests for full and incremental builds."""

from __future__ import annotations

from pathlib import Path

import pytest

from windsock.builder import BuildSession
from windsock.config import BuildConfig, DarkMode, load_config, parse_config
from windsock.errors import ConfigError


def _session(project: Path, **updates) -> BuildSession:
    config = load_config(project)
    if updates:
        config = config.model_copy(update=updates)
    return BuildSession(config)


class TestBuild:
    def test_end_to_end(self, project: Path) -> None:
        result = _session(project).build()
        assert len(result.rules) == 2
        assert result.rules[0].selector == ".bg-primary"
        assert result.rules[0].declarations == (("background-color", "#3b82f6"),)
        assert result.rules[1].selector == ".dark .dark\\:bg-primary-dark"
        assert result.rules[1].declarations == (("background-color", "#2563eb"),)

        output = project.resolve() / "dist" / "windsock.css"
        assert result.output_path == output
        assert result.written is True
        assert output.read_text() == result.css
        assert ".dark .dark\\:bg-primary-dark {\n  background-color: #2563eb;\n}" in result.css

    def test_media_dark_mode(self, project: Path) -> None:
        result = _session(project, dark_mode=DarkMode.MEDIA).build(write=False)
        assert "@media (prefers-color-scheme: dark) {\n  .dark\\:bg-primary-dark {" in result.css
        assert result.written is False
        assert result.output_path is None

    def test_repeat_build_is_identical(self, project: Path) -> None:
        session = _session(project)
        first = session.build()
        second = session.build()
        assert first.css == second.css
        assert second.written is False
        assert _session(project).build(write=False).css == first.css

    def test_safelist_and_blocklist(self, project: Path) -> None:
        session = _session(project, safelist=["p-4", "bogus-thing"], blocklist=["bg-primary"])
        result = session.build(write=False)
        selectors = [rule.selector for rule in result.rules]
        assert selectors == [".p-4", ".dark .dark\\:bg-primary-dark"]
        assert result.tokens[0] == "p-4"

    def test_minify(self, project: Path) -> None:
        result = _session(project, minify=True).build(write=False)
        assert result.css == (
            ".bg-primary{background-color:#3b82f6}.dark .dark\\:bg-primary-dark{background-color:#2563eb}\n"
        )

    def test_diagnostics(self, project: Path) -> None:
        session = BuildSession(load_config(project), diagnostics=True)
        result = session.build(write=False)
        rejected = {r.token for r in result.rejections}
        assert "div" in rejected
        assert "bg-primary" not in rejected

    def test_bad_theme_raises_before_scanning(self, tmp_path: Path) -> None:
        config = parse_config({"theme": {"extend": {"colors": {"blue": "#00f"}}}}, root=tmp_path)
        with pytest.raises(ConfigError):
            BuildSession(config)

    def test_plugins(self, project: Path) -> None:
        (project / "src" / "card.html").write_text('<p class="line-clamp-2">')
        result = _session(project, plugins=["windsock.contrib.line_clamp"]).build(write=False)
        assert ".line-clamp-2 {" in result.css

    def test_no_content(self, tmp_path: Path) -> None:
        result = BuildSession(BuildConfig(root=tmp_path)).build(write=False)
        assert result.rules == ()
        assert result.files == []

    def test_absolute_content_pattern_raises_before_scanning(self, tmp_path: Path) -> None:
        config = parse_config({"content": ["/etc/**/*.html"]}, root=tmp_path)
        with pytest.raises(ConfigError) as exc_info:
            BuildSession(config)
        assert exc_info.value.path == "content[0]"

    def test_gitignored_content_not_scanned(self, tmp_path: Path) -> None:
        (tmp_path / ".gitignore").write_text("build/\n")
        (tmp_path / "build").mkdir()
        (tmp_path / "build" / "gen.html").write_text('<p class="p-8">')
        (tmp_path / "index.html").write_text('<p class="flex">')
        config = parse_config({"content": ["./**/*.html"]}, root=tmp_path)
        result = BuildSession(config).build(write=False)
        assert ".flex {" in result.css
        assert ".p-8" not in result.css
        assert [p.name for p in result.files] == ["index.html"]


class TestInputStylesheet:
    def test_directive_replaced(self, project: Path) -> None:
        (project / "input.css").write_text("body { margin: 0; }\n\n@windsock utilities;\n\nfooter { color: red; }\n")
        result = _session(project, input=Path("input.css")).build()
        assert result.css.startswith("body { margin: 0; }\n\n/* windsock utilities")
        assert result.css.endswith("footer { color: red; }\n")
        assert "@windsock" not in result.css
        assert ".bg-primary {" in result.css
        assert (project / "dist" / "windsock.css").read_text() == result.css

    def test_tailwind_directives(self, project: Path) -> None:
        (project / "input.css").write_text("@tailwind base;\n@tailwind components;\n@tailwind utilities;\n")
        result = _session(project, input=Path("input.css"), minify=True).build(write=False)
        assert result.css == (
            ".bg-primary{background-color:#3b82f6}.dark .dark\\:bg-primary-dark{background-color:#2563eb}\n"
        )

    def test_appended_without_directive(self, project: Path) -> None:
        (project / "input.css").write_text(":root { --gap: 1rem; }\n")
        result = _session(project, input=Path("input.css")).build(write=False)
        assert result.css.startswith(":root { --gap: 1rem; }\n\n/* windsock utilities")
        assert ".bg-primary {" in result.css

    def test_input_edits_picked_up_on_rebuild(self, project: Path) -> None:
        source = project / "input.css"
        source.write_text("@windsock utilities;\n")
        session = _session(project, input=Path("input.css"))
        session.build(write=False)
        source.write_text("h1 { font-weight: 700; }\n@windsock utilities;\n")
        result = session.rebuild([project / "src" / "index.html"], write=False)
        assert result is not None
        assert result.css.startswith("h1 { font-weight: 700; }\n")

    def test_missing_input_raises(self, project: Path) -> None:
        with pytest.raises(ConfigError) as exc_info:
            _session(project, input=Path("missing.css"))
        assert exc_info.value.path == "input"


class TestRebuild:
    def test_added_token(self, project: Path) -> None:
        session = _session(project)
        session.build(write=False)
        page = project / "src" / "index.html"
        page.write_text('<div class="bg-primary dark:bg-primary-dark md:p-4"></div>\n')

        result = session.rebuild([page], write=False)
        assert result is not None
        assert [r.selector for r in result.rules][-1] == ".md\\:p-4"
        assert result.css == _session(project).build(write=False).css

    def test_new_file(self, project: Path) -> None:
        session = _session(project)
        session.build(write=False)
        extra = project / "src" / "about.html"
        extra.write_text('<p class="flex">')

        result = session.rebuild([extra], write=False)
        assert result is not None
        assert ".flex {" in result.css
        assert extra.resolve() in session.files

    def test_deleted_file_drops_rules(self, project: Path) -> None:
        extra = project / "src" / "about.html"
        extra.write_text('<p class="flex">')
        session = _session(project)
        assert ".flex {" in session.build(write=False).css

        extra.unlink()
        result = session.rebuild([extra], write=False)
        assert result is not None
        assert ".flex {" not in result.css
        assert len(result.rules) == 2

    def test_token_shared_by_files_survives(self, project: Path) -> None:
        extra = project / "src" / "about.html"
        extra.write_text('<p class="bg-primary">')
        session = _session(project)
        session.build(write=False)

        extra.write_text("<p>")
        result = session.rebuild([extra], write=False)
        assert result is not None
        assert ".bg-primary {" in result.css

    def test_non_matching_path_ignored(self, project: Path) -> None:
        session = _session(project)
        before = session.build(write=False).css
        notes = project / "notes.txt"
        notes.write_text("p-4")
        result = session.rebuild([notes], write=False)
        assert result is not None
        assert result.css == before

    def test_abort_leaves_state_untouched(self, project: Path) -> None:
        session = _session(project)
        session.build(write=False)
        files_before = session.files

        extra = project / "src" / "about.html"
        extra.write_text('<p class="flex">')
        assert session.rebuild([extra], write=False, should_abort=lambda: True) is None
        assert session.files == files_before

        result = session.rebuild([extra], write=False)
        assert result is not None
        assert ".flex {" in result.css
