"""
Build pipeline.

A BuildSession resolves the theme and plugins once, then runs full builds
(scan everything) or incremental rebuilds (rescan only changed files).
Incremental rebuilds keep a per-file token cache and a per-token
interpretation cache; both are replaced wholesale at commit time, so an
aborted rebuild leaves the session exactly as it was.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path

from .assembler import assemble, inject_utilities, write_stylesheet
from .config import BuildConfig
from .errors import ConfigError, ScanWarning, TokenRejection
from .generator import GeneratedRule, RuleGenerator
from .interpreter import ClassInterpreter, UtilityDescriptor
from .plugins import load_plugins
from .scanner import ContentMatcher, scan, scan_file, union_tokens
from .theme import TokenTable, resolve_theme
from .utilities import builtin_handlers
from .variants import VariantRegistry

logger = logging.getLogger(__name__)


@dataclass
class BuildResult:
    """Outcome of one build or rebuild."""

    css: str
    rules: tuple[GeneratedRule, ...]
    tokens: tuple[str, ...]
    files: list[Path]
    warnings: list[ScanWarning] = field(default_factory=list)
    rejections: list[TokenRejection] = field(default_factory=list)
    output_path: Path | None = None
    written: bool = False
    duration_ms: float = 0.0


class BuildSession:
    """
    Owns the resolved theme and the incremental caches for one project.

    Raises ConfigError from the constructor if the theme, plugins, content
    patterns or input stylesheet are unusable; nothing is scanned in that
    case.
    """

    def __init__(
        self,
        config: BuildConfig,
        *,
        diagnostics: bool = False,
        max_workers: int | None = None,
    ):
        self.config = config
        self.diagnostics = diagnostics
        self.max_workers = max_workers

        self.table: TokenTable = resolve_theme(config)
        self.variants = VariantRegistry.from_theme(self.table, config.dark_mode, config.dark_selector)
        handlers = [*builtin_handlers(), *load_plugins(config.plugins, self.table)]
        self.interpreter = ClassInterpreter(self.table, self.variants, handlers, prefix=config.prefix)
        self.generator = RuleGenerator(self.table, self.variants, important=config.important)
        self.matcher = ContentMatcher.from_config(config)
        self.matcher.validate()
        input_path = config.input_path
        if input_path is not None and not input_path.is_file():
            raise ConfigError(f"input stylesheet {input_path} does not exist", path="input")

        self._tokens_by_file: dict[Path, tuple[str, ...]] = {}
        self._descriptors: dict[str, UtilityDescriptor | None] = {}
        self._rejections: dict[str, TokenRejection] = {}
        self._blocked = frozenset(config.blocklist)
        self._commit_lock = threading.Lock()

    @property
    def files(self) -> list[Path]:
        return self._ordered(self._tokens_by_file)

    def _ordered(self, tokens_by_file: dict[Path, tuple[str, ...]]) -> list[Path]:
        root = self.matcher.root.resolve()
        return sorted(tokens_by_file, key=lambda p: p.relative_to(root).as_posix())

    def _read_input(self, path: Path) -> str:
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigError(f"cannot read input stylesheet: {e}", path="input") from e

    def _interpret(
        self,
        token: str,
        descriptors: dict[str, UtilityDescriptor | None],
        rejections: dict[str, TokenRejection],
    ) -> UtilityDescriptor | None:
        if token in self._descriptors:
            descriptor = self._descriptors[token]
            if descriptor is None and token in self._rejections:
                rejections[token] = self._rejections[token]
        else:
            found: list[TokenRejection] | None = [] if self.diagnostics else None
            descriptor = self.interpreter.interpret(token, found)
            if found:
                rejections[token] = found[0]
        descriptors[token] = descriptor
        return descriptor

    def _render(
        self,
        tokens_by_file: dict[Path, tuple[str, ...]],
        warnings: list[ScanWarning],
        started: float,
        write: bool,
    ) -> BuildResult:
        files = self._ordered(tokens_by_file)
        scanned = union_tokens(tokens_by_file, files)
        tokens = tuple(dict.fromkeys([*self.config.safelist, *scanned]))
        tokens = tuple(t for t in tokens if t not in self._blocked)

        descriptors: dict[str, UtilityDescriptor | None] = {}
        rejections: dict[str, TokenRejection] = {}
        valid = [d for t in tokens if (d := self._interpret(t, descriptors, rejections)) is not None]
        rules = self.generator.generate(valid)
        css = assemble(rules, minify=self.config.minify)
        if self.config.input_path is not None:
            css = inject_utilities(self._read_input(self.config.input_path), css)

        # Commit: caches now describe exactly the current token set
        self._tokens_by_file = tokens_by_file
        self._descriptors = descriptors
        self._rejections = rejections

        output_path = self.config.output_path if write else None
        written = write_stylesheet(css, output_path) if output_path is not None else False

        duration_ms = (time.perf_counter() - started) * 1000
        logger.info(
            "Generated %d rule(s) from %d token(s) in %d file(s) (%.1f ms)",
            len(rules),
            len(tokens),
            len(files),
            duration_ms,
        )
        return BuildResult(
            css=css,
            rules=rules,
            tokens=tokens,
            files=files,
            warnings=warnings,
            rejections=list(rejections.values()),
            output_path=output_path,
            written=written,
            duration_ms=duration_ms,
        )

    def build(self, write: bool = True) -> BuildResult:
        """Scan every content file and produce the stylesheet."""
        started = time.perf_counter()
        result = scan(self.matcher, max_workers=self.max_workers)
        with self._commit_lock:
            return self._render(dict(result.tokens_by_file), result.warnings, started, write)

    def rebuild(
        self,
        changed: Iterable[Path],
        write: bool = True,
        should_abort: Callable[[], bool] | None = None,
    ) -> BuildResult | None:
        """
        Rescan only ``changed`` paths and regenerate the stylesheet.

        Deleted or no-longer-matching files drop out of the cache. Tokens
        that no longer appear in any file lose their rules; new tokens are
        interpreted and added.

        Returns:
            BuildResult, or None if ``should_abort`` asked to stop before
            the new state was committed.
        """
        started = time.perf_counter()
        tokens_by_file = dict(self._tokens_by_file)
        warnings: list[ScanWarning] = []

        for path in sorted({p.resolve() for p in changed}):
            if should_abort is not None and should_abort():
                logger.debug("Rebuild superseded while scanning")
                return None
            if not path.is_file() or not self.matcher.matches(path):
                tokens_by_file.pop(path, None)
                continue
            try:
                tokens_by_file[path] = scan_file(path)
            except OSError as e:
                warning = ScanWarning(path=path, reason=e.strerror or str(e))
                logger.warning("Skipping unreadable file %s: %s", path, warning.reason)
                warnings.append(warning)
                tokens_by_file.pop(path, None)

        with self._commit_lock:
            if should_abort is not None and should_abort():
                logger.debug("Rebuild superseded before commit")
                return None
            return self._render(tokens_by_file, warnings, started, write)
