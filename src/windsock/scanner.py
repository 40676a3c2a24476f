"""
Content scanner for windsock.

Finds the files named by the ``content`` globs and pulls candidate class
tokens out of them. Files are treated as opaque text: no markup or template
language is parsed, so extraction over-approximates and the interpreter
discards whatever is not a utility.

The walk honours ``.gitignore`` files (each one relative to its own directory)
unless ``respect_gitignore`` is off.
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Iterable, Mapping
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from functools import cached_property
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING

from pathspec import GitIgnoreSpec

from .errors import ConfigError, ScanWarning

if TYPE_CHECKING:
    from .config import BuildConfig

logger = logging.getLogger(__name__)

SKIP_DIRS = frozenset({"node_modules", ".git"})
GITIGNORE = ".gitignore"

# Maximal runs of the utility-class alphabet; a bracketed arbitrary value may
# also hold parens and commas. Everything else is a delimiter.
_TOKEN_RE = re.compile(r"(?:\[[^\s\[\]\"'`<>]*\]|[A-Za-z0-9_\-:/.!#%])+")
_HAS_LETTER_RE = re.compile(r"[A-Za-z]")
_BRACE_RE = re.compile(r"\{([^{}]*)\}")
_WILDCARD_CHARS = frozenset("*?[")


# =============================================================================
# Glob handling
# =============================================================================


def expand_braces(pattern: str) -> list[str]:
    """Expand ``{a,b}`` alternatives: ``*.{rs,html}`` -> ``*.rs``, ``*.html``."""
    match = _BRACE_RE.search(pattern)
    if match is None:
        return [pattern]
    head, tail = pattern[: match.start()], pattern[match.end() :]
    expanded: list[str] = []
    for option in match.group(1).split(","):
        expanded.extend(expand_braces(head + option + tail))
    return expanded


def _glob_to_regex(pattern: str) -> re.Pattern[str]:
    """Translate a glob with ``**`` support into an anchored regex."""
    out: list[str] = []
    i = 0
    while i < len(pattern):
        if pattern.startswith("**/", i):
            out.append("(?:.*/)?")
            i += 3
        elif pattern.startswith("**", i):
            out.append(".*")
            i += 2
        elif pattern[i] == "*":
            out.append("[^/]*")
            i += 1
        elif pattern[i] == "?":
            out.append("[^/]")
            i += 1
        else:
            out.append(re.escape(pattern[i]))
            i += 1
    return re.compile("".join(out) + r"\Z")


def _normalize(pattern: str, label: str) -> str:
    if pattern.startswith("/") or re.match(r"^[A-Za-z]:[\\/]", pattern):
        raise ConfigError("content patterns must be relative to the project root", path=label)
    while pattern.startswith("./"):
        pattern = pattern[2:]
    return pattern


def _static_base(pattern: str) -> str:
    """Return the leading path segments that contain no wildcard."""
    parts: list[str] = []
    for part in pattern.split("/"):
        if _WILDCARD_CHARS & set(part):
            break
        parts.append(part)
    return "/".join(parts)


@dataclass(frozen=True)
class ContentMatcher:
    """
    Ordered content globs evaluated relative to a fixed project root.

    Example:
        ContentMatcher(root, ("./src/**/*.{rs,html,css}", "./index.html"))
    """

    root: Path
    patterns: tuple[str, ...]
    exclude: tuple[str, ...] = ()
    respect_gitignore: bool = True

    @classmethod
    def from_config(cls, config: BuildConfig) -> ContentMatcher:
        return cls(
            root=config.root,
            patterns=tuple(config.content),
            exclude=tuple(config.exclude),
            respect_gitignore=config.respect_gitignore,
        )

    def validate(self) -> None:
        """Compile every pattern now so a bad one raises ConfigError before scanning."""
        _ = self._include_res, self._exclude_res

    @cached_property
    def expanded(self) -> tuple[str, ...]:
        """Include patterns after brace expansion, in declaration order."""
        seen: dict[str, None] = {}
        for index, pattern in enumerate(self.patterns):
            for option in expand_braces(_normalize(pattern, f"content[{index}]")):
                seen.setdefault(option, None)
        return tuple(seen)

    @cached_property
    def extensions(self) -> frozenset[str]:
        """File extensions implied by the include patterns."""
        found: set[str] = set()
        for pattern in self.expanded:
            suffix = PurePosixPath(pattern).suffix
            if suffix and not _WILDCARD_CHARS & set(suffix):
                found.add(suffix.lower())
        return frozenset(found)

    @cached_property
    def _include_res(self) -> tuple[re.Pattern[str], ...]:
        return tuple(_glob_to_regex(p) for p in self.expanded)

    @cached_property
    def _exclude_res(self) -> tuple[re.Pattern[str], ...]:
        patterns: list[str] = []
        for index, pattern in enumerate(self.exclude):
            patterns.extend(expand_braces(_normalize(pattern, f"exclude[{index}]")))
        return tuple(_glob_to_regex(p) for p in patterns)

    @cached_property
    def _gitignore_specs(self) -> dict[str, GitIgnoreSpec | None]:
        # Relative directory -> parsed .gitignore, filled lazily
        return {}

    def _gitignore(self, rel_dir: str) -> GitIgnoreSpec | None:
        specs = self._gitignore_specs
        if rel_dir not in specs:
            path = self.root.resolve() / rel_dir / GITIGNORE
            try:
                lines = path.read_text(encoding="utf-8", errors="replace").splitlines()
            except OSError:
                specs[rel_dir] = None
            else:
                specs[rel_dir] = GitIgnoreSpec.from_lines(lines)
        return specs[rel_dir]

    def ignored(self, rel: str, is_dir: bool = False) -> bool:
        """
        Check a root-relative path against every ``.gitignore`` above it.

        Each ``.gitignore`` applies to paths relative to its own directory.
        """
        if not self.respect_gitignore:
            return False
        parts = rel.split("/")
        for depth in range(len(parts)):
            spec = self._gitignore("/".join(parts[:depth]))
            if spec is None:
                continue
            sub = "/".join(parts[depth:]) + ("/" if is_dir else "")
            if spec.match_file(sub):
                return True
        return False

    def relative(self, path: Path) -> str | None:
        """Return ``path`` relative to the root in posix form, or None if outside."""
        try:
            rel = path.resolve().relative_to(self.root.resolve())
        except ValueError:
            return None
        return rel.as_posix()

    def matches(self, path: Path) -> bool:
        """Check whether a file is selected by the include and exclude globs."""
        rel = self.relative(path)
        if rel is None:
            return False
        if SKIP_DIRS & set(rel.split("/")[:-1]):
            return False
        if not any(regex.match(rel) for regex in self._include_res):
            return False
        if any(regex.match(rel) for regex in self._exclude_res):
            return False
        return not self.ignored(rel)

    def files(self) -> list[Path]:
        """
        Walk the project once and return matching files.

        Results are deduplicated and sorted by relative path. Missing
        directories simply contribute nothing.
        """
        root = self.root.resolve()
        found: set[Path] = set()
        walked: set[Path] = set()

        for pattern in self.expanded:
            base = root / _static_base(pattern) if _static_base(pattern) else root
            if base.is_file():
                if self.matches(base):
                    found.add(base)
                continue
            if not base.is_dir() or base in walked:
                continue
            walked.add(base)
            for dirpath, dirnames, filenames in os.walk(base):
                rel_dir = Path(dirpath).relative_to(root).as_posix()
                prefix = "" if rel_dir == "." else rel_dir + "/"
                dirnames[:] = sorted(
                    d for d in dirnames if d not in SKIP_DIRS and not self.ignored(prefix + d, is_dir=True)
                )
                for filename in filenames:
                    candidate = Path(dirpath) / filename
                    if self.matches(candidate):
                        found.add(candidate)

        return sorted(found, key=lambda p: p.relative_to(root).as_posix())


# =============================================================================
# Token extraction
# =============================================================================


def extract_tokens(text: str) -> tuple[str, ...]:
    """
    Extract candidate class tokens from raw text, in first-seen order.

    A token is a maximal run of the utility alphabet. Trailing ``.`` and
    ``:`` are dropped since no utility ends with them.
    """
    seen: dict[str, None] = {}
    for match in _TOKEN_RE.finditer(text):
        token = match.group(0).rstrip(".:")
        if token and _HAS_LETTER_RE.search(token):
            seen.setdefault(token, None)
    return tuple(seen)


def scan_file(path: Path) -> tuple[str, ...]:
    """Read one file and extract its tokens. Raises OSError if unreadable."""
    with path.open("r", encoding="utf-8", errors="replace") as f:
        text = f.read()
    return extract_tokens(text)


def union_tokens(
    tokens_by_file: Mapping[Path, tuple[str, ...]],
    order: Iterable[Path],
) -> tuple[str, ...]:
    """Merge per-file token tuples in file order, keeping first discovery."""
    merged: dict[str, None] = {}
    for path in order:
        for token in tokens_by_file.get(path, ()):
            merged.setdefault(token, None)
    return tuple(merged)


@dataclass
class ScanResult:
    """Tokens found in one scan, grouped by file."""

    files: list[Path] = field(default_factory=list)
    tokens_by_file: dict[Path, tuple[str, ...]] = field(default_factory=dict)
    warnings: list[ScanWarning] = field(default_factory=list)

    @property
    def tokens(self) -> tuple[str, ...]:
        """Ordered set of all tokens, by file order then position."""
        return union_tokens(self.tokens_by_file, self.files)


def scan_files(paths: Iterable[Path], max_workers: int | None = None) -> ScanResult:
    """
    Read ``paths`` (in parallel) and extract their tokens.

    Unreadable files are logged and reported as ScanWarnings; they never
    abort the scan. Output order follows ``paths`` regardless of which
    read finishes first.
    """
    ordered = list(paths)
    result = ScanResult()
    if not ordered:
        return result

    tokens_by_file: dict[Path, tuple[str, ...]] = {}
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = {executor.submit(scan_file, path): path for path in ordered}
        for future in as_completed(futures):
            path = futures[future]
            try:
                tokens_by_file[path] = future.result()
            except OSError as e:
                warning = ScanWarning(path=path, reason=e.strerror or str(e))
                logger.warning("Skipping unreadable file %s: %s", path, warning.reason)
                result.warnings.append(warning)

    result.files = [p for p in ordered if p in tokens_by_file]
    result.tokens_by_file = {p: tokens_by_file[p] for p in result.files}
    result.warnings.sort(key=lambda w: str(w.path))
    return result


def scan(matcher: ContentMatcher, max_workers: int | None = None) -> ScanResult:
    """Find every file selected by ``matcher`` and extract its tokens."""
    files = matcher.files()
    logger.debug("Scanning %d content file(s)", len(files))
    return scan_files(files, max_workers=max_workers)
