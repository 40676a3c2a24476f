"""
Stylesheet assembler.

Orders generated rules deterministically and renders the final stylesheet:
rules without variants first, then state and dark variants, then responsive
variants from the narrowest breakpoint up. Within a layer rules keep the
order in which their tokens were first discovered, so identical inputs
always give byte-identical output.
"""

from __future__ import annotations

import logging
import os
import re
import tempfile
from collections.abc import Iterable
from pathlib import Path

from .generator import GeneratedRule

logger = logging.getLogger(__name__)

HEADER = "/* windsock utilities - generated file, do not edit */"

# `@windsock utilities;` marks where rules go in an input stylesheet. The
# tailwind spellings are accepted; `base` and `components` layers are dropped.
_UTILITIES_DIRECTIVE_RE = re.compile(r"@(?:windsock|tailwind)\s+utilities\s*;")
_OTHER_DIRECTIVE_RE = re.compile(r"@(?:windsock|tailwind)\s+(?:base|components)\s*;[ \t]*\n?")


def sort_rules(rules: Iterable[GeneratedRule]) -> list[GeneratedRule]:
    """Sort rules by (layer, discovery order); selector breaks any tie."""
    return sorted(rules, key=lambda rule: (rule.layer, rule.order, rule.wrappers, rule.selector))


def render_rule(rule: GeneratedRule, minify: bool = False) -> str:
    """Render one rule, nesting it inside its at-rule wrappers."""
    if minify:
        body = ";".join(f"{prop}:{value}" for prop, value in rule.declarations)
        text = f"{rule.selector}{{{body}}}"
        for wrapper in reversed(rule.wrappers):
            text = f"{wrapper}{{{text}}}"
        return text

    depth = len(rule.wrappers)
    pad = "  " * depth
    lines = [f"{pad}{rule.selector} {{"]
    lines.extend(f"{pad}  {prop}: {value};" for prop, value in rule.declarations)
    lines.append(f"{pad}}}")
    for level, wrapper in reversed(list(enumerate(rule.wrappers))):
        outer = "  " * level
        lines = [f"{outer}{wrapper} {{", *lines, f"{outer}}}"]
    return "\n".join(lines)


def assemble(rules: Iterable[GeneratedRule], minify: bool = False) -> str:
    """
    Render the stylesheet text for a set of rules.

    Args:
        rules: Generated rules in any order
        minify: Drop whitespace and the header comment

    Returns:
        Stylesheet text ending with a newline
    """
    ordered = sort_rules(rules)
    if minify:
        return "".join(render_rule(rule, minify=True) for rule in ordered) + "\n"

    blocks = [HEADER, *(render_rule(rule) for rule in ordered)]
    return "\n\n".join(blocks) + "\n"


def inject_utilities(source: str, utilities: str) -> str:
    """
    Place generated utilities into an input stylesheet.

    The first ``@windsock utilities;`` (or ``@tailwind utilities;``) is
    replaced by the utilities; later ones are removed. Without a directive
    the utilities are appended after the source.
    """
    source = _OTHER_DIRECTIVE_RE.sub("", source)
    body = utilities.rstrip("\n")
    match = _UTILITIES_DIRECTIVE_RE.search(source)
    if match is None:
        if not source.strip():
            return utilities
        return source.rstrip("\n") + "\n\n" + utilities

    head, tail = source[: match.start()], _UTILITIES_DIRECTIVE_RE.sub("", source[match.end() :])
    text = head + body + tail
    return text if text.endswith("\n") else text + "\n"


def write_stylesheet(text: str, path: Path) -> bool:
    """
    Write the stylesheet atomically if its content changed.

    Returns:
        True if the file was written, False if it was already up to date.
    """
    if path.exists() and path.read_bytes() == text.encode("utf-8"):
        logger.debug("Stylesheet unchanged: %s", path)
        return False

    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(text)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    return True
