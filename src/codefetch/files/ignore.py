"""Gitignore-style path matching.

Rule sources are layered in precedence order: the built-in defaults, the
project's ``.gitignore``, then ``.codefetchignore``. All sources compile into
one ``GitIgnoreSpec`` so a later ``!pattern`` re-includes a path excluded by
an earlier source (last matching rule wins).
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from pathspec import GitIgnoreSpec

from codefetch.exceptions import InvalidConfigurationError
from codefetch.files.defaults import DEFAULT_IGNORE_PATTERNS

logger = logging.getLogger("codefetch.ignore")

GITIGNORE_FILE = ".gitignore"
IGNORE_FILE = ".codefetchignore"


class PatternMatcher:
    """Compiled, read-only ignore rules. Safe to reuse across walks."""

    def __init__(self, spec: GitIgnoreSpec, rule_count: int) -> None:
        self._spec = spec
        self.rule_count = rule_count

    @classmethod
    def for_root(
        cls,
        root: str | Path,
        default_rules: str | None = DEFAULT_IGNORE_PATTERNS,
        extra_rules: str | None = None,
    ) -> PatternMatcher:
        """Build a matcher from the defaults plus the root's override files.

        ``extra_rules`` are layered last, after ``.codefetchignore``.
        """
        root = Path(root)
        sources = [default_rules]
        for name in (GITIGNORE_FILE, IGNORE_FILE):
            content = _read_rule_file(root / name)
            if content is not None:
                sources.append(content)
        if extra_rules:
            sources.append(extra_rules)
        return build_matcher(sources)

    def is_ignored(self, relative_path: str, is_dir: bool = False) -> bool:
        """Check a root-relative path against the rules.

        Directories must be flagged (or carry a trailing slash) for
        directory-only patterns such as ``build/`` to apply to them.
        """
        path = relative_path.replace("\\", "/")
        while path.startswith("./"):
            path = path[2:]
        if not path or path in (".", "/"):
            return False
        if is_dir and not path.endswith("/"):
            path += "/"
        return self._spec.match_file(path)


def build_matcher(rule_sources: Sequence[str | None]) -> PatternMatcher:
    """Compile ordered rule sources into a PatternMatcher.

    The first source is the default rule list and must contain at least one
    rule. Later sources may be empty.

    Raises:
        InvalidConfigurationError: If the defaults are missing or empty, or
            any source holds a pattern that cannot be compiled.
    """
    if not rule_sources:
        raise InvalidConfigurationError("Default ignore patterns could not be loaded")

    defaults = rule_sources[0]
    if not isinstance(defaults, str):
        raise InvalidConfigurationError("Default ignore patterns could not be loaded")
    default_lines = _rule_lines(defaults)
    if not default_lines:
        raise InvalidConfigurationError("Default ignore patterns are empty")

    lines = _compile_check(default_lines, 0)
    for index, source in enumerate(rule_sources[1:], start=1):
        if not source:
            continue
        if not isinstance(source, str):
            raise InvalidConfigurationError(f"Ignore rule source #{index} is not text")
        lines.extend(_compile_check(_rule_lines(source), index))

    spec = GitIgnoreSpec.from_lines(lines)

    logger.debug("Compiled %d ignore rules from %d sources", len(lines), len(rule_sources))
    return PatternMatcher(spec, len(lines))


def _compile_check(lines: list[str], index: int) -> list[str]:
    """Compile one source on its own so a bad pattern can be traced to it."""
    try:
        GitIgnoreSpec.from_lines(lines)
    except ValueError as e:
        raise InvalidConfigurationError(
            f"Invalid ignore pattern in rule source #{index}: {e}"
        ) from e
    return list(lines)


def _rule_lines(source: str) -> list[str]:
    return [
        line
        for line in source.splitlines()
        if line.strip() and not line.startswith("#")
    ]


def _read_rule_file(path: Path) -> str | None:
    """Read an override file; absence or unreadability is not an error."""
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.debug("No %s found", path.name)
    except OSError as e:
        logger.warning("Could not read %s: %s", path, e)
    return None
