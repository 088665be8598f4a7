"""Recursive file discovery, filtered by ignore rules and extensions."""

from __future__ import annotations

import logging
import os
from collections.abc import Collection, Iterator
from pathlib import Path

from codefetch.exceptions import WalkError
from codefetch.files.ignore import PatternMatcher

logger = logging.getLogger("codefetch.walker")


def walk(
    root: str | Path,
    matcher: PatternMatcher | None = None,
    extensions: Collection[str] | None = None,
) -> list[Path]:
    """Collect every file under ``root`` that survives the ignore rules.

    Args:
        root: Directory to scan.
        matcher: Compiled ignore rules. Defaults to the rules for ``root``.
        extensions: Optional allow-list such as ``{".ts", ".py"}``. Only
            applies to files; directories are filtered by the matcher alone.

    Returns:
        Absolute paths in filesystem listing order (depth-first).

    Raises:
        WalkError: If ``root`` is not a readable directory.
    """
    return list(iter_files(root, matcher, extensions))


def iter_files(
    root: str | Path,
    matcher: PatternMatcher | None = None,
    extensions: Collection[str] | None = None,
) -> Iterator[Path]:
    """Lazily yield the files ``walk`` would return."""
    root = Path(root).resolve()
    if not root.is_dir():
        raise WalkError(f"Not a directory: {root}")
    if matcher is None:
        matcher = PatternMatcher.for_root(root)
    allowed = _normalize_extensions(extensions)

    try:
        root_stat = root.stat()
        entries = _list_dir(root, strict=True)
    except OSError as e:
        raise WalkError(f"Cannot read directory {root}: {e}") from e

    visited = {(root_stat.st_dev, root_stat.st_ino)}
    yield from _walk_entries(root, entries, matcher, allowed, visited)


def _walk_entries(
    root: Path,
    entries: list[os.DirEntry],
    matcher: PatternMatcher,
    allowed: set[str] | None,
    visited: set[tuple[int, int]],
) -> Iterator[Path]:
    for entry in entries:
        full_path = Path(entry.path)
        rel_path = full_path.relative_to(root).as_posix()

        try:
            is_dir = entry.is_dir()  # follows symlinks
            if not is_dir and not entry.is_file():
                logger.debug("Skipping special or broken entry: %s", rel_path)
                continue
        except OSError as e:
            logger.warning("Skipping %s: %s", rel_path, e)
            continue

        if matcher.is_ignored(rel_path, is_dir=is_dir):
            logger.debug("Ignoring: %s", rel_path)
            continue

        if is_dir:
            try:
                st = entry.stat()
            except OSError as e:
                logger.warning("Skipping directory %s: %s", rel_path, e)
                continue
            identity = (st.st_dev, st.st_ino)
            if identity in visited:
                logger.debug("Skipping already visited directory (symlink cycle?): %s", rel_path)
                continue
            visited.add(identity)

            logger.debug("Processing directory: %s", rel_path)
            children = _list_dir(full_path)
            yield from _walk_entries(root, children, matcher, allowed, visited)
            continue

        if allowed is not None and os.path.splitext(entry.name)[1] not in allowed:
            logger.debug("Skipping non-matching extension: %s", rel_path)
            continue

        logger.debug("Processing file: %s", rel_path)
        yield full_path


def _list_dir(path: Path, strict: bool = False) -> list[os.DirEntry]:
    """List a directory in the order the filesystem returns it."""
    try:
        with os.scandir(path) as it:
            return list(it)
    except OSError as e:
        if strict:
            raise
        logger.warning("Cannot list %s: %s", path, e)
        return []


def _normalize_extensions(extensions: Collection[str] | None) -> set[str] | None:
    if not extensions:
        return None
    return {ext if ext.startswith(".") else f".{ext}" for ext in extensions}
