"""Text formatting shared by the batch and stream assemblers."""

from __future__ import annotations

from collections.abc import Iterable

from codefetch.files.models import FileContentRecord, detect_language
from codefetch.markdown.models import CHARS_PER_TOKEN, TREE_FOOTER, TREE_HEADER


def line_number_width(line_count: int) -> int:
    """Padding width for line numbers: at least 4, else digits + 1."""
    return max(4, len(str(line_count)) + 1)


def number_lines(content: str) -> str:
    """Prefix each line with its right-aligned 1-based number and a space."""
    lines = content.split("\n")
    width = line_number_width(len(lines))
    return "".join(f"{i:>{width}} {line}\n" for i, line in enumerate(lines, start=1))


def render_file_section(record: FileContentRecord, disable_line_numbers: bool = False) -> str:
    """Render one file as a header plus a fenced code block."""
    language = record.language or detect_language(record.path)
    parts = [f"## {record.path}\n\n", f"```{language}\n"]
    if disable_line_numbers:
        parts.append(record.content)
    else:
        parts.append(number_lines(record.content))
    parts.append("\n```\n\n")
    return "".join(parts)


def build_tree_index(records: Iterable[FileContentRecord]) -> dict[str, list[str]]:
    """Group path-sorted filenames by parent directory ("." for the root).

    Directories keep the order in which the sorted pass first meets them.
    """
    tree: dict[str, list[str]] = {}
    for record in sorted(records, key=lambda r: r.path):
        directory, _, filename = record.path.rpartition("/")
        tree.setdefault(directory or ".", []).append(filename)
    return tree


def render_tree(records: Iterable[FileContentRecord]) -> str:
    """Render the fenced project structure block."""
    lines = [TREE_HEADER]
    for directory, filenames in build_tree_index(records).items():
        if directory != ".":
            lines.append(f"{directory}/\n")
        indent = "" if directory == "." else "  "
        for filename in filenames:
            lines.append(f"{indent}{filename}\n")
    lines.append(TREE_FOOTER)
    return "".join(lines)


def trim_tail(text: str, excess_tokens: int) -> str:
    """Drop roughly ``excess_tokens`` worth of characters from the end."""
    chars_to_remove = max(0, excess_tokens * CHARS_PER_TOKEN)
    keep = max(0, len(text) - chars_to_remove)
    return text[:keep]
