"""Data models for loaded source files."""

from __future__ import annotations

from pathlib import PurePosixPath

from pydantic import BaseModel, ConfigDict


class FileContentRecord(BaseModel):
    """A single file's content, ready for assembly.

    Paths are relative to the project root and always slash-separated.
    """

    model_config = ConfigDict(frozen=True)

    path: str
    content: str
    language: str | None = None  # None = detect from extension
    size: int | None = None  # bytes on disk
    tokens: int | None = None


# Language detection by file extension (fence tags for the rendered document)
EXTENSION_LANGUAGE_MAP: dict[str, str] = {
    ".py": "python",
    ".pyi": "python",
    ".js": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".jsx": "jsx",
    ".ts": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    ".tsx": "tsx",
    ".go": "go",
    ".rs": "rust",
    ".java": "java",
    ".kt": "kotlin",
    ".swift": "swift",
    ".c": "c",
    ".h": "c",
    ".cpp": "cpp",
    ".cc": "cpp",
    ".hpp": "cpp",
    ".cs": "csharp",
    ".rb": "ruby",
    ".php": "php",
    ".sh": "bash",
    ".bash": "bash",
    ".zsh": "bash",
    ".sql": "sql",
    ".html": "html",
    ".css": "css",
    ".scss": "scss",
    ".vue": "vue",
    ".svelte": "svelte",
    ".json": "json",
    ".yaml": "yaml",
    ".yml": "yaml",
    ".toml": "toml",
    ".xml": "xml",
    ".md": "markdown",
    ".mdx": "markdown",
}


def detect_language(file_path: str) -> str:
    """Detect the fence language from the file extension ("" when unknown)."""
    ext = PurePosixPath(file_path).suffix.lower()
    return EXTENSION_LANGUAGE_MAP.get(ext, "")
