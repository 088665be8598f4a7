"""Data models for token-budgeted document assembly."""

from __future__ import annotations

from pydantic import BaseModel, Field

# Rough heuristic used when trimming: 1 token ≈ 4 characters
CHARS_PER_TOKEN = 4

TREE_HEADER = "# Project Structure\n\n```\n"
TREE_FOOTER = "```\n\n"
CONTENTS_HEADER = "# File Contents\n\n"
FILE_TRUNCATED_MARKER = "\n... File truncated due to token limit ...\n```\n\n"


def remaining_files_marker(max_tokens: int) -> str:
    return f"\n... Remaining files truncated due to token limit ({max_tokens}) ...\n"


class AssemblyOptions(BaseModel):
    """Options shared by the batch and stream assemblers."""

    max_tokens: int | None = Field(default=None, gt=0)  # None = no budget
    include_tree_structure: bool = False  # batch mode only
    token_encoder: str = "cl100k"
    disable_line_numbers: bool = False
