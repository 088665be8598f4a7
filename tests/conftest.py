"""Shared test fixtures for codefetch."""

from __future__ import annotations

from pathlib import Path

import pytest

from codefetch.files.models import FileContentRecord
from codefetch.markdown.models import CONTENTS_HEADER


def _numbered_source(prefix: str, count: int) -> str:
    return "\n".join(f"export const {prefix}{i} = {i};" for i in range(1, count + 1))


@pytest.fixture
def tmp_project(tmp_path: Path) -> Path:
    """A small TypeScript project: a.ts (20 lines) and b/c.ts (5 lines)."""
    (tmp_path / "a.ts").write_text(_numbered_source("a", 20))
    (tmp_path / "b").mkdir()
    (tmp_path / "b" / "c.ts").write_text(_numbered_source("c", 5))
    return tmp_path


@pytest.fixture
def records() -> list[FileContentRecord]:
    return [
        FileContentRecord(path="a.ts", content=_numbered_source("a", 20)),
        FileContentRecord(path="b/c.ts", content=_numbered_source("c", 5)),
    ]


class CharMeter:
    """Counts one token per four characters, so trimming is exact."""

    def __init__(self) -> None:
        self.calls = 0

    async def count(self, text: str, encoder: str = "simple") -> int:
        self.calls += 1
        return len(text) // 4


class ScriptedMeter:
    """Fixed counts: one value for the contents header, another for everything else."""

    def __init__(self, header_tokens: int, section_tokens: int) -> None:
        self.header_tokens = header_tokens
        self.section_tokens = section_tokens

    async def count(self, text: str, encoder: str = "simple") -> int:
        if text == CONTENTS_HEADER:
            return self.header_tokens
        return self.section_tokens


@pytest.fixture
def char_meter() -> CharMeter:
    return CharMeter()


@pytest.fixture
def scripted_meter():
    """Factory for ScriptedMeter(header_tokens, section_tokens)."""
    return ScriptedMeter
