"""Token counting for budget enforcement.

Encoders are addressed by short identifiers. ``simple`` is a dependency-free
word/punctuation split; the others are tiktoken BPE encodings. An unknown
identifier is an error, never a silent fallback to another encoder.
"""

from __future__ import annotations

import asyncio
import re
from typing import Protocol, runtime_checkable

import tiktoken

from codefetch.exceptions import UnsupportedEncoderError

SIMPLE_ENCODER = "simple"
DEFAULT_ENCODER = "cl100k"

# Encoder id -> tiktoken encoding name
TIKTOKEN_ENCODINGS: dict[str, str] = {
    "p50k": "p50k_base",
    "cl100k": "cl100k_base",
    "o200k": "o200k_base",
}

_WORD_SPLIT = re.compile(r"[\W_]+")


@runtime_checkable
class Meter(Protocol):
    """Anything that can count tokens for an encoder id."""

    async def count(self, text: str, encoder: str = DEFAULT_ENCODER) -> int:
        ...


def supported_encoders() -> list[str]:
    return [SIMPLE_ENCODER, *TIKTOKEN_ENCODINGS]


def count_simple(text: str) -> int:
    """Rough estimate: one token per run of word characters."""
    return sum(1 for part in _WORD_SPLIT.split(text) if part)


class TokenMeter:
    """Counts tokens with lazily loaded, per-instance cached encodings."""

    def __init__(self) -> None:
        self._encodings: dict[str, tiktoken.Encoding] = {}

    async def count(self, text: str, encoder: str = DEFAULT_ENCODER) -> int:
        if encoder == SIMPLE_ENCODER:
            return count_simple(text)
        if encoder not in TIKTOKEN_ENCODINGS:
            raise UnsupportedEncoderError(encoder, supported_encoders())
        if not text:
            return 0
        return await asyncio.to_thread(self._count_sync, text, encoder)

    def _count_sync(self, text: str, encoder: str) -> int:
        encoding = self._get_encoding(encoder)
        return len(encoding.encode(text, disallowed_special=()))

    def _get_encoding(self, encoder: str) -> tiktoken.Encoding:
        if encoder not in self._encodings:
            self._encodings[encoder] = tiktoken.get_encoding(TIKTOKEN_ENCODINGS[encoder])
        return self._encodings[encoder]


_default_meter = TokenMeter()


def get_default_meter() -> TokenMeter:
    return _default_meter


async def count_tokens(text: str, encoder: str = DEFAULT_ENCODER) -> int:
    """Count tokens in ``text`` with the shared meter.

    Raises:
        UnsupportedEncoderError: If ``encoder`` is not a known identifier.
    """
    return await _default_meter.count(text, encoder)
