"""Token counting for codefetch."""

from codefetch.tokens.meter import (
    DEFAULT_ENCODER,
    SIMPLE_ENCODER,
    Meter,
    TokenMeter,
    count_tokens,
    supported_encoders,
)

__all__ = [
    "DEFAULT_ENCODER",
    "SIMPLE_ENCODER",
    "Meter",
    "TokenMeter",
    "count_tokens",
    "supported_encoders",
]
