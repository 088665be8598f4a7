"""Custom exceptions for codefetch."""


class CodefetchError(Exception):
    """Base exception for all codefetch errors."""


class InvalidConfigurationError(CodefetchError):
    """Configuration is missing or malformed (ignore rules, config file, cache)."""


class WalkError(CodefetchError):
    """The root of a file walk cannot be read."""


class CacheError(CodefetchError):
    """Cache backend storage errors."""


class UnsupportedEncoderError(CodefetchError):
    """Raised when the token meter does not know the requested encoder."""

    def __init__(self, encoder: str, supported: list[str] | None = None):
        self.encoder = encoder
        message = f"Unsupported token encoder: '{encoder}'."
        if supported:
            message += f" Supported encoders: {', '.join(supported)}"
        super().__init__(message)
