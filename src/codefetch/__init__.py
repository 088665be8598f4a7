"""codefetch - turn a source tree into a token-budgeted context document."""

__version__ = "0.1.0"
