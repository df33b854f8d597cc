"""Gmail mail access layer for agent tool hosts."""

__version__ = "1.0.0"
