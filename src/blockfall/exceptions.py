from __future__ import annotations


class BlockfallError(Exception):
    """Base class for errors raised outside the game reducer."""


class InvalidConfigError(BlockfallError, ValueError):
    """Raised when a GameConfig cannot host the configured shape catalog."""


class RandomizerExhausted(BlockfallError):
    """Raised when a scripted randomizer has no draws left."""
