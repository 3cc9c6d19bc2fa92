"""
Exception hierarchy for the Tycoon rules engine.

Gameplay rule violations (buying an owned tile, upgrading a mortgaged one)
are reported as ``False`` results and disabled choices, not exceptions.
These types cover misuse of the engine and bad configuration.
"""


class TycoonError(Exception):
    """Base exception for all engine errors."""


class InvalidActionError(TycoonError):
    """Call is not legal in the current turn phase."""


class ConfigurationError(TycoonError):
    """Board, card or rules configuration is malformed."""
