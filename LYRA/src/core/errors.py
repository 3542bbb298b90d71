"""Exceptions raised by the preprocessing and scoring stages."""


class LyraError(Exception):
    """Base class for errors surfaced to the user."""


class InvalidConfig(LyraError):
    """Bin grid settings cannot produce a usable grid."""


class InvalidInput(LyraError):
    """A trace or vector is empty or malformed."""


class ScoringUnavailable(LyraError):
    """The scoring exchange failed or returned an unusable body."""
