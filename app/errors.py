"""
Error kinds raised by the game core.
Routes in main.py turn these into HTTP status codes.
"""


class PokedleError(Exception):
    """Base class for every error the game core raises."""


class NotFound(PokedleError, LookupError):
    """The lookup could not resolve an id or a name."""


class LookupUnavailable(PokedleError, RuntimeError):
    """The data source failed for a reason other than an unknown id/name."""


class InvalidGuess(PokedleError, ValueError):
    """Duplicate name, finished game, or a guess already resolving."""


class PersistenceCorrupt(PokedleError, ValueError):
    """A stored session could not be read back."""
