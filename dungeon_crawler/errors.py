"""Game error hierarchy.

The game loop recovers from InvalidInput, InvalidCommand and
PersistenceFailure by reporting them to the player. InvalidState marks a
broken caller contract and is allowed to propagate.
"""


class GameError(Exception):
    """Base class for every error raised by the game core."""


class InvalidInput(GameError, ValueError):
    """Raised for an unknown direction, rarity, item or a malformed value."""


class InvalidCommand(GameError):
    """Raised for an unrecognised command or one not valid in the current state."""


class InvalidState(GameError, RuntimeError):
    """Raised when combat is asked to resolve with an already-defeated combatant."""


class PersistenceFailure(GameError):
    """Raised when a save file cannot be written, read or parsed."""
