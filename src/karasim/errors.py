"""
Exception hierarchy for karasim.

All failures raised by the simulator derive from KaraError, so callers (the
CLI, the Game orchestrator) can separate world/agent failures from ordinary
programming errors in a user routine.

Failure Policy:
    - MalformedSpecError: fatal, raised while building a grid from text.
    - OutOfBoundsError: raised by Grid access; Kara's sensors translate it
      into "nothing there" and never let it escape.
    - InvalidPositionError: raised when a Kara is placed off the grid or on
      a tree, so no Kara ever exists in such a position.
    - InvalidMoveError: recoverable. Suppressed (and logged) during capture,
      raised again, visibly, when the same move is replayed.
    - LogOverflowError: fatal for the capture run that produced it.
    - GameBusyError: a run was started while another one is in progress.
    - LoadError: the CLI could not load a world, routine or config file.

Some classes also inherit from the closest builtin (ValueError, IndexError,
RuntimeError) so generic handlers keep working.
"""

from __future__ import annotations


class KaraError(Exception):
    """Base class for all karasim failures."""


class MalformedSpecError(KaraError, ValueError):
    """A textual world spec cannot be decoded into a rectangular grid."""


class OutOfBoundsError(KaraError, IndexError):
    """Grid access outside [0, width) x [0, height)."""


class InvalidMoveError(KaraError):
    """
    Kara tried to move into a tree or off the grid.

    Attributes:
        coords: Kara's position when the move was attempted.
        direction: Kara's facing when the move was attempted.
    """

    def __init__(self, message: str, coords: object = None, direction: object = None) -> None:
        super().__init__(message)
        self.coords = coords
        self.direction = direction


class LogOverflowError(KaraError):
    """A control routine issued more actions than the action log may hold."""


class GameBusyError(KaraError, RuntimeError):
    """A capture/replay run was requested while another run is active."""


class InvalidPositionError(KaraError, ValueError):
    """Kara was placed outside the grid or on a tree."""


class LoadError(KaraError):
    """A world, routine or config file named on the command line cannot be loaded."""
