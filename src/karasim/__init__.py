"""karasim - Kara the lady beetle in a grid world.

A small grid-world robot simulator with a record-then-replay engine: a control
routine is captured against a private copy of the world, then replayed step by
step on the visible one.
"""

__version__ = "0.1.0"

from karasim.config import KaraConfig
from karasim.game import Game

__all__ = ["Game", "KaraConfig", "__version__"]
