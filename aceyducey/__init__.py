"""
Acey Ducey, the between-the-cards betting game, for the console.
"""

from aceyducey.common.card import Rank, RANK_TABLE
from aceyducey.game.acey_ducey import AceyDuceyGame
from aceyducey.game.state import GameState, GameStage

__version__ = "0.1.0"

__all__ = ["AceyDuceyGame", "GameState", "GameStage", "Rank", "RANK_TABLE"]
