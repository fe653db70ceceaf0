"""
Immutable state models for the Acey Ducey game.

This module provides dataclasses for representing the state of an Acey Ducey
game in an immutable manner. These classes are designed to be used with pure
transition functions that create new state instances rather than modifying
existing ones.
"""

from dataclasses import dataclass, field
from typing import Dict, Any, Optional
from enum import Enum, auto
import uuid
import time

from aceyducey.common.card import Rank
from aceyducey.game.constants import STARTING_BALANCE


class GameStage(Enum):
    """Possible stages of an Acey Ducey game."""

    INITIALIZING = auto()
    PLAYING = auto()
    BET_NOTHING = auto()
    GAME_OVER = auto()


@dataclass(frozen=True)
class GameState:
    """
    Immutable representation of the Acey Ducey game state.

    Attributes:
        id: Unique identifier for this game
        stage: Current stage of the game
        balance: The player's money; may reach zero or below only until the
            broke branch of the round resolves it
        rounds_played: Number of rounds dealt
        wins: Rounds won
        losses: Rounds lost
        declined: Rounds where the player bet nothing
        rejected: Rounds where the player bet more than the balance
        resets: Times the balance was restored after going broke
        first: First card of the current round
        second: Second card of the current round
        third: Third card of the current round, if one was drawn
        last_bet: Bet accepted in the current round
        timestamp: Time of the transition that produced this state
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    stage: GameStage = GameStage.INITIALIZING
    balance: int = STARTING_BALANCE
    rounds_played: int = 0
    wins: int = 0
    losses: int = 0
    declined: int = 0
    rejected: int = 0
    resets: int = 0
    first: Optional[Rank] = None
    second: Optional[Rank] = None
    third: Optional[Rank] = None
    last_bet: int = 0
    timestamp: float = field(default_factory=lambda: time.time())

    @property
    def is_broke(self) -> bool:
        return self.balance <= 0

    @property
    def is_over(self) -> bool:
        return self.stage == GameStage.GAME_OVER

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the game state to a dictionary suitable for serialization.

        Returns:
            Dictionary representation of the game state
        """
        return {
            "id": self.id,
            "stage": self.stage.name,
            "balance": self.balance,
            "rounds_played": self.rounds_played,
            "wins": self.wins,
            "losses": self.losses,
            "declined": self.declined,
            "rejected": self.rejected,
            "resets": self.resets,
            "cards": [
                str(card) if card is not None else None
                for card in (self.first, self.second, self.third)
            ],
            "last_bet": self.last_bet,
            "timestamp": self.timestamp,
        }
