"""
Headless simulation of Acey Ducey sessions.

An automated player answers the game's prompts from a betting strategy,
learning the two face-up cards from the CARD_DEALT events the game
publishes. Many sessions are played and the per-round balance changes are
summarized with a confidence interval for the expected result of a round.
"""

import logging
import random
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
import scipy.stats as stats

from aceyducey.common.card import Rank, RANK_TABLE
from aceyducey.common.io_interface import IOInterface
from aceyducey.events import EventBus, EngineEventType
from aceyducey.game import constants as c
from aceyducey.game.acey_ducey import AceyDuceyGame
from aceyducey.game.state import GameStage

logger = logging.getLogger("aceyducey.simulation")


class ThresholdStrategy:
    """
    Bet a fixed share of the balance whenever the chance of winning is high
    enough, otherwise bet nothing.
    """

    def __init__(self, min_probability: float = 0.5, bet_fraction: float = 0.25):
        if not 0.0 <= min_probability <= 1.0:
            raise ValueError("min_probability must be between 0 and 1")
        if not 0.0 < bet_fraction <= 1.0:
            raise ValueError("bet_fraction must be greater than 0 and at most 1")
        self.min_probability = min_probability
        self.bet_fraction = bet_fraction

    @staticmethod
    def win_probability(first: Rank, second: Rank) -> float:
        """Chance that a card drawn with replacement lands strictly between two ranks."""
        gap = abs(first.ordinal - second.ordinal)
        return max(gap - 1, 0) / len(RANK_TABLE)

    def decide_bet(self, first: Rank, second: Rank, balance: int) -> int:
        if balance <= 0:
            return 0
        if self.win_probability(first, second) < self.min_probability:
            return 0
        return max(1, int(balance * self.bet_fraction))


class StrategyIOInterface(IOInterface):
    """
    An IO interface that plays on behalf of a strategy.

    Bet prompts are answered with the strategy's bet for the current pair and
    the replay prompt is always answered "NO". Output is discarded.
    """

    def __init__(self, strategy: ThresholdStrategy):
        self.strategy = strategy
        self.game_id = None
        self.balance = c.STARTING_BALANCE
        self.cards: List[Rank] = []
        self._unsubscribers = []

    def attach(self, game_id: str) -> None:
        """Start following events for one game."""
        self.game_id = game_id
        event_bus = EventBus.get_instance()
        self._unsubscribers = [
            event_bus.on(EngineEventType.ROUND_STARTED, self._on_round_started),
            event_bus.on(EngineEventType.CARD_DEALT, self._on_card_dealt),
        ]

    def close(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []

    def _on_round_started(self, data: Dict[str, Any]) -> None:
        if data.get("game_id") == self.game_id:
            self.balance = data["balance"]
            self.cards = []

    def _on_card_dealt(self, data: Dict[str, Any]) -> None:
        if data.get("game_id") == self.game_id and data["position"] != "third":
            self.cards.append(Rank.from_label(data["card"]))

    def output(self, message: str) -> None:
        pass

    def input(self, prompt: str) -> str:
        if prompt == c.BET_PROMPT:
            first, second = self.cards
            return str(self.strategy.decide_bet(first, second, self.balance))
        return "NO"


@dataclass
class ConfidenceInterval:
    """
    Represents a confidence interval with lower and upper bounds.

    Attributes:
        lower: The lower bound of the confidence interval
        upper: The upper bound of the confidence interval
        confidence: The confidence level (e.g., 0.95 for 95% confidence)
    """

    lower: float
    upper: float
    confidence: float

    def contains(self, value: float) -> bool:
        """Check if the interval contains a value."""
        return self.lower <= value <= self.upper

    def to_dict(self) -> Dict[str, float]:
        """Convert to a dictionary."""
        return {"lower": self.lower, "upper": self.upper, "confidence": self.confidence}


def calculate_confidence_interval(
    values: List[float], confidence: float = 0.95
) -> ConfidenceInterval:
    """
    Calculate a Student-t confidence interval for the mean of a set of values.

    With fewer than two values the interval collapses onto the mean.
    """
    if not values:
        return ConfidenceInterval(0.0, 0.0, confidence)

    mean = float(np.mean(values))
    if len(values) < 2:
        return ConfidenceInterval(mean, mean, confidence)

    std_err = stats.sem(values)
    margin = float(std_err * stats.t.ppf((1 + confidence) / 2, len(values) - 1))
    return ConfidenceInterval(mean - margin, mean + margin, confidence)


@dataclass
class SimulationReport:
    """Aggregate results of a simulation run."""

    sessions: int
    rounds_per_session: int
    rounds_played: int = 0
    wins: int = 0
    losses: int = 0
    declined: int = 0
    busted: int = 0
    deltas: List[int] = field(default_factory=list, repr=False)
    final_balances: List[int] = field(default_factory=list, repr=False)

    @property
    def mean_delta(self) -> float:
        return float(np.mean(self.deltas)) if self.deltas else 0.0

    @property
    def std_delta(self) -> float:
        return float(np.std(self.deltas)) if self.deltas else 0.0

    @property
    def mean_final_balance(self) -> float:
        return float(np.mean(self.final_balances)) if self.final_balances else 0.0

    @property
    def confidence_interval(self) -> ConfidenceInterval:
        return calculate_confidence_interval(self.deltas)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sessions": self.sessions,
            "rounds_per_session": self.rounds_per_session,
            "rounds_played": self.rounds_played,
            "wins": self.wins,
            "losses": self.losses,
            "declined": self.declined,
            "busted": self.busted,
            "mean_delta": self.mean_delta,
            "std_delta": self.std_delta,
            "confidence_interval": self.confidence_interval.to_dict(),
            "mean_final_balance": self.mean_final_balance,
        }

    def display(self) -> None:
        ci = self.confidence_interval
        print(f"Finished {self.sessions} sessions of up to {self.rounds_per_session} rounds.")
        print(f"Rounds played: {self.rounds_played}")
        bets = self.wins + self.losses
        if bets:
            print(f"Bets won: {self.wins} of {bets} ({self.wins / bets * 100:.2f}%).")
        print(f"Rounds without a bet: {self.declined}")
        print(f"Sessions that went broke: {self.busted}")
        print(f"Mean change per round: {self.mean_delta:.3f} (sd {self.std_delta:.3f})")
        print(
            f"{ci.confidence * 100:.0f}% confidence interval: "
            f"[{ci.lower:.3f}, {ci.upper:.3f}]"
        )
        print(f"Mean final balance: ${self.mean_final_balance:.2f}")


def play_session(
    rounds: int, strategy: ThresholdStrategy, rng: random.Random
) -> Tuple[AceyDuceyGame, List[int]]:
    """
    Play up to `rounds` rounds of one game, stopping early if it ends.

    Returns:
        The game and the balance change of every round played
    """
    io_interface = StrategyIOInterface(strategy)
    game = AceyDuceyGame(io_interface, rng=rng)
    io_interface.attach(game.state.id)
    deltas = []

    try:
        game.start()
        for _ in range(rounds):
            if game.stage == GameStage.GAME_OVER:
                break
            before = game.balance
            game.play_turn()
            deltas.append(game.balance - before)
    finally:
        io_interface.close()

    return game, deltas


def run_simulation(
    rounds: int = 100,
    sessions: int = 1000,
    strategy: Optional[ThresholdStrategy] = None,
    seed: Optional[int] = None,
) -> SimulationReport:
    """
    Play many independent sessions with an automated player.

    Args:
        rounds: Maximum rounds per session
        sessions: Number of sessions
        strategy: Betting strategy, ThresholdStrategy() by default
        seed: Seed for a reproducible run

    Returns:
        A SimulationReport summarizing every session

    Raises:
        ValueError: If rounds or sessions is less than one
    """
    if rounds < 1:
        raise ValueError("rounds must be at least 1")
    if sessions < 1:
        raise ValueError("sessions must be at least 1")

    strategy = strategy or ThresholdStrategy()
    rng = random.Random(seed)
    report = SimulationReport(sessions=sessions, rounds_per_session=rounds)

    for session in range(sessions):
        game, deltas = play_session(rounds, strategy, rng)
        state = game.state
        report.rounds_played += state.rounds_played
        report.wins += state.wins
        report.losses += state.losses
        report.declined += state.declined
        report.busted += 1 if state.is_over else 0
        report.deltas.extend(deltas)
        report.final_balances.append(state.balance)
        logger.debug(
            "Session %d: %d rounds, final balance %d",
            session + 1,
            state.rounds_played,
            state.balance,
        )

    logger.info(
        "Simulated %d sessions, mean change per round %.3f",
        sessions,
        report.mean_delta,
    )
    return report
