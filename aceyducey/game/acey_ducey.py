"""
The Acey Ducey card game.

The dealer shows two cards face up and the player bets on whether a third
card will rank strictly between them. The player starts with $100; winning
adds the bet to the balance and losing takes it away. Going broke offers a
fresh $100 or the end of the game.
"""

import argparse
import logging
import os
import random
import sys

from aceyducey.common.card import Rank, RANK_TABLE
from aceyducey.common.io_interface import (
    ConsoleIOInterface,
    IOInterface,
    LoggingIOInterface,
)
from aceyducey.common.util import normalize_input, parse_bet
from aceyducey.game import constants as c
from aceyducey.game.state import GameState, GameStage
from aceyducey.game.transitions import StateTransitionEngine

logger = logging.getLogger("aceyducey.game")

LOG_LEVEL_ENV = "ACEYDUCEY_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class AceyDuceyGame:
    """
    A single-player game of Acey Ducey.

    The game owns its state and its random source. All terminal traffic goes
    through the IO interface, so tests and simulations can drive it without
    a console.
    """

    def __init__(self, io_interface: IOInterface, config=None, rng=None):
        """
        Initialize the game.

        Args:
            io_interface: Where messages are written and answers are read
            config: Configuration options; "seed" seeds the default random source
            rng: Optional random source with a ``choice`` method; overrides the seed
        """
        self.io_interface = io_interface
        self.config = config or {}
        self.rng = rng if rng is not None else random.Random(self.config.get("seed"))
        self.state = GameState()

    @property
    def balance(self) -> int:
        return self.state.balance

    @property
    def stage(self) -> GameStage:
        return self.state.stage

    def run(self) -> GameState:
        """
        Play until the game is over.

        Returns:
            The final game state
        """
        while True:
            stage = self.state.stage

            if stage == GameStage.INITIALIZING:
                self.start()

            elif stage in (GameStage.PLAYING, GameStage.BET_NOTHING):
                try:
                    self.play_turn()
                except EOFError:
                    logger.info("Input closed, ending game %s", self.state.id)
                    self.state = StateTransitionEngine.change_stage(
                        self.state, GameStage.GAME_OVER
                    )
                    continue

                if self.state.is_broke:
                    self.state = StateTransitionEngine.change_stage(
                        self.state, GameStage.GAME_OVER
                    )

            else:
                self.io_interface.output(c.FAREWELL_MESSAGE)
                logger.info(
                    "Game %s over after %d rounds with $%d",
                    self.state.id,
                    self.state.rounds_played,
                    self.state.balance,
                )
                return self.state

    def start(self) -> None:
        """Show the banner and rules and move to the playing stage."""
        self.print_intro()
        self.print_instructions()
        self.state = StateTransitionEngine.start_game(self.state)

    def print_intro(self) -> None:
        self.io_interface.output(c.TITLE.center(c.BANNER_WIDTH))
        self.io_interface.output(c.CREDITS.center(c.BANNER_WIDTH))

    def print_instructions(self) -> None:
        for line in c.INSTRUCTIONS:
            self.io_interface.output(line)

    def deal_card(self) -> Rank:
        """
        Deal a card uniformly at random from the full rank table.

        Cards are drawn with replacement; there is no deck to run out.
        """
        return self.rng.choice(RANK_TABLE)

    @staticmethod
    def is_between(a, b, test) -> bool:
        """
        Check whether a card ranks strictly between two others.

        The bounds may be given in either order. A card equal to either
        bound is not between them.

        Args:
            a: One bound, a Rank or a rank label
            b: The other bound, a Rank or a rank label
            test: The card to test

        Returns:
            True if test is strictly above the lower bound and strictly below
            the higher one

        Raises:
            ValueError: If a label is not in the rank table
            TypeError: If an argument is neither a Rank nor a label
        """
        low, high = sorted((Rank.coerce(a).ordinal, Rank.coerce(b).ordinal))
        return low < Rank.coerce(test).ordinal < high

    def print_cards(self, a: Rank, b: Rank) -> None:
        """Print two cards, lowest first."""
        low, high = sorted((a, b))
        self.io_interface.output(f"{low} {high}")

    def play_turn(self) -> None:
        """
        Play one round: deal two cards, take a bet and settle it.

        Raises:
            RuntimeError: If the game has not started or is already over
            EOFError: If the IO interface runs out of input
        """
        if self.state.stage not in (GameStage.PLAYING, GameStage.BET_NOTHING):
            raise RuntimeError(f"Cannot play a round in stage {self.state.stage.name}")

        if self.state.stage == GameStage.PLAYING:
            self.io_interface.output(c.BALANCE_MESSAGE.format(balance=self.balance))

        self.io_interface.output(c.NEXT_CARDS_MESSAGE)
        first = self.deal_card()
        second = self.deal_card()
        self.state = StateTransitionEngine.deal_pair(self.state, first, second)
        self.print_cards(first, second)

        raw_bet = normalize_input(self.io_interface.input(c.BET_PROMPT))
        bet = parse_bet(raw_bet)

        if bet <= 0:
            self.io_interface.output(c.CHICKEN_MESSAGE)
            self.state = StateTransitionEngine.decline_bet(self.state, raw_bet)
            logger.debug("Round %d: bet declined (%r)", self.state.rounds_played, raw_bet)
            return

        if bet > self.balance:
            self.io_interface.output(c.OVER_BET_MESSAGE)
            self.io_interface.output(c.ONLY_HAVE_MESSAGE.format(balance=self.balance))
            self.state = StateTransitionEngine.reject_bet(self.state, bet)
            logger.debug(
                "Round %d: bet %d exceeds balance %d",
                self.state.rounds_played,
                bet,
                self.balance,
            )
            return

        self.state = StateTransitionEngine.place_bet(self.state, bet)
        third = self.deal_card()
        self.io_interface.output(str(third))

        won = self.is_between(first, second, third)
        self.state = StateTransitionEngine.settle_bet(self.state, third, won)
        self.io_interface.output(c.WIN_MESSAGE if won else c.LOSE_MESSAGE)
        logger.debug(
            "Round %d: %s %s / %s, bet %d, balance now %d",
            self.state.rounds_played,
            "won" if won else "lost",
            f"{first} {second}",
            third,
            bet,
            self.balance,
        )

        if self.state.is_broke:
            self.handle_broke()

    def handle_broke(self) -> None:
        """Offer a new stake after the balance has run out."""
        self.io_interface.output(c.BROKE_MESSAGE)
        answer = normalize_input(self.io_interface.input(c.TRY_AGAIN_PROMPT))

        if answer == c.AFFIRMATIVE_ANSWER:
            self.state = StateTransitionEngine.reset_balance(self.state)
            logger.info("Balance reset to $%d", self.balance)
        else:
            self.state = StateTransitionEngine.change_stage(
                self.state, GameStage.GAME_OVER
            )


def setup_logging(level_name=None) -> None:
    """
    Send package log records to stderr so they never mix with the game text.

    The level comes from the argument, then the ACEYDUCEY_LOG_LEVEL
    environment variable, then WARNING.
    """
    level_name = (level_name or os.environ.get(LOG_LEVEL_ENV) or "WARNING").upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.WARNING

    package_logger = logging.getLogger("aceyducey")
    package_logger.setLevel(level)

    if not package_logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        package_logger.addHandler(handler)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Play Acey Ducey.")
    parser.add_argument(
        "--seed", type=int, default=None, help="seed for a reproducible game"
    )
    parser.add_argument(
        "--transcript",
        metavar="PATH",
        default=None,
        help="append the session to this file",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
        default=None,
        help=f"logging level (default: ${LOG_LEVEL_ENV} or WARNING)",
    )
    parser.add_argument(
        "--simulate",
        action="store_true",
        help="play automated sessions instead of an interactive game",
    )
    parser.add_argument(
        "-r",
        "--rounds",
        type=int,
        default=100,
        help="rounds per simulated session (default: 100)",
    )
    parser.add_argument(
        "-s",
        "--sessions",
        type=int,
        default=1000,
        help="number of simulated sessions (default: 1000)",
    )
    parser.add_argument(
        "--min-probability",
        type=float,
        default=0.5,
        help="smallest winning chance the simulated player bets on (default: 0.5)",
    )
    parser.add_argument(
        "--bet-fraction",
        type=float,
        default=0.25,
        help="share of the balance the simulated player bets (default: 0.25)",
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_level)

    if args.simulate:
        from aceyducey.game.simulation import ThresholdStrategy, run_simulation

        strategy = ThresholdStrategy(args.min_probability, args.bet_fraction)
        report = run_simulation(
            rounds=args.rounds,
            sessions=args.sessions,
            strategy=strategy,
            seed=args.seed,
        )
        report.display()
        return 0

    io_interface = ConsoleIOInterface()
    if args.transcript:
        io_interface = LoggingIOInterface(args.transcript, io_interface)

    game = AceyDuceyGame(io_interface, config={"seed": args.seed})
    try:
        game.run()
    except KeyboardInterrupt:
        io_interface.output("")
    return 0


if __name__ == "__main__":
    sys.exit(main())
