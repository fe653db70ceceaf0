"""
State transition functions for the Acey Ducey game.

This module provides pure functions for transitioning between game states,
without modifying the original state objects. Each transition publishes an
event on the EventBus describing what changed.
"""

from dataclasses import replace
import time

from aceyducey.common.card import Rank
from aceyducey.events import EventBus, EngineEventType
from aceyducey.game.constants import STARTING_BALANCE
from aceyducey.game.state import GameState, GameStage


def _advance(state: GameState, **changes) -> GameState:
    """Copy a state with changes, stamped with the current time."""
    return replace(state, timestamp=time.time(), **changes)


class StateTransitionEngine:
    """
    Pure functions for state transitions in Acey Ducey.

    This class contains static methods that implement game state transitions.
    Each method takes a state and returns a new state, without modifying the
    original.
    """

    @staticmethod
    def start_game(state: GameState) -> GameState:
        """
        Leave the initializing stage once the intro has been shown.

        Args:
            state: Current game state

        Returns:
            New game state in the playing stage
        """
        new_state = _advance(state, stage=GameStage.PLAYING)

        event_bus = EventBus.get_instance()
        event_bus.emit(
            EngineEventType.GAME_STARTED,
            {
                "game_id": state.id,
                "balance": new_state.balance,
                "timestamp": new_state.timestamp,
            },
        )

        return new_state

    @staticmethod
    def deal_pair(state: GameState, first: Rank, second: Rank) -> GameState:
        """
        Start a round by dealing the two face-up cards.

        Args:
            state: Current game state
            first: First card dealt
            second: Second card dealt

        Returns:
            New game state holding the pair, with no third card and no bet
        """
        new_state = _advance(
            state,
            first=first,
            second=second,
            third=None,
            last_bet=0,
            rounds_played=state.rounds_played + 1,
        )

        event_bus = EventBus.get_instance()
        event_bus.emit(
            EngineEventType.ROUND_STARTED,
            {
                "game_id": state.id,
                "round_number": new_state.rounds_played,
                "balance": new_state.balance,
                "timestamp": new_state.timestamp,
            },
        )
        for position, card in (("first", first), ("second", second)):
            event_bus.emit(
                EngineEventType.CARD_DEALT,
                {
                    "game_id": state.id,
                    "round_number": new_state.rounds_played,
                    "position": position,
                    "card": str(card),
                    "timestamp": new_state.timestamp,
                },
            )

        return new_state

    @staticmethod
    def decline_bet(state: GameState, raw_bet: str) -> GameState:
        """
        End the round because the player bet nothing or typed something
        that is not a number.

        Args:
            state: Current game state
            raw_bet: The normalized text the player entered

        Returns:
            New game state in the bet-nothing stage, balance unchanged
        """
        new_state = _advance(
            state, stage=GameStage.BET_NOTHING, declined=state.declined + 1
        )

        event_bus = EventBus.get_instance()
        event_bus.emit(
            EngineEventType.BET_DECLINED,
            {
                "game_id": state.id,
                "round_number": state.rounds_played,
                "input": raw_bet,
                "timestamp": new_state.timestamp,
            },
        )
        StateTransitionEngine._round_ended(new_state, "declined")

        return new_state

    @staticmethod
    def reject_bet(state: GameState, bet: int) -> GameState:
        """
        End the round because the bet exceeds the balance.

        No third card is drawn and the player is not asked again; the next
        round starts in the playing stage.

        Args:
            state: Current game state
            bet: The rejected bet

        Returns:
            New game state in the playing stage, balance unchanged
        """
        new_state = _advance(
            state, stage=GameStage.PLAYING, rejected=state.rejected + 1
        )

        event_bus = EventBus.get_instance()
        event_bus.emit(
            EngineEventType.BET_REJECTED,
            {
                "game_id": state.id,
                "round_number": state.rounds_played,
                "bet": bet,
                "balance": state.balance,
                "timestamp": new_state.timestamp,
            },
        )
        StateTransitionEngine._round_ended(new_state, "rejected")

        return new_state

    @staticmethod
    def place_bet(state: GameState, bet: int) -> GameState:
        """
        Accept a bet of at least one and at most the balance.

        Args:
            state: Current game state
            bet: Amount wagered

        Returns:
            New game state recording the bet

        Raises:
            ValueError: If the bet is outside 1..balance
        """
        if bet <= 0 or bet > state.balance:
            raise ValueError(f"Bet {bet} is outside 1..{state.balance}")

        new_state = _advance(state, last_bet=bet)

        event_bus = EventBus.get_instance()
        event_bus.emit(
            EngineEventType.PLAYER_BET,
            {
                "game_id": state.id,
                "round_number": state.rounds_played,
                "bet": bet,
                "timestamp": new_state.timestamp,
            },
        )

        return new_state

    @staticmethod
    def settle_bet(state: GameState, third: Rank, won: bool) -> GameState:
        """
        Draw the third card and pay out or collect the accepted bet.

        Args:
            state: Current game state, with a bet placed
            third: The third card
            won: Whether the third card fell strictly between the pair

        Returns:
            New game state with the balance moved by exactly the bet
        """
        bet = state.last_bet
        delta = bet if won else -bet
        new_state = _advance(
            state,
            third=third,
            balance=state.balance + delta,
            wins=state.wins + (1 if won else 0),
            losses=state.losses + (0 if won else 1),
            stage=GameStage.PLAYING,
        )

        event_bus = EventBus.get_instance()
        event_bus.emit(
            EngineEventType.CARD_DEALT,
            {
                "game_id": state.id,
                "round_number": state.rounds_played,
                "position": "third",
                "card": str(third),
                "timestamp": new_state.timestamp,
            },
        )
        event_bus.emit(
            EngineEventType.BANKROLL_UPDATED,
            {
                "game_id": state.id,
                "round_number": state.rounds_played,
                "previous_balance": state.balance,
                "balance": new_state.balance,
                "delta": delta,
                "timestamp": new_state.timestamp,
            },
        )
        StateTransitionEngine._round_ended(new_state, "win" if won else "loss")

        if new_state.is_broke:
            event_bus.emit(
                EngineEventType.PLAYER_BROKE,
                {
                    "game_id": state.id,
                    "round_number": state.rounds_played,
                    "balance": new_state.balance,
                    "timestamp": new_state.timestamp,
                },
            )

        return new_state

    @staticmethod
    def reset_balance(state: GameState) -> GameState:
        """
        Restore the starting balance after the player chose to play again.

        Args:
            state: Current game state

        Returns:
            New game state in the playing stage with the starting balance
        """
        new_state = _advance(
            state,
            balance=STARTING_BALANCE,
            resets=state.resets + 1,
            stage=GameStage.PLAYING,
        )

        event_bus = EventBus.get_instance()
        event_bus.emit(
            EngineEventType.BANKROLL_RESET,
            {
                "game_id": state.id,
                "previous_balance": state.balance,
                "balance": new_state.balance,
                "timestamp": new_state.timestamp,
            },
        )

        return new_state

    @staticmethod
    def change_stage(state: GameState, new_stage: GameStage) -> GameState:
        """
        Change the game stage.

        Args:
            state: Current game state
            new_stage: New game stage

        Returns:
            New game state with updated stage
        """
        new_state = _advance(state, stage=new_stage)

        if new_stage == GameStage.GAME_OVER and state.stage != GameStage.GAME_OVER:
            event_bus = EventBus.get_instance()
            event_bus.emit(
                EngineEventType.GAME_ENDED,
                {
                    "game_id": state.id,
                    "rounds_played": state.rounds_played,
                    "balance": state.balance,
                    "timestamp": new_state.timestamp,
                },
            )

        return new_state

    @staticmethod
    def _round_ended(state: GameState, outcome: str) -> None:
        EventBus.get_instance().emit(
            EngineEventType.ROUND_ENDED,
            {
                "game_id": state.id,
                "round_number": state.rounds_played,
                "outcome": outcome,
                "balance": state.balance,
                "timestamp": state.timestamp,
            },
        )
