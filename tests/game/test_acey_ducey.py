"""
Tests for the AceyDuceyGame class.

Rounds are driven by a scripted random source (see conftest.make_game) so
every card is known in advance.
"""

import random
from collections import Counter
from itertools import product

import pytest

from aceyducey.common.card import Rank, RANK_TABLE
from aceyducey.common.io_interface import DummyIOInterface, TestIOInterface
from aceyducey.common.util import calculate_chi_square
from aceyducey.events import EventBus
from aceyducey.game import constants as c
from aceyducey.game.acey_ducey import AceyDuceyGame
from aceyducey.game.state import GameStage

is_between = AceyDuceyGame.is_between


# is_between


def test_is_between_strict_interval():
    assert is_between(Rank.TWO, Rank.KING, Rank.SEVEN)
    assert is_between(Rank.FIVE, Rank.SEVEN, Rank.SIX)
    assert not is_between(Rank.FIVE, Rank.SEVEN, Rank.FIVE)
    assert not is_between(Rank.FIVE, Rank.SEVEN, Rank.SEVEN)
    assert not is_between(Rank.FIVE, Rank.SEVEN, Rank.ACE)
    assert not is_between(Rank.FIVE, Rank.SEVEN, Rank.TWO)


def test_is_between_order_independent():
    for a, b, test in product(RANK_TABLE, repeat=3):
        assert is_between(a, b, test) == is_between(b, a, test)


def test_is_between_adjacent_ranks_never_win():
    for low, high in zip(RANK_TABLE, RANK_TABLE[1:]):
        for test in RANK_TABLE:
            assert not is_between(low, high, test)


def test_is_between_equal_ranks_never_win():
    for a, test in product(RANK_TABLE, repeat=2):
        assert not is_between(a, a, test)


def test_is_between_accepts_labels():
    assert is_between("2", "A", "10")
    assert is_between("q", " 9", "J")
    assert not is_between("J", "K", "A")


def test_is_between_unknown_label_fails_fast():
    with pytest.raises(ValueError):
        is_between("2", "A", "1")
    with pytest.raises(TypeError):
        is_between(2, 14, 7)


# deal_card


def test_deal_card_returns_ranks():
    game = AceyDuceyGame(DummyIOInterface(), config={"seed": 3})
    assert all(isinstance(game.deal_card(), Rank) for _ in range(50))


def test_deal_card_is_reproducible_with_seed():
    first = AceyDuceyGame(DummyIOInterface(), config={"seed": 42})
    second = AceyDuceyGame(DummyIOInterface(), config={"seed": 42})
    assert [first.deal_card() for _ in range(30)] == [
        second.deal_card() for _ in range(30)
    ]


def test_deal_card_uses_injected_rng():
    first = AceyDuceyGame(DummyIOInterface(), rng=random.Random(7))
    second = AceyDuceyGame(DummyIOInterface(), rng=random.Random(7))
    assert [first.deal_card() for _ in range(30)] == [
        second.deal_card() for _ in range(30)
    ]


def test_deal_card_is_uniform_with_replacement():
    game = AceyDuceyGame(DummyIOInterface(), config={"seed": 2024})
    draws = 13000
    counts = Counter(game.deal_card() for _ in range(draws))

    # Every rank appears; with replacement nothing is exhausted
    assert set(counts) == set(RANK_TABLE)

    observed = [counts[rank] for rank in RANK_TABLE]
    expected = [draws / len(RANK_TABLE)] * len(RANK_TABLE)
    # 12 degrees of freedom; 40 is far beyond the 99.9th percentile
    assert calculate_chi_square(observed, expected) < 40


# play_turn


def test_win_pays_the_bet(make_game):
    game = make_game(cards=[Rank.TWO, Rank.KING, Rank.SEVEN], responses=["50"])

    game.play_turn()

    assert game.balance == 150
    assert game.stage == GameStage.PLAYING
    assert game.io_interface.sent_messages == [
        "YOU NOW HAVE $100 DOLLARS",
        c.NEXT_CARDS_MESSAGE,
        "2 K",
        "7",
        c.WIN_MESSAGE,
    ]
    assert game.io_interface.prompts == [c.BET_PROMPT]


def test_loss_takes_the_bet(make_game):
    game = make_game(cards=[Rank.TWO, Rank.KING, Rank.ACE], responses=["30"])

    game.play_turn()

    assert game.balance == 70
    assert game.stage == GameStage.PLAYING
    assert game.io_interface.sent_messages[-2:] == ["A", c.LOSE_MESSAGE]
    assert game.state.losses == 1


def test_card_matching_a_bound_loses(make_game):
    game = make_game(cards=[Rank.FIVE, Rank.NINE, Rank.FIVE], responses=["10"])

    game.play_turn()

    assert game.balance == 90


def test_cards_are_shown_lowest_first(make_game):
    game = make_game(cards=[Rank.KING, Rank.TWO, Rank.SEVEN], responses=["10"])

    game.play_turn()

    assert "2 K" in game.io_interface.sent_messages
    assert game.state.first is Rank.KING
    assert game.state.second is Rank.TWO
    assert game.balance == 110


def test_bet_with_whitespace_is_accepted(make_game):
    game = make_game(cards=[Rank.TWO, Rank.ACE, Rank.EIGHT], responses=["  25 \n"])

    game.play_turn()

    assert game.balance == 125


@pytest.mark.parametrize("response", ["0", "000", "", "   ", "abc", "-5", "1 0", "2.5"])
def test_declined_bet(make_game, response):
    game = make_game(cards=[Rank.TWO, Rank.KING, Rank.SEVEN], responses=[response])

    game.play_turn()

    assert game.balance == 100
    assert game.stage == GameStage.BET_NOTHING
    assert game.io_interface.sent_messages[-1] == c.CHICKEN_MESSAGE
    # No third card was drawn
    assert game.rng.ranks == [Rank.SEVEN]
    assert game.state.third is None


def test_bet_nothing_round_skips_balance(make_game):
    game = make_game(
        cards=[Rank.TWO, Rank.KING, Rank.SEVEN],
        responses=["5"],
        stage=GameStage.BET_NOTHING,
    )

    game.play_turn()

    assert game.io_interface.sent_messages[0] == c.NEXT_CARDS_MESSAGE
    assert game.balance == 105
    assert game.stage == GameStage.PLAYING


def test_over_bet_is_refused(make_game):
    game = make_game(cards=[Rank.TWO, Rank.KING, Rank.SEVEN], responses=["150"])

    game.play_turn()

    assert game.balance == 100
    assert game.stage == GameStage.PLAYING
    assert game.io_interface.sent_messages[-2:] == [
        c.OVER_BET_MESSAGE,
        "YOU HAVE ONLY 100 DOLLARS TO BET.",
    ]
    assert game.rng.ranks == [Rank.SEVEN]
    # The player is not asked again within the round
    assert game.io_interface.prompts == [c.BET_PROMPT]


def test_over_bet_from_bet_nothing_returns_to_playing(make_game):
    game = make_game(
        cards=[Rank.TWO, Rank.KING],
        responses=["500"],
        stage=GameStage.BET_NOTHING,
        balance=40,
    )

    game.play_turn()

    assert game.stage == GameStage.PLAYING
    assert game.balance == 40
    assert "YOU HAVE ONLY 40 DOLLARS TO BET." in game.io_interface.sent_messages


@pytest.mark.parametrize("answer", ["YES", "yes", "  Yes  "])
def test_going_broke_and_playing_again(make_game, answer):
    game = make_game(cards=[Rank.TWO, Rank.THREE, Rank.FOUR], responses=["100", answer])

    game.play_turn()

    assert game.balance == 100
    assert game.stage == GameStage.PLAYING
    assert game.state.resets == 1
    assert c.BROKE_MESSAGE in game.io_interface.sent_messages
    assert game.io_interface.prompts == [c.BET_PROMPT, c.TRY_AGAIN_PROMPT]


@pytest.mark.parametrize("answer", ["NO", "Y", "", "yes please"])
def test_going_broke_and_quitting(make_game, answer):
    game = make_game(cards=[Rank.TWO, Rank.THREE, Rank.FOUR], responses=["100", answer])

    game.play_turn()

    assert game.balance == 0
    assert game.stage == GameStage.GAME_OVER


def test_loss_that_leaves_money_does_not_ask_to_replay(make_game):
    game = make_game(cards=[Rank.TWO, Rank.THREE, Rank.FOUR], responses=["99"])

    game.play_turn()

    assert game.balance == 1
    assert c.BROKE_MESSAGE not in game.io_interface.sent_messages
    assert game.io_interface.prompts == [c.BET_PROMPT]


def test_play_turn_requires_a_started_game():
    game = AceyDuceyGame(TestIOInterface(["10"]), config={"seed": 1})

    with pytest.raises(RuntimeError):
        game.play_turn()


def test_round_events(make_game):
    events = []
    EventBus.get_instance().on_any(lambda event: events.append(event[0]))
    game = make_game(cards=[Rank.TWO, Rank.KING, Rank.SEVEN], responses=["50"])

    game.play_turn()

    assert events == [
        "ROUND_STARTED",
        "CARD_DEALT",
        "CARD_DEALT",
        "PLAYER_BET",
        "CARD_DEALT",
        "BANKROLL_UPDATED",
        "ROUND_ENDED",
    ]


# run


def test_run_shows_intro_and_ends_on_closed_input(make_game):
    game = make_game(
        cards=[Rank.TWO, Rank.KING, Rank.SEVEN, Rank.FOUR, Rank.NINE],
        responses=["50"],
        stage=GameStage.INITIALIZING,
    )

    final_state = game.run()

    messages = game.io_interface.sent_messages
    assert messages[0] == c.TITLE.center(c.BANNER_WIDTH)
    assert messages[1] == c.CREDITS.center(c.BANNER_WIDTH)
    assert messages[2 : 2 + len(c.INSTRUCTIONS)] == list(c.INSTRUCTIONS)
    assert messages[-1] == c.FAREWELL_MESSAGE
    assert messages.count(c.FAREWELL_MESSAGE) == 1
    assert "YOU NOW HAVE $150 DOLLARS" in messages
    assert final_state.stage == GameStage.GAME_OVER
    assert final_state.balance == 150


def test_run_ends_when_player_quits_after_going_broke(make_game):
    game = make_game(
        cards=[Rank.TWO, Rank.THREE, Rank.FOUR],
        responses=["100", "no"],
        stage=GameStage.INITIALIZING,
    )

    final_state = game.run()

    assert final_state.stage == GameStage.GAME_OVER
    assert final_state.balance == 0
    assert game.io_interface.sent_messages[-1] == c.FAREWELL_MESSAGE


def test_run_continues_after_replay(make_game):
    game = make_game(
        cards=[Rank.TWO, Rank.THREE, Rank.FOUR, Rank.TWO, Rank.ACE],
        responses=["100", "YES"],
        stage=GameStage.INITIALIZING,
    )

    final_state = game.run()

    messages = game.io_interface.sent_messages
    assert messages.count("YOU NOW HAVE $100 DOLLARS") == 2
    assert final_state.resets == 1
    assert final_state.balance == 100
    assert final_state.rounds_played == 2


def test_run_after_declined_bet_skips_balance_line(make_game):
    game = make_game(
        cards=[
            Rank.TWO, Rank.KING,
            Rank.THREE, Rank.QUEEN, Rank.FIVE,
            Rank.TWO, Rank.KING,
        ],
        responses=["0", "10"],
        stage=GameStage.INITIALIZING,
    )

    final_state = game.run()

    messages = game.io_interface.sent_messages
    assert messages.count("YOU NOW HAVE $100 DOLLARS") == 1
    assert messages.count("YOU NOW HAVE $110 DOLLARS") == 1
    assert final_state.declined == 1
    assert final_state.wins == 1
    assert final_state.rounds_played == 3


def test_run_emits_game_lifecycle_events(make_game):
    events = []
    bus = EventBus.get_instance()
    bus.on("GAME_STARTED", lambda data: events.append("started"))
    bus.on("GAME_ENDED", lambda data: events.append("ended"))
    game = make_game(
        cards=[Rank.TWO, Rank.THREE, Rank.FOUR],
        responses=["100", "NO"],
        stage=GameStage.INITIALIZING,
    )

    game.run()

    assert events == ["started", "ended"]


def test_enormous_bet_is_an_over_bet(make_game):
    game = make_game(cards=[Rank.TWO, Rank.KING, Rank.SEVEN], responses=["9" * 5000])

    game.play_turn()

    assert game.balance == 100
    assert game.stage == GameStage.PLAYING
    assert game.io_interface.sent_messages[-2:] == [
        c.OVER_BET_MESSAGE,
        "YOU HAVE ONLY 100 DOLLARS TO BET.",
    ]
    assert game.rng.ranks == [Rank.SEVEN]


def test_run_survives_enormous_bet(make_game):
    game = make_game(
        cards=[Rank.TWO, Rank.KING, Rank.FOUR, Rank.NINE],
        responses=["1" * 5000],
        stage=GameStage.INITIALIZING,
    )

    final_state = game.run()

    assert final_state.stage == GameStage.GAME_OVER
    assert final_state.balance == 100
    assert final_state.rejected == 1
    assert game.io_interface.sent_messages[-1] == c.FAREWELL_MESSAGE


def test_run_ends_when_input_closes_at_replay_prompt(make_game):
    game = make_game(
        cards=[Rank.TWO, Rank.THREE, Rank.FOUR],
        responses=["100"],
        stage=GameStage.INITIALIZING,
    )

    final_state = game.run()

    messages = game.io_interface.sent_messages
    assert game.io_interface.prompts == [c.BET_PROMPT, c.TRY_AGAIN_PROMPT]
    assert final_state.stage == GameStage.GAME_OVER
    assert final_state.balance == 0
    assert messages[-1] == c.FAREWELL_MESSAGE
    assert messages.count(c.FAREWELL_MESSAGE) == 1
