"""
Pytest configuration for tests at the root level.

This module contains pytest fixtures shared by the test suite.
"""

from dataclasses import replace

import pytest

from aceyducey.common.io_interface import TestIOInterface
from aceyducey.events import EventBus
from aceyducey.game.acey_ducey import AceyDuceyGame
from aceyducey.game.state import GameStage


# Reset event bus before each test
@pytest.fixture(scope="function", autouse=True)
def reset_event_bus():
    """Reset the event bus singleton before each test."""
    EventBus._instance = None
    yield
    EventBus._instance = None


class ScriptedRandom:
    """Random source that deals a fixed sequence of ranks."""

    def __init__(self, ranks):
        self.ranks = list(ranks)

    def choice(self, seq):
        if not self.ranks:
            raise AssertionError("Ran out of scripted cards")
        return self.ranks.pop(0)


@pytest.fixture
def make_game():
    """
    Build a game that deals the given cards and answers prompts with the
    given responses, already past the intro.
    """

    def _make(cards=(), responses=(), stage=GameStage.PLAYING, balance=None):
        io_interface = TestIOInterface(list(responses))
        game = AceyDuceyGame(io_interface, rng=ScriptedRandom(cards))
        changes = {"stage": stage}
        if balance is not None:
            changes["balance"] = balance
        game.state = replace(game.state, **changes)
        return game

    return _make
