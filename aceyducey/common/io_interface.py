"""
This module contains the IOInterface abstract base class and its implementations.

The game never touches the terminal directly; it writes lines through
`output` and reads answers through `input`. Implementations decide where
those lines go, which lets the same game run interactively, silently in
simulations, or against scripted answers in tests.
"""

from abc import ABC, abstractmethod
from typing import List, Optional


class IOInterface(ABC):
    """
    Abstract base class for an IO interface.

    This class defines the interface for input/output operations in the game.
    """

    @abstractmethod
    def output(self, message: str) -> None:
        """Output a message to the interface."""
        pass

    @abstractmethod
    def input(self, prompt: str) -> str:
        """
        Get input from the user with a prompt.

        Raises EOFError when no more input is available.
        """
        pass


class DummyIOInterface(IOInterface):
    """
    A dummy IO interface for simulation purposes. Does not perform any actual IO.

    Every prompt is answered with an empty line, which the game reads as a
    declined bet or a "no".
    """

    def output(self, message: str) -> None:
        """Simulates output operation."""
        pass

    def input(self, prompt: str) -> str:
        """Simulates input operation."""
        return ""


class TestIOInterface(IOInterface):
    """
    A test IO interface for testing purposes. Collects output messages and
    answers prompts from a queue.

    Methods
    -------
    def output(self, message):
        Collect an output message.

    def input(self, prompt):
        Pop the next queued response, or raise EOFError when none are left.

    def add_input(self, *responses):
        Queue responses for upcoming prompts.
    """

    __test__ = False

    def __init__(self, input_responses: Optional[List[str]] = None):
        self.sent_messages = []
        self.prompts = []
        self.input_responses = list(input_responses or [])

    def output(self, message: str) -> None:
        self.sent_messages.append(message)

    def input(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.input_responses:
            return self.input_responses.pop(0)
        raise EOFError("No more responses left in TestIOInterface queue.")

    def add_input(self, *responses: str) -> None:
        """Queue responses for upcoming prompts."""
        self.input_responses.extend(responses)


class ConsoleIOInterface(IOInterface):
    """
    A console IO interface for interactive gameplay.
    """

    def output(self, message: str) -> None:
        print(message)

    def input(self, prompt: str) -> str:
        return input(prompt)


class LoggingIOInterface(IOInterface):
    """
    A logging IO interface for recording purposes.

    Passes every call through to a wrapped interface and appends the exchange
    to a transcript file, so a session can be replayed or inspected later.
    """

    def __init__(self, log_file_path: str, io_interface: IOInterface):
        self.log_file_path = log_file_path
        self.io_interface = io_interface

    def _write(self, line: str) -> None:
        with open(self.log_file_path, "a", encoding="utf-8") as log_file:
            log_file.write(line + "\n")

    def output(self, message: str) -> None:
        """Write an output message to the wrapped interface and the log file."""
        self.io_interface.output(message)
        self._write(message)

    def input(self, prompt: str) -> str:
        """Read from the wrapped interface, logging the prompt and the answer."""
        try:
            response = self.io_interface.input(prompt)
        except EOFError:
            self._write(f"{prompt}[EOF]")
            raise
        self._write(f"{prompt}{response}")
        return response
