"""
This module defines the `Rank` enum, the fixed table of card ranks used by
Acey Ducey.

- `Rank`: An enum of the thirteen ranks Two through Ace. The value of each
member is its ordinal position (0..12), lowest first, so comparisons never
need a label search.

- `RANK_TABLE`: The ranks as an ordered tuple, lowest to highest.

Cards in Acey Ducey carry no suit; a dealt card is simply a `Rank`.

>>> Rank.from_label("j")
Rank.JACK
>>> str(Rank.TEN)
'10'
"""

from enum import Enum, unique
from functools import total_ordering


@unique
@total_ordering
class Rank(Enum):
    """
    Enum for the ranks in the Acey Ducey rank table.
    """

    TWO = 0
    THREE = 1
    FOUR = 2
    FIVE = 3
    SIX = 4
    SEVEN = 5
    EIGHT = 6
    NINE = 7
    TEN = 8
    JACK = 9
    QUEEN = 10
    KING = 11
    ACE = 12

    @property
    def ordinal(self) -> int:
        """Position of the rank in the table, 0 for Two up to 12 for Ace."""
        return self.value

    @property
    def label(self) -> str:
        """A string representation of the rank."""
        if self in (Rank.JACK, Rank.QUEEN, Rank.KING, Rank.ACE):
            return self.name[0]
        return str(self.value + 2)

    @classmethod
    def from_label(cls, label: str) -> "Rank":
        """
        Look up a rank by its label.

        :param label: A rank label such as "2", "10" or "Q" (case and
                      surrounding whitespace are ignored).
        :return: The matching Rank.
        :raises TypeError: If label is not a string.
        :raises ValueError: If no rank carries that label.
        """
        if not isinstance(label, str):
            raise TypeError(f"Invalid rank label: {label!r}")
        try:
            return _RANKS_BY_LABEL[label.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown rank label: {label!r}") from None

    @classmethod
    def coerce(cls, value) -> "Rank":
        """Return value as a Rank, resolving labels through `from_label`."""
        if isinstance(value, Rank):
            return value
        if isinstance(value, str):
            return cls.from_label(value)
        raise TypeError(f"Invalid rank: {value!r}")

    def __lt__(self, other):
        if isinstance(other, Rank):
            return self.value < other.value
        return NotImplemented

    def __repr__(self) -> str:
        return f"Rank.{self.name}"

    def __str__(self) -> str:
        return self.label


RANK_TABLE = tuple(Rank)

_RANKS_BY_LABEL = {rank.label: rank for rank in RANK_TABLE}
