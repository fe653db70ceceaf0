from typing import List

# Returned by parse_bet for anything that is not a plain run of digits.
INVALID_BET = -1

# Longer bets skip int() (CPython refuses to convert over 4300 digits) and
# come back as OVERSIZED_BET, which no balance can cover.
MAX_BET_DIGITS = 4000
OVERSIZED_BET = 10 ** MAX_BET_DIGITS


def normalize_input(line: str) -> str:
    """
    Sanitize a raw line of player input.

    >>> normalize_input("  yes\\n")
    'YES'
    """
    return line.strip().upper()


def parse_bet(text: str) -> int:
    """
    Convert normalized bet text to a non-negative integer.

    :param text: The bet as typed by the player, already normalized
    :return: The bet amount, or INVALID_BET if the text is empty or contains
             anything other than decimal digits. Amounts longer than
             MAX_BET_DIGITS digits are returned as OVERSIZED_BET.

    >>> parse_bet("25")
    25
    >>> parse_bet("-5")
    -1
    """
    if text and all(ch in "0123456789" for ch in text):
        digits = text.lstrip("0")
        if len(digits) > MAX_BET_DIGITS:
            return OVERSIZED_BET
        return int(digits or "0")
    return INVALID_BET


def calculate_chi_square(
    observed_values: List[float], expected_values: List[float]
) -> float:
    """
    Calculate the chi-square statistic given lists of observed and expected values.

    :param observed_values: A list of observed values
    :param expected_values: A list of expected values
    :return: The calculated chi-square statistic
    :raises ValueError: If the observed_values and expected_values lists do not have the same length

    """
    if len(observed_values) != len(expected_values):
        raise ValueError("Observed and expected value lists must have the same length.")

    chi_square_stat = sum(
        (o - e) ** 2 / e for o, e in zip(observed_values, expected_values)
    )
    return chi_square_stat
