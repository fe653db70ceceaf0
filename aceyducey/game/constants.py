"""Acey Ducey constants and fixed message text."""

STARTING_BALANCE = 100

BANNER_WIDTH = 66

TITLE = "ACEY DUCEY CARD GAME"
CREDITS = "CREATIVE COMPUTING  MORRISTOWN, NEW JERSEY"

INSTRUCTIONS = (
    "",
    "ACEY-DUCEY IS PLAYED IN THE FOLLOWING MANNER",
    "THE DEALER (COMPUTER) DEALS TWO CARDS FACE UP",
    "YOU HAVE AN OPTION TO BET OR NOT BET DEPENDING",
    "ON WHETHER OR NOT YOU FEEL THE CARD WILL HAVE",
    "A VALUE BETWEEN THE FIRST TWO.",
)

BALANCE_MESSAGE = "YOU NOW HAVE ${balance} DOLLARS"
NEXT_CARDS_MESSAGE = "HERE ARE YOUR NEXT TWO CARDS:"
BET_PROMPT = "WHAT IS YOUR BET "
CHICKEN_MESSAGE = "CHICKEN!!"
OVER_BET_MESSAGE = "SORRY, MY FRIEND, BUT YOU BET TOO MUCH."
ONLY_HAVE_MESSAGE = "YOU HAVE ONLY {balance} DOLLARS TO BET."
WIN_MESSAGE = "YOU WIN!!!"
LOSE_MESSAGE = "SORRY, YOU LOSE"
BROKE_MESSAGE = "SORRY, FRIEND, BUT YOU BLEW YOUR WAD."
TRY_AGAIN_PROMPT = "TRY AGAIN (YES OR NO)? "
FAREWELL_MESSAGE = "GAME OVER. Thanks for playing!"

AFFIRMATIVE_ANSWER = "YES"
