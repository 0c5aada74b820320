"""Scoring constants."""

from typing import Final


# Score added per boost keyword found in title or snippet
KEYWORD_BOOST: Final[float] = 2.0

# Score added when the candidate carries a publish date
DATED_BONUS: Final[float] = 1.0
