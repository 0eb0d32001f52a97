"""
Score validation.

Scores are whole numbers in [SCORE_MIN, SCORE_MAX], both inclusive.
"""
import re
from typing import Any

from hatchjudge.engine.errors import InvalidScore

SCORE_MIN = 0
SCORE_MAX = 100

_INTEGER_PATTERN = re.compile(r"^[+-]?\d+$")


def parse_score(raw_score: Any) -> int:
    """
    Parse ``raw_score`` into a bounded integer score.

    Accepts ints, integral floats (``85.0``) and integer strings. Booleans,
    fractional values and anything non-numeric raise InvalidScore.
    """
    if isinstance(raw_score, bool) or raw_score is None:
        raise InvalidScore(raw_score, SCORE_MIN, SCORE_MAX)

    if isinstance(raw_score, int):
        score = raw_score
    elif isinstance(raw_score, float):
        if not raw_score.is_integer():
            raise InvalidScore(raw_score, SCORE_MIN, SCORE_MAX)
        score = int(raw_score)
    elif isinstance(raw_score, str):
        stripped = raw_score.strip()
        if not _INTEGER_PATTERN.match(stripped):
            raise InvalidScore(raw_score, SCORE_MIN, SCORE_MAX)
        score = int(stripped)
    else:
        raise InvalidScore(raw_score, SCORE_MIN, SCORE_MAX)

    if score < SCORE_MIN or score > SCORE_MAX:
        raise InvalidScore(raw_score, SCORE_MIN, SCORE_MAX)
    return score
