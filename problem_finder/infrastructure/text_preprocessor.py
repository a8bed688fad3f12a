# problem_finder/infrastructure/text_preprocessor.py

import re
from typing import Any, List

from sklearn.feature_extraction.text import ENGLISH_STOP_WORDS


# Words on the sklearn list that carry meaning in problem titles
# ("Two Sum", "Move Zeroes", "Top K Frequent", "First Missing Positive").
KEEP_WORDS = frozenset({
    "two", "three", "four", "five", "six", "eight", "nine", "ten",
    "eleven", "twelve", "fifteen", "twenty", "forty", "fifty", "sixty", "hundred",
    "top", "bottom", "front", "back", "side",
    "first", "last", "next", "empty", "full", "fill",
    "move", "find", "part",
})

STOPWORDS = frozenset(ENGLISH_STOP_WORDS) - KEEP_WORDS

# Word tokenizer: anything that is not a word character separates tokens.
_WORD_PATTERN = re.compile(r"[a-z0-9_]+")
_ALPHA_PATTERN = re.compile(r"^[a-zA-Z]+$")


def tokenize(text: str) -> List[str]:
    return _WORD_PATTERN.findall(text.lower())


def preprocess(text: Any) -> List[str]:
    """
    Lowercase, tokenize, and keep alphabetic tokens longer than one
    character that are not English stopwords.

    Order and duplicates are preserved so term frequencies can be counted.
    Non-string or empty input yields an empty list.
    """
    if not text or not isinstance(text, str):
        return []

    return [
        token
        for token in tokenize(text)
        if len(token) > 1
        and _ALPHA_PATTERN.match(token)
        and token not in STOPWORDS
    ]
