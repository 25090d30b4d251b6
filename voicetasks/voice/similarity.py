"""String similarity helpers for matching spoken names against task titles.

Speech recognition mangles words in small ways ("laundary", "groceries" vs
"grocery"), so matching is done token by token with a small edit-distance
tolerance. Strings are compared as sequences of code points.
"""

from typing import List

from voicetasks.models.constants import FUZZY_MAX_EDIT_DISTANCE, FUZZY_MIN_TOKEN_LENGTH


def levenshtein_distance(a: str, b: str) -> int:
    """Minimum number of single-character edits turning `a` into `b`."""
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)

    # Single rolling row over the shorter string
    if len(a) < len(b):
        a, b = b, a
    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            cost = 0 if char_a == char_b else 1
            current.append(min(
                previous[j] + 1,         # deletion
                current[j - 1] + 1,      # insertion
                previous[j - 1] + cost,  # substitution
            ))
        previous = current
    return previous[-1]


def tokenize(text: str, min_length: int = FUZZY_MIN_TOKEN_LENGTH) -> List[str]:
    """Lower-cased whitespace tokens of at least `min_length` characters."""
    return [word for word in (text or "").lower().split() if len(word) >= min_length]


def tokens_similar(a: str, b: str, max_distance: int = FUZZY_MAX_EDIT_DISTANCE) -> bool:
    """True if one token contains the other or they are within `max_distance` edits."""
    if not a or not b:
        return False
    return a in b or b in a or levenshtein_distance(a, b) <= max_distance


def word_overlap_ratio(query: str, candidate: str) -> float:
    """Fraction of the query's tokens that have a similar token in the candidate.

    Returns 0.0 when either side has no usable tokens.
    """
    query_tokens = tokenize(query)
    candidate_tokens = tokenize(candidate)
    if not query_tokens or not candidate_tokens:
        return 0.0

    matched = sum(
        1 for word in query_tokens
        if any(tokens_similar(word, other) for other in candidate_tokens)
    )
    return matched / len(query_tokens)
