"""
Deterministic keyword-overlap scoring between a candidate and a description.
"""

import re

# Description tokens this short or shorter are treated as stopwords
MIN_TOKEN_LENGTH = 3
# Exact keyword matches between prose and requirement text are rare, so boost
KEYWORD_BOOST = 1.5

_NON_WORD = re.compile(r"[^\w\s]")


def tokenize(text: str) -> list[str]:
    """Lower-case, drop punctuation, split on whitespace."""
    return _NON_WORD.sub("", text.lower()).split()


def _description_tokens(text: str) -> list[str]:
    return [t for t in tokenize(text) if len(t) > MIN_TOKEN_LENGTH]


def score(candidate_text: str, description_text: str) -> float:
    """
    Keyword match rate of a candidate against a description.

    Repeated description tokens count once per occurrence, so emphasised
    requirements weigh more.

    Returns:
        Score in [0, 100]; 0 when the description has no significant tokens
    """
    candidate_tokens = set(tokenize(candidate_text))
    description_tokens = _description_tokens(description_text)

    if not description_tokens:
        return 0.0

    matches = sum(1 for token in description_tokens if token in candidate_tokens)
    rate = matches / len(description_tokens) * 100
    return min(rate * KEYWORD_BOOST, 100.0)


def matched_keywords(candidate_text: str, description_text: str) -> list[str]:
    """Distinct description keywords found in the candidate, in description order."""
    candidate_tokens = set(tokenize(candidate_text))
    seen: set[str] = set()
    matched = []
    for token in _description_tokens(description_text):
        if token in candidate_tokens and token not in seen:
            seen.add(token)
            matched.append(token)
    return matched
