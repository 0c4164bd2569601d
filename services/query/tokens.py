"""
Query text classification.

A search query is whitespace-separated tokens. A leading "-" negates a token
and a "rating:" prefix (after any negation) turns it into a rating filter, so
every token lands in exactly one of four sets.
"""

from dataclasses import dataclass, field
from typing import FrozenSet, Optional

from core.models import NEGATIVE_PREFIX, RATING_PREFIX


@dataclass(frozen=True)
class SearchTokens:
    include_tags: FrozenSet[str] = field(default_factory=frozenset)
    exclude_tags: FrozenSet[str] = field(default_factory=frozenset)
    include_ratings: FrozenSet[str] = field(default_factory=frozenset)
    exclude_ratings: FrozenSet[str] = field(default_factory=frozenset)

    @property
    def is_empty(self) -> bool:
        return not (self.include_tags or self.exclude_tags
                    or self.include_ratings or self.exclude_ratings)


@dataclass(frozen=True)
class PartialToken:
    """The token under the caret, as seen by autocompletion."""
    text: str
    negated: bool
    is_rating: bool
    value: str


def classify_query(query_text: Optional[str]) -> SearchTokens:
    """
    Split query text into include/exclude tag and rating sets.

    Every token is lowercased before it is classified, so "RATING:S" is a
    rating token for "s". Rating values that are not a rating code simply
    match nothing. A bare "-" is dropped.
    """
    include_tags, exclude_tags = set(), set()
    include_ratings, exclude_ratings = set(), set()

    for token in (query_text or "").split():
        token = token.lower()
        negated = token.startswith(NEGATIVE_PREFIX)
        if negated:
            token = token[len(NEGATIVE_PREFIX):]
            if not token:
                continue

        if token.startswith(RATING_PREFIX):
            rating = token[len(RATING_PREFIX):]
            (exclude_ratings if negated else include_ratings).add(rating)
        else:
            (exclude_tags if negated else include_tags).add(token)

    return SearchTokens(
        include_tags=frozenset(include_tags),
        exclude_tags=frozenset(exclude_tags),
        include_ratings=frozenset(include_ratings),
        exclude_ratings=frozenset(exclude_ratings),
    )


def partial_token_at(text: str, selection_end: int) -> Optional[PartialToken]:
    """
    Return the last whitespace-separated token in text[:selection_end].

    None when the caret sits right after whitespace or the text is empty.
    """
    selection_end = max(0, min(selection_end, len(text)))
    before = text[:selection_end]
    if not before or before[-1].isspace():
        return None

    token = before.split()[-1]
    negated = token.startswith(NEGATIVE_PREFIX)
    stripped = token[len(NEGATIVE_PREFIX):] if negated else token
    is_rating = stripped.lower().startswith(RATING_PREFIX)
    value = stripped[len(RATING_PREFIX):] if is_rating else stripped
    return PartialToken(text=token, negated=negated, is_rating=is_rating, value=value)


def is_prefixed_token(token: str) -> bool:
    """True for tokens that carry query syntax rather than a tag name."""
    token = token.lower()
    return token.startswith(NEGATIVE_PREFIX) or token.startswith(RATING_PREFIX)
