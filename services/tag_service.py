"""
Tag service: search box autocompletion and bulk tag maintenance.

Autocompletion only ever looks at the token being typed; it never runs a
content query.
"""

from typing import List

import config
from core.models import NEGATIVE_PREFIX, RATING_PREFIX, Rating
from repositories import tag_repository
from services.query.tokens import partial_token_at
from utils.logging_config import get_logger

logger = get_logger('TagService')

RATING_SUGGESTIONS = [f"{RATING_PREFIX}{code}" for code in Rating.codes()]


def suggest_completions(text: str, selection_end: int) -> List[dict]:
    """
    Suggestions for the token that ends at the caret.

    Each suggestion is {'name': shown text, 'value': text to insert}; for a
    negated token the value keeps the leading '-'.
    """
    token = partial_token_at(text or "", selection_end)
    if token is None:
        return []

    marker = NEGATIVE_PREFIX if token.negated else ""
    typed = token.text[len(marker):]

    if token.is_rating:
        names = [name for name in RATING_SUGGESTIONS if name.startswith(typed.lower())]
    else:
        if not typed:
            return []
        tags = tag_repository.find_tags_by_prefix(typed, config.Defaults.AUTOCOMPLETE_MAX_RESULTS)
        names = [tag.name for tag in tags]

    return [{'name': name, 'value': f"{marker}{name}"} for name in names]


def select_completion(text: str, new_tag: str, selection_end: int) -> str:
    """
    Query text with the token before the caret replaced by new_tag.

    Tokens after the caret are kept and the result always ends with a single
    space so typing can continue.
    """
    text = text or ""
    selection_end = max(0, min(selection_end, len(text)))

    # The last ' '-separated piece before the caret is the one being replaced
    before = [token for token in text[:selection_end].split(' ')[:-1] if token]
    after = [token for token in text[selection_end:].split(' ') if token]
    return " ".join([*before, new_tag, *after]) + " "


def edit_tag(old_tag_text: str, new_tag_text: str) -> dict:
    """Bulk rename or merge a tag; see tag_repository.rename_or_merge_tag."""
    result = tag_repository.rename_or_merge_tag(old_tag_text, new_tag_text)
    return {'tag': result['tag'].to_dict(), 'merged': result['merged']}


def collect_unused_tags() -> int:
    return tag_repository.garbage_collect_tags()
