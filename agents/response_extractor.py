"""Parse evaluator answers into catalog ids."""

import re
from typing import Optional

_DIGITS = re.compile(r"[0-9]+")


def extract_item_id(text: Optional[str]) -> Optional[int]:
    """
    Return the first number in an evaluator answer.

    Evaluators are told to answer with only the id, so the first run of
    digits is trusted even when a later number looks like a better match.

    Args:
        text: Free-text evaluator answer

    Returns:
        Parsed id, or None if the text has no digits
    """
    if not text:
        return None
    match = _DIGITS.search(text)
    if match is None:
        return None
    return int(match.group())
