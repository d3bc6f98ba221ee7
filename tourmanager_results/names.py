"""Rider name helpers."""

import re

# A letter at the start, or right after whitespace or a hyphen.
_WORD_START = re.compile(r"(^|\s|-)([^\W\d_])")


def format_rider_name(full_name: str) -> str:
    """Normalize a ``"FAMILY NAME Given"`` string to its capitalized surname.

    The scraper lists riders family name first, given name last. The last
    space-separated token is dropped and the rest is lower-cased, then every
    word (including hyphenated parts) is capitalized.

    Examples:
        - ``"DE LA CRUZ Juan"`` → ``"De La Cruz"``
        - ``"VAN DER POEL-SMITH Mathieu"`` → ``"Van Der Poel-Smith"``
        - ``"Pogačar"`` → ``"Pogačar"`` (single token, returned as-is)

    Args:
        full_name: Raw rider name as served by the API.

    Returns:
        str: The formatted family name only. The given name is not returned.
    """
    parts = full_name.strip().split(" ")
    if len(parts) < 2:
        return full_name
    parts.pop()
    family = " ".join(parts).lower()
    return _WORD_START.sub(lambda m: m.group(1) + m.group(2).upper(), family)
