"""Asset-name glob matching.

Patterns are literal text plus two wildcards: ``*`` (any run of characters,
including none) and ``?`` (exactly one character). Matching is
case-sensitive and anchored at both ends. There is no escaping and no
character classes; ``[``, ``.`` and friends are literal.
"""

from __future__ import annotations

__all__ = ["glob_match"]


def glob_match(pattern: str, name: str) -> bool:
    """Return True if ``name`` matches ``pattern`` in full.

    Greedy two-pointer walk: on a mismatch, fall back to the most recent
    ``*`` and let it absorb one more character.
    """
    p = n = 0
    star_p = -1
    star_n = 0

    while n < len(name):
        if p < len(pattern) and (pattern[p] == "?" or pattern[p] == name[n]):
            p += 1
            n += 1
        elif p < len(pattern) and pattern[p] == "*":
            star_p = p
            star_n = n
            p += 1
        elif star_p != -1:
            p = star_p + 1
            star_n += 1
            n = star_n
        else:
            return False

    while p < len(pattern) and pattern[p] == "*":
        p += 1
    return p == len(pattern)
