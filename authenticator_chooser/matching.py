from __future__ import annotations

from typing import Iterable, Optional


def contains_any(label: str, substrings: Iterable[Optional[str]]) -> bool:
    """True if any non-empty substring occurs in ``label``.

    Vendor strings may wrap the localized phrase with a prefix and a suffix,
    so this is containment rather than equality.
    """
    return any(s and s in label for s in substrings)
