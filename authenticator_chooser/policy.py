from __future__ import annotations

import enum
from typing import Callable, NamedTuple, Optional, Sequence, Union

from .matching import contains_any


class Decision(enum.Enum):
    SELECT_AND_SUBMIT = "select_and_submit"
    SELECT_AND_WAIT = "select_and_wait"
    SKIP = "skip"


class PolicyResult(NamedTuple):
    decision: Decision
    index: Optional[int] = None
    reason: str = ""


def decide(
    labels: Sequence[str],
    security_key_patterns: Sequence[str],
    smartphone_patterns: Sequence[str],
    override_held: Union[bool, Callable[[], bool]] = False,
) -> PolicyResult:
    """Decide what to do with a passkey prompt given its choice labels in display order.

    The first label naming a security key wins. It is submitted only when no
    modifier override is held and every other choice merely offers to pair a
    phone; any other choice (an existing phone, PIN, biometrics) might be what
    the user wants, so the dialog is left open for them.

    ``override_held`` may be a callable, queried only once a security key
    choice has been found.
    """
    index = next((i for i, label in enumerate(labels) if contains_any(label, security_key_patterns)), None)
    if index is None:
        return PolicyResult(Decision.SKIP, None, "USB security key is not a choice")

    held = override_held() if callable(override_held) else override_held
    if held:
        return PolicyResult(Decision.SELECT_AND_WAIT, index, "override key is held")

    for i, label in enumerate(labels):
        if i != index and not contains_any(label, smartphone_patterns):
            return PolicyResult(
                Decision.SELECT_AND_WAIT,
                index,
                f"choice {label!r} is neither pairing a new phone nor a USB security key",
            )
    return PolicyResult(Decision.SELECT_AND_SUBMIT, index, "only other choices pair a new phone")
