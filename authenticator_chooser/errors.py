from __future__ import annotations


class ChooserError(Exception):
    """Base class for failures scoped to a single dialog instance."""


class NotTargetDialog(ChooserError):
    pass


class CredentialListTimeout(ChooserError, TimeoutError):
    def __init__(self, timeout_seconds: float) -> None:
        super().__init__(
            f"Could not find authenticator choices after retrying for {timeout_seconds:g}s. "
            "Giving up and not automatically selecting Security Key."
        )
        self.timeout_seconds = timeout_seconds


class InteropFailure(ChooserError):
    """An accessibility call failed, e.g. the dialog's process exited mid-query."""
