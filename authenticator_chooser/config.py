from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Callable, Optional, TypeVar

T = TypeVar("T")

ENV_PREFIX = "AUTHENTICATOR_CHOOSER_"


def _env(name: str, cast: Callable[[str], T], default: T) -> T:
    raw = os.getenv(ENV_PREFIX + name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw.strip())
    except ValueError:
        raise ValueError(f"{ENV_PREFIX}{name} must be a valid {cast.__name__}, got {raw!r}") from None


@dataclass
class ChooserSettings:
    timeout_seconds: float = 60.0
    poll_interval_seconds: float = 0.005
    watch_interval_seconds: float = 0.25
    max_workers: int = 4
    locale_file: Optional[str] = None

    @classmethod
    def from_env(cls) -> "ChooserSettings":
        return cls(
            timeout_seconds=_env("TIMEOUT", float, cls.timeout_seconds),
            poll_interval_seconds=_env("POLL_INTERVAL", float, cls.poll_interval_seconds),
            watch_interval_seconds=_env("WATCH_INTERVAL", float, cls.watch_interval_seconds),
            max_workers=_env("MAX_WORKERS", int, cls.max_workers),
            locale_file=os.getenv(ENV_PREFIX + "LOCALE_FILE") or None,
        )
