from __future__ import annotations

import platform
from typing import Optional

from .base import TreeAccessor
from .sim import SimConnector


def get_connector(os_override: Optional[str] = None) -> TreeAccessor:
    name = (os_override or platform.system()).lower()
    if name == "sim":
        return SimConnector()
    if name == "windows":
        from .windows import WindowsConnector
        return WindowsConnector()
    raise RuntimeError(f"Unsupported platform: {name}")
