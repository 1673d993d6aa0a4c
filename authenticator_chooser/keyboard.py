from __future__ import annotations

from typing import Any


class ModifierKeyOracle:
    def is_override_held(self) -> bool:  # pragma: no cover - interface
        raise NotImplementedError


class StaticKeyOracle(ModifierKeyOracle):
    def __init__(self, held: bool = False) -> None:
        self.held = held

    def is_override_held(self) -> bool:
        return self.held


class ShiftKeyOracle(ModifierKeyOracle):
    """Either Shift key held means the user wants to review the dialog themselves."""

    def __init__(self, uia: Any = None) -> None:
        if uia is None:
            try:
                import uiautomation as uia  # type: ignore
            except Exception as e:  # noqa: BLE001
                raise RuntimeError("uiautomation package required on Windows. Install with `pip install uiautomation`.") from e
        self.uia = uia

    def is_override_held(self) -> bool:
        keys = self.uia.Keys
        return bool(self.uia.IsKeyPressed(keys.VK_LSHIFT) or self.uia.IsKeyPressed(keys.VK_RSHIFT))


def get_key_oracle(connector_name: str) -> ModifierKeyOracle:
    if connector_name == "windows":
        return ShiftKeyOracle()
    return StaticKeyOracle(False)
