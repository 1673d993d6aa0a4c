from __future__ import annotations

import enum
import json
from typing import Dict, Iterable, Mapping, Optional, Sequence, Tuple


class I18nKey(enum.Enum):
    SECURITY_KEY = "SECURITY_KEY"
    SMARTPHONE = "SMARTPHONE"
    SIGN_IN_WITH_YOUR_PASSKEY = "SIGN_IN_WITH_YOUR_PASSKEY"


# en-US labels of the Windows 11 passkey prompt. The title is compared exactly,
# so other display languages are only added from a locale file
# (PatternProvider.from_json_file) holding strings read off that language's dialog.
BUILTIN_STRINGS: Dict[I18nKey, Tuple[str, ...]] = {
    I18nKey.SECURITY_KEY: ("Security key",),
    I18nKey.SMARTPHONE: ("iPhone, iPad, or Android device",),
    I18nKey.SIGN_IN_WITH_YOUR_PASSKEY: ("Sign in with your passkey",),
}


def compact(values: Iterable[Optional[str]]) -> Tuple[str, ...]:
    """Drop missing and empty strings and duplicates, keeping first-seen order."""
    out: Dict[str, None] = {}
    for v in values:
        if v:
            out.setdefault(v, None)
    return tuple(out)


class PatternProvider:
    def __init__(self, extra: Optional[Mapping[I18nKey, Sequence[Optional[str]]]] = None, include_builtin: bool = True) -> None:
        table: Dict[I18nKey, Tuple[str, ...]] = {}
        for key in I18nKey:
            builtin = BUILTIN_STRINGS.get(key, ()) if include_builtin else ()
            table[key] = compact(list(builtin) + list((extra or {}).get(key, ())))
        self._table = table

    def patterns_for(self, key: I18nKey) -> Tuple[str, ...]:
        return self._table[key]

    def as_dict(self) -> Dict[str, Tuple[str, ...]]:
        return {k.value: v for k, v in self._table.items()}

    @classmethod
    def from_json_file(cls, path: str, include_builtin: bool = True) -> "PatternProvider":
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
        if not isinstance(raw, dict):
            raise ValueError(f"{path}: expected an object mapping keys to lists of strings")
        extra: Dict[I18nKey, Sequence[Optional[str]]] = {}
        for name, values in raw.items():
            try:
                key = I18nKey[name]
            except KeyError:
                raise ValueError(f"{path}: unknown key {name!r}") from None
            if isinstance(values, str):
                values = [values]
            extra[key] = list(values)
        return cls(extra=extra, include_builtin=include_builtin)
