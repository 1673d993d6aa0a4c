from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Optional, Sequence

from ..conditions import Property
from ..errors import InteropFailure
from .base import Node, TreeAccessor

SELECTION_ITEM = "SelectionItem"
INVOKE = "Invoke"


@dataclass(eq=False)
class SimNode:
    class_name: str = ""
    name: str = ""
    automation_id: str = ""
    patterns: FrozenSet[str] = frozenset()
    children: List["SimNode"] = field(default_factory=list)
    # Set to simulate the owning process going away mid-query
    broken: bool = False

    def add(self, *children: "SimNode") -> "SimNode":
        self.children.extend(children)
        return self


def text(name: str) -> SimNode:
    return SimNode(class_name="TextBlock", name=name)


def choice(name: str) -> SimNode:
    return SimNode(class_name="ListViewItem", name=name, patterns=frozenset({SELECTION_ITEM}))


def passkey_dialog(
    choices: Sequence[str],
    title: str = "Sign in with your passkey",
    with_list: bool = True,
    class_name: str = "Credential Dialog Xaml Host",
) -> SimNode:
    """Build the tree of a Windows passkey prompt offering ``choices``."""
    credentials = SimNode(class_name="ListView", automation_id="CredentialsList")
    credentials.add(*(choice(c) for c in choices))
    inner = SimNode(class_name="Grid")
    if with_list:
        inner.add(credentials)
    scroll = SimNode(class_name="ScrollViewer").add(text(title), inner)
    ok = SimNode(class_name="Button", name="Next", automation_id="OkButton", patterns=frozenset({INVOKE}))
    cancel = SimNode(class_name="Button", name="Cancel", automation_id="CancelButton", patterns=frozenset({INVOKE}))
    return SimNode(class_name=class_name, name="Windows Security").add(scroll, ok, cancel)


class SimConnector(TreeAccessor):
    """In-memory accessibility tree that records every action issued against it."""

    name = "sim"

    def __init__(self, desktop: Optional[SimNode] = None) -> None:
        self.desktop = desktop or SimNode(class_name="#32769", name="Desktop")
        self.actions: List[Dict[str, Any]] = []
        self._lock = threading.RLock()

    def _check(self, node: SimNode) -> SimNode:
        if node.broken:
            raise InteropFailure(f"element {node.name or node.class_name!r} is not available")
        return node

    def _record(self, action: str, node: SimNode) -> None:
        with self._lock:
            self.actions.append({"action": action, "name": node.name, "automation_id": node.automation_id})

    def root(self) -> Node:
        return self.desktop

    def get_children(self, node: Node) -> List[Node]:
        return list(self._check(node).children)

    def get_property(self, node: Node, prop: Property) -> str:
        node = self._check(node)
        if prop is Property.CLASS_NAME:
            return node.class_name
        if prop is Property.NAME:
            return node.name
        return node.automation_id

    def select(self, node: Node) -> None:
        if SELECTION_ITEM not in self._check(node).patterns:
            raise InteropFailure(f"{node.name!r} does not support SelectionItemPattern")
        self._record("select", node)

    def focus(self, node: Node) -> None:
        self._record("focus", self._check(node))

    def invoke(self, node: Node) -> None:
        if INVOKE not in self._check(node).patterns:
            raise InteropFailure(f"{node.name!r} does not support InvokePattern")
        self._record("invoke", node)

    def open_window(self, window: SimNode) -> SimNode:
        self.desktop.add(window)
        return window

    def close_window(self, window: SimNode) -> None:
        self.desktop.children.remove(window)
