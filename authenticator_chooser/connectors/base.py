from __future__ import annotations

import contextlib
from typing import Any, ContextManager, Hashable, Iterator, List, Optional

from ..conditions import Condition, Property

Node = Any


class TreeAccessor:
    """Request/response view of an accessibility tree.

    Nodes are borrowed handles: every lookup resolves them afresh and callers
    must not keep them beyond the invocation that produced them. Any failure of
    the underlying platform call is raised as ``InteropFailure``.
    """

    name = "base"

    def root(self) -> Node:  # pragma: no cover - interface
        raise NotImplementedError

    def get_children(self, node: Node) -> List[Node]:  # pragma: no cover - interface
        raise NotImplementedError

    def get_property(self, node: Node, prop: Property) -> str:  # pragma: no cover - interface
        raise NotImplementedError

    def select(self, node: Node) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    def focus(self, node: Node) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    def invoke(self, node: Node) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    def window_key(self, node: Node) -> Hashable:
        return id(node)

    def thread_scope(self) -> ContextManager[Any]:
        return contextlib.nullcontext()

    def top_level_windows(self) -> List[Node]:
        return self.get_children(self.root())

    def find_first_child(self, node: Node, condition: Condition) -> Optional[Node]:
        for child in self.get_children(node):
            if condition.matches(self, child):
                return child
        return None

    def find_first_descendant(self, node: Node, condition: Condition) -> Optional[Node]:
        for descendant in self._walk(node):
            if condition.matches(self, descendant):
                return descendant
        return None

    def _walk(self, node: Node) -> Iterator[Node]:
        # Pre-order, same order as UIA FindFirst with TreeScope.Descendants
        stack = list(reversed(self.get_children(node)))
        while stack:
            current = stack.pop()
            yield current
            stack.extend(reversed(self.get_children(current)))
