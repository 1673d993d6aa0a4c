from __future__ import annotations

import functools
from typing import Any, Callable, ContextManager, Hashable, List, Optional, Tuple, Type, TypeVar

from ..conditions import Condition, Property
from ..errors import InteropFailure
from .base import Node, TreeAccessor

T = TypeVar("T")


def _interop(fn: Callable[..., T]) -> Callable[..., T]:
    @functools.wraps(fn)
    def wrapper(self: "WindowsConnector", *args: Any, **kwargs: Any) -> T:
        try:
            return fn(self, *args, **kwargs)
        except self.com_errors as e:
            raise InteropFailure(f"UI Automation call {fn.__name__} failed: {e}") from e
    return wrapper


class WindowsConnector(TreeAccessor):
    name = "windows"

    def __init__(self, uia: Any = None, com_errors: Optional[Tuple[Type[BaseException], ...]] = None) -> None:
        if uia is None:
            try:
                import uiautomation as uia  # type: ignore
            except Exception as e:  # noqa: BLE001
                raise RuntimeError("uiautomation package required on Windows. Install with `pip install uiautomation`.") from e
        if com_errors is None:
            import comtypes  # type: ignore
            com_errors = (comtypes.COMError,)
        self.uia = uia
        self.com_errors = com_errors

    @_interop
    def root(self) -> Node:
        return self.uia.GetRootControl()

    @_interop
    def get_children(self, node: Node) -> List[Node]:
        return list(node.GetChildren())

    @_interop
    def get_property(self, node: Node, prop: Property) -> str:
        return getattr(node, prop.value) or ""

    @_interop
    def find_first_descendant(self, node: Node, condition: Condition) -> Optional[Node]:
        for ctrl, _depth in self.uia.WalkControl(node, includeTop=False):
            if condition.matches(self, ctrl):
                return ctrl
        return None

    @_interop
    def select(self, node: Node) -> None:
        pattern = node.GetPattern(self.uia.PatternId.SelectionItemPattern)
        if pattern is None:
            raise InteropFailure(f"{node.Name!r} does not support SelectionItemPattern")
        pattern.Select()

    @_interop
    def focus(self, node: Node) -> None:
        node.SetFocus()

    @_interop
    def invoke(self, node: Node) -> None:
        pattern = node.GetPattern(self.uia.PatternId.InvokePattern)
        if pattern is None:
            raise InteropFailure(f"{node.Name!r} does not support InvokePattern")
        pattern.Invoke()

    @_interop
    def window_key(self, node: Node) -> Hashable:
        return node.NativeWindowHandle or tuple(node.GetRuntimeId())

    def thread_scope(self) -> ContextManager[Any]:
        return self.uia.UIAutomationInitializerInThread()
