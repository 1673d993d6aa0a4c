from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Iterable, Tuple

if TYPE_CHECKING:
    from .connectors.base import TreeAccessor


class Property(enum.Enum):
    CLASS_NAME = "ClassName"
    NAME = "Name"
    AUTOMATION_ID = "AutomationId"


class Combinator(enum.Enum):
    AND = "and"
    OR = "or"


class Condition:
    def matches(self, accessor: "TreeAccessor", node: Any) -> bool:  # pragma: no cover - interface
        raise NotImplementedError


@dataclass(frozen=True)
class _ConstantCondition(Condition):
    value: bool

    def matches(self, accessor: "TreeAccessor", node: Any) -> bool:
        return self.value


TRUE_CONDITION: Condition = _ConstantCondition(True)
FALSE_CONDITION: Condition = _ConstantCondition(False)


@dataclass(frozen=True)
class PropertyCondition(Condition):
    property: Property
    value: str

    def matches(self, accessor: "TreeAccessor", node: Any) -> bool:
        return accessor.get_property(node, self.property) == self.value


@dataclass(frozen=True, init=False)
class AndCondition(Condition):
    conditions: Tuple[Condition, ...]

    def __init__(self, *conditions: Condition) -> None:
        if len(conditions) < 2:
            raise ValueError("AndCondition needs at least two conditions")
        object.__setattr__(self, "conditions", tuple(conditions))

    def matches(self, accessor: "TreeAccessor", node: Any) -> bool:
        return all(c.matches(accessor, node) for c in self.conditions)


@dataclass(frozen=True, init=False)
class OrCondition(Condition):
    conditions: Tuple[Condition, ...]

    def __init__(self, *conditions: Condition) -> None:
        if len(conditions) < 2:
            raise ValueError("OrCondition needs at least two conditions")
        object.__setattr__(self, "conditions", tuple(conditions))

    def matches(self, accessor: "TreeAccessor", node: Any) -> bool:
        return any(c.matches(accessor, node) for c in self.conditions)


def build_condition(values: Iterable[str], prop: Property, combinator: Combinator) -> Condition:
    """Combine one ``PropertyCondition`` per value without tripping the two-operand minimum.

    No values gives the identity of the combinator (TRUE for AND, FALSE for OR),
    a single value gives its property condition unwrapped.
    """
    conds = [PropertyCondition(prop, v) for v in values]
    if not conds:
        return TRUE_CONDITION if combinator is Combinator.AND else FALSE_CONDITION
    if len(conds) == 1:
        return conds[0]
    if combinator is Combinator.AND:
        return AndCondition(*conds)
    return OrCondition(*conds)
