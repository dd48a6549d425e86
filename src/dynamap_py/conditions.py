from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any, Literal

from .attribute import Attribute, AttributeType, to_attribute
from .errors import ConstructionError

COMPARISON_OPERATORS: frozenset[str] = frozenset(
    {
        "EQ",
        "NE",
        "LE",
        "LT",
        "GE",
        "GT",
        "NOT_NULL",
        "NULL",
        "CONTAINS",
        "NOT_CONTAINS",
        "BEGINS_WITH",
        "IN",
        "BETWEEN",
    }
)

_VALUELESS_OPERATORS = frozenset({"NULL", "NOT_NULL"})

type UpdateVerb = Literal["PUT", "ADD", "DELETE"]

UPDATE_ACTIONS: frozenset[str] = frozenset({"PUT", "ADD", "DELETE"})


@dataclass(frozen=True, init=False)
class AttributeCondition:
    operator: str
    values: tuple[Attribute, ...]

    def __init__(self, operator: str, values: Any = None) -> None:
        op = str(operator).upper()
        if op not in COMPARISON_OPERATORS:
            raise ConstructionError(f"unsupported comparison operator: {operator}")

        if op == "BETWEEN":
            if not isinstance(values, (list, tuple)) or len(values) != 2:
                raise ConstructionError("BETWEEN requires exactly two values (low, high)")
            attrs = tuple(to_attribute(v) for v in values)
        elif op == "IN":
            if not isinstance(values, (list, tuple)) or not values:
                raise ConstructionError("IN requires a non-empty sequence of values")
            attrs = tuple(to_attribute(v) for v in values)
        elif op in _VALUELESS_OPERATORS:
            if values is not None:
                raise ConstructionError(f"{op} does not take a value")
            attrs = ()
        else:
            if values is None:
                raise ConstructionError(f"{op} requires one value")
            attrs = (to_attribute(values),)

        object.__setattr__(self, "operator", op)
        object.__setattr__(self, "values", attrs)

    def to_wire(self) -> dict[str, Any]:
        out: dict[str, Any] = {"ComparisonOperator": self.operator}
        if self.operator not in _VALUELESS_OPERATORS:
            out["AttributeValueList"] = [attr.to_wire() for attr in self.values]
        return out

    @staticmethod
    def eq(value: Any) -> AttributeCondition:
        return AttributeCondition("EQ", value)

    @staticmethod
    def ne(value: Any) -> AttributeCondition:
        return AttributeCondition("NE", value)

    @staticmethod
    def lt(value: Any) -> AttributeCondition:
        return AttributeCondition("LT", value)

    @staticmethod
    def lte(value: Any) -> AttributeCondition:
        return AttributeCondition("LE", value)

    @staticmethod
    def gt(value: Any) -> AttributeCondition:
        return AttributeCondition("GT", value)

    @staticmethod
    def gte(value: Any) -> AttributeCondition:
        return AttributeCondition("GE", value)

    @staticmethod
    def between(low: Any, high: Any) -> AttributeCondition:
        return AttributeCondition("BETWEEN", (low, high))

    @staticmethod
    def begins_with(prefix: Any) -> AttributeCondition:
        return AttributeCondition("BEGINS_WITH", prefix)

    @staticmethod
    def contains(value: Any) -> AttributeCondition:
        return AttributeCondition("CONTAINS", value)

    @staticmethod
    def not_contains(value: Any) -> AttributeCondition:
        return AttributeCondition("NOT_CONTAINS", value)

    @staticmethod
    def in_(values: list[Any]) -> AttributeCondition:
        return AttributeCondition("IN", list(values))

    @staticmethod
    def null() -> AttributeCondition:
        return AttributeCondition("NULL")

    @staticmethod
    def not_null() -> AttributeCondition:
        return AttributeCondition("NOT_NULL")


@dataclass(frozen=True, init=False)
class ExpectedAttribute:
    """Either an existence check or an equality check, never both."""

    exists: bool | None
    value: Attribute | None

    def __init__(self, value: Any, type: AttributeType | None = None) -> None:
        if value is None:
            raise ConstructionError("expected attribute needs an existence flag or a value")

        if isinstance(value, bool):
            if type is not None:
                raise ConstructionError("an existence check does not take a type")
            object.__setattr__(self, "exists", value)
            object.__setattr__(self, "value", None)
        else:
            object.__setattr__(self, "exists", None)
            object.__setattr__(self, "value", to_attribute(value, type))

    def to_wire(self) -> dict[str, Any]:
        if self.value is not None:
            return {"Value": self.value.to_wire()}
        return {"Exists": self.exists}


@dataclass(frozen=True, init=False)
class UpdateAction:
    action: UpdateVerb
    value: Attribute | None

    def __init__(self, action: str, value: Any = None, type: AttributeType | None = None) -> None:
        verb = str(action).upper()
        if verb not in UPDATE_ACTIONS:
            raise ConstructionError(f"unsupported update action: {action}")
        if value is None and verb != "DELETE":
            raise ConstructionError(f"{verb} requires a value")

        object.__setattr__(self, "action", verb)
        object.__setattr__(self, "value", to_attribute(value, type) if value is not None else None)

    def to_wire(self) -> dict[str, Any]:
        out: dict[str, Any] = {"Action": self.action}
        if self.value is not None:
            out["Value"] = self.value.to_wire()
        return out


class _NamedConditions[V]:
    def __init__(self) -> None:
        self._entries: dict[str, V] = {}

    def get(self, name: str) -> V | None:
        return self._entries.get(name)

    def remove(self, name: str) -> None:
        self._entries.pop(name, None)

    def items(self) -> Iterator[tuple[str, V]]:
        return iter(self._entries.items())

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def to_wire(self) -> dict[str, Any]:
        return {name: entry.to_wire() for name, entry in self._entries.items()}  # type: ignore[attr-defined]


class Expected(_NamedConditions[ExpectedAttribute]):
    """Conjunctive preconditions for a conditional write."""

    def set(self, name: str, value: Any, type: AttributeType | None = None) -> Expected:
        if isinstance(value, ExpectedAttribute):
            if type is not None:
                raise ConstructionError("type is not allowed with an ExpectedAttribute")
            self._entries[name] = value
        else:
            self._entries[name] = ExpectedAttribute(value, type)
        return self


class AttributeUpdates(_NamedConditions[UpdateAction]):
    def set(self, name: str, action: UpdateAction) -> AttributeUpdates:
        self._entries[name] = action
        return self

    def put(self, name: str, value: Any, type: AttributeType | None = None) -> AttributeUpdates:
        return self.set(name, UpdateAction("PUT", value, type))

    def add(self, name: str, value: Any, type: AttributeType | None = None) -> AttributeUpdates:
        return self.set(name, UpdateAction("ADD", value, type))

    def delete(self, name: str, value: Any = None, type: AttributeType | None = None) -> AttributeUpdates:
        return self.set(name, UpdateAction("DELETE", value, type))
