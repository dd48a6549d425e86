from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any

from .attribute import STRING, Attribute, AttributeType, to_attribute
from .errors import ConstructionError


@dataclass(frozen=True, init=False)
class Key:
    hash_name: str
    hash: Attribute
    range_name: str | None
    range: Attribute | None

    def __init__(
        self,
        hash_name: str,
        hash: Any,
        range_name: str | None = None,
        range: Any | None = None,
    ) -> None:
        if not hash_name:
            raise ConstructionError("hash_name is required")
        if (range_name is None) != (range is None):
            raise ConstructionError("range_name and range must be provided together")

        object.__setattr__(self, "hash_name", hash_name)
        object.__setattr__(self, "hash", to_attribute(hash))
        object.__setattr__(self, "range_name", range_name)
        object.__setattr__(self, "range", to_attribute(range) if range is not None else None)

    def to_wire(self) -> dict[str, Any]:
        out: dict[str, Any] = {self.hash_name: self.hash.to_wire()}
        if self.range_name is not None and self.range is not None:
            out[self.range_name] = self.range.to_wire()
        return out

    @staticmethod
    def from_wire(wire: Mapping[str, Any], *, hash_name: str) -> Key:
        if hash_name not in wire:
            raise ConstructionError(f"key is missing hash element: {hash_name}")
        others = [name for name in wire if name != hash_name]
        if len(others) > 1:
            raise ConstructionError("key holds more than a hash and a range element")

        hash_attr = Attribute.from_wire(wire[hash_name])
        if not others:
            return Key(hash_name, hash_attr)
        (range_name,) = others
        return Key(hash_name, hash_attr, range_name, Attribute.from_wire(wire[range_name]))


class Item:
    """A table name plus its attributes, kept in insertion order."""

    def __init__(self, table: str, attributes: Mapping[str, Any] | None = None) -> None:
        self._table = table
        self._attributes: dict[str, Attribute] = {}
        for name, value in (attributes or {}).items():
            self.set(name, value)

    @property
    def table(self) -> str:
        return self._table

    def get(self, name: str) -> Attribute | None:
        return self._attributes.get(name)

    def value(self, name: str) -> Any:
        attr = self._attributes.get(name)
        return attr.value if attr is not None else None

    def set(self, name: str, value: Any, type: AttributeType | None = None) -> Item:
        self._attributes[name] = to_attribute(value, type)
        return self

    def remove(self, name: str) -> None:
        self._attributes.pop(name, None)

    def items(self) -> Iterator[tuple[str, Attribute]]:
        return iter(self._attributes.items())

    def project(self, names: Iterable[str]) -> Item:
        projected = Item(self._table)
        for name in names:
            attr = self._attributes.get(name)
            if attr is not None:
                projected._attributes[name] = attr
        return projected

    def to_wire(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for name, attr in self._attributes.items():
            # the store rejects empty strings
            if attr.type == STRING and attr.value == "":
                continue
            out[name] = attr.to_wire()
        return out

    @staticmethod
    def from_wire(table: str, wire: Mapping[str, Any]) -> Item:
        item = Item(table)
        for name, value in wire.items():
            item._attributes[name] = Attribute.from_wire(value)
        return item

    def __contains__(self, name: object) -> bool:
        return name in self._attributes

    def __iter__(self) -> Iterator[str]:
        return iter(self._attributes)

    def __len__(self) -> int:
        return len(self._attributes)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Item):
            return NotImplemented
        return self._table == other._table and self._attributes == other._attributes

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Item(table={self._table!r}, attributes={self._attributes!r})"
