"""Per-call option builders.

Each context accumulates the options of one call and renders them with
``to_wire()``. Contexts are mutable and not thread-safe: build one per call and
do not share it between concurrent operations.
"""

from __future__ import annotations

import copy
from collections.abc import Iterator, Mapping, Sequence
from typing import Any, Literal, Self

from .conditions import AttributeCondition, Expected
from .errors import ConstructionError, LimitExceededError
from .item import Item, Key

type ReturnValues = Literal["NONE", "ALL_OLD", "ALL_NEW", "UPDATED_OLD", "UPDATED_NEW"]

MAX_BATCH_GET_KEYS = 100
MAX_BATCH_WRITE_REQUESTS = 25


def _attribute_names(names: Sequence[str]) -> list[str]:
    if isinstance(names, str) or not names:
        raise ConstructionError("attributes to get must be a non-empty list of names")
    if not all(isinstance(name, str) and name for name in names):
        raise ConstructionError("attribute names must be non-empty strings")
    return list(names)


class Get:
    def __init__(self) -> None:
        self._attributes_to_get: list[str] | None = None
        self._consistent_read: bool | None = None

    @property
    def attributes_to_get(self) -> list[str] | None:
        return list(self._attributes_to_get) if self._attributes_to_get is not None else None

    @property
    def consistent_read(self) -> bool | None:
        return self._consistent_read

    def set_attributes_to_get(self, names: Sequence[str]) -> Self:
        self._attributes_to_get = _attribute_names(names)
        return self

    def set_consistent_read(self, consistent_read: bool) -> Self:
        self._consistent_read = bool(consistent_read)
        return self

    def to_wire(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self._attributes_to_get is not None:
            out["AttributesToGet"] = list(self._attributes_to_get)
        if self._consistent_read is not None:
            out["ConsistentRead"] = self._consistent_read
        return out


class CollectionContext(Get):
    """Options shared by Query and Scan, including the pagination cursor."""

    def __init__(self) -> None:
        super().__init__()
        self._limit: int | None = None
        self._count: bool | None = None
        self._exclusive_start_key: dict[str, Any] | None = None

    @property
    def limit(self) -> int | None:
        return self._limit

    @property
    def count(self) -> bool:
        return bool(self._count)

    @property
    def exclusive_start_key(self) -> dict[str, Any] | None:
        return copy.deepcopy(self._exclusive_start_key)

    def set_limit(self, limit: int) -> Self:
        if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
            raise ConstructionError("limit must be > 0")
        self._limit = limit
        return self

    def set_count(self, count: bool) -> Self:
        self._count = bool(count)
        return self

    def set_exclusive_start_key(self, key: Mapping[str, Any] | None) -> Self:
        self._exclusive_start_key = copy.deepcopy(dict(key)) if key else None
        return self

    def with_start_key(self, key: Mapping[str, Any]) -> Self:
        if not key:
            raise ConstructionError("a continuation key is required")
        clone = copy.deepcopy(self)
        clone._exclusive_start_key = copy.deepcopy(dict(key))
        return clone

    def to_wire(self) -> dict[str, Any]:
        out = super().to_wire()
        if self._count:
            out["Select"] = "COUNT"
        if self._limit is not None:
            out["Limit"] = self._limit
        if self._exclusive_start_key is not None:
            out["ExclusiveStartKey"] = copy.deepcopy(self._exclusive_start_key)
        return out


class Query(CollectionContext):
    def __init__(self) -> None:
        super().__init__()
        self._range_condition: tuple[str, AttributeCondition] | None = None
        self._scan_index_forward: bool | None = None

    @property
    def range_condition(self) -> tuple[str, AttributeCondition] | None:
        return self._range_condition

    def set_range_condition(self, name: str, operator: str, values: Any = None) -> Self:
        if not name:
            raise ConstructionError("range key name is required")
        self._range_condition = (name, AttributeCondition(operator, values))
        return self

    def set_scan_index_forward(self, scan_index_forward: bool) -> Self:
        self._scan_index_forward = bool(scan_index_forward)
        return self

    def to_wire(self) -> dict[str, Any]:
        out = super().to_wire()
        if self._range_condition is not None:
            name, condition = self._range_condition
            out["KeyConditions"] = {name: condition.to_wire()}
        if self._scan_index_forward is not None:
            out["ScanIndexForward"] = self._scan_index_forward
        return out

    @staticmethod
    def create(name: str, operator: str, values: Any = None) -> Query:
        return Query().set_range_condition(name, operator, values)


class Scan(CollectionContext):
    def __init__(self) -> None:
        super().__init__()
        self._filters: dict[str, AttributeCondition] = {}

    @property
    def filters(self) -> dict[str, AttributeCondition]:
        return dict(self._filters)

    def add_filter(self, name: str, operator: str, values: Any = None) -> Self:
        if not name:
            raise ConstructionError("filter attribute name is required")
        self._filters[name] = AttributeCondition(operator, values)
        return self

    def set_consistent_read(self, consistent_read: bool) -> Self:
        raise ConstructionError("scan does not support consistent read")

    def to_wire(self) -> dict[str, Any]:
        out = super().to_wire()
        if self._filters:
            out["ScanFilter"] = {name: cond.to_wire() for name, cond in self._filters.items()}
        return out


class Put:
    RETURN_VALUES: frozenset[str] = frozenset({"NONE", "ALL_OLD"})

    def __init__(self) -> None:
        self._expected: Expected | None = None
        self._return_values: ReturnValues | None = None

    @property
    def expected(self) -> Expected | None:
        return self._expected

    @property
    def return_values(self) -> ReturnValues | None:
        return self._return_values

    def set_expected(self, expected: Expected) -> Self:
        if not isinstance(expected, Expected):
            raise ConstructionError("expected must be an Expected instance")
        self._expected = expected
        return self

    def set_return_values(self, return_values: ReturnValues) -> Self:
        if return_values not in self.RETURN_VALUES:
            raise ConstructionError(
                f"{type(self).__name__} does not support ReturnValues={return_values!r}"
            )
        self._return_values = return_values
        return self

    def to_wire(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self._expected is not None and len(self._expected):
            out["Expected"] = self._expected.to_wire()
        if self._return_values is not None:
            out["ReturnValues"] = self._return_values
        return out


class Update(Put):
    RETURN_VALUES = frozenset({"NONE", "ALL_OLD", "ALL_NEW", "UPDATED_OLD", "UPDATED_NEW"})


class Delete(Put):
    pass


class BatchGet:
    def __init__(self) -> None:
        self._keys: dict[str, list[Key]] = {}
        self._attributes_to_get: dict[str, list[str]] = {}

    def add_key(self, table: str, key: Key) -> Self:
        if not table:
            raise ConstructionError("table name is required")
        if not isinstance(key, Key):
            raise ConstructionError("key must be a Key instance")
        if len(self) >= MAX_BATCH_GET_KEYS:
            raise LimitExceededError(operation="batch_get", limit=MAX_BATCH_GET_KEYS)

        self._keys.setdefault(table, []).append(key)
        return self

    def set_attributes_to_get(self, table: str, names: Sequence[str]) -> Self:
        self._attributes_to_get[table] = _attribute_names(names)
        return self

    def tables(self) -> list[str]:
        return list(self._keys)

    def keys(self, table: str) -> list[Key]:
        return list(self._keys.get(table, []))

    def attributes_to_get(self, table: str) -> list[str] | None:
        names = self._attributes_to_get.get(table)
        return list(names) if names is not None else None

    def hash_name(self, table: str) -> str:
        keys = self._keys.get(table)
        if not keys:
            raise ConstructionError(f"no keys requested for table: {table}")
        return keys[0].hash_name

    def __len__(self) -> int:
        return sum(len(keys) for keys in self._keys.values())

    def __iter__(self) -> Iterator[tuple[str, Key]]:
        for table, keys in self._keys.items():
            for key in keys:
                yield table, key

    def to_wire(self) -> dict[str, Any]:
        request_items: dict[str, Any] = {}
        for table, keys in self._keys.items():
            request: dict[str, Any] = {"Keys": [key.to_wire() for key in keys]}
            names = self._attributes_to_get.get(table)
            if names is not None:
                request["AttributesToGet"] = list(names)
            request_items[table] = request
        return {"RequestItems": request_items}

    @staticmethod
    def from_unprocessed(unprocessed: Mapping[str, Any] | None, origin: BatchGet) -> BatchGet | None:
        if not unprocessed:
            return None

        context = BatchGet()
        for table, request in unprocessed.items():
            hash_name = origin.hash_name(table)
            for wire_key in request.get("Keys") or []:
                context.add_key(table, Key.from_wire(wire_key, hash_name=hash_name))
            names = request.get("AttributesToGet") or origin.attributes_to_get(table)
            if names:
                context.set_attributes_to_get(table, names)

        return context if len(context) else None


class BatchWrite:
    def __init__(self) -> None:
        self._puts: list[Item] = []
        self._deletes: list[tuple[str, Key]] = []
        self._order: list[tuple[str, int]] = []

    def add_item_to_put(self, item: Item) -> Self:
        if not isinstance(item, Item):
            raise ConstructionError("item must be an Item instance")
        if not item.table:
            raise ConstructionError("item does not have a table defined")
        self._check_capacity()

        self._order.append(("put", len(self._puts)))
        self._puts.append(item)
        return self

    def add_key_to_delete(self, table: str, key: Key) -> Self:
        if not table:
            raise ConstructionError("table name is required")
        if not isinstance(key, Key):
            raise ConstructionError("key must be a Key instance")
        self._check_capacity()

        self._order.append(("delete", len(self._deletes)))
        self._deletes.append((table, key))
        return self

    def _check_capacity(self) -> None:
        if len(self) >= MAX_BATCH_WRITE_REQUESTS:
            raise LimitExceededError(operation="batch_write", limit=MAX_BATCH_WRITE_REQUESTS)

    def puts(self) -> list[Item]:
        return list(self._puts)

    def deletes(self) -> list[tuple[str, Key]]:
        return list(self._deletes)

    def hash_name(self, table: str) -> str:
        for delete_table, key in self._deletes:
            if delete_table == table:
                return key.hash_name
        raise ConstructionError(f"no keys to delete for table: {table}")

    def __len__(self) -> int:
        return len(self._puts) + len(self._deletes)

    def to_wire(self) -> dict[str, Any]:
        request_items: dict[str, list[dict[str, Any]]] = {}
        for kind, index in self._order:
            if kind == "put":
                item = self._puts[index]
                request_items.setdefault(item.table, []).append({"PutRequest": {"Item": item.to_wire()}})
            else:
                table, key = self._deletes[index]
                request_items.setdefault(table, []).append({"DeleteRequest": {"Key": key.to_wire()}})
        return {"RequestItems": request_items}

    @staticmethod
    def from_unprocessed(unprocessed: Mapping[str, Any] | None, origin: BatchWrite) -> BatchWrite | None:
        if not unprocessed:
            return None

        context = BatchWrite()
        for table, requests in unprocessed.items():
            for request in requests or []:
                if "PutRequest" in request:
                    context.add_item_to_put(Item.from_wire(table, request["PutRequest"]["Item"]))
                elif "DeleteRequest" in request:
                    key = Key.from_wire(request["DeleteRequest"]["Key"], hash_name=origin.hash_name(table))
                    context.add_key_to_delete(table, key)
                else:
                    raise ConstructionError(f"unsupported write request for table: {table}")

        return context if len(context) else None
