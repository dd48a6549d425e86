from __future__ import annotations

import copy
from collections.abc import Mapping, Sequence
from typing import Any

from .mocks import ANY, FakeDynamoDBClient, client_error


class PagingServer:
    """An in-memory, single-table stand-in for query and scan.

    Pages are cut deterministically by ``Limit`` and resumed from
    ``ExclusiveStartKey``. Only the hash key equality condition of a query is
    evaluated. Queue errors with ``fail_next`` to make the next calls raise.
    """

    def __init__(
        self,
        table: str,
        *,
        hash_name: str,
        range_name: str | None = None,
        items: Sequence[Mapping[str, Any]] = (),
    ) -> None:
        self.table = table
        self.hash_name = hash_name
        self.range_name = range_name
        self._items = [copy.deepcopy(dict(item)) for item in items]
        self._failures: list[Exception] = []
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def fail_next(self, error: Exception, *, times: int = 1) -> None:
        self._failures.extend([error] * times)

    def query(self, **req: Any) -> dict[str, Any]:
        self._enter("query", req)
        conditions = dict(req.get("KeyConditions") or {})
        hash_condition = conditions.pop(self.hash_name, None)
        if hash_condition is None or hash_condition.get("ComparisonOperator") != "EQ":
            raise AssertionError("query requires an EQ condition on the hash key")
        if conditions:
            raise AssertionError("PagingServer evaluates hash key conditions only")

        (expected,) = hash_condition["AttributeValueList"]
        matching = [item for item in self._items if item.get(self.hash_name) == expected]
        if req.get("ScanIndexForward") is False:
            matching.reverse()
        return self._page(matching, req)

    def scan(self, **req: Any) -> dict[str, Any]:
        self._enter("scan", req)
        return self._page(list(self._items), req)

    def _enter(self, method: str, req: dict[str, Any]) -> None:
        self.calls.append((method, copy.deepcopy(req)))
        if req.get("TableName") != self.table:
            raise client_error("ResourceNotFoundException", f"table not found: {req.get('TableName')}")
        if self._failures:
            raise self._failures.pop(0)

    def _key_of(self, item: Mapping[str, Any]) -> dict[str, Any]:
        key = {self.hash_name: item[self.hash_name]}
        if self.range_name is not None:
            key[self.range_name] = item[self.range_name]
        return key

    def _page(self, items: list[dict[str, Any]], req: Mapping[str, Any]) -> dict[str, Any]:
        start = 0
        start_key = req.get("ExclusiveStartKey")
        if start_key:
            positions = [i for i, item in enumerate(items) if self._key_of(item) == start_key]
            if not positions:
                raise client_error("ValidationException", "The provided starting key is invalid")
            start = positions[0] + 1

        limit = req.get("Limit")
        end = len(items) if limit is None else min(len(items), start + int(limit))
        page = items[start:end]

        out: dict[str, Any] = {"Count": len(page), "ScannedCount": len(page)}
        if req.get("Select") != "COUNT":
            out["Items"] = copy.deepcopy(page)
        if end < len(items) and page:
            out["LastEvaluatedKey"] = self._key_of(page[-1])
        return out


__all__ = [
    "ANY",
    "FakeDynamoDBClient",
    "PagingServer",
    "client_error",
]
