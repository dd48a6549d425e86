from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from .attribute import Attribute
from .collection import BatchCollection, Collection, ConsumedUnits
from .conditions import AttributeCondition, AttributeUpdates
from .context import BatchGet, BatchWrite, CollectionContext, Delete, Get, Put, Query, Scan, Update
from .errors import ConstructionError
from .item import Item, Key
from .runtime import ClientSettings, create_dynamodb_client
from .transport import Transport

log = logging.getLogger(__name__)


class Connection:
    """Dispatches contexts through the transport and parses the responses.

    Consumed capacity is accumulated into ``consumed`` after every call.
    """

    def __init__(
        self,
        transport: Transport | None = None,
        *,
        client: Any | None = None,
        settings: ClientSettings | None = None,
    ) -> None:
        if transport is None:
            transport = Transport(client if client is not None else create_dynamodb_client(settings))
        self._transport = transport
        self.consumed = ConsumedUnits()

    @property
    def transport(self) -> Transport:
        return self._transport

    def get(self, table: str, key: Key, context: Get | None = None) -> Item | None:
        req = self._request(table, context)
        req["Key"] = key.to_wire()

        resp = self._transport.execute("get_item", req)
        self._record(resp, table=table, write=False)

        raw = resp.get("Item")
        if not raw:
            return None
        return Item.from_wire(table, raw)

    def put(self, item: Item, context: Put | None = None) -> dict[str, Attribute] | None:
        if not item.table:
            raise ConstructionError("item does not have a table defined")

        req = self._request(item.table, context)
        req["Item"] = item.to_wire()

        resp = self._transport.execute("put_item", req)
        self._record(resp, table=item.table, write=True)
        return _returned_attributes(resp)

    def update(
        self,
        table: str,
        key: Key,
        updates: AttributeUpdates,
        context: Update | None = None,
    ) -> dict[str, Attribute] | None:
        req = self._request(table, context)
        req["Key"] = key.to_wire()
        if len(updates):
            req["AttributeUpdates"] = updates.to_wire()

        resp = self._transport.execute("update_item", req)
        self._record(resp, table=table, write=True)
        return _returned_attributes(resp)

    def delete(self, table: str, key: Key, context: Delete | None = None) -> dict[str, Attribute] | None:
        req = self._request(table, context)
        req["Key"] = key.to_wire()

        resp = self._transport.execute("delete_item", req)
        self._record(resp, table=table, write=True)
        return _returned_attributes(resp)

    def query(
        self,
        table: str,
        hash_name: str,
        hash_value: Any,
        context: Query | None = None,
    ) -> Collection:
        if context is None:
            context = Query()

        req = self._request(table, context)
        key_conditions: dict[str, Any] = {hash_name: AttributeCondition.eq(hash_value).to_wire()}
        key_conditions.update(req.get("KeyConditions", {}))
        req["KeyConditions"] = key_conditions

        resp = self._transport.execute("query", req)
        self._record(resp, table=table, write=False)
        return _page(table, context, resp)

    def scan(self, table: str, context: Scan | None = None) -> Collection:
        if context is None:
            context = Scan()

        resp = self._transport.execute("scan", self._request(table, context))
        self._record(resp, table=table, write=False)
        return _page(table, context, resp)

    def batch_get(self, context: BatchGet) -> BatchCollection:
        if not len(context):
            raise ConstructionError("batch get requires at least one key")

        req = context.to_wire()
        req["ReturnConsumedCapacity"] = "TOTAL"

        resp = self._transport.execute("batch_get_item", req)
        self._record(resp, table="", write=False)

        result = BatchCollection(BatchGet.from_unprocessed(resp.get("UnprocessedKeys"), context))
        responses: Mapping[str, Any] = resp.get("Responses") or {}
        for table in dict.fromkeys([*context.tables(), *responses]):
            items = [Item.from_wire(table, raw) for raw in responses.get(table) or []]
            result.set_items(table, Collection(items))

        if result.more():
            log.debug("batch get left %d keys unprocessed", len(result.unprocessed or ()))
        return result

    def batch_write(self, context: BatchWrite) -> BatchWrite | None:
        if not len(context):
            raise ConstructionError("batch write requires at least one request")

        req = context.to_wire()
        req["ReturnConsumedCapacity"] = "TOTAL"

        resp = self._transport.execute("batch_write_item", req)
        self._record(resp, table="", write=True)

        unprocessed = BatchWrite.from_unprocessed(resp.get("UnprocessedItems"), context)
        if unprocessed is not None:
            log.debug("batch write left %d requests unprocessed", len(unprocessed))
        return unprocessed

    def _request(self, table: str, context: Get | Put | None) -> dict[str, Any]:
        if not table:
            raise ConstructionError("table name is required")
        req: dict[str, Any] = {"TableName": table}
        if context is not None:
            req.update(context.to_wire())
        req["ReturnConsumedCapacity"] = "TOTAL"
        return req

    def _record(self, resp: Mapping[str, Any], *, table: str, write: bool) -> None:
        consumed = resp.get("ConsumedCapacity")
        if not consumed:
            return

        entries = consumed if isinstance(consumed, list) else [consumed]
        for entry in entries:
            entry_table = str(entry.get("TableName") or table)
            units = entry.get("CapacityUnits", 0)
            if write:
                self.consumed.add_write(entry_table, units)
            else:
                self.consumed.add_read(entry_table, units)
            log.debug("%s consumed %s capacity units", entry_table, units)


def _returned_attributes(resp: Mapping[str, Any]) -> dict[str, Attribute] | None:
    raw = resp.get("Attributes")
    if not raw:
        return None
    return {name: Attribute.from_wire(value) for name, value in raw.items()}


def _page(table: str, context: CollectionContext, resp: Mapping[str, Any]) -> Collection:
    last_key = resp.get("LastEvaluatedKey") or None
    next_context = context.with_start_key(last_key) if last_key else None
    scanned = int(resp.get("ScannedCount") or 0)

    if context.count:
        return Collection.count_only(
            int(resp.get("Count") or 0),
            last_key=last_key,
            next_context=next_context,
            scanned_count=scanned,
        )

    items = [Item.from_wire(table, raw) for raw in resp.get("Items") or []]
    return Collection(items, last_key=last_key, next_context=next_context, scanned_count=scanned)
