from __future__ import annotations

import os
import uuid
from collections.abc import Iterator

import pytest

from dynamap_py import (
    BatchGet,
    BatchWrite,
    ClientSettings,
    ConditionFailedError,
    Connection,
    Expected,
    Item,
    Key,
    Put,
    Repeater,
    Scan,
    create_dynamodb_client,
)

pytestmark = pytest.mark.skipif(
    not os.environ.get("DYNAMODB_ENDPOINT"), reason="DYNAMODB_ENDPOINT is not set"
)


@pytest.fixture
def table() -> Iterator[tuple[Connection, str]]:
    settings = ClientSettings(
        region=os.environ.get("AWS_REGION", "us-east-1"),
        endpoint_url=os.environ["DYNAMODB_ENDPOINT"],
    )
    client = create_dynamodb_client(settings)
    table_name = f"dynamap_py_smoke_{uuid.uuid4().hex[:12]}"
    client.create_table(
        TableName=table_name,
        KeySchema=[{"AttributeName": "pk", "KeyType": "HASH"}, {"AttributeName": "sk", "KeyType": "RANGE"}],
        AttributeDefinitions=[
            {"AttributeName": "pk", "AttributeType": "S"},
            {"AttributeName": "sk", "AttributeType": "S"},
        ],
        BillingMode="PAY_PER_REQUEST",
    )
    client.get_waiter("table_exists").wait(TableName=table_name)
    try:
        yield Connection(client=client), table_name
    finally:
        client.delete_table(TableName=table_name)


def test_put_get_delete(table: tuple[Connection, str]) -> None:
    conn, name = table
    item = Item(name, {"pk": "A", "sk": "B", "value": 1, "tags": ["x", "y"]})

    conn.put(item)
    assert conn.get(name, Key("pk", "A", "sk", "B")) == item

    with pytest.raises(ConditionFailedError):
        conn.put(item, Put().set_expected(Expected().set("pk", False)))

    conn.delete(name, Key("pk", "A", "sk", "B"))
    assert conn.get(name, Key("pk", "A", "sk", "B")) is None


def test_batches_and_paged_scan(table: tuple[Connection, str]) -> None:
    conn, name = table
    repeater = Repeater(conn)

    batch = BatchWrite()
    for i in range(5):
        batch.add_item_to_put(Item(name, {"pk": "A", "sk": f"{i:03d}"}))
    repeater.batch_write(batch)

    assert len(repeater.scan(name, Scan().set_limit(2))) == 5

    keys = BatchGet()
    for i in range(5):
        keys.add_key(name, Key("pk", "A", "sk", f"{i:03d}"))
    assert len(repeater.batch_get(keys)) == 5
