from __future__ import annotations

import os
import uuid

from dynamap_py import (
    BatchWrite,
    ClientSettings,
    Connection,
    Item,
    Key,
    Query,
    Repeater,
    create_dynamodb_client,
)


def main() -> None:
    settings = ClientSettings.from_env(
        {
            "DYNAMAP_REGION": os.environ.get("AWS_REGION", "us-east-1"),
            "DYNAMAP_ENDPOINT_URL": os.environ.get("DYNAMODB_ENDPOINT", "http://localhost:8000"),
        }
    )
    client = create_dynamodb_client(settings)
    table_name = f"dynamap_py_example_{uuid.uuid4().hex[:12]}"

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
        conn = Connection(client=client)
        repeater = Repeater(conn)

        batch = BatchWrite()
        for sk, value in (("001", 1), ("010", 10), ("100", 100)):
            batch.add_item_to_put(Item(table_name, {"pk": "A", "sk": sk, "value": value}))
        repeater.batch_write(batch)

        print("get:", conn.get(table_name, Key("pk", "A", "sk", "010")))

        notes = repeater.query(table_name, "pk", "A", Query.create("sk", "BEGINS_WITH", "0").set_limit(1))
        print("query begins_with('0'):", notes.items)
        print("consumed read units:", conn.consumed.read)
    finally:
        client.delete_table(TableName=table_name)


if __name__ == "__main__":
    main()
