from __future__ import annotations

import pytest
from botocore.exceptions import ClientError

from dynamap_py.aws_errors import map_client_error
from dynamap_py.errors import (
    BoundaryError,
    CapacityExceededError,
    ConditionFailedError,
    ErrorKind,
    NotFoundError,
    ServerError,
    ValidationError,
)
from dynamap_py.mocks import FakeDynamoDBClient, client_error
from dynamap_py.transport import Transport


@pytest.mark.parametrize(
    ("code", "error_cls", "kind"),
    [
        ("ProvisionedThroughputExceededException", CapacityExceededError, ErrorKind.CAPACITY_EXCEEDED),
        ("ThrottlingException", CapacityExceededError, ErrorKind.CAPACITY_EXCEEDED),
        ("RequestLimitExceeded", CapacityExceededError, ErrorKind.CAPACITY_EXCEEDED),
        ("ResourceNotFoundException", NotFoundError, ErrorKind.RESOURCE_NOT_FOUND),
        ("ValidationException", ValidationError, ErrorKind.VALIDATION),
        ("ConditionalCheckFailedException", ConditionFailedError, ErrorKind.CONDITION_FAILED),
        ("InternalServerError", ServerError, ErrorKind.SERVER),
    ],
)
def test_map_client_error(code: str, error_cls: type[BoundaryError], kind: ErrorKind) -> None:
    err = map_client_error(client_error(code, "details"))
    assert type(err) is error_cls
    assert err.kind is kind
    assert err.code == code
    assert err.message == "details"
    assert err.recoverable is (kind is ErrorKind.CAPACITY_EXCEEDED)


def test_map_client_error_without_code() -> None:
    err = map_client_error(ClientError({"Error": {}}, "GetItem"))
    assert isinstance(err, ServerError)
    assert err.code == "UnknownError"


def test_transport_classifies_client_errors_once() -> None:
    client = FakeDynamoDBClient()
    client.expect("get_item", error=client_error("ThrottlingException", "slow down"))

    with pytest.raises(CapacityExceededError, match="slow down") as excinfo:
        Transport(client).execute("get_item", {"TableName": "t", "Key": {}})

    assert isinstance(excinfo.value.__cause__, ClientError)
    client.assert_no_pending()


def test_transport_passes_requests_through() -> None:
    client = FakeDynamoDBClient()
    client.expect("scan", {"TableName": "t", "Limit": 2}, response={"Items": [], "Count": 0})

    transport = Transport(client)
    assert transport.execute("scan", {"TableName": "t", "Limit": 2}) == {"Items": [], "Count": 0}
    assert transport.client is client


def test_transport_rejects_unknown_operations() -> None:
    with pytest.raises(ValueError, match="unsupported operation"):
        Transport(FakeDynamoDBClient()).execute("create_table", {})


def test_non_client_errors_propagate_unchanged() -> None:
    client = FakeDynamoDBClient()
    client.expect("put_item", error=RuntimeError("socket closed"))

    with pytest.raises(RuntimeError, match="socket closed"):
        Transport(client).execute("put_item", {"TableName": "t", "Item": {}})
