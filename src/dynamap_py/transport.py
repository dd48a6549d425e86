from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from botocore.exceptions import ClientError

from .aws_errors import map_client_error

log = logging.getLogger(__name__)

OPERATIONS = frozenset(
    {
        "get_item",
        "put_item",
        "update_item",
        "delete_item",
        "query",
        "scan",
        "batch_get_item",
        "batch_write_item",
    }
)


class Transport:
    """The single point where requests leave the process.

    ``execute`` either returns the response graph or raises a classified
    ``BoundaryError``; botocore errors never escape unclassified.
    """

    def __init__(self, client: Any) -> None:
        self._client = client

    @property
    def client(self) -> Any:
        return self._client

    def execute(self, operation: str, request: Mapping[str, Any]) -> dict[str, Any]:
        if operation not in OPERATIONS:
            raise ValueError(f"unsupported operation: {operation}")

        log.debug("calling %s on %s", operation, request.get("TableName", "<batch>"))
        try:
            response = getattr(self._client, operation)(**request)
        except ClientError as err:
            mapped = map_client_error(err)
            log.debug("%s failed: %s (%s)", operation, mapped.code, mapped.kind.value)
            raise mapped from err

        return dict(response or {})
