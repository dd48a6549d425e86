from __future__ import annotations

from botocore.exceptions import ClientError

from .errors import (
    BoundaryError,
    CapacityExceededError,
    ConditionFailedError,
    NotFoundError,
    ServerError,
    ValidationError,
)

CAPACITY_ERROR_CODES = frozenset(
    {
        "ProvisionedThroughputExceededException",
        "ThrottlingException",
        "RequestLimitExceeded",
    }
)

_ERRORS_BY_CODE: dict[str, type[BoundaryError]] = {
    "ResourceNotFoundException": NotFoundError,
    "ValidationException": ValidationError,
    "ConditionalCheckFailedException": ConditionFailedError,
}


def map_client_error(err: ClientError) -> BoundaryError:
    code = str(err.response.get("Error", {}).get("Code", ""))
    message = str(err.response.get("Error", {}).get("Message", ""))

    if code in CAPACITY_ERROR_CODES:
        return CapacityExceededError(code=code, message=message)

    error_cls = _ERRORS_BY_CODE.get(code, ServerError)
    return error_cls(code=code or "UnknownError", message=message or str(err))
