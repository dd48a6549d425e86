from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from botocore.exceptions import ClientError

from .transport import OPERATIONS

type Responder = Callable[[dict[str, Any]], Mapping[str, Any]]
type RequestCheck = Mapping[str, Any] | Callable[[dict[str, Any]], None]

# boto3 method name -> wire operation name, as botocore reports it in errors
_API_NAMES = {name: "".join(part.title() for part in name.split("_")) for name in OPERATIONS}


class _Anything:
    def __repr__(self) -> str:  # pragma: no cover
        return "ANY"


ANY: Any = _Anything()


def client_error(code: str, message: str = "", *, operation: str = "Operation") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": message or code}}, operation)


def _mismatch(expected: Any, actual: Any, path: str) -> str | None:
    """First difference between a request template and the request, or None.

    Maps match as subsets; lists must match element by element.
    """
    if expected is ANY:
        return None

    if isinstance(expected, Mapping):
        if not isinstance(actual, Mapping):
            return f"{path}: expected a map, got {actual!r}"
        for name, value in expected.items():
            if name not in actual:
                return f"{path}: missing key {name!r}"
            found = _mismatch(value, actual[name], f"{path}.{name}")
            if found is not None:
                return found
        return None

    if isinstance(expected, list):
        if not isinstance(actual, list) or len(actual) != len(expected):
            return f"{path}: expected {expected!r}, got {actual!r}"
        for index, (want, got) in enumerate(zip(expected, actual, strict=True)):
            found = _mismatch(want, got, f"{path}[{index}]")
            if found is not None:
                return found
        return None

    if expected != actual:
        return f"{path}: expected {expected!r}, got {actual!r}"
    return None


def _split_batch_get(request: Mapping[str, Any], processed: int) -> dict[str, Any]:
    responses: dict[str, list[dict[str, Any]]] = {}
    unprocessed: dict[str, Any] = {}
    budget = processed
    for table, entry in request["RequestItems"].items():
        keys = list(entry["Keys"])
        done, rest = keys[:budget], keys[budget:]
        budget -= len(done)
        # a found item echoes its key
        responses[table] = [dict(key) for key in done]
        if rest:
            unprocessed[table] = {**entry, "Keys": rest}
    return {"Responses": responses, "UnprocessedKeys": unprocessed}


def _split_batch_write(request: Mapping[str, Any], processed: int) -> dict[str, Any]:
    unprocessed: dict[str, list[Any]] = {}
    budget = processed
    for table, writes in request["RequestItems"].items():
        rest = list(writes[budget:])
        budget = max(0, budget - len(writes))
        if rest:
            unprocessed[table] = rest
    return {"UnprocessedItems": unprocessed}


@dataclass(frozen=True)
class Reply:
    operation: str
    request: RequestCheck | None = None
    response: Mapping[str, Any] | Responder | None = None
    error: Exception | str | None = None


class FakeDynamoDBClient:
    """A scripted stand-in for the item operations of a boto3 DynamoDB client.

    Scripted replies are consumed in call order. A reply answers with a fixed
    response or a function of the request, or raises. An error given as a code
    string is raised as the ``ClientError`` botocore would raise for that call.
    """

    def __init__(self) -> None:
        self._replies: list[Reply] = []
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def expect(
        self,
        operation: str,
        request: RequestCheck | None = None,
        *,
        response: Mapping[str, Any] | Responder | None = None,
        error: Exception | str | None = None,
    ) -> None:
        if operation not in OPERATIONS:
            raise ValueError(f"not an item operation: {operation}")
        self._replies.append(Reply(operation, request, response, error))

    def expect_partial_batch(
        self,
        operation: str,
        *,
        processed: int,
        request: RequestCheck | None = None,
    ) -> None:
        """Handle the first ``processed`` requests of a batch and return the rest as unprocessed."""
        if operation == "batch_get_item":
            self.expect(operation, request, response=lambda req: _split_batch_get(req, processed))
        elif operation == "batch_write_item":
            self.expect(operation, request, response=lambda req: _split_batch_write(req, processed))
        else:
            raise ValueError(f"not a batch operation: {operation}")

    def assert_no_pending(self) -> None:
        if self._replies:
            raise AssertionError(f"pending scripted replies: {[r.operation for r in self._replies]}")

    def __getattr__(self, name: str) -> Callable[..., dict[str, Any]]:
        if name not in OPERATIONS:
            raise AttributeError(name)

        def call(**request: Any) -> dict[str, Any]:
            return self._answer(name, request)

        return call

    def _answer(self, operation: str, request: dict[str, Any]) -> dict[str, Any]:
        self.calls.append((operation, dict(request)))
        if not self._replies:
            raise AssertionError(f"unexpected call: {operation}")

        reply = self._replies.pop(0)
        if reply.operation != operation:
            raise AssertionError(f"expected {reply.operation}, got {operation}")

        if callable(reply.request):
            reply.request(request)
        elif reply.request is not None:
            problem = _mismatch(reply.request, request, operation)
            if problem is not None:
                raise AssertionError(problem)

        if isinstance(reply.error, str):
            raise client_error(reply.error, operation=_API_NAMES[operation])
        if reply.error is not None:
            raise reply.error

        if callable(reply.response):
            return dict(reply.response(request))
        return dict(reply.response or {})
