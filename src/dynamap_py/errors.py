from __future__ import annotations

from enum import Enum


class DynamapError(Exception):
    pass


class ConstructionError(DynamapError):
    pass


class AttributeTypeError(ConstructionError, TypeError):
    pass


class LimitExceededError(ConstructionError):
    def __init__(self, *, operation: str, limit: int) -> None:
        super().__init__(f"{operation}: can't hold more than {limit} requests")
        self.operation = operation
        self.limit = limit


class NotIterableError(DynamapError, TypeError):
    pass


class ErrorKind(Enum):
    CAPACITY_EXCEEDED = "capacity_exceeded"
    RESOURCE_NOT_FOUND = "resource_not_found"
    VALIDATION = "validation"
    CONDITION_FAILED = "condition_failed"
    SERVER = "server"


class BoundaryError(DynamapError):
    kind: ErrorKind = ErrorKind.SERVER

    def __init__(self, *, code: str, message: str) -> None:
        super().__init__(f"{code}: {message}")
        self.code = code
        self.message = message

    @property
    def recoverable(self) -> bool:
        return self.kind is ErrorKind.CAPACITY_EXCEEDED


class CapacityExceededError(BoundaryError):
    kind = ErrorKind.CAPACITY_EXCEEDED


class NotFoundError(BoundaryError):
    kind = ErrorKind.RESOURCE_NOT_FOUND


class ValidationError(BoundaryError):
    kind = ErrorKind.VALIDATION


class ConditionFailedError(BoundaryError):
    kind = ErrorKind.CONDITION_FAILED


class ServerError(BoundaryError):
    kind = ErrorKind.SERVER
