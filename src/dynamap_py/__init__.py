from __future__ import annotations

import json
import logging
import re
from importlib.resources import files

from .attribute import NUMBER, NUMBER_SET, STRING, STRING_SET, Attribute, AttributeType, to_attribute
from .collection import BatchCollection, Collection, ConsumedUnits
from .conditions import (
    AttributeCondition,
    AttributeUpdates,
    Expected,
    ExpectedAttribute,
    UpdateAction,
)
from .connection import Connection
from .context import BatchGet, BatchWrite, CollectionContext, Delete, Get, Put, Query, Scan, Update
from .errors import (
    AttributeTypeError,
    BoundaryError,
    CapacityExceededError,
    ConditionFailedError,
    ConstructionError,
    DynamapError,
    ErrorKind,
    LimitExceededError,
    NotFoundError,
    NotIterableError,
    ServerError,
    ValidationError,
)
from .item import Item, Key
from .repeater import Repeater
from .runtime import AwsCallMetric, ClientSettings, create_boto3_config, create_dynamodb_client
from .transport import Transport

logging.getLogger(__name__).addHandler(logging.NullHandler())


def _read_repo_version() -> str:
    try:
        data = json.loads(files(__package__).joinpath("version.json").read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return "0.0.0"

    version = data.get("version")
    return version if isinstance(version, str) and version else "0.0.0"


def _normalize_repo_version(repo_version: str) -> str:
    match = re.match(r"^(\d+\.\d+\.\d+)-rc\.?([0-9]+)$", repo_version)
    if match:
        return f"{match.group(1)}rc{match.group(2)}"
    return repo_version


__repo_version__ = _read_repo_version()
__version__ = _normalize_repo_version(__repo_version__)


__all__ = [
    "NUMBER",
    "NUMBER_SET",
    "STRING",
    "STRING_SET",
    "Attribute",
    "AttributeCondition",
    "AttributeType",
    "AttributeTypeError",
    "AttributeUpdates",
    "AwsCallMetric",
    "BatchCollection",
    "BatchGet",
    "BatchWrite",
    "BoundaryError",
    "CapacityExceededError",
    "ClientSettings",
    "Collection",
    "CollectionContext",
    "ConditionFailedError",
    "Connection",
    "ConstructionError",
    "ConsumedUnits",
    "Delete",
    "DynamapError",
    "ErrorKind",
    "Expected",
    "ExpectedAttribute",
    "Get",
    "Item",
    "Key",
    "LimitExceededError",
    "NotFoundError",
    "NotIterableError",
    "Put",
    "Query",
    "Repeater",
    "Scan",
    "ServerError",
    "Transport",
    "Update",
    "UpdateAction",
    "ValidationError",
    "__repo_version__",
    "__version__",
    "create_boto3_config",
    "create_dynamodb_client",
    "to_attribute",
]
