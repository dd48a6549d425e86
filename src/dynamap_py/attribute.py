from __future__ import annotations

import math
import re
from collections.abc import Iterator
from dataclasses import dataclass
from decimal import Decimal, DecimalException
from typing import Any, Literal

from boto3.dynamodb.types import DYNAMODB_CONTEXT

from .errors import AttributeTypeError, NotIterableError

type AttributeType = Literal["S", "N", "SS", "NS"]

STRING: AttributeType = "S"
NUMBER: AttributeType = "N"
STRING_SET: AttributeType = "SS"
NUMBER_SET: AttributeType = "NS"

ATTRIBUTE_TYPES: frozenset[str] = frozenset({STRING, NUMBER, STRING_SET, NUMBER_SET})

_NUMERIC_STRING = re.compile(r"\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?\s*", re.ASCII)
_SET_INPUTS = (list, tuple, set, frozenset)


def is_numeric(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    if isinstance(value, float):
        return math.isfinite(value)
    if isinstance(value, Decimal):
        return value.is_finite()
    if isinstance(value, str):
        return _NUMERIC_STRING.fullmatch(value) is not None
    return False


def canonical_number(value: Any) -> Decimal:
    if not is_numeric(value):
        raise AttributeTypeError(f"not a number: {value!r}")

    raw = value.strip() if isinstance(value, str) else str(value)
    try:
        number = DYNAMODB_CONTEXT.create_decimal(raw)
        if number.is_zero():
            return Decimal(0)
        return number.normalize(DYNAMODB_CONTEXT)
    except DecimalException as err:
        raise AttributeTypeError(f"number out of range: {value!r}") from err


def render_number(number: Decimal) -> str:
    return format(number, "f")


def _detect_type(value: Any) -> AttributeType:
    if isinstance(value, _SET_INPUTS):
        if all(is_numeric(member) for member in value):
            return NUMBER_SET
        return STRING_SET
    if is_numeric(value):
        return NUMBER
    return STRING


def _to_string(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise AttributeTypeError(f"unsupported string value: {type(value).__name__}")
    if not is_numeric(value):
        raise AttributeTypeError(f"non-finite numbers are not supported: {value!r}")
    return str(value)


@dataclass(frozen=True, init=False)
class Attribute:
    """A typed attribute value ready for the wire.

    Scalars hold a ``str`` (``S``) or a canonical ``Decimal`` (``N``). Sets hold a
    sorted, de-duplicated tuple of members.
    """

    type: AttributeType
    value: str | Decimal | tuple[str, ...] | tuple[Decimal, ...]

    def __init__(self, value: Any, type: AttributeType | None = None) -> None:
        if value is None:
            raise AttributeTypeError("attribute value is required")
        if isinstance(value, Attribute):
            raise AttributeTypeError("value is already an Attribute; use to_attribute()")

        if type is None:
            type = _detect_type(value)

        if type in {STRING, NUMBER} and isinstance(value, _SET_INPUTS):
            raise AttributeTypeError(f"{type} attribute requires a scalar value")
        if type in {STRING_SET, NUMBER_SET} and not isinstance(value, _SET_INPUTS):
            raise AttributeTypeError(f"{type} attribute requires a list of values")

        normalized: str | Decimal | tuple[str, ...] | tuple[Decimal, ...]
        if type == STRING:
            normalized = _to_string(value)
        elif type == NUMBER:
            normalized = canonical_number(value)
        elif type == STRING_SET:
            if not value:
                raise AttributeTypeError("sets must not be empty")
            normalized = tuple(sorted({_to_string(member) for member in value}))
        elif type == NUMBER_SET:
            if not value:
                raise AttributeTypeError("sets must not be empty")
            normalized = tuple(sorted({canonical_number(member) for member in value}))
        else:
            raise AttributeTypeError(f"invalid attribute type: {type!r}")

        object.__setattr__(self, "type", type)
        object.__setattr__(self, "value", normalized)

    @staticmethod
    def from_wire(wire: Any) -> Attribute:
        if not isinstance(wire, dict) or len(wire) != 1:
            raise AttributeTypeError("attribute value must be a single-key map")
        ((tag, payload),) = wire.items()
        if tag not in ATTRIBUTE_TYPES:
            raise AttributeTypeError(f"unsupported attribute value type: {tag}")
        return Attribute(payload, tag)

    @property
    def is_set(self) -> bool:
        return self.type in {STRING_SET, NUMBER_SET}

    def to_wire(self) -> dict[str, Any]:
        if self.type == NUMBER:
            return {NUMBER: render_number(self.value)}  # type: ignore[arg-type]
        if self.type == NUMBER_SET:
            return {NUMBER_SET: [render_number(v) for v in self.value]}  # type: ignore[arg-type]
        if self.type == STRING_SET:
            return {STRING_SET: list(self.value)}
        return {STRING: self.value}

    def __iter__(self) -> Iterator[Any]:
        if not self.is_set:
            raise NotIterableError("this attribute is not a set of values")
        return iter(self.value)  # type: ignore[arg-type]

    def __str__(self) -> str:
        if self.type == NUMBER_SET:
            return ",".join(render_number(v) for v in self.value)  # type: ignore[arg-type]
        if self.type == STRING_SET:
            return ",".join(self.value)  # type: ignore[arg-type]
        if self.type == NUMBER:
            return render_number(self.value)  # type: ignore[arg-type]
        return str(self.value)


def to_attribute(value: Any, type: AttributeType | None = None) -> Attribute:
    if isinstance(value, Attribute):
        if type is not None and type != value.type:
            raise AttributeTypeError(f"attribute is {value.type}, not {type}")
        return value
    return Attribute(value, type)
