from __future__ import annotations

import pytest

from dynamap_py.conditions import (
    AttributeCondition,
    AttributeUpdates,
    Expected,
    ExpectedAttribute,
    UpdateAction,
)
from dynamap_py.errors import ConstructionError


def test_between_renders_two_values() -> None:
    cond = AttributeCondition("between", [1, 5])
    assert cond.to_wire() == {
        "ComparisonOperator": "BETWEEN",
        "AttributeValueList": [{"N": "1"}, {"N": "5"}],
    }
    assert AttributeCondition.between(1, 5) == cond


@pytest.mark.parametrize("values", [[1], [1, 2, 3], "ab", None])
def test_between_requires_exactly_two_values(values: object) -> None:
    with pytest.raises(ConstructionError, match="BETWEEN"):
        AttributeCondition("BETWEEN", values)


def test_single_value_operators() -> None:
    assert AttributeCondition.begins_with("ab").to_wire() == {
        "ComparisonOperator": "BEGINS_WITH",
        "AttributeValueList": [{"S": "ab"}],
    }
    assert AttributeCondition.gte(3).operator == "GE"
    with pytest.raises(ConstructionError, match="requires one value"):
        AttributeCondition("EQ")


def test_valueless_and_list_operators() -> None:
    assert AttributeCondition.null().to_wire() == {"ComparisonOperator": "NULL"}
    assert AttributeCondition.in_(["a", "b"]).to_wire()["AttributeValueList"] == [{"S": "a"}, {"S": "b"}]

    with pytest.raises(ConstructionError, match="does not take a value"):
        AttributeCondition("NOT_NULL", 1)
    with pytest.raises(ConstructionError, match="IN requires"):
        AttributeCondition("IN", [])
    with pytest.raises(ConstructionError, match="unsupported comparison operator"):
        AttributeCondition("LIKE", "a")


def test_expected_attribute_renders_exists_or_value() -> None:
    assert ExpectedAttribute(False).to_wire() == {"Exists": False}
    assert ExpectedAttribute("x").to_wire() == {"Value": {"S": "x"}}
    assert ExpectedAttribute(5, "S").to_wire() == {"Value": {"S": "5"}}

    with pytest.raises(ConstructionError):
        ExpectedAttribute(None)
    with pytest.raises(ConstructionError, match="does not take a type"):
        ExpectedAttribute(True, "S")


def test_expected_keeps_insertion_order() -> None:
    expected = Expected().set("b", False).set("a", 3).set("c", ExpectedAttribute(True))
    assert list(expected) == ["b", "a", "c"]
    assert expected.to_wire() == {
        "b": {"Exists": False},
        "a": {"Value": {"N": "3"}},
        "c": {"Exists": True},
    }

    expected.remove("a")
    assert "a" not in expected
    assert len(expected) == 2
    with pytest.raises(ConstructionError):
        Expected().set("x", ExpectedAttribute(True), "S")


def test_update_actions() -> None:
    assert UpdateAction("delete").to_wire() == {"Action": "DELETE"}
    assert UpdateAction("add", 1).to_wire() == {"Action": "ADD", "Value": {"N": "1"}}
    with pytest.raises(ConstructionError, match="PUT requires a value"):
        UpdateAction("put")
    with pytest.raises(ConstructionError, match="unsupported update action"):
        UpdateAction("REPLACE", 1)


def test_attribute_updates_helpers() -> None:
    updates = AttributeUpdates().put("name", "bob").add("tags", ["x"]).delete("old")
    assert updates.to_wire() == {
        "name": {"Action": "PUT", "Value": {"S": "bob"}},
        "tags": {"Action": "ADD", "Value": {"SS": ["x"]}},
        "old": {"Action": "DELETE"},
    }
    assert updates.get("old") == UpdateAction("DELETE")
