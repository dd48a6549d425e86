from __future__ import annotations

from decimal import Decimal

import pytest

from dynamap_py.attribute import Attribute
from dynamap_py.errors import ConstructionError
from dynamap_py.item import Item, Key


def test_item_renders_typed_attributes() -> None:
    item = Item("users", {"id": "a", "age": 30, "tags": ["x", "y"]})
    assert item.to_wire() == {
        "id": {"S": "a"},
        "age": {"N": "30"},
        "tags": {"SS": ["x", "y"]},
    }
    assert item.table == "users"
    assert item.value("age") == Decimal(30)
    assert item.get("missing") is None


def test_item_omits_empty_strings_on_the_wire() -> None:
    item = Item("users", {"id": "a", "note": ""})
    assert "note" in item
    assert item.to_wire() == {"id": {"S": "a"}}


def test_item_wire_round_trip() -> None:
    item = Item("users", {"id": "a", "scores": [3, 1], "ratio": "0.50"})
    assert Item.from_wire("users", item.to_wire()) == item


def test_item_equality_includes_table() -> None:
    assert Item("a", {"id": "x"}) != Item("b", {"id": "x"})
    assert Item("a", {"id": "x"}) == Item("a", {"id": "x"})


def test_item_set_remove_and_project() -> None:
    item = Item("users").set("id", "a").set("age", "30", "S").set("n", 1)
    assert item.get("age") == Attribute("30", "S")
    item.remove("n")
    item.remove("n")
    assert list(item) == ["id", "age"]
    assert len(item) == 2

    projected = item.project(["id", "missing"])
    assert projected.table == "users"
    assert dict(projected.items()) == {"id": Attribute("a")}


def test_key_to_wire() -> None:
    assert Key("id", "a").to_wire() == {"id": {"S": "a"}}
    assert Key("id", "a", "ts", 3).to_wire() == {"id": {"S": "a"}, "ts": {"N": "3"}}


def test_key_requires_range_name_and_value_together() -> None:
    with pytest.raises(ConstructionError, match="together"):
        Key("id", "a", "ts")
    with pytest.raises(ConstructionError, match="hash_name"):
        Key("", "a")


def test_key_from_wire() -> None:
    wire = {"id": {"S": "a"}, "ts": {"N": "3"}}
    assert Key.from_wire(wire, hash_name="id") == Key("id", "a", "ts", 3)
    assert Key.from_wire({"id": {"S": "a"}}, hash_name="id") == Key("id", "a")

    with pytest.raises(ConstructionError, match="missing hash"):
        Key.from_wire(wire, hash_name="pk")
    with pytest.raises(ConstructionError, match="more than"):
        Key.from_wire({**wire, "x": {"S": "b"}}, hash_name="id")
