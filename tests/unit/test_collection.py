from __future__ import annotations

from dynamap_py.collection import BatchCollection, Collection, ConsumedUnits
from dynamap_py.context import BatchGet, Scan
from dynamap_py.item import Item, Key


def _item(i: int) -> Item:
    return Item("t", {"id": str(i)})


def test_collection_without_cursor_is_exhausted() -> None:
    page = Collection([_item(1), _item(2)], last_key={}, next_context=Scan())
    assert len(page) == 2
    assert page.more() is False
    assert page.get_next_context() is None


def test_collection_with_cursor_exposes_next_context() -> None:
    nxt = Scan().with_start_key({"id": {"S": "2"}})
    page = Collection([_item(1)], last_key={"id": {"S": "2"}}, next_context=nxt)
    assert page.more() is True
    assert page.next_context is nxt
    assert page.last_key == {"id": {"S": "2"}}


def test_shift_and_add() -> None:
    page = Collection([_item(1)])
    page.add(_item(2))
    assert page.shift() == _item(1)
    assert page.shift() == _item(2)
    assert page.shift() is None


def test_merge_appends_and_keeps_own_cursor() -> None:
    first = Collection([_item(1)], last_key={"id": {"S": "1"}}, next_context=Scan(), scanned_count=2)
    second = Collection([_item(2)], scanned_count=3)

    assert first.merge(second) is first
    assert [i.value("id") for i in first] == ["1", "2"]
    assert first.scanned_count == 5
    assert first.more() is True


def test_count_only_collections_sum() -> None:
    total = Collection.count_only(7)
    total.merge(Collection.count_only(5))
    assert len(total) == 12
    assert total.items == []


def test_batch_collection_merges_per_table() -> None:
    acc = BatchCollection()
    page = BatchCollection(BatchGet().add_key("t", Key("id", "9")))
    page.set_items("t", Collection([_item(1)]))
    page.set_items("u", Collection())
    assert page.more() is True

    acc.merge(page)
    later = BatchCollection()
    later.set_items("t", Collection([_item(2)]))
    acc.merge(later)

    assert acc.more() is False
    assert list(acc) == ["t", "u"]
    assert "u" in acc
    assert len(acc) == 2
    assert acc.get("t") is not None and len(acc.get("t")) == 2  # type: ignore[arg-type]
    assert BatchCollection(BatchGet()).more() is False


def test_consumed_units_accumulate_and_reset() -> None:
    units = ConsumedUnits()
    units.add_read("a", 1.5)
    units.add_read("a", 1)
    units.add_write("b", None)
    units.add_write("b", 2)
    assert units.read == 2.5
    assert units.read_by_table == {"a": 2.5}
    assert units.write_by_table == {"b": 2.0}

    units.reset()
    assert units.read == 0.0
    assert units.write_by_table == {}
