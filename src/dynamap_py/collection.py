from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import TYPE_CHECKING, Any

from .item import Item

if TYPE_CHECKING:
    from .context import BatchGet, CollectionContext


class Collection:
    """An ordered page of items plus the cursor needed to fetch the next one.

    ``len()`` is the logical count: the materialised items plus any total the
    server reported for a count-only request. The collection never issues calls
    itself; feed ``next_context`` back into the next call to continue.
    """

    def __init__(
        self,
        items: Iterable[Item] = (),
        *,
        last_key: Mapping[str, Any] | None = None,
        next_context: CollectionContext | None = None,
        scanned_count: int = 0,
    ) -> None:
        self._items: list[Item] = list(items)
        self._unmaterialized = 0
        self._last_key = dict(last_key) if last_key else None
        self._next_context = next_context if self._last_key else None
        self.scanned_count = scanned_count

    @staticmethod
    def count_only(
        count: int,
        *,
        last_key: Mapping[str, Any] | None = None,
        next_context: CollectionContext | None = None,
        scanned_count: int = 0,
    ) -> Collection:
        collection = Collection(last_key=last_key, next_context=next_context, scanned_count=scanned_count)
        collection._unmaterialized = int(count)
        return collection

    @property
    def last_key(self) -> dict[str, Any] | None:
        return dict(self._last_key) if self._last_key else None

    @property
    def next_context(self) -> CollectionContext | None:
        return self._next_context

    def get_next_context(self) -> CollectionContext | None:
        return self._next_context

    def more(self) -> bool:
        return bool(self._last_key)

    @property
    def items(self) -> list[Item]:
        return list(self._items)

    def add(self, item: Item) -> None:
        self._items.append(item)

    def shift(self) -> Item | None:
        if not self._items:
            return None
        return self._items.pop(0)

    def merge(self, other: Collection) -> Collection:
        self._items.extend(other._items)
        self._unmaterialized += other._unmaterialized
        self.scanned_count += other.scanned_count
        return self

    def __iter__(self) -> Iterator[Item]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items) + self._unmaterialized

    def __repr__(self) -> str:
        return f"Collection(count={len(self)}, more={self.more()})"


class BatchCollection:
    """Per-table collections returned by a batch get, plus the unprocessed keys."""

    def __init__(self, unprocessed: BatchGet | None = None) -> None:
        self._collections: dict[str, Collection] = {}
        self._unprocessed = unprocessed if unprocessed is not None and len(unprocessed) else None

    @property
    def unprocessed(self) -> BatchGet | None:
        return self._unprocessed

    @property
    def next_context(self) -> BatchGet | None:
        return self._unprocessed

    def get_next_context(self) -> BatchGet | None:
        return self._unprocessed

    def more(self) -> bool:
        return self._unprocessed is not None

    def set_items(self, table: str, collection: Collection) -> None:
        self._collections[table] = collection

    def get(self, table: str) -> Collection | None:
        return self._collections.get(table)

    def tables(self) -> list[str]:
        return list(self._collections)

    def merge(self, other: BatchCollection) -> BatchCollection:
        for table, collection in other._collections.items():
            existing = self._collections.get(table)
            if existing is None:
                self._collections[table] = Collection().merge(collection)
            else:
                existing.merge(collection)
        return self

    def __contains__(self, table: object) -> bool:
        return table in self._collections

    def __iter__(self) -> Iterator[str]:
        return iter(self._collections)

    def __len__(self) -> int:
        return sum(len(collection) for collection in self._collections.values())

    def __repr__(self) -> str:
        return f"BatchCollection(tables={self.tables()!r}, count={len(self)}, more={self.more()})"


class ConsumedUnits:
    def __init__(self) -> None:
        self.read = 0.0
        self.write = 0.0
        self.read_by_table: dict[str, float] = {}
        self.write_by_table: dict[str, float] = {}

    def add_read(self, table: str, units: Any) -> None:
        value = float(units or 0)
        self.read += value
        self.read_by_table[table] = self.read_by_table.get(table, 0.0) + value

    def add_write(self, table: str, units: Any) -> None:
        value = float(units or 0)
        self.write += value
        self.write_by_table[table] = self.write_by_table.get(table, 0.0) + value

    def reset(self) -> None:
        self.read = 0.0
        self.write = 0.0
        self.read_by_table.clear()
        self.write_by_table.clear()
