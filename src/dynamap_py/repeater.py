from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from .collection import BatchCollection, Collection
from .context import BatchGet, BatchWrite, Query, Scan
from .errors import BoundaryError, ErrorKind

log = logging.getLogger(__name__)


class Repeater:
    """Drives a paged or partially failed operation to completion.

    Capacity-exceeded errors are retried with the same context, without a bound;
    pacing is left to the transport's own retry mode. Any other error aborts the
    whole operation and nothing merged so far is returned.
    """

    def __init__(self, connection: Any) -> None:
        self._connection = connection

    def query(
        self,
        table: str,
        hash_name: str,
        hash_value: Any,
        context: Query | None = None,
    ) -> Collection:
        return _drain(
            "query",
            lambda ctx: self._connection.query(table, hash_name, hash_value, ctx),
            context if context is not None else Query(),
            Collection(),
        )

    def scan(self, table: str, context: Scan | None = None) -> Collection:
        return _drain(
            "scan",
            lambda ctx: self._connection.scan(table, ctx),
            context if context is not None else Scan(),
            Collection(),
        )

    def batch_get(self, context: BatchGet) -> BatchCollection:
        return _drain("batch_get", self._connection.batch_get, context, BatchCollection())

    def batch_write(self, context: BatchWrite) -> None:
        pending: BatchWrite | None = context
        while pending is not None:
            try:
                pending = self._connection.batch_write(pending)
            except BoundaryError as err:
                if err.kind is not ErrorKind.CAPACITY_EXCEEDED:
                    raise
                log.debug("batch_write: %s, resubmitting %d requests", err.code, len(pending))
                continue

            if pending is not None:
                log.debug("batch_write: resubmitting %d unprocessed requests", len(pending))


def _drain[C, P: (Collection, BatchCollection)](
    operation: str,
    call: Callable[[C], P],
    context: C,
    accumulator: P,
) -> P:
    pages = 0
    while True:
        try:
            page = call(context)
        except BoundaryError as err:
            if err.kind is not ErrorKind.CAPACITY_EXCEEDED:
                raise
            log.debug("%s: %s, retrying page %d", operation, err.code, pages + 1)
            continue

        accumulator.merge(page)  # type: ignore[arg-type]
        pages += 1

        next_context = page.get_next_context()
        if not page.more() or next_context is None:
            log.debug("%s: done after %d pages", operation, pages)
            return accumulator
        context = next_context  # type: ignore[assignment]
