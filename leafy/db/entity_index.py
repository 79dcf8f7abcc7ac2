"""
In-memory index of rows kept in sync with change events.

EntityIndex.apply is a pure reducer: applying the same set of events in any
order, any number of times, ends in the same state. That holds because

- a DELETE tombstones the id for good,
- an INSERT or UPDATE only wins over the stored row if its version
  (updated_at, else created_at) is strictly newer.
"""
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional

import pytz

from leafy.db.row_store import DELETE, ChangeEvent, RowStore, row_to_dict


def row_version(row: Mapping[str, Any]) -> Any:
    """
    Version stamp of a row: updated_at, else created_at.

    Naive datetimes (SQLite drops the offset on read) are taken as UTC so
    rows loaded from the database compare with rows from change events.
    """
    version = row.get("updated_at") or row.get("created_at")
    if isinstance(version, datetime) and version.tzinfo is None:
        return pytz.UTC.localize(version)
    return version


def _newer(incoming: Any, current: Any) -> bool:
    if current is None:
        return incoming is not None
    if incoming is None:
        return False
    return incoming > current


@dataclass(frozen=True)
class EntityIndex:
    """Immutable id -> row mapping with tombstones."""
    rows: Mapping[str, Mapping[str, Any]] = field(default_factory=dict)
    tombstones: frozenset = frozenset()

    def apply(self, event: ChangeEvent) -> "EntityIndex":
        row_id = event.row_id
        if row_id is None or row_id in self.tombstones:
            return self

        if event.kind == DELETE:
            rows = {k: v for k, v in self.rows.items() if k != row_id}
            return EntityIndex(rows=rows, tombstones=self.tombstones | {row_id})

        incoming = event.new or {}
        current = self.rows.get(row_id)
        if current is not None and not _newer(row_version(incoming), row_version(current)):
            return self

        rows = dict(self.rows)
        rows[row_id] = MappingProxyType(dict(incoming))
        return EntityIndex(rows=rows, tombstones=self.tombstones)

    def get(self, row_id: str) -> Optional[Mapping[str, Any]]:
        return self.rows.get(row_id)

    def __len__(self) -> int:
        return len(self.rows)

    def __contains__(self, row_id: object) -> bool:
        return row_id in self.rows


def build_index(rows: list[dict]) -> EntityIndex:
    """Index built from an initial fetch."""
    return EntityIndex(rows={row["id"]: MappingProxyType(dict(row)) for row in rows})


class LiveCollection:
    """
    A table's rows, loaded once and then kept current from the change feed.

    Args:
        store: RowStore used for the initial load and the subscription
        model: Mapped class to watch
        predicate: Optional filter applied when reading items (e.g. orders of one date)
    """

    def __init__(
        self,
        store: RowStore,
        model,
        predicate: Optional[Callable[[Mapping[str, Any]], bool]] = None,
    ):
        self.model = model
        self.predicate = predicate
        self.index = build_index([row_to_dict(r) for r in store.select(model)])
        self._unsubscribe = store.subscribe(model, self._on_change)

    def _on_change(self, event: ChangeEvent) -> None:
        self.index = self.index.apply(event)

    def items(self, sort_key: Optional[Callable[[Mapping[str, Any]], Any]] = None, reverse: bool = False) -> list:
        rows = [r for r in self.index.rows.values() if self.predicate is None or self.predicate(r)]
        if sort_key is not None:
            rows.sort(key=sort_key, reverse=reverse)
        return rows

    def close(self) -> None:
        self._unsubscribe()
