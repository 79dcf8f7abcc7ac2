"""
Row store client over a SQLAlchemy session.

Services never touch the session directly: they query and mutate rows
through a RowStore, which

- re-raises database failures as RowStoreError carrying the database message,
- commits each mutation on its own unless inside ``transaction()``,
- records a ChangeEvent per inserted/updated/deleted row and publishes the
  events to the ChangeFeed only after the enclosing commit succeeds.
"""
import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Iterator, Optional, Sequence

from sqlalchemy import func, inspect, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from leafy.core.errors import RowStoreError

logger = logging.getLogger(__name__)

INSERT = "INSERT"
UPDATE = "UPDATE"
DELETE = "DELETE"
EVENT_KINDS = (INSERT, UPDATE, DELETE)


@dataclass(frozen=True)
class ChangeEvent:
    """A committed change to one row."""
    table: str
    kind: str  # INSERT, UPDATE, DELETE
    new: Optional[dict] = None
    old: Optional[dict] = None

    @property
    def row_id(self) -> Optional[str]:
        return (self.new or self.old or {}).get("id")


ChangeCallback = Callable[[ChangeEvent], None]


def row_to_dict(row: Any) -> dict:
    """Column values of a mapped instance, keyed by attribute name."""
    mapper = inspect(row).mapper
    return {attr.key: getattr(row, attr.key) for attr in mapper.column_attrs}


def _db_message(exc: SQLAlchemyError) -> str:
    return str(getattr(exc, "orig", None) or exc)


class ChangeFeed:
    """
    In-process change notification hub, shared by every RowStore.

    Subscribers register per table and optionally per event kind. Delivery
    is synchronous on the committing thread; a failing subscriber is logged
    and skipped.
    """

    def __init__(self):
        self._subscribers: dict[str, list[tuple[frozenset, ChangeCallback]]] = {}
        self._lock = threading.Lock()

    def subscribe(
        self,
        table: str,
        callback: ChangeCallback,
        events: Optional[Iterable[str]] = None,
    ) -> Callable[[], None]:
        """
        Register a callback for changes on a table.

        Returns:
            A function that removes the subscription.
        """
        kinds = frozenset(events) if events else frozenset(EVENT_KINDS)
        unknown = kinds - set(EVENT_KINDS)
        if unknown:
            raise ValueError(f"Unknown event kinds: {sorted(unknown)}")

        entry = (kinds, callback)
        with self._lock:
            self._subscribers.setdefault(table, []).append(entry)

        def unsubscribe() -> None:
            with self._lock:
                entries = self._subscribers.get(table, [])
                if entry in entries:
                    entries.remove(entry)

        return unsubscribe

    def publish(self, event: ChangeEvent) -> None:
        with self._lock:
            entries = list(self._subscribers.get(event.table, []))

        for kinds, callback in entries:
            if event.kind not in kinds:
                continue
            try:
                callback(event)
            except Exception:
                logger.exception(f"Change subscriber failed for {event.kind} on {event.table}")


change_feed = ChangeFeed()


class RowStore:
    """Filtered queries, mutations and change subscriptions over mapped tables."""

    def __init__(self, db: Session, feed: Optional[ChangeFeed] = None):
        self.db = db
        self.feed = feed or change_feed
        self._depth = 0
        self._pending: list[ChangeEvent] = []

    # ----- transactions -----

    @contextmanager
    def transaction(self) -> Iterator["RowStore"]:
        """
        Group mutations into one commit.

        Nested scopes join the outermost one; only the outermost scope
        commits or rolls back.
        """
        self._depth += 1
        try:
            yield self
        except BaseException:
            self._depth -= 1
            if self._depth == 0:
                self._rollback()
            raise

        self._depth -= 1
        if self._depth == 0:
            try:
                self.db.commit()
            except SQLAlchemyError as e:
                self._rollback()
                raise RowStoreError("transaction", _db_message(e)) from e
            self._publish_pending()

    @property
    def in_transaction(self) -> bool:
        return self._depth > 0

    # ----- reads -----

    def select(
        self,
        model,
        *criteria,
        order_by: Optional[Any] = None,
        limit: Optional[int] = None,
        for_update: bool = False,
    ) -> list:
        """Rows of ``model`` matching every criterion."""
        stmt = select(model)
        if criteria:
            stmt = stmt.where(*criteria)
        if order_by is not None:
            clauses = order_by if isinstance(order_by, (list, tuple)) else (order_by,)
            stmt = stmt.order_by(*clauses)
        if limit is not None:
            stmt = stmt.limit(limit)
        if for_update:
            stmt = stmt.with_for_update()

        return self._read(model, lambda: list(self.db.execute(stmt).scalars().all()))

    def first(self, model, *criteria, order_by: Optional[Any] = None, for_update: bool = False):
        rows = self.select(model, *criteria, order_by=order_by, limit=1, for_update=for_update)
        return rows[0] if rows else None

    def get(self, model, row_id: str):
        return self._read(model, lambda: self.db.get(model, row_id))

    def count(self, model, *criteria) -> int:
        stmt = select(func.count()).select_from(model)
        if criteria:
            stmt = stmt.where(*criteria)
        return self._read(model, lambda: self.db.execute(stmt).scalar_one())

    # ----- mutations -----

    def insert(self, model, rows: Sequence[dict]) -> list:
        """Insert rows and return the created instances."""
        table = model.__tablename__

        def op():
            created = [model(**row) for row in rows]
            self.db.add_all(created)
            self.db.flush()
            self._pending.extend(
                ChangeEvent(table, INSERT, new=row_to_dict(obj)) for obj in created
            )
            return created

        return self._mutate(model, op)

    def update(self, model, patch: dict, *criteria) -> int:
        """Apply ``patch`` to every matching row. Returns the number of rows changed."""
        table = model.__tablename__

        def op():
            stmt = select(model)
            if criteria:
                stmt = stmt.where(*criteria)
            rows = self.db.execute(stmt).scalars().all()

            before = []
            for row in rows:
                before.append(row_to_dict(row))
                for key, value in patch.items():
                    setattr(row, key, value)
            self.db.flush()

            self._pending.extend(
                ChangeEvent(table, UPDATE, new=row_to_dict(row), old=old)
                for row, old in zip(rows, before)
            )
            return len(rows)

        return self._mutate(model, op)

    def delete(self, model, *criteria) -> int:
        """Delete every matching row. Returns the number of rows removed."""
        table = model.__tablename__

        def op():
            stmt = select(model)
            if criteria:
                stmt = stmt.where(*criteria)
            rows = self.db.execute(stmt).scalars().all()

            for row in rows:
                self._pending.append(ChangeEvent(table, DELETE, old=row_to_dict(row)))
                self.db.delete(row)
            self.db.flush()
            return len(rows)

        return self._mutate(model, op)

    # ----- subscriptions -----

    def subscribe(
        self,
        model,
        callback: ChangeCallback,
        events: Optional[Iterable[str]] = None,
    ) -> Callable[[], None]:
        return self.feed.subscribe(model.__tablename__, callback, events)

    # ----- internals -----

    def _read(self, model, fn):
        try:
            return fn()
        except SQLAlchemyError as e:
            if self._depth == 0:
                self._rollback()
            raise RowStoreError(model.__tablename__, _db_message(e)) from e

    def _mutate(self, model, op):
        try:
            result = op()
            if self._depth == 0:
                self.db.commit()
        except SQLAlchemyError as e:
            if self._depth == 0:
                self._rollback()
            raise RowStoreError(model.__tablename__, _db_message(e)) from e

        if self._depth == 0:
            self._publish_pending()
        return result

    def _rollback(self) -> None:
        self.db.rollback()
        self._pending.clear()

    def _publish_pending(self) -> None:
        events, self._pending = self._pending, []
        for event in events:
            self.feed.publish(event)
