# File: community_action/services/gateway.py

"""
Data gateway.

A thin wrapper around a SQLAlchemy session that speaks in table names and
plain dict records (select / insert / update / delete / increment), so the
rest of the app never handles ORM objects directly.

Every SQLAlchemy failure is re-raised as ``GatewayError``.
"""

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple, Union

from sqlalchemy import delete as sa_delete
from sqlalchemy import func, select, update as sa_update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from community_action.core.errors import GatewayError
from community_action.models.project import Project
from community_action.models.user import User
from community_action.models.vote import ProjectVote

logger = logging.getLogger(__name__)

TABLES = {
    "projects": Project,
    "users": User,
    "project_votes": ProjectVote,
}

Order = Union[Tuple[str, str], Sequence[Tuple[str, str]]]


def to_record(obj) -> Dict[str, Any]:
    """Column values of a mapped instance as a plain dict."""
    return {col.key: getattr(obj, col.key) for col in obj.__mapper__.column_attrs}


class DataGateway:
    def __init__(self, db: Session):
        self.db = db
        self._depth = 0

    # -----------------------------
    # helpers
    # -----------------------------
    def _model(self, table: str):
        try:
            return TABLES[table]
        except KeyError:
            raise GatewayError(f"Unknown table '{table}'.") from None

    def _column(self, model, name: str):
        column = getattr(model, name, None)
        if column is None or name not in model.__mapper__.column_attrs:
            raise GatewayError(f"Unknown column '{name}' on {model.__tablename__}.")
        return column

    def _apply_filters(self, stmt, model, filters: Optional[Mapping[str, Any]]):
        for name, value in (filters or {}).items():
            stmt = stmt.where(self._column(model, name) == value)
        return stmt

    def _apply_order(self, stmt, model, order: Optional[Order]):
        if not order:
            return stmt
        pairs = [order] if isinstance(order[0], str) else list(order)
        for name, direction in pairs:
            column = self._column(model, name)
            stmt = stmt.order_by(column.desc() if direction == "desc" else column.asc())
        return stmt

    def _commit(self) -> None:
        if self._depth:
            return
        self.db.commit()

    def _fail(self, action: str, table: str, exc: object) -> GatewayError:
        self.db.rollback()
        logger.error("Gateway %s on %s failed: %s", action, table, exc)
        return GatewayError(f"Failed to {action} {table}.")

    @contextmanager
    def transaction(self) -> Iterator["DataGateway"]:
        """
        Group several writes into one commit; any exception rolls all of
        them back.
        """
        self._depth += 1
        try:
            yield self
        except BaseException:
            self._depth -= 1
            if not self._depth:
                self.db.rollback()
            raise
        self._depth -= 1
        if not self._depth:
            try:
                self.db.commit()
            except SQLAlchemyError as exc:
                raise self._fail("commit", "transaction", exc) from exc

    # -----------------------------
    # reads
    # -----------------------------
    def select(
        self,
        table: str,
        filters: Optional[Mapping[str, Any]] = None,
        order: Optional[Order] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        model = self._model(table)
        stmt = self._apply_filters(select(model), model, filters)
        stmt = self._apply_order(stmt, model, order)
        if limit is not None:
            stmt = stmt.limit(limit)
        try:
            return [to_record(obj) for obj in self.db.scalars(stmt)]
        except SQLAlchemyError as exc:
            raise self._fail("select", table, exc) from exc

    def select_one(self, table: str, id: Any) -> Optional[Dict[str, Any]]:
        model = self._model(table)
        try:
            obj = self.db.get(model, id)
        except SQLAlchemyError as exc:
            raise self._fail("select", table, exc) from exc
        return to_record(obj) if obj is not None else None

    def count(self, table: str, filters: Optional[Mapping[str, Any]] = None) -> int:
        model = self._model(table)
        stmt = self._apply_filters(select(func.count()).select_from(model), model, filters)
        try:
            return int(self.db.scalar(stmt) or 0)
        except SQLAlchemyError as exc:
            raise self._fail("count", table, exc) from exc

    def total(self, table: str, column: str) -> int:
        model = self._model(table)
        stmt = select(func.coalesce(func.sum(self._column(model, column)), 0))
        try:
            return int(self.db.scalar(stmt) or 0)
        except SQLAlchemyError as exc:
            raise self._fail("sum", table, exc) from exc

    # -----------------------------
    # writes
    # -----------------------------
    def insert(self, table: str, record: Mapping[str, Any]) -> Dict[str, Any]:
        model = self._model(table)
        for name in record:
            self._column(model, name)
        obj = model(**record)
        try:
            self.db.add(obj)
            self.db.flush()
            self._commit()
            self.db.refresh(obj)
        except SQLAlchemyError as exc:
            raise self._fail("insert into", table, exc) from exc
        return to_record(obj)

    def update(self, table: str, id: Any, partial: Mapping[str, Any]) -> None:
        model = self._model(table)
        values = {self._column(model, name).key: value for name, value in partial.items()}
        stmt = sa_update(model).where(model.id == id).values(**values)
        try:
            self.db.execute(stmt)
            self._commit()
        except SQLAlchemyError as exc:
            raise self._fail("update", table, exc) from exc

    def increment(self, table: str, id: Any, column: str, delta: int) -> int:
        """
        Atomically add ``delta`` to ``column`` and return the new value.
        """
        model = self._model(table)
        col = self._column(model, column)
        stmt = (
            sa_update(model)
            .where(model.id == id)
            .values({col: col + delta})
            .returning(col)
        )
        try:
            new_value = self.db.execute(stmt).scalar_one_or_none()
            if new_value is not None:
                self._commit()
        except SQLAlchemyError as exc:
            raise self._fail("increment", table, exc) from exc
        if new_value is None:
            raise self._fail("increment", table, f"no row {id}")
        return int(new_value)

    def delete(self, table: str, id: Any) -> None:
        model = self._model(table)
        try:
            obj = self.db.get(model, id)
            if obj is None:
                raise GatewayError(f"No row {id} in {table}.")
            # ORM delete so relationship cascades (vote ledger) run.
            self.db.delete(obj)
            self.db.flush()
            self._commit()
        except SQLAlchemyError as exc:
            raise self._fail("delete from", table, exc) from exc

    def delete_where(self, table: str, filters: Mapping[str, Any]) -> int:
        if not filters:
            raise GatewayError("delete_where needs at least one filter.")
        model = self._model(table)
        stmt = self._apply_filters(sa_delete(model), model, filters)
        try:
            result = self.db.execute(stmt)
            self._commit()
        except SQLAlchemyError as exc:
            raise self._fail("delete from", table, exc) from exc
        return result.rowcount or 0
