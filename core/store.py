"""Persistence collaborator: thin SQLAlchemy wrapper used by services and the read model"""
import logging
from typing import Any, Dict, List, Optional, Type

from sqlalchemy import delete, func, select, text, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.sql import Select

from core.errors import Conflict, DataAccessFailure

logger = logging.getLogger(__name__)

# SQLSTATE unique_violation (Postgres); SQLite only reports it in the message
UNIQUE_VIOLATION = "23505"


def is_unique_violation(exc: IntegrityError) -> bool:
    """True for duplicate-key errors; foreign-key and CHECK failures are not"""
    if getattr(exc.orig, "pgcode", None) == UNIQUE_VIOLATION:
        return True
    message = str(exc.orig)
    return "UNIQUE constraint failed" in message or "duplicate key value" in message


class Store:
    """
    Request-scoped access to the database.

    Every SQLAlchemy failure leaves as DataAccessFailure, except a uniqueness
    violation, which leaves as Conflict. Nothing is retried.
    """

    def __init__(self, session: Session):
        self.session = session

    def _fail(self, operation: str, exc: SQLAlchemyError) -> DataAccessFailure:
        logger.error(f"Store operation failed: {operation}", extra={
            "error_code": "DATA_ACCESS_FAILURE",
        }, exc_info=exc)
        return DataAccessFailure(f"Store operation '{operation}' failed: {type(exc).__name__}")

    @staticmethod
    def _criteria(model: Type, filters: Dict[str, Any]) -> list:
        return [getattr(model, field) == value for field, value in filters.items()]

    def find_by_id(self, model: Type, entity_id: str) -> Optional[Any]:
        try:
            return self.session.get(model, entity_id)
        except SQLAlchemyError as e:
            raise self._fail("find_by_id", e)

    def find_one(self, model: Type, **filters) -> Optional[Any]:
        try:
            stmt = select(model).where(*self._criteria(model, filters)).limit(1)
            return self.session.execute(stmt).scalars().first()
        except SQLAlchemyError as e:
            raise self._fail("find_one", e)

    def find_fields(self, model: Type, entity_id: str, *fields: str) -> Optional[Dict[str, Any]]:
        """Load only the named columns of one row, e.g. (id, owner_id) for ownership checks"""
        try:
            stmt = select(*(getattr(model, f) for f in fields)).where(model.id == entity_id)
            row = self.session.execute(stmt).first()
        except SQLAlchemyError as e:
            raise self._fail("find_fields", e)
        return dict(row._mapping) if row is not None else None

    def create(self, entity: Any) -> Any:
        """Insert inside a savepoint so a duplicate leaves the outer transaction usable"""
        try:
            with self.session.begin_nested():
                self.session.add(entity)
                self.session.flush()
        except IntegrityError as e:
            if is_unique_violation(e):
                raise Conflict(f"{type(entity).__name__} violates a uniqueness constraint") from e
            raise self._fail("create", e)
        except SQLAlchemyError as e:
            raise self._fail("create", e)
        return entity

    def update_by_id(self, model: Type, entity_id: str, patch: Dict[str, Any]) -> bool:
        try:
            result = self.session.execute(
                update(model).where(model.id == entity_id).values(**patch)
            )
        except IntegrityError as e:
            if is_unique_violation(e):
                raise Conflict(f"{model.__name__} update violates a uniqueness constraint") from e
            raise self._fail("update_by_id", e)
        except SQLAlchemyError as e:
            raise self._fail("update_by_id", e)
        return result.rowcount > 0

    def increment(self, model: Type, entity_id: str, field: str, by: int = 1) -> bool:
        """Single-statement counter bump; False when the row does not exist"""
        column = getattr(model, field)
        try:
            result = self.session.execute(
                update(model).where(model.id == entity_id).values({column: column + by})
            )
        except SQLAlchemyError as e:
            raise self._fail("increment", e)
        return result.rowcount > 0

    def delete_by_id(self, model: Type, entity_id: str) -> bool:
        try:
            result = self.session.execute(delete(model).where(model.id == entity_id))
        except SQLAlchemyError as e:
            raise self._fail("delete_by_id", e)
        return result.rowcount > 0

    def delete_many(self, model: Type, *criteria, **filters) -> int:
        try:
            stmt = delete(model).where(*criteria, *self._criteria(model, filters))
            result = self.session.execute(stmt)
        except SQLAlchemyError as e:
            raise self._fail("delete_many", e)
        return result.rowcount

    def count(self, model: Type, **filters) -> int:
        stmt = select(func.count()).select_from(model).where(*self._criteria(model, filters))
        return int(self.scalar(stmt) or 0)

    def scalar(self, stmt: Select) -> Any:
        try:
            return self.session.execute(stmt).scalar_one()
        except SQLAlchemyError as e:
            raise self._fail("scalar", e)

    def run_pipeline(self, stmt: Select) -> List[Dict[str, Any]]:
        """Execute a composed pipeline statement and return plain row mappings"""
        if hasattr(stmt, "statement"):
            stmt = stmt.statement()
        try:
            return [dict(row._mapping) for row in self.session.execute(stmt)]
        except SQLAlchemyError as e:
            raise self._fail("run_pipeline", e)

    def ping(self) -> bool:
        try:
            return self.session.execute(text("SELECT 1")).scalar_one() == 1
        except SQLAlchemyError as e:
            raise self._fail("ping", e)

    def commit(self) -> None:
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            if is_unique_violation(e):
                raise Conflict("Commit violates a uniqueness constraint") from e
            raise self._fail("commit", e)
        except SQLAlchemyError as e:
            self.session.rollback()
            raise self._fail("commit", e)

    def rollback(self) -> None:
        self.session.rollback()
