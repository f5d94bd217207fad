"""
Record store client.

A thin collection interface over SQLAlchemy models: every router talks to
the database through ``Collection`` with ``where`` / ``order_by`` / ``limit``
options instead of building queries by hand.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from loguru import logger
from pybreaker import CircuitBreaker, CircuitBreakerError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .circuit_breaker import store_circuit_breaker


class Collection:
    """
    CRUD access to one model.

    Writes are committed through a circuit breaker. A failed commit is
    rolled back, logged and re-raised; after ``fail_max`` consecutive
    failures the breaker opens and writes raise ``CircuitBreakerError``
    without touching the database.
    """

    def __init__(self, db: Session, model, breaker: Optional[CircuitBreaker] = None):
        self.db = db
        self.model = model
        self.breaker = breaker or store_circuit_breaker

    @property
    def name(self) -> str:
        return self.model.__tablename__

    def _column(self, field: str):
        if field not in self.model.__table__.columns:
            raise ValueError(f"Unknown field '{field}' for collection '{self.name}'")
        return getattr(self.model, field)

    def _query(self, where: Optional[Dict[str, Any]] = None):
        query = self.db.query(self.model)
        for field, value in (where or {}).items():
            query = query.filter(self._column(field) == value)
        return query

    def list(
        self,
        where: Optional[Dict[str, Any]] = None,
        order_by: Optional[Dict[str, str]] = None,
        limit: Optional[int] = None,
    ) -> List[Any]:
        """
        Return records matching every ``where`` equality filter.

        ``order_by`` maps field names to ``"asc"`` or ``"desc"``.
        """
        query = self._query(where)
        for field, direction in (order_by or {}).items():
            column = self._column(field)
            if direction == "desc":
                query = query.order_by(column.desc())
            elif direction == "asc":
                query = query.order_by(column.asc())
            else:
                raise ValueError(f"Invalid sort direction '{direction}'")
        if limit is not None:
            if limit <= 0:
                raise ValueError("limit must be positive")
            query = query.limit(limit)
        return query.all()

    def get(self, record_id: int):
        return self.db.query(self.model).filter(self.model.id == record_id).first()

    def count(self, where: Optional[Dict[str, Any]] = None) -> int:
        return self._query(where).count()

    def _commit(self, action: str):
        try:
            self.breaker.call(self.db.commit)
        except SQLAlchemyError:
            # pybreaker re-raises the original error while the circuit is closed
            self.db.rollback()
            logger.exception("Store write failed: {} on {}", action, self.name)
            raise
        except CircuitBreakerError:
            self.db.rollback()
            logger.error("Store write rejected: {} on {} (circuit {})", action, self.name, self.breaker.current_state)
            raise

    def create(self, **fields):
        for field in fields:
            self._column(field)
        record = self.model(**fields)
        self.db.add(record)
        self._commit("create")
        self.db.refresh(record)
        return record

    def update(self, record_id: int, **fields):
        record = self.get(record_id)
        if record is None:
            return None
        for field, value in fields.items():
            self._column(field)
            setattr(record, field, value)
        if "updated_at" in self.model.__table__.columns and "updated_at" not in fields:
            record.updated_at = datetime.utcnow()
        self._commit("update")
        self.db.refresh(record)
        return record

    def delete(self, record_id: int) -> bool:
        record = self.get(record_id)
        if record is None:
            return False
        self.db.delete(record)
        self._commit("delete")
        return True
