"""
Generic repository — Repository Pattern (GoF)

Every statement goes through ``guarded()``: a dropped connection, a locked
database or a missing table rolls the session back and surfaces as
``RemoteUnavailableError`` instead of a raw driver error.
"""
import logging
from contextlib import contextmanager
from typing import Generic, Iterator, List, Optional, Type, TypeVar

from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from smarthourly.core.exceptions import RemoteUnavailableError
from smarthourly.database import Base


ModelType = TypeVar("ModelType", bound=Base)

logger = logging.getLogger(__name__)


class BaseRepository(Generic[ModelType]):
    def __init__(self, model: Type[ModelType], db: Session):
        self.model = model
        self.db = db

    @contextmanager
    def guarded(self) -> Iterator[None]:
        try:
            yield
        except OperationalError as exc:
            self.db.rollback()
            logger.error("db_unavailable model=%s error=%s", self.model.__name__, exc.orig)
            raise RemoteUnavailableError("Database", str(exc.orig)) from exc
        except SQLAlchemyError:
            self.db.rollback()
            raise

    def get_by_id(self, id: int) -> Optional[ModelType]:
        with self.guarded():
            return self.db.query(self.model).filter(self.model.id == id).first()

    def get_all(self) -> List[ModelType]:
        with self.guarded():
            return self.db.query(self.model).all()

    def create(self, obj: ModelType) -> ModelType:
        self.db.add(obj)
        self.commit()
        with self.guarded():
            self.db.refresh(obj)
        return obj

    def update(self, obj: ModelType, updates: dict) -> ModelType:
        for key, value in updates.items():
            setattr(obj, key, value)
        self.commit()
        with self.guarded():
            self.db.refresh(obj)
        return obj

    def commit(self) -> None:
        """Commit, rolling back on failure so no half-applied state survives."""
        with self.guarded():
            self.db.commit()
