"""Generic base repository with reusable CRUD operations."""

from typing import Generic, List, Type, TypeVar

from sqlalchemy.orm import Session

from emissions_dashboard.database import Base

T = TypeVar("T", bound=Base)


class BaseRepository(Generic[T]):
    """Thin data-access layer over SQLAlchemy.

    Repositories only modify the session (add/delete/flush) - the caller
    controls when to commit or rollback.
    """

    def __init__(self, db: Session, model: Type[T]):
        self.db = db
        self.model = model

    def create(self, obj: T) -> T:
        """Add object to session (caller must commit)."""
        self.db.add(obj)
        self.db.flush()  # Assigns ID without committing
        return obj

    def create_many(self, objs: List[T]) -> List[T]:
        self.db.add_all(objs)
        self.db.flush()
        return objs
