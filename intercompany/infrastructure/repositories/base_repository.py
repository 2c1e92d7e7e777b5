"""
Base Repository - Abstract repository pattern implementation.

Provides the lookup, insert and transaction helpers shared by all
repositories, plus conversion of ORM rows into domain entities.
"""
from abc import ABC, abstractmethod
from typing import Generic, TypeVar, List, Optional, Type
from sqlalchemy.orm import Session

from intercompany.models import Base

T = TypeVar('T', bound=Base)


class BaseRepository(ABC, Generic[T]):
    """
    Abstract base repository providing common data access operations.

    Type Parameters:
        T: The SQLAlchemy model type this repository manages
    """

    def __init__(self, session: Session, model_class: Type[T]):
        """
        Initialize the repository.

        Args:
            session: SQLAlchemy database session
            model_class: The model class this repository manages
        """
        self.session = session
        self.model_class = model_class

    def get_by_uuid(self, uuid: str) -> Optional[T]:
        """
        Retrieve an entity by its UUID.

        Args:
            uuid: UUID string

        Returns:
            The entity if found, None otherwise
        """
        if not hasattr(self.model_class, 'uuid'):
            raise AttributeError(f"{self.model_class.__name__} does not have a uuid field")
        return self.session.query(self.model_class).filter(
            self.model_class.uuid == uuid
        ).first()

    def get_all(self) -> List[T]:
        """Retrieve all rows, in primary key order."""
        return self.session.query(self.model_class).order_by(self.model_class.id).all()

    def add(self, entity: T) -> T:
        """
        Add a new row to the session.

        Args:
            entity: Row to add

        Returns:
            The added row
        """
        self.session.add(entity)
        return entity

    def flush(self) -> None:
        """Flush pending changes to the database."""
        self.session.flush()

    def _matches(self, **criteria) -> bool:
        query = self.session.query(self.model_class)
        for field, value in criteria.items():
            query = query.filter(getattr(self.model_class, field) == value)
        return query.first() is not None

    @abstractmethod
    def exists(self, **criteria) -> bool:
        """
        Check if a row matching the criteria exists.

        Args:
            **criteria: Field-value pairs to match

        Returns:
            True if a row exists, False otherwise
        """
        pass
