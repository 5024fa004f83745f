"""
Base Repository Interface.
Defines the standard contract for data access operations.
"""

from typing import TypeVar, Optional, Any, Protocol

T = TypeVar("T")


class BaseRepository(Protocol[T]):
    """Interface for generic CRUD operations.

    Writes commit by default; pass commit=False to keep several writes in
    one transaction and call commit() at the end.
    """

    def get_by_id(self, id: str) -> Optional[T]:
        """Get a single entity by ID."""
        ...

    def create(self, obj_in: Any, commit: bool = True) -> T:
        """Create a new entity."""
        ...

    def update(self, db_obj: T, obj_in: Any, commit: bool = True) -> T:
        """Update an existing entity."""
        ...

    def delete(self, id: str, commit: bool = True) -> Optional[T]:
        """Delete an entity by ID."""
        ...

    def commit(self) -> None:
        ...

    def rollback(self) -> None:
        ...
