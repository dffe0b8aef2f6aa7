"""Generic repository interface (Dependency Inversion Principle).

Provides ``IRepository[T]``, the base abstract class that the catalog and
order repository interfaces extend.  Service-layer code depends on these
abstractions, never on the Django ORM directly.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, Optional, TypeVar

T = TypeVar("T")


class IRepository(ABC, Generic[T]):
    """Base generic repository contract.

    Type parameter ``T`` is the entity managed by the repository
    (``Product``, ``SalesOrder``).
    """

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[T]:
        """Retrieve an entity by primary key; ``None`` if missing or malformed."""

    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> Any:
        """List entities with optional ORM look-ups."""
