"""Base repository contract shared by the domain modules.

Services receive a repository through their constructor and never touch
the ORM directly, so tests can hand them fakes or mocks.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class IRepository(ABC, Generic[T]):
    """Minimal lookup contract; ``T`` is the aggregate the repository manages."""

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[T]:
        """Return the aggregate with primary key ``id`` or ``None``."""
