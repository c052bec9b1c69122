"""Stock ledger repository interface.

Every quantity change goes through ``increment`` so implementations can
apply it as one atomic write instead of a read-modify-write cycle.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Iterable, List, Optional, Tuple

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.inventory.models import Stock


class IStockRepository(IRepository["Stock"]):

    @abstractmethod
    def get_by_name(self, name: str) -> Optional[Stock]:
        """Exact, case-sensitive lookup by product name."""

    @abstractmethod
    def list(self) -> List[Stock]:
        """All entries ordered by name."""

    @abstractmethod
    def list_by_names(self, names: Iterable[str]) -> List[Stock]:
        """Entries whose name is in ``names``; unknown names are skipped."""

    @abstractmethod
    def increment(self, name: str, available: int, bought_total: int = 0) -> int:
        """Add the (signed) amounts to the entry atomically.

        Returns the number of rows matched (0 or 1).
        """

    @abstractmethod
    def get_or_create(self, name: str, bought_total: int = 0, available: int = 0) -> Tuple[Stock, bool]:
        """Return the entry for ``name``, creating it with the given amounts."""

    @abstractmethod
    def delete_by_name(self, name: str) -> bool:
        """Remove the entry; ``False`` when there was none."""

    @abstractmethod
    def rename(self, old_name: str, new_name: str) -> bool:
        """Re-key the entry; ``False`` when there was none."""
