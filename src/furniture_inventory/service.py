"""
Inventory service: owns the item collection and the current filter selection.
"""
import logging
import threading
from typing import List, Optional, Union

from .api_client import FurnitureRepository
from .filters import (
    FilterState,
    ItemField,
    apply_filters,
    filter_by_floor,
    unique_values,
)
from .models import InventoryItem, InventoryStatistics
from .parser import item_from_record
from .statistics import compute_statistics

logger = logging.getLogger(__name__)


class InventoryService:
    """
    Item collection and filter state for one session.

    Loads are sequenced: a response belonging to a load that has since been
    superseded by a newer one is dropped instead of overwriting the items.
    """

    def __init__(self, furniture_repository: Optional[FurnitureRepository] = None,
                 items: Optional[List[InventoryItem]] = None):
        self.furniture_repository = furniture_repository
        self.items: List[InventoryItem] = list(items or [])
        self.filters = FilterState()
        self._lock = threading.Lock()
        self._sequence = 0

    def _next_token(self) -> int:
        with self._lock:
            self._sequence += 1
            return self._sequence

    def _install(self, token: int, items: List[InventoryItem]) -> bool:
        with self._lock:
            if token != self._sequence:
                logger.info("Discarding stale inventory load #%d (latest is #%d)", token, self._sequence)
                return False
            self.items = items
            return True

    def load_items(self) -> List[InventoryItem]:
        """
        Fetch all furniture from the API and replace the collection.

        Raises:
            ApiError: if the API call fails; the current items are kept
        """
        if self.furniture_repository is None:
            raise RuntimeError("No furniture repository configured")

        token = self._next_token()
        records = self.furniture_repository.get_all()
        items = [item_from_record(record) for record in records]

        if self._install(token, items):
            logger.info("Loaded %d inventory items", len(items))
        return self.items

    def set_items(self, items: List[InventoryItem]) -> None:
        """Install items read from a file; supersedes any load in flight."""
        self._install(self._next_token(), list(items))

    def get_all_items(self) -> List[InventoryItem]:
        return self.items

    def set_filters(self, **values: str) -> None:
        self.filters.update(**values)

    def clear_filters(self) -> None:
        self.filters.clear()

    def get_filtered_items(self) -> List[InventoryItem]:
        return apply_filters(self.items, self.filters)

    def get_unique_values(self, field: Union[ItemField, str]) -> List[str]:
        return unique_values(self.items, field)

    def get_items_by_floor(self, floor: str) -> List[InventoryItem]:
        return filter_by_floor(self.items, floor)

    def get_statistics(self) -> InventoryStatistics:
        return compute_statistics(self.items)

    def find_item(self, item_id: Union[int, str]) -> Optional[InventoryItem]:
        """Look up an item by id; string ids from URLs also match numeric ids."""
        for item in self.items:
            if item.id == item_id or str(item.id) == str(item_id):
                return item
        return None
