"""Aggregate statistics over inventory items."""
from collections import Counter
from typing import Dict, List, Optional, Tuple

from .filters import UNKNOWN
from .models import InventoryItem, InventoryStatistics


def compute_statistics(items: List[InventoryItem]) -> InventoryStatistics:
    """Total count, distinct floor/room/family counts and frequency tables."""
    floors = set()
    rooms = set()
    families = set()
    by_floor: Counter = Counter()
    by_family: Counter = Counter()
    by_type: Counter = Counter()

    for item in items:
        floor = item.location.floor
        room = item.location.room
        if floor:
            floors.add(floor)
        if room:
            rooms.add(room)
        if item.family:
            families.add(item.family)

        by_floor[floor or UNKNOWN] += 1
        by_family[item.family or UNKNOWN] += 1
        by_type[item.type or UNKNOWN] += 1

    return InventoryStatistics(
        total=len(items),
        floors=len(floors),
        rooms=len(rooms),
        families=len(families),
        by_floor=dict(by_floor),
        by_family=dict(by_family),
        by_type=dict(by_type),
    )


def top_entries(counts: Dict[str, int], limit: Optional[int] = None) -> List[Tuple[str, int]]:
    """Entries sorted by descending count, optionally truncated for display."""
    # sorted() is stable, so ties keep insertion order
    entries = sorted(counts.items(), key=lambda entry: entry[1], reverse=True)
    return entries[:limit] if limit else entries


def summary_counts(items: List[InventoryItem]) -> Dict[str, int]:
    """Distinct floors, rooms and families, as printed after a conversion."""
    stats = compute_statistics(items)
    return {
        'floors': stats.floors,
        'rooms': stats.rooms,
        'families': stats.families,
    }
