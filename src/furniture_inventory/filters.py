"""
In-memory filtering, grouping and unique-value extraction over items.

Collections are small (hundreds of rows) so every operation is a plain scan.
"""
from enum import Enum
from typing import Callable, Dict, List, Optional, Union

from .models import InventoryItem

UNKNOWN = 'Unknown'


class ItemField(str, Enum):
    """Fields that can be filtered, grouped or listed."""

    REFERENCE = 'reference'
    DESIGNATION = 'designation'
    FAMILY = 'family'
    TYPE = 'type'
    SUPPLIER = 'supplier'
    USER = 'user'
    BARCODE = 'barcode'
    FLOOR = 'location.floor'
    ROOM = 'location.room'
    BUILDING = 'location.building'
    SITE = 'location.site'
    CITY = 'location.city'


_ACCESSORS: Dict[ItemField, Callable[[InventoryItem], Optional[str]]] = {
    ItemField.REFERENCE: lambda item: item.reference,
    ItemField.DESIGNATION: lambda item: item.designation,
    ItemField.FAMILY: lambda item: item.family,
    ItemField.TYPE: lambda item: item.type,
    ItemField.SUPPLIER: lambda item: item.supplier,
    ItemField.USER: lambda item: item.user,
    ItemField.BARCODE: lambda item: item.barcode,
    ItemField.FLOOR: lambda item: item.location.floor,
    ItemField.ROOM: lambda item: item.location.room,
    ItemField.BUILDING: lambda item: item.location.building,
    ItemField.SITE: lambda item: item.location.site,
    ItemField.CITY: lambda item: item.location.city,
}


def field_accessor(field: Union[ItemField, str]) -> Callable[[InventoryItem], Optional[str]]:
    """Return the getter for a field, given the enum member or its dotted path."""
    return _ACCESSORS[ItemField(field)]


def unique_values(items: List[InventoryItem], field: Union[ItemField, str]) -> List[str]:
    """
    Distinct non-empty values of a field, sorted ascending.

    Sorting is by code point, so accented names are not collated.
    """
    get = field_accessor(field)
    return sorted({value for value in map(get, items) if value})


def unique_floors(items: List[InventoryItem]) -> List[str]:
    return unique_values(items, ItemField.FLOOR)


def unique_rooms(items: List[InventoryItem]) -> List[str]:
    return unique_values(items, ItemField.ROOM)


def filter_by_floor(items: List[InventoryItem], floor: str) -> List[InventoryItem]:
    return [item for item in items if item.location.floor == floor]


def filter_by_room(items: List[InventoryItem], room: str) -> List[InventoryItem]:
    return [item for item in items if item.location.room == room]


def filter_by_search(items: List[InventoryItem], search_term: Optional[str]) -> List[InventoryItem]:
    """Case-insensitive substring search over designation, reference, type, barcode and user."""
    if not search_term or not search_term.strip():
        return list(items)

    term = search_term.strip().lower()

    return [
        item for item in items
        if any(term in value.lower() for value in
               (item.designation, item.reference, item.type, item.barcode, item.user) if value)
    ]


class FilterState:
    """
    Current filter selection of a list view.

    An empty string means no constraint on that key.
    """

    KEYS = ('search', 'floor', 'room', 'type', 'family', 'supplier', 'user')

    # Equality filters, keyed by filter name
    EQUALITY_FIELDS = {
        'floor': ItemField.FLOOR,
        'room': ItemField.ROOM,
        'type': ItemField.TYPE,
        'family': ItemField.FAMILY,
        'supplier': ItemField.SUPPLIER,
        'user': ItemField.USER,
    }

    def __init__(self, **values: str):
        self.values: Dict[str, str] = {key: '' for key in self.KEYS}
        self.update(**values)

    def update(self, **values: Optional[str]) -> None:
        unknown = set(values) - set(self.KEYS)
        if unknown:
            raise ValueError(f"Unknown filter key(s): {', '.join(sorted(unknown))}")
        for key, value in values.items():
            self.values[key] = value or ''

    def clear(self) -> None:
        self.values = {key: '' for key in self.KEYS}

    def active(self) -> List[str]:
        return [key for key in self.KEYS if self.values[key]]

    def __getitem__(self, key: str) -> str:
        return self.values[key]

    def __repr__(self) -> str:
        active = {key: self.values[key] for key in self.active()}
        return f"FilterState({active})"


def _search_text(item: InventoryItem) -> str:
    return f"{item.designation} {item.reference} {item.barcode} {item.user}".lower()


def matches(item: InventoryItem, state: FilterState) -> bool:
    """True when the item satisfies every active filter."""
    search = state['search'].strip()
    if search and search.lower() not in _search_text(item):
        return False

    for key, field in FilterState.EQUALITY_FIELDS.items():
        wanted = state[key]
        if wanted and field_accessor(field)(item) != wanted:
            return False

    return True


def apply_filters(items: List[InventoryItem], state: FilterState) -> List[InventoryItem]:
    """Items matching all active filters, in input order."""
    return [item for item in items if matches(item, state)]


def group_by(items: List[InventoryItem],
             key_fn: Callable[[InventoryItem], Optional[str]]) -> Dict[str, List[InventoryItem]]:
    """
    Group items by key.

    Empty keys are grouped under "Unknown". Groups appear in order of first
    occurrence and keep the input order of their items.
    """
    grouped: Dict[str, List[InventoryItem]] = {}
    for item in items:
        key = key_fn(item) or UNKNOWN
        grouped.setdefault(key, []).append(item)
    return grouped


def group_by_floor(items: List[InventoryItem]) -> Dict[str, List[InventoryItem]]:
    return group_by(items, field_accessor(ItemField.FLOOR))


def group_by_room(items: List[InventoryItem]) -> Dict[str, List[InventoryItem]]:
    return group_by(items, field_accessor(ItemField.ROOM))
