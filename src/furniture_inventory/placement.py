"""
Floor-plan point placement.

Each item carries a normalized (0-1) position on a floor-plan image. The
placement tool walks through the items one by one; a configuration of all
positions can be exported to JSON and imported again later.
"""
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from PIL import Image
from pydantic import ValidationError

from .exceptions import ConfigurationError, PlacementError, PlacementOutOfBoundsError
from .filters import group_by_room
from .models import (
    CoordinateEntry,
    Coordinates,
    InventoryItem,
    MapMarker,
    PlacementConfiguration,
)

logger = logging.getLogger(__name__)

CONFIGURATION_VERSION = '1.0'
SELECT_THRESHOLD = 0.02  # 2% of image size


def place(item: InventoryItem, x: float, y: float) -> None:
    """
    Place an item on the floor plan, overwriting any previous position.

    Raises:
        PlacementOutOfBoundsError: if x or y falls outside [0, 1]; the item is left unchanged
    """
    if not (0 <= x <= 1 and 0 <= y <= 1):
        raise PlacementOutOfBoundsError(x, y)
    item.coordinates = Coordinates(x=x, y=y)


def normalize_click(px: float, py: float, width: float, height: float) -> Tuple[float, float]:
    """Convert a pixel position inside the rendered image box to normalized coordinates."""
    if width <= 0 or height <= 0:
        raise ValueError("Image box must have a positive size")
    return px / width, py / height


def floor_plan_size(image_path: Path) -> Tuple[int, int]:
    """Pixel size (width, height) of a floor-plan image."""
    with Image.open(image_path) as img:
        return img.size


class PointPlacer:
    """
    State of the interactive placement tool.

    Items are visited in order; placing the current item advances to the next.
    The tool is complete once the index moves past the last item.
    """

    def __init__(self, items: List[InventoryItem], image_url: str = ''):
        self.items = items
        self.image_url = image_url
        self.current_index = 0

    @property
    def current_item(self) -> Optional[InventoryItem]:
        if self.current_index < len(self.items):
            return self.items[self.current_index]
        return None

    @property
    def is_complete(self) -> bool:
        return self.current_index >= len(self.items)

    def place_current(self, x: float, y: float) -> InventoryItem:
        """Place the current item and move on to the next one."""
        item = self.current_item
        if item is None:
            raise PlacementError("All items have already been visited")
        place(item, x, y)
        self.next_item()
        return item

    def next_item(self) -> None:
        if self.current_index < len(self.items):
            self.current_index += 1

    def previous_item(self) -> None:
        if self.current_index > 0:
            self.current_index -= 1

    def skip_item(self) -> None:
        self.next_item()

    def select_point_at(self, x: float, y: float, threshold: float = SELECT_THRESHOLD) -> Optional[InventoryItem]:
        """Make the first placed item within threshold of (x, y) current, for relocation."""
        for index, item in enumerate(self.items):
            coords = item.coordinates
            if not coords.is_placed:
                continue
            if abs(coords.x - x) < threshold and abs(coords.y - y) < threshold:
                self.current_index = index
                return item
        return None

    def placed_items(self) -> List[InventoryItem]:
        return [item for item in self.items if item.coordinates.is_placed]

    def progress(self) -> Dict[str, int]:
        placed = len(self.placed_items())
        total = len(self.items)
        percentage = round(placed / total * 100) if total else 0
        return {'placed': placed, 'total': total, 'percentage': percentage}

    def export_configuration(self, now: Optional[datetime] = None) -> PlacementConfiguration:
        return export_configuration(self.items, self.image_url, now)

    def apply_configuration(self, config: Union[PlacementConfiguration, Dict[str, Any]]) -> int:
        return apply_configuration(self.items, config)


def export_configuration(items: List[InventoryItem], image_url: str = '',
                         now: Optional[datetime] = None) -> PlacementConfiguration:
    """Snapshot every item's coordinates, placed or not."""
    now = now or datetime.now(timezone.utc)

    return PlacementConfiguration(
        version=CONFIGURATION_VERSION,
        image_url=image_url,
        timestamp=now.isoformat(),
        coordinates=[
            CoordinateEntry(
                id=item.id,
                barcode=item.barcode,
                room=item.location.room,
                floor=item.location.floor,
                coordinates=item.coordinates,
            )
            for item in items
        ],
    )


def _find_item(items: List[InventoryItem], entry: CoordinateEntry) -> Optional[InventoryItem]:
    # Ids can be reassigned between reloads; barcodes are stable
    if entry.id is not None:
        for item in items:
            if item.id == entry.id:
                return item
    if entry.barcode:
        for item in items:
            if item.barcode == entry.barcode:
                return item
    return None


def apply_configuration(items: List[InventoryItem],
                        config: Union[PlacementConfiguration, Dict[str, Any]]) -> int:
    """
    Restore coordinates from an exported configuration.

    Entries are matched on id first, then on barcode. Returns the number of
    entries applied with a placed position.

    Raises:
        ConfigurationError: if the configuration has no coordinate list
    """
    if not isinstance(config, PlacementConfiguration):
        if not isinstance(config, dict) or 'coordinates' not in config:
            raise ConfigurationError("Invalid configuration: missing 'coordinates'")
        try:
            config = PlacementConfiguration.model_validate(config)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

    applied = 0
    for entry in config.coordinates:
        item = _find_item(items, entry)
        if item is None:
            logger.debug("No item matches configuration entry id=%s barcode=%s", entry.id, entry.barcode)
            continue
        item.coordinates = entry.coordinates
        if entry.coordinates.is_placed:
            applied += 1

    logger.info("Imported %d placed points", applied)
    return applied


def save_configuration(config: PlacementConfiguration, output_file: Path) -> None:
    """Save a coordinate configuration to a JSON file."""
    output_file = Path(output_file)
    output_file.parent.mkdir(parents=True, exist_ok=True)
    with open(output_file, 'w', encoding='utf-8') as f:
        json.dump(config.model_dump(mode='json', by_alias=True), f, ensure_ascii=False, indent=2)


def load_configuration(json_file: Path) -> PlacementConfiguration:
    """Load a coordinate configuration from a JSON file."""
    with open(json_file, 'r', encoding='utf-8') as f:
        data = json.load(f)

    if not isinstance(data, dict) or 'coordinates' not in data:
        raise ConfigurationError(f"Invalid configuration file: {json_file}")
    try:
        return PlacementConfiguration.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration file {json_file}: {e}") from e


def group_markers(items: List[InventoryItem]) -> List[MapMarker]:
    """
    Cluster items by room into map markers.

    A marker sits at the first item's position (not an average); rooms whose
    first item is not placed get no marker.
    """
    markers = []
    for room, room_items in group_by_room(items).items():
        first = room_items[0]
        if not first.coordinates.is_placed:
            continue
        markers.append(MapMarker(
            room=room,
            x=first.coordinates.x,
            y=first.coordinates.y,
            count=len(room_items),
            item_ids=[item.id for item in room_items],
        ))
    return markers
