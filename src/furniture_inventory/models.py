"""
Data models for furniture inventory records.

Items are serialized with camelCase keys (serialNumber, deliveryDate, fullPath)
so the JSON dump stays compatible with the browser views that consume it.
"""
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Location(BaseModel):
    """Hierarchical location parsed from a backslash-delimited path."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    floor: Optional[str] = None
    room: Optional[str] = None
    full_path: Optional[str] = None
    building: Optional[str] = None
    site: Optional[str] = None
    city: Optional[str] = None


class Coordinates(BaseModel):
    """Normalized (0-1) position of an item on the floor-plan image."""

    model_config = ConfigDict(frozen=True)

    x: Optional[float] = Field(default=None, ge=0, le=1)
    y: Optional[float] = Field(default=None, ge=0, le=1)

    @property
    def is_placed(self) -> bool:
        return self.x is not None and self.y is not None


class InventoryItem(BaseModel):
    """One inventoried furniture/asset record."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: Union[int, str]
    reference: str = ''
    designation: str = ''
    family: str = ''
    type: str = ''
    supplier: str = ''
    user: str = ''
    barcode: str = ''
    serial_number: str = ''
    information: str = ''
    delivery_date: str = ''
    location: Location = Field(default_factory=Location)
    # Only the placement tool replaces this
    coordinates: Coordinates = Field(default_factory=Coordinates)

    def to_json(self) -> dict:
        return self.model_dump(mode='json', by_alias=True)


class CoordinateEntry(BaseModel):
    """One item's entry in an exported coordinate configuration."""

    id: Union[int, str, None] = None
    barcode: Optional[str] = None
    room: Optional[str] = None
    floor: Optional[str] = None
    coordinates: Coordinates = Field(default_factory=Coordinates)


class PlacementConfiguration(BaseModel):
    """Exported point-placement configuration."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    version: str = '1.0'
    image_url: str = ''
    timestamp: str = ''
    coordinates: List[CoordinateEntry]


class InventoryStatistics(BaseModel):
    """Aggregate counts over an item collection."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total: int = 0
    floors: int = 0
    rooms: int = 0
    families: int = 0
    by_floor: Dict[str, int] = Field(default_factory=dict)
    by_family: Dict[str, int] = Field(default_factory=dict)
    by_type: Dict[str, int] = Field(default_factory=dict)


class MapMarker(BaseModel):
    """A rendered point on the floor plan, possibly grouping several items."""

    room: str
    x: float
    y: float
    count: int
    item_ids: List[Union[int, str]] = Field(default_factory=list)

    @property
    def has_badge(self) -> bool:
        """Markers grouping more than one item show a count badge."""
        return self.count > 1
