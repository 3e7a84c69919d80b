"""
Location path parsing.

Locations are maintained by hand as backslash-delimited paths, e.g.
``25\\BESANCON\\Siege\\VIOTTE\\1er etage\\105``:
site code, city, site, building, floor, room.
"""
from typing import Any

from .models import Location

SEPARATOR = '\\'


def _segment(parts: list, index: int):
    return parts[index] if len(parts) > index else None


def parse_location(path: Any) -> Location:
    """
    Parse a location path into its city/site/building/floor/room fields.

    Short or malformed paths never raise: missing segments are None.
    """
    if path is None or path == '':
        return Location()

    path = str(path)
    parts = path.split(SEPARATOR)

    return Location(
        floor=_segment(parts, 4),
        room=_segment(parts, 5),
        full_path=path,
        building=_segment(parts, 3),
        site=_segment(parts, 2),
        city=_segment(parts, 1),
    )
