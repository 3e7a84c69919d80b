"""
Furniture Inventory - Spreadsheet-based furniture/asset inventory tools

Features:
- Read Excel workbooks and CSV exports into structured item records
- Parse hierarchical location paths (city/site/building/floor/room)
- Filter, group and aggregate items in memory
- Place items on a floor plan and export/import the coordinates
- CLI tools for conversion, statistics and serving
"""

__version__ = "0.1.0"

from .location import parse_location
from .parser import (
    read_inventory_data,
    read_csv_data,
    read_excel_data,
    validate_inventory,
    save_json,
    load_json,
)
from .filters import (
    ItemField,
    FilterState,
    unique_values,
    apply_filters,
    group_by,
    group_by_floor,
    group_by_room,
)
from .statistics import compute_statistics
from .placement import PointPlacer, place, export_configuration, apply_configuration

__all__ = [
    "parse_location",
    "read_inventory_data",
    "read_csv_data",
    "read_excel_data",
    "validate_inventory",
    "save_json",
    "load_json",
    "ItemField",
    "FilterState",
    "unique_values",
    "apply_filters",
    "group_by",
    "group_by_floor",
    "group_by_room",
    "compute_statistics",
    "PointPlacer",
    "place",
    "export_configuration",
    "apply_configuration",
]
