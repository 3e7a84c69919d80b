#!/usr/bin/env python3
"""
Inventory Source Parser

Reads furniture inventory spreadsheets (Excel workbooks or semicolon-delimited
CSV exports) into InventoryItem records and writes the JSON item dump consumed
by the browser views.
"""
import json
import logging
from collections import defaultdict
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException
from pydantic import ValidationError

from .exceptions import SourceFileNotFoundError, UnsupportedFormatError
from .location import parse_location
from .models import Coordinates, InventoryItem, Location

logger = logging.getLogger(__name__)

CSV_EXTENSIONS = ('.csv',)
EXCEL_EXTENSIONS = ('.xlsx', '.xls')

LOCATION_COLUMN = 'Site'

# Item field -> accepted column headers, French export first
COLUMNS = {
    'reference': ('Référence', 'Reference'),
    'designation': ('Désignation', 'Designation'),
    'family': ('Famille', 'Family'),
    'type': ('Type',),
    'supplier': ('Fournisseur', 'Supplier'),
    'user': ('Utilisateur', 'User'),
    'barcode': ('Code barre', 'Barcode'),
    'serial_number': ('N° série', 'Serial Number'),
    'information': ('Informations', 'Information'),
    'delivery_date': ('Date de livraison', 'Delivery Date'),
}


def _cell_text(value: Any) -> str:
    """Render a spreadsheet cell as text."""
    if value is None:
        return ''
    if isinstance(value, datetime):
        if value.time() == datetime.min.time():
            return value.date().isoformat()
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def item_from_row(row: Dict[str, Any], item_id: Union[int, str]) -> InventoryItem:
    """Build an item from a header -> value mapping of one spreadsheet row."""
    fields = {}
    for field, headers in COLUMNS.items():
        value = ''
        for header in headers:
            value = _cell_text(row.get(header))
            if value:
                break
        fields[field] = value

    return InventoryItem(
        id=item_id,
        location=parse_location(row.get(LOCATION_COLUMN) or None),
        coordinates=Coordinates(),
        **fields
    )


def parse_csv_line(line: str, delimiter: str = ';') -> List[str]:
    """
    Split one CSV line into stripped fields.

    Delimiters inside double quotes are kept; "" inside quotes is an escaped quote.
    """
    result = []
    current = []
    in_quotes = False
    i = 0

    while i < len(line):
        char = line[i]

        if char == '"':
            if in_quotes and i + 1 < len(line) and line[i + 1] == '"':
                # Escaped quote
                current.append('"')
                i += 1
            else:
                in_quotes = not in_quotes
        elif char == delimiter and not in_quotes:
            result.append(''.join(current).strip())
            current = []
        else:
            current.append(char)
        i += 1

    result.append(''.join(current).strip())
    return result


def read_csv_data(csv_file: Path, delimiter: str = ';', encoding: str = 'utf-8') -> List[InventoryItem]:
    """
    Read a CSV export into items.

    Blank lines and rows with fewer values than headers are skipped; ids are
    assigned sequentially over the kept rows.
    """
    with open(csv_file, 'r', encoding=encoding, newline='') as f:
        content = f.read()

    # Remove BOM if present
    if content.startswith('\ufeff'):
        content = content[1:]

    lines = content.replace('\r\n', '\n').split('\n')
    if len(lines) < 2:
        return []

    headers = parse_csv_line(lines[0], delimiter)

    items = []
    for line_number, line in enumerate(lines[1:], start=2):
        line = line.strip()
        if not line:
            continue

        values = parse_csv_line(line, delimiter)
        if len(values) < len(headers):
            logger.debug("Skipping incomplete row %d in %s", line_number, csv_file)
            continue

        row = dict(zip(headers, values))
        items.append(item_from_row(row, len(items) + 1))

    return items


def read_excel_data(excel_file: Path) -> List[InventoryItem]:
    """Read the first worksheet of a workbook; the first row holds the headers."""
    try:
        workbook = load_workbook(excel_file, read_only=True, data_only=True)
    except InvalidFileException as e:
        raise UnsupportedFormatError(f"Cannot read workbook {excel_file}: {e}") from e

    try:
        sheet = workbook.worksheets[0]
        rows = sheet.iter_rows(values_only=True)

        header_row = next(rows, None)
        if header_row is None:
            return []
        headers = [_cell_text(cell) for cell in header_row]

        items = []
        for values in rows:
            if all(value is None or _cell_text(value) == '' for value in values):
                continue
            row = dict(zip(headers, values))
            items.append(item_from_row(row, len(items) + 1))
    finally:
        workbook.close()

    return items


def read_inventory_data(source_file: Path, **options) -> List[InventoryItem]:
    """
    Read inventory items from a CSV or Excel file, chosen by extension.

    Raises:
        SourceFileNotFoundError: if the file does not exist
        UnsupportedFormatError: for any other extension
    """
    source_file = Path(source_file)

    if not source_file.exists():
        raise SourceFileNotFoundError(f"File not found: {source_file}")

    ext = source_file.suffix.lower()

    if ext in CSV_EXTENSIONS:
        items = read_csv_data(source_file, **options)
    elif ext in EXCEL_EXTENSIONS:
        items = read_excel_data(source_file)
    else:
        raise UnsupportedFormatError(f"Unsupported file format: {ext or source_file.name}")

    logger.info("Read %d items from %s", len(items), source_file)
    return items


def _location_from_record(record: Dict[str, Any]) -> Location:
    location = record.get('location')
    if isinstance(location, str):
        return parse_location(location)

    location = location or {}

    def text(key: str, fallback: bool = False) -> Optional[str]:
        value = _cell_text(location.get(key))
        if not value and fallback:
            value = _cell_text(record.get(key))
        return value or None

    return Location(
        floor=text('floor', fallback=True),
        room=text('room', fallback=True),
        full_path=text('fullPath'),
        building=text('building', fallback=True),
        site=text('site'),
        city=text('city'),
    )


def _coordinates_from_record(record: Dict[str, Any]) -> Coordinates:
    coordinates = record.get('coordinates') or {}
    try:
        return Coordinates(x=coordinates.get('x'), y=coordinates.get('y'))
    except ValidationError:
        logger.warning("Ignoring invalid coordinates for item %s: %s", record.get('id'), coordinates)
        return Coordinates()


def item_from_record(record: Dict[str, Any]) -> InventoryItem:
    """
    Map a furniture record from the REST API (camelCase keys) to an item.

    Numeric values (barcodes, rooms) are rendered as text like spreadsheet cells.
    """
    return InventoryItem(
        id=record['id'],
        reference=_cell_text(record.get('reference')),
        designation=_cell_text(record.get('designation')),
        family=_cell_text(record.get('family')),
        type=_cell_text(record.get('type')),
        supplier=_cell_text(record.get('supplier')),
        user=_cell_text(record.get('user')),
        barcode=_cell_text(record.get('barcode')),
        serial_number=_cell_text(record.get('serialNumber')),
        information=_cell_text(record.get('information')),
        delivery_date=_cell_text(record.get('deliveryDate')),
        location=_location_from_record(record),
        coordinates=_coordinates_from_record(record),
    )


def validate_inventory(items: List[InventoryItem]) -> List[str]:
    """
    Validate inventory items and return a list of issues.

    Issues are informational; a short location still yields a usable item.
    """
    issues = []

    barcodes = defaultdict(list)
    for item in items:
        if item.barcode:
            barcodes[item.barcode].append(item.id)

    for barcode, ids in barcodes.items():
        if len(ids) > 1:
            issues.append(f"⚠️  Duplicate barcode {barcode}: items {', '.join(str(i) for i in ids)}")

    for item in items:
        if not item.location.full_path:
            issues.append(f"⚠️  Item {item.id} has no location")
        elif item.location.floor is None or item.location.room is None:
            issues.append(f"⚠️  Item {item.id}: location '{item.location.full_path}' has no floor/room")

    return issues


def save_json(items: List[InventoryItem], output_file: Path) -> None:
    """Save the item dump to a JSON file."""
    output_file = Path(output_file)
    output_file.parent.mkdir(parents=True, exist_ok=True)
    with open(output_file, 'w', encoding='utf-8') as f:
        json.dump([item.to_json() for item in items], f, ensure_ascii=False, indent=2)


def load_json(json_file: Path) -> List[InventoryItem]:
    """Load an item dump from a JSON file."""
    with open(json_file, 'r', encoding='utf-8') as f:
        return [InventoryItem.model_validate(entry) for entry in json.load(f)]
