"""Tests for reading inventory spreadsheets and the JSON dump."""
import json
from datetime import datetime

import pytest
from openpyxl import Workbook

from furniture_inventory import parser
from furniture_inventory.exceptions import (
    SourceFileNotFoundError,
    SourceFormatError,
    UnsupportedFormatError,
)

from furniture_inventory.models import Coordinates

from conftest import CSV_HEADER, make_item


class TestParseCsvLine:
    """Tests for parse_csv_line."""

    def test_simple_line(self):
        assert parser.parse_csv_line("a;b;c") == ["a", "b", "c"]

    def test_quoted_delimiter(self):
        assert parser.parse_csv_line('a;"b;c";d') == ["a", "b;c", "d"]

    def test_escaped_quotes(self):
        assert parser.parse_csv_line('"Chaise ""pro""";x') == ['Chaise "pro"', "x"]

    def test_fields_are_stripped(self):
        assert parser.parse_csv_line(" a ; b ;") == ["a", "b", ""]

    def test_custom_delimiter(self):
        assert parser.parse_csv_line("a,b", delimiter=",") == ["a", "b"]


class TestReadCsvData:
    """Tests for read_csv_data."""

    def test_reads_rows(self, csv_file):
        items = parser.read_csv_data(csv_file)

        assert len(items) == 2
        first = items[0]
        assert first.id == 1
        assert first.reference == "REF-001"
        assert first.designation == "Bureau; angle"
        assert first.serial_number == "SN1"
        assert first.information == ""
        assert first.delivery_date == "2024-03-01"
        assert first.location.floor == "1er etage"
        assert first.location.room == "105"
        assert not first.coordinates.is_placed

    def test_bom_is_stripped_from_first_header(self, csv_file):
        """The first column is only found when the BOM is removed."""
        assert parser.read_csv_data(csv_file)[0].reference == "REF-001"

    def test_escaped_quotes_and_sequential_ids(self, csv_file):
        items = parser.read_csv_data(csv_file)

        assert items[1].designation == 'Chaise "pro"'
        assert items[1].id == 2

    def test_header_only_file(self, tmp_path):
        path = tmp_path / "empty.csv"
        path.write_text(CSV_HEADER, encoding="utf-8")

        assert parser.read_csv_data(path) == []

    def test_english_headers(self, tmp_path):
        path = tmp_path / "english.csv"
        path.write_text("Reference;Designation;Barcode;Site\nR1;Desk;B9;25\\X\\Y\\Z\\F1\\R1\n", encoding="utf-8")

        item = parser.read_csv_data(path)[0]

        assert item.reference == "R1"
        assert item.designation == "Desk"
        assert item.barcode == "B9"
        assert item.location.room == "R1"

    def test_crlf_line_endings(self, tmp_path):
        path = tmp_path / "windows.csv"
        path.write_bytes("Reference;Site\r\nR1;\r\nR2;\r\n".encode("utf-8"))

        items = parser.read_csv_data(path)

        assert [item.reference for item in items] == ["R1", "R2"]
        assert items[0].location.full_path is None


class TestReadExcelData:
    """Tests for read_excel_data."""

    @pytest.fixture
    def workbook_file(self, tmp_path):
        wb = Workbook()
        sheet = wb.active
        sheet.append(["Référence", "Désignation", "Famille", "Code barre", "Date de livraison", "Site"])
        sheet.append(["REF-001", "Bureau droit", "Bureaux", 12345, datetime(2024, 3, 1),
                      "25\\BESANCON\\Siege\\VIOTTE\\1er etage\\105"])
        sheet.append([None, None, None, None, None, None])
        sheet.append(["REF-002", "Chaise", "Sièges", "B2", None, "25\\BESANCON"])
        path = tmp_path / "inventory.xlsx"
        wb.save(path)
        return path

    def test_reads_first_sheet(self, workbook_file):
        items = parser.read_excel_data(workbook_file)

        assert [item.id for item in items] == [1, 2]
        assert items[0].designation == "Bureau droit"
        assert items[0].location.building == "VIOTTE"
        assert items[1].location.city == "BESANCON"
        assert items[1].location.floor is None

    def test_cells_are_rendered_as_text(self, workbook_file):
        item = parser.read_excel_data(workbook_file)[0]

        assert item.barcode == "12345"
        assert item.delivery_date == "2024-03-01"
        assert item.supplier == ""


class TestReadInventoryData:
    """Tests for read_inventory_data dispatch and errors."""

    def test_dispatches_csv(self, csv_file):
        assert len(parser.read_inventory_data(csv_file)) == 2

    def test_missing_file(self, tmp_path):
        with pytest.raises(SourceFileNotFoundError):
            parser.read_inventory_data(tmp_path / "missing.xlsx")

    def test_unsupported_extension(self, tmp_path):
        path = tmp_path / "inventory.txt"
        path.write_text("nothing", encoding="utf-8")

        with pytest.raises(UnsupportedFormatError):
            parser.read_inventory_data(path)

    def test_legacy_xls_is_reported_as_unsupported(self, tmp_path):
        path = tmp_path / "inventory.xls"
        path.write_bytes(b"\xd0\xcf\x11\xe0 not a zip")

        with pytest.raises(SourceFormatError):
            parser.read_inventory_data(path)


class TestItemFromRecord:
    """Tests for mapping REST records."""

    def test_nested_location(self):
        item = parser.item_from_record({
            "id": 7,
            "designation": "Bureau",
            "serialNumber": "SN7",
            "location": {"floor": "RDC", "room": "12", "building": "VIOTTE"},
            "coordinates": {"x": 0.2, "y": 0.4},
        })

        assert item.id == 7
        assert item.serial_number == "SN7"
        assert item.location.room == "12"
        assert item.coordinates.x == 0.2

    def test_flat_location_and_missing_fields(self):
        item = parser.item_from_record({"id": 8, "floor": "RDC", "room": "3", "reference": None})

        assert item.location.floor == "RDC"
        assert item.location.room == "3"
        assert item.reference == ""
        assert not item.coordinates.is_placed

    def test_numeric_values_become_text(self):
        item = parser.item_from_record({
            "id": 1,
            "barcode": 123456,
            "reference": 42.0,
            "location": {"floor": "RDC", "room": 105},
        })

        assert item.barcode == "123456"
        assert item.reference == "42"
        assert item.location.room == "105"

    def test_empty_nested_value_falls_back_to_flat_key(self):
        item = parser.item_from_record({"id": 2, "room": 7, "location": {"floor": "RDC", "room": ""}})

        assert item.location.room == "7"

    def test_out_of_range_coordinates_are_dropped(self):
        item = parser.item_from_record({"id": 3, "coordinates": {"x": 7.5, "y": -3}})

        assert item.coordinates == Coordinates()

    def test_location_path_string(self):
        item = parser.item_from_record({"id": 9, "location": "25\\BESANCON\\Siege\\VIOTTE\\1er etage\\105"})

        assert item.location.floor == "1er etage"


class TestValidateInventory:
    """Tests for validate_inventory."""

    def test_clean_inventory(self):
        items = [make_item(1, "25\\A\\B\\C\\D\\E", barcode="B1")]

        assert parser.validate_inventory(items) == []

    def test_reports_duplicates_and_short_locations(self, sample_items):
        items = sample_items + [make_item(5, None, barcode="B1")]

        issues = parser.validate_inventory(items)

        assert any("Duplicate barcode B1" in issue for issue in issues)
        assert any("Item 4" in issue and "no floor/room" in issue for issue in issues)
        assert any("Item 5 has no location" in issue for issue in issues)


class TestJsonDump:
    """Tests for save_json/load_json."""

    def test_dump_uses_camel_case(self, tmp_path, sample_items):
        output = tmp_path / "public" / "data" / "inventory.json"

        parser.save_json(sample_items, output)

        data = json.loads(output.read_text(encoding="utf-8"))
        assert len(data) == 4
        assert data[0]["serialNumber"] == ""
        assert data[0]["location"]["fullPath"].endswith("105")
        assert data[0]["coordinates"] == {"x": None, "y": None}
        assert "Sièges" in output.read_text(encoding="utf-8")

    def test_load_restores_items(self, tmp_path, sample_items):
        output = tmp_path / "inventory.json"
        parser.save_json(sample_items, output)

        loaded = parser.load_json(output)

        assert loaded == sample_items
