"""Tests for the command-line interface."""
import json
from unittest.mock import patch

from furniture_inventory import cli, parser
from furniture_inventory.config import settings


class TestConvert:
    """Tests for the convert command."""

    def test_converts_csv(self, csv_file, tmp_path, capsys):
        output = tmp_path / "out" / "inventory.json"

        assert cli.main(["convert", str(csv_file), "-o", str(output)]) == 0

        data = json.loads(output.read_text(encoding="utf-8"))
        assert [entry["reference"] for entry in data] == ["REF-001", "REF-002"]
        out = capsys.readouterr().out
        assert "Found 2 items" in out
        assert "Floors: 2" in out

    def test_defaults_come_from_settings(self, csv_file, tmp_path):
        output = tmp_path / "inventory.json"

        with patch.object(settings, 'source_path', csv_file), \
                patch.object(settings, 'inventory_path', output):
            assert cli.main(["convert"]) == 0

        assert output.exists()

    def test_reports_validation_issues(self, tmp_path, capsys):
        source = tmp_path / "dupes.csv"
        source.write_text("Reference;Code barre;Site\nR1;B1;25\\A\nR2;B1;25\\A\n", encoding="utf-8")

        assert cli.main(["convert", str(source), "-o", str(tmp_path / "inventory.json")]) == 0

        out = capsys.readouterr().out
        assert "Duplicate barcode B1" in out
        assert "Found 3 issue(s)" in out

    def test_missing_source(self, tmp_path, capsys):
        output = tmp_path / "inventory.json"

        assert cli.main(["convert", str(tmp_path / "missing.xlsx"), "-o", str(output)]) == 1
        assert "File not found" in capsys.readouterr().out
        assert not output.exists()

    def test_unsupported_source(self, tmp_path, capsys):
        source = tmp_path / "inventory.ods"
        source.write_bytes(b"")

        assert cli.main(["convert", str(source), "-o", str(tmp_path / "inventory.json")]) == 1
        assert "Unsupported file format" in capsys.readouterr().out


class TestStats:
    """Tests for the stats command."""

    def test_prints_tables(self, tmp_path, sample_items, capsys):
        dump = tmp_path / "inventory.json"
        parser.save_json(sample_items, dump)

        assert cli.main(["stats", str(dump), "--limit", "2"]) == 0

        out = capsys.readouterr().out
        assert "4 items, 2 floors, 2 rooms, 3 families" in out
        assert "By family:" in out
        by_type = out.split("By type:")[1]
        assert len([line for line in by_type.splitlines() if line.strip()]) == 2

    def test_missing_dump(self, tmp_path, capsys):
        assert cli.main(["stats", str(tmp_path / "missing.json")]) == 1
        assert "not found" in capsys.readouterr().out


def test_api_requires_dump(tmp_path, capsys):
    with patch.object(settings, 'inventory_path', tmp_path / "missing.json"):
        assert cli.main(["api"]) == 1


def test_no_command_prints_help(capsys):
    assert cli.main([]) == 1
    assert "convert" in capsys.readouterr().out
