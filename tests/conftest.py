"""Shared fixtures for the furniture inventory tests."""
import pytest

from furniture_inventory.location import parse_location
from furniture_inventory.models import InventoryItem


CSV_HEADER = "Référence;Désignation;Famille;Type;Fournisseur;Utilisateur;Code barre;N° série;Informations;Date de livraison;Site"


def make_item(item_id, path=None, **fields) -> InventoryItem:
    """Build an item with a parsed location path."""
    return InventoryItem(id=item_id, location=parse_location(path), **fields)


@pytest.fixture
def sample_items():
    """A small inventory spread over two floors."""
    return [
        make_item(1, r"25\BESANCON\Siege\VIOTTE\1er etage\105",
                  reference="REF-001", designation="Bureau droit", family="Bureaux",
                  type="Bureau", supplier="Steelcase", user="Alice Martin", barcode="B1"),
        make_item(2, r"25\BESANCON\Siege\VIOTTE\1er etage\105",
                  reference="REF-002", designation="Chaise de bureau", family="Sièges",
                  type="Chaise", supplier="Steelcase", user="Alice Martin", barcode="B2"),
        make_item(3, r"25\BESANCON\Siege\VIOTTE\2eme etage\201",
                  reference="REF-003", designation="Armoire haute", family="Rangements",
                  type="Armoire", supplier="Bruneau", user="Paul Durand", barcode="B3"),
        make_item(4, r"25\BESANCON\Siege\VIOTTE",
                  reference="REF-004", designation="Table de réunion", family="Bureaux",
                  type="Table", supplier="Bruneau", user="", barcode="B4"),
    ]


@pytest.fixture
def csv_file(tmp_path):
    """A semicolon-delimited export with a BOM, quoting and an incomplete row."""
    content = "\n".join([
        CSV_HEADER,
        r'REF-001;"Bureau; angle";Bureaux;Bureau;Steelcase;Alice Martin;B1;SN1;;2024-03-01;25\BESANCON\Siege\VIOTTE\1er etage\105',
        "",
        r'REF-002;"Chaise ""pro""";Sièges;Chaise;Steelcase;Paul Durand;B2;SN2;RAS;2024-03-02;25\BESANCON\Siege\VIOTTE\2eme etage\201',
        "REF-003;Incomplete;Bureaux",
    ])
    path = tmp_path / "inventory.csv"
    path.write_text(content, encoding="utf-8-sig")
    return path
