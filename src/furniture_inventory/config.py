import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


class Settings:
    # REST API serving furniture/location records
    api_url: str = os.getenv("INVENTORY_API_URL", "http://localhost:5000/api")
    api_timeout: float = float(os.getenv("INVENTORY_API_TIMEOUT", "10"))

    # Source spreadsheet and generated JSON dump
    source_path: Path = Path(os.getenv("INVENTORY_SOURCE", "data/inventory.xlsx"))
    inventory_path: Path = Path(os.getenv("INVENTORY_JSON", "public/data/inventory.json"))

    # Floor-plan placement
    coordinates_path: Path = Path(os.getenv("INVENTORY_COORDINATES", "public/data/coordinates.json"))
    floor_plan_path: Path = Path(os.getenv("INVENTORY_FLOOR_PLAN", "public/images/floor-plan.png"))


settings = Settings()
