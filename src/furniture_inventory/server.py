#!/usr/bin/env python3
"""
FastAPI server for the furniture inventory views.

Serves the item list with filters, statistics, floor-plan markers, the
point-placement tool and the reservation form as JSON endpoints.
"""
import json
from contextlib import asynccontextmanager
from typing import Optional, Union

from fastapi import FastAPI, File, HTTPException, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from .api_client import ApiClient
from .config import settings
from .exceptions import ApiError, ConfigurationError, PlacementOutOfBoundsError, ReservationValidationError
from .filters import FilterState, apply_filters
from .placement import (
    apply_configuration,
    export_configuration,
    floor_plan_size,
    group_markers,
    load_configuration,
    normalize_click,
    place,
    save_configuration,
)
from .parser import load_json
from .reservation import ReservationRequest, ReservationService
from .service import InventoryService
from .statistics import top_entries


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load the item dump and saved coordinates on startup."""
    service = InventoryService()

    inventory_path = settings.inventory_path
    if not inventory_path.exists():
        print(f"⚠️  Warning: {inventory_path} not found")
        print("   Server will start with an empty inventory; run 'furniture-inventory convert' first")
    else:
        service.set_items(load_json(inventory_path))
        print(f"✅ Loaded inventory: {len(service.items)} items")

    coordinates_path = settings.coordinates_path
    if coordinates_path.exists():
        try:
            placed = apply_configuration(service.items, load_configuration(coordinates_path))
            print(f"✅ Loaded {placed} placed points")
        except ConfigurationError as e:
            print(f"⚠️  Ignoring {coordinates_path}: {e}")

    app.state.service = service
    app.state.api_client = ApiClient()

    yield

    app.state.api_client.close()


app = FastAPI(title="Furniture Inventory Server", lifespan=lifespan)

# Enable CORS for local development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class PlacementRequest(BaseModel):
    """Place an item; x/y are pixels when the rendered image size is given."""
    item_id: Union[int, str]
    x: float
    y: float
    width: Optional[float] = None
    height: Optional[float] = None


def get_service(request: Request) -> InventoryService:
    return request.app.state.service


def save_coordinates(service: InventoryService) -> None:
    """Persist the current coordinates so they survive a restart."""
    config = export_configuration(service.items, str(settings.floor_plan_path))
    save_configuration(config, settings.coordinates_path)


@app.get("/api/items")
async def list_items(request: Request, search: str = "", floor: str = "", room: str = "",
                     type: str = "", family: str = "", supplier: str = "", user: str = "") -> dict:
    """List items matching all given filters."""
    state = FilterState(search=search, floor=floor, room=room, type=type,
                        family=family, supplier=supplier, user=user)
    items = apply_filters(get_service(request).items, state)

    return {
        "count": len(items),
        "items": [item.to_json() for item in items]
    }


@app.get("/api/items/{item_id}")
async def get_item(request: Request, item_id: str) -> dict:
    item = get_service(request).find_item(item_id)
    if item is None:
        raise HTTPException(status_code=404, detail=f"Item '{item_id}' not found")
    return item.to_json()


@app.get("/api/filters")
async def filter_options(request: Request) -> dict:
    """Selectable values for each filter dropdown."""
    service = get_service(request)
    return {
        key: service.get_unique_values(field)
        for key, field in FilterState.EQUALITY_FIELDS.items()
    }


@app.get("/api/statistics")
async def statistics(request: Request, limit: Optional[int] = None) -> dict:
    """Statistics panel; frequency tables are sorted by count and truncated to limit."""
    stats = get_service(request).get_statistics()
    return {
        "total": stats.total,
        "floors": stats.floors,
        "rooms": stats.rooms,
        "families": stats.families,
        "byFloor": top_entries(stats.by_floor, limit),
        "byFamily": top_entries(stats.by_family, limit),
        "byType": top_entries(stats.by_type, limit),
    }


@app.get("/api/map/markers")
async def map_markers(request: Request, floor: str = "") -> dict:
    service = get_service(request)
    items = service.get_items_by_floor(floor) if floor else service.items
    markers = group_markers(items)
    return {"markers": [marker.model_dump() for marker in markers]}


@app.get("/api/map/floor-plan")
async def floor_plan() -> dict:
    """Floor-plan image location and pixel size."""
    if not settings.floor_plan_path.exists():
        raise HTTPException(status_code=404, detail="Floor plan image not found")
    width, height = floor_plan_size(settings.floor_plan_path)
    return {"imageUrl": str(settings.floor_plan_path), "width": width, "height": height}


@app.post("/api/placements")
def place_item(request: Request, placement: PlacementRequest) -> dict:
    """Place (or relocate) an item on the floor plan."""
    service = get_service(request)
    item = service.find_item(placement.item_id)
    if item is None:
        raise HTTPException(status_code=404, detail=f"Item '{placement.item_id}' not found")

    x, y = placement.x, placement.y
    if placement.width is not None and placement.height is not None:
        try:
            x, y = normalize_click(x, y, placement.width, placement.height)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

    try:
        place(item, x, y)
    except PlacementOutOfBoundsError as e:
        raise HTTPException(status_code=400, detail=str(e))

    save_coordinates(service)

    return {
        "success": True,
        "id": item.id,
        "coordinates": item.coordinates.model_dump()
    }


@app.get("/api/placements/export")
async def export_placements(request: Request) -> dict:
    config = export_configuration(get_service(request).items, str(settings.floor_plan_path))
    return config.model_dump(mode="json", by_alias=True)


@app.post("/api/placements/import")
def import_placements(request: Request, file: UploadFile = File(...)) -> dict:
    """Import a previously exported coordinate configuration."""
    service = get_service(request)
    try:
        config = json.loads(file.file.read())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Invalid JSON: {e}")

    try:
        placed = apply_configuration(service.items, config)
    except ConfigurationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    save_coordinates(service)

    return {
        "success": True,
        "message": f"{placed} points importés avec succès",
        "placed": placed
    }


@app.post("/api/reservations")
def create_reservation(request: Request, reservation: ReservationRequest) -> dict:
    """Validate and forward a reservation to the inventory API."""
    reservations = ReservationService(request.app.state.api_client)
    try:
        result = reservations.submit(reservation)
    except ReservationValidationError as e:
        raise HTTPException(status_code=422, detail=e.messages)
    except ApiError as e:
        raise HTTPException(status_code=502, detail=e.localized_message())

    return {"success": True, "reservation": result}


@app.get("/health")
async def health(request: Request) -> dict:
    """Health check endpoint."""
    service = get_service(request)
    return {
        "status": "ok",
        "item_count": len(service.items),
        "placed_count": sum(1 for item in service.items if item.coordinates.is_placed),
    }


if __name__ == "__main__":
    import uvicorn

    print("🪑 Starting Furniture Inventory Server...")
    print("📍 Server will run at: http://localhost:8765")
    print("❤️  Health check: http://localhost:8765/health")

    uvicorn.run(app, host="0.0.0.0", port=8765)
