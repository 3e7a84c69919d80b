"""REST API client for furniture, location and RFID records."""

import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from .config import settings
from .exceptions import ApiError

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
    "Accept-Language": "fr-FR,fr;q=0.9,en;q=0.8",
}

STATUS_ERROR_CODES = {
    400: "validationError",
    401: "unauthorized",
    403: "forbidden",
    404: "notFound",
    500: "serverError",
    502: "apiUnavailable",
    503: "apiUnavailable",
    504: "apiUnavailable",
}


def error_code_for_status(status_code: int) -> str:
    """Map an HTTP status code to an API error code."""
    return STATUS_ERROR_CODES.get(status_code, "generic")


class ApiClient:
    """Synchronous JSON client for the inventory REST API.

    Failed calls raise ApiError; there is no retry.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """Initialize the client.

        Args:
            base_url: API root, e.g. http://localhost:5000/api (default: INVENTORY_API_URL)
            timeout: Request timeout in seconds (default: INVENTORY_API_TIMEOUT)
            transport: Optional httpx transport, used to mock the API in tests
        """
        self.base_url = (base_url or settings.api_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.api_timeout
        self._client = httpx.Client(
            headers=DEFAULT_HEADERS, timeout=self.timeout, transport=transport
        )

        logger.debug(f"Initialized ApiClient for {self.base_url}")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self) -> None:
        self._client.close()

    def request(
        self,
        method: str,
        endpoint: str,
        json: Optional[Any] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Send a request and return the decoded JSON body.

        Raises:
            ApiError: On a non-2xx response or a transport failure
        """
        url = f"{self.base_url}{endpoint}"
        logger.debug(f"{method} {url}")

        try:
            response = self._client.request(method, url, json=json, params=params)
        except httpx.HTTPError as e:
            logger.error(f"API call failed for {endpoint}: {e}")
            raise ApiError("networkError", str(e), 0, {"endpoint": endpoint}) from e

        if response.status_code == 204:
            return {"success": True}

        if not response.is_success:
            details = self._parse_error_response(response)
            raise ApiError(
                details.get("error_code") or error_code_for_status(response.status_code),
                details.get("message") or f"HTTP {response.status_code}",
                response.status_code,
                details,
            )

        if not response.content:
            return {"success": True}
        return response.json()

    @staticmethod
    def _parse_error_response(response: httpx.Response) -> Dict[str, Any]:
        content_type = response.headers.get("content-type", "")
        if "application/json" in content_type:
            try:
                body = response.json()
            except ValueError:
                body = None
            if isinstance(body, dict):
                return body
        return {"message": response.text}

    def get(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self.request("GET", endpoint, params=params)

    def post(self, endpoint: str, data: Any = None) -> Any:
        return self.request("POST", endpoint, json=data if data is not None else {})

    def put(self, endpoint: str, data: Any) -> Any:
        return self.request("PUT", endpoint, json=data)

    def delete(self, endpoint: str) -> Any:
        return self.request("DELETE", endpoint)


class FurnitureRepository:
    """Furniture endpoints."""

    def __init__(self, api_client: ApiClient):
        self.api_client = api_client

    def get_all(self) -> list:
        return self.api_client.get("/Furniture")

    def get_by_id(self, furniture_id) -> dict:
        return self.api_client.get(f"/Furniture/{furniture_id}")

    def create(self, furniture_data: dict) -> dict:
        return self.api_client.post("/Furniture", furniture_data)

    def update(self, furniture_id, furniture_data: dict) -> dict:
        return self.api_client.put(f"/Furniture/{furniture_id}", furniture_data)

    def delete(self, furniture_id) -> dict:
        return self.api_client.delete(f"/Furniture/{furniture_id}")

    def get_by_barcode(self, barcode: str) -> dict:
        return self.api_client.get(f"/Furniture/barcode/{quote(barcode, safe='')}")

    def search(self, params: Dict[str, Any]) -> list:
        """Search by reference, family or site; empty parameters are dropped."""
        return self.api_client.get(
            "/Furniture/search", params={k: v for k, v in params.items() if v}
        )

    def assign_location(self, furniture_id, location_id) -> dict:
        return self.api_client.post(f"/Furniture/{furniture_id}/location/{location_id}")

    def assign_rfid_tag(self, furniture_id, rfid_tag_id) -> dict:
        return self.api_client.post(f"/Furniture/{furniture_id}/rfid/{rfid_tag_id}")


class LocationRepository:
    """Location endpoints."""

    def __init__(self, api_client: ApiClient):
        self.api_client = api_client

    def get_all(self) -> list:
        return self.api_client.get("/Location")

    def get_by_id(self, location_id) -> dict:
        return self.api_client.get(f"/Location/{location_id}")

    def create(self, location_data: dict) -> dict:
        return self.api_client.post("/Location", location_data)

    def update(self, location_id, location_data: dict) -> dict:
        return self.api_client.put(f"/Location/{location_id}", location_data)

    def delete(self, location_id) -> dict:
        return self.api_client.delete(f"/Location/{location_id}")

    def get_furniture(self, location_id) -> list:
        return self.api_client.get(f"/Location/{location_id}/furniture")

    def get_by_building(self, building_name: str) -> list:
        return self.api_client.get(f"/Location/building/{quote(building_name, safe='')}")


class RfidRepository:
    """RFID tag and reader endpoints."""

    def __init__(self, api_client: ApiClient):
        self.api_client = api_client

    def get_active_tags(self) -> list:
        return self.api_client.get("/Rfid/tags")

    def get_tag(self, tag_id: str) -> dict:
        return self.api_client.get(f"/Rfid/tags/{quote(tag_id, safe='')}")

    def register_tag(self, tag_data: dict) -> dict:
        return self.api_client.post("/Rfid/tags", tag_data)

    def assign_tag(self, tag_id: str, furniture_id) -> dict:
        return self.api_client.post(f"/Rfid/tags/{quote(tag_id, safe='')}/assign/{furniture_id}")

    def deactivate_tag(self, tag_id: str) -> dict:
        return self.api_client.post(f"/Rfid/tags/{quote(tag_id, safe='')}/deactivate")

    def process_read(self, read_data: dict) -> dict:
        return self.api_client.post("/Rfid/read", read_data)

    def get_active_readers(self) -> list:
        return self.api_client.get("/Rfid/readers")

    def register_reader(self, reader_data: dict) -> dict:
        return self.api_client.post("/Rfid/readers", reader_data)

    def update_reader_status(self, reader_id: str, status: str) -> dict:
        return self.api_client.post(
            f"/Rfid/readers/{quote(reader_id, safe='')}/status", {"status": status}
        )
