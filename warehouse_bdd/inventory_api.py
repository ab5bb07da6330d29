"""Inventory REST API client.

Thin requests wrapper for the warehouse inventory service:

- ``GET  /api/inventory/item/<code>``
- ``GET  /api/inventory/location/<id>``
- ``POST /api/inventory/adjust``

Responses are returned as-is so callers can treat a non-200 status as a
validation failure. Only transport errors raise.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import requests

from warehouse_bdd.exceptions import InventoryApiError

logger = logging.getLogger(__name__)


@dataclass
class InventoryRecord:
    """Inventory fields of an item lookup response."""

    item_code: Optional[str]
    description: Optional[str] = None
    total_quantity: Optional[int] = None
    available_quantity: Optional[int] = None
    allocated_quantity: Optional[int] = None
    uom: Optional[str] = None
    locations: List[Any] = field(default_factory=list)


@dataclass
class AdjustmentRequest:
    item_code: str
    adjustment_type: str
    adjusted_quantity: int
    reason: str
    location_id: Optional[str]
    performed_by: str
    reference_id: str

    def to_json(self) -> Dict[str, Any]:
        return {
            "itemCode": self.item_code,
            "adjustmentType": self.adjustment_type,
            "adjustedQuantity": self.adjusted_quantity,
            "reason": self.reason,
            "locationId": self.location_id,
            "performedBy": self.performed_by,
            "referenceId": self.reference_id,
        }


class InventoryApiClient:
    """Client for the inventory REST API."""

    def __init__(
        self,
        base_url: str,
        timeout: int = 30,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json"})

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        url = f"{self.base_url}{path}"
        logger.debug("%s %s", method, url)
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.exceptions.RequestException as e:
            raise InventoryApiError(f"{method} {url} failed: {e}") from e
        logger.info("%s %s -> %s", method, url, response.status_code)
        return response

    def get_item(self, item_code: str) -> requests.Response:
        """Look up inventory for one item code."""
        return self._request("GET", f"/api/inventory/item/{item_code}")

    def get_location(self, location_id: str) -> requests.Response:
        """Look up the items stored at one location."""
        return self._request("GET", f"/api/inventory/location/{location_id}")

    def adjust(self, adjustment: AdjustmentRequest) -> requests.Response:
        """Post an inventory adjustment."""
        response = self._request("POST", "/api/inventory/adjust", json=adjustment.to_json())
        if not response.ok:
            logger.warning(
                "Adjustment %s for %s returned %s",
                adjustment.reference_id,
                adjustment.item_code,
                response.status_code,
            )
        return response

    @staticmethod
    def extract_inventory(response: requests.Response) -> InventoryRecord:
        """Map an item lookup body onto :class:`InventoryRecord`.

        :raises InventoryApiError: if the body is not a JSON object
        """
        try:
            data = response.json()
        except ValueError as e:
            raise InventoryApiError(f"Inventory response is not JSON: {e}") from e
        if not isinstance(data, dict):
            raise InventoryApiError(f"Inventory response is not an object: {data!r}")
        return InventoryRecord(
            item_code=data.get("itemCode"),
            description=data.get("description"),
            total_quantity=data.get("totalQuantity"),
            available_quantity=data.get("availableQuantity"),
            allocated_quantity=data.get("allocatedQuantity"),
            uom=data.get("uom"),
            locations=data.get("locations") or [],
        )

    @staticmethod
    def extract_location(response: requests.Response) -> Dict[str, Any]:
        try:
            data = response.json()
        except ValueError as e:
            raise InventoryApiError(f"Location response is not JSON: {e}") from e
        if not isinstance(data, dict):
            raise InventoryApiError(f"Location response is not an object: {data!r}")
        return {"locationId": data.get("locationId"), "items": data.get("items") or []}
