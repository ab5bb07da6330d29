"""In-memory warehouse context shared between the steps of a test run.

One :class:`WarehouseContext` is created per run and handed to step
definitions and page objects by reference. Values are keyed by shipment or
order id plus a field name; the last write wins.
"""

from __future__ import annotations

import copy
import logging
from collections import deque
from datetime import datetime
from typing import Any, Deque, Dict, List, Optional, Set

logger = logging.getLogger(__name__)


class WarehouseContext:
    """Shipment, order, inventory and audit data for one test run."""

    def __init__(self) -> None:
        self.shipments: Dict[str, Dict[str, Any]] = {}
        self.orders: Dict[str, Dict[str, Any]] = {}
        self.lot_numbers: Dict[str, Set[str]] = {}
        self.pallet_assignments: Dict[str, List[str]] = {}
        self.inventory_levels: Dict[str, int] = {}
        self.metadata: Dict[str, Any] = {}
        self._audit: List[tuple] = []
        self._queue: Deque[str] = deque()

    # =========================================================================
    # Shipment / order data
    # =========================================================================

    def store_shipment_data(self, shipment_id: str, key: str, value: Any) -> None:
        self.shipments.setdefault(shipment_id, {})[key] = value
        logger.debug("shipment[%s][%s] = %r", shipment_id, key, value)

    def get_shipment_data(self, shipment_id: str, key: str, default: Any = None) -> Any:
        return self.shipments.get(shipment_id, {}).get(key, default)

    def get_shipment_data_as_string(self, shipment_id: str, key: str) -> Optional[str]:
        value = self.get_shipment_data(shipment_id, key)
        return None if value is None else str(value)

    def store_order_data(self, order_id: str, key: str, value: Any) -> None:
        self.orders.setdefault(order_id, {})[key] = value
        logger.debug("order[%s][%s] = %r", order_id, key, value)

    def get_order_data(self, order_id: str, key: str, default: Any = None) -> Any:
        return self.orders.get(order_id, {}).get(key, default)

    def get_order_data_as_string(self, order_id: str, key: str) -> Optional[str]:
        value = self.get_order_data(order_id, key)
        return None if value is None else str(value)

    # =========================================================================
    # Lots and pallets
    # =========================================================================

    def add_lot_number(self, sku: str, lot_number: str) -> None:
        self.lot_numbers.setdefault(sku, set()).add(lot_number)

    def get_lot_numbers(self, sku: str) -> Set[str]:
        return set(self.lot_numbers.get(sku, set()))

    def all_lot_numbers(self) -> Dict[str, Set[str]]:
        return {sku: set(lots) for sku, lots in self.lot_numbers.items()}

    def assign_pallet(self, sku: str, pallet_id: str) -> None:
        self.pallet_assignments.setdefault(sku, []).append(pallet_id)

    def get_pallet_assignments(self, sku: str) -> List[str]:
        return list(self.pallet_assignments.get(sku, []))

    # =========================================================================
    # Inventory levels
    # =========================================================================

    def update_inventory(self, item_code: str, delta: int) -> int:
        """Add ``delta`` to the item's level and return the new level."""
        level = self.inventory_levels.get(item_code, 0) + delta
        self.inventory_levels[item_code] = level
        return level

    def set_inventory_level(self, item_code: str, quantity: int) -> None:
        self.inventory_levels[item_code] = quantity

    def get_inventory_level(self, item_code: str) -> int:
        return self.inventory_levels.get(item_code, 0)

    def low_stock_items(self, threshold: int) -> List[str]:
        """Item codes whose level is below ``threshold``, sorted."""
        return sorted(
            item for item, level in self.inventory_levels.items() if level < threshold
        )

    def inventory_in_range(self, low: int, high: int) -> Dict[str, int]:
        return {
            item: level
            for item, level in self.inventory_levels.items()
            if low <= level <= high
        }

    def total_inventory(self) -> int:
        return sum(self.inventory_levels.values())

    # =========================================================================
    # Processing queue
    # =========================================================================

    def enqueue(self, item: str) -> None:
        self._queue.append(item)

    def dequeue(self) -> Optional[str]:
        return self._queue.popleft() if self._queue else None

    @property
    def queue_size(self) -> int:
        return len(self._queue)

    # =========================================================================
    # Audit trail and metadata
    # =========================================================================

    def add_audit_entry(self, message: str) -> None:
        self._audit.append((datetime.now(), message))
        logger.info("Audit: %s", message)

    def audit_trail(self) -> List[str]:
        return [f"{ts.isoformat(timespec='seconds')}: {msg}" for ts, msg in self._audit]

    def find_audit_entries(self, keyword: str) -> List[str]:
        needle = keyword.lower()
        return [entry for entry in self.audit_trail() if needle in entry.lower()]

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = value

    def get_metadata(self, key: str, default: Any = None) -> Any:
        return self.metadata.get(key, default)

    def get_metadata_as_string(self, key: str) -> Optional[str]:
        value = self.metadata.get(key)
        return None if value is None else str(value)

    # =========================================================================
    # Export and cleanup
    # =========================================================================

    def export_all_data(self) -> Dict[str, Any]:
        """Snapshot of everything held, as plain dicts and lists."""
        return {
            "shipments": copy.deepcopy(self.shipments),
            "orders": copy.deepcopy(self.orders),
            "lot_numbers": {sku: sorted(lots) for sku, lots in self.lot_numbers.items()},
            "pallet_assignments": copy.deepcopy(self.pallet_assignments),
            "inventory_levels": dict(self.inventory_levels),
            "metadata": copy.deepcopy(self.metadata),
            "audit_trail": self.audit_trail(),
            "processing_queue": list(self._queue),
        }

    def clear_shipment(self, shipment_id: str) -> None:
        self.shipments.pop(shipment_id, None)

    def clear_order(self, order_id: str) -> None:
        self.orders.pop(order_id, None)

    def clear_all(self) -> None:
        self.shipments.clear()
        self.orders.clear()
        self.lot_numbers.clear()
        self.pallet_assignments.clear()
        self.inventory_levels.clear()
        self.metadata.clear()
        self._audit.clear()
        self._queue.clear()
