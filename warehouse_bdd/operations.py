"""Typed page operations.

Each page action is a frozen dataclass. Step definitions build the variant
for the action they need and hand it to ``page.perform()``; the page picks
its handler from the variant's type.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Dict, Optional, Tuple, Union


# ============================================================================
# Row types
# ============================================================================


@dataclass(frozen=True)
class LineItem:
    sku: str
    quantity: int
    description: str = ""


@dataclass(frozen=True)
class PalletCheck:
    pallet_id: str
    skus: Tuple[str, ...]
    status: str = ""

    @property
    def is_full_receiving(self) -> bool:
        return self.status.strip().lower() in {"full", "full receiving", "complete"}


@dataclass(frozen=True)
class PickLine:
    sku: str
    pallet_id: str
    quantity: int


@dataclass(frozen=True)
class BatchSplit:
    batch_id: str
    sku: str
    quantity: int


@dataclass(frozen=True)
class PalletSplit:
    original_pallet: str
    new_pallet: str
    sku: str
    quantities: str = ""


@dataclass(frozen=True)
class AdjustmentLine:
    item_code: str
    current_quantity: int
    adjusted_quantity: int
    reason: str
    location: Optional[str] = None


@dataclass(frozen=True)
class CountLine:
    item_code: str
    system_quantity: int
    physical_quantity: int

    @property
    def variance(self) -> int:
        """Physical minus system quantity."""
        return self.physical_quantity - self.system_quantity


# ============================================================================
# Inbound
# ============================================================================


@dataclass(frozen=True)
class CreateShipment:
    name: ClassVar[str] = "create_shipment"
    shipment_id: str
    items: Tuple[LineItem, ...]


@dataclass(frozen=True)
class NavigatePreReceiving:
    name: ClassVar[str] = "navigate_pre_receiving"
    shipment_id: str


@dataclass(frozen=True)
class AssignLots:
    name: ClassVar[str] = "assign_lots"
    lot_assignments: Dict[str, Tuple[str, ...]] = field(default_factory=dict)


@dataclass(frozen=True)
class AssignLocations:
    name: ClassVar[str] = "assign_locations"
    location_assignments: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class CheckPallets:
    name: ClassVar[str] = "check_pallets"
    pallets: Tuple[PalletCheck, ...]


@dataclass(frozen=True)
class CompleteReceiving:
    name: ClassVar[str] = "complete_receiving"


@dataclass(frozen=True)
class CreateReceipt:
    name: ClassVar[str] = "create_receipt"
    receipt_number: str


# ============================================================================
# Shared by inbound and outbound
# ============================================================================


@dataclass(frozen=True)
class CreateAppointment:
    name: ClassVar[str] = "create_appointment"
    appointment_number: str


@dataclass(frozen=True)
class CloseAppointment:
    name: ClassVar[str] = "close_appointment"
    appointment_number: str = ""


# ============================================================================
# Outbound
# ============================================================================


@dataclass(frozen=True)
class CreateOrder:
    name: ClassVar[str] = "create_order"
    order_id: str
    items: Tuple[LineItem, ...]


@dataclass(frozen=True)
class NavigateOrderChange:
    name: ClassVar[str] = "navigate_order_change"
    order_id: str


@dataclass(frozen=True)
class AssignPool:
    name: ClassVar[str] = "assign_pool"
    pool_number: str


@dataclass(frozen=True)
class PrintOrder:
    name: ClassVar[str] = "print_order"
    pool_number: str


@dataclass(frozen=True)
class CompletePick:
    name: ClassVar[str] = "complete_pick"
    picks: Tuple[PickLine, ...]


@dataclass(frozen=True)
class ConfirmOrder:
    name: ClassVar[str] = "confirm_order"
    edi_type: str = "945"


@dataclass(frozen=True)
class SplitBatches:
    name: ClassVar[str] = "split_batches"
    batches: Tuple[BatchSplit, ...]


@dataclass(frozen=True)
class SplitPallets:
    name: ClassVar[str] = "split_pallets"
    splits: Tuple[PalletSplit, ...]


# ============================================================================
# Inventory adjustment
# ============================================================================


@dataclass(frozen=True)
class PositiveAdjustment:
    name: ClassVar[str] = "positive_adjustment"
    adjustments: Tuple[AdjustmentLine, ...]


@dataclass(frozen=True)
class NegativeAdjustment:
    name: ClassVar[str] = "negative_adjustment"
    adjustments: Tuple[AdjustmentLine, ...]


@dataclass(frozen=True)
class CycleCount:
    name: ClassVar[str] = "cycle_count"
    location: str
    counts: Tuple[CountLine, ...]


@dataclass(frozen=True)
class ApproveAdjustment:
    name: ClassVar[str] = "approve_adjustment"
    approval_user: Optional[str] = None


@dataclass(frozen=True)
class ValidateInventory:
    name: ClassVar[str] = "validate_inventory"
    item_codes: Tuple[str, ...]


# ============================================================================
# Login
# ============================================================================


@dataclass(frozen=True)
class Login:
    name: ClassVar[str] = "login"
    username: str
    password: str = field(repr=False)


Operation = Union[
    CreateShipment,
    NavigatePreReceiving,
    AssignLots,
    AssignLocations,
    CheckPallets,
    CompleteReceiving,
    CreateReceipt,
    CreateAppointment,
    CloseAppointment,
    CreateOrder,
    NavigateOrderChange,
    AssignPool,
    PrintOrder,
    CompletePick,
    ConfirmOrder,
    SplitBatches,
    SplitPallets,
    PositiveAdjustment,
    NegativeAdjustment,
    CycleCount,
    ApproveAdjustment,
    ValidateInventory,
    Login,
]


def parse_pairs(pairs) -> Dict[str, str]:
    """Turn ``["SKU-001=100", ...]`` into ``{"SKU-001": "100", ...}``.

    Used for keyword arguments written as KEY=VALUE cells.
    """
    result = {}
    for pair in pairs:
        key, sep, value = str(pair).partition("=")
        if not sep:
            raise ValueError(f"Expected KEY=VALUE, got '{pair}'")
        result[key.strip()] = value.strip()
    return result
