"""Inbound shipment screen: shipment creation through receipt."""

from __future__ import annotations

from typing import Dict, List, Set

from warehouse_bdd.operations import (
    AssignLocations,
    AssignLots,
    CheckPallets,
    CloseAppointment,
    CompleteReceiving,
    CreateAppointment,
    CreateReceipt,
    CreateShipment,
    NavigatePreReceiving,
    PalletCheck,
)
from warehouse_bdd.pages.base_page import BasePage, Handler

PENDING = "Pending"
CURRENT_SHIPMENT = "current_shipment"


class InboundShipmentPage(BasePage):
    """Inbound Shipment Management page."""

    page_title = "Inbound Shipment Management"
    page_url = "/warehouse/inbound"
    required_elements = (
        ("inbound.shipment_id_input", "Shipment ID input"),
        ("inbound.create_shipment_button", "Create Shipment button"),
    )

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.expected_items: Dict[str, int] = {}
        self.received_items: Dict[str, int] = {}
        self.lot_assignments: Dict[str, List[str]] = {}
        self.location_assignments: Dict[str, str] = {}
        self.processed_pallets: Set[str] = set()

    def handlers(self) -> Dict[type, Handler]:
        return {
            CreateShipment: self.create_shipment,
            NavigatePreReceiving: self.navigate_pre_receiving,
            CreateAppointment: self.create_appointment,
            AssignLots: self.assign_lots,
            AssignLocations: self.assign_locations,
            CheckPallets: self.check_pallets,
            CompleteReceiving: self.complete_receiving,
            CreateReceipt: self.create_receipt,
            CloseAppointment: self.close_appointment,
        }

    @property
    def current_shipment_id(self) -> str:
        return self.get_page_data("current_shipment_id", CURRENT_SHIPMENT)

    # -- Operations --

    def create_shipment(self, op: CreateShipment) -> bool:
        self.enter_text("inbound.shipment_id_input", op.shipment_id, "Shipment ID")
        self.click("inbound.create_shipment_button", "Create Shipment")

        for item in op.items:
            self.expected_items[item.sku] = item.quantity
            self.context.store_shipment_data(op.shipment_id, f"expected_{item.sku}", item.quantity)

        self.store_page_data("current_shipment_id", op.shipment_id)
        self.log.passed(f"Shipment created: {op.shipment_id}", screenshot=True)
        return self.validate_success_message("Shipment created")

    def navigate_pre_receiving(self, op: NavigatePreReceiving) -> bool:
        self.click("inbound.pre_receiving_button", "Pre-Receiving")
        self.wait_for_page_load()
        self.log.passed(f"Navigated to pre-receiving screen for {op.shipment_id}")
        return True

    def create_appointment(self, op: CreateAppointment) -> bool:
        self.enter_text(
            "inbound.appointment_number_input", op.appointment_number, "Appointment Number"
        )
        self.click("inbound.create_appointment_button", "Create Appointment")
        self.store_page_data("appointment_number", op.appointment_number)
        return self.validate_success_message("Appointment created")

    def assign_lots(self, op: AssignLots) -> bool:
        for sku, lots in op.lot_assignments.items():
            unique_lots = list(dict.fromkeys(lot.strip() for lot in lots if lot.strip()))
            self.lot_assignments[sku] = unique_lots
            for lot_number in unique_lots:
                self._assign_single_lot(sku, lot_number)
                self.context.add_lot_number(sku, lot_number)
        self.log.passed("Lot numbers assigned", screenshot=True)
        return True

    def _assign_single_lot(self, sku: str, lot_number: str) -> None:
        row = self.find("inbound.sku_row", sku=sku)
        self.type_into(
            row.find_element(*self._get_locator("inbound.row_lot_input")),
            lot_number,
            f"Lot Number for {sku}",
        )
        self.press(
            row.find_element(*self._get_locator("inbound.row_assign_lot_button")),
            f"Assign Lot for {sku}",
        )

    def assign_locations(self, op: AssignLocations) -> bool:
        for sku, location in op.location_assignments.items():
            row = self.find("inbound.sku_row", sku=sku)
            self.type_into(
                row.find_element(*self._get_locator("inbound.row_location_input")),
                location,
                f"Location for {sku}",
            )
            self.press(
                row.find_element(*self._get_locator("inbound.row_assign_location_button")),
                f"Assign Location for {sku}",
            )
            self.location_assignments[sku] = location
            self.context.store_shipment_data(self.current_shipment_id, f"location_{sku}", location)
        self.log.passed("Locations assigned", screenshot=True)
        return True

    def check_pallets(self, op: CheckPallets) -> bool:
        for pallet in op.pallets:
            self._check_single_pallet(pallet)
            self.processed_pallets.add(pallet.pallet_id)
            for sku in pallet.skus:
                self.context.assign_pallet(sku, pallet.pallet_id)
                if pallet.is_full_receiving and sku in self.expected_items:
                    self.received_items[sku] = self.expected_items[sku]
        self.log.passed("Pallets checked", screenshot=True)
        return True

    def _check_single_pallet(self, pallet: PalletCheck) -> None:
        self.enter_text("inbound.pallet_id_input", pallet.pallet_id, "Pallet ID")
        self.click("inbound.check_pallet_button", "Check Pallet")
        for sku in pallet.skus:
            if self.is_element_displayed("inbound.pallet_sku", sku=sku):
                self.log.passed(f"SKU {sku} found on pallet {pallet.pallet_id}")
            else:
                self.log.warning(f"SKU {sku} not found on pallet {pallet.pallet_id}")
        self.log.info(f"Checked pallet {pallet.pallet_id} with status: {pallet.status}")

    def complete_receiving(self, op: CompleteReceiving) -> bool:
        self.click("inbound.complete_receiving_button", "Complete Receiving")
        self.wait_for_page_load()
        return self.validate_success_message("Receiving completed")

    def create_receipt(self, op: CreateReceipt) -> bool:
        self.click("inbound.create_receipt_button", "Create Receipt")
        self.store_page_data("receipt_number", op.receipt_number)
        return self.validate_success_message("Receipt created")

    def close_appointment(self, op: CloseAppointment) -> bool:
        self.click("inbound.close_appointment_button", "Close Appointment")
        self.log.info(f"Closing appointment {op.appointment_number}")
        return self.validate_success_message("Appointment closed")

    # -- Reports --

    def variance_report(self) -> Dict[str, int]:
        """Received minus expected quantity per SKU."""
        return {
            sku: self.received_items.get(sku, 0) - expected
            for sku, expected in self.expected_items.items()
        }

    def over_received_items(self) -> List[str]:
        return [sku for sku, variance in self.variance_report().items() if variance > 0]

    def short_received_items(self) -> List[str]:
        return [sku for sku, variance in self.variance_report().items() if variance < 0]

    def current_status(self) -> str:
        return self.read_status("inbound.shipment_status", "shipment status", PENDING)

    def validate_shipment_status(self, expected: str) -> bool:
        return self.validate_status(self.current_status(), expected, "Shipment status")

    def record_received(self, sku: str, quantity: int) -> None:
        self.received_items[sku] = quantity

