"""Outbound shipment screen: order creation, picking and confirmation."""

from __future__ import annotations

from typing import Dict, List, Set

from warehouse_bdd.operations import (
    AssignPool,
    CloseAppointment,
    CompletePick,
    ConfirmOrder,
    CreateAppointment,
    CreateOrder,
    NavigateOrderChange,
    PrintOrder,
    SplitBatches,
    SplitPallets,
)
from warehouse_bdd.pages.base_page import BasePage, Handler

CREATED = "CREATED"
CURRENT_ORDER = "current_order"


class OutboundShipmentPage(BasePage):
    """Outbound Shipment Management page."""

    page_title = "Outbound Shipment Management"
    page_url = "/warehouse/outbound"
    required_elements = (
        ("outbound.order_id_input", "Order ID input"),
        ("outbound.create_order_button", "Create Order button"),
    )

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.ordered_items: Dict[str, int] = {}
        self.picked_items: Dict[str, int] = {}
        self.pallet_assignments: Dict[str, str] = {}
        self.pool_assignments: Dict[str, str] = {}
        self.processed_batches: Set[str] = set()
        self.picking_sequence: List[str] = []

    def handlers(self) -> Dict[type, Handler]:
        return {
            CreateOrder: self.create_order,
            NavigateOrderChange: self.navigate_order_change,
            CreateAppointment: self.create_appointment,
            AssignPool: self.assign_pool,
            PrintOrder: self.print_order,
            CompletePick: self.complete_pick,
            CloseAppointment: self.close_appointment,
            ConfirmOrder: self.confirm_order,
            SplitBatches: self.split_batches,
            SplitPallets: self.split_pallets,
        }

    @property
    def current_order_id(self) -> str:
        return self.get_page_data("current_order_id", CURRENT_ORDER)

    # -- Operations --

    def create_order(self, op: CreateOrder) -> bool:
        self.enter_text("outbound.order_id_input", op.order_id, "Order ID")
        self.click("outbound.create_order_button", "Create Order")

        for item in op.items:
            self.ordered_items[item.sku] = item.quantity
            self.context.store_order_data(op.order_id, f"ordered_{item.sku}", item.quantity)

        self.store_page_data("current_order_id", op.order_id)
        self.log.passed(f"Order created: {op.order_id}", screenshot=True)
        return self.validate_success_message("Order created")

    def navigate_order_change(self, op: NavigateOrderChange) -> bool:
        self.click("outbound.order_change_button", "Order Change")
        self.wait_for_page_load()
        self.log.passed(f"Navigated to order change screen for {op.order_id}")
        return True

    def create_appointment(self, op: CreateAppointment) -> bool:
        self.enter_text(
            "outbound.appointment_number_input", op.appointment_number, "Appointment Number"
        )
        self.click("outbound.create_appointment_button", "Create Appointment")
        self.store_page_data("current_appointment", op.appointment_number)
        return self.validate_success_message("Appointment created")

    def assign_pool(self, op: AssignPool) -> bool:
        self.enter_text("outbound.pool_number_input", op.pool_number, "Pool Number")
        self.click("outbound.assign_pool_button", "Assign Pool")
        self.pool_assignments[self.current_order_id] = op.pool_number
        self.context.store_order_data(self.current_order_id, "pool_number", op.pool_number)
        return self.validate_success_message("Pool assigned")

    def print_order(self, op: PrintOrder) -> bool:
        self.click("outbound.print_order_button", "Print Order")
        self.log.info(f"Printing order for pool {op.pool_number}")
        return self.validate_success_message("Order printed")

    def complete_pick(self, op: CompletePick) -> bool:
        for pick in op.picks:
            self._assign_pallet(pick.sku, pick.pallet_id)
            self.picked_items[pick.sku] = pick.quantity
            self.picking_sequence.append(pick.sku)
            self.context.store_order_data(self.current_order_id, f"picked_{pick.sku}", pick.quantity)
            self.context.assign_pallet(pick.sku, pick.pallet_id)

        self.click("outbound.complete_pick_button", "Complete Pick")
        return self.validate_success_message("Pick completed")

    def _assign_pallet(self, sku: str, pallet_id: str) -> None:
        self.enter_text("outbound.pallet_id_input", pallet_id, f"Pallet ID for {sku}")
        self.click("outbound.assign_pallet_button", "Assign Pallet")
        self.pallet_assignments[sku] = pallet_id

    def close_appointment(self, op: CloseAppointment) -> bool:
        self.click("outbound.close_appointment_button", "Close Appointment")
        self.log.info(f"Closing appointment {op.appointment_number}")
        return self.validate_success_message("Appointment closed")

    def confirm_order(self, op: ConfirmOrder) -> bool:
        self.click("outbound.confirm_order_button", "Confirm Order")
        self.log.info(f"Order confirmed for {op.edi_type} generation")
        return self.validate_success_message("Order confirmed")

    def split_batches(self, op: SplitBatches) -> bool:
        for batch in op.batches:
            self.processed_batches.add(batch.batch_id)
            self.context.store_order_data(
                self.current_order_id,
                f"batch_{batch.batch_id}",
                {"sku": batch.sku, "quantity": batch.quantity},
            )
        self.log.passed(f"Order split into {len(op.batches)} batches", screenshot=True)
        return True

    def split_pallets(self, op: SplitPallets) -> bool:
        for split in op.splits:
            self.pallet_assignments[split.sku] = split.new_pallet
            self.context.assign_pallet(split.sku, split.new_pallet)
            self.log.info(f"Pallet split: {split.original_pallet} -> {split.new_pallet} ({split.sku})")
        self.log.passed("Pallets split", screenshot=True)
        return True

    # -- Reports --

    def shortage_report(self) -> Dict[str, int]:
        """Ordered minus picked quantity, for short-picked SKUs only."""
        report = {}
        for sku, ordered in self.ordered_items.items():
            shortage = ordered - self.picked_items.get(sku, 0)
            if shortage > 0:
                report[sku] = shortage
        return report

    def short_picked_items(self) -> List[str]:
        return list(self.shortage_report())

    def current_status(self) -> str:
        return self.read_status("outbound.order_status", "order status", CREATED)

    def validate_order_status(self, expected: str) -> bool:
        return self.validate_status(self.current_status(), expected, "Order status")
