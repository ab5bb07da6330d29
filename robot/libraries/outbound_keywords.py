"""Outbound Order Keywords for Robot Framework.

Keywords for outbound picking and shipping, aligned with BDD scenario steps.
Each keyword takes the outbound page returned by "Get outbound page".

Mirrors: tests/step_defs/outbound_steps.py
"""

from typing import Dict

from robot.api.deco import keyword

from warehouse_bdd.operations import (
    AssignPool,
    CloseAppointment,
    CompletePick,
    ConfirmOrder,
    CreateAppointment,
    CreateOrder,
    LineItem,
    NavigateOrderChange,
    PickLine,
    PrintOrder,
    parse_pairs,
)
from warehouse_bdd.pages.outbound_page import OutboundShipmentPage


def _require(result: bool, message: str) -> None:
    if not result:
        raise AssertionError(message)


class OutboundKeywords:
    """Keywords for outbound order operations matching BDD scenario steps."""

    ROBOT_LIBRARY_SCOPE = "SUITE"
    ROBOT_LIBRARY_DOC_FORMAT = "TEXT"

    # =========================================================================
    # Order Keywords
    # =========================================================================

    @keyword("Create outbound order")
    def create_order(self, page: OutboundShipmentPage, order_id: str, *items: str) -> None:
        """Create an order with ordered quantities.

        Maps to scenario steps:
        - "Given I create a new outbound order "<id>" with items:"
        - and its large quantities / mixed / compatible / original variants

        Arguments:
            page: outbound page
            order_id: order identifier
            items: SKU=QUANTITY pairs, e.g. SKU-001=10
        """
        line_items = tuple(
            LineItem(sku=sku, quantity=int(quantity)) for sku, quantity in parse_pairs(items).items()
        )
        _require(
            page.perform(CreateOrder(order_id=order_id, items=line_items)),
            f"Failed to create outbound order: {order_id}",
        )
        print(f"✓ Outbound order {order_id} created with {len(line_items)} items")

    @keyword("Navigate to order change")
    def navigate_order_change(self, page: OutboundShipmentPage, order_id: str) -> None:
        _require(
            page.perform(NavigateOrderChange(order_id=order_id)),
            "Failed to navigate to order change screen",
        )

    @keyword("Create order appointment")
    def create_appointment(self, page: OutboundShipmentPage, appointment_number: str) -> None:
        _require(
            page.perform(CreateAppointment(appointment_number=appointment_number)),
            f"Failed to create appointment: {appointment_number}",
        )

    @keyword("Assign pool number")
    def assign_pool(self, page: OutboundShipmentPage, pool_number: str) -> None:
        _require(
            page.perform(AssignPool(pool_number=pool_number)),
            f"Failed to assign pool number: {pool_number}",
        )

    @keyword("Print order by pool number")
    def print_order(self, page: OutboundShipmentPage, pool_number: str) -> None:
        _require(
            page.perform(PrintOrder(pool_number=pool_number)),
            f"Failed to print order for pool: {pool_number}",
        )

    # =========================================================================
    # Picking Keywords
    # =========================================================================

    @keyword("Complete manual pick on pallet")
    def complete_pick(self, page: OutboundShipmentPage, pallet_id: str, *picks: str) -> None:
        """Pick every SKU onto one pallet.

        Maps to scenario step:
        - "When I complete manual pick with pallet numbers:"

        Arguments:
            pallet_id: pallet receiving the picks
            picks: SKU=QUANTITY pairs
        """
        lines = tuple(
            PickLine(sku=sku, pallet_id=pallet_id, quantity=int(quantity))
            for sku, quantity in parse_pairs(picks).items()
        )
        _require(page.perform(CompletePick(picks=lines)), "Failed to complete manual pick")

    @keyword("Close order appointment")
    def close_appointment(self, page: OutboundShipmentPage, appointment_number: str = "") -> None:
        _require(
            page.perform(CloseAppointment(appointment_number=appointment_number)),
            f"Failed to close appointment {appointment_number}",
        )

    @keyword("I confirm the order for 945 generation")
    def confirm_order(self, page: OutboundShipmentPage) -> None:
        _require(
            page.perform(ConfirmOrder(edi_type="945")),
            "Failed to confirm order for 945 generation",
        )

    # =========================================================================
    # Validation Keywords
    # =========================================================================

    @keyword("Order status should be")
    def order_status_should_be(self, page: OutboundShipmentPage, status: str) -> None:
        _require(
            page.validate_order_status(status),
            f"Order status validation failed. Expected: {status}",
        )

    @keyword("Get shortage report")
    def get_shortage_report(self, page: OutboundShipmentPage) -> Dict[str, int]:
        """Returns:
            Ordered minus picked quantity for each short-picked SKU
        """
        return page.shortage_report()

    @keyword("The shortage report should be generated")
    def shortage_report_should_exist(self, page: OutboundShipmentPage) -> None:
        report = page.shortage_report()
        if not report:
            raise AssertionError("Shortage report should not be empty")
        print(f"✓ Shortage report: {report}")
