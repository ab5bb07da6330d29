"""Inbound Shipment Keywords for Robot Framework.

Keywords for inbound receiving, aligned with BDD scenario steps. Each
keyword takes the inbound page returned by "Get inbound page".

Mirrors: tests/step_defs/inbound_steps.py
"""

from robot.api.deco import keyword

from warehouse_bdd.edi import build_944
from warehouse_bdd.operations import (
    AssignLocations,
    AssignLots,
    CheckPallets,
    CloseAppointment,
    CompleteReceiving,
    CreateAppointment,
    CreateReceipt,
    CreateShipment,
    LineItem,
    NavigatePreReceiving,
    PalletCheck,
    parse_pairs,
)
from warehouse_bdd.pages.inbound_page import InboundShipmentPage


def _require(result: bool, message: str) -> None:
    if not result:
        raise AssertionError(message)


class InboundKeywords:
    """Keywords for inbound shipment operations matching BDD scenario steps."""

    ROBOT_LIBRARY_SCOPE = "SUITE"
    ROBOT_LIBRARY_DOC_FORMAT = "TEXT"

    # =========================================================================
    # Shipment Keywords
    # =========================================================================

    @keyword("Create inbound shipment")
    def create_shipment(self, page: InboundShipmentPage, shipment_id: str, *items: str) -> None:
        """Create a shipment with expected quantities.

        Maps to scenario step:
        - "Given I create an inbound shipment "<id>" with items:"

        Arguments:
            page: inbound page
            shipment_id: shipment identifier
            items: SKU=QUANTITY pairs, e.g. SKU-001=100
        """
        line_items = tuple(
            LineItem(sku=sku, quantity=int(quantity)) for sku, quantity in parse_pairs(items).items()
        )
        _require(
            page.perform(CreateShipment(shipment_id=shipment_id, items=line_items)),
            f"Failed to create inbound shipment {shipment_id}",
        )
        print(f"✓ Inbound shipment {shipment_id} created with {len(line_items)} items")

    @keyword("Navigate to pre-receiving")
    def navigate_pre_receiving(self, page: InboundShipmentPage, shipment_id: str) -> None:
        _require(
            page.perform(NavigatePreReceiving(shipment_id=shipment_id)),
            f"Failed to navigate to pre-receiving for {shipment_id}",
        )

    @keyword("Create shipment appointment")
    def create_appointment(self, page: InboundShipmentPage, appointment_number: str) -> None:
        _require(
            page.perform(CreateAppointment(appointment_number=appointment_number)),
            f"Failed to create appointment {appointment_number}",
        )

    # =========================================================================
    # Receiving Keywords
    # =========================================================================

    @keyword("Assign lot numbers")
    def assign_lots(self, page: InboundShipmentPage, *assignments: str) -> None:
        """Arguments:
            assignments: SKU=LOT[,LOT...] pairs, e.g. SKU-001=LOT-A1,LOT-A2
        """
        lots = {
            sku: tuple(lot.strip() for lot in value.split(",") if lot.strip())
            for sku, value in parse_pairs(assignments).items()
        }
        _require(page.perform(AssignLots(lot_assignments=lots)), "Failed to assign lot numbers")

    @keyword("Assign storage locations")
    def assign_locations(self, page: InboundShipmentPage, *assignments: str) -> None:
        _require(
            page.perform(AssignLocations(location_assignments=parse_pairs(assignments))),
            "Failed to assign storage locations",
        )

    @keyword("Check full receiving pallet")
    def check_pallet(self, page: InboundShipmentPage, pallet_id: str, *skus: str) -> None:
        pallet = PalletCheck(pallet_id=pallet_id, skus=tuple(skus), status="Full")
        _require(page.perform(CheckPallets(pallets=(pallet,))), f"Failed to check pallet {pallet_id}")

    @keyword("I complete the receiving process for all items")
    def complete_receiving(self, page: InboundShipmentPage) -> None:
        _require(page.perform(CompleteReceiving()), "Receiving completion failed")

    @keyword("Create receipt")
    def create_receipt(self, page: InboundShipmentPage, receipt_number: str) -> None:
        _require(
            page.perform(CreateReceipt(receipt_number=receipt_number)),
            f"Failed to create receipt {receipt_number}",
        )

    @keyword("Close shipment appointment")
    def close_appointment(self, page: InboundShipmentPage, appointment_number: str = "") -> None:
        _require(
            page.perform(CloseAppointment(appointment_number=appointment_number)),
            f"Failed to close appointment {appointment_number}",
        )

    # =========================================================================
    # Validation Keywords
    # =========================================================================

    @keyword("The 944 EDI should be generated and ready to send")
    def generate_944(self, page: InboundShipmentPage) -> str:
        """Build the 944 document from the lots recorded for the shipment.

        Returns:
            The EDI document text
        """
        lots = {
            sku: lot_numbers
            for sku, lot_numbers in page.context.all_lot_numbers().items()
            if sku in page.expected_items
        }
        if not lots:
            raise AssertionError(f"No lot numbers recorded for shipment {page.current_shipment_id}")
        document = build_944(page.current_shipment_id, lots)
        page.context.add_audit_entry(f"944 EDI generated for {page.current_shipment_id}")
        return document

    @keyword("Shipment status should be")
    def shipment_status_should_be(self, page: InboundShipmentPage, status: str) -> None:
        _require(
            page.validate_shipment_status(status),
            f"Shipment status validation failed. Expected: {status}",
        )
