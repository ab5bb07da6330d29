"""Inventory Adjustment Keywords for Robot Framework.

Keywords for adjustments and cycle counts, aligned with BDD scenario steps.
Each keyword takes the inventory page returned by "Get inventory page".

Mirrors: tests/step_defs/inventory_steps.py
"""

from typing import Dict

from robot.api.deco import keyword

from warehouse_bdd.operations import (
    AdjustmentLine,
    ApproveAdjustment,
    CountLine,
    CycleCount,
    NegativeAdjustment,
    PositiveAdjustment,
    ValidateInventory,
)
from warehouse_bdd.pages.inventory_adjustment_page import InventoryAdjustmentPage


def _require(result: bool, message: str) -> None:
    if not result:
        raise AssertionError(message)


class InventoryKeywords:
    """Keywords for inventory adjustment operations matching BDD scenario steps."""

    ROBOT_LIBRARY_SCOPE = "SUITE"
    ROBOT_LIBRARY_DOC_FORMAT = "TEXT"

    def __init__(self) -> None:
        """Initialize InventoryKeywords."""
        self._cycle_count_location: str = ""

    # =========================================================================
    # Adjustment Keywords
    # =========================================================================

    def _line(self, page, item_code, current, adjusted, reason) -> AdjustmentLine:
        return AdjustmentLine(
            item_code=item_code,
            current_quantity=int(current),
            adjusted_quantity=int(adjusted),
            reason=reason,
            location=page.context.get_metadata_as_string(f"location_{item_code}"),
        )

    @keyword("Perform positive adjustment")
    def positive_adjustment(
        self, page: InventoryAdjustmentPage, item_code: str, current: str, adjusted: str, reason: str
    ) -> None:
        """Raise an item's quantity.

        Maps to scenario step:
        - "When I perform positive adjustments:" (one table row)

        Arguments:
            page: inventory page
            item_code: SKU being adjusted
            current: quantity before the adjustment
            adjusted: quantity after the adjustment
            reason: adjustment reason
        """
        line = self._line(page, item_code, current, adjusted, reason)
        _require(
            page.perform(PositiveAdjustment(adjustments=(line,))),
            f"Failed to perform positive adjustment for {item_code}",
        )

    @keyword("Perform negative adjustment")
    def negative_adjustment(
        self, page: InventoryAdjustmentPage, item_code: str, current: str, adjusted: str, reason: str
    ) -> None:
        """Maps to scenario step:
        - "When I perform negative adjustments:" (one table row)
        """
        line = self._line(page, item_code, current, adjusted, reason)
        _require(
            page.perform(NegativeAdjustment(adjustments=(line,))),
            f"Failed to perform negative adjustment for {item_code}",
        )

    # =========================================================================
    # Cycle Count Keywords
    # =========================================================================

    @keyword("Schedule cycle count for location")
    def schedule_cycle_count(self, location: str) -> None:
        self._cycle_count_location = location

    @keyword("Perform physical count")
    def physical_count(self, page: InventoryAdjustmentPage, *counts: str) -> None:
        """Enter physical counts for the scheduled location.

        Arguments:
            counts: SKU:SYSTEM:PHYSICAL triples, e.g. SKU-201:100:90
        """
        lines = []
        for count in counts:
            item_code, system, physical = str(count).split(":")
            lines.append(
                CountLine(item_code=item_code, system_quantity=int(system), physical_quantity=int(physical))
            )
        _require(
            page.perform(CycleCount(location=self._cycle_count_location, counts=tuple(lines))),
            "Failed to perform physical count",
        )

    @keyword("I approve the cycle count adjustments")
    def approve(self, page: InventoryAdjustmentPage, approval_user: str = "") -> None:
        _require(
            page.perform(ApproveAdjustment(approval_user=approval_user or None)),
            "Failed to approve cycle count adjustments",
        )

    @keyword("Get variance report")
    def get_variance_report(self, page: InventoryAdjustmentPage) -> Dict[str, int]:
        """Returns:
            Physical minus system quantity per item
        """
        return page.variance_report()

    # =========================================================================
    # Validation Keywords
    # =========================================================================

    @keyword("Validate inventory via REST API")
    def validate_inventory(self, page: InventoryAdjustmentPage, *item_codes: str) -> None:
        """Compare API totals with the counted quantities.

        Maps to scenario steps:
        - "Then I validate the adjusted inventory via REST API call"
        - "Then I validate the cycle count results via REST API call"

        Arguments:
            item_codes: items to check, defaults to every counted item
        """
        codes = tuple(item_codes) or tuple(page.physical_quantities)
        _require(
            page.perform(ValidateInventory(item_codes=codes)),
            "Inventory validation via REST API failed",
        )

    @keyword("The inventory levels should be updated correctly")
    def levels_updated(self, page: InventoryAdjustmentPage) -> None:
        mismatches = {
            item_code: page.context.get_inventory_level(item_code)
            for item_code, expected in page.physical_quantities.items()
            if page.context.get_inventory_level(item_code) != expected
        }
        if mismatches:
            raise AssertionError(f"Inventory levels not updated correctly: {mismatches}")
