"""Unit tests for inventory adjustment and cycle count step definitions."""

from unittest.mock import patch

import pytest
from selenium.webdriver.common.by import By

from tests.step_defs.inventory_steps import (
    adjustment_recorded,
    all_api_validations_passed,
    approve_adjustments,
    assign_adjustment_lots,
    cycle_count_report,
    document_reasons,
    existing_inventory,
    inventory_consistent,
    inventory_levels_updated,
    investigate_discrepancies,
    negative_adjustments,
    physical_count,
    positive_adjustments,
    schedule_cycle_count,
    submit_adjustment,
    system_expected_inventory,
    validate_inventory_via_api,
)
from tests.unit.mocks import MockDriver, MockInventoryApi, MockStepLogger
from warehouse_bdd.data_store import WarehouseContext
from warehouse_bdd.exceptions import ConfigurationError
from warehouse_bdd.pages.inventory_adjustment_page import InventoryAdjustmentPage

EXISTING = [
    ["SKU", "Current Quantity", "Location"],
    ["SKU-101", "50", "A-01-01"],
    ["SKU-102", "100", "A-01-02"],
]

CYCLE_COUNT = [
    ["SKU", "System", "Physical"],
    ["SKU-201", "100", "95"],
    ["SKU-202", "50", "52"],
    ["SKU-203", "75", "75"],
]


@pytest.fixture(autouse=True)
def mock_select():
    with patch("warehouse_bdd.pages.inventory_adjustment_page.Select") as select:
        yield select


@pytest.fixture(autouse=True)
def confirmations(driver: MockDriver):
    driver.show_success("Adjustments submitted", "Cycle count recorded", "Adjustments approved")


@pytest.fixture
def counted(inventory_page: InventoryAdjustmentPage, wms_context: WarehouseContext, step_log) -> InventoryAdjustmentPage:
    """Inventory page after a physical count at location B-02."""
    schedule_cycle_count(location="B-02", wms_context=wms_context)
    physical_count(
        datatable=CYCLE_COUNT, inventory_page=inventory_page, wms_context=wms_context, step_log=step_log
    )
    return inventory_page


def test_existing_inventory(wms_context: WarehouseContext, step_log: MockStepLogger):
    existing_inventory(datatable=EXISTING, wms_context=wms_context, step_log=step_log)

    assert wms_context.get_inventory_level("SKU-102") == 100
    assert wms_context.get_metadata("location_SKU-101") == "A-01-01"
    assert "Existing inventory: SKU-101 - 50 at A-01-01" in step_log.messages("INFO")


def test_system_expected_inventory(wms_context: WarehouseContext):
    system_expected_inventory(
        datatable=[["SKU", "System Quantity", "Location"], ["SKU-201", "100", "B-02-01"]],
        wms_context=wms_context,
    )

    assert wms_context.get_inventory_level("SKU-201") == 100
    assert wms_context.get_metadata("system_qty_SKU-201") == 100


def test_positive_adjustment_flow(
    inventory_page: InventoryAdjustmentPage,
    wms_context: WarehouseContext,
    mock_api: MockInventoryApi,
    step_log: MockStepLogger,
):
    # Arrange
    existing_inventory(datatable=EXISTING, wms_context=wms_context, step_log=step_log)

    # Act
    positive_adjustments(
        datatable=[
            ["SKU", "Current", "Adjusted", "Reason"],
            ["SKU-101", "50", "60", "Found additional stock"],
        ],
        inventory_page=inventory_page,
        wms_context=wms_context,
    )
    submit_adjustment(inventory_page=inventory_page, step_log=step_log)
    document_reasons(inventory_page=inventory_page, wms_context=wms_context)

    # Assert
    assert mock_api.adjustments[0].location_id == "A-01-01"
    assert wms_context.get_inventory_level("SKU-101") == 60
    inventory_levels_updated(inventory_page=inventory_page, wms_context=wms_context, step_log=step_log)
    adjustment_recorded(wms_context=wms_context)
    assert wms_context.find_audit_entries("Adjustment reason documented: SKU-101 - Found additional stock")


def test_negative_adjustment(
    inventory_page: InventoryAdjustmentPage, wms_context: WarehouseContext, mock_api: MockInventoryApi
):
    negative_adjustments(
        datatable=[
            ["SKU", "Current", "Adjusted", "Reason"],
            ["SKU-102", "100", "90", "Damaged goods"],
        ],
        inventory_page=inventory_page,
        wms_context=wms_context,
    )

    assert mock_api.adjustments[0].adjustment_type == "DECREMENT"
    assert mock_api.adjustments[0].adjusted_quantity == 10
    assert wms_context.get_inventory_level("SKU-102") == 90


def test_adjustment_not_confirmed(inventory_page: InventoryAdjustmentPage, driver: MockDriver, wms_context):
    driver.hide(By.CLASS_NAME, "success-message")

    with pytest.raises(AssertionError, match="Failed to perform positive adjustments"):
        positive_adjustments(
            datatable=[["SKU", "Current", "Adjusted"], ["SKU-101", "50", "60"]],
            inventory_page=inventory_page,
            wms_context=wms_context,
        )


def test_submit_without_adjustments(inventory_page: InventoryAdjustmentPage, step_log):
    with pytest.raises(AssertionError, match="No adjustment has been submitted"):
        submit_adjustment(inventory_page=inventory_page, step_log=step_log)


def test_assign_adjustment_lots(wms_context: WarehouseContext):
    assign_adjustment_lots(
        datatable=[["SKU", "Lot Numbers"], ["SKU-101", "LOT-ADJ-1, LOT-ADJ-2"]],
        wms_context=wms_context,
    )

    assert wms_context.get_lot_numbers("SKU-101") == {"LOT-ADJ-1", "LOT-ADJ-2"}


def test_physical_count_uses_scheduled_location(counted: InventoryAdjustmentPage, wms_context, step_log):
    assert counted.location_mappings["SKU-201"] == "B-02"
    assert list(counted.pending_adjustments) == ["SKU-201", "SKU-202"]
    assert wms_context.get_shipment_data("CYCLE_COUNT_B-02", "SKU-202_physical") == 52
    assert "Physical count: SKU-201 - System: 100, Physical: 95, Variance: -5" in step_log.messages("INFO")


def test_investigate_discrepancies_skips_matching_counts(
    counted: InventoryAdjustmentPage, wms_context: WarehouseContext, step_log
):
    investigate_discrepancies(inventory_page=counted, wms_context=wms_context, step_log=step_log)

    entries = wms_context.find_audit_entries("Variance investigation")
    assert len(entries) == 2
    assert wms_context.find_audit_entries("SKU-201 - Short count")
    assert wms_context.find_audit_entries("SKU-202 - Over count")


def test_approve_applies_physical_counts(
    counted: InventoryAdjustmentPage, wms_context: WarehouseContext, step_log: MockStepLogger
):
    # Arrange
    wms_context.add_metadata("current_user", "warehouse_supervisor")
    wms_context.set_inventory_level("SKU-203", 75)

    # Act
    approve_adjustments(inventory_page=counted, wms_context=wms_context)

    # Assert
    assert counted.processed_adjustments == {"SKU-201", "SKU-202"}
    assert "Adjustments approved by warehouse_supervisor" in step_log.messages("INFO")
    inventory_levels_updated(inventory_page=counted, wms_context=wms_context, step_log=step_log)


def test_inventory_levels_not_updated(counted: InventoryAdjustmentPage, wms_context, step_log: MockStepLogger):
    with pytest.raises(AssertionError, match="Inventory levels not updated correctly"):
        inventory_levels_updated(inventory_page=counted, wms_context=wms_context, step_log=step_log)
    assert "Inventory level mismatch for SKU-201. Expected: 95, Actual: 0" in step_log.messages("FAIL")


def test_cycle_count_report(counted: InventoryAdjustmentPage, step_log: MockStepLogger):
    cycle_count_report(inventory_page=counted, step_log=step_log)

    assert "Cycle count variance: SKU-202 - 2" in step_log.messages("INFO")


def test_cycle_count_report_empty(inventory_page: InventoryAdjustmentPage, step_log):
    with pytest.raises(AssertionError, match="Cycle count report should not be empty"):
        cycle_count_report(inventory_page=inventory_page, step_log=step_log)


def test_validate_inventory_via_api(counted: InventoryAdjustmentPage, mock_api: MockInventoryApi, settings):
    mock_api.quantities.update({"SKU-201": 95, "SKU-202": 52, "SKU-203": 75})

    validate_inventory_via_api(inventory_page=counted, settings=settings)

    assert mock_api.requested == ["SKU-201", "SKU-202", "SKU-203"]


def test_validate_inventory_via_api_mismatch(counted: InventoryAdjustmentPage, mock_api: MockInventoryApi, settings):
    mock_api.quantities.update({"SKU-201": 100, "SKU-202": 52, "SKU-203": 75})

    with pytest.raises(AssertionError, match="Inventory validation via REST API failed"):
        validate_inventory_via_api(inventory_page=counted, settings=settings)


def test_validate_inventory_via_api_needs_base_url(counted: InventoryAdjustmentPage, settings):
    settings.base_url = ""

    with pytest.raises(ConfigurationError):
        validate_inventory_via_api(inventory_page=counted, settings=settings)


def test_all_api_validations_passed(inventory_page: InventoryAdjustmentPage):
    all_api_validations_passed(inventory_page=inventory_page)

    inventory_page.store_page_data("last_error", "Connection refused")
    with pytest.raises(AssertionError, match="An inventory operation failed: Connection refused"):
        all_api_validations_passed(inventory_page=inventory_page)


def test_inventory_consistent(counted: InventoryAdjustmentPage, mock_api: MockInventoryApi, step_log: MockStepLogger):
    # SKU-203 is unknown to the service and is skipped with a warning
    mock_api.quantities.update({"SKU-201": 95, "SKU-202": 50})

    with pytest.raises(AssertionError, match=r"inconsistency detected for \['SKU-202'\]"):
        inventory_consistent(inventory_page=counted, inventory_api=mock_api, step_log=step_log)
    assert step_log.messages("WARNING") == ["Consistency check skipped for SKU-203: status 404"]
