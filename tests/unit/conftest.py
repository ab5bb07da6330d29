"""Unit test conftest.

This conftest is loaded by pytest when running unit tests from this directory.
It overrides fixtures from the root conftest.py to provide mock objects
instead of a real browser, report and inventory service, enabling isolated
unit testing of pages, step definition functions and keywords.
"""

from pathlib import Path

import pytest

from tests.unit.mocks import MockDriver, MockInventoryApi, MockStepLogger
from warehouse_bdd.config import WarehouseSettings
from warehouse_bdd.data_store import WarehouseContext
from warehouse_bdd.pages.inbound_page import InboundShipmentPage
from warehouse_bdd.pages.inventory_adjustment_page import InventoryAdjustmentPage
from warehouse_bdd.pages.login_page import LoginPage
from warehouse_bdd.pages.outbound_page import OutboundShipmentPage

APP_URL = "http://wms.test"


# -- Mock Infrastructure Fixtures --
# These fixtures override the real fixtures in the root conftest.py


@pytest.fixture
def settings(tmp_path: Path) -> WarehouseSettings:
    """Settings pointing at a fake application, with no waiting."""
    return WarehouseSettings(
        url=APP_URL,
        base_url="http://api.wms.test",
        explicit_wait=0,
        output_dir=tmp_path / "Test-Results",
    )


@pytest.fixture
def driver() -> MockDriver:
    return MockDriver()


@pytest.fixture
def step_log() -> MockStepLogger:
    return MockStepLogger()


@pytest.fixture
def wms_context() -> WarehouseContext:
    """Fresh warehouse context for each unit test."""
    return WarehouseContext()


@pytest.fixture
def mock_api() -> MockInventoryApi:
    return MockInventoryApi()


@pytest.fixture
def inventory_api(mock_api: MockInventoryApi) -> MockInventoryApi:
    return mock_api


# -- Page Fixtures --


def _page_kwargs() -> dict:
    return {"app_url": APP_URL, "wait_seconds": 0}


@pytest.fixture
def login_page(driver, step_log, wms_context) -> LoginPage:
    return LoginPage(driver, step_log, wms_context, **_page_kwargs())


@pytest.fixture
def inbound_page(driver, step_log, wms_context) -> InboundShipmentPage:
    return InboundShipmentPage(driver, step_log, wms_context, **_page_kwargs())


@pytest.fixture
def outbound_page(driver, step_log, wms_context) -> OutboundShipmentPage:
    return OutboundShipmentPage(driver, step_log, wms_context, **_page_kwargs())


@pytest.fixture
def inventory_page(driver, step_log, wms_context, mock_api) -> InventoryAdjustmentPage:
    return InventoryAdjustmentPage(driver, step_log, wms_context, api=mock_api, **_page_kwargs())


# -- Override and Disable Root Autouse Fixtures --
# The scenario report fixture from the root conftest.py opens report entries
# for every test. Unit tests do not need a report.


@pytest.fixture(scope="function", autouse=True)
def scenario_report():
    """Override and disable the scenario report fixture for unit tests."""
    yield  # Allows the test to run
    # No report entry is written
