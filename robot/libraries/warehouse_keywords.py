"""Base Warehouse Keywords for Robot Framework.

Provides the browser session, page objects and shared scenario data for
the warehouse keyword libraries. Page objects returned here are passed to
the inbound, outbound and inventory keywords.

Mirrors: the fixtures in the root conftest.py
"""

from typing import Any, Optional

from robot.api.deco import keyword

from warehouse_bdd.config import WarehouseSettings, load_settings
from warehouse_bdd.data_store import WarehouseContext
from warehouse_bdd.inventory_api import InventoryApiClient
from warehouse_bdd.pages.inbound_page import InboundShipmentPage
from warehouse_bdd.pages.inventory_adjustment_page import InventoryAdjustmentPage
from warehouse_bdd.pages.login_page import LoginPage
from warehouse_bdd.pages.outbound_page import OutboundShipmentPage
from warehouse_bdd.reporting import RunReport, StepLogger
from warehouse_bdd.session import DriverSessionRegistry

# Robot test statuses to report outcomes
ROBOT_OUTCOMES = {"PASS": "passed", "FAIL": "failed", "SKIP": "skipped"}


class WarehouseKeywords:
    """Base keywords for the warehouse browser session and page access."""

    ROBOT_LIBRARY_SCOPE = "SUITE"
    ROBOT_LIBRARY_DOC_FORMAT = "TEXT"

    def __init__(self, settings_file: Optional[str] = None) -> None:
        """Initialize WarehouseKeywords.

        Arguments:
            settings_file: optional settings YAML, defaults to config/settings.yaml
        """
        self._settings_file = settings_file
        self._settings: Optional[WarehouseSettings] = None
        self._registry: Optional[DriverSessionRegistry] = None
        self._report: Optional[RunReport] = None
        self._step_log: Optional[StepLogger] = None
        self.context = WarehouseContext()

    # =========================================================================
    # Session Keywords
    # =========================================================================

    @keyword("Open warehouse session")
    def open_session(self, test_name: str = "Robot suite") -> None:
        """Start the browser and open the warehouse application.

        Maps to scenario step:
        - "Given the warehouse management system is available"

        Arguments:
            test_name: name of the report entry for this session
        """
        if self._report is None:
            self._settings = load_settings(self._settings_file)
            self._registry = DriverSessionRegistry(self._settings)
            self._report = RunReport(self._settings.output_dir, title="Warehouse Robot Report")
            self._step_log = StepLogger(self._report, driver_source=self._registry.current)

        driver = self._registry.acquire()
        self._report.start_test(test_name)
        driver.get(self._settings.url)
        print(f"✓ Warehouse management system is available at {self._settings.url}")

    @keyword("Close warehouse session")
    def close_session(self, outcome: str = "passed") -> None:
        """Quit the browser and record the test outcome.

        Safe to call when no session was opened.

        Arguments:
            outcome: report outcome, or a Robot status such as ${TEST STATUS}
        """
        if self._registry is not None:
            self._registry.release()
        if self._report is not None:
            self._report.end_test(ROBOT_OUTCOMES.get(outcome.upper(), outcome))

    @keyword("Close warehouse suite")
    def close_suite(self) -> None:
        """Write the report for every test run through this library.

        Use as the suite teardown. Does nothing when no session was opened.
        """
        if self._registry is not None:
            self._registry.release()
        if self._report is None:
            return
        html_path, _ = self._report.flush()
        print(f"Warehouse report: {html_path}")
        self._report = None
        self._step_log = None
        self._registry = None

    @keyword("Log into warehouse system as")
    def logged_in_as(self, role: str) -> None:
        """Maps to scenario step:
        - "Given I am logged into the warehouse system as "<role>""
        """
        self.context.add_metadata("current_user", role)
        self.context.add_audit_entry(f"Session started as {role}")

    # =========================================================================
    # Page Access Keywords
    # =========================================================================

    def _page_args(self) -> tuple:
        if self._registry is None or self._registry.current() is None:
            raise AssertionError("No warehouse session open; run 'Open warehouse session' first")
        return (self._registry.current(), self._step_log, self.context)

    def _page_kwargs(self) -> dict:
        return {"app_url": self._settings.url, "wait_seconds": self._settings.explicit_wait}

    @keyword("Get login page")
    def get_login_page(self) -> LoginPage:
        return LoginPage(*self._page_args(), **self._page_kwargs())

    @keyword("Get inbound page")
    def get_inbound_page(self) -> InboundShipmentPage:
        return InboundShipmentPage(*self._page_args(), **self._page_kwargs())

    @keyword("Get outbound page")
    def get_outbound_page(self) -> OutboundShipmentPage:
        return OutboundShipmentPage(*self._page_args(), **self._page_kwargs())

    @keyword("Get inventory page")
    def get_inventory_page(self) -> InventoryAdjustmentPage:
        api = InventoryApiClient(self._settings.base_url) if self._settings.base_url else None
        return InventoryAdjustmentPage(*self._page_args(), api=api, **self._page_kwargs())

    @keyword("Get inventory API client")
    def get_inventory_api(self) -> InventoryApiClient:
        """Raises ConfigurationError when no API base_url is configured."""
        return InventoryApiClient(self._settings.require_api_base_url())

    # =========================================================================
    # Context Management Keywords
    # =========================================================================

    @keyword("Store in context")
    def set_context(self, key: str, value: Any) -> None:
        self.context.add_metadata(key, value)

    @keyword("Get from context")
    def get_context(self, key: str, default: Any = None) -> Any:
        return self.context.get_metadata(key, default)

    @keyword("Audit trail should contain")
    def audit_trail_should_contain(self, keyword_text: str) -> None:
        if not self.context.find_audit_entries(keyword_text):
            raise AssertionError(f"No audit entry contains '{keyword_text}'")
