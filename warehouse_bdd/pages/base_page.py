"""
Base page object for the warehouse web application.

Every page exposes a single dispatch entry point, :meth:`BasePage.perform`,
which takes one of the typed operations from :mod:`warehouse_bdd.operations`.
Selectors are loaded from ``selectors.yaml`` so they can be updated when the
UI changes without touching code.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple

import requests
import yaml
from selenium.common.exceptions import TimeoutException, WebDriverException
from selenium.webdriver.common.by import By
from selenium.webdriver.remote.webdriver import WebDriver
from selenium.webdriver.remote.webelement import WebElement
from selenium.webdriver.support import expected_conditions as EC
from selenium.webdriver.support.ui import WebDriverWait

from warehouse_bdd.data_store import WarehouseContext
from warehouse_bdd.exceptions import PageValidationError, WarehouseUiError
from warehouse_bdd.reporting import StepLogger

logger = logging.getLogger(__name__)

SELECTORS_FILE = Path(__file__).parent / "selectors.yaml"
DEFAULT_WAIT = 30
PAGE_LOAD_WAIT = 5

# Errors converted into a failed result at the dispatch boundary
ACTION_ERRORS = (WebDriverException, WarehouseUiError, requests.exceptions.RequestException)

Handler = Callable[[Any], bool]


@lru_cache(maxsize=None)
def load_selectors(path: Path = SELECTORS_FILE) -> Dict[str, Any]:
    """Load UI selectors from YAML, organized by page."""
    with open(path) as f:
        return yaml.safe_load(f)


class BasePage:
    """Common behaviour of all warehouse pages.

    Subclasses set ``page_title``, ``page_url`` and ``required_elements`` and
    return their operation handlers from :meth:`handlers`.

    Example usage in step definitions:
        @when("I complete the receiving process for all items")
        def complete_receiving(inbound_page):
            if not inbound_page.perform(CompleteReceiving()):
                raise AssertionError("Receiving completion failed")
    """

    page_title: str = ""
    page_url: str = ""
    required_elements: Tuple[Tuple[str, str], ...] = ()

    def __init__(
        self,
        driver: WebDriver,
        step_log: StepLogger,
        context: WarehouseContext,
        app_url: str = "",
        wait_seconds: int = DEFAULT_WAIT,
    ) -> None:
        self.driver = driver
        self.log = step_log
        self.context = context
        self.app_url = app_url.rstrip("/")
        self.wait = WebDriverWait(self.driver, wait_seconds)
        self.short_wait = WebDriverWait(self.driver, min(PAGE_LOAD_WAIT, wait_seconds))
        self.selectors = load_selectors()
        self.page_data: Dict[str, Any] = {}

    # =========================================================================
    # Dispatch
    # =========================================================================

    def handlers(self) -> Dict[type, Handler]:
        """Map operation types to the methods that perform them."""
        return {}

    def perform(self, operation: Any) -> bool:
        """Run one operation on this page.

        Returns False (with a warning) for operations the page does not
        handle. Driver and API errors raised by the action are logged with a
        screenshot and returned as False.

        :raises PageValidationError: if a required element is not displayed
        """
        name = getattr(operation, "name", type(operation).__name__)
        handler = self.handlers().get(type(operation))
        if handler is None:
            self.log.warning(f"Unknown operation '{name}' for {self.page_title}")
            return False

        self.log.info(f"Performing '{name}' on {self.page_title}")
        self.wait_for_page_load()
        self.validate_page_elements()
        try:
            result = bool(handler(operation))
        except ACTION_ERRORS as e:
            return self.handle_operation_error(name, e)
        self.log_operation_result(name, result)
        return result

    def handle_operation_error(self, name: str, error: Exception) -> bool:
        self.log.failed(f"Operation '{name}' failed: {error}", screenshot=True)
        self.store_page_data("last_error", str(error))
        return False

    def log_operation_result(self, name: str, result: bool) -> None:
        if result:
            self.log.passed(f"Operation '{name}' completed successfully")
        else:
            self.log.failed(f"Operation '{name}' failed", screenshot=True)

    # =========================================================================
    # Page state
    # =========================================================================

    def wait_for_page_load(self) -> None:
        """Wait for the loading spinner to disappear (best effort)."""
        try:
            self.short_wait.until(
                EC.invisibility_of_element_located(self._get_locator("common.loading_spinner"))
            )
        except TimeoutException:
            self.log.warning(f"{self.page_title}: loading spinner still visible")

    def validate_page_elements(self) -> None:
        for selector_path, label in self.required_elements:
            if not self.is_element_displayed(selector_path):
                raise PageValidationError(f"{label} not found on {self.page_title}")

    def navigate_to_page(self) -> None:
        url = f"{self.app_url}{self.page_url}"
        self.driver.get(url)
        self.wait_for_page_load()
        self.log.info(f"Navigated to {self.page_title}: {url}")

    def is_on_correct_page(self) -> bool:
        return self.page_url in self.driver.current_url

    def store_page_data(self, key: str, value: Any) -> None:
        self.page_data[key] = value

    def get_page_data(self, key: str, default: Any = None) -> Any:
        return self.page_data.get(key, default)

    # =========================================================================
    # Element helpers
    # =========================================================================

    def _get_locator(self, selector_path: str, **kwargs) -> Tuple[str, str]:
        """Get locator from configuration with optional formatting.

        Args:
            selector_path: Dot-notation path to selector (e.g., "inbound.sku_row")
            **kwargs: Variables to format into selector (e.g., sku="SKU-001")

        Returns:
            Tuple of (By.TYPE, selector_string)
        """
        value = self.selectors
        for part in selector_path.split("."):
            value = value[part]

        selector = value["selector"].format(**kwargs) if kwargs else value["selector"]
        return (getattr(By, value["by"].upper()), selector)

    def find(self, selector_path: str, **kwargs) -> WebElement:
        return self.driver.find_element(*self._get_locator(selector_path, **kwargs))

    def is_element_displayed(self, selector_path: str, **kwargs) -> bool:
        try:
            return self.find(selector_path, **kwargs).is_displayed()
        except WebDriverException:
            return False

    def click(self, selector_path: str, label: str, **kwargs) -> None:
        try:
            element = self.wait.until(
                EC.element_to_be_clickable(self._get_locator(selector_path, **kwargs))
            )
            element.click()
        except WebDriverException as e:
            self.log.failed(f"Failed to click {label}: {e}")
            raise
        self.log.info(f"Clicked {label}")

    def enter_text(
        self, selector_path: str, text: str, label: str, masked: bool = False, **kwargs
    ) -> None:
        try:
            element = self.wait.until(
                EC.visibility_of_element_located(self._get_locator(selector_path, **kwargs))
            )
            element.clear()
            element.send_keys(text)
        except WebDriverException as e:
            self.log.failed(f"Failed to enter text into {label}: {e}")
            raise
        shown = "*" * len(text) if masked else text
        self.log.info(f"Entered '{shown}' into {label}")

    def _read_text(self, selector_path: str, **kwargs) -> str:
        element = self.wait.until(
            EC.visibility_of_element_located(self._get_locator(selector_path, **kwargs))
        )
        return element.text.strip()

    def get_text(self, selector_path: str, label: str, **kwargs) -> str:
        try:
            text = self._read_text(selector_path, **kwargs)
        except WebDriverException as e:
            self.log.failed(f"Failed to read {label}: {e}")
            raise
        self.log.info(f"{label}: {text}")
        return text

    def type_into(self, element: WebElement, text: str, label: str) -> None:
        """Fill an element already located (e.g. inside a table row)."""
        element.clear()
        element.send_keys(text)
        self.log.info(f"Entered '{text}' into {label}")

    def press(self, element: WebElement, label: str) -> None:
        element.click()
        self.log.info(f"Clicked {label}")

    def read_status(self, selector_path: str, label: str, default: str) -> str:
        """Read a status element, falling back to ``default`` with a warning."""
        try:
            return self._read_text(selector_path)
        except WebDriverException as e:
            self.log.warning(f"Could not determine {label}: {e.__class__.__name__}")
            return default

    def validate_status(self, actual: str, expected: str, label: str) -> bool:
        if actual == expected:
            self.log.passed(f"{label} validated: {actual}")
            return True
        self.log.failed(f"{label} mismatch. Expected: {expected}, Actual: {actual}")
        return False

    # =========================================================================
    # Messages and session
    # =========================================================================

    def _message_contains(self, selector_path: str, expected: str) -> Optional[bool]:
        try:
            element = self.short_wait.until(
                EC.visibility_of_element_located(self._get_locator(selector_path))
            )
        except TimeoutException:
            return None
        return expected in element.text

    def validate_success_message(self, expected: str) -> bool:
        found = self._message_contains("common.success_message", expected)
        if found is None:
            self.log.failed(f"Success message '{expected}' not displayed")
            return False
        if not found:
            self.log.failed(f"Success message does not contain '{expected}'")
        return found

    def validate_error_message(self, expected: str) -> bool:
        found = self._message_contains("common.error_message", expected)
        if found is None:
            self.log.failed(f"Error message '{expected}' not displayed")
            return False
        if not found:
            self.log.failed(f"Error message does not contain '{expected}'")
        return found

    def logout(self) -> None:
        self.click("common.user_menu", "User Menu")
        self.click("common.logout_button", "Logout")
        self.log.info("Logged out")
