"""Browser session registry.

Binds exactly one Selenium driver to the calling thread for the duration of
one scenario. Use :meth:`DriverSessionRegistry.session` (or the ``driver``
fixture built on it) so the driver is always released, even when the
scenario fails.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Callable, Dict, Iterator, Optional

from selenium import webdriver
from selenium.common.exceptions import WebDriverException
from selenium.webdriver.remote.webdriver import WebDriver

from warehouse_bdd.config import WarehouseSettings
from warehouse_bdd.exceptions import SessionError

logger = logging.getLogger(__name__)

DriverFactory = Callable[[WarehouseSettings], WebDriver]


def create_driver(settings: WarehouseSettings) -> WebDriver:
    """Start a local browser for the configured browser choice.

    Unknown browser names fall back to Chrome.
    """
    browser = settings.browser.lower()
    if browser == "edge":
        options = webdriver.EdgeOptions()
        if settings.headless:
            options.add_argument("--headless=new")
        driver = webdriver.Edge(options=options)
    elif browser == "firefox":
        options = webdriver.FirefoxOptions()
        if settings.headless:
            options.add_argument("-headless")
        driver = webdriver.Firefox(options=options)
    else:
        if browser != "chrome":
            logger.warning("Unknown browser '%s', defaulting to chrome", settings.browser)
        options = webdriver.ChromeOptions()
        if settings.headless:
            options.add_argument("--headless=new")
            options.add_argument("--window-size=1920,1080")
        options.add_argument("--no-sandbox")
        options.add_argument("--disable-dev-shm-usage")
        driver = webdriver.Chrome(options=options)

    try:
        if not settings.headless:
            driver.maximize_window()
    except WebDriverException:
        driver.quit()
        raise
    logger.info("Started %s driver", browser)
    return driver


class DriverSessionRegistry:
    """One driver handle per execution thread.

    Example usage in a fixture:
        @pytest.fixture
        def driver(session_registry):
            with session_registry.session() as drv:
                yield drv
    """

    def __init__(
        self, settings: WarehouseSettings, factory: DriverFactory = create_driver
    ) -> None:
        self._settings = settings
        self._factory = factory
        self._drivers: Dict[int, WebDriver] = {}
        self._lock = threading.Lock()

    def acquire(self) -> WebDriver:
        """Create a driver and bind it to the calling thread.

        :raises SessionError: if the thread already holds a driver or the
            browser cannot be started
        """
        thread_id = threading.get_ident()
        with self._lock:
            if thread_id in self._drivers:
                raise SessionError(
                    f"Thread {thread_id} already holds a driver; release it first"
                )

        try:
            driver = self._factory(self._settings)
        except (WebDriverException, OSError) as e:
            raise SessionError(
                f"Failed to start {self._settings.browser} driver: {e}"
            ) from e

        with self._lock:
            self._drivers[thread_id] = driver
        logger.debug("Driver bound to thread %s", thread_id)
        return driver

    def current(self) -> Optional[WebDriver]:
        """Return the calling thread's driver, or None."""
        with self._lock:
            return self._drivers.get(threading.get_ident())

    def release(self) -> None:
        """Quit the calling thread's driver and clear the binding.

        Does nothing when no driver was acquired.
        """
        with self._lock:
            driver = self._drivers.pop(threading.get_ident(), None)
        if driver is None:
            return
        try:
            driver.quit()
        except WebDriverException as e:
            logger.warning("Driver did not quit cleanly: %s", e)

    @property
    def active_sessions(self) -> int:
        with self._lock:
            return len(self._drivers)

    @contextmanager
    def session(self) -> Iterator[WebDriver]:
        """Acquire a driver for the block and always release it."""
        driver = self.acquire()
        try:
            yield driver
        finally:
            self.release()
