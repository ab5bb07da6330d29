"""Root conftest.py - fixtures and reporting hooks for the warehouse suites."""

from pathlib import Path
from typing import Iterator, Optional

import pytest
from selenium.webdriver.remote.webdriver import WebDriver

from warehouse_bdd.config import WarehouseSettings, load_settings
from warehouse_bdd.data_store import WarehouseContext
from warehouse_bdd.inventory_api import InventoryApiClient
from warehouse_bdd.pages.inbound_page import InboundShipmentPage
from warehouse_bdd.pages.inventory_adjustment_page import InventoryAdjustmentPage
from warehouse_bdd.pages.login_page import LoginPage
from warehouse_bdd.pages.outbound_page import OutboundShipmentPage
from warehouse_bdd.reporting import RunReport, StepLogger
from warehouse_bdd.session import DriverSessionRegistry

STEP_DEFS_DIR = Path(__file__).parent / "tests" / "step_defs"

# Register every step definition module as a plugin so pytest-bdd finds the
# steps from any test module.
pytest_plugins = sorted(
    f"tests.step_defs.{path.stem}" for path in STEP_DEFS_DIR.glob("*_steps.py")
)


# ============================================================================
# Run-wide fixtures
# ============================================================================

@pytest.fixture(scope="session")
def settings() -> WarehouseSettings:
    """Settings from config/settings.yaml (or WMS_SETTINGS_FILE)."""
    return load_settings()


@pytest.fixture(scope="session")
def run_report(settings: WarehouseSettings) -> Iterator[RunReport]:
    """HTML/JSON report for the run, written once at session end."""
    report = RunReport(settings.output_dir)
    yield report
    html_path, _ = report.flush()
    print(f"\nWarehouse report: {html_path}")


@pytest.fixture(scope="session")
def session_registry(settings: WarehouseSettings) -> DriverSessionRegistry:
    return DriverSessionRegistry(settings)


@pytest.fixture(scope="session")
def wms_context() -> Iterator[WarehouseContext]:
    """Shared scenario data for the whole run."""
    context = WarehouseContext()
    yield context
    context.clear_all()


# ============================================================================
# Per-scenario fixtures
# ============================================================================

@pytest.fixture
def driver(session_registry: DriverSessionRegistry) -> Iterator[WebDriver]:
    """Browser for one scenario; always quit afterwards, even on failure."""
    with session_registry.session() as drv:
        yield drv


@pytest.fixture
def step_log(run_report: RunReport, session_registry: DriverSessionRegistry) -> StepLogger:
    return StepLogger(run_report, driver_source=session_registry.current)


def _page_kwargs(settings: WarehouseSettings) -> dict:
    return {"app_url": settings.url, "wait_seconds": settings.explicit_wait}


@pytest.fixture
def login_page(driver, step_log, wms_context, settings) -> LoginPage:
    return LoginPage(driver, step_log, wms_context, **_page_kwargs(settings))


@pytest.fixture
def inbound_page(driver, step_log, wms_context, settings) -> InboundShipmentPage:
    return InboundShipmentPage(driver, step_log, wms_context, **_page_kwargs(settings))


@pytest.fixture
def outbound_page(driver, step_log, wms_context, settings) -> OutboundShipmentPage:
    return OutboundShipmentPage(driver, step_log, wms_context, **_page_kwargs(settings))


@pytest.fixture
def inventory_page(driver, step_log, wms_context, settings) -> InventoryAdjustmentPage:
    """Inventory page; adjustments are also posted to the API when configured."""
    api: Optional[InventoryApiClient] = None
    if settings.base_url:
        api = InventoryApiClient(settings.base_url)
    return InventoryAdjustmentPage(
        driver, step_log, wms_context, api=api, **_page_kwargs(settings)
    )


@pytest.fixture
def inventory_api(settings: WarehouseSettings) -> InventoryApiClient:
    """Inventory REST client; fails the setup when no base_url is configured."""
    return InventoryApiClient(settings.require_api_base_url())


@pytest.fixture(scope="function", autouse=True)
def scenario_report(
    request: pytest.FixtureRequest, run_report: RunReport, step_log: StepLogger
) -> Iterator[None]:
    """Open a report entry for every test and close it with the outcome.

    Requesting ``step_log`` here puts it on every item so the hooks below
    can reach it.
    """
    tags = tuple(sorted({marker.name for marker in request.node.iter_markers()}))
    run_report.start_test(request.node.name, tags)

    yield

    outcome = "passed"
    for phase in ("setup", "call"):
        report = getattr(request.node, f"rep_{phase}", None)
        if report is not None and report.outcome != "passed":
            outcome = report.outcome
            break
    run_report.end_test(outcome)


# ============================================================================
# Hooks
# ============================================================================

def _step_logger(item) -> Optional[StepLogger]:
    funcargs = getattr(item, "funcargs", None) or {}
    return funcargs.get("step_log")


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """Keep each phase's report on the item and screenshot failed tests."""
    outcome = yield
    report = outcome.get_result()
    setattr(item, f"rep_{report.when}", report)

    if report.when == "call" and report.failed:
        step_log = _step_logger(item)
        if step_log is not None:
            step_log.failed(f"Test failed: {item.name}", screenshot=True)


def pytest_bdd_before_step(request, feature, scenario, step, step_func):
    step_log = _step_logger(request.node)
    if step_log is not None:
        step_log.step_start(f"{step.keyword} {step.name}")


def pytest_bdd_after_step(request, feature, scenario, step, step_func, step_func_args):
    step_log = _step_logger(request.node)
    if step_log is not None:
        step_log.step_complete(f"{step.keyword} {step.name}")


def pytest_bdd_step_error(request, feature, scenario, step, step_func, step_func_args, exception):
    """Capture the browser state at the failing step."""
    step_log = step_func_args.get("step_log") or _step_logger(request.node)
    if step_log is not None:
        step_log.failed(f"Step failed: {step.keyword} {step.name}: {exception}", screenshot=True)
    print(f"✗ Step failed: {step.name}")
