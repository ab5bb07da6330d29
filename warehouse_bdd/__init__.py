"""BDD UI test automation for a warehouse management web application."""

from warehouse_bdd.config import WarehouseSettings, load_settings
from warehouse_bdd.data_store import WarehouseContext
from warehouse_bdd.exceptions import (
    ConfigurationError,
    InventoryApiError,
    PageValidationError,
    SessionError,
    WarehouseUiError,
)
from warehouse_bdd.reporting import RunReport, Status, StepLogger
from warehouse_bdd.session import DriverSessionRegistry, create_driver

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "DriverSessionRegistry",
    "InventoryApiError",
    "PageValidationError",
    "RunReport",
    "SessionError",
    "Status",
    "StepLogger",
    "WarehouseContext",
    "WarehouseSettings",
    "WarehouseUiError",
    "create_driver",
    "load_settings",
]
