"""Exceptions raised by the warehouse UI test framework."""


class WarehouseUiError(Exception):
    """Base exception for all warehouse framework failures."""


class ConfigurationError(WarehouseUiError):
    """Settings file is missing or lacks a required value."""


class SessionError(WarehouseUiError):
    """Browser driver could not be created or bound to the thread."""


class PageValidationError(WarehouseUiError):
    """A required element of the page is not displayed."""


class InventoryApiError(WarehouseUiError):
    """The inventory REST API could not be reached."""
