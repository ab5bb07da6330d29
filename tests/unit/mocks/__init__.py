"""Mock classes for unit testing pages, step definitions and keywords."""

from .mock_driver import MockDriver, MockElement
from .mock_services import MockInventoryApi, MockResponse, MockStepLogger

__all__ = [
    "MockDriver",
    "MockElement",
    "MockInventoryApi",
    "MockResponse",
    "MockStepLogger",
]
