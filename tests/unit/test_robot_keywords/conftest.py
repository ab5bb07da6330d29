"""Fixtures for the Robot Framework keyword library tests.

The keyword libraries live in robot/libraries and are loaded by path, the
same way Robot Framework loads them from a suite's Library setting.
"""

import importlib.util
from pathlib import Path
from types import ModuleType

import pytest

LIBRARY_DIR = Path(__file__).resolve().parents[3] / "robot" / "libraries"


def load_library(name: str) -> ModuleType:
    spec = importlib.util.spec_from_file_location(f"wms_robot_{name}", LIBRARY_DIR / f"{name}.py")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture(scope="module")
def warehouse_library() -> ModuleType:
    return load_library("warehouse_keywords")


@pytest.fixture
def inbound_keywords():
    return load_library("inbound_keywords").InboundKeywords()


@pytest.fixture
def outbound_keywords():
    return load_library("outbound_keywords").OutboundKeywords()


@pytest.fixture
def inventory_keywords():
    return load_library("inventory_keywords").InventoryKeywords()
