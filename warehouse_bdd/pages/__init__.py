"""Page objects for the warehouse web application.

Each page exposes ``perform(operation)`` taking one of the typed operations
from :mod:`warehouse_bdd.operations`.
"""

from warehouse_bdd.pages.base_page import BasePage
from warehouse_bdd.pages.inbound_page import InboundShipmentPage
from warehouse_bdd.pages.inventory_adjustment_page import InventoryAdjustmentPage
from warehouse_bdd.pages.login_page import LoginPage
from warehouse_bdd.pages.outbound_page import OutboundShipmentPage

__all__ = [
    "BasePage",
    "InboundShipmentPage",
    "InventoryAdjustmentPage",
    "LoginPage",
    "OutboundShipmentPage",
]
