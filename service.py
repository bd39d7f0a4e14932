"""
Inventory Service — The single public interface for all inventory operations.

Usage:
    from storeman import inventory, InsufficientStockError

    org = inventory.resolve_organization("acme")
    inventory.record_movement(org, {
        "product_id": 1, "location_id": 1,
        "movement_type": "stock_in", "quantity": 10, "unit_cost": "7.00",
    })
    po = inventory.create_purchase_order(org, {...})
    inventory.update_po_status(org, po.pk, "received")
"""

from storeman.adapters.directory import resolve_organization
from storeman.services.catalog import Catalog
from storeman.services.movements import StockMovements
from storeman.services.purchasing import PurchaseOrders
from storeman.services.queries import StockQueries
from storeman.services.receiving import PurchaseReceipts
from storeman.services.settings import SettingsService


class Inventory(
    StockQueries,
    StockMovements,
    PurchaseOrders,
    PurchaseReceipts,
    SettingsService,
    Catalog,
):
    """
    Single interface for all inventory operations.

    Parameter convention: (organization, ..., data, actor=None)
    The organization is the local Organization row; resolve a slug first
    with resolve_organization().

    IMPORTANT: All state-changing methods use atomic transactions
    with appropriate locking. See each method's docstring.
    """

    resolve_organization = staticmethod(resolve_organization)
