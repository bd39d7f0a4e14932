"""
Inventory services — modular organization of inventory operations.

Re-exports all public classes:
    from storeman.services import StockQueries, StockMovements, PurchaseOrders
"""

from storeman.services.catalog import Catalog
from storeman.services.movements import MovementResult, StockMovements
from storeman.services.purchasing import PurchaseOrders, StatusChange
from storeman.services.queries import StockQueries
from storeman.services.receiving import PurchaseReceipts, ReceiptResult
from storeman.services.settings import SettingsService

__all__ = [
    'Catalog',
    'StockQueries',
    'StockMovements',
    'MovementResult',
    'PurchaseOrders',
    'StatusChange',
    'PurchaseReceipts',
    'ReceiptResult',
    'SettingsService',
]
