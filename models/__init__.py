"""
Storeman Models.

Core models for inventory:
- Organization / InventorySettings: tenant and its threshold configuration
- Product / Supplier / Location: catalog entities referenced by id
- StockItem: quantity and average cost per (product, location)
- StockMovement: immutable ledger of changes
- PurchaseOrder / PurchaseOrderItem: ordering and receiving
"""

from storeman.models.catalog import Product, Supplier
from storeman.models.enums import MovementType, PurchaseOrderStatus, ReferenceType, StockStatus
from storeman.models.location import Location
from storeman.models.movement import StockMovement
from storeman.models.organization import InventorySettings, Organization
from storeman.models.purchase_order import PurchaseOrder, PurchaseOrderItem
from storeman.models.stock_item import StockItem

__all__ = [
    'MovementType',
    'PurchaseOrderStatus',
    'ReferenceType',
    'StockStatus',
    'Organization',
    'InventorySettings',
    'Product',
    'Supplier',
    'Location',
    'StockItem',
    'StockMovement',
    'PurchaseOrder',
    'PurchaseOrderItem',
]
