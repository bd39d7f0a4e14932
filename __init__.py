"""
Django Storeman — Inventory stock ledger and purchase-order receiving.

Usage:
    from storeman import inventory, StoremanError

    org = inventory.resolve_organization("acme")
    inventory.record_movement(org, {"product_id": 1, "location_id": 1,
                                    "movement_type": "stock_in", "quantity": 5})
    inventory.update_po_status(org, po_id, "received")
"""


def __getattr__(name):
    """Lazy import to avoid circular imports during app loading."""
    if name == 'inventory':
        from storeman.service import Inventory
        return Inventory
    elif name in (
        'StoremanError',
        'ValidationError',
        'NotFoundError',
        'ConflictError',
        'InsufficientStockError',
        'IntegrityError',
    ):
        from storeman import exceptions
        return getattr(exceptions, name)
    elif name == 'StockItem':
        from storeman.models.stock_item import StockItem
        return StockItem
    elif name == 'StockMovement':
        from storeman.models.movement import StockMovement
        return StockMovement
    elif name == 'PurchaseOrder':
        from storeman.models.purchase_order import PurchaseOrder
        return PurchaseOrder
    elif name == 'MovementType':
        from storeman.models.enums import MovementType
        return MovementType
    elif name == 'PurchaseOrderStatus':
        from storeman.models.enums import PurchaseOrderStatus
        return PurchaseOrderStatus
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    'inventory',
    'StoremanError',
    'ValidationError',
    'NotFoundError',
    'ConflictError',
    'InsufficientStockError',
    'IntegrityError',
    'StockItem',
    'StockMovement',
    'PurchaseOrder',
    'MovementType',
    'PurchaseOrderStatus',
]

__version__ = '0.1.0'
