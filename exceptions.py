"""
Exceptions for Storeman.

Every error carries a structured code for programmatic handling, a
human-readable message and a data dict with context. The class says which
family the error belongs to (and which HTTP status the API answers with).
"""

from decimal import Decimal
from typing import Any


class StoremanError(Exception):
    """
    Base structured exception.

    Usage:
        try:
            inventory.record_movement(org, data)
        except InsufficientStockError as e:
            print(f"Only {e.available} available")

    Attributes:
        code: Error code for programmatic handling
        message: Human-readable message
        data: Additional context data
    """

    http_status = 400
    _default_messages: dict[str, str] = {}

    def __init__(self, code: str, message: str | None = None, **data):
        self.code = code
        self.message = message or self._default_messages.get(code, code)
        self.data = data
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message

    def as_dict(self) -> dict[str, Any]:
        """Serialize to dict (useful for APIs)."""
        return {
            'code': self.code,
            'message': self.message,
            'data': {
                k: str(v) if isinstance(v, Decimal) else v
                for k, v in self.data.items()
            }
        }


class ValidationError(StoremanError):
    """Missing or malformed input. Raised before anything is written."""

    http_status = 400
    _default_messages = {
        'REQUIRED': 'Required field is missing',
        'INVALID_QUANTITY': 'Invalid quantity',
        'INVALID_COST': 'Invalid unit cost (must be zero or positive)',
        'INVALID_NUMBER': 'Value is not a valid number',
        'INVALID_DATE': 'Value is not a valid date',
        'INVALID_MOVEMENT_TYPE': 'Invalid movement type',
        'INVALID_STATUS': 'Invalid purchase order status',
        'NO_ITEMS': 'At least one item is required',
        'INVALID_ACTION': 'Invalid action',
        'INVALID_VALUE': 'Value is not valid',
        'RESERVED_REFERENCE': 'Purchase order references are written by receipts only',
    }


class NotFoundError(StoremanError):
    """Organization, product, location, supplier or order does not exist."""

    http_status = 404
    _default_messages = {
        'ORGANIZATION_NOT_FOUND': 'Organization not found',
        'UNKNOWN_PRODUCT_OR_LOCATION': 'Product or location not found',
        'PRODUCT_NOT_FOUND': 'Product not found',
        'LOCATION_NOT_FOUND': 'Location not found',
        'SUPPLIER_NOT_FOUND': 'Supplier not found',
        'PURCHASE_ORDER_NOT_FOUND': 'Purchase order not found',
        'STOCK_ITEM_NOT_FOUND': 'Stock item not found',
    }


class ConflictError(StoremanError):
    """Request conflicts with current state. Raised before anything is written."""

    http_status = 409
    _default_messages = {
        'DUPLICATE_PO_NUMBER': 'Purchase order number already exists',
        'DUPLICATE_LOCATION_CODE': 'Warehouse with this code already exists',
        'RECEIVED_LOCKED': (
            'Cannot revert a received order; use movements for corrections'
        ),
        'NOT_RECEIVED': 'Stock is posted only for received purchase orders',
        'ORGANIZATION_ID_TAKEN': 'Organization id is already used by another organization',
    }


class InsufficientStockError(StoremanError):
    """A stock_out would drive quantity below zero."""

    http_status = 409
    _default_messages = {
        'INSUFFICIENT_STOCK': 'Insufficient stock for this operation',
    }

    def __init__(self, code: str = 'INSUFFICIENT_STOCK', message: str | None = None, **data):
        super().__init__(code, message, **data)

    @property
    def available(self) -> Decimal:
        """Shortcut for data['available']."""
        return self.data.get('available', Decimal('0'))

    @property
    def requested(self) -> Decimal:
        """Shortcut for data['requested']."""
        return self.data.get('requested', Decimal('0'))


class IntegrityError(StoremanError):
    """
    A multi-row write failed at the storage layer and was rolled back.

    The database exception is chained as __cause__ and logged; the message
    stays generic.
    """

    http_status = 500
    _default_messages = {
        'WRITE_FAILED': 'Could not save the record, nothing was changed',
    }
