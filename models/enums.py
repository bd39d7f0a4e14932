"""
Enums for Storeman models.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class MovementType(models.TextChoices):
    """
    Kind of ledger entry.

    STOCK_IN:   adds quantity, blends the weighted-average cost.
    STOCK_OUT:  subtracts quantity, never below zero.
    ADJUSTMENT: sets the absolute quantity (a correction / stock count).
    """
    STOCK_IN = 'stock_in', _('Stock in')
    STOCK_OUT = 'stock_out', _('Stock out')
    ADJUSTMENT = 'adjustment', _('Adjustment')


class PurchaseOrderStatus(models.TextChoices):
    """
    Purchase order lifecycle status.

    RECEIVED is absorbing: once stock was posted the order never leaves it.
    Every other transition is allowed.
    """
    DRAFT = 'draft', _('Draft')
    APPROVED = 'approved', _('Approved')
    ORDERED = 'ordered', _('Ordered')
    PARTIALLY_RECEIVED = 'partially_received', _('Partially received')
    RECEIVED = 'received', _('Received')
    CANCELLED = 'cancelled', _('Cancelled')


class StockStatus(models.TextChoices):
    """Derived stock status of a StockItem (never stored)."""
    NORMAL = 'normal', _('Normal')
    LOW_STOCK = 'low_stock', _('Low stock')
    OUT_OF_STOCK = 'out_of_stock', _('Out of stock')


class ReferenceType(models.TextChoices):
    """What a movement's reference_id points at."""
    PURCHASE_ORDER = 'purchase_order', _('Purchase order')
    STOCK_ITEM = 'stock_item', _('Stock item')
