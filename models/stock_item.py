"""
StockItem model — Quantity and cost aggregate per (product, location).
"""

import logging
from decimal import Decimal
from typing import Iterable

from django.db import models
from django.utils.translation import gettext_lazy as _

from storeman.models.enums import MovementType, StockStatus

logger = logging.getLogger('storeman')


def fold_movements(movements: Iterable) -> Decimal:
    """
    Replay ledger entries into a quantity.

    Entries must be in insertion order: stock_in adds, stock_out subtracts,
    adjustment sets the absolute value.
    """
    quantity = Decimal('0')
    for move in movements:
        if move.movement_type == MovementType.STOCK_IN:
            quantity += move.quantity
        elif move.movement_type == MovementType.STOCK_OUT:
            quantity -= move.quantity
        else:
            quantity = move.quantity
    return quantity


class StockItemManager(models.Manager):
    """Manager with helper methods for StockItem queries."""

    def for_organization(self, organization):
        return self.filter(organization=organization)

    def for_product(self, product):
        return self.filter(product=product)

    def at_location(self, location):
        return self.filter(location=location)


class StockItem(models.Model):
    """
    Quantity of a product at a location, with its weighted-average cost.

    Rules:
    - Only the movement ledger changes quantity (see services.movements)
    - quantity is never negative
    - low_stock_threshold is a snapshot taken from InventorySettings when the
      item is created; it only changes through migrate_stock_thresholds
    - Use recalculate() for audit/correction
    """

    organization = models.ForeignKey(
        'storeman.Organization',
        on_delete=models.CASCADE,
        related_name='stock_items',
        verbose_name=_('Organization'),
    )
    product = models.ForeignKey(
        'storeman.Product',
        on_delete=models.PROTECT,
        related_name='stock_items',
        verbose_name=_('Product'),
    )
    location = models.ForeignKey(
        'storeman.Location',
        on_delete=models.PROTECT,
        related_name='stock_items',
        verbose_name=_('Location'),
    )

    quantity = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        default=Decimal('0'),
        verbose_name=_('Quantity'),
    )
    reserved_quantity = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        default=Decimal('0'),
        verbose_name=_('Reserved'),
    )
    average_cost = models.DecimalField(
        max_digits=14,
        decimal_places=4,
        default=Decimal('0'),
        verbose_name=_('Average cost'),
    )
    low_stock_threshold = models.IntegerField(
        default=10,
        verbose_name=_('Low stock threshold'),
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = StockItemManager()

    class Meta:
        verbose_name = _('Stock item')
        verbose_name_plural = _('Stock items')
        constraints = [
            models.UniqueConstraint(
                fields=['organization', 'product', 'location'],
                name='unique_stock_item_per_location',
            ),
            models.CheckConstraint(
                condition=models.Q(quantity__gte=0),
                name='stock_item_quantity_non_negative',
            ),
        ]
        indexes = [
            models.Index(fields=['organization', 'location'], name='storeman_item_org_loc_idx'),
        ]

    # ══════════════════════════════════════════════════════════════
    # PROPERTIES
    # ══════════════════════════════════════════════════════════════

    @property
    def available(self) -> Decimal:
        """Quantity not reserved."""
        return self.quantity - self.reserved_quantity

    @property
    def stock_status(self) -> str:
        available = self.available
        if available == 0:
            return StockStatus.OUT_OF_STOCK
        if available <= self.low_stock_threshold:
            return StockStatus.LOW_STOCK
        return StockStatus.NORMAL

    # ══════════════════════════════════════════════════════════════
    # METHODS
    # ══════════════════════════════════════════════════════════════

    def ledger_quantity(self) -> Decimal:
        """Quantity obtained by replaying this item's movements."""
        return fold_movements(self.movements.order_by('pk'))

    def recalculate(self) -> Decimal:
        """
        Recalculate quantity from the movement ledger.

        Use for:
        - Integrity audit
        - Correction after detected inconsistency
        - Debug

        Returns:
            New calculated quantity
        """
        total = self.ledger_quantity()

        if total != self.quantity:
            old = self.quantity
            self.quantity = total
            self.save(update_fields=['quantity', 'updated_at'])

            logger.warning(
                f"StockItem {self.pk} recalculated: {old} → {total} "
                f"(diff: {total - old})"
            )

        return total

    def as_dict(self) -> dict:
        return {
            'id': self.pk,
            'product_id': self.product_id,
            'location_id': self.location_id,
            'quantity': self.quantity,
            'reserved_quantity': self.reserved_quantity,
            'available_quantity': self.available,
            'average_cost': self.average_cost,
            'low_stock_threshold': self.low_stock_threshold,
            'stock_status': str(self.stock_status),
            'updated_at': self.updated_at,
        }

    def __str__(self) -> str:
        return f"{self.product} [{self.location}]: {self.quantity}"
