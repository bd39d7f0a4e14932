"""
StockMovement model — Immutable ledger of quantity changes.
"""

from decimal import Decimal

from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from storeman.models.enums import MovementType


class StockMovement(models.Model):
    """
    Immutable record of a quantity change on a StockItem.

    Rules:
    - NEVER update() or delete()
    - Corrections are new movements (adjustment sets the absolute quantity)
    - Written in the same transaction as the StockItem update
      (see services.movements.StockMovements.record_movement)

    quantity is always the positive amount moved for stock_in/stock_out and
    the resulting absolute quantity for adjustment.
    """

    organization = models.ForeignKey(
        'storeman.Organization',
        on_delete=models.CASCADE,
        related_name='stock_movements',
        verbose_name=_('Organization'),
    )
    stock_item = models.ForeignKey(
        'storeman.StockItem',
        on_delete=models.PROTECT,
        related_name='movements',
        verbose_name=_('Stock item'),
    )
    product = models.ForeignKey(
        'storeman.Product',
        on_delete=models.PROTECT,
        related_name='+',
        verbose_name=_('Product'),
    )
    location = models.ForeignKey(
        'storeman.Location',
        on_delete=models.PROTECT,
        related_name='+',
        verbose_name=_('Location'),
    )

    movement_type = models.CharField(
        max_length=20,
        choices=MovementType.choices,
        db_index=True,
        verbose_name=_('Type'),
    )
    quantity = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        verbose_name=_('Quantity'),
    )
    unit_cost = models.DecimalField(
        max_digits=14,
        decimal_places=4,
        default=Decimal('0'),
        verbose_name=_('Unit cost'),
    )

    # External reference (purchase order, stock item correction, ...)
    reference_type = models.CharField(
        max_length=50,
        blank=True,
        default='',
        verbose_name=_('Reference type'),
    )
    reference_id = models.PositiveBigIntegerField(null=True, blank=True, verbose_name=_('Reference ID'))
    reference_line_id = models.PositiveBigIntegerField(
        null=True,
        blank=True,
        verbose_name=_('Reference line ID'),
        help_text=_('Purchase order line posted by this movement'),
    )

    notes = models.TextField(blank=True, default='', verbose_name=_('Notes'))
    occurred_at = models.DateTimeField(default=timezone.now, db_index=True, verbose_name=_('Occurred at'))
    actor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        verbose_name=_('User'),
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _('Stock movement')
        verbose_name_plural = _('Stock movements')
        ordering = ['occurred_at', 'pk']
        constraints = [
            models.UniqueConstraint(
                fields=['reference_type', 'reference_id', 'reference_line_id'],
                condition=models.Q(reference_line_id__isnull=False, movement_type=MovementType.STOCK_IN),
                name='unique_movement_per_reference_line',
            ),
        ]
        indexes = [
            models.Index(fields=['stock_item', 'occurred_at'], name='storeman_mov_item_occ_idx'),
            models.Index(fields=['reference_type', 'reference_id'], name='storeman_mov_ref_idx'),
            models.Index(fields=['organization', 'occurred_at'], name='storeman_mov_org_occ_idx'),
        ]

    def save(self, *args, **kwargs):
        if self.pk:
            raise ValueError(
                "Movements are immutable. "
                "To correct stock, record a new adjustment movement."
            )
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValueError(
            "Movements are immutable. "
            "To reverse one, record a compensating movement."
        )

    def as_dict(self) -> dict:
        return {
            'id': self.pk,
            'stock_item_id': self.stock_item_id,
            'product_id': self.product_id,
            'location_id': self.location_id,
            'movement_type': self.movement_type,
            'quantity': self.quantity,
            'unit_cost': self.unit_cost,
            'reference_type': self.reference_type or None,
            'reference_id': self.reference_id,
            'reference_line_id': self.reference_line_id,
            'notes': self.notes,
            'occurred_at': self.occurred_at,
            'actor_id': self.actor_id,
        }

    def __str__(self) -> str:
        sign = {
            MovementType.STOCK_IN: '+',
            MovementType.STOCK_OUT: '-',
        }.get(self.movement_type, '=')
        return f"{sign}{self.quantity} | {self.get_movement_type_display()}"
