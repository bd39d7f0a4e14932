"""
PurchaseOrder and PurchaseOrderItem models — ordering stock from suppliers.
"""

from decimal import Decimal

from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from storeman.models.enums import PurchaseOrderStatus


class PurchaseOrderQuerySet(models.QuerySet):

    def active(self):
        """Orders that were not soft-deleted."""
        return self.filter(deleted_at__isnull=True)


class PurchaseOrder(models.Model):
    """
    Purchase order placed with a supplier.

    LIFECYCLE:

        draft ─► approved ─► ordered ─► partially_received ─► received
          ▲          │           │               │               │
          └──────────┴───────────┴──── any ──────┘               ✗
                                                            (absorbing)
        cancelled is reachable from, and can move to, any
        state except received.

    Entering RECEIVED posts one stock_in movement per line
    (services.receiving). From then on the order is locked: no status
    change, no detail edit, no deletion.
    """

    organization = models.ForeignKey(
        'storeman.Organization',
        on_delete=models.CASCADE,
        related_name='purchase_orders',
        verbose_name=_('Organization'),
    )
    supplier = models.ForeignKey(
        'storeman.Supplier',
        on_delete=models.PROTECT,
        related_name='purchase_orders',
        verbose_name=_('Supplier'),
    )
    po_number = models.CharField(max_length=50, verbose_name=_('PO number'))
    status = models.CharField(
        max_length=20,
        choices=PurchaseOrderStatus.choices,
        default=PurchaseOrderStatus.DRAFT,
        db_index=True,
        verbose_name=_('Status'),
    )
    location = models.ForeignKey(
        'storeman.Location',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='purchase_orders',
        verbose_name=_('Receiving location'),
    )

    order_date = models.DateTimeField(default=timezone.now, verbose_name=_('Order date'))
    expected_delivery_date = models.DateField(null=True, blank=True, verbose_name=_('Expected delivery'))
    received_at = models.DateTimeField(null=True, blank=True, verbose_name=_('Received at'))

    total_amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal('0'),
        verbose_name=_('Total amount'),
    )
    notes = models.TextField(blank=True, default='')

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
    )
    deleted_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = PurchaseOrderQuerySet.as_manager()

    class Meta:
        verbose_name = _('Purchase order')
        verbose_name_plural = _('Purchase orders')
        ordering = ['-created_at']
        constraints = [
            models.UniqueConstraint(
                fields=['organization', 'po_number'],
                name='unique_po_number_per_org',
            )
        ]
        indexes = [
            models.Index(fields=['organization', 'status'], name='storeman_po_org_status_idx'),
        ]

    @property
    def is_received(self) -> bool:
        return self.status == PurchaseOrderStatus.RECEIVED

    def as_dict(self, with_items: bool = True) -> dict:
        data = {
            'id': self.pk,
            'po_number': self.po_number,
            'status': self.status,
            'supplier_id': self.supplier_id,
            'supplier': self.supplier.as_dict() if self.supplier_id else None,
            'location_id': self.location_id,
            'order_date': self.order_date,
            'expected_delivery_date': self.expected_delivery_date,
            'received_at': self.received_at,
            'total_amount': self.total_amount,
            'notes': self.notes,
            'created_by_id': self.created_by_id,
        }
        if with_items:
            data['items'] = [item.as_dict() for item in self.items.all()]
        return data

    def __str__(self) -> str:
        return f"{self.po_number} ({self.status})"


class PurchaseOrderItem(models.Model):
    """One line of a purchase order."""

    order = models.ForeignKey(
        'storeman.PurchaseOrder',
        on_delete=models.CASCADE,
        related_name='items',
        verbose_name=_('Purchase order'),
    )
    product = models.ForeignKey(
        'storeman.Product',
        on_delete=models.PROTECT,
        related_name='+',
        verbose_name=_('Product'),
    )
    quantity_ordered = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        verbose_name=_('Quantity ordered'),
    )
    unit_cost = models.DecimalField(
        max_digits=14,
        decimal_places=4,
        verbose_name=_('Unit cost'),
    )
    received_quantity = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        default=Decimal('0'),
        verbose_name=_('Received'),
    )

    class Meta:
        verbose_name = _('Purchase order item')
        verbose_name_plural = _('Purchase order items')
        ordering = ['pk']
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity_ordered__gt=0),
                name='po_item_quantity_positive',
            ),
            models.CheckConstraint(
                condition=models.Q(unit_cost__gte=0),
                name='po_item_unit_cost_non_negative',
            ),
        ]

    @property
    def line_total(self) -> Decimal:
        return self.quantity_ordered * self.unit_cost

    def as_dict(self) -> dict:
        return {
            'id': self.pk,
            'product_id': self.product_id,
            'product_name': self.product.name,
            'product_sku': self.product.sku,
            'product_unit': self.product.unit,
            'quantity': self.quantity_ordered,
            'quantity_ordered': self.quantity_ordered,
            'unit_cost': self.unit_cost,
            'received_quantity': self.received_quantity,
        }

    def __str__(self) -> str:
        return f"{self.quantity_ordered}x {self.product} @ {self.unit_cost}"
