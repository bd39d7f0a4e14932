"""
Storeman Admin.

Provides views for production debugging:
- Organization / InventorySettings / Location / Product / Supplier: list + edit
- StockItem: read-only (quantity, reserved, available, status) with "recalculate" action
- StockMovement: read-only audit trail
- PurchaseOrder: lines inline, "mark as received" action
"""

import logging

from django.contrib import admin
from django.utils.translation import gettext_lazy as _

from storeman.exceptions import StoremanError
from storeman.models import (
    InventorySettings,
    Location,
    Organization,
    Product,
    PurchaseOrder,
    PurchaseOrderItem,
    PurchaseOrderStatus,
    StockItem,
    StockMovement,
    Supplier,
)

logger = logging.getLogger(__name__)


class ReadOnlyAdminMixin:
    """Stock only changes through the inventory service."""

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


# =========================================================================
# TENANT / CATALOG
# =========================================================================

@admin.register(Organization)
class OrganizationAdmin(admin.ModelAdmin):
    list_display = ['slug', 'name', 'is_active']
    list_filter = ['is_active']
    search_fields = ['slug', 'name']
    readonly_fields = ['created_at', 'updated_at']


@admin.register(InventorySettings)
class InventorySettingsAdmin(admin.ModelAdmin):
    """Changing the threshold here does not touch existing stock items."""

    list_display = ['organization', 'low_stock_threshold', 'updated_at']
    readonly_fields = ['created_at', 'updated_at']


@admin.register(Location)
class LocationAdmin(admin.ModelAdmin):
    list_display = ['code', 'name', 'organization', 'active']
    list_filter = ['active', 'organization']
    search_fields = ['code', 'name']
    readonly_fields = ['created_at', 'updated_at']


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ['sku', 'name', 'category', 'unit', 'organization', 'active']
    list_filter = ['active', 'category', 'organization']
    search_fields = ['sku', 'name']
    readonly_fields = ['created_at', 'updated_at']


@admin.register(Supplier)
class SupplierAdmin(admin.ModelAdmin):
    list_display = ['name', 'contact_person', 'email', 'phone', 'organization', 'active']
    list_filter = ['active', 'organization']
    search_fields = ['name', 'contact_person', 'email']
    readonly_fields = ['created_at', 'updated_at']


# =========================================================================
# STOCK ITEM ADMIN (read-only)
# =========================================================================

@admin.register(StockItem)
class StockItemAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    """StockItem admin — read-only, with ledger replay action."""

    list_display = ['__str__', 'location', 'quantity', 'reserved_quantity',
                    'available_display', 'average_cost', 'low_stock_threshold',
                    'status_display']
    list_filter = ['organization', 'location']
    search_fields = ['product__sku', 'product__name']
    readonly_fields = ['organization', 'product', 'location', 'quantity',
                       'reserved_quantity', 'average_cost', 'low_stock_threshold',
                       'created_at', 'updated_at']
    list_select_related = ['product', 'location']
    actions = ['recalculate_items']

    @admin.display(description=_('Available'))
    def available_display(self, obj):
        return obj.available

    @admin.display(description=_('Status'))
    def status_display(self, obj):
        return obj.stock_status.label

    @admin.action(description=_('Recalculate quantity from movements'))
    def recalculate_items(self, request, queryset):
        repaired = 0
        for item in queryset:
            before = item.quantity
            if item.recalculate() != before:
                repaired += 1
        self.message_user(request, _('{count} item(s) repaired.').format(count=repaired))


# =========================================================================
# STOCK MOVEMENT ADMIN (read-only audit trail)
# =========================================================================

@admin.register(StockMovement)
class StockMovementAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    """StockMovement admin — read-only. Immutable audit trail."""

    list_display = ['occurred_at', 'product', 'location', 'movement_type',
                    'quantity', 'unit_cost', 'reference_type', 'reference_id', 'actor']
    list_filter = ['movement_type', 'reference_type', 'organization']
    search_fields = ['product__sku', 'product__name', 'notes']
    readonly_fields = ['organization', 'stock_item', 'product', 'location',
                       'movement_type', 'quantity', 'unit_cost', 'reference_type',
                       'reference_id', 'reference_line_id', 'notes', 'occurred_at',
                       'actor', 'created_at']
    date_hierarchy = 'occurred_at'


# =========================================================================
# PURCHASE ORDER ADMIN
# =========================================================================

class PurchaseOrderItemInline(admin.TabularInline):
    model = PurchaseOrderItem
    extra = 0
    readonly_fields = ['received_quantity']


@admin.register(PurchaseOrder)
class PurchaseOrderAdmin(admin.ModelAdmin):
    """
    Status is read-only here: it changes through the service so that
    entering RECEIVED posts stock.
    """

    list_display = ['po_number', 'supplier', 'status', 'total_amount',
                    'order_date', 'received_at', 'organization']
    list_filter = ['status', 'organization']
    search_fields = ['po_number', 'supplier__name']
    readonly_fields = ['status', 'total_amount', 'received_at', 'deleted_at',
                       'created_at', 'updated_at']
    inlines = [PurchaseOrderItemInline]
    actions = ['mark_received']

    def get_queryset(self, request):
        return super().get_queryset(request).filter(deleted_at__isnull=True)

    @admin.action(description=_('Mark selected orders as received'))
    def mark_received(self, request, queryset):
        from storeman import inventory

        count = 0
        for order in queryset.exclude(status=PurchaseOrderStatus.RECEIVED):
            try:
                inventory.update_po_status(
                    order.organization, order.pk, PurchaseOrderStatus.RECEIVED, actor=request.user,
                )
                count += 1
            except StoremanError as exc:
                logger.warning("mark_received: failed for %s: %s", order.po_number, exc)

        self.message_user(request, _('{count} order(s) received.').format(count=count))
