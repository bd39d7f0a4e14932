"""
Stock queries — read-only operations.

All methods are classmethod on Inventory and use no locking. They return
querysets (or rows) scoped to one organization; serialization is left to
the caller.
"""

from django.db.models import DecimalField, ExpressionWrapper, F, Q

from storeman.conf import storeman_settings
from storeman.exceptions import NotFoundError
from storeman.models.catalog import Product, Supplier
from storeman.models.location import Location
from storeman.models.movement import StockMovement
from storeman.models.purchase_order import PurchaseOrder
from storeman.models.stock_item import StockItem
from storeman.schemas import parse_id, parse_limit


class StockQueries:
    """Read-only stock query methods."""

    @classmethod
    def list_items(cls, organization, category: str | None = None,
                   location=None, search: str | None = None):
        """
        Stock items with product and location, newest first.

        Args:
            category: Exact product category
            location: Location or location id
            search: Case-insensitive match on product name or SKU

        Each item exposes .available and .stock_status (see StockItem).
        """
        qs = (
            StockItem.objects.for_organization(organization)
            .select_related('product', 'location')
        )

        if category:
            qs = qs.filter(product__category=category)

        location_id = parse_id(location, 'location_id')
        if location_id is not None:
            qs = qs.filter(location_id=location_id)

        if search:
            qs = qs.filter(Q(product__name__icontains=search) | Q(product__sku__icontains=search))

        return qs.order_by('-created_at', '-pk')

    @classmethod
    def low_stock_items(cls, organization):
        """Items whose status is low_stock or out_of_stock."""
        available = ExpressionWrapper(
            F('quantity') - F('reserved_quantity'),
            output_field=DecimalField(max_digits=12, decimal_places=3),
        )
        return (
            cls.list_items(organization)
            .annotate(available_now=available)
            .filter(Q(available_now=0) | Q(available_now__lte=F('low_stock_threshold')))
        )

    @classmethod
    def get_stock_item(cls, organization, item_id=None, product=None, location=None) -> StockItem:
        """
        One stock item, by id or by (product, location).

        Raises:
            NotFoundError('STOCK_ITEM_NOT_FOUND')
        """
        qs = StockItem.objects.for_organization(organization).select_related('product', 'location')
        pk = parse_id(item_id)
        if pk is not None:
            qs = qs.filter(pk=pk)
        else:
            qs = qs.filter(
                product_id=parse_id(product, 'product_id'),
                location_id=parse_id(location, 'location_id'),
            )
        item = qs.first()
        if item is None:
            raise NotFoundError('STOCK_ITEM_NOT_FOUND', id=item_id)
        return item

    @classmethod
    def list_products(cls, organization, category: str | None = None, search: str | None = None):
        """Active products, by name."""
        qs = Product.objects.filter(organization=organization, active=True)
        if category:
            qs = qs.filter(category=category)
        if search:
            qs = qs.filter(Q(name__icontains=search) | Q(sku__icontains=search))
        return qs.order_by('name')

    @classmethod
    def list_locations(cls, organization):
        """Active locations, by name."""
        return Location.objects.filter(organization=organization, active=True).order_by('name')

    @classmethod
    def list_movements(cls, organization, product=None, location=None,
                       movement_type: str | None = None, limit=None):
        """Movement history, newest first, at most `limit` rows."""
        qs = (
            StockMovement.objects.filter(organization=organization)
            .select_related('product', 'location', 'actor')
        )
        product_id = parse_id(product, 'product_id')
        if product_id is not None:
            qs = qs.filter(product_id=product_id)
        location_id = parse_id(location, 'location_id')
        if location_id is not None:
            qs = qs.filter(location_id=location_id)
        if movement_type:
            qs = qs.filter(movement_type=movement_type)

        limit = parse_limit(limit, storeman_settings.MOVEMENTS_LIMIT)
        return qs.order_by('-occurred_at', '-pk')[:limit]

    @classmethod
    def list_purchase_orders(cls, organization, status: str | None = None, supplier=None):
        """Orders that were not soft-deleted, newest first, items prefetched."""
        qs = (
            PurchaseOrder.objects.active()
            .filter(organization=organization)
            .select_related('supplier', 'location')
            .prefetch_related('items__product')
        )
        if status:
            qs = qs.filter(status=status)
        supplier_id = parse_id(supplier, 'supplier_id')
        if supplier_id is not None:
            qs = qs.filter(supplier_id=supplier_id)
        return qs.order_by('-created_at', '-pk')

    @classmethod
    def get_purchase_order(cls, organization, po_id) -> PurchaseOrder:
        """
        Raises:
            NotFoundError('PURCHASE_ORDER_NOT_FOUND'): Unknown or soft-deleted
        """
        order = (
            cls.list_purchase_orders(organization)
            .filter(pk=parse_id(po_id))
            .first()
        )
        if order is None:
            raise NotFoundError('PURCHASE_ORDER_NOT_FOUND', id=po_id)
        return order

    @classmethod
    def list_suppliers(cls, organization):
        """Active suppliers, by name."""
        return Supplier.objects.filter(organization=organization, active=True).order_by('name')
