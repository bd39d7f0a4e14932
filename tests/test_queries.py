"""
Tests for read-only inventory queries.
"""

from decimal import Decimal

import pytest

from storeman import inventory
from storeman.exceptions import NotFoundError
from storeman.models import Location, Product, StockItem, Supplier


pytestmark = pytest.mark.django_db


class TestListItems:
    """Tests for inventory.list_items()."""

    def test_newest_first_with_status(self, org, product_a, product_b, stock_in):
        stock_in(product_a, 50, '1')
        stock_in(product_b, 2, '1')

        items = list(inventory.list_items(org))

        assert [i.product for i in items] == [product_b, product_a]
        assert [i.stock_status for i in items] == ['low_stock', 'normal']
        assert items[1].available == Decimal('50')

    def test_filters(self, org, warehouse, product_a, product_b, stock_in):
        side = Location.objects.create(organization=org, code='SIDE', name='Side')
        stock_in(product_a, 1, '1')
        stock_in(product_b, 1, '1', location=side)

        assert [i.product for i in inventory.list_items(org, category='CCTV')] == [product_a]
        assert [i.product for i in inventory.list_items(org, location=side.pk)] == [product_b]
        assert [i.product for i in inventory.list_items(org, search='led')] == [product_b]
        assert [i.product for i in inventory.list_items(org, search='cam-0')] == [product_a]

    def test_scoped_to_organization(self, org, other_org, product_a, stock_in):
        stock_in(product_a, 1, '1')

        assert inventory.list_items(other_org).count() == 0

    def test_low_stock_items(self, org, warehouse, product_a, product_b, stock_in):
        stock_in(product_a, 50, '1')
        stock_in(product_b, 5, '1')
        product_c = Product.objects.create(organization=org, sku='C', name='Cable')
        stock_in(product_c, 1, '1')
        inventory.record_movement(org, {
            'product': product_c, 'location': warehouse,
            'movement_type': 'stock_out', 'quantity': 1,
        })

        low = {i.product for i in inventory.low_stock_items(org)}

        assert low == {product_b, product_c}


class TestLookups:
    """Single-row lookups."""

    def test_get_stock_item_by_coordinate(self, org, warehouse, product_a, stock_in):
        item = stock_in(product_a, 1, '1').stock_item

        assert inventory.get_stock_item(org, product=product_a, location=warehouse) == item
        assert inventory.get_stock_item(org, item_id=item.pk) == item

    def test_get_stock_item_missing(self, org, warehouse, product_a):
        with pytest.raises(NotFoundError):
            inventory.get_stock_item(org, product=product_a, location=warehouse)


class TestCatalogLists:
    """Products, locations, suppliers."""

    def test_products_active_only(self, org, product_a, product_b):
        Product.objects.create(organization=org, sku='OLD', name='Old', active=False)

        assert list(inventory.list_products(org)) == [product_a, product_b]
        assert list(inventory.list_products(org, category='Lighting')) == [product_b]
        assert list(inventory.list_products(org, search='dome')) == [product_a]

    def test_locations_active_by_name(self, org, warehouse):
        aisle = Location.objects.create(organization=org, code='A1', name='Aisle 1')
        Location.objects.create(organization=org, code='X', name='Closed', active=False)

        assert list(inventory.list_locations(org)) == [aisle, warehouse]

    def test_suppliers(self, org, other_org, supplier):
        Supplier.objects.create(organization=other_org, name='Other')

        assert list(inventory.list_suppliers(org)) == [supplier]


class TestMovementHistory:
    """Tests for inventory.list_movements()."""

    def test_newest_first_and_limit(self, org, warehouse, product_a, product_b, stock_in):
        first = stock_in(product_a, 1, '1').movement
        second = stock_in(product_b, 1, '1').movement
        third = stock_in(product_a, 1, '1').movement

        assert list(inventory.list_movements(org)) == [third, second, first]
        assert list(inventory.list_movements(org, limit=2)) == [third, second]
        assert list(inventory.list_movements(org, product=product_a.pk)) == [third, first]
        assert list(inventory.list_movements(org, movement_type='stock_out')) == []

    def test_default_limit_from_settings(self, org, product_a, stock_in, settings):
        settings.STOREMAN = {'MOVEMENTS_LIMIT': 2}
        for _ in range(3):
            stock_in(product_a, 1, '1')

        assert len(inventory.list_movements(org)) == 2


class TestPurchaseOrderList:
    """Tests for inventory.list_purchase_orders()."""

    def test_filters(self, org, po_data, supplier):
        first = inventory.create_purchase_order(org, po_data)
        po_data['po_number'] = 'PO-0002'
        second = inventory.create_purchase_order(org, po_data)
        inventory.update_po_status(org, second.pk, 'approved')

        assert list(inventory.list_purchase_orders(org)) == [second, first]
        assert list(inventory.list_purchase_orders(org, status='draft')) == [first]
        assert list(inventory.list_purchase_orders(org, supplier=supplier.pk)) == [second, first]

    def test_items_serialized(self, org, po_data, product_a):
        order = inventory.create_purchase_order(org, po_data)

        data = inventory.get_purchase_order(org, order.pk).as_dict()

        assert data['po_number'] == 'PO-0001'
        assert data['items'][0]['product_sku'] == product_a.sku
        assert data['items'][0]['quantity'] == Decimal('5')
        assert StockItem.objects.count() == 0
