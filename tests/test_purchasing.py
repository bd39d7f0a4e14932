"""
Tests for purchase order creation and lifecycle.
"""

from decimal import Decimal
from itertools import permutations
from unittest import mock

import pytest
from django.db import DatabaseError

from storeman import inventory
from storeman.exceptions import ConflictError, IntegrityError, NotFoundError, ValidationError
from storeman.models import (
    Location,
    Product,
    PurchaseOrder,
    PurchaseOrderItem,
    PurchaseOrderStatus,
    StockMovement,
    Supplier,
)


pytestmark = pytest.mark.django_db


NON_RECEIVED = [s for s in PurchaseOrderStatus.values if s != PurchaseOrderStatus.RECEIVED]


class TestCreatePurchaseOrder:
    """Tests for inventory.create_purchase_order()."""

    def test_creates_draft_with_total(self, org, warehouse, po_data, user):
        order = inventory.create_purchase_order(org, po_data, actor=user)

        order.refresh_from_db()
        assert order.status == PurchaseOrderStatus.DRAFT
        assert order.total_amount == Decimal('40.00')
        assert order.items.count() == 2
        assert order.created_by == user
        assert order.location == warehouse

    def test_total_rounded_to_cents(self, org, supplier, product_a):
        order = inventory.create_purchase_order(org, {
            'supplier_id': supplier.pk,
            'po_number': 'PO-R',
            'items': [{'product_id': product_a.pk, 'quantity': 3, 'unit_cost': '0.3333'}],
        })

        order.refresh_from_db()
        assert order.total_amount == Decimal('1.00')

    def test_without_location_uses_first_active(self, org, po_data):
        Location.objects.create(organization=org, code='OLD', name='Old', active=False)
        first = Location.objects.create(organization=org, code='B', name='B Store')
        Location.objects.create(organization=org, code='A', name='A Store')

        order = inventory.create_purchase_order(org, po_data)

        assert order.location == first

    def test_without_any_location(self, org, po_data):
        order = inventory.create_purchase_order(org, po_data)

        assert order.location is None

    def test_explicit_location(self, org, warehouse, po_data):
        other = Location.objects.create(organization=org, code='SIDE', name='Side')
        po_data['location_id'] = other.pk

        order = inventory.create_purchase_order(org, po_data)

        assert order.location == other

    @pytest.mark.parametrize('field', ['supplier_id', 'po_number'])
    def test_missing_header_field(self, org, po_data, field):
        del po_data[field]

        with pytest.raises(ValidationError) as exc:
            inventory.create_purchase_order(org, po_data)

        assert exc.value.code == 'REQUIRED'
        assert PurchaseOrder.objects.count() == 0

    def test_no_items(self, org, po_data):
        po_data['items'] = []

        with pytest.raises(ValidationError) as exc:
            inventory.create_purchase_order(org, po_data)

        assert exc.value.code == 'NO_ITEMS'

    @pytest.mark.parametrize('line, code', [
        ({'quantity': 1, 'unit_cost': 1}, 'REQUIRED'),
        ({'product_id': 'PRODUCT', 'quantity': 0, 'unit_cost': 1}, 'INVALID_QUANTITY'),
        ({'product_id': 'PRODUCT', 'unit_cost': 1}, 'REQUIRED'),
        ({'product_id': 'PRODUCT', 'quantity': 1, 'unit_cost': -1}, 'INVALID_COST'),
        ({'product_id': 'PRODUCT', 'quantity': 1}, 'REQUIRED'),
    ])
    def test_invalid_line(self, org, supplier, product_a, line, code):
        if line.get('product_id') == 'PRODUCT':
            line['product_id'] = product_a.pk

        with pytest.raises(ValidationError) as exc:
            inventory.create_purchase_order(org, {
                'supplier_id': supplier.pk, 'po_number': 'PO-X', 'items': [line],
            })

        assert exc.value.code == code
        assert PurchaseOrder.objects.count() == 0

    def test_invalid_line_names_its_position(self, org, po_data):
        po_data['items'][1]['quantity'] = 'three'

        with pytest.raises(ValidationError) as exc:
            inventory.create_purchase_order(org, po_data)

        assert exc.value.code == 'INVALID_NUMBER'
        assert exc.value.data['field'] == 'items.1.quantity'

    def test_zero_cost_line_allowed(self, org, supplier, product_a):
        order = inventory.create_purchase_order(org, {
            'supplier_id': supplier.pk,
            'po_number': 'PO-FREE',
            'items': [{'product_id': product_a.pk, 'quantity': 1, 'unit_cost': 0}],
        })

        assert order.total_amount == Decimal('0.00')

    def test_supplier_of_other_organization(self, org, other_org, po_data):
        po_data['supplier_id'] = Supplier.objects.create(organization=other_org, name='Elsewhere').pk

        with pytest.raises(NotFoundError) as exc:
            inventory.create_purchase_order(org, po_data)

        assert exc.value.code == 'SUPPLIER_NOT_FOUND'

    def test_product_of_other_organization(self, org, other_org, po_data):
        foreign = Product.objects.create(organization=other_org, sku='F', name='Foreign')
        po_data['items'].append({'product_id': foreign.pk, 'quantity': 1, 'unit_cost': 1})

        with pytest.raises(NotFoundError) as exc:
            inventory.create_purchase_order(org, po_data)

        assert exc.value.code == 'PRODUCT_NOT_FOUND'
        assert PurchaseOrder.objects.count() == 0

    def test_duplicate_po_number_same_organization(self, org, po_data):
        inventory.create_purchase_order(org, po_data)

        with pytest.raises(ConflictError) as exc:
            inventory.create_purchase_order(org, po_data)

        assert exc.value.code == 'DUPLICATE_PO_NUMBER'
        assert PurchaseOrder.objects.filter(organization=org).count() == 1

    def test_same_po_number_other_organization(self, org, other_org, po_data):
        inventory.create_purchase_order(org, po_data)

        supplier = Supplier.objects.create(organization=other_org, name='Other supplier')
        product = Product.objects.create(organization=other_org, sku='Z', name='Other product')
        order = inventory.create_purchase_order(other_org, {
            'supplier_id': supplier.pk,
            'po_number': po_data['po_number'],
            'items': [{'product_id': product.pk, 'quantity': 1, 'unit_cost': 1}],
        })

        assert order.po_number == po_data['po_number']
        assert PurchaseOrder.objects.count() == 2

    def test_line_failure_rolls_back_header(self, org, po_data):
        """A storage failure on the lines leaves no header behind."""
        with mock.patch.object(
            PurchaseOrderItem.objects, 'bulk_create', side_effect=DatabaseError('disk full'),
        ):
            with pytest.raises(IntegrityError) as exc:
                inventory.create_purchase_order(org, po_data)

        assert exc.value.code == 'WRITE_FAILED'
        assert isinstance(exc.value.__cause__, DatabaseError)
        assert PurchaseOrder.objects.count() == 0
        assert PurchaseOrderItem.objects.count() == 0


class TestStatusMachine:
    """Received is absorbing, everything else is free."""

    @pytest.mark.parametrize('old, new', list(permutations(NON_RECEIVED, 2)))
    def test_free_transitions(self, org, po_data, old, new):
        order = inventory.create_purchase_order(org, po_data)
        PurchaseOrder.objects.filter(pk=order.pk).update(status=old)

        change = inventory.update_po_status(org, order.pk, new)

        assert change.old_status == old
        assert change.new_status == new
        assert change.receipt is None
        order.refresh_from_db()
        assert order.status == new
        assert StockMovement.objects.count() == 0

    @pytest.mark.parametrize('new', NON_RECEIVED)
    def test_leaving_received_is_rejected(self, org, po_data, new):
        order = inventory.create_purchase_order(org, po_data)
        inventory.update_po_status(org, order.pk, 'received')

        with pytest.raises(ConflictError) as exc:
            inventory.update_po_status(org, order.pk, new)

        assert exc.value.code == 'RECEIVED_LOCKED'
        order.refresh_from_db()
        assert order.status == PurchaseOrderStatus.RECEIVED

    def test_received_to_received_is_accepted(self, org, po_data):
        order = inventory.create_purchase_order(org, po_data)
        inventory.update_po_status(org, order.pk, 'received')

        change = inventory.update_po_status(org, order.pk, 'received')

        assert change.changed is False
        assert change.receipt.posted == 0
        assert StockMovement.objects.count() == 2

    def test_received_at_stamped_once(self, org, po_data):
        order = inventory.create_purchase_order(org, po_data)
        first = inventory.update_po_status(org, order.pk, 'received').order.received_at

        again = inventory.update_po_status(org, order.pk, 'received').order.received_at

        assert first is not None
        assert again == first

    def test_unknown_status(self, org, po_data):
        order = inventory.create_purchase_order(org, po_data)

        with pytest.raises(ValidationError) as exc:
            inventory.update_po_status(org, order.pk, 'in_transit')

        assert exc.value.code == 'INVALID_STATUS'

    def test_unknown_order(self, org):
        with pytest.raises(NotFoundError) as exc:
            inventory.update_po_status(org, 12345, 'approved')

        assert exc.value.code == 'PURCHASE_ORDER_NOT_FOUND'

    def test_order_of_other_organization(self, org, other_org, po_data):
        order = inventory.create_purchase_order(org, po_data)

        with pytest.raises(NotFoundError):
            inventory.update_po_status(other_org, order.pk, 'approved')


class TestEditAndDelete:
    """update_po_details() and delete_purchase_order()."""

    def test_update_details(self, org, po_data):
        order = inventory.create_purchase_order(org, po_data)

        updated = inventory.update_po_details(org, order.pk, {
            'expected_delivery_date': '2026-11-02',
            'notes': 'Call before delivery',
            'po_number': 'IGNORED',
        })

        updated.refresh_from_db()
        assert str(updated.expected_delivery_date) == '2026-11-02'
        assert updated.notes == 'Call before delivery'
        assert updated.po_number == po_data['po_number']

    def test_update_details_rejects_bad_date(self, org, po_data):
        order = inventory.create_purchase_order(org, po_data)

        with pytest.raises(ValidationError) as exc:
            inventory.update_po_details(org, order.pk, {'expected_delivery_date': 'next week'})

        assert exc.value.code == 'INVALID_DATE'
        order.refresh_from_db()
        assert order.expected_delivery_date is None

    def test_update_details_of_received_order(self, org, po_data):
        order = inventory.create_purchase_order(org, po_data)
        inventory.update_po_status(org, order.pk, 'received')

        with pytest.raises(ConflictError):
            inventory.update_po_details(org, order.pk, {'notes': 'late'})

    def test_soft_delete_hides_order(self, org, po_data):
        order = inventory.create_purchase_order(org, po_data)

        inventory.delete_purchase_order(org, order.pk)

        assert PurchaseOrder.objects.filter(pk=order.pk).exists()
        assert not inventory.list_purchase_orders(org).filter(pk=order.pk).exists()
        with pytest.raises(NotFoundError):
            inventory.get_purchase_order(org, order.pk)
        with pytest.raises(NotFoundError):
            inventory.update_po_status(org, order.pk, 'approved')

    def test_delete_received_order_rejected(self, org, po_data):
        order = inventory.create_purchase_order(org, po_data)
        inventory.update_po_status(org, order.pk, 'received')

        with pytest.raises(ConflictError):
            inventory.delete_purchase_order(org, order.pk)

        order.refresh_from_db()
        assert order.deleted_at is None
