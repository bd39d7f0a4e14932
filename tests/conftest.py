"""
Pytest fixtures for Storeman tests.
"""

from decimal import Decimal

import pytest
from django.conf import settings


def pytest_configure():
    settings.configure(
        DEBUG=False,
        SECRET_KEY='storeman-tests',
        USE_TZ=True,
        DATABASES={
            'default': {
                'ENGINE': 'django.db.backends.sqlite3',
                'NAME': ':memory:',
            }
        },
        INSTALLED_APPS=[
            'django.contrib.contenttypes',
            'django.contrib.auth',
            'storeman',
        ],
        MIDDLEWARE=[],
        ROOT_URLCONF='storeman.urls',
        DEFAULT_AUTO_FIELD='django.db.models.BigAutoField',
        STOREMAN={},
    )


@pytest.fixture(autouse=True)
def _fresh_directory():
    """The organization directory is cached per process; start each test clean."""
    from storeman.adapters import reset_organization_directory

    reset_organization_directory()
    yield
    reset_organization_directory()


@pytest.fixture
def user(db):
    """Create a test user."""
    from django.contrib.auth import get_user_model

    return get_user_model().objects.create_user(
        username='testuser',
        password='testpass123'
    )


@pytest.fixture
def org(db):
    from storeman.models import Organization

    return Organization.objects.create(slug='acme', name='Acme Trading')


@pytest.fixture
def other_org(db):
    from storeman.models import Organization

    return Organization.objects.create(slug='globex', name='Globex')


@pytest.fixture
def warehouse(org):
    """Main warehouse of org."""
    from storeman.models import Location

    return Location.objects.create(organization=org, code='MAIN', name='Main Warehouse')


@pytest.fixture
def product_a(org):
    from storeman.models import Product

    return Product.objects.create(organization=org, sku='CAM-01', name='Dome Camera', category='CCTV')


@pytest.fixture
def product_b(org):
    from storeman.models import Product

    return Product.objects.create(organization=org, sku='LED-07', name='LED Panel', category='Lighting')


@pytest.fixture
def supplier(org):
    from storeman.models import Supplier

    return Supplier.objects.create(organization=org, name='Northwind Supplies')


@pytest.fixture
def stock_in(org, warehouse):
    """Helper: post a stock_in of `quantity` at `cost` into the main warehouse."""
    from storeman import inventory

    def _stock_in(product, quantity, cost=None, location=None):
        data = {
            'product': product,
            'location': location or warehouse,
            'movement_type': 'stock_in',
            'quantity': Decimal(str(quantity)),
        }
        if cost is not None:
            data['unit_cost'] = Decimal(str(cost))
        return inventory.record_movement(org, data)

    return _stock_in


@pytest.fixture
def po_data(supplier, product_a, product_b):
    """A: 5 x 2.00, B: 3 x 10.00 (total 40.00)."""
    return {
        'supplier_id': supplier.pk,
        'po_number': 'PO-0001',
        'items': [
            {'product_id': product_a.pk, 'quantity': 5, 'unit_cost': '2.00'},
            {'product_id': product_b.pk, 'quantity': 3, 'unit_cost': '10.00'},
        ],
    }
