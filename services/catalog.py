"""
Catalog — thin create calls for products, locations and suppliers.

The full catalog lives elsewhere in the platform; these exist so an
organization can be bootstrapped through the same endpoint.
"""

import logging

from django.db import IntegrityError as DatabaseIntegrityError
from django.db import transaction

from storeman.exceptions import ConflictError
from storeman.models.catalog import Product, Supplier
from storeman.models.location import Location
from storeman.schemas import LocationIn, ProductIn, SupplierIn, parse

logger = logging.getLogger('storeman')


class Catalog:
    """Catalog create methods."""

    @classmethod
    def create_product(cls, organization, data: dict) -> Product:
        product = Product.objects.create(
            organization=organization,
            **parse(ProductIn, data).model_dump(),
        )
        logger.info(
            "catalog.product_create",
            extra={"organization": organization.slug, "product_id": product.pk, "sku": product.sku},
        )
        return product

    @classmethod
    def create_location(cls, organization, data: dict) -> Location:
        """
        Raises:
            ConflictError('DUPLICATE_LOCATION_CODE'): Code taken in this organization
        """
        payload = parse(LocationIn, data)
        code = payload.code
        if Location.objects.filter(organization=organization, code=code).exists():
            raise ConflictError('DUPLICATE_LOCATION_CODE', code=code)

        try:
            with transaction.atomic():
                location = Location.objects.create(
                    organization=organization,
                    **payload.model_dump(),
                )
        except DatabaseIntegrityError as exc:
            raise ConflictError('DUPLICATE_LOCATION_CODE', code=code) from exc

        logger.info(
            "catalog.location_create",
            extra={"organization": organization.slug, "location_id": location.pk, "code": code},
        )
        return location

    @classmethod
    def create_supplier(cls, organization, data: dict) -> Supplier:
        supplier = Supplier.objects.create(
            organization=organization,
            **parse(SupplierIn, data).model_dump(),
        )
        logger.info(
            "catalog.supplier_create",
            extra={"organization": organization.slug, "supplier_id": supplier.pk},
        )
        return supplier
