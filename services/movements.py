"""
Stock movements — state-changing operations on the ledger.

Every quantity change is a StockMovement row written in the same
transaction as the StockItem update. All methods use transaction.atomic()
with the StockItem row locked via select_for_update().
"""

import logging
from dataclasses import dataclass
from decimal import Decimal

from django.db import transaction

from storeman.exceptions import InsufficientStockError, NotFoundError
from storeman.models.catalog import Product
from storeman.models.enums import MovementType, ReferenceType
from storeman.models.location import Location
from storeman.models.movement import StockMovement
from storeman.models.stock_item import StockItem
from storeman.schemas import (
    MovementIn,
    StockItemCorrection,
    StockItemUpsert,
    parse,
    parse_id,
    quantize_cost,
)
from storeman.services.settings import SettingsService

logger = logging.getLogger('storeman')


@dataclass
class MovementResult:
    """What record_movement() wrote."""

    movement: StockMovement
    stock_item: StockItem
    created: bool  # StockItem was created by this movement


class StockMovements:
    """State-changing stock movement methods."""

    # ══════════════════════════════════════════════════════════════
    # LEDGER
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def record_movement(cls, organization, data: dict, actor=None) -> MovementResult:
        """
        Record one movement and apply it to the StockItem.

        data keys (see schemas.MovementIn):
            product / product_id, location / location_id, movement_type,
            quantity, unit_cost?, reference_type?, reference_id?,
            occurred_at?, notes?

        Effects:
            stock_in    quantity += q, average cost blended with unit_cost
            stock_out   quantity -= q, never below zero
            adjustment  quantity  = q

        Raises:
            ValidationError: Bad type, quantity or cost; purchase order
                references (only receipts write those)
            NotFoundError('UNKNOWN_PRODUCT_OR_LOCATION'): Not in this organization
            InsufficientStockError: stock_out larger than the quantity on hand

        Concurrency:
            - Runs under transaction.atomic()
            - Existing StockItem locked with select_for_update() before read
            - Missing StockItem created via get_or_create (unique constraint
              on organization/product/location), then locked
        """
        return cls._post(organization, parse(MovementIn, data), actor=actor)

    @classmethod
    def _post(cls, organization, payload: MovementIn, actor=None) -> MovementResult:
        """Apply a validated movement. Receipts call this with a ReceiptMovement."""
        product, location = cls._resolve_coordinates(
            organization, payload.product_id, payload.location_id,
        )
        movement_type = payload.movement_type
        quantity = payload.quantity
        unit_cost = payload.unit_cost

        with transaction.atomic():
            item, created = cls._lock_stock_item(
                organization, product, location, movement_type, quantity, unit_cost,
            )

            old_quantity = item.quantity
            if movement_type == MovementType.STOCK_IN:
                cost = item.average_cost if unit_cost is None else unit_cost
                new_quantity = old_quantity + quantity
                item.average_cost = quantize_cost(
                    (old_quantity * item.average_cost + quantity * cost) / new_quantity
                )
            elif movement_type == MovementType.STOCK_OUT:
                new_quantity = old_quantity - quantity
                if new_quantity < 0:
                    raise InsufficientStockError(
                        available=old_quantity,
                        requested=quantity,
                        product_id=product.pk,
                        location_id=location.pk,
                    )
                cost = item.average_cost if unit_cost is None else unit_cost
            else:
                new_quantity = quantity
                cost = item.average_cost if unit_cost is None else unit_cost

            movement_kwargs = {}
            if payload.occurred_at is not None:
                movement_kwargs['occurred_at'] = payload.occurred_at

            movement = StockMovement.objects.create(
                organization=organization,
                stock_item=item,
                product=product,
                location=location,
                movement_type=movement_type,
                quantity=quantity,
                unit_cost=cost,
                reference_type=payload.reference_type,
                reference_id=payload.reference_id,
                reference_line_id=payload.reference_line_id,
                notes=payload.notes,
                actor=actor,
                **movement_kwargs,
            )

            item.quantity = new_quantity
            item.save(update_fields=['quantity', 'average_cost', 'updated_at'])

            reference = payload.reference_type
            logger.info(
                "stock.movement",
                extra={
                    "organization": organization.slug,
                    "stock_item_id": item.pk,
                    "movement_id": movement.pk,
                    "movement_type": movement_type,
                    "qty": str(quantity),
                    "old_qty": str(old_quantity),
                    "new_qty": str(new_quantity),
                    "reference": f"{reference}:{payload.reference_id}" if reference else None,
                },
            )
            return MovementResult(movement=movement, stock_item=item, created=created)

    @classmethod
    def _resolve_coordinates(cls, organization, product_id, location_id) -> tuple[Product, Location]:
        product = Product.objects.filter(pk=product_id, organization=organization).first()
        location = Location.objects.filter(pk=location_id, organization=organization).first()
        if product is None or location is None:
            raise NotFoundError(
                'UNKNOWN_PRODUCT_OR_LOCATION',
                product_id=product_id,
                location_id=location_id,
            )
        return product, location

    @classmethod
    def _lock_stock_item(cls, organization, product, location,
                         movement_type, quantity, unit_cost) -> tuple[StockItem, bool]:
        """Locked StockItem for the coordinate, created lazily. Call inside atomic()."""
        coordinate = {'organization': organization, 'product': product, 'location': location}

        item = StockItem.objects.select_for_update().filter(**coordinate).first()
        if item is not None:
            return item, False

        if movement_type == MovementType.STOCK_OUT:
            raise InsufficientStockError(
                available=Decimal('0'),
                requested=quantity,
                product_id=product.pk,
                location_id=location.pk,
            )

        item, created = StockItem.objects.get_or_create(
            **coordinate,
            defaults={
                'low_stock_threshold': SettingsService.current_threshold(organization),
                'average_cost': unit_cost if unit_cost is not None else Decimal('0'),
            },
        )
        # Re-read under lock: a concurrent caller may have won get_or_create
        item = StockItem.objects.select_for_update().get(pk=item.pk)
        return item, created

    # ══════════════════════════════════════════════════════════════
    # MANUAL CORRECTIONS
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def correct_stock_item(cls, organization, item_id, quantity=None,
                           average_cost=None, actor=None, notes: str = '') -> StockItem:
        """
        Manual correction of a StockItem.

        A quantity change is posted as an adjustment movement, so replaying
        the ledger still yields the stored quantity. average_cost is
        overwritten directly (it is not part of the ledger).

        Raises:
            NotFoundError('STOCK_ITEM_NOT_FOUND'): Item not in this organization
            ValidationError: Negative quantity or cost
        """
        correction = parse(StockItemCorrection, {
            'quantity': quantity,
            'average_cost': average_cost,
            'notes': notes,
        })
        item_pk = parse_id(item_id)

        with transaction.atomic():
            item = (
                StockItem.objects.select_for_update()
                .filter(pk=item_pk, organization=organization)
                .first()
            )
            if item is None:
                raise NotFoundError('STOCK_ITEM_NOT_FOUND', id=item_pk)

            return cls._apply_correction(organization, item, correction, actor)

    @classmethod
    def _apply_correction(cls, organization, item, correction: StockItemCorrection,
                          actor=None) -> StockItem:
        """Apply a parsed correction to a locked item. Call inside atomic()."""
        new_cost = correction.average_cost
        if new_cost is not None and new_cost != item.average_cost:
            item.average_cost = new_cost
            item.save(update_fields=['average_cost', 'updated_at'])

        new_quantity = correction.quantity
        if new_quantity is not None and new_quantity != item.quantity:
            cls._post(
                organization,
                MovementIn(
                    product_id=item.product_id,
                    location_id=item.location_id,
                    movement_type=MovementType.ADJUSTMENT,
                    quantity=new_quantity,
                    reference_type=ReferenceType.STOCK_ITEM,
                    reference_id=item.pk,
                    notes=correction.notes or 'Manual correction',
                ),
                actor=actor,
            )
            item.refresh_from_db()

        logger.info(
            "stock.correct",
            extra={
                "organization": organization.slug,
                "stock_item_id": item.pk,
                "quantity": str(item.quantity),
                "average_cost": str(item.average_cost),
            },
        )
        return item

    @classmethod
    def upsert_stock_item(cls, organization, data: dict, actor=None) -> StockItem:
        """
        Create the StockItem for (product, location) if needed, then apply
        quantity/average_cost as a correction.
        """
        payload = parse(StockItemUpsert, data)
        product, location = cls._resolve_coordinates(
            organization, payload.product_id, payload.location_id,
        )

        with transaction.atomic():
            item, created = StockItem.objects.get_or_create(
                organization=organization,
                product=product,
                location=location,
                defaults={
                    'low_stock_threshold': SettingsService.current_threshold(organization),
                },
            )
            item = StockItem.objects.select_for_update().get(pk=item.pk)
            item = cls._apply_correction(organization, item, payload, actor)
            if created:
                logger.info(
                    "stock.item_created",
                    extra={"organization": organization.slug, "stock_item_id": item.pk},
                )
            return item
