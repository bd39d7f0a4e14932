"""
Purchase order receipt — posts ordered quantities into stock.

Safe to run any number of times for the same order: each line is posted at
most once, keyed by (purchase_order, order id, line id) on the movement.
The conditional unique constraint on StockMovement backs this at the
storage level.
"""

import logging
from dataclasses import dataclass, field

from django.db import transaction

from storeman.conf import storeman_settings
from storeman.exceptions import ConflictError, NotFoundError
from storeman.models.enums import MovementType, PurchaseOrderStatus, ReferenceType
from storeman.models.location import Location
from storeman.models.movement import StockMovement
from storeman.models.purchase_order import PurchaseOrder
from storeman.schemas import ReceiptMovement
from storeman.services.movements import StockMovements

logger = logging.getLogger('storeman')


@dataclass
class ReceiptResult:
    """Outcome of one receipt run."""

    location: Location
    movements: list = field(default_factory=list)
    skipped_lines: list = field(default_factory=list)  # ids of lines already posted

    @property
    def posted(self) -> int:
        return len(self.movements)

    def as_dict(self) -> dict:
        return {
            'location_id': self.location.pk,
            'movements_created': self.posted,
            'skipped_lines': list(self.skipped_lines),
        }


class PurchaseReceipts:
    """Receipt methods."""

    @classmethod
    def receiving_location(cls, organization, order: PurchaseOrder) -> Location:
        """
        Where the order's stock lands.

        1. The order's own location
        2. The organization's first active location
        3. A default location (created if needed), stored on the order
        """
        if order.location_id:
            return order.location

        location = (
            Location.objects.filter(organization=organization, active=True)
            .order_by('pk')
            .first()
        )
        if location is None:
            location, created = Location.objects.get_or_create(
                organization=organization,
                code=storeman_settings.DEFAULT_LOCATION_CODE,
                defaults={'name': storeman_settings.DEFAULT_LOCATION_NAME},
            )
            if not location.active:
                location.active = True
                location.save(update_fields=['active', 'updated_at'])
            if created:
                logger.info(
                    "location.default_created",
                    extra={"organization": organization.slug, "location_id": location.pk},
                )

        order.location = location
        order.save(update_fields=['location', 'updated_at'])
        return location

    @classmethod
    def receive_purchase_order(cls, organization, order: PurchaseOrder, actor=None) -> ReceiptResult:
        """
        Post one stock_in per line of a received order that was not posted yet.

        Every posting goes through the same path as record_movement(), so
        the weighted-average cost and the threshold snapshot of new items
        apply as for any other stock_in.

        Raises:
            NotFoundError('PURCHASE_ORDER_NOT_FOUND'): Deleted or not in this organization
            ConflictError('NOT_RECEIVED'): Order status is not received

        Concurrency:
            - Runs under transaction.atomic(); any failure rolls back the
              whole receipt (and a status change wrapping it)
            - Order row locked with select_for_update() and its status
              re-read under the lock
        """
        with transaction.atomic():
            locked = (
                PurchaseOrder.objects.active()
                .select_for_update()
                .filter(pk=order.pk, organization=organization)
                .first()
            )
            if locked is None:
                raise NotFoundError('PURCHASE_ORDER_NOT_FOUND', id=order.pk)
            if locked.status != PurchaseOrderStatus.RECEIVED:
                raise ConflictError('NOT_RECEIVED', id=locked.pk, status=locked.status)

            location = cls.receiving_location(organization, locked)
            order.location = location
            result = ReceiptResult(location=location)

            posted_lines = set(
                StockMovement.objects.filter(
                    reference_type=ReferenceType.PURCHASE_ORDER,
                    reference_id=locked.pk,
                    movement_type=MovementType.STOCK_IN,
                    reference_line_id__isnull=False,
                ).values_list('reference_line_id', flat=True)
            )

            for line in locked.items.select_related('product').order_by('pk'):
                if line.pk in posted_lines:
                    result.skipped_lines.append(line.pk)
                    continue
                result.movements.append(
                    cls._post_line(organization, locked, line, location, actor=actor)
                )

            if result.skipped_lines:
                logger.info(
                    "purchase_order.receipt_skipped",
                    extra={
                        "purchase_order_id": locked.pk,
                        "skipped_lines": result.skipped_lines,
                    },
                )
            logger.info(
                "purchase_order.receipt",
                extra={
                    "organization": organization.slug,
                    "purchase_order_id": locked.pk,
                    "po_number": locked.po_number,
                    "location_id": location.pk,
                    "posted": result.posted,
                },
            )
            return result

    @classmethod
    def _post_line(cls, organization, order: PurchaseOrder, line, location: Location,
                   actor=None) -> StockMovement:
        """stock_in for one order line. Call inside atomic()."""
        movement_result = StockMovements._post(
            organization,
            ReceiptMovement(
                product_id=line.product_id,
                location_id=location.pk,
                movement_type=MovementType.STOCK_IN,
                quantity=line.quantity_ordered,
                unit_cost=line.unit_cost,
                reference_type=ReferenceType.PURCHASE_ORDER,
                reference_id=order.pk,
                reference_line_id=line.pk,
                notes=f"Auto stock-in from PO {order.po_number}",
            ),
            actor=actor,
        )
        line.received_quantity = line.quantity_ordered
        line.save(update_fields=['received_quantity'])
        return movement_result.movement
