"""
Purchase orders — creation and lifecycle.

RECEIVED is absorbing: the transition into it posts stock (see
services.receiving) and the order is locked afterwards. Every other
transition is free, including skipping states and going backwards.
"""

import logging
from dataclasses import dataclass

from django.db import DatabaseError, transaction
from django.db import IntegrityError as DatabaseIntegrityError
from django.utils import timezone

from storeman.exceptions import ConflictError, IntegrityError, NotFoundError, ValidationError
from storeman.models.catalog import Product, Supplier
from storeman.models.enums import PurchaseOrderStatus
from storeman.models.location import Location
from storeman.models.purchase_order import PurchaseOrder, PurchaseOrderItem
from storeman.schemas import PurchaseOrderIn, PurchaseOrderUpdate, parse, parse_id
from storeman.services.receiving import PurchaseReceipts, ReceiptResult

logger = logging.getLogger('storeman')


@dataclass
class StatusChange:
    """Outcome of update_po_status()."""

    order: PurchaseOrder
    old_status: str
    new_status: str
    receipt: ReceiptResult | None = None

    @property
    def changed(self) -> bool:
        return self.old_status != self.new_status


class PurchaseOrders:
    """Purchase order methods."""

    # ══════════════════════════════════════════════════════════════
    # CREATE
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def create_purchase_order(cls, organization, data: dict, actor=None) -> PurchaseOrder:
        """
        Create a draft purchase order with its lines.

        data keys (see schemas.PurchaseOrderIn):
            supplier_id, po_number, items [{product_id, quantity, unit_cost}],
            location_id?, expected_delivery_date?, notes?

        total_amount = sum(quantity * unit_cost), rounded to cents.

        Raises:
            ValidationError: Missing header field, no items, bad line
            NotFoundError: Supplier, product or location not in this organization
            ConflictError('DUPLICATE_PO_NUMBER'): po_number taken in this organization
            IntegrityError('WRITE_FAILED'): Storage failure; nothing was written
        """
        payload = parse(PurchaseOrderIn, data)
        po_number = payload.po_number

        supplier = Supplier.objects.filter(pk=payload.supplier_id, organization=organization).first()
        if supplier is None:
            raise NotFoundError('SUPPLIER_NOT_FOUND', supplier_id=payload.supplier_id)

        product_ids = {line.product_id for line in payload.items}
        products = {
            p.pk: p for p in Product.objects.filter(pk__in=product_ids, organization=organization)
        }
        missing = sorted(product_ids - set(products))
        if missing:
            raise NotFoundError('PRODUCT_NOT_FOUND', product_ids=missing)

        location = cls._order_location(organization, payload.location_id)

        if PurchaseOrder.objects.filter(organization=organization, po_number=po_number).exists():
            raise cls._duplicate(po_number)

        total = payload.total_amount

        try:
            with transaction.atomic():
                order = PurchaseOrder.objects.create(
                    organization=organization,
                    supplier=supplier,
                    po_number=po_number,
                    status=PurchaseOrderStatus.DRAFT,
                    location=location,
                    expected_delivery_date=payload.expected_delivery_date,
                    total_amount=total,
                    notes=payload.notes,
                    created_by=actor,
                )
                PurchaseOrderItem.objects.bulk_create([
                    PurchaseOrderItem(
                        order=order,
                        product=products[line.product_id],
                        quantity_ordered=line.quantity,
                        unit_cost=line.unit_cost,
                    )
                    for line in payload.items
                ])
        except DatabaseIntegrityError as exc:
            if PurchaseOrder.objects.filter(organization=organization, po_number=po_number).exists():
                raise cls._duplicate(po_number) from exc
            logger.exception(
                "purchase_order.create_failed",
                extra={"organization": organization.slug, "po_number": po_number},
            )
            raise IntegrityError('WRITE_FAILED') from exc
        except DatabaseError as exc:
            logger.exception(
                "purchase_order.create_failed",
                extra={"organization": organization.slug, "po_number": po_number},
            )
            raise IntegrityError('WRITE_FAILED') from exc

        logger.info(
            "purchase_order.create",
            extra={
                "organization": organization.slug,
                "purchase_order_id": order.pk,
                "po_number": po_number,
                "items": len(payload.items),
                "total_amount": str(total),
            },
        )
        return order

    @classmethod
    def _order_location(cls, organization, location_id: int | None) -> Location | None:
        """Requested location, else the first active one (may be None)."""
        if location_id is None:
            return (
                Location.objects.filter(organization=organization, active=True)
                .order_by('pk')
                .first()
            )
        found = Location.objects.filter(pk=location_id, organization=organization).first()
        if found is None:
            raise NotFoundError('LOCATION_NOT_FOUND', location_id=location_id)
        return found

    @staticmethod
    def _duplicate(po_number: str) -> ConflictError:
        return ConflictError(
            'DUPLICATE_PO_NUMBER',
            f"Purchase order number '{po_number}' already exists. Please use a different PO number.",
            po_number=po_number,
        )

    # ══════════════════════════════════════════════════════════════
    # LIFECYCLE
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def _lock_order(cls, organization, po_id) -> PurchaseOrder:
        """Lock the order row. Call inside atomic()."""
        pk = parse_id(po_id)
        if pk is None:
            raise ValidationError('REQUIRED', 'id is required', field='id')
        order = (
            PurchaseOrder.objects.active()
            .select_for_update()
            .filter(pk=pk, organization=organization)
            .first()
        )
        if order is None:
            raise NotFoundError('PURCHASE_ORDER_NOT_FOUND', id=pk)
        return order

    @classmethod
    def update_po_status(cls, organization, po_id, new_status: str, actor=None) -> StatusChange:
        """
        Move an order to new_status.

        Entering RECEIVED stamps received_at and posts stock in the same
        transaction. received -> received is accepted and re-runs the
        receipt, which posts nothing new.

        Raises:
            ValidationError('INVALID_STATUS'): Unknown status
            NotFoundError('PURCHASE_ORDER_NOT_FOUND')
            ConflictError('RECEIVED_LOCKED'): Leaving RECEIVED

        Concurrency:
            - Runs under transaction.atomic()
            - Order row locked with select_for_update(), so concurrent
              callers serialize and only the first one posts stock
        """
        if new_status not in PurchaseOrderStatus.values:
            raise ValidationError(
                'INVALID_STATUS',
                f"Invalid status. Must be one of: {', '.join(PurchaseOrderStatus.values)}",
                status=new_status,
            )

        with transaction.atomic():
            order = cls._lock_order(organization, po_id)
            old_status = order.status

            if old_status == PurchaseOrderStatus.RECEIVED and new_status != PurchaseOrderStatus.RECEIVED:
                raise ConflictError(
                    'RECEIVED_LOCKED',
                    old_status=old_status,
                    new_status=new_status,
                )

            order.status = new_status
            update_fields = ['status', 'updated_at']
            if new_status == PurchaseOrderStatus.RECEIVED and order.received_at is None:
                order.received_at = timezone.now()
                update_fields.append('received_at')
            order.save(update_fields=update_fields)

            receipt = None
            if new_status == PurchaseOrderStatus.RECEIVED:
                receipt = PurchaseReceipts.receive_purchase_order(organization, order, actor=actor)

            logger.info(
                "purchase_order.status",
                extra={
                    "organization": organization.slug,
                    "purchase_order_id": order.pk,
                    "old_status": old_status,
                    "new_status": new_status,
                },
            )
            return StatusChange(
                order=order,
                old_status=old_status,
                new_status=new_status,
                receipt=receipt,
            )

    @classmethod
    def update_po_details(cls, organization, po_id, data: dict) -> PurchaseOrder:
        """
        Edit expected_delivery_date and notes. Other keys are ignored.

        Raises:
            ConflictError('RECEIVED_LOCKED'): Order already received
        """
        payload = parse(PurchaseOrderUpdate, data)
        with transaction.atomic():
            order = cls._lock_order(organization, po_id)
            if order.is_received:
                raise ConflictError('RECEIVED_LOCKED', 'Cannot update a received purchase order')

            changes = payload.model_dump(include=payload.model_fields_set)
            for name, value in changes.items():
                setattr(order, name, value)
            order.save(update_fields=[*changes, 'updated_at'])
            return order

    @classmethod
    def delete_purchase_order(cls, organization, po_id) -> PurchaseOrder:
        """
        Soft delete: the order disappears from listings and lookups.

        Raises:
            ConflictError('RECEIVED_LOCKED'): Order already received
        """
        with transaction.atomic():
            order = cls._lock_order(organization, po_id)
            if order.is_received:
                raise ConflictError('RECEIVED_LOCKED', 'Cannot delete a received purchase order')

            order.deleted_at = timezone.now()
            order.save(update_fields=['deleted_at', 'updated_at'])

            logger.info(
                "purchase_order.delete",
                extra={"organization": organization.slug, "purchase_order_id": order.pk},
            )
            return order
