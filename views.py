"""
JSON endpoint for the inventory service.

One view, dispatched by HTTP verb and a resource/action name:

    GET    ?organization_slug=acme&type=items|products|locations|movements|
               purchase-orders|suppliers|settings
    POST   {organization_slug, action, data}
    PUT    /<id>/ {organization_slug, quantity?, average_cost?}
           /<id>/ {organization_slug, action: "update-po-status", status}
           /<id>/ {organization_slug, action: "update-po", data}
    DELETE ?organization_slug=acme&type=purchase-order&id=<id>

Success: {"success": true, "data": ..., "metadata": {...}}
Failure: {"success": false, "message": "..."}
"""

import json
import logging

from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt

from storeman.exceptions import StoremanError, ValidationError
from storeman.service import Inventory

logger = logging.getLogger('storeman')

GET_TYPES = ('items', 'products', 'locations', 'movements', 'purchase-orders', 'suppliers', 'settings')
POST_ACTIONS = (
    'product', 'movement', 'location', 'stock-item',
    'purchase-order', 'supplier', 'settings', 'migrate-thresholds',
)


def ok(data, metadata=None, status=200) -> JsonResponse:
    return JsonResponse(
        {'success': True, 'data': data, 'metadata': metadata or {}},
        status=status,
    )


def fail(message: str, status: int = 400) -> JsonResponse:
    return JsonResponse({'success': False, 'message': message}, status=status)


def _actor(request):
    user = getattr(request, 'user', None)
    if user is not None and user.is_authenticated:
        return user
    return None


def _body(request) -> dict:
    if not request.body:
        return {}
    try:
        body = json.loads(request.body)
    except (ValueError, UnicodeDecodeError) as exc:
        raise ValidationError('REQUIRED', 'Request body must be valid JSON') from exc
    if not isinstance(body, dict):
        raise ValidationError('REQUIRED', 'Request body must be a JSON object')
    return body


def _item_dict(item) -> dict:
    data = item.as_dict()
    data['product'] = item.product.as_dict()
    data['location'] = item.location.as_dict()
    return data


def _movement_dict(movement) -> dict:
    data = movement.as_dict()
    data['product'] = {'id': movement.product_id, 'sku': movement.product.sku, 'name': movement.product.name}
    data['location'] = {'id': movement.location_id, 'code': movement.location.code, 'name': movement.location.name}
    return data


# ══════════════════════════════════════════════════════════════
# VERBS
# ══════════════════════════════════════════════════════════════


def _get(request, org):
    params = request.GET
    kind = params.get('type', 'items')

    if kind == 'items':
        items = Inventory.list_items(
            org,
            category=params.get('category'),
            location=params.get('location_id'),
            search=params.get('search'),
        )
        data = [_item_dict(item) for item in items]
        return ok(data, {
            'total_items': len(data),
            'organization_id': org.pk,
            'organization_slug': org.slug,
        })

    if kind == 'products':
        products = Inventory.list_products(org, category=params.get('category'), search=params.get('search'))
        data = [p.as_dict() for p in products]
        return ok(data, {'total_products': len(data)})

    if kind == 'locations':
        return ok([loc.as_dict() for loc in Inventory.list_locations(org)])

    if kind == 'movements':
        movements = Inventory.list_movements(
            org,
            product=params.get('product_id'),
            location=params.get('location_id'),
            movement_type=params.get('movement_type'),
            limit=params.get('limit'),
        )
        data = [_movement_dict(m) for m in movements]
        return ok(data, {'total_movements': len(data)})

    if kind == 'purchase-orders':
        orders = Inventory.list_purchase_orders(
            org,
            status=params.get('status'),
            supplier=params.get('supplier_id'),
        )
        data = [order.as_dict() for order in orders]
        return ok(data, {'total_pos': len(data)})

    if kind == 'suppliers':
        return ok([s.as_dict() for s in Inventory.list_suppliers(org)])

    if kind == 'settings':
        data, metadata = Inventory.get_settings(org)
        metadata['organization_id'] = org.pk
        return ok(data, metadata)

    return fail(f"Invalid type: {kind}. Valid types: {', '.join(GET_TYPES)}")


def _post(request, org, body):
    action = body.get('action')
    data = body.get('data') or {}
    actor = _actor(request)

    if not action:
        return fail(f"action is required ({', '.join(POST_ACTIONS)})")
    if not isinstance(data, dict):
        return fail('data must be an object')

    if action == 'product':
        return ok(Inventory.create_product(org, data).as_dict(), status=201)

    if action == 'movement':
        result = Inventory.record_movement(org, data, actor=actor)
        return ok(result.movement.as_dict(), {
            'new_quantity': result.stock_item.quantity,
            'average_cost': result.stock_item.average_cost,
            'movement_type': result.movement.movement_type,
            'stock_item_created': result.created,
        }, status=201)

    if action == 'location':
        return ok(Inventory.create_location(org, data).as_dict(), status=201)

    if action == 'stock-item':
        item = Inventory.upsert_stock_item(org, data, actor=actor)
        return ok(item.as_dict(), status=201)

    if action == 'purchase-order':
        order = Inventory.create_purchase_order(org, data, actor=actor)
        order = Inventory.get_purchase_order(org, order.pk)
        return ok(order.as_dict(), {
            'organization_id': org.pk,
            'item_count': len(order.items.all()),
        }, status=201)

    if action == 'supplier':
        return ok(Inventory.create_supplier(org, data).as_dict(), status=201)

    if action == 'settings':
        Inventory.update_settings(org, data)
        settings_data, _ = Inventory.get_settings(org)
        return ok(settings_data, {'organization_id': org.pk}, status=201)

    if action == 'migrate-thresholds':
        count, threshold = Inventory.migrate_stock_thresholds(org)
        return ok({'updated_count': count, 'threshold': threshold}, {'organization_id': org.pk}, status=201)

    return fail(f"Invalid action: {action}. Valid actions: {', '.join(POST_ACTIONS)}")


def _put(request, org, body, resource_id):
    action = body.get('action')

    if action == 'update-po-status' and resource_id:
        status = body.get('status')
        if not status:
            return fail('status is required')
        change = Inventory.update_po_status(org, resource_id, status, actor=_actor(request))
        order = Inventory.get_purchase_order(org, change.order.pk)
        return ok(order.as_dict(), {
            'organization_id': org.pk,
            'status_changed': change.changed,
            'old_status': change.old_status,
            'new_status': change.new_status,
            'receipt': change.receipt.as_dict() if change.receipt else None,
        })

    if action == 'update-po' and resource_id:
        Inventory.update_po_details(org, resource_id, body.get('data') or {})
        return ok(Inventory.get_purchase_order(org, resource_id).as_dict())

    if not action:
        item_id = body.get('item_id') or resource_id
        if not item_id:
            return fail('item_id is required')
        item = Inventory.correct_stock_item(
            org,
            item_id,
            quantity=body.get('quantity'),
            average_cost=body.get('average_cost'),
            actor=_actor(request),
            notes=str(body.get('notes') or ''),
        )
        return ok(item.as_dict())

    return fail(f"Invalid action: {action}")


def _delete(request, org):
    kind = request.GET.get('type')
    resource_id = request.GET.get('id')

    if kind == 'purchase-order' and resource_id:
        order = Inventory.delete_purchase_order(org, resource_id)
        return ok({'id': order.pk, 'deleted_at': order.deleted_at})

    return fail('Invalid delete action')


# ══════════════════════════════════════════════════════════════
# ENTRY POINT
# ══════════════════════════════════════════════════════════════


@csrf_exempt
def inventory_api(request, resource_id=None):
    """Single inventory endpoint. Errors are turned into failure envelopes here."""
    if request.method not in ('GET', 'POST', 'PUT', 'DELETE'):
        return fail('Method not allowed. Supported: GET, POST, PUT, DELETE', status=405)

    try:
        body = _body(request) if request.method in ('POST', 'PUT') else {}
        slug = request.GET.get('organization_slug') or body.get('organization_slug')
        if not slug:
            return fail('organization_slug is required')

        org = Inventory.resolve_organization(slug)

        if request.method == 'GET':
            return _get(request, org)
        if request.method == 'POST':
            return _post(request, org, body)
        if request.method == 'PUT':
            return _put(request, org, body, resource_id)
        return _delete(request, org)

    except StoremanError as e:
        if e.http_status >= 500:
            logger.error(
                "api.error",
                exc_info=e,
                extra={"code": e.code, "path": request.path, "method": request.method},
            )
        else:
            logger.info(
                "api.rejected",
                extra={"code": e.code, "path": request.path, "method": request.method},
            )
        return fail(e.message, status=e.http_status)
    except Exception:
        logger.exception(
            "api.unhandled",
            extra={"path": request.path, "method": request.method},
        )
        return fail('Internal server error', status=500)
