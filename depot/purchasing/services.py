"""
Requests for delivery and the deliveries received against them.

Every status change goes through ``workflow.can_transition`` with the role of
the employee performing it; a refused transition raises BusinessRuleError.
"""
import logging
from decimal import Decimal, InvalidOperation
from django.db import transaction
from django.utils import timezone
from depot.catalog.models import Product
from depot.core import roles
from depot.core.exceptions import BusinessRuleError
from depot.core.utils import log_status_change, create_audit_log
from . import workflow
from .models import RequestForDelivery, RequestedProduct, RequestStatus, Comment, Delivery, Supply

logger = logging.getLogger('depot.purchasing')

EDITABLE_STATUSES = (RequestStatus.DRAFT, RequestStatus.REJECTED_BY_DIRECTOR, RequestStatus.REJECTED_BY_ACCOUNTANT)


def _request_queryset():
    return RequestForDelivery.objects.select_related('supplier', 'delivery').prefetch_related(
        'requested_products__product', 'comments__author'
    )


def requests_by_status(statuses=None):
    queryset = _request_queryset()
    if statuses:
        queryset = queryset.filter(status__in=statuses)
    return queryset.order_by('-request_date')


def _merge_items(items):
    """Sum quantities per product, skipping lines without a product or with a non-positive quantity"""
    quantities = {}
    for item in items or []:
        product_id = item.get('product')
        quantity = item.get('quantity') or 0
        if product_id is None or quantity <= 0:
            continue
        quantities[product_id] = quantities.get(product_id, 0) + quantity
    products = Product.objects.in_bulk(list(quantities))
    merged = [(products[pk], quantity) for pk, quantity in quantities.items() if pk in products]
    if not merged:
        raise BusinessRuleError('Request must contain at least one valid product line', field='requested_products')
    return merged


def _replace_items(request_for_delivery, lines):
    request_for_delivery.requested_products.all().delete()
    RequestedProduct.objects.bulk_create([
        RequestedProduct(request=request_for_delivery, product=product, quantity=quantity)
        for product, quantity in lines
    ])


def _add_comment(request_for_delivery, author, text):
    if not text or not text.strip():
        raise BusinessRuleError('A comment is required', field='comment')
    return Comment.objects.create(request=request_for_delivery, author=author, text=text.strip())


def _move(request_for_delivery, target, role, user=None, comment=None):
    """Lock the request, validate the transition, store the optional comment and notify"""
    with transaction.atomic():
        request_for_delivery = RequestForDelivery.objects.select_for_update().select_related('supplier').get(
            pk=request_for_delivery.pk
        )
        current = request_for_delivery.status
        if not workflow.can_transition(current, target, role):
            raise BusinessRuleError(f'Request #{request_for_delivery.pk} cannot move from {current} to {target}')
        if comment is not None:
            _add_comment(request_for_delivery, user, comment)
        request_for_delivery.status = target
        request_for_delivery.save(update_fields=['status', 'updated_at'])
        log_status_change(request_for_delivery, current, target, user=user)
        workflow.notify_status_changed(request_for_delivery, target)
    logger.info(f"Request #{request_for_delivery.pk}: {current} -> {target}")
    return request_for_delivery


# Warehouse manager

def create_request(supplier, items, user=None):
    lines = _merge_items(items)
    with transaction.atomic():
        request_for_delivery = RequestForDelivery.objects.create(supplier=supplier)
        _replace_items(request_for_delivery, lines)
    create_audit_log(user=user, action='create', model_name='RequestForDelivery', object_id=request_for_delivery.pk,
                     changes={'supplier': supplier.name, 'lines': len(lines)})
    logger.info(f"Created request #{request_for_delivery.pk} to supplier '{supplier.name}' with {len(lines)} lines")
    return request_for_delivery


def update_request(request_for_delivery, supplier, items):
    lines = _merge_items(items)
    with transaction.atomic():
        request_for_delivery = RequestForDelivery.objects.select_for_update().get(pk=request_for_delivery.pk)
        if request_for_delivery.status not in EDITABLE_STATUSES:
            raise BusinessRuleError(
                f'Request #{request_for_delivery.pk} cannot be edited in status {request_for_delivery.status}'
            )
        request_for_delivery.supplier = supplier
        request_for_delivery.save(update_fields=['supplier', 'updated_at'])
        _replace_items(request_for_delivery, lines)
    logger.info(f"Request #{request_for_delivery.pk} updated: {len(lines)} lines")
    return request_for_delivery


def delete_request(request_for_delivery):
    if request_for_delivery.status != RequestStatus.DRAFT:
        raise BusinessRuleError(
            f'Request #{request_for_delivery.pk} cannot be deleted in status {request_for_delivery.status}'
        )
    pk = request_for_delivery.pk
    request_for_delivery.delete()
    logger.info(f"Request #{pk} deleted")


def submit_request(request_for_delivery, user=None):
    return _move(request_for_delivery, RequestStatus.PENDING_DIRECTOR, roles.ROLE_EMPLOYEE_WAREHOUSE_MANAGER, user)


def resubmit_request(request_for_delivery, comment, user):
    if not comment or not comment.strip():
        raise BusinessRuleError('A comment is required to resubmit a request', field='comment')
    return _move(request_for_delivery, RequestStatus.PENDING_DIRECTOR, roles.ROLE_EMPLOYEE_WAREHOUSE_MANAGER,
                 user, comment)


def cancel_request(request_for_delivery, user=None):
    return _move(request_for_delivery, RequestStatus.CANCELLED, roles.ROLE_EMPLOYEE_WAREHOUSE_MANAGER, user)


# Director

def director_approve(request_for_delivery, comment, user):
    return _move(request_for_delivery, RequestStatus.PENDING_ACCOUNTANT, roles.ROLE_EMPLOYEE_MANAGER, user, comment or '')


def director_reject(request_for_delivery, comment, user):
    return _move(request_for_delivery, RequestStatus.REJECTED_BY_DIRECTOR, roles.ROLE_EMPLOYEE_MANAGER, user,
                 comment or '')


# Accountant

def accountant_approve(request_for_delivery, comment, user):
    return _move(request_for_delivery, RequestStatus.APPROVED, roles.ROLE_EMPLOYEE_ACCOUNTER, user, comment or '')


def accountant_reject(request_for_delivery, comment, user):
    return _move(request_for_delivery, RequestStatus.REJECTED_BY_ACCOUNTANT, roles.ROLE_EMPLOYEE_ACCOUNTER, user,
                 comment or '')


# Deliveries

def all_deliveries():
    return Delivery.objects.select_related('supplier', 'request').prefetch_related('supplies__product').order_by(
        '-delivery_date', '-id'
    )


def create_delivery_from_request(request_for_delivery, lines, delivery_date, user=None):
    """
    Accept goods for an APPROVED request.

    ``lines`` are dicts with ``product``, ``quantity`` (accepted),
    ``purchase_price`` and ``deficit_reason``. Accepted quantities go to
    stock and wait for placement; any shortfall moves the request to
    PARTIALLY_RECEIVED, otherwise it is RECEIVED.
    """
    if not lines:
        raise BusinessRuleError('Delivery must contain at least one line', field='supplies')
    with transaction.atomic():
        request_for_delivery = RequestForDelivery.objects.select_for_update().select_related('supplier').get(
            pk=request_for_delivery.pk
        )
        if request_for_delivery.status != RequestStatus.APPROVED:
            raise BusinessRuleError(
                f'Request #{request_for_delivery.pk} is not APPROVED (current: {request_for_delivery.status})'
            )
        requested = {rp.product_id: rp for rp in request_for_delivery.requested_products.all()}
        products = Product.objects.select_for_update().in_bulk(list(requested))

        delivery = Delivery.objects.create(supplier=request_for_delivery.supplier, delivery_date=delivery_date)
        has_deficit = False
        seen = set()
        for line in lines:
            product_id = line.get('product')
            if product_id in seen:
                raise BusinessRuleError(f'Product id={product_id} appears twice in the delivery', field='supplies')
            seen.add(product_id)
            requested_product = requested.get(product_id)
            if requested_product is None:
                raise BusinessRuleError(f'Product id={product_id} is not part of request #{request_for_delivery.pk}',
                                        field='supplies')
            accepted = line.get('quantity')
            if accepted is None or accepted < 0 or accepted > requested_product.quantity:
                raise BusinessRuleError(
                    f'Invalid accepted quantity {accepted} for product id={product_id} '
                    f'(requested {requested_product.quantity})', field='supplies'
                )
            try:
                price = Decimal(str(line.get('purchase_price')))
            except (InvalidOperation, TypeError):
                raise BusinessRuleError(f'Invalid purchase price for product id={product_id}', field='supplies')
            if price < 0:
                raise BusinessRuleError(f'Invalid purchase price for product id={product_id}', field='supplies')

            deficit = requested_product.quantity - accepted
            reason = (line.get('deficit_reason') or '').strip()
            if deficit > 0 and not reason:
                raise BusinessRuleError(
                    f'A deficit reason is required for product id={product_id} (deficit {deficit})', field='supplies'
                )
            has_deficit = has_deficit or deficit > 0

            product = products[product_id]
            Supply.objects.create(
                delivery=delivery, product=product, purchase_price=price, quantity=accepted,
                deficit_quantity=deficit, deficit_reason=reason if deficit > 0 else None,
            )
            product.stock_quantity += accepted
            product.quantity_for_stock += accepted
            product.save(update_fields=['stock_quantity', 'quantity_for_stock', 'updated_at'])
            logger.info(f"Delivery #{delivery.pk}: '{product.name}' accepted {accepted}, deficit {deficit}")

        old_status = request_for_delivery.status
        target = RequestStatus.PARTIALLY_RECEIVED if has_deficit else RequestStatus.RECEIVED
        if not workflow.can_transition(old_status, target, roles.ROLE_EMPLOYEE_WAREHOUSE_MANAGER):
            raise BusinessRuleError(f'Request #{request_for_delivery.pk} cannot move from {old_status} to {target}')
        request_for_delivery.status = target
        request_for_delivery.delivery = delivery
        if target == RequestStatus.RECEIVED:
            request_for_delivery.received_date = timezone.localdate()
        request_for_delivery.save()
        log_status_change(request_for_delivery, old_status, target, user=user)
        workflow.notify_status_changed(request_for_delivery, target)
    create_audit_log(user=user, action='stock_receive', model_name='Delivery', object_id=delivery.pk,
                     changes={str(line.get('product')): line.get('quantity') for line in lines})
    logger.info(f"Delivery #{delivery.pk} created for request #{request_for_delivery.pk} "
                f"from '{request_for_delivery.supplier.name}': {len(lines)} lines, status {target}")
    return delivery
