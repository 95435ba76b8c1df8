import logging
from django.db import transaction
from depot.catalog.models import Product
from depot.core import roles
from depot.core.exceptions import BusinessRuleError
from depot.core.utils import generate_document_number, log_status_change, create_audit_log
from depot.locations.placement import quantity_in_warehouse, take_from_zones
from depot.notifications.services import notify_by_role
from .models import WriteOffAct, WriteOffActStatus

logger = logging.getLogger('depot.inventory')


def acts_by_status(statuses=None):
    queryset = WriteOffAct.objects.select_related('product', 'warehouse', 'responsible_employee')
    if statuses:
        queryset = queryset.filter(status__in=statuses)
    return queryset.order_by('-act_date')


def _lock_act(act):
    return WriteOffAct.objects.select_for_update().select_related('product', 'warehouse').get(pk=act.pk)


def create_act(product, quantity, reason, comment, responsible, warehouse):
    """Draft a write-off for units placed in ``warehouse``; the director signs it later"""
    if quantity is None or quantity <= 0:
        raise BusinessRuleError(f'Invalid write-off quantity: {quantity}', field='quantity')
    placed = quantity_in_warehouse(product, warehouse)
    if placed <= 0:
        raise BusinessRuleError(f"'{product.name}' is not placed in warehouse '{warehouse.name}'", field='product')
    if quantity > placed:
        raise BusinessRuleError(
            f"Write-off quantity ({quantity}) exceeds the quantity in warehouse '{warehouse.name}' ({placed})",
            field='quantity'
        )

    with transaction.atomic():
        act = WriteOffAct.objects.create(
            act_number=generate_document_number('WO', WriteOffAct, 'act_number'),
            product=product,
            quantity=quantity,
            reason=reason,
            comment=comment or '',
            responsible_employee=responsible,
            warehouse=warehouse,
        )
        notify_by_role(
            roles.ROLE_EMPLOYEE_MANAGER,
            f"Write-off act {act.act_number} waits for your signature. Product: {product.name}, "
            f"quantity: {quantity}, warehouse: {warehouse.name}"
        )
    create_audit_log(user=responsible, action='create', model_name='WriteOffAct', object_id=act.pk,
                     object_reference=act.act_number, changes={'quantity': quantity, 'reason': reason})
    logger.info(f"Created write-off act {act.act_number}: '{product.name}' x {quantity}, reason {reason}, "
                f"warehouse '{warehouse.name}'")
    return act


def approve_act(act, user=None):
    with transaction.atomic():
        act = _lock_act(act)
        if act.status != WriteOffActStatus.PENDING_DIRECTOR:
            raise BusinessRuleError(f'Act {act.act_number} is not waiting for signature (current: {act.status})')
        product = Product.objects.select_for_update().get(pk=act.product_id)
        if act.quantity > product.stock_quantity:
            logger.error(f"Not enough '{product.name}' to write off: required {act.quantity}, "
                         f"in stock {product.stock_quantity}")
            raise BusinessRuleError(
                f"Not enough '{product.name}' to write off: required {act.quantity}, in stock {product.stock_quantity}"
            )

        product.stock_quantity -= act.quantity
        if act.warehouse_id:
            take_from_zones(product, act.quantity, warehouse=act.warehouse)
        else:
            # acts without a warehouse only reduce the unplaced quantity
            product.quantity_for_stock -= min(product.quantity_for_stock, act.quantity)
        product.save(update_fields=['stock_quantity', 'quantity_for_stock', 'updated_at'])

        act.status = WriteOffActStatus.APPROVED
        act.save(update_fields=['status', 'updated_at'])
        log_status_change(act, WriteOffActStatus.PENDING_DIRECTOR, act.status, user=user)

        notify_by_role(
            roles.ROLE_EMPLOYEE_WAREHOUSE_MANAGER,
            f"Write-off act {act.act_number} approved. '{product.name}' written off: {act.quantity}"
        )
        notify_by_role(
            roles.ROLE_EMPLOYEE_ACCOUNTER,
            f"Write-off act {act.act_number} approved for accounting. Product: {product.name}, quantity: {act.quantity}"
        )
    logger.info(f"Write-off act {act.act_number} approved: '{product.name}' x {act.quantity}")
    return act


def reject_act(act, director_comment, user=None):
    with transaction.atomic():
        act = _lock_act(act)
        if act.status != WriteOffActStatus.PENDING_DIRECTOR:
            raise BusinessRuleError(f'Act {act.act_number} is not waiting for signature (current: {act.status})')
        act.status = WriteOffActStatus.REJECTED
        act.director_comment = director_comment or ''
        act.save(update_fields=['status', 'director_comment', 'updated_at'])
        log_status_change(act, WriteOffActStatus.PENDING_DIRECTOR, act.status, user=user)
        notify_by_role(
            roles.ROLE_EMPLOYEE_WAREHOUSE_MANAGER,
            f"Write-off act {act.act_number} rejected by the director. "
            f"Reason: {director_comment or 'not specified'}"
        )
    logger.info(f"Write-off act {act.act_number} rejected: {director_comment}")
    return act
