"""
Client order lifecycle:

    NEW -> CONFIRMED -> RESERVED -> IN_PROGRESS -> READY -> SHIPPED -> DELIVERED

NEW, CONFIRMED and RESERVED orders can be cancelled. SHIPPED and DELIVERED
are set by the delivery task services.
"""
import logging
from decimal import Decimal
from django.db import transaction
from depot.catalog.models import Product
from depot.core import roles
from depot.core.exceptions import BusinessRuleError
from depot.core.utils import generate_document_number, log_status_change, create_audit_log
from depot.notifications.services import notify_by_role
from .models import ClientOrder, ClientOrderStatus, OrderedProduct

logger = logging.getLogger('depot.orders')

CANCELLABLE_STATUSES = (ClientOrderStatus.NEW, ClientOrderStatus.CONFIRMED, ClientOrderStatus.RESERVED)
DEMAND_STATUSES = (ClientOrderStatus.NEW, ClientOrderStatus.CONFIRMED)


def _clean_items(items):
    """Validate order lines and key them by product id, last line wins"""
    if not items:
        raise BusinessRuleError('Order must contain at least one item', field='items')
    cleaned = {}
    for item in items:
        quantity = item.get('quantity')
        price = item.get('price')
        if quantity is None or quantity <= 0:
            raise BusinessRuleError(f'Invalid quantity: {quantity}', field='items')
        if price is None or Decimal(price) <= 0:
            raise BusinessRuleError(f'Invalid price: {price}', field='items')
        cleaned[item['product']] = {'quantity': quantity, 'price': Decimal(price)}
    products = Product.objects.in_bulk(list(cleaned))
    missing = [pk for pk in cleaned if pk not in products]
    if missing:
        raise BusinessRuleError(f'Product with id={missing[0]} not found', field='items')
    return {pk: dict(line, product=products[pk]) for pk, line in cleaned.items()}


def _lock_order(order):
    return ClientOrder.objects.select_for_update().select_related('client').get(pk=order.pk)


def _set_status(order, new_status, user=None):
    old_status = order.status
    order.status = new_status
    order.save(update_fields=['status', 'updated_at'])
    log_status_change(order, old_status, new_status, user=user)


def create_order(client, delivery_date, comment, items, responsible, contract_file=None):
    lines = _clean_items(items)
    with transaction.atomic():
        order = ClientOrder.objects.create(
            order_number=generate_document_number('ORD', ClientOrder, 'order_number'),
            client=client,
            responsible_employee=responsible,
            delivery_date=delivery_date,
            comment=comment or '',
            contract_file=contract_file,
        )
        for line in lines.values():
            OrderedProduct.objects.create(
                client_order=order, product=line['product'], quantity=line['quantity'], price=line['price']
            )
        order.calculate_total_amount()
        order.save(update_fields=['total_amount'])
    create_audit_log(user=responsible, action='create', model_name='ClientOrder', object_id=order.id,
                     object_reference=order.order_number, changes={'total_amount': str(order.total_amount)})
    logger.info(f"Created order {order.order_number}: client '{client.organization_name}', "
                f"{len(lines)} items, total {order.total_amount}")
    return order


def update_order(order, delivery_date, comment, items):
    """Edit a NEW order, merging lines by product (update, add, remove)"""
    lines = _clean_items(items)
    with transaction.atomic():
        order = _lock_order(order)
        if order.status != ClientOrderStatus.NEW:
            raise BusinessRuleError(f'Order {order.order_number} cannot be edited in status {order.status}')
        order.delivery_date = delivery_date
        order.comment = comment or ''

        existing = {op.product_id: op for op in order.ordered_products.all()}
        for product_id, line in lines.items():
            ordered = existing.get(product_id)
            if ordered:
                ordered.quantity = line['quantity']
                ordered.price = line['price']
                ordered.save()
            else:
                OrderedProduct.objects.create(
                    client_order=order, product=line['product'], quantity=line['quantity'], price=line['price']
                )
        order.ordered_products.exclude(product_id__in=list(lines)).delete()

        order.calculate_total_amount()
        order.save()
    logger.info(f"Order {order.order_number} updated: {len(lines)} items, total {order.total_amount}")
    return order


def confirm_order(order, user=None):
    with transaction.atomic():
        order = _lock_order(order)
        if order.status != ClientOrderStatus.NEW:
            raise BusinessRuleError(f'Order {order.order_number} is not NEW (current: {order.status})')
        if not order.ordered_products.exists():
            raise BusinessRuleError(f'Order {order.order_number} has no items')
        _set_status(order, ClientOrderStatus.CONFIRMED, user)
        notify_by_role(
            roles.ROLE_EMPLOYEE_WAREHOUSE_MANAGER,
            f"Order {order.order_number} confirmed. Client: {order.client.organization_name}. "
            f"Waiting for product reservation."
        )
    logger.info(f"Order {order.order_number} confirmed")
    return order


def reserve_products(order, user=None):
    """Reserve every line or nothing"""
    with transaction.atomic():
        order = _lock_order(order)
        if order.status != ClientOrderStatus.CONFIRMED:
            raise BusinessRuleError(f'Order {order.order_number} is not CONFIRMED (current: {order.status})')
        items = list(order.ordered_products.all())
        products = Product.objects.select_for_update().in_bulk([item.product_id for item in items])

        for item in items:
            product = products[item.product_id]
            if product.available_quantity < item.quantity:
                logger.error(f"Not enough '{product.name}': required {item.quantity}, "
                             f"available {product.available_quantity}")
                raise BusinessRuleError(
                    f"Not enough '{product.name}': required {item.quantity}, available {product.available_quantity}"
                )

        for item in items:
            product = products[item.product_id]
            product.reserved_quantity += item.quantity
            product.save(update_fields=['reserved_quantity', 'updated_at'])

        _set_status(order, ClientOrderStatus.RESERVED, user)
        create_audit_log(user=user, action='stock_reserve', model_name='ClientOrder', object_id=order.id,
                         object_reference=order.order_number,
                         changes={str(item.product_id): item.quantity for item in items})
        notify_by_role(
            roles.ROLE_EMPLOYEE_MANAGER,
            f"Products for order {order.order_number} reserved. Client: {order.client.organization_name}"
        )
    logger.info(f"Order {order.order_number}: products reserved ({len(items)} items)")
    return order


def start_assembly(order, user=None):
    with transaction.atomic():
        order = _lock_order(order)
        if order.status != ClientOrderStatus.RESERVED:
            raise BusinessRuleError(f'Order {order.order_number} is not RESERVED (current: {order.status})')
        _set_status(order, ClientOrderStatus.IN_PROGRESS, user)
    logger.info(f"Order {order.order_number}: assembly started")
    return order


def complete_assembly(order, user=None):
    with transaction.atomic():
        order = _lock_order(order)
        if order.status != ClientOrderStatus.IN_PROGRESS:
            raise BusinessRuleError(f'Order {order.order_number} is not IN_PROGRESS (current: {order.status})')
        _set_status(order, ClientOrderStatus.READY, user)
        notify_by_role(
            roles.ROLE_EMPLOYEE_MANAGER,
            f"Order {order.order_number} is ready for shipment. Client: {order.client.organization_name}"
        )
    logger.info(f"Order {order.order_number}: assembly completed, ready for shipment")
    return order


def cancel_order(order, user=None):
    with transaction.atomic():
        order = _lock_order(order)
        previous_status = order.status
        if previous_status not in CANCELLABLE_STATUSES:
            raise BusinessRuleError(f'Order {order.order_number} cannot be cancelled in status {previous_status}')

        if previous_status == ClientOrderStatus.RESERVED:
            items = list(order.ordered_products.all())
            products = Product.objects.select_for_update().in_bulk([item.product_id for item in items])
            for item in items:
                product = products[item.product_id]
                product.reserved_quantity = max(0, product.reserved_quantity - item.quantity)
                product.save(update_fields=['reserved_quantity', 'updated_at'])
            create_audit_log(user=user, action='stock_release', model_name='ClientOrder', object_id=order.id,
                             object_reference=order.order_number,
                             changes={str(item.product_id): item.quantity for item in items})
            logger.info(f"Order {order.order_number}: reservation released")

        _set_status(order, ClientOrderStatus.CANCELLED, user)
        notify_by_role(
            roles.ROLE_EMPLOYEE_WAREHOUSE_MANAGER,
            f"Order {order.order_number} cancelled. Client: {order.client.organization_name}"
        )
        notify_by_role(roles.ROLE_EMPLOYEE_MANAGER, f"Order {order.order_number} cancelled.")
    logger.info(f"Order {order.order_number} cancelled (previous status: {previous_status})")
    return order


def product_deficit():
    """Products whose demand from NEW and CONFIRMED orders exceeds available stock"""
    demand = {}
    products = {}
    items = OrderedProduct.objects.filter(client_order__status__in=DEMAND_STATUSES).select_related('product')
    for item in items:
        demand[item.product_id] = demand.get(item.product_id, 0) + item.quantity
        products.setdefault(item.product_id, item.product)

    result = []
    for product_id, ordered_total in demand.items():
        product = products[product_id]
        available = product.available_quantity
        if ordered_total > available:
            result.append({
                'product_id': product_id,
                'product_name': product.name,
                'article': product.article,
                'ordered_total': ordered_total,
                'stock_quantity': product.stock_quantity,
                'available_quantity': available,
                'deficit': ordered_total - available,
            })
    result.sort(key=lambda row: row['product_name'])
    return result
