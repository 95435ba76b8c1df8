"""
Delivery task lifecycle:

    PENDING -> LOADING -> LOADED -> IN_TRANSIT -> DELIVERED

PENDING and LOADING tasks can be cancelled. Completing the loading ships the
order and takes the goods out of stock; completing the delivery closes the
order and frees the vehicle.
"""
import logging
from django.db import transaction
from django.utils import timezone
from depot.catalog.models import Product
from depot.core import roles
from depot.core.exceptions import BusinessRuleError
from depot.core.utils import generate_document_number, log_status_change, create_audit_log
from depot.locations.placement import take_from_zones
from depot.notifications.services import create_notification, notify_by_role
from depot.orders.models import ClientOrderStatus
from .models import Vehicle, DeliveryTask, DeliveryTaskStatus, RoutePoint, TTN, AcceptanceAct

logger = logging.getLogger('depot.delivery')

CANCELLABLE_STATUSES = (DeliveryTaskStatus.PENDING, DeliveryTaskStatus.LOADING)


def _task_queryset():
    return DeliveryTask.objects.select_related(
        'client_order__client', 'driver', 'vehicle', 'ttn'
    ).prefetch_related('route_points')


def _lock_task(task):
    return DeliveryTask.objects.select_for_update().select_related(
        'client_order__client', 'driver', 'vehicle'
    ).get(pk=task.pk)


def _require_status(task, expected):
    if task.status != expected:
        raise BusinessRuleError(f'Task {task.id} is not {expected} (current: {task.status})')


def _set_status(task, new_status, user=None):
    old_status = task.status
    task.status = new_status
    log_status_change(task, old_status, new_status, user=user)


# Queries

def all_tasks():
    return _task_queryset().order_by('-created_at')


def tasks_by_statuses(statuses):
    return _task_queryset().filter(status__in=statuses).order_by('-created_at')


def tasks_by_driver(driver, statuses=None):
    queryset = _task_queryset().filter(driver=driver)
    if statuses:
        queryset = queryset.filter(status__in=statuses)
    return queryset.order_by('-created_at')


def available_drivers():
    return roles.get_employees_by_role(roles.ROLE_EMPLOYEE_COURIER).order_by('last_name', 'first_name')


def available_vehicles():
    return Vehicle.objects.filter(status=Vehicle.Status.AVAILABLE)


# Task creation (warehouse manager)

def create_task(order, driver, vehicle, planned_start=None, planned_end=None, route_points=None, user=None):
    """Assign a READY order to a courier and an available vehicle"""
    with transaction.atomic():
        order = type(order).objects.select_for_update().select_related('client').get(pk=order.pk)
        if order.status != ClientOrderStatus.READY:
            raise BusinessRuleError(f'Order {order.order_number} is not READY (current: {order.status})')
        existing = DeliveryTask.objects.filter(client_order=order).first()
        if existing is not None:
            if existing.status != DeliveryTaskStatus.CANCELLED:
                raise BusinessRuleError(f'Order {order.order_number} already has a delivery task')
            # A cancelled task is replaced by the new assignment
            existing.delete()
        if not driver.is_active or roles.get_employee_role(driver) != roles.ROLE_EMPLOYEE_COURIER:
            raise BusinessRuleError(f'Employee {driver.get_full_name()} is not a courier', field='driver')
        vehicle = Vehicle.objects.select_for_update().get(pk=vehicle.pk)
        if not vehicle.is_available:
            raise BusinessRuleError(f'Vehicle {vehicle.get_full_name()} is not available (status: {vehicle.status})',
                                    field='vehicle')

        task = DeliveryTask.objects.create(
            client_order=order, driver=driver, vehicle=vehicle,
            planned_start_time=planned_start, planned_end_time=planned_end,
        )
        RoutePoint.objects.bulk_create([
            RoutePoint(
                delivery_task=task,
                order_index=index,
                point_type=point.get('point_type') or RoutePoint.TYPE_CHECKPOINT,
                latitude=point.get('latitude'),
                longitude=point.get('longitude'),
                address=point.get('address') or '',
                planned_arrival_time=point.get('planned_arrival_time'),
                comment=point.get('comment') or '',
            )
            for index, point in enumerate(route_points or [], start=1)
        ])

        vehicle.status = Vehicle.Status.IN_USE
        vehicle.save(update_fields=['status', 'updated_at'])

        create_notification(
            driver,
            f"You have been assigned the delivery of order {order.order_number}. "
            f"Client: {order.client.organization_name}"
        )
        notify_by_role(
            roles.ROLE_EMPLOYEE_ACCOUNTER,
            f"Delivery task created for order {order.order_number}: a TTN must be issued."
        )
        notify_by_role(
            roles.ROLE_EMPLOYEE_WAREHOUSE_WORKER,
            f"Delivery task created for order {order.order_number}: waiting for loading."
        )
    create_audit_log(user=user, action='create', model_name='DeliveryTask', object_id=task.id,
                     object_reference=order.order_number,
                     changes={'driver': driver.username, 'vehicle': vehicle.registration_number})
    logger.info(f"Created delivery task for order {order.order_number}: driver {driver.get_full_name()}, "
                f"vehicle {vehicle.get_full_name()}")
    return task


# Loading (warehouse worker)

def start_loading(task, user=None):
    with transaction.atomic():
        task = _lock_task(task)
        _require_status(task, DeliveryTaskStatus.PENDING)
        _set_status(task, DeliveryTaskStatus.LOADING, user)
        task.save(update_fields=['status', 'updated_at'])
    logger.info(f"Task {task.id}: loading started (order {task.client_order.order_number})")
    return task


def complete_loading(task, user=None):
    """Ship the order: stock and reservations go down and goods leave their zones"""
    with transaction.atomic():
        task = _lock_task(task)
        _require_status(task, DeliveryTaskStatus.LOADING)
        order = task.client_order
        if order.status != ClientOrderStatus.READY:
            raise BusinessRuleError(f'Order {order.order_number} is not READY (current: {order.status})')

        items = list(order.ordered_products.all())
        products = Product.objects.select_for_update().in_bulk([item.product_id for item in items])
        for item in items:
            product = products[item.product_id]
            product.stock_quantity = max(0, product.stock_quantity - item.quantity)
            product.reserved_quantity = max(0, product.reserved_quantity - item.quantity)
            product.save(update_fields=['stock_quantity', 'reserved_quantity', 'updated_at'])
            take_from_zones(product, item.quantity)

        _set_status(task, DeliveryTaskStatus.LOADED, user)
        task.save(update_fields=['status', 'updated_at'])
        old_order_status = order.status
        order.status = ClientOrderStatus.SHIPPED
        order.save(update_fields=['status', 'updated_at'])
        log_status_change(order, old_order_status, order.status, user=user)
        create_audit_log(user=user, action='stock_ship', model_name='ClientOrder', object_id=order.id,
                         object_reference=order.order_number,
                         changes={str(item.product_id): item.quantity for item in items})

        create_notification(
            task.driver,
            f"Loading of order {order.order_number} is complete. You can start the delivery."
        )
    logger.info(f"Task {task.id}: loading completed, order {order.order_number} shipped")
    return task


# Documents

def _apply_ttn_fields(ttn, cargo_description, total_weight, total_volume, comment):
    ttn.cargo_description = cargo_description or ''
    ttn.total_weight = total_weight
    ttn.total_volume = total_volume
    ttn.comment = comment or ''


def _new_ttn(task):
    ttn = TTN(
        ttn_number=generate_document_number('TTN', TTN, 'ttn_number'),
        delivery_task=task,
        vehicle=task.vehicle,
        driver=task.driver,
    )
    task.ttn_number = ttn.ttn_number
    return ttn


def _new_acceptance_act(task):
    order = task.client_order
    return AcceptanceAct(
        act_number=generate_document_number('AA', AcceptanceAct, 'act_number'),
        client_order=order,
        client=order.client,
        delivered_by=task.driver,
    )


def create_ttn(task, cargo_description='', total_weight=None, total_volume=None, comment=''):
    """Issue the TTN of a task; a task has at most one"""
    with transaction.atomic():
        task = _lock_task(task)
        if TTN.objects.filter(delivery_task=task).exists():
            raise BusinessRuleError(f'A TTN has already been issued for task {task.id}')
        ttn = _new_ttn(task)
        _apply_ttn_fields(ttn, cargo_description, total_weight, total_volume, comment)
        ttn.save()
        task.save(update_fields=['ttn_number', 'updated_at'])
    logger.info(f"Issued TTN {ttn.ttn_number} for task {task.id} (order {task.client_order.order_number})")
    return ttn


def create_or_update_ttn(task, cargo_description='', total_weight=None, total_volume=None, comment=''):
    with transaction.atomic():
        task = _lock_task(task)
        ttn = TTN.objects.filter(delivery_task=task).first()
        if ttn is None:
            ttn = _new_ttn(task)
            task.save(update_fields=['ttn_number', 'updated_at'])
        _apply_ttn_fields(ttn, cargo_description, total_weight, total_volume, comment)
        ttn.save()
    logger.info(f"TTN for task {task.id} saved (number {ttn.ttn_number})")
    return ttn


def create_or_update_acceptance_act(task, comment=''):
    with transaction.atomic():
        task = _lock_task(task)
        act = AcceptanceAct.objects.filter(client_order=task.client_order).first() or _new_acceptance_act(task)
        act.comment = comment or ''
        act.save()
    logger.info(f"Acceptance act for task {task.id} saved (number {act.act_number})")
    return act


def create_documents_for_order(order):
    """Issue whichever of the TTN and the acceptance act the order is missing"""
    with transaction.atomic():
        task = DeliveryTask.objects.select_for_update().select_related(
            'client_order__client', 'driver', 'vehicle'
        ).filter(client_order=order).first()
        if task is None:
            raise BusinessRuleError(f'Order {order.order_number} has no delivery task')
        ttn = TTN.objects.filter(delivery_task=task).first()
        if ttn is None:
            ttn = _new_ttn(task)
            ttn.save()
            task.save(update_fields=['ttn_number', 'updated_at'])
            logger.info(f"Issued TTN {ttn.ttn_number} for order {order.order_number}")
        act = AcceptanceAct.objects.filter(client_order=order).first()
        if act is None:
            act = _new_acceptance_act(task)
            act.save()
            logger.info(f"Created acceptance act {act.act_number} for order {order.order_number}")
    return ttn, act


def update_ttn(ttn, cargo_description='', total_weight=None, total_volume=None, comment=''):
    _apply_ttn_fields(ttn, cargo_description, total_weight, total_volume, comment)
    ttn.save()
    logger.info(f"TTN {ttn.ttn_number} updated")
    return ttn


def update_acceptance_act(act, comment=''):
    act.comment = comment or ''
    act.save(update_fields=['comment'])
    logger.info(f"Acceptance act {act.act_number} updated")
    return act


# Delivery (courier)

def start_delivery(task, start_mileage, user=None):
    with transaction.atomic():
        task = _lock_task(task)
        _require_status(task, DeliveryTaskStatus.LOADED)
        _set_status(task, DeliveryTaskStatus.IN_TRANSIT, user)
        task.actual_start_time = timezone.now()
        task.start_mileage = start_mileage
        task.save(update_fields=['status', 'actual_start_time', 'start_mileage', 'updated_at'])
    logger.info(f"Task {task.id}: delivery started, start mileage {start_mileage} km")
    return task


def update_location(task, latitude, longitude):
    with transaction.atomic():
        task = _lock_task(task)
        _require_status(task, DeliveryTaskStatus.IN_TRANSIT)
        task.current_latitude = latitude
        task.current_longitude = longitude
        task.save(update_fields=['current_latitude', 'current_longitude', 'updated_at'])
    logger.debug(f"Task {task.id}: location updated to ({latitude}, {longitude})")
    return task


def mark_route_point_reached(task, point_id):
    with transaction.atomic():
        task = _lock_task(task)
        _require_status(task, DeliveryTaskStatus.IN_TRANSIT)
        point = task.route_points.filter(pk=point_id).first()
        if point is None:
            raise BusinessRuleError(f'Route point {point_id} does not belong to task {task.id}')
        point.is_reached = True
        point.actual_arrival_time = timezone.now()
        point.save(update_fields=['is_reached', 'actual_arrival_time'])
    logger.info(f"Task {task.id}: route point '{point.address}' reached")
    return point


def complete_delivery(task, end_mileage, representative=None, comment=None, user=None):
    with transaction.atomic():
        task = _lock_task(task)
        _require_status(task, DeliveryTaskStatus.IN_TRANSIT)
        if end_mileage is not None and task.start_mileage is not None and end_mileage < task.start_mileage:
            raise BusinessRuleError('End mileage cannot be less than start mileage', field='end_mileage')
        now = timezone.now()

        _set_status(task, DeliveryTaskStatus.DELIVERED, user)
        task.actual_end_time = now
        task.end_mileage = end_mileage
        task.save(update_fields=['status', 'actual_end_time', 'end_mileage', 'updated_at'])

        order = task.client_order
        old_order_status = order.status
        order.status = ClientOrderStatus.DELIVERED
        order.actual_delivery_date = now
        order.save(update_fields=['status', 'actual_delivery_date', 'updated_at'])
        log_status_change(order, old_order_status, order.status, user=user)

        vehicle = task.vehicle
        vehicle.status = Vehicle.Status.AVAILABLE
        if end_mileage is not None and end_mileage > vehicle.current_mileage:
            vehicle.current_mileage = end_mileage
        vehicle.save(update_fields=['status', 'current_mileage', 'updated_at'])

        act = AcceptanceAct.objects.filter(client_order=order).first() or _new_acceptance_act(task)
        if comment and comment.strip():
            act.comment = comment
        if representative and representative.strip():
            act.mark_as_signed(representative.strip())
        act.save()

        notify_by_role(
            roles.ROLE_EMPLOYEE_MANAGER,
            f"Order {order.order_number} delivered to client {order.client.organization_name}."
        )
        notify_by_role(roles.ROLE_EMPLOYEE_WAREHOUSE_MANAGER, f"Order {order.order_number} delivered.")
    logger.info(f"Task {task.id}: delivery completed, order {order.order_number} delivered, "
                f"mileage {task.total_mileage} km")
    return task


def cancel_task(task, user=None):
    with transaction.atomic():
        task = _lock_task(task)
        if task.status not in CANCELLABLE_STATUSES:
            raise BusinessRuleError(f'Task {task.id} cannot be cancelled in status {task.status}')
        _set_status(task, DeliveryTaskStatus.CANCELLED, user)
        task.save(update_fields=['status', 'updated_at'])
        vehicle = task.vehicle
        vehicle.status = Vehicle.Status.AVAILABLE
        vehicle.save(update_fields=['status', 'updated_at'])
        create_notification(
            task.driver,
            f"The delivery task for order {task.client_order.order_number} has been cancelled."
        )
    logger.info(f"Task {task.id} cancelled")
    return task
