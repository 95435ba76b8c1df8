"""
Status transitions of a request for delivery.

Each non-terminal status lists the statuses it may move to and the only role
allowed to move it. RECEIVED and CANCELLED are terminal.
"""
import logging
from depot.core import roles
from depot.notifications.services import notify_by_roles
from .models import RequestStatus

logger = logging.getLogger('depot.purchasing')

TRANSITIONS = {
    RequestStatus.DRAFT: (
        {RequestStatus.PENDING_DIRECTOR, RequestStatus.CANCELLED},
        roles.ROLE_EMPLOYEE_WAREHOUSE_MANAGER,
    ),
    RequestStatus.PENDING_DIRECTOR: (
        {RequestStatus.PENDING_ACCOUNTANT, RequestStatus.REJECTED_BY_DIRECTOR},
        roles.ROLE_EMPLOYEE_MANAGER,
    ),
    RequestStatus.REJECTED_BY_DIRECTOR: (
        {RequestStatus.PENDING_DIRECTOR, RequestStatus.CANCELLED},
        roles.ROLE_EMPLOYEE_WAREHOUSE_MANAGER,
    ),
    RequestStatus.PENDING_ACCOUNTANT: (
        {RequestStatus.APPROVED, RequestStatus.REJECTED_BY_ACCOUNTANT},
        roles.ROLE_EMPLOYEE_ACCOUNTER,
    ),
    RequestStatus.REJECTED_BY_ACCOUNTANT: (
        {RequestStatus.PENDING_DIRECTOR, RequestStatus.CANCELLED},
        roles.ROLE_EMPLOYEE_WAREHOUSE_MANAGER,
    ),
    RequestStatus.APPROVED: (
        {RequestStatus.PARTIALLY_RECEIVED, RequestStatus.RECEIVED},
        roles.ROLE_EMPLOYEE_WAREHOUSE_MANAGER,
    ),
    RequestStatus.PARTIALLY_RECEIVED: (
        {RequestStatus.RECEIVED},
        roles.ROLE_EMPLOYEE_WAREHOUSE_MANAGER,
    ),
}

STATUS_RECIPIENTS = {
    RequestStatus.PENDING_DIRECTOR: [roles.ROLE_EMPLOYEE_MANAGER],
    RequestStatus.REJECTED_BY_DIRECTOR: [roles.ROLE_EMPLOYEE_WAREHOUSE_MANAGER],
    RequestStatus.PENDING_ACCOUNTANT: [roles.ROLE_EMPLOYEE_ACCOUNTER],
    RequestStatus.REJECTED_BY_ACCOUNTANT: [roles.ROLE_EMPLOYEE_MANAGER, roles.ROLE_EMPLOYEE_WAREHOUSE_MANAGER],
    RequestStatus.APPROVED: [roles.ROLE_EMPLOYEE_MANAGER, roles.ROLE_EMPLOYEE_WAREHOUSE_MANAGER],
    RequestStatus.PARTIALLY_RECEIVED: [roles.ROLE_EMPLOYEE_MANAGER, roles.ROLE_EMPLOYEE_ACCOUNTER],
    RequestStatus.RECEIVED: [roles.ROLE_EMPLOYEE_MANAGER, roles.ROLE_EMPLOYEE_ACCOUNTER],
}

STATUS_MESSAGES = {
    RequestStatus.PENDING_DIRECTOR: 'is waiting for director approval',
    RequestStatus.REJECTED_BY_DIRECTOR: 'was rejected by the director',
    RequestStatus.PENDING_ACCOUNTANT: 'is waiting for accountant approval',
    RequestStatus.REJECTED_BY_ACCOUNTANT: 'was rejected by the accountant',
    RequestStatus.APPROVED: 'was approved and waits for the delivery',
    RequestStatus.PARTIALLY_RECEIVED: 'was partially received',
    RequestStatus.RECEIVED: 'was received in full',
}


def can_transition(current, target, role):
    rule = TRANSITIONS.get(current)
    if rule is None:
        logger.warning(f"No transitions allowed from status {current}")
        return False
    targets, allowed_role = rule
    if target not in targets:
        logger.warning(f"Transition {current} -> {target} is not allowed")
        return False
    if role != allowed_role:
        logger.warning(f"Role {role} cannot move a request from {current} to {target} (requires {allowed_role})")
        return False
    return True


def notify_status_changed(request_for_delivery, new_status):
    recipients = STATUS_RECIPIENTS.get(new_status)
    if not recipients:
        return 0
    text = (f"Request #{request_for_delivery.pk} to supplier '{request_for_delivery.supplier.name}' "
            f"{STATUS_MESSAGES[new_status]}.")
    return notify_by_roles(recipients, text)
