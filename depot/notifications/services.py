import logging
from depot.core.roles import get_employees_by_role
from .models import Notification

logger = logging.getLogger('depot.notifications')


def create_notification(recipient, text):
    notification = Notification.objects.create(recipient=recipient, text=text)
    logger.info(f"Notification created for {recipient.username}: {text}")
    return notification


def notify_by_role(role_name, text):
    """Send the same notification to every active employee holding the role"""
    employees = list(get_employees_by_role(role_name))
    Notification.objects.bulk_create([Notification(recipient=e, text=text) for e in employees])
    logger.info(f"Sent notification to {len(employees)} employees with role {role_name}")
    return len(employees)


def notify_by_roles(role_names, text):
    return sum(notify_by_role(role_name, text) for role_name in role_names)


def notifications_for(employee, status=None, search=None):
    queryset = Notification.objects.filter(recipient=employee, visible=True)
    if status:
        queryset = queryset.filter(status=status)
    if search and search.strip():
        queryset = queryset.filter(text__icontains=search.strip())
    return queryset.order_by('-created_at', '-id')


def unread_count(employee):
    return Notification.objects.filter(recipient=employee, visible=True, status=Notification.STATUS_NEW).count()


def mark_all_as_read(employee):
    updated = Notification.objects.filter(
        recipient=employee, visible=True, status=Notification.STATUS_NEW
    ).update(status=Notification.STATUS_READ)
    logger.info(f"Marked {updated} notifications as read for {employee.username}")
    return updated
