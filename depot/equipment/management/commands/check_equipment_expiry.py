"""
Notify directors about warehouse equipment reaching the end of its useful life.

Run daily, e.g. from cron:
    python manage.py check_equipment_expiry
"""
import logging
from django.core.management.base import BaseCommand
from django.utils import timezone
from depot.core import roles
from depot.equipment.models import WarehouseEquipment, EquipmentStatus
from depot.notifications.services import notify_by_role

logger = logging.getLogger('depot.equipment')


def expiry_notice(equipment, today):
    """Notice text for one item or None when nothing has to be said yet"""
    days_left = equipment.days_until_expiration(today)
    if days_left is None:
        return None
    place = f"warehouse: {equipment.warehouse.name}"
    if days_left < 0:
        return (f"Useful life expired: '{equipment.name}' ({place}). "
                f"End date: {equipment.expiration_date}. Status: {equipment.get_status_display()}.")
    if days_left <= 7:
        return f"Useful life ends in {days_left} days: '{equipment.name}' ({place}, until {equipment.expiration_date})."
    if days_left <= 30:
        return (f"Useful life ends within a month ({days_left} days): '{equipment.name}' "
                f"({place}, until {equipment.expiration_date}).")
    return None


class Command(BaseCommand):
    help = 'Send expiry notices for warehouse equipment to all directors'

    def handle(self, *args, **options):
        today = timezone.localdate()
        equipment = WarehouseEquipment.objects.exclude(status=EquipmentStatus.WRITTEN_OFF).select_related('warehouse')

        notified = 0
        for item in equipment:
            text = expiry_notice(item, today)
            if text:
                notify_by_role(roles.ROLE_EMPLOYEE_MANAGER, text)
                notified += 1

        logger.info(f"Equipment expiry check finished: {notified} items reported")
        self.stdout.write(self.style.SUCCESS(f'Equipment expiry check finished: {notified} items reported'))
