import datetime
from django.db import models
from django.utils import timezone
from depot.locations.models import Warehouse


class EquipmentType(models.Model):
    name = models.CharField(max_length=255, unique=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'equipment_types'
        ordering = ['name']


class EquipmentStatus(models.TextChoices):
    IN_USE = 'IN_USE', 'In use'
    UNDER_REPAIR = 'UNDER_REPAIR', 'Under repair'
    WRITTEN_OFF = 'WRITTEN_OFF', 'Written off'


class WarehouseEquipment(models.Model):
    """Racks, loaders and other equipment installed in a warehouse"""
    name = models.CharField(max_length=255)
    serial_number = models.CharField(max_length=100, blank=True)
    production_date = models.DateField(null=True, blank=True)
    useful_life_years = models.PositiveIntegerField(null=True, blank=True)
    equipment_type = models.ForeignKey(EquipmentType, on_delete=models.PROTECT, related_name='equipment')
    status = models.CharField(max_length=20, choices=EquipmentStatus.choices, default=EquipmentStatus.IN_USE)
    warehouse = models.ForeignKey(Warehouse, on_delete=models.CASCADE, related_name='equipment')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.name} ({self.warehouse.name})"

    @property
    def expiration_date(self):
        if self.production_date is None or self.useful_life_years is None:
            return None
        year = self.production_date.year + self.useful_life_years
        try:
            return self.production_date.replace(year=year)
        except ValueError:
            # 29 February in a non-leap year
            return datetime.date(year, 2, 28)

    def days_until_expiration(self, today=None):
        expiration = self.expiration_date
        if expiration is None:
            return None
        return (expiration - (today or timezone.localdate())).days

    @property
    def is_expired(self):
        days = self.days_until_expiration()
        return days is not None and days < 0

    class Meta:
        db_table = 'warehouse_equipment'
        ordering = ['name']
        unique_together = [['warehouse', 'name']]
